from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Protocol, Sequence

import numpy as np

from rusplot.errors import ExportError
from rusplot.raster.surface import encode_png


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileFilter:
    name: str
    extensions: tuple[str, ...]


PNG_FILTER = FileFilter(name="PNG image", extensions=("png",))


class SavePathPicker(Protocol):
    async def choose(self, default_file_name: str, extension_filters: Sequence[FileFilter]) -> str | Path | None:
        ...


class FileWriter(Protocol):
    async def write(self, path: Path, data: bytes) -> None:
        """Persist `data`; raise on failure."""
        ...


class FrameSource(Protocol):
    @property
    def status(self) -> str:
        ...

    def snapshot(self) -> np.ndarray:
        ...


@dataclass(frozen=True)
class ExportOutcome:
    path: Path
    byte_count: int
    width: int
    height: int


class FixedPathPicker:
    """Picker that always answers with the same path (None means cancel)."""

    def __init__(self, path: str | Path | None) -> None:
        self.path = path
        self.requests: list[tuple[str, tuple[FileFilter, ...]]] = []

    async def choose(self, default_file_name: str, extension_filters: Sequence[FileFilter]) -> str | Path | None:
        self.requests.append((default_file_name, tuple(extension_filters)))
        return self.path


class FileSystemWriter:
    async def write(self, path: Path, data: bytes) -> None:
        await asyncio.to_thread(_write_bytes, path, data)


def _write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


class ExportService:
    """Writes the current plot frame to a PNG file chosen through a picker.

    Cancelling the picker is a silent no-op. Encode and write failures raise
    ExportError; the engine's state is never touched either way.
    """

    def __init__(
        self,
        source: FrameSource,
        picker: SavePathPicker,
        writer: FileWriter,
        *,
        default_filename: str = "plot.png",
        filters: Sequence[FileFilter] = (PNG_FILTER,),
    ) -> None:
        self._source = source
        self._picker = picker
        self._writer = writer
        self.default_filename = default_filename
        self.filters = tuple(filters)

    async def export(self) -> ExportOutcome | None:
        if self._source.status == "empty":
            raise ExportError("nothing to export: the plot panel is empty")
        try:
            chosen = await self._picker.choose(self.default_filename, self.filters)
        except Exception as exc:
            raise ExportError("save path picker failed", exc) from exc
        if chosen is None or str(chosen) == "":
            LOGGER.debug("plot export cancelled")
            return None
        path = Path(chosen)
        if not path.suffix:
            path = path.with_suffix(".png")

        # Snapshot and encode without yielding so a concurrent run cannot
        # swap the plot set underneath a half-encoded frame.
        try:
            frame = self._source.snapshot()
            data = encode_png(frame)
        except Exception as exc:
            raise ExportError("failed to encode plot image", exc) from exc

        try:
            await self._writer.write(path, data)
        except Exception as exc:
            LOGGER.warning("plot export to %s failed: %s", path, exc)
            raise ExportError(f"failed to write {path}", exc) from exc
        LOGGER.info("plot exported to %s (%d bytes)", path, len(data))
        return ExportOutcome(path=path, byte_count=len(data), width=int(frame.shape[1]), height=int(frame.shape[0]))
