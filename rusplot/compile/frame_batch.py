from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import torch


@dataclass(frozen=True)
class FrameUpdate:
    """A completed redraw, handed to the host panel as an RGBA255 tensor."""

    revision: int
    tensor_h_w_4: torch.Tensor
    empty: bool = False

    @property
    def width(self) -> int:
        return int(self.tensor_h_w_4.shape[1])

    @property
    def height(self) -> int:
        return int(self.tensor_h_w_4.shape[0])


def compile_frame_update(frame_rgba: np.ndarray, revision: int, *, empty: bool = False) -> FrameUpdate:
    if frame_rgba.dtype != np.uint8:
        raise ValueError("frame_rgba must be uint8")
    if frame_rgba.ndim != 3 or frame_rgba.shape[2] != 4:
        raise ValueError("frame_rgba must have shape (H, W, 4)")
    # Copy so later redraws never mutate a frame a subscriber still holds.
    tensor = torch.from_numpy(np.array(frame_rgba, copy=True, order="C"))
    return FrameUpdate(revision=revision, tensor_h_w_4=tensor, empty=empty)
