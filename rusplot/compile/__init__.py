from .frame_batch import FrameUpdate, compile_frame_update

__all__ = ["FrameUpdate", "compile_frame_update"]
