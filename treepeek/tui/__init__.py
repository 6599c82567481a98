"""Terminal shell: raw-mode control, input decoding, frames and the app loop."""

from .frame import ScreenState, build_frame, render_static_frame

__all__ = ["ScreenState", "build_frame", "render_static_frame"]
