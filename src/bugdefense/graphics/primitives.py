"""Basic drawing primitives for the BUG DEFENSE field buffer."""

from typing import Tuple
import numpy as np
from numpy.typing import NDArray

# Type aliases
Color = Tuple[int, int, int]
Buffer = NDArray[np.uint8]


def new_buffer(width: int, height: int, color: Color = (0, 0, 0)) -> Buffer:
    """Create an RGB buffer of the given size."""
    buffer = np.zeros((height, width, 3), dtype=np.uint8)
    buffer[:, :] = color
    return buffer


def fill(buffer: Buffer, color: Color) -> None:
    """Paint every pixel."""
    buffer[:, :] = color


def draw_rect(
    buffer: Buffer,
    x: int,
    y: int,
    width: int,
    height: int,
    color: Color,
    filled: bool = True,
) -> None:
    """Axis-aligned rectangle with its top-left corner at (x, y).

    Parts outside the buffer are cut off. With ``filled=False`` only the
    one-pixel border is drawn (gate outlines).
    """
    h, w = buffer.shape[:2]

    x1 = max(0, min(x, w))
    y1 = max(0, min(y, h))
    x2 = max(0, min(x + width, w))
    y2 = max(0, min(y + height, h))
    if x2 <= x1 or y2 <= y1:
        return

    if filled:
        buffer[y1:y2, x1:x2] = color
    else:
        buffer[y1, x1:x2] = color
        buffer[y2 - 1, x1:x2] = color
        buffer[y1:y2, x1] = color
        buffer[y1:y2, x2 - 1] = color


def draw_hline(buffer: Buffer, x1: int, x2: int, y: int, color: Color) -> None:
    """Horizontal line from x1 to x2 inclusive."""
    h, w = buffer.shape[:2]
    if not 0 <= y < h:
        return
    lo, hi = sorted((x1, x2))
    buffer[y, max(0, lo):min(w, hi + 1)] = color


def draw_vline(buffer: Buffer, x: int, y1: int, y2: int, color: Color) -> None:
    """Vertical line from y1 to y2 inclusive."""
    h, w = buffer.shape[:2]
    if not 0 <= x < w:
        return
    lo, hi = sorted((y1, y2))
    buffer[max(0, lo):min(h, hi + 1), x] = color


def dim(buffer: Buffer, factor: float) -> None:
    """Darken the whole buffer in place (overlays, paused look)."""
    buffer[:] = (buffer.astype(np.float32) * factor).clip(0, 255).astype(np.uint8)
