"""
Filmstock -- Shared Pixel Helpers
Luminance, store-with-clamp, and interior-row bookkeeping used by every stage.
"""

import numpy as np

# BT.601 luma weights. Every stage that pivots on brightness uses these.
LUMA_R = 0.299
LUMA_G = 0.587
LUMA_B = 0.114


def rgb_view(frame: np.ndarray) -> np.ndarray:
    """Return the (H, W, 3) color view of an RGBA frame (alpha excluded)."""
    if frame.ndim != 3 or frame.shape[2] != 4:
        raise ValueError(f"Expected (H, W, 4) RGBA frame, got shape {frame.shape}")
    return frame[:, :, :3]


def load_rgb(frame: np.ndarray) -> np.ndarray:
    """Copy the color channels of an RGBA frame into float64 for arithmetic."""
    return rgb_view(frame).astype(np.float64)


def luminance(rgb: np.ndarray) -> np.ndarray:
    """Per-pixel luma Y = 0.299R + 0.587G + 0.114B.

    Args:
        rgb: (..., 3) array of channel values.

    Returns:
        (...) float64 array of luma values.
    """
    return LUMA_R * rgb[..., 0] + LUMA_G * rgb[..., 1] + LUMA_B * rgb[..., 2]


def store(dst: np.ndarray, values: np.ndarray) -> None:
    """Write float values into a uint8 view, rounding half to even and clamping to 0-255."""
    np.copyto(dst, np.clip(np.rint(values), 0, 255).astype(np.uint8))


def has_interior(frame: np.ndarray) -> bool:
    """True when the frame has at least one pixel off the 1-pixel border."""
    h, w = frame.shape[:2]
    return h >= 3 and w >= 3


def interior_bounds(height: int, start: int = 1, stop: int | None = None) -> tuple[int, int]:
    """Clip a row range to the interior rows [1, height - 1)."""
    stop = height - 1 if stop is None else stop
    return max(1, start), min(height - 1, stop)
