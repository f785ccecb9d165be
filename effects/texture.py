"""
Filmstock -- Texture Effects
Clarity (local contrast), film grain, and unsharp-mask sharpness.

Clarity and sharpness are 3x3 stencils: they read neighbors from a snapshot
taken before the stage writes anything, and never touch the 1-pixel border.
Both accept an optional snapshot and row range so the pipeline can split the
interior into bands that share one snapshot.
"""

import cv2
import numpy as np

from effects.common import has_interior, interior_bounds, rgb_view, store

CLARITY_STEP = 0.15
SHARPEN_STEP = 0.3    # Per unit when sharpening
SOFTEN_STEP = 0.2     # Per unit when softening
GRAIN_AMPLITUDE = {"weak": 8, "strong": 15}

# Mean of the 4 axis neighbors (center excluded, no diagonals).
CROSS_KERNEL = np.array([
    [0.0, 0.25, 0.0],
    [0.25, 0.0, 0.25],
    [0.0, 0.25, 0.0],
], dtype=np.float64)


def _stencil_slab(frame, snapshot, rows):
    """Return (y0, y1, slab) where slab holds snapshot rows y0-1..y1 in float64.

    Returns None when the requested rows hold no interior pixels.
    """
    if not has_interior(frame):
        return None
    h = frame.shape[0]
    y0, y1 = interior_bounds(h, *rows) if rows is not None else interior_bounds(h)
    if y0 >= y1:
        return None
    source = frame if snapshot is None else snapshot
    slab = source[y0 - 1:y1 + 1, :, :3].astype(np.float64)
    return y0, y1, slab


def snapshot_of(frame: np.ndarray) -> np.ndarray:
    """Read-only copy of a frame for neighbor lookups."""
    snap = frame.copy()
    snap.setflags(write=False)
    return snap


def clarity(frame: np.ndarray, amount: int = 0,
            snapshot: np.ndarray | None = None,
            rows: tuple[int, int] | None = None) -> np.ndarray:
    """Local contrast via a 4-neighbor high-pass.

    Args:
        frame: (H, W, 4) uint8 RGBA array, modified in place.
        amount: -5 (soften) to +5 (punchy). Each unit is 0.15x the high-pass.
        snapshot: Pre-stage copy of frame. Taken here when omitted.
        rows: Optional (start, stop) row range to write. Border rows are
            always skipped.

    Returns:
        The same frame.
    """
    if amount == 0:
        return frame
    if snapshot is None and has_interior(frame):
        snapshot = snapshot_of(frame)
    slab = _stencil_slab(frame, snapshot, rows)
    if slab is None:
        return frame
    y0, y1, src = slab
    factor = amount * CLARITY_STEP

    average = cv2.filter2D(src, -1, CROSS_KERNEL, borderType=cv2.BORDER_REPLICATE)
    center = src[1:-1, 1:-1]
    diff = center - average[1:-1, 1:-1]
    store(frame[y0:y1, 1:-1, :3], center + diff * factor)
    return frame


def grain(frame: np.ndarray, strength: str = "off",
          rng: np.random.Generator | int | None = None) -> np.ndarray:
    """Monochromatic film grain.

    One uniform sample per pixel in [-amplitude/2, amplitude/2) is added to
    R, G and B alike, so grain varies brightness without shifting hue.

    Args:
        frame: (H, W, 4) uint8 RGBA array.
        strength: 'off', 'weak' (8) or 'strong' (15).
        rng: numpy Generator or seed. None draws fresh entropy.

    Returns:
        The same frame.
    """
    strength = getattr(strength, "value", strength)
    if strength == "off":
        return frame
    if strength not in GRAIN_AMPLITUDE:
        raise ValueError(f"Unknown grain strength: {strength}. Use 'off', 'weak' or 'strong'.")

    h, w = frame.shape[:2]
    if h == 0 or w == 0:
        return frame
    rng = np.random.default_rng(rng)
    noise = (rng.random((h, w)) - 0.5) * GRAIN_AMPLITUDE[strength]

    rgb = rgb_view(frame)
    store(rgb, rgb + noise[:, :, np.newaxis])
    return frame


def sharpness(frame: np.ndarray, amount: int = 0,
              snapshot: np.ndarray | None = None,
              rows: tuple[int, int] | None = None) -> np.ndarray:
    """Unsharp mask against a 3x3 box blur.

    Args:
        frame: (H, W, 4) uint8 RGBA array, modified in place.
        amount: -4 (soft) to +4 (crisp). Positive units weigh 0.3, negative 0.2.
        snapshot: Pre-stage copy of frame. Taken here when omitted.
        rows: Optional (start, stop) row range to write.

    Returns:
        The same frame.
    """
    if amount == 0:
        return frame
    if snapshot is None and has_interior(frame):
        snapshot = snapshot_of(frame)
    slab = _stencil_slab(frame, snapshot, rows)
    if slab is None:
        return frame
    y0, y1, src = slab
    k = amount * SHARPEN_STEP if amount > 0 else amount * SOFTEN_STEP

    # Unnormalized 3x3 sum, then a single division by 9.
    blurred = cv2.boxFilter(src, -1, (3, 3), normalize=False,
                            borderType=cv2.BORDER_REPLICATE) / 9.0
    center = src[1:-1, 1:-1]
    store(frame[y0:y1, 1:-1, :3], center + (center - blurred[1:-1, 1:-1]) * k)
    return frame
