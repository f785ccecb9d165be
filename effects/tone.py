"""
Filmstock -- Tone Curve
Luminance-dependent highlight/shadow gain.
"""

import numpy as np

from effects.common import load_rgb, luminance, rgb_view, store

TONE_STEP = 0.15   # Gain per highlight/shadow unit
PIVOT = 127        # Y above this is highlight, at or below is shadow


def tone_curve(frame: np.ndarray, highlights: int = 0, shadows: int = 0) -> np.ndarray:
    """Scale each pixel by a gain interpolated from its luma.

    Highlights (Y > 127) ramp from no change at the pivot to the full
    highlight factor at Y = 255. Shadows (Y <= 127) ramp from the full
    shadow factor at black to no change at the pivot, so mid-gray has no seam.

    Args:
        frame: (H, W, 4) uint8 RGBA array.
        highlights: -2 to +4. Each unit is 15% at full white.
        shadows: -2 to +4. Each unit is 15% at full black.

    Returns:
        The same frame.
    """
    if highlights == 0 and shadows == 0:
        return frame

    highlight_factor = 1.0 + highlights * TONE_STEP
    shadow_factor = 1.0 + shadows * TONE_STEP

    rgb = load_rgb(frame)
    luma = luminance(rgb)
    bright = luma > PIVOT

    gain = np.where(
        bright,
        1.0 + (luma - PIVOT) / 128.0 * (highlight_factor - 1.0),
        shadow_factor + luma / PIVOT * (1.0 - shadow_factor),
    )
    store(rgb_view(frame), rgb * gain[..., np.newaxis])
    return frame
