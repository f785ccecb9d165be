"""
Filmstock -- Color Effects
White balance shift, global saturation, and Color Chrome (mid-tone boost + blue boost).
"""

import numpy as np

from effects.common import load_rgb, luminance, rgb_view, store

WB_STEP = 0.02        # Gain per white balance unit
COLOR_STEP = 0.1      # Saturation per color unit

CHROME_STRENGTHS = {"off": 1.0, "weak": 1.1, "strong": 1.2}
CHROME_BLUE_STRENGTHS = {"off": 1.0, "weak": 1.15, "strong": 1.3}

# Color Chrome only touches mid-tones strictly inside this luma band.
CHROME_LUMA_LOW = 40
CHROME_LUMA_HIGH = 215
MID_GRAY = 127.5


def _level(value) -> str:
    value = getattr(value, "value", value)
    if value not in CHROME_STRENGTHS:
        raise ValueError(f"Unknown strength: {value}. Use 'off', 'weak' or 'strong'.")
    return value


def white_balance(frame: np.ndarray, red: int = 0, blue: int = 0) -> np.ndarray:
    """Shift white balance with multiplicative red/blue gains.

    Args:
        frame: (H, W, 4) uint8 RGBA array.
        red: Red shift (-9 to +9). Each unit is a 2% gain.
        blue: Blue shift (-9 to +9). Each unit is a 2% gain.

    Returns:
        The same frame. Green and alpha are untouched.
    """
    if red == 0 and blue == 0:
        return frame
    if red != 0:
        channel = frame[:, :, 0]
        store(channel, channel * (1.0 + red * WB_STEP))
    if blue != 0:
        channel = frame[:, :, 2]
        store(channel, channel * (1.0 + blue * WB_STEP))
    return frame


def color_adjustment(frame: np.ndarray, color: int = 0) -> np.ndarray:
    """Global saturation around each pixel's luma.

    Args:
        frame: (H, W, 4) uint8 RGBA array.
        color: -4 (muted) to +4 (vivid). 0 = no change.

    Returns:
        The same frame.
    """
    if color == 0:
        return frame
    factor = 1.0 + color * COLOR_STEP
    rgb = load_rgb(frame)
    gray = luminance(rgb)[..., np.newaxis]
    store(rgb_view(frame), gray + (rgb - gray) * factor)
    return frame


def color_chrome(frame: np.ndarray, chrome: str = "off", blue: str = "off") -> np.ndarray:
    """Color Chrome effect: deeper mid-tone color plus a selective blue boost.

    Only pixels with 40 < Y < 215 are affected. The saturation boost is
    weighted by a triangle peaking at mid-gray. The blue boost applies to
    pixels whose blue channel dominates red and green, scaling the blue value
    the pixel had when the stage started.

    Args:
        frame: (H, W, 4) uint8 RGBA array.
        chrome: 'off', 'weak' or 'strong' mid-tone saturation boost.
        blue: 'off', 'weak' or 'strong' blue boost.

    Returns:
        The same frame.
    """
    chrome = _level(chrome)
    blue = _level(blue)
    if chrome == "off" and blue == "off":
        return frame

    rgb = load_rgb(frame)
    luma = luminance(rgb)
    mid = (luma > CHROME_LUMA_LOW) & (luma < CHROME_LUMA_HIGH)
    if not mid.any():
        return frame

    out = rgb.copy()
    if chrome != "off":
        t = 1.0 - np.abs(luma - MID_GRAY) / MID_GRAY
        factor = 1.0 + t * (CHROME_STRENGTHS[chrome] - 1.0) * 0.5
        gray = luma[..., np.newaxis]
        boosted = gray + (rgb - gray) * factor[..., np.newaxis]
        out[mid] = boosted[mid]

    if blue != "off":
        r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
        dominant = mid & (b > r) & (b > g)
        out[..., 2] = np.where(dominant, b * CHROME_BLUE_STRENGTHS[blue], out[..., 2])

    store(rgb_view(frame), out)
    return frame
