"""
Filmstock -- Film Simulation Base Looks
The first stage of every recipe: a global color response per simulation family.
"""

import numpy as np

from effects.common import load_rgb, luminance, rgb_view, store

FILM_SIMULATIONS = ("classic-chrome", "pro-neg-std", "eterna", "velvia")

# Per-channel gains for Pro Neg. Std (R, G, B).
PRO_NEG_GAINS = np.array([1.05, 1.02, 0.98])


def _blend_toward_gray(rgb: np.ndarray, gray_weight: float) -> np.ndarray:
    gray = luminance(rgb)[..., np.newaxis]
    return rgb * (1.0 - gray_weight) + gray * gray_weight


def _push_from_gray(rgb: np.ndarray, factor: float) -> np.ndarray:
    gray = luminance(rgb)[..., np.newaxis]
    return gray + (rgb - gray) * factor


def film_simulation(frame: np.ndarray, simulation: str = "classic-chrome") -> np.ndarray:
    """Apply a film simulation's base color response in place.

    Args:
        frame: (H, W, 4) uint8 RGBA array. Alpha is left alone.
        simulation: 'classic-chrome' (muted, 15% toward gray),
            'pro-neg-std' (soft warm channel gains),
            'eterna' (cinematic, 20% toward gray) or
            'velvia' (vivid, 1.4x away from gray).

    Returns:
        The same frame.
    """
    simulation = getattr(simulation, "value", simulation)
    if simulation not in FILM_SIMULATIONS:
        raise ValueError(
            f"Unknown film simulation: {simulation}. Available: {', '.join(FILM_SIMULATIONS)}"
        )

    rgb = load_rgb(frame)
    if simulation == "classic-chrome":
        out = _blend_toward_gray(rgb, 0.15)
    elif simulation == "pro-neg-std":
        out = rgb * PRO_NEG_GAINS
    elif simulation == "eterna":
        out = _blend_toward_gray(rgb, 0.20)
    else:  # velvia
        out = _push_from_gray(rgb, 1.4)

    store(rgb_view(frame), out)
    return frame
