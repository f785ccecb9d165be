"""
Filmstock -- Stage Registry
Every stage is a function: (frame: np.ndarray, **params) -> np.ndarray
that mutates an (H, W, 4) uint8 RGBA frame in place and returns it.

STAGES is ordered: iteration order is pipeline order.
"""

from effects.film import film_simulation, FILM_SIMULATIONS
from effects.color import white_balance, color_adjustment, color_chrome
from effects.tone import tone_curve
from effects.texture import clarity, grain, sharpness

# Master registry: name -> fn, category, neutral params, description.
# Neutral params make a stage an exact no-op. Film simulation has none.
STAGES = {
    "film_simulation": {
        "fn": film_simulation,
        "category": "color",
        "params": None,
        "description": "Base color response of the film stock (classic-chrome, pro-neg-std, eterna, velvia)",
    },
    "white_balance": {
        "fn": white_balance,
        "category": "color",
        "params": {"red": 0, "blue": 0},
        "description": "Red/blue white balance shift, 2% gain per unit",
    },
    "tone_curve": {
        "fn": tone_curve,
        "category": "tone",
        "params": {"highlights": 0, "shadows": 0},
        "description": "Luminance-weighted highlight and shadow gain",
    },
    "color": {
        "fn": color_adjustment,
        "category": "color",
        "params": {"color": 0},
        "description": "Global saturation around luma, 10% per unit",
    },
    "color_chrome": {
        "fn": color_chrome,
        "category": "color",
        "params": {"chrome": "off", "blue": "off"},
        "description": "Mid-tone saturation boost and selective blue deepening",
    },
    "clarity": {
        "fn": clarity,
        "category": "texture",
        "params": {"amount": 0},
        "description": "Local contrast from a 4-neighbor high-pass (border untouched)",
    },
    "grain": {
        "fn": grain,
        "category": "texture",
        "params": {"strength": "off"},
        "description": "Monochromatic uniform film grain",
    },
    "sharpness": {
        "fn": sharpness,
        "category": "texture",
        "params": {"amount": 0},
        "description": "Unsharp mask against a 3x3 box blur, second pass (border untouched)",
    },
}

# Stages that read neighbors and need a pre-stage snapshot.
STENCIL_STAGES = frozenset({"clarity", "sharpness"})

# Stages that draw random numbers.
RANDOM_STAGES = frozenset({"grain"})


def get_stage(name: str):
    """Get a stage by name. Returns (fn, neutral_params).

    neutral_params is None for stages without a no-op setting.
    Raises ValueError if the stage doesn't exist.
    """
    if name not in STAGES:
        available = ", ".join(STAGES.keys())
        raise ValueError(f"Unknown stage: {name}. Available: {available}")
    entry = STAGES[name]
    params = entry["params"]
    return entry["fn"], (dict(params) if params is not None else None)


def is_noop(name: str, params: dict) -> bool:
    """True when params are the stage's neutral setting."""
    _, neutral = get_stage(name)
    if neutral is None:
        return False
    return all(getattr(params.get(k), "value", params.get(k)) == v for k, v in neutral.items())


def list_stages(category: str = None) -> list[dict]:
    """List stages in pipeline order.

    Args:
        category: Optional filter: only return stages in this category.
    """
    results = []
    for order, (name, entry) in enumerate(STAGES.items(), start=1):
        if category and entry["category"] != category:
            continue
        results.append({
            "name": name,
            "order": order,
            "category": entry["category"],
            "description": entry["description"],
            "has_noop": entry["params"] is not None,
        })
    return results


def apply_stage(frame, name: str, **params):
    """Run one named stage on a frame in place. Missing params use the neutral value."""
    fn, neutral = get_stage(name)
    merged = {**(neutral or {}), **params}
    return fn(frame, **merged)


__all__ = [
    "STAGES",
    "STENCIL_STAGES",
    "RANDOM_STAGES",
    "FILM_SIMULATIONS",
    "get_stage",
    "is_noop",
    "list_stages",
    "apply_stage",
    "film_simulation",
    "white_balance",
    "tone_curve",
    "color_adjustment",
    "color_chrome",
    "clarity",
    "grain",
    "sharpness",
]
