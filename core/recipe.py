"""
Filmstock -- Film Recipe Models

Pydantic models for film recipes plus the frozen lookup table built from
presets.FILM_RECIPES. Recipes accept the camera-card camelCase keys
(filmSimulation, whiteBalanceShift, ...) or snake_case field names.

Documented ranges are advisory: out-of-range numbers are kept and used as
plain weights by the stages. out_of_range_fields() reports them.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field

from presets import DEFAULT_RECIPE_ID, FILM_RECIPES


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class FilmSimulation(str, Enum):
    """Base color response family."""
    CLASSIC_CHROME = "classic-chrome"  # Muted, documentary
    PRO_NEG_STD = "pro-neg-std"        # Soft, warm portrait negative
    ETERNA = "eterna"                  # Cinematic, desaturated
    VELVIA = "velvia"                  # Vivid slide film


class Strength(str, Enum):
    """Three-step effect strength used by grain and Color Chrome."""
    OFF = "off"
    WEAK = "weak"
    STRONG = "strong"


class DynamicRange(str, Enum):
    """Camera dynamic range setting. Metadata only, no stage reads it."""
    DR100 = "DR100"
    DR200 = "DR200"
    DR400 = "DR400"


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class WhiteBalanceShift(BaseModel):
    """Red/blue white balance shift, -9 to +9 per axis."""
    model_config = ConfigDict(frozen=True)

    red: int = 0
    blue: int = 0


class Recipe(BaseModel):
    """A named, immutable film look."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = "Custom"
    description: str = ""
    film_simulation: FilmSimulation = Field(FilmSimulation.CLASSIC_CHROME, alias="filmSimulation")
    highlights: int = 0
    shadows: int = 0
    color: int = 0
    sharpness: int = 0
    grain: Strength = Strength.OFF
    white_balance_shift: WhiteBalanceShift = Field(default_factory=WhiteBalanceShift, alias="whiteBalanceShift")
    color_chrome: Strength = Field(Strength.OFF, alias="colorChrome")
    color_chrome_blue: Strength = Field(Strength.OFF, alias="colorChromeBlue")
    clarity: int = 0
    dynamic_range: DynamicRange | None = Field(None, alias="dynamicRange")

    def to_dict(self) -> dict:
        """Camera-card (camelCase) JSON-friendly dict."""
        return self.model_dump(mode="json", by_alias=True)


# Documented ranges (inclusive). Dotted names address nested fields.
RECIPE_RANGES = {
    "highlights": (-2, 4),
    "shadows": (-2, 4),
    "color": (-4, 4),
    "sharpness": (-4, 4),
    "clarity": (-5, 5),
    "white_balance_shift.red": (-9, 9),
    "white_balance_shift.blue": (-9, 9),
}


def _field_value(recipe: Recipe, dotted: str):
    value = recipe
    for part in dotted.split("."):
        value = getattr(value, part)
    return value


def out_of_range_fields(recipe: Recipe) -> list[str]:
    """List fields outside their documented range, e.g. 'clarity=100 (expected -5..5)'."""
    problems = []
    for field, (lo, hi) in RECIPE_RANGES.items():
        value = _field_value(recipe, field)
        if not lo <= value <= hi:
            problems.append(f"{field}={value} (expected {lo}..{hi})")
    return problems


# ---------------------------------------------------------------------------
# Lookup table
# ---------------------------------------------------------------------------

class UnknownRecipeError(KeyError):
    """Raised when a recipe id is not in the table."""

    def __init__(self, recipe_id: str):
        self.recipe_id = recipe_id
        self.available = list(RECIPES.keys())
        super().__init__(recipe_id)

    def __str__(self):
        return f"Unknown recipe: {self.recipe_id}. Available: {', '.join(self.available)}"


def recipe_from_dict(data: dict) -> Recipe:
    """Build a recipe from camelCase or snake_case keys."""
    return Recipe.model_validate(data)


RECIPES = MappingProxyType({
    recipe_id: recipe_from_dict(data) for recipe_id, data in FILM_RECIPES.items()
})


def get_recipe(recipe_id: str) -> Recipe:
    """Resolve a recipe id. Unknown ids raise UnknownRecipeError (no fallback)."""
    try:
        return RECIPES[recipe_id]
    except KeyError:
        raise UnknownRecipeError(recipe_id) from None


def default_recipe() -> Recipe:
    return RECIPES[DEFAULT_RECIPE_ID]


def list_recipes() -> list[dict]:
    """Summaries for recipe selection, in table order."""
    return [
        {
            "id": recipe_id,
            "name": recipe.name,
            "description": recipe.description,
            "filmSimulation": recipe.film_simulation.value,
            "dynamicRange": recipe.dynamic_range.value if recipe.dynamic_range else None,
        }
        for recipe_id, recipe in RECIPES.items()
    ]
