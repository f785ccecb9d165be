"""
Filmstock -- Built-in Film Recipes
Fujifilm-style recipes from film.recipes, as plain data.

Each recipe is a fixed bundle of simulation, tone, color, and grain settings.
Keys follow the camera menu naming (camelCase) so the table reads like the
published recipe cards. core.recipe validates these into frozen models once
at import; nothing creates, edits, or deletes recipes at runtime.

Ranges:
    highlights, shadows -- -2 to +4
    color, sharpness    -- -4 to +4
    whiteBalanceShift   -- red/blue -9 to +9
    clarity             -- -5 to +5
"""

DEFAULT_RECIPE_ID = "nano-banana-pro"

FILM_RECIPES = {
    "nano-banana-pro": {
        "name": "Nano Banana Pro",
        "description": "Warm, muted tones with lifted shadows",
        "filmSimulation": "classic-chrome",
        "highlights": -1,
        "shadows": -1,
        "color": -1,
        "sharpness": -2,
        "grain": "weak",
        "whiteBalanceShift": {"red": 2, "blue": -5},
        "colorChrome": "weak",
        "colorChromeBlue": "strong",
        "clarity": -2,
    },
    "kodak-portra-400": {
        "name": "Kodak Portra 400",
        "description": "Classic film with sophisticated soft tones",
        "filmSimulation": "eterna",
        "highlights": 1,
        "shadows": 1,
        "color": 2,
        "sharpness": -2,
        "grain": "weak",
        "whiteBalanceShift": {"red": -2, "blue": -4},
        "colorChrome": "weak",
        "colorChromeBlue": "strong",
        "clarity": -2,
        "dynamicRange": "DR200",
    },
    "nightwalker": {
        "name": "Nightwalker",
        "description": "Street photography with cyber teal tones for night lights",
        "filmSimulation": "velvia",
        "highlights": -2,
        "shadows": 2,
        "color": 4,
        "sharpness": -2,
        "grain": "strong",
        "whiteBalanceShift": {"red": -7, "blue": -3},
        "colorChrome": "weak",
        "colorChromeBlue": "strong",
        "clarity": 0,
        "dynamicRange": "DR200",
    },
    "123-chrome": {
        "name": "123 Chrome",
        "description": "Classic Kodachrome look for landscape and travel",
        "filmSimulation": "classic-chrome",
        "highlights": -1,
        "shadows": -2,
        "color": 3,
        "sharpness": 0,
        "grain": "off",
        "whiteBalanceShift": {"red": 1, "blue": -2},
        "colorChrome": "weak",
        "colorChromeBlue": "strong",
        "clarity": 0,
        "dynamicRange": "DR400",
    },
    "eastman-color": {
        "name": "Eastman Color",
        "description": "Early Kodak 35mm film with striking blues",
        "filmSimulation": "classic-chrome",
        "highlights": 1,
        "shadows": -1,
        "color": 0,
        "sharpness": 0,
        "grain": "weak",
        "whiteBalanceShift": {"red": -5, "blue": -7},
        "colorChrome": "off",
        "colorChromeBlue": "off",
        "clarity": -3,
        "dynamicRange": "DR100",
    },
    "kodak-gold-200": {
        "name": "Kodak Gold 200",
        "description": "Warm golden hour tones",
        "filmSimulation": "classic-chrome",
        "highlights": 1,
        "shadows": 0,
        "color": 3,
        "sharpness": 0,
        "grain": "weak",
        "whiteBalanceShift": {"red": 5, "blue": -3},
        "colorChrome": "strong",
        "colorChromeBlue": "off",
        "clarity": 1,
    },
    "fuji-astia": {
        "name": "Fuji Astia 100F",
        "description": "Natural colors with fine detail",
        "filmSimulation": "pro-neg-std",
        "highlights": 0,
        "shadows": 0,
        "color": 1,
        "sharpness": 1,
        "grain": "off",
        "whiteBalanceShift": {"red": -1, "blue": 1},
        "colorChrome": "weak",
        "colorChromeBlue": "weak",
        "clarity": 2,
    },
    "cinematic-eterna": {
        "name": "Cinematic Eterna",
        "description": "Desaturated cinematic look",
        "filmSimulation": "eterna",
        "highlights": -2,
        "shadows": 2,
        "color": -2,
        "sharpness": -3,
        "grain": "strong",
        "whiteBalanceShift": {"red": 0, "blue": 2},
        "colorChrome": "off",
        "colorChromeBlue": "weak",
        "clarity": -3,
    },
    "pro-neg-hi": {
        "name": "Pro Neg. Hi",
        "description": "High contrast professional negative",
        "filmSimulation": "pro-neg-std",
        "highlights": 2,
        "shadows": -2,
        "color": 0,
        "sharpness": -1,
        "grain": "weak",
        "whiteBalanceShift": {"red": 3, "blue": 0},
        "colorChrome": "weak",
        "colorChromeBlue": "weak",
        "clarity": 0,
    },
}
