"""
Filmstock -- Pipeline Driver Tests
Stage order, neutral-stage skipping, band parallelism, input validation.

Run with: pytest tests/test_pipeline.py -v
"""

import logging
import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.pipeline import transform, stage_plan, row_bands, MIN_BAND_ROWS
from core.recipe import Recipe, get_recipe, recipe_from_dict
from effects import STAGES
from effects.film import film_simulation
from effects.color import white_balance, color_adjustment, color_chrome
from effects.tone import tone_curve
from effects.texture import clarity, grain, sharpness
from conftest import _make_test_frame, _solid


def _chain(frame, recipe, rng=None):
    """Reference: run every stage function by hand in pipeline order."""
    wb = recipe.white_balance_shift
    film_simulation(frame, recipe.film_simulation.value)
    white_balance(frame, red=wb.red, blue=wb.blue)
    tone_curve(frame, highlights=recipe.highlights, shadows=recipe.shadows)
    color_adjustment(frame, color=recipe.color)
    color_chrome(frame, chrome=recipe.color_chrome.value, blue=recipe.color_chrome_blue.value)
    clarity(frame, amount=recipe.clarity)
    grain(frame, strength=recipe.grain.value, rng=np.random.default_rng(rng))
    sharpness(frame, amount=recipe.sharpness)
    return frame


NO_GRAIN = recipe_from_dict({
    "name": "Test No Grain",
    "filmSimulation": "velvia",
    "highlights": 2,
    "shadows": -1,
    "color": 1,
    "sharpness": 3,
    "grain": "off",
    "whiteBalanceShift": {"red": 3, "blue": -2},
    "colorChrome": "strong",
    "colorChromeBlue": "weak",
    "clarity": -2,
})


@pytest.fixture
def spy_stages(monkeypatch):
    """Replace every stage fn with a recorder; returns the call log."""
    calls = []
    for name in STAGES:
        def _spy(frame, _name=name, **params):
            calls.append((_name, params))
            return frame
        monkeypatch.setitem(STAGES[name], "fn", _spy)
    return calls


class TestComposition:

    def test_matches_hand_chain(self, frame):
        expected = _chain(frame.copy(), NO_GRAIN)
        transform(frame, NO_GRAIN)
        np.testing.assert_array_equal(frame, expected)

    @pytest.mark.parametrize("recipe_id", ["nano-banana-pro", "nightwalker", "fuji-astia"])
    def test_builtin_recipes_match_hand_chain_with_seed(self, frame, recipe_id):
        recipe = get_recipe(recipe_id)
        expected = _chain(frame.copy(), recipe, rng=7)
        transform(frame, recipe, rng=7)
        np.testing.assert_array_equal(frame, expected)

    def test_returns_same_buffer(self, frame):
        assert transform(frame, NO_GRAIN) is frame

    def test_alpha_preserved(self, frame):
        alpha = frame[:, :, 3].copy()
        transform(frame, get_recipe("nightwalker"), rng=1)
        np.testing.assert_array_equal(frame[:, :, 3], alpha)

    def test_tiny_buffer_skips_stencils(self):
        """2x2 has no interior: clarity and sharpness leave it alone."""
        f = _solid((128, 128, 128), 2, 2)
        expected = f.copy()
        film_simulation(expected, "velvia")
        white_balance(expected, red=3, blue=-2)
        tone_curve(expected, highlights=2, shadows=-1)
        color_adjustment(expected, color=1)
        color_chrome(expected, chrome="strong", blue="weak")
        transform(f, NO_GRAIN)
        np.testing.assert_array_equal(f, expected)

    def test_tiny_gray_with_default_recipe(self):
        """2x2 gray through nano-banana-pro: grain runs, the stencils do not."""
        recipe = get_recipe("nano-banana-pro")
        f = _solid((128, 128, 128), 2, 2)
        expected = f.copy()
        wb = recipe.white_balance_shift
        film_simulation(expected, recipe.film_simulation.value)
        white_balance(expected, red=wb.red, blue=wb.blue)
        tone_curve(expected, highlights=recipe.highlights, shadows=recipe.shadows)
        color_adjustment(expected, color=recipe.color)
        color_chrome(expected, chrome=recipe.color_chrome.value, blue=recipe.color_chrome_blue.value)
        grain(expected, strength=recipe.grain.value, rng=np.random.default_rng(42))

        assert transform(f, recipe, rng=42) is f
        np.testing.assert_array_equal(f, expected)
        assert np.all(f[:, :, 3] == 255)

    def test_deterministic_without_grain(self, frame):
        a = transform(frame.copy(), NO_GRAIN)
        b = transform(frame.copy(), NO_GRAIN)
        np.testing.assert_array_equal(a, b)

    def test_seeded_grain_is_reproducible(self, frame):
        recipe = get_recipe("cinematic-eterna")
        a = transform(frame.copy(), recipe, rng=123)
        b = transform(frame.copy(), recipe, rng=123)
        np.testing.assert_array_equal(a, b)

    def test_accepts_dict_recipe(self, frame):
        expected = film_simulation(frame.copy(), "velvia")
        transform(frame, {"filmSimulation": "velvia"})
        np.testing.assert_array_equal(frame, expected)


class TestStageScheduling:

    def test_all_stages_run_in_order(self, frame, spy_stages):
        transform(frame, get_recipe("nano-banana-pro"), rng=0)
        assert [name for name, _ in spy_stages] == list(STAGES.keys())

    def test_neutral_stages_skipped(self, frame, spy_stages):
        transform(frame, Recipe())
        assert [name for name, _ in spy_stages] == ["film_simulation"]

    def test_grain_receives_rng(self, frame, spy_stages):
        transform(frame, get_recipe("nightwalker"), rng=5)
        grain_params = dict(spy_stages)["grain"]
        assert isinstance(grain_params["rng"], np.random.Generator)

    def test_stage_plan_params(self):
        plan = dict(stage_plan(get_recipe("nano-banana-pro")))
        assert plan["film_simulation"] == {"simulation": "classic-chrome"}
        assert plan["white_balance"] == {"red": 2, "blue": -5}
        assert plan["color_chrome"] == {"chrome": "weak", "blue": "strong"}
        assert plan["grain"] == {"strength": "weak"}


class TestBands:

    def test_single_band_for_small_images(self):
        assert row_bands(MIN_BAND_ROWS * 2 - 1, 8) == [(0, MIN_BAND_ROWS * 2 - 1)]

    def test_bands_cover_all_rows(self):
        bands = row_bands(300, 4)
        assert len(bands) == 4
        assert bands[0][0] == 0 and bands[-1][1] == 300
        for (_, end), (start, _) in zip(bands[:-1], bands[1:]):
            assert end == start

    def test_parallel_matches_serial(self):
        f = _make_test_frame(width=40, height=300, seed=3)
        serial = transform(f.copy(), NO_GRAIN, workers=1)
        parallel = transform(f.copy(), NO_GRAIN, workers=4)
        np.testing.assert_array_equal(parallel, serial)

    def test_parallel_grain_reproducible(self):
        f = _make_test_frame(width=40, height=300, seed=3)
        recipe = get_recipe("nightwalker")
        a = transform(f.copy(), recipe, rng=11, workers=4)
        b = transform(f.copy(), recipe, rng=11, workers=4)
        np.testing.assert_array_equal(a, b)

    def test_parallel_grain_preserves_alpha(self):
        f = _make_test_frame(width=40, height=300, seed=3)
        alpha = f[:, :, 3].copy()
        transform(f, get_recipe("nightwalker"), rng=11, workers=4)
        np.testing.assert_array_equal(f[:, :, 3], alpha)


class TestValidation:

    @pytest.mark.parametrize("bad", [
        [[0, 0, 0, 0]],
        np.zeros((4, 4, 3), dtype=np.uint8),
        np.zeros((4, 4, 4), dtype=np.float32),
        np.zeros((16,), dtype=np.uint8),
    ])
    def test_rejects_bad_buffers(self, bad):
        with pytest.raises(ValueError):
            transform(bad, NO_GRAIN)

    @pytest.mark.parametrize("shape", [(0, 5, 4), (5, 0, 4), (0, 0, 4)])
    def test_zero_area_is_noop(self, shape):
        buf = np.zeros(shape, dtype=np.uint8)
        assert transform(buf, NO_GRAIN) is buf

    def test_out_of_range_recipe_warns_and_runs(self, frame, caplog):
        recipe = recipe_from_dict({"clarity": 100, "color": 40, "whiteBalanceShift": {"red": -60}})
        expected = _chain(frame.copy(), recipe)
        with caplog.at_level(logging.WARNING, logger="core.pipeline"):
            transform(frame, recipe)
        assert "clarity=100" in caplog.text
        assert "white_balance_shift.red=-60" in caplog.text
        np.testing.assert_array_equal(frame, expected)

    def test_out_of_range_values_are_not_clamped_to_range(self, frame):
        """clarity=100 is used as a weight, not cut back to the documented +5."""
        recipe = recipe_from_dict({"clarity": 100})
        wild = transform(frame.copy(), recipe)
        capped = transform(frame.copy(), recipe_from_dict({"clarity": 5}))
        assert not np.array_equal(wild, capped)
        np.testing.assert_array_equal(wild, _chain(frame.copy(), recipe))
