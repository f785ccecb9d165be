"""
Filmstock -- Pipeline Driver
Runs the eight film stages over one RGBA buffer, in place, in fixed order:

    film_simulation -> white_balance -> tone_curve -> color -> color_chrome
    -> clarity -> grain -> sharpness

Each stage sees the finished output of the one before it. With workers > 1
every stage is split into row bands on a thread pool; the next stage starts
only after all bands of the current one are done.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from core.recipe import Recipe, out_of_range_fields, recipe_from_dict
from effects import RANDOM_STAGES, STENCIL_STAGES, get_stage, is_noop
from effects.texture import snapshot_of

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 1
MIN_BAND_ROWS = 64   # Don't split images into bands thinner than this


def stage_plan(recipe: Recipe) -> list[tuple[str, dict]]:
    """Ordered (stage_name, params) pairs the driver runs for a recipe."""
    wb = recipe.white_balance_shift
    return [
        ("film_simulation", {"simulation": recipe.film_simulation.value}),
        ("white_balance", {"red": wb.red, "blue": wb.blue}),
        ("tone_curve", {"highlights": recipe.highlights, "shadows": recipe.shadows}),
        ("color", {"color": recipe.color}),
        ("color_chrome", {"chrome": recipe.color_chrome.value, "blue": recipe.color_chrome_blue.value}),
        ("clarity", {"amount": recipe.clarity}),
        ("grain", {"strength": recipe.grain.value}),
        ("sharpness", {"amount": recipe.sharpness}),
    ]


def _validate_buffer(buffer) -> None:
    if not isinstance(buffer, np.ndarray):
        raise ValueError(f"Expected a numpy array, got {type(buffer).__name__}")
    if buffer.dtype != np.uint8 or buffer.ndim != 3 or buffer.shape[2] != 4:
        raise ValueError(
            f"Expected (H, W, 4) uint8 RGBA buffer, got shape {buffer.shape} dtype {buffer.dtype}"
        )


def row_bands(height: int, workers: int) -> list[tuple[int, int]]:
    """Split [0, height) into up to `workers` contiguous row ranges."""
    count = max(1, min(int(workers), height // MIN_BAND_ROWS))
    edges = np.linspace(0, height, count + 1).astype(int)
    return [(int(a), int(b)) for a, b in zip(edges[:-1], edges[1:]) if b > a]


def _run_stage(buffer, name, params, bands, executor, rng) -> None:
    fn, _ = get_stage(name)

    if executor is None:
        if name in RANDOM_STAGES:
            fn(buffer, rng=rng, **params)
        else:
            fn(buffer, **params)
        return

    if name in STENCIL_STAGES:
        # One snapshot for all bands; each band reads a 1-row halo from it.
        snap = snapshot_of(buffer)
        jobs = [executor.submit(fn, buffer, snapshot=snap, rows=band, **params) for band in bands]
    elif name in RANDOM_STAGES:
        # One child generator per band so bands never share a random source.
        children = rng.spawn(len(bands))
        jobs = [
            executor.submit(fn, buffer[y0:y1], rng=child, **params)
            for (y0, y1), child in zip(bands, children)
        ]
    else:
        jobs = [executor.submit(fn, buffer[y0:y1], **params) for y0, y1 in bands]

    for job in jobs:
        job.result()


def transform(buffer: np.ndarray, recipe: Recipe | dict,
              rng: np.random.Generator | int | None = None,
              workers: int = DEFAULT_WORKERS) -> np.ndarray:
    """Apply a film recipe to an RGBA buffer in place.

    Args:
        buffer: (H, W, 4) uint8 RGBA array. Mutated in place; alpha is never touched.
        recipe: Recipe model (or a dict accepted by recipe_from_dict).
        rng: Random source for grain: a numpy Generator, an int seed, or None.
        workers: Row bands to process concurrently per stage. 1 = calling thread only.

    Returns:
        The same buffer, for chaining.

    Raises:
        ValueError: If buffer is not an (H, W, 4) uint8 array.
    """
    _validate_buffer(buffer)
    if isinstance(recipe, dict):
        recipe = recipe_from_dict(recipe)

    h, w = buffer.shape[:2]
    if h == 0 or w == 0:
        return buffer

    problems = out_of_range_fields(recipe)
    if problems:
        logger.warning("Recipe %r has out-of-range fields, using them as-is: %s",
                       recipe.name, ", ".join(problems))

    rng = np.random.default_rng(rng)
    bands = row_bands(h, workers)
    executor = ThreadPoolExecutor(max_workers=len(bands)) if len(bands) > 1 else None

    started = time.perf_counter()
    try:
        for name, params in stage_plan(recipe):
            if is_noop(name, params):
                logger.debug("stage %s skipped (neutral params)", name)
                continue
            t0 = time.perf_counter()
            _run_stage(buffer, name, params, bands, executor, rng)
            logger.debug("stage %s took %.1fms", name, (time.perf_counter() - t0) * 1000)
    finally:
        if executor is not None:
            executor.shutdown()

    logger.debug("recipe %r applied to %dx%d in %.1fms (%d band(s))",
                 recipe.name, w, h, (time.perf_counter() - started) * 1000, len(bands))
    return buffer
