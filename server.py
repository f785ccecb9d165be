#!/usr/bin/env python3
"""
Filmstock -- FastAPI Backend
Upload an image, pick a film recipe, get the JPEG back.
The film pipeline runs in a worker thread so the event loop stays free.
"""

import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from fastapi import FastAPI, UploadFile, File, Form, HTTPException
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from core.image_io import DecodeError, EncodeError, decode_image, process_image, to_data_url
from core.recipe import UnknownRecipeError, get_recipe, list_recipes
from core.safety import SafetyError, check_extension, check_size, MAX_FILE_MB
from presets import DEFAULT_RECIPE_ID
from effects import list_stages

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7860
UPLOAD_CHUNK_BYTES = 1024 * 1024

app = FastAPI(title="Filmstock")

# Structured error recovery hints for user-facing errors
ERROR_RECOVERY = {
    "no_file": {"code": "NO_FILE", "hint": "Choose a JPEG, PNG or WEBP image to upload."},
    "unsupported_type": {"code": "UNSUPPORTED_TYPE", "hint": "Upload a JPEG, PNG or WEBP image."},
    "file_too_large": {"code": "FILE_TOO_LARGE", "hint": f"Images must be under {MAX_FILE_MB}MB."},
    "decode_failed": {"code": "DECODE_FAILED", "hint": "The file may be corrupt. Re-export it and try again."},
    "recipe_not_found": {"code": "RECIPE_NOT_FOUND", "hint": "Refresh the recipe list and pick again."},
    "encode_failed": {"code": "ENCODE_FAILED", "hint": "Try again with a smaller image."},
}


def _error_detail(key: str, message: str) -> dict:
    """Build structured error detail dict for the frontend."""
    recovery = ERROR_RECOVERY.get(key, {})
    return {
        "detail": message,
        "code": recovery.get("code", "UNKNOWN"),
        "hint": recovery.get("hint", ""),
    }


async def _read_upload(file: UploadFile) -> bytes:
    """Read an upload in chunks, enforcing type and size limits."""
    if not file.filename:
        raise HTTPException(status_code=400, detail=_error_detail("no_file", "No filename provided"))
    try:
        check_extension(file.filename)
    except SafetyError as e:
        raise HTTPException(status_code=400, detail=_error_detail("unsupported_type", str(e)))

    chunks = []
    total = 0
    while chunk := await file.read(UPLOAD_CHUNK_BYTES):
        total += len(chunk)
        try:
            check_size(total)
        except SafetyError as e:
            raise HTTPException(status_code=413, detail=_error_detail("file_too_large", str(e)))
        chunks.append(chunk)
    if not chunks:
        raise HTTPException(status_code=400, detail=_error_detail("no_file", "Uploaded file is empty"))
    return b"".join(chunks)


def _resolve_recipe(recipe_id: str):
    try:
        return get_recipe(recipe_id)
    except UnknownRecipeError as e:
        raise HTTPException(status_code=404, detail=_error_detail("recipe_not_found", str(e)))


async def _process(data: bytes, recipe_id: str):
    """Run process_image off the event loop, mapping boundary errors to HTTP."""
    _resolve_recipe(recipe_id)
    try:
        return await run_in_threadpool(process_image, data, recipe_id)
    except SafetyError as e:
        raise HTTPException(status_code=413, detail=_error_detail("file_too_large", str(e)))
    except DecodeError as e:
        raise HTTPException(status_code=400, detail=_error_detail("decode_failed", str(e)))
    except EncodeError as e:
        logger.exception("Encoding failed for recipe %s", recipe_id)
        raise HTTPException(status_code=500, detail=_error_detail("encode_failed", str(e)))


@app.get("/api/health")
async def health_check():
    return {"status": "ok"}


@app.get("/api/recipes")
async def recipes():
    """List film recipes for the recipe selector."""
    return {"default": DEFAULT_RECIPE_ID, "recipes": list_recipes()}


@app.get("/api/recipes/{recipe_id}")
async def recipe_detail(recipe_id: str):
    """Full settings of one recipe (camera-card keys)."""
    recipe = _resolve_recipe(recipe_id)
    return {"id": recipe_id, **recipe.to_dict()}


@app.get("/api/stages")
async def stages():
    """Pipeline stages in the order they run."""
    return {"stages": list_stages()}


@app.post("/api/transform")
async def transform_image(file: UploadFile = File(...), recipe: str = Form(DEFAULT_RECIPE_ID)):
    """Apply a recipe and return the JPEG as a download.

    If the film pipeline fails, the original image comes back instead with
    the X-Filmstock-Fallback header set.
    """
    data = await _read_upload(file)
    result = await _process(data, recipe)
    headers = {"Content-Disposition": f'attachment; filename="{result.filename}"'}
    if result.fallback:
        headers["X-Filmstock-Fallback"] = "1"
    return Response(content=result.data, media_type="image/jpeg", headers=headers)


@app.post("/api/preview")
async def preview_image(file: UploadFile = File(...), recipe: str = Form(DEFAULT_RECIPE_ID)):
    """Before/after data URLs for the comparison view."""
    data = await _read_upload(file)
    result = await _process(data, recipe)
    try:
        original = await run_in_threadpool(lambda: to_data_url(decode_image(data)))
        transformed = await run_in_threadpool(lambda: to_data_url(decode_image(result.data)))
    except (DecodeError, EncodeError) as e:
        logger.exception("Preview encoding failed for recipe %s", recipe)
        raise HTTPException(status_code=500, detail=_error_detail("encode_failed", str(e)))
    return {
        "recipe": recipe,
        "original": original,
        "transformed": transformed,
        "fallback": result.fallback,
        "filename": result.filename,
        "width": result.width,
        "height": result.height,
    }


def start(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT):
    import uvicorn
    print(f"Filmstock - launching at http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="warning")


if __name__ == "__main__":
    start()
