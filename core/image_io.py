"""
Filmstock -- Image I/O Boundary
Decodes uploads (JPEG/PNG/WEBP bytes to (H, W, 4) uint8 RGBA arrays) and
encodes results back to JPEG. Uses Pillow for codec work.

process_image() is the full upload-to-download flow, including the recovery
path: if the film pipeline or the encoder fails on the transformed buffer,
the untransformed original is returned with fallback=True.
"""

import base64
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from io import BytesIO
from pathlib import Path

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from core.pipeline import transform
from core.recipe import get_recipe
from core.safety import ALLOWED_FORMATS, check_dimensions, preflight

logger = logging.getLogger(__name__)

JPEG_QUALITY = 98            # Near-lossless download quality
PREVIEW_QUALITY = 70
MAX_PREVIEW_DIMENSION = 1920  # Cap preview size to limit data URL bloat
FILENAME_PREFIX = "fujifilm"


class ImageIOError(Exception):
    """Base class for codec boundary failures."""
    pass


class DecodeError(ImageIOError):
    """Raised when bytes can't be turned into an RGBA buffer."""
    pass


class EncodeError(ImageIOError):
    """Raised when a buffer can't be serialized."""
    pass


@dataclass
class ProcessResult:
    """Outcome of process_image(). data is always a JPEG byte string."""
    data: bytes
    filename: str
    recipe_id: str
    width: int
    height: int
    fallback: bool = False
    error: str | None = None


def decode_image(data: bytes) -> np.ndarray:
    """Decode JPEG, PNG or WEBP bytes into an (H, W, 4) uint8 RGBA array.

    EXIF orientation is applied so the buffer matches what a browser shows.

    Raises:
        DecodeError: Unsupported format, truncated or corrupt data.
        SafetyError: Decoded size exceeds MAX_PIXELS.
    """
    if not data:
        raise DecodeError("Empty image data")
    try:
        with Image.open(BytesIO(data)) as img:
            if img.format not in ALLOWED_FORMATS:
                raise DecodeError(
                    f"Unsupported image format: {img.format}. "
                    f"Supported: {', '.join(sorted(ALLOWED_FORMATS))}"
                )
            check_dimensions(*img.size)
            img = ImageOps.exif_transpose(img)
            frame = np.array(img.convert("RGBA"), dtype=np.uint8)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        raise DecodeError(f"Could not decode image: {e}") from e
    return np.ascontiguousarray(frame)


def load_image(path: str) -> np.ndarray:
    """Preflight, read and decode an image file."""
    info = preflight(path)
    return decode_image(Path(info["path"]).read_bytes())


def flatten_alpha(buffer: np.ndarray) -> np.ndarray:
    """Composite an RGBA buffer onto black, returning (H, W, 3) uint8 RGB."""
    rgb = buffer[:, :, :3]
    alpha = buffer[:, :, 3]
    if np.all(alpha == 255):
        return np.ascontiguousarray(rgb)
    weighted = rgb.astype(np.float64) * (alpha[:, :, np.newaxis] / 255.0)
    return np.clip(np.rint(weighted), 0, 255).astype(np.uint8)


def _to_pil(buffer: np.ndarray) -> Image.Image:
    if buffer.ndim != 3 or buffer.shape[2] != 4 or buffer.dtype != np.uint8:
        raise EncodeError(f"Expected (H, W, 4) uint8 RGBA buffer, got shape {buffer.shape}")
    if buffer.shape[0] == 0 or buffer.shape[1] == 0:
        raise EncodeError("Cannot encode an empty image")
    return Image.fromarray(flatten_alpha(buffer))


def encode_jpeg(buffer: np.ndarray, quality: int = JPEG_QUALITY) -> bytes:
    """Encode an RGBA buffer as JPEG bytes (alpha flattened onto black).

    Raises:
        EncodeError: If the buffer is malformed or Pillow fails.
    """
    img = _to_pil(buffer)
    out = BytesIO()
    try:
        img.save(out, format="JPEG", quality=quality)
    except (OSError, ValueError) as e:
        raise EncodeError(f"JPEG encoding failed: {e}") from e
    return out.getvalue()


def save_jpeg(buffer: np.ndarray, output_path: str, quality: int = JPEG_QUALITY) -> Path:
    """Encode and write a buffer to disk. Returns the written path."""
    output_path = Path(output_path)
    output_path.write_bytes(encode_jpeg(buffer, quality=quality))
    return output_path


def to_data_url(buffer: np.ndarray) -> str:
    """Downscaled JPEG data URL for before/after previews."""
    img = _to_pil(buffer)
    w, h = img.size
    if max(w, h) > MAX_PREVIEW_DIMENSION:
        ratio = MAX_PREVIEW_DIMENSION / max(w, h)
        img = img.resize((max(1, int(w * ratio)), max(1, int(h * ratio))), Image.LANCZOS)

    out = BytesIO()
    try:
        img.save(out, format="JPEG", quality=PREVIEW_QUALITY)
    except (OSError, ValueError) as e:
        raise EncodeError(f"Preview encoding failed: {e}") from e
    b64 = base64.b64encode(out.getvalue()).decode()
    return f"data:image/jpeg;base64,{b64}"


def output_filename(recipe_id: str, when: datetime | None = None) -> str:
    """Download name: fujifilm-<recipe>-<epoch ms>.jpg"""
    when = when or datetime.now(timezone.utc)
    return f"{FILENAME_PREFIX}-{recipe_id}-{int(when.timestamp() * 1000)}.jpg"


def process_image(data: bytes, recipe_id: str,
                  rng: np.random.Generator | int | None = None,
                  workers: int = 1) -> ProcessResult:
    """Decode, apply a recipe, and encode to JPEG.

    Unknown recipes (UnknownRecipeError), undecodable input (DecodeError) and
    oversized images (SafetyError) are caller errors and propagate. A failure
    inside the pipeline or while encoding the transformed buffer falls back to
    the encoded original, flagged with fallback=True.

    Raises:
        EncodeError: If even the original can't be encoded.
    """
    recipe = get_recipe(recipe_id)
    frame = decode_image(data)
    original = frame.copy()
    h, w = frame.shape[:2]
    filename = output_filename(recipe_id)

    try:
        transform(frame, recipe, rng=rng, workers=workers)
        encoded = encode_jpeg(frame)
    except Exception as e:
        logger.exception("Recipe %s failed on %dx%d image, returning original", recipe_id, w, h)
        return ProcessResult(
            data=encode_jpeg(original),
            filename=filename,
            recipe_id=recipe_id,
            width=w,
            height=h,
            fallback=True,
            error=str(e),
        )

    logger.info("Applied recipe %s to %dx%d image (%d bytes)", recipe_id, w, h, len(encoded))
    return ProcessResult(
        data=encoded,
        filename=filename,
        recipe_id=recipe_id,
        width=w,
        height=h,
    )
