"""
Filmstock -- Safety & Resource Guards
Preflight checks run before an uploaded image is decoded.
Prevents oversized uploads, unsupported formats, and decompression bombs.
"""

import os
from pathlib import Path

# --- Configurable Limits ---
MAX_FILE_MB = 50              # Maximum upload size
MAX_PIXELS = 100_000_000      # Maximum decoded width * height (whole image is held in memory)
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}
ALLOWED_FORMATS = {"JPEG", "PNG", "WEBP"}   # Pillow format names


class SafetyError(Exception):
    """Raised when a preflight check fails."""
    pass


def check_extension(filename: str) -> str:
    """Return the lowercased extension of an upload, or raise SafetyError.

    An empty extension is allowed; the decoder still checks the real format.
    """
    ext = Path(filename or "").suffix.lower()
    if ext and ext not in ALLOWED_EXTENSIONS:
        raise SafetyError(
            f"File type '{ext}' not allowed. "
            f"Supported: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )
    return ext


def check_size(size_bytes: int) -> float:
    """Return the size in MB, or raise SafetyError if over MAX_FILE_MB."""
    size_mb = size_bytes / (1024 * 1024)
    if size_mb > MAX_FILE_MB:
        raise SafetyError(
            f"Image is {size_mb:.0f}MB, exceeds {MAX_FILE_MB}MB limit."
        )
    return size_mb


def check_dimensions(width: int, height: int) -> None:
    """Reject images whose decoded buffer would exceed MAX_PIXELS."""
    if width * height > MAX_PIXELS:
        raise SafetyError(
            f"Image is {width}x{height} ({width * height / 1e6:.0f}MP), "
            f"exceeds {MAX_PIXELS / 1e6:.0f}MP limit."
        )


def preflight(input_path: str) -> dict:
    """Run all file checks before reading an image from disk.

    Args:
        input_path: Path to the input image.

    Returns:
        dict with file metadata (path, size_mb, extension).

    Raises:
        SafetyError: If any check fails.
        FileNotFoundError: If input doesn't exist.
    """
    input_path = str(input_path)
    real_path = os.path.realpath(input_path)

    if not os.path.isfile(real_path):
        raise FileNotFoundError(f"Input file not found: {input_path}")

    ext = check_extension(real_path)
    size_mb = check_size(os.path.getsize(real_path))

    return {
        "path": real_path,
        "size_mb": size_mb,
        "extension": ext,
    }
