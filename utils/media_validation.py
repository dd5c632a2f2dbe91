"""Validation helpers for uploaded images."""

import io
from pathlib import PurePath

from fastapi import HTTPException, UploadFile
from PIL import Image, UnidentifiedImageError

DEFAULT_FILE_NAME = "image"


def strip_extension(file_name: str | None) -> str:
    """Return the upload file name without its last extension."""
    if not file_name or not file_name.strip():
        return DEFAULT_FILE_NAME
    path = PurePath(file_name.strip())
    if not path.name:
        return DEFAULT_FILE_NAME
    return str(path.with_suffix("")) if path.suffix else str(path)


def validate_image_file(file: UploadFile) -> None:
    """Check that the upload declares an image content type."""
    if file is None:
        raise HTTPException(status_code=400, detail="An image file is required.")
    content_type = (file.content_type or "").lower().split(";", 1)[0].strip()
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=415, detail=f"Unsupported content type: {file.content_type}")


def decode_image(raw: bytes) -> Image.Image:
    """Decode image bytes into a fully loaded Pillow image."""
    if not raw:
        raise HTTPException(status_code=400, detail="Uploaded image is empty.")
    try:
        image = Image.open(io.BytesIO(raw))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise HTTPException(status_code=400, detail="Uploaded file is not a supported image.") from exc
    if image.width == 0 or image.height == 0:
        raise HTTPException(status_code=400, detail="Uploaded image has no pixels.")
    return image


async def read_image_upload(file: UploadFile) -> tuple[str, Image.Image]:
    """Validate and decode an upload, returning `(file_name, image)`."""
    validate_image_file(file)
    raw = await file.read()
    return strip_extension(file.filename), decode_image(raw)
