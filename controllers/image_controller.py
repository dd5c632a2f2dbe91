import asyncio
from typing import Any, Dict, List
from uuid import UUID

from fastapi import HTTPException, Request, UploadFile
from fastapi.responses import Response

from services.color_map import UnsupportedColorError
from services.image_store import ImageStore
from services.printer import PrinterHandle
from services.transform import process_initial
from utils.image_encoding import png_response
from utils.media_validation import read_image_upload


def _store(request: Request) -> ImageStore:
    return request.app.state.image_store


def _printer(request: Request) -> PrinterHandle:
    return request.app.state.printer


async def upload_image(request: Request, file: UploadFile) -> Dict[str, Any]:
    """Decode an upload, process it for the loaded tape and store it.

    Args:
        request: FastAPI Request (used to access app.state for shared resources).
        file: Uploaded image file.

    Returns:
        The stored image description, including its new id.

    Raises:
        HTTPException(400/415) for invalid uploads, 409 for an unsupported tape.
    """
    file_name, decoded = await read_image_upload(file)

    printer_type, status = await _printer(request).snapshot()

    # Processing is CPU bound -> run in thread
    try:
        image = await asyncio.to_thread(process_initial, decoded, file_name, status, printer_type.info())
    except UnsupportedColorError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    image_id = _store(request).insert(image)
    return image.describe(image_id)


async def list_images(request: Request) -> List[Dict[str, Any]]:
    return [image.describe(image_id) for image_id, image in _store(request).list()]


async def get_image_file(request: Request, image_id: UUID) -> Response:
    """Return the processed image as PNG.

    Raises:
        HTTPException(404) if the image is not found.
    """
    image = _store(request).get(image_id)
    if image is None:
        raise HTTPException(status_code=404, detail="Image not found")
    return await asyncio.to_thread(png_response, image.processed)


async def set_threshold(request: Request, image_id: UUID, threshold: int) -> Dict[str, Any]:
    _, status = await _printer(request).snapshot()
    try:
        found = await asyncio.to_thread(_store(request).set_threshold, image_id, threshold, status)
    except UnsupportedColorError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    if not found:
        raise HTTPException(status_code=404, detail="Image not found")
    return {"id": str(image_id), "threshold": threshold}


async def set_inverted(request: Request, image_id: UUID, inverted: bool) -> Dict[str, Any]:
    _, status = await _printer(request).snapshot()
    try:
        found = await asyncio.to_thread(_store(request).set_inverted, image_id, inverted, status)
    except UnsupportedColorError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    if not found:
        raise HTTPException(status_code=404, detail="Image not found")
    return {"id": str(image_id), "inverted": inverted}


async def delete_image(request: Request, image_id: UUID) -> Dict[str, Any]:
    if _store(request).delete_one(image_id) is None:
        raise HTTPException(status_code=404, detail="Image not found")
    return {"id": str(image_id), "deleted": True}


async def delete_all(request: Request) -> Dict[str, Any]:
    _store(request).delete_all()
    return {"deleted": True}
