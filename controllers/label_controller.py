"""Preview and print the composite label built from every stored image."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict

from fastapi import HTTPException, Request
from fastapi.responses import Response

from services.color_map import UnsupportedColorError
from services.image_store import ImageStore
from services.printer import PrinterError, PrinterHandle
from services.transform import join, render
from utils.image_encoding import png_response

LOGGER = logging.getLogger(__name__)


async def get_preview(request: Request) -> Response:
    """Return the joined strip, in tape/text colors, as PNG."""
    store: ImageStore = request.app.state.image_store
    printer: PrinterHandle = request.app.state.printer

    images = [image.processed for _, image in store.list()]
    if not images:
        raise HTTPException(status_code=404, detail="No images to preview")

    _, status = await printer.snapshot()
    try:
        joined = await asyncio.to_thread(join, images, status)
    except UnsupportedColorError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return await asyncio.to_thread(png_response, joined)


async def print_label(request: Request) -> Dict[str, Any]:
    """Render every stored image to black/white and send it to the printer.

    The store is cleared only after the printer accepted the job.

    Raises:
        HTTPException(400) when there is nothing to print, 409 for an
        unsupported tape, 502 when the printer fails.
    """
    store: ImageStore = request.app.state.image_store
    printer: PrinterHandle = request.app.state.printer

    images = [image.processed for _, image in store.list()]
    if not images:
        raise HTTPException(status_code=400, detail="No images to print")

    _, status = await printer.snapshot()
    try:
        rendered = await asyncio.to_thread(render, images, status)
    except UnsupportedColorError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    LOGGER.info("Printing %d image(s) as %dx%d label", len(images), rendered.width, rendered.height)
    try:
        await printer.print_image(rendered)
    except PrinterError as exc:
        LOGGER.exception("Print job failed")
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    store.delete_all()
    return {"printed": len(images), "width": rendered.width, "height": rendered.height}
