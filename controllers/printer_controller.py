"""Report the printer model and loaded media."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import HTTPException, Request

from models.printer_status import PrinterStatus, PrinterType
from services.printer import PrinterError, PrinterHandle


def _code_name(color) -> str:
	return color.name if hasattr(color, "name") else f"0x{int(color):02X}"


def describe_printer(printer_type: PrinterType, status: PrinterStatus) -> Dict[str, Any]:
	info = printer_type.info()
	return {
		"ty": printer_type.value,
		"dpi": info.dpi,
		"max_px": info.max_px,
		"media_type": _code_name(status.media_type),
		"media_width": status.media_width.mm,
		"tape_px": status.tape_px,
		"tape_color": _code_name(status.tape_color),
		"text_color": _code_name(status.text_color),
	}


async def get_printer(request: Request) -> Dict[str, Any]:
	printer: PrinterHandle = request.app.state.printer
	return describe_printer(*await printer.snapshot())


async def refresh_printer(request: Request) -> Dict[str, Any]:
	"""Reload the printer status and return the updated description."""
	printer: PrinterHandle = request.app.state.printer
	try:
		printer_type, status = await printer.refresh()
	except PrinterError as exc:
		raise HTTPException(status_code=502, detail=str(exc)) from exc
	return describe_printer(printer_type, status)
