from fastapi import APIRouter, HTTPException, Request

from controllers.printer_controller import get_printer, refresh_printer

router = APIRouter(prefix="/printer", tags=["printer"])


@router.get("")
async def get_printer_route(request: Request):
	return await get_printer(request)


@router.get("/refresh")
async def refresh_printer_route(request: Request):
	try:
		return await refresh_printer(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
