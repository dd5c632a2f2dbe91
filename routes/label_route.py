from fastapi import APIRouter, HTTPException, Request

from controllers.label_controller import get_preview, print_label

router = APIRouter(tags=["label"])


@router.get("/preview")
async def preview_route(request: Request):
	"""Return the composite label preview as PNG."""
	try:
		return await get_preview(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/print")
async def print_route(request: Request):
	"""Print all stored images as one label and clear them."""
	try:
		return await print_label(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
