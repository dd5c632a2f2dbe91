"""FastAPI routes for uploading and tuning label images."""

from uuid import UUID

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from pydantic import BaseModel, Field

from controllers.image_controller import (
	delete_all,
	delete_image,
	get_image_file,
	list_images,
	set_inverted,
	set_threshold,
	upload_image,
)

router = APIRouter(prefix="/images", tags=["images"])


class ThresholdPayload(BaseModel):
	threshold: int = Field(..., ge=0, le=255)


class InvertPayload(BaseModel):
	invert: bool


@router.get("")
async def list_images_route(request: Request):
	"""Return every stored image description in upload order."""
	return await list_images(request)


@router.post("")
async def upload_image_route(request: Request, file: UploadFile = File(...)):
	try:
		return await upload_image(request, file)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.delete("")
async def delete_all_route(request: Request):
	return await delete_all(request)


@router.get("/{image_id}")
async def get_image_file_route(request: Request, image_id: UUID):
	"""Return the processed PNG for the specified image id."""
	try:
		return await get_image_file(request, image_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{image_id}/invert")
async def invert_route(request: Request, image_id: UUID, payload: InvertPayload):
	try:
		return await set_inverted(request, image_id, payload.invert)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{image_id}/threshold")
async def threshold_route(request: Request, image_id: UUID, payload: ThresholdPayload):
	try:
		return await set_threshold(request, image_id, payload.threshold)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/{image_id}")
async def delete_image_route(request: Request, image_id: UUID):
	return await delete_image(request, image_id)
