"""Crop registry routes and per-crop phenology lookups."""

from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from agrismart.core import phenology
from agrismart.dependencies import get_crop_repository
from agrismart.schemas.advisory import MilestoneRecord, StageInfo
from agrismart.schemas.crops import ActivityIn, CostIn, CropCreate, CropListRead, CropRecord
from agrismart.services.crop_repository import CropRepository

router = APIRouter(prefix="/crops", tags=["crops"])


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	return HTTPException(
		status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
		detail="Unexpected crop registry failure",
	)


@router.post("", response_model=CropRecord, status_code=status.HTTP_201_CREATED)
async def create_crop(
	payload: CropCreate,
	repository: CropRepository = Depends(get_crop_repository),
) -> CropRecord:
	try:
		return await repository.add(payload)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.get("", response_model=CropListRead)
async def list_crops(repository: CropRepository = Depends(get_crop_repository)) -> CropListRead:
	try:
		return CropListRead(items=await repository.list_crops())
	except Exception as exc:
		raise _map_error(exc) from exc


@router.get("/{crop_id}", response_model=CropRecord)
async def get_crop(
	crop_id: uuid.UUID,
	repository: CropRepository = Depends(get_crop_repository),
) -> CropRecord:
	try:
		return await repository.get(crop_id)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.put("/{crop_id}", response_model=CropRecord)
async def update_crop(
	crop_id: uuid.UUID,
	payload: CropCreate,
	repository: CropRepository = Depends(get_crop_repository),
) -> CropRecord:
	try:
		return await repository.update(crop_id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.delete("/{crop_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_crop(
	crop_id: uuid.UUID,
	repository: CropRepository = Depends(get_crop_repository),
) -> Response:
	try:
		await repository.delete(crop_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{crop_id}/activities", response_model=CropRecord, status_code=status.HTTP_201_CREATED)
async def log_activity(
	crop_id: uuid.UUID,
	payload: ActivityIn,
	repository: CropRepository = Depends(get_crop_repository),
) -> CropRecord:
	try:
		return await repository.append_activity(crop_id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.post("/{crop_id}/costs", response_model=CropRecord, status_code=status.HTTP_201_CREATED)
async def log_cost(
	crop_id: uuid.UUID,
	payload: CostIn,
	repository: CropRepository = Depends(get_crop_repository),
) -> CropRecord:
	try:
		return await repository.append_cost(crop_id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.get("/{crop_id}/stage", response_model=StageInfo)
async def get_crop_stage(
	crop_id: uuid.UUID,
	as_of: date | None = Query(default=None),
	repository: CropRepository = Depends(get_crop_repository),
) -> StageInfo:
	try:
		crop = await repository.get(crop_id)
		return phenology.calculate_stage(crop.crop_type, crop.planting_date, as_of)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.get("/{crop_id}/milestones", response_model=list[MilestoneRecord])
async def get_crop_milestones(
	crop_id: uuid.UUID,
	as_of: date | None = Query(default=None),
	repository: CropRepository = Depends(get_crop_repository),
) -> list[MilestoneRecord]:
	try:
		crop = await repository.get(crop_id)
		return phenology.generate_milestones(crop.crop_type, crop.planting_date, as_of)
	except Exception as exc:
		raise _map_error(exc) from exc
