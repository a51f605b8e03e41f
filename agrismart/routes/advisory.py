"""Advisory routes: pure calculators plus registry-backed assembly."""

from __future__ import annotations

import random
import uuid
from datetime import UTC, date, datetime
from typing import TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query, status

from agrismart.config import get_settings
from agrismart.core import harvest, impact, irrigation, nutrients, phenology, risk
from agrismart.core.advisory import assemble_advisory
from agrismart.dependencies import get_advisory_service
from agrismart.models.enums import SoilTypeEnum
from agrismart.schemas.advisory import (
	AssembleRequest,
	CropAdvisory,
	IrrigationRequest,
	IrrigationResponse,
	RiskRequest,
	RiskResponse,
	StageRequest,
	StageResponse,
)
from agrismart.schemas.common import ServiceResult
from agrismart.schemas.harvest import HarvestAdvisory, HarvestRequest
from agrismart.schemas.impact import ImpactRequest, NutrientAdvisory, NutrientRequest, WeatherImpactAssessment
from agrismart.services.advisory_service import AdvisoryService

router = APIRouter(prefix="/advisory", tags=["advisory"])

T = TypeVar("T")


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="advisory failure")


def _unwrap(result: ServiceResult[T]) -> T:
	if not result.success or result.data is None:
		raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.error or "upstream failure")
	return result.data


@router.post("/stage", response_model=StageResponse)
async def calculate_stage(payload: StageRequest) -> StageResponse:
	try:
		return StageResponse(
			stage=phenology.calculate_stage(payload.crop_type, payload.planting_date, payload.as_of),
			milestones=phenology.generate_milestones(payload.crop_type, payload.planting_date, payload.as_of),
		)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.post("/irrigation", response_model=IrrigationResponse)
async def recommend_irrigation(payload: IrrigationRequest) -> IrrigationResponse:
	settings = get_settings()
	soil = payload.soil_type or SoilTypeEnum(settings.default_soil_type.value)
	try:
		items = irrigation.recommend_many(
			payload.crops,
			payload.weather,
			soil,
			rng=random.Random(settings.random_seed),
			heat_override_first=settings.irrigation_heat_override_first,
			scheduled_time=settings.irrigation_schedule_time,
		)
	except Exception as exc:
		raise _map_error(exc) from exc
	return IrrigationResponse(generated_at=datetime.now(UTC), soil_type=soil, items=items)


@router.post("/risks", response_model=RiskResponse)
async def score_risks(payload: RiskRequest) -> RiskResponse:
	try:
		return RiskResponse(crop_type=payload.crop_type, items=risk.score_risks(payload.crop_type, payload.weather))
	except Exception as exc:
		raise _map_error(exc) from exc


@router.post("/assemble", response_model=CropAdvisory)
async def assemble(payload: AssembleRequest) -> CropAdvisory:
	try:
		return assemble_advisory(payload.crop, payload.weather, payload.market, as_of=payload.as_of)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.post("/harvest", response_model=HarvestAdvisory)
async def plan_harvest(payload: HarvestRequest) -> HarvestAdvisory:
	try:
		return harvest.harvest_advisory(payload.crop, payload.weather, payload.as_of)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.post("/impact", response_model=WeatherImpactAssessment)
async def assess_impact(payload: ImpactRequest) -> WeatherImpactAssessment:
	try:
		return impact.assess_impact(payload.crop, payload.weather)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.post("/nutrients", response_model=NutrientAdvisory)
async def advise_nutrients(payload: NutrientRequest) -> NutrientAdvisory:
	try:
		return nutrients.nutrient_advisory(payload.crop)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.get("/crops/{crop_id}", response_model=CropAdvisory)
async def get_crop_advisory(
	crop_id: uuid.UUID,
	as_of: date | None = Query(default=None),
	service: AdvisoryService = Depends(get_advisory_service),
) -> CropAdvisory:
	try:
		result = await service.build_for_crop(crop_id, as_of)
	except Exception as exc:
		raise _map_error(exc) from exc
	return _unwrap(result)


@router.get("/crops/{crop_id}/irrigation", response_model=IrrigationResponse)
async def get_crop_irrigation(
	crop_id: uuid.UUID,
	soil_type: SoilTypeEnum | None = Query(default=None),
	as_of: date | None = Query(default=None),
	service: AdvisoryService = Depends(get_advisory_service),
) -> IrrigationResponse:
	try:
		result = await service.irrigation_for_crop(crop_id, soil_type, as_of)
	except Exception as exc:
		raise _map_error(exc) from exc
	return _unwrap(result)


@router.get("/crops/{crop_id}/harvest", response_model=HarvestAdvisory)
async def get_crop_harvest(
	crop_id: uuid.UUID,
	as_of: date | None = Query(default=None),
	service: AdvisoryService = Depends(get_advisory_service),
) -> HarvestAdvisory:
	try:
		result = await service.harvest_for_crop(crop_id, as_of)
	except Exception as exc:
		raise _map_error(exc) from exc
	return _unwrap(result)


@router.get("/crops/{crop_id}/impact", response_model=WeatherImpactAssessment)
async def get_crop_impact(
	crop_id: uuid.UUID,
	service: AdvisoryService = Depends(get_advisory_service),
) -> WeatherImpactAssessment:
	try:
		result = await service.impact_for_crop(crop_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return _unwrap(result)


@router.get("/crops/{crop_id}/nutrients", response_model=NutrientAdvisory)
async def get_crop_nutrients(
	crop_id: uuid.UUID,
	service: AdvisoryService = Depends(get_advisory_service),
) -> NutrientAdvisory:
	try:
		return await service.nutrients_for_crop(crop_id)
	except Exception as exc:
		raise _map_error(exc) from exc
