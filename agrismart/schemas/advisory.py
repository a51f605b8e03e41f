"""Pydantic schemas for advisory calculators and assembled advisories."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

from agrismart.models.enums import (
	IrrigationActionEnum,
	MilestoneStatusEnum,
	PriceTrendEnum,
	RiskTierEnum,
	SoilTypeEnum,
)
from agrismart.schemas.crops import CropRecord
from agrismart.schemas.market import MarketPrice
from agrismart.schemas.weather import WeatherSnapshot


class StageInfo(BaseModel):
	crop_type: str
	dap: int
	stage_name: str
	description: str
	next_stage_name: str
	progress_percent: int = Field(ge=0, le=100)


class MilestoneRecord(BaseModel):
	stage: str
	expected_date: date
	status: MilestoneStatusEnum


class IrrigationRecommendation(BaseModel):
	crop_id: uuid.UUID
	crop_name: str
	stage: str
	action: IrrigationActionEnum
	duration_minutes: int = Field(ge=0)
	scheduled_time: str
	reason: str
	reference_et: float
	crop_coefficient: float
	evapotranspiration: float
	effective_rainfall: float
	water_deficit: float
	moisture_level: float | None = None
	is_applied: bool = False


class RiskAssessment(BaseModel):
	name: str
	score: int = Field(ge=0, le=100)
	risk_level: RiskTierEnum
	symptoms: list[str] = Field(default_factory=list)
	organic_treatment: str
	chemical_treatment: str


class AdvisoryTask(BaseModel):
	id: str
	title: str
	description: str
	priority: str
	category: str
	is_completed: bool = False


class MarketOutlook(BaseModel):
	price: float
	trend: PriceTrendEnum
	mandi_name: str | None = None
	recommendation: str


class CropAdvisory(BaseModel):
	crop_id: uuid.UUID
	crop_type: str
	generated_at: datetime
	stage: StageInfo
	weekly_tasks: list[AdvisoryTask] = Field(default_factory=list)
	risks: list[RiskAssessment] = Field(default_factory=list)
	market: MarketOutlook
	extras: dict[str, Any] = Field(default_factory=dict)


# ── Calculator requests ─────────────────────────────────────────────────────


class StageRequest(BaseModel):
	crop_type: str = Field(min_length=1, max_length=100)
	planting_date: date
	as_of: date | None = None


class StageResponse(BaseModel):
	stage: StageInfo
	milestones: list[MilestoneRecord] = Field(default_factory=list)


class IrrigationRequest(BaseModel):
	crops: list[CropRecord] = Field(min_length=1)
	weather: WeatherSnapshot
	soil_type: SoilTypeEnum | None = None


class IrrigationResponse(BaseModel):
	generated_at: datetime
	soil_type: SoilTypeEnum
	items: list[IrrigationRecommendation] = Field(default_factory=list)


class RiskRequest(BaseModel):
	crop_type: str = Field(min_length=1, max_length=100)
	weather: WeatherSnapshot


class RiskResponse(BaseModel):
	crop_type: str
	items: list[RiskAssessment] = Field(default_factory=list)


class AssembleRequest(BaseModel):
	crop: CropRecord
	weather: WeatherSnapshot
	market: list[MarketPrice] = Field(default_factory=list)
	as_of: date | None = None
