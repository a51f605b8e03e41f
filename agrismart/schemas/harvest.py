"""Pydantic schemas for harvest timing trade-offs."""

from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel, Field

from agrismart.models.enums import WeatherSuitabilityEnum
from agrismart.schemas.crops import CropRecord
from agrismart.schemas.weather import WeatherSnapshot


class MaturityMetric(BaseModel):
	name: str
	value: float | str
	target: float | str
	status: str
	unit: str = ""


class LaborTask(BaseModel):
	item: str
	completed: bool = False


class HarvestScenario(BaseModel):
	date: date
	label: str
	estimated_price: float
	estimated_weight: float
	storage_cost: float
	shrinkage_loss: float
	gross_return: float
	net_return: float
	confidence: float = Field(ge=0.0, le=1.0)


class HarvestWindow(BaseModel):
	start: date
	end: date


class HarvestAdvisory(BaseModel):
	crop_id: uuid.UUID
	crop_type: str
	optimal_window: HarvestWindow
	harvest_index: int = Field(ge=0, le=100)
	maturity_metrics: list[MaturityMetric] = Field(default_factory=list)
	scenarios: list[HarvestScenario] = Field(default_factory=list)
	best_scenario: str
	weather_suitability: WeatherSuitabilityEnum
	weather_reason: str
	labor_checklist: list[LaborTask] = Field(default_factory=list)
	market_context: str = ""


class HarvestRequest(BaseModel):
	crop: CropRecord
	weather: WeatherSnapshot
	as_of: date | None = None
