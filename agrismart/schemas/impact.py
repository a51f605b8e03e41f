"""Pydantic schemas for weather-impact assessments and nutrient advisories."""

from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel, Field

from agrismart.models.enums import DeficiencyEnum, ImpactLevelEnum
from agrismart.schemas.crops import CropRecord
from agrismart.schemas.weather import WeatherSnapshot


class Vulnerability(BaseModel):
	factor: str
	description: str
	impact: str


class WeatherImpactAssessment(BaseModel):
	crop_id: uuid.UUID
	crop_name: str
	risk_score: int = Field(ge=0, le=100)
	risk_level: ImpactLevelEnum
	potential_yield_loss: int = Field(ge=0)
	vulnerabilities: list[Vulnerability] = Field(default_factory=list)
	protective_measures: list[str] = Field(default_factory=list)
	recovery_steps: list[str] = Field(default_factory=list)


class ImpactRequest(BaseModel):
	crop: CropRecord
	weather: WeatherSnapshot


class NutrientNeed(BaseModel):
	nutrient: str
	label: str
	requirement_kg_per_acre: float
	current_level: float = Field(ge=0, le=100)
	deficiency: DeficiencyEnum


class FertilizerApplication(BaseModel):
	id: str
	dap: int
	date: date
	product_name: str
	dosage: float
	unit: str
	method: str
	status: str = "pending"


class FertilizerCost(BaseModel):
	estimated_total_cost: float
	expected_roi: float


class NutrientAdvisory(BaseModel):
	crop_id: uuid.UUID
	crop_name: str
	soil_ph: float
	nutrient_needs: list[NutrientNeed] = Field(default_factory=list)
	schedule: list[FertilizerApplication] = Field(default_factory=list)
	organic_alternatives: list[str] = Field(default_factory=list)
	cost_analysis: FertilizerCost


class NutrientRequest(BaseModel):
	crop: CropRecord
