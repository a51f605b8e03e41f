"""Pydantic request/response schemas for crop registry objects."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from agrismart.models.enums import IrrigationMethodEnum


class SoilData(BaseModel):
	ph: float | None = Field(default=None, ge=0, le=14)
	nitrogen: float | None = Field(default=None, ge=0)
	phosphorus: float | None = Field(default=None, ge=0)
	potassium: float | None = Field(default=None, ge=0)


class ActivityIn(BaseModel):
	type: str = Field(min_length=1, max_length=100)
	date: date
	notes: str = Field(default="", max_length=1000)


class Activity(ActivityIn):
	id: uuid.UUID = Field(default_factory=uuid.uuid4)


class CostIn(BaseModel):
	category: str = Field(min_length=1, max_length=100)
	amount: float = Field(ge=0)
	date: date


class CostRecord(CostIn):
	id: uuid.UUID = Field(default_factory=uuid.uuid4)


class CropCreate(BaseModel):
	crop_type: str = Field(min_length=2, max_length=100)
	variety: str = Field(default="", max_length=255)
	planting_date: date
	farm_size: float = Field(gt=0)
	plot_location: str | None = Field(default=None, max_length=255)
	irrigation_method: IrrigationMethodEnum = IrrigationMethodEnum.drip
	health_score: float = Field(default=100.0, ge=0, le=100)
	soil_data: SoilData | None = None
	current_stage: str | None = Field(default=None, max_length=100)
	target_yield: float = Field(default=10.0, ge=0)


class CropRecord(CropCreate):
	"""A registered crop plot, the primary input to every advisory calculator."""

	model_config = ConfigDict(from_attributes=True)

	crop_id: uuid.UUID = Field(default_factory=uuid.uuid4)
	activities: list[Activity] = Field(default_factory=list)
	costs: list[CostRecord] = Field(default_factory=list)
	created_at: datetime | None = None
	updated_at: datetime | None = None

	@property
	def display_name(self) -> str:
		if self.variety:
			return f"{self.crop_type} ({self.variety})"
		return self.crop_type


class CropListRead(BaseModel):
	items: list[CropRecord]
