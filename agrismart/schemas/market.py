"""Pydantic schemas for mandi prices and price analytics."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field, model_validator


class MarketPrice(BaseModel):
	market_id: str
	crop_type: str
	price: float = Field(ge=0)
	date: datetime
	mandi_name: str
	location: str = ""
	change: str = "0"


class MarketPricesResponse(BaseModel):
	items: list[MarketPrice] = Field(default_factory=list)


class PriceHistoryFilters(BaseModel):
	crop_type: str = "All"
	market_location: str = "All"
	start_date: date
	end_date: date
	seed: int | None = None

	@model_validator(mode="after")
	def _validate_range(self) -> "PriceHistoryFilters":
		if self.end_date < self.start_date:
			raise ValueError("end_date must not precede start_date")
		return self


class HistoricalPrice(BaseModel):
	date: date
	crop_type: str
	market_location: str
	price: int
	min_price: int
	max_price: int
	volume: int


class PriceHistoryResponse(BaseModel):
	items: list[HistoricalPrice] = Field(default_factory=list)


class PriceStats(BaseModel):
	average: float
	min: float
	max: float
	median: float
	std_dev: float


class MonthlyAggregate(BaseModel):
	crop_type: str
	month: int = Field(ge=1, le=12)
	average_price: float
	min_price: int
	max_price: int
	samples: int


class PriceStatsResponse(BaseModel):
	stats: PriceStats
	seasonal: list[MonthlyAggregate] = Field(default_factory=list)
