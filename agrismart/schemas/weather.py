"""Pydantic schemas for weather snapshots."""

from __future__ import annotations

from datetime import UTC, date, datetime

from pydantic import BaseModel, ConfigDict, Field


class HourlyForecast(BaseModel):
	model_config = ConfigDict(frozen=True)

	time: str = ""
	temp: float = 0.0
	rainfall: float = Field(default=0.0, ge=0)
	humidity: float = Field(default=0.0, ge=0, le=100)
	condition: str = "Unknown"


class DailyForecast(BaseModel):
	model_config = ConfigDict(frozen=True)

	date: date
	temp: float
	condition: str = "Unknown"


class WeatherAlert(BaseModel):
	model_config = ConfigDict(frozen=True)

	id: str
	type: str
	severity: str
	message: str
	start_time: datetime
	end_time: datetime


class WeatherSnapshot(BaseModel):
	"""Point-in-time reading plus forecast sequences; immutable once fetched."""

	model_config = ConfigDict(frozen=True)

	temperature: float
	humidity: float = Field(ge=0, le=100)
	wind_speed: float = Field(default=0.0, ge=0)
	rainfall: float = Field(default=0.0, ge=0)
	condition: str = "Unknown"
	location_id: str = ""
	location_name: str = ""
	timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
	alerts: tuple[WeatherAlert, ...] = ()
	hourly_forecast: tuple[HourlyForecast, ...] = ()
	forecast_7day: tuple[DailyForecast, ...] = ()

	def rainfall_next_hours(self, hours: int = 24) -> float:
		return sum(item.rainfall for item in self.hourly_forecast[:hours])
