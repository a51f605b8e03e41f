"""Weather snapshot route."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from agrismart.dependencies import get_weather_service
from agrismart.schemas.weather import WeatherSnapshot
from agrismart.services.weather_service import WeatherService

router = APIRouter(prefix="/weather", tags=["weather"])


@router.get("", response_model=WeatherSnapshot)
async def get_weather(
	lat: float | None = Query(default=None, ge=-90, le=90),
	lng: float | None = Query(default=None, ge=-180, le=180),
	name: str | None = Query(default=None, max_length=200),
	service: WeatherService = Depends(get_weather_service),
) -> WeatherSnapshot:
	result = await service.get_for_location(name, lat, lng)
	if not result.success or result.data is None:
		raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.error)
	return result.data
