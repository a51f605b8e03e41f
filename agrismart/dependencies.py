"""FastAPI dependency providers for repositories and upstream services."""

from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from agrismart.config import get_settings
from agrismart.database import get_db
from agrismart.services.advisory_service import AdvisoryService
from agrismart.services.crop_repository import CropRepository, SqlCropRepository
from agrismart.services.market_service import InMemoryMarketPriceSource, MarketPriceSource, PriceAnalyticsService
from agrismart.services.weather_service import WeatherService


async def get_crop_repository(db: AsyncSession = Depends(get_db)) -> CropRepository:
	return SqlCropRepository(db)


def get_market_source(request: Request) -> MarketPriceSource:
	source = getattr(request.app.state, "market_source", None)
	if source is None:
		source = InMemoryMarketPriceSource()
		request.app.state.market_source = source
	return source


def get_weather_service(request: Request) -> WeatherService:
	return WeatherService(
		getattr(request.app.state, "redis", None),
		getattr(request.app.state, "http_client", None),
		get_settings(),
	)


def get_price_analytics() -> PriceAnalyticsService:
	return PriceAnalyticsService(seed=get_settings().random_seed)


def get_advisory_service(
	crops: CropRepository = Depends(get_crop_repository),
	weather: WeatherService = Depends(get_weather_service),
	market_source: MarketPriceSource = Depends(get_market_source),
) -> AdvisoryService:
	return AdvisoryService(crops, weather, market_source, get_settings())
