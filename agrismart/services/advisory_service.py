"""Advisory orchestration: joins crop registry, weather and market data."""

from __future__ import annotations

import logging
import random
import uuid
from datetime import UTC, date, datetime

from agrismart.config import Settings, get_settings
from agrismart.core import harvest, impact, irrigation, nutrients
from agrismart.core.advisory import assemble_advisory
from agrismart.core.common import RandomSource
from agrismart.models.enums import SoilTypeEnum
from agrismart.schemas.advisory import CropAdvisory, IrrigationResponse
from agrismart.schemas.common import ServiceResult
from agrismart.schemas.crops import CropRecord
from agrismart.schemas.harvest import HarvestAdvisory
from agrismart.schemas.impact import NutrientAdvisory, WeatherImpactAssessment
from agrismart.services.crop_repository import CropRepository
from agrismart.services.market_service import MarketPriceSource
from agrismart.services.weather_service import WeatherService

_logger = logging.getLogger("agrismart.advisory")


class AdvisoryService:
	def __init__(
		self,
		crops: CropRepository,
		weather: WeatherService,
		market_source: MarketPriceSource,
		settings: Settings | None = None,
		rng: RandomSource | None = None,
	):
		self.crops = crops
		self.weather = weather
		self.market_source = market_source
		self.settings = settings or get_settings()
		self.rng = rng or random.Random(self.settings.random_seed)

	async def build_for_crop(self, crop_id: uuid.UUID, as_of: date | None = None) -> ServiceResult[CropAdvisory]:
		crop = await self.crops.get(crop_id)
		return await self.build_for_record(crop, as_of)

	async def build_for_record(self, crop: CropRecord, as_of: date | None = None) -> ServiceResult[CropAdvisory]:
		"""Fetch weather and market data, then assemble; any upstream failure short-circuits."""
		weather = await self.weather.get_for_location()
		if not weather.success or weather.data is None:
			return self._upstream_failed(crop, "weather", weather.error)

		market = await self.market_source.latest_prices()
		if not market.success or market.data is None:
			return self._upstream_failed(crop, "market", market.error)

		advisory = assemble_advisory(crop, weather.data, market.data, as_of=as_of)
		_logger.info(
			"advisory_assembled",
			extra={"crop_id": str(crop.crop_id), "crop_type": crop.crop_type, "stage": advisory.stage.stage_name},
		)
		return ServiceResult.ok(advisory)

	async def irrigation_for_crop(
		self,
		crop_id: uuid.UUID,
		soil_type: SoilTypeEnum | None = None,
		as_of: date | None = None,
	) -> ServiceResult[IrrigationResponse]:
		crop = await self.crops.get(crop_id)
		weather = await self.weather.get_for_location()
		if not weather.success or weather.data is None:
			return self._upstream_failed(crop, "weather", weather.error)

		soil = soil_type or SoilTypeEnum(self.settings.default_soil_type.value)
		item = irrigation.recommend(
			crop,
			weather.data,
			soil,
			as_of=as_of,
			rng=self.rng,
			heat_override_first=self.settings.irrigation_heat_override_first,
			scheduled_time=self.settings.irrigation_schedule_time,
		)
		return ServiceResult.ok(IrrigationResponse(generated_at=datetime.now(UTC), soil_type=soil, items=[item]))

	async def harvest_for_crop(self, crop_id: uuid.UUID, today: date | None = None) -> ServiceResult[HarvestAdvisory]:
		crop = await self.crops.get(crop_id)
		weather = await self.weather.get_for_location()
		if not weather.success or weather.data is None:
			return self._upstream_failed(crop, "weather", weather.error)
		return ServiceResult.ok(harvest.harvest_advisory(crop, weather.data, today))

	async def impact_for_crop(self, crop_id: uuid.UUID) -> ServiceResult[WeatherImpactAssessment]:
		crop = await self.crops.get(crop_id)
		weather = await self.weather.get_for_location()
		if not weather.success or weather.data is None:
			return self._upstream_failed(crop, "weather", weather.error)
		return ServiceResult.ok(impact.assess_impact(crop, weather.data))

	async def nutrients_for_crop(self, crop_id: uuid.UUID) -> NutrientAdvisory:
		return nutrients.nutrient_advisory(await self.crops.get(crop_id))

	@staticmethod
	def _upstream_failed(crop: CropRecord, source: str, error: str | None) -> ServiceResult:
		_logger.warning(
			"advisory_upstream_failed",
			extra={"crop_id": str(crop.crop_id), "source": source, "error": error},
		)
		return ServiceResult.fail(error or f"{source} data unavailable")
