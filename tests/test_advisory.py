from __future__ import annotations

import random
import uuid
from collections.abc import Callable
from datetime import date
from unittest.mock import AsyncMock

import pytest

from agrismart.config import Settings
from agrismart.core.advisory import assemble_advisory, market_outlook
from agrismart.models.enums import IrrigationActionEnum, PriceTrendEnum
from agrismart.schemas.common import ServiceResult
from agrismart.schemas.crops import CropRecord
from agrismart.schemas.weather import WeatherSnapshot
from agrismart.services.advisory_service import AdvisoryService
from agrismart.services.crop_repository import InMemoryCropRepository
from agrismart.services.market_service import InMemoryMarketPriceSource, default_quotes

AS_OF = date(2024, 3, 20)


def _weather_stub(result: ServiceResult[WeatherSnapshot]) -> AsyncMock:
	stub = AsyncMock()
	stub.get_for_location = AsyncMock(return_value=result)
	return stub


def test_market_outlook_for_rising_onion() -> None:
	outlook = market_outlook("Onion", default_quotes())

	assert outlook.trend == PriceTrendEnum.up
	assert outlook.price == 2450.0
	assert "Lasalgaon" in outlook.recommendation


def test_market_outlook_without_quote_is_flat() -> None:
	outlook = market_outlook("Tomato", default_quotes())

	assert outlook.price == 0.0
	assert outlook.trend == PriceTrendEnum.down
	assert outlook.mandi_name is None


def test_grape_outlook_names_the_mandi() -> None:
	outlook = market_outlook("Grape", default_quotes())
	assert "Pimpalgaon APMC" in outlook.recommendation


def test_assemble_combines_stage_tasks_risks_and_market(
	crop_factory: Callable[..., CropRecord], weather_factory: Callable[..., WeatherSnapshot]
) -> None:
	crop = crop_factory(crop_type="Onion", planting_date=date(2024, 1, 1))
	advisory = assemble_advisory(crop, weather_factory(temperature=34.0, humidity=40.0), default_quotes(), as_of=AS_OF)

	assert advisory.crop_id == crop.crop_id
	assert advisory.stage.dap == 79
	assert advisory.stage.stage_name == "Bulb Initiation"
	assert [task.id for task in advisory.weekly_tasks] == ["ot1", "ot2", "ot3"]
	assert [item.name for item in advisory.risks] == ["Purple Blotch", "Onion Thrips"]
	assert advisory.market.trend == PriceTrendEnum.up
	assert len(advisory.extras["curing_tips"]) == 3


def test_unknown_crop_gets_default_tasks_without_extras(
	crop_factory: Callable[..., CropRecord], weather_factory: Callable[..., WeatherSnapshot]
) -> None:
	advisory = assemble_advisory(crop_factory(crop_type="Okra"), weather_factory(), [], as_of=AS_OF)

	assert [task.id for task in advisory.weekly_tasks] == ["tt1", "tt2", "tt3"]
	assert advisory.extras == {}


@pytest.mark.asyncio
async def test_build_for_crop_succeeds_with_live_inputs(
	crop_factory: Callable[..., CropRecord],
	weather_factory: Callable[..., WeatherSnapshot],
	settings: Settings,
) -> None:
	crop = crop_factory(crop_type="Grape")
	service = AdvisoryService(
		InMemoryCropRepository([crop]),
		_weather_stub(ServiceResult.ok(weather_factory(temperature=24.0, humidity=85.0))),
		InMemoryMarketPriceSource(),
		settings,
	)

	result = await service.build_for_crop(crop.crop_id, AS_OF)

	assert result.success
	assert result.data.risks[0].score == 75
	assert result.data.market.mandi_name == "Pimpalgaon APMC"


@pytest.mark.asyncio
async def test_weather_failure_short_circuits(crop_factory: Callable[..., CropRecord], settings: Settings) -> None:
	crop = crop_factory()
	market = AsyncMock()
	market.latest_prices = AsyncMock()
	service = AdvisoryService(
		InMemoryCropRepository([crop]),
		_weather_stub(ServiceResult.fail("Weather service unavailable")),
		market,
		settings,
	)

	result = await service.build_for_crop(crop.crop_id, AS_OF)

	assert not result.success
	assert result.data is None
	assert result.error == "Weather service unavailable"
	market.latest_prices.assert_not_awaited()


@pytest.mark.asyncio
async def test_market_failure_short_circuits(
	crop_factory: Callable[..., CropRecord],
	weather_factory: Callable[..., WeatherSnapshot],
	settings: Settings,
) -> None:
	crop = crop_factory()
	market = AsyncMock()
	market.latest_prices = AsyncMock(return_value=ServiceResult.fail("mandi feed down"))
	service = AdvisoryService(
		InMemoryCropRepository([crop]),
		_weather_stub(ServiceResult.ok(weather_factory())),
		market,
		settings,
	)

	result = await service.build_for_crop(crop.crop_id, AS_OF)

	assert not result.success
	assert result.error == "mandi feed down"


@pytest.mark.asyncio
async def test_missing_crop_raises_lookup_error(settings: Settings) -> None:
	service = AdvisoryService(
		InMemoryCropRepository(),
		_weather_stub(ServiceResult.fail("unused")),
		InMemoryMarketPriceSource(),
		settings,
	)

	with pytest.raises(LookupError):
		await service.build_for_crop(uuid.uuid4())


@pytest.mark.asyncio
async def test_irrigation_for_crop_uses_settings_ordering(
	crop_factory: Callable[..., CropRecord],
	weather_factory: Callable[..., WeatherSnapshot],
) -> None:
	crop = crop_factory(crop_type="Grape", current_stage="Sprouting")
	weather = weather_factory(temperature=38.0, humidity=100.0, rain_next_24h=9.0)
	settings = Settings(irrigation_heat_override_first=False, irrigation_schedule_time="06:30", random_seed=1)
	service = AdvisoryService(
		InMemoryCropRepository([crop]),
		_weather_stub(ServiceResult.ok(weather)),
		InMemoryMarketPriceSource(),
		settings,
		rng=random.Random(1),
	)

	result = await service.irrigation_for_crop(crop.crop_id)

	item = result.data.items[0]
	assert item.action == IrrigationActionEnum.delay
	assert item.scheduled_time == "06:30"
	assert item.moisture_level is not None
	assert result.data.soil_type.value == "Black"
