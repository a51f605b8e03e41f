from __future__ import annotations

from collections.abc import Callable
from datetime import date, timedelta

import pytest

from agrismart.core import harvest
from agrismart.models.enums import WeatherSuitabilityEnum
from agrismart.schemas.crops import CropRecord
from agrismart.schemas.weather import WeatherSnapshot

TODAY = date(2024, 4, 10)


def test_scenarios_trade_storage_against_price(
	crop_factory: Callable[..., CropRecord], weather_factory: Callable[..., WeatherSnapshot]
) -> None:
	crop = crop_factory(crop_type="Onion", farm_size=2.0)

	advisory = harvest.harvest_advisory(crop, weather_factory(), TODAY)

	now, delay, wait = advisory.scenarios
	assert now.label == "Harvest Now"
	assert now.date == TODAY
	assert now.net_return == pytest.approx(72000.0)
	assert delay.date == TODAY + timedelta(days=5)
	assert delay.storage_cost == pytest.approx(7500.0)
	assert delay.net_return == pytest.approx(77701.2)
	assert wait.net_return == pytest.approx(79050.0)
	assert advisory.best_scenario == "Wait 10 Days"


def test_rain_marks_harvest_weather_poor(
	crop_factory: Callable[..., CropRecord], weather_factory: Callable[..., WeatherSnapshot]
) -> None:
	advisory = harvest.harvest_advisory(crop_factory(crop_type="Grape"), weather_factory(rainfall=6.0), TODAY)

	assert advisory.weather_suitability == WeatherSuitabilityEnum.poor
	assert [metric.name for metric in advisory.maturity_metrics][0] == "Brix Content"


def test_window_and_index_are_fixed_offsets(
	crop_factory: Callable[..., CropRecord], weather_factory: Callable[..., WeatherSnapshot]
) -> None:
	advisory = harvest.harvest_advisory(crop_factory(), weather_factory(), TODAY)

	assert advisory.optimal_window.start == TODAY + timedelta(days=4)
	assert advisory.optimal_window.end == TODAY + timedelta(days=8)
	assert advisory.harvest_index == harvest.HARVEST_INDEX
	assert advisory.weather_suitability == WeatherSuitabilityEnum.excellent


def test_grape_yield_uses_lower_tonnage(crop_factory: Callable[..., CropRecord]) -> None:
	assert harvest.base_yield_tons(crop_factory(crop_type="Grape", farm_size=2.0)) == 16.0
	assert harvest.base_yield_tons(crop_factory(crop_type="Tomato", farm_size=2.0)) == 30.0


def test_advisory_carries_labor_checklist_and_market_context(
	crop_factory: Callable[..., CropRecord], weather_factory: Callable[..., WeatherSnapshot]
) -> None:
	advisory = harvest.harvest_advisory(crop_factory(crop_type="Onion"), weather_factory(), TODAY)

	assert len(advisory.labor_checklist) == 4
	assert [task.completed for task in advisory.labor_checklist] == [True, False, False, False]
	assert "Holi" in advisory.market_context

	advisory.labor_checklist[1].completed = True
	assert harvest.LABOR_CHECKLIST[1].completed is False
