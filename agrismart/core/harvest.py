"""Harvest timing trade-offs: harvest now versus holding for a better price."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from agrismart.core.common import require_positive
from agrismart.models.enums import WeatherSuitabilityEnum
from agrismart.schemas.crops import CropRecord
from agrismart.schemas.harvest import (
	HarvestAdvisory,
	HarvestScenario,
	HarvestWindow,
	LaborTask,
	MaturityMetric,
)
from agrismart.schemas.weather import WeatherSnapshot

BASE_PRICES: dict[str, float] = {"Onion": 2400, "Grape": 7500}
DEFAULT_BASE_PRICE = 1800.0
TONS_PER_ACRE: dict[str, float] = {"Grape": 8}
DEFAULT_TONS_PER_ACRE = 15.0
RAIN_SUITABILITY_THRESHOLD_MM = 5.0
HARVEST_INDEX = 72


@dataclass(frozen=True, slots=True)
class HoldOption:
	label: str
	delay_days: int
	price_factor: float
	weight_factor: float
	shrinkage_percent: float
	storage_cost_per_ton: float
	confidence: float


HOLD_OPTIONS: tuple[HoldOption, ...] = (
	HoldOption("Harvest Now", 0, 1.0, 1.0, 0.0, 0.0, 0.98),
	HoldOption("Delay 5 Days", 5, 1.15, 1.05, 2.0, 250.0, 0.82),
	HoldOption("Wait 10 Days", 10, 1.25, 1.10, 5.0, 500.0, 0.65),
)

MATURITY_METRICS: dict[str, tuple[MaturityMetric, ...]] = {
	"Grape": (
		MaturityMetric(name="Brix Content", value=16.5, target=18.0, status="pending", unit="°Bx"),
		MaturityMetric(name="Berry Size", value=18, target=18, status="optimal", unit="mm"),
		MaturityMetric(name="Acid Level", value=0.8, target=0.6, status="pending", unit="%"),
	),
	"Onion": (
		MaturityMetric(name="Neck Fall", value="45%", target="70%", status="pending"),
		MaturityMetric(name="Bulb Size", value=65, target=60, status="optimal", unit="mm"),
		MaturityMetric(name="Skin Curing", value="Light", target="Medium", status="pending"),
	),
	"Tomato": (
		MaturityMetric(name="Color Stage", value="Breaker", target="Red Ripe", status="pending"),
		MaturityMetric(name="Firmness", value=8.5, target=6.0, status="optimal", unit="kg/cm²"),
	),
}

LABOR_CHECKLIST: tuple[LaborTask, ...] = (
	LaborTask(item="Contact 12 picking crew members", completed=True),
	LaborTask(item="Clean plastic crates (600 units)"),
	LaborTask(item="Verify cold storage slot booking"),
	LaborTask(item="Book 3-ton transport vehicle"),
)
MARKET_CONTEXT = (
	"Upcoming Holi festival is driving demand in Northern mandis. Prices expected to peak within 7 days."
)


def base_price(crop_type: str) -> float:
	return BASE_PRICES.get(crop_type, DEFAULT_BASE_PRICE)


def base_yield_tons(crop: CropRecord) -> float:
	return crop.farm_size * TONS_PER_ACRE.get(crop.crop_type, DEFAULT_TONS_PER_ACRE)


def build_scenario(option: HoldOption, price: float, weight: float, today: date) -> HarvestScenario:
	estimated_price = price * option.price_factor
	estimated_weight = weight * option.weight_factor
	storage_cost = weight * option.storage_cost_per_ton
	sellable = estimated_weight * (1 - option.shrinkage_percent / 100)
	gross = sellable * estimated_price
	return HarvestScenario(
		date=today + timedelta(days=option.delay_days),
		label=option.label,
		estimated_price=round(estimated_price, 2),
		estimated_weight=round(estimated_weight, 3),
		storage_cost=round(storage_cost, 2),
		shrinkage_loss=option.shrinkage_percent,
		gross_return=round(gross, 2),
		net_return=round(gross - storage_cost, 2),
		confidence=option.confidence,
	)


def harvest_advisory(
	crop: CropRecord,
	weather: WeatherSnapshot,
	today: date | None = None,
) -> HarvestAdvisory:
	require_positive("farm_size", crop.farm_size)
	today = today or date.today()
	price = base_price(crop.crop_type)
	weight = base_yield_tons(crop)
	scenarios = [build_scenario(option, price, weight, today) for option in HOLD_OPTIONS]
	best = max(scenarios, key=lambda item: item.net_return)

	rainy = weather.rainfall > RAIN_SUITABILITY_THRESHOLD_MM
	metrics = MATURITY_METRICS.get(crop.crop_type, MATURITY_METRICS["Tomato"])

	return HarvestAdvisory(
		crop_id=crop.crop_id,
		crop_type=crop.crop_type,
		optimal_window=HarvestWindow(start=today + timedelta(days=4), end=today + timedelta(days=8)),
		harvest_index=HARVEST_INDEX,
		maturity_metrics=[metric.model_copy() for metric in metrics],
		scenarios=scenarios,
		best_scenario=best.label,
		weather_suitability=WeatherSuitabilityEnum.poor if rainy else WeatherSuitabilityEnum.excellent,
		weather_reason=(
			"Rain expected. High risk of bunch rot and soil compaction."
			if rainy
			else "Dry, cool window detected. Ideal for post-harvest shelf life."
		),
		labor_checklist=[task.model_copy() for task in LABOR_CHECKLIST],
		market_context=MARKET_CONTEXT,
	)
