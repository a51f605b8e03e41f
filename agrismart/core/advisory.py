"""Per-crop advisory assembly: stage + weekly tasks + risks + market outlook."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, date, datetime
from typing import Any

from agrismart.core import phenology, risk
from agrismart.core.market import find_market_entry, price_trend
from agrismart.models.enums import PriceTrendEnum
from agrismart.schemas.advisory import AdvisoryTask, CropAdvisory, MarketOutlook
from agrismart.schemas.crops import CropRecord
from agrismart.schemas.market import MarketPrice
from agrismart.schemas.weather import WeatherSnapshot

WEEKLY_TASKS: dict[str, tuple[AdvisoryTask, ...]] = {
	"Grape": (
		AdvisoryTask(
			id="gt1",
			title="Foundation Pruning Prep",
			description="Apply copper hydroxide to open wounds post-harvest pruning.",
			priority="high",
			category="pruning",
		),
		AdvisoryTask(
			id="gt2",
			title="GA Application (Berry Set)",
			description="Dilute GA3 to 20ppm for fruit enlargement in Thompson variety.",
			priority="medium",
			category="nutrition",
		),
		AdvisoryTask(
			id="gt3",
			title="Girdling (Stage: Veraison)",
			description="Girdle main trunk to increase sugar accumulation and berry size.",
			priority="medium",
			category="pruning",
			is_completed=True,
		),
	),
	"Onion": (
		AdvisoryTask(
			id="ot1",
			title="Irrigation Cut-off Planning",
			description=(
				"Identify if 50% neck fall is reached. Stop irrigation 15 days before "
				"harvest for better shelf life."
			),
			priority="high",
			category="harvest",
		),
		AdvisoryTask(
			id="ot2",
			title="Stemphylium Spray",
			description="Apply preventive fungicide if morning dew is heavy in the Nashik valley.",
			priority="medium",
			category="protection",
		),
		AdvisoryTask(
			id="ot3",
			title="NPK Top Dressing",
			description="Apply last dose of Nitrogen if bulb initiation has just started.",
			priority="low",
			category="nutrition",
			is_completed=True,
		),
	),
	"Tomato": (
		AdvisoryTask(
			id="tt1",
			title="Trellis & Staking Reinforcement",
			description=(
				"Ensure bamboo stakes are secure. Fruit clusters are getting heavy; "
				"double tie the main stem."
			),
			priority="high",
			category="staking",
		),
		AdvisoryTask(
			id="tt2",
			title="Foliar Calcium Spray",
			description=(
				"Prevent Blossom End Rot by applying Calcium Nitrate during high-heat "
				"afternoon peaks."
			),
			priority="medium",
			category="protection",
		),
		AdvisoryTask(
			id="tt3",
			title="Lower Leaf Pruning",
			description=(
				"Remove bottom leaves touching the soil to improve airflow and prevent "
				"soil-borne blight."
			),
			priority="low",
			category="protection",
			is_completed=True,
		),
	),
}


def _grape_market_text(trend: PriceTrendEnum, entry: MarketPrice | None) -> str:
	if trend == PriceTrendEnum.up:
		mandi = entry.mandi_name if entry is not None else "the local mandi"
		return f"Prices in {mandi} are rising. Delay harvest by 3 days if Brix > 16."
	return "Market stable. Recommend standard harvest window."


def _onion_market_text(trend: PriceTrendEnum, _entry: MarketPrice | None) -> str:
	if trend == PriceTrendEnum.up:
		return (
			"Prices in Lasalgaon are peaking. If bulbs are mature (75% neck fall), "
			"harvest immediately to capture current rates."
		)
	return "Market stable. Ensure proper field curing for 3-5 days to maximize bulb quality and color."


def _tomato_market_text(trend: PriceTrendEnum, _entry: MarketPrice | None) -> str:
	if trend == PriceTrendEnum.up:
		return (
			"Fresh market prices in Nashik Mandi are rising. Harvest at 'Breaker' stage "
			"for long-distance transport to capture premium rates."
		)
	return (
		"Prices stable. If selling to nearby processing units, allow fruit to reach "
		"'Red Ripe' stage for maximum solids."
	)


MARKET_TEXT: dict[str, Callable[[PriceTrendEnum, MarketPrice | None], str]] = {
	"Grape": _grape_market_text,
	"Onion": _onion_market_text,
	"Tomato": _tomato_market_text,
}

EXTRAS: dict[str, dict[str, Any]] = {
	"Grape": {
		"next_spraying_window": "Tomorrow 06:00 - 09:00 (Low Wind Speed)",
	},
	"Onion": {
		"harvest_window": "June 05 - June 15 (Post-monsoon risk low)",
		"curing_tips": [
			"Leave harvested onions in rows for 3 days in the sun.",
			"Ensure bulbs are covered by leaves of the next row to avoid sunscald.",
			"Cut tops only when necks are completely dry to prevent rot during storage.",
		],
	},
	"Tomato": {
		"harvest_stages": [
			{"stage": "Breaker", "purpose": "Long distance transport (5-7 days shelf life)"},
			{"stage": "Pink/Turning", "purpose": "Local markets (2-3 days shelf life)"},
			{"stage": "Red Ripe", "purpose": "Immediate consumption or Processing"},
		],
		"staking_advice": (
			"Maintain a 'V' system for hybrid varieties to ensure maximum light "
			"penetration and easier spraying."
		),
	},
}

DEFAULT_CROP_TYPE = "Tomato"


def market_outlook(crop_type: str, market: Sequence[MarketPrice]) -> MarketOutlook:
	entry = find_market_entry(market, crop_type)
	trend = price_trend(entry)
	text = MARKET_TEXT.get(crop_type, MARKET_TEXT[DEFAULT_CROP_TYPE])
	return MarketOutlook(
		price=entry.price if entry is not None else 0.0,
		trend=trend,
		mandi_name=entry.mandi_name if entry is not None else None,
		recommendation=text(trend, entry),
	)


def assemble_advisory(
	crop: CropRecord,
	weather: WeatherSnapshot,
	market: Sequence[MarketPrice],
	*,
	as_of: date | None = None,
) -> CropAdvisory:
	stage = phenology.calculate_stage(crop.crop_type, crop.planting_date, as_of)
	tasks = WEEKLY_TASKS.get(crop.crop_type, WEEKLY_TASKS[DEFAULT_CROP_TYPE])
	extras = EXTRAS.get(crop.crop_type, {})

	return CropAdvisory(
		crop_id=crop.crop_id,
		crop_type=crop.crop_type,
		generated_at=datetime.now(UTC),
		stage=stage,
		weekly_tasks=[task.model_copy() for task in tasks],
		risks=risk.score_risks(crop.crop_type, weather),
		market=market_outlook(crop.crop_type, market),
		extras=dict(extras),
	)
