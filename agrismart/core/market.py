"""Mandi price helpers: trend lookup, seasonal history, price statistics."""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Sequence
from datetime import date, timedelta

from agrismart.core.common import InvalidInputError, RandomSource, round_half_up
from agrismart.models.enums import PriceTrendEnum
from agrismart.schemas.market import (
	HistoricalPrice,
	MarketPrice,
	MonthlyAggregate,
	PriceHistoryFilters,
	PriceStats,
)

ALL = "All"
BASE_PRICES: dict[str, float] = {
	"Tomato": 2500,
	"Onion": 1800,
	"Grape": 4500,
	ALL: 3000,
}
MARKETS = ("Lasalgaon", "Pimpalgaon", "Nashik", "Dindori")
MARKET_ADJUSTMENTS: dict[str, float] = {
	"Lasalgaon": 1.05,
	"Pimpalgaon": 0.98,
}
HISTORY_STEP_DAYS = 7


def find_market_entry(prices: Sequence[MarketPrice], crop_type: str) -> MarketPrice | None:
	return next((item for item in prices if crop_type in item.crop_type), None)


def price_trend(entry: MarketPrice | None) -> PriceTrendEnum:
	if entry is not None and entry.change.startswith("+"):
		return PriceTrendEnum.up
	return PriceTrendEnum.down


def seasonal_multiplier(crop_type: str, month: int) -> float:
	"""Calendar-month demand factor (month is 1-12)."""
	if crop_type == "Tomato":
		if month >= 11 or month <= 3:
			return 1.3
		if 7 <= month <= 9:
			return 0.7
	elif crop_type == "Onion":
		if 4 <= month <= 6:
			return 1.4
		if 10 <= month <= 12:
			return 0.8
	elif crop_type == "Grape":
		if 5 <= month <= 7:
			return 1.2
		if month == 12 or month <= 2:
			return 0.9
	return 1.0


def market_adjusted(price: int, market: str) -> int:
	factor = MARKET_ADJUSTMENTS.get(market)
	if factor is None:
		return price
	return round_half_up(price * factor)


def generate_price_history(filters: PriceHistoryFilters, rng: RandomSource) -> list[HistoricalPrice]:
	"""Weekly-sampled synthetic price series with seasonal and market effects."""
	markets = list(MARKETS) if filters.market_location == ALL else [filters.market_location]
	crops = ["Tomato", "Onion", "Grape"] if filters.crop_type == ALL else [filters.crop_type]

	items: list[HistoricalPrice] = []
	for current in history_dates(filters.start_date, filters.end_date):
		for crop in crops:
			base = BASE_PRICES.get(crop, BASE_PRICES[ALL])
			multiplier = seasonal_multiplier(crop, current.month)
			for market in markets:
				variation = 0.85 + rng.random() * 0.3
				price = market_adjusted(round_half_up(base * multiplier * variation), market)
				items.append(
					HistoricalPrice(
						date=current,
						crop_type=crop,
						market_location=market,
						price=price,
						min_price=round_half_up(price * 0.92),
						max_price=round_half_up(price * 1.08),
						volume=math.floor(1000 + rng.random() * 5000),
					)
				)

	items.sort(key=lambda item: item.date)
	return items


def price_stats(prices: Sequence[float]) -> PriceStats:
	if not prices:
		raise InvalidInputError("price statistics need at least one price")
	ordered = sorted(prices)
	count = len(ordered)
	average = sum(ordered) / count
	variance = sum((price - average) ** 2 for price in ordered) / count
	return PriceStats(
		average=average,
		min=ordered[0],
		max=ordered[-1],
		median=ordered[count // 2],
		std_dev=math.sqrt(variance),
	)


def monthly_aggregates(history: Sequence[HistoricalPrice]) -> list[MonthlyAggregate]:
	buckets: dict[tuple[str, int], list[int]] = defaultdict(list)
	for item in history:
		buckets[(item.crop_type, item.date.month)].append(item.price)

	return [
		MonthlyAggregate(
			crop_type=crop_type,
			month=month,
			average_price=round(sum(values) / len(values), 2),
			min_price=min(values),
			max_price=max(values),
			samples=len(values),
		)
		for (crop_type, month), values in sorted(buckets.items())
	]


def history_dates(start: date, end: date) -> list[date]:
	return [start + timedelta(days=offset) for offset in range(0, (end - start).days, HISTORY_STEP_DAYS)]
