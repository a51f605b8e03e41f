"""Mandi price source and price-history analytics service."""

from __future__ import annotations

import logging
import random
from datetime import UTC, datetime
from typing import Protocol

from agrismart.core import market
from agrismart.schemas.common import ServiceResult
from agrismart.schemas.market import (
	MarketPrice,
	PriceHistoryFilters,
	PriceHistoryResponse,
	PriceStatsResponse,
)

_logger = logging.getLogger("agrismart.market")


class MarketPriceSource(Protocol):
	async def latest_prices(self) -> ServiceResult[list[MarketPrice]]: ...


def default_quotes() -> list[MarketPrice]:
	now = datetime.now(UTC)
	return [
		MarketPrice(
			market_id="m1",
			crop_type="Onion",
			price=2450.00,
			date=now,
			mandi_name="Lasalgaon APMC",
			location="Nashik, MH",
			change="+120",
		),
		MarketPrice(
			market_id="m2",
			crop_type="Grape (Thompson)",
			price=75.00,
			date=now,
			mandi_name="Pimpalgaon APMC",
			location="Nashik, MH",
			change="+5.00",
		),
	]


class InMemoryMarketPriceSource:
	"""Quote board held in process memory; ``publish`` replaces a crop's quote."""

	def __init__(self, quotes: list[MarketPrice] | None = None) -> None:
		self._quotes: dict[str, MarketPrice] = {
			quote.market_id: quote for quote in (default_quotes() if quotes is None else quotes)
		}

	async def latest_prices(self) -> ServiceResult[list[MarketPrice]]:
		return ServiceResult.ok(list(self._quotes.values()))

	def publish(self, quote: MarketPrice) -> None:
		self._quotes[quote.market_id] = quote


class PriceAnalyticsService:
	def __init__(self, seed: int | None = None):
		self.seed = seed

	def _rng(self, filters: PriceHistoryFilters) -> random.Random:
		return random.Random(filters.seed if filters.seed is not None else self.seed)

	def history(self, filters: PriceHistoryFilters) -> PriceHistoryResponse:
		items = market.generate_price_history(filters, self._rng(filters))
		_logger.info(
			"price_history_generated",
			extra={"crop_type": filters.crop_type, "market": filters.market_location, "points": len(items)},
		)
		return PriceHistoryResponse(items=items)

	def stats(self, filters: PriceHistoryFilters) -> PriceStatsResponse:
		items = market.generate_price_history(filters, self._rng(filters))
		return PriceStatsResponse(
			stats=market.price_stats([item.price for item in items]),
			seasonal=market.monthly_aggregates(items),
		)
