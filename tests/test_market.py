from __future__ import annotations

import math
import random
from datetime import UTC, date, datetime

import pytest
from httpx import AsyncClient
from pydantic import ValidationError

from agrismart.core import market
from agrismart.core.common import InvalidInputError
from agrismart.models.enums import PriceTrendEnum
from agrismart.schemas.market import MarketPrice, PriceHistoryFilters
from agrismart.services.market_service import InMemoryMarketPriceSource, PriceAnalyticsService, default_quotes


def _quote(crop_type: str, change: str) -> MarketPrice:
	return MarketPrice(
		market_id="m9",
		crop_type=crop_type,
		price=100.0,
		date=datetime.now(UTC),
		mandi_name="Nashik APMC",
		location="Nashik, MH",
		change=change,
	)


def test_trend_follows_sign_of_change() -> None:
	assert market.price_trend(_quote("Onion", "+12")) == PriceTrendEnum.up
	assert market.price_trend(_quote("Onion", "-12")) == PriceTrendEnum.down
	assert market.price_trend(None) == PriceTrendEnum.down


def test_market_entry_matches_on_substring() -> None:
	quotes = default_quotes()

	assert market.find_market_entry(quotes, "Grape").mandi_name == "Pimpalgaon APMC"
	assert market.find_market_entry(quotes, "Tomato") is None


def test_seasonal_multipliers_use_calendar_months() -> None:
	assert market.seasonal_multiplier("Tomato", 12) == 1.3
	assert market.seasonal_multiplier("Tomato", 8) == 0.7
	assert market.seasonal_multiplier("Onion", 5) == 1.4
	assert market.seasonal_multiplier("Grape", 1) == 0.9
	assert market.seasonal_multiplier("Grape", 10) == 1.0


def test_price_stats_uses_upper_median_and_population_deviation() -> None:
	stats = market.price_stats([4, 1, 3, 2])

	assert stats.average == 2.5
	assert stats.median == 3
	assert stats.min == 1
	assert stats.max == 4
	assert stats.std_dev == pytest.approx(math.sqrt(1.25))


def test_price_stats_of_empty_series_is_rejected() -> None:
	with pytest.raises(InvalidInputError):
		market.price_stats([])


def test_history_is_weekly_and_deterministic_for_a_seed() -> None:
	filters = PriceHistoryFilters(
		crop_type="Onion",
		market_location="Lasalgaon",
		start_date=date(2024, 1, 1),
		end_date=date(2024, 1, 29),
	)

	first = market.generate_price_history(filters, random.Random(11))
	second = market.generate_price_history(filters, random.Random(11))

	assert [item.date for item in first] == [date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 15), date(2024, 1, 22)]
	assert first == second
	for item in first:
		assert 1606 <= item.price <= 2174
		assert item.min_price <= item.price <= item.max_price


def test_history_for_all_crops_and_markets_is_sorted_by_date() -> None:
	filters = PriceHistoryFilters(start_date=date(2024, 3, 1), end_date=date(2024, 3, 15))

	items = market.generate_price_history(filters, random.Random(1))

	assert len(items) == 2 * 3 * len(market.MARKETS)
	assert [item.date for item in items] == sorted(item.date for item in items)


def test_monthly_aggregates_group_by_crop_and_month() -> None:
	filters = PriceHistoryFilters(crop_type="Tomato", start_date=date(2024, 1, 1), end_date=date(2024, 3, 1))
	items = market.generate_price_history(filters, random.Random(5))

	aggregates = market.monthly_aggregates(items)

	assert [(row.crop_type, row.month) for row in aggregates] == [("Tomato", 1), ("Tomato", 2)]
	assert sum(row.samples for row in aggregates) == len(items)


def test_inverted_range_is_rejected() -> None:
	with pytest.raises(ValidationError):
		PriceHistoryFilters(start_date=date(2024, 2, 1), end_date=date(2024, 1, 1))


def test_analytics_service_prefers_request_seed() -> None:
	service = PriceAnalyticsService(seed=1)
	filters = PriceHistoryFilters(crop_type="Grape", start_date=date(2024, 5, 1), end_date=date(2024, 6, 1), seed=99)

	assert service.history(filters) == service.history(filters)
	assert service.stats(filters).stats.max >= service.stats(filters).stats.min


@pytest.mark.asyncio
async def test_publish_replaces_quote() -> None:
	source = InMemoryMarketPriceSource()
	source.publish(_quote("Onion", "-40").model_copy(update={"market_id": "m1"}))

	result = await source.latest_prices()

	assert result.success
	onion = next(item for item in result.data if item.market_id == "m1")
	assert onion.change == "-40"


@pytest.mark.asyncio
async def test_market_routes(client: AsyncClient) -> None:
	prices = await client.get("/api/v1/market/prices")
	assert prices.status_code == 200
	assert {item["market_id"] for item in prices.json()["items"]} == {"m1", "m2"}

	payload = {"crop_type": "Onion", "start_date": "2024-04-01", "end_date": "2024-06-30", "seed": 3}
	history = await client.post("/api/v1/market/history", json=payload)
	assert history.status_code == 200
	assert len(history.json()["items"]) == 13 * len(market.MARKETS)

	stats = await client.post("/api/v1/market/stats", json=payload)
	assert stats.status_code == 200
	assert [row["month"] for row in stats.json()["seasonal"]] == [4, 5, 6]


@pytest.mark.asyncio
async def test_market_stats_with_empty_range_is_bad_request(client: AsyncClient) -> None:
	response = await client.post(
		"/api/v1/market/stats",
		json={"start_date": "2024-04-01", "end_date": "2024-04-01"},
	)
	assert response.status_code == 400
