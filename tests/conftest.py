"""Shared pytest fixtures: async test client, in-memory registry, upstream fakes."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from agrismart.config import Settings
from agrismart.database import get_db
from agrismart.dependencies import get_crop_repository, get_market_source, get_weather_service
from agrismart.main import app
from agrismart.models import Base
from agrismart.models.enums import IrrigationMethodEnum
from agrismart.schemas.crops import CropRecord
from agrismart.schemas.weather import HourlyForecast, WeatherSnapshot
from agrismart.services.crop_repository import InMemoryCropRepository
from agrismart.services.market_service import InMemoryMarketPriceSource
from agrismart.services.weather_service import WeatherService


class FakeAsyncSession:
	def __init__(self) -> None:
		self.commit = AsyncMock()
		self.rollback = AsyncMock()
		self.close = AsyncMock()
		self.execute = AsyncMock()
		self.flush = AsyncMock()
		self.refresh = AsyncMock()


class FakeRedis:
	def __init__(self) -> None:
		self.store: dict[str, str] = {}
		self.ttls: dict[str, int] = {}
		self.get = AsyncMock(side_effect=self._get)
		self.setex = AsyncMock(side_effect=self._setex)

	async def _get(self, key: str) -> str | None:
		return self.store.get(key)

	async def _setex(self, key: str, ttl: int, value: str) -> bool:
		self.store[key] = value
		self.ttls[key] = ttl
		return True


def open_meteo_body(
	temperature: float = 31.0,
	humidity: float = 55.0,
	wind_speed: float = 8.0,
	rain: float = 0.0,
	hourly_rain: float = 0.0,
) -> dict[str, Any]:
	hours = [f"2024-03-20T{hour:02d}:00" for hour in range(24)]
	return {
		"current": {
			"time": "2024-03-20T14:15",
			"temperature_2m": temperature,
			"relative_humidity_2m": humidity,
			"wind_speed_10m": wind_speed,
			"weather_code": 0,
			"rain": rain,
		},
		"hourly": {
			"time": hours,
			"temperature_2m": [temperature] * 24,
			"relative_humidity_2m": [humidity] * 24,
			"rain": [hourly_rain] * 24,
			"weather_code": [61 if hourly_rain else 1] * 24,
		},
		"daily": {
			"time": ["2024-03-20", "2024-03-21"],
			"weather_code": [0, 3],
			"temperature_2m_max": [34.0, 33.0],
			"temperature_2m_min": [19.0, 20.0],
		},
	}


def make_transport(
	forecast: dict[str, Any] | None = None,
	*,
	status_code: int = 200,
	calls: list[httpx.Request] | None = None,
	geocode: Callable[[], httpx.Response] | None = None,
) -> httpx.MockTransport:
	def handler(request: httpx.Request) -> httpx.Response:
		if calls is not None:
			calls.append(request)
		if "nominatim" in request.url.host:
			if geocode is not None:
				return geocode()
			return httpx.Response(200, json={"address": {"village": "Ozar"}})
		if status_code != 200:
			return httpx.Response(status_code, json={"error": True})
		return httpx.Response(200, json=forecast or open_meteo_body())

	return httpx.MockTransport(handler)


@pytest.fixture
def fake_db_session() -> FakeAsyncSession:
	"""A lightweight async-session stub for dependency overrides in API tests."""
	return FakeAsyncSession()


@pytest.fixture
def fake_redis() -> FakeRedis:
	"""Dict-backed fake Redis client with async get / setex."""
	return FakeRedis()


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
	"""A real AsyncSession on in-memory SQLite with every table created."""
	engine = create_async_engine("sqlite+aiosqlite://")
	async with engine.begin() as conn:
		await conn.run_sync(Base.metadata.create_all)

	session_factory = async_sessionmaker(engine, expire_on_commit=False)
	async with session_factory() as session:
		yield session
	await engine.dispose()


@pytest.fixture
def settings() -> Settings:
	return Settings(random_seed=7, check_database_on_startup=False)


@pytest.fixture
def crop_factory() -> Callable[..., CropRecord]:
	def _make(**overrides: Any) -> CropRecord:
		values: dict[str, Any] = {
			"crop_type": "Tomato",
			"variety": "Abhinav",
			"planting_date": date(2024, 2, 1),
			"farm_size": 3.0,
			"plot_location": "Plot B",
			"irrigation_method": IrrigationMethodEnum.drip,
			"health_score": 88,
		}
		values.update(overrides)
		return CropRecord(**values)

	return _make


@pytest.fixture
def weather_factory() -> Callable[..., WeatherSnapshot]:
	def _make(
		temperature: float = 30.0,
		humidity: float = 50.0,
		rain_next_24h: float = 0.0,
		rainfall: float = 0.0,
	) -> WeatherSnapshot:
		hourly = (HourlyForecast(time="14:00", temp=temperature, rainfall=rain_next_24h, humidity=humidity),)
		return WeatherSnapshot(
			temperature=temperature,
			humidity=humidity,
			rainfall=rainfall,
			location_name="Nashik",
			timestamp=datetime(2024, 3, 20, 9, 0, tzinfo=UTC),
			hourly_forecast=hourly,
		)

	return _make


@pytest.fixture
def forecast_body() -> Callable[..., dict[str, Any]]:
	return open_meteo_body


@pytest.fixture
def transport_factory() -> Callable[..., httpx.MockTransport]:
	return make_transport


@pytest.fixture
def crop_repository() -> InMemoryCropRepository:
	return InMemoryCropRepository()


@pytest.fixture
def market_source() -> InMemoryMarketPriceSource:
	return InMemoryMarketPriceSource()


@pytest.fixture
def weather_transport() -> httpx.MockTransport:
	return make_transport()


@pytest.fixture
async def client(
	fake_db_session: FakeAsyncSession,
	fake_redis: FakeRedis,
	crop_repository: InMemoryCropRepository,
	market_source: InMemoryMarketPriceSource,
	weather_transport: httpx.MockTransport,
	settings: Settings,
) -> AsyncGenerator[AsyncClient, None]:
	"""HTTPX async client with lifespan disabled and every upstream faked."""

	upstream = httpx.AsyncClient(transport=weather_transport)

	async def override_get_db() -> AsyncGenerator[Any, None]:
		yield fake_db_session

	app.dependency_overrides[get_db] = override_get_db
	app.dependency_overrides[get_crop_repository] = lambda: crop_repository
	app.dependency_overrides[get_market_source] = lambda: market_source
	app.dependency_overrides[get_weather_service] = lambda: WeatherService(fake_redis, upstream, settings)
	original_lifespan = app.router.lifespan_context

	@asynccontextmanager
	async def noop_lifespan(_: Any) -> AsyncGenerator[None, None]:
		yield

	app.router.lifespan_context = noop_lifespan

	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://test") as test_client:
		yield test_client

	await upstream.aclose()
	app.router.lifespan_context = original_lifespan
	app.dependency_overrides.clear()
