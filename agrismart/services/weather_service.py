"""Weather provider: Open-Meteo forecast + Nominatim reverse geocoding.

Snapshots are cached in Redis for ``weather_cache_seconds`` (15 minutes by
default) keyed by coordinates rounded to four decimals.  Any upstream failure
is returned as a failed :class:`ServiceResult`; nothing is retried.
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, date, datetime, timedelta
from typing import Any

import httpx
from pydantic import ValidationError
from redis.asyncio import Redis

from agrismart.config import Settings, get_settings
from agrismart.core.common import round_half_up
from agrismart.schemas.common import ServiceResult
from agrismart.schemas.weather import DailyForecast, HourlyForecast, WeatherAlert, WeatherSnapshot

_logger = logging.getLogger("agrismart.weather")

HEATWAVE_THRESHOLD_C = 38.0
STRONG_WIND_THRESHOLD = 20.0
FORECAST_HOURS = 24


def weather_condition(code: int | None) -> str:
	"""Map a WMO weather interpretation code to a short label."""
	if code is None:
		return "Unknown"
	if code == 0:
		return "Clear"
	if code in (1, 2, 3):
		return "Partly Cloudy"
	if code in (45, 48):
		return "Fog"
	if 51 <= code <= 55:
		return "Drizzle"
	if 61 <= code <= 67:
		return "Rain"
	if 71 <= code <= 77:
		return "Snow"
	if 80 <= code <= 82:
		return "Showers"
	if 95 <= code <= 99:
		return "Thunderstorm"
	return "Unknown"


def derive_alerts(temperature: float, wind_speed: float, now: datetime) -> list[WeatherAlert]:
	alerts: list[WeatherAlert] = []
	if temperature > HEATWAVE_THRESHOLD_C:
		alerts.append(
			WeatherAlert(
				id="heat_alert",
				type="heatwave",
				severity="warning",
				message="High temperatures detected. Ensure adequate irrigation.",
				start_time=now,
				end_time=now + timedelta(days=1),
			)
		)
	if wind_speed > STRONG_WIND_THRESHOLD:
		alerts.append(
			WeatherAlert(
				id="wind_alert",
				type="strong_wind",
				severity="advisory",
				message="High winds detected. Avoid spraying today.",
				start_time=now,
				end_time=now + timedelta(hours=12),
			)
		)
	if not alerts:
		alerts.append(
			WeatherAlert(
				id="favorable",
				type="favorable",
				severity="advisory",
				message="Good conditions for field operations today.",
				start_time=now,
				end_time=now + timedelta(days=1),
			)
		)
	return alerts


def parse_forecast(
	payload: dict[str, Any],
	*,
	latitude: float,
	longitude: float,
	location_name: str,
	now: datetime | None = None,
) -> WeatherSnapshot:
	"""Map an Open-Meteo ``/v1/forecast`` body onto a :class:`WeatherSnapshot`."""
	now = now or datetime.now(UTC)
	current = payload["current"]
	hourly = payload["hourly"]
	daily = payload["daily"]

	hourly_times: list[str] = list(hourly["time"])
	current_hour = str(current.get("time", ""))[:13]
	start = next((idx for idx, stamp in enumerate(hourly_times) if stamp[:13] == current_hour), 0)

	hourly_forecast: list[HourlyForecast] = []
	for idx in range(start, min(start + FORECAST_HOURS, len(hourly_times))):
		hourly_forecast.append(
			HourlyForecast(
				time=f"{int(hourly_times[idx][11:13])}:00",
				temp=hourly["temperature_2m"][idx],
				rainfall=hourly["rain"][idx] or 0.0,
				humidity=hourly["relative_humidity_2m"][idx],
				condition=weather_condition(hourly["weather_code"][idx]),
			)
		)

	forecast_7day = [
		DailyForecast(
			date=date.fromisoformat(day),
			temp=round_half_up((daily["temperature_2m_max"][idx] + daily["temperature_2m_min"][idx]) / 2),
			condition=weather_condition(daily["weather_code"][idx]),
		)
		for idx, day in enumerate(daily["time"])
	]

	temperature = float(current["temperature_2m"])
	wind_speed = float(current.get("wind_speed_10m") or 0.0)
	return WeatherSnapshot(
		location_id=f"loc_{latitude}_{longitude}",
		location_name=location_name,
		timestamp=now,
		temperature=temperature,
		rainfall=float(current.get("rain") or 0.0),
		humidity=float(current["relative_humidity_2m"]),
		wind_speed=wind_speed,
		condition=weather_condition(current.get("weather_code")),
		alerts=tuple(derive_alerts(temperature, wind_speed, now)),
		hourly_forecast=tuple(hourly_forecast),
		forecast_7day=tuple(forecast_7day),
	)


class WeatherService:
	def __init__(
		self,
		redis_client: Redis | None = None,
		http_client: httpx.AsyncClient | None = None,
		settings: Settings | None = None,
	):
		self.redis_client = redis_client
		self.http_client = http_client
		self.settings = settings or get_settings()

	@staticmethod
	def cache_key(latitude: float, longitude: float) -> str:
		return f"weather:{latitude:.4f}_{longitude:.4f}"

	async def get_for_location(
		self,
		location_name: str | None = None,
		latitude: float | None = None,
		longitude: float | None = None,
	) -> ServiceResult[WeatherSnapshot]:
		has_coords = latitude is not None and longitude is not None
		lat = latitude if latitude is not None else self.settings.default_latitude
		lng = longitude if longitude is not None else self.settings.default_longitude
		name = location_name or self.settings.default_location_name
		key = self.cache_key(lat, lng)

		cached = await self._read_cache(key)
		if cached is not None:
			return ServiceResult.ok(cached)

		start = time.perf_counter()
		try:
			if has_coords:
				name = await self._reverse_geocode(lat, lng, name)
			payload = await self._get_json(
				self.settings.weather_base_url,
				params={
					"latitude": lat,
					"longitude": lng,
					"current": "temperature_2m,relative_humidity_2m,wind_speed_10m,weather_code,rain",
					"hourly": "temperature_2m,relative_humidity_2m,rain,weather_code",
					"daily": "weather_code,temperature_2m_max,temperature_2m_min",
					"timezone": "auto",
				},
			)
			snapshot = parse_forecast(payload, latitude=lat, longitude=lng, location_name=name)
		except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError, ValidationError) as exc:
			self._log_call(start, ok=False, error=str(exc))
			return ServiceResult.fail("Weather service unavailable")

		self._log_call(start, ok=True)
		await self._write_cache(key, snapshot)
		return ServiceResult.ok(snapshot)

	async def _reverse_geocode(self, latitude: float, longitude: float, fallback: str) -> str:
		try:
			body = await self._get_json(
				self.settings.geocode_base_url,
				params={"format": "json", "lat": latitude, "lon": longitude, "zoom": 14},
				headers={"User-Agent": self.settings.geocode_user_agent},
			)
		except (httpx.HTTPError, ValueError) as exc:
			_logger.warning("reverse_geocode_failed", extra={"error": str(exc)})
			return fallback

		address = body.get("address") if isinstance(body, dict) else None
		if not isinstance(address, dict):
			return fallback
		for field in ("village", "town", "city", "municipality", "county", "state_district"):
			if address.get(field):
				return str(address[field])
		return fallback

	async def _get_json(
		self,
		url: str,
		*,
		params: dict[str, Any],
		headers: dict[str, str] | None = None,
	) -> dict[str, Any]:
		if self.http_client is not None:
			response = await self.http_client.get(url, params=params, headers=headers)
		else:
			async with httpx.AsyncClient(timeout=self.settings.weather_timeout_seconds) as client:
				response = await client.get(url, params=params, headers=headers)
		response.raise_for_status()
		return response.json()

	async def _read_cache(self, key: str) -> WeatherSnapshot | None:
		if self.redis_client is None:
			return None
		value = await self.redis_client.get(key)
		if value is None:
			return None
		return WeatherSnapshot.model_validate_json(value)

	async def _write_cache(self, key: str, snapshot: WeatherSnapshot) -> None:
		if self.redis_client is None:
			return
		await self.redis_client.setex(key, self.settings.weather_cache_seconds, snapshot.model_dump_json())

	@staticmethod
	def _log_call(start: float, ok: bool, error: str | None = None) -> None:
		extra = {
			"operation": "weather_forecast",
			"duration_ms": round((time.perf_counter() - start) * 1000.0, 2),
			"ok": ok,
			"error": error,
		}
		if ok:
			_logger.info("weather_provider_call", extra=extra)
		else:
			_logger.error("weather_provider_call_failed", extra=extra)
