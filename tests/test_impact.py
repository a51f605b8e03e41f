from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest

from agrismart.core import impact
from agrismart.models.enums import ImpactLevelEnum
from agrismart.schemas.crops import CropRecord
from agrismart.schemas.weather import WeatherAlert, WeatherSnapshot

CropFactory = Callable[..., CropRecord]
WeatherFactory = Callable[..., WeatherSnapshot]


def _hail(weather: WeatherSnapshot) -> WeatherSnapshot:
	start = datetime(2024, 3, 20, 9, 0, tzinfo=UTC)
	alert = WeatherAlert(
		id="hail_alert",
		type="hail",
		severity="warning",
		message="Hail expected this evening.",
		start_time=start,
		end_time=start + timedelta(hours=6),
	)
	return weather.model_copy(update={"alerts": (alert,)})


def test_quiet_weather_keeps_base_score(crop_factory: CropFactory, weather_factory: WeatherFactory) -> None:
	assessment = impact.assess_impact(crop_factory(), weather_factory(temperature=30.0))

	assert assessment.risk_score == impact.BASE_SCORE
	assert assessment.risk_level == ImpactLevelEnum.low
	assert assessment.vulnerabilities == []
	assert len(assessment.protective_measures) == 3


def test_grape_frost_is_high(crop_factory: CropFactory, weather_factory: WeatherFactory) -> None:
	assessment = impact.assess_impact(crop_factory(crop_type="Grape", variety="Thompson"), weather_factory(temperature=4.0))

	assert assessment.risk_score == 60
	assert assessment.risk_level == ImpactLevelEnum.high
	assert assessment.potential_yield_loss == 42
	assert [item.factor for item in assessment.vulnerabilities] == ["Frost Burn"]
	assert assessment.crop_name == "Grape (Thompson)"


def test_grape_frost_and_hail_cap_score_at_hundred(crop_factory: CropFactory, weather_factory: WeatherFactory) -> None:
	assessment = impact.assess_impact(crop_factory(crop_type="Grape"), _hail(weather_factory(temperature=5.0)))

	assert assessment.risk_score == 100
	assert assessment.risk_level == ImpactLevelEnum.critical
	assert assessment.potential_yield_loss > 70
	assert [item.factor for item in assessment.vulnerabilities] == ["Frost Burn", "Berry Cracking"]


def test_hail_only_matters_for_grape(crop_factory: CropFactory, weather_factory: WeatherFactory) -> None:
	assessment = impact.assess_impact(crop_factory(crop_type="Tomato"), _hail(weather_factory()))

	assert assessment.risk_score == impact.BASE_SCORE


def test_onion_heavy_rain_triggers_bulb_rot(crop_factory: CropFactory, weather_factory: WeatherFactory) -> None:
	wet = impact.assess_impact(crop_factory(crop_type="Onion"), weather_factory(rain_next_24h=41.0))
	borderline = impact.assess_impact(crop_factory(crop_type="Onion"), weather_factory(rain_next_24h=40.0))

	assert wet.risk_score == 55
	assert wet.vulnerabilities[0].factor == "Bulb Rot"
	assert borderline.risk_score == impact.BASE_SCORE


@pytest.mark.parametrize(
	("temperature", "score", "level"),
	[(39.0, 15, ImpactLevelEnum.low), (39.5, 50, ImpactLevelEnum.high)],
)
def test_tomato_heat_threshold_is_strict(
	crop_factory: CropFactory,
	weather_factory: WeatherFactory,
	temperature: float,
	score: int,
	level: ImpactLevelEnum,
) -> None:
	assessment = impact.assess_impact(crop_factory(), weather_factory(temperature=temperature))

	assert assessment.risk_score == score
	assert assessment.risk_level == level


@pytest.mark.parametrize(
	("score", "level"),
	[(71, ImpactLevelEnum.critical), (70, ImpactLevelEnum.high), (46, ImpactLevelEnum.high), (45, ImpactLevelEnum.moderate), (21, ImpactLevelEnum.moderate), (20, ImpactLevelEnum.low)],
)
def test_impact_level_thresholds(score: int, level: ImpactLevelEnum) -> None:
	assert impact.impact_level(score) == level
