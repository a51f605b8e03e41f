"""Irrigation water balance: ETo proxy, crop coefficient, deficit, decision.

ETo here is the linear proxy ``t * 0.16 + (100 - rh) * 0.06``, not a full
Penman-Monteith evaluation.  Durations are calibrated against a 3-acre
reference plot at 15 minutes per mm of deficit.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from agrismart.core import phenology
from agrismart.core.common import RandomSource, require_percentage, require_positive, round_half_up
from agrismart.models.enums import IrrigationActionEnum, SoilTypeEnum
from agrismart.schemas.advisory import IrrigationRecommendation
from agrismart.schemas.crops import CropRecord
from agrismart.schemas.weather import WeatherSnapshot

DEFAULT_KC = 0.8
EFFECTIVE_RAIN_FRACTION = 0.7
SKIP_RAIN_THRESHOLD_MM = 10.0
HEAT_STRESS_THRESHOLD_C = 37.0
HEAT_DURATION_FACTOR = 1.35
SUFFICIENT_DEFICIT_MM = 1.0
MINUTES_PER_MM = 15.0
REFERENCE_PLOT_ACRES = 3.0
FORECAST_WINDOW_HOURS = 24
DEFAULT_SCHEDULE_TIME = "18:45"

KC_TABLE: dict[str, dict[str, float]] = {
	"Grape": {
		"Seedling": 0.3,
		"Vegetative": 0.55,
		"Flowering": 0.9,
		"Fruit Set": 1.2,
		"Maturity": 0.7,
		"Harvest": 0.4,
	},
	"Onion": {
		"Seedling": 0.4,
		"Vegetative": 0.8,
		"Maturity": 1.05,
		"Harvest": 0.6,
	},
	"Tomato": {
		"Seedling": 0.5,
		"Vegetative": 0.85,
		"Flowering": 1.15,
		"Fruit Set": 1.25,
		"Harvest": 0.85,
	},
}

SOIL_FACTORS: dict[SoilTypeEnum, float] = {
	SoilTypeEnum.black: 1.2,
	SoilTypeEnum.sandy: 0.8,
	SoilTypeEnum.loamy: 1.0,
}


def reference_evapotranspiration(temperature: float, humidity: float) -> float:
	return temperature * 0.16 + (100 - humidity) * 0.06


def crop_coefficient(crop_type: str, stage: str) -> float:
	return KC_TABLE.get(crop_type, {}).get(stage, DEFAULT_KC)


def soil_factor(soil_type: SoilTypeEnum | str) -> float:
	try:
		return SOIL_FACTORS[SoilTypeEnum(soil_type)]
	except ValueError:
		return 1.0


def _soil_label(soil_type: SoilTypeEnum | str) -> str:
	return soil_type.value if isinstance(soil_type, SoilTypeEnum) else str(soil_type)


def resolve_stage(crop: CropRecord, as_of: date | None = None) -> str:
	if crop.current_stage:
		return crop.current_stage
	return phenology.calculate_stage(crop.crop_type, crop.planting_date, as_of).stage_name


def recommend(
	crop: CropRecord,
	weather: WeatherSnapshot,
	soil_type: SoilTypeEnum | str = SoilTypeEnum.black,
	*,
	stage: str | None = None,
	as_of: date | None = None,
	rng: RandomSource | None = None,
	heat_override_first: bool = True,
	scheduled_time: str = DEFAULT_SCHEDULE_TIME,
) -> IrrigationRecommendation:
	"""Produce one IRRIGATE / SKIP / DELAY recommendation for ``crop``.

	Precedence, first match wins: heavy rain forecast (> 10 mm in 24 h) skips,
	heat stress (> 37 °C) irrigates with 1.35x duration, a deficit under 1 mm
	delays, anything else irrigates for the base duration.  With
	``heat_override_first=False`` the deficit check runs before heat stress.
	"""
	require_positive("farm_size", crop.farm_size)
	require_percentage("humidity", weather.humidity)

	stage = stage or resolve_stage(crop, as_of)
	eto = reference_evapotranspiration(weather.temperature, weather.humidity)
	kc = crop_coefficient(crop.crop_type, stage)
	etc = eto * kc

	rain_forecast = weather.rainfall_next_hours(FORECAST_WINDOW_HOURS)
	effective_rain = rain_forecast * EFFECTIVE_RAIN_FRACTION
	deficit = etc * soil_factor(soil_type) - effective_rain

	base_duration = round_half_up(
		max(0.0, deficit) * MINUTES_PER_MM * (crop.farm_size / REFERENCE_PLOT_ACRES)
	)
	heat_stress = weather.temperature > HEAT_STRESS_THRESHOLD_C
	sufficient = deficit < SUFFICIENT_DEFICIT_MM

	if rain_forecast > SKIP_RAIN_THRESHOLD_MM:
		action = IrrigationActionEnum.skip
		duration = 0
		reason = (
			f"Significant rain ({rain_forecast:.1f}mm) expected. "
			f"Avoid waterlogging in {_soil_label(soil_type)} soil."
		)
	elif heat_stress and (heat_override_first or not sufficient):
		action = IrrigationActionEnum.irrigate
		duration = round_half_up(base_duration * HEAT_DURATION_FACTOR)
		reason = f"High temperature alert! Increase water for {crop.crop_type} fruit cooling."
	elif sufficient:
		action = IrrigationActionEnum.delay
		duration = 0
		reason = f"Current moisture sufficient for {crop.crop_type} in {stage} stage."
	else:
		action = IrrigationActionEnum.irrigate
		duration = base_duration
		reason = f"{crop.crop_type} ({stage}) needs {etc:.1f}mm."

	return IrrigationRecommendation(
		crop_id=crop.crop_id,
		crop_name=crop.display_name,
		stage=stage,
		action=action,
		duration_minutes=duration,
		scheduled_time=scheduled_time,
		reason=reason,
		reference_et=round(eto, 2),
		crop_coefficient=kc,
		evapotranspiration=round(etc, 2),
		effective_rainfall=round(effective_rain, 2),
		water_deficit=round(deficit, 2),
		moisture_level=round(35 + rng.random() * 30, 1) if rng is not None else None,
	)


def recommend_many(
	crops: Iterable[CropRecord],
	weather: WeatherSnapshot,
	soil_type: SoilTypeEnum | str = SoilTypeEnum.black,
	*,
	stage: str | None = None,
	as_of: date | None = None,
	rng: RandomSource | None = None,
	heat_override_first: bool = True,
	scheduled_time: str = DEFAULT_SCHEDULE_TIME,
) -> list[IrrigationRecommendation]:
	return [
		recommend(
			crop,
			weather,
			soil_type,
			stage=stage,
			as_of=as_of,
			rng=rng,
			heat_override_first=heat_override_first,
			scheduled_time=scheduled_time,
		)
		for crop in crops
	]
