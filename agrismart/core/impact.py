"""Weather-impact scoring: crop-specific vulnerabilities to extreme weather.

Every assessment starts from a base seasonal score; each matching
vulnerability adds its weight.  The tier and yield-loss estimate use the raw
sum, the reported score is capped at 100.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from agrismart.core.common import round_half_up
from agrismart.models.enums import ImpactLevelEnum
from agrismart.schemas.crops import CropRecord
from agrismart.schemas.impact import Vulnerability, WeatherImpactAssessment
from agrismart.schemas.weather import WeatherSnapshot

BASE_SCORE = 15
MAX_SCORE = 100
YIELD_LOSS_FACTOR = 0.7
TIER_THRESHOLDS: tuple[tuple[int, ImpactLevelEnum], ...] = (
	(70, ImpactLevelEnum.critical),
	(45, ImpactLevelEnum.high),
	(20, ImpactLevelEnum.moderate),
)

PROTECTIVE_MEASURES = (
	"Apply Boron-based sprays to strengthen cell walls",
	"Use plastic mulch to prevent soil splashing",
	"Secure anti-hail nets over primary vineyard blocks",
)
RECOVERY_STEPS = (
	"Light dosage of foliar Urea for vegetative recovery",
	"Apply curative systemic fungicide within 24h of impact",
	"Clear silt from drainage channels immediately",
)


@dataclass(frozen=True, slots=True)
class ImpactRule:
	factor: str
	description: str
	impact: str
	weight: int
	condition: Callable[[WeatherSnapshot], bool]

	def vulnerability(self) -> Vulnerability:
		return Vulnerability(factor=self.factor, description=self.description, impact=self.impact)


def _has_alert(kind: str) -> Callable[[WeatherSnapshot], bool]:
	return lambda weather: any(alert.type == kind for alert in weather.alerts)


IMPACT_RULES: dict[str, tuple[ImpactRule, ...]] = {
	"Grape": (
		ImpactRule(
			factor="Frost Burn",
			description="Nashik winter dip below 6°C risks dormant bud damage.",
			impact="High",
			weight=45,
			condition=lambda weather: weather.temperature < 6,
		),
		ImpactRule(
			factor="Berry Cracking",
			description="Physical hail impact on maturing Thompson bunches.",
			impact="High",
			weight=55,
			condition=_has_alert("hail"),
		),
	),
	"Onion": (
		ImpactRule(
			factor="Bulb Rot",
			description="Heavy rain in black soil causes waterlogging and fungal infection.",
			impact="High",
			weight=40,
			condition=lambda weather: weather.rainfall_next_hours(24) > 40,
		),
	),
	"Tomato": (
		ImpactRule(
			factor="Flower Drop",
			description="Pollen sterility due to extreme afternoon heat.",
			impact="Medium",
			weight=35,
			condition=lambda weather: weather.temperature > 39,
		),
	),
}


def impact_level(score: int) -> ImpactLevelEnum:
	for threshold, level in TIER_THRESHOLDS:
		if score > threshold:
			return level
	return ImpactLevelEnum.low


def assess_impact(crop: CropRecord, weather: WeatherSnapshot) -> WeatherImpactAssessment:
	"""Score ``crop``'s exposure to the current weather.

	Crop types without rules keep the base score and report no vulnerabilities.
	"""
	matched = [rule for rule in IMPACT_RULES.get(crop.crop_type, ()) if rule.condition(weather)]
	score = BASE_SCORE + sum(rule.weight for rule in matched)
	return WeatherImpactAssessment(
		crop_id=crop.crop_id,
		crop_name=crop.display_name,
		risk_score=min(score, MAX_SCORE),
		risk_level=impact_level(score),
		potential_yield_loss=round_half_up(score * YIELD_LOSS_FACTOR),
		vulnerabilities=[rule.vulnerability() for rule in matched],
		protective_measures=list(PROTECTIVE_MEASURES),
		recovery_steps=list(RECOVERY_STEPS),
	)
