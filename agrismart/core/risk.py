"""Disease / pest risk scoring from weather threshold rules.

Each rule is a discrete step function: a boolean condition on temperature and
humidity selects one of two fixed scores, and a second threshold on the score
selects the tier.  The scores and cut-offs are part of the advisory contract.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from agrismart.core.common import require_percentage
from agrismart.models.enums import RiskTierEnum
from agrismart.schemas.advisory import RiskAssessment
from agrismart.schemas.weather import WeatherSnapshot

Condition = Callable[[float, float], bool]


@dataclass(frozen=True, slots=True)
class RiskRule:
	name: str
	condition: Condition  # (temperature, humidity) -> hit
	hit_score: int
	miss_score: int
	tier_threshold: int
	tier_above: RiskTierEnum
	tier_below: RiskTierEnum
	symptoms: tuple[str, ...]
	organic_treatment: str
	chemical_treatment: str

	def evaluate(self, temperature: float, humidity: float) -> RiskAssessment:
		score = self.hit_score if self.condition(temperature, humidity) else self.miss_score
		tier = self.tier_above if score > self.tier_threshold else self.tier_below
		return RiskAssessment(
			name=self.name,
			score=score,
			risk_level=tier,
			symptoms=list(self.symptoms),
			organic_treatment=self.organic_treatment,
			chemical_treatment=self.chemical_treatment,
		)


RISK_RULES: dict[str, tuple[RiskRule, ...]] = {
	"Grape": (
		RiskRule(
			name="Downy Mildew",
			condition=lambda t, h: h > 80 and t < 28,
			hit_score=75,
			miss_score=30,
			tier_threshold=70,
			tier_above=RiskTierEnum.high,
			tier_below=RiskTierEnum.low,
			symptoms=("Oil spots on upper leaves", "White fuzzy growth on underside"),
			organic_treatment="Potassium Bicarbonate spray (0.5%)",
			chemical_treatment="Metalaxyl-M + Mancozeb",
		),
		RiskRule(
			name="Powdery Mildew",
			condition=lambda t, h: t > 30 and h < 40,
			hit_score=80,
			miss_score=25,
			tier_threshold=70,
			tier_above=RiskTierEnum.high,
			tier_below=RiskTierEnum.low,
			symptoms=("Ashy gray powder on berries", "Leaf curling"),
			organic_treatment="Sulfur dust (90% WP)",
			chemical_treatment="Penconazole",
		),
	),
	"Onion": (
		RiskRule(
			name="Purple Blotch",
			condition=lambda t, h: h > 75 and 22 < t < 32,
			hit_score=85,
			miss_score=20,
			tier_threshold=70,
			tier_above=RiskTierEnum.high,
			tier_below=RiskTierEnum.moderate,
			symptoms=("Small water-soaked lesions", "Purple centers with yellow halo"),
			organic_treatment="Neem oil spray (3000 ppm)",
			chemical_treatment="Mancozeb or Chlorothalonil",
		),
		RiskRule(
			name="Onion Thrips",
			condition=lambda t, h: t > 30 and h < 50,
			hit_score=70,
			miss_score=35,
			tier_threshold=60,
			tier_above=RiskTierEnum.high,
			tier_below=RiskTierEnum.low,
			symptoms=("Silvering of leaves", "Curled leaf tips"),
			organic_treatment="Spinosad (OMRI listed)",
			chemical_treatment="Fipronil",
		),
	),
	"Tomato": (
		RiskRule(
			name="Early/Late Blight",
			condition=lambda t, h: h > 80 and 18 < t < 26,
			hit_score=80,
			miss_score=30,
			tier_threshold=70,
			tier_above=RiskTierEnum.high,
			tier_below=RiskTierEnum.low,
			symptoms=("Brown target-like spots", "Dark water-soaked patches"),
			organic_treatment="Copper oxychloride or Trichoderma viride",
			chemical_treatment="Mancozeb or Azoxystrobin",
		),
		RiskRule(
			name="Leaf Curl (Whitefly)",
			condition=lambda t, h: t > 35,
			hit_score=75,
			miss_score=15,
			tier_threshold=60,
			tier_above=RiskTierEnum.moderate,
			tier_below=RiskTierEnum.low,
			symptoms=("Upward curling of leaves", "Stunted growth"),
			organic_treatment="Yellow sticky traps + Neem oil",
			chemical_treatment="Imidacloprid",
		),
	),
}

DEFAULT_CROP_TYPE = "Tomato"


def rules_for(crop_type: str) -> tuple[RiskRule, ...]:
	return RISK_RULES.get(crop_type, RISK_RULES[DEFAULT_CROP_TYPE])


def score_risks(crop_type: str, weather: WeatherSnapshot) -> list[RiskAssessment]:
	require_percentage("humidity", weather.humidity)
	return [rule.evaluate(weather.temperature, weather.humidity) for rule in rules_for(crop_type)]


def highest_risk(assessments: list[RiskAssessment]) -> RiskAssessment | None:
	if not assessments:
		return None
	return max(assessments, key=lambda item: item.score)
