"""Fertilizer advisory: N/P/K needs graded against the plot's soil sample."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta

from agrismart.core.common import require_positive
from agrismart.models.enums import DeficiencyEnum
from agrismart.schemas.crops import CropRecord, SoilData
from agrismart.schemas.impact import FertilizerApplication, FertilizerCost, NutrientAdvisory, NutrientNeed

# Regional average when a plot has no soil test on record.
DEFAULT_SOIL = SoilData(ph=7.2, nitrogen=45, phosphorus=22, potassium=180)
DEFAULT_PH = 7.0
DEFAULT_CROP = "Grape"
SEVERE_BELOW = 40.0
MARGINAL_BELOW = 75.0
MIN_LEVEL = 10.0
MAX_LEVEL = 100.0
COST_PER_ACRE = 8500.0
EXPECTED_ROI = 3.2

Reading = Callable[[SoilData], float]


@dataclass(frozen=True, slots=True)
class NutrientRule:
	nutrient: str
	label: str
	requirement: float  # kg/acre
	reading: Reading

	def need(self, soil: SoilData) -> NutrientNeed:
		current = self.reading(soil)
		return NutrientNeed(
			nutrient=self.nutrient,
			label=self.label,
			requirement_kg_per_acre=self.requirement,
			current_level=round(min(max(current, MIN_LEVEL), MAX_LEVEL), 2),
			deficiency=deficiency(current),
		)


def _nitrogen(soil: SoilData) -> float:
	return soil.nitrogen or 0.0


def _phosphorus(soil: SoilData) -> float:
	return soil.phosphorus or 0.0


def _potassium(soil: SoilData) -> float:
	return soil.potassium or 0.0


def _fixed(level: float) -> Reading:
	return lambda _soil: level


NUTRIENT_RULES: dict[str, tuple[NutrientRule, ...]] = {
	"Grape": (
		NutrientRule("N", "Nitrogen", 120, lambda soil: _nitrogen(soil) / 1.5),
		NutrientRule("P", "Phosphorus", 60, lambda soil: _phosphorus(soil) * 1.2),
		NutrientRule("K", "Potassium", 200, lambda soil: _potassium(soil) / 2.5),
		NutrientRule("B", "Boron", 2, _fixed(40)),
		NutrientRule("Mg", "Magnesium", 15, _fixed(85)),
	),
	"Tomato": (
		NutrientRule("N", "Nitrogen", 150, lambda soil: _nitrogen(soil) / 1.8),
		NutrientRule("P", "Phosphorus", 80, _phosphorus),
		NutrientRule("K", "Potassium", 180, lambda soil: _potassium(soil) / 2),
		NutrientRule("Ca", "Calcium", 25, _fixed(60)),
	),
	"Onion": (
		NutrientRule("N", "Nitrogen", 100, lambda soil: _nitrogen(soil) / 1.2),
		NutrientRule("P", "Phosphorus", 50, lambda soil: _phosphorus(soil) * 1.5),
		NutrientRule("K", "Potassium", 100, lambda soil: _potassium(soil) / 1.2),
	),
}


@dataclass(frozen=True, slots=True)
class ApplicationTemplate:
	id: str
	dap: int
	product_name: str
	dosage: float
	unit: str
	method: str


APPLICATION_SCHEDULE: tuple[ApplicationTemplate, ...] = (
	ApplicationTemplate("fert-1", 15, "Urea (46% N)", 25, "kg/acre", "Broadcasting"),
	ApplicationTemplate("fert-2", 45, "19:19:19 NPK", 5, "kg/acre", "Fertigation"),
	ApplicationTemplate("fert-3", 60, "Potassium Schoenite", 500, "g/liter", "Foliar Spray"),
)

ORGANIC_ALTERNATIVES = (
	"Well-decomposed Farm Yard Manure (10 tons/acre)",
	"Vermicompost enriched with Trichoderma (2 tons/acre)",
	"Green Manure (Dhaincha) before main crop",
)


def deficiency(level: float) -> DeficiencyEnum:
	if level < SEVERE_BELOW:
		return DeficiencyEnum.severe
	if level < MARGINAL_BELOW:
		return DeficiencyEnum.marginal
	return DeficiencyEnum.none


def nutrient_advisory(crop: CropRecord) -> NutrientAdvisory:
	"""Grade each nutrient for ``crop`` and lay out the fertilizer schedule.

	Readings are graded before clamping to the 10-100 display range, so a
	reading of 5 is still Severe.  Unknown crop types use the Grape table.
	Application dates are offsets from the planting date.
	"""
	require_positive("farm_size", crop.farm_size)
	soil = crop.soil_data or DEFAULT_SOIL
	rules = NUTRIENT_RULES.get(crop.crop_type, NUTRIENT_RULES[DEFAULT_CROP])

	return NutrientAdvisory(
		crop_id=crop.crop_id,
		crop_name=crop.display_name,
		soil_ph=soil.ph or DEFAULT_PH,
		nutrient_needs=[rule.need(soil) for rule in rules],
		schedule=[
			FertilizerApplication(
				id=item.id,
				dap=item.dap,
				date=crop.planting_date + timedelta(days=item.dap),
				product_name=item.product_name,
				dosage=item.dosage,
				unit=item.unit,
				method=item.method,
			)
			for item in APPLICATION_SCHEDULE
		],
		organic_alternatives=list(ORGANIC_ALTERNATIVES),
		cost_analysis=FertilizerCost(
			estimated_total_cost=COST_PER_ACRE * crop.farm_size,
			expected_roi=EXPECTED_ROI,
		),
	)
