"""Crop phenology: days-after-planting (DAP) stage lookup and milestone timeline.

Stage tables are ordered, contiguous ``[start, end)`` DAP ranges starting at
zero.  The last stage's ``end`` is the crop-cycle length used to normalise
progress.  Unknown crop types use the Tomato table.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from agrismart.core.common import InvalidInputError, round_half_up
from agrismart.models.enums import MilestoneStatusEnum
from agrismart.schemas.advisory import MilestoneRecord, StageInfo

DEFAULT_CROP_TYPE = "Tomato"
FINISHED_STAGE = "Finished"


@dataclass(frozen=True, slots=True)
class StageDefinition:
	name: str
	start: int
	end: int
	description: str

	def contains(self, dap: int) -> bool:
		return self.start <= dap < self.end


CROP_STAGES: dict[str, tuple[StageDefinition, ...]] = {
	"Grape": (
		StageDefinition("Sprouting", 0, 15, "Bud burst and initial leaf emergence."),
		StageDefinition("Vegetative", 15, 45, "Rapid shoot growth and leaf area development."),
		StageDefinition("Flowering", 45, 65, "Inflorescence development and blooming."),
		StageDefinition("Fruit Set", 65, 90, "Berries begin to grow after pollination."),
		StageDefinition("Ripening", 90, 120, "Color change (veraison) and sugar accumulation."),
		StageDefinition("Harvest", 120, 150, "Optimal maturity reached for picking."),
	),
	"Onion": (
		StageDefinition("Establishment", 0, 20, "Rooting and initial leaf sprout."),
		StageDefinition("Vegetative", 20, 50, "Foliage growth and nutrient accumulation."),
		StageDefinition("Bulb Initiation", 50, 80, "Bulb begins to swell at the base."),
		StageDefinition("Bulb Development", 80, 110, "Rapid bulb enlargement."),
		StageDefinition("Maturity", 110, 135, "Leaves begin to fall (neck fall)."),
	),
	"Tomato": (
		StageDefinition("Establishment", 0, 15, "Transplant recovery and rooting."),
		StageDefinition("Vegetative", 15, 35, "Branching and height increase."),
		StageDefinition("Flowering", 35, 55, "First clusters of yellow flowers appear."),
		StageDefinition("Fruit Set", 55, 85, "Fruit development from green to orange."),
		StageDefinition("Harvesting", 85, 120, "Fruit turns red and ready for picking."),
	),
}


def supported_crop_types() -> list[str]:
	return sorted(CROP_STAGES)


def stages_for(crop_type: str) -> tuple[StageDefinition, ...]:
	return CROP_STAGES.get(crop_type, CROP_STAGES[DEFAULT_CROP_TYPE])


def cycle_length(stages: Sequence[StageDefinition]) -> int:
	return stages[-1].end


def validate_stage_table(stages: Sequence[StageDefinition]) -> None:
	"""Raise ``ValueError`` unless ``stages`` are contiguous from DAP 0."""
	if not stages:
		raise ValueError("stage table is empty")
	expected_start = 0
	for stage in stages:
		if stage.start != expected_start:
			raise ValueError(f"stage {stage.name!r} starts at {stage.start}, expected {expected_start}")
		if stage.end <= stage.start:
			raise ValueError(f"stage {stage.name!r} has an empty range")
		expected_start = stage.end


def days_after_planting(planting_date: date, as_of: date) -> int:
	if planting_date > as_of:
		raise InvalidInputError(
			f"planting_date {planting_date.isoformat()} is after {as_of.isoformat()}"
		)
	return (as_of - planting_date).days


def calculate_stage(crop_type: str, planting_date: date, as_of: date | None = None) -> StageInfo:
	"""Resolve the growth stage for ``crop_type`` on ``as_of`` (default today).

	DAP beyond the final range returns the last stage with next stage
	``"Finished"`` and progress capped at 100.
	"""
	as_of = as_of or date.today()
	dap = days_after_planting(planting_date, as_of)
	stages = stages_for(crop_type)

	index = next((idx for idx, stage in enumerate(stages) if stage.contains(dap)), len(stages) - 1)
	current = stages[index]
	next_name = stages[index + 1].name if index + 1 < len(stages) else FINISHED_STAGE
	progress = min(100, round_half_up(dap / cycle_length(stages) * 100))

	return StageInfo(
		crop_type=crop_type,
		dap=dap,
		stage_name=current.name,
		description=current.description,
		next_stage_name=next_name,
		progress_percent=progress,
	)


def generate_milestones(
	crop_type: str,
	planting_date: date,
	now: date | None = None,
) -> list[MilestoneRecord]:
	now = now or date.today()
	milestones: list[MilestoneRecord] = []
	for stage in stages_for(crop_type):
		expected = planting_date + timedelta(days=stage.start)
		ends = planting_date + timedelta(days=stage.end)
		if now >= ends:
			status = MilestoneStatusEnum.completed
		elif now >= expected:
			status = MilestoneStatusEnum.active
		else:
			status = MilestoneStatusEnum.pending
		milestones.append(MilestoneRecord(stage=stage.name, expected_date=expected, status=status))
	return milestones
