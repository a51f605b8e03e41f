from __future__ import annotations

from datetime import date, timedelta

import pytest

from agrismart.core import phenology
from agrismart.core.common import InvalidInputError
from agrismart.core.phenology import StageDefinition
from agrismart.models.enums import MilestoneStatusEnum


@pytest.mark.parametrize("crop_type", phenology.supported_crop_types())
def test_stage_tables_are_contiguous_from_zero(crop_type: str) -> None:
	phenology.validate_stage_table(phenology.CROP_STAGES[crop_type])


def test_validate_stage_table_rejects_gap() -> None:
	stages = (
		StageDefinition("A", 0, 10, ""),
		StageDefinition("B", 12, 20, ""),
	)
	with pytest.raises(ValueError, match="expected 10"):
		phenology.validate_stage_table(stages)


def test_tomato_flowering_at_48_dap() -> None:
	info = phenology.calculate_stage("Tomato", date(2024, 2, 1), date(2024, 3, 20))

	assert info.dap == 48
	assert info.stage_name == "Flowering"
	assert info.next_stage_name == "Fruit Set"
	assert info.progress_percent == 40


def test_stage_boundaries_are_half_open() -> None:
	planted = date(2024, 1, 1)

	assert phenology.calculate_stage("Onion", planted, planted + timedelta(days=19)).stage_name == "Establishment"
	assert phenology.calculate_stage("Onion", planted, planted + timedelta(days=20)).stage_name == "Vegetative"
	assert phenology.calculate_stage("Onion", planted, planted).dap == 0


def test_overdue_crop_stays_in_final_stage() -> None:
	info = phenology.calculate_stage("Grape", date(2023, 1, 1), date(2024, 1, 1))

	assert info.stage_name == "Harvest"
	assert info.next_stage_name == phenology.FINISHED_STAGE
	assert info.progress_percent == 100


def test_unknown_crop_uses_tomato_table() -> None:
	info = phenology.calculate_stage("Okra", date(2024, 2, 1), date(2024, 3, 20))

	assert info.stage_name == "Flowering"
	assert info.crop_type == "Okra"


def test_future_planting_date_is_rejected() -> None:
	with pytest.raises(InvalidInputError):
		phenology.calculate_stage("Tomato", date(2024, 5, 1), date(2024, 4, 1))


def test_progress_is_monotonic_in_dap() -> None:
	planted = date(2024, 1, 1)
	progress = [
		phenology.calculate_stage("Grape", planted, planted + timedelta(days=day)).progress_percent
		for day in range(0, 200, 5)
	]
	assert progress == sorted(progress)
	assert progress[-1] == 100


def test_milestones_track_current_stage() -> None:
	planted = date(2024, 2, 1)
	today = date(2024, 3, 20)

	milestones = phenology.generate_milestones("Tomato", planted, today)

	assert [item.stage for item in milestones] == [
		"Establishment",
		"Vegetative",
		"Flowering",
		"Fruit Set",
		"Harvesting",
	]
	assert [item.status for item in milestones] == [
		MilestoneStatusEnum.completed,
		MilestoneStatusEnum.completed,
		MilestoneStatusEnum.active,
		MilestoneStatusEnum.pending,
		MilestoneStatusEnum.pending,
	]
	assert milestones[2].expected_date == planted + timedelta(days=35)

	active = [item.stage for item in milestones if item.status == MilestoneStatusEnum.active]
	assert active == [phenology.calculate_stage("Tomato", planted, today).stage_name]


def test_milestones_for_future_planting_are_all_pending() -> None:
	milestones = phenology.generate_milestones("Onion", date(2024, 6, 1), date(2024, 5, 1))
	assert {item.status for item in milestones} == {MilestoneStatusEnum.pending}
