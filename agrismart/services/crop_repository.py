"""Crop registry repositories: an in-memory map and a SQLAlchemy-backed store.

Both satisfy :class:`CropRepository`; routes receive one through dependency
injection and never see which backend is in use.
"""

from __future__ import annotations

import uuid
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agrismart.models.crops import Crop
from agrismart.schemas.crops import Activity, ActivityIn, CostIn, CostRecord, CropCreate, CropRecord


class CropRepository(Protocol):
	async def add(self, payload: CropCreate) -> CropRecord: ...

	async def get(self, crop_id: uuid.UUID) -> CropRecord: ...

	async def list_crops(self) -> list[CropRecord]: ...

	async def update(self, crop_id: uuid.UUID, payload: CropCreate) -> CropRecord: ...

	async def delete(self, crop_id: uuid.UUID) -> None: ...

	async def append_activity(self, crop_id: uuid.UUID, activity: ActivityIn) -> CropRecord: ...

	async def append_cost(self, crop_id: uuid.UUID, cost: CostIn) -> CropRecord: ...


def _not_found(crop_id: uuid.UUID) -> LookupError:
	return LookupError(f"Crop {crop_id} not found")


class InMemoryCropRepository:
	"""Dict-backed registry for tests and single-process demos."""

	def __init__(self, crops: list[CropRecord] | None = None) -> None:
		self._items: dict[uuid.UUID, CropRecord] = {crop.crop_id: crop for crop in crops or []}

	async def add(self, payload: CropCreate) -> CropRecord:
		record = CropRecord(**payload.model_dump())
		self._items[record.crop_id] = record
		return record

	async def get(self, crop_id: uuid.UUID) -> CropRecord:
		record = self._items.get(crop_id)
		if record is None:
			raise _not_found(crop_id)
		return record

	async def list_crops(self) -> list[CropRecord]:
		return list(self._items.values())

	async def update(self, crop_id: uuid.UUID, payload: CropCreate) -> CropRecord:
		current = await self.get(crop_id)
		record = CropRecord.model_validate({**current.model_dump(), **payload.model_dump()})
		self._items[crop_id] = record
		return record

	async def delete(self, crop_id: uuid.UUID) -> None:
		if self._items.pop(crop_id, None) is None:
			raise _not_found(crop_id)

	async def append_activity(self, crop_id: uuid.UUID, activity: ActivityIn) -> CropRecord:
		current = await self.get(crop_id)
		record = current.model_copy(
			update={"activities": [*current.activities, Activity(**activity.model_dump())]}
		)
		self._items[crop_id] = record
		return record

	async def append_cost(self, crop_id: uuid.UUID, cost: CostIn) -> CropRecord:
		current = await self.get(crop_id)
		record = current.model_copy(update={"costs": [*current.costs, CostRecord(**cost.model_dump())]})
		self._items[crop_id] = record
		return record


class SqlCropRepository:
	"""PostgreSQL registry on the ``crops`` table."""

	def __init__(self, db: AsyncSession):
		self.db = db

	async def add(self, payload: CropCreate) -> CropRecord:
		row = Crop(**self._columns(payload), activities=[], costs=[])
		self.db.add(row)
		await self.db.flush()
		await self.db.refresh(row)
		return self.to_record(row)

	async def get(self, crop_id: uuid.UUID) -> CropRecord:
		return self.to_record(await self._require(crop_id))

	async def list_crops(self) -> list[CropRecord]:
		rows = await self.db.execute(select(Crop).order_by(Crop.created_at.desc()))
		return [self.to_record(row) for row in rows.scalars().all()]

	async def update(self, crop_id: uuid.UUID, payload: CropCreate) -> CropRecord:
		row = await self._require(crop_id)
		for key, value in self._columns(payload).items():
			setattr(row, key, value)
		await self.db.flush()
		await self.db.refresh(row)
		return self.to_record(row)

	async def delete(self, crop_id: uuid.UUID) -> None:
		row = await self._require(crop_id)
		await self.db.delete(row)
		await self.db.flush()

	async def append_activity(self, crop_id: uuid.UUID, activity: ActivityIn) -> CropRecord:
		row = await self._require(crop_id)
		entry = Activity(**activity.model_dump()).model_dump(mode="json")
		# JSONB columns need a new list object for change tracking.
		row.activities = [*(row.activities or []), entry]
		await self.db.flush()
		await self.db.refresh(row)
		return self.to_record(row)

	async def append_cost(self, crop_id: uuid.UUID, cost: CostIn) -> CropRecord:
		row = await self._require(crop_id)
		entry = CostRecord(**cost.model_dump()).model_dump(mode="json")
		row.costs = [*(row.costs or []), entry]
		await self.db.flush()
		await self.db.refresh(row)
		return self.to_record(row)

	async def _require(self, crop_id: uuid.UUID) -> Crop:
		row = await self.db.execute(select(Crop).where(Crop.id == crop_id))
		crop = row.scalar_one_or_none()
		if crop is None:
			raise _not_found(crop_id)
		return crop

	@staticmethod
	def _columns(payload: CropCreate) -> dict[str, Any]:
		columns = payload.model_dump(exclude={"soil_data"})
		columns["soil_data"] = payload.soil_data.model_dump() if payload.soil_data else None
		return columns

	@staticmethod
	def to_record(row: Crop) -> CropRecord:
		return CropRecord(
			crop_id=row.id,
			crop_type=row.crop_type,
			variety=row.variety,
			planting_date=row.planting_date,
			farm_size=row.farm_size,
			plot_location=row.plot_location,
			irrigation_method=row.irrigation_method,
			health_score=row.health_score,
			soil_data=row.soil_data,
			current_stage=row.current_stage,
			target_yield=row.target_yield,
			activities=row.activities or [],
			costs=row.costs or [],
			created_at=row.created_at,
			updated_at=row.updated_at,
		)
