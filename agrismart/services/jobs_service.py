"""Durable batch advisory job orchestration service."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime

from redis.asyncio import Redis
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agrismart.models.enums import JobStatusEnum
from agrismart.models.jobs import AdvisoryJob
from agrismart.schemas.jobs import JobCreateResponse, JobStatusResponse
from agrismart.services.advisory_service import AdvisoryService
from agrismart.services.crop_repository import CropRepository

JOB_STATUS_TTL_SECONDS = 60 * 60 * 24

_logger = logging.getLogger("agrismart.jobs")


class JobsService:
	def __init__(self, db: AsyncSession, redis_client: Redis | None = None):
		self.db = db
		self.redis_client = redis_client

	async def create_advisory_job(self) -> JobCreateResponse:
		job = AdvisoryJob(status=JobStatusEnum.queued, processed_count=0, skipped_count=0)
		self.db.add(job)
		await self._flush(job)
		await self._persist_job_status(job)
		return JobCreateResponse(job_id=job.id, status=job.status.value, created_at=job.created_at)

	async def get_job_status(self, job_id: uuid.UUID) -> JobStatusResponse:
		cached = await self._read_cached_status(job_id)
		if cached is not None:
			return cached

		job = await self._require_job(job_id)
		payload = self._to_status_payload(job)
		await self._persist_job_status(job)
		return payload

	async def execute_advisory_run(
		self,
		job_id: uuid.UUID,
		crops: CropRepository,
		advisory: AdvisoryService,
	) -> JobStatusResponse:
		"""Assemble an advisory for every registered crop.

		Crops whose weather or market lookup fails are counted as skipped; the
		run itself only fails on an unexpected error.
		"""
		job = await self._require_job(job_id)
		job.status = JobStatusEnum.running
		job.started_at = datetime.now(UTC)
		job.error = None
		await self._flush(job)
		await self._persist_job_status(job)

		try:
			processed = skipped = 0
			for crop in await crops.list_crops():
				result = await advisory.build_for_record(crop)
				if result.success:
					processed += 1
				else:
					skipped += 1
			job.processed_count = processed
			job.skipped_count = skipped
			job.status = JobStatusEnum.succeeded
			job.completed_at = datetime.now(UTC)
		except Exception as exc:
			job.status = JobStatusEnum.failed
			job.completed_at = datetime.now(UTC)
			job.error = str(exc)
			await self._flush(job)
			await self._persist_job_status(job)
			_logger.exception("advisory_job_failed", extra={"job_id": str(job_id)})
			raise

		await self._flush(job)
		await self._persist_job_status(job)
		_logger.info(
			"advisory_job_completed",
			extra={"job_id": str(job_id), "processed": job.processed_count, "skipped": job.skipped_count},
		)
		return self._to_status_payload(job)

	async def _flush(self, job: AdvisoryJob) -> None:
		# updated_at is regenerated on UPDATE and expires with the flush.
		await self.db.flush()
		await self.db.refresh(job)

	async def _require_job(self, job_id: uuid.UUID) -> AdvisoryJob:
		row = await self.db.execute(select(AdvisoryJob).where(AdvisoryJob.id == job_id))
		job = row.scalar_one_or_none()
		if job is None:
			raise LookupError(f"Job {job_id} not found")
		return job

	async def _persist_job_status(self, job: AdvisoryJob) -> None:
		if self.redis_client is None:
			return
		key = f"job:{job.id}:status"
		payload = self._to_status_payload(job).model_dump(mode="json")
		await self.redis_client.setex(key, JOB_STATUS_TTL_SECONDS, json.dumps(payload))

	async def _read_cached_status(self, job_id: uuid.UUID) -> JobStatusResponse | None:
		if self.redis_client is None:
			return None
		value = await self.redis_client.get(f"job:{job_id}:status")
		if value is None:
			return None
		return JobStatusResponse(**json.loads(value))

	@staticmethod
	def _to_status_payload(job: AdvisoryJob) -> JobStatusResponse:
		return JobStatusResponse(
			job_id=job.id,
			status=job.status.value,
			processed_count=job.processed_count or 0,
			skipped_count=job.skipped_count or 0,
			created_at=job.created_at,
			started_at=job.started_at,
			completed_at=job.completed_at,
			error=job.error,
			updated_at=job.updated_at,
		)
