"""Batch advisory job model: one row per daily advisory run."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Enum, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from agrismart.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from agrismart.models.enums import JobStatusEnum


class AdvisoryJob(Base, UUIDPrimaryKeyMixin, TimestampMixin):
	"""Tracks lifecycle and counters of a batch advisory run."""

	__tablename__ = "advisory_jobs"
	__table_args__ = (
		Index("ix_advisory_jobs_status", "status"),
	)

	status: Mapped[JobStatusEnum] = mapped_column(
		Enum(
			JobStatusEnum,
			name="job_status",
			create_constraint=False,
			native_enum=True,
		),
		nullable=False,
		default=JobStatusEnum.queued,
		server_default=JobStatusEnum.queued.value,
	)
	processed_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
	skipped_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
	started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
	completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
	error: Mapped[str | None] = mapped_column(String(2048), nullable=True)

	def __repr__(self) -> str:
		return f"<AdvisoryJob id={self.id} status={self.status} processed={self.processed_count}>"
