"""crop_registry

Revision ID: 3c71e0a4b9d2
Revises:
Create Date: 2026-10-19 09:30:00.000000
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "3c71e0a4b9d2"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ENUM_IRRIGATION_METHOD = postgresql.ENUM(
	"drip",
	"sprinkler",
	"flood",
	name="irrigation_method",
	create_type=False,
)

ENUM_JOB_STATUS = postgresql.ENUM(
	"queued",
	"running",
	"succeeded",
	"failed",
	name="job_status",
	create_type=False,
)


def _timestamps() -> list[sa.Column]:
	return [
		sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
		sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
	]


def upgrade() -> None:
	ENUM_IRRIGATION_METHOD.create(op.get_bind(), checkfirst=True)
	ENUM_JOB_STATUS.create(op.get_bind(), checkfirst=True)

	op.create_table(
		"crops",
		sa.Column(
			"id",
			postgresql.UUID(as_uuid=True),
			server_default=sa.text("gen_random_uuid()"),
			nullable=False,
		),
		sa.Column("crop_type", sa.String(length=100), nullable=False),
		sa.Column("variety", sa.String(length=255), server_default="", nullable=False),
		sa.Column("planting_date", sa.Date(), nullable=False),
		sa.Column("farm_size", sa.Float(), nullable=False),
		sa.Column("plot_location", sa.String(length=255), nullable=True),
		sa.Column("irrigation_method", ENUM_IRRIGATION_METHOD, nullable=False),
		sa.Column("health_score", sa.Float(), nullable=False),
		sa.Column("current_stage", sa.String(length=100), nullable=True),
		sa.Column("target_yield", sa.Float(), nullable=False),
		sa.Column("soil_data", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
		sa.Column("activities", postgresql.JSONB(astext_type=sa.Text()), server_default="[]", nullable=False),
		sa.Column("costs", postgresql.JSONB(astext_type=sa.Text()), server_default="[]", nullable=False),
		*_timestamps(),
		sa.PrimaryKeyConstraint("id"),
	)
	op.create_index("ix_crops_crop_type", "crops", ["crop_type"])

	op.create_table(
		"advisory_jobs",
		sa.Column(
			"id",
			postgresql.UUID(as_uuid=True),
			server_default=sa.text("gen_random_uuid()"),
			nullable=False,
		),
		sa.Column("status", ENUM_JOB_STATUS, nullable=False, server_default=sa.text("'queued'")),
		sa.Column("processed_count", sa.Integer(), server_default="0", nullable=False),
		sa.Column("skipped_count", sa.Integer(), server_default="0", nullable=False),
		sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
		sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
		sa.Column("error", sa.String(length=2048), nullable=True),
		*_timestamps(),
		sa.PrimaryKeyConstraint("id"),
	)
	op.create_index("ix_advisory_jobs_status", "advisory_jobs", ["status"])


def downgrade() -> None:
	op.drop_index("ix_advisory_jobs_status", table_name="advisory_jobs")
	op.drop_table("advisory_jobs")
	op.drop_index("ix_crops_crop_type", table_name="crops")
	op.drop_table("crops")
	ENUM_JOB_STATUS.drop(op.get_bind(), checkfirst=True)
	ENUM_IRRIGATION_METHOD.drop(op.get_bind(), checkfirst=True)
