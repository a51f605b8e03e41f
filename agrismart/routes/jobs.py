"""Background batch advisory job routes."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from agrismart.config import get_settings
from agrismart.database import async_session_factory, get_db
from agrismart.dependencies import get_market_source
from agrismart.schemas.jobs import JobCreateResponse, JobStatusResponse
from agrismart.services.advisory_service import AdvisoryService
from agrismart.services.crop_repository import SqlCropRepository
from agrismart.services.jobs_service import JobsService
from agrismart.services.market_service import MarketPriceSource
from agrismart.services.weather_service import WeatherService

router = APIRouter(prefix="/jobs", tags=["jobs"])

_logger = logging.getLogger("agrismart.jobs")


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="job failure")


async def _run_advisory_job(
	job_id: uuid.UUID,
	redis_client: Any | None,
	market_source: MarketPriceSource,
) -> None:
	settings = get_settings()
	async with async_session_factory() as session:
		service = JobsService(session, redis_client)
		crops = SqlCropRepository(session)
		advisory = AdvisoryService(crops, WeatherService(redis_client, settings=settings), market_source, settings)
		try:
			await service.execute_advisory_run(job_id, crops, advisory)
		except Exception as exc:
			# The failed status row was flushed by the service; keep it.
			_logger.error("advisory_job_aborted", extra={"job_id": str(job_id), "error": str(exc)})
		await session.commit()


@router.post("/advisory", response_model=JobCreateResponse, status_code=status.HTTP_202_ACCEPTED)
async def create_advisory_job(
	request: Request,
	background_tasks: BackgroundTasks,
	db: AsyncSession = Depends(get_db),
	market_source: MarketPriceSource = Depends(get_market_source),
) -> JobCreateResponse:
	redis_client = getattr(request.app.state, "redis", None)
	service = JobsService(db, redis_client)
	try:
		response = await service.create_advisory_job()
	except Exception as exc:
		raise _map_error(exc) from exc

	background_tasks.add_task(_run_advisory_job, response.job_id, redis_client, market_source)
	return response


@router.get("/{job_id}/status", response_model=JobStatusResponse)
async def get_job_status(
	job_id: uuid.UUID,
	request: Request,
	db: AsyncSession = Depends(get_db),
) -> JobStatusResponse:
	service = JobsService(db, getattr(request.app.state, "redis", None))
	try:
		return await service.get_job_status(job_id)
	except Exception as exc:
		raise _map_error(exc) from exc
