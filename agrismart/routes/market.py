"""Mandi price routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from agrismart.dependencies import get_market_source, get_price_analytics
from agrismart.schemas.market import (
	MarketPricesResponse,
	PriceHistoryFilters,
	PriceHistoryResponse,
	PriceStatsResponse,
)
from agrismart.services.market_service import MarketPriceSource, PriceAnalyticsService

router = APIRouter(prefix="/market", tags=["market"])


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="market failure")


@router.get("/prices", response_model=MarketPricesResponse)
async def get_prices(source: MarketPriceSource = Depends(get_market_source)) -> MarketPricesResponse:
	result = await source.latest_prices()
	if not result.success or result.data is None:
		raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.error)
	return MarketPricesResponse(items=result.data)


@router.post("/history", response_model=PriceHistoryResponse)
async def get_price_history(
	filters: PriceHistoryFilters,
	service: PriceAnalyticsService = Depends(get_price_analytics),
) -> PriceHistoryResponse:
	try:
		return service.history(filters)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.post("/stats", response_model=PriceStatsResponse)
async def get_price_stats(
	filters: PriceHistoryFilters,
	service: PriceAnalyticsService = Depends(get_price_analytics),
) -> PriceStatsResponse:
	try:
		return service.stats(filters)
	except Exception as exc:
		raise _map_error(exc) from exc
