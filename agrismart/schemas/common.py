"""Result envelope returned by calls that cross an upstream boundary."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ServiceResult(BaseModel, Generic[T]):
	success: bool
	data: T | None = None
	error: str | None = None
	timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

	@classmethod
	def ok(cls, data: T) -> "ServiceResult[T]":
		return cls(success=True, data=data)

	@classmethod
	def fail(cls, error: str) -> "ServiceResult[T]":
		return cls(success=False, error=error)
