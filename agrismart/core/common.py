"""Shared helpers for the pure advisory calculators."""

from __future__ import annotations

import math
from typing import Protocol


class InvalidInputError(ValueError):
	"""Raised when a calculator receives values it cannot meaningfully compute on."""


class RandomSource(Protocol):
	"""Anything exposing ``random()`` in [0, 1), such as ``random.Random``."""

	def random(self) -> float: ...


def round_half_up(value: float) -> int:
	"""Round to the nearest integer, halves upward (``round`` would give 2 for 2.5)."""
	return int(math.floor(value + 0.5))


def require_positive(name: str, value: float) -> None:
	if not math.isfinite(value) or value <= 0:
		raise InvalidInputError(f"{name} must be a positive number, got {value!r}")


def require_percentage(name: str, value: float) -> None:
	if not math.isfinite(value) or value < 0 or value > 100:
		raise InvalidInputError(f"{name} must be within 0-100, got {value!r}")
