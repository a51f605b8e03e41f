"""Domain enum types shared by ORM models and API schemas.

Each StrEnum maps 1:1 to a PostgreSQL CREATE TYPE ... AS ENUM where it is
stored.  These are separate from the Pydantic StrEnum in agrismart/config.py —
config enums validate settings, these enums type columns and payloads.
"""

from enum import StrEnum

# ── Crop registry enums ─────────────────────────────────────────────────────


class IrrigationMethodEnum(StrEnum):
    """How water is delivered to a plot."""

    drip = "drip"
    sprinkler = "sprinkler"
    flood = "flood"


class SoilTypeEnum(StrEnum):
    """Soil classes used as a water-holding-capacity proxy."""

    black = "Black"
    sandy = "Sandy"
    loamy = "Loamy"


# ── Advisory enums ──────────────────────────────────────────────────────────


class IrrigationActionEnum(StrEnum):
    """Outcome of the irrigation decision policy."""

    irrigate = "IRRIGATE"
    skip = "SKIP"
    delay = "DELAY"


class RiskTierEnum(StrEnum):
    """Disease / pest risk tier derived from a score threshold."""

    high = "High"
    moderate = "Moderate"
    low = "Low"


class MilestoneStatusEnum(StrEnum):
    """Position of a phenology milestone relative to today."""

    pending = "pending"
    active = "active"
    completed = "completed"


class PriceTrendEnum(StrEnum):
    """Direction of the latest mandi price change."""

    up = "UP"
    down = "DOWN"


class WeatherSuitabilityEnum(StrEnum):
    """Harvest-day weather rating."""

    excellent = "Excellent"
    poor = "Poor"


class ImpactLevelEnum(StrEnum):
    """Weather-impact severity for a crop."""

    critical = "Critical"
    high = "High"
    moderate = "Moderate"
    low = "Low"


class DeficiencyEnum(StrEnum):
    """Soil nutrient deficiency grade."""

    none = "None"
    marginal = "Marginal"
    severe = "Severe"


# ── Job enums ───────────────────────────────────────────────────────────────


class JobStatusEnum(StrEnum):
    """Lifecycle of a batch advisory job."""

    queued = "queued"
    running = "running"
    succeeded = "succeeded"
    failed = "failed"
