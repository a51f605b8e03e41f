"""ORM model registry — importing this module registers every table on Base.metadata.

Alembic ``env.py`` imports ``Base`` from here (not from ``base.py``) so that
autogenerate sees all tables.
"""

from agrismart.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from agrismart.models.crops import Crop
from agrismart.models.enums import (
    DeficiencyEnum,
    ImpactLevelEnum,
    IrrigationActionEnum,
    IrrigationMethodEnum,
    JobStatusEnum,
    MilestoneStatusEnum,
    PriceTrendEnum,
    RiskTierEnum,
    SoilTypeEnum,
    WeatherSuitabilityEnum,
)
from agrismart.models.jobs import AdvisoryJob

__all__ = [
    "AdvisoryJob",
    "Base",
    "Crop",
    "DeficiencyEnum",
    "ImpactLevelEnum",
    "IrrigationActionEnum",
    "IrrigationMethodEnum",
    "JobStatusEnum",
    "MilestoneStatusEnum",
    "PriceTrendEnum",
    "RiskTierEnum",
    "SoilTypeEnum",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "WeatherSuitabilityEnum",
]
