"""Shared types, enums, and base models used across popexposure domain models."""

from datetime import datetime, timezone
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel
from uuid_extensions import uuid7


def utc_now() -> datetime:
    """Return the current UTC timestamp (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def new_uuid7() -> UUID:
    """Generate a new time-sortable UUID v7."""
    return uuid7()


# --- Shared enums ---


class Location(StrEnum):
    """Location scope restricting which geographic demand is included."""

    DOMESTIC = "DOMESTIC"
    IMPORTS = "IMPORTS"
    TOTAL = "TOTAL"


class Pollutant(StrEnum):
    """Ambient pollutant species reported by the concentration model."""

    PNH4 = "PNH4"
    PNO3 = "PNO3"
    PSO4 = "PSO4"
    SOA = "SOA"
    PRIMARY_PM25 = "PRIMARY_PM25"
    TOTAL_PM25 = "TOTAL_PM25"


class FinalDemandType(StrEnum):
    """Final demand categories of the input-output model."""

    ALL_DEMAND = "ALL_DEMAND"
    PERSONAL_CONSUMPTION = "PERSONAL_CONSUMPTION"
    PRIVATE_STRUCTURES = "PRIVATE_STRUCTURES"
    PRIVATE_EQUIPMENT = "PRIVATE_EQUIPMENT"
    PRIVATE_IP = "PRIVATE_IP"
    PRIVATE_RESIDENTIAL = "PRIVATE_RESIDENTIAL"
    INVENTORY_CHANGE = "INVENTORY_CHANGE"
    EXPORT = "EXPORT"
    DEFENSE = "DEFENSE"
    NON_DEFENSE = "NON_DEFENSE"
    STATE_LOCAL = "STATE_LOCAL"


# --- Base model ---


class PopExposureBase(BaseModel):
    """Base model with common configuration for all popexposure Pydantic models."""

    model_config = {
        "populate_by_name": True,
        "protected_namespaces": (),
    }
