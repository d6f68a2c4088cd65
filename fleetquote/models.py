"""FleetQuote Pydantic models for the configuration matrix catalog.

Availability levels, options, specification groups, variants and matrices,
plus the result objects handed back by the importer and the engine.
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from decimal import Decimal
from enum import IntEnum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class AvailabilityLevel(IntEnum):
    """Policy tag controlling whether an option is selectable and priced."""

    NOT_AVAILABLE = 0
    STANDARD = 1  # Included in base price, auto-selected
    OPTIONAL = 2  # Selectable at extra cost
    SPECIAL_ORDER = 3  # Selectable at extra cost, factory lead time

    @classmethod
    def parse(cls, value: Any) -> AvailabilityLevel:
        """Normalize a raw cell or stored value to an availability level.

        Leading-integer semantics: ``"2"``, ``2``, ``2.0`` and ``" 3 "`` parse;
        anything unparseable or outside 0-3 becomes NOT_AVAILABLE.
        """
        if isinstance(value, cls):
            return value
        if value is None or isinstance(value, bool):
            return cls.NOT_AVAILABLE
        if isinstance(value, float):
            if math.isnan(value) or math.isinf(value):
                return cls.NOT_AVAILABLE
            value = int(value)
        if isinstance(value, int):
            parsed = value
        else:
            match = _LEADING_INT.match(str(value))
            if not match:
                return cls.NOT_AVAILABLE
            parsed = int(match.group(1))

        try:
            return cls(parsed)
        except ValueError:
            return cls.NOT_AVAILABLE

    @property
    def label(self) -> str:
        return _AVAILABILITY_BADGES[self][0]

    @property
    def badge_colour(self) -> str:
        return _AVAILABILITY_BADGES[self][1]

    @property
    def is_selectable(self) -> bool:
        return self > AvailabilityLevel.NOT_AVAILABLE

    @property
    def is_priced(self) -> bool:
        """Only tiers above Standard carry an incremental cost."""
        return self > AvailabilityLevel.STANDARD


_AVAILABILITY_BADGES: dict[AvailabilityLevel, tuple[str, str]] = {
    AvailabilityLevel.NOT_AVAILABLE: ("Not Available", "red"),
    AvailabilityLevel.STANDARD: ("Standard", "green"),
    AvailabilityLevel.OPTIONAL: ("Optional", "blue"),
    AvailabilityLevel.SPECIAL_ORDER: ("Special Order", "yellow"),
}


class ConfigurationOption(BaseModel):
    """One selectable choice within a specification group."""

    option_code: str  # "127500000021135005"
    spec_code: str  # "1135"
    description: str = ""
    availability: AvailabilityLevel = AvailabilityLevel.NOT_AVAILABLE
    eur_cost_delta: Decimal = Decimal("0")
    is_default: bool = False

    @field_validator("availability", mode="before")
    @classmethod
    def normalize_availability(cls, v: Any) -> AvailabilityLevel:
        return AvailabilityLevel.parse(v)

    @field_validator("eur_cost_delta")
    @classmethod
    def validate_cost_delta(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("eur_cost_delta must be non-negative")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "option_code": "127500000021135005",
                "spec_code": "1135",
                "description": "Lead acid batteries",
                "availability": 2,
                "eur_cost_delta": "1450.00",
                "is_default": False,
            }
        }


class SpecificationGroup(BaseModel):
    """Named bucket of related options keyed by a numeric spec code."""

    group_code: str
    group_name: str
    category: str
    options: list[ConfigurationOption] = Field(default_factory=list)

    def find_option(self, option_code: str) -> ConfigurationOption | None:
        for option in self.options:
            if option.option_code == option_code:
                return option
        return None


class ConfigurationVariant(BaseModel):
    """One buildable sub-model within a base model family."""

    variant_code: str  # "EG16P"
    variant_name: str  # "EG16P Three-wheel"
    model_code: str  # Owning matrix family
    base_eur_cost: Decimal = Decimal("0")
    specifications: list[SpecificationGroup] = Field(default_factory=list)

    def find_group(self, group_code: str) -> SpecificationGroup | None:
        for group in self.specifications:
            if group.group_code == group_code:
                return group
        return None


class ConfigurationMatrix(BaseModel):
    """Full option catalog for one base model family.

    Timestamps are None on drafts; the repository stamps them on save.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    base_model_family: str
    variants: list[ConfigurationVariant] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def find_variant(self, variant_code: str) -> ConfigurationVariant | None:
        for variant in self.variants:
            if variant.variant_code == variant_code:
                return variant
        return None

    class Config:
        json_schema_extra = {
            "example": {
                "base_model_family": "EG16",
                "variants": [
                    {
                        "variant_code": "EG16P",
                        "variant_name": "EG16P Three-wheel",
                        "model_code": "EG16",
                        "base_eur_cost": "0",
                        "specifications": [],
                    }
                ],
            }
        }


class OptionPatch(BaseModel):
    """Partial update for a single option; only fields that were set are merged."""

    description: str | None = None
    availability: AvailabilityLevel | None = None
    eur_cost_delta: Decimal | None = None
    is_default: bool | None = None

    @field_validator("availability", mode="before")
    @classmethod
    def normalize_availability(cls, v: Any) -> AvailabilityLevel | None:
        if v is None:
            return None
        return AvailabilityLevel.parse(v)

    @field_validator("eur_cost_delta")
    @classmethod
    def validate_cost_delta(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v < 0:
            raise ValueError("eur_cost_delta must be non-negative")
        return v


class ImportStats(BaseModel):
    variants_found: int = 0
    spec_groups_found: int = 0
    options_imported: int = 0


class ImportResult(BaseModel):
    """Outcome of a spreadsheet import; fatal results never carry a matrix."""

    success: bool
    matrix: ConfigurationMatrix | None = None
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    stats: ImportStats = Field(default_factory=ImportStats)


class ValidationResult(BaseModel):
    valid: bool
    missing_specs: list[str] = Field(default_factory=list)
