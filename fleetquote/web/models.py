"""Request/response models for the FleetQuote web API."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from fleetquote.models import ImportStats


class MatrixSummary(BaseModel):
    id: str
    base_model_family: str
    variant_codes: list[str]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MatrixImportResponse(BaseModel):
    success: bool
    matrix_id: str
    base_model_family: str
    stats: ImportStats
    warnings: list[str] = Field(default_factory=list)


class QuoteRequest(BaseModel):
    """Selection to price; omitted groups fall back to Standard defaults."""

    selections: dict[str, str] = Field(default_factory=dict)
    use_standard_defaults: bool = True


class QuoteResponse(BaseModel):
    matrix_id: str
    variant_code: str
    selections: dict[str, str]
    options_cost: Decimal
    summary: list[str]
    valid: bool
    missing_specs: list[str]
