"""Pytest configuration and fixtures for FleetQuote tests.

Provides common fixtures for testing.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from fleetquote.config import reset_config
from fleetquote.models import (
    AvailabilityLevel,
    ConfigurationMatrix,
    ConfigurationOption,
    ConfigurationVariant,
    SpecificationGroup,
)

HEADER_ROW = ["Material Number", "Long Code", "Spec Code", "Description", "V1", "V2", "V3", "V4", "V5"]


def sheet_row(family, long_code, spec_code, description, *slots):
    """Build one raw sheet row, padding the availability slots with zeros."""
    padded = list(slots) + [0] * (5 - len(slots))
    return [family, long_code, spec_code, description, *padded]


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Set up test environment variables."""
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    reset_config()
    yield
    reset_config()


@pytest.fixture
def eg16_rows() -> list[list]:
    """Two-variant EG16 sheet: three-wheel in slot 0, four-wheel in slot 1."""
    return [
        HEADER_ROW,
        sheet_row("EG16", "1275000000211000001", "1100", "EG16P Three-wheel", 1, 0),
        sheet_row("EG16", "1275000000211000002", "1100", "EG16 Four-wheel", 0, 1),
        sheet_row("EG16", "OPT-BATT-PB", "1135", "Lead-acid", 1, 1),
        sheet_row("EG16", "OPT-BATT-LI", "1135", "Lithium-ion", 2, 3),
        sheet_row("EG16", "OPT-WHL-SE", "1300", "Superelastic tires", 1, 0),
        sheet_row("EG16", "OPT-WHL-NM", "1300", "Non-marking tires", 2, 1),
        sheet_row("EG16", "OPT-CAB-FULL", "5100", "Full cabin", 3, 0),
    ]


@pytest.fixture
def three_wheel_variant() -> ConfigurationVariant:
    """Variant with priced and standard options across three groups."""
    return ConfigurationVariant(
        variant_code="EG16P",
        variant_name="EG16P Three-wheel",
        model_code="EG16",
        specifications=[
            SpecificationGroup(
                group_code="1135",
                group_name="BATTERY TECHNOLOGY",
                category="Battery",
                options=[
                    ConfigurationOption(
                        option_code="OPT-BATT-PB",
                        spec_code="1135",
                        description="Lead-acid",
                        availability=AvailabilityLevel.STANDARD,
                        eur_cost_delta=Decimal("500"),
                        is_default=True,
                    ),
                    ConfigurationOption(
                        option_code="OPT-BATT-LI",
                        spec_code="1135",
                        description="Lithium-ion",
                        availability=AvailabilityLevel.OPTIONAL,
                        eur_cost_delta=Decimal("1450.00"),
                    ),
                ],
            ),
            SpecificationGroup(
                group_code="5100",
                group_name="CABIN",
                category="Cabin & Comfort",
                options=[
                    ConfigurationOption(
                        option_code="OPT-CAB-FULL",
                        spec_code="5100",
                        description="Full cabin",
                        availability=AvailabilityLevel.SPECIAL_ORDER,
                        eur_cost_delta=Decimal("3200.50"),
                    ),
                    ConfigurationOption(
                        option_code="OPT-CAB-ROOF",
                        spec_code="5100",
                        description="Roof only",
                        availability=AvailabilityLevel.OPTIONAL,
                    ),
                ],
            ),
            SpecificationGroup(
                group_code="4200",
                group_name="LIGHTING",
                category="Controls & Safety",
                options=[
                    ConfigurationOption(
                        option_code="OPT-LED",
                        spec_code="4200",
                        description="LED work lights",
                        availability=AvailabilityLevel.NOT_AVAILABLE,
                    ),
                ],
            ),
        ],
    )


@pytest.fixture
def sample_matrix(three_wheel_variant: ConfigurationVariant) -> ConfigurationMatrix:
    """EG16 matrix with a single three-wheel variant."""
    return ConfigurationMatrix(
        id="matrix-eg16",
        base_model_family="EG16",
        variants=[three_wheel_variant],
    )
