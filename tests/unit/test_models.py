"""Unit tests for FleetQuote Pydantic models."""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from fleetquote.models import (
    AvailabilityLevel,
    ConfigurationMatrix,
    ConfigurationOption,
    OptionPatch,
)


class TestAvailabilityLevel:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            (0, AvailabilityLevel.NOT_AVAILABLE),
            (1, AvailabilityLevel.STANDARD),
            (2, AvailabilityLevel.OPTIONAL),
            (3, AvailabilityLevel.SPECIAL_ORDER),
            ("2", AvailabilityLevel.OPTIONAL),
            (" 3 ", AvailabilityLevel.SPECIAL_ORDER),
            ("1 (std)", AvailabilityLevel.STANDARD),
            (2.0, AvailabilityLevel.OPTIONAL),
            (1.7, AvailabilityLevel.STANDARD),
            (4, AvailabilityLevel.NOT_AVAILABLE),
            (-1, AvailabilityLevel.NOT_AVAILABLE),
            ("x", AvailabilityLevel.NOT_AVAILABLE),
            ("", AvailabilityLevel.NOT_AVAILABLE),
            (None, AvailabilityLevel.NOT_AVAILABLE),
            (float("nan"), AvailabilityLevel.NOT_AVAILABLE),
            (True, AvailabilityLevel.NOT_AVAILABLE),
            (AvailabilityLevel.OPTIONAL, AvailabilityLevel.OPTIONAL),
        ],
    )
    def test_parse(self, raw, expected):
        assert AvailabilityLevel.parse(raw) is expected

    def test_labels_and_badges(self):
        assert AvailabilityLevel.NOT_AVAILABLE.label == "Not Available"
        assert AvailabilityLevel.STANDARD.label == "Standard"
        assert AvailabilityLevel.OPTIONAL.label == "Optional"
        assert AvailabilityLevel.SPECIAL_ORDER.label == "Special Order"
        assert AvailabilityLevel.STANDARD.badge_colour == "green"
        assert AvailabilityLevel.NOT_AVAILABLE.badge_colour == "red"

    def test_selectable_and_priced_tiers(self):
        assert not AvailabilityLevel.NOT_AVAILABLE.is_selectable
        assert AvailabilityLevel.STANDARD.is_selectable
        assert not AvailabilityLevel.STANDARD.is_priced
        assert AvailabilityLevel.OPTIONAL.is_priced
        assert AvailabilityLevel.SPECIAL_ORDER.is_priced


class TestConfigurationOption:
    def test_availability_normalized_on_construction(self):
        option = ConfigurationOption(option_code="A", spec_code="1135", availability="7")
        assert option.availability is AvailabilityLevel.NOT_AVAILABLE

    def test_defaults(self):
        option = ConfigurationOption(option_code="A", spec_code="1135")
        assert option.description == ""
        assert option.eur_cost_delta == Decimal("0")
        assert option.is_default is False

    def test_negative_cost_delta_rejected(self):
        with pytest.raises(ValidationError):
            ConfigurationOption(option_code="A", spec_code="1135", eur_cost_delta=Decimal("-1"))


class TestOptionPatch:
    def test_only_set_fields_are_dumped(self):
        patch = OptionPatch(eur_cost_delta=Decimal("99.50"))
        assert patch.model_dump(exclude_unset=True) == {"eur_cost_delta": Decimal("99.50")}

    def test_availability_normalized(self):
        assert OptionPatch(availability="2").availability is AvailabilityLevel.OPTIONAL

    def test_negative_cost_delta_rejected(self):
        with pytest.raises(ValidationError):
            OptionPatch(eur_cost_delta=Decimal("-0.01"))


class TestConfigurationMatrix:
    def test_generates_id_and_leaves_timestamps_unset(self):
        first = ConfigurationMatrix(base_model_family="EG16")
        second = ConfigurationMatrix(base_model_family="EG16")
        assert first.id != second.id
        assert first.created_at is None
        assert first.updated_at is None

    def test_find_helpers(self, sample_matrix):
        variant = sample_matrix.find_variant("EG16P")
        assert variant is not None
        assert sample_matrix.find_variant("EG20") is None

        group = variant.find_group("1135")
        assert group.group_name == "BATTERY TECHNOLOGY"
        assert variant.find_group("9999") is None

        assert group.find_option("OPT-BATT-LI").description == "Lithium-ion"
        assert group.find_option("missing") is None

    def test_json_round_trip_keeps_decimal_costs(self, sample_matrix):
        restored = ConfigurationMatrix.model_validate(sample_matrix.model_dump(mode="json"))
        option = restored.find_variant("EG16P").find_group("5100").find_option("OPT-CAB-FULL")
        assert option.eur_cost_delta == Decimal("3200.50")
        assert option.availability is AvailabilityLevel.SPECIAL_ORDER
