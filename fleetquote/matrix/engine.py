"""Configuration engine: pure pricing and validation over a variant.

A selection maps spec group code -> chosen option code. None of these
functions mutate their inputs. Passing ``None`` as the variant (nothing
chosen yet in the quote builder) yields the empty answer.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal

from fleetquote.models import (
    AvailabilityLevel,
    ConfigurationOption,
    ConfigurationVariant,
    SpecificationGroup,
    ValidationResult,
)

Selection = Mapping[str, str]


def get_available_options(
    variant: ConfigurationVariant | None, spec_code: str
) -> list[ConfigurationOption]:
    """Options in the group that can be selected (availability above NotAvailable)."""
    if variant is None:
        return []
    group = variant.find_group(spec_code)
    if group is None:
        return []
    return [option for option in group.options if option.availability.is_selectable]


def get_standard_options(
    variant: ConfigurationVariant | None,
) -> dict[str, ConfigurationOption]:
    """First Standard option per group; groups without one are omitted."""
    if variant is None:
        return {}

    standard: dict[str, ConfigurationOption] = {}
    for group in variant.specifications:
        for option in group.options:
            if option.availability == AvailabilityLevel.STANDARD:
                standard[group.group_code] = option
                break
    return standard


def initialize_selections(variant: ConfigurationVariant | None) -> dict[str, str]:
    """Default selection: every group's Standard option."""
    return {
        spec_code: option.option_code
        for spec_code, option in get_standard_options(variant).items()
    }


def _selected_options(
    variant: ConfigurationVariant, selections: Selection
) -> list[ConfigurationOption]:
    # Unknown spec or option codes are skipped, not errors
    selected = []
    for spec_code, option_code in selections.items():
        group = variant.find_group(spec_code)
        if group is None:
            continue
        option = group.find_option(option_code)
        if option is not None:
            selected.append(option)
    return selected


def calculate_configuration_cost(
    variant: ConfigurationVariant | None, selections: Selection
) -> Decimal:
    """Sum of cost deltas for selected options priced above Standard.

    Standard selections contribute nothing even when their ``eur_cost_delta``
    is nonzero.
    """
    if variant is None:
        return Decimal("0")

    total = Decimal("0")
    for option in _selected_options(variant, selections):
        if option.availability.is_priced:
            total += option.eur_cost_delta
    return total


def validate_configuration(
    variant: ConfigurationVariant | None, selections: Selection
) -> ValidationResult:
    """Check every required group has a selection.

    A group is required iff at least one of its options is available.
    Missing groups are reported by group name.
    """
    if variant is None:
        return ValidationResult(valid=False, missing_specs=[])

    missing_specs = []
    for group in variant.specifications:
        required = any(option.availability.is_selectable for option in group.options)
        if required and not selections.get(group.group_code):
            missing_specs.append(group.group_name)

    return ValidationResult(valid=not missing_specs, missing_specs=missing_specs)


def generate_configuration_summary(
    variant: ConfigurationVariant | None, selections: Selection
) -> list[str]:
    """Human-readable summary lines for a quote.

    The first line names the variant; after that only options above Standard
    are listed, with a ``(+€delta)`` suffix when they carry a cost.
    """
    if variant is None:
        return []

    summary = [f"{variant.variant_name} ({variant.variant_code})"]
    for option in _selected_options(variant, selections):
        if not option.availability.is_priced:
            continue
        cost_str = f" (+€{option.eur_cost_delta:,})" if option.eur_cost_delta > 0 else ""
        summary.append(f"{option.description}{cost_str}")
    return summary


def get_specifications_by_category(
    variant: ConfigurationVariant | None,
) -> dict[str, list[SpecificationGroup]]:
    """Spec groups bucketed by category, preserving variant order."""
    if variant is None:
        return {}

    categorized: dict[str, list[SpecificationGroup]] = {}
    for group in variant.specifications:
        categorized.setdefault(group.category, []).append(group)
    return categorized
