"""Vendor configuration spreadsheet importer.

Turns the fixed-layout vendor sheet into a candidate ConfigurationMatrix.

Expected layout (first sheet only, row 0 is a header and is not parsed):
    Column A: Material Number (base model family)
    Column B: Long Code (option identifier)
    Column C: Spec Code (1100, 1135, ...)
    Column D: Description
    Columns E-I: five availability slots (0-3, anything else is 0)

Import runs in three passes: discover variants from the 1100 MODEL rows,
assign every row's availability to each discovered variant, then assemble
specification groups and the matrix. Row-level problems become warnings;
only an unusable sheet fails the import.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from datetime import datetime, timezone
from io import BytesIO
from pathlib import Path
from typing import IO, Any

import pandas as pd

from fleetquote.matrix.spec_codes import (
    MODEL_SPEC_CODE,
    get_spec_category,
    get_spec_group_name,
)
from fleetquote.matrix.variant_codes import extract_variant_code
from fleetquote.models import (
    AvailabilityLevel,
    ConfigurationMatrix,
    ConfigurationOption,
    ConfigurationVariant,
    ImportResult,
    ImportStats,
    SpecificationGroup,
)

logger = logging.getLogger(__name__)

COL_MATERIAL_NUMBER = 0
COL_LONG_CODE = 1
COL_SPEC_CODE = 2
COL_DESCRIPTION = 3
COL_FIRST_AVAILABILITY = 4
AVAILABILITY_SLOTS = 5

UNKNOWN_FAMILY = "UNKNOWN"

WorkbookSource = str | Path | bytes | IO[bytes]


def cell_text(value: Any) -> str:
    """Stringify a raw cell value.

    Blank and NaN cells become ``""``; integral floats lose their ``.0`` so
    numeric spec codes read as ``"1100"`` rather than ``"1100.0"``.
    """
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def _cell(row: Sequence[Any], index: int) -> Any:
    return row[index] if index < len(row) else None


def _availability(row: Sequence[Any], slot: int) -> AvailabilityLevel:
    return AvailabilityLevel.parse(_cell(row, COL_FIRST_AVAILABILITY + slot))


def _failed(errors: list[str], warnings: list[str]) -> ImportResult:
    for error in errors:
        logger.error(f"Configuration import failed: {error}")
    return ImportResult(success=False, errors=errors, warnings=warnings)


def discover_variants(
    data_rows: Sequence[Sequence[Any]],
    base_model_family: str,
) -> list[tuple[ConfigurationVariant, int]]:
    """First pass: find variants on the 1100 MODEL rows.

    Every availability slot above zero on a MODEL row names a variant.
    Codes are deduplicated keeping first-seen order; each variant keeps the
    slot it was first seen in.

    Returns:
        List of (variant, slot_index) pairs
    """
    discovered: list[tuple[ConfigurationVariant, int]] = []
    seen_codes: set[str] = set()

    for row in data_rows:
        if cell_text(_cell(row, COL_SPEC_CODE)) != MODEL_SPEC_CODE:
            continue

        description = cell_text(_cell(row, COL_DESCRIPTION))
        for slot in range(AVAILABILITY_SLOTS):
            if _availability(row, slot) <= AvailabilityLevel.NOT_AVAILABLE:
                continue

            variant_code = extract_variant_code(description, slot)
            if variant_code in seen_codes:
                continue

            seen_codes.add(variant_code)
            discovered.append(
                (
                    ConfigurationVariant(
                        variant_code=variant_code,
                        variant_name=description or f"Variant {slot + 1}",
                        model_code=base_model_family,
                    ),
                    slot,
                )
            )

    return discovered


def import_matrix_from_rows(rows: Sequence[Sequence[Any]]) -> ImportResult:
    """Build a configuration matrix from raw sheet rows.

    Args:
        rows: All sheet rows including the header row at index 0

    Returns:
        ImportResult; ``matrix`` is set only when ``success`` is True
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not rows:
        errors.append("Sheet is empty")
        return _failed(errors, warnings)

    if len(rows) < 2:
        errors.append("Sheet has no data rows")
        return _failed(errors, warnings)

    data_rows = rows[1:]
    base_model_family = cell_text(_cell(data_rows[0], COL_MATERIAL_NUMBER)) or UNKNOWN_FAMILY

    discovered = discover_variants(data_rows, base_model_family)
    if not discovered:
        errors.append("No variants found in sheet (no 1100 spec code rows with availability)")
        return _failed(errors, warnings)

    # Second pass: variant_code -> spec_code -> options, in row order
    buckets: dict[str, dict[str, list[ConfigurationOption]]] = {
        variant.variant_code: {} for variant, _ in discovered
    }
    options_imported = 0
    # (spec_code, option_code) pairs already assigned; every variant gets the same rows
    assigned: set[tuple[str, str]] = set()

    for offset, row in enumerate(data_rows, start=1):
        spec_code = cell_text(_cell(row, COL_SPEC_CODE))
        option_code = cell_text(_cell(row, COL_LONG_CODE))
        description = cell_text(_cell(row, COL_DESCRIPTION))

        if not spec_code or not option_code:
            warning = f"Row {offset + 1}: Missing spec code or long code"
            warnings.append(warning)
            logger.warning(warning)
            continue

        if (spec_code, option_code) in assigned:
            warning = f"Row {offset + 1}: Duplicate long code {option_code} in spec {spec_code}"
            warnings.append(warning)
            logger.warning(warning)
            continue
        assigned.add((spec_code, option_code))

        for variant, slot in discovered:
            availability = _availability(row, slot)
            option = ConfigurationOption(
                option_code=option_code,
                spec_code=spec_code,
                description=description,
                availability=availability,
                is_default=availability == AvailabilityLevel.STANDARD,
            )
            buckets[variant.variant_code].setdefault(spec_code, []).append(option)
            options_imported += 1

    # Third pass: assemble groups
    spec_codes_seen: set[str] = set()
    variants: list[ConfigurationVariant] = []

    for variant, _ in discovered:
        groups = []
        for spec_code, options in buckets[variant.variant_code].items():
            spec_codes_seen.add(spec_code)
            groups.append(
                SpecificationGroup(
                    group_code=spec_code,
                    group_name=get_spec_group_name(spec_code),
                    category=get_spec_category(spec_code),
                    options=options,
                )
            )
        variant.specifications = groups
        variants.append(variant)

    now = datetime.now(timezone.utc)
    matrix = ConfigurationMatrix(
        base_model_family=base_model_family,
        variants=variants,
        created_at=now,
        updated_at=now,
    )

    stats = ImportStats(
        variants_found=len(variants),
        spec_groups_found=len(spec_codes_seen),
        options_imported=options_imported,
    )
    logger.info(
        f"Imported configuration matrix for {base_model_family}: "
        f"{stats.variants_found} variants, {stats.spec_groups_found} spec groups, "
        f"{stats.options_imported} options, {len(warnings)} warnings"
    )

    return ImportResult(
        success=True,
        matrix=matrix,
        errors=errors,
        warnings=warnings,
        stats=stats,
    )


def _is_blank(value: Any) -> bool:
    return cell_text(value) == ""


def read_workbook_rows(source: WorkbookSource) -> list[list[Any]]:
    """Read the first sheet of a workbook into raw rows.

    Columns are read positionally (no header inference) with ``dtype=object``
    so long numeric option codes keep full precision. Fully blank rows after
    the header are dropped.

    Raises:
        ValueError: If the workbook has no sheets
    """
    if isinstance(source, bytes):
        source = BytesIO(source)

    with pd.ExcelFile(source) as workbook:
        if not workbook.sheet_names:
            raise ValueError("Workbook has no sheets")
        df = workbook.parse(workbook.sheet_names[0], header=None, dtype=object)

    rows = [list(row) for row in df.itertuples(index=False, name=None)]
    if not rows:
        return []

    return rows[:1] + [row for row in rows[1:] if not all(_is_blank(v) for v in row)]


def import_matrix_from_excel(source: WorkbookSource) -> ImportResult:
    """Import a configuration matrix from a vendor workbook.

    Never raises: unreadable files come back as a failed ImportResult.
    """
    logger.info("Starting configuration matrix import")
    try:
        rows = read_workbook_rows(source)
    except Exception as e:
        logger.error(f"Could not read configuration workbook: {e}", exc_info=True)
        return ImportResult(success=False, errors=[f"Import failed: {e}"])

    try:
        return import_matrix_from_rows(rows)
    except Exception as e:
        logger.error(f"Configuration import crashed: {e}", exc_info=True)
        return ImportResult(success=False, errors=[f"Import failed: {e}"])
