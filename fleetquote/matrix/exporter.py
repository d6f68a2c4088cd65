"""Configuration matrix export for round-trip editing.

Writes the same fixed column layout the importer reads, with one
availability column per variant in ``matrix.variants`` order.
"""

from __future__ import annotations

import re
from io import BytesIO
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from fleetquote.models import (
    AvailabilityLevel,
    ConfigurationMatrix,
    ConfigurationOption,
    ConfigurationVariant,
)

EXPORT_SHEET_NAME = "Configuration Matrix"
BASE_HEADERS = ["Material Number", "Long Code", "Spec Code", "Description"]


def export_matrix_rows(matrix: ConfigurationMatrix) -> list[list[Any]]:
    """Flatten a matrix into sheet rows (header first).

    One row per distinct option code per spec code. Spec codes are sorted;
    option codes keep first-seen order across variants. When the same option
    code carries different descriptions in different variants the first one
    seen is written.
    """
    rows: list[list[Any]] = [BASE_HEADERS + [v.variant_code for v in matrix.variants]]

    spec_codes = sorted(
        {group.group_code for variant in matrix.variants for group in variant.specifications}
    )

    for spec_code in spec_codes:
        # option_code -> first option seen, insertion ordered
        first_seen: dict[str, ConfigurationOption] = {}
        for variant in matrix.variants:
            group = variant.find_group(spec_code)
            if group is None:
                continue
            for option in group.options:
                first_seen.setdefault(option.option_code, option)

        for option_code, option in first_seen.items():
            row: list[Any] = [
                matrix.base_model_family,
                option_code,
                spec_code,
                option.description,
            ]
            for variant in matrix.variants:
                row.append(int(_availability_in(variant, spec_code, option_code)))
            rows.append(row)

    return rows


def _availability_in(
    variant: ConfigurationVariant, spec_code: str, option_code: str
) -> AvailabilityLevel:
    group = variant.find_group(spec_code)
    if group is None:
        return AvailabilityLevel.NOT_AVAILABLE
    option = group.find_option(option_code)
    if option is None:
        return AvailabilityLevel.NOT_AVAILABLE
    return option.availability


def export_matrix_to_excel(
    matrix: ConfigurationMatrix,
    sheet_name: str = EXPORT_SHEET_NAME,
) -> BytesIO:
    """Generate a single-sheet workbook for the matrix.

    Returns:
        BytesIO containing the .xlsx workbook, positioned at the start
    """
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name

    header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
    header_font = Font(color="FFFFFF", bold=True)

    for row in export_matrix_rows(matrix):
        ws.append(row)

    # openpyxl treats any string starting with "=" as a formula
    for sheet_row in ws.iter_rows():
        for cell in sheet_row:
            if cell.data_type == "f":
                cell.data_type = "s"

    for cell in ws[1]:
        cell.fill = header_fill
        cell.font = header_font

    ws.column_dimensions["A"].width = 18
    ws.column_dimensions["B"].width = 24
    ws.column_dimensions["C"].width = 12
    ws.column_dimensions["D"].width = 45
    for col in range(len(BASE_HEADERS) + 1, len(BASE_HEADERS) + len(matrix.variants) + 1):
        ws.column_dimensions[get_column_letter(col)].width = 12
    ws.freeze_panes = "A2"

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output


def suggested_export_filename(matrix: ConfigurationMatrix) -> str:
    safe_family = re.sub(r"[^A-Za-z0-9_.-]+", "_", matrix.base_model_family) or "matrix"
    return f"configuration-matrix-{safe_family}.xlsx"
