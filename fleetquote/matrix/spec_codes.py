"""Static spec code lookups used to label specification groups.

Group names and categories are always derived from the spec code through
these tables; they are never taken from the spreadsheet.
"""

from __future__ import annotations

MODEL_SPEC_CODE = "1100"

SPEC_GROUP_NAMES: dict[str, str] = {
    "1100": "MODEL",
    "1135": "BATTERY TECHNOLOGY",
    "1200": "PEDAL SYSTEM",
    "1300": "WHEELS & TIRES",
    "2200": "DRIVE AXLE",
    "2300": "LOAD AXLE",
    "3200": "MAST",
    "3300": "HYDRAULICS",
    "4100": "OPERATOR CONTROLS",
    "4200": "LIGHTING",
    "4300": "SAFETY FEATURES",
    "5100": "CABIN",
    "5200": "SEATING",
}

# (lower bound inclusive, upper bound exclusive, category)
SPEC_CATEGORY_RANGES: list[tuple[int, int, str]] = [
    (1100, 1200, "Basic"),
    (1200, 2000, "Battery"),
    (2000, 3000, "Wheels & Tires"),
    (3000, 4000, "Mast & Hydraulics"),
    (4000, 5000, "Controls & Safety"),
    (5000, 6000, "Cabin & Comfort"),
]

FALLBACK_CATEGORY = "Other"


def get_spec_group_name(spec_code: str) -> str:
    """Return the display name for a spec code.

    Examples:
        >>> get_spec_group_name("1135")
        'BATTERY TECHNOLOGY'
        >>> get_spec_group_name("9999")
        'SPEC 9999'
    """
    return SPEC_GROUP_NAMES.get(spec_code, f"SPEC {spec_code}")


def get_spec_category(spec_code: str) -> str:
    """Map a spec code to the category used for UI grouping.

    Non-numeric codes fall through to the generic category.
    """
    try:
        code = int(str(spec_code).strip())
    except ValueError:
        return FALLBACK_CATEGORY

    for low, high, category in SPEC_CATEGORY_RANGES:
        if low <= code < high:
            return category
    return FALLBACK_CATEGORY
