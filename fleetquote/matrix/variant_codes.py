"""Variant code extraction from free-text model descriptions.

Downstream variant identity depends on the literal output of this heuristic,
so keep it exactly as is: first run of uppercase letters, digits and an
optional trailing uppercase letter, else a positional placeholder.
"""

from __future__ import annotations

import re

VARIANT_CODE_PATTERN = re.compile(r"([A-Z]+\d+[A-Z]?)", re.ASCII)


def extract_variant_code(description: str | None, slot_index: int) -> str:
    """Derive a variant code from a MODEL row description.

    Args:
        description: Free-text description from the 1100 row
        slot_index: 0-based availability slot the variant was found in

    Returns:
        The first matching token, or ``VARIANT_{slot_index + 1}``

    Examples:
        >>> extract_variant_code("EG16P Three-wheel", 0)
        'EG16P'
        >>> extract_variant_code("three wheel", 2)
        'VARIANT_3'
    """
    match = VARIANT_CODE_PATTERN.search(description or "")
    if match:
        return match.group(1)
    return f"VARIANT_{slot_index + 1}"
