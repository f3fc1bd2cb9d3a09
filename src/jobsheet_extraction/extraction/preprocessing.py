"""OCR misrecognition correction applied before field extraction."""

import re
from typing import Pattern, Tuple

# Whole-word corrections first, then the short substring fallbacks.
# Table order is the application order.
_OCR_CORRECTIONS: Tuple[Tuple[str, str], ...] = (
    ("Narne", "Name"),
    ("Nurnber", "Number"),
    ("Cornpleted", "Completed"),
    ("Requirecl", "Required"),
    ("Enginee", "Engineer"),
    ("Custorner", "Customer"),
    ("Ternp", "Temp"),
    ("Tirne", "Time"),
    ("rn", "m"),
    ("cl", "d"),
    ("vv", "w"),
)

OCR_CORRECTIONS: Tuple[Tuple[Pattern[str], str], ...] = tuple(
    (re.compile(rf"\b{re.escape(wrong)}\b"), right) for wrong, right in _OCR_CORRECTIONS
)


def correct_ocr_errors(text: str) -> str:
    """Replace known OCR misreadings on word boundaries.

    >>> correct_ocr_errors("Custorner Narne")
    'Customer Name'
    """
    corrected = text
    for pattern, replacement in OCR_CORRECTIONS:
        corrected = pattern.sub(replacement, corrected)
    return corrected
