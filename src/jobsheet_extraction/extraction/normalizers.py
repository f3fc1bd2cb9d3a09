"""Field value normalizers.

Normalization is applied once, to the value that wins the ensemble vote.
Strategy candidates are compared in their raw form.
"""

import math
import re
from typing import Any, Callable, Optional, Union

from jobsheet_extraction.schemas.extraction_result import NormalizerKind

# D/M/YYYY with '/', '-' or '.' separators
_RE_DAY_FIRST = re.compile(r"(\d{1,2})[/\-\.](\d{1,2})[/\-\.](\d{4})")
# YYYY-M-D with the same separators
_RE_YEAR_FIRST = re.compile(r"(\d{4})[/\-\.](\d{1,2})[/\-\.](\d{1,2})")

_TRUE_TOKENS = {"YES", "Y", "TRUE", "1"}
_FALSE_TOKENS = {"NO", "N", "FALSE", "0"}

# Tokens kept upper-case by the name normalizer
NAME_ACRONYMS = {"UK", "USA", "LLC", "LTD", "PLC"}


def safe_string(value: Any) -> str:
    """
    Convert any value to string safely.

    Handles the common case where LLM returns a list instead of a string.

    Args:
        value: Any value (str, list, None, etc.)

    Returns:
        String representation of the value
    """
    if value is None:
        return ""
    if isinstance(value, list):
        if len(value) == 0:
            return ""
        if len(value) == 1:
            return str(value[0]).strip()
        return " ".join(str(v) for v in value).strip()
    return str(value).strip()


def safe_float(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """
    Convert any value to float safely.

    LLMs sometimes answer ``"85"`` or ``"85%"`` where a number is expected.

    Args:
        value: Any value from an LLM answer
        default: Returned when conversion fails

    Returns:
        Float representation of the value, or default
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip().rstrip("%").strip()
        if not value:
            return default
    elif not isinstance(value, (int, float)):
        return default

    try:
        number = float(value)
    except (ValueError, OverflowError):
        return default
    # NaN and infinities are not usable scores
    return number if math.isfinite(number) else default


def normalize_date(value: str) -> str:
    """Render D/M/YYYY or YYYY-M-D dates as zero-padded YYYY-MM-DD."""
    trimmed = value.strip()

    match = _RE_DAY_FIRST.search(trimmed)
    if match:
        day, month, year = match.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    match = _RE_YEAR_FIRST.search(trimmed)
    if match:
        year, month, day = match.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    return trimmed


def normalize_boolean(value: str) -> str:
    """Map yes/no style answers to 'Yes' / 'No'."""
    upper = value.strip().upper()
    if upper in _TRUE_TOKENS:
        return "Yes"
    if upper in _FALSE_TOKENS:
        return "No"
    return value.strip()


def normalize_name(value: str) -> str:
    """Title-case each token, keeping company/country acronyms upper-case."""
    words = []
    for word in value.split():
        if word.upper() in NAME_ACRONYMS:
            words.append(word.upper())
        else:
            words.append(word[:1].upper() + word[1:].lower())
    return " ".join(words)


def normalize_uppercase(value: str) -> str:
    return value.strip().upper()


def normalize_trim(value: str) -> str:
    return value.strip()


# =============================================================================
# REGISTRY
# =============================================================================

NORMALIZERS: dict[NormalizerKind, Callable[[str], str]] = {
    NormalizerKind.DATE: normalize_date,
    NormalizerKind.BOOLEAN: normalize_boolean,
    NormalizerKind.NAME: normalize_name,
    NormalizerKind.UPPERCASE: normalize_uppercase,
    NormalizerKind.NONE: normalize_trim,
}


def get_normalizer(kind: Union[NormalizerKind, str, None]) -> Callable[[str], str]:
    """Get normalizer function by kind. Unknown kinds only trim."""
    if kind is None:
        return normalize_trim
    try:
        return NORMALIZERS[NormalizerKind(kind)]
    except ValueError:
        return normalize_trim


def normalize_value(value: Optional[str], kind: Union[NormalizerKind, str, None] = None) -> Optional[str]:
    """Canonicalize a winning field value; empty values pass through."""
    if not value:
        return value
    return get_normalizer(kind)(value)
