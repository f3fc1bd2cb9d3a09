"""
Deterministic extraction strategies.

Each strategy is a pure function ``(text, field) -> ExtractionResult`` that
returns the raw trimmed candidate (normalization happens after voting) and a
null result when nothing is found.
"""

import logging
from typing import Callable, Tuple

from jobsheet_extraction.extraction.similarity import fuzzy_ratio
from jobsheet_extraction.extraction.spec_loader import FieldDefinition
from jobsheet_extraction.schemas.extraction_result import ExtractionResult, StrategyName

logger = logging.getLogger(__name__)

# Patterns whose source is longer than this count as specific
SPECIFIC_PATTERN_LENGTH = 50
SPECIFIC_PATTERN_CONFIDENCE = 85.0
GENERIC_PATTERN_CONFIDENCE = 75.0
PRESENCE_CONFIDENCE = 70.0

FUZZY_MATCH_THRESHOLD = 70.0
FUZZY_MAX_CONFIDENCE = 80.0

CONTEXT_SAME_LINE_CONFIDENCE = 70.0
CONTEXT_NEXT_LINE_CONFIDENCE = 60.0

PRESENT_VALUE = "Present"

Strategy = Callable[[str, FieldDefinition], ExtractionResult]


def _has_presence_label(text: str, field: FieldDefinition) -> bool:
    return any(label in text for label in field.presence_labels)


def extract_with_pattern(text: str, field: FieldDefinition) -> ExtractionResult:
    """Try the field's patterns in order; the first one yielding a value wins."""
    for pattern in field.patterns:
        match = pattern.search(text)
        if not match:
            continue

        value = None
        if pattern.groups >= 1 and match.group(1) is not None:
            value = match.group(1).strip() or None

        if value is None and field.is_presence_only and _has_presence_label(text, field):
            value = PRESENT_VALUE

        if value:
            source = pattern.pattern
            confidence = (
                SPECIFIC_PATTERN_CONFIDENCE
                if len(source) > SPECIFIC_PATTERN_LENGTH
                else GENERIC_PATTERN_CONFIDENCE
            )
            return ExtractionResult(
                value=value,
                confidence=confidence,
                strategy=StrategyName.REGEX,
                evidence=f"Pattern matched: {source[:SPECIFIC_PATTERN_LENGTH]}...",
            )

    if field.is_presence_only and _has_presence_label(text, field):
        return ExtractionResult(
            value=PRESENT_VALUE,
            confidence=PRESENCE_CONFIDENCE,
            strategy=StrategyName.REGEX,
            evidence="Signature label found in document",
        )

    return ExtractionResult.empty(StrategyName.REGEX)


def extract_with_fuzzy(text: str, field: FieldDefinition) -> ExtractionResult:
    """Match 'label: value' lines whose label resembles a known label."""
    for line in text.split("\n"):
        if ":" not in line:
            continue

        # Only the first two segments count; "Time: 10:30" yields "10"
        parts = [part.strip() for part in line.split(":")]
        label_part, value_part = parts[0], parts[1]

        for label in field.fuzzy_labels:
            score = fuzzy_ratio(label_part, label)
            if score >= FUZZY_MATCH_THRESHOLD and value_part:
                return ExtractionResult(
                    value=value_part,
                    confidence=min(score, FUZZY_MAX_CONFIDENCE),
                    strategy=StrategyName.FUZZY,
                    evidence=f"Fuzzy match: '{label_part}' ~ '{label}' ({score:.1f}%)",
                )

    return ExtractionResult.empty(StrategyName.FUZZY)


def extract_with_context(text: str, field: FieldDefinition) -> ExtractionResult:
    """Find a label on a line and take the value beside or below it."""
    lines = text.split("\n")

    for i, line in enumerate(lines):
        line_lower = line.lower()

        for label in field.fuzzy_labels:
            if label.lower() not in line_lower:
                continue

            if ":" in line:
                value = line.split(":")[1].strip()
                if value:
                    return ExtractionResult(
                        value=value,
                        confidence=CONTEXT_SAME_LINE_CONFIDENCE,
                        strategy=StrategyName.CONTEXT,
                        evidence=f"Context match on line {i + 1}",
                    )
            elif i + 1 < len(lines):
                next_line = lines[i + 1].strip()
                if next_line and ":" not in next_line:
                    return ExtractionResult(
                        value=next_line,
                        confidence=CONTEXT_NEXT_LINE_CONFIDENCE,
                        strategy=StrategyName.CONTEXT,
                        evidence=f"Value on line after label (line {i + 2})",
                    )

    return ExtractionResult.empty(StrategyName.CONTEXT)


# Deterministic strategies in voting priority order
DETERMINISTIC_STRATEGIES: Tuple[Strategy, ...] = (
    extract_with_pattern,
    extract_with_fuzzy,
    extract_with_context,
)
