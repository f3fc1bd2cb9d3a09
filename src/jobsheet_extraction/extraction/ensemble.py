"""Ensemble voting over strategy candidates.

Candidates are tallied on their raw values. The most frequent value wins;
ties go to the value seen first in strategy priority order (regex, fuzzy,
context, llm). Agreement boosts the best matching confidence by 10 per
extra strategy, capped at +15.
"""

import logging
from typing import Dict, Iterable, List, Optional

from jobsheet_extraction.extraction.llm_strategy import LLMFieldExtractor
from jobsheet_extraction.extraction.normalizers import normalize_value
from jobsheet_extraction.extraction.spec_loader import FieldDefinition
from jobsheet_extraction.extraction.strategies import DETERMINISTIC_STRATEGIES
from jobsheet_extraction.schemas.extraction_result import (
    ExtractionResult,
    FieldExtraction,
    StrategyName,
)

logger = logging.getLogger(__name__)

BOOST_PER_AGREEMENT = 10.0
MAX_BOOST = 15.0
DEFAULT_LLM_TRIGGER_CONFIDENCE = 70.0

_PRIORITY = {name: index for index, name in enumerate(StrategyName)}


def consensus_boost(agreement: int) -> float:
    """Confidence boost for ``agreement`` strategies returning the same value."""
    return min(BOOST_PER_AGREEMENT * (agreement - 1), MAX_BOOST)


def vote(field: FieldDefinition, results: Iterable[ExtractionResult]) -> FieldExtraction:
    """Combine strategy results into the field's final extraction."""
    # Stable sort keeps the caller's order within one strategy
    candidates = sorted(
        (r for r in results if r.value),
        key=lambda r: _PRIORITY[r.strategy],
    )

    if not candidates:
        return FieldExtraction(
            display_name=field.display_name,
            required=field.required,
            severity=field.severity,
            value=None,
            confidence=0.0,
            strategy="none",
            evidence="No extraction strategy succeeded",
        )

    counts: Dict[str, int] = {}
    for result in candidates:
        counts[result.value] = counts.get(result.value, 0) + 1

    # dicts keep insertion order, so max() returns the first-seen value on ties
    winning_value = max(counts, key=lambda value: counts[value])
    agreement = counts[winning_value]

    best: Optional[ExtractionResult] = None
    for result in candidates:
        if result.value == winning_value and (best is None or result.confidence > best.confidence):
            best = result

    confidence = min(best.confidence + consensus_boost(agreement), 100.0)
    strategy = f"ensemble({agreement} agree)" if agreement > 1 else best.strategy.value

    return FieldExtraction(
        display_name=field.display_name,
        required=field.required,
        severity=field.severity,
        value=normalize_value(winning_value, field.normalizer),
        confidence=confidence,
        strategy=strategy,
        evidence=best.evidence,
        consensus_count=agreement,
    )


def run_strategies(
    text: str,
    field: FieldDefinition,
    use_llm: bool = False,
    llm_extractor: Optional[LLMFieldExtractor] = None,
    llm_trigger_confidence: float = DEFAULT_LLM_TRIGGER_CONFIDENCE,
) -> List[ExtractionResult]:
    """Run every applicable strategy and return the non-null results.

    The LLM runs only when requested and the deterministic strategies found
    nothing or nothing at or above ``llm_trigger_confidence``.
    """
    results = [r for r in (strategy(text, field) for strategy in DETERMINISTIC_STRATEGIES) if r.value]

    best_confidence = max((r.confidence for r in results), default=0.0)
    if use_llm and (not results or best_confidence < llm_trigger_confidence):
        extractor = llm_extractor or LLMFieldExtractor()
        logger.debug(
            f"LLM fallback for {field.name} (best deterministic confidence {best_confidence:.1f})"
        )
        llm_result = extractor.extract(text, field)
        if llm_result.value:
            results.append(llm_result)

    return results


def ensemble_extract(
    text: str,
    field: FieldDefinition,
    use_llm: bool = False,
    llm_extractor: Optional[LLMFieldExtractor] = None,
    llm_trigger_confidence: float = DEFAULT_LLM_TRIGGER_CONFIDENCE,
) -> FieldExtraction:
    """Extract one field with every strategy and vote on the result."""
    results = run_strategies(
        text,
        field,
        use_llm=use_llm,
        llm_extractor=llm_extractor,
        llm_trigger_confidence=llm_trigger_confidence,
    )
    return vote(field, results)
