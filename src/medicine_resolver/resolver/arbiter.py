# ============================================================================
# src/medicine_resolver/resolver/arbiter.py
# ============================================================================
"""
Medicine Resolver

Maps one free-text medicine name (plus an optional composition string) to a
single catalog record.

Flow:
1. Validate the name and options (ValidationError, never a "no match")
2. Generate name variants
3. Exact strategy, unless prefer_exact_match is off; a hit returns at once
4. Fuzzy strategy over all variants
5. Composition strategy, only when a salt is given and no brand name
   contains a variant (trigram brand hits are pooled with its candidates)
6. Stable sort: match score, similarity, popularity (nulls last)
7. Accept the winner only if its similarity clears min_similarity
"""

import logging
from typing import Any, List, Optional

from ..config import logging_settings, matching_settings
from ..core.enums import FailureReason, MatchType
from ..core.results import Candidate, SearchOptions, SearchResult
from ..matching.normalizer import generate_variations
from ..store.base import ReferenceStore
from ..utils.exceptions import ValidationError
from ..utils.metrics import MetricsCollector, Timer, get_metrics
from .strategies import (
    CompositionStrategy,
    ExactMatchStrategy,
    FuzzyMatchStrategy,
    StrategyOutcome,
)

logger = logging.getLogger(__name__)


def validate_medicine_name(medicine_name: Any) -> str:
    """
    Check a raw medicine name.

    Returns:
        The trimmed name

    Raises:
        ValidationError: not a string, or shorter than MIN_QUERY_LENGTH
    """
    min_length = matching_settings.MIN_QUERY_LENGTH
    if not isinstance(medicine_name, str) or len(medicine_name.strip()) < min_length:
        raise ValidationError(
            f"Medicine name must be at least {min_length} characters long",
            field_name="medicine_name",
        )
    return medicine_name.strip()


class MedicineResolver:
    """
    Multi-strategy fuzzy resolver over an injected reference store.

    Holds no per-request state, so one instance can serve concurrent
    resolutions as long as the store supports concurrent reads.
    """

    def __init__(
        self,
        store: ReferenceStore,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.store = store
        if metrics is None and logging_settings.ENABLE_METRICS:
            metrics = get_metrics()
        self.metrics = metrics

        self.exact_strategy = ExactMatchStrategy(store, metrics)
        self.fuzzy_strategy = FuzzyMatchStrategy(store, metrics)
        self.composition_strategy = CompositionStrategy(store, metrics)

    def _count(self, name: str) -> None:
        if self.metrics is not None:
            self.metrics.increment(name)

    def resolve(
        self,
        medicine_name: str,
        options: Optional[SearchOptions] = None,
    ) -> SearchResult:
        """
        Resolve one medicine name to its best catalog match.

        Args:
            medicine_name: Raw (possibly OCR-derived) medicine name
            options: Search options; defaults come from matching settings

        Returns:
            SearchResult. A failed result is a normal outcome, not an error.

        Raises:
            ValidationError: name too short or options out of range
        """
        options = (options or SearchOptions()).validate()
        validate_medicine_name(medicine_name)

        with Timer(self.metrics, "resolve") as timer:
            result = self._resolve(medicine_name, options)
        result.execution_time_ms = timer.elapsed_ms

        if result.success:
            logger.info(
                f"Resolved '{medicine_name}' -> '{result.record.brand_name}' "
                f"({result.match_type.value}, confidence {result.confidence:.2f}, "
                f"{result.execution_time_ms}ms)"
            )
        else:
            logger.info(f"No match for '{medicine_name}' ({result.execution_time_ms}ms): {result.message}")
        return result

    def _resolve(self, medicine_name: str, options: SearchOptions) -> SearchResult:
        logger.debug(f"Fuzzy searching for: '{medicine_name}'")
        if options.include_salt:
            logger.debug(f"  With composition: '{options.include_salt}'")

        variations = generate_variations(medicine_name)
        logger.debug(f"  Generated {len(variations)} name variations")

        outcomes: List[StrategyOutcome] = []

        if options.prefer_exact_match:
            exact = self.exact_strategy.run(variations)
            outcomes.append(exact)
            if exact.candidates:
                self._count("resolve.exact")
                return SearchResult.matched(exact.candidates[0])

        fuzzy = self.fuzzy_strategy.run(variations, options.max_results)
        outcomes.append(fuzzy)
        candidates: List[Candidate] = list(fuzzy.candidates)

        # Trigram brand hits are weak guesses: they do not block the salt
        if options.include_salt and (not candidates or fuzzy.fallback_used):
            logger.debug("  Trying composition-based search...")
            composition = self.composition_strategy.run(options.include_salt, options.max_results)
            outcomes.append(composition)
            candidates.extend(composition.candidates)

        if not candidates:
            return self._no_candidates(outcomes)

        # list.sort is stable: full ties keep discovery order
        candidates.sort(key=Candidate.sort_key)
        best = candidates[0]

        if best.similarity < options.min_similarity:
            logger.debug(
                f"  Best candidate '{best.record.brand_name}' below threshold "
                f"({best.similarity:.2f} < {options.min_similarity})"
            )
            self._count("resolve.no_match")
            return SearchResult.failed(
                FailureReason.NO_MATCH,
                "No matching medicine found above the similarity threshold",
            )

        result = SearchResult.matched(best)
        self._count(
            "resolve.composition" if result.match_type == MatchType.EXACT_COMPOSITION
            else "resolve.fuzzy"
        )
        return result

    def _no_candidates(self, outcomes: List[StrategyOutcome]) -> SearchResult:
        queries = sum(o.queries for o in outcomes)
        failures = sum(o.failures for o in outcomes)
        if queries > 0 and failures == queries:
            self._count("resolve.store_failure")
            return SearchResult.failed(
                FailureReason.STORE_FAILURE,
                "Medicine catalog is unavailable",
            )
        self._count("resolve.no_match")
        return SearchResult.failed(FailureReason.NO_MATCH, "No matching medicine found")
