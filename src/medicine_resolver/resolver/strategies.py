# ============================================================================
# src/medicine_resolver/resolver/strategies.py
# ============================================================================
"""
Match Strategies

Three independent ways of turning name variants (or a composition string)
into scored candidates:

1. Exact:       case-insensitive brand-name equality, first hit wins
2. Fuzzy:       brand names containing a variant, scored 100/90/80; when
                none contains any variant, trigram-similar brand names (70)
3. Composition: salt name trigram-similar to a composition slot, scored
                100 (same strength and unit) / 80 (similar) / 70 (contains)

A failing store query is logged and counted, and the strategy moves on to
the next variant. The arbiter decides what an all-failed run means.
"""

import logging
from abc import ABC
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, TypeVar

from ..config import matching_settings
from ..constants import MATCH_SCORE_EQUAL
from ..core.enums import StrategyName
from ..core.results import Candidate
from ..matching.dosage import extract_dose
from ..matching.similarity import similarity
from ..store.base import ReferenceStore
from ..utils.exceptions import StoreQueryError
from ..utils.metrics import MetricsCollector

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class StrategyOutcome:
    strategy: StrategyName
    candidates: List[Candidate] = field(default_factory=list)
    queries: int = 0
    failures: int = 0
    # candidates came from the trigram brand pass, not substring search
    fallback_used: bool = False

    @property
    def all_failed(self) -> bool:
        return self.queries > 0 and self.failures == self.queries


class MatchStrategy(ABC):
    """Base class: wraps store calls with failure accounting."""

    name: StrategyName

    def __init__(self, store: ReferenceStore, metrics: Optional[MetricsCollector] = None):
        self.store = store
        self.metrics = metrics

    def _query(
        self,
        outcome: StrategyOutcome,
        term: str,
        call: Callable[[], T],
        default: T,
    ) -> T:
        outcome.queries += 1
        try:
            return call()
        except StoreQueryError as e:
            outcome.failures += 1
            if self.metrics is not None:
                self.metrics.increment("store.query_failures")
            logger.error(
                f"{self.name.value} search failed for '{term}': {e}",
                extra={"search_term": term, "strategy": self.name.value},
            )
            return default


class ExactMatchStrategy(MatchStrategy):
    name = StrategyName.EXACT

    def run(self, variations: Sequence[str]) -> StrategyOutcome:
        """
        Try each variant in order; stop at the first exact brand-name hit.

        Returns:
            Outcome with at most one candidate (confidence fixed at 1.0)
        """
        outcome = StrategyOutcome(self.name)
        for variant in variations:
            record = self._query(outcome, variant, lambda: self.store.find_exact(variant), None)
            if record is not None:
                outcome.candidates.append(Candidate(
                    record=record,
                    similarity=1.0,
                    match_score=MATCH_SCORE_EQUAL,
                    search_term=variant,
                    strategy=self.name,
                ))
                break
        return outcome


class FuzzyMatchStrategy(MatchStrategy):
    name = StrategyName.FUZZY

    def __init__(
        self,
        store: ReferenceStore,
        metrics: Optional[MetricsCollector] = None,
        trigram_fallback: Optional[bool] = None,
    ):
        super().__init__(store, metrics)
        if trigram_fallback is None:
            trigram_fallback = matching_settings.BRAND_TRIGRAM_FALLBACK
        self.trigram_fallback = trigram_fallback

    def run(self, variations: Sequence[str], max_results: int) -> StrategyOutcome:
        """
        Pool substring matches for every variant.

        Args:
            variations: Name variants in generation order
            max_results: Rows fetched per variant

        Returns:
            Outcome with candidates from all variants, in discovery order
        """
        outcome = StrategyOutcome(self.name)
        self._collect(outcome, variations, max_results, self.store.search_brand_names)

        if not outcome.candidates and self.trigram_fallback:
            logger.debug("  No substring hits, trying trigram brand search...")
            outcome.fallback_used = True
            self._collect(outcome, variations, max_results, self.store.search_similar_brand_names)

        logger.debug(f"Fuzzy search produced {len(outcome.candidates)} candidates")
        return outcome

    def _collect(self, outcome: StrategyOutcome, variations, max_results, search) -> None:
        for variant in variations:
            matches = self._query(outcome, variant, lambda: search(variant, max_results), [])
            for match in matches:
                outcome.candidates.append(Candidate(
                    record=match.record,
                    similarity=similarity(variant, match.record.brand_name),
                    match_score=match.match_score,
                    search_term=variant,
                    strategy=self.name,
                ))


class CompositionStrategy(MatchStrategy):
    name = StrategyName.COMPOSITION

    def run(self, salt: str, max_results: int) -> StrategyOutcome:
        """
        Search composition slots for the salt name, preferring slots whose
        strength and unit match the dose parsed from the salt.

        Args:
            salt: Composition string, e.g. "Paracetamol 500mg"
            max_results: Rows fetched

        Returns:
            Outcome with composition candidates
        """
        outcome = StrategyOutcome(self.name)
        salt = (salt or '').strip()
        if not salt:
            return outcome

        extracted = extract_dose(salt)
        if extracted:
            name = extracted.base_name or salt
            strength, unit = extracted.strength, extracted.unit
        else:
            name, strength, unit = salt, None, None

        matches = self._query(
            outcome, salt,
            lambda: self.store.search_compositions(name, strength, unit, max_results),
            [],
        )
        for match in matches:
            outcome.candidates.append(Candidate(
                record=match.record,
                similarity=match.similarity,
                match_score=match.match_score,
                search_term=salt,
                strategy=self.name,
            ))
        return outcome
