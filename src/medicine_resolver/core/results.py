# ============================================================================
# src/medicine_resolver/core/results.py
# ============================================================================
"""
Resolution inputs and outputs
- SearchOptions: per-call knobs, range-checked before any store query
- Candidate: one scored store row, discarded after arbitration
- SearchResult: outcome of a single resolution
- BatchItem / BatchResult: batch input line and its ordered outcome
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from .enums import FailureReason, MatchType, StrategyName
from .record import MedicineRecord
from ..config import matching_settings
from ..constants import COMPOSITION_SCORE_EXACT
from ..utils.exceptions import ValidationError


@dataclass(frozen=True)
class SearchOptions:
    min_similarity: float = field(default_factory=lambda: matching_settings.MIN_SIMILARITY)
    max_results: int = field(default_factory=lambda: matching_settings.STRATEGY_MAX_RESULTS)
    include_salt: Optional[str] = None
    prefer_exact_match: bool = True

    def validate(self) -> "SearchOptions":
        if not 0.0 <= self.min_similarity <= 1.0:
            raise ValidationError(
                "minSimilarity must be between 0 and 1", field_name="min_similarity"
            )
        limit = matching_settings.SEARCH_MAX_RESULTS_LIMIT
        if not 1 <= self.max_results <= limit:
            raise ValidationError(
                f"max_results must be between 1 and {limit}", field_name="max_results"
            )
        return self

    def with_salt(self, salt: Optional[str]) -> "SearchOptions":
        return replace(self, include_salt=salt)


@dataclass
class Candidate:
    record: MedicineRecord
    similarity: float
    match_score: int
    search_term: str
    strategy: StrategyName

    def sort_key(self):
        """Match score desc, similarity desc, popularity desc with nulls last."""
        return (-self.match_score, -self.similarity, self.record.popularity_key())

    @property
    def match_type(self) -> MatchType:
        if self.strategy == StrategyName.EXACT:
            return MatchType.EXACT
        if self.strategy == StrategyName.COMPOSITION and self.match_score == COMPOSITION_SCORE_EXACT:
            return MatchType.EXACT_COMPOSITION
        return MatchType.FUZZY


@dataclass
class SearchResult:
    success: bool
    confidence: float = 0.0
    record: Optional[MedicineRecord] = None
    match_type: Optional[MatchType] = None
    search_term: Optional[str] = None
    message: Optional[str] = None
    failure_reason: Optional[FailureReason] = None
    execution_time_ms: float = 0.0

    @classmethod
    def matched(cls, candidate: Candidate) -> "SearchResult":
        return cls(
            success=True,
            confidence=candidate.similarity,
            record=candidate.record,
            match_type=candidate.match_type,
            search_term=candidate.search_term,
        )

    @classmethod
    def failed(cls, reason: FailureReason, message: str) -> "SearchResult":
        return cls(success=False, confidence=0.0, message=message, failure_reason=reason)

    @property
    def match(self) -> Optional[Dict[str, Any]]:
        """Formatted record of the winner."""
        return self.record.to_dict() if self.record else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "match": self.match,
            "confidence": self.confidence,
            "match_type": self.match_type.value if self.match_type else None,
            "search_term": self.search_term,
            "message": self.message,
            "failure_reason": self.failure_reason.value if self.failure_reason else None,
            "execution_time_ms": self.execution_time_ms,
        }


@dataclass(frozen=True)
class BatchItem:
    medicine_name: Any                 # not trusted to be a str until validated
    medicine_salt: Optional[str] = None

    @classmethod
    def coerce(cls, item: Any) -> "BatchItem":
        if isinstance(item, BatchItem):
            return item
        if isinstance(item, dict):
            return cls(
                medicine_name=item.get("medicine_name"),
                medicine_salt=item.get("medicine_salt"),
            )
        return cls(medicine_name=item)


@dataclass
class BatchResult:
    original: BatchItem
    search_result: SearchResult
    index: int

    @property
    def found(self) -> bool:
        return self.search_result.success
