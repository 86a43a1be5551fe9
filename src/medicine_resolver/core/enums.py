# ============================================================================
# src/medicine_resolver/core/enums.py
# ============================================================================
"""
Resolution Enums
- Match types reported to callers
- Strategies that produced a candidate
- Failure reasons
"""

from enum import Enum

class MatchType(str, Enum):
    EXACT = "exact"
    FUZZY = "fuzzy"
    EXACT_COMPOSITION = "exact-composition"

class StrategyName(str, Enum):
    EXACT = "exact"
    FUZZY = "fuzzy"
    COMPOSITION = "composition"

class FailureReason(str, Enum):
    NO_MATCH = "no_match"              # expected outcome, not a fault
    STORE_FAILURE = "store_failure"    # every store query failed
    VALIDATION = "validation"          # only recorded on batch items
