# ============================================================================
# src/medicine_resolver/resolver/__init__.py
# ============================================================================
"""
Resolution pipeline: match strategies, result arbitration, batch runner
"""

from .strategies import (
    StrategyOutcome,
    MatchStrategy,
    ExactMatchStrategy,
    FuzzyMatchStrategy,
    CompositionStrategy,
)
from .arbiter import MedicineResolver, validate_medicine_name
from .batch import BatchRunner
