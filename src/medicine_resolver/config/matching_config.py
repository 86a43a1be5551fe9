# ============================================================================
# src/medicine_resolver/config/matching_config.py
# ============================================================================
"""
Matching Thresholds and Limits
- Acceptance threshold
- Name variant generation caps
- Per-strategy result limits
- Trigram similarity operator threshold
- Batch limits
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

class MatchingSettings(BaseSettings):
    MIN_SIMILARITY: float = Field(
        default=0.7,
        ge=0.0, le=1.0,
        description="Winner similarity below this is reported as no match instead of a low-quality guess"
    )
    MIN_QUERY_LENGTH: int = Field(
        default=2,
        ge=1,
        description="Minimum medicine name length after trimming"
    )
    MIN_VARIANT_LENGTH: int = Field(
        default=2,
        ge=1,
        description="Generated name variants shorter than this are dropped"
    )
    MAX_OCR_BASE_VARIANTS: int = Field(
        default=3,
        ge=0,
        description="Number of leading variants that get OCR-confusion substitutions. Caps variant count per search."
    )
    STRATEGY_MAX_RESULTS: int = Field(
        default=5,
        ge=1, le=100,
        description="Default rows fetched per variant by fuzzy and composition strategies"
    )
    SEARCH_MAX_RESULTS: int = Field(
        default=20,
        ge=1, le=100,
        description="Default limit for the single search endpoint"
    )
    SEARCH_MAX_RESULTS_LIMIT: int = Field(
        default=100,
        ge=1,
        description="Upper bound accepted for the single search limit"
    )
    TRIGRAM_SIMILARITY_THRESHOLD: float = Field(
        default=0.3,
        ge=0.0, le=1.0,
        description="Trigram similarity at which two names count as approximately equal"
    )
    BRAND_TRIGRAM_FALLBACK: bool = Field(
        default=True,
        description="When no brand name contains any variant, retry the fuzzy strategy with trigram-similar brand names"
    )
    MAX_BATCH_SIZE: int = Field(
        default=100,
        ge=1,
        description="Maximum medicines accepted per batch request"
    )
    BATCH_MAX_RESULTS: int = Field(
        default=5,
        ge=1,
        description="Default per-item result limit for batch search"
    )
    BATCH_MAX_RESULTS_LIMIT: int = Field(
        default=20,
        ge=1,
        description="Upper bound accepted for the per-item batch limit"
    )
    BATCH_MAX_WORKERS: int = Field(
        default=1,
        ge=1, le=32,
        description="Worker threads for batch search. 1 processes items sequentially."
    )

    @model_validator(mode="after")
    def check_limits(self):
        if self.SEARCH_MAX_RESULTS > self.SEARCH_MAX_RESULTS_LIMIT:
            raise ValueError("SEARCH_MAX_RESULTS must not exceed SEARCH_MAX_RESULTS_LIMIT")
        if self.BATCH_MAX_RESULTS > self.BATCH_MAX_RESULTS_LIMIT:
            raise ValueError("BATCH_MAX_RESULTS must not exceed BATCH_MAX_RESULTS_LIMIT")
        return self

matching_settings = MatchingSettings()
