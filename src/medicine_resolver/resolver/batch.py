# ============================================================================
# src/medicine_resolver/resolver/batch.py
# ============================================================================
"""
Batch resolution: one result per input item, in input order.

Item failures (validation, no match, store failure) are recorded on that item
and never abort the rest of the batch.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, List, Optional

from ..config import matching_settings
from ..core.enums import FailureReason
from ..core.results import BatchItem, BatchResult, SearchOptions, SearchResult
from ..utils.exceptions import ValidationError
from .arbiter import MedicineResolver

logger = logging.getLogger(__name__)


class BatchRunner:
    """Runs a MedicineResolver over a list of items."""

    def __init__(self, resolver: MedicineResolver):
        self.resolver = resolver

    def _resolve_item(self, index: int, item: BatchItem, options: SearchOptions) -> BatchResult:
        item_options = options.with_salt(item.medicine_salt) if item.medicine_salt else options
        try:
            result = self.resolver.resolve(item.medicine_name, item_options)
        except ValidationError as e:
            logger.debug(f"Batch item {index} rejected: {e}")
            result = SearchResult.failed(FailureReason.VALIDATION, str(e))
        return BatchResult(original=item, search_result=result, index=index)

    def resolve_batch(
        self,
        items: Iterable[Any],
        options: Optional[SearchOptions] = None,
        max_workers: Optional[int] = None,
    ) -> List[BatchResult]:
        """
        Resolve every item with the shared batch options.

        Args:
            items: BatchItem objects, {"medicine_name", "medicine_salt"} dicts
                or bare names
            options: Batch-wide options; an item's salt overrides include_salt
            max_workers: Thread-pool size; 1 runs sequentially

        Returns:
            One BatchResult per item, in input order

        Raises:
            ValidationError: the batch options themselves are out of range
        """
        options = (options or SearchOptions()).validate()
        if max_workers is None:
            max_workers = matching_settings.BATCH_MAX_WORKERS
        batch = [BatchItem.coerce(item) for item in items]

        logger.info(f"Batch search for {len(batch)} medicines (workers={max_workers})")

        if max_workers <= 1 or len(batch) <= 1:
            results = [self._resolve_item(i, item, options) for i, item in enumerate(batch)]
        else:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                # map() yields in submission order
                results = list(executor.map(
                    lambda pair: self._resolve_item(pair[0], pair[1], options),
                    enumerate(batch),
                ))

        found = sum(1 for r in results if r.found)
        logger.info(f"Batch search complete: {found}/{len(results)} found")
        return results
