# ============================================================================
# src/medicine_resolver/api/main.py
# ============================================================================
"""
FastAPI Backend for the Medicine Resolver

Endpoints:
- GET  /api/medicine/search        single fuzzy search
- POST /api/medicine/batch-search  prescription line items in one call
- GET  /api/medicine/{id}          direct lookup of an active record
- GET  /api/health, /api/metrics   monitoring

Run with:
    uvicorn medicine_resolver.api.main:app --port 8000
"""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Path, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ..config import logging_settings, matching_settings
from ..core.enums import FailureReason
from ..core.results import BatchItem, SearchOptions
from ..resolver import BatchRunner, MedicineResolver
from ..store import ReferenceStore, get_medicine_store, reset_medicine_store
from ..utils.exceptions import RecordNotFoundError, StoreError, ValidationError
from ..utils.logging import setup_logging
from ..utils.metrics import Timer, get_metrics

logger = logging.getLogger(__name__)


# ============================================================================
# Models
# ============================================================================

class BatchMedicine(BaseModel):
    medicine_name: str
    medicine_salt: Optional[str] = None


class BatchSearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    medicines: List[BatchMedicine] = Field(
        ...,
        min_length=1,
        max_length=matching_settings.MAX_BATCH_SIZE,
    )
    min_similarity: float = Field(
        default=matching_settings.MIN_SIMILARITY,
        ge=0.0,
        le=1.0,
        alias="minSimilarity",
    )
    max_results: int = Field(
        default=matching_settings.BATCH_MAX_RESULTS,
        ge=1,
        le=matching_settings.BATCH_MAX_RESULTS_LIMIT,
        alias="maxResults",
    )


def _success(message: str, data) -> dict:
    return {"status": "SUCCESS", "message": message, "data": data}


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "FAILURE", "message": message},
    )


# ============================================================================
# App factory
# ============================================================================

def create_app(store: Optional[ReferenceStore] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        store: Catalog to serve; the configured SQLite database is opened at
            startup when omitted
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(
            logging_settings.LOG_LEVEL,
            log_file=logging_settings.LOG_FILE,
            format_json=logging_settings.LOG_FORMAT_JSON,
        )
        owns_store = getattr(app.state, "store", None) is None
        if owns_store:
            logger.info("Opening medicine catalog...")
            _attach_store(app, get_medicine_store())
        yield
        if owns_store:
            reset_medicine_store()

    app = FastAPI(
        title="Medicine Resolver API",
        description="Fuzzy resolution of OCR-extracted medicine names to catalog records",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.store = None
    if store is not None:
        _attach_store(app, store)

    _register_error_handlers(app)
    _register_routes(app)
    return app


def _attach_store(app: FastAPI, store: ReferenceStore) -> None:
    metrics = get_metrics() if logging_settings.ENABLE_METRICS else None
    resolver = MedicineResolver(store, metrics=metrics)
    app.state.store = store
    app.state.resolver = resolver
    app.state.batch_runner = BatchRunner(resolver)


def _register_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
            message = f"{location}: {first.get('msg')}" if location else first.get("msg")
        else:
            message = "Invalid request"
        return _failure(400, message)

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        return _failure(400, str(exc))

    @app.exception_handler(RecordNotFoundError)
    async def not_found_handler(request: Request, exc: RecordNotFoundError):
        return _failure(404, "Medicine not found")

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error(f"Catalog error on {request.url.path}: {exc}")
        return _failure(503, "Medicine catalog is unavailable")


def _register_routes(app: FastAPI) -> None:

    @app.get("/api/health")
    def health():
        """Health check for monitoring."""
        return {"status": "healthy", "catalog_loaded": app.state.store is not None}

    @app.get("/api/metrics")
    def metrics():
        """Snapshot of in-process counters and timers."""
        return get_metrics().get_all_metrics()

    @app.get("/api/medicine/search")
    def search_medicines(
        q: str = Query(..., description="Medicine name to search"),
        limit: int = Query(
            matching_settings.SEARCH_MAX_RESULTS,
            ge=1,
            le=matching_settings.SEARCH_MAX_RESULTS_LIMIT,
        ),
        salt: Optional[str] = Query(None, description="Composition for better matching"),
        min_similarity: float = Query(
            matching_settings.MIN_SIMILARITY, ge=0.0, le=1.0, alias="minSimilarity"
        ),
    ):
        """
        Search for the single best catalog match.

        Returns 404 when nothing clears the similarity threshold and 503 when
        the catalog could not be queried at all.
        """
        logger.info(f"Medicine search request: q='{q}' salt='{salt}' limit={limit}")
        options = SearchOptions(
            min_similarity=min_similarity,
            max_results=limit,
            include_salt=salt or None,
            prefer_exact_match=True,
        )
        result = app.state.resolver.resolve(q, options)

        if not result.success:
            if result.failure_reason == FailureReason.STORE_FAILURE:
                return _failure(503, result.message)
            return _failure(404, result.message or "No matching medicine found")

        return _success("Medicine found", {
            "medicines": [result.match],
            "search_query": q,
            "results_count": 1,
            "match_type": result.match_type.value,
            "confidence": result.confidence,
            "execution_time_ms": result.execution_time_ms,
        })

    @app.post("/api/medicine/batch-search")
    def batch_search_medicines(request: BatchSearchRequest):
        """Resolve a list of medicines; failures are reported per item."""
        options = SearchOptions(
            min_similarity=request.min_similarity,
            max_results=request.max_results,
            prefer_exact_match=True,
        )
        items = [
            BatchItem(medicine_name=m.medicine_name, medicine_salt=m.medicine_salt)
            for m in request.medicines
        ]

        with Timer(None, "batch") as timer:
            results = app.state.batch_runner.resolve_batch(items, options)

        formatted = []
        for r in results:
            sr = r.search_result
            formatted.append({
                "original_name": r.original.medicine_name,
                "original_salt": r.original.medicine_salt,
                "index": r.index,
                "found": r.found,
                "medicine": sr.match if sr.success else None,
                "match_type": sr.match_type.value if sr.match_type else None,
                "confidence": sr.confidence,
                "error": None if sr.success else sr.message,
                "execution_time_ms": sr.execution_time_ms,
            })

        total = len(results)
        total_found = sum(1 for r in results if r.found)
        success_rate = round(total_found / total * 100, 1) if total else 0.0
        logger.info(f"Batch search completed: {total_found}/{total} found ({success_rate}%)")

        return _success("Batch search completed", {
            "total_searched": total,
            "total_found": total_found,
            "success_rate": success_rate,
            "execution_time_ms": timer.elapsed_ms,
            "results": formatted,
        })

    @app.get("/api/medicine/{med_id}")
    def get_medicine_by_id(med_id: int = Path(..., ge=1)):
        """Direct fetch of an active record by id."""
        record = app.state.store.get_by_id(med_id)
        if record is None:
            raise RecordNotFoundError(med_id)
        return _success("Medicine found", {"medicine": record.to_dict()})


app = create_app()
