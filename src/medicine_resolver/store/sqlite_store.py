# ============================================================================
# src/medicine_resolver/store/sqlite_store.py
# ============================================================================
"""
SQLite Medicine Catalog.

Reference store backed by a `med_details` table. The trigram operator is a
Python function registered on the connection, so composition lookups keep
pg_trgm semantics without a PostgreSQL server. Every caller value is bound
as a parameter.
"""

import sqlite3
import logging
import threading
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

from .base import BrandMatch, CompositionMatch, ReferenceStore
from ..config import base_settings
from ..constants import (
    COMPOSITION_SLOTS,
    COMPOSITION_SCORE_EXACT,
    COMPOSITION_SCORE_SIMILAR,
    COMPOSITION_SCORE_CONTAINS,
    MATCH_SCORE_EQUAL,
    MATCH_SCORE_PREFIX,
    MATCH_SCORE_CONTAINS,
    MATCH_SCORE_OTHER,
)
from ..core.record import MedicineRecord
from ..matching.similarity import is_trigram_similar, trigram_similarity
from ..utils.exceptions import ConfigurationError, StoreQueryError

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"

MED_COLUMNS = (
    ['med_id', 'med_brand_name', 'med_generic_id']
    + [
        f'med_composition_{part}_{i}'
        for i in range(1, COMPOSITION_SLOTS + 1)
        for part in ('id', 'name', 'strength', 'unit')
    ]
    + [
        'med_price', 'med_manufacturer_name', 'med_pack_size',
        'med_type', 'med_weightage', 'is_active', 'is_deactivated',
    ]
)

_SELECT_COLUMNS = ", ".join(f"md.{c}" for c in MED_COLUMNS)
_ACTIVE = "md.is_active = 1 AND md.is_deactivated = 0"


def create_schema(conn: sqlite3.Connection) -> None:
    """Create the med_details table and its lookup indexes."""
    slot_columns = []
    for i in range(1, COMPOSITION_SLOTS + 1):
        slot_columns.extend([
            f"med_composition_id_{i} INTEGER",
            f"med_composition_name_{i} TEXT",
            f"med_composition_strength_{i} TEXT",
            f"med_composition_unit_{i} TEXT",
        ])
    conn.execute(
        f"""
        CREATE TABLE IF NOT EXISTS med_details (
            med_id INTEGER PRIMARY KEY,
            med_brand_name TEXT NOT NULL,
            med_generic_id INTEGER,
            {", ".join(slot_columns)},
            med_price REAL,
            med_manufacturer_name TEXT,
            med_pack_size TEXT,
            med_type TEXT,
            med_weightage REAL,
            is_active INTEGER NOT NULL DEFAULT 1,
            is_deactivated INTEGER NOT NULL DEFAULT 0
        )
        """
    )
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_med_brand_lower ON med_details(LOWER(med_brand_name))"
    )
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_med_active ON med_details(is_active, is_deactivated)"
    )
    conn.commit()


def insert_records(
    conn: sqlite3.Connection,
    records: Iterable[MedicineRecord],
    batch_size: int = 1000,
) -> int:
    """
    Insert (or replace) catalog records in batches.

    Returns:
        Number of records written
    """
    placeholders = ", ".join("?" for _ in MED_COLUMNS)
    sql = f"INSERT OR REPLACE INTO med_details ({', '.join(MED_COLUMNS)}) VALUES ({placeholders})"

    batch = []
    count = 0
    for record in records:
        row = record.to_row()
        batch.append(tuple(row[c] for c in MED_COLUMNS))
        count += 1
        if len(batch) >= batch_size:
            conn.executemany(sql, batch)
            batch = []
    if batch:
        conn.executemany(sql, batch)
    conn.commit()
    return count


def _composition_query() -> str:
    slots = range(1, COMPOSITION_SLOTS + 1)
    name = "md.med_composition_name_{i}"

    similarity_terms = ",\n".join(
        f"trgm_similarity(COALESCE({name.format(i=i)}, ''), :name)" for i in slots
    )
    similar_any = " OR ".join(f"trgm_similar({name.format(i=i)}, :name)" for i in slots)
    contains_any = " OR ".join(
        f"({name.format(i=i)} <> '' AND (INSTR(LOWER({name.format(i=i)}), LOWER(:name)) > 0"
        f" OR INSTR(LOWER(:name), LOWER({name.format(i=i)})) > 0))"
        for i in slots
    )
    exact_cases = "\n".join(
        f"WHEN trgm_similar({name.format(i=i)}, :name)"
        f" AND md.med_composition_strength_{i} = :strength"
        f" AND LOWER(md.med_composition_unit_{i}) = LOWER(:unit) THEN {COMPOSITION_SCORE_EXACT}"
        for i in slots
    )

    return f"""
        SELECT {_SELECT_COLUMNS},
            MAX({similarity_terms}) AS comp_similarity,
            CASE
                {exact_cases}
                WHEN {similar_any} THEN {COMPOSITION_SCORE_SIMILAR}
                ELSE {COMPOSITION_SCORE_CONTAINS}
            END AS comp_match_score
        FROM med_details md
        WHERE {_ACTIVE}
            AND ({similar_any} OR {contains_any})
        ORDER BY comp_match_score DESC, comp_similarity DESC, md.med_weightage DESC NULLS LAST
        LIMIT :limit
    """


_COMPOSITION_SQL = _composition_query()


class SQLiteMedicineStore(ReferenceStore):
    """
    SQLite-based medicine catalog.

    Provides:
    - Exact brand-name lookup
    - Substring brand-name search with coarse match scores
    - Trigram brand-name search for misspelt names
    - Trigram composition search across all five composition slots
    - Lookup by id
    """

    def __init__(
        self,
        db_path: Union[str, Path, None] = None,
        trigram_threshold: Optional[float] = None,
    ):
        super().__init__(trigram_threshold)

        if db_path is None:
            db_path = base_settings.get_db_path()
        self.db_path = db_path

        if str(db_path) != MEMORY_DB and not Path(db_path).exists():
            raise ConfigurationError(
                f"Medicine database not found at {db_path}. "
                "Build it with 'python -m medicine_resolver.store.loader <catalog.csv> <db>'."
            )

        self._lock = threading.Lock()
        self._conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.create_function("trgm_similarity", 2, trigram_similarity, deterministic=True)
        self._conn.create_function("trgm_similar", 2, self._trgm_similar, deterministic=True)
        logger.info(f"Connected to medicine database: {db_path}")

    @classmethod
    def from_records(
        cls,
        records: Iterable[MedicineRecord],
        db_path: Union[str, Path] = MEMORY_DB,
        trigram_threshold: Optional[float] = None,
    ) -> "SQLiteMedicineStore":
        """Create a store holding the given records (in memory by default)."""
        if str(db_path) != MEMORY_DB:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
            sqlite3.connect(str(db_path)).close()
        store = cls(db_path, trigram_threshold=trigram_threshold)
        with store._lock:
            create_schema(store._conn)
            insert_records(store._conn, records)
        return store

    def _trgm_similar(self, a: Optional[str], b: Optional[str]) -> int:
        return 1 if is_trigram_similar(a, b, self.trigram_threshold) else 0

    def _fetch(self, operation: str, sql: str, params: Any, term: Optional[str]) -> List[sqlite3.Row]:
        with self._lock:
            if self._conn is None:
                raise StoreQueryError("Medicine database connection is closed", operation, term)
            try:
                return self._conn.execute(sql, params).fetchall()
            except sqlite3.Error as e:
                raise StoreQueryError(f"{operation} query failed: {e}", operation, term) from e

    def find_exact(self, name: str) -> Optional[MedicineRecord]:
        rows = self._fetch(
            "find_exact",
            f"""
            SELECT {_SELECT_COLUMNS}
            FROM med_details md
            WHERE {_ACTIVE}
                AND LOWER(md.med_brand_name) = LOWER(?)
            ORDER BY md.med_weightage DESC NULLS LAST
            LIMIT 1
            """,
            (name,),
            name,
        )
        return MedicineRecord.from_row(rows[0]) if rows else None

    def search_brand_names(self, term: str, limit: int) -> List[BrandMatch]:
        # INSTR keeps '%' and '_' in the term literal
        rows = self._fetch(
            "search_brand_names",
            f"""
            SELECT {_SELECT_COLUMNS},
                CASE
                    WHEN LOWER(md.med_brand_name) = LOWER(:term) THEN {MATCH_SCORE_EQUAL}
                    WHEN INSTR(LOWER(md.med_brand_name), LOWER(:term)) = 1 THEN {MATCH_SCORE_PREFIX}
                    WHEN INSTR(LOWER(md.med_brand_name), LOWER(:term)) > 0 THEN {MATCH_SCORE_CONTAINS}
                    ELSE {MATCH_SCORE_OTHER}
                END AS match_score
            FROM med_details md
            WHERE {_ACTIVE}
                AND INSTR(LOWER(md.med_brand_name), LOWER(:term)) > 0
            ORDER BY match_score DESC, md.med_weightage DESC NULLS LAST
            LIMIT :limit
            """,
            {"term": term, "limit": limit},
            term,
        )
        return [
            BrandMatch(record=MedicineRecord.from_row(row), match_score=row['match_score'])
            for row in rows
        ]

    def search_similar_brand_names(self, term: str, limit: int) -> List[BrandMatch]:
        rows = self._fetch(
            "search_similar_brand_names",
            f"""
            SELECT {_SELECT_COLUMNS},
                trgm_similarity(md.med_brand_name, :term) AS brand_similarity
            FROM med_details md
            WHERE {_ACTIVE}
                AND trgm_similar(md.med_brand_name, :term)
            ORDER BY brand_similarity DESC, md.med_weightage DESC NULLS LAST
            LIMIT :limit
            """,
            {"term": term, "limit": limit},
            term,
        )
        return [
            BrandMatch(record=MedicineRecord.from_row(row), match_score=MATCH_SCORE_OTHER)
            for row in rows
        ]

    def search_compositions(
        self,
        name: str,
        strength: Optional[str],
        unit: Optional[str],
        limit: int,
    ) -> List[CompositionMatch]:
        rows = self._fetch(
            "search_compositions",
            _COMPOSITION_SQL,
            {"name": name, "strength": strength, "unit": unit, "limit": limit},
            name,
        )
        return [
            CompositionMatch(
                record=MedicineRecord.from_row(row),
                similarity=row['comp_similarity'] or 0.0,
                match_score=row['comp_match_score'],
            )
            for row in rows
        ]

    def get_by_id(self, med_id: int) -> Optional[MedicineRecord]:
        rows = self._fetch(
            "get_by_id",
            f"SELECT {_SELECT_COLUMNS} FROM med_details md WHERE md.med_id = ? AND {_ACTIVE}",
            (med_id,),
            str(med_id),
        )
        return MedicineRecord.from_row(rows[0]) if rows else None

    def count(self) -> int:
        """Number of active records."""
        rows = self._fetch(
            "count", f"SELECT COUNT(*) AS n FROM med_details md WHERE {_ACTIVE}", (), None
        )
        return rows[0]['n']

    def close(self):
        """Close database connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None


# Singleton instance
_store_instance: Optional[SQLiteMedicineStore] = None


def get_medicine_store() -> SQLiteMedicineStore:
    """Get the singleton catalog store for the configured database path."""
    global _store_instance
    if _store_instance is None:
        _store_instance = SQLiteMedicineStore()
    return _store_instance


def reset_medicine_store() -> None:
    """Close and forget the singleton store."""
    global _store_instance
    if _store_instance is not None:
        _store_instance.close()
        _store_instance = None
