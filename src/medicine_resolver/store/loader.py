# ============================================================================
# src/medicine_resolver/store/loader.py
# ============================================================================
"""
Catalog loader: builds the SQLite medicine database from a CSV export of the
med_details table.

Usage:
    python -m medicine_resolver.store.loader catalog.csv data/medicines/medicines.db
"""

import argparse
import csv
import logging
import sqlite3
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from .sqlite_store import MED_COLUMNS, create_schema, insert_records
from ..config import base_settings, logging_settings
from ..core.record import MedicineRecord
from ..utils.exceptions import ValidationError
from ..utils.logging import setup_logging

logger = logging.getLogger(__name__)

_INT_COLUMNS = {'med_id', 'med_generic_id', 'is_active', 'is_deactivated'} | {
    c for c in MED_COLUMNS if c.startswith('med_composition_id_')
}
_FLOAT_COLUMNS = {'med_price', 'med_weightage'}


def _parse_value(column: str, raw: Optional[str]) -> Any:
    value = raw.strip() if raw is not None else ''
    if value == '':
        return None
    if column in _INT_COLUMNS:
        return int(float(value))
    if column in _FLOAT_COLUMNS:
        return float(value)
    return value


def read_catalog_csv(csv_path: Path) -> Iterator[MedicineRecord]:
    """
    Stream MedicineRecord objects from a CSV export.

    Only med_id and med_brand_name are required columns; missing soft-delete
    flags default to active.

    Raises:
        ValidationError: missing required columns or unparseable values
    """
    with open(csv_path, 'r', encoding='utf-8', newline='') as f:
        reader = csv.DictReader(f)
        header = set(reader.fieldnames or [])
        missing = {'med_id', 'med_brand_name'} - header
        if missing:
            raise ValidationError(f"Catalog CSV is missing columns: {sorted(missing)}")

        for line_no, raw_row in enumerate(reader, start=2):
            try:
                row: Dict[str, Any] = {c: _parse_value(c, raw_row.get(c)) for c in MED_COLUMNS}
            except ValueError as e:
                raise ValidationError(f"{csv_path}:{line_no}: {e}") from e
            if row['is_active'] is None:
                row['is_active'] = 1
            if row['is_deactivated'] is None:
                row['is_deactivated'] = 0
            if row['med_id'] is None or not row['med_brand_name']:
                logger.warning(f"{csv_path}:{line_no}: skipping row without id or brand name")
                continue
            yield MedicineRecord.from_row(row)


def build_database(csv_path: Path, db_path: Path, batch_size: int = 1000) -> int:
    """
    Load a CSV catalog into a SQLite database, creating the schema if needed.

    Returns:
        Number of records loaded
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"Loading catalog {csv_path} into {db_path}")

    conn = sqlite3.connect(str(db_path))
    try:
        create_schema(conn)
        count = insert_records(conn, read_catalog_csv(csv_path), batch_size=batch_size)
    finally:
        conn.close()

    logger.info(f"Loaded {count:,} medicine records")
    return count


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Build the medicine catalog database from CSV")
    parser.add_argument("csv_path", type=Path, help="CSV export of med_details")
    parser.add_argument(
        "db_path", type=Path, nargs="?", default=None,
        help="Target SQLite database (default: MEDICINE_DB_PATH)"
    )
    parser.add_argument("--batch-size", type=int, default=1000, help="Rows per insert batch")
    args = parser.parse_args(argv)

    setup_logging(logging_settings.LOG_LEVEL)

    if not args.csv_path.exists():
        logger.error(f"Catalog CSV not found: {args.csv_path}")
        return 1

    db_path = args.db_path
    if db_path is None:
        base_settings.create_directories()
        db_path = base_settings.get_db_path()
    try:
        build_database(args.csv_path, db_path, batch_size=args.batch_size)
    except ValidationError as e:
        logger.error(f"Catalog load failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
