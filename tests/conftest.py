# ============================================================================
# FILE: tests/conftest.py
# ============================================================================
"""
Pytest configuration and shared fixtures for testing.
"""

import pytest

from medicine_resolver.core.record import CompositionSlot, MedicineRecord
from medicine_resolver.store import InMemoryMedicineStore, SQLiteMedicineStore
from medicine_resolver.utils.metrics import MetricsCollector


def _record(med_id, brand_name, slots, weightage=None, **kwargs):
    return MedicineRecord(
        med_id=med_id,
        brand_name=brand_name,
        compositions=[
            CompositionSlot(name=name, strength=strength, unit=unit, composition_id=cid)
            for cid, (name, strength, unit) in enumerate(slots, start=100 * med_id)
        ],
        weightage=weightage,
        **kwargs,
    )


@pytest.fixture
def sample_records():
    """Small catalog covering exact, fuzzy, composition and soft-delete cases"""
    return [
        _record(1, "Paracetamol", [("Paracetamol", "500", "mg")], weightage=90,
                manufacturer="GSK", price=20.5, pack_size="15", med_type="tablet"),
        _record(2, "Paracetamol 650", [("Paracetamol", "650", "mg")], weightage=50),
        _record(3, "Crocin Advance", [("Paracetamol", "500", "mg")], weightage=80),
        _record(4, "Dolo 650", [("Paracetamol", "650", "mg")]),
        _record(5, "Azithral 500", [("Azithromycin", "500", "mg")], weightage=70),
        _record(6, "Augmentin 625 Duo", [
            ("Amoxycillin", "500", "mg"),
            ("Clavulanic Acid", "125", "mg"),
        ], weightage=60),
        _record(7, "Pan 40", [("Pantoprazole", "40", "mg")], weightage=40),
        _record(8, "Aspirin", [("Aspirin", "75", "mg")], weightage=95, is_deactivated=True),
        _record(9, "Ecosprin", [("Aspirin", "75", "mg")], weightage=95, is_active=False),
    ]


@pytest.fixture
def memory_store(sample_records):
    """In-memory catalog"""
    return InMemoryMedicineStore(sample_records)


@pytest.fixture
def sqlite_store(sample_records, tmp_path):
    """SQLite catalog on disk under tmp_path"""
    store = SQLiteMedicineStore.from_records(sample_records, db_path=tmp_path / "medicines.db")
    yield store
    store.close()


@pytest.fixture(params=["memory", "sqlite"])
def store(request, sample_records, tmp_path):
    """Each reference store implementation over the same catalog"""
    if request.param == "memory":
        yield InMemoryMedicineStore(sample_records)
    else:
        store = SQLiteMedicineStore.from_records(sample_records, db_path=tmp_path / "medicines.db")
        yield store
        store.close()


@pytest.fixture
def metrics():
    """Isolated metrics collector"""
    return MetricsCollector()
