# ============================================================================
# src/medicine_resolver/core/record.py
# ============================================================================
"""
Medicine catalog record
- Read-only view of one med_details row
- Sparse composition slots, ordered by storage position only
- Canonical formatted shape returned to callers
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..constants import COMPOSITION_SLOTS


@dataclass(frozen=True)
class CompositionSlot:
    name: Optional[str] = None
    strength: Optional[str] = None     # numeric string, e.g. "500"
    unit: Optional[str] = None
    composition_id: Optional[int] = None

    @property
    def dose(self) -> Optional[str]:
        return build_dose_string(self.strength, self.unit)


EMPTY_SLOT = CompositionSlot()


@dataclass
class MedicineRecord:
    med_id: int
    brand_name: str
    generic_id: Optional[int] = None
    compositions: List[CompositionSlot] = field(default_factory=list)
    manufacturer: Optional[str] = None
    price: Optional[float] = None
    pack_size: Optional[str] = None
    med_type: Optional[str] = None
    weightage: Optional[float] = None  # popularity, tie-break only

    # Soft-delete flags
    is_active: bool = True
    is_deactivated: bool = False

    def __post_init__(self):
        if len(self.compositions) > COMPOSITION_SLOTS:
            raise ValueError(
                f"A medicine has at most {COMPOSITION_SLOTS} composition slots, "
                f"got {len(self.compositions)}"
            )
        # Pad so slot N always lives at index N-1
        self.compositions = list(self.compositions) + [EMPTY_SLOT] * (
            COMPOSITION_SLOTS - len(self.compositions)
        )

    @property
    def is_available(self) -> bool:
        """Active and not deactivated."""
        return self.is_active and not self.is_deactivated

    def popularity_key(self):
        """Sort key for popularity desc with nulls last."""
        if self.weightage is None:
            return (1, 0)
        return (0, -self.weightage)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "MedicineRecord":
        """Build a record from a med_details row (sqlite3.Row or dict)."""
        keys = row.keys()
        slots = []
        for i in range(1, COMPOSITION_SLOTS + 1):
            slots.append(CompositionSlot(
                name=row[f'med_composition_name_{i}'],
                strength=_as_text(row[f'med_composition_strength_{i}']),
                unit=row[f'med_composition_unit_{i}'],
                composition_id=row[f'med_composition_id_{i}'],
            ))
        return cls(
            med_id=row['med_id'],
            brand_name=row['med_brand_name'],
            generic_id=row['med_generic_id'],
            compositions=slots,
            manufacturer=row['med_manufacturer_name'],
            price=row['med_price'],
            pack_size=_as_text(row['med_pack_size']),
            med_type=row['med_type'],
            weightage=row['med_weightage'],
            is_active=bool(row['is_active']) if 'is_active' in keys else True,
            is_deactivated=bool(row['is_deactivated']) if 'is_deactivated' in keys else False,
        )

    def to_row(self) -> Dict[str, Any]:
        """Inverse of from_row, used when loading a catalog."""
        row: Dict[str, Any] = {
            'med_id': self.med_id,
            'med_brand_name': self.brand_name,
            'med_generic_id': self.generic_id,
        }
        for i, slot in enumerate(self.compositions, start=1):
            row[f'med_composition_id_{i}'] = slot.composition_id
            row[f'med_composition_name_{i}'] = slot.name
            row[f'med_composition_strength_{i}'] = slot.strength
            row[f'med_composition_unit_{i}'] = slot.unit
        row.update({
            'med_price': self.price,
            'med_manufacturer_name': self.manufacturer,
            'med_pack_size': self.pack_size,
            'med_type': self.med_type,
            'med_weightage': self.weightage,
            'is_active': 1 if self.is_active else 0,
            'is_deactivated': 1 if self.is_deactivated else 0,
        })
        return row

    def composition_string(self) -> Optional[str]:
        """Slots joined as "Paracetamol 500mg + Caffeine 65mg"; None when no slot is named."""
        parts = []
        for slot in self.compositions:
            if slot.name:
                dose = f" {slot.dose}" if slot.dose else ""
                parts.append(f"{slot.name}{dose}")
        return " + ".join(parts) if parts else None

    def to_dict(self) -> Dict[str, Any]:
        """Canonical formatted result shape."""
        result: Dict[str, Any] = {
            'med_drug_id': self.med_id,
            'drug_name': self.brand_name,
            'med_generic_id': self.generic_id,
        }
        for i, slot in enumerate(self.compositions, start=1):
            result[f'composition{i}_id'] = slot.composition_id
            result[f'composition{i}_name'] = slot.name
            result[f'composition{i}_strength'] = slot.strength
            result[f'composition{i}_unit'] = slot.unit
            result[f'composition{i}_dose'] = slot.dose
        result.update({
            'composition': self.composition_string(),
            'mrp': self.price,
            'manufacturer': self.manufacturer,
            'pack_size': self.pack_size,
            'med_type': self.med_type,
            'med_weightage': self.weightage,
        })
        return result


def build_dose_string(strength: Optional[str], unit: Optional[str]) -> Optional[str]:
    """Concatenate strength and unit ("500mg"); None unless both are present."""
    if strength and unit:
        return f"{strength}{unit}"
    return None


def _as_text(value: Any) -> Optional[str]:
    # Numeric columns come back as int/float from SQLite
    if value is None or value == "":
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
