# ============================================================================
# src/medicine_resolver/constants/medicine_forms.py
# ============================================================================
"""
Medicine Name Vocabularies
- Pharmaceutical form suffixes stripped from query names
- OCR character confusions
- Dosage units
"""

# Trailing words stripped from a medicine name, applied in this order.
# "Paracetamol SR Tablet" loses "tablet" first, then "sr".
MEDICINE_SUFFIXES = (
    'tablet', 'tablets', 'tab', 'tabs',
    'capsule', 'capsules', 'cap', 'caps',
    'syrup', 'suspension', 'solution',
    'injection', 'inj',
    'cream', 'ointment', 'gel',
    'drops', 'drop',
    'powder', 'granules',
    # Modified-release markers
    'mr', 'sr', 'xr', 'er', 'cr', 'la', 'xl', 'ds',
)

# OCR confusion classes: members of a class are mutually substitutable.
# Each class maps to the whole-string replacements applied to a lowercase
# variant when any member of the class is present.
OCR_CONFUSION_CLASSES = (
    (frozenset('o0'), (('o', '0'), ('0', 'o'))),
    (frozenset('i1l'), (('i', '1'), ('1', 'i'), ('l', 'i'))),
    (frozenset('s5'), (('s', '5'), ('5', 's'))),
)

# Units recognised after a strength value. Order matters for the regex
# alternation: "mg" is tried before "mcg", "gm" before "g".
DOSAGE_UNITS = ('mg', 'gm', 'ml', 'mcg', 'g', 'l', 'iu', '%')

# Brand-name match scores assigned by the fuzzy strategy
MATCH_SCORE_EQUAL = 100
MATCH_SCORE_PREFIX = 90
MATCH_SCORE_CONTAINS = 80
MATCH_SCORE_OTHER = 70

# Composition match scores
COMPOSITION_SCORE_EXACT = 100      # trigram-similar name with same strength and unit
COMPOSITION_SCORE_SIMILAR = 80     # trigram-similar name only
COMPOSITION_SCORE_CONTAINS = 70    # substring containment only

# Number of composition slots on a catalog record
COMPOSITION_SLOTS = 5
