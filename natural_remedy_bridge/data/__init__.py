"""
Storage models, boundary normalization and candidate loading.
"""

from .field_parsers import (
    parse_phrase_list,
    parse_evidence_level,
    parse_optional_text,
    drug_from_record,
    candidate_from_record
)

from .remedy_catalog import (
    RemedyCatalog,
    load_drug,
    load_drugs
)

from .seed_loader import (
    SeedResult,
    seed_pharmaceuticals,
    seed_remedies
)

__all__ = [
    'parse_phrase_list',
    'parse_evidence_level',
    'parse_optional_text',
    'drug_from_record',
    'candidate_from_record',
    'RemedyCatalog',
    'load_drug',
    'load_drugs',
    'SeedResult',
    'seed_pharmaceuticals',
    'seed_remedies'
]
