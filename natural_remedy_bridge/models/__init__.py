"""
Domain models shared by the matching engine, storage and API layers.
"""

from .remedy_models import (
    Drug,
    EvidenceLevel,
    MatchResult,
    RemedyCandidate,
    RemedyMapping,
    ReplacementType,
)

__all__ = [
    'Drug',
    'EvidenceLevel',
    'MatchResult',
    'RemedyCandidate',
    'RemedyMapping',
    'ReplacementType',
]
