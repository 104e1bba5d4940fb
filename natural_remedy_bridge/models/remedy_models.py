"""
Core data types for drug-to-remedy matching.

These types are the canonical shapes the matching engine sees. Storage rows
are normalized into them once, at the storage boundary
(see ``natural_remedy_bridge.data.field_parsers``).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class EvidenceLevel(Enum):
    """Qualitative confidence tag attached to a remedy."""
    STRONG = "strong"
    MODERATE = "moderate"
    LIMITED = "limited"
    UNSPECIFIED = "unspecified"


class ReplacementType(Enum):
    """Strength/intent of a recommendation."""
    ALTERNATIVE = "Alternative"
    COMPLEMENTARY = "Complementary"
    SUPPORTIVE = "Supportive"


@dataclass(frozen=True)
class Drug:
    """Pharmaceutical drug used as the query side of a match run."""
    id: str
    name: str
    category: str = ""
    ingredients: Tuple[str, ...] = ()
    benefits: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RemedyCandidate:
    """Natural remedy supplied by storage as a match candidate."""
    id: str
    name: str
    category: str = ""
    description: Optional[str] = None
    image_url: Optional[str] = None
    ingredients: Tuple[str, ...] = ()
    benefits: Tuple[str, ...] = ()
    evidence_level: EvidenceLevel = EvidenceLevel.UNSPECIFIED


@dataclass(frozen=True)
class MatchResult:
    """One ranked remedy for a drug."""
    remedy_id: str
    name: str
    description: str
    image_url: str
    category: str
    matching_nutrients: List[str]
    similarity_score: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "remedy_id": self.remedy_id,
            "name": self.name,
            "description": self.description,
            "image_url": self.image_url,
            "category": self.category,
            "matching_nutrients": list(self.matching_nutrients),
            "similarity_score": self.similarity_score,
        }


@dataclass(frozen=True)
class RemedyMapping:
    """Persisted relationship between a drug and a remedy."""
    drug_id: str
    remedy_id: str
    similarity_score: float
    matching_nutrients: List[str] = field(default_factory=list)
    replacement_type: ReplacementType = ReplacementType.SUPPORTIVE

    @property
    def key(self) -> Tuple[str, str]:
        return (self.drug_id, self.remedy_id)
