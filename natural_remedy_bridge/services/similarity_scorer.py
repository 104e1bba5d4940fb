"""
Similarity Scoring for Drug-Remedy Pairs

Scores a natural remedy against a pharmaceutical drug by blending three
Jaccard similarities computed over token sets:

1. Ingredients vs ingredients
2. Benefits + name vs benefits + name
3. Drug category vs remedy category + benefits + name

An additive boost based on the remedy's evidence level is applied last, and
the result is rounded to 3 decimals and clamped into [0, 1] so that ranking
is stable across runs and platforms.
"""

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import AbstractSet, Iterable, List, Mapping, Optional, Union

from ..models.remedy_models import Drug, EvidenceLevel, RemedyCandidate
from .text_tokenizer import to_token_set, tokenize

logger = logging.getLogger(__name__)

SCORE_PRECISION = 3

DEFAULT_EVIDENCE_BOOSTS: Mapping[EvidenceLevel, float] = MappingProxyType({
    EvidenceLevel.STRONG: 0.05,
    EvidenceLevel.MODERATE: 0.03,
    EvidenceLevel.LIMITED: 0.01,
    EvidenceLevel.UNSPECIFIED: 0.0,
})

MAX_MATCHING_NUTRIENTS = 3


def jaccard(a: AbstractSet[str], b: AbstractSet[str]) -> float:
    """
    Jaccard similarity |A∩B| / |A∪B|.

    Defined as 0.0 when either set is empty.
    """
    if not a or not b:
        return 0.0

    intersection = len(a & b)
    denominator = len(a) + len(b) - intersection
    return intersection / denominator if denominator else 0.0


def round_score(value: float, precision: int = SCORE_PRECISION) -> float:
    """Round half up to a fixed number of decimals."""
    factor = 10 ** precision
    return math.floor(value * factor + 0.5) / factor


def clamp_score(value: float) -> float:
    return max(0.0, min(1.0, value))


def evidence_boost(
    level: Union[EvidenceLevel, str, None],
    boosts: Mapping[EvidenceLevel, float] = DEFAULT_EVIDENCE_BOOSTS
) -> float:
    """Additive score boost for a remedy's evidence level."""
    if isinstance(level, str):
        try:
            level = EvidenceLevel(level.strip().lower())
        except ValueError:
            level = EvidenceLevel.UNSPECIFIED
    if level is None:
        level = EvidenceLevel.UNSPECIFIED
    return boosts.get(level, 0.0)


def matching_nutrients_for(candidate: RemedyCandidate) -> List[str]:
    """Representative terms for a result: first ingredients, else first benefits."""
    if candidate.ingredients:
        return list(candidate.ingredients[:MAX_MATCHING_NUTRIENTS])
    return list((candidate.benefits or ())[:MAX_MATCHING_NUTRIENTS])


@dataclass(frozen=True)
class ScoringWeights:
    """Weights of the three component similarities."""
    benefit: float = 0.5
    category: float = 0.3
    ingredient: float = 0.2


@dataclass(frozen=True)
class ScoringConfig:
    """Immutable configuration passed into the scorer."""
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    evidence_boosts: Mapping[EvidenceLevel, float] = field(
        default_factory=lambda: DEFAULT_EVIDENCE_BOOSTS
    )


@dataclass(frozen=True)
class EntityTokens:
    """Token sets for one side of a comparison."""
    ingredients: frozenset
    benefits: frozenset
    name: frozenset
    category: frozenset

    @classmethod
    def from_fields(
        cls,
        name: Optional[str],
        category: Optional[str],
        ingredients: Optional[Iterable[str]],
        benefits: Optional[Iterable[str]]
    ) -> "EntityTokens":
        return cls(
            ingredients=to_token_set(ingredients),
            benefits=to_token_set(benefits),
            name=frozenset(tokenize(name)),
            category=frozenset(tokenize(category)),
        )

    @property
    def benefits_plus(self) -> frozenset:
        return self.benefits | self.name

    @property
    def category_plus(self) -> frozenset:
        return self.benefits_plus | self.category | self.name


@dataclass(frozen=True)
class SimilarityBreakdown:
    """Component scores and final score for one drug-remedy pair."""
    ingredient_score: float
    benefit_score: float
    category_score: float
    evidence_boost: float
    raw_score: float
    score: float


class SimilarityScorer:
    """Scores remedy candidates against a drug."""

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()

    @staticmethod
    def drug_tokens(drug: Drug) -> EntityTokens:
        return EntityTokens.from_fields(
            drug.name, drug.category, drug.ingredients, drug.benefits
        )

    @staticmethod
    def candidate_tokens(candidate: RemedyCandidate) -> EntityTokens:
        return EntityTokens.from_fields(
            candidate.name, candidate.category, candidate.ingredients, candidate.benefits
        )

    def score(self, drug: Drug, candidate: RemedyCandidate) -> SimilarityBreakdown:
        """Score a single candidate against a drug."""
        return self.score_tokens(self.drug_tokens(drug), candidate)

    def score_tokens(self, drug_tokens: EntityTokens, candidate: RemedyCandidate) -> SimilarityBreakdown:
        """
        Score a candidate against pre-tokenized drug fields.

        Callers ranking many candidates tokenize the drug once and reuse it.
        """
        remedy_tokens = self.candidate_tokens(candidate)
        weights = self.config.weights

        ingredient_score = jaccard(drug_tokens.ingredients, remedy_tokens.ingredients)
        benefit_score = jaccard(drug_tokens.benefits_plus, remedy_tokens.benefits_plus)
        category_score = jaccard(drug_tokens.category, remedy_tokens.category_plus)

        raw_score = (
            benefit_score * weights.benefit +
            category_score * weights.category +
            ingredient_score * weights.ingredient
        )
        boost = evidence_boost(candidate.evidence_level, self.config.evidence_boosts)
        final_score = clamp_score(round_score(raw_score + boost))

        logger.debug(
            f"Similarity {candidate.id}: ingredient={ingredient_score:.3f}, "
            f"benefit={benefit_score:.3f}, category={category_score:.3f}, "
            f"boost={boost:.2f}, final={final_score:.3f}"
        )

        return SimilarityBreakdown(
            ingredient_score=ingredient_score,
            benefit_score=benefit_score,
            category_score=category_score,
            evidence_boost=boost,
            raw_score=raw_score,
            score=final_score,
        )
