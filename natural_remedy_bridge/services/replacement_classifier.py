"""
Replacement type classification with a risk override.

A final similarity score maps to Alternative, Complementary or Supportive.
Drugs in high-risk classes (blood thinners, chemotherapy, transplant
medication, ...) never get an Alternative or Complementary label: every
mapping for them is Supportive, whatever the score.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from ..models.remedy_models import Drug, MatchResult, RemedyMapping, ReplacementType

logger = logging.getLogger(__name__)

ALTERNATIVE_THRESHOLD = 0.75
COMPLEMENTARY_THRESHOLD = 0.55

# Substring matches against "<name> <category>", lowercased
HIGH_RISK_KEYWORDS: Sequence[str] = (
    "anticoagulant",
    "antiplatelet",
    "blood thinner",
    "chemotherapy",
    "antiretroviral",
    "immunosuppress",
    "transplant",
)


def replacement_type_for_score(score: float) -> ReplacementType:
    """Map a similarity score to a replacement type."""
    if score >= ALTERNATIVE_THRESHOLD:
        return ReplacementType.ALTERNATIVE
    if score >= COMPLEMENTARY_THRESHOLD:
        return ReplacementType.COMPLEMENTARY
    return ReplacementType.SUPPORTIVE


def should_force_supportive_replacement(
    drug: Drug,
    keywords: Sequence[str] = HIGH_RISK_KEYWORDS
) -> bool:
    """Check whether a drug belongs to a class where alternatives are unsafe."""
    haystack = f"{drug.name or ''} {drug.category or ''}".lower()
    return any(keyword in haystack for keyword in keywords)


def classify_results(
    drug: Drug,
    results: Iterable[MatchResult],
    keywords: Sequence[str] = HIGH_RISK_KEYWORDS,
    force_supportive: Optional[bool] = None
) -> List[RemedyMapping]:
    """
    Turn ranked results into mappings carrying a replacement type.

    Args:
        drug: Drug the results were ranked for
        results: Ranked match results
        keywords: High-risk keywords for the override
        force_supportive: Precomputed override decision; computed from
            ``keywords`` when omitted

    Returns:
        Mappings in result order; scores are never altered
    """
    if force_supportive is None:
        force_supportive = should_force_supportive_replacement(drug, keywords)
    if force_supportive:
        logger.info(f"High-risk drug '{drug.name}': all mappings forced to Supportive")

    mappings = []
    for result in results:
        if force_supportive:
            replacement_type = ReplacementType.SUPPORTIVE
        else:
            replacement_type = replacement_type_for_score(result.similarity_score)

        mappings.append(RemedyMapping(
            drug_id=drug.id,
            remedy_id=result.remedy_id,
            similarity_score=result.similarity_score,
            matching_nutrients=list(result.matching_nutrients),
            replacement_type=replacement_type,
        ))
    return mappings
