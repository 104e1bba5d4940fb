"""
Candidate ranking for drug-to-remedy matching.

Scores every candidate, drops those under the minimum score, orders the rest
by score (highest first) and truncates to the requested limit. Candidates with
equal scores keep their input order.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..models.remedy_models import Drug, MatchResult, RemedyCandidate
from .similarity_scorer import SimilarityScorer, matching_nutrients_for

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
DEFAULT_MIN_SCORE = 0.12


@dataclass(frozen=True)
class RankingOptions:
    """Tuning parameters for a ranking run."""
    limit: int = DEFAULT_LIMIT
    min_score: float = DEFAULT_MIN_SCORE


class RemedyRanker:
    """Ranks remedy candidates for a drug."""

    def __init__(self, scorer: Optional[SimilarityScorer] = None):
        self.scorer = scorer or SimilarityScorer()

    def rank(
        self,
        drug: Drug,
        candidates: Iterable[RemedyCandidate],
        options: Optional[RankingOptions] = None
    ) -> List[MatchResult]:
        """
        Rank candidates for a drug.

        Args:
            drug: Drug to find remedies for
            candidates: Remedy candidates, in the order they were supplied
            options: Limit and minimum score

        Returns:
            Ordered list of MatchResult objects (possibly empty)
        """
        options = options or RankingOptions()
        if options.limit <= 0:
            return []

        drug_tokens = self.scorer.drug_tokens(drug)
        results: List[MatchResult] = []
        seen_ids = set()

        for candidate in candidates:
            if candidate.id in seen_ids:
                logger.debug(f"Skipping repeated candidate {candidate.id} for drug {drug.id}")
                continue
            seen_ids.add(candidate.id)

            breakdown = self.scorer.score_tokens(drug_tokens, candidate)
            if breakdown.score < options.min_score:
                continue

            results.append(MatchResult(
                remedy_id=candidate.id,
                name=candidate.name,
                description=candidate.description or "",
                image_url=candidate.image_url or "",
                category=candidate.category,
                matching_nutrients=matching_nutrients_for(candidate),
                similarity_score=breakdown.score,
            ))

        # sorted() is stable, also with reverse=True
        results = sorted(results, key=lambda result: result.similarity_score, reverse=True)
        ranked = results[:options.limit]

        logger.info(
            f"Ranked {len(ranked)} of {len(seen_ids)} candidates for drug '{drug.name}' "
            f"(min_score={options.min_score}, limit={options.limit})"
        )
        return ranked


def rank_remedy_candidates_for_drug(
    drug: Drug,
    candidates: Iterable[RemedyCandidate],
    limit: int = DEFAULT_LIMIT,
    min_score: float = DEFAULT_MIN_SCORE,
    scorer: Optional[SimilarityScorer] = None
) -> List[MatchResult]:
    """Rank remedy candidates for a drug with the default scorer."""
    ranker = RemedyRanker(scorer)
    return ranker.rank(drug, candidates, RankingOptions(limit=limit, min_score=min_score))
