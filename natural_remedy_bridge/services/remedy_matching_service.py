"""
Remedy Matching Service for Natural Remedy Bridge

This service finds natural-remedy alternatives for pharmaceutical drugs by
running the deterministic matching pipeline:

1. Load the drug and candidate remedies from storage
2. Rank candidates by token similarity
3. Classify each result (with the high-risk override)
4. Persist the results as insert-if-absent mappings
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from config.settings import settings
from ..data.database import SessionLocal
from ..data.remedy_catalog import RemedyCatalog, load_drug, load_drugs
from ..models.remedy_models import Drug, MatchResult, RemedyCandidate, RemedyMapping, ReplacementType
from .fallback_index import DEFAULT_FALLBACK_INDEX, FallbackRemedyIndex
from .mapping_persister import MappingPersister, PersistResult
from .remedy_ranker import RankingOptions, RemedyRanker
from .replacement_classifier import (
    HIGH_RISK_KEYWORDS,
    classify_results,
    should_force_supportive_replacement,
)
from .similarity_scorer import SimilarityScorer

logger = logging.getLogger(__name__)


@dataclass
class MatchRun:
    """Result of matching one drug against a set of candidates."""
    drug: Drug
    results: List[MatchResult]
    mappings: List[RemedyMapping]
    force_supportive: bool = False
    fallback_remedies: List[RemedyCandidate] = field(default_factory=list)

    @property
    def replacement_types(self) -> Dict[str, ReplacementType]:
        return {mapping.remedy_id: mapping.replacement_type for mapping in self.mappings}


@dataclass
class BulkMappingSummary:
    """Totals for a mapping run over every stored drug."""
    drugs_processed: int = 0
    mappings_created: int = 0
    duplicates_skipped: int = 0
    drugs_without_matches: List[str] = field(default_factory=list)


class RemedyMatchingService:
    """Service for matching pharmaceutical drugs to natural remedies."""

    def __init__(
        self,
        session_factory: Optional[Callable[[], Session]] = None,
        scorer: Optional[SimilarityScorer] = None,
        fallback_index: Optional[FallbackRemedyIndex] = DEFAULT_FALLBACK_INDEX,
        high_risk_keywords=HIGH_RISK_KEYWORDS,
        default_limit: Optional[int] = None,
        default_min_score: Optional[float] = None
    ):
        self.session_factory = session_factory or SessionLocal
        self.ranker = RemedyRanker(scorer)
        self.persister = MappingPersister(self.session_factory)
        self.fallback_index = fallback_index
        self.high_risk_keywords = tuple(high_risk_keywords)
        self.default_limit = settings.match_limit if default_limit is None else default_limit
        self.default_min_score = settings.match_min_score if default_min_score is None else default_min_score

    def _options(self, limit: Optional[int], min_score: Optional[float]) -> RankingOptions:
        return RankingOptions(
            limit=self.default_limit if limit is None else limit,
            min_score=self.default_min_score if min_score is None else min_score,
        )

    def match(
        self,
        drug: Drug,
        candidates: Iterable[RemedyCandidate],
        limit: Optional[int] = None,
        min_score: Optional[float] = None,
        include_fallback: bool = False
    ) -> MatchRun:
        """
        Rank and classify candidates for a drug without touching storage.

        Args:
            drug: Drug to match
            candidates: Remedy candidates
            limit: Maximum number of results
            min_score: Minimum similarity score
            include_fallback: Resolve fallback remedies when nothing scores

        Returns:
            MatchRun with ordered results and their mappings
        """
        candidates = list(candidates)
        results = self.ranker.rank(drug, candidates, self._options(limit, min_score))
        force_supportive = should_force_supportive_replacement(drug, self.high_risk_keywords)
        mappings = classify_results(drug, results, force_supportive=force_supportive)

        run = MatchRun(
            drug=drug,
            results=results,
            mappings=mappings,
            force_supportive=force_supportive,
        )
        if include_fallback and not results:
            run.fallback_remedies = self.fallback_candidates(drug, candidates)
        return run

    def fallback_candidates(self, drug: Drug, candidates: Iterable[RemedyCandidate]) -> List[RemedyCandidate]:
        """Candidates suggested by the fallback index for a drug."""
        if self.fallback_index is None:
            return []
        return self.fallback_index.candidates_for(drug, list(candidates))

    def _load(self, drug_id: str):
        session = self.session_factory()
        try:
            return load_drug(session, drug_id), RemedyCatalog.from_session(session)
        finally:
            session.close()

    def match_drug(
        self,
        drug_id: str,
        limit: Optional[int] = None,
        min_score: Optional[float] = None,
        include_fallback: bool = True
    ) -> Optional[MatchRun]:
        """Match a stored drug against every stored remedy; None if the drug is unknown."""
        drug, catalog = self._load(drug_id)
        if drug is None:
            logger.warning(f"Drug not found: {drug_id}")
            return None
        return self.match(drug, catalog, limit, min_score, include_fallback)

    def generate_mappings(
        self,
        drug_id: str,
        limit: Optional[int] = None,
        min_score: Optional[float] = None
    ) -> Optional[PersistResult]:
        """Match a stored drug and persist its mappings; None if the drug is unknown."""
        run = self.match_drug(drug_id, limit, min_score, include_fallback=False)
        if run is None:
            return None
        return self.persister.persist(run.mappings)

    def generate_all_mappings(
        self,
        limit: Optional[int] = None,
        min_score: Optional[float] = None
    ) -> BulkMappingSummary:
        """Match and persist mappings for every stored drug."""
        session = self.session_factory()
        try:
            drugs = load_drugs(session)
            catalog = RemedyCatalog.from_session(session)
        finally:
            session.close()

        logger.info(f"Generating mappings for {len(drugs)} drugs against {len(catalog)} remedies")
        summary = BulkMappingSummary()

        for drug in drugs:
            run = self.match(drug, catalog, limit, min_score)
            summary.drugs_processed += 1
            if not run.mappings:
                summary.drugs_without_matches.append(drug.name)
                continue
            result = self.persister.persist(run.mappings)
            summary.mappings_created += result.created
            summary.duplicates_skipped += result.skipped

        logger.info(
            f"Mapping generation finished: {summary.mappings_created} created, "
            f"{summary.duplicates_skipped} duplicates skipped, "
            f"{len(summary.drugs_without_matches)} drugs without matches"
        )
        return summary

    def get_mappings(self, drug_id: str) -> List[RemedyMapping]:
        """Stored mappings for a drug."""
        return self.persister.get_mappings(drug_id)

    def drug_exists(self, drug_id: str) -> bool:
        session = self.session_factory()
        try:
            return load_drug(session, drug_id) is not None
        finally:
            session.close()


# Global instance
_global_matching_service = None

def get_remedy_matching_service() -> RemedyMatchingService:
    """Get or create global remedy matching service instance."""
    global _global_matching_service
    if _global_matching_service is None:
        _global_matching_service = RemedyMatchingService()
    return _global_matching_service
