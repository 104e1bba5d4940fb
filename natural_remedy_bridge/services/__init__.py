"""
Service layer for drug-to-remedy matching.
"""

from .text_tokenizer import tokenize, to_token_set
from .similarity_scorer import SimilarityScorer, ScoringConfig, ScoringWeights, jaccard
from .remedy_ranker import RemedyRanker, RankingOptions, rank_remedy_candidates_for_drug
from .replacement_classifier import (
    classify_results,
    replacement_type_for_score,
    should_force_supportive_replacement,
)
from .mapping_persister import MappingPersister, PersistResult
from .fallback_index import FallbackRemedyIndex, DEFAULT_FALLBACK_INDEX
from .remedy_matching_service import RemedyMatchingService, get_remedy_matching_service

__all__ = [
    'tokenize',
    'to_token_set',
    'SimilarityScorer',
    'ScoringConfig',
    'ScoringWeights',
    'jaccard',
    'RemedyRanker',
    'RankingOptions',
    'rank_remedy_candidates_for_drug',
    'classify_results',
    'replacement_type_for_score',
    'should_force_supportive_replacement',
    'MappingPersister',
    'PersistResult',
    'FallbackRemedyIndex',
    'DEFAULT_FALLBACK_INDEX',
    'RemedyMatchingService',
    'get_remedy_matching_service'
]
