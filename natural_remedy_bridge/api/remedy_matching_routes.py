"""
Remedy Matching API Routes for Natural Remedy Bridge

This module provides API endpoints for ranking natural remedies against
pharmaceutical drugs and for generating stored drug-remedy mappings.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger
from pydantic import BaseModel, Field

from ..data.field_parsers import parse_evidence_level, parse_phrase_list
from ..models.remedy_models import Drug, RemedyCandidate
from ..services.remedy_matching_service import MatchRun, RemedyMatchingService, get_remedy_matching_service

router = APIRouter(prefix="/api/remedy-matching", tags=["remedy-matching"])

# Request/Response Models
class DrugPayload(BaseModel):
    id: str = Field(..., description="Drug identifier")
    name: str = Field(..., description="Drug display name")
    category: str = Field("", description="Drug category")
    ingredients: List[str] = Field(default_factory=list)
    benefits: List[str] = Field(default_factory=list)

    def to_drug(self) -> Drug:
        return Drug(
            id=self.id,
            name=self.name,
            category=self.category,
            ingredients=parse_phrase_list(self.ingredients),
            benefits=parse_phrase_list(self.benefits),
        )

class RemedyCandidatePayload(BaseModel):
    id: str = Field(..., description="Remedy identifier")
    name: str = Field(..., description="Remedy name")
    category: str = Field("", description="Remedy category")
    description: Optional[str] = None
    image_url: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    benefits: List[str] = Field(default_factory=list)
    evidence_level: Optional[str] = Field(None, description="strong, moderate or limited")

    def to_candidate(self) -> RemedyCandidate:
        return RemedyCandidate(
            id=self.id,
            name=self.name,
            category=self.category,
            description=self.description,
            image_url=self.image_url,
            ingredients=parse_phrase_list(self.ingredients),
            benefits=parse_phrase_list(self.benefits),
            evidence_level=parse_evidence_level(self.evidence_level),
        )

class RankRequest(BaseModel):
    drug: DrugPayload
    candidates: List[RemedyCandidatePayload] = Field(default_factory=list)
    limit: Optional[int] = Field(None, ge=0, description="Maximum number of results")
    min_score: Optional[float] = Field(None, ge=0.0, le=1.0, description="Minimum similarity score")

class MatchResultResponse(BaseModel):
    remedy_id: str
    name: str
    description: str
    image_url: str
    category: str
    matching_nutrients: List[str]
    similarity_score: float
    replacement_type: str

class FallbackRemedyResponse(BaseModel):
    remedy_id: str
    name: str
    category: str

class MatchResponse(BaseModel):
    drug_id: str
    drug_name: str
    force_supportive: bool
    results: List[MatchResultResponse]
    fallback_remedies: List[FallbackRemedyResponse] = []

class MappingResponse(BaseModel):
    drug_id: str
    remedy_id: str
    similarity_score: float
    matching_nutrients: List[str]
    replacement_type: str

class GenerateMappingsResponse(BaseModel):
    drug_id: str
    created: int
    skipped: int
    mappings: List[MappingResponse]


def _match_response(run: MatchRun) -> MatchResponse:
    replacement_types = run.replacement_types
    return MatchResponse(
        drug_id=run.drug.id,
        drug_name=run.drug.name,
        force_supportive=run.force_supportive,
        results=[
            MatchResultResponse(
                **result.to_dict(),
                replacement_type=replacement_types[result.remedy_id].value
            )
            for result in run.results
        ],
        fallback_remedies=[
            FallbackRemedyResponse(remedy_id=remedy.id, name=remedy.name, category=remedy.category)
            for remedy in run.fallback_remedies
        ],
    )

def _mapping_response(mapping) -> MappingResponse:
    return MappingResponse(
        drug_id=mapping.drug_id,
        remedy_id=mapping.remedy_id,
        similarity_score=mapping.similarity_score,
        matching_nutrients=list(mapping.matching_nutrients),
        replacement_type=mapping.replacement_type.value,
    )

@router.post("/rank", response_model=MatchResponse)
async def rank_remedies(
    request: RankRequest,
    service: RemedyMatchingService = Depends(get_remedy_matching_service)
):
    """
    Rank inline remedy candidates for an inline drug.

    Nothing is read from or written to storage.
    """
    try:
        run = service.match(
            request.drug.to_drug(),
            [candidate.to_candidate() for candidate in request.candidates],
            limit=request.limit,
            min_score=request.min_score,
            include_fallback=True,
        )
        return _match_response(run)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error ranking remedies: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to rank remedies"
        )

@router.get("/drugs/{drug_id}/matches", response_model=MatchResponse)
def match_stored_drug(
    drug_id: str,
    limit: Optional[int] = Query(None, ge=0),
    min_score: Optional[float] = Query(None, ge=0.0, le=1.0),
    service: RemedyMatchingService = Depends(get_remedy_matching_service)
):
    """
    Rank every stored remedy for a stored drug.

    When nothing reaches the minimum score, curated fallback remedies are
    listed separately.
    """
    try:
        run = service.match_drug(drug_id, limit=limit, min_score=min_score)
        if run is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Drug {drug_id} not found"
            )
        return _match_response(run)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error matching drug {drug_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to match remedies"
        )

@router.post("/drugs/{drug_id}/mappings", response_model=GenerateMappingsResponse)
def generate_drug_mappings(
    drug_id: str,
    limit: Optional[int] = Query(None, ge=0),
    min_score: Optional[float] = Query(None, ge=0.0, le=1.0),
    service: RemedyMatchingService = Depends(get_remedy_matching_service)
):
    """
    Generate and store mappings for a drug.

    Pairs that are already mapped are skipped; their stored score is kept.
    """
    try:
        result = service.generate_mappings(drug_id, limit=limit, min_score=min_score)
        if result is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Drug {drug_id} not found"
            )
        return GenerateMappingsResponse(
            drug_id=drug_id,
            created=result.created,
            skipped=result.skipped,
            mappings=[_mapping_response(mapping) for mapping in result.created_mappings],
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error generating mappings for drug {drug_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate mappings"
        )

@router.get("/drugs/{drug_id}/mappings", response_model=List[MappingResponse])
def list_drug_mappings(
    drug_id: str,
    service: RemedyMatchingService = Depends(get_remedy_matching_service)
):
    """List stored mappings for a drug, highest score first."""
    try:
        if not service.drug_exists(drug_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Drug {drug_id} not found"
            )
        return [_mapping_response(mapping) for mapping in service.get_mappings(drug_id)]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error listing mappings for drug {drug_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list mappings"
        )
