"""
Storage-boundary normalization.

Upstream storage may hand over ingredient and benefit fields either as native
lists or as strings (a JSON array, or a comma/semicolon delimited list). These
helpers convert every shape into the canonical tuple of strings once, so the
matching engine only ever sees ``Drug`` and ``RemedyCandidate`` objects.
"""

import json
import logging
import re
from typing import Any, Mapping, Optional, Tuple

from ..models.remedy_models import Drug, EvidenceLevel, RemedyCandidate

logger = logging.getLogger(__name__)

_DELIMITERS = re.compile(r"[,;\n]")


def parse_phrase_list(value: Any) -> Tuple[str, ...]:
    """
    Normalize a string-or-list field into a tuple of non-empty strings.

    Args:
        value: None, a list/tuple of strings, a JSON array string or a
            delimited string

    Returns:
        Tuple of stripped, non-empty phrases in their original order
    """
    if value is None:
        return ()

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return ()
        if text.startswith("["):
            try:
                decoded = json.loads(text)
            except json.JSONDecodeError:
                logger.warning(f"Malformed JSON list field, splitting as text: {text[:60]!r}")
            else:
                return parse_phrase_list(decoded) if isinstance(decoded, list) else ()
        return tuple(piece.strip() for piece in _DELIMITERS.split(text) if piece.strip())

    if isinstance(value, (list, tuple)):
        return tuple(
            item.strip() for item in value
            if isinstance(item, str) and item.strip()
        )

    return ()


def parse_evidence_level(value: Any) -> EvidenceLevel:
    """Map a free-form evidence tag to an EvidenceLevel."""
    if isinstance(value, EvidenceLevel):
        return value
    if isinstance(value, str):
        try:
            return EvidenceLevel(value.strip().lower())
        except ValueError:
            pass
    return EvidenceLevel.UNSPECIFIED


def parse_optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and value != value:
        # NaN from pandas for empty CSV cells
        return None
    text = str(value).strip()
    return text or None


def _field(record: Any, *names: str) -> Any:
    """Read the first present attribute or key among ``names``."""
    for name in names:
        if isinstance(record, Mapping):
            if name in record:
                return record[name]
        elif hasattr(record, name):
            return getattr(record, name)
    return None


def drug_from_record(record: Any) -> Drug:
    """Build a Drug from a dict or an ORM row."""
    return Drug(
        id=str(_field(record, "id")),
        name=parse_optional_text(_field(record, "name")) or "",
        category=parse_optional_text(_field(record, "category")) or "",
        ingredients=parse_phrase_list(_field(record, "ingredients")),
        benefits=parse_phrase_list(_field(record, "benefits")),
    )


def candidate_from_record(record: Any) -> RemedyCandidate:
    """Build a RemedyCandidate from a dict or an ORM row."""
    return RemedyCandidate(
        id=str(_field(record, "id")),
        name=parse_optional_text(_field(record, "name")) or "",
        category=parse_optional_text(_field(record, "category")) or "",
        description=parse_optional_text(_field(record, "description")),
        image_url=parse_optional_text(_field(record, "image_url", "imageUrl")),
        ingredients=parse_phrase_list(_field(record, "ingredients")),
        benefits=parse_phrase_list(_field(record, "benefits")),
        evidence_level=parse_evidence_level(_field(record, "evidence_level", "evidenceLevel")),
    )
