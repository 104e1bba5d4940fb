"""
CSV seeding for pharmaceuticals and natural remedies.

Rows are normalized with the storage-boundary parsers and inserted only when no
row with the same name exists yet.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Type, Union

import pandas as pd
from sqlalchemy import select
from sqlalchemy.orm import Session

from .db_models import NaturalRemedy, Pharmaceutical
from .field_parsers import parse_evidence_level, parse_optional_text, parse_phrase_list

logger = logging.getLogger(__name__)

BATCH_SIZE = 50


@dataclass
class SeedResult:
    """Outcome of a seeding run."""
    created: int = 0
    skipped: int = 0


def _pharmaceutical_values(record: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "fda_id": parse_optional_text(record.get("fda_id")),
        "name": parse_optional_text(record.get("name")),
        "description": parse_optional_text(record.get("description")),
        "category": parse_optional_text(record.get("category")) or "",
        "ingredients": list(parse_phrase_list(record.get("ingredients"))),
        "benefits": list(parse_phrase_list(record.get("benefits"))),
        "usage": parse_optional_text(record.get("usage")),
        "warnings": parse_optional_text(record.get("warnings")),
    }


def _remedy_values(record: Dict[str, Any]) -> Dict[str, Any]:
    evidence_level = parse_evidence_level(record.get("evidence_level"))
    return {
        "name": parse_optional_text(record.get("name")),
        "description": parse_optional_text(record.get("description")),
        "category": parse_optional_text(record.get("category")) or "",
        "ingredients": list(parse_phrase_list(record.get("ingredients"))),
        "benefits": list(parse_phrase_list(record.get("benefits"))),
        "image_url": parse_optional_text(record.get("image_url")),
        "usage": parse_optional_text(record.get("usage")),
        "dosage": parse_optional_text(record.get("dosage")),
        "precautions": parse_optional_text(record.get("precautions")),
        "evidence_level": evidence_level.value,
    }


def _seed_frame(session: Session, frame: pd.DataFrame, model: Type, to_values) -> SeedResult:
    result = SeedResult()
    if frame.empty:
        return result

    existing_names = set(session.execute(select(model.name)).scalars().all())
    records = frame.to_dict(orient="records")

    for start in range(0, len(records), BATCH_SIZE):
        batch = records[start:start + BATCH_SIZE]
        for record in batch:
            values = to_values(record)
            name = values["name"]
            if not name or name in existing_names:
                result.skipped += 1
                continue
            session.add(model(**values))
            existing_names.add(name)
            result.created += 1
        session.commit()
        logger.info(
            f"Processed {model.__tablename__} rows {start + 1} to "
            f"{min(start + BATCH_SIZE, len(records))}"
        )

    return result


def seed_pharmaceuticals(session: Session, csv_path: Union[str, Path]) -> SeedResult:
    """Import pharmaceuticals from a CSV file."""
    frame = pd.read_csv(csv_path)
    result = _seed_frame(session, frame, Pharmaceutical, _pharmaceutical_values)
    logger.info(f"Seeded pharmaceuticals: {result.created} created, {result.skipped} skipped")
    return result


def seed_remedies(session: Session, csv_path: Union[str, Path]) -> SeedResult:
    """Import natural remedies from a CSV file."""
    frame = pd.read_csv(csv_path)
    result = _seed_frame(session, frame, NaturalRemedy, _remedy_values)
    logger.info(f"Seeded natural remedies: {result.created} created, {result.skipped} skipped")
    return result
