"""
Remedy catalog and drug loading.

A RemedyCatalog is an immutable, explicitly constructed collection of remedy
candidates. It is built from storage rows, a pandas DataFrame or a CSV file and
handed to the matching service; nothing here is process-wide state.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

import pandas as pd
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models.remedy_models import Drug, RemedyCandidate
from .db_models import NaturalRemedy, Pharmaceutical
from .field_parsers import candidate_from_record, drug_from_record

logger = logging.getLogger(__name__)


class RemedyCatalog:
    """Immutable ordered collection of remedy candidates."""

    def __init__(self, candidates: Iterable[RemedyCandidate] = ()):
        self._candidates: Tuple[RemedyCandidate, ...] = tuple(candidates)
        self._by_id: Dict[str, RemedyCandidate] = {}
        for candidate in self._candidates:
            self._by_id.setdefault(candidate.id, candidate)

    @classmethod
    def from_records(cls, records: Iterable[Any]) -> "RemedyCatalog":
        """Build a catalog from dicts or ORM rows."""
        return cls(candidate_from_record(record) for record in records)

    @classmethod
    def from_dataframe(cls, frame: pd.DataFrame) -> "RemedyCatalog":
        """
        Build a catalog from a DataFrame.

        Rows without an ``id`` column get their row position as id.
        """
        if frame.empty:
            return cls()

        records = frame.to_dict(orient="records")
        if "id" not in frame.columns:
            for position, record in enumerate(records):
                record["id"] = str(position)
        return cls.from_records(records)

    @classmethod
    def from_csv(cls, path: Union[str, Path]) -> "RemedyCatalog":
        """Build a catalog from a CSV file of remedies."""
        csv_path = Path(path)
        frame = pd.read_csv(csv_path)
        catalog = cls.from_dataframe(frame)
        logger.info(f"Loaded {len(catalog)} remedy candidates from {csv_path}")
        return catalog

    @classmethod
    def from_session(cls, session: Session) -> "RemedyCatalog":
        """Build a catalog from every stored natural remedy."""
        rows = session.execute(
            select(NaturalRemedy).order_by(NaturalRemedy.name, NaturalRemedy.id)
        ).scalars().all()
        return cls.from_records(rows)

    @property
    def candidates(self) -> Tuple[RemedyCandidate, ...]:
        return self._candidates

    def get(self, remedy_id: str) -> Optional[RemedyCandidate]:
        return self._by_id.get(remedy_id)

    def __len__(self) -> int:
        return len(self._candidates)

    def __iter__(self) -> Iterator[RemedyCandidate]:
        return iter(self._candidates)


def load_drug(session: Session, drug_id: str) -> Optional[Drug]:
    """Load one pharmaceutical as a Drug, or None if it does not exist."""
    row = session.get(Pharmaceutical, drug_id)
    return drug_from_record(row) if row is not None else None


def load_drugs(session: Session) -> List[Drug]:
    """Load every stored pharmaceutical as a Drug, ordered by name."""
    rows = session.execute(
        select(Pharmaceutical).order_by(Pharmaceutical.name, Pharmaceutical.id)
    ).scalars().all()
    return [drug_from_record(row) for row in rows]
