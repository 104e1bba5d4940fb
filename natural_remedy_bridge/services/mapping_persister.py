"""
Mapping persistence with insert-if-absent semantics.

Mappings are keyed by (pharmaceutical, remedy). A pair that is already stored
is skipped, never updated: the first match run for a pair is authoritative.
Duplicate detection relies on the storage uniqueness constraint and the
engine's atomic "insert, do nothing on conflict" statement, not on
application-level locking.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Tuple

from sqlalchemy import and_, insert, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..data.db_models import NaturalRemedyMapping
from ..models.remedy_models import RemedyMapping, ReplacementType

logger = logging.getLogger(__name__)

_CONFLICT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}

_UNIQUE_COLUMNS = ["pharmaceutical_id", "natural_remedy_id"]
_MAPPINGS_TABLE = NaturalRemedyMapping.__table__


@dataclass
class PersistResult:
    """Outcome of persisting a batch of mappings."""
    created: int = 0
    skipped: int = 0
    created_mappings: List[RemedyMapping] = field(default_factory=list)


def _row_values(mapping: RemedyMapping) -> Dict[str, object]:
    return {
        "pharmaceutical_id": mapping.drug_id,
        "natural_remedy_id": mapping.remedy_id,
        "similarity_score": mapping.similarity_score,
        "matching_nutrients": list(mapping.matching_nutrients),
        "replacement_type": mapping.replacement_type.value,
    }


def mapping_from_row(row: NaturalRemedyMapping) -> RemedyMapping:
    """Convert a stored mapping row into a RemedyMapping."""
    try:
        replacement_type = ReplacementType(row.replacement_type)
    except ValueError:
        logger.warning(
            f"Unknown replacement type {row.replacement_type!r} on mapping "
            f"{row.pharmaceutical_id}/{row.natural_remedy_id}, reading it as Supportive"
        )
        replacement_type = ReplacementType.SUPPORTIVE
    return RemedyMapping(
        drug_id=row.pharmaceutical_id,
        remedy_id=row.natural_remedy_id,
        similarity_score=row.similarity_score,
        matching_nutrients=list(row.matching_nutrients or []),
        replacement_type=replacement_type,
    )


class MappingPersister:
    """Writes drug-remedy mappings, skipping pairs that already exist."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def persist(self, mappings: Iterable[RemedyMapping]) -> PersistResult:
        """
        Insert mappings that are not stored yet.

        Args:
            mappings: Mappings to store; repeated pairs keep their first occurrence

        Returns:
            PersistResult with created and skipped counts

        Raises:
            SQLAlchemyError: Any storage failure other than an existing pair
        """
        result = PersistResult()
        unique: Dict[Tuple[str, str], RemedyMapping] = {}
        for mapping in mappings:
            if mapping.key in unique:
                result.skipped += 1
                continue
            unique[mapping.key] = mapping

        if not unique:
            return result

        session = self.session_factory()
        try:
            dialect = session.get_bind().dialect.name
            conflict_insert = _CONFLICT_INSERTS.get(dialect)

            for mapping in unique.values():
                if conflict_insert is not None:
                    inserted = self._insert_on_conflict_skip(session, conflict_insert, mapping)
                else:
                    inserted = self._insert_if_absent(session, mapping)

                if inserted:
                    result.created += 1
                    result.created_mappings.append(mapping)
                else:
                    result.skipped += 1

            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

        logger.info(f"Persisted mappings: {result.created} created, {result.skipped} duplicates skipped")
        return result

    @staticmethod
    def _insert_on_conflict_skip(session: Session, conflict_insert, mapping: RemedyMapping) -> bool:
        statement = (
            conflict_insert(_MAPPINGS_TABLE)
            .values(**_row_values(mapping))
            .on_conflict_do_nothing(index_elements=_UNIQUE_COLUMNS)
        )
        return session.execute(statement).rowcount == 1

    @staticmethod
    def _pair_exists(session: Session, mapping: RemedyMapping) -> bool:
        statement = select(NaturalRemedyMapping.id).where(and_(
            NaturalRemedyMapping.pharmaceutical_id == mapping.drug_id,
            NaturalRemedyMapping.natural_remedy_id == mapping.remedy_id,
        ))
        return session.execute(statement).first() is not None

    def _insert_if_absent(self, session: Session, mapping: RemedyMapping) -> bool:
        if self._pair_exists(session, mapping):
            return False
        try:
            with session.begin_nested():
                session.execute(
                    insert(_MAPPINGS_TABLE).values(**_row_values(mapping))
                )
        except IntegrityError:
            # A concurrent writer inserted the same pair; anything else is a real error
            if self._pair_exists(session, mapping):
                return False
            raise
        return True

    def get_mappings(self, drug_id: str) -> List[RemedyMapping]:
        """Stored mappings for a drug, highest score first."""
        session = self.session_factory()
        try:
            rows = session.execute(
                select(NaturalRemedyMapping)
                .where(NaturalRemedyMapping.pharmaceutical_id == drug_id)
                .order_by(NaturalRemedyMapping.similarity_score.desc(), NaturalRemedyMapping.created_at)
            ).scalars().all()
            return [mapping_from_row(row) for row in rows]
        finally:
            session.close()
