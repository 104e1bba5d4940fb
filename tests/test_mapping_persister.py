"""Tests for insert-if-absent mapping persistence."""

import unittest
from types import SimpleNamespace
from unittest import mock

from sqlalchemy.exc import IntegrityError, OperationalError

from natural_remedy_bridge.models.remedy_models import RemedyMapping, ReplacementType
from natural_remedy_bridge.services import mapping_persister
from natural_remedy_bridge.services.mapping_persister import MappingPersister, mapping_from_row
from tests.helpers import (
    IBUPROFEN,
    TURMERIC,
    WARFARIN,
    WILLOW_BARK,
    make_session_factory,
    store_drug,
    store_remedy,
)


def _mapping(drug_id: str, remedy_id: str, score: float,
             replacement_type: ReplacementType = ReplacementType.SUPPORTIVE) -> RemedyMapping:
    return RemedyMapping(
        drug_id=drug_id,
        remedy_id=remedy_id,
        similarity_score=score,
        matching_nutrients=["Salicin"],
        replacement_type=replacement_type,
    )


class MappingPersisterTests(unittest.TestCase):
    def setUp(self) -> None:
        self.session_factory = make_session_factory()
        for drug in (IBUPROFEN, WARFARIN):
            store_drug(self.session_factory, drug)
        for remedy in (TURMERIC, WILLOW_BARK):
            store_remedy(self.session_factory, remedy)
        self.persister = MappingPersister(self.session_factory)

    def test_creates_new_mappings(self) -> None:
        result = self.persister.persist([
            _mapping(IBUPROFEN.id, WILLOW_BARK.id, 0.319),
            _mapping(IBUPROFEN.id, TURMERIC.id, 0.15),
        ])
        self.assertEqual((result.created, result.skipped), (2, 0))
        self.assertEqual(len(result.created_mappings), 2)

    def test_persisting_twice_is_idempotent(self) -> None:
        batch = [
            _mapping(IBUPROFEN.id, WILLOW_BARK.id, 0.319),
            _mapping(IBUPROFEN.id, TURMERIC.id, 0.15),
        ]
        self.persister.persist(batch)
        second = self.persister.persist(batch)

        self.assertEqual((second.created, second.skipped), (0, 2))
        self.assertEqual(second.created_mappings, [])
        self.assertEqual(len(self.persister.get_mappings(IBUPROFEN.id)), 2)

    def test_first_score_is_kept(self) -> None:
        self.persister.persist([_mapping(IBUPROFEN.id, WILLOW_BARK.id, 0.319)])
        self.persister.persist([
            _mapping(IBUPROFEN.id, WILLOW_BARK.id, 0.9, ReplacementType.ALTERNATIVE)
        ])

        stored = self.persister.get_mappings(IBUPROFEN.id)
        self.assertEqual(len(stored), 1)
        self.assertEqual(stored[0].similarity_score, 0.319)
        self.assertEqual(stored[0].replacement_type, ReplacementType.SUPPORTIVE)

    def test_repeated_pair_in_one_batch(self) -> None:
        result = self.persister.persist([
            _mapping(IBUPROFEN.id, WILLOW_BARK.id, 0.319),
            _mapping(IBUPROFEN.id, WILLOW_BARK.id, 0.5),
        ])
        self.assertEqual((result.created, result.skipped), (1, 1))
        self.assertEqual(self.persister.get_mappings(IBUPROFEN.id)[0].similarity_score, 0.319)

    def test_same_remedy_for_different_drugs(self) -> None:
        result = self.persister.persist([
            _mapping(IBUPROFEN.id, WILLOW_BARK.id, 0.319),
            _mapping(WARFARIN.id, WILLOW_BARK.id, 0.2),
        ])
        self.assertEqual(result.created, 2)

    def test_empty_batch(self) -> None:
        result = self.persister.persist([])
        self.assertEqual((result.created, result.skipped), (0, 0))

    def test_get_mappings_orders_by_score(self) -> None:
        self.persister.persist([
            _mapping(IBUPROFEN.id, TURMERIC.id, 0.15),
            _mapping(IBUPROFEN.id, WILLOW_BARK.id, 0.319),
        ])
        stored = self.persister.get_mappings(IBUPROFEN.id)
        self.assertEqual([m.remedy_id for m in stored], [WILLOW_BARK.id, TURMERIC.id])
        self.assertEqual(stored[0].matching_nutrients, ["Salicin"])
        self.assertEqual(self.persister.get_mappings(WARFARIN.id), [])

    def test_generic_dialect_path(self) -> None:
        with mock.patch.dict(mapping_persister._CONFLICT_INSERTS, {}, clear=True):
            first = self.persister.persist([_mapping(IBUPROFEN.id, WILLOW_BARK.id, 0.319)])
            second = self.persister.persist([
                _mapping(IBUPROFEN.id, WILLOW_BARK.id, 0.7),
                _mapping(IBUPROFEN.id, TURMERIC.id, 0.15),
            ])

        self.assertEqual((first.created, first.skipped), (1, 0))
        self.assertEqual((second.created, second.skipped), (1, 1))
        scores = {m.remedy_id: m.similarity_score for m in self.persister.get_mappings(IBUPROFEN.id)}
        self.assertEqual(scores, {WILLOW_BARK.id: 0.319, TURMERIC.id: 0.15})


class ConflictHandlingTests(unittest.TestCase):
    def setUp(self) -> None:
        self.persister = MappingPersister(mock.MagicMock())
        self.session = mock.MagicMock()
        self.session.execute.side_effect = IntegrityError(
            "INSERT", {}, Exception("UNIQUE constraint failed")
        )
        self.mapping = _mapping(IBUPROFEN.id, WILLOW_BARK.id, 0.319)

    def test_concurrent_insert_counts_as_skipped(self) -> None:
        with mock.patch.object(MappingPersister, "_pair_exists", side_effect=[False, True]):
            self.assertFalse(self.persister._insert_if_absent(self.session, self.mapping))

    def test_other_integrity_errors_propagate(self) -> None:
        with mock.patch.object(MappingPersister, "_pair_exists", side_effect=[False, False]):
            with self.assertRaises(IntegrityError):
                self.persister._insert_if_absent(self.session, self.mapping)


class StoredRowTests(unittest.TestCase):
    def _row(self, replacement_type):
        return SimpleNamespace(
            pharmaceutical_id=IBUPROFEN.id,
            natural_remedy_id=WILLOW_BARK.id,
            similarity_score=0.319,
            matching_nutrients=None,
            replacement_type=replacement_type,
        )

    def test_known_replacement_type(self) -> None:
        mapping = mapping_from_row(self._row("Complementary"))
        self.assertEqual(mapping.replacement_type, ReplacementType.COMPLEMENTARY)
        self.assertEqual(mapping.matching_nutrients, [])

    def test_unknown_replacement_type_is_logged(self) -> None:
        with self.assertLogs(mapping_persister.logger, level="WARNING") as captured:
            mapping = mapping_from_row(self._row("Miracle"))
        self.assertEqual(mapping.replacement_type, ReplacementType.SUPPORTIVE)
        self.assertIn("'Miracle'", captured.output[0])


class StorageFailureTests(unittest.TestCase):
    def test_storage_errors_roll_back_and_propagate(self) -> None:
        session = mock.MagicMock()
        session.get_bind.return_value.dialect.name = "sqlite"
        session.execute.side_effect = OperationalError("INSERT", {}, Exception("disk I/O error"))
        persister = MappingPersister(lambda: session)

        with self.assertRaises(OperationalError):
            persister.persist([_mapping(IBUPROFEN.id, WILLOW_BARK.id, 0.319)])

        session.rollback.assert_called_once()
        session.commit.assert_not_called()
        session.close.assert_called_once()


if __name__ == "__main__":
    unittest.main()
