"""Unit tests for replacement type classification and the risk override."""

import unittest

from natural_remedy_bridge.models.remedy_models import Drug, MatchResult, ReplacementType
from natural_remedy_bridge.services.remedy_ranker import RemedyRanker
from natural_remedy_bridge.services.replacement_classifier import (
    classify_results,
    replacement_type_for_score,
    should_force_supportive_replacement,
)
from tests.helpers import IBUPROFEN, WARFARIN, WARFARIN_LOOKALIKE


def _result(remedy_id: str, score: float) -> MatchResult:
    return MatchResult(
        remedy_id=remedy_id,
        name=remedy_id.title(),
        description="",
        image_url="",
        category="Herbal",
        matching_nutrients=["Something"],
        similarity_score=score,
    )


class ReplacementTypeTests(unittest.TestCase):
    def test_thresholds(self) -> None:
        self.assertEqual(replacement_type_for_score(1.0), ReplacementType.ALTERNATIVE)
        self.assertEqual(replacement_type_for_score(0.75), ReplacementType.ALTERNATIVE)
        self.assertEqual(replacement_type_for_score(0.749), ReplacementType.COMPLEMENTARY)
        self.assertEqual(replacement_type_for_score(0.55), ReplacementType.COMPLEMENTARY)
        self.assertEqual(replacement_type_for_score(0.549), ReplacementType.SUPPORTIVE)
        self.assertEqual(replacement_type_for_score(0.0), ReplacementType.SUPPORTIVE)

    def test_wire_values(self) -> None:
        self.assertEqual(
            [member.value for member in ReplacementType],
            ["Alternative", "Complementary", "Supportive"],
        )


class RiskOverrideTests(unittest.TestCase):
    def test_high_risk_drugs(self) -> None:
        self.assertTrue(should_force_supportive_replacement(WARFARIN))
        self.assertTrue(should_force_supportive_replacement(
            Drug(id="d1", name="Tacrolimus", category="Immunosuppressant")
        ))
        self.assertTrue(should_force_supportive_replacement(
            Drug(id="d2", name="Clopidogrel", category="Antiplatelet Agent")
        ))
        self.assertTrue(should_force_supportive_replacement(
            Drug(id="d3", name="Generic BLOOD THINNER", category="")
        ))

    def test_ordinary_drug(self) -> None:
        self.assertFalse(should_force_supportive_replacement(IBUPROFEN))

    def test_custom_keywords(self) -> None:
        self.assertTrue(should_force_supportive_replacement(IBUPROFEN, keywords=("nsaid",)))
        self.assertFalse(should_force_supportive_replacement(WARFARIN, keywords=("nsaid",)))

    def test_override_applies_to_high_scores(self) -> None:
        mappings = classify_results(WARFARIN, [_result("a", 0.9), _result("b", 0.6)])
        self.assertEqual(
            [m.replacement_type for m in mappings],
            [ReplacementType.SUPPORTIVE, ReplacementType.SUPPORTIVE],
        )
        # Scores are untouched
        self.assertEqual([m.similarity_score for m in mappings], [0.9, 0.6])

    def test_override_on_ranked_lookalike(self) -> None:
        results = RemedyRanker().rank(WARFARIN, [WARFARIN_LOOKALIKE])
        self.assertEqual(results[0].similarity_score, 0.85)
        mappings = classify_results(WARFARIN, results)
        self.assertEqual(mappings[0].replacement_type, ReplacementType.SUPPORTIVE)
        self.assertEqual(mappings[0].similarity_score, 0.85)


class ClassifyResultsTests(unittest.TestCase):
    def test_classifies_each_result_in_order(self) -> None:
        mappings = classify_results(IBUPROFEN, [_result("a", 0.8), _result("b", 0.6), _result("c", 0.2)])
        self.assertEqual([m.remedy_id for m in mappings], ["a", "b", "c"])
        self.assertEqual(
            [m.replacement_type for m in mappings],
            [ReplacementType.ALTERNATIVE, ReplacementType.COMPLEMENTARY, ReplacementType.SUPPORTIVE],
        )
        self.assertTrue(all(m.drug_id == IBUPROFEN.id for m in mappings))
        self.assertEqual(mappings[0].matching_nutrients, ["Something"])

    def test_explicit_force_flag_wins(self) -> None:
        mappings = classify_results(IBUPROFEN, [_result("a", 0.8)], force_supportive=True)
        self.assertEqual(mappings[0].replacement_type, ReplacementType.SUPPORTIVE)

        mappings = classify_results(WARFARIN, [_result("a", 0.8)], force_supportive=False)
        self.assertEqual(mappings[0].replacement_type, ReplacementType.ALTERNATIVE)

    def test_empty_results(self) -> None:
        self.assertEqual(classify_results(WARFARIN, []), [])


if __name__ == "__main__":
    unittest.main()
