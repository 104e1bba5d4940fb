"""Unit tests for the curated fallback remedy index."""

import unittest

from natural_remedy_bridge.models.remedy_models import Drug
from natural_remedy_bridge.services.fallback_index import DEFAULT_FALLBACK_INDEX, FallbackRemedyIndex
from tests.helpers import IBUPROFEN, TURMERIC, WILLOW_BARK


class FallbackRemedyIndexTests(unittest.TestCase):
    def test_ingredient_match(self) -> None:
        self.assertEqual(
            DEFAULT_FALLBACK_INDEX.remedy_keys_for(IBUPROFEN),
            ["turmeric", "ginger", "willow_bark", "boswellia"],
        )

    def test_ingredient_substring_match(self) -> None:
        drug = Drug(id="d", name="D3 Drops", ingredients=("Vitamin D3 (cholecalciferol)",))
        self.assertEqual(
            DEFAULT_FALLBACK_INDEX.remedy_keys_for(drug),
            ["sunlight_exposure", "fatty_fish", "mushrooms"],
        )

    def test_exact_category_when_no_ingredient_matches(self) -> None:
        drug = Drug(id="d", name="Sleepwell", category="Sleep Aid", ingredients=("Doxylamine",))
        self.assertEqual(
            DEFAULT_FALLBACK_INDEX.remedy_keys_for(drug),
            ["valerian_root", "chamomile_tea", "tart_cherry_juice"],
        )

    def test_partial_category(self) -> None:
        drug = Drug(id="d", name="Painaway", category="Pain Reliever (NSAID)", ingredients=("Unknownium",))
        self.assertEqual(
            DEFAULT_FALLBACK_INDEX.remedy_keys_for(drug),
            ["turmeric", "ginger", "white_willow_bark"],
        )

    def test_no_suggestions(self) -> None:
        self.assertEqual(DEFAULT_FALLBACK_INDEX.remedy_keys_for(Drug(id="d", name="Nothing")), [])

    def test_keys_are_not_repeated(self) -> None:
        index = FallbackRemedyIndex(ingredient_map={"ginger": ["a", "b"], "ging": ["b", "c"]})
        drug = Drug(id="d", name="x", ingredients=("Ginger",))
        self.assertEqual(index.remedy_keys_for(drug), ["a", "b", "c"])

    def test_resolves_keys_against_candidates(self) -> None:
        resolved = DEFAULT_FALLBACK_INDEX.candidates_for(IBUPROFEN, [WILLOW_BARK, TURMERIC])
        self.assertEqual(resolved, [TURMERIC, WILLOW_BARK])

    def test_resolves_by_id(self) -> None:
        index = FallbackRemedyIndex(category_map={"Herbal": ["remedy-turmeric"]})
        drug = Drug(id="d", name="x", category="Herbal")
        self.assertEqual(index.candidates_for(drug, [TURMERIC]), [TURMERIC])

    def test_tables_are_immutable(self) -> None:
        with self.assertRaises(TypeError):
            DEFAULT_FALLBACK_INDEX.ingredient_map["new"] = ("x",)


if __name__ == "__main__":
    unittest.main()
