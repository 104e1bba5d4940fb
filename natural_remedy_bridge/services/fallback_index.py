"""
Fallback remedy lookup by ingredient and category.

When token scoring yields nothing for a drug, curated ingredient and category
tables still point at a few remedies. The tables are immutable and passed in
explicitly; ``DEFAULT_FALLBACK_INDEX`` carries the curated defaults.
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..models.remedy_models import Drug, RemedyCandidate

logger = logging.getLogger(__name__)


def _freeze(table: Mapping[str, Iterable[str]]) -> Mapping[str, Tuple[str, ...]]:
    return MappingProxyType({key: tuple(values) for key, values in table.items()})


class FallbackRemedyIndex:
    """Immutable ingredient/category → remedy key tables."""

    def __init__(
        self,
        ingredient_map: Optional[Mapping[str, Iterable[str]]] = None,
        category_map: Optional[Mapping[str, Iterable[str]]] = None
    ):
        self.ingredient_map = _freeze({
            key.lower(): values for key, values in (ingredient_map or {}).items()
        })
        self.category_map = _freeze(category_map or {})

    def remedy_keys_for(self, drug: Drug) -> List[str]:
        """
        Remedy keys suggested for a drug.

        Ingredient matches win; the exact category entry is used only when no
        ingredient matched, and partial category matches only after that.
        """
        keys: Dict[str, None] = {}

        for ingredient in drug.ingredients:
            lower_ingredient = ingredient.lower()
            if not lower_ingredient:
                continue
            for key, remedy_keys in self.ingredient_map.items():
                if key in lower_ingredient or lower_ingredient in key:
                    keys.update(dict.fromkeys(remedy_keys))

        if not keys and drug.category:
            keys.update(dict.fromkeys(self.category_map.get(drug.category, ())))

            if not keys:
                for category, remedy_keys in self.category_map.items():
                    if category in drug.category or drug.category in category:
                        keys.update(dict.fromkeys(remedy_keys))

        return list(keys)

    def candidates_for(self, drug: Drug, candidates: Sequence[RemedyCandidate]) -> List[RemedyCandidate]:
        """
        Resolve suggested keys against candidates.

        A key matches a candidate whose id equals the key, or whose name equals
        the key with underscores read as spaces (case-insensitive).
        """
        by_key: Dict[str, RemedyCandidate] = {}
        for candidate in candidates:
            by_key.setdefault(candidate.id, candidate)
            by_key.setdefault(candidate.name.lower(), candidate)

        resolved = []
        seen_ids = set()
        for key in self.remedy_keys_for(drug):
            candidate = by_key.get(key) or by_key.get(key.replace("_", " "))
            if candidate is not None and candidate.id not in seen_ids:
                seen_ids.add(candidate.id)
                resolved.append(candidate)

        logger.debug(f"Fallback resolved {len(resolved)} remedies for drug '{drug.name}'")
        return resolved


DEFAULT_FALLBACK_INDEX = FallbackRemedyIndex(
    ingredient_map={
        # Pain relievers / anti-inflammatories
        "acetaminophen": ["white_willow_bark", "peppermint_oil"],
        "ibuprofen": ["turmeric", "ginger", "willow_bark", "boswellia"],
        "aspirin": ["white_willow_bark", "meadowsweet", "turmeric"],
        "naproxen": ["turmeric", "ginger", "boswellia"],
        # Sleep aids
        "melatonin": ["tart_cherry_juice", "chamomile_tea", "valerian_root"],
        "diphenhydramine": ["valerian_root", "passionflower", "lemon_balm"],
        # Digestive health
        "omeprazole": ["aloe_vera", "apple_cider_vinegar", "deglycyrrhizinated_licorice"],
        "esomeprazole": ["aloe_vera", "deglycyrrhizinated_licorice", "slippery_elm"],
        "famotidine": ["chamomile_tea", "marshmallow_root", "slippery_elm"],
        "loperamide": ["psyllium_husk", "activated_charcoal"],
        # Vitamins & supplements
        "vitamin d": ["sunlight_exposure", "fatty_fish", "mushrooms"],
        "vitamin c": ["citrus_fruits", "bell_peppers", "kiwi"],
        "iron": ["spinach", "lentils", "pumpkin_seeds"],
        "omega 3": ["fatty_fish", "flaxseed", "chia_seeds"],
        "calcium": ["dairy_products", "leafy_greens", "almonds"],
        # Allergy medications
        "cetirizine": ["quercetin", "stinging_nettle", "butterbur"],
        "loratadine": ["butterbur", "quercetin", "stinging_nettle"],
        "fexofenadine": ["butterbur", "quercetin", "stinging_nettle"],
    },
    category_map={
        "Pain Reliever": ["turmeric", "ginger", "white_willow_bark"],
        "Sleep Aid": ["valerian_root", "chamomile_tea", "tart_cherry_juice"],
        "Digestive Health": ["ginger", "peppermint_oil", "apple_cider_vinegar"],
        "Vitamin Supplement": ["whole_foods", "nutritional_yeast"],
        "Allergy Medication": ["quercetin", "stinging_nettle", "butterbur"],
        "Cholesterol Medication": ["red_yeast_rice", "garlic", "flaxseed"],
        "Blood Pressure Medication": ["hawthorn", "garlic", "hibiscus_tea"],
        "Diabetes Medication": ["cinnamon", "fenugreek", "bitter_melon"],
        "Mental Health Medication": ["st_johns_wort", "saffron", "sam_e"],
    },
)
