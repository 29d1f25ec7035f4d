"""Card ordering for search results (plain comparators, stable)."""

import re
from typing import Iterable

from mealmatch.models.recipes import RecipeCard

SORT_OPTIONS = ("relevance", "missing", "used", "match", "prep")

COMMON_SPICES = (
    "salt",
    "pepper",
    "garlic powder",
    "onion powder",
    "paprika",
    "cumin",
    "curry powder",
    "basil",
    "oregano",
    "thyme",
    "chili powder",
    "ginger",
)


def normalize_ingredient_name(name: str) -> str:
    return re.sub(r"\s+", " ", (name or "").lower()).strip()


def _ignored_names(ignore_spices: bool) -> frozenset[str]:
    if not ignore_spices:
        return frozenset()
    return frozenset(normalize_ingredient_name(spice) for spice in COMMON_SPICES)


def _count(ingredients: Iterable[dict], ignored: frozenset[str]) -> int:
    return sum(
        1
        for ingredient in ingredients
        if normalize_ingredient_name(ingredient.get("name") or ingredient.get("original") or "") not in ignored
    )


def match_score(card: RecipeCard, ignore_spices: bool = True) -> int:
    """Percentage of counted ingredients the user already has."""
    ignored = _ignored_names(ignore_spices)
    used = _count(card.used_ingredients, ignored)
    missed = _count(card.missed_ingredients, ignored)
    if not used + missed:
        return 0
    return round(100 * used / (used + missed))


def sort_cards(cards: list[RecipeCard], option: str = "relevance", ignore_spices: bool = True) -> list[RecipeCard]:
    """Return a new, re-ordered list of cards. Unknown options keep the order."""
    if option == "relevance" or option not in SORT_OPTIONS:
        return list(cards)

    ignored = _ignored_names(ignore_spices)

    if option == "missing":
        return sorted(cards, key=lambda c: _count(c.missed_ingredients, ignored))
    if option == "used":
        return sorted(cards, key=lambda c: -_count(c.used_ingredients, ignored))
    if option == "match":
        return sorted(cards, key=lambda c: -match_score(c, ignore_spices))

    # prep: unknown prep time sorts last
    return sorted(
        cards,
        key=lambda c: (c.ready_in_minutes is None, c.ready_in_minutes or 0),
    )
