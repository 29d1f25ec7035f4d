"""
Provider payload normalization.

TheMealDB and Spoonacular describe recipes with unrelated schemas. Everything
the API returns in a common shape goes through the mapping functions here:
card_from_mealdb / card_from_spoonacular for list views and recipe_detail for
the detail view.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterator, Optional

from pydantic import ValidationError

from mealmatch.models.recipes import Nutrient, RecipeCard, RecipeDetail

logger = logging.getLogger(__name__)

SOURCES = ("mealdb", "spoonacular", "both")

# TheMealDB flattens ingredients into strIngredient1..20 / strMeasure1..20
MEALDB_INGREDIENT_SLOTS = 20

KEY_NUTRIENTS = ("Calories", "Protein", "Fat", "Carbohydrates")
NO_INSTRUCTIONS = "Instructions not available."

_HTML_TAG = re.compile(r"<[^>]*>")
_NEWLINE = re.compile(r"\r?\n")
_STEP_NUMBER = re.compile(r"^\d+\.\s*")


# ============================================================================
# Input cleanup
# ============================================================================

def sanitize_csv(value: Optional[str] = "") -> str:
    """Trim comma-separated input and drop empty entries.

    >>> sanitize_csv("chicken, , rice,")
    'chicken,rice'
    """
    if not value:
        return ""
    return ",".join(piece.strip() for piece in value.split(",") if piece.strip())


def normalize_source(value: Optional[str] = "both", default: str = "both") -> str:
    """Map a ``source`` parameter onto mealdb/spoonacular/both."""
    selected = str(value or default).lower()
    return selected if selected in SOURCES else default


def strip_html(text: Optional[str] = "") -> str:
    return _HTML_TAG.sub("", text or "").strip()


# ============================================================================
# Cards (list view)
# ============================================================================

def card_from_spoonacular(entry: dict) -> RecipeCard:
    """Map a findByIngredients / complexSearch / random entry to a card."""
    used = entry.get("usedIngredients")
    if used is None:
        used = entry.get("extendedIngredients")
    return RecipeCard(
        id=entry.get("id"),
        title=entry.get("title"),
        image=entry.get("image"),
        source="spoonacular",
        source_url=entry.get("sourceUrl"),
        ready_in_minutes=entry.get("readyInMinutes"),
        servings=entry.get("servings"),
        used_ingredients=used or [],
        missed_ingredients=entry.get("missedIngredients") or [],
        unused_ingredients=entry.get("unusedIngredients") or [],
    )


def card_from_mealdb(entry: dict) -> RecipeCard:
    """Map a TheMealDB meal (filter or lookup shape) to a card."""
    return RecipeCard(
        id=entry.get("idMeal"),
        title=entry.get("strMeal"),
        image=entry.get("strMealThumb"),
        source="mealdb",
        source_url=entry.get("strSource") or entry.get("strYoutube") or None,
    )


def map_complex_search_result(entry: dict) -> dict:
    """Flatten a complexSearch result into the findByIngredients shape."""
    used = entry.get("usedIngredients")
    if used is None:
        used = entry.get("extendedIngredients")
    return {
        "id": entry.get("id"),
        "title": entry.get("title"),
        "image": entry.get("image"),
        "sourceUrl": entry.get("sourceUrl"),
        "readyInMinutes": entry.get("readyInMinutes"),
        "servings": entry.get("servings"),
        "usedIngredients": used or [],
        "missedIngredients": entry.get("missedIngredients") or [],
        "unusedIngredients": entry.get("unusedIngredients") or [],
    }


def _cards(entries: list, mapper: Callable[[dict], RecipeCard], source: str) -> list[RecipeCard]:
    cards = []
    for entry in entries or []:
        try:
            cards.append(mapper(entry))
        except (AttributeError, ValidationError) as e:
            logger.warning(f"Skipping malformed {source} entry: {e}")
    return cards


def build_cards(payload: dict) -> list[RecipeCard]:
    """Merge both providers' results, Spoonacular first. Malformed entries are skipped."""
    cards = _cards(payload.get("spoonacular"), card_from_spoonacular, "spoonacular")
    cards.extend(_cards(payload.get("mealdb"), card_from_mealdb, "mealdb"))
    return cards


# ============================================================================
# Detail view
# ============================================================================

def _mealdb_ingredient_pairs(meal: dict) -> Iterator[tuple[str, str]]:
    """Yield (ingredient, measure) for each filled TheMealDB slot."""
    for index in range(1, MEALDB_INGREDIENT_SLOTS + 1):
        name = meal.get(f"strIngredient{index}")
        if not name or not name.strip():
            continue
        measure = meal.get(f"strMeasure{index}") or ""
        yield name.strip(), measure.strip()


def recipe_name(meal: dict, source: str) -> str:
    if source == "spoonacular":
        return meal.get("title") or "MealMatch Recipe"
    return meal.get("strMeal") or "MealMatch Recipe"


def prompt_ingredients(meal: Optional[dict], source: str) -> list[str]:
    """Ingredient lines as "measure name" (used for the video prompt)."""
    if not meal:
        return []

    if source == "spoonacular":
        lines = []
        for ingredient in meal.get("extendedIngredients") or []:
            if ingredient.get("original"):
                lines.append(ingredient["original"])
                continue
            amount = ingredient.get("amount")
            if _is_number(amount):
                amount = _format_amount(amount)
            parts = [amount, ingredient.get("unit"), ingredient.get("name")]
            line = " ".join(str(p) for p in parts if p).strip()
            if line:
                lines.append(line)
        return lines

    return [
        f"{measure} {name}" if measure else name
        for name, measure in _mealdb_ingredient_pairs(meal)
    ]


def recipe_steps(meal: Optional[dict], source: str) -> list[str]:
    """Ordered instruction steps."""
    if not meal:
        return []

    if source == "spoonacular":
        steps = [
            step.get("step")
            for block in meal.get("analyzedInstructions") or []
            for step in block.get("steps") or []
            if step.get("step")
        ]
        if steps:
            return steps
        instructions = strip_html(meal.get("instructions"))
        return [line.strip() for line in _NEWLINE.split(instructions) if line.strip()]

    instructions = meal.get("strInstructions") or ""
    steps = []
    for line in _NEWLINE.split(instructions):
        line = _STEP_NUMBER.sub("", line.strip()).strip()
        if line:
            steps.append(line)
    return steps


def _format_amount(value: float) -> str:
    scaled = round(value, 2)
    if float(scaled).is_integer():
        return str(int(scaled))
    return f"{scaled:.2f}"


def display_ingredients(meal: Optional[dict], source: str, servings: Optional[int] = None) -> list[str]:
    """Ingredient lines for the detail view.

    Spoonacular amounts are rescaled from the recipe's own serving count to
    ``servings`` when given.
    """
    if not meal:
        return []

    if source == "spoonacular":
        base_servings = meal.get("servings") or 1
        target_servings = servings or base_servings
        scale = target_servings / base_servings

        lines = []
        for ingredient in meal.get("extendedIngredients") or []:
            measures = ingredient.get("measures") or {}
            us = measures.get("us") or {}
            metric = measures.get("metric") or {}

            amount = ingredient.get("amount")
            if not _is_number(amount):
                amount = us.get("amount") if _is_number(us.get("amount")) else metric.get("amount")
            unit = ingredient.get("unit") or us.get("unitShort") or metric.get("unitShort") or ""

            if _is_number(amount):
                label = ingredient.get("nameClean") or ingredient.get("originalName") or ingredient.get("name")
                line = f"{_format_amount(amount * scale)} {unit}".strip()
                lines.append(f"{line} {label}" if label else line)
                continue

            fallback = ingredient.get("original") or ingredient.get("originalName") or ingredient.get("name")
            if fallback:
                lines.append(fallback)
        return lines

    return [
        f"{name} - {measure}" if measure else name
        for name, measure in _mealdb_ingredient_pairs(meal)
    ]


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def instructions_text(meal: Optional[dict], source: str) -> str:
    if not meal:
        return NO_INSTRUCTIONS

    if source == "spoonacular":
        steps = [
            step
            for block in meal.get("analyzedInstructions") or []
            for step in block.get("steps") or []
        ]
        if steps:
            return "\n".join(f"{step.get('number')}. {step.get('step')}" for step in steps)
        return strip_html(meal.get("instructions")) or NO_INSTRUCTIONS

    return meal.get("strInstructions") or NO_INSTRUCTIONS


def metadata_tags(meal: Optional[dict], source: str) -> list[str]:
    """Short descriptive chips (prep time, servings, cuisine, diet)."""
    if not meal:
        return []

    if source == "spoonacular":
        tags = []
        if meal.get("readyInMinutes"):
            tags.append(f"{meal['readyInMinutes']} min")
        if meal.get("servings"):
            tags.append(f"{meal['servings']} servings")
        tags.extend(meal.get("cuisines") or [])
        tags.extend(meal.get("diets") or [])
        return tags

    return [tag for tag in (meal.get("strCategory"), meal.get("strArea")) if tag]


def key_nutrition(meal: Optional[dict], source: str) -> list[Nutrient]:
    """Calories and macros from Spoonacular's includeNutrition block."""
    if not meal or source != "spoonacular":
        return []
    nutrients = (meal.get("nutrition") or {}).get("nutrients") or []
    return [
        Nutrient(name=n["name"], amount=n.get("amount"), unit=n.get("unit"))
        for n in nutrients
        if n.get("name") in KEY_NUTRIENTS
    ]


def recipe_detail(meal: dict, source: str, servings: Optional[int] = None) -> RecipeDetail:
    """Build the provider-independent detail view."""
    if source == "spoonacular":
        card = card_from_spoonacular(meal)
        summary = strip_html(meal.get("summary")) or None
    else:
        card = card_from_mealdb(meal)
        summary = None

    return RecipeDetail(
        id=card.id,
        title=card.title,
        image=card.image,
        source=card.source,
        source_url=card.source_url,
        ready_in_minutes=card.ready_in_minutes,
        servings=servings or card.servings,
        summary=summary,
        ingredients=display_ingredients(meal, source, servings),
        steps=recipe_steps(meal, source),
        instructions=instructions_text(meal, source),
        tags=metadata_tags(meal, source),
        nutrition=key_nutrition(meal, source),
    )


# ============================================================================
# Substitutions
# ============================================================================

SUBSTITUTION_MAP = {
    "butter": ["Olive oil", "Coconut oil", "Vegan margarine"],
    "milk": ["Almond milk", "Oat milk", "Coconut milk"],
    "cream": ["Half-and-half", "Greek yogurt + milk", "Coconut cream"],
    "sourcream": ["Greek yogurt", "Crème fraîche"],
    "sour": ["Greek yogurt", "Crème fraîche"],
    "yogurt": ["Sour cream", "Coconut yogurt"],
    "egg": ["Flax egg", "Chia egg", "Unsweetened applesauce"],
    "eggs": ["Flax egg", "Chia egg", "Unsweetened applesauce"],
    "sugar": ["Honey", "Maple syrup", "Coconut sugar"],
    "flour": ["Almond flour", "Oat flour", "Gluten-free blend"],
}


def ingredient_substitutions(ingredient_name: str = "") -> list[str]:
    """Common swaps for an ingredient; exact key first, then first partial match."""
    key = re.sub(r"\s+", "", (ingredient_name or "").lower())
    if not key:
        return []
    if key in SUBSTITUTION_MAP:
        return list(SUBSTITUTION_MAP[key])
    for base, options in SUBSTITUTION_MAP.items():
        if base in key:
            return list(options)
    return []
