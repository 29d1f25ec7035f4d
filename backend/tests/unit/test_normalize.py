"""
Unit tests for provider payload normalization.

Tests:
- Input cleanup (CSV, source selection, HTML)
- Card mapping for both providers
- Detail view helpers (ingredients, steps, tags, nutrition)
- Ingredient substitutions
"""

import pytest

from mealmatch.services.normalize import (
    build_cards,
    card_from_mealdb,
    card_from_spoonacular,
    display_ingredients,
    ingredient_substitutions,
    instructions_text,
    key_nutrition,
    map_complex_search_result,
    metadata_tags,
    normalize_source,
    prompt_ingredients,
    recipe_detail,
    recipe_name,
    recipe_steps,
    sanitize_csv,
    strip_html,
)


class TestInputCleanup:
    """Tests for query parameter cleanup."""

    @pytest.mark.unit
    def test_sanitize_csv_drops_empty_entries(self):
        assert sanitize_csv("chicken, , rice,") == "chicken,rice"

    @pytest.mark.unit
    def test_sanitize_csv_empty_inputs(self):
        assert sanitize_csv("") == ""
        assert sanitize_csv(None) == ""
        assert sanitize_csv(" , ,") == ""

    @pytest.mark.unit
    def test_normalize_source(self):
        assert normalize_source("MealDB") == "mealdb"
        assert normalize_source("spoonacular") == "spoonacular"
        assert normalize_source("something") == "both"
        assert normalize_source(None) == "both"
        assert normalize_source("nope", default="mealdb") == "mealdb"

    @pytest.mark.unit
    def test_strip_html(self):
        assert strip_html("<b>Pasta</b> night. ") == "Pasta night."
        assert strip_html(None) == ""


class TestCards:
    """Tests for the two provider-to-card mappings."""

    @pytest.mark.unit
    def test_card_from_mealdb(self, sample_mealdb_meal):
        card = card_from_mealdb(sample_mealdb_meal)

        assert card.id == "52772"
        assert card.title == "Teriyaki Chicken Casserole"
        assert card.source == "mealdb"
        # strSource is empty, falls back to the YouTube link
        assert card.source_url == "https://www.youtube.com/watch?v=4aZr5hZXP_s"
        assert card.used_ingredients == []
        assert card.ready_in_minutes is None

    @pytest.mark.unit
    def test_card_from_spoonacular(self, sample_spoonacular_matches):
        card = card_from_spoonacular(sample_spoonacular_matches[0])

        assert card.id == 716429
        assert card.source == "spoonacular"
        assert [i["name"] for i in card.used_ingredients] == ["garlic", "pasta"]
        assert len(card.missed_ingredients) == 2

    @pytest.mark.unit
    def test_card_from_spoonacular_uses_extended_ingredients(self, sample_spoonacular_recipe):
        card = card_from_spoonacular(sample_spoonacular_recipe)

        assert len(card.used_ingredients) == 2
        assert card.ready_in_minutes == 45
        assert card.servings == 2

    @pytest.mark.unit
    def test_card_serializes_camel_case(self, sample_spoonacular_recipe):
        data = card_from_spoonacular(sample_spoonacular_recipe).model_dump(by_alias=True)

        assert data["sourceUrl"] == "https://example.com/pasta"
        assert data["readyInMinutes"] == 45
        assert "missedIngredients" in data

    @pytest.mark.unit
    def test_build_cards_spoonacular_first(self, sample_mealdb_filter, sample_spoonacular_matches):
        cards = build_cards({"mealdb": sample_mealdb_filter, "spoonacular": sample_spoonacular_matches})

        assert [c.source for c in cards] == ["spoonacular", "mealdb", "mealdb"]

    @pytest.mark.unit
    def test_build_cards_handles_missing_lists(self):
        assert build_cards({}) == []

    @pytest.mark.unit
    def test_build_cards_skips_malformed_entries(self, sample_mealdb_filter):
        cards = build_cards({
            "spoonacular": [{"id": None, "title": "broken"}, "not-a-dict"],
            "mealdb": sample_mealdb_filter + [{"strMeal": "No id"}],
        })

        assert [c.id for c in cards] == ["52772", "52940"]

    @pytest.mark.unit
    def test_map_complex_search_result(self, sample_spoonacular_recipe):
        mapped = map_complex_search_result(sample_spoonacular_recipe)

        assert mapped["id"] == 716429
        assert mapped["usedIngredients"] == sample_spoonacular_recipe["extendedIngredients"]
        assert mapped["missedIngredients"] == []
        assert "analyzedInstructions" not in mapped


class TestDetailHelpers:
    """Tests for the detail view helpers."""

    @pytest.mark.unit
    def test_recipe_name(self, sample_mealdb_meal, sample_spoonacular_recipe):
        assert recipe_name(sample_mealdb_meal, "mealdb") == "Teriyaki Chicken Casserole"
        assert recipe_name(sample_spoonacular_recipe, "spoonacular").startswith("Pasta with Garlic")
        assert recipe_name({}, "mealdb") == "MealMatch Recipe"

    @pytest.mark.unit
    def test_prompt_ingredients_mealdb(self, sample_mealdb_meal):
        assert prompt_ingredients(sample_mealdb_meal, "mealdb") == [
            "3/4 cup soy sauce",
            "honey",
            "2 chicken breasts",
        ]

    @pytest.mark.unit
    def test_prompt_ingredients_spoonacular(self, sample_spoonacular_recipe):
        assert prompt_ingredients(sample_spoonacular_recipe, "spoonacular") == [
            "1 tbsp butter",
            "1.5 cups cauliflower florets",
        ]

    @pytest.mark.unit
    def test_prompt_ingredients_spoonacular_without_original(self):
        meal = {"extendedIngredients": [{"amount": 2.0, "unit": "cups", "name": "flour"}]}
        assert prompt_ingredients(meal, "spoonacular") == ["2 cups flour"]

    @pytest.mark.unit
    def test_recipe_steps_mealdb_strips_numbering(self, sample_mealdb_meal):
        assert recipe_steps(sample_mealdb_meal, "mealdb") == [
            "Preheat oven to 350F.",
            "Combine soy sauce and honey.",
            "Bake for 35 minutes.",
        ]

    @pytest.mark.unit
    def test_recipe_steps_spoonacular(self, sample_spoonacular_recipe):
        assert recipe_steps(sample_spoonacular_recipe, "spoonacular") == [
            "Boil the pasta.",
            "Toss with garlic.",
        ]

    @pytest.mark.unit
    def test_recipe_steps_spoonacular_falls_back_to_instructions(self):
        meal = {"analyzedInstructions": [], "instructions": "<ol><li>Mix.</li>\n<li>Bake.</li></ol>"}
        assert recipe_steps(meal, "spoonacular") == ["Mix.", "Bake."]

    @pytest.mark.unit
    def test_recipe_steps_empty(self):
        assert recipe_steps(None, "mealdb") == []
        assert recipe_steps({"strInstructions": None}, "mealdb") == []

    @pytest.mark.unit
    def test_display_ingredients_mealdb(self, sample_mealdb_meal):
        assert display_ingredients(sample_mealdb_meal, "mealdb") == [
            "soy sauce - 3/4 cup",
            "honey",
            "chicken breasts - 2",
        ]

    @pytest.mark.unit
    def test_display_ingredients_spoonacular_base_servings(self, sample_spoonacular_recipe):
        assert display_ingredients(sample_spoonacular_recipe, "spoonacular") == [
            "1 tbsp butter",
            "1.50 cups cauliflower florets",
        ]

    @pytest.mark.unit
    def test_display_ingredients_spoonacular_scaled(self, sample_spoonacular_recipe):
        # Recipe serves 2, scaled to 4
        assert display_ingredients(sample_spoonacular_recipe, "spoonacular", servings=4) == [
            "2 tbsp butter",
            "3 cups cauliflower florets",
        ]

    @pytest.mark.unit
    def test_display_ingredients_uses_measures_when_amount_missing(self):
        meal = {
            "servings": 1,
            "extendedIngredients": [
                {"name": "rice", "measures": {"us": {"amount": 0.5, "unitShort": "cup"}}},
                {"name": "salt", "original": "salt to taste"},
            ],
        }
        assert display_ingredients(meal, "spoonacular") == ["0.50 cup rice", "salt to taste"]

    @pytest.mark.unit
    def test_instructions_text(self, sample_spoonacular_recipe, sample_mealdb_meal):
        assert instructions_text(sample_spoonacular_recipe, "spoonacular") == (
            "1. Boil the pasta.\n2. Toss with garlic."
        )
        assert instructions_text(sample_mealdb_meal, "mealdb").startswith("1. Preheat")
        assert instructions_text({}, "mealdb") == "Instructions not available."

    @pytest.mark.unit
    def test_metadata_tags(self, sample_spoonacular_recipe, sample_mealdb_meal):
        assert metadata_tags(sample_spoonacular_recipe, "spoonacular") == [
            "45 min",
            "2 servings",
            "Italian",
            "dairy free",
        ]
        assert metadata_tags(sample_mealdb_meal, "mealdb") == ["Chicken", "Japanese"]

    @pytest.mark.unit
    def test_key_nutrition(self, sample_spoonacular_recipe, sample_mealdb_meal):
        nutrients = key_nutrition(sample_spoonacular_recipe, "spoonacular")

        assert [n.name for n in nutrients] == ["Calories", "Fat"]
        assert nutrients[0].amount == 584.0
        assert key_nutrition(sample_mealdb_meal, "mealdb") == []

    @pytest.mark.unit
    def test_recipe_detail_spoonacular(self, sample_spoonacular_recipe):
        detail = recipe_detail(sample_spoonacular_recipe, "spoonacular", servings=4)

        assert detail.source == "spoonacular"
        assert detail.summary == "Pasta night."
        assert detail.servings == 4
        assert detail.ingredients[0] == "2 tbsp butter"
        assert len(detail.steps) == 2

    @pytest.mark.unit
    def test_recipe_detail_mealdb(self, sample_mealdb_meal):
        detail = recipe_detail(sample_mealdb_meal, "mealdb")

        assert detail.id == "52772"
        assert detail.summary is None
        assert detail.tags == ["Chicken", "Japanese"]
        assert detail.nutrition == []


class TestSubstitutions:
    """Tests for ingredient substitutions."""

    @pytest.mark.unit
    def test_exact_match_ignores_case_and_spaces(self):
        assert ingredient_substitutions("Sour Cream") == ["Greek yogurt", "Crème fraîche"]

    @pytest.mark.unit
    def test_partial_match(self):
        assert ingredient_substitutions("heavy cream") == [
            "Half-and-half",
            "Greek yogurt + milk",
            "Coconut cream",
        ]

    @pytest.mark.unit
    def test_no_match(self):
        assert ingredient_substitutions("kale") == []
        assert ingredient_substitutions("") == []
