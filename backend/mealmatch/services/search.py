"""
Recipe search across TheMealDB and Spoonacular.

Search and random requests fan out to both providers in parallel and wait
for all of them. A failing provider is reported under ``errors[<source>]``
and never cancels or fails its sibling; the request only fails when no
provider returned anything.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from pydantic import ValidationError

from mealmatch.exceptions import (
    BadRequestError,
    MealMatchError,
    NotFoundError,
    RecipeNotFoundError,
    UpstreamError,
)
from mealmatch.services.mealdb import MealDBClient
from mealmatch.services.normalize import (
    build_cards,
    map_complex_search_result,
    normalize_source,
    recipe_detail,
    sanitize_csv,
)
from mealmatch.services.ranking import sort_cards
from mealmatch.services.spoonacular import SpoonacularClient

logger = logging.getLogger(__name__)


class RecipeService:
    """Fan-out/fan-in over the recipe providers."""

    def __init__(self, mealdb: MealDBClient, spoonacular: SpoonacularClient):
        self.mealdb = mealdb
        self.spoonacular = spoonacular

    # =========================================================================
    # Fan-out helpers
    # =========================================================================

    @staticmethod
    def _empty_payload(source: str) -> dict[str, Any]:
        return {"source": source, "mealdb": [], "spoonacular": [], "errors": {}}

    @staticmethod
    async def _collect(
        payload: dict[str, Any],
        provider: str,
        fetch: Callable[[], Awaitable[list[dict]]],
    ) -> None:
        """Run one provider call, storing its results or its error message."""
        try:
            payload[provider] = await fetch() or []
        except MealMatchError as e:
            logger.error(f"{provider} request failed: {e.message}")
            payload["errors"][provider] = e.message
        except Exception as e:
            logger.exception(f"{provider} request failed unexpectedly")
            payload["errors"][provider] = str(e)

    @staticmethod
    def _raise_if_empty(payload: dict[str, Any], message: str) -> None:
        if payload["mealdb"] or payload["spoonacular"]:
            return
        if payload["errors"]:
            raise UpstreamError(message, details=payload)
        raise NotFoundError(message, details=payload)

    # =========================================================================
    # Search / random
    # =========================================================================

    async def search(
        self,
        ingredients: Optional[str],
        number: int = 12,
        source: Optional[str] = "both",
        diet: Optional[str] = None,
        intolerances: Optional[str] = None,
        cuisine: Optional[str] = None,
        sort: str = "relevance",
        ignore_spices: bool = True,
    ) -> dict[str, Any]:
        """Search both providers by ingredients and merge the results."""
        sanitized = sanitize_csv(ingredients)
        if not sanitized:
            raise BadRequestError("Ingredients query parameter is required")

        selected = normalize_source(source)
        payload = self._empty_payload(selected)

        tasks = []
        if selected in ("mealdb", "both"):
            tasks.append(self._collect(
                payload, "mealdb", lambda: self.mealdb.filter_by_ingredients(sanitized)
            ))
        if selected in ("spoonacular", "both"):
            tasks.append(self._collect(
                payload,
                "spoonacular",
                lambda: self._spoonacular_by_ingredients(sanitized, number, diet, intolerances),
            ))

        area_ids: Optional[set[str]] = None
        if cuisine and selected in ("mealdb", "both"):
            results = await asyncio.gather(self._area_meal_ids(cuisine), *tasks)
            area_ids = results[0]
        else:
            await asyncio.gather(*tasks)

        if area_ids is not None:
            payload["mealdb"] = [m for m in payload["mealdb"] if str(m.get("idMeal")) in area_ids]

        self._raise_if_empty(payload, "No recipes found")

        cards = sort_cards(build_cards(payload), sort, ignore_spices)
        payload["cards"] = [card.model_dump(by_alias=True) for card in cards]
        return payload

    async def _spoonacular_by_ingredients(
        self,
        ingredients: str,
        number: int,
        diet: Optional[str],
        intolerances: Optional[str],
    ) -> list[dict]:
        # Diet/intolerance filters are only available on complexSearch
        if diet or intolerances:
            data = await self.spoonacular.complex_search(
                include_ingredients=ingredients,
                diet=diet or None,
                intolerances=intolerances or None,
                number=number,
                fill_ingredients=True,
                instructions_required=True,
                add_recipe_information=True,
            )
            results = data.get("results") if isinstance(data, dict) else None
            return [map_complex_search_result(r) for r in results or []]

        return await self.spoonacular.find_by_ingredients(ingredients, number=number, ranking=1)

    async def _area_meal_ids(self, area: str) -> Optional[set[str]]:
        """TheMealDB ids for a cuisine, or None when the lookup fails (no filtering)."""
        try:
            data = await self.mealdb.filter_by_area(area)
        except MealMatchError as e:
            logger.warning(f"Unable to filter by cuisine '{area}': {e.message}")
            return None
        return {str(m.get("idMeal")) for m in data.get("meals") or []}

    async def random(
        self,
        source: Optional[str] = "mealdb",
        diet: Optional[str] = None,
        tags: Optional[str] = None,
    ) -> dict[str, Any]:
        """One random recipe per selected provider."""
        selected = normalize_source(source)
        payload = self._empty_payload(selected)

        tasks = []
        if selected in ("mealdb", "both"):
            tasks.append(self._collect(payload, "mealdb", self.mealdb.random))
        if selected in ("spoonacular", "both"):
            random_tags = sanitize_csv(tags) or sanitize_csv(diet)
            tasks.append(self._collect(
                payload,
                "spoonacular",
                lambda: self.spoonacular.random(number=1, tags=random_tags or None),
            ))

        await asyncio.gather(*tasks)
        self._raise_if_empty(payload, "No random recipes available")

        payload["cards"] = [card.model_dump(by_alias=True) for card in build_cards(payload)]
        return payload

    # =========================================================================
    # Detail
    # =========================================================================

    async def fetch_meal(self, recipe_id: str, source: Optional[str] = "mealdb") -> tuple[str, dict]:
        """Resolve a recipe from one provider. Returns (source, raw meal)."""
        selected = normalize_source(source, default="mealdb")
        if selected == "both":
            selected = "mealdb"

        if selected == "spoonacular":
            meal = await self.spoonacular.information(recipe_id, include_nutrition=True)
            if not meal:
                raise RecipeNotFoundError()
            return selected, meal

        meal = await self.mealdb.lookup(recipe_id)
        if not meal:
            raise RecipeNotFoundError()
        return selected, meal

    async def detail(
        self,
        recipe_id: str,
        source: Optional[str] = "mealdb",
        servings: Optional[int] = None,
    ) -> dict[str, Any]:
        selected, meal = await self.fetch_meal(recipe_id, source)
        try:
            detail = recipe_detail(meal, selected, servings)
        except (AttributeError, ValidationError) as e:
            logger.error(f"Malformed {selected} recipe {recipe_id}: {e}")
            raise UpstreamError(f"Invalid recipe data from {selected}") from e
        return {
            "source": selected,
            "meal": meal,
            "recipe": detail.model_dump(by_alias=True),
        }

    # =========================================================================
    # Passthroughs
    # =========================================================================

    async def cuisines(self) -> dict:
        return await self.mealdb.list_areas()

    async def by_area(self, area: str) -> dict:
        return await self.mealdb.filter_by_area(area)

    async def autocomplete(self, query: Optional[str], number: int = 5):
        if not query:
            raise BadRequestError("Query parameter is required")
        return await self.spoonacular.autocomplete(query, number=number)

    async def spoonacular_search(
        self,
        query: Optional[str] = None,
        diet: Optional[str] = None,
        intolerances: Optional[str] = None,
        number: int = 10,
    ) -> dict:
        if not (query or diet or intolerances):
            raise BadRequestError("Provide at least one of query, diet, or intolerances to search.")
        return await self.spoonacular.complex_search(
            query=query or None,
            diet=diet or None,
            intolerances=intolerances or None,
            number=number,
            add_recipe_information=True,
        )
