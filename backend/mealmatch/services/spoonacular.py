"""Spoonacular recipe API client."""

import logging

import httpx

from mealmatch.exceptions import MissingCredentialError, RecipeNotFoundError, UpstreamError
from mealmatch.services.upstream import fetch_json

logger = logging.getLogger(__name__)

SPOONACULAR_BASE_URL = "https://api.spoonacular.com"


class SpoonacularClient:
    """Spoonacular client. Every call requires an API key."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str | None,
        base_url: str = SPOONACULAR_BASE_URL,
    ):
        self.http = http
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def _get(self, path: str, params: dict | None = None):
        if not self.api_key:
            raise MissingCredentialError("Spoonacular API key is not configured")
        params = {**(params or {}), "apiKey": self.api_key}
        return await fetch_json(self.http, f"{self.base_url}{path}", params)

    async def find_by_ingredients(self, ingredients: str, number: int = 12, ranking: int = 1) -> list[dict]:
        data = await self._get(
            "/recipes/findByIngredients",
            {"ingredients": ingredients, "number": number, "ranking": ranking},
        )
        return data if isinstance(data, list) else []

    async def complex_search(
        self,
        query: str | None = None,
        include_ingredients: str | None = None,
        diet: str | None = None,
        intolerances: str | None = None,
        number: int = 10,
        fill_ingredients: bool | None = None,
        instructions_required: bool | None = None,
        add_recipe_information: bool = True,
    ) -> dict:
        """Raw /recipes/complexSearch payload ({results, offset, number, totalResults})."""
        return await self._get(
            "/recipes/complexSearch",
            {
                "query": query,
                "includeIngredients": include_ingredients,
                "diet": diet,
                "intolerances": intolerances,
                "number": number,
                "fillIngredients": fill_ingredients,
                "instructionsRequired": instructions_required,
                "addRecipeInformation": add_recipe_information,
            },
        )

    async def information(self, recipe_id: str, include_nutrition: bool = True) -> dict:
        """Full recipe information. Unknown ids raise RecipeNotFoundError."""
        try:
            return await self._get(
                f"/recipes/{recipe_id}/information",
                {"includeNutrition": include_nutrition},
            )
        except UpstreamError as e:
            if e.upstream_status == 404:
                raise RecipeNotFoundError() from e
            raise

    async def random(self, number: int = 1, tags: str | None = None) -> list[dict]:
        data = await self._get("/recipes/random", {"number": number, "tags": tags})
        return (data or {}).get("recipes") or []

    async def autocomplete(self, query: str, number: int = 5):
        return await self._get("/recipes/autocomplete", {"query": query, "number": number})
