"""
TheMealDB client.

Free tier uses the public test key "1" embedded in the base URL, so there is
no credential to configure.
"""

import logging

import httpx

from mealmatch.services.upstream import fetch_json

logger = logging.getLogger(__name__)

MEALDB_BASE_URL = "https://www.themealdb.com/api/json/v1/1"


class MealDBClient:
    """Thin async wrapper over TheMealDB JSON endpoints."""

    def __init__(self, http: httpx.AsyncClient, base_url: str = MEALDB_BASE_URL):
        self.http = http
        self.base_url = base_url.rstrip("/")

    async def _get(self, endpoint: str, params: dict | None = None) -> dict:
        data = await fetch_json(self.http, f"{self.base_url}/{endpoint}", params)
        return data or {}

    async def filter_by_ingredients(self, ingredients: str) -> list[dict]:
        """Meals containing the given comma-separated ingredients."""
        data = await self._get("filter.php", {"i": ingredients})
        return data.get("meals") or []

    async def lookup(self, meal_id: str) -> dict | None:
        """Full meal details by id, or None when TheMealDB has no such meal."""
        data = await self._get("lookup.php", {"i": meal_id})
        meals = data.get("meals") or []
        return meals[0] if meals else None

    async def list_areas(self) -> dict:
        return await self._get("list.php", {"a": "list"})

    async def filter_by_area(self, area: str) -> dict:
        return await self._get("filter.php", {"a": area})

    async def random(self) -> list[dict]:
        data = await self._get("random.php")
        return data.get("meals") or []
