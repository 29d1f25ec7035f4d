"""
USDA FoodData Central service.

Looks up an ingredient name and reports the macronutrients of the first
match, used for the pantry nutrition panel.
"""

import logging

import httpx

from mealmatch.exceptions import MissingCredentialError, NotFoundError
from mealmatch.models.nutrition import NutritionSummary
from mealmatch.models.recipes import Nutrient
from mealmatch.services.upstream import fetch_json

logger = logging.getLogger(__name__)

USDA_BASE_URL = "https://api.nal.usda.gov/fdc/v1"

# Nutrient IDs for macros
NUTRIENT_IDS = {
    "energy_kcal": 1008,
    "protein": 1003,
    "fat": 1004,
    "carbs": 1005,
}

KEY_NUTRIENT_NAMES = (
    "Energy",
    "Protein",
    "Total lipid (fat)",
    "Carbohydrate, by difference",
)


class USDAService:
    """USDA FoodData Central search client."""

    def __init__(self, http: httpx.AsyncClient, api_key: str | None, base_url: str = USDA_BASE_URL):
        self.http = http
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def search(self, query: str, page_size: int = 1) -> dict:
        """Search USDA FoodData Central API."""
        if not self.api_key:
            raise MissingCredentialError("USDA API key is not configured")

        return await fetch_json(
            self.http,
            f"{self.base_url}/foods/search",
            {
                "query": query,
                "pageSize": page_size,
                "requireAllWords": False,
                "api_key": self.api_key,
            },
        )

    async def lookup_nutrition(self, query: str) -> NutritionSummary:
        """Key nutrients of the first USDA match for ``query``."""
        results = await self.search(query, page_size=1)
        foods = (results or {}).get("foods") or []
        if not foods:
            logger.info(f"No USDA match for '{query}'")
            raise NotFoundError("No USDA nutrition data found for this ingredient")

        food = foods[0]
        return NutritionSummary(
            query=query,
            fdc_id=food.get("fdcId"),
            name=food.get("description", ""),
            source=food.get("brandOwner") or "USDA FoodData Central",
            nutrients=self._extract_key_nutrients(food.get("foodNutrients", [])),
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _extract_key_nutrients(self, nutrients: list) -> list[Nutrient]:
        """Keep energy, protein, fat and carbs from a USDA nutrient list."""
        key_ids = set(NUTRIENT_IDS.values())
        result = []

        for n in nutrients:
            nutrient_id = n.get("nutrientId") or n.get("nutrient", {}).get("id")
            name = n.get("nutrientName") or n.get("nutrient", {}).get("name", "")
            # Match by id when USDA sends one (Energy also appears in kJ)
            if nutrient_id is not None:
                if nutrient_id not in key_ids:
                    continue
            elif name not in KEY_NUTRIENT_NAMES:
                continue

            value = n.get("value")
            if value is None:
                value = n.get("amount")
            unit = n.get("unitName") or n.get("nutrient", {}).get("unitName", "")

            result.append(Nutrient(
                name=name,
                unit=unit,
                amount=float(value) if value is not None else None,
            ))

        return result
