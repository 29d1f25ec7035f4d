"""USDA nutrition lookup models."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import Field

from .recipes import CamelModel, Nutrient


class NutritionSummary(CamelModel):
    """Key nutrients of the best USDA match for an ingredient."""

    query: str
    fdc_id: Optional[Union[int, str]] = None
    name: str
    source: str = "USDA FoodData Central"
    nutrients: list[Nutrient] = Field(default_factory=list)
