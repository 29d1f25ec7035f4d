"""Recipe-related Pydantic models."""

from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

RecipeSource = Literal["mealdb", "spoonacular"]


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys (matches the web client)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecipeCard(CamelModel):
    """Normalized recipe summary shared by both providers."""

    id: Union[int, str]
    title: Optional[str] = None
    image: Optional[str] = None
    source: RecipeSource
    source_url: Optional[str] = None
    ready_in_minutes: Optional[int] = None
    servings: Optional[int] = None

    # Spoonacular ingredient objects ({name, original, amount, unit, ...})
    used_ingredients: list[dict] = Field(default_factory=list)
    missed_ingredients: list[dict] = Field(default_factory=list)
    unused_ingredients: list[dict] = Field(default_factory=list)


class Nutrient(CamelModel):
    """A single nutrient amount."""

    name: str
    amount: Optional[float] = None
    unit: Optional[str] = None


class RecipeDetail(CamelModel):
    """Provider-independent view of a full recipe."""

    id: Union[int, str]
    title: Optional[str] = None
    image: Optional[str] = None
    source: RecipeSource
    source_url: Optional[str] = None
    ready_in_minutes: Optional[int] = None
    servings: Optional[int] = None
    summary: Optional[str] = None

    ingredients: list[str] = Field(default_factory=list)
    steps: list[str] = Field(default_factory=list)
    instructions: str = "Instructions not available."
    tags: list[str] = Field(default_factory=list)
    nutrition: list[Nutrient] = Field(default_factory=list)
