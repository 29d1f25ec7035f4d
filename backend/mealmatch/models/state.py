"""Client state models: favorites, pantry and shopping list."""

from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import Field

from .recipes import CamelModel, RecipeSource


class Favorite(CamelModel):
    """A saved recipe, unique per storage scope by ``source:id``."""

    id: Union[int, str]
    title: Optional[str] = None
    image: Optional[str] = None
    source: RecipeSource
    source_url: str = ""

    # Remote row id (Supabase only), never sent to clients
    row_id: Optional[Union[int, str]] = Field(default=None, exclude=True)

    @property
    def key(self) -> str:
        return build_favorite_key(self.source, self.id)


def build_favorite_key(source: str, recipe_id: Union[int, str]) -> str:
    """Composite favorite key."""
    return f"{source}:{recipe_id}"


class PantryAddRequest(CamelModel):
    """Comma-separated pantry input, e.g. ``"chicken, rice"``."""

    items: str


class ShoppingAddRequest(CamelModel):
    items: list[str]


class ToggleFavoriteResponse(CamelModel):
    favorited: bool
    key: str
    favorites: list[Favorite] = Field(default_factory=list)


class StateSnapshot(CamelModel):
    """All client collections for one storage scope."""

    mode: Literal["local", "remote"]
    favorites: list[Favorite] = Field(default_factory=list)
    pantry: list[str] = Field(default_factory=list)
    shopping_list: list[str] = Field(default_factory=list)
