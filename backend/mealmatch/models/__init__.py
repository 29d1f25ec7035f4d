"""Pydantic models for the mealmatch API."""

from .recipes import (
    CamelModel,
    RecipeCard,
    RecipeDetail,
    Nutrient,
)
from .nutrition import NutritionSummary
from .state import (
    Favorite,
    PantryAddRequest,
    ShoppingAddRequest,
    StateSnapshot,
    ToggleFavoriteResponse,
    build_favorite_key,
)
from .video import VideoRequest, VideoResponse

__all__ = [
    # Recipes
    "CamelModel",
    "RecipeCard",
    "RecipeDetail",
    "Nutrient",
    # Nutrition
    "NutritionSummary",
    # State
    "Favorite",
    "PantryAddRequest",
    "ShoppingAddRequest",
    "StateSnapshot",
    "ToggleFavoriteResponse",
    "build_favorite_key",
    # Video
    "VideoRequest",
    "VideoResponse",
]
