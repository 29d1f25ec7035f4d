"""Video prompt models."""

from __future__ import annotations

from typing import Optional, Union

from .recipes import CamelModel


class VideoRequest(CamelModel):
    """Request body for ``POST /api/video``."""

    recipe_id: Optional[Union[int, str]] = None
    source: str = "mealdb"
    preview: bool = False


class VideoResponse(CamelModel):
    prompt: str
    video: Optional[dict] = None
    preview: bool = False
    missing_api_key: Optional[bool] = None
