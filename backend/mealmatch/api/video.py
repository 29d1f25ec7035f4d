"""Cooking video endpoint - prompt preview and OpenAI video generation."""

import logging

from fastapi import APIRouter, Depends

from mealmatch.api.deps import get_recipe_service
from mealmatch.exceptions import BadRequestError, UpstreamError
from mealmatch.models.video import VideoRequest, VideoResponse
from mealmatch.services.normalize import prompt_ingredients, recipe_name, recipe_steps
from mealmatch.services.search import RecipeService
from mealmatch.services.video import VideoService, build_video_prompt, get_video_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["video"])


@router.post("/video", response_model=VideoResponse, response_model_exclude_unset=True)
async def generate_video(
    body: VideoRequest,
    recipes: RecipeService = Depends(get_recipe_service),
    video: VideoService = Depends(get_video_service),
):
    """
    Build the cooking video prompt for a recipe and optionally submit it.

    Without an OpenAI key (or with ``preview: true``) only the prompt is
    returned.
    """
    if body.recipe_id is None or str(body.recipe_id).strip() == "":
        raise BadRequestError("recipeId is required")

    source, meal = await recipes.fetch_meal(str(body.recipe_id), body.source)

    ingredients = prompt_ingredients(meal, source)
    steps = recipe_steps(meal, source)
    if not ingredients or not steps:
        raise BadRequestError("Recipe is missing ingredients or steps for video generation")

    prompt = build_video_prompt(recipe_name(meal, source), ingredients, steps)

    if body.preview or not video.enabled:
        return VideoResponse(
            prompt=prompt,
            video=None,
            preview=True,
            missing_api_key=not video.enabled,
        )

    try:
        job = await video.create_video(prompt)
    except Exception as e:
        logger.error(f"Video generation failed: {e}")
        raise UpstreamError("Failed to generate video", details=str(e), prompt=prompt) from e

    return VideoResponse(prompt=prompt, video=job, preview=False)
