"""Spoonacular passthrough endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from mealmatch.api.deps import get_recipe_service
from mealmatch.services.search import RecipeService

router = APIRouter(prefix="/api/spoonacular", tags=["spoonacular"])


@router.get("/autocomplete")
async def autocomplete(
    query: Optional[str] = Query(None),
    number: int = Query(5, ge=1, le=25),
    recipes: RecipeService = Depends(get_recipe_service),
):
    return await recipes.autocomplete(query, number=number)


@router.get("/search")
async def search(
    query: Optional[str] = Query(None),
    diet: Optional[str] = Query(None),
    intolerances: Optional[str] = Query(None),
    number: int = Query(10, ge=1, le=100),
    recipes: RecipeService = Depends(get_recipe_service),
):
    """complexSearch by free text, diet or intolerances (at least one)."""
    return await recipes.spoonacular_search(
        query=query,
        diet=diet,
        intolerances=intolerances,
        number=number,
    )
