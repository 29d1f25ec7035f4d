"""
Recipe API endpoints.

Search, random picks and detail lookups across TheMealDB and Spoonacular,
plus TheMealDB cuisine listing/filtering.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from mealmatch.api.deps import get_recipe_service
from mealmatch.config import get_settings
from mealmatch.exceptions import BadRequestError
from mealmatch.services.normalize import ingredient_substitutions
from mealmatch.services.ranking import SORT_OPTIONS
from mealmatch.services.search import RecipeService

router = APIRouter(prefix="/api", tags=["recipes"])


@router.get("/recipes")
async def search_recipes(
    ingredients: Optional[str] = Query(None, description="Comma-separated ingredients"),
    number: Optional[int] = Query(None, ge=1, le=100, description="Results per provider"),
    source: str = Query("both", description="mealdb, spoonacular or both"),
    diet: Optional[str] = Query(None),
    intolerances: Optional[str] = Query(None),
    cuisine: Optional[str] = Query(None, description="TheMealDB area, e.g. Italian"),
    sort: str = Query("relevance", description=f"One of {', '.join(SORT_OPTIONS)}"),
    ignore_spices: bool = Query(True, description="Leave common spices out of ingredient counts"),
    recipes: RecipeService = Depends(get_recipe_service),
):
    """Search both providers by ingredients.

    Providers are queried in parallel. A provider that fails is reported in
    ``errors`` while the other provider's results are still returned.
    """
    return await recipes.search(
        ingredients,
        number=number or get_settings().default_result_count,
        source=source,
        diet=diet,
        intolerances=intolerances,
        cuisine=cuisine,
        sort=sort,
        ignore_spices=ignore_spices,
    )


@router.get("/recipes/area/{area}")
async def recipes_by_area(area: str, recipes: RecipeService = Depends(get_recipe_service)):
    """TheMealDB meals for a cuisine/area."""
    return await recipes.by_area(area)


@router.get("/recipes/{recipe_id}")
async def get_recipe(
    recipe_id: str,
    source: str = Query("mealdb"),
    servings: Optional[int] = Query(None, ge=1, le=100, description="Rescale ingredient amounts"),
    recipes: RecipeService = Depends(get_recipe_service),
):
    """Full recipe from one provider, raw and normalized."""
    return await recipes.detail(recipe_id, source=source, servings=servings)


@router.get("/cuisines")
async def list_cuisines(recipes: RecipeService = Depends(get_recipe_service)):
    return await recipes.cuisines()


@router.get("/random")
async def random_recipe(
    source: str = Query("mealdb"),
    diet: Optional[str] = Query(None),
    tags: Optional[str] = Query(None),
    recipes: RecipeService = Depends(get_recipe_service),
):
    """One random recipe per selected provider."""
    return await recipes.random(source=source, diet=diet, tags=tags)


@router.get("/substitutions")
async def substitutions(ingredient: Optional[str] = Query(None)):
    """Common swaps for an ingredient (butter, milk, eggs, ...)."""
    if not ingredient or not ingredient.strip():
        raise BadRequestError("Ingredient query parameter is required")
    return {
        "ingredient": ingredient,
        "substitutions": ingredient_substitutions(ingredient),
    }
