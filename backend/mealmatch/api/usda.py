"""USDA FoodData Central nutrition lookup endpoint."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from mealmatch.api.deps import get_usda_service
from mealmatch.exceptions import BadRequestError
from mealmatch.models.nutrition import NutritionSummary
from mealmatch.services.usda import USDAService

router = APIRouter(prefix="/api/usda", tags=["usda"])


@router.get("/search", response_model=NutritionSummary)
async def search_usda(
    query: Optional[str] = Query(None, description="Ingredient name"),
    usda: USDAService = Depends(get_usda_service),
):
    """Energy and macros for the first USDA match."""
    if not query or not query.strip():
        raise BadRequestError("Query parameter is required")
    return await usda.lookup_nutrition(query.strip())
