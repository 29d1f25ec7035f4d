"""
Common dependencies for API endpoints.
"""

from typing import Optional

from fastapi import Query, Request

from mealmatch.services.search import RecipeService
from mealmatch.services.state import ClientStateStore, select_state_store
from mealmatch.services.usda import USDAService


def get_recipe_service(request: Request) -> RecipeService:
    return request.app.state.recipe_service


def get_usda_service(request: Request) -> USDAService:
    return request.app.state.usda_service


async def get_state_store(
    request: Request,
    user_id: Optional[str] = Query(None, description="Authenticated Supabase user ID"),
    session_id: Optional[str] = Query(None, description="Local storage scope for anonymous use"),
) -> ClientStateStore:
    """
    Pick the storage for this request.

    The frontend authenticates via Supabase and passes the authenticated
    user_id directly; without one, state lives in local storage.
    """
    return select_state_store(
        local=request.app.state.local_state,
        remote=request.app.state.remote_state,
        user_id=user_id,
        session_id=session_id,
    )
