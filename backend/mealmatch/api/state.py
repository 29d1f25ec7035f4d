"""
Client state endpoints: favorites, pantry and shopping list.

Pass ``user_id`` to read/write the signed-in user's Supabase rows; without
it (or without Supabase configured) state lives in local storage, scoped by
``session_id``.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from mealmatch.api.deps import get_state_store
from mealmatch.models.state import (
    PantryAddRequest,
    ShoppingAddRequest,
    StateSnapshot,
    ToggleFavoriteResponse,
)
from mealmatch.services.state import ClientStateStore

router = APIRouter(prefix="/api/state", tags=["state"])


@router.get("", response_model=StateSnapshot)
async def get_state(store: ClientStateStore = Depends(get_state_store)):
    """All collections for the current scope."""
    return await store.snapshot()


# ============================================================================
# Favorites
# ============================================================================

@router.get("/favorites")
async def list_favorites(store: ClientStateStore = Depends(get_state_store)):
    favorites = await store.favorites()
    return {
        "mode": store.mode,
        "favorites": [f.model_dump(by_alias=True) for f in favorites],
        "keys": [f.key for f in favorites],
    }


@router.post("/favorites/toggle", response_model=ToggleFavoriteResponse)
async def toggle_favorite(
    item: dict = Body(..., description="Recipe card, favorite or TheMealDB meal"),
    store: ClientStateStore = Depends(get_state_store),
):
    """Save the recipe if it is not a favorite yet, otherwise remove it."""
    favorited, favorite = await store.toggle_favorite(item)
    return ToggleFavoriteResponse(
        favorited=favorited,
        key=favorite.key,
        favorites=await store.favorites(),
    )


# ============================================================================
# Pantry
# ============================================================================

@router.get("/pantry")
async def list_pantry(store: ClientStateStore = Depends(get_state_store)):
    items = await store.pantry()
    return {"mode": store.mode, "items": items, "ingredients": await store.pantry_query()}


@router.post("/pantry")
async def add_pantry_items(
    body: PantryAddRequest,
    store: ClientStateStore = Depends(get_state_store),
):
    items = await store.add_pantry_items(body.items)
    return {"mode": store.mode, "items": items, "ingredients": await store.pantry_query()}


@router.delete("/pantry")
async def remove_pantry_item(
    name: Optional[str] = Query(None),
    store: ClientStateStore = Depends(get_state_store),
):
    items = await store.remove_pantry_item(name)
    return {"mode": store.mode, "items": items, "ingredients": await store.pantry_query()}


# ============================================================================
# Shopping list
# ============================================================================

@router.get("/shopping-list")
async def get_shopping_list(store: ClientStateStore = Depends(get_state_store)):
    return {"mode": store.mode, "items": await store.shopping_list()}


@router.post("/shopping-list")
async def add_shopping_items(
    body: ShoppingAddRequest,
    store: ClientStateStore = Depends(get_state_store),
):
    return {"mode": store.mode, "items": await store.add_shopping_items(body.items)}


@router.delete("/shopping-list/items")
async def remove_shopping_item(
    item: str = Query(..., min_length=1),
    store: ClientStateStore = Depends(get_state_store),
):
    return {"mode": store.mode, "items": await store.remove_shopping_item(item)}


@router.delete("/shopping-list")
async def clear_shopping_list(store: ClientStateStore = Depends(get_state_store)):
    return {"mode": store.mode, "items": await store.clear_shopping_list()}
