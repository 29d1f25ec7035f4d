"""
Client state store: favorites, pantry and shopping list.

Two storage backends implement the same interface:
- LocalStateBackend mirrors browser local storage (one JSON value per fixed
  key) in a local SQLite file, scoped by device/session.
- SupabaseStateBackend reads and writes per-user rows in Supabase tables.

Both are created at startup; select_state_store() picks one per request.
ClientStateStore holds the collection rules (favorite toggling, pantry
dedupe, shopping list dedupe) independent of where the data lives.
"""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import aiosqlite
import httpx
from postgrest.exceptions import APIError
from pydantic import ValidationError
from supabase import Client

from mealmatch.exceptions import BadRequestError, UpstreamError
from mealmatch.models.state import Favorite, StateSnapshot
from mealmatch.services.normalize import sanitize_csv
from mealmatch.services.supabase import TABLES

logger = logging.getLogger(__name__)

# Local storage keys (match the web app)
FAVORITES_KEY = "mealMatchFavorites"
PANTRY_KEY = "mealMatchPantry"
SHOPPING_LIST_KEY = "mealMatchShoppingList"

DEFAULT_LOCAL_SCOPE = "local"


def normalize_favorite(item: Optional[dict]) -> Optional[Favorite]:
    """Coerce a card, favorite or raw TheMealDB meal into a Favorite."""
    if not item:
        return None

    try:
        if item.get("source") and item.get("id"):
            return Favorite(
                id=item["id"],
                title=item.get("title"),
                image=item.get("image"),
                source=item["source"],
                source_url=item.get("sourceUrl") or item.get("source_url") or "",
            )
        if item.get("idMeal"):
            return Favorite(
                id=item["idMeal"],
                title=item.get("strMeal"),
                image=item.get("strMealThumb"),
                source="mealdb",
                source_url=item.get("strSource") or item.get("strYoutube") or "",
            )
    except ValidationError:
        return None
    return None


# ============================================================================
# Backend interface
# ============================================================================

class StateBackend(ABC):
    """Storage for the three client collections, partitioned by scope."""

    mode: str

    @abstractmethod
    async def load_favorites(self, scope: str) -> list[Favorite]: ...

    @abstractmethod
    async def save_favorite(self, scope: str, favorite: Favorite) -> None: ...

    @abstractmethod
    async def delete_favorite(self, scope: str, favorite: Favorite) -> None: ...

    @abstractmethod
    async def load_pantry(self, scope: str) -> list[str]: ...

    @abstractmethod
    async def save_pantry_items(self, scope: str, names: list[str]) -> None: ...

    @abstractmethod
    async def delete_pantry_item(self, scope: str, name: str) -> None: ...

    @abstractmethod
    async def load_shopping_list(self, scope: str) -> list[str]: ...

    @abstractmethod
    async def save_shopping_items(self, scope: str, items: list[str]) -> None: ...

    @abstractmethod
    async def delete_shopping_item(self, scope: str, item: str) -> None: ...

    @abstractmethod
    async def clear_shopping_list(self, scope: str) -> None: ...


# ============================================================================
# Local storage (SQLite key/value)
# ============================================================================

class LocalStateBackend(StateBackend):
    """Local-storage style key/value persistence in SQLite."""

    mode = "local"

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)
        self.db: aiosqlite.Connection | None = None

    async def init(self):
        """Open the database and create the key/value table."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self.db = await aiosqlite.connect(self.db_path)
        self.db.row_factory = aiosqlite.Row

        await self.db.executescript("""
            CREATE TABLE IF NOT EXISTS local_storage (
                scope TEXT NOT NULL,
                key TEXT NOT NULL,
                value TEXT NOT NULL,  -- JSON
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (scope, key)
            );
        """)
        await self.db.commit()

        logger.info(f"Local state store initialized at {self.db_path}")

    async def close(self):
        if self.db:
            await self.db.close()
            self.db = None

    async def get_item(self, scope: str, key: str) -> list:
        cursor = await self.db.execute(
            "SELECT value FROM local_storage WHERE scope = ? AND key = ?",
            (scope, key),
        )
        row = await cursor.fetchone()
        if not row:
            return []
        try:
            value = json.loads(row["value"])
        except ValueError:
            logger.warning(f"Unreadable local value for {key} in scope {scope}, resetting")
            return []
        return value if isinstance(value, list) else []

    async def set_item(self, scope: str, key: str, value: list):
        await self.db.execute(
            """
            INSERT OR REPLACE INTO local_storage (scope, key, value, updated_at)
            VALUES (?, ?, ?, ?)
            """,
            (scope, key, json.dumps(value), datetime.now(timezone.utc).isoformat()),
        )
        await self.db.commit()

    # Favorites

    async def load_favorites(self, scope: str) -> list[Favorite]:
        stored = await self.get_item(scope, FAVORITES_KEY)
        favorites = []
        for item in stored:
            favorite = normalize_favorite(item) if isinstance(item, dict) else None
            if favorite:
                favorites.append(favorite)
        return favorites

    async def save_favorite(self, scope: str, favorite: Favorite) -> None:
        favorites = await self.load_favorites(scope)
        favorites.append(favorite)
        await self.set_item(scope, FAVORITES_KEY, [f.model_dump(by_alias=True) for f in favorites])

    async def delete_favorite(self, scope: str, favorite: Favorite) -> None:
        favorites = [f for f in await self.load_favorites(scope) if f.key != favorite.key]
        await self.set_item(scope, FAVORITES_KEY, [f.model_dump(by_alias=True) for f in favorites])

    # Pantry

    async def load_pantry(self, scope: str) -> list[str]:
        return [str(name) for name in await self.get_item(scope, PANTRY_KEY)]

    async def save_pantry_items(self, scope: str, names: list[str]) -> None:
        pantry = await self.load_pantry(scope)
        await self.set_item(scope, PANTRY_KEY, pantry + list(names))

    async def delete_pantry_item(self, scope: str, name: str) -> None:
        pantry = [entry for entry in await self.load_pantry(scope) if entry != name]
        await self.set_item(scope, PANTRY_KEY, pantry)

    # Shopping list

    async def load_shopping_list(self, scope: str) -> list[str]:
        return [str(item) for item in await self.get_item(scope, SHOPPING_LIST_KEY)]

    async def save_shopping_items(self, scope: str, items: list[str]) -> None:
        shopping = await self.load_shopping_list(scope)
        await self.set_item(scope, SHOPPING_LIST_KEY, shopping + list(items))

    async def delete_shopping_item(self, scope: str, item: str) -> None:
        shopping = [entry for entry in await self.load_shopping_list(scope) if entry != item]
        await self.set_item(scope, SHOPPING_LIST_KEY, shopping)

    async def clear_shopping_list(self, scope: str) -> None:
        await self.set_item(scope, SHOPPING_LIST_KEY, [])


# ============================================================================
# Remote storage (Supabase tables, scoped by user_id)
# ============================================================================

class SupabaseStateBackend(StateBackend):
    """Per-user rows in Supabase."""

    mode = "remote"

    def __init__(self, client: Client):
        self.client = client

    def _execute(self, query, action: str) -> Any:
        try:
            return query.execute()
        except APIError as e:
            logger.error(f"Unable to {action}: {e.message}")
            raise UpstreamError(f"Unable to {action}: {e.message}") from e
        except httpx.HTTPError as e:
            logger.error(f"Unable to {action}: {e}")
            raise UpstreamError(f"Unable to {action}: {e}") from e

    # Favorites

    async def load_favorites(self, scope: str) -> list[Favorite]:
        result = self._execute(
            self.client.table(TABLES["favorites"])
            .select("id, recipe_id, title, image, source, source_url")
            .eq("user_id", scope)
            .order("inserted_at", desc=True),
            "load favorites",
        )
        favorites = []
        for row in result.data or []:
            try:
                favorites.append(Favorite(
                    id=row["recipe_id"],
                    title=row.get("title"),
                    image=row.get("image"),
                    source=row["source"],
                    source_url=row.get("source_url") or "",
                    row_id=row.get("id"),
                ))
            except (KeyError, ValidationError):
                logger.warning(f"Skipping malformed favorite row {row.get('id')}")
        return favorites

    async def save_favorite(self, scope: str, favorite: Favorite) -> None:
        self._execute(
            self.client.table(TABLES["favorites"]).insert({
                "user_id": scope,
                "recipe_id": str(favorite.id),
                "source": favorite.source,
                "title": favorite.title,
                "image": favorite.image,
                "source_url": favorite.source_url or "",
            }),
            "save favorite",
        )

    async def delete_favorite(self, scope: str, favorite: Favorite) -> None:
        query = self.client.table(TABLES["favorites"]).delete()
        if favorite.row_id is not None:
            query = query.eq("id", favorite.row_id)
        else:
            query = (
                query.eq("user_id", scope)
                .eq("source", favorite.source)
                .eq("recipe_id", str(favorite.id))
            )
        self._execute(query, "remove favorite")

    # Pantry

    async def load_pantry(self, scope: str) -> list[str]:
        result = self._execute(
            self.client.table(TABLES["pantry"])
            .select("name")
            .eq("user_id", scope)
            .order("inserted_at"),
            "load pantry items",
        )
        return [row["name"] for row in result.data or []]

    async def save_pantry_items(self, scope: str, names: list[str]) -> None:
        """Insert pantry rows in parallel; rows that already exist are skipped."""

        async def insert(name: str):
            query = self.client.table(TABLES["pantry"]).insert({"user_id": scope, "name": name})
            try:
                await asyncio.to_thread(query.execute)
            except APIError as e:
                if e.code == "23505" or "duplicate" in (e.message or ""):
                    logger.debug(f"Pantry item '{name}' already saved")
                    return
                logger.error(f"Unable to save pantry item '{name}': {e.message}")
                raise UpstreamError(f"Unable to save pantry item: {e.message}") from e
            except httpx.HTTPError as e:
                logger.error(f"Unable to save pantry item '{name}': {e}")
                raise UpstreamError(f"Unable to save pantry item: {e}") from e

        await asyncio.gather(*(insert(name) for name in names))

    async def delete_pantry_item(self, scope: str, name: str) -> None:
        self._execute(
            self.client.table(TABLES["pantry"]).delete().eq("user_id", scope).eq("name", name),
            "remove pantry item",
        )

    # Shopping list

    async def load_shopping_list(self, scope: str) -> list[str]:
        result = self._execute(
            self.client.table(TABLES["shopping_list"])
            .select("item")
            .eq("user_id", scope)
            .order("inserted_at"),
            "load shopping list",
        )
        return [row["item"] for row in result.data or []]

    async def save_shopping_items(self, scope: str, items: list[str]) -> None:
        if not items:
            return
        self._execute(
            self.client.table(TABLES["shopping_list"]).insert(
                [{"user_id": scope, "item": item} for item in items]
            ),
            "save shopping list items",
        )

    async def delete_shopping_item(self, scope: str, item: str) -> None:
        self._execute(
            self.client.table(TABLES["shopping_list"]).delete().eq("user_id", scope).eq("item", item),
            "remove shopping list item",
        )

    async def clear_shopping_list(self, scope: str) -> None:
        self._execute(
            self.client.table(TABLES["shopping_list"]).delete().eq("user_id", scope),
            "clear shopping list",
        )


# ============================================================================
# Collection rules
# ============================================================================

class ClientStateStore:
    """Favorites, pantry and shopping list for one storage scope."""

    def __init__(self, backend: StateBackend, scope: str):
        self.backend = backend
        self.scope = scope

    @property
    def mode(self) -> str:
        return self.backend.mode

    # Favorites

    async def favorites(self) -> list[Favorite]:
        return await self.backend.load_favorites(self.scope)

    async def toggle_favorite(self, item: Optional[dict]) -> tuple[bool, Favorite]:
        """Add the favorite if its key is absent, otherwise remove it.

        Returns (favorited, favorite) where favorited is the new membership.
        """
        favorite = normalize_favorite(item)
        if favorite is None:
            raise BadRequestError("A favorite needs a source and an id")

        existing = next((f for f in await self.favorites() if f.key == favorite.key), None)
        if existing:
            await self.backend.delete_favorite(self.scope, existing)
            return False, existing

        await self.backend.save_favorite(self.scope, favorite)
        return True, favorite

    # Pantry

    async def pantry(self) -> list[str]:
        return await self.backend.load_pantry(self.scope)

    async def add_pantry_items(self, text: Optional[str]) -> list[str]:
        """Add comma-separated items, skipping case-insensitive duplicates."""
        cleaned = sanitize_csv(text)
        if not cleaned:
            raise BadRequestError("Provide at least one pantry item")

        seen = {name.lower() for name in await self.pantry()}
        new_items = []
        for token in cleaned.split(","):
            if token.lower() in seen:
                continue
            seen.add(token.lower())
            new_items.append(token)

        if new_items:
            await self.backend.save_pantry_items(self.scope, new_items)
        return await self.pantry()

    async def remove_pantry_item(self, name: Optional[str]) -> list[str]:
        target = (name or "").strip().lower()
        if not target:
            raise BadRequestError("Pantry item name is required")

        for stored in await self.pantry():
            if stored.lower() == target:
                await self.backend.delete_pantry_item(self.scope, stored)
        return await self.pantry()

    async def pantry_query(self) -> str:
        """Pantry as an ingredient search string."""
        return ", ".join(await self.pantry())

    # Shopping list

    async def shopping_list(self) -> list[str]:
        return await self.backend.load_shopping_list(self.scope)

    async def add_shopping_items(self, items: list[str]) -> list[str]:
        """Append items not already on the list (exact text match)."""
        seen = set(await self.shopping_list())
        new_items = []
        for item in items:
            if not item or not item.strip() or item in seen:
                continue
            seen.add(item)
            new_items.append(item)

        if new_items:
            await self.backend.save_shopping_items(self.scope, new_items)
        return await self.shopping_list()

    async def remove_shopping_item(self, item: str) -> list[str]:
        await self.backend.delete_shopping_item(self.scope, item)
        return await self.shopping_list()

    async def clear_shopping_list(self) -> list[str]:
        await self.backend.clear_shopping_list(self.scope)
        return []

    async def snapshot(self) -> StateSnapshot:
        favorites, pantry, shopping = await asyncio.gather(
            self.favorites(), self.pantry(), self.shopping_list()
        )
        return StateSnapshot(
            mode=self.mode,
            favorites=favorites,
            pantry=pantry,
            shopping_list=shopping,
        )


def select_state_store(
    local: StateBackend,
    remote: Optional[StateBackend],
    user_id: Optional[str] = None,
    session_id: Optional[str] = None,
) -> ClientStateStore:
    """Remote store for authenticated users when available, else local storage."""
    if user_id and remote is not None:
        return ClientStateStore(remote, user_id)
    if user_id:
        logger.debug("Remote sync not configured, using local storage")
    return ClientStateStore(local, session_id or DEFAULT_LOCAL_SCOPE)
