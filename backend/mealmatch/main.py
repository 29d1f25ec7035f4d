"""
mealmatch: FastAPI backend for ingredient-based recipe discovery.

Run with: uvicorn mealmatch.main:app --reload

Architecture:
- Thin REST proxy over TheMealDB, Spoonacular and USDA FoodData Central
- Parallel provider queries with per-source error reporting
- Cooking video prompts, optionally sent to OpenAI video generation
- Favorites/pantry/shopping list in local storage or per-user Supabase tables
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mealmatch.config import get_settings
from mealmatch.api import health, recipes, spoonacular, state, usda, video
from mealmatch.exceptions import MealMatchError
from mealmatch.services.mealdb import MealDBClient
from mealmatch.services.search import RecipeService
from mealmatch.services.spoonacular import SpoonacularClient
from mealmatch.services.state import LocalStateBackend, SupabaseStateBackend
from mealmatch.services.supabase import get_supabase_client
from mealmatch.services.usda import USDAService

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    logger.info("Starting mealmatch backend...")

    http = httpx.AsyncClient(timeout=settings.http_timeout_seconds)

    # Recipe providers
    mealdb_client = MealDBClient(http)
    spoonacular_client = SpoonacularClient(http, api_key=settings.spoonacular_api_key)
    app.state.recipe_service = RecipeService(mealdb_client, spoonacular_client)
    app.state.usda_service = USDAService(http, api_key=settings.usda_api_key)

    if not spoonacular_client.enabled:
        logger.warning("SPOONACULAR_API_KEY not set - Spoonacular results disabled")
    if not app.state.usda_service.enabled:
        logger.warning("FDC_API_KEY/USDA_API_KEY not set - nutrition lookup disabled")
    if not settings.video_enabled:
        logger.warning("OPENAI_API_KEY not set - video endpoint returns prompts only")

    # Client state: local storage always, Supabase when configured
    local_state = LocalStateBackend(settings.local_state_db)
    await local_state.init()
    app.state.local_state = local_state

    if settings.supabase_enabled:
        app.state.remote_state = SupabaseStateBackend(get_supabase_client())
        logger.info("Supabase state sync enabled")
    else:
        app.state.remote_state = None
        logger.warning("Supabase not configured - state kept in local storage only")

    yield

    # Shutdown
    logger.info("Shutting down mealmatch backend...")
    await local_state.close()
    await http.aclose()


app = FastAPI(
    title="mealmatch",
    description="Recipe discovery API over TheMealDB, Spoonacular and USDA",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MealMatchError)
async def mealmatch_error_handler(request: Request, exc: MealMatchError):
    """Return structured ``{"error": ...}`` bodies with the error's status."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Invalid client input is a 400, same body shape as other errors."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = f"Invalid {field}: {first.get('msg')}" if field else "Invalid request"
    return JSONResponse(
        status_code=400,
        content={
            "error": message,
            "details": [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in errors],
        },
    )


# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(recipes.router)  # /api/recipes, /api/cuisines, /api/random
app.include_router(spoonacular.router)  # /api/spoonacular
app.include_router(usda.router)  # /api/usda
app.include_router(video.router)  # /api/video
app.include_router(state.router)  # /api/state


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "mealmatch",
        "version": "0.1.0",
        "description": "Recipe discovery API over TheMealDB, Spoonacular and USDA",
        "docs": "/docs",
        "endpoints": {
            "health": "/health",
            "recipes": "/api/recipes",
            "cuisines": "/api/cuisines",
            "random": "/api/random",
            "spoonacular": "/api/spoonacular",
            "usda": "/api/usda/search",
            "substitutions": "/api/substitutions",
            "video": "/api/video",
            "state": "/api/state",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "mealmatch.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=not settings.is_production,
    )
