"""
Pytest configuration and shared fixtures.

Fixtures defined here are available to all tests.
"""

import sys
import pytest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

# Add backend to path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))


# =============================================================================
# App Fixtures
# =============================================================================


@pytest.fixture
def app():
    """FastAPI test application."""
    from mealmatch.main import app
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def mealdb():
    """TheMealDB client with every call mocked."""
    from mealmatch.services.mealdb import MealDBClient
    mock = AsyncMock(spec=MealDBClient)
    mock.filter_by_ingredients.return_value = []
    mock.random.return_value = []
    mock.lookup.return_value = None
    mock.list_areas.return_value = {"meals": []}
    mock.filter_by_area.return_value = {"meals": []}
    return mock


@pytest.fixture
def spoonacular():
    """Spoonacular client with every call mocked."""
    from mealmatch.services.spoonacular import SpoonacularClient
    mock = AsyncMock(spec=SpoonacularClient)
    mock.find_by_ingredients.return_value = []
    mock.complex_search.return_value = {"results": []}
    mock.random.return_value = []
    return mock


@pytest.fixture
def recipe_service(mealdb, spoonacular):
    from mealmatch.services.search import RecipeService
    return RecipeService(mealdb, spoonacular)


@pytest.fixture
def usda_service():
    from mealmatch.services.usda import USDAService
    return AsyncMock(spec=USDAService)


@pytest.fixture
def preview_video_service(app):
    """Video service without an OpenAI key (prompt preview only)."""
    from mealmatch.services.video import VideoService, get_video_service
    service = VideoService(api_key=None)
    app.dependency_overrides[get_video_service] = lambda: service
    return service


@pytest.fixture
def client(app, recipe_service, usda_service, preview_video_service):
    """Sync test client with provider services mocked."""
    from fastapi.testclient import TestClient
    app.state.recipe_service = recipe_service
    app.state.usda_service = usda_service
    return TestClient(app)


@pytest.fixture
async def local_state(tmp_path):
    """Initialized local-storage backend in a temp directory."""
    from mealmatch.services.state import LocalStateBackend
    backend = LocalStateBackend(tmp_path / "local_state.db")
    await backend.init()
    yield backend
    await backend.close()


@pytest.fixture
async def async_client(app, local_state):
    """Async test client for state API tests (local storage only)."""
    from httpx import AsyncClient, ASGITransport
    app.state.local_state = local_state
    app.state.remote_state = None
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def mock_supabase():
    """Mock Supabase client for unit tests."""
    mock = MagicMock()
    mock.table.return_value.select.return_value.execute.return_value.data = []
    mock.table.return_value.insert.return_value.execute.return_value.data = [{"id": 1}]
    mock.table.return_value.delete.return_value.execute.return_value.data = [{}]
    return mock


@pytest.fixture
def test_user_id():
    """Test user ID for database operations."""
    return "test-user-00000000-0000-0000-0000-000000000000"


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def sample_mealdb_meal():
    """TheMealDB lookup.php meal."""
    meal = {
        "idMeal": "52772",
        "strMeal": "Teriyaki Chicken Casserole",
        "strCategory": "Chicken",
        "strArea": "Japanese",
        "strInstructions": "1. Preheat oven to 350F.\r\n2. Combine soy sauce and honey.\r\n\r\nBake for 35 minutes.",
        "strMealThumb": "https://www.themealdb.com/images/media/meals/wvpsxx1468256321.jpg",
        "strYoutube": "https://www.youtube.com/watch?v=4aZr5hZXP_s",
        "strSource": None,
    }
    for index in range(1, 21):
        meal[f"strIngredient{index}"] = ""
        meal[f"strMeasure{index}"] = ""
    meal.update({
        "strIngredient1": "soy sauce",
        "strMeasure1": "3/4 cup",
        "strIngredient2": "honey",
        "strMeasure2": " ",
        "strIngredient3": "chicken breasts",
        "strMeasure3": "2",
    })
    return meal


@pytest.fixture
def sample_mealdb_filter():
    """TheMealDB filter.php meals."""
    return [
        {"idMeal": "52772", "strMeal": "Teriyaki Chicken Casserole", "strMealThumb": "https://img/1.jpg"},
        {"idMeal": "52940", "strMeal": "Brown Stew Chicken", "strMealThumb": "https://img/2.jpg"},
    ]


@pytest.fixture
def sample_spoonacular_matches():
    """Spoonacular findByIngredients results."""
    return [
        {
            "id": 716429,
            "title": "Pasta with Garlic",
            "image": "https://img.spoonacular.com/716429.jpg",
            "usedIngredients": [{"name": "garlic"}, {"name": "pasta"}],
            "missedIngredients": [{"name": "salt"}, {"name": "scallions"}],
            "unusedIngredients": [],
        },
    ]


@pytest.fixture
def sample_spoonacular_recipe():
    """Spoonacular /recipes/{id}/information with nutrition."""
    return {
        "id": 716429,
        "title": "Pasta with Garlic, Scallions, Cauliflower & Breadcrumbs",
        "image": "https://img.spoonacular.com/716429.jpg",
        "sourceUrl": "https://example.com/pasta",
        "readyInMinutes": 45,
        "servings": 2,
        "summary": "<b>Pasta</b> night.",
        "cuisines": ["Italian"],
        "diets": ["dairy free"],
        "extendedIngredients": [
            {"name": "butter", "nameClean": "butter", "amount": 1.0, "unit": "tbsp", "original": "1 tbsp butter"},
            {"name": "cauliflower florets", "amount": 1.5, "unit": "cups", "original": "1.5 cups cauliflower florets"},
        ],
        "analyzedInstructions": [
            {
                "name": "",
                "steps": [
                    {"number": 1, "step": "Boil the pasta."},
                    {"number": 2, "step": "Toss with garlic."},
                ],
            }
        ],
        "nutrition": {
            "nutrients": [
                {"name": "Calories", "amount": 584.0, "unit": "kcal"},
                {"name": "Fat", "amount": 19.0, "unit": "g"},
                {"name": "Sugar", "amount": 4.0, "unit": "g"},
            ]
        },
    }
