"""
Local recipe synthesis used whenever the generation service cannot deliver.

`synthesize` is total and deterministic: the same RecipeRequest always yields
the same Recipe, and there is no input for which it fails.
"""
from typing import List
from urllib.parse import quote_plus

from recipe_discovery.app.db.models import Difficulty
from recipe_discovery.app.schemas.recipe import NutritionalInfo, Recipe
from recipe_discovery.app.schemas.recipe_request import Cuisine, MealType, RecipeRequest

YOUTUBE_SEARCH_URL = "https://www.youtube.com/results?search_query="

FALLBACK_PREP_TIME = "15 minutes"
FALLBACK_COOK_TIME_CAP = 20

# Same pantry list regardless of cuisine or preferences.
FALLBACK_NEED_INGREDIENTS = (
    "1 teaspoon olive oil",
    "Salt and pepper to taste",
    "2 cloves garlic",
    "1 small onion",
    "Fresh herbs (optional)",
)

FALLBACK_NUTRITION = NutritionalInfo(
    calories="~300 kcal per serving",
    protein="varies based on ingredients",
    carbs="varies based on ingredients",
    fats="varies based on ingredients",
)


def youtube_search_url(subject: str) -> str:
    return YOUTUBE_SEARCH_URL + quote_plus(f"how to cook {subject}")


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


def fallback_title(request: RecipeRequest) -> str:
    parts: List[str] = []
    if request.cuisine != Cuisine.ANY:
        parts.append(_capitalize(request.cuisine.value))
    if request.preferences:
        parts.append(_capitalize(request.preferences[0].value))
    if request.meal_type != MealType.ANY:
        parts.append(_capitalize(request.meal_type.value))
    parts.append(_capitalize(request.main_ingredient))
    parts.append("Delight")
    return " ".join(parts)


def _steps(main: str) -> List[str]:
    return [
        f"Prepare the {main} by washing and cutting it into bite-sized pieces.",
        "Heat olive oil in a pan over medium heat.",
        "Add garlic and onion, sauté until fragrant.",
        f"Add the {main} and cook until done.",
        "Season with salt and pepper to taste.",
        "Garnish with fresh herbs if available.",
        "Serve hot and enjoy your meal!",
    ]


def _tips(main: str) -> List[str]:
    return [
        f"For best results, use fresh {main}.",
        "You can substitute olive oil with butter for a richer flavor.",
        "This recipe is perfect for beginners!",
    ]


def synthesize(request: RecipeRequest) -> Recipe:
    main = request.main_ingredient
    cook_minutes = min(FALLBACK_COOK_TIME_CAP, request.max_cooking_time)
    return Recipe(
        name=fallback_title(request),
        have_ingredients=list(request.ingredients),
        need_ingredients=list(FALLBACK_NEED_INGREDIENTS),
        steps=_steps(main),
        prep_time=FALLBACK_PREP_TIME,
        cook_time=f"{cook_minutes} minutes",
        servings=request.servings,
        difficulty=Difficulty.EASY,
        nutritional_info=FALLBACK_NUTRITION,
        tips=_tips(main),
        youtube_url=youtube_search_url(main),
    )
