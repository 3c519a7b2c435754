"""
Turns a raw recipe form submission into a normalized RecipeRequest and the
prompt sent to the generation service.

Nothing here raises on bad input: unknown tags are dropped, unknown cuisine or
meal type values fall back to "any", and unusable numbers fall back to the
defaults.
"""
import enum
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict

from recipe_discovery.app.schemas.recipe import RecipeFormData
from recipe_discovery.app.schemas.recipe_request import (
    ANY,
    DEFAULT_MAX_COOKING_TIME,
    DEFAULT_SERVINGS,
    NONE_TAG,
    Allergy,
    Cuisine,
    MealType,
    NutritionalFocus,
    Preference,
    RecipeRequest,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_INGREDIENT = "food"

RECIPE_OUTPUT_KEYS = (
    "name",
    "haveIngredients",
    "needIngredients",
    "steps",
    "prepTime",
    "cookTime",
    "servings",
    "nutritionalInfo",
    "youtubeUrl",
    "difficulty",
    "tips",
)

SYSTEM_PROMPT = (
    "You are a professional chef with expertise in nutritional cooking.\n"
    "Create a detailed recipe that matches the user's preferences and dietary needs.\n"
    "The recipe should be formatted with these sections:\n"
    "1. Recipe name (creative and appetizing)\n"
    "2. List of ingredients they already have\n"
    "3. List of additional ingredients they need to buy (with quantities)\n"
    "4. Step by step cooking instructions\n"
    "5. Preparation time\n"
    "6. Cooking time\n"
    "7. Number of servings\n"
    "8. Nutritional information (calories, protein, carbs, fats)\n"
    "9. A relevant YouTube search query that would help them cook this dish\n\n"
    f"Format your response as a JSON object with these keys: {', '.join(RECIPE_OUTPUT_KEYS)}"
)

PROMPT_TRAILER = (
    " Include preparation time, cooking time, difficulty level (easy, medium, hard), number of servings,"
    " nutritional information, and helpful cooking tips. Ensure the response is properly formatted as JSON."
)

E = TypeVar("E", bound=enum.Enum)


class PromptPayload(BaseModel):
    system_prompt: str
    user_prompt: str

    model_config = ConfigDict(frozen=True)

    def to_messages(self) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": self.user_prompt},
        ]


def split_ingredients(text: Optional[str]) -> List[str]:
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]


def toggle_tag(selected: Sequence[str], value: str) -> Tuple[str, ...]:
    """Apply one click on a tag selector: "none" clears, anything else toggles."""
    if value == NONE_TAG:
        return ()
    if value in selected:
        return tuple(tag for tag in selected if tag != value)
    return tuple(selected) + (value,)


def _normalize_tags(values: Iterable[str], enum_cls: Type[E], field: str) -> Tuple[E, ...]:
    cleaned = [str(v).strip().lower() for v in values]
    if NONE_TAG in cleaned:
        return ()
    tags: List[E] = []
    for raw in cleaned:
        if not raw:
            continue
        try:
            tag = enum_cls(raw)
        except ValueError:
            logger.warning("Ignoring unknown %s tag: %s", field, raw)
            continue
        if tag not in tags:
            tags.append(tag)
    return tuple(tags)


def _normalize_choice(value: Optional[str], enum_cls: Type[E], field: str) -> E:
    raw = (value or ANY).strip().lower()
    try:
        return enum_cls(raw)
    except ValueError:
        logger.warning("Ignoring unknown %s value: %s", field, raw)
        return enum_cls(ANY)


def _positive_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
    return number if number > 0 else default


def normalize_form(form: RecipeFormData) -> RecipeRequest:
    ingredients = split_ingredients(form.ingredients)
    no_ingredients = not ingredients
    if no_ingredients:
        ingredients = [PLACEHOLDER_INGREDIENT]

    return RecipeRequest(
        ingredients=tuple(ingredients),
        preferences=_normalize_tags(form.preferences, Preference, "preference"),
        allergies=_normalize_tags(form.allergies, Allergy, "allergy"),
        nutritional_focus=_normalize_tags(form.deficiencies, NutritionalFocus, "nutritional focus"),
        cuisine=_normalize_choice(form.cuisine, Cuisine, "cuisine"),
        meal_type=_normalize_choice(form.meal_type, MealType, "meal type"),
        max_cooking_time=_positive_int(form.max_cooking_time, DEFAULT_MAX_COOKING_TIME),
        servings=_positive_int(form.servings, DEFAULT_SERVINGS),
        no_ingredients=no_ingredients,
    )


def _join(tags: Iterable[enum.Enum]) -> str:
    return ", ".join(tag.value for tag in tags)


def build_user_prompt(request: RecipeRequest) -> str:
    # Clause order steers the generator; keep it stable.
    prompt = f"Create a recipe using these ingredients: {', '.join(request.ingredients)}."
    if request.preferences:
        prompt += f" The recipe should be {_join(request.preferences)}."
    if request.allergies:
        prompt += f" Avoid these allergens: {_join(request.allergies)}."
    if request.nutritional_focus:
        prompt += f" The dish should be rich in {_join(request.nutritional_focus)}."
    if request.cuisine != Cuisine.ANY:
        prompt += f" The cuisine style should be {request.cuisine.value}."
    prompt += f" The total cooking time should be under {request.max_cooking_time} minutes."
    if request.meal_type != MealType.ANY:
        prompt += f" This should be a {request.meal_type.value} recipe."
    people = "person" if request.servings == 1 else "people"
    prompt += f" The recipe should serve {request.servings} {people}."
    return prompt + PROMPT_TRAILER


def build(form: RecipeFormData) -> Tuple[RecipeRequest, PromptPayload]:
    request = normalize_form(form)
    payload = PromptPayload(system_prompt=SYSTEM_PROMPT, user_prompt=build_user_prompt(request))
    return request, payload
