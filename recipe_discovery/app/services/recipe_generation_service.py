import logging
from typing import Optional

import httpx

from recipe_discovery.app.core.config import Settings, get_settings
from recipe_discovery.app.schemas.recipe import (
    Degradation,
    GenerationFailure,
    GenerationResult,
    RecipeFormData,
)
from recipe_discovery.app.schemas.recipe_request import RecipeRequest
from recipe_discovery.app.services import fallback_recipe, llm_client, recipe_request_builder

logger = logging.getLogger(__name__)

QUOTA_NOTICE = "Using fallback recipe generation due to API limits."
ERROR_NOTICE = "Using fallback recipe generation due to an error."


def notice_for(reason: GenerationFailure) -> str:
    if reason == GenerationFailure.QUOTA_EXCEEDED:
        return QUOTA_NOTICE
    return ERROR_NOTICE


def _fallback(request: RecipeRequest, reason: GenerationFailure, message: str) -> GenerationResult:
    logger.warning("Using fallback recipe: reason=%s, message=%s", reason.value, message)
    return GenerationResult(
        recipe=fallback_recipe.synthesize(request),
        degraded=Degradation(reason=reason, message=message, notice=notice_for(reason)),
    )


async def generate_recipe(
    form: RecipeFormData,
    settings: Optional[Settings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> GenerationResult:
    """
    Produce a recipe for one form submission.

    Always returns a usable recipe. When the generation service is unavailable
    or its answer cannot be used, the recipe comes from the fallback
    synthesizer and `degraded` says why.
    """
    settings = settings or get_settings()
    request, payload = recipe_request_builder.build(form)
    logger.info(
        "Generating recipe: ingredients=%s, preferences=%s, allergies=%s, focus=%s, cuisine=%s, "
        "max_cooking_time=%s, meal_type=%s, servings=%s",
        list(request.ingredients),
        [p.value for p in request.preferences],
        [a.value for a in request.allergies],
        [f.value for f in request.nutritional_focus],
        request.cuisine.value,
        request.max_cooking_time,
        request.meal_type.value,
        request.servings,
    )

    if not settings.openai_api_key:
        return _fallback(request, GenerationFailure.UNCONFIGURED, "OpenAI API key not configured")
    if request.no_ingredients:
        return _fallback(request, GenerationFailure.NO_INGREDIENTS, "No ingredients provided")

    try:
        recipe = await llm_client.call_recipe_generation(payload, request, settings=settings, client=client)
    except llm_client.GenerationError as exc:
        return _fallback(request, exc.failure, exc.message)

    logger.info("Generated recipe: %s", recipe.name)
    return GenerationResult(recipe=recipe)
