import json
import logging
import re
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from recipe_discovery.app.core.config import Settings, get_settings
from recipe_discovery.app.db.models import Difficulty
from recipe_discovery.app.schemas.recipe import GenerationFailure, NutritionalInfo, Recipe
from recipe_discovery.app.schemas.recipe_request import RecipeRequest
from recipe_discovery.app.services.fallback_recipe import youtube_search_url
from recipe_discovery.app.services.recipe_request_builder import PromptPayload

logger = logging.getLogger(__name__)

NOT_SPECIFIED = "Not specified"
QUOTA_ERROR_TYPES = {"insufficient_quota"}
NUTRITION_KEYS = ("calories", "protein", "carbs", "fats")

_STEP_NUMBER_RE = re.compile(r"^\s*(?:step\s*)?\d+\s*[.):\-]\s*", re.IGNORECASE)
_LEADING_INT_RE = re.compile(r"^\s*(\d+)")


class GenerationError(Exception):
    failure: GenerationFailure = GenerationFailure.TRANSPORT_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(GenerationError):
    failure = GenerationFailure.UNCONFIGURED


class QuotaExceeded(GenerationError):
    failure = GenerationFailure.QUOTA_EXCEEDED


class TransportError(GenerationError):
    failure = GenerationFailure.TRANSPORT_ERROR


class ParseError(GenerationError):
    failure = GenerationFailure.UNPARSABLE


def _strip_invalid_control_chars(s: str) -> str:
    """Remove ASCII control chars that frequently break json.loads (except \n, \r, \t)."""
    return re.sub(r"[\x00-\x08\x0B\x0C\x0E-\x1F]", "", s)


def _strip_code_fence(text: str) -> str:
    txt = text.strip()
    if txt.startswith("```"):
        txt = re.sub(r"^```[a-zA-Z0-9_-]*\s*", "", txt, count=1)
        txt = re.sub(r"\s*```$", "", txt, count=1).strip()
    return txt


def _try_local_json_repair(raw: str) -> Optional[str]:
    cleaned = _strip_code_fence(raw)
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end != -1 and end > start:
        snippet = cleaned[start : end + 1]
        try:
            json.loads(snippet)
            return snippet
        except json.JSONDecodeError:
            return None
    return None


def _load_json_object(raw: str) -> Dict[str, Any]:
    cleaned = _strip_code_fence(_strip_invalid_control_chars(raw))
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        repaired = _try_local_json_repair(cleaned)
        if repaired is None:
            raise ParseError("Failed to parse recipe data")
        data = json.loads(repaired)
    if isinstance(data, dict) and isinstance(data.get("recipe"), dict):
        data = data["recipe"]
    if not isinstance(data, dict):
        raise ParseError("LLM response is not a JSON object")
    return data


def _text_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    items = []
    for item in value:
        if isinstance(item, dict):
            # {"name": "flour", "quantity": "1 cup"} or {"text": "..."}
            text = item.get("text") or item.get("description") or item.get("instruction")
            if not text:
                name = item.get("name") or item.get("item") or ""
                quantity = item.get("quantity") or item.get("amount") or ""
                text = f"{quantity} {name}".strip()
        else:
            text = item
        text = str(text).strip() if text is not None else ""
        if text:
            items.append(text)
    return items


def _steps(value: Any) -> List[str]:
    steps = []
    for text in _text_list(value):
        stripped = _STEP_NUMBER_RE.sub("", text, count=1).strip()
        if stripped:
            steps.append(stripped)
    return steps


def _duration(value: Any) -> str:
    if isinstance(value, bool) or value is None:
        return NOT_SPECIFIED
    if isinstance(value, (int, float)):
        return f"{int(value)} minutes"
    text = str(value).strip()
    return text or NOT_SPECIFIED


def _servings(value: Any, default: int) -> int:
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, (int, float)):
        return int(value) if value >= 1 else default
    match = _LEADING_INT_RE.match(str(value))
    if match and int(match.group(1)) > 0:
        return int(match.group(1))
    return default


def _difficulty(value: Any) -> Difficulty:
    if isinstance(value, str):
        try:
            return Difficulty(value.strip().lower())
        except ValueError:
            pass
    return Difficulty.MEDIUM


def _nutritional_info(value: Any) -> Optional[NutritionalInfo]:
    if not isinstance(value, dict) or not any(key in value for key in NUTRITION_KEYS):
        return None
    return NutritionalInfo(
        **{key: str(value[key]) if value.get(key) is not None else NOT_SPECIFIED for key in NUTRITION_KEYS}
    )


def coerce_recipe(raw: str, request: RecipeRequest) -> Recipe:
    """
    Reshape generator output into the canonical Recipe.

    Accepts a bare object or {"recipe": {...}}, `title` in place of `name`, and
    steps as strings or {"text": ...} objects. The video link is always derived
    from the returned name.
    """
    data = _load_json_object(raw)

    name = data.get("name") or data.get("title")
    if not isinstance(name, str) or not name.strip():
        raise ParseError("Recipe is missing a name")
    name = name.strip()

    steps = _steps(data.get("steps") or data.get("instructions"))
    if not steps:
        raise ParseError("Recipe is missing steps")

    have = _text_list(data.get("haveIngredients")) if "haveIngredients" in data else list(request.ingredients)
    tips = _text_list(data.get("tips")) if data.get("tips") is not None else None

    # NaN/inf numbers in times or servings surface as ValueError/OverflowError
    try:
        return Recipe(
            name=name,
            have_ingredients=have,
            need_ingredients=_text_list(data.get("needIngredients")),
            steps=steps,
            prep_time=_duration(data.get("prepTime")),
            cook_time=_duration(data.get("cookTime")),
            servings=_servings(data.get("servings"), request.servings),
            difficulty=_difficulty(data.get("difficulty")),
            nutritional_info=_nutritional_info(data.get("nutritionalInfo")),
            tips=tips,
            youtube_url=youtube_search_url(name),
        )
    except (ValidationError, ValueError, OverflowError) as exc:
        raise ParseError(f"Recipe failed validation: {exc}") from exc


def _headers(settings: Settings) -> Dict[str, str]:
    if not settings.openai_api_key:
        raise ConfigurationError("OpenAI API key not configured")
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {settings.openai_api_key}",
    }


def _error_kinds(resp: httpx.Response) -> List[str]:
    """String `error.type` / `error.code` values from an error body; anything else is ignored."""
    try:
        body = resp.json()
    except ValueError:
        return []
    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        return []
    return [value for value in (error.get("type"), error.get("code")) if isinstance(value, str) and value]


async def call_recipe_generation(
    payload: PromptPayload,
    request: RecipeRequest,
    settings: Optional[Settings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Recipe:
    """
    Send one chat-completions request and reshape the answer into a Recipe.

    Raises a GenerationError subclass describing what went wrong; there are no
    retries.
    """
    settings = settings or get_settings()
    headers = _headers(settings)
    body = {
        "model": settings.openai_model,
        "messages": payload.to_messages(),
        "temperature": settings.openai_temperature,
        "response_format": {"type": "json_object"},
    }
    url = f"{settings.openai_base_url.rstrip('/')}/v1/chat/completions"
    timeout = httpx.Timeout(
        settings.generation_timeout_seconds, read=settings.generation_timeout_seconds, connect=10.0
    )

    logger.info("Sending prompt to generation service: %s", payload.user_prompt)
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout) as owned_client:
                resp = await owned_client.post(url, json=body, headers=headers)
        else:
            resp = await client.post(url, json=body, headers=headers, timeout=timeout)
    except httpx.HTTPError as exc:
        logger.warning("Generation service request failed: %s", exc)
        raise TransportError("Error calling OpenAI API") from exc

    if resp.status_code >= 400:
        error_kinds = _error_kinds(resp)
        logger.warning(
            "Generation service returned error: status=%s, type=%s, body=%s",
            resp.status_code,
            error_kinds,
            resp.text[:500],
        )
        if QUOTA_ERROR_TYPES.intersection(error_kinds):
            raise QuotaExceeded("OpenAI API quota exceeded")
        raise TransportError("Failed to generate recipe")

    try:
        data = resp.json()
    except ValueError as exc:
        raise ParseError("Failed to parse recipe data") from exc

    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise ParseError("Failed to parse recipe data") from exc
    if not content or not isinstance(content, str):
        raise ParseError("Failed to parse recipe data")

    logger.info("Generation service raw content: %s", content[:2000])
    return coerce_recipe(content, request)
