import logging
import re
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recipe_discovery.app.db import models
from recipe_discovery.app.schemas.auth import CurrentUser
from recipe_discovery.app.schemas.recipe import Recipe
from recipe_discovery.app.services import sample_recipe_service
from recipe_discovery.app.services.fallback_recipe import youtube_search_url

logger = logging.getLogger(__name__)

DEFAULT_SERVINGS = 2
SAVED_PREP_TIME = "15 minutes"
SAVED_COOK_TIME_DEFAULT = "20 minutes"
HAVE_INGREDIENT_COUNT = 3

_LEADING_INT_RE = re.compile(r"^\s*(\d+)")


def parse_cooking_time(cook_time: Optional[str]) -> Optional[int]:
    """Leading integer of a free-text duration ("25 minutes" -> 25), else None."""
    if not cook_time:
        return None
    match = _LEADING_INT_RE.match(cook_time)
    if not match:
        return None
    return int(match.group(1)) or None


def _ensure_user(db: Session, user: CurrentUser) -> models.User:
    record = db.get(models.User, user.id)
    if record is None:
        record = models.User(user_id=user.id, email=user.email)
        db.add(record)
        db.flush()
    return record


def save_recipe(db: Session, user: CurrentUser, recipe: Recipe) -> models.SavedRecipe:
    try:
        _ensure_user(db, user)
        saved = models.SavedRecipe(
            user_id=user.id,
            title=recipe.name,
            description=f"Recipe for {recipe.name}",
            ingredients=list(recipe.need_ingredients) + list(recipe.have_ingredients),
            instructions=list(recipe.steps),
            cooking_time=parse_cooking_time(recipe.cook_time),
            image_url=None,
            servings=recipe.servings or DEFAULT_SERVINGS,
            difficulty=recipe.difficulty.value,
            nutritional_info=recipe.nutritional_info.model_dump() if recipe.nutritional_info else None,
        )
        db.add(saved)
        db.commit()
        db.refresh(saved)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Error saving recipe for user %s: %s", user.id, exc)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Failed to save recipe")
    logger.info("Saved recipe %s for user %s", saved.id, user.id)
    return saved


def list_saved_recipes(db: Session, user_id: str, limit: Optional[int] = None) -> List[models.SavedRecipe]:
    stmt = (
        select(models.SavedRecipe)
        .where(models.SavedRecipe.user_id == str(user_id))
        .order_by(models.SavedRecipe.created_at.desc(), models.SavedRecipe.id.desc())
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    try:
        return list(db.scalars(stmt).all())
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Error fetching saved recipes for user %s: %s", user_id, exc)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Failed to load saved recipes")


def get_saved_recipe(db: Session, user_id: str, recipe_id: int) -> models.SavedRecipe:
    stmt = select(models.SavedRecipe).where(
        models.SavedRecipe.user_id == str(user_id), models.SavedRecipe.id == recipe_id
    )
    try:
        saved = db.scalars(stmt).first()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Error fetching recipe %s for user %s: %s", recipe_id, user_id, exc)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Failed to load recipe")
    if not saved:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")
    return saved


def delete_saved_recipe(db: Session, user_id: str, recipe_id: int) -> None:
    saved = get_saved_recipe(db, user_id, recipe_id)
    try:
        db.delete(saved)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Error deleting recipe %s for user %s: %s", recipe_id, user_id, exc)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Failed to delete recipe")
    logger.info("Deleted recipe %s for user %s", recipe_id, user_id)


def to_recipe(saved: models.SavedRecipe) -> Recipe:
    """Rebuild the canonical shape from a stored record; have/need split is positional."""
    ingredients = list(saved.ingredients or [])
    try:
        difficulty = models.Difficulty(saved.difficulty)
    except ValueError:
        difficulty = models.Difficulty.MEDIUM
    return Recipe(
        name=saved.title,
        have_ingredients=ingredients[:HAVE_INGREDIENT_COUNT],
        need_ingredients=ingredients[HAVE_INGREDIENT_COUNT:],
        steps=list(saved.instructions or []),
        prep_time=SAVED_PREP_TIME,
        cook_time=f"{saved.cooking_time} minutes" if saved.cooking_time else SAVED_COOK_TIME_DEFAULT,
        servings=saved.servings or DEFAULT_SERVINGS,
        difficulty=difficulty,
        nutritional_info=saved.nutritional_info,
        youtube_url=youtube_search_url(saved.title),
    )


def recent_recipes(db: Session, user: Optional[CurrentUser], limit: int) -> List[Recipe]:
    if user is None:
        return sample_recipe_service.list_sample_recipes(limit)
    try:
        saved = list_saved_recipes(db, user.id, limit=limit)
    except HTTPException:
        saved = []
    if not saved:
        return sample_recipe_service.list_sample_recipes(limit)
    return [to_recipe(item) for item in saved]
