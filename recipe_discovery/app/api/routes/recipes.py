import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from recipe_discovery.app.api.deps import (
    get_app_settings,
    get_current_user,
    get_db_session,
    get_optional_user,
)
from recipe_discovery.app.core.config import Settings
from recipe_discovery.app.schemas.auth import CurrentUser
from recipe_discovery.app.schemas.recipe import GenerationResult, Recipe, RecipeFormData, SavedRecipeRead
from recipe_discovery.app.services import recipe_generation_service, saved_recipes_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.post("/generate", response_model=GenerationResult)
async def generate_recipe(
    payload: RecipeFormData,
    settings: Settings = Depends(get_app_settings),
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
):
    logger.info("Recipe generation requested by %s", current_user.id if current_user else "anonymous")
    return await recipe_generation_service.generate_recipe(payload, settings=settings)


@router.post("", response_model=SavedRecipeRead, status_code=status.HTTP_201_CREATED)
def save_recipe(
    payload: Recipe,
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    return saved_recipes_service.save_recipe(db, current_user, payload)


@router.get("", response_model=List[SavedRecipeRead])
def list_saved_recipes(
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    return saved_recipes_service.list_saved_recipes(db, current_user.id, limit=limit)


@router.get("/recent", response_model=List[Recipe])
def recent_recipes(
    limit: Optional[int] = Query(None, ge=1, le=50),
    db: Session = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
):
    return saved_recipes_service.recent_recipes(db, current_user, limit or settings.recent_recipes_limit)


@router.get("/{recipe_id}", response_model=SavedRecipeRead)
def get_saved_recipe(
    recipe_id: int,
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    return saved_recipes_service.get_saved_recipe(db, current_user.id, recipe_id)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_saved_recipe(
    recipe_id: int,
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    saved_recipes_service.delete_saved_recipe(db, current_user.id, recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
