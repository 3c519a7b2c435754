from fastapi import APIRouter

from recipe_discovery.app.api.routes import auth, recipes

api_router = APIRouter()
api_router.include_router(recipes.router)
api_router.include_router(auth.router)
