import enum
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from recipe_discovery.app.db.models import Difficulty


class GenerationFailure(str, enum.Enum):
    UNCONFIGURED = "unconfigured"
    QUOTA_EXCEEDED = "quota_exceeded"
    TRANSPORT_ERROR = "transport_error"
    UNPARSABLE = "unparsable"
    NO_INGREDIENTS = "no_ingredients"


class NutritionalInfo(BaseModel):
    calories: str
    protein: str
    carbs: str
    fats: str


class Recipe(BaseModel):
    """Canonical recipe shape returned to every consumer, whatever produced it."""

    name: str
    have_ingredients: List[str] = Field(alias="haveIngredients")
    need_ingredients: List[str] = Field(alias="needIngredients")
    steps: List[str]
    prep_time: str = Field(alias="prepTime")
    cook_time: str = Field(alias="cookTime")
    servings: int = Field(gt=0)
    difficulty: Difficulty
    nutritional_info: Optional[NutritionalInfo] = Field(None, alias="nutritionalInfo")
    tips: Optional[List[str]] = None
    youtube_url: str = Field(alias="youtubeUrl")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class RecipeFormData(BaseModel):
    """Raw form submission. Anything malformed is coerced toward a default."""

    preferences: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    deficiencies: List[str] = Field(default_factory=list)
    cuisine: Optional[str] = "any"
    ingredients: Optional[str] = ""
    max_cooking_time: Optional[Any] = Field(None, alias="maxCookingTime")
    meal_type: Optional[str] = Field("any", alias="mealType")
    servings: Optional[Any] = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("preferences", "allergies", "deficiencies", mode="before")
    @classmethod
    def coerce_tag_list(cls, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if not isinstance(value, (list, tuple, set)):
            return []
        return [str(v) for v in value if v is not None]

    @field_validator("cuisine", "ingredients", "meal_type", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (list, tuple)):
            return ", ".join(str(v) for v in value if v is not None)
        return None


class Degradation(BaseModel):
    reason: GenerationFailure
    message: str
    notice: str


class GenerationResult(BaseModel):
    """Tagged generation outcome: `degraded` is set when the recipe came from the fallback."""

    recipe: Recipe
    degraded: Optional[Degradation] = None

    @property
    def used_fallback(self) -> bool:
        return self.degraded is not None


class SavedRecipeRead(BaseModel):
    id: int
    user_id: str
    title: str
    description: Optional[str] = None
    ingredients: List[str]
    instructions: List[str]
    cooking_time: Optional[int] = None
    cuisine: Optional[str] = None
    image_url: Optional[str] = None
    servings: Optional[int] = None
    difficulty: Optional[str] = None
    nutritional_info: Optional[NutritionalInfo] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
