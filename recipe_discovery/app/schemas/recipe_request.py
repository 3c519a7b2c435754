import enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

NONE_TAG = "none"
ANY = "any"
DEFAULT_MAX_COOKING_TIME = 60
DEFAULT_SERVINGS = 2


class Preference(str, enum.Enum):
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"
    GLUTEN_FREE = "gluten-free"
    LOW_CARB = "low-carb"
    HIGH_PROTEIN = "high-protein"
    SPICY = "spicy"
    LOW_SODIUM = "low-sodium"


class Allergy(str, enum.Enum):
    DAIRY = "dairy"
    NUTS = "nuts"
    SHELLFISH = "shellfish"
    GLUTEN = "gluten"
    EGG = "egg"
    SOY = "soy"
    FISH = "fish"


class NutritionalFocus(str, enum.Enum):
    IRON = "iron"
    CALCIUM = "calcium"
    PROTEIN = "protein"
    VITAMIN_D = "vitamin-d"
    VITAMIN_C = "vitamin-c"
    OMEGA_3 = "omega-3"
    FIBER = "fiber"


class Cuisine(str, enum.Enum):
    ANY = "any"
    ITALIAN = "italian"
    INDIAN = "indian"
    MEXICAN = "mexican"
    CHINESE = "chinese"
    JAPANESE = "japanese"
    THAI = "thai"
    AMERICAN = "american"
    MEDITERRANEAN = "mediterranean"
    FRENCH = "french"


class MealType(str, enum.Enum):
    ANY = "any"
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    DESSERT = "dessert"
    SNACK = "snack"


class RecipeRequest(BaseModel):
    """Normalized generation input. Built once per submission by the request builder."""

    ingredients: Tuple[str, ...]
    preferences: Tuple[Preference, ...] = ()
    allergies: Tuple[Allergy, ...] = ()
    nutritional_focus: Tuple[NutritionalFocus, ...] = ()
    cuisine: Cuisine = Cuisine.ANY
    meal_type: MealType = MealType.ANY
    max_cooking_time: int = Field(DEFAULT_MAX_COOKING_TIME, gt=0)
    servings: int = Field(DEFAULT_SERVINGS, gt=0)
    no_ingredients: bool = False

    model_config = ConfigDict(frozen=True)

    @field_validator("ingredients")
    @classmethod
    def validate_ingredients(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value:
            raise ValueError("At least one ingredient is required")
        return value

    @property
    def main_ingredient(self) -> str:
        return self.ingredients[0]
