import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from recipe_discovery.app.schemas.recipe import Recipe

STATIC_DATA_PATH = Path(__file__).resolve().parents[2] / "static_data"


@lru_cache(maxsize=1)
def _load_sample_recipes(base_path: Path) -> List[Dict[str, Any]]:
    path = base_path / "sample_recipes.json"
    if not path.exists():
        return []
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def list_sample_recipes(limit: Optional[int] = None, base_path: Path = STATIC_DATA_PATH) -> List[Recipe]:
    """Built-in recipes shown to anonymous users and users with nothing saved yet."""
    data = _load_sample_recipes(base_path)
    if limit is not None:
        data = data[:limit]
    return [Recipe.model_validate(item) for item in data]
