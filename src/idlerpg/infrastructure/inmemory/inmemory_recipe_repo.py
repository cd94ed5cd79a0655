from typing import Dict, Iterable, List, Optional

from idlerpg.domain.models.recipe import Recipe, RecipeKind
from idlerpg.domain.repositories import RecipeRepository
from idlerpg.infrastructure.inmemory.game_content import CRAFTING_RECIPES, INGOTS, ORES


class InMemoryRecipeRepository(RecipeRepository):
    def __init__(self, recipes: Optional[Iterable[Recipe]] = None) -> None:
        rows = list(recipes) if recipes is not None else [*ORES, *INGOTS, *CRAFTING_RECIPES]
        self._recipes: Dict[RecipeKind, Dict[str, Recipe]] = {kind: {} for kind in RecipeKind}
        for recipe in rows:
            self._recipes[recipe.kind][recipe.id] = recipe

    def get(self, kind: RecipeKind, recipe_id: str) -> Optional[Recipe]:
        return self._recipes[RecipeKind(kind)].get(recipe_id)

    def list_by_kind(self, kind: RecipeKind) -> List[Recipe]:
        return list(self._recipes[RecipeKind(kind)].values())
