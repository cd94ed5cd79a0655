from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from idlerpg.domain.models.enemy import EnemyTemplate
from idlerpg.domain.models.location import Location
from idlerpg.domain.models.recipe import Recipe, RecipeKind


class SaveStoreError(RuntimeError):
    """Storage I/O or serialisation fault inside a save store."""


class LocationRepository(ABC):
    @abstractmethod
    def get(self, location_id: str) -> Optional[Location]:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> List[Location]:
        raise NotImplementedError

    @abstractmethod
    def get_starting_location(self) -> Optional[Location]:
        raise NotImplementedError


class RecipeRepository(ABC):
    @abstractmethod
    def get(self, kind: RecipeKind, recipe_id: str) -> Optional[Recipe]:
        raise NotImplementedError

    @abstractmethod
    def list_by_kind(self, kind: RecipeKind) -> List[Recipe]:
        raise NotImplementedError


class EnemyRepository(ABC):
    @abstractmethod
    def get(self, enemy_id: str) -> Optional[EnemyTemplate]:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> List[EnemyTemplate]:
        raise NotImplementedError


class SaveStore(ABC):
    """Key-value blob store that owns the persisted game state."""

    @abstractmethod
    def load(self) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def save(self, payload: Dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self) -> None:
        raise NotImplementedError
