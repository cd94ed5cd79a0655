from typing import Dict, List, Optional

from idlerpg.domain.models.enemy import EnemyTemplate
from idlerpg.domain.repositories import EnemyRepository
from idlerpg.infrastructure.inmemory.game_content import ENEMIES


class InMemoryEnemyRepository(EnemyRepository):
    def __init__(self, enemies: Optional[Dict[str, EnemyTemplate]] = None) -> None:
        self._enemies = dict(enemies) if enemies is not None else dict(ENEMIES)

    def get(self, enemy_id: str) -> Optional[EnemyTemplate]:
        return self._enemies.get(enemy_id)

    def list_all(self) -> List[EnemyTemplate]:
        return list(self._enemies.values())
