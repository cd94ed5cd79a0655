from __future__ import annotations

import logging
import random
from typing import Callable, Optional

from idlerpg.application.services.balance_tables import (
    ENEMY_TURN_DELAY_MS,
    MINIMUM_DAMAGE,
    PLAYER_HIT_MAX,
    PLAYER_HIT_MIN,
    DEFENSE_XP_PER_DAMAGE_TAKEN,
    controlled_stance_xp,
    hitpoints_xp,
    stance_xp,
)
from idlerpg.application.services.location_graph import LocationGraph
from idlerpg.application.services.message_log import MessageLog
from idlerpg.application.services.progression_service import grant_skill_xp
from idlerpg.application.services.scheduler import DeferredTaskScheduler, ScheduledTask
from idlerpg.domain.events import CombatEnded, CombatStarted
from idlerpg.domain.models.combat import CombatOutcome, CombatPhase, CombatSession, CombatStance
from idlerpg.domain.models.game_state import GameState
from idlerpg.domain.repositories import EnemyRepository


logger = logging.getLogger(__name__)

_SKILL_BY_STANCE = {
    CombatStance.ACCURATE: "Attack",
    CombatStance.AGGRESSIVE: "Strength",
    CombatStance.DEFENSIVE: "Defense",
}
_CONTROLLED_SKILLS = ("Attack", "Strength", "Defense")


class CombatService:
    """Turn-based fights against one enemy; the enemy's reply is a deferred task."""

    def __init__(
        self,
        enemy_repo: EnemyRepository,
        location_graph: LocationGraph,
        scheduler: DeferredTaskScheduler,
        message_log: MessageLog,
        event_publisher: Callable[[object], None] | None = None,
        rng: random.Random | None = None,
        enemy_turn_delay_ms: int = ENEMY_TURN_DELAY_MS,
    ) -> None:
        self.enemy_repo = enemy_repo
        self.location_graph = location_graph
        self.scheduler = scheduler
        self.message_log = message_log
        self._event_publisher = event_publisher
        self.rng = rng or random.Random()
        self.enemy_turn_delay_ms = max(0, int(enemy_turn_delay_ms))
        self._enemy_turn_task: Optional[ScheduledTask] = None

    def _publish(self, event: object) -> None:
        if callable(self._event_publisher):
            self._event_publisher(event)

    def _reject(self, message: str) -> bool:
        self.message_log.log(message)
        return False

    @property
    def enemy_turn_pending(self) -> bool:
        return self._enemy_turn_task is not None and self._enemy_turn_task.pending

    def cancel_enemy_turn(self) -> None:
        if self._enemy_turn_task is not None:
            self._enemy_turn_task.cancel()
        self._enemy_turn_task = None

    def start_combat(self, state: GameState) -> bool:
        if state.in_combat:
            return self._reject("You are already in combat!")
        if state.is_busy:
            return self._reject("You are too busy to fight right now.")
        location = self.location_graph.get(state.current_location_id)
        enemy_id = self.location_graph.weighted_random_encounter(location, self.rng)
        if enemy_id is None:
            return self._reject("There is nothing to fight here.")
        template = self.enemy_repo.get(enemy_id)
        if template is None:
            logger.warning("Encounter table of %r references unknown enemy %r", state.current_location_id, enemy_id)
            return self._reject("There is nothing to fight here.")

        state.combat = CombatSession(enemy=template.spawn())
        self.message_log.log(f"A {template.name} attacks you!")
        self._publish(CombatStarted(enemy_id=template.id, location_id=state.current_location_id))
        return True

    def set_combat_stance(self, state: GameState, stance: CombatStance | str) -> bool:
        chosen = CombatStance.normalize(stance)
        if chosen is None:
            return self._reject(f"Unknown combat stance {stance!r}.")
        if state.combat is not None and state.combat.phase is CombatPhase.ENEMY_TURN:
            return self._reject("You cannot change stance during the enemy's turn.")
        state.combat_stance = chosen
        self.message_log.log(f"Combat stance set to {chosen.value}.")
        return True

    def player_attack(self, state: GameState) -> bool:
        session = state.combat
        if session is None or session.is_over:
            return self._reject("You are not in combat.")
        if not session.player_turn:
            return self._reject("Wait for your turn!")

        enemy = session.enemy
        roll = self.rng.randint(PLAYER_HIT_MIN, PLAYER_HIT_MAX)
        damage = max(MINIMUM_DAMAGE, roll - enemy.defense)
        enemy.take_damage(damage)
        self._award_attack_xp(state, damage)
        self.message_log.log(f"You hit the {enemy.name} for {damage} damage.")

        if not enemy.is_alive():
            self._victory(state)
            return True

        session.phase = CombatPhase.ENEMY_TURN
        self._enemy_turn_task = self.scheduler.schedule(
            self.enemy_turn_delay_ms,
            lambda: self.enemy_attack(state),
            label="enemy_attack",
        )
        return True

    def _award_attack_xp(self, state: GameState, damage: int) -> None:
        player = state.player
        if state.combat_stance is CombatStance.CONTROLLED:
            share = controlled_stance_xp(damage)
            for skill_name in _CONTROLLED_SKILLS:
                grant_skill_xp(player, skill_name, share, event_publisher=self._event_publisher)
        else:
            grant_skill_xp(
                player,
                _SKILL_BY_STANCE[state.combat_stance],
                stance_xp(damage),
                event_publisher=self._event_publisher,
            )
        grant_skill_xp(player, "Hitpoints", hitpoints_xp(damage), event_publisher=self._event_publisher)

    def enemy_attack(self, state: GameState) -> bool:
        """Resolve the enemy's counterattack; normally fired by the scheduler."""
        self._enemy_turn_task = None
        session = state.combat
        if session is None or session.phase is not CombatPhase.ENEMY_TURN:
            return False

        enemy = session.enemy
        damage = max(MINIMUM_DAMAGE, self.rng.randint(1, max(1, enemy.attack)))
        player = state.player
        player.take_damage(damage)
        grant_skill_xp(player, "Defense", damage * DEFENSE_XP_PER_DAMAGE_TAKEN, event_publisher=self._event_publisher)
        self.message_log.log(f"The {enemy.name} hits you for {damage} damage.")

        if not player.is_alive():
            self._defeat(state)
            return True
        session.phase = CombatPhase.PLAYER_TURN
        return True

    def flee_combat(self, state: GameState) -> bool:
        session = state.combat
        if session is None or session.is_over:
            return self._reject("You are not in combat.")
        origin_id = state.current_location_id
        self._end(state, CombatOutcome.FLED)
        state.current_location_id = self.location_graph.exit_target(origin_id)
        destination = self.location_graph.get(state.current_location_id)
        name = destination.name if destination is not None else state.current_location_id
        self.message_log.log(f"You flee from the {session.enemy.name} to {name}.")
        return True

    def _victory(self, state: GameState) -> None:
        session = state.combat
        enemy = session.enemy
        self.message_log.log(f"You defeated the {enemy.name}!")
        inventory = state.player.inventory
        for entry in enemy.loot:
            if self.rng.random() >= entry.chance:
                continue
            if inventory.add_item(entry.id, entry.name, 1):
                self.message_log.log(f"The {enemy.name} dropped 1x {entry.name}.")
            else:
                self.message_log.log(f"Your inventory is full; the {entry.name} is left behind.")
        self._end(state, CombatOutcome.VICTORY)

    def _defeat(self, state: GameState) -> None:
        enemy_name = state.combat.enemy.name
        self._end(state, CombatOutcome.DEFEAT)
        state.player.heal_full()
        state.current_location_id = self.location_graph.starting_location_id()
        respawn = self.location_graph.get(state.current_location_id)
        name = respawn.name if respawn is not None else state.current_location_id
        self.message_log.log(f"You were defeated by the {enemy_name}. You wake up in {name}.")

    def _end(self, state: GameState, outcome: CombatOutcome) -> None:
        self.cancel_enemy_turn()
        session = state.combat
        if session is None:
            return
        session.phase = CombatPhase.ENDED
        session.outcome = outcome
        state.combat = None
        self._publish(
            CombatEnded(
                enemy_id=session.enemy.template_id,
                outcome=outcome.value,
                location_id=state.current_location_id,
            )
        )
