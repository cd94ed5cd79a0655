from __future__ import annotations

import logging
import random
from typing import Callable, Optional

from idlerpg.application.services.balance_tables import effective_travel_time, travel_agility_xp
from idlerpg.application.services.location_graph import LocationGraph
from idlerpg.application.services.message_log import MessageLog
from idlerpg.domain.events import ActivityCompleted, SkillLevelledUp, TravelCompleted
from idlerpg.domain.models.activity import IDLE, Crafting, Mining, Smelting, Traveling
from idlerpg.domain.models.game_state import GameState
from idlerpg.domain.models.location import LocationAction
from idlerpg.domain.models.player import Player
from idlerpg.domain.models.recipe import Recipe, RecipeKind
from idlerpg.domain.repositories import RecipeRepository


logger = logging.getLogger(__name__)

_ACTIVITY_BY_KIND = {
    RecipeKind.ORE: Mining,
    RecipeKind.INGOT: Smelting,
    RecipeKind.CRAFTING: Crafting,
}
_ACTION_BY_KIND = {
    RecipeKind.ORE: LocationAction.MINE,
    RecipeKind.INGOT: LocationAction.SMELT,
    RecipeKind.CRAFTING: LocationAction.CRAFT,
}
_KIND_BY_ACTIVITY = {activity: kind for kind, activity in _ACTIVITY_BY_KIND.items()}
_VERB_BY_KIND = {
    RecipeKind.ORE: "mining",
    RecipeKind.INGOT: "smelting",
    RecipeKind.CRAFTING: "crafting",
}


def grant_skill_xp(
    player: Player,
    skill_name: str,
    amount: int,
    *,
    event_publisher: Callable[[object], None] | None = None,
) -> bool:
    """Add XP and announce any level gained; returns True on level-up."""
    skill = player.get_skill(skill_name)
    if skill is None or amount <= 0:
        return False
    before = skill.level
    levelled = skill.add_xp(amount)
    if levelled and callable(event_publisher):
        event_publisher(SkillLevelledUp(skill_name=skill_name, from_level=before, to_level=skill.level))
    return levelled


class ProgressionService:
    """Travel and timed production (mining, smelting, crafting) for a single game state."""

    def __init__(
        self,
        recipe_repo: RecipeRepository,
        location_graph: LocationGraph,
        message_log: MessageLog,
        event_publisher: Callable[[object], None] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.recipe_repo = recipe_repo
        self.location_graph = location_graph
        self.message_log = message_log
        self._event_publisher = event_publisher
        self.rng = rng or random.Random()

    def _publish(self, event: object) -> None:
        if callable(self._event_publisher):
            self._event_publisher(event)

    def _reject(self, message: str) -> bool:
        self.message_log.log(message)
        return False

    def _grant(self, player: Player, skill_name: str, amount: int) -> None:
        grant_skill_xp(player, skill_name, amount, event_publisher=self._event_publisher)

    # travel

    def start_travel(self, state: GameState, destination_id: str) -> bool:
        if state.in_combat:
            return self._reject("You cannot travel while in combat!")
        if state.is_traveling:
            return self._reject("You are already traveling.")
        destination = self.location_graph.get(destination_id)
        if destination is None:
            logger.warning("Travel requested to unknown location %r", destination_id)
            return self._reject("That destination does not exist.")
        if destination.id == state.current_location_id:
            return self._reject(f"You are already at {destination.name}.")

        estimate = self.location_graph.travel_time_between(state.current_location_id, destination.id)
        agility = state.player.skill_level("Agility")
        duration = max(1, effective_travel_time(estimate.base_travel_time, agility))

        self._stop_production(state)
        state.activity = Traveling(
            target_id=destination.id,
            total_duration=duration,
            base_travel_time=estimate.base_travel_time,
        )
        self.message_log.log(f"You begin traveling to {destination.name}...")
        return True

    def _complete_travel(self, state: GameState, activity: Traveling) -> None:
        origin_id = state.current_location_id
        destination = self.location_graph.get(activity.destination_id)
        xp = travel_agility_xp(activity.base_travel_time)

        state.current_location_id = activity.destination_id
        state.activity = IDLE
        if xp > 0:
            self._grant(state.player, "Agility", xp)
        name = destination.name if destination is not None else activity.destination_id
        suffix = f" (+{xp} Agility XP)" if xp > 0 else ""
        self.message_log.log(f"You arrive at {name}.{suffix}")
        self._publish(TravelCompleted(from_location_id=origin_id, to_location_id=activity.destination_id, agility_xp=xp))

    # production

    def start_mining(self, state: GameState, ore_id: str) -> bool:
        return self._start_production(state, RecipeKind.ORE, ore_id)

    def start_smelting(self, state: GameState, ingot_id: str) -> bool:
        return self._start_production(state, RecipeKind.INGOT, ingot_id)

    def start_crafting(self, state: GameState, recipe_id: str) -> bool:
        return self._start_production(state, RecipeKind.CRAFTING, recipe_id)

    def _start_production(self, state: GameState, kind: RecipeKind, recipe_id: str) -> bool:
        verb = _VERB_BY_KIND[kind]
        if state.in_combat:
            return self._reject(f"You cannot start {verb} while in combat!")
        if state.is_traveling:
            return self._reject(f"You cannot start {verb} while traveling.")

        recipe = self.recipe_repo.get(kind, recipe_id)
        if recipe is None:
            logger.warning("Unknown %s recipe %r", kind.value, recipe_id)
            return self._reject(f"Nothing called {recipe_id!r} is known.")

        level = state.player.skill_level(recipe.skill_name)
        if not recipe.meets_level_requirement(level):
            return self._reject(f"You need {recipe.skill_name} level {recipe.level_req} for {recipe.name}.")

        location = self.location_graph.get(state.current_location_id)
        if location is None or not location.has_action(_ACTION_BY_KIND[kind]):
            return self._reject(f"You cannot start {verb} here.")

        inventory = state.player.inventory
        if kind is RecipeKind.ORE:
            if recipe.id not in location.mining_options:
                return self._reject(f"There is no {recipe.name} to mine here.")
            if not inventory.has_space():
                return self._reject("Your inventory is full!")
        else:
            missing = self._missing_ingredient(state, recipe)
            if missing is not None:
                return self._reject(f"You need {missing} to make {recipe.name}.")

        self._stop_production(state)
        state.activity = _ACTIVITY_BY_KIND[kind](target_id=recipe.id, total_duration=recipe.time_required())
        self.message_log.log(f"You start {verb} {recipe.name}...")
        return True

    @staticmethod
    def _missing_ingredient(state: GameState, recipe: Recipe) -> Optional[str]:
        inventory = state.player.inventory
        for ingredient in recipe.ingredients:
            if not inventory.has_item(ingredient.id, ingredient.qty):
                return f"{ingredient.qty}x {ingredient.name}"
        return None

    def _stop_production(self, state: GameState) -> None:
        activity = state.activity
        kind = _KIND_BY_ACTIVITY.get(type(activity))
        if kind is None:
            return
        recipe = self.recipe_repo.get(kind, activity.target_id)
        name = recipe.name if recipe is not None else activity.target_id
        state.activity = IDLE
        self.message_log.log(f"You stop {_VERB_BY_KIND[kind]} {name}.")

    def cancel_activity(self, state: GameState) -> bool:
        if not state.is_busy:
            return False
        if state.is_traveling:
            return self._reject("You cannot turn back mid-journey.")
        self._stop_production(state)
        return True

    # tick

    def tick(self, state: GameState, delta_ms: float) -> bool:
        """Advance the running activity; True when anything progressed."""
        activity = state.activity
        if not activity.is_active or delta_ms <= 0:
            return False
        if isinstance(activity, Traveling):
            if activity.advance(delta_ms):
                self._complete_travel(state, activity)
            return True

        kind = _KIND_BY_ACTIVITY[type(activity)]
        location = self.location_graph.get(state.current_location_id)
        if location is None or not location.has_action(_ACTION_BY_KIND[kind]):
            return False
        if activity.advance(delta_ms):
            self._complete_production(state, kind, activity.target_id)
        return True

    def _complete_production(self, state: GameState, kind: RecipeKind, recipe_id: str) -> None:
        state.activity = IDLE
        recipe = self.recipe_repo.get(kind, recipe_id)
        if recipe is None:
            logger.warning("Finished %s of unknown recipe %r", kind.value, recipe_id)
            self.message_log.log("The work came to nothing.")
            return
        if kind is RecipeKind.ORE:
            self._complete_mining(state, recipe)
        else:
            self._complete_refining(state, recipe)

    def _complete_mining(self, state: GameState, ore: Recipe) -> None:
        player = state.player
        awarded = player.inventory.add_item(ore.id, ore.name, 1)
        self._grant(player, ore.skill_name, ore.xp)
        if awarded:
            self.message_log.log(f"You mined 1x {ore.name}! (+{ore.xp} {ore.skill_name} XP)")
        else:
            self.message_log.log(f"Your inventory is full; the {ore.name} is lost. (+{ore.xp} {ore.skill_name} XP)")
        self._publish(
            ActivityCompleted(kind="mining", target_id=ore.id, success=True, item_awarded=awarded, xp=ore.xp)
        )

    def _complete_refining(self, state: GameState, recipe: Recipe) -> None:
        player = state.player
        verb = _VERB_BY_KIND[recipe.kind]
        missing = self._missing_ingredient(state, recipe)
        if missing is not None:
            self.message_log.log(f"You no longer have {missing} for {recipe.name}.")
            self._publish(
                ActivityCompleted(kind=verb, target_id=recipe.id, success=False, item_awarded=False, xp=0)
            )
            return

        for ingredient in recipe.ingredients:
            player.inventory.remove_item(ingredient.id, ingredient.qty)

        if recipe.success_chance < 1.0 and self.rng.random() >= recipe.success_chance:
            self.message_log.log(f"The ore was impure and you fail to make {recipe.name}.")
            self._publish(
                ActivityCompleted(kind=verb, target_id=recipe.id, success=False, item_awarded=False, xp=0)
            )
            return

        awarded = player.inventory.add_item(recipe.id, recipe.name, 1)
        self._grant(player, recipe.skill_name, recipe.xp)
        if awarded:
            self.message_log.log(f"You made 1x {recipe.name}! (+{recipe.xp} {recipe.skill_name} XP)")
        else:
            self.message_log.log(f"No room for the {recipe.name}; it is lost. (+{recipe.xp} {recipe.skill_name} XP)")
        self._publish(
            ActivityCompleted(kind=verb, target_id=recipe.id, success=True, item_awarded=awarded, xp=recipe.xp)
        )
