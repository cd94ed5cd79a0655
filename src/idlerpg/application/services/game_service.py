from __future__ import annotations

import logging
import random
from typing import List, Optional

from idlerpg.application.dtos import ActivityView, GameSnapshotView, LocationView, RecipeView
from idlerpg.application.mappers.game_service_mapper import (
    to_activity_view,
    to_bank_view,
    to_combat_view,
    to_inventory_view,
    to_location_view,
    to_recipe_view,
    to_skill_views,
    to_vitals_view,
)
from idlerpg.application.services.balance_tables import (
    AUTOSAVE_INTERVAL_MS,
    ENEMY_TURN_DELAY_MS,
    MS_PER_GAME_MINUTE,
    format_game_time,
)
from idlerpg.application.services.bank_service import BankService
from idlerpg.application.services.combat_service import CombatService
from idlerpg.application.services.event_bus import EventBus
from idlerpg.application.services.location_graph import LocationGraph
from idlerpg.application.services.message_log import MessageLog
from idlerpg.application.services.progression_service import ProgressionService
from idlerpg.application.services.save_codec import (
    SAVE_VERSION,
    SaveFormatError,
    decode_game_state,
    encode_game_state,
)
from idlerpg.application.services.scheduler import DeferredTaskScheduler
from idlerpg.domain.events import BankTransactionCompleted, GameReset, GameSaved, SkillLevelledUp
from idlerpg.domain.models.activity import IDLE, Crafting, Mining, Smelting, Traveling
from idlerpg.domain.models.combat import CombatStance
from idlerpg.domain.models.game_state import DEFAULT_MENU, GameState
from idlerpg.domain.models.location import Location, LocationAction
from idlerpg.domain.models.player import Player
from idlerpg.domain.models.recipe import Recipe, RecipeKind
from idlerpg.domain.repositories import EnemyRepository, LocationRepository, RecipeRepository, SaveStore


logger = logging.getLogger(__name__)

_KIND_BY_ACTIVITY = {Mining: RecipeKind.ORE, Smelting: RecipeKind.INGOT, Crafting: RecipeKind.CRAFTING}
_ACTION_BY_ACTIVITY = {Mining: LocationAction.MINE, Smelting: LocationAction.SMELT, Crafting: LocationAction.CRAFT}


class GameService:
    """Owns the game state and routes UI commands to the progression, combat and bank services.

    Everything runs on the caller's thread: ``tick`` is fed elapsed milliseconds
    by the front end and command methods return ``False`` instead of raising
    when an action is refused.
    """

    def __init__(
        self,
        location_repo: LocationRepository,
        recipe_repo: RecipeRepository,
        enemy_repo: EnemyRepository,
        save_store: SaveStore,
        *,
        message_log: MessageLog | None = None,
        event_bus: EventBus | None = None,
        rng: random.Random | None = None,
        scheduler: DeferredTaskScheduler | None = None,
        autosave_interval_ms: int = AUTOSAVE_INTERVAL_MS,
        enemy_turn_delay_ms: int = ENEMY_TURN_DELAY_MS,
    ) -> None:
        self.location_repo = location_repo
        self.recipe_repo = recipe_repo
        self.enemy_repo = enemy_repo
        self.save_store = save_store
        self.message_log = message_log or MessageLog()
        self.event_bus = event_bus or EventBus()
        self.rng = rng or random.Random()
        self.scheduler = scheduler or DeferredTaskScheduler()
        self.autosave_interval_ms = max(0, int(autosave_interval_ms))
        self._since_autosave_ms = 0.0

        self.location_graph = LocationGraph(location_repo)
        publish = self.event_bus.publish
        self.progression_service = ProgressionService(
            recipe_repo,
            self.location_graph,
            self.message_log,
            event_publisher=publish,
            rng=self.rng,
        )
        self.combat_service = CombatService(
            enemy_repo,
            self.location_graph,
            self.scheduler,
            self.message_log,
            event_publisher=publish,
            rng=self.rng,
            enemy_turn_delay_ms=enemy_turn_delay_ms,
        )
        self.bank_service = BankService(self.message_log, event_publisher=publish)

        self.event_bus.subscribe(SkillLevelledUp, self._on_skill_levelled_up, priority=10)
        self.event_bus.subscribe(BankTransactionCompleted, self._on_bank_transaction, priority=50)

        self.state = self._fresh_state()

    def set_seed(self, seed: int | str) -> None:
        self.rng.seed(seed)

    def _fresh_state(self) -> GameState:
        return GameState(player=Player(), current_location_id=self.location_graph.starting_location_id())

    @property
    def player(self) -> Player:
        return self.state.player

    def current_location(self) -> Optional[Location]:
        return self.location_graph.get(self.state.current_location_id)

    # event handlers

    def _on_skill_levelled_up(self, event: SkillLevelledUp) -> None:
        self.message_log.log(f"Congratulations! Your {event.skill_name} level is now {event.to_level}.")

    def _on_bank_transaction(self, event: BankTransactionCompleted) -> None:
        self._persist()

    # frame update

    def tick(self, delta_ms: float) -> bool:
        """Advance game time by one frame; True when something visible changed."""
        if delta_ms <= 0:
            return False
        changed = self.scheduler.advance(delta_ms) > 0
        changed = self.progression_service.tick(self.state, delta_ms) or changed
        self.state.time_minutes += delta_ms / MS_PER_GAME_MINUTE

        if self.autosave_interval_ms:
            self._since_autosave_ms += delta_ms
            if self._since_autosave_ms >= self.autosave_interval_ms:
                self._since_autosave_ms = 0.0
                self._persist()
        return changed

    # movement

    def travel_to(self, location_id: str) -> bool:
        return self.progression_service.start_travel(self.state, location_id)

    def exit_location(self) -> bool:
        state = self.state
        if state.in_combat:
            self.message_log.log("You cannot leave while in combat!")
            return False
        if state.is_traveling:
            self.message_log.log("You are already traveling.")
            return False
        target_id = self.location_graph.exit_target(state.current_location_id)
        if target_id == state.current_location_id:
            self.message_log.log("There is nowhere further to go back to.")
            return False
        if state.is_busy:
            self.progression_service.cancel_activity(state)
        state.current_location_id = target_id
        target = self.location_graph.get(target_id)
        self.message_log.log(f"You head back to {target.name if target else target_id}.")
        return True

    # production

    def start_mining(self, ore_id: str) -> bool:
        return self.progression_service.start_mining(self.state, ore_id)

    def start_smelting(self, ingot_id: str) -> bool:
        return self.progression_service.start_smelting(self.state, ingot_id)

    def start_crafting(self, recipe_id: str) -> bool:
        return self.progression_service.start_crafting(self.state, recipe_id)

    def cancel_activity(self) -> bool:
        return self.progression_service.cancel_activity(self.state)

    # combat

    def start_combat(self) -> bool:
        return self.combat_service.start_combat(self.state)

    def set_combat_stance(self, stance: CombatStance | str) -> bool:
        return self.combat_service.set_combat_stance(self.state, stance)

    def player_attack(self) -> bool:
        return self.combat_service.player_attack(self.state)

    def flee_combat(self) -> bool:
        return self.combat_service.flee_combat(self.state)

    # bank

    def deposit_item(self, item_id: str, quantity: int) -> bool:
        return self.bank_service.deposit_item(self.state, item_id, quantity)

    def withdraw_item(self, item_id: str, quantity: int) -> bool:
        return self.bank_service.withdraw_item(self.state, item_id, quantity)

    def deposit_gold(self, amount: int) -> bool:
        return self.bank_service.deposit_gold(self.state, amount)

    def withdraw_gold(self, amount: int) -> bool:
        return self.bank_service.withdraw_gold(self.state, amount)

    # ui state

    def set_current_menu(self, menu: str) -> None:
        self.state.current_menu = str(menu or DEFAULT_MENU)

    def set_recipe_search(self, text: str) -> None:
        self.state.recipe_search = str(text or "").strip()

    def list_ores(self) -> List[RecipeView]:
        location = self.current_location()
        options = location.mining_options if location is not None else []
        ores = [self.recipe_repo.get(RecipeKind.ORE, ore_id) for ore_id in options]
        return [to_recipe_view(ore, self.player) for ore in ores if ore is not None]

    def list_ingots(self) -> List[RecipeView]:
        return [to_recipe_view(recipe, self.player) for recipe in self.recipe_repo.list_by_kind(RecipeKind.INGOT)]

    def list_crafting_recipes(self) -> List[RecipeView]:
        needle = self.state.recipe_search.lower()
        rows = []
        for recipe in self.recipe_repo.list_by_kind(RecipeKind.CRAFTING):
            haystack = " ".join(filter(None, (recipe.name, recipe.tier, recipe.item_type))).lower()
            if needle and needle not in haystack:
                continue
            rows.append(to_recipe_view(recipe, self.player))
        return rows

    # persistence

    def _persist(self) -> bool:
        try:
            self.save_store.save(encode_game_state(self.state))
        except Exception:
            logger.exception("Saving game failed")
            self.message_log.log("Failed to save game.")
            return False
        self.event_bus.publish(GameSaved(version=SAVE_VERSION))
        return True

    def save_game(self) -> bool:
        saved = self._persist()
        if saved:
            self._since_autosave_ms = 0.0
            self.message_log.log("Game saved.")
        return saved

    def load_game(self) -> bool:
        """Restore the stored game; a broken save falls back to a fresh game."""
        try:
            payload = self.save_store.load()
            if payload is None:
                return False
            state = decode_game_state(payload, starting_location_id=self.location_graph.starting_location_id())
        except SaveFormatError as exc:
            logger.warning("Saved game is unreadable: %s", exc)
            return self._load_failed()
        except Exception:
            logger.exception("Loading saved game failed")
            return self._load_failed()

        self._repair_references(state)
        self.combat_service.cancel_enemy_turn()
        self.scheduler.cancel_all()
        self.state = state
        self._since_autosave_ms = 0.0
        self.message_log.log("Game loaded.")
        return True

    def _load_failed(self) -> bool:
        self._restart()
        self.message_log.log("Failed to load saved game. Starting fresh.")
        return False

    def _repair_references(self, state: GameState) -> None:
        if self.location_graph.get(state.current_location_id) is None:
            logger.warning("Saved location %r is unknown; moving player to the start", state.current_location_id)
            state.current_location_id = self.location_graph.starting_location_id()

        activity = state.activity
        if isinstance(activity, Traveling):
            known = self.location_graph.get(activity.target_id) is not None
        elif activity.is_active:
            known = self.recipe_repo.get(_KIND_BY_ACTIVITY[type(activity)], activity.target_id) is not None
        else:
            known = True
        if not known:
            logger.warning("Saved %s activity targets unknown id %r; resetting to idle", activity.kind.value, activity.target_id)
            state.activity = IDLE
            return

        action = _ACTION_BY_ACTIVITY.get(type(activity))
        location = self.location_graph.get(state.current_location_id)
        if action is not None and not location.has_action(action):
            logger.warning(
                "Saved %s activity cannot run at %r; resetting to idle", activity.kind.value, state.current_location_id
            )
            state.activity = IDLE

    def _restart(self) -> None:
        self.combat_service.cancel_enemy_turn()
        self.scheduler.cancel_all()
        self.state = self._fresh_state()
        self._since_autosave_ms = 0.0

    def reset_game(self) -> None:
        """Discard the stored save and start over."""
        try:
            self.save_store.delete()
        except Exception:
            logger.exception("Deleting saved game failed")
        self._restart()
        self.message_log.clear()
        self.message_log.log("Welcome to Lumbridge. Your adventure begins anew.")
        self.event_bus.publish(GameReset())

    # views

    def _activity_target_name(self) -> str:
        activity = self.state.activity
        if isinstance(activity, Traveling):
            location = self.location_graph.get(activity.target_id)
            return location.name if location is not None else activity.target_id
        kind = _KIND_BY_ACTIVITY.get(type(activity))
        if kind is None:
            return ""
        recipe: Optional[Recipe] = self.recipe_repo.get(kind, activity.target_id)
        return recipe.name if recipe is not None else activity.target_id

    def activity_view(self) -> ActivityView:
        return to_activity_view(self.state.activity, target_name=self._activity_target_name())

    def location_view(self) -> Optional[LocationView]:
        location = self.current_location()
        if location is None:
            return None

        def name_of(location_id: str) -> str:
            target = self.location_graph.get(location_id)
            return target.name if target is not None else location_id

        return to_location_view(location, name_of=name_of)

    def snapshot(self) -> GameSnapshotView:
        state = self.state
        return GameSnapshotView(
            vitals=to_vitals_view(state.player),
            skills=to_skill_views(state.player),
            inventory=to_inventory_view(state.player.inventory),
            bank=to_bank_view(state.bank),
            location=self.location_view(),
            activity=self.activity_view(),
            combat=to_combat_view(state.combat, state.combat_stance),
            stance=state.combat_stance.value,
            time_minutes=state.time_minutes,
            time_label=format_game_time(state.time_minutes),
            current_menu=state.current_menu,
            recipe_search=state.recipe_search,
            messages=self.message_log.entries(),
        )

    def location_offers(self, action: LocationAction | str) -> bool:
        location = self.current_location()
        return location is not None and location.has_action(action)
