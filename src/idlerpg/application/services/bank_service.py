from __future__ import annotations

from typing import Callable

from idlerpg.application.services.message_log import MessageLog
from idlerpg.domain.events import BankTransactionCompleted
from idlerpg.domain.models.game_state import GameState


class BankService:
    """Moves items and gold between the player and the bank.

    Requests larger than what the source holds are clamped rather than
    refused; only empty sources and non-positive amounts are rejected.
    """

    def __init__(self, message_log: MessageLog, event_publisher: Callable[[object], None] | None = None) -> None:
        self.message_log = message_log
        self._event_publisher = event_publisher

    def _reject(self, message: str) -> bool:
        self.message_log.log(message)
        return False

    def _completed(self, action: str, item_id: str | None, amount: int) -> bool:
        if callable(self._event_publisher):
            self._event_publisher(BankTransactionCompleted(action=action, item_id=item_id, amount=amount))
        return True

    def _usable(self, state: GameState) -> bool:
        return not state.in_combat

    def deposit_item(self, state: GameState, item_id: str, quantity: int) -> bool:
        if not self._usable(state):
            return self._reject("You cannot bank while in combat!")
        inventory = state.player.inventory
        stack = inventory.get(item_id)
        if stack is None:
            return self._reject("You don't have that item.")
        if int(quantity) <= 0:
            return self._reject("Enter an amount greater than zero.")
        amount = min(int(quantity), stack.quantity)
        name = stack.name
        inventory.remove_item(item_id, amount)
        state.bank.add_item(item_id, name, amount)
        self.message_log.log(f"Deposited {amount}x {name}.")
        return self._completed("deposit_item", item_id, amount)

    def withdraw_item(self, state: GameState, item_id: str, quantity: int) -> bool:
        if not self._usable(state):
            return self._reject("You cannot bank while in combat!")
        stack = state.bank.get(item_id)
        if stack is None:
            return self._reject("That item is not in your bank.")
        if int(quantity) <= 0:
            return self._reject("Enter an amount greater than zero.")
        inventory = state.player.inventory
        free = inventory.free_space()
        if free <= 0:
            return self._reject("Your inventory is full!")
        amount = min(int(quantity), stack.quantity, free)
        name = stack.name
        state.bank.remove_item(item_id, amount)
        inventory.add_item(item_id, name, amount)
        self.message_log.log(f"Withdrew {amount}x {name}.")
        return self._completed("withdraw_item", item_id, amount)

    def deposit_gold(self, state: GameState, amount: int) -> bool:
        if not self._usable(state):
            return self._reject("You cannot bank while in combat!")
        player = state.player
        if player.gold <= 0:
            return self._reject("You have no gold to deposit.")
        if int(amount) <= 0:
            return self._reject("Enter an amount greater than zero.")
        moved = min(int(amount), player.gold)
        player.gold -= moved
        state.bank.gold += moved
        self.message_log.log(f"Deposited {moved} gold.")
        return self._completed("deposit_gold", None, moved)

    def withdraw_gold(self, state: GameState, amount: int) -> bool:
        if not self._usable(state):
            return self._reject("You cannot bank while in combat!")
        bank = state.bank
        if bank.gold <= 0:
            return self._reject("Your bank has no gold.")
        if int(amount) <= 0:
            return self._reject("Enter an amount greater than zero.")
        moved = min(int(amount), bank.gold)
        bank.gold -= moved
        state.player.gold += moved
        self.message_log.log(f"Withdrew {moved} gold.")
        return self._completed("withdraw_gold", None, moved)
