from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


DEFAULT_INVENTORY_CAPACITY = 20


@dataclass
class ItemStack:
    id: str
    name: str
    quantity: int = 1

    def __post_init__(self) -> None:
        if int(self.quantity) <= 0:
            raise ValueError("Item stacks must hold a positive quantity")
        self.quantity = int(self.quantity)


@dataclass
class ItemLedger:
    """Quantity-tracked stacks keyed by item id, without a size limit."""

    items: List[ItemStack] = field(default_factory=list)

    def get(self, item_id: str) -> Optional[ItemStack]:
        return next((stack for stack in self.items if stack.id == item_id), None)

    def total_quantity(self) -> int:
        return sum(stack.quantity for stack in self.items)

    def has_item(self, item_id: str, quantity: int = 1) -> bool:
        stack = self.get(item_id)
        return stack is not None and stack.quantity >= int(quantity)

    def quantity_of(self, item_id: str) -> int:
        stack = self.get(item_id)
        return stack.quantity if stack is not None else 0

    def add_item(self, item_id: str, name: str, quantity: int = 1) -> bool:
        quantity = int(quantity)
        if quantity <= 0:
            return False
        existing = self.get(item_id)
        if existing is not None:
            existing.quantity += quantity
        else:
            self.items.append(ItemStack(id=item_id, name=name, quantity=quantity))
        return True

    def remove_item(self, item_id: str, quantity: int = 1) -> bool:
        quantity = int(quantity)
        stack = self.get(item_id)
        if stack is None or quantity <= 0 or stack.quantity < quantity:
            return False
        stack.quantity -= quantity
        if stack.quantity <= 0:
            self.items = [row for row in self.items if row is not stack]
        return True


@dataclass
class Inventory(ItemLedger):
    capacity: int = DEFAULT_INVENTORY_CAPACITY

    def free_space(self) -> int:
        return max(0, int(self.capacity) - self.total_quantity())

    def has_space(self, quantity: int = 1) -> bool:
        return self.total_quantity() + int(quantity) <= int(self.capacity)

    def add_item(self, item_id: str, name: str, quantity: int = 1) -> bool:
        if not self.has_space(quantity):
            return False
        return super().add_item(item_id, name, quantity)


@dataclass
class Bank(ItemLedger):
    gold: int = 0
