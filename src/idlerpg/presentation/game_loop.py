import time
from typing import Callable

from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table

from idlerpg.application.dtos import GameSnapshotView
from idlerpg.application.services.game_service import GameService
from idlerpg.domain.models.combat import CombatStance
from idlerpg.domain.models.location import LocationAction
from idlerpg.presentation.menu_controls import (
    arrow_menu,
    clear_screen,
    ornate_title,
    prompt_amount,
    prompt_continue,
)


_CONSOLE = Console()
_BORDER_STATUS = "yellow"
_BORDER_LOG = "cyan"
_BORDER_COMBAT = "red"
_BORDER_SHEET = "green"
_BORDER_BANK = "bright_yellow"
_LOG_LINES = 8
DEFAULT_FRAME_INTERVAL_S = 0.1


class FrameClock:
    """Measures real elapsed time between frames in milliseconds."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._last = clock()

    def elapsed_ms(self) -> float:
        now = self._clock()
        delta = max(0.0, now - self._last)
        self._last = now
        return delta * 1000.0


def _bar(ratio: float, width: int = 24) -> ProgressBar:
    return ProgressBar(total=1.0, completed=max(0.0, min(1.0, ratio)), width=width)


def render_status(snapshot: GameSnapshotView) -> Panel:
    vitals = snapshot.vitals
    location = snapshot.location
    header = Table.grid(padding=(0, 1))
    header.add_column(style="bold yellow", justify="right")
    header.add_column(style="white")
    header.add_row("Adventurer", vitals.name)
    header.add_row("HP", f"{vitals.hp}/{vitals.max_hp}")
    header.add_row("Gold", str(vitals.gold))
    if location is not None:
        header.add_row("Location", f"{location.emoji} {location.name}".strip())
    header.add_row("Time", snapshot.time_label)
    activity = snapshot.activity
    if activity.kind != "idle":
        header.add_row(activity.kind.title(), f"{activity.target_name} ({activity.progress_ratio:.0%})")
        header.add_row("", _bar(activity.progress_ratio))
    return Panel.fit(
        header,
        title=ornate_title("Lumbridge Idle"),
        subtitle=f"[dim]{location.description}[/dim]" if location is not None and location.description else None,
        subtitle_align="left",
        border_style=_BORDER_STATUS,
    )


def render_messages(snapshot: GameSnapshotView, limit: int = _LOG_LINES) -> Panel:
    rows = snapshot.messages[-limit:]
    body = "\n".join(rows) if rows else "[dim]Nothing has happened yet.[/dim]"
    return Panel.fit(body, title=ornate_title("Log"), border_style=_BORDER_LOG)


def render_skills(snapshot: GameSnapshotView) -> Table:
    table = Table(title="Skills", title_style="bold yellow", border_style=_BORDER_SHEET)
    table.add_column("Skill", style="bold")
    table.add_column("Level", justify="right")
    table.add_column("XP", justify="right")
    table.add_column("Progress")
    for skill in snapshot.skills:
        table.add_row(
            skill.name,
            str(skill.level),
            f"{int(skill.xp)}/{skill.xp_for_next_level}",
            _bar(skill.progress_ratio, width=16),
        )
    return table


def render_inventory(snapshot: GameSnapshotView) -> Table:
    inventory = snapshot.inventory
    title = f"Inventory ({inventory.used}/{inventory.capacity})"
    table = Table(title=title, title_style="bold yellow", border_style=_BORDER_SHEET, min_width=len(title) + 4)
    table.add_column("Item", style="bold")
    table.add_column("Qty", justify="right")
    for item in inventory.items:
        table.add_row(item.name, str(item.quantity))
    if not inventory.items:
        table.add_row("[dim]Empty[/dim]", "")
    return table


def render_bank(snapshot: GameSnapshotView) -> Table:
    bank = snapshot.bank
    title = f"Bank ({bank.gold} gold)"
    table = Table(title=title, title_style="bold yellow", border_style=_BORDER_BANK, min_width=len(title) + 4)
    table.add_column("Item", style="bold")
    table.add_column("Qty", justify="right")
    for item in bank.items:
        table.add_row(item.name, str(item.quantity))
    if not bank.items:
        table.add_row("[dim]Empty[/dim]", "")
    return table


def render_combat(snapshot: GameSnapshotView) -> Panel:
    combat = snapshot.combat
    if combat is None:
        return Panel.fit("[dim]You are not fighting anything.[/dim]", title=ornate_title("Combat"))
    grid = Table.grid(padding=(0, 1))
    grid.add_column(style="bold red", justify="right")
    grid.add_column(style="white")
    grid.add_row(combat.enemy_name, f"{combat.enemy_hp}/{combat.enemy_max_hp} HP")
    grid.add_row("", _bar(combat.enemy_hp / combat.enemy_max_hp if combat.enemy_max_hp else 0.0))
    grid.add_row("You", f"{snapshot.vitals.hp}/{snapshot.vitals.max_hp} HP")
    grid.add_row("", _bar(snapshot.vitals.hp / snapshot.vitals.max_hp if snapshot.vitals.max_hp else 0.0))
    grid.add_row("Stance", combat.stance.title())
    grid.add_row("Turn", "Yours" if combat.player_turn else f"{combat.enemy_name}'s")
    return Panel.fit(grid, title=ornate_title("Combat"), border_style=_BORDER_COMBAT)


def render_dashboard(snapshot: GameSnapshotView) -> RenderableType:
    return Group(render_status(snapshot), render_messages(snapshot))


class GameLoop:
    """Menu-driven terminal session; real time keeps flowing while menus are open."""

    def __init__(
        self,
        game_service: GameService,
        *,
        console: Console | None = None,
        frame_interval_s: float = DEFAULT_FRAME_INTERVAL_S,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.game = game_service
        self.console = console or _CONSOLE
        self.frame_interval_s = max(0.01, float(frame_interval_s))
        self.frame = FrameClock(clock)
        self._sleep = sleep

    def _tick(self) -> bool:
        return self.game.tick(self.frame.elapsed_ms())

    def _menu(
        self,
        title: str,
        options: list[str],
        footer_hint: str | None = None,
        extra: Callable[[GameSnapshotView], RenderableType] | None = None,
    ) -> int:
        self._tick()
        snapshot = self.game.snapshot()
        header = render_dashboard(snapshot)
        if extra is not None:
            header = Group(header, extra(snapshot))
        return arrow_menu(title, options, footer_hint=footer_hint, header=header, console=self.console)

    def wait_for_activity(self) -> None:
        """Drive ticks with a live progress display until the current activity ends."""
        self.game.set_current_menu("activity")
        try:
            with Live(render_status(self.game.snapshot()), console=self.console, refresh_per_second=10) as live:
                while self.game.state.is_busy:
                    self._sleep(self.frame_interval_s)
                    self._tick()
                    live.update(render_status(self.game.snapshot()))
        except KeyboardInterrupt:
            self.game.cancel_activity()
        self.game.set_current_menu("main")

    def wait_for_enemy_turn(self) -> None:
        while self.game.combat_service.enemy_turn_pending:
            self._sleep(self.frame_interval_s)
            self._tick()

    def run(self) -> None:
        while True:
            self._tick()
            if self.game.state.in_combat:
                self._run_combat()
                continue

            entries = self._root_entries()
            location = self.game.current_location()
            title = location.name if location is not None else "Somewhere"
            choice = self._menu(title, [label for label, _ in entries])
            if choice == -1 or entries[choice][1] is None:
                self.game.save_game()
                return
            entries[choice][1]()

    def _root_entries(self) -> list[tuple[str, Callable[[], None] | None]]:
        entries: list[tuple[str, Callable[[], None] | None]] = [("Travel", self._run_travel)]
        location = self.game.current_location()
        if location is not None and location.parent:
            entries.append(("Go back", self._go_back))
        offers = self.game.location_offers
        if offers(LocationAction.MINE):
            entries.append(("Mine", self._run_mining))
        if offers(LocationAction.SMELT):
            entries.append(("Smelt", self._run_smelting))
        if offers(LocationAction.CRAFT):
            entries.append(("Smith", self._run_crafting))
        if offers(LocationAction.BANK):
            entries.append(("Bank", self._run_bank))
        if location is not None and location.encounters:
            entries.append(("Fight", self._start_fight))
        entries.extend(
            [
                ("Skills & Inventory", self._show_sheet),
                ("Combat Stance", self._choose_stance),
                ("Save", self._save),
                ("Reset Game", self._reset),
                ("Quit", None),
            ]
        )
        return entries

    def _go_back(self) -> None:
        self.game.exit_location()

    def _run_travel(self) -> None:
        location = self.game.location_view()
        if location is None or not location.connections:
            self.game.message_log.log("There is nowhere to go from here.")
            return
        labels = [f"{row.name} ({row.base_travel_time / 1000:.1f}s)" for row in location.connections]
        choice = self._menu("Travel", labels)
        if choice == -1:
            return
        if self.game.travel_to(location.connections[choice].location_id):
            self.wait_for_activity()

    def _run_recipes(self, title: str, recipes, start: Callable[[str], bool]) -> None:
        if not recipes:
            self.game.message_log.log("There is nothing you can make here.")
            return
        labels = []
        for recipe in recipes:
            needs = ", ".join(f"{qty}x {name}" for name, qty in recipe.ingredients.items())
            marker = "" if recipe.meets_level and recipe.has_ingredients else "[dim]✗[/dim] "
            extra = f" • {needs}" if needs else ""
            labels.append(f"{marker}{recipe.name} (lvl {recipe.level_req}, {recipe.xp} xp){extra}")
        choice = self._menu(title, labels)
        if choice == -1:
            return
        if start(recipes[choice].id):
            self.wait_for_activity()

    def _run_mining(self) -> None:
        self._run_recipes("Mine", self.game.list_ores(), self.game.start_mining)

    def _run_smelting(self) -> None:
        self._run_recipes("Smelt", self.game.list_ingots(), self.game.start_smelting)

    def _run_crafting(self) -> None:
        while True:
            search = self.game.state.recipe_search
            recipes = self.game.list_crafting_recipes()
            choice = self._menu(
                "Smith",
                [f"Search: {search or '(all)'}"] + [f"{row.name} (lvl {row.level_req})" for row in recipes],
                footer_hint=f"{len(recipes)} recipes shown",
            )
            if choice == -1:
                return
            if choice == 0:
                self.game.set_recipe_search(self.console.input("[yellow]Filter recipes[/yellow]: "))
                continue
            self._run_recipes("Smith", [recipes[choice - 1]], self.game.start_crafting)
            return

    def _run_bank(self) -> None:
        self.game.set_current_menu("bank")
        while True:
            choice = self._menu(
                "Bank",
                ["Deposit item", "Withdraw item", "Deposit gold", "Withdraw gold"],
                extra=render_bank,
            )
            snapshot = self.game.snapshot()
            if choice == -1:
                break
            if choice in (0, 1):
                items = snapshot.inventory.items if choice == 0 else snapshot.bank.items
                if not items:
                    self.game.message_log.log("There is nothing to move.")
                    continue
                pick = self._menu("Which item?", [f"{row.name} x{row.quantity}" for row in items])
                if pick == -1:
                    continue
                amount = prompt_amount("How many?", default=items[pick].quantity, console=self.console)
                if amount is None:
                    continue
                move = self.game.deposit_item if choice == 0 else self.game.withdraw_item
                move(items[pick].id, amount)
            else:
                amount = prompt_amount("How much gold?", default=0, console=self.console)
                if amount is None:
                    continue
                move = self.game.deposit_gold if choice == 2 else self.game.withdraw_gold
                move(amount)
        self.game.set_current_menu("main")

    def _start_fight(self) -> None:
        self.game.start_combat()

    def _run_combat(self) -> None:
        self.game.set_current_menu("combat")
        while self.game.state.in_combat:
            choice = self._menu("Combat", ["Attack", "Change stance", "Flee"], extra=render_combat)
            if choice == 0:
                self.game.player_attack()
                self.wait_for_enemy_turn()
            elif choice == 1:
                self._choose_stance()
            elif choice in (2, -1):
                self.game.flee_combat()
        self.game.set_current_menu("main")
        prompt_continue(console=self.console)

    def _choose_stance(self) -> None:
        stances = list(CombatStance)
        choice = self._menu("Combat Stance", [stance.value.title() for stance in stances])
        if choice != -1:
            self.game.set_combat_stance(stances[choice])

    def _show_sheet(self) -> None:
        clear_screen()
        snapshot = self.game.snapshot()
        self.console.print(render_skills(snapshot))
        self.console.print(render_inventory(snapshot))
        prompt_continue(console=self.console)

    def _save(self) -> None:
        self.game.save_game()

    def _reset(self) -> None:
        if self._menu("Reset everything?", ["No, keep playing", "Yes, start over"]) == 1:
            self.game.reset_game()


def run_game_loop(game_service: GameService, *, frame_interval_s: float = DEFAULT_FRAME_INTERVAL_S) -> None:
    GameLoop(game_service, frame_interval_s=frame_interval_s).run()
