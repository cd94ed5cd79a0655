from rich.console import Console
from rich.panel import Panel

from idlerpg.application.services.game_service import GameService
from idlerpg.presentation.game_loop import DEFAULT_FRAME_INTERVAL_S, run_game_loop
from idlerpg.presentation.menu_controls import arrow_menu, clear_screen, ornate_title, prompt_continue


_CONSOLE = Console()
_SPLASH_BORDER = "yellow"
_HELP_BORDER = "yellow"
_EXIT_BORDER = "magenta"

def _autosave_line(interval_ms: int) -> str:
    if interval_ms <= 0:
        return "- Saves happen after every bank transaction and when you quit"
    seconds = interval_ms / 1000
    return f"- Saves happen every {seconds:g} seconds and after every bank transaction"


def help_lines(autosave_interval_ms: int) -> list[str]:
    return [
        "[bold]Help & Controls[/bold]",
        "- Move menus: UP/DOWN arrows (or W/S), or type an option number",
        "- Select: ENTER",
        "- Cancel/Back: ESC (or Q)",
        "- Activities keep running in real time; Ctrl+C stops a running job",
        _autosave_line(autosave_interval_ms),
        "- Set RPG_SAVE_BACKEND=memory to play without touching the disk",
    ]


def main_menu(game_service: GameService, *, frame_interval_s: float = DEFAULT_FRAME_INTERVAL_S) -> None:
    options = ["Play", "Help", "Reset Game", "Quit"]
    clear_screen()
    _CONSOLE.print(
        Panel.fit(
            "[bold yellow]LUMBRIDGE IDLE[/bold yellow]",
            border_style=_SPLASH_BORDER,
            title=ornate_title("Welcome"),
        )
    )

    while True:
        choice_idx = arrow_menu("Lumbridge Idle", options)

        if choice_idx == 0:  # Play
            run_game_loop(game_service, frame_interval_s=frame_interval_s)

        elif choice_idx == 1:  # Help
            clear_screen()
            help_text = "\n".join(help_lines(game_service.autosave_interval_ms))
            _CONSOLE.print(Panel.fit(help_text, title=ornate_title("Guidance"), border_style=_HELP_BORDER))
            prompt_continue("Press ENTER to return to the menu...")

        elif choice_idx == 2:  # Reset
            if arrow_menu("Reset everything?", ["No", "Yes, delete my save"]) == 1:
                game_service.reset_game()

        elif choice_idx == 3 or choice_idx == -1:  # Quit or ESC
            game_service.save_game()
            clear_screen()
            _CONSOLE.print(
                Panel.fit(
                    "[bold magenta]Farewell, Adventurer![/bold magenta]",
                    title=ornate_title("Farewell"),
                    border_style=_EXIT_BORDER,
                )
            )
            break
