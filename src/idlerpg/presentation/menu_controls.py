import os
import sys
import time

from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.panel import Panel

try:  # Windows-specific keyboard handling
    import msvcrt  # type: ignore
except ImportError:  # pragma: no cover - non-Windows terminals read whole lines
    msvcrt = None


_CONSOLE = Console()
_KEY_REPEAT_DEBOUNCE_SECONDS = 0.08
_NAV_KEYS = {"UP", "DOWN", "LEFT", "RIGHT", "ENTER", "ESC"}


def ornate_title(title: str) -> str:
    core = str(title or "").strip() or "Menu"
    return f"[bold yellow]{core}[/bold yellow]"


def clear_screen() -> None:
    """Clear the console in a basic cross-platform way."""

    os.system("cls" if os.name == "nt" else "clear")


def _read_key_windows():
    ch = msvcrt.getch()

    if ch in (b"\x00", b"\xe0"):
        arrows = {b"H": "UP", b"P": "DOWN", b"K": "LEFT", b"M": "RIGHT"}
        return arrows.get(msvcrt.getch())

    if ch in (b"\r", b"\n"):
        return "ENTER"
    if ch == b"\x1b":
        return "ESC"

    try:
        return ch.decode("utf-8")
    except UnicodeDecodeError:
        return None


def read_key():
    """Read one key on Windows, otherwise one line from stdin."""

    if msvcrt is not None:
        return _read_key_windows()

    line = sys.stdin.readline()
    if line == "":
        return "ESC"
    return line.strip()


def normalize_menu_key(key):
    if key is None or not isinstance(key, str):
        return key
    if key in _NAV_KEYS:
        return key

    mapping = {
        "w": "UP",
        "s": "DOWN",
        "a": "LEFT",
        "d": "RIGHT",
        "": "ENTER",
        "enter": "ENTER",
        "q": "ESC",
        "esc": "ESC",
    }
    return mapping.get(key.lower().strip(), key)


def _menu_panel(title: str, options: list[str], index: int, footer_hint: str | None) -> Panel:
    body_lines: list[str] = []
    for idx, option in enumerate(options):
        if idx == index:
            body_lines.append(f"[bold black on yellow] ▶ {option} [/bold black on yellow]")
        else:
            body_lines.append(f"[white]  {option}[/white]")
    if footer_hint:
        body_lines.append("")
        body_lines.append(f"[yellow]{footer_hint}[/yellow]")
    return Panel.fit(
        "\n".join(body_lines),
        title=ornate_title(title),
        border_style="yellow",
        subtitle="[dim]↑/↓ or W/S • Enter Confirm • Esc/Q Back • 1-9 Jump[/dim]",
        subtitle_align="left",
        padding=(0, 1),
    )


def arrow_menu(
    title: str,
    options: list[str],
    footer_hint: str | None = None,
    header: RenderableType | None = None,
    console: Console | None = None,
) -> int:
    """Render a vertical menu controlled by arrow keys.

    Returns the selected option index, or -1 if the user presses ESC.
    Typing an option number selects it directly.
    """

    if not options:
        raise ValueError("arrow_menu requires at least one option")

    console = console or _CONSOLE
    selected = 0
    last_nav_at = 0.0

    def _frame(index: int) -> RenderableType:
        panel = _menu_panel(title, options, index, footer_hint)
        return Group(header, panel) if header is not None else panel

    clear_screen()
    with Live(_frame(selected), console=console, refresh_per_second=30, transient=True) as live:
        while True:
            key = normalize_menu_key(read_key())
            now = time.monotonic()
            if key in ("UP", "DOWN"):
                if now - last_nav_at < _KEY_REPEAT_DEBOUNCE_SECONDS:
                    continue
                last_nav_at = now
                step = -1 if key == "UP" else 1
                selected = (selected + step) % len(options)
                live.update(_frame(selected), refresh=True)
                continue
            if key == "ENTER":
                return selected
            if key == "ESC":
                return -1
            if isinstance(key, str) and key.isdigit() and 1 <= int(key) <= len(options):
                return int(key) - 1


def prompt_amount(label: str, *, default: int = 1, console: Console | None = None) -> int | None:
    """Ask for a whole number; blank input takes the default, anything else unreadable gives None."""

    console = console or _CONSOLE
    raw = console.input(f"[yellow]{label}[/yellow] [dim](default {default})[/dim]: ").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        console.print("[red]Please enter a whole number.[/red]")
        return None


def prompt_continue(message: str = "Press ENTER to continue...", console: Console | None = None) -> None:
    console = console or _CONSOLE
    console.input(f"[dim]{message}[/dim]")
    clear_screen()
