from pathlib import Path
import logging
import os
import sys

from dotenv import load_dotenv

# Ensure the src directory is on sys.path when running as a script
_SRC_DIR = Path(__file__).resolve().parents[1]
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from idlerpg.bootstrap import create_game_service, frame_interval_seconds
from idlerpg.presentation.main_menu import main_menu


def _configure_logging() -> None:
    level_name = os.getenv("RPG_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _print_help_surface() -> None:
    print("\nHelp:")
    print("- Main menu: use UP/DOWN (or W/S), ENTER to select, ESC/Q to go back.")
    print("- In game: pick Travel, Mine, Smelt, Smith, Bank or Fight from the location menu.")
    print("- Save problems: check RPG_SAVE_PATH / RPG_DATABASE_URL, or set RPG_SAVE_BACKEND=memory.")


def main():
    load_dotenv()
    _configure_logging()
    try:
        game_service = create_game_service()
        main_menu(game_service, frame_interval_s=frame_interval_seconds())
    except KeyboardInterrupt:
        print("\nSession ended.")
    except Exception as exc:
        logging.getLogger(__name__).debug("Unhandled error", exc_info=True)
        print("An unexpected error occurred. The game closed safely.")
        print(f"Reason: {exc}")
        _print_help_surface()


if __name__ == "__main__":
    main()
