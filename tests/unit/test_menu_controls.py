import sys
from pathlib import Path
import unittest
from unittest import mock

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from idlerpg.presentation import menu_controls


class MenuControlTests(unittest.TestCase):
    def test_normalize_menu_key_maps_common_fallback_keys(self) -> None:
        self.assertEqual("UP", menu_controls.normalize_menu_key("w"))
        self.assertEqual("DOWN", menu_controls.normalize_menu_key("s"))
        self.assertEqual("ENTER", menu_controls.normalize_menu_key(""))
        self.assertEqual("ESC", menu_controls.normalize_menu_key("q"))
        self.assertEqual("7", menu_controls.normalize_menu_key("7"))

    def test_arrow_menu_accepts_w_s_navigation_in_fallback_mode(self) -> None:
        with mock.patch.object(menu_controls, "msvcrt", None), mock.patch.object(
            menu_controls, "clear_screen", return_value=None
        ), mock.patch.object(
            menu_controls,
            "read_key",
            side_effect=["s", ""],
        ):
            idx = menu_controls.arrow_menu("Title", ["One", "Two", "Three"])
        self.assertEqual(1, idx)

    def test_arrow_menu_wraps_upwards(self) -> None:
        with mock.patch.object(menu_controls, "clear_screen", return_value=None), mock.patch.object(
            menu_controls, "read_key", side_effect=["w", ""]
        ):
            idx = menu_controls.arrow_menu("Title", ["One", "Two", "Three"])
        self.assertEqual(2, idx)

    def test_arrow_menu_accepts_q_as_escape(self) -> None:
        with mock.patch.object(menu_controls, "msvcrt", None), mock.patch.object(
            menu_controls, "clear_screen", return_value=None
        ), mock.patch.object(
            menu_controls,
            "read_key",
            side_effect=["q"],
        ):
            idx = menu_controls.arrow_menu("Title", ["One", "Two"])
        self.assertEqual(-1, idx)

    def test_arrow_menu_jumps_to_typed_number(self) -> None:
        with mock.patch.object(menu_controls, "clear_screen", return_value=None), mock.patch.object(
            menu_controls, "read_key", side_effect=["9", "3"]
        ):
            idx = menu_controls.arrow_menu("Title", ["One", "Two", "Three"])
        self.assertEqual(2, idx)

    def test_arrow_menu_debounces_rapid_repeat_navigation(self) -> None:
        with mock.patch.object(menu_controls, "clear_screen", return_value=None), mock.patch.object(
            menu_controls, "read_key", side_effect=["s", "s", ""]
        ), mock.patch.object(menu_controls, "time") as fake_time:
            fake_time.monotonic.side_effect = [1.00, 1.03, 1.40]
            idx = menu_controls.arrow_menu("Title", ["One", "Two", "Three"])

        self.assertEqual(1, idx)

    def test_arrow_menu_requires_options(self) -> None:
        with self.assertRaises(ValueError):
            menu_controls.arrow_menu("Title", [])

    def test_read_key_treats_closed_stdin_as_escape(self) -> None:
        with mock.patch.object(menu_controls, "msvcrt", None), mock.patch.object(
            menu_controls.sys, "stdin"
        ) as stdin:
            stdin.readline.return_value = ""
            self.assertEqual("ESC", menu_controls.read_key())
            stdin.readline.return_value = "  2 \n"
            self.assertEqual("2", menu_controls.read_key())

    def test_prompt_amount_defaults_and_rejects_garbage(self) -> None:
        console = mock.Mock()
        console.input.return_value = ""
        self.assertEqual(5, menu_controls.prompt_amount("How many?", default=5, console=console))
        console.input.return_value = "12"
        self.assertEqual(12, menu_controls.prompt_amount("How many?", console=console))
        console.input.return_value = "lots"
        self.assertIsNone(menu_controls.prompt_amount("How many?", console=console))


if __name__ == "__main__":
    unittest.main()
