"""
Tests for the terminal prompts and the probability help table.

Run with: python3 tests/test_console/test_prompts.py
"""

import sys
import unittest
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from console.terminal import ConsolePrompts, UserExit, render_probability_table
from dicegame.engine import Dice, ExchangeCancelledError


class ScriptedConsole:
    """Feeds scripted answers and captures output lines."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.lines = []

    def input(self, prompt):
        return self.answers.pop(0)

    def output(self, text=""):
        self.lines.append(text)

    def prompts(self):
        return ConsolePrompts(input_fn=self.input, output_fn=self.output)

    @property
    def text(self):
        return "\n".join(self.lines)


DICE = [Dice.parse("2,2,4,4,9,9"), Dice.parse("1,1,6,6,8,8"), Dice.parse("3,3,5,5,7,7")]


class TestSolicit(unittest.TestCase):
    """Counterparty input from the terminal."""

    def test_returns_value_in_range(self):
        console = ScriptedConsole(["4"])
        self.assertEqual(console.prompts().solicit(0, 5), 4)
        self.assertIn("between 0 and 5", console.text)

    def test_reprompts_on_bad_input(self):
        console = ScriptedConsole(["abc", "7", "-1", " 2 "])
        self.assertEqual(console.prompts().solicit(0, 5), 2)
        self.assertEqual(console.text.count("Invalid input"), 3)

    def test_exit_cancels_exchange(self):
        console = ScriptedConsole(["x"])
        with self.assertRaises(ExchangeCancelledError):
            console.prompts().solicit(0, 5)

    def test_publish_and_disclose(self):
        console = ScriptedConsole([])
        prompts = console.prompts()
        prompts.publish("abc123")
        prompts.disclose(b"\xab\xcd", 3)
        self.assertEqual(console.lines, ["HMAC: abc123", "Computer value: 3 (KEY=ABCD)"])


class TestChooseDice(unittest.TestCase):
    """Dice menu with help and exit."""

    def test_select_by_index(self):
        console = ScriptedConsole(["1"])
        self.assertEqual(console.prompts().choose_dice(DICE), DICE[1])
        self.assertIn("0 - 2,2,4,4,9,9", console.lines)

    def test_invalid_selection_reprompts(self):
        console = ScriptedConsole(["3", "one", "0"])
        self.assertEqual(console.prompts().choose_dice(DICE), DICE[0])
        self.assertEqual(console.text.count("Invalid selection"), 2)

    def test_help_shows_table(self):
        console = ScriptedConsole(["?", "2"])
        choice = console.prompts().choose_dice(DICE, help_text=lambda: "THE TABLE")
        self.assertEqual(choice, DICE[2])
        self.assertIn("THE TABLE", console.lines)

    def test_help_unavailable_without_table(self):
        console = ScriptedConsole(["?", "0"])
        console.prompts().choose_dice(DICE)
        self.assertIn("Invalid selection. Try again.", console.lines)

    def test_exit(self):
        console = ScriptedConsole(["X"])
        with self.assertRaises(UserExit):
            console.prompts().choose_dice(DICE)

    def test_confirm(self):
        self.assertTrue(ScriptedConsole(["Y"]).prompts().confirm("Again?"))
        self.assertFalse(ScriptedConsole(["n"]).prompts().confirm("Again?"))


class TestHelpTable(unittest.TestCase):
    """Probability table rendering."""

    def test_table_contents(self):
        table = render_probability_table(DICE)
        self.assertTrue(table.startswith("Probability of the win for the user"))
        self.assertIn("User dice \\ Computer dice", table)
        self.assertIn("0.5556", table)
        self.assertIn("- (0.3333)", table)

    def test_precision(self):
        table = render_probability_table(DICE, precision=2)
        self.assertIn("0.56", table)
        self.assertNotIn("0.5556", table)

    def test_row_per_dice(self):
        table = render_probability_table(DICE, table_format="plain")
        lines = table.splitlines()
        # title, header, one row per die
        self.assertEqual(len(lines), 2 + len(DICE))
        self.assertTrue(lines[2].startswith("2,2,4,4,9,9"))


if __name__ == '__main__':
    unittest.main()
