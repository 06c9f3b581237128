"""
Terminal prompts for the user side of the game.

Input and output functions are injected so the prompts can be driven
from tests without a terminal.
"""
from typing import Callable, List, Optional

from dicegame.engine import Dice, ExchangeCancelledError
from shared.constants import EXIT_KEY, HELP_KEY


class UserExit(Exception):
    """The user asked to leave the game."""


class ConsolePrompts:
    """
    Reads the user's answers and shows protocol messages.

    Provides the solicit/publish/disclose callbacks of FairRandomProtocol
    and the dice menu used by Game.
    """

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        self._input = input_fn
        self._output = output_fn

    def show(self, text: str = "") -> None:
        self._output(text)

    def ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    # =========================================================================
    # Fair random protocol callbacks
    # =========================================================================

    def publish(self, commitment: str) -> None:
        self.show(f"HMAC: {commitment}")

    def solicit(self, low: int, high: int) -> int:
        """
        Ask for a number in [low, high] until a valid one is entered.

        Raises:
            ExchangeCancelledError: If the user enters the exit key.
        """
        self.show(f"Select a number between {low} and {high} ({EXIT_KEY} - exit):")
        while True:
            answer = self.ask("Your number: ")
            if answer.upper() == EXIT_KEY:
                raise ExchangeCancelledError("User left during a fair random exchange")
            try:
                value = int(answer)
            except ValueError:
                value = None
            if value is not None and low <= value <= high:
                return value
            self.show("Invalid input. Enter a number in the given range.")

    def disclose(self, key: bytes, value: int) -> None:
        self.show(f"Computer value: {value} (KEY={key.hex().upper()})")

    # =========================================================================
    # Menus
    # =========================================================================

    def choose_dice(
        self,
        available: List[Dice],
        help_text: Optional[Callable[[], str]] = None,
    ) -> Dice:
        """
        Show the dice menu and return the selected die.

        Raises:
            UserExit: If the user enters the exit key.
        """
        self.show("Choose your dice:")
        for i, dice in enumerate(available):
            self.show(f"{i} - {dice}")
        self.show(f"{EXIT_KEY} - Exit")
        if help_text:
            self.show(f"{HELP_KEY} - Help")

        while True:
            answer = self.ask("Your selection: ")
            if answer.upper() == EXIT_KEY:
                raise UserExit()
            if answer == HELP_KEY and help_text:
                self.show(help_text())
                continue
            if answer.isdigit() and int(answer) < len(available):
                return available[int(answer)]
            self.show("Invalid selection. Try again.")

    def confirm(self, prompt: str) -> bool:
        return self.ask(f"{prompt} (y/n): ").lower() in ("y", "yes")
