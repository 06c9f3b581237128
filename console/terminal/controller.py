"""
Console game controller.

Wraps the game engine for terminal play and turns game events into
console output.
"""
from typing import Optional

from dicegame.engine import (
    DiceSet,
    ExchangeCancelledError,
    FairRandomProtocol,
    Game,
    GameEvent,
    RoundResult,
    SecureRandomSource,
)
from shared.enums import Party, RoundOutcome

from console.config import ConsoleSettings, settings as default_settings

from .help_table import render_probability_table
from .prompts import ConsolePrompts, UserExit


class ConsoleGameController:
    """
    Controller for a terminal game against the computer.

    The user is the counterparty of every exchange; the computer commits.
    """

    def __init__(
        self,
        dice_set: DiceSet,
        prompts: Optional[ConsolePrompts] = None,
        settings: Optional[ConsoleSettings] = None,
        source: Optional[SecureRandomSource] = None,
    ):
        self.prompts = prompts or ConsolePrompts()
        self.settings = settings or default_settings
        source = source or SecureRandomSource()

        self.protocol = FairRandomProtocol(
            solicit=self.prompts.solicit,
            publish=self.prompts.publish,
            disclose=self.prompts.disclose,
            source=source,
        )
        self.game = Game(
            dice_set=dice_set,
            protocol=self.protocol,
            choose_dice=self._choose_dice,
            source=source,
            on_event=self._on_event,
        )

    def help_table(self) -> str:
        return render_probability_table(
            self.game.dice_set.dice,
            precision=self.settings.precision,
            table_format=self.settings.table_format,
        )

    def _choose_dice(self, available):
        return self.prompts.choose_dice(available, help_text=self.help_table)

    # =========================================================================
    # Event output
    # =========================================================================

    def _on_event(self, event: GameEvent) -> None:
        handler = getattr(self, f"_show_{event.event_type}", None)
        if handler:
            handler(event.data)

    def _show_first_move_started(self, data: dict) -> None:
        self.prompts.show("Let's determine who makes the first move.")
        self.prompts.show(
            f"I selected a random value in the range {data['low']}..{data['high']}."
        )

    def _show_first_move(self, data: dict) -> None:
        if data["party"] == Party.USER.value:
            self.prompts.show("You make the first move and choose the dice.")
        else:
            self.prompts.show("I make the first move and choose the dice.")

    def _show_dice_chosen(self, data: dict) -> None:
        if data["party"] == Party.COMPUTER.value:
            self.prompts.show(f"Computer chooses: {data['dice']}")
        else:
            self.prompts.show(f"You choose: {data['dice']}")

    def _show_roll_started(self, data: dict) -> None:
        whose = "your" if data["party"] == Party.USER.value else "my"
        self.prompts.show(f"It's time for {whose} roll.")
        self.prompts.show(
            f"I selected a random value in the range {data['low']}..{data['high']}."
        )

    def _show_roll(self, data: dict) -> None:
        exchange = data["exchange"]
        modulus = exchange["high"] - exchange["low"] + 1
        self.prompts.show(
            f"The fair number generation result is {exchange['committed_value']} + "
            f"{exchange['counterparty_value']} = {exchange['result']} (mod {modulus})."
        )
        whose = "Your" if data["party"] == Party.USER.value else "Computer"
        self.prompts.show(f"{whose} roll: {data['face']}")

    def _show_round_finished(self, data: dict) -> None:
        user_face = data["user_face"]
        computer_face = data["computer_face"]
        if data["outcome"] == RoundOutcome.USER_WINS.value:
            self.prompts.show(f"You win ({user_face} > {computer_face})!")
        elif data["outcome"] == RoundOutcome.COMPUTER_WINS.value:
            self.prompts.show(f"Computer wins ({computer_face} > {user_face})!")
        else:
            self.prompts.show(f"It's a tie ({user_face} = {computer_face})!")

    # =========================================================================
    # Game loop
    # =========================================================================

    def run(self, rounds: Optional[int] = None) -> list[RoundResult]:
        """
        Play up to `rounds` rounds, asking before each extra round.

        Returns the finished rounds. Leaving with the exit key ends the loop
        without an error; a trust violation propagates to the caller.
        """
        rounds = self.settings.rounds if rounds is None else rounds
        if rounds < 1:
            raise ValueError(f"rounds must be a positive integer, got {rounds}")
        results: list[RoundResult] = []
        try:
            while len(results) < rounds:
                if results and not self.prompts.confirm("Play another round?"):
                    break
                results.append(self.game.play_round())
        except (UserExit, ExchangeCancelledError):
            self.prompts.show("Exiting the game...")
        return results
