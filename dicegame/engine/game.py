"""
Game orchestration - one round of user versus computer.
"""
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from shared.constants import FIRST_MOVE_RANGE, USER_FIRST_RESULT
from shared.enums import Party, RoundOutcome

from .dice import Dice, DiceRoll
from .dice_set import DiceSet
from .errors import TrustViolationError
from .fair_random import FairRandomProtocol, SecureRandomSource


logger = logging.getLogger(__name__)

ChooseDiceFn = Callable[[List[Dice]], Dice]


@dataclass
class GameEvent:
    """Represents something that happened in the game."""
    event_type: str
    data: dict
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type,
            "data": self.data,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class RoundResult:
    """Everything that decided a round."""
    first_party: Party
    user_dice: Dice
    computer_dice: Dice
    user_roll: DiceRoll
    computer_roll: DiceRoll

    @property
    def outcome(self) -> RoundOutcome:
        if self.user_roll.face > self.computer_roll.face:
            return RoundOutcome.USER_WINS
        if self.user_roll.face < self.computer_roll.face:
            return RoundOutcome.COMPUTER_WINS
        return RoundOutcome.TIE


@dataclass
class Game:
    """
    Plays rounds of the non-transitive dice game.

    The user is the counterparty of every fair random exchange; the computer
    commits. `choose_dice` asks the user to pick from the dice still
    available, and `on_event` (if given) sees every logged event.
    """

    dice_set: DiceSet
    protocol: FairRandomProtocol
    choose_dice: ChooseDiceFn
    source: SecureRandomSource = field(default_factory=SecureRandomSource)
    on_event: Optional[Callable[[GameEvent], None]] = None

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=datetime.utcnow)
    rounds_played: int = 0
    events: List[GameEvent] = field(default_factory=list)

    def _log_event(self, event_type: str, data: dict) -> GameEvent:
        """Log a game event."""
        event = GameEvent(event_type=event_type, data=data)
        self.events.append(event)
        if self.on_event:
            self.on_event(event)
        return event

    # =========== First move ===========

    def decide_first_move(self) -> Party:
        """Run the first-move exchange; result 0 lets the user choose first."""
        low, high = FIRST_MOVE_RANGE
        self._log_event("first_move_started", {"low": low, "high": high})
        exchange = self.protocol.run_exchange(low, high)
        first = Party.USER if exchange.result == USER_FIRST_RESULT else Party.COMPUTER
        self._log_event("first_move", {
            "party": first.value,
            "exchange": exchange.to_dict(),
        })
        return first

    # =========== Dice selection ===========

    def _user_chooses(self, available: List[Dice]) -> Dice:
        choice = self.choose_dice(available)
        if choice not in available:
            raise ValueError(f"Dice {choice} is not available")
        self._log_event("dice_chosen", {"party": Party.USER.value, "dice": str(choice)})
        return choice

    def _computer_chooses(self, available: List[Dice]) -> Dice:
        choice = self.source.choice(available)
        self._log_event("dice_chosen", {"party": Party.COMPUTER.value, "dice": str(choice)})
        return choice

    def select_dice(self, first: Party) -> tuple[Dice, Dice]:
        """
        Let the first party pick, then the other picks from the remaining dice.

        Returns:
            (user dice, computer dice)
        """
        if first == Party.USER:
            user_dice = self._user_chooses(list(self.dice_set))
            computer_dice = self._computer_chooses(self.dice_set.without(user_dice))
        else:
            computer_dice = self._computer_chooses(list(self.dice_set))
            user_dice = self._user_chooses(self.dice_set.without(computer_dice))
        return user_dice, computer_dice

    # =========== Rolling ===========

    def roll(self, party: Party, dice: Dice) -> DiceRoll:
        """Roll `dice` for `party` through a fair random exchange."""
        self._log_event("roll_started", {
            "party": party.value,
            "dice": str(dice),
            "low": 0,
            "high": len(dice) - 1,
        })
        result = dice.roll(self.protocol)
        self._log_event("roll", {
            "party": party.value,
            "face": result.face,
            "index": result.index,
            "exchange": result.exchange.to_dict(),
        })
        return result

    def play_round(self) -> RoundResult:
        """
        Play one full round.

        Raises:
            TrustViolationError: If any exchange fails verification; the
                round is abandoned.
        """
        try:
            first = self.decide_first_move()
            user_dice, computer_dice = self.select_dice(first)
            user_roll = self.roll(Party.USER, user_dice)
            computer_roll = self.roll(Party.COMPUTER, computer_dice)
        except TrustViolationError as e:
            self._log_event("trust_violation", {"exchange": e.exchange.to_dict()})
            raise

        result = RoundResult(
            first_party=first,
            user_dice=user_dice,
            computer_dice=computer_dice,
            user_roll=user_roll,
            computer_roll=computer_roll,
        )
        self.rounds_played += 1
        self._log_event("round_finished", {
            "round": self.rounds_played,
            "outcome": result.outcome.value,
            "user_face": user_roll.face,
            "computer_face": computer_roll.face,
        })
        logger.info(
            f"Game {self.id} round {self.rounds_played}: "
            f"{user_roll.face} vs {computer_roll.face} -> {result.outcome.value}"
        )
        return result
