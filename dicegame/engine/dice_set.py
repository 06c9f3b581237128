"""
The set of dice a game is played with.
"""
from collections import Counter
from typing import Iterator, Sequence

from shared.constants import MIN_DICE

from .dice import Dice
from .errors import DuplicateConfigurationError, NotEnoughDiceError


class DiceSet:
    """Ordered collection of at least MIN_DICE distinct dice."""

    def __init__(self, dice: Sequence[Dice], min_dice: int = MIN_DICE):
        if len(dice) < min_dice:
            raise NotEnoughDiceError(
                f"You must specify at least {min_dice} dice configurations."
            )

        # Identical faces in identical order; same multiset in another order is allowed
        duplicates = [str(d) for d, count in Counter(dice).items() if count > 1]
        if duplicates:
            raise DuplicateConfigurationError(duplicates)

        self._dice = tuple(dice)

    @classmethod
    def from_args(cls, args: Sequence[str], min_dice: int = MIN_DICE) -> "DiceSet":
        """
        Parse one dice configuration per command-line argument.

        Raises:
            NotEnoughDiceError: If no or too few configurations are given.
            ValidationError: If a configuration is invalid; its
                `configuration` attribute names the argument.
            DuplicateConfigurationError: If two configurations are identical.
        """
        if not args:
            raise NotEnoughDiceError("No dice configurations provided.")
        return cls([Dice.parse(arg) for arg in args], min_dice)

    @property
    def dice(self) -> tuple[Dice, ...]:
        return self._dice

    def __len__(self) -> int:
        return len(self._dice)

    def __iter__(self) -> Iterator[Dice]:
        return iter(self._dice)

    def __getitem__(self, index: int) -> Dice:
        return self._dice[index]

    def index(self, dice: Dice) -> int:
        return self._dice.index(dice)

    def without(self, dice: Dice) -> list[Dice]:
        """All dice except `dice`, in their original order."""
        return [d for d in self._dice if d != dice]
