"""
Win probabilities between dice.
"""
from typing import Sequence

from .dice import Dice


def count_wins(dice1: Dice, dice2: Dice) -> int:
    """Number of face pairs (a, b) with a from dice1, b from dice2 and a > b."""
    return sum(1 for a in dice1.faces for b in dice2.faces if a > b)


def count_ties(dice1: Dice, dice2: Dice) -> int:
    return sum(1 for a in dice1.faces for b in dice2.faces if a == b)


def win_probability(dice1: Dice, dice2: Dice) -> float:
    """
    Probability that a roll of dice1 beats a roll of dice2.

    Every ordered face pair is equally likely, so this is the share of pairs
    where dice1 shows the strictly higher face.
    """
    return count_wins(dice1, dice2) / (len(dice1) * len(dice2))


def tie_probability(dice1: Dice, dice2: Dice) -> float:
    """Probability that both dice show the same face."""
    return count_ties(dice1, dice2) / (len(dice1) * len(dice2))


def probability_matrix(dice: Sequence[Dice]) -> dict[tuple[Dice, Dice], float]:
    """
    Win probability for every ordered pair of dice, diagonal included.

    Args:
        dice: Dice to compare; the row die is the first element of each key.

    Returns:
        Mapping of (row die, column die) to the row die's win probability.
    """
    return {
        (row, column): win_probability(row, column)
        for row in dice
        for column in dice
    }
