"""
Probability help table shown when the user types '?'.
"""
from typing import Sequence

from tabulate import tabulate

from dicegame.engine import Dice, probability_matrix
from shared.constants import (
    DEFAULT_PRECISION, DEFAULT_TABLE_FORMAT, TABLE_CORNER, TABLE_TITLE
)


def format_cell(probability: float, precision: int, diagonal: bool) -> str:
    text = f"{probability:.{precision}f}"
    return f"- ({text})" if diagonal else text


def render_probability_table(
    dice: Sequence[Dice],
    precision: int = DEFAULT_PRECISION,
    table_format: str = DEFAULT_TABLE_FORMAT,
) -> str:
    """
    Render the chance of the user's die (rows) beating the computer's (columns).

    Diagonal cells compare a die with itself and are shown as "- (p)".
    """
    matrix = probability_matrix(dice)
    headers = [TABLE_CORNER] + [str(d) for d in dice]
    rows = []
    for user_dice in dice:
        row = [str(user_dice)]
        for computer_dice in dice:
            row.append(format_cell(
                matrix[(user_dice, computer_dice)],
                precision,
                diagonal=user_dice == computer_dice,
            ))
        rows.append(row)

    table = tabulate(rows, headers=headers, tablefmt=table_format, disable_numparse=True)
    return f"{TABLE_TITLE}\n{table}"
