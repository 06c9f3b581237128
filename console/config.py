"""
Console configuration settings.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from shared.constants import DEFAULT_PRECISION, DEFAULT_TABLE_FORMAT

load_dotenv()


@dataclass
class ConsoleSettings:
    """Console configuration."""

    # Probability help table
    precision: int = DEFAULT_PRECISION
    table_format: str = DEFAULT_TABLE_FORMAT

    # Rounds played when --rounds is not given
    rounds: int = 1


def load_settings() -> ConsoleSettings:
    """Load settings from environment variables."""
    return ConsoleSettings(
        precision=int(os.getenv("FAIR_DICE_PRECISION", str(DEFAULT_PRECISION))),
        table_format=os.getenv("FAIR_DICE_TABLE_FORMAT", DEFAULT_TABLE_FORMAT),
        rounds=int(os.getenv("FAIR_DICE_ROUNDS", "1")),
    )


settings = load_settings()
