"""
Engine configuration loaded from environment variables.
"""
import hashlib
import os
from dotenv import load_dotenv

from shared.constants import (
    MIN_DICE, MIN_FACES, MAX_FACES, MIN_KEY_BYTES, DEFAULT_HMAC_ALGORITHM
)

load_dotenv()

class Config:
    """Engine configuration."""

    # Logging
    LOG_LEVEL: str = os.getenv("FAIR_DICE_LOG_LEVEL", "WARNING").upper()

    # Fair random protocol
    KEY_BYTES: int = int(os.getenv("FAIR_DICE_KEY_BYTES", str(MIN_KEY_BYTES)))
    HMAC_ALGORITHM: str = os.getenv("FAIR_DICE_HMAC_ALGORITHM", DEFAULT_HMAC_ALGORITHM)

    # Game settings
    MIN_DICE: int = MIN_DICE
    MIN_FACES: int = MIN_FACES
    MAX_FACES: int = MAX_FACES

    @classmethod
    def validate(cls) -> None:
        """Reject settings that would weaken the commitment scheme."""
        if cls.KEY_BYTES < MIN_KEY_BYTES:
            raise ValueError(
                f"FAIR_DICE_KEY_BYTES must be at least {MIN_KEY_BYTES}, got {cls.KEY_BYTES}"
            )
        if cls.HMAC_ALGORITHM not in hashlib.algorithms_available:
            raise ValueError(f"Unknown HMAC algorithm: {cls.HMAC_ALGORITHM}")


config = Config()
settings = config
