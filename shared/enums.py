"""
Enumerations used throughout the game.
"""
from enum import Enum


class MessageType(str, Enum):
    """Types of messages exchanged between the committer and the counterparty."""
    COMMITMENT = "COMMITMENT"
    COUNTERPARTY_VALUE = "COUNTERPARTY_VALUE"
    DISCLOSURE = "DISCLOSURE"


class ExchangePhase(str, Enum):
    """Lifecycle of a single fair random exchange."""
    COMMITTED = "COMMITTED"
    ANSWERED = "ANSWERED"
    DISCLOSED = "DISCLOSED"
    VERIFIED = "VERIFIED"
    CANCELLED = "CANCELLED"
    FAILED = "FAILED"


class Party(str, Enum):
    """The two parties of a game."""
    USER = "USER"
    COMPUTER = "COMPUTER"


class RoundOutcome(str, Enum):
    """Result of comparing the two rolls of a round."""
    USER_WINS = "USER_WINS"
    COMPUTER_WINS = "COMPUTER_WINS"
    TIE = "TIE"


# Order in which the three protocol messages must travel
MESSAGE_ORDER = (
    MessageType.COMMITMENT,
    MessageType.COUNTERPARTY_VALUE,
    MessageType.DISCLOSURE,
)
