"""
Game engine package.
"""
from .errors import (
    FairDiceError,
    ValidationError,
    EmptyInputError,
    InvalidFormatError,
    NonPositiveFaceError,
    FaceCountOutOfRangeError,
    NotEnoughDiceError,
    DuplicateConfigurationError,
    RangeViolationError,
    TrustViolationError,
    EntropySourceError,
    ProtocolOrderError,
    ExchangeCancelledError,
)
from .dice import Dice, DiceRoll
from .dice_set import DiceSet
from .channel import LocalChannel
from .fair_random import (
    Committer,
    Counterparty,
    FairRandomExchange,
    FairRandomProtocol,
    SecureRandomSource,
    combine_values,
    compute_commitment,
    verify_commitment,
)
from .probability import probability_matrix, tie_probability, win_probability
from .game import Game, GameEvent, RoundResult

__all__ = [
    "FairDiceError",
    "ValidationError",
    "EmptyInputError",
    "InvalidFormatError",
    "NonPositiveFaceError",
    "FaceCountOutOfRangeError",
    "NotEnoughDiceError",
    "DuplicateConfigurationError",
    "RangeViolationError",
    "TrustViolationError",
    "EntropySourceError",
    "ProtocolOrderError",
    "ExchangeCancelledError",
    "Dice",
    "DiceRoll",
    "DiceSet",
    "LocalChannel",
    "Committer",
    "Counterparty",
    "FairRandomExchange",
    "FairRandomProtocol",
    "SecureRandomSource",
    "combine_values",
    "compute_commitment",
    "verify_commitment",
    "probability_matrix",
    "tie_probability",
    "win_probability",
    "Game",
    "GameEvent",
    "RoundResult",
]
