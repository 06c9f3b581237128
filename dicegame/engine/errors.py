"""
Error hierarchy for the dice game and its fair random protocol.

Callers can catch `FairDiceError` to handle everything raised by the engine,
or the concrete subclasses for finer control:

    ValidationError              bad dice configuration (construction aborts)
    DuplicateConfigurationError  two dice with identical faces in a set
    RangeViolationError          counterparty value outside the range (retried)
    TrustViolationError          disclosure does not reproduce the commitment
    EntropySourceError           secure randomness unavailable (fatal)
    ProtocolOrderError           message sent out of order on a channel
    ExchangeCancelledError       counterparty abandoned an exchange
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from .fair_random import FairRandomExchange


class FairDiceError(Exception):
    """Base class for all dice game errors."""
    pass


# =============================================================================
# Dice configuration
# =============================================================================

class ValidationError(FairDiceError):
    """
    Raised when a dice configuration is invalid.

    Attributes:
        configuration: The raw configuration string that failed, if known.
    """

    def __init__(self, message: str, configuration: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.configuration = configuration


class EmptyInputError(ValidationError):
    """Dice configuration is empty or blank."""


class InvalidFormatError(ValidationError):
    """A face token is not an integer."""

    def __init__(self, token: object, configuration: Optional[str] = None):
        super().__init__(
            f"Invalid face value: '{token}'. Dice faces must be integers.",
            configuration,
        )
        self.token = token


class NonPositiveFaceError(ValidationError):
    """A face value is zero or negative."""

    def __init__(self, value: int, configuration: Optional[str] = None):
        super().__init__(
            f"Invalid face value: '{value}'. Dice faces must be positive integers.",
            configuration,
        )
        self.value = value


class FaceCountOutOfRangeError(ValidationError):
    """Too few or too many faces."""

    def __init__(self, count: int, low: int, high: int, configuration: Optional[str] = None):
        super().__init__(
            f"Invalid number of faces: {count}. Dice must have between {low} and {high} faces.",
            configuration,
        )
        self.count = count


class NotEnoughDiceError(ValidationError):
    """Fewer dice were configured than a game needs."""


class DuplicateConfigurationError(FairDiceError):
    """Two or more dice in a set have the same faces in the same order."""

    def __init__(self, duplicates: Sequence[str]):
        self.duplicates = list(duplicates)
        super().__init__(
            "Duplicate dice configurations detected: " + "; ".join(self.duplicates)
        )


# =============================================================================
# Fair random protocol
# =============================================================================

class RangeViolationError(FairDiceError):
    """The counterparty supplied a value outside [low, high]."""

    def __init__(self, value: object, low: int, high: int):
        self.value = value
        self.low = low
        self.high = high
        super().__init__(f"Value {value!r} is outside the range [{low}, {high}]")


class TrustViolationError(FairDiceError):
    """
    The disclosed key and value do not reproduce the published commitment.

    The result of `exchange` must be treated as untrusted.
    """

    def __init__(self, exchange: "FairRandomExchange"):
        self.exchange = exchange
        super().__init__(
            f"Commitment mismatch in exchange {exchange.exchange_id}: "
            f"published {exchange.commitment}"
        )


class EntropySourceError(FairDiceError):
    """A cryptographically secure random source is not available."""


class ProtocolOrderError(FairDiceError):
    """A protocol message arrived out of order or for the wrong exchange."""


class ExchangeCancelledError(FairDiceError):
    """The counterparty abandoned the exchange before supplying a value."""
