"""
Fair random number agreement between two mutually distrustful parties.

The committing party picks a secret value and publishes an HMAC of it under a
fresh key. Only then does the counterparty choose its own value. The committer
discloses key and value, and either side computes

    result = (committed + counterparty) mod (high - low + 1) + low

The counterparty recomputes the HMAC over the disclosed value and rejects the
exchange if it does not match the published commitment.

The two roles only talk through protocol messages on a channel, so they can
live in different processes without changing this module.
"""
from __future__ import annotations

import hmac
import logging
import secrets
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, Sequence, TypeVar

from dicegame.config import settings
from shared.constants import MIN_KEY_BYTES, TEXT_ENCODING
from shared.enums import ExchangePhase
from shared.protocol import (
    CommitmentMessage,
    CounterpartyValueMessage,
    DisclosureMessage,
)

from .channel import LocalChannel
from .errors import (
    EntropySourceError,
    ExchangeCancelledError,
    ProtocolOrderError,
    RangeViolationError,
    TrustViolationError,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

SolicitFn = Callable[[int, int], int]
PublishFn = Callable[[str], None]
DiscloseFn = Callable[[bytes, int], None]


# =============================================================================
# Primitives
# =============================================================================

def encode_value(value: int) -> bytes:
    """Encode a committed value as the UTF-8 bytes of its decimal form."""
    return str(value).encode(TEXT_ENCODING)


def compute_commitment(key: bytes, value: int, algorithm: Optional[str] = None) -> str:
    """Return the lowercase hex HMAC of `value` under `key`."""
    digestmod = algorithm or settings.HMAC_ALGORITHM
    return hmac.new(key, encode_value(value), digestmod).hexdigest()


def verify_commitment(
    commitment: str,
    key: bytes,
    value: int,
    algorithm: Optional[str] = None,
) -> bool:
    """Check that `key` and `value` reproduce `commitment`."""
    expected = compute_commitment(key, value, algorithm)
    return hmac.compare_digest(expected, commitment.lower())


def check_range(low: int, high: int) -> None:
    if low > high:
        raise ValueError(f"Invalid range: low ({low}) is greater than high ({high})")


def validate_in_range(value: object, low: int, high: int) -> int:
    """
    Return `value` if it is an integer in [low, high].

    Raises:
        RangeViolationError: Otherwise. Values are never clamped.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise RangeViolationError(value, low, high)
    if not low <= value <= high:
        raise RangeViolationError(value, low, high)
    return value


def combine_values(committed: int, counterparty: int, low: int, high: int) -> int:
    """Combine both contributions into a result in [low, high]."""
    check_range(low, high)
    return (committed + counterparty) % (high - low + 1) + low


class SecureRandomSource:
    """
    Cryptographically secure randomness backed by the `secrets` module.

    Any failure of the operating system source is reported as
    EntropySourceError; there is no fallback to a weaker generator.
    """

    def token_bytes(self, nbytes: int) -> bytes:
        try:
            return secrets.token_bytes(nbytes)
        except (OSError, NotImplementedError) as e:
            raise EntropySourceError(f"Secure random source unavailable: {e}") from e

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in [low, high]."""
        try:
            return low + secrets.randbelow(high - low + 1)
        except (OSError, NotImplementedError) as e:
            raise EntropySourceError(f"Secure random source unavailable: {e}") from e

    def choice(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("Cannot choose from an empty sequence")
        return items[self.randint(0, len(items) - 1)]


# =============================================================================
# Exchange record
# =============================================================================

@dataclass
class FairRandomExchange:
    """
    Audit record of one fair random exchange.

    `key` and `committed_value` stay None until the committer discloses them.
    """
    low: int
    high: int
    commitment: str
    algorithm: str
    exchange_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    phase: ExchangePhase = ExchangePhase.COMMITTED
    counterparty_value: Optional[int] = None
    committed_value: Optional[int] = None
    key: Optional[bytes] = None
    result: Optional[int] = None
    verified: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_complete(self) -> bool:
        return self.phase in (ExchangePhase.VERIFIED, ExchangePhase.FAILED)

    def verify(self) -> bool:
        """Recompute the commitment from the disclosed key and value."""
        if self.key is None or self.committed_value is None:
            return False
        return verify_commitment(self.commitment, self.key, self.committed_value, self.algorithm)

    def to_dict(self) -> dict:
        return {
            "exchange_id": self.exchange_id,
            "low": self.low,
            "high": self.high,
            "commitment": self.commitment,
            "algorithm": self.algorithm,
            "phase": self.phase.value,
            "counterparty_value": self.counterparty_value,
            "committed_value": self.committed_value,
            "key": self.key.hex() if self.key is not None else None,
            "result": self.result,
            "verified": self.verified,
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class _PendingSecret:
    key: bytes
    value: int
    low: int
    high: int


# =============================================================================
# Roles
# =============================================================================

class Committer:
    """
    The party that commits first (the computer in the dice game).

    Secrets are kept per exchange id and dropped as soon as they are
    disclosed or the exchange is cancelled.
    """

    def __init__(
        self,
        source: Optional[SecureRandomSource] = None,
        algorithm: Optional[str] = None,
        key_bytes: Optional[int] = None,
    ):
        self._source = source or SecureRandomSource()
        self.algorithm = algorithm or settings.HMAC_ALGORITHM
        self.key_bytes = settings.KEY_BYTES if key_bytes is None else key_bytes
        if self.key_bytes < MIN_KEY_BYTES:
            raise ValueError(
                f"Key must be at least {MIN_KEY_BYTES} bytes, got {self.key_bytes}"
            )
        self._pending: dict[str, _PendingSecret] = {}

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def commit(self, low: int, high: int) -> CommitmentMessage:
        """Pick a fresh key and secret value and return the commitment message."""
        check_range(low, high)
        key = self._source.token_bytes(self.key_bytes)
        value = self._source.randint(low, high)
        exchange_id = str(uuid.uuid4())
        self._pending[exchange_id] = _PendingSecret(key=key, value=value, low=low, high=high)

        commitment = compute_commitment(key, value, self.algorithm)
        logger.debug(f"Exchange {exchange_id} committed to range [{low}, {high}]: {commitment}")
        return CommitmentMessage.create(exchange_id, commitment, low, high, self.algorithm)

    def disclose(self, message: CounterpartyValueMessage) -> DisclosureMessage:
        """
        Reveal key and value once the counterparty's value is fixed.

        Raises:
            ProtocolOrderError: If the exchange is unknown or already disclosed.
            RangeViolationError: If the counterparty value is out of range.
        """
        pending = self._pending.get(message.exchange_id)
        if pending is None:
            raise ProtocolOrderError(f"No pending commitment for exchange {message.exchange_id}")
        validate_in_range(message.value, pending.low, pending.high)
        del self._pending[message.exchange_id]
        return DisclosureMessage.create(message.exchange_id, pending.key, pending.value)

    def discard(self, exchange_id: str) -> None:
        """Forget the secret of an abandoned exchange."""
        if self._pending.pop(exchange_id, None) is not None:
            logger.debug(f"Exchange {exchange_id} discarded")


class Counterparty:
    """
    The party that answers a commitment (the user in the dice game).

    Keeps the public view of each exchange and performs the mandatory
    verification once the committer discloses.
    """

    def __init__(self, solicit: SolicitFn, algorithm: Optional[str] = None):
        self._solicit = solicit
        self.algorithm = algorithm or settings.HMAC_ALGORITHM
        self._exchanges: dict[str, FairRandomExchange] = {}

    def exchange(self, exchange_id: str) -> Optional[FairRandomExchange]:
        return self._exchanges.get(exchange_id)

    def receive_commitment(self, message: CommitmentMessage) -> FairRandomExchange:
        """
        Record a published commitment.

        Raises:
            ProtocolOrderError: If the exchange is already known or the
                commitment names a different HMAC algorithm.
        """
        if message.exchange_id in self._exchanges:
            raise ProtocolOrderError(f"Exchange {message.exchange_id} already committed")
        if message.algorithm != self.algorithm:
            raise ProtocolOrderError(
                f"Exchange {message.exchange_id} uses {message.algorithm!r}, "
                f"expected {self.algorithm!r}"
            )
        check_range(message.low, message.high)
        exchange = FairRandomExchange(
            low=message.low,
            high=message.high,
            commitment=message.commitment,
            algorithm=self.algorithm,
            exchange_id=message.exchange_id,
        )
        self._exchanges[exchange.exchange_id] = exchange
        return exchange

    def answer(self, exchange_id: str) -> CounterpartyValueMessage:
        """
        Solicit a value until one in range is supplied.

        Raises:
            ExchangeCancelledError: If the solicit callback gives up.
        """
        exchange = self._require(exchange_id, ExchangePhase.COMMITTED)
        while True:
            try:
                value = validate_in_range(
                    self._solicit(exchange.low, exchange.high), exchange.low, exchange.high
                )
                break
            except RangeViolationError as e:
                logger.info(f"Exchange {exchange_id}: rejected counterparty value {e.value!r}")
            except ExchangeCancelledError:
                self.cancel(exchange_id)
                raise
        exchange.counterparty_value = value
        exchange.phase = ExchangePhase.ANSWERED
        return CounterpartyValueMessage.create(exchange_id, value)

    def receive_disclosure(self, message: DisclosureMessage) -> FairRandomExchange:
        """
        Verify the disclosure and compute the result.

        Raises:
            TrustViolationError: If the disclosure does not match the commitment.
        """
        exchange = self._require(message.exchange_id, ExchangePhase.ANSWERED)
        try:
            exchange.key = message.key
            exchange.committed_value = validate_in_range(message.value, exchange.low, exchange.high)
            exchange.phase = ExchangePhase.DISCLOSED
            valid = exchange.verify()
        except (RangeViolationError, ValueError, KeyError, TypeError) as e:
            logger.debug(f"Exchange {exchange.exchange_id}: malformed disclosure: {e}")
            valid = False

        if not valid:
            exchange.phase = ExchangePhase.FAILED
            del self._exchanges[exchange.exchange_id]
            logger.error(f"Exchange {exchange.exchange_id}: disclosure does not match commitment")
            raise TrustViolationError(exchange)

        exchange.result = combine_values(
            exchange.committed_value, exchange.counterparty_value, exchange.low, exchange.high
        )
        exchange.verified = True
        exchange.phase = ExchangePhase.VERIFIED
        del self._exchanges[exchange.exchange_id]
        return exchange

    def cancel(self, exchange_id: str) -> None:
        """Abandon an exchange that has not been answered."""
        exchange = self._exchanges.pop(exchange_id, None)
        if exchange is not None:
            exchange.phase = ExchangePhase.CANCELLED

    def _require(self, exchange_id: str, phase: ExchangePhase) -> FairRandomExchange:
        exchange = self._exchanges.get(exchange_id)
        if exchange is None:
            raise ProtocolOrderError(f"Unknown exchange {exchange_id}")
        if exchange.phase != phase:
            raise ProtocolOrderError(
                f"Exchange {exchange_id} is {exchange.phase.value}, expected {phase.value}"
            )
        return exchange


# =============================================================================
# Orchestration
# =============================================================================

def _ignore(*args) -> None:
    return None


class FairRandomProtocol:
    """
    Runs complete exchanges between a Committer and a Counterparty.

    Args:
        solicit: Called as solicit(low, high) to obtain the counterparty value.
            Re-invoked until it returns an integer in range. May raise
            ExchangeCancelledError to abandon the exchange.
        publish: Called once per exchange with the commitment, before solicit.
        disclose: Called once per exchange with the key and committed value,
            after the counterparty value is fixed.
        source: Secure random source for the committer.
        algorithm: HMAC digest name (defaults to the configured one).
        key_bytes: Key size in bytes (defaults to the configured one).
    """

    def __init__(
        self,
        solicit: SolicitFn,
        publish: Optional[PublishFn] = None,
        disclose: Optional[DiscloseFn] = None,
        source: Optional[SecureRandomSource] = None,
        algorithm: Optional[str] = None,
        key_bytes: Optional[int] = None,
    ):
        self.committer = Committer(source, algorithm, key_bytes)
        self.counterparty = Counterparty(solicit, algorithm)
        self._publish = publish or _ignore
        self._disclose = disclose or _ignore
        self.history: list[FairRandomExchange] = []

    def run_exchange(self, low: int, high: int) -> FairRandomExchange:
        """
        Run one exchange over [low, high] and return its verified record.

        Raises:
            ValueError: If low > high.
            TrustViolationError: If the disclosure fails verification.
            ExchangeCancelledError: If the counterparty abandons the exchange.
            EntropySourceError: If secure randomness is unavailable.
        """
        check_range(low, high)
        channel = LocalChannel()

        channel.send(self.committer.commit(low, high))
        commitment = channel.receive()
        try:
            exchange = self.counterparty.receive_commitment(commitment)
        except ProtocolOrderError:
            self.committer.discard(commitment.exchange_id)
            raise
        self.history.append(exchange)
        self._publish(commitment.commitment)

        try:
            channel.send(self.counterparty.answer(exchange.exchange_id))
        except ExchangeCancelledError:
            logger.info(f"Exchange {exchange.exchange_id} cancelled by counterparty")
            raise
        finally:
            if exchange.phase != ExchangePhase.ANSWERED:
                self.committer.discard(exchange.exchange_id)
                self.counterparty.cancel(exchange.exchange_id)

        disclosure = self.committer.disclose(channel.receive())
        channel.send(disclosure)
        try:
            exchange = self.counterparty.receive_disclosure(channel.receive())
        except TrustViolationError as e:
            if e.exchange.key is not None and e.exchange.committed_value is not None:
                self._disclose(e.exchange.key, e.exchange.committed_value)
            raise
        self._disclose(exchange.key, exchange.committed_value)
        logger.info(
            f"Exchange {exchange.exchange_id}: ({exchange.committed_value} + "
            f"{exchange.counterparty_value}) mod {high - low + 1} + {low} = {exchange.result}"
        )
        return exchange

    def generate(self, low: int, high: int) -> int:
        """Agree on a fair random integer in [low, high]."""
        return self.run_exchange(low, high).result
