"""
Message protocol between the committing party and the counterparty.

All messages are JSON objects with a "type" field, a "data" field and the
id of the exchange they belong to. A fair random exchange carries exactly
three messages, in this order:

    COMMITMENT          committer -> counterparty   (commitment, range)
    COUNTERPARTY_VALUE  counterparty -> committer   (value)
    DISCLOSURE          committer -> counterparty   (key, committed value)
"""

from dataclasses import dataclass, field
from typing import Any
import json

from shared.enums import MessageType


@dataclass
class Message:
    """Base message structure for all protocol traffic."""
    type: MessageType
    data: dict[str, Any] = field(default_factory=dict)
    exchange_id: str | None = None

    def to_json(self) -> str:
        """Serialize message to JSON string."""
        return json.dumps(self.to_dict())

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "type": self.type.value,
            "data": self.data,
            "exchange_id": self.exchange_id,
        }

    @classmethod
    def from_json(cls, json_str: str) -> "Message":
        """Deserialize message from JSON string."""
        raw = json.loads(json_str)
        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: dict) -> "Message":
        """Create message from dictionary."""
        return cls(
            type=MessageType(raw["type"]),
            data=raw.get("data", {}),
            exchange_id=raw.get("exchange_id"),
        )


# =============================================================================
# Committer -> Counterparty
# =============================================================================

@dataclass
class CommitmentMessage(Message):
    """Binds the committer to its secret value without revealing it."""
    type: MessageType = MessageType.COMMITMENT

    @classmethod
    def create(
        cls,
        exchange_id: str,
        commitment: str,
        low: int,
        high: int,
        algorithm: str,
    ) -> "CommitmentMessage":
        return cls(
            data={
                "commitment": commitment,
                "low": low,
                "high": high,
                "algorithm": algorithm,
            },
            exchange_id=exchange_id,
        )

    @property
    def commitment(self) -> str:
        return self.data["commitment"]

    @property
    def low(self) -> int:
        return self.data["low"]

    @property
    def high(self) -> int:
        return self.data["high"]

    @property
    def algorithm(self) -> str:
        return self.data["algorithm"]


@dataclass
class DisclosureMessage(Message):
    """Reveals the key and the committed value once the counterparty answered."""
    type: MessageType = MessageType.DISCLOSURE

    @classmethod
    def create(cls, exchange_id: str, key: bytes, value: int) -> "DisclosureMessage":
        return cls(
            data={"key": key.hex(), "value": value},
            exchange_id=exchange_id,
        )

    @property
    def key(self) -> bytes:
        return bytes.fromhex(self.data["key"])

    @property
    def value(self) -> int:
        return self.data["value"]


# =============================================================================
# Counterparty -> Committer
# =============================================================================

@dataclass
class CounterpartyValueMessage(Message):
    """The counterparty's own contribution to the result."""
    type: MessageType = MessageType.COUNTERPARTY_VALUE

    @classmethod
    def create(cls, exchange_id: str, value: int) -> "CounterpartyValueMessage":
        return cls(data={"value": value}, exchange_id=exchange_id)

    @property
    def value(self) -> int:
        return self.data["value"]


# =============================================================================
# Helper function for parsing incoming messages
# =============================================================================

MESSAGE_CLASSES: dict[MessageType, type[Message]] = {
    MessageType.COMMITMENT: CommitmentMessage,
    MessageType.COUNTERPARTY_VALUE: CounterpartyValueMessage,
    MessageType.DISCLOSURE: DisclosureMessage,
}


def parse_message(json_str: str) -> Message:
    """
    Parse a JSON string into the appropriate Message subclass.

    Raises:
        ValueError: If the payload is not valid JSON or names an unknown type.
    """
    raw = json.loads(json_str)
    if not isinstance(raw, dict) or "type" not in raw:
        raise ValueError("Message has no type")
    message_type = MessageType(raw["type"])
    message_cls = MESSAGE_CLASSES[message_type]
    return message_cls(
        data=raw.get("data", {}),
        exchange_id=raw.get("exchange_id"),
    )
