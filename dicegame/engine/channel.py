"""
In-process message channel between the two protocol roles.

Messages are carried as JSON text, exactly as they would be over a socket,
so the roles never share Python objects.
"""
import logging
from collections import deque
from typing import Optional

from shared.enums import MESSAGE_ORDER, MessageType
from shared.protocol import Message, parse_message

from .errors import ProtocolOrderError


logger = logging.getLogger(__name__)


class LocalChannel:
    """
    Single-use channel for one exchange.

    Accepts COMMITMENT, COUNTERPARTY_VALUE and DISCLOSURE once each, in that
    order, all for the same exchange id.
    """

    def __init__(self):
        self._queue: deque[str] = deque()
        self._sent: list[MessageType] = []
        self._exchange_id: Optional[str] = None

    @property
    def exchange_id(self) -> Optional[str]:
        return self._exchange_id

    @property
    def is_finished(self) -> bool:
        """True once all three messages were sent and received."""
        return len(self._sent) == len(MESSAGE_ORDER) and not self._queue

    @property
    def pending(self) -> int:
        return len(self._queue)

    def send(self, message: Message) -> None:
        """
        Queue a message.

        Raises:
            ProtocolOrderError: If the message is out of order or belongs to
                another exchange.
        """
        position = len(self._sent)
        if position >= len(MESSAGE_ORDER):
            raise ProtocolOrderError(f"Exchange already complete, got {message.type.value}")

        expected = MESSAGE_ORDER[position]
        if message.type != expected:
            raise ProtocolOrderError(
                f"Expected {expected.value}, got {message.type.value}"
            )

        if self._exchange_id is None:
            self._exchange_id = message.exchange_id
        elif message.exchange_id != self._exchange_id:
            raise ProtocolOrderError(
                f"Message for exchange {message.exchange_id} sent on channel "
                f"for exchange {self._exchange_id}"
            )

        self._sent.append(message.type)
        self._queue.append(message.to_json())
        logger.debug(f"Sent {message.type.value} for exchange {message.exchange_id}")

    def receive(self) -> Message:
        """
        Take the next message off the channel.

        Raises:
            ProtocolOrderError: If nothing is waiting.
        """
        if not self._queue:
            raise ProtocolOrderError("No message waiting on channel")
        return parse_message(self._queue.popleft())
