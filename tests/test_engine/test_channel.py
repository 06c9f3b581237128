"""
Tests for the in-process protocol channel.

Run with: python3 tests/test_engine/test_channel.py
"""

import sys
import unittest
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from dicegame.engine import LocalChannel, ProtocolOrderError
from shared.protocol import (
    CommitmentMessage,
    CounterpartyValueMessage,
    DisclosureMessage,
)


def commitment(exchange_id="ex-1"):
    return CommitmentMessage.create(exchange_id, "ab" * 32, 0, 5, "sha256")


class TestLocalChannel(unittest.TestCase):
    """Messages travel once each, in commit / answer / disclose order."""

    def test_full_exchange_in_order(self):
        channel = LocalChannel()
        channel.send(commitment())
        self.assertIsInstance(channel.receive(), CommitmentMessage)
        channel.send(CounterpartyValueMessage.create("ex-1", 4))
        self.assertEqual(channel.receive().value, 4)
        channel.send(DisclosureMessage.create("ex-1", b"\x01" * 32, 3))
        received = channel.receive()
        self.assertIsInstance(received, DisclosureMessage)
        self.assertEqual(received.key, b"\x01" * 32)
        self.assertTrue(channel.is_finished)
        self.assertEqual(channel.exchange_id, "ex-1")

    def test_answer_before_commitment_is_rejected(self):
        channel = LocalChannel()
        with self.assertRaises(ProtocolOrderError):
            channel.send(CounterpartyValueMessage.create("ex-1", 4))

    def test_disclosure_before_answer_is_rejected(self):
        channel = LocalChannel()
        channel.send(commitment())
        with self.assertRaises(ProtocolOrderError):
            channel.send(DisclosureMessage.create("ex-1", b"\x01" * 32, 3))

    def test_message_for_other_exchange_is_rejected(self):
        channel = LocalChannel()
        channel.send(commitment("ex-1"))
        with self.assertRaises(ProtocolOrderError):
            channel.send(CounterpartyValueMessage.create("ex-2", 4))

    def test_no_fourth_message(self):
        channel = LocalChannel()
        channel.send(commitment())
        channel.send(CounterpartyValueMessage.create("ex-1", 4))
        channel.send(DisclosureMessage.create("ex-1", b"\x01" * 32, 3))
        with self.assertRaises(ProtocolOrderError):
            channel.send(commitment())

    def test_receive_on_empty_channel(self):
        with self.assertRaises(ProtocolOrderError):
            LocalChannel().receive()

    def test_pending_count(self):
        channel = LocalChannel()
        channel.send(commitment())
        self.assertEqual(channel.pending, 1)
        self.assertFalse(channel.is_finished)
        channel.receive()
        self.assertEqual(channel.pending, 0)


if __name__ == '__main__':
    unittest.main()
