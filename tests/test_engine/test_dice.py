"""
Tests for the Dice model.

Run with: python3 tests/test_engine/test_dice.py
"""

import sys
import unittest
from dataclasses import FrozenInstanceError
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from dicegame.engine import (
    Dice,
    EmptyInputError,
    FaceCountOutOfRangeError,
    FairRandomProtocol,
    InvalidFormatError,
    NonPositiveFaceError,
    SecureRandomSource,
    ValidationError,
)


class ScriptedSource(SecureRandomSource):
    """Deterministic stand-in for the secure random source."""

    def __init__(self, values, key=bytes(range(32))):
        self.values = list(values)
        self.key = key

    def token_bytes(self, nbytes):
        return self.key

    def randint(self, low, high):
        return self.values.pop(0)


class TestDiceConstruction(unittest.TestCase):
    """Valid configurations keep their faces exactly."""

    def test_parse_preserves_order_and_values(self):
        dice = Dice.parse("2,2,4,4,9,9")
        self.assertEqual(dice.faces, (2, 2, 4, 4, 9, 9))

    def test_parse_allows_whitespace_around_faces(self):
        dice = Dice.parse(" 6, 8,1 ,1,8,6 ")
        self.assertEqual(dice.faces, (6, 8, 1, 1, 8, 6))

    def test_from_values_accepts_ints_and_strings(self):
        dice = Dice.from_values([7, "5", 3, "7"])
        self.assertEqual(dice.faces, (7, 5, 3, 7))

    def test_face_count_bounds_are_inclusive(self):
        self.assertEqual(len(Dice.from_values([1] * 4)), 4)
        self.assertEqual(len(Dice.from_values(range(1, 21))), 20)

    def test_str_joins_faces(self):
        self.assertEqual(str(Dice.parse("1,2,3,4")), "1,2,3,4")

    def test_dice_is_immutable(self):
        dice = Dice.parse("1,2,3,4")
        with self.assertRaises(FrozenInstanceError):
            dice.faces = (5, 6, 7, 8)

    def test_equal_faces_compare_equal(self):
        self.assertEqual(Dice.parse("1,2,3,4"), Dice.from_values([1, 2, 3, 4]))
        self.assertNotEqual(Dice.parse("1,2,3,4"), Dice.parse("4,3,2,1"))


class TestDiceValidation(unittest.TestCase):
    """Invalid configurations fail with the matching error and no Dice."""

    def test_empty_input(self):
        for text in ("", "   ", None):
            with self.assertRaises(EmptyInputError):
                Dice.parse(text)
        with self.assertRaises(EmptyInputError):
            Dice.from_values([])

    def test_non_integer_token(self):
        for text in ("1,2,a,4", "1,2,2.5,4", "1,,2,3,4"):
            with self.assertRaises(InvalidFormatError):
                Dice.parse(text)

    def test_bool_is_not_a_face(self):
        with self.assertRaises(InvalidFormatError):
            Dice.from_values([True, 2, 3, 4])

    def test_non_positive_face(self):
        for text in ("0,1,2,3", "1,2,-3,4"):
            with self.assertRaises(NonPositiveFaceError):
                Dice.parse(text)

    def test_face_count_out_of_range(self):
        with self.assertRaises(FaceCountOutOfRangeError):
            Dice.parse("1,2,3")
        with self.assertRaises(FaceCountOutOfRangeError):
            Dice.from_values(range(1, 22))

    def test_token_errors_reported_before_count(self):
        # A bad token is reported before a bad face count
        with self.assertRaises(InvalidFormatError):
            Dice.parse("1,x")

    def test_error_names_configuration(self):
        with self.assertRaises(ValidationError) as ctx:
            Dice.parse("1,2,0,4")
        self.assertEqual(ctx.exception.configuration, "1,2,0,4")
        self.assertIn("positive", ctx.exception.message)


class TestDiceRoll(unittest.TestCase):
    """Rolling draws the face index from a fair random exchange."""

    def test_roll_uses_exchange_result_as_index(self):
        dice = Dice.parse("10,20,30,40,50,60")
        protocol = FairRandomProtocol(
            solicit=lambda low, high: 4,
            source=ScriptedSource([3]),
        )
        roll = dice.roll(protocol)
        # (3 + 4) mod 6 = 1
        self.assertEqual(roll.index, 1)
        self.assertEqual(roll.face, 20)
        self.assertTrue(roll.exchange.verified)
        self.assertEqual((roll.exchange.low, roll.exchange.high), (0, 5))


if __name__ == '__main__':
    unittest.main()
