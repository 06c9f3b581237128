"""
Dice model and fair rolling.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

from shared.constants import MIN_FACES, MAX_FACES, FACE_SEPARATOR

from .errors import (
    EmptyInputError,
    FaceCountOutOfRangeError,
    InvalidFormatError,
    NonPositiveFaceError,
    ValidationError,
)

if TYPE_CHECKING:
    from .fair_random import FairRandomExchange, FairRandomProtocol


@dataclass(frozen=True)
class DiceRoll:
    """Result of rolling one die through the fair random protocol."""
    face: int
    index: int
    exchange: "FairRandomExchange"


def _parse_face(token: object) -> int:
    if isinstance(token, bool):
        raise InvalidFormatError(token)
    if isinstance(token, int):
        value = token
    else:
        text = str(token).strip()
        try:
            value = int(text)
        except ValueError:
            raise InvalidFormatError(token) from None
    if value <= 0:
        raise NonPositiveFaceError(value)
    return value


@dataclass(frozen=True)
class Dice:
    """
    An immutable die with between MIN_FACES and MAX_FACES positive faces.

    Face order is kept for display; probabilities only depend on the
    multiset of faces.
    """
    faces: tuple[int, ...]

    def __post_init__(self):
        if not self.faces:
            raise EmptyInputError("Dice configuration cannot be null or empty.")
        faces = tuple(_parse_face(token) for token in self.faces)
        if not MIN_FACES <= len(faces) <= MAX_FACES:
            raise FaceCountOutOfRangeError(len(faces), MIN_FACES, MAX_FACES)
        object.__setattr__(self, "faces", faces)

    @classmethod
    def parse(cls, text: Optional[str]) -> "Dice":
        """
        Build a die from a comma-separated configuration such as "2,2,4,4,9,9".

        Raises:
            ValidationError: If the text is empty, a token is not a positive
                integer, or the number of faces is out of range.
        """
        if text is None or not text.strip():
            raise EmptyInputError("Dice configuration cannot be null or empty.", text)
        try:
            return cls(tuple(text.split(FACE_SEPARATOR)))
        except ValidationError as e:
            e.configuration = text
            raise

    @classmethod
    def from_values(cls, values: Iterable[object]) -> "Dice":
        """Build a die from a list of integers or integer strings."""
        return cls(tuple(values))

    def __len__(self) -> int:
        return len(self.faces)

    def __str__(self) -> str:
        return FACE_SEPARATOR.join(str(face) for face in self.faces)

    def roll(self, protocol: "FairRandomProtocol") -> DiceRoll:
        """
        Roll the die, drawing the face index from a fair random exchange.

        Args:
            protocol: Protocol used to agree on an index in [0, len - 1].

        Returns:
            DiceRoll with the face, its index and the exchange audit record.
        """
        exchange = protocol.run_exchange(0, len(self.faces) - 1)
        return DiceRoll(
            face=self.faces[exchange.result],
            index=exchange.result,
            exchange=exchange,
        )
