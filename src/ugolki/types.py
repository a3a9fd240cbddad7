"""Core data structures for Ugolki.

Rule reminders:
- Black (index 0) starts bottom-right and heads for the top-left corner.
- White (index 1) starts top-left and heads for the bottom-right corner.
- A move is a single orthogonal step or a chain of jumps over any pieces.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Tuple

from .bitboard import Coord, coord_x, coord_y


class Side(Enum):
    """Players in the game; the value doubles as the index into a position."""

    BLACK = 0
    WHITE = 1

    def opponent(self) -> "Side":
        """Return the opposing side."""

        return Side.WHITE if self is Side.BLACK else Side.BLACK

    def __str__(self) -> str:
        return self.name.capitalize()


# Sign applied to (dx + dy) to measure progress toward the target corner.
FORWARD_SIGN = {Side.BLACK: -1, Side.WHITE: 1}


@dataclass(frozen=True)
class Move:
    """One ply: origin and final landing cell (hops of a jump chain are not kept)."""

    from_sq: Coord
    to_sq: Coord

    def progress_for(self, side: Side) -> int:
        """Signed displacement toward ``side``'s target corner."""

        dx = coord_x(self.to_sq) - coord_x(self.from_sq)
        dy = coord_y(self.to_sq) - coord_y(self.from_sq)
        return FORWARD_SIGN[side] * (dx + dy)

    def __str__(self) -> str:
        return (
            f"({coord_x(self.from_sq)},{coord_y(self.from_sq)})"
            f"->({coord_x(self.to_sq)},{coord_y(self.to_sq)})"
        )


class OutcomeKind(Enum):
    DEFEAT = "defeat"
    HEURISTIC = "heuristic"
    VICTORY = "victory"


@total_ordering
@dataclass(frozen=True)
class Outcome:
    """Graded result of an evaluation or a search.

    Every victory ranks above every heuristic score, which ranks above every
    defeat. A faster victory beats a slower one and a slower defeat beats a
    faster one. ``value`` is the ply distance for proven results and the raw
    score otherwise.
    """

    kind: OutcomeKind
    value: int

    @classmethod
    def victory(cls, ply: int) -> "Outcome":
        return cls(OutcomeKind.VICTORY, ply)

    @classmethod
    def defeat(cls, ply: int) -> "Outcome":
        return cls(OutcomeKind.DEFEAT, ply)

    @classmethod
    def heuristic(cls, score: int) -> "Outcome":
        return cls(OutcomeKind.HEURISTIC, score)

    def _rank(self) -> Tuple[int, int]:
        if self.kind is OutcomeKind.VICTORY:
            return (2, -self.value)
        if self.kind is OutcomeKind.DEFEAT:
            return (0, self.value)
        return (1, self.value)

    def __lt__(self, other: "Outcome") -> bool:
        if not isinstance(other, Outcome):
            return NotImplemented
        return self._rank() < other._rank()

    def opposite(self) -> "Outcome":
        """Flip the viewpoint to the other side."""

        if self.kind is OutcomeKind.VICTORY:
            return Outcome.defeat(self.value)
        if self.kind is OutcomeKind.DEFEAT:
            return Outcome.victory(self.value)
        return Outcome.heuristic(-self.value)

    def add_step(self) -> "Outcome":
        """Push a proven result one ply further away; scores are unchanged."""

        if self.is_end():
            return Outcome(self.kind, self.value + 1)
        return self

    def is_end(self) -> bool:
        return self.kind is not OutcomeKind.HEURISTIC

    def __str__(self) -> str:
        if self.kind is OutcomeKind.VICTORY:
            return f"victory in {self.value} turns"
        if self.kind is OutcomeKind.DEFEAT:
            return f"defeat in {self.value} turns"
        return str(self.value)
