"""Square names and move text for Ugolki.

Columns ``A``..``H`` map to x = 0..7 and rows ``1``..``8`` to y = 0..7, so
White's home corner spans ``A1``..``C3`` and Black's ``F6``..``H8``.
"""
from __future__ import annotations

import re

from .bitboard import BOARD_SIZE, Coord, coord_x, coord_y, from_xy
from .types import Move

COLUMNS = "ABCDEFGH"
ROWS = "12345678"

_MOVE_PATTERN = re.compile(r"^\(?([A-H][1-8])\s*(?:-|,|\s)\s*([A-H][1-8])\)?$")


def cell_to_square(cell: Coord) -> str:
    """Convert a cell index to its square name (e.g., 0 -> "A1")."""

    if not 0 <= cell < BOARD_SIZE * BOARD_SIZE:
        raise ValueError(f"cell out of bounds: {cell}")
    return f"{COLUMNS[coord_x(cell)]}{ROWS[coord_y(cell)]}"


def square_to_cell(sq: str) -> Coord:
    """Convert a square name (e.g., "F6") to a cell index."""

    if not sq or len(sq) != 2:
        raise ValueError(f"Invalid square '{sq}'")
    col_char = sq[0].upper()
    row_char = sq[1]
    if col_char not in COLUMNS:
        raise ValueError(f"Invalid column in square '{sq}'")
    if row_char not in ROWS:
        raise ValueError(f"Invalid row in square '{sq}'")
    return from_xy(COLUMNS.index(col_char), ROWS.index(row_char))


def format_move(move: Move) -> str:
    return f"{cell_to_square(move.from_sq)}-{cell_to_square(move.to_sq)}"


def parse_move_text(raw: str) -> Move:
    """Parse user-entered move text.

    Accepted examples (case-insensitive): ``"F6-D6"``, ``"F6 D6"``,
    ``"F6,D6"``, ``"(F6,D6)"``.

    Raises:
        ValueError: if the text cannot be parsed.
    """

    text = raw.strip().upper()
    if not text:
        raise ValueError("Move text is empty")
    match = _MOVE_PATTERN.match(text)
    if not match:
        raise ValueError("Could not parse move; use formats like 'F6-D6' or 'F6 D6'")
    return Move(from_sq=square_to_cell(match.group(1)), to_sq=square_to_cell(match.group(2)))
