"""Bit-level board primitives for Ugolki.

Cells are packed into a single integer ``x | y << 3`` so a whole side fits into
one 64-bit mask (bit ``i`` set means a piece stands on cell ``i``).

Rule reminders:
- Board is 8x8, x grows to the right and y grows downward.
- White starts in the top-left 3x3 corner, Black in the bottom-right one.
- A side wins by filling the opponent's starting corner.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

BOARD_SIZE = 8
CELL_COUNT = BOARD_SIZE * BOARD_SIZE
PIECES_PER_SIDE = 9

Coord = int

WHITE_HOME = 7 | 7 << 8 | 7 << 16
BLACK_HOME = (224 | 224 << 8 | 224 << 16) << 40


def from_xy(x: int, y: int) -> Coord:
    """Pack a column/row pair into a cell index."""

    return x | y << 3


def coord_x(cell: Coord) -> int:
    return cell & 7


def coord_y(cell: Coord) -> int:
    return cell >> 3


def one_up(cell: Coord) -> Optional[Coord]:
    return cell - 8 if cell > 7 else None


def one_down(cell: Coord) -> Optional[Coord]:
    return cell + 8 if cell < 56 else None


def one_left(cell: Coord) -> Optional[Coord]:
    return cell - 1 if cell & 7 != 0 else None


def one_right(cell: Coord) -> Optional[Coord]:
    return cell + 1 if cell & 7 != 7 else None


def add_cell(mask: int, cell: Coord) -> int:
    return mask | 1 << cell


def remove_cell(mask: int, cell: Coord) -> int:
    return mask & ~(1 << cell)


def has_cell(mask: int, cell: Coord) -> bool:
    return mask >> cell & 1 != 0


def popcount(mask: int) -> int:
    return bin(mask).count("1")


def iter_cells(mask: int) -> Iterator[Coord]:
    """Yield occupied cells in ascending index order."""

    while mask:
        low = mask & -mask
        yield low.bit_length() - 1
        mask ^= low


def mask_of(cells) -> int:
    """Build a mask from an iterable of cells."""

    mask = 0
    for cell in cells:
        mask |= 1 << cell
    return mask


# Steps are listed up, down, left, right; jumps up, left, down, right.
_STEPPERS = (one_up, one_down, one_left, one_right)
_JUMPERS = (one_up, one_left, one_down, one_right)


def _build_step_table() -> Tuple[Tuple[Coord, ...], ...]:
    table: List[Tuple[Coord, ...]] = []
    for cell in range(CELL_COUNT):
        neighbours = []
        for step in _STEPPERS:
            target = step(cell)
            if target is not None:
                neighbours.append(target)
        table.append(tuple(neighbours))
    return tuple(table)


def _build_jump_table() -> Tuple[Tuple[Tuple[Coord, Coord], ...], ...]:
    table: List[Tuple[Tuple[Coord, Coord], ...]] = []
    for cell in range(CELL_COUNT):
        jumps = []
        for step in _JUMPERS:
            over = step(cell)
            if over is None:
                continue
            landing = step(over)
            if landing is not None:
                jumps.append((over, landing))
        table.append(tuple(jumps))
    return tuple(table)


STEP_TABLE = _build_step_table()
JUMP_TABLE = _build_jump_table()
STEP_MASKS: Tuple[int, ...] = tuple(mask_of(cells) for cells in STEP_TABLE)
