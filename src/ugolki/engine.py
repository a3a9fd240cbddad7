"""Game engine for Ugolki.

Rules:
- Board is 8x8; each side owns 9 pieces packed in its 3x3 home corner.
- A piece steps to an empty orthogonal neighbour, or jumps over an adjacent
  piece (either colour) onto the empty cell right behind it. Jumps chain
  within one move; only the origin and the final landing cell are recorded.
- A side wins once its pieces exactly fill the opponent's home corner.
- After ply 50 a side that still has a piece at home loses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Set, Tuple

from .bitboard import (
    BLACK_HOME,
    BOARD_SIZE,
    JUMP_TABLE,
    PIECES_PER_SIDE,
    STEP_MASKS,
    STEP_TABLE,
    WHITE_HOME,
    Coord,
    add_cell,
    from_xy,
    has_cell,
    iter_cells,
    popcount,
    remove_cell,
)
from .types import Move, Side

STALL_PLY_LIMIT = 50

# Home corner per side, indexed by ``Side.value``.
HOME_MASKS: Tuple[int, int] = (BLACK_HOME, WHITE_HOME)
STALEMATE_MOVE = Move(from_sq=0, to_sq=0)


@dataclass(frozen=True)
class Position:
    """Both piece sets, indexed by ``Side.value``.

    Positions are immutable and compared bitwise, so they double as
    transposition keys.
    """

    masks: Tuple[int, int]

    def pieces(self, side: Side) -> int:
        return self.masks[side.value]

    @property
    def occupied(self) -> int:
        return self.masks[0] | self.masks[1]

    def with_pieces(self, side: Side, mask: int) -> "Position":
        if side is Side.BLACK:
            return Position((mask, self.masks[1]))
        return Position((self.masks[0], mask))


def home_mask(side: Side) -> int:
    return HOME_MASKS[side.value]


def new_game() -> Position:
    """Return the starting layout: every piece in its own home corner."""

    return Position((BLACK_HOME, WHITE_HOME))


def is_valid_position(position: Position) -> bool:
    black, white = position.masks
    return black & white == 0 and popcount(black) == PIECES_PER_SIDE and popcount(white) == PIECES_PER_SIDE


def winner(position: Position, ply_count: int) -> Optional[Side]:
    """Return the winner, if any, after ``ply_count`` plies have been played."""

    black, white = position.masks
    if black == WHITE_HOME:
        return Side.BLACK
    if white == BLACK_HOME:
        return Side.WHITE
    if ply_count > STALL_PLY_LIMIT:
        # Whoever still sits at home is stalling.
        if black & BLACK_HOME:
            return Side.WHITE
        if white & WHITE_HOME:
            return Side.BLACK
    return None


def has_winner(position: Position, ply_count: int) -> bool:
    return winner(position, ply_count) is not None


def reachable_cells(position: Position, origin: Coord) -> int:
    """Mask of every cell the piece on ``origin`` can finish its move on.

    Single steps onto empty neighbours plus every landing cell of a jump
    chain. Each landing cell is expanded once, so jump cycles terminate.
    """

    occupied = position.occupied
    reach = STEP_MASKS[origin] & ~occupied
    visited = 0
    stack = [origin]
    while stack:
        cell = stack.pop()
        if visited >> cell & 1:
            continue
        visited |= 1 << cell
        for over, landing in JUMP_TABLE[cell]:
            if occupied >> over & 1 and not occupied >> landing & 1:
                reach |= 1 << landing
                stack.append(landing)
    return reach


def generate_legal_moves(position: Position, side: Side) -> List[Move]:
    """All legal moves for ``side``, ordered by origin then destination cell."""

    moves: List[Move] = []
    for origin in iter_cells(position.pieces(side)):
        for target in iter_cells(reachable_cells(position, origin)):
            moves.append(Move(from_sq=origin, to_sq=target))
    return moves


def legal_moves(position: Position, side: Side) -> Set[Move]:
    return set(generate_legal_moves(position, side))


def is_legal_move(position: Position, move: Move, side: Side) -> bool:
    """Whether ``side`` may play ``move`` in ``position``."""

    if move.from_sq == move.to_sq:
        return False
    if not has_cell(position.pieces(side), move.from_sq):
        return False
    if has_cell(position.occupied, move.to_sq):
        return False
    return has_cell(reachable_cells(position, move.from_sq), move.to_sq)


def apply_move(position: Position, move: Move, side: Side) -> Position:
    """Return the position after ``side`` plays ``move``.

    ``move`` must come from :func:`generate_legal_moves`; this is only checked
    by assertions.
    """

    assert is_valid_position(position), "corrupt position"
    assert has_cell(position.pieces(side), move.from_sq), "origin is not owned by the mover"
    assert not has_cell(position.occupied, move.to_sq), "destination is occupied"
    mask = add_cell(remove_cell(position.pieces(side), move.from_sq), move.to_sq)
    return position.with_pieces(side, mask)


def jump_sequences(position: Position, side: Side, origin: Coord) -> Iterator[Tuple[Move, ...]]:
    """Yield hop-by-hop paths available to the piece on ``origin``.

    Display helper, never used by the search. Plain steps come first as
    one-hop paths, then every prefix of every jump chain in depth-first
    order. The visited set is shared across the whole traversal, so each
    landing cell is expanded at most once.
    """

    assert has_cell(position.pieces(side), origin), "origin is not owned by the mover"
    occupied = position.occupied

    for target in STEP_TABLE[origin]:
        if not occupied >> target & 1:
            yield (Move(from_sq=origin, to_sq=target),)

    path: List[Move] = []
    visited = 0

    def walk(cell: Coord) -> Iterator[Tuple[Move, ...]]:
        nonlocal visited
        if visited >> cell & 1:
            return
        visited |= 1 << cell
        for over, landing in JUMP_TABLE[cell]:
            if occupied >> over & 1 and not occupied >> landing & 1:
                path.append(Move(from_sq=cell, to_sq=landing))
                yield tuple(path)
                yield from walk(landing)
                path.pop()

    yield from walk(origin)


def format_board(position: Position) -> str:
    """Render the board as 8 rows of ``B``/``W``/``.``, top row is y = 0."""

    black, white = position.masks
    lines: List[str] = []
    for y in range(BOARD_SIZE):
        row = []
        for x in range(BOARD_SIZE):
            cell = from_xy(x, y)
            if has_cell(black, cell):
                row.append("B")
            elif has_cell(white, cell):
                row.append("W")
            else:
                row.append(".")
        lines.append("".join(row))
    return "\n".join(lines)


def parse_board(text: str) -> Position:
    """Inverse of :func:`format_board`; blank lines and surrounding spaces are ignored."""

    rows = [line.strip() for line in text.strip().splitlines() if line.strip()]
    if len(rows) != BOARD_SIZE:
        raise ValueError(f"board must have {BOARD_SIZE} rows, got {len(rows)}")
    black = 0
    white = 0
    for y, row in enumerate(rows):
        if len(row) != BOARD_SIZE:
            raise ValueError(f"row {y} must have {BOARD_SIZE} cells: {row!r}")
        for x, char in enumerate(row.upper()):
            cell = from_xy(x, y)
            if char == "B":
                black = add_cell(black, cell)
            elif char == "W":
                white = add_cell(white, cell)
            elif char != ".":
                raise ValueError(f"unexpected cell marker {char!r} at ({x},{y})")
    position = Position((black, white))
    if not is_valid_position(position):
        raise ValueError(f"each side needs exactly {PIECES_PER_SIDE} pieces")
    return position
