"""Static evaluation and proven-result analysis for Ugolki positions."""

from __future__ import annotations

from typing import List, Optional, Tuple

from . import engine
from .bitboard import coord_x, coord_y, iter_cells, popcount
from .types import Move, Outcome, Side

# Plies after which the positional term only rewards the weakest piece.
LATE_GAME_PLY = 30
# Plies of grace before pieces left at home start to cost.
HOARDING_GRACE_PLY = 10


def _corner_coords(side: Side, cell: int) -> Tuple[int, int]:
    """Coordinates measured from the corner ``side`` is heading for."""

    if side is Side.BLACK:
        return coord_x(cell), coord_y(cell)
    return 7 - coord_x(cell), 7 - coord_y(cell)


def distance_to_target(position: engine.Position, side: Side) -> int:
    """Cubic distance of every piece from its slot in the target corner.

    Columns and rows are sorted independently and matched against the
    3-3-3 slot layout of the corner. The worst column and row are penalised
    once more to discourage stragglers.
    """

    xs: List[int] = []
    ys: List[int] = []
    for cell in iter_cells(position.pieces(side)):
        x, y = _corner_coords(side, cell)
        xs.append(x)
        ys.append(y)
    xs.sort()
    ys.sort()

    score = 0
    for i, x in enumerate(xs):
        score += (abs(x - i // 3) + 1) ** 3 - 1
    for i, y in enumerate(ys):
        score += (abs(y - i // 3) + 1) ** 3 - 1

    score += 15 * xs[-1]
    score += 15 * ys[-1]
    return score


def positional_weight(position: engine.Position, side: Side) -> Tuple[int, int]:
    """Return (sum, minimum) of per-piece weights along the diagonal escape path."""

    weight = 0
    min_weight = 1000000
    for cell in iter_cells(position.pieces(side)):
        if side is Side.BLACK:
            x, y = 3 - coord_x(cell), 3 - coord_y(cell)
        else:
            x, y = coord_x(cell) - 4, coord_y(cell) - 4
        cur_weight = max(x, y) ** 3 * 10 - (max(abs(x - y), 3) - 3) * 100
        weight += cur_weight
        min_weight = min(min_weight, cur_weight)
    return weight, min_weight


def move_potential(position: engine.Position, side: Side) -> int:
    """Sum over pieces of the best forward progress reachable this ply."""

    total = 0
    for origin in iter_cells(position.pieces(side)):
        best = 0
        for target in iter_cells(engine.reachable_cells(position, origin)):
            best = max(best, Move(origin, target).progress_for(side) + 2)
        total += best
    return total


def home_pieces(position: engine.Position, side: Side) -> int:
    """Number of ``side``'s pieces still inside its own home corner."""

    return popcount(position.pieces(side) & engine.home_mask(side))


def position_value(position: engine.Position, side: Side, ply_count: int) -> int:
    """Heuristic value of ``position`` for ``side`` alone (higher is better)."""

    at_home = home_pieces(position, side)
    dist = distance_to_target(position, side)

    # A) Hoarding: while anything is left at home, nothing else matters as much.
    if at_home > 0:
        return -dist * 200 - at_home ** 2 * (max(ply_count, HOARDING_GRACE_PLY) - HOARDING_GRACE_PLY) * 800

    # B) Shape along the diagonal, C) distance, D) mobility toward the target.
    weight_all, weight_min = positional_weight(position, side)
    if ply_count < LATE_GAME_PLY:
        positional = (weight_all + weight_min) * 70
    else:
        positional = weight_min * 20
    return positional - dist * 700 + move_potential(position, side) * 30


def terminal_score(position: engine.Position, side: Side, ply_count: int) -> Outcome:
    """Immediate (non-searching) evaluation from ``side``'s viewpoint."""

    victor = engine.winner(position, ply_count)
    if victor is side:
        return Outcome.victory(0)
    if victor is not None:
        return Outcome.defeat(0)

    mine = position_value(position, side, ply_count)
    theirs = position_value(position, side.opponent(), ply_count)
    return Outcome.heuristic(mine - theirs)


def _proven(
    position: engine.Position,
    side: Side,
    to_move: Side,
    depth: int,
    ply_count: int,
) -> Tuple[Optional[int], Optional[int]]:
    """Return (victory_in, defeat_in) plies proven for ``side``; ``None`` when unknown."""

    victor = engine.winner(position, ply_count)
    if victor is not None:
        return (0, None) if victor is side else (None, 0)
    if depth == 0:
        return None, None

    children = (
        _proven(engine.apply_move(position, move, to_move), side, to_move.opponent(), depth - 1, ply_count + 1)
        for move in engine.generate_legal_moves(position, to_move)
    )

    victory: Optional[int]
    defeat: Optional[int]
    if to_move is side:
        # Any winning reply wins; a loss is only proven if every reply loses.
        victory, defeat = None, 1
        for child_victory, child_defeat in children:
            if child_victory is not None:
                steps = child_victory + 1
                victory = steps if victory is None else min(victory, steps)
                defeat = None
            elif child_defeat is not None and defeat is not None:
                defeat = max(defeat, child_defeat + 1)
            else:
                defeat = None
    else:
        victory, defeat = 1, None
        for child_victory, child_defeat in children:
            if child_defeat is not None:
                defeat = child_defeat if defeat is None else min(defeat, child_defeat)
                victory = None
            elif child_victory is not None and victory is not None:
                victory = max(victory, child_victory)
            else:
                victory = None

    if victory is not None and defeat is not None:
        return None, None
    return victory, defeat


def deep_evaluate(position: engine.Position, side: Side, max_depth: int, ply_count: int) -> Outcome:
    """Exhaustively look ``max_depth`` plies ahead for a forced result.

    Only ``side``'s own moves count toward the reported distance. Falls back to
    :func:`terminal_score` when nothing is proven within the horizon.
    """

    victory, defeat = _proven(position, side, side, max_depth, ply_count)
    if victory is not None:
        return Outcome.victory(victory)
    if defeat is not None:
        return Outcome.defeat(defeat)
    return terminal_score(position, side, ply_count)
