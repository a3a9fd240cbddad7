import pytest

from ugolki import engine
from ugolki.evaluation import (
    deep_evaluate,
    distance_to_target,
    home_pieces,
    move_potential,
    position_value,
    terminal_score,
)
from ugolki.types import Outcome, Side

# Black plays (3,2)->(2,2) to fill the top-left corner.
BLACK_WINS_IN_ONE = """
BBB.....
BBB.....
BB.B.WWW
.....WWW
.....WWW
........
........
........
"""

# Same threat, but no white piece can reach (2,2) in time.
BLACK_WINS_UNOPPOSED = """
BBB.....
BBB.....
BB.B....
........
.....WWW
.....WWW
.....WWW
........
"""

BLACK_WON = """
BBB.....
BBB.....
BBB.....
...WWW..
...WWW..
...WWW..
........
........
"""


@pytest.mark.parametrize("side", [Side.BLACK, Side.WHITE])
def test_distance_at_start(side):
    assert distance_to_target(engine.new_game(), side) == 4080


def test_distance_in_target_corner():
    position = engine.parse_board(BLACK_WON)
    assert distance_to_target(position, Side.BLACK) == 60
    assert distance_to_target(position, Side.BLACK) < distance_to_target(engine.new_game(), Side.BLACK)


def test_home_pieces():
    assert home_pieces(engine.new_game(), Side.BLACK) == 9
    assert home_pieces(engine.parse_board(BLACK_WON), Side.BLACK) == 0
    assert home_pieces(engine.parse_board(BLACK_WON), Side.WHITE) == 0


def test_hoarding_penalty_grows_with_ply():
    position = engine.new_game()
    at_grace = position_value(position, Side.BLACK, 10)
    assert at_grace == -4080 * 200
    assert position_value(position, Side.BLACK, 0) == at_grace
    assert position_value(position, Side.BLACK, 20) == at_grace - 81 * 10 * 800


def test_move_potential_counts_every_piece():
    position = engine.new_game()
    # Each piece contributes at least 2 even when it cannot move forward.
    assert move_potential(position, Side.BLACK) >= 2 * 9
    assert move_potential(position, Side.BLACK) == move_potential(position, Side.WHITE)


def test_start_is_balanced():
    position = engine.new_game()
    assert terminal_score(position, Side.BLACK, 0) == Outcome.heuristic(0)
    assert terminal_score(position, Side.WHITE, 0) == Outcome.heuristic(0)


def test_terminal_score_on_finished_game():
    position = engine.parse_board(BLACK_WON)
    assert terminal_score(position, Side.BLACK, 12) == Outcome.victory(0)
    assert terminal_score(position, Side.WHITE, 12) == Outcome.defeat(0)


def test_terminal_score_is_antisymmetric():
    position = engine.parse_board(BLACK_WINS_IN_ONE)
    mine = terminal_score(position, Side.BLACK, 10)
    theirs = terminal_score(position, Side.WHITE, 10)
    assert not mine.is_end()
    assert mine == theirs.opposite()


def test_deep_evaluate_without_horizon_is_static():
    position = engine.parse_board(BLACK_WINS_IN_ONE)
    assert deep_evaluate(position, Side.BLACK, 0, 10) == terminal_score(position, Side.BLACK, 10)


@pytest.mark.parametrize("depth", [1, 2])
def test_deep_evaluate_finds_win_in_one(depth):
    position = engine.parse_board(BLACK_WINS_IN_ONE)
    assert deep_evaluate(position, Side.BLACK, depth, 10) == Outcome.victory(1)


def test_deep_evaluate_proves_defeat_for_opponent():
    position = engine.parse_board(BLACK_WINS_UNOPPOSED)
    assert deep_evaluate(position, Side.WHITE, 2, 10) == Outcome.defeat(1)
    assert not deep_evaluate(position, Side.WHITE, 1, 10).is_end()


def test_deep_evaluate_on_finished_game():
    position = engine.parse_board(BLACK_WON)
    assert deep_evaluate(position, Side.BLACK, 3, 12) == Outcome.victory(0)
    assert deep_evaluate(position, Side.WHITE, 3, 12) == Outcome.defeat(0)


def test_deep_evaluate_sees_blocking_reply():
    # White jumps (6,2)->(4,2)->(2,2) and takes the cell Black needs.
    position = engine.parse_board(BLACK_WINS_IN_ONE)
    assert not deep_evaluate(position, Side.WHITE, 2, 10).is_end()
