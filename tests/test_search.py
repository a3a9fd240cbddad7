import pytest

from ugolki import engine
from ugolki.bitboard import from_xy
from ugolki.evaluation import terminal_score
from ugolki.search import Searcher
from ugolki.types import Move, Outcome, Side

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

WINNING_MOVE = Move(from_xy(3, 2), from_xy(2, 2))


@pytest.mark.parametrize("depth", [1, 2, 3])
def test_finds_immediate_win(depth):
    position = engine.parse_board(BLACK_WINS_IN_ONE)
    outcome, move = Searcher().next_move(position, Side.BLACK, depth, 10)
    assert outcome == Outcome.victory(0)
    assert move == WINNING_MOVE


def test_lost_root_still_returns_first_move():
    position = engine.parse_board(BLACK_WINS_UNOPPOSED)
    outcome, move = Searcher().next_move(position, Side.WHITE, 2, 10)
    assert outcome == Outcome.defeat(1)
    assert move == engine.generate_legal_moves(position, Side.WHITE)[0]


@pytest.mark.parametrize("depth", [1, 2, 3])
def test_start_position_returns_legal_move(depth):
    position = engine.new_game()
    for side in (Side.WHITE, Side.BLACK):
        outcome, move = Searcher().next_move(position, side, depth, 0)
        assert move in engine.legal_moves(position, side)
        assert not outcome.is_end()


def test_depth_one_matches_best_static_reply():
    position = engine.new_game()
    _, move = Searcher().next_move(position, Side.WHITE, 1, 0)
    scores = [
        terminal_score(engine.apply_move(position, mv, Side.WHITE), Side.WHITE, 1)
        for mv in engine.generate_legal_moves(position, Side.WHITE)
    ]
    best = max(scores)
    first_best = engine.generate_legal_moves(position, Side.WHITE)[scores.index(best)]
    assert move == first_best


def test_rejects_zero_depth():
    with pytest.raises(ValueError):
        Searcher().next_move(engine.new_game(), Side.WHITE, 0, 0)


@pytest.mark.parametrize("depth", [1, 3])
def test_no_legal_moves_reports_stalemate(monkeypatch, depth):
    monkeypatch.setattr(engine, "generate_legal_moves", lambda position, side: [])
    outcome, move = Searcher().next_move(engine.new_game(), Side.BLACK, depth, 4)
    assert outcome == Outcome.defeat(0)
    assert move == engine.STALEMATE_MOVE


def test_repeated_searches_agree():
    searcher = Searcher()
    position = engine.new_game()
    first = searcher.next_move(position, Side.BLACK, 3, 0)
    second = searcher.next_move(position, Side.BLACK, 3, 0)
    assert first == second
    assert Searcher().next_move(position, Side.BLACK, 3, 0) == first


def test_stats_are_recorded():
    searcher = Searcher()
    assert searcher.last_stats is None
    searcher.next_move(engine.new_game(), Side.WHITE, 3, 0)
    stats = searcher.last_stats
    assert stats is not None
    assert stats.depth == 3
    assert stats.nodes > 1
    assert stats.leaves > 0
    assert stats.cache_stores > 0
    assert stats.elapsed_ms >= 0.0


def test_cache_keeps_more_favourable_entry():
    searcher = Searcher()
    key = (Side.WHITE, engine.new_game())
    searcher._remember(key, Outcome.heuristic(5))
    searcher._remember(key, Outcome.heuristic(3))
    assert searcher._cache[key] == Outcome.heuristic(5)
    searcher._remember(key, Outcome.victory(2))
    assert searcher._cache[key] == Outcome.victory(2)
