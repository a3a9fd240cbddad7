from ugolki import engine
from ugolki.types import Side

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

WHITE_WON = """
........
........
..BBB...
..BBB...
..BBB...
.....WWW
.....WWW
.....WWW
"""

# White still has a piece at home, Black has left entirely.
STALLING_WHITE = """
W.......
........
........
WWWWWWWW
BBBBBBBB
B.......
........
........
"""


def test_filled_corner_wins():
    assert engine.winner(engine.parse_board(BLACK_WON), 0) is Side.BLACK
    assert engine.winner(engine.parse_board(WHITE_WON), 0) is Side.WHITE
    assert engine.has_winner(engine.parse_board(BLACK_WON), 7)


def test_no_winner_at_start():
    position = engine.new_game()
    for ply in (0, 1, engine.STALL_PLY_LIMIT):
        assert engine.winner(position, ply) is None
        assert not engine.has_winner(position, ply)


def test_stalling_loses_after_limit():
    position = engine.parse_board(STALLING_WHITE)
    assert engine.winner(position, engine.STALL_PLY_LIMIT) is None
    assert engine.winner(position, engine.STALL_PLY_LIMIT + 1) is Side.BLACK


def test_stall_check_blames_black_first():
    # Both sides still sit at home: Black is checked first.
    assert engine.winner(engine.new_game(), engine.STALL_PLY_LIMIT + 1) is Side.WHITE


def test_filled_corner_beats_stall_rule():
    assert engine.winner(engine.parse_board(BLACK_WON), 200) is Side.BLACK
