import pytest

from ugolki import engine
from ugolki.bitboard import from_xy
from ugolki.types import Move, Outcome, Side
from ugolki.worker import SearchRequest, SearchWorker

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


@pytest.fixture
def worker():
    w = SearchWorker()
    yield w
    w.close(timeout=10.0)


def _wait(worker):
    for _ in range(500):
        reply = worker.poll(timeout=0.05)
        if reply is not None:
            return reply
    raise AssertionError("search worker did not reply")


def test_worker_returns_search_result(worker):
    request = SearchRequest(engine.parse_board(BLACK_WINS_IN_ONE), Side.BLACK, 10, 2)
    worker.submit(request)
    assert worker.pending

    reply = _wait(worker)
    assert not worker.pending
    assert reply.request == request
    assert reply.error is None
    assert reply.outcome == Outcome.victory(0)
    assert reply.move == Move(from_xy(3, 2), from_xy(2, 2))
    assert reply.stats is not None and reply.stats.depth == 2


def test_poll_without_request_returns_none(worker):
    assert worker.poll(timeout=0.0) is None


def test_single_outstanding_request(worker):
    request = SearchRequest(engine.new_game(), Side.WHITE, 0, 1)
    worker.submit(request)
    with pytest.raises(RuntimeError):
        worker.submit(request)
    _wait(worker)
    worker.submit(request)
    assert _wait(worker).request == request


def test_search_failure_is_reported(worker, monkeypatch):
    def boom(position, side, depth, ply_count):
        raise RuntimeError("search exploded")

    monkeypatch.setattr(worker._searcher, "next_move", boom)
    worker.submit(SearchRequest(engine.new_game(), Side.WHITE, 0, 2))
    reply = _wait(worker)
    assert reply.error == "search exploded"
    assert reply.move == engine.STALEMATE_MOVE
    assert reply.outcome == Outcome.defeat(0)


def test_closed_worker_rejects_requests():
    w = SearchWorker()
    w.close(timeout=10.0)
    with pytest.raises(RuntimeError):
        w.submit(SearchRequest(engine.new_game(), Side.WHITE, 0, 1))
