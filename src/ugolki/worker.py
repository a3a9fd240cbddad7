"""Background search worker.

One long-lived daemon thread owns a private :class:`Searcher`. Callers hand it
a request through a single-slot queue and poll a single-slot reply queue with
a short timeout, so a render or input loop keeps running while the search is
in flight. At most one request is outstanding at a time.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Optional

from . import engine
from .search import SearchStats, Searcher
from .types import Move, Outcome, Side

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchRequest:
    position: engine.Position
    side: Side
    ply_count: int
    depth: int


@dataclass(frozen=True)
class SearchReply:
    request: SearchRequest
    outcome: Outcome
    move: Move
    stats: Optional[SearchStats]
    error: Optional[str] = None


class SearchWorker:
    """Run :meth:`Searcher.next_move` off the caller's thread."""

    def __init__(self, name: str = "Turn Search") -> None:
        self._requests: "queue.Queue[Optional[SearchRequest]]" = queue.Queue(maxsize=1)
        self._replies: "queue.Queue[SearchReply]" = queue.Queue(maxsize=1)
        self._searcher = Searcher()
        self._pending = False
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()

    @property
    def pending(self) -> bool:
        """Whether a submitted request has not been collected yet."""

        return self._pending

    def submit(self, request: SearchRequest) -> None:
        if self._pending:
            raise RuntimeError("a search request is already pending")
        if not self._thread.is_alive():
            raise RuntimeError("search worker is closed")
        self._pending = True
        self._requests.put(request)

    def poll(self, timeout: float = 0.012) -> Optional[SearchReply]:
        """Return the reply if it arrives within ``timeout`` seconds, else ``None``."""

        if not self._pending:
            return None
        try:
            reply = self._replies.get(timeout=timeout)
        except queue.Empty:
            return None
        self._pending = False
        return reply

    def close(self, timeout: Optional[float] = None) -> None:
        """Stop the worker thread once the current search has finished."""

        if not self._thread.is_alive():
            return
        if self._pending:
            # Drain the reply slot so the worker is never blocked on a full queue.
            self.poll(timeout=timeout if timeout is not None else 60.0)
        self._requests.put(None)
        self._thread.join(timeout)

    def _run(self) -> None:
        while True:
            request = self._requests.get()
            if request is None:
                _log.debug("search worker stopping")
                break
            try:
                outcome, move = self._searcher.next_move(
                    request.position, request.side, request.depth, request.ply_count
                )
            except Exception as exc:
                _log.exception("search failed for %s at ply %d", request.side, request.ply_count)
                self._replies.put(
                    SearchReply(
                        request=request,
                        outcome=Outcome.defeat(0),
                        move=engine.STALEMATE_MOVE,
                        stats=None,
                        error=str(exc),
                    )
                )
                continue
            self._replies.put(
                SearchReply(
                    request=request,
                    outcome=outcome,
                    move=move,
                    stats=self._searcher.last_stats,
                )
            )
