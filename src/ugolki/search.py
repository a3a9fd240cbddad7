"""Negamax alpha-beta search with a per-call transposition cache."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from . import engine
from .evaluation import terminal_score
from .types import Move, Outcome, Side

_log = logging.getLogger(__name__)

CacheKey = Tuple[Side, engine.Position]


@dataclass
class SearchStats:
    """Aggregated statistics from a single search."""

    depth: int
    nodes: int
    leaves: int
    cache_hits: int
    cache_stores: int
    elapsed_ms: float


class Searcher:
    """Depth-limited negamax over immutable positions.

    The cache maps (mover, position) to the most favourable outcome seen for
    that node. Entries are not qualified by depth or window, and the cache is
    wiped at the start of every :meth:`next_move` call because the stalling
    rule and the evaluation both depend on the absolute ply count.

    A searcher is not thread-safe; give each worker its own instance.
    """

    def __init__(self) -> None:
        self._cache: Dict[CacheKey, Outcome] = {}
        self.last_stats: Optional[SearchStats] = None
        self._nodes = 0
        self._leaves = 0
        self._cache_hits = 0
        self._cache_stores = 0

    def next_move(
        self, position: engine.Position, side: Side, depth: int, ply_count: int
    ) -> Tuple[Outcome, Move]:
        """Return the best outcome for ``side`` and the move that achieves it.

        ``ply_count`` is the number of plies already played. The effective
        horizon is one ply deeper than ``depth``. When ``side`` has no legal
        move the result is ``(Outcome.defeat(0), engine.STALEMATE_MOVE)``.
        """

        if depth < 1:
            raise ValueError("depth must be at least 1")
        self._cache.clear()
        self._nodes = 0
        self._leaves = 0
        self._cache_hits = 0
        self._cache_stores = 0
        start_time = time.monotonic()

        if depth == 1:
            outcome, move = self._best_immediate(position, side, ply_count)
        else:
            outcome, move = self._search_root(position, side, depth, ply_count)

        elapsed_ms = (time.monotonic() - start_time) * 1000.0
        self.last_stats = SearchStats(
            depth=depth,
            nodes=self._nodes,
            leaves=self._leaves,
            cache_hits=self._cache_hits,
            cache_stores=self._cache_stores,
            elapsed_ms=elapsed_ms,
        )
        _log.debug(
            "%s depth=%d ply=%d -> %s %s (nodes=%d leaves=%d hits=%d %.1fms)",
            side,
            depth,
            ply_count,
            move,
            outcome,
            self._nodes,
            self._leaves,
            self._cache_hits,
            elapsed_ms,
        )
        return outcome, move

    def _search_root(
        self, position: engine.Position, side: Side, depth: int, ply_count: int
    ) -> Tuple[Outcome, Move]:
        self._nodes += 1
        best = Outcome.defeat(0)
        best_move: Optional[Move] = None
        for move in engine.generate_legal_moves(position, side):
            child = engine.apply_move(position, move, side)
            if engine.has_winner(child, ply_count + 1):
                evaluation = terminal_score(child, side, ply_count + 1)
            else:
                evaluation = (
                    self._negamax(
                        child,
                        side.opponent(),
                        depth - 1,
                        Outcome.defeat(0),
                        best.opposite(),
                        ply_count + 1,
                    )
                    .opposite()
                    .add_step()
                )
            # Strict comparison: ties keep the first move generated.
            if best_move is None or evaluation > best:
                best = evaluation
                best_move = move
        if best_move is None:
            return Outcome.defeat(0), engine.STALEMATE_MOVE
        return best, best_move

    def _best_immediate(
        self, position: engine.Position, side: Side, ply_count: int
    ) -> Tuple[Outcome, Move]:
        """Score every move with the static evaluator and keep the first best one."""

        best: Optional[Outcome] = None
        best_move = engine.STALEMATE_MOVE
        for move in engine.generate_legal_moves(position, side):
            self._leaves += 1
            evaluation = terminal_score(engine.apply_move(position, move, side), side, ply_count + 1)
            if best is None or evaluation > best:
                best = evaluation
                best_move = move
        if best is None:
            return Outcome.defeat(0), engine.STALEMATE_MOVE
        return best, best_move

    def _negamax(
        self,
        position: engine.Position,
        side: Side,
        depth: int,
        alpha: Outcome,
        beta: Outcome,
        ply_count: int,
    ) -> Outcome:
        key = (side, position)
        cached = self._cache.get(key)
        if cached is not None:
            self._cache_hits += 1
            return cached

        self._nodes += 1
        if depth == 1:
            value = self._best_immediate(position, side, ply_count)[0]
        else:
            moves = engine.generate_legal_moves(position, side)
            moves.sort(key=lambda mv: mv.progress_for(side), reverse=True)
            for move in moves:
                child = engine.apply_move(position, move, side)
                if engine.has_winner(child, ply_count):
                    evaluation = terminal_score(child, side, ply_count)
                else:
                    evaluation = (
                        self._negamax(
                            child,
                            side.opponent(),
                            depth - 1,
                            beta.opposite(),
                            alpha.opposite(),
                            ply_count + 1,
                        )
                        .opposite()
                        .add_step()
                    )
                if evaluation > alpha:
                    alpha = evaluation
                if alpha >= beta:
                    alpha = beta
                    break
            value = alpha

        self._remember(key, value)
        return value

    def _remember(self, key: CacheKey, value: Outcome) -> None:
        """Store ``value``, keeping the more favourable result if one is cached."""

        existing = self._cache.get(key)
        if existing is None or value > existing:
            self._cache[key] = value
        self._cache_stores += 1
