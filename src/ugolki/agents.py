"""Agents for playing Ugolki."""

from __future__ import annotations

import random
from typing import Optional

from . import engine
from .search import SearchStats, Searcher
from .types import Move, Side


class Agent:
    """Base class for agents."""

    def choose_move(self, position: engine.Position, side: Side, ply_count: int) -> Move:  # noqa: D401
        """Return a move for ``side`` in ``position``."""

        raise NotImplementedError

    def reseed(self, seed: Optional[int]) -> None:
        """Reset any internal randomness; deterministic agents ignore this."""

        _ = seed


class RandomAgent(Agent):
    """Agent that selects a random legal move with reproducible seeding."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def reseed(self, seed: Optional[int]) -> None:
        self._rng.seed(seed)

    def choose_move(self, position: engine.Position, side: Side, ply_count: int) -> Move:
        moves = engine.generate_legal_moves(position, side)
        if not moves:
            raise ValueError("No legal moves available")
        return self._rng.choice(moves)


class HeuristicAgent(Agent):
    """Agent using a lightweight heuristic.

    Priority: immediate win > largest progress toward the target corner. RNG breaks ties.
    """

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def reseed(self, seed: Optional[int]) -> None:
        self._rng.seed(seed)

    def choose_move(self, position: engine.Position, side: Side, ply_count: int) -> Move:
        moves = engine.generate_legal_moves(position, side)
        if not moves:
            raise ValueError("No legal moves available")

        scored = []
        for mv in moves:
            new_position = engine.apply_move(position, mv, side)
            win = engine.winner(new_position, ply_count + 1) is side
            scored.append((win, mv.progress_for(side), mv))

        best_score = max(score[:2] for score in scored)
        best_moves = [mv for win, progress, mv in scored if (win, progress) == best_score]
        return self._rng.choice(best_moves)


class SearchAgent(Agent):
    """Agent backed by :class:`Searcher` at a fixed depth."""

    def __init__(self, depth: int = 3):
        if depth < 1:
            raise ValueError("depth must be at least 1")
        self.depth = depth
        self._searcher = Searcher()
        self.last_stats: Optional[SearchStats] = None

    def choose_move(self, position: engine.Position, side: Side, ply_count: int) -> Move:
        _, move = self._searcher.next_move(position, side, self.depth, ply_count)
        self.last_stats = self._searcher.last_stats
        if move == engine.STALEMATE_MOVE:
            raise ValueError("No legal moves available")
        return move
