"""Game controller utilities for UI-driven or scripted play.

This module keeps UI concerns separate from core game logic so the
underlying sequencing and validation can be tested without driving a GUI.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Set, Tuple

from . import engine
from .agents import HeuristicAgent, SearchAgent
from .bitboard import Coord, has_cell, iter_cells
from .config import SearchConfig
from .evaluation import deep_evaluate
from .notation import parse_move_text
from .types import Move, Side
from .worker import SearchReply, SearchRequest, SearchWorker

_log = logging.getLogger(__name__)


class GameController:
    """Manage a single Ugolki game, including agents, input gating and history.

    A side whose agent is ``None`` is played by a human through
    :meth:`select_cell`, :meth:`apply_human_move` or :meth:`apply_text_move`.
    """

    def __init__(
        self,
        white_agent,
        black_agent,
        config: Optional[SearchConfig] = None,
        first: Side = Side.WHITE,
        status_side: Side = Side.WHITE,
    ) -> None:
        self.white_agent = white_agent
        self.black_agent = black_agent
        self.config = config or SearchConfig()
        self.status_side = status_side
        self._initial_turn = first
        self.position: engine.Position
        self.turn: Side
        self.ply_count: int
        self.history: List[Tuple[Side, Move]]
        self.picked: Optional[Coord] = None
        self.last_move: Optional[Tuple[Side, Move, engine.Position]] = None
        self.new_game(first=first)

    def new_game(
        self,
        first: Optional[Side] = None,
        position: Optional[engine.Position] = None,
        ply_count: int = 0,
    ) -> None:
        """Start a new game, optionally from a custom position."""

        if position is not None and not engine.is_valid_position(position):
            raise ValueError("position must hold 9 disjoint pieces per side")
        if ply_count < 0:
            raise ValueError("ply_count must not be negative")
        self._initial_turn = self._initial_turn if first is None else first
        self.position = engine.new_game() if position is None else position
        self.turn = self._initial_turn
        self.ply_count = ply_count
        self.history = []
        self.picked = None
        self.last_move = None

    def winner(self) -> Optional[Side]:
        return engine.winner(self.position, self.ply_count)

    def is_finished(self) -> bool:
        return self.winner() is not None or self.ply_count >= self.config.max_plies

    def agent_for(self, side: Side):
        return self.white_agent if side is Side.WHITE else self.black_agent

    def is_human_turn(self) -> bool:
        return not self.is_finished() and self.agent_for(self.turn) is None

    def legal_moves(self) -> List[Move]:
        return engine.generate_legal_moves(self.position, self.turn)

    def legal_destinations_for(self, origin: Coord) -> Set[Coord]:
        """Return destination cells for the current mover's piece on ``origin``."""

        if not has_cell(self.position.pieces(self.turn), origin):
            return set()
        return set(iter_cells(engine.reachable_cells(self.position, origin)))

    def select_cell(self, cell: Coord) -> Optional[Move]:
        """Handle a board pick from the human side.

        The first pick must be one of the mover's own pieces; the second pick
        applies the move if it is legal. Either way the second pick clears the
        selection. Returns the applied move, if any.
        """

        if not self.is_human_turn():
            return None
        if self.picked is None:
            if has_cell(self.position.pieces(self.turn), cell):
                self.picked = cell
            return None
        move = Move(from_sq=self.picked, to_sq=cell)
        self.picked = None
        if not engine.is_legal_move(self.position, move, self.turn):
            return None
        self._apply_move(move)
        return move

    def apply_human_move(self, move: Move) -> engine.Position:
        if self.is_finished():
            raise ValueError("game is already finished")
        if self.agent_for(self.turn) is not None:
            raise ValueError(f"{self.turn} is not played by a human")
        if not engine.is_legal_move(self.position, move, self.turn):
            raise ValueError("illegal move")
        return self._apply_move(move)

    def apply_text_move(self, raw: str) -> Move:
        """Parse and apply a move string such as ``"C3-E3"`` for the human side."""

        move = parse_move_text(raw)
        self.apply_human_move(move)
        return move

    def _apply_move(self, move: Move) -> engine.Position:
        before = self.position
        self.position = engine.apply_move(before, move, self.turn)
        self.history.append((self.turn, move))
        self.last_move = (self.turn, move, before)
        self.ply_count += 1
        self.turn = self.turn.opponent()
        self.picked = None
        return self.position

    def _fallback_move(self) -> Move:
        return HeuristicAgent().choose_move(self.position, self.turn, self.ply_count)

    def compute_ai_move(self) -> Move:
        if self.is_finished():
            raise ValueError("game is already finished")
        agent = self.agent_for(self.turn)
        if agent is None:
            raise ValueError("No agent configured for current player")
        try:
            move = agent.choose_move(self.position, self.turn, self.ply_count)
        except Exception:
            _log.warning("%s agent failed; using heuristic fallback", self.turn, exc_info=True)
            move = self._fallback_move()
        if not engine.is_legal_move(self.position, move, self.turn):
            _log.warning("%s agent returned illegal move %s; using heuristic fallback", self.turn, move)
            move = self._fallback_move()
        return move

    def step_ai(self) -> Move:
        move = self.compute_ai_move()
        self._apply_move(move)
        return move

    def request_ai_move(self, worker: SearchWorker) -> bool:
        """Hand the current position to ``worker`` unless a search is already pending.

        Only sides played by a :class:`SearchAgent` go through the worker, at
        that agent's depth; other agents move with :meth:`step_ai`.
        """

        agent = self.agent_for(self.turn)
        if self.is_finished() or not isinstance(agent, SearchAgent) or worker.pending:
            return False
        worker.submit(
            SearchRequest(
                position=self.position,
                side=self.turn,
                ply_count=self.ply_count,
                depth=agent.depth,
            )
        )
        return True

    def poll_ai_move(self, worker: SearchWorker, timeout: Optional[float] = None) -> Optional[Move]:
        """Apply the worker's reply if it is ready; returns the applied move."""

        wait = self.config.poll_interval_ms / 1000.0 if timeout is None else timeout
        reply = worker.poll(timeout=wait)
        if reply is None:
            return None
        if not self._reply_matches(reply):
            _log.debug("dropping stale search reply for ply %d", reply.request.ply_count)
            return None
        move = reply.move
        if reply.error is not None or not engine.is_legal_move(self.position, move, self.turn):
            _log.warning("%s search produced no usable move (%s); using heuristic fallback", self.turn, reply.error)
            move = self._fallback_move()
        self._apply_move(move)
        return move

    def _reply_matches(self, reply: SearchReply) -> bool:
        request = reply.request
        return (
            request.position == self.position
            and request.side is self.turn
            and request.ply_count == self.ply_count
        )

    def last_move_path(self) -> Tuple[Move, ...]:
        """Hop-by-hop path of the last applied move, for animation."""

        if self.last_move is None:
            return ()
        side, move, before = self.last_move
        for sequence in engine.jump_sequences(before, side, move.from_sq):
            if sequence[-1].to_sq == move.to_sq:
                return sequence
        return (move,)

    def status_text(self) -> str:
        if self.is_finished():
            return f"finished in {self.ply_count} turns"
        outcome = deep_evaluate(self.position, self.status_side, self.config.eval_depth, self.ply_count)
        return f"Eval({self.status_side}): {outcome}"

    def turn_text(self) -> str:
        return f"turn {self.ply_count}"
