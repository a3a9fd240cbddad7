"""Ugolki game engine package."""

from .types import Move, Outcome, OutcomeKind, Side
from .engine import (
    STALEMATE_MOVE,
    STALL_PLY_LIMIT,
    Position,
    apply_move,
    format_board,
    generate_legal_moves,
    has_winner,
    is_legal_move,
    is_valid_position,
    jump_sequences,
    legal_moves,
    new_game,
    parse_board,
    reachable_cells,
    winner,
)
from .evaluation import deep_evaluate, position_value, terminal_score
from .search import SearchStats, Searcher
from .agents import Agent, HeuristicAgent, RandomAgent, SearchAgent
from .config import SearchConfig, preset_search_config

__all__ = [
    "Agent",
    "HeuristicAgent",
    "Move",
    "Outcome",
    "OutcomeKind",
    "Position",
    "RandomAgent",
    "STALEMATE_MOVE",
    "STALL_PLY_LIMIT",
    "SearchAgent",
    "SearchConfig",
    "SearchStats",
    "Searcher",
    "Side",
    "apply_move",
    "deep_evaluate",
    "format_board",
    "generate_legal_moves",
    "has_winner",
    "is_legal_move",
    "is_valid_position",
    "jump_sequences",
    "legal_moves",
    "new_game",
    "parse_board",
    "position_value",
    "preset_search_config",
    "reachable_cells",
    "terminal_score",
    "winner",
]
