"""CLI runner for Ugolki.

Usage examples:
- Single game: ``python -m ugolki.runner --mode game --white search --black heuristic --preset fast``
- Match: ``python -m ugolki.runner --mode match --games 6 --white search --black random --seed 42``
"""

from __future__ import annotations

import argparse
import logging
import random
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

from . import engine
from .agents import HeuristicAgent, RandomAgent, SearchAgent
from .config import SearchConfig, preset_search_config
from .evaluation import deep_evaluate
from .notation import format_move
from .search import SearchStats
from .types import Side

AGENT_NAMES = ["random", "heuristic", "search"]


@dataclass
class GameSummary:
    winner: Optional[Side]
    plies: int
    move_times: Dict[Side, List[float]]
    search_stats: Dict[Side, List[SearchStats]]


def _build_agent(name: str, seed: Optional[int], depth: int):
    if name == "random":
        return RandomAgent(seed=seed)
    if name == "heuristic":
        return HeuristicAgent(seed=seed)
    if name == "search":
        return SearchAgent(depth=depth)
    raise ValueError(f"Unknown agent '{name}'")


def play_game(
    white_agent,
    black_agent,
    config: SearchConfig,
    first: Side = Side.WHITE,
    emit_moves: bool = False,
    show_board: bool = False,
    show_stats: bool = False,
    show_eval: bool = False,
) -> GameSummary:
    position = engine.new_game()
    side = first
    plies = 0
    move_times: Dict[Side, List[float]] = {Side.WHITE: [], Side.BLACK: []}
    search_stats: Dict[Side, List[SearchStats]] = {Side.WHITE: [], Side.BLACK: []}

    while plies < config.max_plies:
        victor = engine.winner(position, plies)
        if victor is not None:
            if emit_moves or show_board:
                print(f"{victor} wins after {plies} plies")
            return GameSummary(winner=victor, plies=plies, move_times=move_times, search_stats=search_stats)

        agent = white_agent if side is Side.WHITE else black_agent
        start = time.monotonic()
        move = agent.choose_move(position, side, plies)
        move_times[side].append((time.monotonic() - start) * 1000.0)
        stats = getattr(agent, "last_stats", None)
        if stats is not None:
            search_stats[side].append(stats)

        position = engine.apply_move(position, move, side)
        plies += 1
        if emit_moves:
            line = f"{plies}: {side} {format_move(move)}"
            if show_eval:
                line += f"  Eval({Side.WHITE}): {deep_evaluate(position, Side.WHITE, config.eval_depth, plies)}"
            print(line)
        if show_stats and stats is not None:
            print(
                f"   depth={stats.depth} nodes={stats.nodes} leaves={stats.leaves} "
                f"hits={stats.cache_hits} stores={stats.cache_stores} time={stats.elapsed_ms:.1f}ms"
            )
        if show_board:
            print(engine.format_board(position))
            print()
        side = side.opponent()

    victor = engine.winner(position, plies)
    if emit_moves or show_board:
        if victor is None:
            print(f"No winner after {plies} plies")
        else:
            print(f"{victor} wins after {plies} plies")
    return GameSummary(winner=victor, plies=plies, move_times=move_times, search_stats=search_stats)


def play_match(
    white_agent,
    black_agent,
    config: SearchConfig,
    games: int,
    seed: Optional[int],
    verbose: bool,
    show_stats: bool,
    show_board: bool = False,
    show_eval: bool = False,
) -> Dict[Optional[Side], int]:
    """Play ``games`` games, alternating who moves first, and print the tally."""

    base_rng = random.Random(seed)
    wins: Dict[Optional[Side], int] = {Side.WHITE: 0, Side.BLACK: 0, None: 0}

    for game_index in range(1, games + 1):
        first = Side.WHITE if game_index % 2 == 1 else Side.BLACK
        # Reseed stochastic agents per game so a match is reproducible.
        game_seed = base_rng.randint(0, 2**31 - 1)
        white_agent.reseed(game_seed)
        black_agent.reseed(game_seed + 1)
        if verbose:
            print(f"=== Game {game_index} (first: {first}) ===")
        summary = play_game(
            white_agent=white_agent,
            black_agent=black_agent,
            config=config,
            first=first,
            emit_moves=verbose,
            show_board=show_board,
            show_stats=show_stats,
            show_eval=show_eval,
        )
        wins[summary.winner] += 1
        result = "no winner" if summary.winner is None else f"{summary.winner} wins"
        print(
            f"Game {game_index}: {result} in {summary.plies} plies "
            f"(score {wins[Side.WHITE]}-{wins[Side.BLACK]}, undecided {wins[None]})"
        )

    if wins[Side.WHITE] == wins[Side.BLACK]:
        print("Match drawn")
    else:
        overall = Side.WHITE if wins[Side.WHITE] > wins[Side.BLACK] else Side.BLACK
        print(f"Match winner: {overall}")
    return wins


def build_config(args: argparse.Namespace) -> SearchConfig:
    cfg = preset_search_config(args.preset)
    return SearchConfig(
        search_depth=cfg.search_depth if args.depth is None else args.depth,
        eval_depth=cfg.eval_depth if args.eval_depth is None else args.eval_depth,
        poll_interval_ms=cfg.poll_interval_ms,
        max_plies=cfg.max_plies if args.max_plies is None else args.max_plies,
        preset=cfg.preset,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ugolki runner")
    parser.add_argument("--mode", choices=["game", "match"], required=True)
    parser.add_argument("--white", choices=AGENT_NAMES, default="search")
    parser.add_argument("--black", choices=AGENT_NAMES, default="heuristic")
    parser.add_argument("--preset", default="default", help="Search preset: fast, default or strong")
    parser.add_argument("--depth", type=int, default=None, help="Override the preset search depth")
    parser.add_argument("--eval-depth", type=int, default=None, help="Override the preset status evaluation depth")
    parser.add_argument("--max-plies", type=int, default=None)
    parser.add_argument("--games", type=int, default=2)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--board", action="store_true", help="Print the board after every move")
    parser.add_argument("--eval", action="store_true", help="Print the deep evaluation after every move")
    parser.add_argument("--stats", action="store_true", help="Print search stats each move")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = build_config(args)
        if args.games < 1:
            raise ValueError("--games must be at least 1")
        white_agent = _build_agent(args.white, seed=args.seed, depth=config.search_depth)
        black_agent = _build_agent(
            args.black, seed=None if args.seed is None else args.seed + 1, depth=config.search_depth
        )
    except ValueError as exc:
        print(f"Invalid configuration: {exc}")
        raise SystemExit(1)

    if args.mode == "game":
        summary = play_game(
            white_agent=white_agent,
            black_agent=black_agent,
            config=config,
            emit_moves=True,
            show_board=args.board,
            show_stats=args.stats,
            show_eval=args.eval,
        )
        print(f"Game winner: {'none' if summary.winner is None else summary.winner}")
    else:
        play_match(
            white_agent=white_agent,
            black_agent=black_agent,
            config=config,
            games=args.games,
            seed=args.seed,
            verbose=args.board or args.eval,
            show_stats=args.stats,
            show_board=args.board,
            show_eval=args.eval,
        )


if __name__ == "__main__":
    main()
