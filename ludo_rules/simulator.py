from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np
from loguru import logger

from .board import occupancy_grid
from .config import config
from .roster import seat_players
from .session import Match
from .strategy import Strategy, build_move_options, create
from .types import Color


@dataclass(slots=True)
class GameSummary:
    winner: Optional[Color]
    turns: int
    captures: int
    sixes: int
    final_grid: np.ndarray = field(repr=False)

    @property
    def completed(self) -> bool:
        return self.winner is not None


@dataclass(slots=True)
class Simulator:
    """Plays whole games through ``Match`` with automated move pickers."""

    num_players: int = config.NUM_PLAYERS
    strategy_names: Sequence[str] = ("random",)
    seed: Optional[int] = config.SEED
    max_turns: int = config.MAX_TURNS
    rng: random.Random = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not config.MIN_PLAYERS <= self.num_players <= config.MAX_PLAYERS:
            raise ValueError(
                f"num_players must be between {config.MIN_PLAYERS} and {config.MAX_PLAYERS}"
            )
        if not self.strategy_names:
            raise ValueError("At least one strategy name is required")
        self.rng = random.Random(self.seed)

    def _strategies(self) -> List[Strategy]:
        # Names are cycled over the seats
        return [
            create(self.strategy_names[i % len(self.strategy_names)], rng=self.rng)
            for i in range(self.num_players)
        ]

    def play_game(self, game_index: int = 0) -> GameSummary:
        names = [f"bot{i}" for i in range(self.num_players)]
        players = seat_players(
            names,
            room_id=f"sim-{game_index}",
            player_ids=[f"g{game_index}p{i}" for i in range(self.num_players)],
        )
        strategies = self._strategies()
        match = Match.start(players, room_id=f"sim-{game_index}", rng=self.rng)

        turns = captures = sixes = 0
        while not match.state.is_over and turns < self.max_turns:
            player = match.current_player()
            die = match.roll(player.player_id)
            turns += 1
            if die == config.EXTRA_TURN_ROLL:
                sixes += 1
            if not match.state.awaiting_move:
                continue  # no legal move, turn already passed

            legal = match.legal_moves(player.player_id)
            options = build_move_options(legal, match.state.all_tokens(), die)
            choice = strategies[player.seat].select_move(options)
            if choice is None:
                raise RuntimeError(
                    f"Strategy for seat {player.seat} returned no move from {len(options)} options"
                )
            result = match.move(player.player_id, choice.token_id, choice.target)
            captures += len(result.captured)

        winner = match.winner
        if winner is None:
            logger.warning(f"Game {game_index} hit the {self.max_turns}-turn cap without a winner")
        summary = GameSummary(
            winner=winner.color if winner else None,
            turns=turns,
            captures=captures,
            sixes=sixes,
            final_grid=occupancy_grid(match.state.all_tokens(), [p.color for p in players]),
        )
        logger.debug(f"Game {game_index}: {summary}")
        return summary

    def run(self, n_games: int) -> Dict[str, object]:
        if n_games < 1:
            raise ValueError("n_games must be positive")
        summaries = [self.play_game(i) for i in range(n_games)]
        wins = Counter(s.winner.value for s in summaries if s.winner is not None)
        turns = np.asarray([s.turns for s in summaries], dtype=np.int64)
        return {
            "games": n_games,
            "completed": sum(1 for s in summaries if s.completed),
            "wins": dict(wins),
            "mean_turns": float(turns.mean()),
            "max_turns": int(turns.max()),
            "captures": sum(s.captures for s in summaries),
            "sixes": sum(s.sixes for s in summaries),
        }
