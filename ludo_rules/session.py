from __future__ import annotations

import random
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from loguru import logger

from . import engine
from .exceptions import (
    DieAlreadyRolledError,
    DieNotRolledError,
    GameOverError,
    TurnOwnershipError,
)
from .roster import find_token, new_game_state, regroup
from .types import GameState, MoveResult, Player


@dataclass(slots=True)
class Match:
    """Drives one room's game loop around the pure rules engine.

    Holds the roles the engine leaves to its caller: checking that the
    acting player owns the active seat, recording dice, freezing the round
    once someone wins, and serializing mutations.
    """

    players: List[Player]
    state: GameState
    rng: random.Random = field(default_factory=random.Random)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        self.players = sorted(self.players, key=lambda p: p.seat)

    @classmethod
    def start(
        cls,
        players: Sequence[Player],
        room_id: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ) -> "Match":
        state = new_game_state(players, room_id=room_id)
        seated = ", ".join(f"{p.name}({p.color.value})" for p in players)
        logger.info(f"Room {room_id}: game started with {seated}")
        return cls(players=list(players), state=state, rng=rng or random.Random())

    # --- Queries ---
    @property
    def winner(self) -> Optional[Player]:
        if self.state.winner is None:
            return None
        return self._player(self.state.winner)

    def current_player(self) -> Player:
        return self.players[self.state.current_turn]

    def _player(self, player_id: str) -> Player:
        for p in self.players:
            if p.player_id == player_id:
                return p
        raise TurnOwnershipError(f"Player '{player_id}' is not seated in this room")

    def legal_moves(self, player_id: str) -> Dict[str, List[int]]:
        """Legal targets per token of ``player_id`` for the pending die."""
        if self.state.dice_value is None or not self.state.awaiting_move:
            return {}
        all_tokens = self.state.all_tokens()
        out: Dict[str, List[int]] = {}
        for token in self.state.tokens.get(player_id, []):
            targets = engine.compute_legal_moves(
                token, self.state.dice_value, all_tokens, state=self.state
            )
            if targets:
                out[token.token_id] = targets
        return out

    # --- Actions ---
    def _check_turn(self, player_id: str) -> None:
        if self.state.is_over:
            raise GameOverError(f"Game already won by {self.state.winner}")
        player = self._player(player_id)
        if player.seat != self.state.current_turn:
            logger.warning(
                f"{player.name} tried to act on seat {self.state.current_turn}'s turn"
            )
            raise TurnOwnershipError(f"It is not {player.name}'s turn")

    def _end_turn(self, die_value: int) -> None:
        self.state.awaiting_move = False
        self.state.current_turn = engine.advance_turn(
            self.state, len(self.players), die_value
        )

    def roll(self, player_id: str, value: Optional[int] = None) -> int:
        """Roll for the active player.

        ``value`` forces the result (replays and tests). When the roll
        leaves the player without any legal move the turn passes at once.
        """
        with self._lock:
            self._check_turn(player_id)
            if self.state.awaiting_move:
                raise DieAlreadyRolledError("The pending roll has not been used yet")
            if value is None:
                value = engine.roll_die(self.rng)
            else:
                engine.validate_die(value)
            self.state.dice_value = value
            self.state.awaiting_move = True
            logger.debug(f"{self._player(player_id).name} rolled {value}")

            if not self.legal_moves(player_id):
                logger.debug(f"{self._player(player_id).name} has no legal move with {value}")
                self._end_turn(value)
            return value

    def move(self, player_id: str, token_id: str, target: Optional[int] = None) -> MoveResult:
        """Apply the pending roll to one of the active player's tokens.

        ``target`` defaults to the token's single legal destination.
        """
        with self._lock:
            self._check_turn(player_id)
            if not self.state.awaiting_move or self.state.dice_value is None:
                raise DieNotRolledError("Roll the die before moving")
            all_tokens = self.state.all_tokens()
            token = find_token(token_id, all_tokens)
            if token.player_id != player_id:
                raise TurnOwnershipError(f"Token '{token_id}' does not belong to {player_id}")

            die = self.state.dice_value
            if target is None:
                legal = engine.compute_legal_moves(token, die, all_tokens, state=self.state)
                target = legal[0] if legal else -1
            result = engine.apply_move(token, target, all_tokens, die, state=self.state)
            self.state.tokens = regroup(self.players, result.roster)

            mover = self._player(player_id)
            for victim in result.captured:
                logger.info(
                    f"{mover.name} captured {victim.token_id} at {result.new_position}"
                )
            if result.finished:
                logger.info(f"{mover.name} brought {token_id} home")

            if engine.is_game_won(player_id, result.roster):
                self.state.winner = player_id
                self.state.awaiting_move = False
                logger.info(f"Room {self.state.room_id}: {mover.name} wins")
            else:
                self._end_turn(die)
            return result
