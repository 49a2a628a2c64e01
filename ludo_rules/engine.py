"""
Ludo rules engine.

Pure functions over explicit inputs: legal-move computation, move
application with capture resolution, win detection and turn advancement.
Nothing here keeps state between calls, so one process can drive any
number of rooms side by side.
"""

from __future__ import annotations

import random
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence

from loguru import logger

from .board import entry_position, is_on_shared_path, is_safe_cell, occupants
from .config import config
from .exceptions import (
    GameOverError,
    IllegalMoveError,
    InvalidDieValue,
    InvalidTurnIndex,
    UnknownTokenError,
)
from .types import GameState, MoveResult, Token


# --- Dice ---
def roll_die(rng: Optional[random.Random] = None) -> int:
    return (rng or random).randint(config.DICE_MIN, config.DICE_MAX)


def validate_die(die_value: int) -> None:
    if isinstance(die_value, bool) or not isinstance(die_value, int):
        raise InvalidDieValue(f"Die value must be an int, got {die_value!r}")
    if not config.DICE_MIN <= die_value <= config.DICE_MAX:
        raise InvalidDieValue(
            f"Die value {die_value} outside {config.DICE_MIN}..{config.DICE_MAX}"
        )


# --- Rules: destinations and legality ---
def _destination_for_roll(token: Token, die_value: int) -> int | None:
    if token.is_finished:
        return None
    if token.is_home:
        return entry_position(token.color) if die_value == config.EXIT_HOME_ROLL else None
    cand = token.position + die_value
    if cand > config.TRACK_LENGTH:
        # circuit complete: continue on the private final stretch
        cand = config.FINAL_STRETCH_START - 1 + (cand - config.TRACK_LENGTH)
    if cand > config.FINISH_POSITION:
        return None  # overshoot is disallowed, not clamped
    return cand


def compute_legal_moves(
    token: Token,
    die_value: int,
    all_tokens: Iterable[Token] = (),
    *,
    state: Optional[GameState] = None,
) -> List[int]:
    """
    Candidate target positions for ``token`` with ``die_value``.

    Args:
        token: The token to move
        die_value: The value rolled (1-6)
        all_tokens: Full roster; unused by the current ruleset but kept so
            board-aware variants (blockades) share the signature
        state: Optional game state; once it records a winner nothing is legal

    Returns:
        List[int]: Zero or one target positions

    Raises:
        InvalidDieValue: If die_value is outside 1..6
    """
    validate_die(die_value)
    if state is not None and state.is_over:
        return []
    dest = _destination_for_roll(token, die_value)
    return [] if dest is None else [dest]


# --- Applying a move ---
def _send_home(token: Token) -> Token:
    return replace(
        token, position=config.HOME_POSITION, is_home=True, is_finished=False
    )


def _is_capturable(victim: Token, mover: Token, cell: int) -> bool:
    if victim.color == mover.color:
        return False  # same-colour tokens stack
    return not is_safe_cell(cell, victim.color)


def apply_move(
    token: Token,
    target_position: int,
    all_tokens: Sequence[Token],
    die_value: int,
    *,
    state: Optional[GameState] = None,
) -> MoveResult:
    """
    Relocate ``token`` to ``target_position`` and resolve captures.

    The target must be one of ``compute_legal_moves(token, die_value)``.
    Differently coloured tokens sharing the landing cell on the shared path
    are sent home unless the cell is safe for their colour. The input roster
    is left untouched; the returned ``MoveResult.roster`` holds the new one
    in the same order.

    Raises:
        GameOverError: If ``state`` already records a winner
        UnknownTokenError: If ``token`` is not in ``all_tokens``
        InvalidDieValue: If die_value is outside 1..6
        IllegalMoveError: If the target is not a legal move
    """
    if state is not None and state.is_over:
        raise GameOverError(f"Game already won by {state.winner}")

    roster = list(all_tokens)
    try:
        idx = next(i for i, t in enumerate(roster) if t.token_id == token.token_id)
    except StopIteration:
        raise UnknownTokenError(f"Token '{token.token_id}' is not in the roster") from None
    current = roster[idx]
    if current != token:
        raise IllegalMoveError(
            f"Stale token {token}: roster holds {current}"
        )

    legal = compute_legal_moves(current, die_value, roster)
    if target_position not in legal:
        raise IllegalMoveError(
            f"{current} cannot move to {target_position} with die {die_value}; legal: {legal}"
        )

    moved = replace(
        current,
        position=target_position,
        is_home=target_position == config.HOME_POSITION,
        is_finished=target_position == config.FINISH_POSITION,
    )
    roster[idx] = moved

    captured: List[Token] = []
    if is_on_shared_path(target_position):
        captured = [
            other
            for other in occupants(target_position, roster, exclude=moved.token_id)
            if _is_capturable(other, moved, target_position)
        ]
        hit = {t.token_id for t in captured}
        roster = [_send_home(t) if t.token_id in hit else t for t in roster]

    if captured:
        logger.debug(
            f"{moved.token_id} captured {[t.token_id for t in captured]} at {target_position}"
        )

    return MoveResult(
        token=moved,
        old_position=current.position,
        new_position=target_position,
        captured=captured,
        finished=moved.is_finished,
        roster=roster,
    )


# --- Win and turn bookkeeping ---
def is_game_won(player_id: str, all_tokens: Iterable[Token]) -> bool:
    owned = [t for t in all_tokens if t.player_id == player_id]
    return len(owned) == config.TOKENS_PER_PLAYER and all(t.is_finished for t in owned)


def advance_turn(state: GameState, active_player_count: int, last_die_value: int) -> int:
    """Next seat index: a six keeps the turn, anything else passes it on."""
    if state.is_over:
        raise GameOverError(f"Game already won by {state.winner}")
    if active_player_count < 1:
        raise InvalidTurnIndex(f"Need at least one active player, got {active_player_count}")
    if not 0 <= state.current_turn < active_player_count:
        raise InvalidTurnIndex(
            f"Turn index {state.current_turn} outside 0..{active_player_count - 1}"
        )
    validate_die(last_die_value)
    if last_die_value == config.EXTRA_TURN_ROLL:
        return state.current_turn
    return (state.current_turn + 1) % active_player_count
