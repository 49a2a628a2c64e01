"""
Token roster setup and lookups.
A roster is created when a room moves from waiting to playing: four home
tokens per seated player.
"""

from __future__ import annotations

import uuid
from typing import Dict, Iterable, List, Optional, Sequence

from loguru import logger

from .config import config
from .exceptions import InvalidPlayerCount, RoomFullError, UnknownTokenError
from .types import Color, GameState, Player, Token


def assign_color(used_colors: Iterable[Color]) -> Color:
    """Return the first colour, in join order, not already taken."""
    used = {Color(c) for c in used_colors}
    for color in Color:
        if color not in used:
            return color
    raise RoomFullError("All colours are already taken")


def seat_players(
    names: Sequence[str],
    room_id: Optional[str] = None,
    player_ids: Optional[Sequence[str]] = None,
) -> List[Player]:
    """Seat players in join order, handing out colours and seat indexes.

    Args:
        names: Display names, in join order
        room_id: Optional room reference copied onto each player
        player_ids: Optional explicit ids; random hex ids otherwise

    Returns:
        List[Player]: Players with seats 0..n-1
    """
    if not config.MIN_PLAYERS <= len(names) <= config.MAX_PLAYERS:
        raise InvalidPlayerCount(
            f"A game needs {config.MIN_PLAYERS}-{config.MAX_PLAYERS} players, got {len(names)}"
        )
    if player_ids is not None and len(player_ids) != len(names):
        raise InvalidPlayerCount("player_ids and names must have the same length")

    players: List[Player] = []
    for seat, name in enumerate(names):
        color = assign_color(p.color for p in players)
        pid = player_ids[seat] if player_ids is not None else uuid.uuid4().hex
        players.append(
            Player(player_id=pid, name=name, color=color, seat=seat, room_id=room_id)
        )
    return players


def create_tokens(player: Player) -> List[Token]:
    return [
        Token(
            token_id=f"{player.player_id}-{index}",
            player_id=player.player_id,
            color=player.color,
            token_index=index,
        )
        for index in range(1, config.TOKENS_PER_PLAYER + 1)
    ]


def create_roster(players: Sequence[Player]) -> Dict[str, List[Token]]:
    ordered = sorted(players, key=lambda p: p.seat)
    return {p.player_id: create_tokens(p) for p in ordered}


def new_game_state(players: Sequence[Player], room_id: Optional[str] = None) -> GameState:
    """Fresh state for a room that has just started playing."""
    if not config.MIN_PLAYERS <= len(players) <= config.MAX_PLAYERS:
        raise InvalidPlayerCount(
            f"A game needs {config.MIN_PLAYERS}-{config.MAX_PLAYERS} players, got {len(players)}"
        )
    colors = [p.color for p in players]
    if len(set(colors)) != len(colors):
        raise InvalidPlayerCount("Each player needs a distinct colour")
    seats = sorted(p.seat for p in players)
    if seats != list(range(len(players))):
        raise InvalidPlayerCount(f"Seats must be 0..{len(players) - 1}, got {seats}")

    state = GameState(room_id=room_id, tokens=create_roster(players))
    logger.debug(
        f"New game state for room {room_id}: "
        f"{len(players)} players, {len(state.all_tokens())} tokens"
    )
    return state


def tokens_of(player_id: str, all_tokens: Iterable[Token]) -> List[Token]:
    return [t for t in all_tokens if t.player_id == player_id]


def find_token(token_id: str, all_tokens: Iterable[Token]) -> Token:
    for token in all_tokens:
        if token.token_id == token_id:
            return token
    raise UnknownTokenError(f"Token '{token_id}' is not in the roster")


def regroup(players: Sequence[Player], all_tokens: Iterable[Token]) -> Dict[str, List[Token]]:
    """Group a flat token list back into the per-player mapping, in seat order."""
    grouped: Dict[str, List[Token]] = {
        p.player_id: [] for p in sorted(players, key=lambda p: p.seat)
    }
    for token in all_tokens:
        if token.player_id not in grouped:
            raise UnknownTokenError(
                f"Token '{token.token_id}' belongs to unknown player '{token.player_id}'"
            )
        grouped[token.player_id].append(token)
    for roster in grouped.values():
        roster.sort(key=lambda t: t.token_index)
    return grouped
