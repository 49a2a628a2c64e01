"""
Ludo rules engine.
Token state, legal moves, captures, win detection and turn order for
four-colour Ludo, plus a session driver and batch simulator built on it.
"""

from .board import ENTRY_POSITIONS, SAFE_CELLS, is_safe_cell, occupancy_grid
from .config import config
from .engine import (
    advance_turn,
    apply_move,
    compute_legal_moves,
    is_game_won,
    roll_die,
)
from .exceptions import (
    GameOverError,
    IllegalMoveError,
    InvalidDieValue,
    RulesError,
    SessionError,
    TurnOwnershipError,
)
from .roster import assign_color, create_roster, new_game_state, seat_players
from .session import Match
from .simulator import GameSummary, Simulator
from .store import RoomStore
from .types import Color, GameState, MoveResult, Player, Token, TokenRegion

__all__ = [
    "Color",
    "config",
    "Token",
    "TokenRegion",
    "Player",
    "GameState",
    "MoveResult",
    "ENTRY_POSITIONS",
    "SAFE_CELLS",
    "is_safe_cell",
    "occupancy_grid",
    "roll_die",
    "compute_legal_moves",
    "apply_move",
    "is_game_won",
    "advance_turn",
    "assign_color",
    "seat_players",
    "create_roster",
    "new_game_state",
    "Match",
    "RoomStore",
    "Simulator",
    "GameSummary",
    "RulesError",
    "SessionError",
    "InvalidDieValue",
    "IllegalMoveError",
    "GameOverError",
    "TurnOwnershipError",
]
