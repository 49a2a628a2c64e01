from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .config import config
from .exceptions import InvalidTokenState


class Color(str, Enum):
    """Player colours, in the order they are handed out to joining players."""

    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"


class TokenRegion(Enum):
    HOME = "home"  # yard, position 0
    PATH = "path"  # shared track, 1..52
    FINAL_STRETCH = "final_stretch"  # private lane, 53..58
    FINISHED = "finished"  # centre, 59


@dataclass(frozen=True, slots=True)
class Token:
    """Immutable token value.

    Positions are absolute: 0 = yard, 1..52 shared track, 53..58 final
    stretch, 59 finished. Tokens are relocated by building a new value,
    so a roster handed to the engine is never changed in place.
    """

    token_id: str
    player_id: str
    color: Color
    token_index: int  # 1..4 within its owner
    position: int = 0
    is_home: bool = True
    is_finished: bool = False

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "color", Color(self.color))
        except ValueError:
            raise InvalidTokenState(
                f"{self.token_id}: unknown colour {self.color!r}"
            ) from None
        if not config.HOME_POSITION <= self.position <= config.FINISH_POSITION:
            raise InvalidTokenState(
                f"{self.token_id}: position {self.position} outside "
                f"{config.HOME_POSITION}..{config.FINISH_POSITION}"
            )
        if self.is_home != (self.position == config.HOME_POSITION):
            raise InvalidTokenState(
                f"{self.token_id}: is_home={self.is_home} at position {self.position}"
            )
        if self.is_finished != (self.position == config.FINISH_POSITION):
            raise InvalidTokenState(
                f"{self.token_id}: is_finished={self.is_finished} at position {self.position}"
            )
        if not 1 <= self.token_index <= config.TOKENS_PER_PLAYER:
            raise InvalidTokenState(
                f"{self.token_id}: token_index {self.token_index} out of range"
            )

    @property
    def region(self) -> TokenRegion:
        if self.is_home:
            return TokenRegion.HOME
        if self.is_finished:
            return TokenRegion.FINISHED
        if self.position >= config.FINAL_STRETCH_START:
            return TokenRegion.FINAL_STRETCH
        return TokenRegion.PATH

    def to_dict(self) -> dict:
        return {
            "id": self.token_id,
            "player_id": self.player_id,
            "color": self.color.value,
            "position": self.position,
            "is_home": self.is_home,
            "is_finished": self.is_finished,
            "token_index": self.token_index,
        }

    def __str__(self) -> str:
        return f"Token({self.token_id} {self.color.value}: {self.region.value} at {self.position})"


@dataclass(slots=True)
class Player:
    player_id: str
    name: str
    color: Color
    seat: int  # 0-based turn order
    room_id: Optional[str] = None


@dataclass(slots=True)
class GameState:
    """Caller-owned snapshot of a running round."""

    room_id: Optional[str] = None
    current_turn: int = 0
    dice_value: Optional[int] = None
    awaiting_move: bool = False
    tokens: Dict[str, List[Token]] = field(default_factory=dict)
    winner: Optional[str] = None

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    def all_tokens(self) -> List[Token]:
        out: List[Token] = []
        for roster in self.tokens.values():
            out.extend(roster)
        return out


@dataclass(slots=True)
class MoveResult:
    token: Token
    old_position: int
    new_position: int
    captured: List[Token] = field(default_factory=list)
    finished: bool = False
    roster: List[Token] = field(default_factory=list)

    @property
    def exited_home(self) -> bool:
        return self.old_position == config.HOME_POSITION
