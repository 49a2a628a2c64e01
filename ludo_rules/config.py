import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return int(raw)


@dataclass(slots=True)
class Config:
    # --- Constants ---
    HOME_POSITION: int = 0  # 0=yard, 1-52=shared track, 53-58=final stretch, 59=finished
    TRACK_LENGTH: int = 52
    FINAL_STRETCH_SIZE: int = 6
    TOKENS_PER_PLAYER: int = 4
    MIN_PLAYERS: int = 2
    MAX_PLAYERS: int = 4

    # Dice
    DICE_MIN: int = 1
    DICE_MAX: int = 6
    EXIT_HOME_ROLL: int = 6
    EXTRA_TURN_ROLL: int = 6

    # Absolute entry cells on the shared track
    ENTRY_POSITIONS: dict[str, int] = field(
        default_factory=lambda: {"red": 1, "blue": 14, "yellow": 27, "green": 40}
    )
    # Safe cells, listed from each colour's own entry cell onwards
    SAFE_CELLS: dict[str, tuple[int, ...]] = field(
        default_factory=lambda: {
            "red": (1, 9, 14, 22, 27, 35, 40, 48),
            "blue": (14, 22, 27, 35, 40, 48, 1, 9),
            "yellow": (27, 35, 40, 48, 1, 9, 14, 22),
            "green": (40, 48, 1, 9, 14, 22, 27, 35),
        }
    )

    # Runtime settings
    NUM_PLAYERS: int = int(os.getenv("LUDO_NUM_PLAYERS", 4))
    MAX_TURNS: int = int(os.getenv("LUDO_MAX_TURNS", 2000))
    SEED: Optional[int] = _optional_int("LUDO_SEED")
    LOG_LEVEL: str = os.getenv("LUDO_LOG_LEVEL", "INFO")

    # Derived (populated in __post_init__ due to slots)
    FINAL_STRETCH_START: int = 0
    FINAL_STRETCH_END: int = 0
    FINISH_POSITION: int = 0

    def __post_init__(self):
        # Final stretch follows the shared track: 53..58, finish at 59
        self.FINAL_STRETCH_START = self.TRACK_LENGTH + 1
        self.FINAL_STRETCH_END = self.TRACK_LENGTH + self.FINAL_STRETCH_SIZE
        self.FINISH_POSITION = self.FINAL_STRETCH_END + 1

        if not self.MIN_PLAYERS <= self.NUM_PLAYERS <= self.MAX_PLAYERS:
            raise ValueError(
                f"NUM_PLAYERS must be between {self.MIN_PLAYERS} and {self.MAX_PLAYERS}"
            )
        if self.MAX_TURNS < 1:
            raise ValueError("MAX_TURNS must be positive")


config = Config()
