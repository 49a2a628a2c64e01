from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Sequence

import numpy as np

from .config import config
from .types import Color, Token

# Immutable per-colour lookups
ENTRY_POSITIONS: Mapping[Color, int] = MappingProxyType(
    {color: config.ENTRY_POSITIONS[color.value] for color in Color}
)
SAFE_CELLS: Mapping[Color, frozenset[int]] = MappingProxyType(
    {color: frozenset(config.SAFE_CELLS[color.value]) for color in Color}
)

GRID_WIDTH = config.FINISH_POSITION + 1


def entry_position(color: Color) -> int:
    return ENTRY_POSITIONS[Color(color)]


def is_on_shared_path(position: int) -> bool:
    return 1 <= position <= config.TRACK_LENGTH


def is_safe_cell(position: int, color: Color) -> bool:
    """True if a token of ``color`` standing on ``position`` cannot be captured.

    Only shared-path cells are listed; the final stretch is private to each
    colour and never shared, so it is handled by the caller.
    """
    return position in SAFE_CELLS[Color(color)]


def occupants(
    position: int, all_tokens: Iterable[Token], *, exclude: Optional[str] = None
) -> List[Token]:
    return [
        t for t in all_tokens if t.position == position and t.token_id != exclude
    ]


def occupancy_grid(
    all_tokens: Iterable[Token], colors: Sequence[Color] = tuple(Color)
) -> np.ndarray:
    """Return a (len(colors), 60) count of tokens per colour per position.

    Row order follows ``colors``; tokens of colours not listed are ignored.
    """
    rows = {Color(c): i for i, c in enumerate(colors)}
    grid = np.zeros((len(rows), GRID_WIDTH), dtype=np.int8)
    for token in all_tokens:
        row = rows.get(token.color)
        if row is None:
            continue
        grid[row, token.position] += 1
    return grid


def contested_cells(grid: np.ndarray) -> np.ndarray:
    """Shared-path cells occupied by more than one colour in ``grid``."""
    path = grid[:, 1 : config.TRACK_LENGTH + 1]
    colours_present = (path > 0).sum(axis=0)
    return np.flatnonzero(colours_present > 1) + 1
