from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Protocol, Sequence, Type

from . import engine
from .types import Token


@dataclass(slots=True)
class MoveOption:
    token_id: str
    target: int
    captures: int = 0
    finishes: bool = False
    progress: int = 0  # position before the move


def build_move_options(
    legal: Dict[str, List[int]], all_tokens: Sequence[Token], die_value: int
) -> List[MoveOption]:
    """Expand legal targets into options, previewing each move on a copy."""
    by_id = {t.token_id: t for t in all_tokens}
    options: List[MoveOption] = []
    for token_id, targets in legal.items():
        token = by_id[token_id]
        for target in targets:
            preview = engine.apply_move(token, target, all_tokens, die_value)
            options.append(
                MoveOption(
                    token_id=token_id,
                    target=target,
                    captures=len(preview.captured),
                    finishes=preview.finished,
                    progress=token.position,
                )
            )
    return options


class Strategy(Protocol):
    name: ClassVar[str]

    def select_move(self, options: Sequence[MoveOption]) -> MoveOption | None:
        ...


@dataclass(slots=True)
class RandomStrategy:
    name: ClassVar[str] = "random"
    rng: random.Random = field(default_factory=random.Random)

    def select_move(self, options: Sequence[MoveOption]) -> MoveOption | None:
        if not options:
            return None
        return self.rng.choice(list(options))


@dataclass(slots=True)
class FirstMoveStrategy:
    """Takes the first legal option, the way a click-to-move UI does."""

    name: ClassVar[str] = "first"

    def select_move(self, options: Sequence[MoveOption]) -> MoveOption | None:
        return options[0] if options else None


@dataclass(slots=True)
class CaptureFirstStrategy:
    """Prefers captures, then finishing, then the most advanced token."""

    name: ClassVar[str] = "capture"

    def select_move(self, options: Sequence[MoveOption]) -> MoveOption | None:
        if not options:
            return None
        return max(options, key=lambda o: (o.captures, o.finishes, o.progress))


STRATEGY_REGISTRY: Dict[str, Type] = {
    RandomStrategy.name: RandomStrategy,
    FirstMoveStrategy.name: FirstMoveStrategy,
    CaptureFirstStrategy.name: CaptureFirstStrategy,
}


def create(strategy_name: str, rng: random.Random | None = None) -> Strategy:
    cls = STRATEGY_REGISTRY.get(strategy_name.lower())
    if cls is None:
        raise KeyError(
            f"Unknown strategy '{strategy_name}'. Available: {list(STRATEGY_REGISTRY)}"
        )
    if cls is RandomStrategy:
        return RandomStrategy(rng=rng or random.Random())
    return cls()
