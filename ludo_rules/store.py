"""
In-memory room store.

Atomic read/write of a room's GameState keyed by room id. Each room has its
own lock, so a read-compute-write cycle on one room never interleaves with
another writer on the same room while different rooms proceed in parallel.
"""

from __future__ import annotations

import copy
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List

from loguru import logger

from .exceptions import RoomNotFoundError
from .types import GameState


class RoomStore:
    def __init__(self) -> None:
        self._states: Dict[str, GameState] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, room_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(room_id)
            if lock is None:
                raise RoomNotFoundError(room_id)
            return lock

    def _current(self, room_id: str, lock: threading.Lock) -> GameState:
        # room may have been deleted or re-created while waiting on its lock
        with self._registry_lock:
            state = self._states.get(room_id)
            if state is None or self._locks.get(room_id) is not lock:
                raise RoomNotFoundError(room_id)
            return state

    def create(self, state: GameState) -> str:
        if state.room_id is None:
            raise ValueError("GameState.room_id is required to store a room")
        with self._registry_lock:
            if state.room_id in self._states:
                raise ValueError(f"Room '{state.room_id}' already exists")
            self._states[state.room_id] = copy.deepcopy(state)
            self._locks[state.room_id] = threading.Lock()
        logger.debug(f"Stored room {state.room_id}")
        return state.room_id

    def get(self, room_id: str) -> GameState:
        """Snapshot of the room's state; changes to it are not persisted."""
        lock = self._lock_for(room_id)
        with lock:
            return copy.deepcopy(self._current(room_id, lock))

    @contextmanager
    def transaction(self, room_id: str) -> Iterator[GameState]:
        """Hold the room exclusively and commit the yielded copy on success.

        If the block raises, the stored state is left as it was and the
        exception propagates.
        """
        lock = self._lock_for(room_id)
        with lock:
            working = copy.deepcopy(self._current(room_id, lock))
            yield working
            self._states[room_id] = working

    def delete(self, room_id: str) -> None:
        lock = self._lock_for(room_id)
        with lock:
            self._current(room_id, lock)
            with self._registry_lock:
                self._states.pop(room_id, None)
                self._locks.pop(room_id, None)
        logger.debug(f"Discarded room {room_id}")

    def room_ids(self) -> List[str]:
        with self._registry_lock:
            return list(self._states)

    def __contains__(self, room_id: object) -> bool:
        with self._registry_lock:
            return room_id in self._states

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._states)
