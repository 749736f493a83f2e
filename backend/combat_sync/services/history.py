"""Bounded undo/redo history over whole-roster snapshots."""

from collections import deque
from dataclasses import dataclass
from typing import Deque, Generic, Iterator, Optional, TypeVar

from combat_sync.models import GameState

DEFAULT_DEPTH = 10

T = TypeVar('T')


class BoundedStack(Generic[T]):
    """LIFO stack that forgets its oldest entry once it grows past capacity.

    A capacity of 0 or less means unbounded.
    """

    def __init__(self, capacity: int = DEFAULT_DEPTH) -> None:
        self.capacity = capacity if capacity > 0 else None
        self._items: Deque[T] = deque(maxlen=self.capacity)

    def push(self, item: T) -> None:
        self._items.append(item)

    def pop(self) -> Optional[T]:
        if not self._items:
            return None
        return self._items.pop()

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)


@dataclass
class HistoryEnvelope:
    current: GameState
    undo: BoundedStack[GameState]
    redo: BoundedStack[GameState]

    @classmethod
    def start(cls, state: GameState, depth: int = DEFAULT_DEPTH) -> 'HistoryEnvelope':
        return cls(current=state, undo=BoundedStack(depth), redo=BoundedStack(depth))


def commit(envelope: HistoryEnvelope, new_state: GameState) -> HistoryEnvelope:
    """Make ``new_state`` current. A forward step drops the redo branch."""
    envelope.undo.push(envelope.current)
    envelope.redo.clear()
    envelope.current = new_state
    return envelope


def undo(envelope: HistoryEnvelope) -> HistoryEnvelope:
    previous = envelope.undo.pop()
    if previous is None:
        return envelope
    envelope.redo.push(envelope.current)
    envelope.current = previous
    return envelope


def redo(envelope: HistoryEnvelope) -> HistoryEnvelope:
    following = envelope.redo.pop()
    if following is None:
        return envelope
    envelope.undo.push(envelope.current)
    envelope.current = following
    return envelope
