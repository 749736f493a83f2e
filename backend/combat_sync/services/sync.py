"""The single gate every roster change goes through.

Requests are handled strictly one at a time: authorize, parse, apply,
commit to history, broadcast the new roster, then write it to disk.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from combat_sync.errors import InvalidInput, NotFound, PersistenceFailure
from combat_sync.requests import Request
from . import history
from .entities import apply_request
from .storage import StateStore


class Outcome(str, Enum):
    ACCEPTED = 'accepted'
    UNCHANGED = 'unchanged'
    UNAUTHORIZED = 'unauthorized'
    NOT_FOUND = 'not_found'
    INVALID = 'invalid_input'


@dataclass(frozen=True)
class SubmitResult:
    outcome: Outcome
    message: Optional[str] = None
    persisted: bool = True

    @property
    def accepted(self) -> bool:
        return self.outcome == Outcome.ACCEPTED

    def to_ack(self) -> Optional[Dict[str, Any]]:
        """Acknowledgement sent back to the caller.

        Unauthorized and unknown-entity requests get nothing back, so a
        viewer never learns why a request was dropped.
        """
        if self.outcome in (Outcome.UNAUTHORIZED, Outcome.NOT_FOUND):
            return None
        if self.outcome == Outcome.INVALID:
            return {'ok': False, 'error': self.outcome.value, 'message': self.message}
        if not self.persisted:
            return {'ok': False, 'error': 'persistence_failure', 'applied': True, 'message': self.message}
        return {'ok': True, 'changed': self.accepted}


Broadcast = Callable[[Dict[str, Any]], None]
Authorizer = Callable[[str], bool]


class SyncGateway:

    def __init__(
        self,
        store: StateStore,
        broadcast: Broadcast,
        is_authorized: Authorizer,
        history_depth: int = history.DEFAULT_DEPTH,
        logger: logging.Logger = None,
    ) -> None:
        self.store = store
        self.broadcast = broadcast
        self.is_authorized = is_authorized
        self.logger = logger or logging.getLogger(__name__)
        self.envelope = history.HistoryEnvelope.start(store.load(), history_depth)
        self._lock = threading.Lock()

    @property
    def current(self):
        return self.envelope.current

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return self.envelope.current.to_dict()

    def history_depths(self) -> Dict[str, Any]:
        with self._lock:
            return {
                'undo': len(self.envelope.undo),
                'redo': len(self.envelope.redo),
                'capacity': self.envelope.undo.capacity,
            }

    def submit(self, caller_secret: str, parse: Callable[[Any], Request], payload: Any = None) -> SubmitResult:
        """Run one mutation through the gate.

        ``parse`` turns the raw payload into a request; it only runs once
        the caller is known to be the GM.
        """
        with self._lock:
            if not self.is_authorized(caller_secret):
                self.logger.info(f"[reject] unauthorized {getattr(parse, '__qualname__', parse)}")
                return SubmitResult(Outcome.UNAUTHORIZED)
            try:
                request = parse(payload)
                new_state = apply_request(self.envelope.current, request)
            except NotFound as exc:
                self.logger.info(f"[reject] {exc}")
                return SubmitResult(Outcome.NOT_FOUND, str(exc))
            except InvalidInput as exc:
                self.logger.info(f"[reject] invalid input: {exc}")
                return SubmitResult(Outcome.INVALID, str(exc))

            if new_state == self.envelope.current:
                return SubmitResult(Outcome.UNCHANGED)

            history.commit(self.envelope, new_state)
            self.logger.info(
                f"[commit] {type(request).__name__} undo={len(self.envelope.undo)} redo={len(self.envelope.redo)}"
            )
            return self._publish()

    def undo(self, caller_secret: str) -> SubmitResult:
        return self._step(caller_secret, 'undo', history.undo)

    def redo(self, caller_secret: str) -> SubmitResult:
        return self._step(caller_secret, 'redo', history.redo)

    def _step(self, caller_secret: str, name: str, move) -> SubmitResult:
        with self._lock:
            if not self.is_authorized(caller_secret):
                self.logger.info(f"[reject] unauthorized {name}")
                return SubmitResult(Outcome.UNAUTHORIZED)
            before = self.envelope.current
            move(self.envelope)
            if self.envelope.current is before:
                return SubmitResult(Outcome.UNCHANGED)
            self.logger.info(
                f"[{name}] undo={len(self.envelope.undo)} redo={len(self.envelope.redo)}"
            )
            return self._publish()

    def _publish(self) -> SubmitResult:
        # Observers first; the file only backs up what they already have
        state = self.envelope.current
        self.broadcast(state.to_dict())
        try:
            self.store.save(state)
        except PersistenceFailure as exc:
            self.logger.error(f"[persist-failed] {exc}")
            return SubmitResult(Outcome.ACCEPTED, str(exc), persisted=False)
        return SubmitResult(Outcome.ACCEPTED)
