import hmac
import threading
from typing import Dict


class SessionRegistry:
    """Maps Socket.IO session ids to the secret each connection presented.

    A connection starts with an empty slot and only holds a secret once it
    has logged in (or reconnected) with the configured GM secret.
    """

    def __init__(self, gm_secret: str) -> None:
        self._gm_secret = gm_secret or ''
        self._slots: Dict[str, str] = {}
        self._lock = threading.Lock()

    def is_authorized(self, secret: str) -> bool:
        if not self._gm_secret or not isinstance(secret, str) or not secret:
            return False
        return hmac.compare_digest(secret.encode('utf-8'), self._gm_secret.encode('utf-8'))

    def connect(self, sid: str) -> None:
        with self._lock:
            self._slots[sid] = ''

    def login(self, sid: str, secret: str) -> bool:
        if not self.is_authorized(secret):
            return False
        with self._lock:
            self._slots[sid] = secret
        return True

    def reconnect(self, sid: str, secret: str) -> None:
        # Same upgrade as login, but the client is not told the outcome
        self.login(sid, secret)

    def disconnect(self, sid: str) -> None:
        with self._lock:
            self._slots.pop(sid, None)

    def resolve_caller_secret(self, sid: str) -> str:
        with self._lock:
            return self._slots.get(sid, '')

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)
