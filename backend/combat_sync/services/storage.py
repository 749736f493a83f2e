import json
import logging
import os
import tempfile

from combat_sync.errors import PersistenceFailure
from combat_sync.models import GameState


class StateStore:
    """Keeps the roster in a single JSON file.

    Writes go to a temp file in the same directory and are renamed over the
    target, so a crash mid-write leaves the previous snapshot intact.
    """

    def __init__(self, path: str, logger: logging.Logger = None) -> None:
        self.path = path
        self.logger = logger or logging.getLogger(__name__)

    def load(self) -> GameState:
        """Read the roster back, or start empty if the file is missing or unusable."""
        try:
            with open(self.path, encoding='utf-8') as fh:
                payload = json.load(fh)
        except FileNotFoundError:
            self.logger.info(f"[state-load] no state file at {self.path}, starting empty")
            return GameState()
        except (OSError, ValueError) as exc:
            self.logger.warning(f"[state-load] unreadable state file {self.path}: {exc}")
            return GameState()

        try:
            state = GameState.from_dict(payload)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            self.logger.warning(f"[state-load] malformed state in {self.path}: {exc!r}")
            return GameState()
        self.logger.info(
            f"[state-load] loaded {len(state.allies)} allies and {len(state.foes)} foes from {self.path}"
        )
        return state

    def save(self, state: GameState) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.state-', suffix='.tmp')
            with os.fdopen(fd, 'w', encoding='utf-8') as fh:
                json.dump(state.to_dict(), fh)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceFailure(f"could not write {self.path}: {exc}") from exc
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
