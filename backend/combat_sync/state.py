from dataclasses import dataclass

from flask import current_app

from .services.sync import SyncGateway
from .sessions import SessionRegistry

EXTENSION_KEY = 'combat_sync'


@dataclass
class TrackerState:
    """Everything the running app owns: who is connected and the roster gate."""

    sessions: SessionRegistry
    gateway: SyncGateway


def get_tracker() -> TrackerState:
    return current_app.extensions[EXTENSION_KEY]
