from flask import current_app, request
from flask_socketio import emit
from combat_sync import socketio, NAMESPACE, STATE_EVENT
from combat_sync.requests import (
    AddEntity, ChangeStatus, DeleteEntity, Duplicate, FullRest, ResetTurns,
    ToggleAffiliation, ToggleTurn, parse_edit_request, parse_terminal_command,
)
from combat_sync.state import get_tracker


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    tracker = get_tracker()
    tracker.sessions.connect(_get_sid())
    current_app.logger.info(f"[socket] {_get_sid()} connected ({len(tracker.sessions)} online)")
    emit(STATE_EVENT, tracker.gateway.snapshot())


def handle_disconnect(reason=None):
    get_tracker().sessions.disconnect(_get_sid())
    current_app.logger.info(f"[socket] {_get_sid()} disconnected ({reason})")


def handle_login(secret):
    ok = get_tracker().sessions.login(_get_sid(), secret)
    if ok:
        current_app.logger.info(f"[login] {_get_sid()} is now GM")
    else:
        current_app.logger.warning(f"[login] {_get_sid()} presented a wrong secret")
    emit('login-result', ok)


def handle_reconnect(secret):
    # Silent: a stale secret from a previous session just leaves the viewer read-only
    get_tracker().sessions.reconnect(_get_sid(), secret)


def handle_full_state(data=None):
    emit(STATE_EVENT, get_tracker().gateway.snapshot())


def handle_undo(data=None):
    tracker = get_tracker()
    return tracker.gateway.undo(tracker.sessions.resolve_caller_secret(_get_sid())).to_ack()


def handle_redo(data=None):
    tracker = get_tracker()
    return tracker.gateway.redo(tracker.sessions.resolve_caller_secret(_get_sid())).to_ack()


def handle_ping(data=None):
    emit('pong', data or {})


def _mutation_handler(parse):
    def handler(data=None):
        tracker = get_tracker()
        secret = tracker.sessions.resolve_caller_secret(_get_sid())
        return tracker.gateway.submit(secret, parse, data).to_ack()
    handler.__name__ = f"handle_{parse.__qualname__.replace('.', '_')}"
    return handler


MUTATION_EVENTS = {
    'add-entity': AddEntity.from_payload,
    'entity-edit': parse_edit_request,
    'entity-set-state': ChangeStatus.from_payload,
    'delete-entity': DeleteEntity.from_payload,
    'toggle-turn-done': ToggleTurn.from_payload,
    'full-rest': FullRest.from_payload,
    'duplicate-entity': Duplicate.from_payload,
    'toggle-affiliation': ToggleAffiliation.from_payload,
    'reset-turns': ResetTurns.from_payload,
    'terminal-command': parse_terminal_command,
}


def start_heartbeat(app) -> None:
    """Emit 'hello' to every client every HEARTBEAT_SEC seconds. 0 disables."""
    interval = int(app.config.get('HEARTBEAT_SEC', 0))
    if interval <= 0:
        return

    def _worker():
        while True:
            socketio.sleep(interval)
            socketio.emit('hello', 'world', namespace=NAMESPACE)

    app.logger.info(f"[heartbeat] every {interval}s")
    socketio.start_background_task(_worker)


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
    socketio.on_event('login-request', handle_login, namespace=NAMESPACE)
    socketio.on_event('reconnect-request', handle_reconnect, namespace=NAMESPACE)
    socketio.on_event('get-full-state', handle_full_state, namespace=NAMESPACE)
    socketio.on_event('undo', handle_undo, namespace=NAMESPACE)
    socketio.on_event('redo', handle_redo, namespace=NAMESPACE)
    socketio.on_event('ping', handle_ping, namespace=NAMESPACE)
    for event, parse in MUTATION_EVENTS.items():
        socketio.on_event(event, _mutation_handler(parse), namespace=NAMESPACE)
