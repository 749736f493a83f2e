from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

NAMESPACE = '/ws'
STATE_EVENT = 'entities-state'


def broadcast_state(payload):
    """Send the full roster to every client on the namespace."""
    socketio.emit(STATE_EVENT, payload, namespace=NAMESPACE)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    origins = flask_app.config.get('CORS_ORIGINS') or allowed_origins
    CORS(flask_app, supports_credentials=True, origins=origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    from combat_sync.services.storage import StateStore
    from combat_sync.services.sync import SyncGateway
    from combat_sync.sessions import SessionRegistry
    from combat_sync.state import EXTENSION_KEY, TrackerState

    store = StateStore(flask_app.config.get('STATE_FILE', 'state.json'), logger=flask_app.logger)
    sessions = SessionRegistry(flask_app.config.get('GM_SECRET', ''))
    if not flask_app.config.get('GM_SECRET'):
        flask_app.logger.warning("[config] GM_SECRET is not set; every client is read-only")
    gateway = SyncGateway(
        store,
        broadcast=broadcast_state,
        is_authorized=sessions.is_authorized,
        history_depth=int(flask_app.config.get('HISTORY_DEPTH', 10)),
        logger=flask_app.logger,
    )
    flask_app.extensions[EXTENSION_KEY] = TrackerState(sessions=sessions, gateway=gateway)

    from combat_sync.main import main
    flask_app.register_blueprint(main)

    # Register Socket.IO event handlers
    # Importing here ensures the handlers bind to the initialized socketio instance
    from combat_sync.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('state-reset')
    def state_reset_command():
        """Overwrites the state file with an empty roster."""
        from combat_sync.models import GameState
        store.save(GameState())
        print(f'State file {store.path} has been reset!')

    flask_app.cli.add_command(state_reset_command)

    return flask_app
