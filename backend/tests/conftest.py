import os
import sys
import pytest

# Ensure the backend root (containing the `combat_sync` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from combat_sync import create_app, socketio

GM_SECRET = 'gm-test-secret'


@pytest.fixture()
def gm_secret():
    return GM_SECRET


@pytest.fixture()
def state_file(tmp_path):
    return str(tmp_path / 'state.json')


@pytest.fixture()
def flask_app(state_file, gm_secret):
    class TestConfig:
        TESTING = True
        SECRET_KEY = 'test-secret'
        GM_SECRET = gm_secret
        STATE_FILE = state_file
        HISTORY_DEPTH = 10
        HEARTBEAT_SEC = 0
        CORS_ORIGINS = []

    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def gm_client(flask_app, gm_secret):
    test_client = socketio.test_client(flask_app, namespace='/ws')
    test_client.emit('login-request', gm_secret, namespace='/ws')
    # Drop the initial state push and the login result
    test_client.get_received('/ws')
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass
