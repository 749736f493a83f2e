import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Shared secret that identifies the GM. Empty means nobody can write.
    GM_SECRET = os.environ.get('GM_SECRET', '')
    # Roster snapshot written after every committed change
    STATE_FILE = os.environ.get('STATE_FILE', 'state.json')
    # Undo/redo depth (snapshots kept per stack)
    HISTORY_DEPTH = int(os.environ.get('HISTORY_DEPTH', '10'))
    # Heartbeat emitted to every connected client (sec). 0 disables.
    HEARTBEAT_SEC = int(os.environ.get('HEARTBEAT_SEC', '5'))
    # Comma separated list of web client origins
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get('CORS_ORIGINS', '').split(',')
        if origin.strip()
    ]
