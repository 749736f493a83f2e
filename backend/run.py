from combat_sync import create_app, socketio
from combat_sync.socketio_events import start_heartbeat

app = create_app()
 
if __name__ == '__main__':
    start_heartbeat(app)
    # Use SocketIO server to enable websockets in dev
    socketio.run(app, host='0.0.0.0', port=3000, debug=True)
