from flask import Blueprint, jsonify
from combat_sync.state import get_tracker

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the combat tracker sync server!'})


@main.route('/api/state', methods=['GET'])
def get_state():
    """
    Returns the full roster, for clients that missed a broadcast.
    """
    return jsonify(get_tracker().gateway.snapshot()), 200


@main.route('/api/history', methods=['GET'])
def get_history():
    """
    Returns how many undo and redo steps are available.
    """
    return jsonify(get_tracker().gateway.history_depths()), 200
