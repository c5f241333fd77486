from flask import Blueprint, current_app, jsonify

from songwars.categories import CATEGORIES

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Song Wars game server!'})


@main.route('/health')
def health():
    rooms = current_app.extensions['songwars'].rooms
    return jsonify({'status': 'healthy', 'rooms': len(rooms)})


@main.route('/api/rooms/<string:room_code>')
def room_snapshot(room_code):
    """
    Returns the current snapshot of a live room.
    """
    actions = current_app.extensions['songwars']
    with actions.lock:
        room = actions.rooms.find(room_code)
        if not room:
            return jsonify({'error': 'Room not found'}), 404
        return jsonify(actions.gateway.snapshot(room))


@main.route('/api/categories')
def list_categories():
    return jsonify(CATEGORIES)
