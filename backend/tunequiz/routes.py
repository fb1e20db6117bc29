from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the tunequiz room server!'})

@main.route('/health')
def health():
    dispatcher = current_app.extensions['game_dispatcher']
    return jsonify({'status': 'ok', 'rooms': len(dispatcher.registry)})

@main.route('/api/rooms')
def list_rooms():
    dispatcher = current_app.extensions['game_dispatcher']
    with dispatcher.lock:
        rooms = dispatcher.registry.list_summaries()
    return jsonify({'rooms': rooms})
