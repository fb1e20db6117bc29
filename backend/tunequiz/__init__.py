from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from tunequiz.config import Config

socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One dispatcher (room registry + sessions) per app
    from tunequiz.services.games.dispatcher import GameDispatcher
    from tunequiz.socketio_events import emit_to, force_disconnect, register_socketio_handlers
    flask_app.extensions['game_dispatcher'] = GameDispatcher(send=emit_to, disconnect=force_disconnect)

    from tunequiz.routes import main
    flask_app.register_blueprint(main)

    # Register Socket.IO event handlers on the freshly initialized server
    register_socketio_handlers()

    flask_app.logger.info(f"[startup] liveness_interval={flask_app.config.get('LIVENESS_INTERVAL_SEC')}s")
    return flask_app
