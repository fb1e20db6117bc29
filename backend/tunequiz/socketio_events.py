from flask import current_app, request

from tunequiz import socketio
from tunequiz.services.games.dispatcher import GameDispatcher
from tunequiz.services.games.liveness import LivenessTimer

NAMESPACE = '/ws'


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _dispatcher() -> GameDispatcher:
    return current_app.extensions['game_dispatcher']


def emit_to(sid: str, envelope: dict) -> None:
    # socketio.emit since this may be called from a background task
    socketio.emit('message', envelope, to=sid, namespace=NAMESPACE)


def force_disconnect(sid: str) -> None:
    socketio.server.disconnect(sid, namespace=NAMESPACE)


def _liveness_enabled(interval: int) -> bool:
    if interval <= 0:
        return False
    cfg = current_app.config
    return not cfg.get('TESTING') or bool(cfg.get('ENABLE_LIVENESS_IN_TESTS'))


def handle_connect(auth=None):
    sid = _get_sid()
    dispatcher = _dispatcher()
    interval = int(current_app.config.get('LIVENESS_INTERVAL_SEC', 0))
    timer = None
    if _liveness_enabled(interval):
        timer = LivenessTimer(sid, interval, on_tick=dispatcher.tick, sleep=socketio.sleep)
    dispatcher.connect(sid, timer=timer)
    if timer is not None:
        socketio.start_background_task(timer.run)


def handle_disconnect(reason=None):
    _dispatcher().close(_get_sid())


def handle_message(data):
    _dispatcher().handle(_get_sid(), data)


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'.

    Every client frame travels as the ``message`` event carrying a
    ``{type, payload}`` envelope.
    """
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
    socketio.on_event('message', handle_message, namespace=NAMESPACE)
