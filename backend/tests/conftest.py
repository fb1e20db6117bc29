import os
import sys
import pytest

# Ensure the backend root (containing the `tunequiz` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from tunequiz import create_app, socketio
from tunequiz.services.games.dispatcher import GameDispatcher


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = ['http://localhost:5173']
    LIVENESS_INTERVAL_SEC = 30
    LOG_LEVEL = 'DEBUG'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


class LivenessConfig(TestConfig):
    LIVENESS_INTERVAL_SEC = 1
    ENABLE_LIVENESS_IN_TESTS = True


@pytest.fixture()
def liveness_app():
    application = create_app(LivenessConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    """Open any number of Socket.IO test clients on /ws; all are closed at teardown."""
    opened = []

    def _open():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/ws'
        )
        opened.append(test_client)
        return test_client

    yield _open
    for test_client in opened:
        try:
            if test_client.is_connected('/ws'):
                test_client.disconnect(namespace='/ws')
        except RuntimeError:
            pass


@pytest.fixture()
def sio_client(sio_factory):
    return sio_factory()


class Outbox:
    """Collects envelopes the dispatcher sends, per sid."""

    def __init__(self):
        self.sent = []
        self.disconnected = []

    def send(self, sid, envelope):
        self.sent.append((sid, envelope))

    def disconnect(self, sid):
        self.disconnected.append(sid)

    def for_sid(self, sid, msg_type=None):
        return [env for s, env in self.sent if s == sid and (msg_type is None or env['type'] == msg_type)]

    def last(self, sid, msg_type):
        found = self.for_sid(sid, msg_type)
        return found[-1] if found else None

    def clear(self):
        self.sent.clear()


@pytest.fixture()
def outbox():
    return Outbox()


@pytest.fixture()
def dispatcher(outbox):
    return GameDispatcher(send=outbox.send, disconnect=outbox.disconnect)
