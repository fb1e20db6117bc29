import logging
import time

from tunequiz.sessions import SessionRegistry

logger = logging.getLogger(__name__)


class LivenessTimer:
    """Repeating per-connection ping loop with a cancel handle.

    ``run`` is meant to be handed to ``socketio.start_background_task``;
    ``sleep`` should be ``socketio.sleep`` so the loop cooperates with the
    active async mode.
    """

    def __init__(self, sid, interval, on_tick, sleep=time.sleep):
        self.sid = sid
        self.interval = interval
        self._on_tick = on_tick
        self._sleep = sleep
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    def run(self):
        while not self.cancelled:
            self._sleep(self.interval)
            if self.cancelled:
                return
            self._on_tick(self.sid)


class LivenessMonitor:
    """Ping/pong bookkeeping on top of the session registry.

    Each tick either evicts a connection whose previous ping went
    unanswered, or sends a new ping and waits for the reply.
    """

    def __init__(self, sessions: SessionRegistry, ping, evict):
        self.sessions = sessions
        self._ping = ping
        self._evict = evict

    def tick(self, sid) -> None:
        conn = self.sessions.get(sid)
        if conn is None:
            return
        if conn.awaiting_pong:
            logger.info(f"[liveness-evict] sid={sid} room={conn.room_code} player={conn.player_id}")
            self._evict(sid)
            return
        conn.awaiting_pong = True
        self._ping(sid)

    def heard_from(self, sid) -> None:
        conn = self.sessions.get(sid)
        if conn is not None:
            conn.awaiting_pong = False
