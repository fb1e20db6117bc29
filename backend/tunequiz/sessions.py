"""Connection table and per-room subscriber registry.

Each open Socket.IO connection (keyed by its ``sid``) gets one
:class:`Connection` record for its lifetime. A record may be bound to a
``(room_code, player_id)`` pair; the binding never keeps a room alive and is
the only thing the broadcast fanout consults to reach a room's clients.
"""
from typing import Dict, List, Optional, Set


class Connection:
    def __init__(self, sid: str, timer=None):
        self.sid = sid
        self.room_code: Optional[str] = None
        self.player_id: Optional[str] = None
        # Liveness state: True while a ping is outstanding.
        self.awaiting_pong = False
        self.timer = timer

    @property
    def is_bound(self) -> bool:
        return self.room_code is not None

    def cancel_timer(self) -> None:
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None


class SessionRegistry:
    def __init__(self):
        self._connections: Dict[str, Connection] = {}
        self._subscribers: Dict[str, Set[str]] = {}

    def __contains__(self, sid):
        return sid in self._connections

    def __len__(self):
        return len(self._connections)

    def open(self, sid: str, timer=None) -> Connection:
        stale = self._connections.get(sid)
        if stale is not None:
            stale.cancel_timer()
            self._unsubscribe(stale)
        conn = Connection(sid, timer=timer)
        self._connections[sid] = conn
        return conn

    def get(self, sid: str) -> Optional[Connection]:
        return self._connections.get(sid)

    def bind(self, sid: str, room_code: str, player_id: str) -> Connection:
        conn = self._connections.get(sid)
        if conn is None:
            conn = self.open(sid)
        self._unsubscribe(conn)
        conn.room_code = room_code
        conn.player_id = player_id
        self._subscribers.setdefault(room_code, set()).add(sid)
        return conn

    def close(self, sid: str) -> Optional[Connection]:
        """Drop the record for ``sid`` and cancel its timer.

        Returns the record on the first call for a given sid and None on any
        later call, so teardown side effects run exactly once.
        """
        conn = self._connections.pop(sid, None)
        if conn is None:
            return None
        conn.cancel_timer()
        room_code, player_id = conn.room_code, conn.player_id
        self._unsubscribe(conn)
        # Teardown still needs to know what the connection was bound to.
        conn.room_code, conn.player_id = room_code, player_id
        return conn

    def subscribers(self, room_code: str) -> List[str]:
        return sorted(self._subscribers.get(room_code, ()))

    def drop_room(self, room_code: str) -> List[str]:
        """Unbind every connection bound to ``room_code``; return their sids."""
        sids = sorted(self._subscribers.pop(room_code, ()))
        for sid in sids:
            conn = self._connections.get(sid)
            if conn is not None:
                conn.room_code = None
                conn.player_id = None
        return sids

    def _unsubscribe(self, conn: Connection) -> None:
        if conn.room_code is not None:
            members = self._subscribers.get(conn.room_code)
            if members is not None:
                members.discard(conn.sid)
                if not members:
                    del self._subscribers[conn.room_code]
        conn.room_code = None
        conn.player_id = None
