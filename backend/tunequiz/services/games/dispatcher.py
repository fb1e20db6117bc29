"""Inbound message routing, host authorization and broadcast fanout.

The dispatcher is transport agnostic: it is given a ``send(sid, envelope)``
callable and a ``disconnect(sid)`` callable by the Socket.IO adapter. All
entry points run under one re-entrant lock so a message is validated,
applied and broadcast before the next one is looked at.
"""
import logging
import threading

from tunequiz import protocol
from tunequiz.errors import GameError, UnknownMessageType, ValidationError
from tunequiz.models import Room
from tunequiz.sessions import SessionRegistry
from tunequiz.services.games import phases, rejoin, scoring
from tunequiz.services.games.liveness import LivenessMonitor
from tunequiz.services.games.registry import RoomRegistry

logger = logging.getLogger(__name__)


def _text(payload, key) -> str:
    value = payload.get(key)
    if value is None:
        return ''
    if not isinstance(value, str):
        value = str(value)
    return value.strip()


class GameDispatcher:
    def __init__(self, send, disconnect=None, registry=None, sessions=None):
        self.registry = registry or RoomRegistry()
        self.sessions = sessions or SessionRegistry()
        self._send = send
        self._disconnect = disconnect
        self.lock = threading.RLock()
        self.liveness = LivenessMonitor(self.sessions, ping=self._ping, evict=self._evict)
        self._handlers = {
            protocol.CREATE_ROOM: self.create_room,
            protocol.JOIN_ROOM: self.join_room,
            protocol.START_GAME: self.start_game,
            protocol.SUBMIT_GUESS: self.submit_guess,
            protocol.OPEN_REVIEW: self.open_review,
            protocol.MARK_PLAYER: self.mark_player,
            protocol.NEXT_SONG: self.next_song,
            protocol.RESTART: self.restart,
            protocol.DELETE_ROOM: self.delete_room,
            protocol.LIST_ROOMS: self.list_rooms,
            protocol.PONG: self.pong,
        }

    # ---- connection lifecycle ----

    def connect(self, sid, timer=None):
        with self.lock:
            self.sessions.open(sid, timer=timer)
            logger.debug(f"[connect] sid={sid}")

    def close(self, sid) -> None:
        """Tear down a connection; safe to call more than once."""
        with self.lock:
            conn = self.sessions.close(sid)
            if conn is None or not conn.is_bound:
                return
            room = self.registry.get_room(conn.room_code)
            if room is None:
                return
            if conn.player_id == room.host_id:
                self._vanish(room, sid)
            else:
                logger.info(f"[player-left] room={room.code} player={conn.player_id} kept in roster")

    def tick(self, sid) -> None:
        with self.lock:
            self.liveness.tick(sid)

    # ---- inbound ----

    def handle(self, sid, raw) -> None:
        with self.lock:
            try:
                msg_type, payload = protocol.parse_envelope(raw)
                handler = self._handlers.get(msg_type)
                if handler is None:
                    raise UnknownMessageType('Unknown message type')
                handler(sid, payload)
            except GameError as exc:
                logger.warning(f"[rejected] sid={sid} {type(exc).__name__}: {exc.message}")
                self.error(sid, exc.message)

    def create_room(self, sid, payload):
        room = self.registry.create_room(payload.get('name'), payload.get('songCount'))
        self._bind(sid, room, room.host_id)
        self.send(sid, protocol.WELCOME, {'roomCode': room.code, 'playerId': room.host_id})
        self.broadcast_room(room)

    def join_room(self, sid, payload):
        name = _text(payload, 'name')
        room_code = _text(payload, 'roomCode')
        if not name or not room_code:
            raise ValidationError('Name and room code required')
        room = self.registry.require_room(room_code)

        player, branch = rejoin.resolve_join(room, name, payload.get('playerId'))
        self._bind(sid, room, player.id)
        logger.info(f"[join] room={room.code} player={player.id} via={branch}")
        self.send(sid, protocol.WELCOME, {'roomCode': room.code, 'playerId': player.id})
        self.broadcast_room(room)

    def start_game(self, sid, payload):
        room = self._host_room(sid, payload)
        phases.start_game(room)
        self.broadcast_room(room)

    def submit_guess(self, sid, payload):
        room = self.registry.get_room(_text(payload, 'roomCode'))
        if room is None:
            return
        if phases.submit_guess(room, payload.get('playerId'), payload.get('titleGuess'), payload.get('artistGuess')):
            self.broadcast_room(room)

    def open_review(self, sid, payload):
        room = self._host_room(sid, payload)
        phases.open_review(room)
        self.broadcast_room(room)

    def mark_player(self, sid, payload):
        room = self._host_room(sid, payload)
        if scoring.mark_player(room, payload.get('playerId'), payload.get('field'), bool(payload.get('correct'))):
            self.broadcast_room(room)

    def next_song(self, sid, payload):
        room = self._host_room(sid, payload)
        phases.next_song(room)
        self.broadcast_room(room)

    def restart(self, sid, payload):
        room = self._host_room(sid, payload)
        phases.restart(room)
        self.broadcast_room(room)

    def delete_room(self, sid, payload):
        room = self._host_room(sid, payload)
        for target in self.sessions.subscribers(room.code):
            self.send(target, protocol.ROOM_DELETED, {'roomCode': room.code})
        self.sessions.drop_room(room.code)
        self.registry.delete_room(room.code)

    def list_rooms(self, sid, payload):
        self.send(sid, protocol.ROOMS_LIST, {'rooms': self.registry.list_summaries()})

    def pong(self, sid, payload):
        self.liveness.heard_from(sid)

    # ---- outbound ----

    def send(self, sid, msg_type, payload=None):
        self._send(sid, protocol.make_envelope(msg_type, payload))

    def error(self, sid, message):
        self.send(sid, protocol.ERROR, {'message': message})

    def broadcast_room(self, room: Room):
        """Push the full room snapshot to every connection bound to it."""
        envelope = protocol.make_envelope(protocol.ROOM_STATE, room.to_dict())
        targets = self.sessions.subscribers(room.code)
        for target in targets:
            self._send(target, envelope)
        logger.debug(f"[broadcast] room={room.code} phase={room.phase.value} targets={len(targets)}")

    # ---- helpers ----

    def _host_room(self, sid, payload) -> Room:
        room_code = _text(payload, 'roomCode')
        if not room_code:
            raise ValidationError('roomCode required')
        room = self.registry.require_room(room_code)
        conn = self.sessions.get(sid)
        player_id = conn.player_id if conn is not None and conn.room_code == room.code else None
        phases.require_host(room, player_id)
        return room

    def _bind(self, sid, room: Room, player_id) -> None:
        conn = self.sessions.get(sid)
        if conn is not None and conn.is_bound and conn.room_code != room.code:
            previous = self.registry.get_room(conn.room_code)
            if previous is not None and conn.player_id == previous.host_id:
                # Leaving a room as its host counts as the host's connection closing.
                self._vanish(previous, sid)
        self.sessions.bind(sid, room.code, player_id)

    def _vanish(self, room: Room, sid) -> None:
        """Delete a room whose host is gone, without notifying anyone."""
        self.sessions.drop_room(room.code)
        self.registry.delete_room(room.code)
        logger.info(f"[host-left] room={room.code} sid={sid}")

    def _ping(self, sid):
        self.send(sid, protocol.PING)

    def _evict(self, sid):
        self.close(sid)
        if self._disconnect is not None:
            self._disconnect(sid)
