import json
from typing import Any, Dict, Optional, Tuple

from tunequiz.errors import MalformedMessage, UnknownMessageType

# Client -> server
CREATE_ROOM = 'create_room'
JOIN_ROOM = 'join_room'
START_GAME = 'start_game'
SUBMIT_GUESS = 'submit_guess'
OPEN_REVIEW = 'open_review'
MARK_PLAYER = 'mark_player'
NEXT_SONG = 'next_song'
RESTART = 'restart'
DELETE_ROOM = 'delete_room'
LIST_ROOMS = 'list_rooms'
PONG = 'pong'

# Server -> client
WELCOME = 'welcome'
ROOM_STATE = 'room_state'
ROOMS_LIST = 'rooms_list'
ROOM_DELETED = 'room_deleted'
ERROR = 'error'
PING = 'ping'


def make_envelope(msg_type: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build an outbound frame."""
    return {'type': msg_type, 'payload': payload if payload is not None else {}}


def parse_envelope(raw) -> Tuple[str, Dict[str, Any]]:
    """Parse an inbound frame into ``(type, payload)``.

    Frames arrive either as JSON text or as an already decoded object,
    depending on how the client emitted them. A missing payload is read as
    an empty object.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode('utf-8')
        except UnicodeDecodeError:
            raise MalformedMessage('Message is not valid UTF-8')
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            raise MalformedMessage('Invalid JSON')
    if not isinstance(raw, dict):
        raise MalformedMessage('Message must be a JSON object')

    msg_type = raw.get('type')
    if not isinstance(msg_type, str) or not msg_type:
        raise UnknownMessageType('Unknown message type')

    payload = raw.get('payload')
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise MalformedMessage('payload must be an object')
    return msg_type, payload
