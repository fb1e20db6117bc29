import logging
import random
from typing import Dict, List, Optional

from tunequiz.errors import NotFoundError, ValidationError
from tunequiz.models import Player, Room, generate_room_code

logger = logging.getLogger(__name__)


def parse_song_count(value) -> int:
    """Coerce ``songCount`` to a positive int or raise ValidationError."""
    if isinstance(value, bool) or value is None:
        raise ValidationError('songCount required')
    if isinstance(value, str):
        value = value.strip()
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError('songCount must be a number')
    if not number.is_integer() or number <= 0:
        raise ValidationError('songCount must be a positive whole number')
    return int(number)


class RoomRegistry:
    """Owns every live Room, keyed by its 6-digit code."""

    def __init__(self, rng=None):
        self._rooms: Dict[str, Room] = {}
        self._rng = rng or random.Random()

    def __contains__(self, code):
        return code in self._rooms

    def __len__(self):
        return len(self._rooms)

    def create_room(self, display_name, song_count) -> Room:
        name = display_name.strip() if isinstance(display_name, str) else ''
        if not name:
            raise ValidationError('Name required')
        count = parse_song_count(song_count)

        code = generate_room_code(self._rooms, rng=self._rng)
        host = Player(name)
        room = Room(code, count, host)
        self._rooms[code] = room
        logger.info(f"[room-create] room={code} host={host.id} songs={count}")
        return room

    def get_room(self, code) -> Optional[Room]:
        if not isinstance(code, str):
            return None
        return self._rooms.get(code.strip())

    def require_room(self, code) -> Room:
        room = self.get_room(code)
        if room is None:
            raise NotFoundError('Room not found')
        return room

    def delete_room(self, code) -> Optional[Room]:
        room = self._rooms.pop(code, None)
        if room is not None:
            logger.info(f"[room-delete] room={code} players={len(room.players)}")
        return room

    def list_summaries(self) -> List[dict]:
        return [room.summary() for room in self._rooms.values()]
