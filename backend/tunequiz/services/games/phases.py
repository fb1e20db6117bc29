"""Host-driven phase transitions: lobby -> playing -> review -> ... -> results.

Every function mutates the given Room in place. Authorization is checked by
:func:`require_host` before any of them is called.
"""
import logging

from tunequiz.errors import AuthorizationError
from tunequiz.models import Phase, Room

logger = logging.getLogger(__name__)


def require_host(room: Room, player_id) -> None:
    if not player_id or player_id != room.host_id:
        raise AuthorizationError('Only host can perform this action')


def start_game(room: Room) -> None:
    """Begin a fresh run: every score goes back to 0."""
    room.phase = Phase.PLAYING
    room.current_song_index = 0
    for p in room.players:
        p.reset()
    logger.info(f"[start] room={room.code} players={len(room.players)} songs={room.song_count}")


def submit_guess(room: Room, player_id, title_guess, artist_guess) -> bool:
    """Record a player's guesses for the current song.

    Stale or late submissions (outside ``playing`` or for an unknown player)
    are dropped and False is returned.
    """
    if room.phase != Phase.PLAYING:
        return False
    player = room.find_player(player_id)
    if player is None:
        return False
    player.title_guess = _clean(title_guess)
    player.artist_guess = _clean(artist_guess)
    player.submitted = True
    return True


def open_review(room: Room) -> None:
    room.phase = Phase.REVIEW


def next_song(room: Room) -> None:
    prev = room.current_song_index
    if not room.is_last_song:
        room.current_song_index += 1
        room.phase = Phase.PLAYING
        for p in room.players:
            p.clear_round()
        logger.info(f"[next_song] room={room.code} advance song {prev} -> {room.current_song_index}")
    else:
        room.phase = Phase.RESULTS
        logger.info(f"[finish] room={room.code} finished at song={prev}")


def restart(room: Room) -> None:
    """Back to the lobby. Unlike start_game, scores are kept."""
    room.phase = Phase.LOBBY
    room.current_song_index = 0
    for p in room.players:
        p.clear_round()


def _clean(value) -> str:
    if value is None:
        return ''
    if not isinstance(value, str):
        value = str(value)
    return value.strip()
