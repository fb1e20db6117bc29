from typing import Optional, Tuple

from tunequiz.models import Player, Room

RECONNECT = 'reconnect'
NAME_MATCH = 'name_match'
NEW_PLAYER = 'new'


def resolve_join(room: Room, name: str, player_id: Optional[str] = None) -> Tuple[Player, str]:
    """Map a join request onto a player in ``room``.

    First match wins:

    1. ``player_id`` names a player in the room: a reconnect. Score is kept,
       guesses and the submitted flag are cleared. Correctness flags are left
       as they are; only the per-round resets clear them.
    2. A player with exactly this (trimmed, case-sensitive) name exists: that
       identity is reused. Two people sharing a display name therefore share
       one player record, score included. This is an accepted approximation
       for clients that lost their saved id.
    3. Otherwise a new player with score 0 is appended to the roster.

    ``name`` is expected to be trimmed and non-empty already.
    """
    player = room.find_player(player_id)
    if player is not None:
        player.clear_submission()
        return player, RECONNECT

    player = room.find_player_by_name(name)
    if player is not None:
        return player, NAME_MATCH

    return room.add_player(Player(name)), NEW_PLAYER
