from tunequiz.errors import NotFoundError
from tunequiz.models import Correctness, Room

FIELDS = {
    'title': 'title_correct',
    'artist': 'artist_correct',
}


def mark_player(room: Room, player_id, field, correct) -> bool:
    """Apply a host verdict on one guessed field.

    Unset and incorrect both mean "no point awarded". Moving to correct adds
    a point, moving away from correct takes it back (never below zero), and
    repeating the current verdict changes nothing. Returns False for an
    unknown field, which is ignored.
    """
    player = room.find_player(player_id)
    if player is None:
        raise NotFoundError('Player not found')
    attr = FIELDS.get(field) if isinstance(field, str) else None
    if attr is None:
        return False

    previous = getattr(player, attr)
    verdict = Correctness.CORRECT if correct else Correctness.INCORRECT
    if verdict == Correctness.CORRECT and previous != Correctness.CORRECT:
        player.score += 1
    elif verdict != Correctness.CORRECT and previous == Correctness.CORRECT:
        player.score = max(0, player.score - 1)
    setattr(player, attr, verdict)
    return True
