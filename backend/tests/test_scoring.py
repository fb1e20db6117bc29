import random

import pytest

from tunequiz.errors import NotFoundError
from tunequiz.models import Correctness, Player
from tunequiz.services.games.registry import RoomRegistry
from tunequiz.services.games.scoring import mark_player


@pytest.fixture()
def room():
    r = RoomRegistry().create_room('Alice', 3)
    r.add_player(Player('Bob'))
    return r


def bob(room):
    return room.players[1]


def test_marking_correct_awards_a_point(room):
    assert mark_player(room, bob(room).id, 'title', True) is True
    assert bob(room).score == 1
    assert bob(room).title_correct == Correctness.CORRECT
    assert bob(room).artist_correct == Correctness.UNSET


def test_repeat_mark_is_idempotent(room):
    mark_player(room, bob(room).id, 'title', True)
    mark_player(room, bob(room).id, 'title', True)
    assert bob(room).score == 1
    mark_player(room, bob(room).id, 'artist', False)
    mark_player(room, bob(room).id, 'artist', False)
    assert bob(room).score == 1


def test_correct_then_incorrect_reverts(room):
    bob(room).score = 4
    mark_player(room, bob(room).id, 'artist', True)
    assert bob(room).score == 5
    mark_player(room, bob(room).id, 'artist', False)
    assert bob(room).score == 4
    assert bob(room).artist_correct == Correctness.INCORRECT


def test_unset_to_incorrect_changes_nothing_but_the_flag(room):
    mark_player(room, bob(room).id, 'title', False)
    assert bob(room).score == 0
    assert bob(room).title_correct == Correctness.INCORRECT
    # incorrect -> correct still awards the point
    mark_player(room, bob(room).id, 'title', True)
    assert bob(room).score == 1


def test_revoking_never_goes_negative(room):
    p = bob(room)
    p.title_correct = Correctness.CORRECT
    p.score = 0
    mark_player(room, p.id, 'title', False)
    assert p.score == 0


def test_fields_count_independently(room):
    mark_player(room, bob(room).id, 'title', True)
    mark_player(room, bob(room).id, 'artist', True)
    assert bob(room).score == 2


def test_unknown_field_is_ignored(room):
    before = bob(room).to_dict()
    assert mark_player(room, bob(room).id, 'album', True) is False
    assert mark_player(room, bob(room).id, None, True) is False
    assert bob(room).to_dict() == before


def test_unknown_player_is_not_found(room):
    with pytest.raises(NotFoundError):
        mark_player(room, 'nope', 'title', True)


def test_score_stays_non_negative_for_random_sequences(room):
    rng = random.Random(7)
    p = bob(room)
    for _ in range(500):
        field = rng.choice(['title', 'artist', 'other'])
        mark_player(room, p.id, field, rng.random() < 0.5)
        assert p.score >= 0
        awarded = [p.title_correct, p.artist_correct].count(Correctness.CORRECT)
        assert p.score == awarded
