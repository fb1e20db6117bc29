import enum
import random
import secrets
import time


class Phase(str, enum.Enum):
    LOBBY = 'lobby'
    PLAYING = 'playing'
    REVIEW = 'review'
    RESULTS = 'results'


class Correctness(str, enum.Enum):
    """Host verdict on one guessed field for the current round."""
    UNSET = 'unset'
    CORRECT = 'correct'
    INCORRECT = 'incorrect'


def generate_player_id():
    return secrets.token_hex(6)


def generate_room_code(taken, rng=random):
    """Generate a 6-digit room code that is not in ``taken``."""
    while True:
        code = str(rng.randint(100000, 999999))
        if code not in taken:
            return code


class Player:
    def __init__(self, name, player_id=None):
        self.id = player_id or generate_player_id()
        self.name = name
        self.score = 0
        self.title_guess = ''
        self.artist_guess = ''
        self.submitted = False
        self.title_correct = Correctness.UNSET
        self.artist_correct = Correctness.UNSET

    def clear_submission(self):
        self.title_guess = ''
        self.artist_guess = ''
        self.submitted = False

    def clear_round(self):
        self.clear_submission()
        self.title_correct = Correctness.UNSET
        self.artist_correct = Correctness.UNSET

    def reset(self):
        self.score = 0
        self.clear_round()

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'score': self.score,
            'titleGuess': self.title_guess,
            'artistGuess': self.artist_guess,
            'submitted': self.submitted,
            'titleCorrect': self.title_correct.value,
            'artistCorrect': self.artist_correct.value,
        }


class Room:
    def __init__(self, code, song_count, host):
        self.code = code
        self.song_count = song_count
        self.phase = Phase.LOBBY
        self.current_song_index = 0
        self.host_id = host.id
        self.players = [host]
        self.created_at = int(time.time() * 1000)

    def find_player(self, player_id):
        if not player_id:
            return None
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def find_player_by_name(self, name):
        for p in self.players:
            if p.name == name:
                return p
        return None

    def add_player(self, player):
        self.players.append(player)
        return player

    @property
    def is_last_song(self):
        return self.current_song_index >= self.song_count - 1

    def summary(self):
        return {
            'roomCode': self.code,
            'phase': self.phase.value,
            'playerCount': len(self.players),
            'songCount': self.song_count,
            'currentSongIndex': self.current_song_index,
            'createdAt': self.created_at,
        }

    def to_dict(self):
        return {
            'roomCode': self.code,
            'songCount': self.song_count,
            'phase': self.phase.value,
            'currentSongIndex': self.current_song_index,
            'hostId': self.host_id,
            'players': [p.to_dict() for p in self.players],
            'createdAt': self.created_at,
        }
