from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional

# Room states
LOBBY = 'lobby'
BATTLE = 'battle'
FINISHED = 'finished'

# Battle phases, forward only
SUBMISSION = 'submission'
VOTING = 'voting'
RESULTS = 'results'

SLOTS = ('player1', 'player2')


@dataclass
class SongMatch:
    """A media candidate returned by the song lookup. Advisory only."""
    media_id: str
    title: str
    thumbnail_url: Optional[str] = None
    channel_title: Optional[str] = None

    def to_dict(self):
        return {
            'mediaId': self.media_id,
            'title': self.title,
            'thumbnailUrl': self.thumbnail_url,
            'channelTitle': self.channel_title,
        }


@dataclass
class Participant:
    id: str
    name: str
    joined_at: float = field(default_factory=time.time)

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'joinedAt': self.joined_at}


@dataclass
class Settings:
    genre: str = 'rap'
    points_to_win: int = 5
    max_participants: int = 8

    def to_dict(self):
        return {
            'genre': self.genre,
            'pointsToWin': self.points_to_win,
            'maxParticipants': self.max_participants,
        }


@dataclass
class Submission:
    title: str
    artist: str
    submitted_at: float = field(default_factory=time.time)
    media: Optional[SongMatch] = None

    def to_dict(self):
        return {
            'title': self.title,
            'artist': self.artist,
            'submittedAt': self.submitted_at,
            'media': self.media.to_dict() if self.media else None,
        }


@dataclass
class Battle:
    player1: Participant
    player2: Participant
    category: dict
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    phase: str = SUBMISSION
    submissions: Dict[str, Submission] = field(default_factory=dict)
    votes: Dict[str, str] = field(default_factory=dict)  # voter id -> battler id
    started_at: float = field(default_factory=time.time)
    voting_started_at: Optional[float] = None
    winner: Optional[str] = None
    final_votes: Optional[Dict[str, int]] = None
    game_winner: Optional[Participant] = None
    abandoned: bool = False
    # Newest submission ticket issued per slot; older lookups are discarded
    tickets: Dict[str, int] = field(default_factory=dict)

    @property
    def battler_ids(self):
        return (self.player1.id, self.player2.id)

    def slot_of(self, identity: str) -> Optional[str]:
        if identity == self.player1.id:
            return 'player1'
        if identity == self.player2.id:
            return 'player2'
        return None

    def is_battler(self, identity: str) -> bool:
        return identity in self.battler_ids

    def issue_ticket(self, slot: str) -> int:
        self.tickets[slot] = self.tickets.get(slot, 0) + 1
        return self.tickets[slot]

    def to_dict(self):
        return {
            'id': self.id,
            'player1': self.player1.to_dict(),
            'player2': self.player2.to_dict(),
            'category': dict(self.category),
            'phase': self.phase,
            'submissions': {slot: s.to_dict() for slot, s in self.submissions.items()},
            'voteCount': len(self.votes),
            'voters': list(self.votes),
            'startTime': self.started_at,
            'votingStartTime': self.voting_started_at,
            'winner': self.winner,
            'finalVotes': dict(self.final_votes) if self.final_votes else None,
            'gameWinner': self.game_winner.to_dict() if self.game_winner else None,
            'abandoned': self.abandoned,
        }


@dataclass
class Room:
    code: str
    host: Participant
    settings: Settings = field(default_factory=Settings)
    participants: Dict[str, Participant] = field(default_factory=dict)
    state: str = LOBBY
    scores: Dict[str, int] = field(default_factory=dict)
    current_battle: Optional[Battle] = None
    created_at: float = field(default_factory=time.time)

    def is_host(self, identity: str) -> bool:
        return self.host.id == identity

    def names(self):
        return [self.host.name] + [p.name for p in list(self.participants.values())]

    def is_full(self) -> bool:
        return len(self.participants) >= self.settings.max_participants

    def to_dict(self):
        return {
            'code': self.code,
            'host': self.host.to_dict(),
            'players': [p.to_dict() for p in list(self.participants.values())],
            'gameState': self.state,
            'settings': self.settings.to_dict(),
            'scores': dict(self.scores),
            'currentBattle': self.current_battle.to_dict() if self.current_battle else None,
            'createdAt': self.created_at,
        }
