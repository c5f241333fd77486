"""Battle state machine.

A battle moves forward only: submission -> voting -> results. The engine
owns battler selection, submission intake, vote tally, tie breaks, scoring
and the game-over check. Randomness comes from an injected ``random.Random``
so tests can replay exact sequences.
"""
import logging
import random
import threading
import time
from typing import Optional, Tuple

from songwars.categories import categories_for
from songwars.exceptions import (
    BattlerCannotVote,
    InvalidPayload,
    InvalidState,
    NoActiveBattle,
    NotABattler,
    SubmissionsClosed,
    VotingNotActive,
)
from songwars.models import (
    BATTLE,
    FINISHED,
    LOBBY,
    RESULTS,
    SLOTS,
    SUBMISSION,
    VOTING,
    Battle,
    Participant,
    Room,
    Submission,
)

logger = logging.getLogger(__name__)


def _run_inline(fn, *args):
    fn(*args)


class BattleEngine:

    def __init__(self, rooms, gateway, lookup=None, rng=None, spawn=None, lock=None):
        self.rooms = rooms
        self.gateway = gateway
        self.lookup = lookup
        self.rng = rng or random.Random()
        # Runs slow work (the song lookup) off the action path
        self.spawn = spawn or _run_inline
        self.lock = lock or threading.RLock()

    # ------------------------------------------------------------------
    # Battle setup
    # ------------------------------------------------------------------
    def select_battlers(self, room: Room) -> Optional[Tuple[Participant, Participant]]:
        candidates = list(room.participants.values())
        if len(candidates) < 2:
            return None
        player1, player2 = self.rng.sample(candidates, 2)
        return player1, player2

    def pick_category(self, genre: str) -> dict:
        return self.rng.choice(categories_for(genre))

    def start_battle(self, room: Room) -> Optional[Battle]:
        battlers = self.select_battlers(room)
        if not battlers:
            logger.info(f"[battle-skip] room={room.code} not enough participants")
            return None
        category = self.pick_category(room.settings.genre)
        battle = Battle(player1=battlers[0], player2=battlers[1], category=category)
        room.current_battle = battle
        room.state = BATTLE
        logger.info(
            f"[battle-start] room={room.code} battle={battle.id} "
            f"p1={battle.player1.name} p2={battle.player2.name} category={category['id']}"
        )
        self.gateway.publish(room)
        return battle

    def next_battle(self, room: Room) -> Optional[Battle]:
        # Previous battle is discarded, no history is kept
        return self.start_battle(room)

    # ------------------------------------------------------------------
    # Submissions
    # ------------------------------------------------------------------
    def submit_entry(self, room: Room, identity: str, title, artist, lookup=None) -> int:
        """Validate a submission and hand the lookup off to ``spawn``.

        Returns the ticket issued for the submitter's slot. The submission is
        stored by ``apply_submission`` once the lookup settles.
        """
        battle = room.current_battle
        if battle is None:
            raise NoActiveBattle()
        slot = battle.slot_of(identity)
        if slot is None:
            raise NotABattler()
        if battle.phase != SUBMISSION or battle.abandoned:
            raise SubmissionsClosed()
        title = title.strip() if isinstance(title, str) else ''
        artist = artist.strip() if isinstance(artist, str) else ''
        if not title or not artist:
            raise InvalidPayload('Song title and artist are required')

        ticket = battle.issue_ticket(slot)
        logger.info(f"[submission-received] room={room.code} battle={battle.id} slot={slot} title={title!r}")
        self.spawn(self._resolve_submission, room, battle, slot, ticket, title, artist, lookup or self.lookup)
        return ticket

    def _resolve_submission(self, room, battle, slot, ticket, title, artist, lookup):
        media = self._safe_lookup(lookup, title, artist)
        with self.lock:
            self.apply_submission(room, battle, slot, ticket, Submission(title=title, artist=artist, media=media))

    def _safe_lookup(self, lookup, title, artist):
        if lookup is None:
            return None
        try:
            return lookup(title, artist)
        except Exception:
            logger.exception(f"[lookup-error] title={title!r} artist={artist!r}")
            return None

    def apply_submission(self, room: Room, battle: Battle, slot: str, ticket: int, submission: Submission) -> bool:
        """Store a settled submission if it still belongs to the live battle."""
        if (
            self.rooms.find(room.code) is not room
            or room.current_battle is not battle
            or battle.phase != SUBMISSION
            or battle.abandoned
            or battle.tickets.get(slot) != ticket
        ):
            logger.info(f"[submission-stale] room={room.code} battle={battle.id} slot={slot} ticket={ticket}")
            return False

        battle.submissions[slot] = submission
        logger.info(
            f"[submission] room={room.code} battle={battle.id} slot={slot} "
            f"media={submission.media.media_id if submission.media else 'Not found'}"
        )
        if all(s in battle.submissions for s in SLOTS):
            battle.phase = VOTING
            battle.voting_started_at = time.time()
            logger.info(f"[voting-open] room={room.code} battle={battle.id}")
        self.gateway.publish(room)
        return True

    # ------------------------------------------------------------------
    # Voting
    # ------------------------------------------------------------------
    def judge_ids(self, room: Room, battle: Battle):
        judges = {pid for pid in list(room.participants) if not battle.is_battler(pid)}
        if not battle.is_battler(room.host.id):
            judges.add(room.host.id)
        return judges

    def quorum(self, room: Room, battle: Battle) -> int:
        return len(self.judge_ids(room, battle))

    def counted_votes(self, room: Room, battle: Battle) -> int:
        judges = self.judge_ids(room, battle)
        return sum(1 for voter in battle.votes if voter in judges)

    def submit_vote(self, room: Room, voter: str, voted_for) -> None:
        battle = room.current_battle
        if battle is None:
            raise NoActiveBattle()
        if battle.phase != VOTING or battle.abandoned:
            raise VotingNotActive()
        if battle.is_battler(voter):
            raise BattlerCannotVote()
        if voted_for not in battle.battler_ids:
            raise InvalidPayload('Vote must name one of the battlers')

        battle.votes[voter] = voted_for
        logger.info(f"[vote] room={room.code} battle={battle.id} votes={len(battle.votes)}")
        self._finish_if_quorum(room, battle)

    def _finish_if_quorum(self, room: Room, battle: Battle) -> None:
        if self.counted_votes(room, battle) >= self.quorum(room, battle):
            self.finish_battle(room)
        else:
            self.gateway.publish(room)

    def finish_battle(self, room: Room) -> str:
        battle = room.current_battle
        if battle is None:
            raise NoActiveBattle()
        if battle.phase == RESULTS:
            raise InvalidState('Battle already finished')

        p1_id, p2_id = battle.battler_ids
        tally = {p1_id: 0, p2_id: 0}
        for voted_for in battle.votes.values():
            tally[voted_for] += 1

        if tally[p1_id] > tally[p2_id]:
            winner_id = p1_id
        elif tally[p2_id] > tally[p1_id]:
            winner_id = p2_id
        else:
            winner_id = self.rng.choice([p1_id, p2_id])
            logger.info(f"[tie-break] room={room.code} battle={battle.id} winner={winner_id}")

        room.scores[winner_id] = room.scores.get(winner_id, 0) + 1
        battle.phase = RESULTS
        battle.winner = winner_id
        battle.final_votes = {'player1': tally[p1_id], 'player2': tally[p2_id]}
        logger.info(
            f"[battle-finish] room={room.code} battle={battle.id} winner={winner_id} "
            f"votes={battle.final_votes} score={room.scores[winner_id]}"
        )

        if room.scores[winner_id] >= room.settings.points_to_win:
            room.state = FINISHED
            battle.game_winner = battle.player1 if winner_id == p1_id else battle.player2
            logger.info(f"[game-finished] room={room.code} winner={battle.game_winner.name}")

        self.gateway.publish(room)
        return winner_id

    # ------------------------------------------------------------------
    # Departures
    # ------------------------------------------------------------------
    def participant_left(self, room: Room, identity: str) -> None:
        """Apply the departure policy to the current battle.

        The participant must already be removed from ``room.participants``.
        Publishes only when the departure completes the vote; otherwise the
        caller publishes once the room is consistent.
        """
        battle = room.current_battle
        if battle is None or room.state == FINISHED:
            return

        # No pair left to battle: reopen the lobby whatever the phase
        if len(room.participants) < 2:
            room.current_battle = None
            room.state = LOBBY
            logger.info(f"[battle-dropped] room={room.code} battle={battle.id} back to lobby")
            return

        if battle.phase == RESULTS:
            return

        if battle.is_battler(identity):
            battle.abandoned = True
            logger.info(f"[battle-abandoned] room={room.code} battle={battle.id} battler={identity}")
            return

        # A departing judge's vote is withdrawn and quorum shrinks with them
        battle.votes.pop(identity, None)
        if battle.phase == VOTING and not battle.abandoned and battle.votes:
            if self.counted_votes(room, battle) >= self.quorum(room, battle):
                self.finish_battle(room)
