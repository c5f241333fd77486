"""Inbound client actions.

Each action authorizes the caller, resolves the room and drives the battle
engine. Actions run one at a time under the shared lock, so state for a room
is never mutated by two actions at once. Transport concerns (which event to
emit on failure) live in ``socketio_events``.
"""
import logging

from songwars.exceptions import (
    AlreadyInRoom,
    GameAlreadyStarted,
    GameFinished,
    InvalidPayload,
    NameTaken,
    NotEnoughPlayers,
    NotHost,
    NotInRoom,
    RoomFull,
    RoomNotFound,
)
from songwars.models import FINISHED, LOBBY, Participant
from songwars.services.rooms import HOST, PLAYER

logger = logging.getLogger(__name__)


def _as_int(value):
    # bool is an int subclass; floats would silently truncate
    if isinstance(value, bool):
        raise TypeError(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    raise ValueError(value)


def _as_str(value):
    if not isinstance(value, str) or not value.strip():
        raise ValueError(value)
    return value.strip()


# Wire name -> (attribute, coercion, minimum)
SETTINGS_FIELDS = {
    'genre': ('genre', _as_str, None),
    'pointsToWin': ('points_to_win', _as_int, 1),
    'maxParticipants': ('max_participants', _as_int, 2),
}


def _clean_name(value):
    return value.strip() if isinstance(value, str) else ''


class ActionDispatcher:

    def __init__(self, rooms, players, engine, gateway):
        self.rooms = rooms
        self.players = players
        self.engine = engine
        self.gateway = gateway
        self.lock = engine.lock

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _room_for(self, identity):
        room = self.players.resolve_room(identity)
        if room is None:
            raise NotInRoom()
        return room

    def _hosted_room(self, identity):
        room = self.players.resolve_room(identity)
        if room is None or not room.is_host(identity):
            raise NotHost()
        return room

    # ------------------------------------------------------------------
    # Lobby
    # ------------------------------------------------------------------
    def create_room(self, identity, host_name):
        with self.lock:
            host_name = _clean_name(host_name)
            if not host_name:
                raise InvalidPayload('Host name is required')
            if identity in self.players:
                raise AlreadyInRoom()
            room = self.rooms.create(identity, host_name)
            self.players.bind(identity, host_name, room.code, HOST)
            self.gateway.subscribe(identity, room.code)
            return room

    def join_room(self, identity, room_code, player_name):
        with self.lock:
            if identity in self.players:
                raise AlreadyInRoom()
            room = self.rooms.find(room_code)
            if room is None:
                raise RoomNotFound()
            if room.is_full():
                raise RoomFull()
            if room.state != LOBBY:
                raise GameAlreadyStarted()
            player_name = _clean_name(player_name)
            if not player_name:
                raise InvalidPayload('Player name is required')
            if player_name in room.names():
                raise NameTaken()

            room.participants[identity] = Participant(id=identity, name=player_name)
            room.scores[identity] = 0
            self.players.bind(identity, player_name, room.code, PLAYER)
            self.gateway.subscribe(identity, room.code)
            logger.info(f"[join] room={room.code} player={player_name}")
            self.gateway.send(identity, 'room_joined', {
                'success': True, 'roomCode': room.code, 'role': PLAYER, 'playerId': identity,
            })
            self.gateway.publish(room)
            return room

    def room_state(self, identity):
        with self.lock:
            room = self._room_for(identity)
            binding = self.players.lookup(identity)
            return {
                'room': self.gateway.snapshot(room),
                'yourRole': binding.role,
                'yourName': binding.name,
            }

    def update_settings(self, identity, changes):
        with self.lock:
            room = self._hosted_room(identity)
            if not isinstance(changes, dict):
                raise InvalidPayload('Settings must be an object')
            updates = {}
            for key, value in changes.items():
                if key not in SETTINGS_FIELDS:
                    continue
                attr, coerce, minimum = SETTINGS_FIELDS[key]
                try:
                    value = coerce(value)
                except (TypeError, ValueError):
                    raise InvalidPayload(f'Invalid value for {key}') from None
                if minimum is not None and value < minimum:
                    raise InvalidPayload(f'{key} must be at least {minimum}')
                updates[attr] = value
            for attr, value in updates.items():
                setattr(room.settings, attr, value)
            logger.info(f"[settings] room={room.code} updated={sorted(updates)}")
            self.gateway.publish(room)
            return room

    # ------------------------------------------------------------------
    # Battles
    # ------------------------------------------------------------------
    def start_game(self, identity):
        with self.lock:
            room = self._hosted_room(identity)
            if room.state != LOBBY:
                raise GameAlreadyStarted()
            if len(room.participants) < 2:
                raise NotEnoughPlayers()
            logger.info(f"[game-start] room={room.code} players={len(room.participants)}")
            return self.engine.start_battle(room)

    def submit_song(self, identity, title, artist):
        with self.lock:
            room = self._room_for(identity)
            return self.engine.submit_entry(room, identity, title, artist)

    def submit_vote(self, identity, voted_player_id):
        with self.lock:
            room = self._room_for(identity)
            self.engine.submit_vote(room, identity, voted_player_id)

    def next_battle(self, identity):
        with self.lock:
            room = self._hosted_room(identity)
            if room.state == FINISHED:
                raise GameFinished()
            battle = self.engine.next_battle(room)
            if battle is None:
                raise NotEnoughPlayers()
            return battle

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------
    def disconnect(self, identity):
        with self.lock:
            binding = self.players.unbind(identity)
            if not binding:
                return
            room = self.rooms.find(binding.room_code)
            if room is None:
                return

            if binding.role == HOST:
                self.gateway.close(room, 'Host left the room')
                self.players.unbind_room(room.code)
                self.rooms.destroy(room.code)
                return

            room.participants.pop(identity, None)
            room.scores.pop(identity, None)
            self.engine.participant_left(room, identity)
            self.gateway.unsubscribe(identity, room.code)
            logger.info(f"[leave] room={room.code} player={binding.name}")
            self.gateway.publish(room)
