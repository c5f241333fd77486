"""Room registry and player directory.

Both are process-wide services built by the app factory and injected into
the action dispatcher. Iteration helpers return copies so callers may add or
remove entries while walking them.
"""
import logging
import random
import string
from dataclasses import dataclass
from typing import Dict, List, Optional

from songwars.models import Participant, Room, Settings

logger = logging.getLogger(__name__)

HOST = 'host'
PLAYER = 'player'

CODE_ALPHABET = string.ascii_uppercase + string.digits


class RoomRegistry:
    """Owns the set of live rooms."""

    def __init__(self, code_length=6, default_settings: Optional[Settings] = None, rng=None):
        self.code_length = code_length
        self.default_settings = default_settings or Settings()
        self.rng = rng or random.Random()
        self._rooms: Dict[str, Room] = {}

    def generate_code(self) -> str:
        """Sample codes until one is not in use by a live room."""
        while True:
            code = ''.join(self.rng.choices(CODE_ALPHABET, k=self.code_length))
            if code not in self._rooms:
                return code
            logger.warning(f"[code-collision] code={code} regenerating")

    def create(self, host_identity: str, host_name: str) -> Room:
        code = self.generate_code()
        defaults = self.default_settings
        room = Room(
            code=code,
            host=Participant(id=host_identity, name=host_name),
            settings=Settings(
                genre=defaults.genre,
                points_to_win=defaults.points_to_win,
                max_participants=defaults.max_participants,
            ),
        )
        self._rooms[code] = room
        logger.info(f"[room-created] code={code} host={host_name}")
        return room

    def find(self, code) -> Optional[Room]:
        if not code:
            return None
        return self._rooms.get(str(code).strip().upper())

    def destroy(self, code) -> None:
        room = self._rooms.pop(str(code).upper(), None)
        if room is not None:
            room.current_battle = None
            logger.info(f"[room-destroyed] code={room.code}")

    def codes(self) -> List[str]:
        return list(self._rooms)

    def __len__(self):
        return len(self._rooms)


@dataclass
class Binding:
    name: str
    room_code: str
    role: str


class PlayerDirectory:
    """Maps a connection identity to its current room and role."""

    def __init__(self, rooms: RoomRegistry):
        self.rooms = rooms
        self._bindings: Dict[str, Binding] = {}

    def bind(self, identity: str, name: str, room_code: str, role: str) -> Binding:
        binding = Binding(name=name, room_code=room_code, role=role)
        self._bindings[identity] = binding
        return binding

    def lookup(self, identity: str) -> Optional[Binding]:
        return self._bindings.get(identity)

    def resolve_room(self, identity: str) -> Optional[Room]:
        binding = self._bindings.get(identity)
        if not binding:
            return None
        return self.rooms.find(binding.room_code)

    def unbind(self, identity: str) -> Optional[Binding]:
        return self._bindings.pop(identity, None)

    def unbind_room(self, room_code: str) -> List[str]:
        """Drop every binding that points at the given room."""
        dropped = [i for i, b in list(self._bindings.items()) if b.room_code == room_code]
        for identity in dropped:
            self._bindings.pop(identity, None)
        return dropped

    def __contains__(self, identity):
        return identity in self._bindings
