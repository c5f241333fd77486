"""Room snapshots and Socket.IO delivery."""
import logging

from songwars.models import VOTING

logger = logging.getLogger(__name__)


def topic_for(room_code: str) -> str:
    return f"room:{room_code}"


class BroadcastGateway:
    """Publishes room snapshots to every connection subscribed to the room.

    Delivery is fire-and-forget. A client that missed an update catches up on
    the next publish or by asking for ``get_room_state``.
    """

    def __init__(self, socketio, namespace='/', quorum=None):
        self.socketio = socketio
        self.namespace = namespace
        # Callable(room, battle) -> int, supplied by the battle engine
        self.quorum = quorum

    def snapshot(self, room) -> dict:
        """Render a fresh, wire-safe copy of the room's state."""
        data = room.to_dict()
        battle = room.current_battle
        if battle is not None and data['currentBattle'] is not None:
            data['currentBattle']['quorum'] = (
                self.quorum(room, battle) if self.quorum and battle.phase == VOTING else None
            )
        return data

    def publish(self, room) -> None:
        payload = {'room': self.snapshot(room)}
        self.socketio.emit('room_updated', payload, to=topic_for(room.code), namespace=self.namespace)
        logger.debug(f"[publish] room={room.code} state={room.state}")

    def send(self, identity: str, event: str, payload: dict) -> None:
        self.socketio.emit(event, payload, to=identity, namespace=self.namespace)

    def subscribe(self, identity: str, room_code: str) -> None:
        self.socketio.server.enter_room(identity, topic_for(room_code), namespace=self.namespace)

    def unsubscribe(self, identity: str, room_code: str) -> None:
        self.socketio.server.leave_room(identity, topic_for(room_code), namespace=self.namespace)

    def close(self, room, message: str) -> None:
        topic = topic_for(room.code)
        self.socketio.emit('room_closed', {'message': message}, to=topic, namespace=self.namespace)
        self.socketio.server.close_room(topic, namespace=self.namespace)
        logger.info(f"[room-closed] room={room.code} reason={message!r}")
