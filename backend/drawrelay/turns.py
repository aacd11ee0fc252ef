"""Turn-gated routing of drawing events.

Every inbound Socket.IO event goes through a TurnRouter method. The router
updates the RoomRegistry and picks the recipients of whatever gets sent
out. Drawing events from anyone but the current turn holder are dropped
without a reply.
"""

import logging
import threading
from typing import Any, Dict, Optional

from .rooms import RoomRegistry


# Inbound event names
JOIN_ROOM = 'join-room'
PASS_TURN = 'pass-turn'
START_DRAWING = 'start-drawing'
DRAWING = 'drawing'
FINISH_DRAWING = 'finish-drawing'
CLEAR_CANVAS = 'clear-canvas'

# Outbound event names
TURN_UPDATE = 'turn-update'
SERVER_START_DRAWING = 'server-start-drawing'
SERVER_DRAWING = 'server-drawing'
SERVER_FINISH_DRAWING = 'server-finish-drawing'
SERVER_CLEAR_CANVAS = 'server-clear-canvas'


def _room_from_payload(data: Any) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    room = data.get('room')
    if not isinstance(room, str) or not room:
        return None
    return room


class TurnRouter:
    """Applies inbound client events to room state and fans out the results.

    `transport` must provide join(conn_id, room), send_to_room(room, event,
    payload=None), send_to_room_except(room, exclude, event, payload=None)
    and send_to_connection(conn_id, event, payload=None).

    One lock covers each handler from registry mutation through broadcast,
    so a turn-update never describes state that a concurrent event has
    already replaced.
    """

    def __init__(self, transport, registry: Optional[RoomRegistry] = None,
                 logger: Optional[logging.Logger] = None):
        self.transport = transport
        self.registry = registry if registry is not None else RoomRegistry()
        self.logger = logger or logging.getLogger(__name__)
        self._conn_rooms: Dict[str, str] = {}
        self._lock = threading.RLock()

    def room_of(self, conn_id: str) -> Optional[str]:
        return self._conn_rooms.get(conn_id)

    # ---- turn state ----

    def _broadcast_turn_update(self, room_name: str) -> None:
        active = self.registry.active_connection(room_name)
        self.logger.info(f"[turn-update] room={room_name} active={active}")
        self.transport.send_to_room(room_name, TURN_UPDATE, active)

    def is_turn_holder(self, conn_id: str, room_name: Optional[str]) -> bool:
        """True when conn_id may send drawing events to room_name.

        Unknown rooms and non-members have no active connection matching
        them, so they fail the same check.
        """
        if room_name is None:
            return False
        return self.registry.active_connection(room_name) == conn_id

    def _gate(self, conn_id: str, event: str, data: Any) -> Optional[str]:
        room_name = _room_from_payload(data)
        if room_name is None:
            self.logger.warning(f"[drop] sid={conn_id} event={event} reason=missing room")
            return None
        if not self.is_turn_holder(conn_id, room_name):
            self.logger.debug(f"[blocked] sid={conn_id} event={event} room={room_name} not their turn")
            return None
        return room_name

    # ---- inbound events ----

    def on_connect(self, conn_id: str) -> None:
        self.logger.info(f"[connect] sid={conn_id}")

    def on_join(self, conn_id: str, room_name: Any) -> None:
        if not isinstance(room_name, str) or not room_name:
            self.logger.warning(f"[drop] sid={conn_id} event={JOIN_ROOM} reason=room name must be a non-empty string")
            return
        with self._lock:
            current = self._conn_rooms.get(conn_id)
            if current == room_name:
                # Already a member; just resend the turn state to this connection.
                self.transport.send_to_connection(
                    conn_id, TURN_UPDATE, self.registry.active_connection(room_name)
                )
                return
            if current is not None:
                self.logger.warning(
                    f"[drop] sid={conn_id} event={JOIN_ROOM} room={room_name} reason=already in room {current}"
                )
                return

            self.transport.join(conn_id, room_name)
            self._conn_rooms[conn_id] = room_name
            room = self.registry.join(room_name, conn_id)
            self.logger.info(f"[join] sid={conn_id} room={room_name} members={len(room.members)}")
            self._broadcast_turn_update(room_name)

    def on_pass_turn(self, conn_id: str, data: Any) -> None:
        room_name = _room_from_payload(data)
        if room_name is None:
            self.logger.warning(f"[drop] sid={conn_id} event={PASS_TURN} reason=missing room")
            return
        with self._lock:
            if conn_id not in self.registry.members(room_name):
                self.logger.debug(f"[blocked] sid={conn_id} event={PASS_TURN} room={room_name} not a member")
                return
            self.registry.advance_turn(room_name)
            self.logger.info(f"[pass-turn] sid={conn_id} room={room_name}")
            self._broadcast_turn_update(room_name)

    def on_start_drawing(self, conn_id: str, data: Any) -> None:
        with self._lock:
            room_name = self._gate(conn_id, START_DRAWING, data)
            if room_name is None:
                return
            self.transport.send_to_room_except(room_name, conn_id, SERVER_START_DRAWING, data)

    def on_drawing(self, conn_id: str, data: Any) -> None:
        with self._lock:
            room_name = self._gate(conn_id, DRAWING, data)
            if room_name is None:
                return
            self.transport.send_to_room_except(room_name, conn_id, SERVER_DRAWING, data)

    def on_finish_drawing(self, conn_id: str, data: Any) -> None:
        with self._lock:
            room_name = self._gate(conn_id, FINISH_DRAWING, data)
            if room_name is None:
                return
            self.transport.send_to_room_except(room_name, conn_id, SERVER_FINISH_DRAWING)

    def on_clear_canvas(self, conn_id: str, data: Any) -> None:
        with self._lock:
            room_name = self._gate(conn_id, CLEAR_CANVAS, data)
            if room_name is None:
                return
            # The sender's canvas is cleared by the server echo as well.
            self.transport.send_to_room(room_name, SERVER_CLEAR_CANVAS)

    def on_disconnect(self, conn_id: str) -> None:
        self.logger.info(f"[disconnect] sid={conn_id}")
        with self._lock:
            room_name = self._conn_rooms.pop(conn_id, None)
            if room_name is None:
                return
            result = self.registry.leave(room_name, conn_id)
            if result.room_removed:
                self.logger.info(f"[room-removed] room={room_name}")
                return
            self._broadcast_turn_update(room_name)
