"""In-memory room registry.

Tracks which connections are in which room and whose turn it is to draw.
Pure state, no I/O: the router decides what to broadcast based on what
these methods return.
"""

from typing import Dict, Iterator, List, NamedTuple, Optional


class LeaveResult(NamedTuple):
    room_removed: bool
    active_connection: Optional[str]


class Room:
    def __init__(self, name: str):
        self.name = name
        self.members: List[str] = []
        self.active_index = 0

    def active_connection(self) -> Optional[str]:
        if not self.members or not 0 <= self.active_index < len(self.members):
            return None
        return self.members[self.active_index]

    def to_dict(self):
        return {
            'name': self.name,
            'members': list(self.members),
            'active_index': self.active_index,
            'active_connection': self.active_connection(),
        }


class RoomRegistry:
    """Room name -> Room. A room exists only while it has members."""

    def __init__(self):
        self._rooms: Dict[str, Room] = {}

    def __contains__(self, room_name) -> bool:
        return room_name in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._rooms))

    def get(self, room_name: str) -> Optional[Room]:
        return self._rooms.get(room_name)

    def members(self, room_name: str) -> List[str]:
        room = self._rooms.get(room_name)
        return list(room.members) if room else []

    def active_index(self, room_name: str) -> Optional[int]:
        room = self._rooms.get(room_name)
        return room.active_index if room else None

    def join(self, room_name: str, conn_id: str) -> Room:
        """Add conn_id to the room, creating the room on first join.

        Joining a room the connection is already in is a no-op.
        """
        room = self._rooms.get(room_name)
        if room is None:
            room = Room(room_name)
            self._rooms[room_name] = room
        if conn_id not in room.members:
            room.members.append(conn_id)
        return room

    def leave(self, room_name: str, conn_id: str) -> LeaveResult:
        """Remove conn_id from the room.

        An emptied room is deleted. Otherwise the turn stays with whoever held
        it, or restarts at the first member when the holder is the one leaving.
        """
        room = self._rooms.get(room_name)
        if room is None:
            return LeaveResult(True, None)

        # Indices shift on removal, so remember who was active, not where.
        previously_active = room.active_connection()
        room.members = [m for m in room.members if m != conn_id]

        if not room.members:
            del self._rooms[room_name]
            return LeaveResult(True, None)

        if previously_active == conn_id:
            room.active_index = 0
        else:
            try:
                room.active_index = room.members.index(previously_active)
            except ValueError:
                room.active_index = 0
        return LeaveResult(False, room.active_connection())

    def active_connection(self, room_name: str) -> Optional[str]:
        room = self._rooms.get(room_name)
        if room is None:
            return None
        return room.active_connection()

    def advance_turn(self, room_name: str) -> None:
        room = self._rooms.get(room_name)
        if room is None or not room.members:
            return
        room.active_index = (room.active_index + 1) % len(room.members)
