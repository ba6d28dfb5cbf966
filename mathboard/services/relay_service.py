from typing import Any, Dict, List, Optional, Set


class RelayService:
    """
    Room registry for the classlink relay.

    Endpoints are any objects with a ``deliver(message, binary=False)`` method
    (the WebSocket handler in production, plain fakes in tests). Rooms are
    created on first join and dropped when their last endpoint leaves. All
    calls happen on the IOLoop thread, so no locking is needed.
    """

    def __init__(self):
        self.rooms: Dict[str, Set[Any]] = {}
        self._membership: Dict[Any, str] = {}

    def join(self, endpoint: Any, room: str) -> None:
        current = self._membership.get(endpoint)
        if current is not None:
            raise RuntimeError(f"endpoint already joined room {current!r}")
        self.rooms.setdefault(room, set()).add(endpoint)
        self._membership[endpoint] = room

    def leave(self, endpoint: Any) -> Optional[str]:
        room = self._membership.pop(endpoint, None)
        if room is None:
            return None
        members = self.rooms.get(room)
        if members is not None:
            members.discard(endpoint)
            if not members:
                del self.rooms[room]
        return room

    def room_of(self, endpoint: Any) -> Optional[str]:
        return self._membership.get(endpoint)

    def room_size(self, room: str) -> int:
        return len(self.rooms.get(room, ()))

    def peers(self, endpoint: Any) -> List[Any]:
        room = self._membership.get(endpoint)
        if room is None:
            return []
        return [member for member in self.rooms.get(room, ()) if member is not endpoint]

    def broadcast(self, sender: Any, message, binary: bool = False) -> int:
        """Fan a message out to every other member of the sender's room. Returns the recipient count."""
        recipients = self.peers(sender)
        for peer in recipients:
            peer.deliver(message, binary=binary)
        return len(recipients)
