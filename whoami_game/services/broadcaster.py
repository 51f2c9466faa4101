"""
Room Broadcaster

Outbound side of the connection registry: unicast to a connection handle,
multicast to a room and Socket.IO room membership, all fire-and-forget
through Flask-SocketIO. Works outside a request context so timer callbacks
can use it too.
"""

from typing import Any, Optional


class RoomBroadcaster:
    """Thin wrapper so the game service never touches the socket layer directly."""

    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def to_room(self, room_id: str, event: str, payload: Optional[Any] = None) -> None:
        self._emit(event, payload, room_id)

    def to_player(self, handle: str, event: str, payload: Optional[Any] = None) -> None:
        # Every connection is auto-joined to a room named after its sid
        self._emit(event, payload, handle)

    def enter_room(self, handle: str, room_id: str) -> None:
        self.socketio.server.enter_room(handle, room_id, namespace=self.namespace)

    def leave_room(self, handle: str, room_id: str) -> None:
        self.socketio.server.leave_room(handle, room_id, namespace=self.namespace)

    def close_room(self, room_id: str) -> None:
        self.socketio.server.close_room(room_id, namespace=self.namespace)

    def _emit(self, event: str, payload: Optional[Any], target: str) -> None:
        if payload is None:
            self.socketio.emit(event, to=target, namespace=self.namespace)
        else:
            self.socketio.emit(event, payload, to=target, namespace=self.namespace)
