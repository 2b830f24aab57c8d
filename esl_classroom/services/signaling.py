"""
Video-room signaling relay.

Peers exchange WebRTC offers, answers and ICE candidates through this
relay; payloads are forwarded untouched. Rooms live in process memory.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from fastapi import WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)

EVENT_JOIN_ROOM = "join-room"
EVENT_USER_CONNECTED = "user-connected"
EVENT_USER_DISCONNECTED = "user-disconnected"
EVENT_OFFER = "offer"
EVENT_ANSWER = "answer"
EVENT_ICE_CANDIDATE = "ice-candidate"


def _pick(data: Dict[str, Any], *keys: str) -> Optional[Any]:
    # browser clients send camelCase, python clients snake_case
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


class RoomManager:
    def __init__(self) -> None:
        self.rooms: Dict[str, Dict[str, WebSocket]] = {}

    def members(self, room_id: str) -> list[str]:
        return list(self.rooms.get(room_id, {}))

    async def join(self, room_id: str, user_id: str, websocket: WebSocket) -> None:
        room = self.rooms.setdefault(room_id, {})
        previous = room.get(user_id)
        room[user_id] = websocket
        if previous is not None and previous is not websocket:
            logger.info(f"User {user_id} reconnected to room {room_id}, replacing old socket")
            return
        logger.info(f"User {user_id} joined room {room_id} ({len(room)} members)")
        await self._broadcast(
            room_id,
            EVENT_USER_CONNECTED,
            {"user_id": user_id},
            exclude=user_id,
        )

    async def leave(self, room_id: str, user_id: str, websocket: WebSocket) -> None:
        room = self.rooms.get(room_id)
        if room is None or room.get(user_id) is not websocket:
            # already replaced by a newer connection
            return
        del room[user_id]
        if not room:
            del self.rooms[room_id]
            logger.info(f"Room {room_id} closed")
            return
        logger.info(f"User {user_id} left room {room_id}")
        await self._broadcast(
            room_id,
            EVENT_USER_DISCONNECTED,
            {"user_id": user_id},
            exclude=user_id,
        )

    async def handle_message(self, room_id: str, sender: str, message: Any) -> None:
        if not isinstance(message, dict):
            logger.warning(f"Ignoring malformed message from {sender} in room {room_id}")
            return
        event = message.get("event")
        data = message.get("data") or {}
        if not isinstance(data, dict):
            data = {}

        if event == EVENT_OFFER:
            target = _pick(data, "user_to_signal", "userToSignal", "to")
            await self._send_to(
                room_id,
                target,
                EVENT_OFFER,
                {"signal": data.get("signal"), "user_id": sender},
            )
        elif event == EVENT_ANSWER:
            target = _pick(data, "to", "user_to_signal", "userToSignal")
            await self._send_to(
                room_id,
                target,
                EVENT_ANSWER,
                {"signal": data.get("signal"), "user_id": sender},
            )
        elif event == EVENT_ICE_CANDIDATE:
            payload = {"candidate": data.get("candidate"), "user_id": sender}
            target = _pick(data, "to")
            if target is not None:
                await self._send_to(room_id, target, EVENT_ICE_CANDIDATE, payload)
            else:
                await self._broadcast(room_id, EVENT_ICE_CANDIDATE, payload, exclude=sender)
        else:
            logger.debug(f"Ignoring unknown event {event!r} from {sender} in room {room_id}")

    async def _send_to(
        self, room_id: str, user_id: Optional[str], event: str, data: Dict[str, Any]
    ) -> None:
        if user_id is None:
            logger.warning(f"{event} in room {room_id} has no recipient")
            return
        websocket = self.rooms.get(room_id, {}).get(str(user_id))
        if websocket is None:
            logger.warning(f"{event} recipient {user_id} not in room {room_id}")
            return
        await self._deliver(websocket, event, data)

    async def _broadcast(
        self,
        room_id: str,
        event: str,
        data: Dict[str, Any],
        exclude: Optional[str] = None,
    ) -> None:
        for _, websocket in self._peers(room_id, exclude):
            await self._deliver(websocket, event, data)

    async def _deliver(self, websocket: WebSocket, event: str, data: Dict[str, Any]) -> None:
        try:
            await websocket.send_json({"event": event, "data": data})
        except (RuntimeError, WebSocketDisconnect) as e:
            # peer went away; its own handler cleans up
            logger.warning(f"Could not deliver {event}: {e}")

    def _peers(self, room_id: str, exclude: Optional[str]) -> Iterable[tuple[str, WebSocket]]:
        return [
            (user_id, ws)
            for user_id, ws in self.rooms.get(room_id, {}).items()
            if user_id != exclude
        ]


room_manager = RoomManager()
