# esl_classroom/api/v1/endpoints/rooms.py
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from esl_classroom.services.signaling import EVENT_JOIN_ROOM, room_manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["rooms"])


def _join_user_id(message) -> str | None:
    if not isinstance(message, dict) or message.get("event") != EVENT_JOIN_ROOM:
        return None
    data = message.get("data")
    if not isinstance(data, dict) or not data.get("user_id"):
        return None
    return str(data["user_id"])


@router.websocket("/ws/rooms/{room_id}")
async def room_socket(websocket: WebSocket, room_id: str, user_id: str | None = None):
    """
    Signaling channel of one video room.

    The member id comes from the ``user_id`` query parameter, or from a
    first ``join-room`` message when the parameter is absent.
    """
    await websocket.accept()
    if user_id is None:
        try:
            user_id = _join_user_id(await websocket.receive_json())
        except WebSocketDisconnect:
            return
        except ValueError:
            user_id = None
        if user_id is None:
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

    await room_manager.join(room_id, user_id, websocket)
    try:
        while True:
            try:
                message = await websocket.receive_json()
            except ValueError:
                logger.warning(f"Non-JSON frame from {user_id} in room {room_id}")
                continue
            await room_manager.handle_message(room_id, user_id, message)
    except WebSocketDisconnect:
        logger.info(f"User {user_id} disconnected from room {room_id}")
    finally:
        await room_manager.leave(room_id, user_id, websocket)
