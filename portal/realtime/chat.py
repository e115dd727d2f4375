"""
Real-time chat relay (Socket.IO).

One room per application, named "chat-<applicationId>". Messages are
re-broadcast to everyone in the room with a server timestamp. Nothing is
stored: delivery is at-most-once and a disconnected client misses what
was sent while it was away.

Events:
- join-chat(applicationId)
- send-message({chatId, senderId, content, applicationId}) -> new-message
"""

import logging
from datetime import datetime, timezone

import socketio

from portal.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

MESSAGE_FIELDS = ("chatId", "senderId", "content", "applicationId")

sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=settings.cors_origin_list or "*",
    ping_timeout=60,
    ping_interval=25,
)


def room_name(application_id) -> str:
    return f"chat-{application_id}"


@sio.event
async def connect(sid, environ):
    logger.info("Socket.IO client connected: %s", sid)


@sio.on("join-chat")
async def join_chat(sid, application_id):
    if not application_id:
        logger.warning("Client %s tried to join a chat without an application id", sid)
        return
    await sio.enter_room(sid, room_name(application_id))
    logger.info("Client %s joined %s", sid, room_name(application_id))


@sio.on("send-message")
async def send_message(sid, data):
    if not isinstance(data, dict) or not data.get("applicationId"):
        logger.warning("Dropping malformed chat message from %s", sid)
        return

    message = {field: data.get(field) for field in MESSAGE_FIELDS}
    message["timestamp"] = datetime.now(timezone.utc).isoformat()
    await sio.emit("new-message", message, room=room_name(data["applicationId"]))


@sio.event
async def disconnect(sid):
    logger.info("Socket.IO client disconnected: %s", sid)
