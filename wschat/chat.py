"""Chat view state: known users, received messages and message submission."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from html import escape

from wschat.protocol import (
    MessageData,
    MsgType,
    WebSocketMessage,
    chat_message,
    register_message,
)
from wschat.websocket import WebsocketService

log = logging.getLogger(__name__)

AVATAR_BASE = "https://robohash.org/"


def avatar_url(name: str) -> str:
    """Avatar image address for a user name."""
    return f"{AVATAR_BASE}{name}"


@dataclass(frozen=True)
class UserProfile:
    name: str
    avatar: str


class Chat:
    """Registers the user on creation and tracks users and messages from the bus."""

    def __init__(
        self,
        user,
        service: WebsocketService,
        on_update: Callable[[MsgType], object] | None = None,
    ) -> None:
        self.user = user
        self.service = service
        self.users: list[UserProfile] = []
        self.messages: list[MessageData] = []
        self._on_update = on_update
        try:
            service.send(register_message(user.username).to_json())
        except asyncio.QueueFull:
            pass
        else:
            log.debug("message sent successfully")
        self._handler_id = service.event_bus.subscribe(self.handle_message)

    def close(self) -> None:
        """Stop listening to the event bus."""
        self.service.event_bus.unsubscribe(self._handler_id)

    def handle_message(self, raw: str) -> bool:
        """Apply a server envelope; return True if the view changed."""
        msg = WebSocketMessage.from_json(raw)
        if msg.message_type is MsgType.USERS:
            self.users = [
                UserProfile(name=name, avatar=avatar_url(name))
                for name in msg.data_array or []
            ]
        elif msg.message_type is MsgType.MESSAGE:
            if msg.data is None:
                raise ValueError("message envelope without data")
            self.messages.append(MessageData.from_json(msg.data))
        else:
            return False
        if self._on_update is not None:
            self._on_update(msg.message_type)
        return True

    def submit(self, text: str) -> None:
        """Queue a chat line for sending."""
        try:
            self.service.send(chat_message(text).to_json())
        except asyncio.QueueFull as exc:
            log.debug("error sending to channel: %r", exc)

    def _profile(self, name: str) -> UserProfile:
        for profile in self.users:
            if profile.name == name:
                return profile
        raise LookupError(f"message from unknown user {name!r}")

    def render(self) -> str:
        """Render the chat view as HTML."""
        parts = ['<div class="flex w-screen">', '<div class="users">', "<div>Users</div>"]
        for profile in self.users:
            parts.append(
                f'<div class="user"><img src="{escape(profile.avatar)}" alt="avatar"/>'
                f"<div>{escape(profile.name)}</div><div>Hi there!</div></div>"
            )
        parts.append("</div>")
        parts.append('<div class="chat"><div>💬 Chat!</div><div class="messages">')
        for message in self.messages:
            profile = self._profile(message.sender)
            if message.message.endswith(".gif"):
                body = f'<img src="{escape(message.message)}"/>'
            else:
                body = escape(message.message)
            parts.append(
                f'<div class="message"><img src="{escape(profile.avatar)}" alt="avatar"/>'
                f"<div>{escape(message.sender)}</div><div>{body}</div></div>"
            )
        parts.append("</div>")
        parts.append(
            '<input type="text" placeholder="Message" name="message" required/>'
            "<button>Send</button>"
        )
        parts.append("</div></div>")
        return "".join(parts)