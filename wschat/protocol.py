"""Wire format of the JSON messages exchanged with the chat server."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum


class MsgType(str, Enum):
    """Kinds of message the server and client exchange."""

    USERS = "users"
    REGISTER = "register"
    MESSAGE = "message"


def _optional_str(value: object, key: str) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise ValueError(f"field {key!r} must be a string or null")


def _optional_str_list(value: object, key: str) -> list[str] | None:
    if value is None:
        return None
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    raise ValueError(f"field {key!r} must be a list of strings or null")


def _load_object(text: str | bytes) -> dict:
    obj = json.loads(text)
    if not isinstance(obj, dict):
        raise ValueError("expected a JSON object")
    return obj


@dataclass(frozen=True)
class WebSocketMessage:
    """An envelope carrying a message type and either a string or a list of strings."""

    message_type: MsgType
    data_array: list[str] | None = None
    data: str | None = None

    def to_json(self) -> str:
        """Serialise with camelCase keys, compactly."""
        return json.dumps(
            {
                "messageType": self.message_type.value,
                "dataArray": self.data_array,
                "data": self.data,
            },
            separators=(",", ":"),
            ensure_ascii=False,
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> WebSocketMessage:
        """Parse an envelope; raise ValueError if it is malformed."""
        obj = _load_object(text)
        if "messageType" not in obj:
            raise ValueError("missing field 'messageType'")
        try:
            message_type = MsgType(obj["messageType"])
        except ValueError:
            raise ValueError(f"unknown message type {obj['messageType']!r}") from None
        return cls(
            message_type=message_type,
            data_array=_optional_str_list(obj.get("dataArray"), "dataArray"),
            data=_optional_str(obj.get("data"), "data"),
        )


@dataclass(frozen=True)
class MessageData:
    """A chat line: who sent it and what it says."""

    sender: str
    message: str

    @classmethod
    def from_json(cls, text: str | bytes) -> MessageData:
        """Parse ``{"from": ..., "message": ...}``; raise ValueError if malformed."""
        obj = _load_object(text)
        for key in ("from", "message"):
            if not isinstance(obj.get(key), str):
                raise ValueError(f"field {key!r} must be a string")
        return cls(sender=obj["from"], message=obj["message"])


def register_message(username: str) -> WebSocketMessage:
    """Envelope announcing ``username`` to the server."""
    return WebSocketMessage(MsgType.REGISTER, data=username)


def chat_message(text: str) -> WebSocketMessage:
    """Envelope carrying a chat line typed by the user."""
    return WebSocketMessage(MsgType.MESSAGE, data=text)