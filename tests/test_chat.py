import json
from dataclasses import dataclass

import pytest

from wschat.chat import Chat, UserProfile, avatar_url
from wschat.event_bus import EventBus
from wschat.protocol import MessageData, MsgType, WebSocketMessage
from wschat.websocket import WebsocketService


@dataclass
class FakeUser:
    username: str


def _setup(username="alice", on_update=None):
    bus = EventBus()
    service = WebsocketService(bus)
    chat = Chat(FakeUser(username), service, on_update=on_update)
    return bus, service, chat


def _users(*names):
    return WebSocketMessage(MsgType.USERS, data_array=list(names)).to_json()


def _message(sender, text):
    payload = json.dumps({"from": sender, "message": text})
    return WebSocketMessage(MsgType.MESSAGE, data=payload).to_json()


def test_avatar_url():
    assert avatar_url("alice") == "https://robohash.org/alice"


def test_creation_registers_user():
    _, service, _ = _setup("alice")
    sent = WebSocketMessage.from_json(service.outgoing.get_nowait())
    assert sent.message_type is MsgType.REGISTER
    assert sent.data == "alice"


def test_users_message_replaces_users():
    bus, _, chat = _setup()
    bus.publish(_users("alice", "bob"))
    assert chat.users == [
        UserProfile("alice", avatar_url("alice")),
        UserProfile("bob", avatar_url("bob")),
    ]
    assert chat.handle_message(_users("carol")) is True
    assert [u.name for u in chat.users] == ["carol"]


def test_chat_message_appended():
    bus, _, chat = _setup()
    bus.publish(_message("bob", "hello"))
    assert chat.messages == [MessageData("bob", "hello")]


def test_register_message_changes_nothing():
    _, _, chat = _setup()
    assert chat.handle_message(WebSocketMessage(MsgType.REGISTER, data="x").to_json()) is False
    assert chat.users == [] and chat.messages == []


def test_message_without_data_rejected():
    _, _, chat = _setup()
    with pytest.raises(ValueError):
        chat.handle_message('{"messageType":"message"}')


def test_on_update_called_with_type():
    seen = []
    bus, _, _ = _setup(on_update=seen.append)
    bus.publish(_users("alice"))
    bus.publish(_message("alice", "hi"))
    assert seen == [MsgType.USERS, MsgType.MESSAGE]


def test_submit_queues_chat_message():
    _, service, chat = _setup()
    service.outgoing.get_nowait()
    chat.submit("how are you")
    sent = WebSocketMessage.from_json(service.outgoing.get_nowait())
    assert sent == WebSocketMessage(MsgType.MESSAGE, data="how are you")


def test_submit_ignores_full_queue():
    bus = EventBus()
    service = WebsocketService(bus, queue_size=1)
    chat = Chat(FakeUser("alice"), service)
    chat.submit("dropped")
    assert service.outgoing.qsize() == 1


def test_close_unsubscribes():
    bus, _, chat = _setup()
    chat.close()
    bus.publish(_users("alice"))
    assert chat.users == []


def test_render_shows_users_and_messages():
    bus, _, chat = _setup()
    bus.publish(_users("alice"))
    bus.publish(_message("alice", "<b>hi</b>"))
    bus.publish(_message("alice", "http://example.com/cat.gif"))
    html = chat.render()
    assert avatar_url("alice") in html
    assert "&lt;b&gt;hi&lt;/b&gt;" in html
    assert '<img src="http://example.com/cat.gif"/>' in html


def test_render_unknown_sender_raises():
    bus, _, chat = _setup()
    bus.publish(_message("ghost", "boo"))
    with pytest.raises(LookupError):
        chat.render()