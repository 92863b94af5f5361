"""Application shell: routes, the shared user, the login form and the command."""

from __future__ import annotations

import argparse
import asyncio
import sys
import threading
from dataclasses import dataclass
from enum import Enum
from html import escape

from websockets.exceptions import WebSocketException

from wschat.chat import Chat
from wschat.event_bus import EventBus
from wschat.protocol import MsgType
from wschat.websocket import DEFAULT_URL, WebsocketService


class Route(Enum):
    LOGIN = "/"
    CHAT = "/chat"
    NOT_FOUND = "/404"


def resolve_route(path: str) -> Route:
    """Map a path to its route; anything unknown is NOT_FOUND."""
    for route in Route:
        if route.value == path:
            return route
    return Route.NOT_FOUND


def render_not_found() -> str:
    return "<h1>404 baby</h1>"


@dataclass
class User:
    """The user shared between views."""

    username: str = "initial"


class Login:
    """Login form: collects a user name and stores it in the shared user."""

    def __init__(self, user: User) -> None:
        self.user = user
        self.value = ""

    def set_input(self, value: str) -> None:
        self.value = value

    def can_submit(self) -> bool:
        return len(self.value) >= 1

    def submit(self) -> Route:
        """Store the typed name and return the route to go to next."""
        if not self.can_submit():
            raise ValueError("a username is required")
        self.user.username = self.value
        return Route.CHAT

    def render(self) -> str:
        disabled = "" if self.can_submit() else " disabled"
        return (
            '<div class="bg-gray-800 flex w-screen"><form class="m-4 flex">'
            f'<input placeholder="Username" value="{escape(self.value)}"/>'
            f'<a href="{Route.CHAT.value}"><button{disabled}>Go Chatting!</button></a>'
            "</form></div>"
        )


def _start_stdin_reader(loop: asyncio.AbstractEventLoop, lines: asyncio.Queue) -> None:
    def read() -> None:
        for line in sys.stdin:
            loop.call_soon_threadsafe(lines.put_nowait, line)
        loop.call_soon_threadsafe(lines.put_nowait, None)

    threading.Thread(target=read, daemon=True).start()


async def _run_chat(user: User, url: str) -> None:
    bus = EventBus()
    service = WebsocketService(bus, url)

    def show(kind: MsgType) -> None:
        if kind is MsgType.USERS:
            print("Users: " + ", ".join(profile.name for profile in chat.users))
        elif kind is MsgType.MESSAGE:
            last = chat.messages[-1]
            print(f"{last.sender}: {last.message}")

    chat = Chat(user, service, on_update=show)
    lines: asyncio.Queue = asyncio.Queue()
    _start_stdin_reader(asyncio.get_running_loop(), lines)

    async def typing() -> None:
        while (line := await lines.get()) is not None:
            text = line.rstrip("\n")
            if text:
                chat.submit(text)

    connection = asyncio.create_task(service.connect_and_run())
    reader = asyncio.create_task(typing())
    done, pending = await asyncio.wait({connection, reader}, return_when=asyncio.FIRST_COMPLETED)
    for task in pending:
        task.cancel()
    for task in done:
        task.result()


def main(argv=None) -> int:
    """Log in with a user name and chat from the terminal."""
    parser = argparse.ArgumentParser(prog="wschat", description="Terminal chat client.")
    parser.add_argument("--username", help="name to chat under")
    parser.add_argument("--url", default=DEFAULT_URL, help="chat server address")
    args = parser.parse_args(argv)

    user = User()
    login = Login(user)
    name = args.username if args.username is not None else input("Username: ")
    login.set_input(name.strip())
    if not login.can_submit():
        print("a username is required", file=sys.stderr)
        return 2
    login.submit()

    try:
        asyncio.run(_run_chat(user, args.url))
    except KeyboardInterrupt:
        return 0
    except (OSError, WebSocketException) as exc:
        print(f"connection failed: {exc}", file=sys.stderr)
        return 1
    return 0