# wschat

wschat is a chat client for the terminal. It talks to a chat server over a
WebSocket. You choose a username, and the client registers it with the
server. It then prints the user list and incoming messages, and it sends each
line you type as a chat message.

## Installation

```
pip install .
```

To run the tests, install the test extra as well:

```
pip install ".[test]"
pytest
```

## Usage

```
wschat [--username NAME] [--url URL]
```

- `--username NAME` sets the name to chat under. If you leave it out, the
  client asks for it with a `Username:` prompt. Spaces around the name are
  removed, and an empty name is refused.
- `--url URL` sets the server address. The default is `ws://127.0.0.1:8080`.

Once the client is connected it works like this:

- Each time the server sends a user list, it prints `Users: alice, bob`.
- Each chat message is printed as `sender: text`.
- Each non-empty line you type on standard input is sent as a chat message.

The client exits when the connection closes or when standard input ends.
You can also stop it with Ctrl-C.

Exit status:

- `0` on a normal exit.
- `1` if the connection fails.
- `2` if no username was given.

## Protocol

Every frame is a JSON object with camelCase keys. Outgoing frames always
include all three keys:

```json
{"messageType":"register","dataArray":null,"data":"alice"}
```

The message types are:

- `register`: the client announces its username in `data`.
- `users`: the server sends the current user names in `dataArray`.
- `message`: `data` holds a JSON string of the form
  `{"from": "...", "message": "..."}`. When the client sends a chat line,
  `data` is the plain text of that line.

## Library use

The modules can also be used from your own code.

- `wschat.protocol` covers the message format:
  - `MsgType`, `WebSocketMessage` (`to_json()`, `from_json()`) and
    `MessageData` (`from_json()`, with the fields `sender` and `message`).
  - `register_message()` and `chat_message()` build the outgoing envelopes.
  - Malformed input raises `ValueError`.
- `wschat.event_bus.EventBus` is a publish/subscribe hub:
  - `subscribe()` returns a handler id, and `unsubscribe()` takes that id.
  - `publish()` delivers a message to every subscriber.
  - `subscriber_count()` gives the number of subscribers.
- `wschat.websocket.WebsocketService` moves frames between a connection and
  the event bus:
  - `send()` queues outgoing text. It raises `asyncio.QueueFull` when the
    queue of 1000 entries is full.
  - `dispatch_incoming()` publishes a received frame. Binary frames are
    decoded as UTF-8, and frames that fail to decode are dropped.
  - `run(connection)` handles both directions over an open connection.
  - `connect_and_run()` opens the connection to `url` first and then does the
    same.
- `wschat.chat` holds the state of the chat view:
  - `Chat` queues a `register` message for the user when it is created and
    subscribes to the event bus.
  - `handle_message()` applies a server envelope and returns whether the view
    changed.
  - `submit()` queues a chat line.
  - `render()` returns the view as an HTML string. A message that ends in
    `.gif` is shown as an image. A message from a user who is not in the user
    list raises `LookupError`.
  - `UserProfile` and `avatar_url()` give each user an avatar address built
    from their name.
- `wschat.app` provides the rest:
  - `Route` and `resolve_route()` for the paths `/`, `/chat` and `/404`.
  - `User`, the shared user, whose default name is `initial`.
  - `Login`, the login form: `set_input()`, `can_submit()`, `submit()` and
    `render()`.
  - `render_not_found()` and `main()`.

## What it does not do

- wschat does not include a chat server. It needs one that speaks the
  protocol above.
- The `render()` methods only produce HTML strings. The package does not
  serve them and has no browser or graphical interface. The command line
  client is the only interactive front end.