# ludoserver

A small WebSocket server for two-player Ludo games. Clients connect, join a
shared room, roll the dice and move their pieces. The server keeps track of
turns, moves and captures, and tells each client whether it is its turn.

## Installation

```
pip install .
```

Install with the test extra to run the test suite:

```
pip install ".[test]"
pytest
```

## Running the server

```
ludoserver
```

By default the server listens on `ws://127.0.0.1:9001`. Choose another address
with `--host` and `--port`:

```
ludoserver --host 0.0.0.0 --port 9100
```

Progress is logged to standard error. Stop the server with Ctrl+C.

## Protocol

Clients and the server exchange JSON text frames. Each frame carries a `type`
field naming the message.

### Client messages

| Message | Example |
|---------|---------|
| Join the room | `{"type": "Join", "name": "Alice"}` |
| Roll the dice | `{"type": "Roll"}` |
| Move a piece  | `{"type": "Move", "piece_index": 0}` |

Frames that are not valid JSON, have an unknown `type` or lack a required
field are ignored. A client that sends `Roll` or `Move` before joining is
disconnected.

### Server messages

| Message | Fields | Sent |
|---------|--------|------|
| `GameState`   | `your_turn` | to the client, after a join, roll or move |
| `Error`       | `message` | to the client, e.g. "Room is full." or "Not your turn." |
| `DiceRolled`  | `player_id`, `roll` | to every client in the room |
| `PieceMoved`  | `player_id`, `piece_index`, `new_pos` | to every client in the room |
| `TurnSkipped` | `player_id`, `roll` | to every client in the room |

## Game rules

- All clients share one room of two seats. A third client to join receives
  `Error` with "Room is full." Turns follow the order in which players joined.
- Each player has four pieces. Position 0 is the base, 1–57 are on the board
  and 58 is finished.
- After a roll, if no piece can move (a piece at base needs a 6, and a piece
  on the board may not pass 57), the turn passes to the next player and a
  `TurnSkipped` message is sent.
- After a successful roll the player sends `Move`; the chosen piece advances
  by the roll. A roll of 6 keeps the turn with the same player; any other
  roll passes it on after the move.
- After a move, any opponent piece at the same position number is sent back
  to base.
- When all four of a player's pieces reach 58 the room is marked finished.

The server does not check that the chosen piece itself may move with the
roll; it adds the roll to that piece's position.

## Using the library

The game pieces can be used without the server:

```python
from ludoserver.game_room import GameRoom
from ludoserver.game_logic import roll_dice

room = GameRoom(max_players=2)
alice = room.add_player("Alice")
bob = room.add_player("Bob")

player = room.current_player()
if player.move_piece(0, roll_dice()):
    room.handle_captures(player.id, player.pieces[0])
room.advance_turn()
print(room.is_game_over())
```

`Player.move_piece` brings a piece out of base only on a 6 and caps its
position at 58. `get_global_board_index` in `ludoserver.game_logic` maps a
seat's relative position to a square of the shared 52-square track.

Messages are parsed and serialised with `ludoserver.message`:

```python
from ludoserver.message import ErrorMessage, parse_client_message, to_json

message = parse_client_message('{"type": "Join", "name": "Alice"}')
print(to_json(ErrorMessage(message="Room is full.")))
```

`parse_client_message` raises `MessageError` for malformed input.

The game logic behind the endpoint is `ludoserver.server.LudoServer`; feed it
client frames with `handle_text(session, text)`, where `session` is a
`ClientSession` whose `outbox` queue collects the JSON replies.

## What it does not do

- Everything is kept in memory: there is no storage of players, scores or
  games, and a restart loses the room.
- There is only one room, and it is never reset; once two players have joined,
  later clients cannot play.
- Players who disconnect keep their seat.