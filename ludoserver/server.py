"""WebSocket server that seats clients in a shared Ludo room."""

from __future__ import annotations

import argparse
import asyncio
import logging
from collections.abc import Callable
from typing import Any

import websockets

from ludoserver.game_logic import roll_dice
from ludoserver.game_room import GameRoom, GameState
from ludoserver.message import (
    DiceRolled,
    ErrorMessage,
    GameStateMessage,
    Join,
    MessageError,
    Move,
    PieceMoved,
    Roll,
    ServerMessage,
    TurnSkipped,
    parse_client_message,
    to_json,
)

log = logging.getLogger(__name__)

DEFAULT_ROOM = "default"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 9001
ROOM_SIZE = 2


class ClientSession:
    """One connected client: its seat, if any, and its outgoing queue."""

    def __init__(self) -> None:
        self.player_id = None
        self.outbox: asyncio.Queue[str | None] = asyncio.Queue()

    def send(self, message: ServerMessage) -> None:
        """Queue a server message for delivery to this client."""
        self.outbox.put_nowait(to_json(message))

    def close(self) -> None:
        """Tell the delivery loop to stop once the queue is flushed."""
        self.outbox.put_nowait(None)


class LudoServer:
    """Game logic behind the WebSocket endpoint; all clients share one room."""

    def __init__(
        self,
        dice: Callable[[], int] = roll_dice,
        room_size: int = ROOM_SIZE,
    ) -> None:
        self.rooms: dict[str, GameRoom] = {}
        self._dice = dice
        self._room_size = room_size

    def room(self) -> GameRoom:
        """Return the shared room, creating it on first use."""
        room = self.rooms.get(DEFAULT_ROOM)
        if room is None:
            room = self.rooms[DEFAULT_ROOM] = GameRoom(self._room_size)
        return room

    def handle_text(self, session: ClientSession, text: str | bytes) -> None:
        """Act on one message from a client; malformed messages are ignored.

        Raises RuntimeError when a client plays before joining.
        """
        try:
            message = parse_client_message(text)
        except MessageError as exc:
            log.debug("Ignoring message: %s", exc)
            return
        if isinstance(message, Join):
            self._join(session, message.name)
        elif isinstance(message, Roll):
            self._roll(session)
        elif isinstance(message, Move):
            self._move(session, message.piece_index)

    @staticmethod
    def _require_player(session: ClientSession):
        if session.player_id is None:
            raise RuntimeError("a client must join before it can play")
        return session.player_id

    @staticmethod
    def _broadcast(room: GameRoom, message: ServerMessage) -> None:
        for client in room.clients.values():
            client.send(message)

    def _join(self, session: ClientSession, name: str) -> None:
        room = self.room()
        player_id = room.add_player(name)
        if player_id is None:
            session.send(ErrorMessage("Room is full."))
            return
        log.info("%s joined room as %s", name, player_id)
        session.player_id = player_id
        room.clients[player_id] = session
        session.send(GameStateMessage(your_turn=room.is_current_turn(player_id)))

    def _roll(self, session: ClientSession) -> None:
        player_id = self._require_player(session)
        room = self.rooms.get(DEFAULT_ROOM)
        if room is None:
            return
        if not room.is_current_turn(player_id):
            session.send(ErrorMessage("It's not your turn."))
            return

        roll = self._dice()
        room.last_dice_roll = roll
        log.info("Player %s rolled a %d", player_id, roll)
        player = room.players[player_id]
        player.last_roll = roll
        can_move = any(
            not player.is_piece_finished(pos) and player.can_move_piece(pos, roll)
            for pos in player.pieces
        )

        if not can_move:
            log.info("No move possible for player %s, skipping turn.", player_id)
            room.advance_turn()
            self._broadcast(room, TurnSkipped(player_id=player_id, roll=roll))
            session.send(GameStateMessage(your_turn=False))
            return

        session.send(GameStateMessage(your_turn=roll == 6))
        self._broadcast(room, DiceRolled(player_id=player_id, roll=roll))

    def _move(self, session: ClientSession, piece_index: int) -> None:
        player_id = self._require_player(session)
        room = self.rooms.get(DEFAULT_ROOM)
        if room is None:
            return
        if not room.is_current_turn(player_id):
            session.send(ErrorMessage("Not your turn."))
            return

        player = room.players[player_id]
        if piece_index >= len(player.pieces):
            session.send(ErrorMessage("Invalid piece index."))
            return

        roll = player.take_last_roll()
        if roll is None:
            session.send(ErrorMessage("You must roll the dice before moving."))
            return

        player.pieces[piece_index] += roll
        new_pos = player.pieces[piece_index]
        log.info("Player %s moved piece %d by %d", player.name, piece_index, roll)
        self._broadcast(
            room, PieceMoved(player_id=player_id, piece_index=piece_index, new_pos=new_pos)
        )

        room.handle_captures(player_id, new_pos)

        if player.all_finished():
            room.state = GameState.FINISHED
            log.info("%s has finished the game!", player.name)

        if roll != 6:
            room.advance_turn()

        session.send(GameStateMessage(your_turn=room.is_current_turn(player_id)))

    @staticmethod
    async def _forward(session: ClientSession, websocket: Any) -> None:
        while True:
            item = await session.outbox.get()
            if item is None:
                return
            try:
                await websocket.send(item)
            except (websockets.ConnectionClosed, OSError):
                continue

    async def handle_client(self, websocket: Any) -> None:
        """Serve one WebSocket connection until it closes."""
        log.info("New WebSocket connection accepted")
        session = ClientSession()
        writer = asyncio.create_task(self._forward(session, websocket))
        try:
            async for raw in websocket:
                log.debug("Received message: %r", raw)
                self.handle_text(session, raw)
        except websockets.ConnectionClosed:
            pass
        except RuntimeError as exc:
            log.warning("Dropping connection: %s", exc)
        finally:
            session.close()
            await writer
        log.info("Player %s disconnected", session.player_id)


async def start_websocket_server(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    """Listen for clients on ``host``:``port`` until cancelled."""
    server = LudoServer()
    async with websockets.serve(server.handle_client, host, port):
        log.info("WebSocket running on ws://%s:%d", host, port)
        await asyncio.Future()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the Ludo WebSocket server.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    try:
        asyncio.run(start_websocket_server(args.host, args.port))
    except KeyboardInterrupt:
        pass
    return 0