"""A game room: seated players, turn order and captures."""

from __future__ import annotations

import enum
import logging
import time
import uuid
from typing import Any

from ludoserver.player import BASE, FINISHED, Player

log = logging.getLogger(__name__)


class GameState(enum.Enum):
    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class GameRoom:
    """A room that starts once ``max_players`` have joined."""

    def __init__(self, max_players: int) -> None:
        self.id: uuid.UUID = uuid.uuid4()
        self.players: dict[uuid.UUID, Player] = {}
        self.state = GameState.WAITING
        self.turn_order: list[uuid.UUID] = []
        self.current_turn_index = 0
        self.max_players = max_players
        self.created_at = time.monotonic()
        self.last_dice_roll: int | None = None
        self.clients: dict[uuid.UUID, Any] = {}

    def add_player(self, name: str) -> uuid.UUID | None:
        """Seat a new player; return its id, or None if the room is full."""
        if len(self.players) >= self.max_players:
            return None
        player = Player(name, len(self.players))
        self.players[player.id] = player
        self.turn_order.append(player.id)
        if len(self.players) == self.max_players:
            self.state = GameState.IN_PROGRESS
        return player.id

    def current_player(self) -> Player | None:
        if not self.turn_order:
            return None
        return self.players.get(self.turn_order[self.current_turn_index])

    def advance_turn(self) -> None:
        if not self.turn_order:
            raise ValueError("cannot advance the turn in an empty room")
        self.current_turn_index = (self.current_turn_index + 1) % len(self.turn_order)

    def is_game_over(self) -> bool:
        return any(player.all_finished() for player in self.players.values())

    def handle_captures(self, current_player_id: uuid.UUID, moved_piece_pos: int) -> None:
        """Send home every opponent piece sharing the moved piece's position."""
        if moved_piece_pos in (BASE, FINISHED):
            return
        for player_id, player in self.players.items():
            if player_id == current_player_id:
                continue
            for i, pos in enumerate(player.pieces):
                if pos == moved_piece_pos:
                    log.info("Piece capture! Player %s's piece sent back to base.", player.name)
                    player.pieces[i] = BASE

    def is_current_turn(self, player_id: uuid.UUID) -> bool:
        if not self.turn_order:
            return False
        return self.turn_order[self.current_turn_index] == player_id