"""Player state: four pieces and the last dice roll."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

PIECE_COUNT = 4
BASE = 0
FINISHED = 58
FINISH_LINE = 57


@dataclass
class Player:
    """A Ludo player.

    Piece positions: 0 is the base, 1-57 on the board, 58 finished.
    """

    name: str
    position: int
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    is_ready: bool = False
    pieces: list[int] = field(default_factory=lambda: [BASE] * PIECE_COUNT)
    last_roll: int | None = None

    def set_last_roll(self, value: int) -> None:
        self.last_roll = value

    def take_last_roll(self) -> int | None:
        """Return the stored roll and clear it."""
        roll, self.last_roll = self.last_roll, None
        return roll

    def move_piece(self, piece_index: int, steps: int) -> bool:
        """Move a piece by a dice roll; return whether it moved."""
        if not 0 <= piece_index < len(self.pieces):
            return False
        pos = self.pieces[piece_index]
        if pos == FINISHED:
            return False
        if pos == BASE:
            if steps == 6:
                self.pieces[piece_index] = 1
                return True
            return False
        self.pieces[piece_index] = min(pos + steps, FINISHED)
        return True

    def all_finished(self) -> bool:
        return all(pos == FINISHED for pos in self.pieces)

    def is_piece_finished(self, pos: int) -> bool:
        return pos >= FINISH_LINE

    def can_move_piece(self, pos: int, roll: int) -> bool:
        """Whether a piece at ``pos`` may move with ``roll``."""
        if self.is_piece_finished(pos):
            return False
        if pos == BASE:
            return roll == 6
        return pos + roll <= FINISH_LINE