"""Dice and board geometry for a four-seat Ludo board."""

from __future__ import annotations

import random

BOARD_SQUARES = 52
LAST_MAIN_TRACK_STEP = 51
ENTRY_SQUARES = (0, 13, 26, 39)


def roll_dice() -> int:
    """Roll a standard six-sided die."""
    return random.randint(1, 6)


def get_global_board_index(player_index: int, piece_pos: int) -> int | None:
    """Map a player's relative piece position to a shared main-track square.

    Returns None for pieces at base or already in the home column.
    Raises IndexError for a seat outside the four on the board.
    """
    if not 0 <= player_index < len(ENTRY_SQUARES):
        raise IndexError(f"no seat {player_index} on the board")
    if piece_pos == 0 or piece_pos > LAST_MAIN_TRACK_STEP:
        return None
    entry = ENTRY_SQUARES[player_index]
    return (entry + piece_pos - 1) % BOARD_SQUARES