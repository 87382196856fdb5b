"""JSON messages exchanged with game clients, tagged by a "type" field."""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, fields
from typing import Any, ClassVar, Union


class MessageError(ValueError):
    """A client message could not be decoded."""


@dataclass(frozen=True)
class Join:
    TYPE: ClassVar[str] = "Join"
    name: str


@dataclass(frozen=True)
class Roll:
    TYPE: ClassVar[str] = "Roll"


@dataclass(frozen=True)
class Move:
    TYPE: ClassVar[str] = "Move"
    piece_index: int


@dataclass(frozen=True)
class GameStateMessage:
    TYPE: ClassVar[str] = "GameState"
    your_turn: bool


@dataclass(frozen=True)
class ErrorMessage:
    TYPE: ClassVar[str] = "Error"
    message: str


@dataclass(frozen=True)
class DiceRolled:
    TYPE: ClassVar[str] = "DiceRolled"
    player_id: uuid.UUID
    roll: int


@dataclass(frozen=True)
class PieceMoved:
    TYPE: ClassVar[str] = "PieceMoved"
    player_id: uuid.UUID
    piece_index: int
    new_pos: int


@dataclass(frozen=True)
class TurnSkipped:
    TYPE: ClassVar[str] = "TurnSkipped"
    player_id: uuid.UUID
    roll: int


ClientMessage = Union[Join, Roll, Move]
ServerMessage = Union[GameStateMessage, ErrorMessage, DiceRolled, PieceMoved, TurnSkipped]

_SERVER_TYPES = (GameStateMessage, ErrorMessage, DiceRolled, PieceMoved, TurnSkipped)


def _field(data: dict[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise MessageError(f"missing field `{key}`") from None


def parse_client_message(text: str | bytes) -> ClientMessage:
    """Decode a client message, raising MessageError if it is malformed."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MessageError(f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise MessageError("message must be a JSON object")
    kind = _field(data, "type")
    if kind == Join.TYPE:
        name = _field(data, "name")
        if not isinstance(name, str):
            raise MessageError("`name` must be a string")
        return Join(name)
    if kind == Roll.TYPE:
        return Roll()
    if kind == Move.TYPE:
        piece_index = _field(data, "piece_index")
        if isinstance(piece_index, bool) or not isinstance(piece_index, int) or piece_index < 0:
            raise MessageError("`piece_index` must be a non-negative integer")
        return Move(piece_index)
    raise MessageError(f"unknown message type {kind!r}")


def _encode(value: Any) -> Any:
    return str(value) if isinstance(value, uuid.UUID) else value


def to_json(message: ServerMessage) -> str:
    """Encode a server message as compact JSON with the tag first."""
    if not isinstance(message, _SERVER_TYPES):
        raise TypeError(f"not a server message: {type(message).__name__}")
    payload: dict[str, Any] = {"type": message.TYPE}
    for f in fields(message):
        payload[f.name] = _encode(getattr(message, f.name))
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)