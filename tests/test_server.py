import json

import pytest

from ludoserver.game_room import GameState
from ludoserver.server import ClientSession, LudoServer


def drain(session):
    out = []
    while not session.outbox.empty():
        item = session.outbox.get_nowait()
        if item is not None:
            out.append(json.loads(item))
    return out


def fixed_dice(*rolls):
    return iter(rolls).__next__


def join(server, name):
    session = ClientSession()
    server.handle_text(session, json.dumps({"type": "Join", "name": name}))
    return session


@pytest.fixture
def two_players():
    server = LudoServer(dice=fixed_dice(6, 6, 6, 6))
    alice = join(server, "Alice")
    bob = join(server, "Bob")
    drain(alice)
    drain(bob)
    return server, alice, bob


def test_join_reports_turn_and_starts_game():
    server = LudoServer()
    alice = join(server, "Alice")
    assert drain(alice) == [{"type": "GameState", "your_turn": True}]
    assert server.room().state == GameState.WAITING
    bob = join(server, "Bob")
    assert drain(bob) == [{"type": "GameState", "your_turn": False}]
    assert server.room().state == GameState.IN_PROGRESS
    assert set(server.room().clients) == {alice.player_id, bob.player_id}


def test_third_join_is_rejected():
    server = LudoServer()
    join(server, "Alice")
    join(server, "Bob")
    carol = join(server, "Carol")
    assert drain(carol) == [{"type": "Error", "message": "Room is full."}]
    assert carol.player_id is None


def test_roll_before_join_raises():
    server = LudoServer()
    with pytest.raises(RuntimeError, match="join"):
        server.handle_text(ClientSession(), '{"type":"Roll"}')


def test_move_before_join_raises():
    server = LudoServer()
    with pytest.raises(RuntimeError, match="join"):
        server.handle_text(ClientSession(), '{"type":"Move","piece_index":0}')


def test_malformed_message_is_ignored(two_players):
    server, alice, _ = two_players
    server.handle_text(alice, "not json")
    server.handle_text(alice, '{"type":"Dance"}')
    assert drain(alice) == []


def test_roll_out_of_turn_is_an_error(two_players):
    server, _, bob = two_players
    server.handle_text(bob, '{"type":"Roll"}')
    assert drain(bob) == [{"type": "Error", "message": "It's not your turn."}]


def test_roll_without_possible_move_skips_turn():
    server = LudoServer(dice=fixed_dice(3))
    alice = join(server, "Alice")
    bob = join(server, "Bob")
    drain(alice)
    drain(bob)
    server.handle_text(alice, '{"type":"Roll"}')
    skipped = {"type": "TurnSkipped", "player_id": str(alice.player_id), "roll": 3}
    assert drain(alice) == [skipped, {"type": "GameState", "your_turn": False}]
    assert drain(bob) == [skipped]
    assert server.room().is_current_turn(bob.player_id)


def test_roll_six_keeps_turn_and_broadcasts(two_players):
    server, alice, bob = two_players
    server.handle_text(alice, '{"type":"Roll"}')
    rolled = {"type": "DiceRolled", "player_id": str(alice.player_id), "roll": 6}
    assert drain(alice) == [{"type": "GameState", "your_turn": True}, rolled]
    assert drain(bob) == [rolled]
    room = server.room()
    assert room.last_dice_roll == 6
    assert room.players[alice.player_id].last_roll == 6
    assert room.is_current_turn(alice.player_id)


def test_move_without_roll_is_an_error(two_players):
    server, alice, _ = two_players
    server.handle_text(alice, '{"type":"Move","piece_index":0}')
    assert drain(alice) == [
        {"type": "Error", "message": "You must roll the dice before moving."}
    ]


def test_move_out_of_turn_is_an_error(two_players):
    server, _, bob = two_players
    server.handle_text(bob, '{"type":"Move","piece_index":0}')
    assert drain(bob) == [{"type": "Error", "message": "Not your turn."}]


def test_move_with_invalid_index_is_an_error(two_players):
    server, alice, _ = two_players
    server.handle_text(alice, '{"type":"Roll"}')
    drain(alice)
    server.handle_text(alice, '{"type":"Move","piece_index":4}')
    assert drain(alice) == [{"type": "Error", "message": "Invalid piece index."}]
    assert server.room().players[alice.player_id].last_roll == 6


def test_move_after_six_moves_piece_and_keeps_turn(two_players):
    server, alice, bob = two_players
    server.handle_text(alice, '{"type":"Roll"}')
    drain(alice)
    drain(bob)
    server.handle_text(alice, '{"type":"Move","piece_index":2}')
    player = server.room().players[alice.player_id]
    moved = {
        "type": "PieceMoved",
        "player_id": str(alice.player_id),
        "piece_index": 2,
        "new_pos": player.pieces[2],
    }
    assert drain(alice) == [moved, {"type": "GameState", "your_turn": True}]
    assert drain(bob) == [moved]
    assert player.pieces[2] == 0 + 6
    assert player.last_roll is None


def test_move_with_other_roll_advances_turn():
    server = LudoServer(dice=fixed_dice(4))
    alice = join(server, "Alice")
    bob = join(server, "Bob")
    room = server.room()
    room.players[alice.player_id].pieces[0] = 10
    server.handle_text(alice, '{"type":"Roll"}')
    server.handle_text(alice, '{"type":"Move","piece_index":0}')
    assert room.players[alice.player_id].pieces[0] == 10 + 4
    assert drain(alice)[-1] == {"type": "GameState", "your_turn": False}
    assert room.is_current_turn(bob.player_id)


def test_move_captures_opponent_piece():
    server = LudoServer(dice=fixed_dice(4))
    alice = join(server, "Alice")
    bob = join(server, "Bob")
    room = server.room()
    room.players[alice.player_id].pieces[0] = 10
    room.players[bob.player_id].pieces[1] = 14
    room.players[bob.player_id].pieces[2] = 20
    server.handle_text(alice, '{"type":"Roll"}')
    server.handle_text(alice, '{"type":"Move","piece_index":0}')
    assert room.players[bob.player_id].pieces == [0, 0, 20, 0]


@pytest.mark.asyncio
async def test_handle_client_delivers_replies_in_order():
    class FakeSocket:
        def __init__(self, incoming):
            self.incoming = incoming
            self.sent = []

        def __aiter__(self):
            return self._gen()

        async def _gen(self):
            for item in self.incoming:
                yield item

        async def send(self, data):
            self.sent.append(data)

    server = LudoServer()
    socket = FakeSocket(['{"type":"Join","name":"Alice"}', '{"type":"Roll"}'])
    await server.handle_client(socket)
    assert socket.sent[0] == '{"type":"GameState","your_turn":true}'
    assert len(server.room().players) == 1


@pytest.mark.asyncio
async def test_handle_client_drops_unjoined_player():
    class FakeSocket:
        def __init__(self, incoming):
            self.incoming = incoming
            self.sent = []

        def __aiter__(self):
            return self._gen()

        async def _gen(self):
            for item in self.incoming:
                yield item

        async def send(self, data):
            self.sent.append(data)

    server = LudoServer()
    socket = FakeSocket(['{"type":"Roll"}', '{"type":"Join","name":"Alice"}'])
    await server.handle_client(socket)
    assert socket.sent == []
    assert server.rooms == {}