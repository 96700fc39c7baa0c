import pytest

from mniam.packets import (
    GameOverRequest,
    GameOverResponse,
    IdentifyRequest,
    IdentifyResponse,
    MoveRequest,
    MoveResponse,
    NewGameRequest,
    NewGameResponse,
    ObjectState,
    ObjectUpdateRequest,
    PacketType,
)


@pytest.mark.parametrize(
    "value,name",
    [
        (1, "IDENTIFY_REQUEST"),
        (5, "OBJECT_UPDATE_REQUEST"),
        (9, "GAME_OVER_RESPONSE"),
    ],
)
def test_packet_type_lookup(value, name):
    assert PacketType(value).name == name


def test_packet_type_rejects_unknown_value():
    with pytest.raises(ValueError):
        PacketType(42)


@pytest.mark.parametrize(
    "payload,size",
    [
        (IdentifyRequest(1, 2, 3), 4),
        (IdentifyResponse("Player"), 24),
        (NewGameRequest(1, 2, 100.0, 200.0), 10),
        (NewGameResponse("Hello"), 127),
        (ObjectState(1, 2, 3, 4.0, 5.0), 12),
        (MoveRequest(10), 4),
        (MoveResponse(1.5), 4),
        (GameOverResponse("Bye"), 127),
    ],
)
def test_encoded_sizes(payload, size):
    assert len(payload.encode()) == size


def test_identify_request_wire_bytes():
    assert IdentifyRequest(1, 2, 0x0304).encode() == bytes([1, 2, 0x04, 0x03])


def test_move_request_wire_bytes():
    assert MoveRequest(1).encode() == b"\x01\x00\x00\x00"


@pytest.mark.parametrize(
    "payload",
    [
        IdentifyRequest(1, 2, 0xBEEF),
        NewGameRequest(3, 4, 1000.5, 750.25),
        ObjectState(2, 513, -5, 12.5, -3.25),
        MoveRequest(123456),
        MoveResponse(-0.5),
    ],
)
def test_fixed_round_trip(payload):
    assert type(payload).decode(payload.encode()) == payload


@pytest.mark.parametrize("cls", [IdentifyResponse, NewGameResponse, GameOverResponse])
def test_text_round_trip(cls):
    message = cls("Adios Amigos")
    assert cls.decode(message.encode()) == message


def test_text_is_nul_padded():
    encoded = IdentifyResponse("ab").encode()
    assert encoded[:2] == b"ab"
    assert set(encoded[2:]) == {0}


def test_text_decode_stops_at_nul():
    assert IdentifyResponse.decode(b"name\0junk").player_name == "name"


def test_name_too_long():
    with pytest.raises(ValueError):
        IdentifyResponse("x" * 24).encode()


def test_name_at_limit():
    assert IdentifyResponse.decode(IdentifyResponse("x" * 23).encode()).player_name == "x" * 23


def test_text_decode_too_long():
    with pytest.raises(ValueError):
        IdentifyResponse.decode(bytes(25))


def test_fixed_decode_wrong_length():
    with pytest.raises(ValueError):
        MoveRequest.decode(b"\x00\x00\x00")


def test_fixed_encode_out_of_range():
    with pytest.raises(ValueError):
        IdentifyRequest(256, 0, 0).encode()


def test_object_update_round_trip():
    states = [ObjectState(k % 4, k, 10, float(k), float(-k)) for k in range(16)]
    request = ObjectUpdateRequest(states)
    encoded = request.encode()
    assert len(encoded) == 192
    assert ObjectUpdateRequest.decode(encoded) == request


def test_object_update_empty():
    assert ObjectUpdateRequest.decode(b"").objects == []


def test_object_update_too_many():
    states = [ObjectState(1, k, 1, 0.0, 0.0) for k in range(17)]
    with pytest.raises(ValueError):
        ObjectUpdateRequest(states).encode()


def test_object_update_bad_length():
    with pytest.raises(ValueError):
        ObjectUpdateRequest.decode(bytes(13))


def test_game_over_round_trip():
    players = [ObjectState(0, k, 5, 1.0, 2.0) for k in range(8)]
    request = GameOverRequest(players)
    encoded = request.encode()
    assert len(encoded) == 96
    assert GameOverRequest.decode(encoded) == request


def test_game_over_too_many():
    with pytest.raises(ValueError):
        GameOverRequest.decode(bytes(12 * 9))