import pytest

from mniam.protocol import (
    HEADER_SIZE,
    INITIAL_CRC,
    MAX_PACKET_SIZE,
    MAX_PAYLOAD_SIZE,
    SOP,
    Packet,
    Receiver,
    ReceiverState,
    compute_crc,
    serialize,
    update_crc,
)


def _collecting_receiver():
    received = []
    return Receiver(received.append), received


def test_serialized_packet_follows_format():
    empty = serialize(0)
    assert empty[0] == 0xA1
    assert empty[0] == SOP
    assert len(empty) == 5
    assert len(empty) == HEADER_SIZE
    full = serialize(0, bytes(200))
    assert len(full) == 205
    assert MAX_PAYLOAD_SIZE == 200
    assert len(full) == MAX_PACKET_SIZE


def test_update_crc_check_value():
    crc = INITIAL_CRC
    for byte in b"123456789":
        crc = update_crc(byte, crc)
    assert crc == 0x6F91


@pytest.mark.parametrize("byte,crc", [(-1, 0), (256, 0), (0, -1), (0, 0x10000)])
def test_update_crc_rejects_out_of_range(byte, crc):
    with pytest.raises(ValueError):
        update_crc(byte, crc)


def test_update_crc_stays_sixteen_bits():
    for byte in range(256):
        assert 0 <= update_crc(byte, 0xFFFF) <= 0xFFFF


def test_compute_crc_depends_on_payload():
    assert compute_crc(1, b"\x00") != compute_crc(1, b"\x01")


def test_serialize_header_layout():
    payload = b"abc"
    wire = serialize(7, payload)
    assert wire[:3] == bytes([SOP, 7, 3])
    assert int.from_bytes(wire[3:5], "little") == compute_crc(7, payload)
    assert wire[5:] == payload
    assert len(wire) == HEADER_SIZE + len(payload)


def test_serialize_empty_payload():
    wire = serialize(1)
    assert len(wire) == HEADER_SIZE
    assert wire[:3] == bytes([SOP, 1, 0])


def test_serialize_max_payload():
    wire = serialize(2, bytes(MAX_PAYLOAD_SIZE))
    assert len(wire) == MAX_PACKET_SIZE


def test_serialize_rejects_oversized_payload():
    with pytest.raises(ValueError):
        serialize(2, bytes(MAX_PAYLOAD_SIZE + 1))


def test_serialize_rejects_bad_type():
    with pytest.raises(ValueError):
        serialize(256, b"")


def test_receiver_requires_callable():
    with pytest.raises(TypeError):
        Receiver(None)


def test_round_trip_single_chunk():
    receiver, received = _collecting_receiver()
    receiver.feed(serialize(5, b"hello"))
    assert received == [Packet(5, b"hello")]
    assert receiver.state is ReceiverState.EMPTY


def test_round_trip_empty_payload():
    receiver, received = _collecting_receiver()
    receiver.feed(serialize(9))
    assert received == [Packet(9, b"")]


def test_round_trip_byte_by_byte():
    receiver, received = _collecting_receiver()
    wire = serialize(3, bytes(range(50)))
    for byte in wire:
        receiver.feed(bytes([byte]))
    assert received == [Packet(3, bytes(range(50)))]


def test_multiple_packets_in_one_chunk():
    receiver, received = _collecting_receiver()
    receiver.feed(serialize(1) + serialize(2, b"x") + serialize(3, b"yz"))
    assert [p.type for p in received] == [1, 2, 3]
    assert received[2].payload == b"yz"


def test_garbage_before_packet_is_skipped():
    receiver, received = _collecting_receiver()
    receiver.feed(b"\x00\x11\x22" + serialize(4, b"ok"))
    assert received == [Packet(4, b"ok")]


def test_bad_crc_is_dropped():
    receiver, received = _collecting_receiver()
    wire = bytearray(serialize(4, b"data"))
    wire[-1] ^= 0xFF
    receiver.feed(bytes(wire))
    assert received == []
    assert receiver.state is ReceiverState.EMPTY
    receiver.feed(serialize(4, b"data"))
    assert received == [Packet(4, b"data")]


def test_length_over_limit_resets():
    receiver, received = _collecting_receiver()
    receiver.feed(bytes([SOP, 1, MAX_PAYLOAD_SIZE + 1]))
    assert receiver.state is ReceiverState.EMPTY
    assert received == []


def test_partial_states():
    receiver, _ = _collecting_receiver()
    wire = serialize(6, b"ab")
    expected = [
        ReceiverState.GOT_SOP,
        ReceiverState.GOT_TYPE,
        ReceiverState.GOT_LENGTH,
        ReceiverState.GOT_CRC_LO,
        ReceiverState.GETTING_PAYLOAD,
        ReceiverState.GETTING_PAYLOAD,
        ReceiverState.EMPTY,
    ]
    states = []
    for byte in wire:
        receiver.feed(bytes([byte]))
        states.append(receiver.state)
    assert states == expected


def test_split_across_chunks():
    receiver, received = _collecting_receiver()
    wire = serialize(8, b"split me")
    receiver.feed(wire[:4])
    assert received == []
    receiver.feed(wire[4:])
    assert received == [Packet(8, b"split me")]