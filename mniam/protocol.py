"""Framing of AMCOM packets: checksum, serialization and a streaming receiver."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable

SOP = 0xA1
"""Start-of-packet marker."""
INITIAL_CRC = 0xFFFF
HEADER_SIZE = 5
MAX_PAYLOAD_SIZE = 200
MAX_PACKET_SIZE = HEADER_SIZE + MAX_PAYLOAD_SIZE

_HEADER = struct.Struct("<BBBH")


class ReceiverState(IntEnum):
    """Stages of packet reception."""

    EMPTY = 0
    GOT_SOP = 1
    GOT_TYPE = 2
    GOT_LENGTH = 3
    GOT_CRC_LO = 4
    GETTING_PAYLOAD = 6
    GOT_WHOLE_PACKET = 7


@dataclass(frozen=True)
class Packet:
    """A received packet with a verified checksum."""

    type: int
    payload: bytes = b""


def update_crc(byte: int, crc: int) -> int:
    """Fold one byte into a running 16-bit CCITT checksum."""
    if not 0 <= byte <= 0xFF:
        raise ValueError(f"byte out of range: {byte}")
    if not 0 <= crc <= 0xFFFF:
        raise ValueError(f"crc out of range: {crc}")
    byte = (byte ^ crc) & 0xFF
    byte = (byte ^ (byte << 4)) & 0xFF
    return (((byte << 8) | (crc >> 8)) ^ (byte >> 4) ^ (byte << 3)) & 0xFFFF


def compute_crc(packet_type: int, payload: bytes) -> int:
    """Checksum over the type, length and payload of a packet."""
    crc = INITIAL_CRC
    for byte in (packet_type, len(payload), *bytes(payload)):
        crc = update_crc(byte, crc)
    return crc


def serialize(packet_type: int, payload: bytes = b"") -> bytes:
    """Build the wire form of a packet."""
    payload = bytes(payload)
    if not 0 <= packet_type <= 0xFF:
        raise ValueError(f"packet type out of range: {packet_type}")
    if len(payload) > MAX_PAYLOAD_SIZE:
        raise ValueError(
            f"payload of {len(payload)} bytes exceeds {MAX_PAYLOAD_SIZE}"
        )
    crc = compute_crc(packet_type, payload)
    return _HEADER.pack(SOP, packet_type, len(payload), crc) + payload


class Receiver:
    """Finds valid packets in a byte stream and passes them to a handler."""

    def __init__(self, handler: Callable[[Packet], object]) -> None:
        if not callable(handler):
            raise TypeError("handler must be callable")
        self._handler = handler
        self._state = ReceiverState.EMPTY
        self._type = 0
        self._length = 0
        self._crc = 0
        self._payload = bytearray()

    @property
    def state(self) -> ReceiverState:
        """Current reception stage."""
        return self._state

    def feed(self, data: bytes) -> None:
        """Consume a chunk of the incoming stream."""
        for byte in bytes(data):
            self._consume(byte)

    def _consume(self, byte: int) -> None:
        state = self._state
        if state is ReceiverState.EMPTY:
            if byte == SOP:
                self._state = ReceiverState.GOT_SOP
        elif state is ReceiverState.GOT_SOP:
            self._type = byte
            self._state = ReceiverState.GOT_TYPE
        elif state is ReceiverState.GOT_TYPE:
            self._length = byte
            self._state = (
                ReceiverState.GOT_LENGTH
                if byte <= MAX_PAYLOAD_SIZE
                else ReceiverState.EMPTY
            )
        elif state is ReceiverState.GOT_LENGTH:
            self._crc = byte
            self._state = ReceiverState.GOT_CRC_LO
        elif state is ReceiverState.GOT_CRC_LO:
            self._crc |= byte << 8
            self._payload = bytearray()
            if self._length == 0:
                self._finish()
            else:
                self._state = ReceiverState.GETTING_PAYLOAD
        elif state is ReceiverState.GETTING_PAYLOAD:
            self._payload.append(byte)
            if len(self._payload) == self._length:
                self._finish()

    def _finish(self) -> None:
        self._state = ReceiverState.EMPTY
        payload = bytes(self._payload)
        if compute_crc(self._type, payload) == self._crc:
            self._handler(Packet(self._type, payload))