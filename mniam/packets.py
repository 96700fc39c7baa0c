"""Packet types and payload layouts of the game protocol."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar, List

MAX_PLAYER_NAME_LEN = 24
MAX_PLAYER_MESSAGE_LEN = 127
MAX_PLAYER_UPDATES = 8
MAX_OBJECT_UPDATES = 16


class PacketType(IntEnum):
    """Known packet types."""

    NO_PACKET = 0
    IDENTIFY_REQUEST = 1
    IDENTIFY_RESPONSE = 2
    NEW_GAME_REQUEST = 3
    NEW_GAME_RESPONSE = 4
    OBJECT_UPDATE_REQUEST = 5
    MOVE_REQUEST = 6
    MOVE_RESPONSE = 7
    GAME_OVER_REQUEST = 8
    GAME_OVER_RESPONSE = 9


def _pack(fmt: struct.Struct, *values) -> bytes:
    try:
        return fmt.pack(*values)
    except struct.error as exc:
        raise ValueError(str(exc)) from exc


def _unpack(fmt: struct.Struct, data: bytes, name: str) -> tuple:
    data = bytes(data)
    if len(data) != fmt.size:
        raise ValueError(f"{name} needs {fmt.size} bytes, got {len(data)}")
    return fmt.unpack(data)


def _encode_text(text: str, size: int) -> bytes:
    raw = text.encode("utf-8")
    if b"\0" in raw:
        raise ValueError("text must not contain NUL characters")
    if len(raw) >= size:
        raise ValueError(f"text of {len(raw)} bytes does not fit in {size - 1}")
    return raw.ljust(size, b"\0")


def _decode_text(data: bytes, size: int) -> str:
    data = bytes(data)
    if len(data) > size:
        raise ValueError(f"text field holds at most {size} bytes, got {len(data)}")
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


@dataclass(frozen=True)
class IdentifyRequest:
    """IDENTIFY.request: game version."""

    game_ver_hi: int
    game_ver_lo: int
    game_revision: int

    SIZE: ClassVar[int] = 4
    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<BBH")

    def encode(self) -> bytes:
        return _pack(self._FORMAT, self.game_ver_hi, self.game_ver_lo, self.game_revision)

    @classmethod
    def decode(cls, data: bytes) -> IdentifyRequest:
        return cls(*_unpack(cls._FORMAT, data, cls.__name__))


@dataclass(frozen=True)
class IdentifyResponse:
    """IDENTIFY.response: player name."""

    player_name: str

    SIZE: ClassVar[int] = MAX_PLAYER_NAME_LEN

    def encode(self) -> bytes:
        return _encode_text(self.player_name, self.SIZE)

    @classmethod
    def decode(cls, data: bytes) -> IdentifyResponse:
        return cls(_decode_text(data, cls.SIZE))


@dataclass(frozen=True)
class NewGameRequest:
    """NEW_GAME.request: player number, player count and map size."""

    player_number: int
    number_of_players: int
    map_width: float
    map_height: float

    SIZE: ClassVar[int] = 10
    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<BBff")

    def encode(self) -> bytes:
        return _pack(
            self._FORMAT,
            self.player_number,
            self.number_of_players,
            self.map_width,
            self.map_height,
        )

    @classmethod
    def decode(cls, data: bytes) -> NewGameRequest:
        return cls(*_unpack(cls._FORMAT, data, cls.__name__))


@dataclass(frozen=True)
class NewGameResponse:
    """NEW_GAME.response: greeting message."""

    hello_message: str

    SIZE: ClassVar[int] = MAX_PLAYER_MESSAGE_LEN

    def encode(self) -> bytes:
        return _encode_text(self.hello_message, self.SIZE)

    @classmethod
    def decode(cls, data: bytes) -> NewGameResponse:
        return cls(_decode_text(data, cls.SIZE))


@dataclass(frozen=True)
class ObjectState:
    """State of one game object (0 player, 1 food, 2 spark, 3 glue)."""

    object_type: int
    object_no: int
    hp: int
    x: float
    y: float

    SIZE: ClassVar[int] = 12
    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<BHbff")

    def encode(self) -> bytes:
        return _pack(self._FORMAT, self.object_type, self.object_no, self.hp, self.x, self.y)

    @classmethod
    def decode(cls, data: bytes) -> ObjectState:
        return cls(*_unpack(cls._FORMAT, data, cls.__name__))


def _encode_states(states: List[ObjectState], limit: int) -> bytes:
    if len(states) > limit:
        raise ValueError(f"at most {limit} object states, got {len(states)}")
    return b"".join(state.encode() for state in states)


def _decode_states(data: bytes, limit: int) -> List[ObjectState]:
    data = bytes(data)
    size = ObjectState.SIZE
    if len(data) % size:
        raise ValueError(f"payload length {len(data)} is not a multiple of {size}")
    if len(data) // size > limit:
        raise ValueError(f"at most {limit} object states, got {len(data) // size}")
    return [ObjectState.decode(data[start:start + size]) for start in range(0, len(data), size)]


@dataclass
class ObjectUpdateRequest:
    """OBJECT_UPDATE.request: states of up to sixteen objects."""

    objects: List[ObjectState] = field(default_factory=list)

    MAX_ITEMS: ClassVar[int] = MAX_OBJECT_UPDATES

    def encode(self) -> bytes:
        return _encode_states(self.objects, self.MAX_ITEMS)

    @classmethod
    def decode(cls, data: bytes) -> ObjectUpdateRequest:
        return cls(_decode_states(data, cls.MAX_ITEMS))


@dataclass(frozen=True)
class MoveRequest:
    """MOVE.request: current game time."""

    game_time: int

    SIZE: ClassVar[int] = 4
    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<I")

    def encode(self) -> bytes:
        return _pack(self._FORMAT, self.game_time)

    @classmethod
    def decode(cls, data: bytes) -> MoveRequest:
        return cls(*_unpack(cls._FORMAT, data, cls.__name__))


@dataclass(frozen=True)
class MoveResponse:
    """MOVE.response: heading in radians."""

    angle: float

    SIZE: ClassVar[int] = 4
    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<f")

    def encode(self) -> bytes:
        return _pack(self._FORMAT, self.angle)

    @classmethod
    def decode(cls, data: bytes) -> MoveResponse:
        return cls(*_unpack(cls._FORMAT, data, cls.__name__))


@dataclass
class GameOverRequest:
    """GAME_OVER.request: final states of up to eight players."""

    players: List[ObjectState] = field(default_factory=list)

    MAX_ITEMS: ClassVar[int] = MAX_PLAYER_UPDATES

    def encode(self) -> bytes:
        return _encode_states(self.players, self.MAX_ITEMS)

    @classmethod
    def decode(cls, data: bytes) -> GameOverRequest:
        return cls(_decode_states(data, cls.MAX_ITEMS))


@dataclass(frozen=True)
class GameOverResponse:
    """GAME_OVER.response: farewell message."""

    end_message: str

    SIZE: ClassVar[int] = MAX_PLAYER_MESSAGE_LEN

    def encode(self) -> bytes:
        return _encode_text(self.end_message, self.SIZE)

    @classmethod
    def decode(cls, data: bytes) -> GameOverResponse:
        return cls(_decode_text(data, cls.SIZE))