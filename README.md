# mniam

A bot player for the mniAM arena game. It connects to a game server over TCP,
speaks the AMCOM packet protocol, and steers its player: it dodges sparks and
bigger players, chases smaller players and food (transistors), and otherwise
wanders around at random.

## Installing

```
pip install .
```

## Playing

Start the game server first, then run:

```
mniam-player
```

Options:

- `--host HOST` – game server host (default `localhost`)
- `--port PORT` – game server port (default `2001`)

The player identifies itself with the name `mniAM player`, answers the
new-game greeting (and takes its own player number from the first byte of the
NEW_GAME request), sends a move angle on every MOVE request, and says goodbye
at GAME_OVER. Object updates are applied to its picture of the map; a payload
whose length is not a multiple of 12 bytes is logged and ignored. Progress is
logged to standard error. The command keeps going until the server closes the
connection or a receive or send fails, and exits with status 1 if it cannot
resolve or connect to the server.

The same is available from Python with `mniam.client.run(host, port)` or
`mniam.client.main(argv)`; `mniam.client.Player.handle_packet(packet)` returns
the wire bytes of the reply to one packet, or `None` when there is none.

## Using the library

The protocol layer works on its own.

```python
from mniam.protocol import Receiver, serialize
from mniam.packets import PacketType, MoveResponse

frame = serialize(PacketType.MOVE_RESPONSE, MoveResponse(angle=1.5).encode())

received = []
receiver = Receiver(received.append)
receiver.feed(frame)
packet = received[0]
print(MoveResponse.decode(packet.payload).angle)
```

Every AMCOM frame has a 5-byte header: the start byte `0xA1`, a type byte, a
length byte (0 to 200), and a little-endian CRC-16 over the type, length and
payload. Then comes the payload. `serialize` raises `ValueError` for a type
outside 0..255 or a payload over 200 bytes. `Receiver.feed` takes any chunk of
a byte stream and calls the handler with a `Packet` once for each whole packet
whose checksum is correct; frames with a bad checksum or a length over 200 are
dropped. `update_crc` and `compute_crc` expose the checksum.

`mniam.packets` holds `PacketType` and a dataclass for each payload
(`IdentifyRequest`, `IdentifyResponse`, `NewGameRequest`, `NewGameResponse`,
`ObjectState`, `ObjectUpdateRequest`, `MoveRequest`, `MoveResponse`,
`GameOverRequest`, `GameOverResponse`), each with `encode()` and a `decode()`
class method. Wrong sizes and values that do not fit raise `ValueError`.

## Steering

The steering logic is in `mniam.strategy.World`. It keeps up to 100 objects of
each kind (`ObjectKind.PLAYER`, `FOOD`, `SPARK`, `GLUE`) from object-update
payloads via `World.apply_object_update`, drops an object when it is reported
with 0 hp, and computes a heading in radians with `World.compute_move_angle()`:

1. a spark nearer than 80 units, or a bigger player nearer than 150, is
   avoided by turning left, right or back at random;
2. otherwise the nearest smaller player or the nearest food is chased,
   whichever scores higher (weights 5 and 3 over distance plus 1);
3. otherwise the player wanders near its last heading.

Glue is tracked and reported by `World.survey()`, but it does not change the
heading. Pass a seeded `random.Random` to `World(rng=...)` for repeatable
choices.

## What it does not do

The package is only a player. It does not include a game server, a map view
or any record of past games.

## Running the tests

```
pip install .[test]
pytest
```