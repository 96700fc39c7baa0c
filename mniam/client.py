"""Game client: answers the server's requests over a TCP connection."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
from typing import Optional

from mniam.packets import (
    GameOverResponse,
    IdentifyResponse,
    MoveResponse,
    NewGameResponse,
    PacketType,
)
from mniam.protocol import Packet, Receiver, serialize
from mniam.strategy import World

log = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 2001
DEFAULT_NAME = "mniAM player"
HELLO_MESSAGE = "Hello, is it me you're looking for?"
END_MESSAGE = "Adios Amigos"
RECV_SIZE = 512


class Player:
    """Reacts to server packets and produces the replies."""

    def __init__(self, world: Optional[World] = None, name: str = DEFAULT_NAME) -> None:
        self.world = world if world is not None else World()
        self.name = name

    def handle_packet(self, packet: Packet) -> Optional[bytes]:
        """Handle one packet; return the wire bytes of the reply, if any."""
        kind = packet.type
        if kind == PacketType.IDENTIFY_REQUEST:
            log.info("Got IDENTIFY.request. Responding with IDENTIFY.response")
            return serialize(PacketType.IDENTIFY_RESPONSE,
                             IdentifyResponse(self.name).encode())
        if kind == PacketType.NEW_GAME_REQUEST:
            log.info("Got NEW_GAME.request. Responding with NEW_GAME.response")
            if packet.payload:
                self.world.player_no = packet.payload[0]
            return serialize(PacketType.NEW_GAME_RESPONSE,
                             NewGameResponse(HELLO_MESSAGE).encode())
        if kind == PacketType.MOVE_REQUEST:
            log.info("Got MOVE.request. Responding with MOVE.response")
            angle = self.world.compute_move_angle()
            return serialize(PacketType.MOVE_RESPONSE, MoveResponse(angle).encode())
        if kind == PacketType.GAME_OVER_REQUEST:
            log.info("Got GAME_OVER.request. Responding with GAME_OVER.response")
            return serialize(PacketType.GAME_OVER_RESPONSE,
                             GameOverResponse(END_MESSAGE).encode())
        if kind == PacketType.OBJECT_UPDATE_REQUEST:
            log.info("Got OBJECT_UPDATE.request.")
            try:
                self.world.apply_object_update(packet.payload)
            except ValueError as exc:
                log.warning("%s", exc)
            return None
        log.info("Unknown packet type: %d", kind)
        return None


def _connect(host: str, port: int) -> socket.socket:
    try:
        infos = socket.getaddrinfo(host, port, socket.AF_INET,
                                   socket.SOCK_STREAM, socket.IPPROTO_TCP)
    except socket.gaierror as exc:
        raise ConnectionError(f"cannot resolve {host}:{port}: {exc}") from exc
    for family, sock_type, proto, _, address in infos:
        sock = socket.socket(family, sock_type, proto)
        try:
            sock.connect(address)
        except OSError:
            sock.close()
            continue
        return sock
    raise ConnectionError("Unable to connect to the game server!")


def run(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    """Connect to the game server and play until it closes the connection."""
    log.info("Connecting to game server...")
    with _connect(host, port) as sock:
        log.info("Connected to game server")
        player = Player()

        def deliver(packet: Packet) -> None:
            reply = player.handle_packet(packet)
            if reply:
                sock.sendall(reply)

        receiver = Receiver(deliver)
        while True:
            try:
                chunk = sock.recv(RECV_SIZE)
            except OSError as exc:
                log.error("recv failed with error: %s", exc)
                return
            if not chunk:
                log.info("Connection closed")
                return
            try:
                receiver.feed(chunk)
            except OSError as exc:
                log.error("Socket send failed with error: %s", exc)
                return


def main(argv=None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(prog="mniam", description="Play mniAM against a game server.")
    parser.add_argument("--host", default=DEFAULT_HOST, help="game server host")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="game server port")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    print("This is mniAM player. Let's eat some transistors!")
    try:
        run(args.host, args.port)
    except ConnectionError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())