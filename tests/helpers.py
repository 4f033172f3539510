"""Test doubles shared by unit, integration and BDD tests."""

import json
import socket

from logstash_reporter.core.exceptions import SocketError


class RecordingTransport:
    """In-memory DatagramTransportPort that records every payload.

    ``fail_after`` makes the transport raise SocketError once that many
    datagrams have been sent.
    """

    def __init__(self, fail_after: int | None = None) -> None:
        self.sent: list[bytes] = []
        self.closed = False
        self._fail_after = fail_after

    def send(self, data: bytes) -> None:
        if self.closed:
            raise SocketError("transport is closed")
        if self._fail_after is not None and len(self.sent) >= self._fail_after:
            raise SocketError("simulated send failure")
        self.sent.append(data)

    def close(self) -> None:
        self.closed = True

    def documents(self) -> list[dict[str, object]]:
        return [json.loads(payload) for payload in self.sent]


class UDPServer:
    """Local UDP listener that collects datagrams for assertions."""

    def __init__(self) -> None:
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.settimeout(2.0)

    @property
    def address(self) -> str:
        host, port = self.sock.getsockname()
        return f"{host}:{port}"

    def read(self) -> bytes:
        data, _ = self.sock.recvfrom(65535)
        return data

    def read_documents(self, n: int) -> list[dict[str, object]]:
        return [json.loads(self.read()) for _ in range(n)]

    def close(self) -> None:
        self.sock.close()
