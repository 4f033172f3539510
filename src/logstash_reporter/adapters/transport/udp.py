"""UDP datagram transport to a remote collector."""

import socket

from logstash_reporter.adapters.logging import get_logger
from logstash_reporter.core.exceptions import AddressResolutionError, SocketError

logger = get_logger(__name__)


def parse_address(address: str) -> tuple[str, int]:
    """Split a ``host:port`` address.

    Accepts ``host:port``, ``[ipv6]:port`` and ``:port`` (local host).

    Raises:
        AddressResolutionError: If the address has no valid port.
    """
    host, sep, port_text = address.rpartition(":")
    if not sep:
        raise AddressResolutionError(f"missing port in address {address!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host:
        raise AddressResolutionError(f"too many colons in address {address!r}")
    try:
        port = int(port_text)
    except ValueError:
        raise AddressResolutionError(
            f"invalid port {port_text!r} in address {address!r}"
        ) from None
    if not 0 <= port <= 65535:
        raise AddressResolutionError(f"port out of range in address {address!r}")
    return host or "localhost", port


def resolve_address(address: str) -> tuple[str, int]:
    """Resolve ``address`` to an IPv4 socket address.

    Raises:
        AddressResolutionError: If the address cannot be parsed or resolved.
    """
    host, port = parse_address(address)
    try:
        infos = socket.getaddrinfo(host, port, socket.AF_INET, socket.SOCK_DGRAM)
    except (socket.gaierror, UnicodeError) as exc:
        raise AddressResolutionError(
            f"cannot resolve address {address!r}: {exc}"
        ) from exc
    if not infos:
        raise AddressResolutionError(f"no IPv4 address found for {address!r}")
    sockaddr = infos[0][4]
    return sockaddr[0], sockaddr[1]


class UDPTransport:
    """Connected UDP client socket bound to one remote address.

    Each ``send`` writes exactly one datagram. There is no acknowledgement,
    buffering or retry.

    Args:
        address: Remote collector address as ``host:port``.

    Raises:
        AddressResolutionError: If the address cannot be resolved.
        SocketError: If the socket cannot be created or connected.
    """

    def __init__(self, address: str) -> None:
        self.address = address
        self.remote = resolve_address(address)
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        except OSError as exc:
            raise SocketError(f"cannot open UDP socket: {exc}") from exc
        try:
            sock.connect(self.remote)
        except OSError as exc:
            sock.close()
            raise SocketError(f"cannot connect UDP socket to {address}: {exc}") from exc
        self._sock = sock
        logger.debug("UDP transport connected to %s:%d", *self.remote)

    @property
    def closed(self) -> bool:
        return self._sock.fileno() == -1

    def send(self, data: bytes) -> None:
        """Send ``data`` as a single datagram.

        Raises:
            SocketError: If the socket is closed or the send fails.
        """
        try:
            self._sock.send(data)
        except OSError as exc:
            raise SocketError(f"send to {self.address} failed: {exc}") from exc

    def close(self) -> None:
        self._sock.close()

    def __enter__(self) -> "UDPTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
