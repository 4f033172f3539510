"""Datagram transports."""

from logstash_reporter.adapters.transport.udp import UDPTransport

__all__ = ["UDPTransport"]
