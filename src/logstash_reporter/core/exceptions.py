"""Exceptions raised by the reporter.

Construction failures (address resolution, socket creation) and send
failures surface to the caller. Encoding failures are recovered inside a
flush by skipping the offending metric.
"""


class ReporterError(Exception):
    """Base class for all reporter errors."""


class AddressResolutionError(ReporterError):
    """The remote collector address could not be parsed or resolved."""


class SocketError(ReporterError):
    """The datagram socket could not be opened, or a send failed."""


class EncodeError(ReporterError, ValueError):
    """A measure could not be serialized to JSON."""
