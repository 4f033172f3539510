"""Wire encoders for measures."""

from logstash_reporter.core.encoding.json_object import encode_measure

__all__ = ["encode_measure"]
