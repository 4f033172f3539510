"""JSON encoder for measures.

Each measure becomes one self-contained JSON object, UTF-8 encoded, with no
trailing newline or other framing. One encoded measure is one datagram.
"""

import json
from collections.abc import Mapping

from logstash_reporter.core.exceptions import EncodeError
from logstash_reporter.core.models import MeasureValue


def encode_measure(measure: Mapping[str, MeasureValue]) -> bytes:
    """Encode a measure to a UTF-8 JSON payload.

    Args:
        measure: The flat document to encode.

    Returns:
        The JSON object as bytes.

    Raises:
        EncodeError: If the measure holds values JSON cannot represent,
            such as NaN, infinities or arbitrary objects.
    """
    try:
        text = json.dumps(measure, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"cannot encode measure: {exc}") from exc
    return text.encode("utf-8")
