# SPDX-FileCopyrightText: 2026 The Spanfold Authors
# SPDX-License-Identifier: Apache-2.0

"""Span-level metadata: kind, status and sample rate.

The proto enums are converted to plain strings and ints here so that
translated events carry no protobuf types.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional, Sequence, Tuple

from opentelemetry.proto.trace.v1.trace_pb2 import Span, Status

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 1
SAMPLE_RATE_KEYS: Tuple[str, ...] = ("sampleRate", "SampleRate")

# ASCII digits with an optional sign; int() alone also takes "1_000", padding and non-ASCII digits
_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")

INT32_MAX = 2**31 - 1
INT32_MIN = -(2**31)

_SPAN_KINDS: Dict[int, str] = {
    Span.SPAN_KIND_CLIENT: "client",
    Span.SPAN_KIND_SERVER: "server",
    Span.SPAN_KIND_PRODUCER: "producer",
    Span.SPAN_KIND_CONSUMER: "consumer",
    Span.SPAN_KIND_INTERNAL: "internal",
}


def decode_kind(kind: int) -> str:
    """Map a ``Span.SpanKind`` value to its lowercase name (``"unspecified"`` if unknown)."""
    return _SPAN_KINDS.get(kind, "unspecified")


def decode_status(status: Optional[Status]) -> Tuple[int, bool]:
    """Return ``(status_code, is_error)`` for a span status.

    A missing status is treated as ``STATUS_CODE_UNSET``.
    """
    if status is None:
        return int(Status.STATUS_CODE_UNSET), False
    return int(status.code), status.code == Status.STATUS_CODE_ERROR


def resolve_sample_rate(
    attrs: Dict[str, Any],
    keys: Sequence[str] = SAMPLE_RATE_KEYS,
) -> int:
    """Extract the sample rate from *attrs* and remove its key.

    The first of *keys* present wins (case-sensitive).  Numbers and plain ASCII
    decimal strings are clamped to the signed 32-bit range; anything else
    falls back to :data:`DEFAULT_SAMPLE_RATE`.  A rate of ``0`` means "not
    sampled down" and is reported as ``1``.

    The key is deleted only when it existed; with no key, *attrs* is left
    untouched.
    """
    key = next((k for k in keys if k in attrs), None)
    if key is None:
        return DEFAULT_SAMPLE_RATE

    value = attrs.pop(key)
    sample_rate = DEFAULT_SAMPLE_RATE

    if isinstance(value, str) and not _DECIMAL_RE.fullmatch(value):
        logger.debug("Unparsable %s=%r, using default sample rate", key, value)
    elif isinstance(value, (int, float, str)) and not isinstance(value, bool):
        try:
            sample_rate = _clamp_int32(int(value))
        except (ValueError, OverflowError):
            logger.debug("Unparsable %s=%r, using default sample rate", key, value)
    else:
        logger.debug("Ignoring %s of type %s", key, type(value).__name__)

    if sample_rate == 0:
        sample_rate = DEFAULT_SAMPLE_RATE
    return sample_rate


def _clamp_int32(value: int) -> int:
    return max(INT32_MIN, min(INT32_MAX, value))


__all__ = [
    "DEFAULT_SAMPLE_RATE",
    "SAMPLE_RATE_KEYS",
    "decode_kind",
    "decode_status",
    "resolve_sample_rate",
]
