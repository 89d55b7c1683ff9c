# SPDX-FileCopyrightText: 2026 The Spanfold Authors
# SPDX-License-Identifier: Apache-2.0

"""Request metadata, dataset routing and body decoding.

Supported bodies:

- ``application/protobuf`` and ``application/x-protobuf`` (binary OTLP)
- ``application/json`` (OTLP/JSON, hex-encoded ids)

Supported content encodings: identity (empty) and ``gzip``.
"""

from __future__ import annotations

import base64
import gzip
import json
import logging
import string
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from google.protobuf import json_format
from google.protobuf.message import DecodeError
from opentelemetry.proto.collector.trace.v1.trace_service_pb2 import ExportTraceServiceRequest

from spanfold.errors import RequestDecodeError

logger = logging.getLogger(__name__)

DEFAULT_DATASET = "unknown_service"

PROTOBUF_CONTENT_TYPES = ("application/protobuf", "application/x-protobuf")
JSON_CONTENT_TYPE = "application/json"

_CLASSIC_KEY_LENGTH = 32
_HEX_DIGITS = frozenset(string.hexdigits)
_HEX_ID_FIELDS = frozenset({"traceId", "spanId", "parentSpanId"})


@dataclass
class RequestInfo:
    """Ambient metadata of an export request (HTTP headers or gRPC metadata)."""

    api_key: str = ""
    dataset: str = ""
    content_type: str = "application/protobuf"
    content_encoding: str = ""


DatasetResolver = Callable[[Optional[RequestInfo], Dict[str, Any]], str]


def is_classic_api_key(api_key: str) -> bool:
    """Classic keys are 32 hex characters and route by the dataset header."""
    return len(api_key) == _CLASSIC_KEY_LENGTH and all(c in _HEX_DIGITS for c in api_key)


def default_dataset_resolver(
    request_info: Optional[RequestInfo],
    resource_attrs: Dict[str, Any],
    default_dataset: str = DEFAULT_DATASET,
) -> str:
    """Pick the destination dataset of a resource group.

    Classic api keys use the dataset header.  Everything else routes by the
    ``service.name`` resource attribute, with *default_dataset* standing in
    for a missing, blank or ``unknown_service*`` name.
    """
    if request_info is not None and is_classic_api_key(request_info.api_key):
        return request_info.dataset

    service_name = resource_attrs.get("service.name")
    if not isinstance(service_name, str):
        return default_dataset
    service_name = service_name.strip()
    if not service_name or service_name.startswith(DEFAULT_DATASET):
        return default_dataset
    return service_name


def decode_trace_request(
    body: bytes,
    content_type: str = "application/protobuf",
    content_encoding: str = "",
) -> ExportTraceServiceRequest:
    """Decode a raw request body into an ``ExportTraceServiceRequest``.

    Raises:
        RequestDecodeError: If the body cannot be decompressed or parsed, or
            the content type / encoding is not supported.  The original
            exception is chained as ``__cause__``.
    """
    media_type = content_type.split(";", 1)[0].strip().lower()
    encoding = content_encoding.strip().lower()

    try:
        payload = _decompress(body, encoding)
        request = ExportTraceServiceRequest()
        if media_type in PROTOBUF_CONTENT_TYPES:
            request.ParseFromString(payload)
        elif media_type == JSON_CONTENT_TYPE:
            json_format.ParseDict(_hex_ids_to_base64(json.loads(payload)), request)
        else:
            raise ValueError(f"unsupported content type: {content_type!r}")
    except (DecodeError, json_format.ParseError, OSError, EOFError, ValueError, TypeError, RecursionError) as exc:
        logger.warning("Failed to decode OTLP trace request (%s, %s): %s", content_type, content_encoding, exc)
        raise RequestDecodeError(
            f"failed to parse OTLP request body: {exc}",
            content_type=content_type,
            content_encoding=content_encoding,
        ) from exc
    return request


def _decompress(body: bytes, encoding: str) -> bytes:
    if encoding in ("", "identity"):
        return body
    if encoding == "gzip":
        return gzip.decompress(body)
    raise ValueError(f"unsupported content encoding: {encoding!r}")


def _hex_ids_to_base64(node: Any) -> Any:
    """OTLP/JSON carries ids as hex; protobuf JSON expects base64 bytes."""
    if isinstance(node, dict):
        converted = {}
        for key, value in node.items():
            if key in _HEX_ID_FIELDS and isinstance(value, str):
                converted[key] = base64.b64encode(bytes.fromhex(value)).decode("ascii")
            else:
                converted[key] = _hex_ids_to_base64(value)
        return converted
    if isinstance(node, list):
        return [_hex_ids_to_base64(item) for item in node]
    return node


__all__ = [
    "DEFAULT_DATASET",
    "DatasetResolver",
    "RequestInfo",
    "decode_trace_request",
    "default_dataset_resolver",
    "is_classic_api_key",
]
