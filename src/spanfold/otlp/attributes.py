# SPDX-FileCopyrightText: 2026 The Spanfold Authors
# SPDX-License-Identifier: Apache-2.0

"""Flatten OTLP ``KeyValue`` lists into plain attribute dicts.

Scalar values map to native Python types.  Nested maps (``kvlist_value``)
are expanded into dotted keys up to ``max_depth`` levels; arrays, bytes and
maps nested deeper than that are stored as JSON text so the result stays flat.
"""

from __future__ import annotations

import base64
import json
from typing import Any, Dict, Iterable, Optional

from opentelemetry.proto.common.v1.common_pb2 import AnyValue, KeyValue

DEFAULT_MAX_DEPTH = 5


def any_value_to_python(value: AnyValue) -> Any:
    """Convert an ``AnyValue`` into the equivalent Python value.

    Arrays become lists and maps become dicts, recursively.  Bytes are
    returned as base64 text.  An unset value returns ``None``.
    """
    which = value.WhichOneof("value")
    if which == "string_value":
        return value.string_value
    if which == "bool_value":
        return value.bool_value
    if which == "int_value":
        return value.int_value
    if which == "double_value":
        return value.double_value
    if which == "bytes_value":
        return base64.b64encode(value.bytes_value).decode("ascii")
    if which == "array_value":
        return [any_value_to_python(v) for v in value.array_value.values]
    if which == "kvlist_value":
        return {kv.key: any_value_to_python(kv.value) for kv in value.kvlist_value.values}
    return None


def flatten_attributes(
    attributes: Optional[Iterable[KeyValue]],
    dest: Dict[str, Any],
    prefix: str = "",
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> None:
    """Write *attributes* into *dest*, overwriting keys that already exist.

    Args:
        attributes: OTLP key/value pairs; ``None`` or empty is a no-op.
        dest: Destination dict, mutated in place.
        prefix: Prepended to every key (used for nested maps).
        max_depth: How many levels of nested maps are expanded into
            dotted keys before the remainder is stored as JSON.
    """
    if not attributes:
        return
    _flatten(attributes, dest, prefix, 0, max_depth)


def _flatten(
    attributes: Iterable[KeyValue],
    dest: Dict[str, Any],
    prefix: str,
    depth: int,
    max_depth: int,
) -> None:
    for attr in attributes:
        if not attr.key:
            continue
        key = prefix + attr.key
        value = attr.value
        which = value.WhichOneof("value")

        if which in ("string_value", "bool_value", "int_value", "double_value", "bytes_value"):
            dest[key] = any_value_to_python(value)
        elif which == "array_value":
            dest[key] = _to_json(any_value_to_python(value))
        elif which == "kvlist_value":
            if depth < max_depth:
                _flatten(value.kvlist_value.values, dest, key + ".", depth + 1, max_depth)
            else:
                dest[key] = _to_json(any_value_to_python(value))
        # unset values carry nothing worth storing


def _to_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


__all__ = ["DEFAULT_MAX_DEPTH", "any_value_to_python", "flatten_attributes"]
