# SPDX-FileCopyrightText: 2026 The Spanfold Authors
# SPDX-License-Identifier: Apache-2.0

"""Transaction classification of spans.

Every span is labelled with three values derived from its attributes:

- ``transaction.type``: ``"web"`` once any key starts with ``http.``,
  ``user_agent.`` or ``rpc.``; ``"non-web"`` otherwise.
- ``transaction.category``: the label of the first rule in
  :data:`CATEGORY_RULES` whose attribute key is present.
- ``transaction.sub_category``: that attribute's value.

Labels are computed at the resource, scope and span level and cascaded
inwards with :func:`normalize_classification`:

- ``web`` is sticky: an outer ``web`` stays ``web``.
- An inner level that finds no category inherits the outer category and
  sub-category.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from opentelemetry.proto.common.v1.common_pb2 import KeyValue

from spanfold.otlp.attributes import any_value_to_python

TRANSACTION_TYPE = "transaction.type"
TRANSACTION_CATEGORY = "transaction.category"
TRANSACTION_SUB_CATEGORY = "transaction.sub_category"

WEB_TRANSACTION = "web"
NON_WEB_TRANSACTION = "non-web"
UNKNOWN = "unknown"

WEB_KEY_PREFIXES: Tuple[str, ...] = ("http.", "user_agent.", "rpc.")

# Ordered by priority; the first key present wins.
CATEGORY_RULES: Tuple[Tuple[str, str], ...] = (
    ("http.request.method", "HTTP"),
    ("db.system", "Databases"),
    ("messaging.system", "Messaging queues"),
    ("rpc.system", "RPC Systems"),
    ("aws.s3.bucket", "Object Store"),
    ("exception.type", "Exceptions"),
    ("faas.trigger", "FAAS (Function as a service)"),
    ("feature_flag.key", "Feature Flag"),
    ("telemetry.sdk.language", "Programming Language"),
)


@dataclass(frozen=True)
class ClassificationLabels:
    """The three transaction labels of a span."""

    type: str = NON_WEB_TRANSACTION
    category: str = UNKNOWN
    sub_category: str = UNKNOWN

    @property
    def is_web(self) -> bool:
        return self.type == WEB_TRANSACTION

    @property
    def has_category(self) -> bool:
        return self.category not in ("", UNKNOWN)

    def to_attributes(self) -> Dict[str, str]:
        return {
            TRANSACTION_TYPE: self.type,
            TRANSACTION_CATEGORY: self.category,
            TRANSACTION_SUB_CATEGORY: self.sub_category,
        }


def classify(
    *attribute_lists: Optional[Iterable[KeyValue]],
    rules: Sequence[Tuple[str, str]] = CATEGORY_RULES,
) -> ClassificationLabels:
    """Classify a span from one or more attribute lists.

    Keys are lowercased and trimmed; later lists overwrite earlier ones.

    Example::

        >>> classify([KeyValue(key="rpc.system", value=AnyValue(string_value="grpc"))])
        ClassificationLabels(type='web', category='RPC Systems', sub_category='grpc')
    """
    span_type = NON_WEB_TRANSACTION
    attributes: Dict[str, str] = {}

    for attrs in attribute_lists:
        for attr in attrs or ():
            key = attr.key.strip().lower()
            attributes[key] = _label_text(any_value_to_python(attr.value))
            if key.startswith(WEB_KEY_PREFIXES):
                span_type = WEB_TRANSACTION

    for key, category in rules:
        if key in attributes:
            return ClassificationLabels(span_type, category, attributes[key])

    return ClassificationLabels(span_type)


def normalize_classification(
    previous: Optional[ClassificationLabels],
    *attribute_lists: Optional[Iterable[KeyValue]],
    rules: Sequence[Tuple[str, str]] = CATEGORY_RULES,
) -> ClassificationLabels:
    """Classify a nested level and cascade the outer level's labels into it.

    Args:
        previous: Labels of the enclosing level, or ``None`` at the top.
        attribute_lists: Attributes of the current level.
        rules: Category rule table.
    """
    fresh = classify(*attribute_lists, rules=rules)
    if previous is None:
        return fresh

    span_type = WEB_TRANSACTION if previous.is_web else fresh.type

    if fresh.has_category:
        return ClassificationLabels(span_type, fresh.category, fresh.sub_category)
    return ClassificationLabels(span_type, previous.category, previous.sub_category)


def _label_text(value: Any) -> str:
    """Render a rule attribute's value as a sub-category.

    Numbers and bools are rendered as text (``"7"``, ``"true"``) rather than
    dropped, so ``rpc.system=7`` still yields a sub-category.  Arrays, maps
    and bytes give ``""``.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return ""


__all__ = [
    "CATEGORY_RULES",
    "ClassificationLabels",
    "NON_WEB_TRANSACTION",
    "TRANSACTION_CATEGORY",
    "TRANSACTION_SUB_CATEGORY",
    "TRANSACTION_TYPE",
    "UNKNOWN",
    "WEB_TRANSACTION",
    "classify",
    "normalize_classification",
]
