# SPDX-FileCopyrightText: 2026 The Spanfold Authors
# SPDX-License-Identifier: Apache-2.0

"""OTLP trace translation.

Leaf modules first: attribute flattening, id encoding, span metadata and
classification feed the pipeline in :mod:`spanfold.otlp.traces`.
"""

from __future__ import annotations

from spanfold.otlp.attributes import any_value_to_python, flatten_attributes
from spanfold.otlp.classification import (
    CATEGORY_RULES,
    ClassificationLabels,
    classify,
    normalize_classification,
)
from spanfold.otlp.ids import encode_id
from spanfold.otlp.request import (
    RequestInfo,
    decode_trace_request,
    default_dataset_resolver,
    is_classic_api_key,
)
from spanfold.otlp.spans import decode_kind, decode_status, resolve_sample_rate
from spanfold.otlp.traces import translate_trace_request, translate_trace_request_from_bytes

__all__ = [
    "CATEGORY_RULES",
    "ClassificationLabels",
    "RequestInfo",
    "any_value_to_python",
    "classify",
    "decode_kind",
    "decode_status",
    "decode_trace_request",
    "default_dataset_resolver",
    "encode_id",
    "flatten_attributes",
    "is_classic_api_key",
    "normalize_classification",
    "resolve_sample_rate",
    "translate_trace_request",
    "translate_trace_request_from_bytes",
]
