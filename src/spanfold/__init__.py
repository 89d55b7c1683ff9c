# SPDX-FileCopyrightText: 2026 The Spanfold Authors
# SPDX-License-Identifier: Apache-2.0

"""Spanfold - OTLP trace translation with transaction classification.

Quick Start::

    from spanfold import RequestInfo, translate_trace_request_from_bytes

    result = translate_trace_request_from_bytes(
        body,
        RequestInfo(content_type="application/x-protobuf", content_encoding="gzip"),
    )
    for batch in result.batches:
        store(batch.dataset, batch.events)
"""

from __future__ import annotations

from spanfold._version import __version__

# Errors
from spanfold.errors import RequestDecodeError, SpanfoldError

# Output model
from spanfold.models.events import Batch, Event, TranslationResult

# Translation
from spanfold.otlp.classification import ClassificationLabels, classify, normalize_classification
from spanfold.otlp.request import RequestInfo, default_dataset_resolver
from spanfold.otlp.traces import translate_trace_request, translate_trace_request_from_bytes

# Configuration
from spanfold.sdk.config import TranslatorConfig

__all__ = [
    "__version__",
    # Translation
    "translate_trace_request",
    "translate_trace_request_from_bytes",
    "RequestInfo",
    "default_dataset_resolver",
    # Classification
    "ClassificationLabels",
    "classify",
    "normalize_classification",
    # Output model
    "Batch",
    "Event",
    "TranslationResult",
    # Configuration
    "TranslatorConfig",
    # Errors
    "SpanfoldError",
    "RequestDecodeError",
]
