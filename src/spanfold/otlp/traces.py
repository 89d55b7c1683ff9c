# SPDX-FileCopyrightText: 2026 The Spanfold Authors
# SPDX-License-Identifier: Apache-2.0

"""Translate OTLP trace export requests into flat events.

OTLP structure::

    ExportTraceServiceRequest
      └─ ResourceSpans      → one Batch
           └─ ScopeSpans
                └─ Span     → one Event

Each event's top-level attributes are span metadata merged with the
resource, scope and span attributes (in that order, later wins).  The
nested ``resourceAttributes``, ``spanAttributes`` and ``eventAttributes``
maps keep each level separately.
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from opentelemetry.proto.collector.trace.v1.trace_service_pb2 import ExportTraceServiceRequest
from opentelemetry.proto.common.v1.common_pb2 import InstrumentationScope
from opentelemetry.proto.resource.v1.resource_pb2 import Resource
from opentelemetry.proto.trace.v1.trace_pb2 import Span

from spanfold.models.events import Batch, Event, TranslationResult, timestamp_from_unix_nano
from spanfold.otlp.attributes import flatten_attributes
from spanfold.otlp.classification import ClassificationLabels, classify, normalize_classification
from spanfold.otlp.ids import encode_id
from spanfold.otlp.request import (
    DatasetResolver,
    RequestInfo,
    decode_trace_request,
    default_dataset_resolver,
)
from spanfold.otlp.spans import decode_kind, decode_status, resolve_sample_rate

if TYPE_CHECKING:
    from spanfold.sdk.config import TranslatorConfig

logger = logging.getLogger(__name__)

SIGNAL_TYPE = "trace"
_NANOS_PER_MILLI = 1_000_000.0


def translate_trace_request(
    request: ExportTraceServiceRequest,
    request_info: Optional[RequestInfo] = None,
    *,
    dataset_resolver: Optional[DatasetResolver] = None,
    config: Optional[TranslatorConfig] = None,
) -> TranslationResult:
    """Translate a decoded OTLP trace request.

    Args:
        request: The decoded export request.
        request_info: Request metadata, passed to *dataset_resolver*.
        dataset_resolver: ``(request_info, resource_attrs) -> dataset``.
            Defaults to :func:`~spanfold.otlp.request.default_dataset_resolver`
            with the configured default dataset.
        config: Translator configuration; env/default config if omitted.

    Returns:
        One :class:`Batch` per resource group, in request order.
    """
    if config is None:
        from spanfold.sdk.config import TranslatorConfig as ConfigClass

        config = ConfigClass()

    resolve_dataset = dataset_resolver or functools.partial(
        default_dataset_resolver, default_dataset=config.default_dataset
    )

    batches: List[Batch] = []
    for resource_spans in request.resource_spans:
        resource = resource_spans.resource if resource_spans.HasField("resource") else None
        resource_attrs = _resource_attributes(resource, config)

        # seed classification from the resource alone
        resource_labels: Optional[ClassificationLabels] = None
        if resource is not None:
            resource_labels = classify(resource.attributes, rules=config.category_rules)

        dataset = resolve_dataset(request_info, resource_attrs)
        events: List[Event] = []

        for scope_spans in resource_spans.scope_spans:
            scope = scope_spans.scope if scope_spans.HasField("scope") else None
            scope_attrs = _scope_attributes(scope, config)

            scope_labels = resource_labels
            if scope is not None:
                scope_labels = normalize_classification(resource_labels, scope.attributes, rules=config.category_rules)

            for span in scope_spans.spans:
                events.append(_translate_span(span, resource_attrs, scope_attrs, scope_labels, config))

        batches.append(Batch(dataset=dataset, size_bytes=resource_spans.ByteSize(), events=events))

    result = TranslationResult(request_size=request.ByteSize(), batches=batches)
    logger.debug(
        "Translated OTLP trace request: %d bytes, %d batches, %d events",
        result.request_size,
        len(result.batches),
        result.event_count,
    )
    return result


def translate_trace_request_from_bytes(
    body: bytes,
    request_info: RequestInfo,
    *,
    dataset_resolver: Optional[DatasetResolver] = None,
    config: Optional[TranslatorConfig] = None,
) -> TranslationResult:
    """Decode a raw OTLP/HTTP body, then translate it.

    Raises:
        RequestDecodeError: If the body cannot be decoded.  Nothing is
            translated in that case.
    """
    request = decode_trace_request(body, request_info.content_type, request_info.content_encoding)
    return translate_trace_request(request, request_info, dataset_resolver=dataset_resolver, config=config)


def _resource_attributes(resource: Optional[Resource], config: TranslatorConfig) -> Dict[str, Any]:
    attrs: Dict[str, Any] = {}
    if resource is not None:
        flatten_attributes(resource.attributes, attrs, max_depth=config.max_attribute_depth)
    return attrs


def _scope_attributes(scope: Optional[InstrumentationScope], config: TranslatorConfig) -> Dict[str, Any]:
    attrs: Dict[str, Any] = {}
    if scope is None:
        return attrs
    if scope.name:
        attrs["library.name"] = scope.name
    if scope.version:
        attrs["library.version"] = scope.version
    flatten_attributes(scope.attributes, attrs, max_depth=config.max_attribute_depth)
    return attrs


def _translate_span(
    span: Span,
    resource_attrs: Dict[str, Any],
    scope_attrs: Dict[str, Any],
    scope_labels: Optional[ClassificationLabels],
    config: TranslatorConfig,
) -> Event:
    span_kind = decode_kind(span.kind)
    status = span.status if span.HasField("status") else None
    status_code, is_error = decode_status(status)

    attrs: Dict[str, Any] = {
        "traceTraceID": encode_id(span.trace_id),
        "traceSpanID": encode_id(span.span_id),
        "type": span_kind,
        "spanKind": span_kind,
        "spanName": span.name,
        # signed: a span that ends before it starts keeps its negative duration
        "durationMs": (span.end_time_unix_nano - span.start_time_unix_nano) / _NANOS_PER_MILLI,
        "startTime": span.start_time_unix_nano,
        "endTime": span.end_time_unix_nano,
        "statusCode": status_code,
        "error": is_error,
        "spanNumLinks": len(span.links),
        "spanNumEvents": len(span.events),
        "meta.signal_type": SIGNAL_TYPE,
    }
    if span.parent_span_id:
        attrs["traceParentID"] = encode_id(span.parent_span_id)
    if status is not None and status.message:
        attrs["statusMessage"] = status.message

    span_attrs: Dict[str, Any] = {}
    flatten_attributes(span.attributes, span_attrs, max_depth=config.max_attribute_depth)

    # user attributes named like metadata keys (error, durationMs, type, ...)
    # replace the derived values; later layers win
    attrs.update(resource_attrs)
    attrs.update(scope_attrs)
    attrs.update(span_attrs)

    labels = normalize_classification(scope_labels, span.attributes, rules=config.category_rules)
    attrs.update(labels.to_attributes())

    # every attribute layer is merged before the sample rate is read
    sample_rate = resolve_sample_rate(attrs, config.sample_rate_keys)

    nested_resource = dict(resource_attrs)
    for key in ("library.name", "library.version"):
        if key in scope_attrs:
            nested_resource[key] = scope_attrs[key]
    if is_error:
        nested_resource["error"] = True

    nested_span = dict(span_attrs)
    nested_span.update(labels.to_attributes())

    nested_events: Dict[str, Any] = {}
    for span_event in span.events:
        flatten_attributes(span_event.attributes, nested_events, max_depth=config.max_attribute_depth)

    attrs["resourceAttributes"] = nested_resource
    attrs["spanAttributes"] = nested_span
    attrs["eventAttributes"] = nested_events
    attrs["time"] = span.start_time_unix_nano

    return Event(
        attributes=attrs,
        timestamp=timestamp_from_unix_nano(span.start_time_unix_nano),
        sample_rate=sample_rate,
    )


__all__ = ["SIGNAL_TYPE", "translate_trace_request", "translate_trace_request_from_bytes"]
