# SPDX-FileCopyrightText: 2026 The Spanfold Authors
# SPDX-License-Identifier: Apache-2.0

"""TranslatingSpanExporter: translate SDK spans in-process.

Lets an application that runs the OpenTelemetry SDK feed its own finished
spans through the translator without a collector in between:

    provider.add_span_processor(
        SimpleSpanProcessor(TranslatingSpanExporter(sink=store_batches))
    )

The spans are encoded exactly as the OTLP exporter would send them, so the
sink sees the same events a remote receiver would produce.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from opentelemetry.exporter.otlp.proto.common.trace_encoder import encode_spans
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult

from spanfold.models.events import TranslationResult
from spanfold.otlp.request import DatasetResolver, RequestInfo
from spanfold.otlp.traces import translate_trace_request
from spanfold.sdk.config import TranslatorConfig

logger = logging.getLogger(__name__)

TranslationSink = Callable[[TranslationResult], None]


class TranslatingSpanExporter(SpanExporter):
    """Span exporter that hands translated batches to *sink*.

    A sink that raises fails the export; the error is logged and the SDK
    sees :attr:`SpanExportResult.FAILURE`.
    """

    def __init__(
        self,
        sink: TranslationSink,
        request_info: Optional[RequestInfo] = None,
        dataset_resolver: Optional[DatasetResolver] = None,
        config: Optional[TranslatorConfig] = None,
    ) -> None:
        self._sink = sink
        self._request_info = request_info or RequestInfo()
        self._dataset_resolver = dataset_resolver
        self._config = config or TranslatorConfig()
        self._shutdown = False

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        if self._shutdown:
            logger.warning("Exporter already shutdown, ignoring batch")
            return SpanExportResult.FAILURE

        request = encode_spans(spans)
        result = translate_trace_request(
            request,
            self._request_info,
            dataset_resolver=self._dataset_resolver,
            config=self._config,
        )

        try:
            self._sink(result)
        except Exception as exc:
            logger.error("Translation sink failed for %d spans: %s", len(spans), exc, exc_info=True)
            return SpanExportResult.FAILURE
        return SpanExportResult.SUCCESS

    def shutdown(self) -> None:
        self._shutdown = True

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return True
