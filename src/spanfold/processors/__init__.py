# SPDX-FileCopyrightText: 2026 The Spanfold Authors
# SPDX-License-Identifier: Apache-2.0

"""OpenTelemetry SDK adapters."""

from spanfold.processors.exporter import TranslatingSpanExporter

__all__ = ["TranslatingSpanExporter"]
