# SPDX-FileCopyrightText: 2026 The Spanfold Authors
# SPDX-License-Identifier: Apache-2.0

"""Shared test fixtures for spanfold tests."""

from __future__ import annotations

import os
from typing import List
from unittest import mock

import pytest
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON

from spanfold.models.events import TranslationResult
from spanfold.processors.exporter import TranslatingSpanExporter
from spanfold.sdk.config import TranslatorConfig


@pytest.fixture(autouse=True)
def clean_spanfold_env():
    """Keep SPANFOLD_* variables from the host out of every test."""
    cleaned = {k: v for k, v in os.environ.items() if not k.startswith("SPANFOLD_")}
    with mock.patch.dict(os.environ, cleaned, clear=True):
        yield


@pytest.fixture
def config():
    """Default translator configuration."""
    return TranslatorConfig()


@pytest.fixture
def translations() -> List[TranslationResult]:
    """Collects every result handed to a translating exporter."""
    return []


@pytest.fixture
def memory_exporter():
    """In-memory exporter for capturing raw SDK spans."""
    return InMemorySpanExporter()


@pytest.fixture
def tracer_provider(translations, memory_exporter):
    """Local TracerProvider wired to a TranslatingSpanExporter and an in-memory exporter."""
    provider = TracerProvider(
        resource=Resource.create({"service.name": "checkout"}),
        sampler=ALWAYS_ON,
    )
    provider.add_span_processor(SimpleSpanProcessor(TranslatingSpanExporter(sink=translations.append)))
    provider.add_span_processor(SimpleSpanProcessor(memory_exporter))
    yield provider
    provider.shutdown()


@pytest.fixture
def tracer(tracer_provider):
    """Get a tracer instance."""
    return tracer_provider.get_tracer("test-tracer", "1.2.3")
