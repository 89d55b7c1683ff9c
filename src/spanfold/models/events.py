# SPDX-FileCopyrightText: 2026 The Spanfold Authors
# SPDX-License-Identifier: Apache-2.0

"""Output model of a trace translation.

One OTLP request becomes one :class:`TranslationResult`.  Every resource group
in the request becomes one :class:`Batch`, and every span becomes one
:class:`Event` inside that batch.

Invariant: batches keep the order of the resource groups in the request, and
events keep the order of the spans within each group.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def timestamp_from_unix_nano(unix_nano: int) -> datetime:
    """Convert epoch nanoseconds to an aware UTC datetime (microsecond precision)."""
    return _EPOCH + timedelta(microseconds=unix_nano // 1000)


@dataclass(frozen=True)
class Event:
    """A single flattened span, ready for storage."""

    attributes: Dict[str, Any]
    timestamp: datetime
    sample_rate: int = 1


@dataclass(frozen=True)
class Batch:
    """Events of one resource group, bound for one dataset."""

    dataset: str
    size_bytes: int
    events: List[Event] = field(default_factory=list)


@dataclass(frozen=True)
class TranslationResult:
    """Translated form of a whole OTLP trace export request.

    ``request_size`` is the serialized byte size of the entire request.
    """

    request_size: int
    batches: List[Batch] = field(default_factory=list)

    @property
    def event_count(self) -> int:
        return sum(len(batch.events) for batch in self.batches)
