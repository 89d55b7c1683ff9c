# SPDX-FileCopyrightText: 2026 The Spanfold Authors
# SPDX-License-Identifier: Apache-2.0

"""Spanfold data models."""

from __future__ import annotations

from spanfold.models.events import Batch, Event, TranslationResult

__all__ = ["Batch", "Event", "TranslationResult"]
