# SPDX-FileCopyrightText: 2026 The Spanfold Authors
# SPDX-License-Identifier: Apache-2.0

"""Spanfold configuration."""

from __future__ import annotations

from spanfold.sdk.config import TranslatorConfig

__all__ = ["TranslatorConfig"]
