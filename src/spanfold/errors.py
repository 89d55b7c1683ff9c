# SPDX-FileCopyrightText: 2026 The Spanfold Authors
# SPDX-License-Identifier: Apache-2.0

"""Exceptions raised by spanfold.

Translation of an already-decoded request never fails; only turning raw
request bytes into a request message can.
"""

from __future__ import annotations


class SpanfoldError(Exception):
    """Base class for all spanfold errors."""


class RequestDecodeError(SpanfoldError):
    """The request body could not be decoded into an OTLP trace request.

    The underlying parse error is always available as ``__cause__``.
    """

    def __init__(self, message: str, content_type: str = "", content_encoding: str = "") -> None:
        super().__init__(message)
        self.content_type = content_type
        self.content_encoding = content_encoding
