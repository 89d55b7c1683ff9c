# SPDX-FileCopyrightText: 2026 The Spanfold Authors
# SPDX-License-Identifier: Apache-2.0

"""Trace and span identifier encoding."""

from __future__ import annotations

TRACE_ID_SHORT_LENGTH = 8
TRACE_ID_LONG_LENGTH = 16

_ZERO_HALF = bytes(TRACE_ID_SHORT_LENGTH)


def encode_id(raw: bytes) -> str:
    """Return the lowercase hex form of a trace or span id.

    A 128-bit id whose upper 64 bits are zero is a zero-padded 64-bit id
    (e.g. ``0000000000000000f798a1e7f33c8af6``) and is encoded from its
    trailing eight bytes only.  Any other length is encoded verbatim.
    """
    if len(raw) == TRACE_ID_LONG_LENGTH and raw[:TRACE_ID_SHORT_LENGTH] == _ZERO_HALF:
        raw = raw[TRACE_ID_SHORT_LENGTH:]
    return bytes(raw).hex()


__all__ = ["TRACE_ID_LONG_LENGTH", "TRACE_ID_SHORT_LENGTH", "encode_id"]
