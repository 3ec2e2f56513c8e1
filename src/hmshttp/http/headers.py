# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header helpers.

HTTP header field names are case-insensitive (RFC 9110) while requests carry
headers as plain dicts, so lookups go through ``header_value``.
"""

from __future__ import annotations

from collections.abc import Mapping


def header_value(headers: Mapping[str, str] | None, name: str, default: str = "") -> str:
    """
    Return a header value using case-insensitive key matching.

    Fast-paths common key casings before falling back to a full scan.
    """
    if not headers or not name:
        return default

    lower = name.lower()
    for key in (name, lower, lower.title()):
        if key in headers:
            value = headers.get(key)
            return default if value is None else str(value).strip()

    for key, value in headers.items():
        if key is not None and str(key).lower() == lower:
            return default if value is None else str(value).strip()

    return default


def merge_headers(content_type: str, custom: Mapping[str, str] | None) -> dict[str, str]:
    """Content-Type first, then custom headers; a custom Content-Type replaces the default."""
    merged: dict[str, str] = {}
    if content_type and not header_value(custom, "Content-Type"):
        merged["Content-Type"] = content_type
    for key, value in (custom or {}).items():
        merged[str(key)] = "" if value is None else str(value)
    return merged


__all__ = ["header_value", "merge_headers"]
