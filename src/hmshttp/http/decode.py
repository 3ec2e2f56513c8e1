# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Status validation and JSON decoding of response bodies."""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Sequence
from typing import Any, Callable, TypeVar, Union

from ..errors import DecodeError, UnexpectedStatusError

T = TypeVar("T")

Destination = Union[type[T], Callable[[Any], T], None]

DEFAULT_SUCCESS_STATUS = 200

_JSON_TYPES: tuple[type, ...] = (dict, list, str, int, float, bool)


def acceptance_set(expected_status_codes: Sequence[int] | None) -> tuple[int, ...]:
    """The caller's expected codes, or just 200 when none were given."""
    if expected_status_codes:
        return tuple(int(code) for code in expected_status_codes)
    return (DEFAULT_SUCCESS_STATUS,)


def check_status(status_code: int, body: bytes, expected_status_codes: Sequence[int] | None) -> None:
    accepted = acceptance_set(expected_status_codes)
    if status_code not in accepted:
        raise UnexpectedStatusError(status_code, body, accepted)


def _build_dataclass(cls: type, data: Any) -> Any:
    if not isinstance(data, dict):
        raise TypeError(f"expected a JSON object for {cls.__name__}, got {type(data).__name__}")
    names = {f.name for f in dataclasses.fields(cls) if f.init}
    return cls(**{key: value for key, value in data.items() if key in names})


def coerce(data: Any, destination: Destination) -> Any:
    """Shape an already-parsed JSON value into ``destination``."""
    if destination is None:
        return data
    if isinstance(destination, type) and dataclasses.is_dataclass(destination):
        return _build_dataclass(destination, data)
    model_validate = getattr(destination, "model_validate", None)
    if callable(model_validate):
        return model_validate(data)
    if destination in _JSON_TYPES:
        # bool is an int subclass; JSON true must not satisfy int or float.
        if isinstance(data, bool) and destination is not bool:
            raise TypeError(f"expected {destination.__name__}, got bool")
        if destination is float and isinstance(data, int):
            return float(data)
        if not isinstance(data, destination):
            raise TypeError(f"expected {destination.__name__}, got {type(data).__name__}")
        return data
    if callable(destination):
        return destination(data)
    raise TypeError(f"unsupported decode destination: {destination!r}")


def decode_body(body: bytes, destination: Destination = None) -> Any:
    """
    Decode a JSON body into ``destination``.

    An empty body is never treated as success.
    """
    if not body or not body.strip():
        raise DecodeError("response body is empty", body=body)
    try:
        data = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError(f"response body is not valid JSON: {exc}", body=body) from exc
    try:
        return coerce(data, destination)
    except (TypeError, ValueError, KeyError) as exc:
        name = getattr(destination, "__name__", repr(destination))
        raise DecodeError(f"cannot decode response into {name}: {exc}", body=body) from exc


__all__ = [
    "DEFAULT_SUCCESS_STATUS",
    "Destination",
    "acceptance_set",
    "check_status",
    "coerce",
    "decode_body",
]
