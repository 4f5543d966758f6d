"""Percent-encoding for V4 signed URLs.

Cloud Storage re-derives the canonical request from the URL it receives, so
the path and the query string must be encoded exactly as the verifier does.
The two contexts use different character sets: ``/`` survives in paths but
is escaped inside query keys and values.
"""

from __future__ import annotations

from typing import AbstractSet

_CONTROLS = frozenset(chr(code) for code in range(0x20)) | {"\x7f"}

PATH_ENCODE_SET: frozenset[str] = _CONTROLS | frozenset(' "<>`#?{}[]%')

QUERY_ENCODE_SET: frozenset[str] = _CONTROLS | frozenset(' "#$%&\'()*+,/:;<=>?@[\\]^`{|}')


def percent_encode(value: str, charset: AbstractSet[str]) -> str:
    """Replace every character of ``value`` found in ``charset`` with ``%XX``.

    Only ASCII characters can be members of the sets; anything else is
    passed through untouched.
    """
    return "".join(f"%{ord(ch):02X}" if ch in charset else ch for ch in value)


def encode_path(value: str) -> str:
    return "/".join(percent_encode(segment, PATH_ENCODE_SET) for segment in value.split("/"))


def encode_query(value: str) -> str:
    return percent_encode(value, QUERY_ENCODE_SET)
