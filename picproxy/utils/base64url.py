"""Unpadded base64url text codec used for obfuscated proxy targets."""

from __future__ import annotations

import base64
import binascii
import re

_BASE64URL_RE = re.compile(r"[A-Za-z0-9_-]*")


def encode_base64url_text(text: str) -> str:
    """Encode UTF-8 text as base64url with the ``=`` padding stripped.

    The result only contains ``[A-Za-z0-9_-]`` and can be placed in a query
    string without further escaping. Lone surrogates are encoded rather than
    rejected, so any ``str`` is accepted.
    """

    encoded = base64.urlsafe_b64encode(text.encode("utf-8", "surrogatepass")).decode("ascii")
    return encoded.rstrip("=")


def decode_base64url_text(encoded: str) -> str:
    """Decode base64url (padded or not) back to UTF-8 text."""

    data = encoded.strip().rstrip("=")
    if not _BASE64URL_RE.fullmatch(data):
        raise ValueError("invalid base64url data: unexpected characters")
    if len(data) % 4 == 1:
        raise ValueError(f"invalid base64url length: {len(data)}")
    padded = data + "=" * (-len(data) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except binascii.Error as e:
        raise ValueError(f"invalid base64url data: {e}") from e
    try:
        return raw.decode("utf-8", "surrogatepass")
    except UnicodeDecodeError as e:
        raise ValueError(f"base64url payload is not UTF-8: {e}") from e


__all__ = ["decode_base64url_text", "encode_base64url_text"]
