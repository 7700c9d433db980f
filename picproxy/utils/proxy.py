"""Image proxy URL building and parsing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
from urllib.parse import quote, unquote, urlparse

from .base64url import decode_base64url_text, encode_base64url_text
from .config import peek_config

logger = logging.getLogger(__name__)

PROXY_IMAGE_PATH = "/api/proxy/img.png"


class EncodingScheme(str, Enum):
    """How the target URL is carried in the ``url`` query parameter.

    Values are the wire tags the proxy endpoint switches its decode on.
    """

    PERCENT_ENCODING = "encodeURIComponent"
    BASE64URL_ENCODING = "encodeBase64URL"


@dataclass(frozen=True)
class ProxyTarget:
    url: str
    scheme: EncodingScheme


def _coerce_scheme(scheme: Union[EncodingScheme, str]) -> EncodingScheme:
    if isinstance(scheme, EncodingScheme):
        return scheme
    try:
        return EncodingScheme(scheme)
    except ValueError:
        accepted = "/".join(s.value for s in EncodingScheme)
        raise ValueError(f"unknown encoding scheme {scheme!r}, expected {accepted}") from None


def _encode_component(text: str) -> str:
    # only RFC 3986 unreserved characters stay literal; lone surrogates
    # are carried through as their UTF-8 style bytes
    return quote(text, safe="", errors="surrogatepass")


def build_proxy_url(
    target_url: str,
    scheme: Union[EncodingScheme, str] = EncodingScheme.PERCENT_ENCODING,
) -> str:
    """Return the relative proxy path that fetches ``target_url``."""

    kind = _coerce_scheme(scheme)
    if kind is EncodingScheme.BASE64URL_ENCODING:
        encoded = encode_base64url_text(target_url)
    else:
        encoded = _encode_component(target_url)
    logger.debug("proxy url built: type=%s length=%d", kind.value, len(encoded))
    return f"{PROXY_IMAGE_PATH}?type={kind.value}&url={encoded}"


def parse_proxy_url(proxy_url: str) -> ProxyTarget:
    """Recover the target URL and scheme from a built proxy URL.

    Absolute URLs are accepted as long as their path is the proxy endpoint.
    A missing ``type`` means percent-encoding, the builder's default.
    """

    parsed = urlparse(proxy_url)
    if parsed.path != PROXY_IMAGE_PATH:
        raise ValueError(f"not an image proxy url: {proxy_url!r}")

    # "+" stays literal, unlike parse_qs
    params: dict[str, str] = {}
    for pair in parsed.query.split("&"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        params.setdefault(unquote(key), value)

    if "url" not in params:
        raise ValueError(f"proxy url has no url parameter: {proxy_url!r}")

    kind = _coerce_scheme(unquote(params.get("type", EncodingScheme.PERCENT_ENCODING.value)))
    raw = params["url"]
    if kind is EncodingScheme.BASE64URL_ENCODING:
        target = decode_base64url_text(unquote(raw))
    else:
        target = unquote(raw, errors="surrogatepass")
    return ProxyTarget(url=target, scheme=kind)


def absolute_proxy_url(
    target_url: str,
    scheme: Union[EncodingScheme, str] = EncodingScheme.PERCENT_ENCODING,
    origin: Optional[str] = None,
) -> str:
    """Prefix the proxy path with ``origin`` or the configured public origin.

    Without an explicit origin and before init_runtime() the relative path is
    returned unchanged.
    """

    relative = build_proxy_url(target_url, scheme)
    if origin is None:
        cfg = peek_config()
        origin = cfg.public_origin if cfg is not None else None
    if not origin:
        return relative
    return f"{origin.rstrip('/')}{relative}"


__all__ = [
    "PROXY_IMAGE_PATH",
    "EncodingScheme",
    "ProxyTarget",
    "absolute_proxy_url",
    "build_proxy_url",
    "parse_proxy_url",
]
