"""Shared utilities for picproxy."""

from .base64url import decode_base64url_text, encode_base64url_text
from .env_parser import load_env_file
from .proxy import EncodingScheme, ProxyTarget, build_proxy_url, parse_proxy_url

__all__ = [
    "EncodingScheme",
    "ProxyTarget",
    "build_proxy_url",
    "decode_base64url_text",
    "encode_base64url_text",
    "load_env_file",
    "parse_proxy_url",
]
