"""Image proxy URL builder with an MCP tool surface."""

from .utils.proxy import (
    PROXY_IMAGE_PATH,
    EncodingScheme,
    ProxyTarget,
    absolute_proxy_url,
    build_proxy_url,
    parse_proxy_url,
)

__version__ = "0.1.0"

__all__ = [
    "PROXY_IMAGE_PATH",
    "EncodingScheme",
    "ProxyTarget",
    "absolute_proxy_url",
    "build_proxy_url",
    "parse_proxy_url",
]
