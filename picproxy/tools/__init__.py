"""Tool layer for picproxy."""

from .proxy_tools import mcp, proxy_picture, resolve_proxy_picture

__all__ = ["mcp", "proxy_picture", "resolve_proxy_picture"]
