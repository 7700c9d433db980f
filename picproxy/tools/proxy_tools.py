from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from ..utils.config import get_config, init_runtime
from ..utils.proxy import (
    EncodingScheme,
    absolute_proxy_url,
    build_proxy_url,
    parse_proxy_url,
)

logger = logging.getLogger(__name__)
mcp = FastMCP("picproxy")


@mcp.tool()
async def proxy_picture(url: str, type: str = EncodingScheme.PERCENT_ENCODING.value) -> dict[str, Any]:
    """Build the local proxy URL that fetches the image at ``url``.

    ``type`` is ``encodeURIComponent`` (default) or ``encodeBase64URL``.
    """

    try:
        proxy_url = build_proxy_url(url, type)
    except ValueError as e:
        logger.warning("proxy_picture rejected type=%r: %s", type, e)
        return {"success": False, "url": url, "error": str(e)}

    cfg = get_config()
    absolute_url = absolute_proxy_url(url, type) if cfg.has_public_origin else None
    return {
        "success": True,
        "proxy_url": proxy_url,
        "absolute_url": absolute_url,
        "type": EncodingScheme(type).value,
    }


@mcp.tool()
async def resolve_proxy_picture(proxy_url: str) -> dict[str, Any]:
    """Decode a proxy URL back into the original image URL."""

    try:
        target = parse_proxy_url(proxy_url)
    except ValueError as e:
        logger.warning("resolve_proxy_picture failed for %r: %s", proxy_url, e)
        return {"success": False, "proxy_url": proxy_url, "error": str(e)}
    return {"success": True, "url": target.url, "type": target.scheme.value}


def main() -> None:
    cfg = init_runtime()
    logger.info("picproxy MCP Server starting...")
    if cfg.public_origin:
        logger.info("Public origin: %s", cfg.public_origin)
    logger.info("Waiting for MCP client connection...")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
