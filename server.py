"""FastMCP entry point for the diff reviewer."""

from __future__ import annotations

import logging

from fastmcp import FastMCP

from diff_reviewer.config import (
    SERVER_HOST,
    SERVER_NAME,
    SERVER_PORT,
    SERVER_TRANSPORT,
    SERVER_VERSION,
)
from diff_reviewer.mcp_tools import register_tools

# ── Logging ──────────────────────────────────────────────────────────────────
# Everything goes to stderr; stdout belongs to the stdio transport.

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
    datefmt="%H:%M:%S",
)
logging.getLogger("git").setLevel(logging.WARNING)


def create_server() -> FastMCP:
    """Create and configure the FastMCP server instance."""
    mcp = FastMCP(
        name=SERVER_NAME,
        version=SERVER_VERSION,
    )
    register_tools(mcp)
    return mcp


# Module-level server instance (used by FastMCP CLI and stdio transport)
mcp = create_server()


def main() -> None:
    """Entry point: stdio by default, streamable HTTP when configured."""
    log = logging.getLogger(__name__)
    log.info("Starting %s v%s (%s)", SERVER_NAME, SERVER_VERSION, SERVER_TRANSPORT)
    try:
        if SERVER_TRANSPORT == "stdio":
            mcp.run()
        else:
            log.info("Listening on %s:%d", SERVER_HOST, SERVER_PORT)
            mcp.run(
                transport=SERVER_TRANSPORT,
                host=SERVER_HOST,
                port=SERVER_PORT,
            )
    except OSError as e:
        log.error("Server failed to start: %s", e)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
