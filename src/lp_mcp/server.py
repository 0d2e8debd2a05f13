"""Model Context Protocol server exposing the LP reader."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Optional

from fastmcp import FastMCP
from fastmcp.tools.tool import ToolResult

from . import __version__
from lpformat.config import configure_logging, load_config_or_defaults
from lpformat.reader import LpFileReader

LOGGER = logging.getLogger("lp_mcp.server")

INSTRUCTIONS = """Use lp-mcp to check LP (.lp) models before handing them to a solver. Call inspect_lp with LP text (or inspect_lp_file with a path) and report the objective, constraint and variable counts from the structured payload. If the payload is not valid, fix the reported line and call the tool again.

LP Format Guide:

- Objective: Begin with "Maximize" or "Minimize" on its own line, followed by one or more named objectives, e.g. "obj: 3 x1 + 4 x2".
- Constraints: Introduced by "Subject To". Each constraint has an optional name and colon, a linear expression, a relational operator (<=, >=, =) and a numeric right-hand side, e.g. "c1: 0.333 x1 + 2 x2 <= 10". A long expression may continue on the following lines.
- Bounds: Introduced by "Bounds". One bound per line: "x1 <= 40", "2 <= x4", "0 <= x1 <= 40", "x3 = 5" or "x2 free". Bounds may only name variables used in the objective or constraints.
- Variable Types: "Binaries" and "Generals" sections list binary and integer variables separated by whitespace.
- End: The model ends with the line "End".
- Comments start with a backslash and run to the end of the line.
"""

INSPECT_LP_DESCRIPTION = (
    "Reads LP (.lp) text into a structured model without solving it. "
    "Output lists objectives, constraints and variables with bounds and types, "
    "or the line and section of the first problem found."
)

INSPECT_LP_FILE_DESCRIPTION = (
    "Reads an LP (.lp) file from the server's filesystem into a structured model. "
    "Output matches inspect_lp."
)


def _to_tool_result(reader: LpFileReader) -> ToolResult:
    payload = reader.to_payload()
    if reader.error is not None:
        error = reader.error
        LOGGER.warning("LP reading failed in section %s: %s", error.section, error)
        return ToolResult(
            content=f"LP reading failed in section {error.section}: {error}",
            structured_content=payload,
        )
    return ToolResult(content=payload["summary"], structured_content=payload)


class LPInspectHandler:
    """Business logic for the inspect_lp and inspect_lp_file tools."""

    def __init__(self, *, instructions: str | None = None) -> None:
        self.instructions = instructions or INSTRUCTIONS

    def inspect_lp(self, lp_code: str) -> ToolResult:
        if not lp_code or not lp_code.strip():
            raise ValueError("lp_code is required")

        LOGGER.info("Tool call received: inspect_lp")
        return _to_tool_result(LpFileReader.from_text(lp_code, source="<lp_code>"))

    def inspect_lp_file(self, path: str) -> ToolResult:
        if not path or not path.strip():
            raise ValueError("path is required")

        LOGGER.info("Tool call received: inspect_lp_file (%s)", path)
        return _to_tool_result(LpFileReader(Path(path).expanduser()))


def build_fastmcp_server(handler: LPInspectHandler) -> FastMCP:
    server = FastMCP(
        name="lp-mcp",
        version=__version__,
        instructions=handler.instructions,
    )

    @server.tool(name="inspect_lp", description=INSPECT_LP_DESCRIPTION)
    def inspect_lp_tool(lp_code: str) -> ToolResult:
        return handler.inspect_lp(lp_code=lp_code)

    @server.tool(name="inspect_lp_file", description=INSPECT_LP_FILE_DESCRIPTION)
    def inspect_lp_file_tool(path: str) -> ToolResult:
        return handler.inspect_lp_file(path=path)

    return server


async def _serve_stdio(server: FastMCP, log_level: str) -> None:
    await server.run_stdio_async(show_banner=False, log_level=log_level)


async def _serve_http(server: FastMCP, host: str, port: int, log_level: str) -> None:
    await server.run_http_async(
        transport="streamable-http",
        host=host,
        port=port,
        path="/mcp",
        show_banner=False,
        log_level=log_level,
    )


def run(argv: Optional[list[str]] = None) -> int:
    """Run the LP MCP server."""
    parser = argparse.ArgumentParser(description="lp-mcp server")
    transport_group = parser.add_mutually_exclusive_group()
    transport_group.add_argument("--stdio", action="store_true", help="stdio transport (default)")
    transport_group.add_argument("--http", action="store_true", help="streamable HTTP transport")
    parser.add_argument("--http-host")
    parser.add_argument("--http-port", type=int)
    parser.add_argument("--log-level")
    parser.add_argument("--config", help="YAML config file (default: repo_root/config.yaml)")
    args = parser.parse_args(argv)

    config = load_config_or_defaults(args.config, "mcp_server", LOGGER)
    log_level = configure_logging(config, args.log_level)

    fastmcp_server = build_fastmcp_server(LPInspectHandler())
    try:
        if args.http:
            http_host = args.http_host or config.get("http_host", "127.0.0.1")
            http_port = args.http_port or config.get("http_port", 8765)
            LOGGER.info("Starting HTTP MCP server on %s:%s", http_host, http_port)
            asyncio.run(_serve_http(fastmcp_server, http_host, http_port, log_level))
        else:
            LOGGER.info("Starting stdio MCP server")
            asyncio.run(_serve_stdio(fastmcp_server, log_level))
    except KeyboardInterrupt:
        LOGGER.info("Server interrupted by user")
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
