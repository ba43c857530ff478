"""MCP stdio server exposing the MobSF tool catalog."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from catalog import build_default_registry
from config import MobSFConfig, load_mobsf_config
from errors import ConfigurationError
from mobsf_client import MobSFClient
from tools import ToolRouter

SERVER_NAME = "mobsf-security-suite"
SERVER_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def build_server(router: ToolRouter) -> Server:
    """Wire a router into an MCP low-level server.

    Input validation in the MCP layer is off; the router validates and
    reports violations as ordinary tool errors.
    """
    server: Server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [types.Tool.model_validate(spec.to_mcp_definition()) for spec in router.list_tools()]

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> types.CallToolResult:
        return types.CallToolResult.model_validate(await router.call_tool(name, arguments))

    return server


async def serve(config: MobSFConfig) -> None:
    async with MobSFClient(config) as client:
        router = ToolRouter(build_default_registry(), client)
        server = build_server(router)
        logger.info("serving %d tools against %s", len(router.registry), config.base_url)
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())


def configure_logging(level: str) -> None:
    # stdout carries the MCP stream; logs go to stderr only.
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve MobSF security analysis tools over MCP (stdio)")
    parser.add_argument("--config", type=Path, help="Path to TOML config file with a [mobsf] table")
    parser.add_argument("--base-url", help="MobSF base URL (overrides MOBSF_BASE_URL)")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level for stderr output (default: MOBSF_MCP_LOG_LEVEL or INFO)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level or os.getenv("MOBSF_MCP_LOG_LEVEL") or "INFO")

    env = dict(os.environ)
    if args.base_url:
        env["MOBSF_BASE_URL"] = args.base_url

    try:
        config = load_mobsf_config(args.config, env=env)
    except ConfigurationError as exc:
        logger.error("configuration error: %s", exc.message)
        return 2

    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        logger.info("interrupted, shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
