"""Command line entry point of the Paperless-NGX tool server.

Runs the MCP server on stdio (default) or, with --http, as a streamable HTTP
server behind FastAPI/uvicorn.
"""

import argparse
import asyncio
import os
import sys
from typing import Sequence

from server.api_server import app_version, create_app
from server.mcp_server import build_mcp_server
from shared.clients.dms.paperless.DMSClientPaperless import DMSClientPaperless
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging

DEFAULT_PORT = 3000

USAGE = "Usage: paperless-tool-bridge --base-url <url> --token <token> [--http] [--port <port>] [--public-url <url>]"
USAGE_ENV = "Or set DMS_PAPERLESS_BASE_URL and DMS_PAPERLESS_API_KEY (or PAPERLESS_URL and PAPERLESS_API_KEY)."

# env names used by earlier releases, read when the current name is not set
LEGACY_ENV_KEYS = {
    "DMS_PAPERLESS_BASE_URL": "PAPERLESS_URL",
    "DMS_PAPERLESS_API_KEY": "PAPERLESS_API_KEY",
    "DMS_PAPERLESS_PUBLIC_URL": "PAPERLESS_PUBLIC_URL",
}


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="paperless-tool-bridge", description="MCP tool server for Paperless-NGX")
    parser.add_argument("--base-url", help="Paperless-NGX base URL, e.g. http://localhost:8000")
    parser.add_argument("--token", help="Paperless-NGX API token")
    parser.add_argument("--public-url", help="URL users open in the browser, used for document links (defaults to the base URL)")
    parser.add_argument("--http", action="store_true", help="Serve streamable HTTP instead of stdio")
    parser.add_argument("--port", type=int, default=None, help=f"HTTP port (default: {DEFAULT_PORT})")
    return parser.parse_args(argv)


def build_config_overrides(args: argparse.Namespace) -> dict[str, str | None]:
    """
    Map command line flags and legacy env variables onto the config keys.
    Flags win over the environment, current env names win over legacy ones.

    Args:
        args (argparse.Namespace): The parsed command line.

    Returns:
        dict[str, str | None]: Overrides for HelperConfig.
    """
    overrides: dict[str, str | None] = {}
    for key, legacy_key in LEGACY_ENV_KEYS.items():
        if not os.getenv(key) and os.getenv(legacy_key):
            overrides[key] = os.getenv(legacy_key)

    flags = {
        "DMS_PAPERLESS_BASE_URL": args.base_url,
        "DMS_PAPERLESS_API_KEY": args.token,
        "DMS_PAPERLESS_PUBLIC_URL": args.public_url,
        "MCP_PORT": str(args.port) if args.port is not None else None,
    }
    overrides.update({key: value for key, value in flags.items() if value})
    return overrides


async def run_stdio(helper_config: HelperConfig, dms_client: DMSClientPaperless) -> None:
    logging = helper_config.get_logger()
    mcp = build_mcp_server(helper_config, dms_client)

    await dms_client.boot()
    logging.info("Serving Paperless-NGX tools on stdio.", color="green")
    try:
        await mcp.run_stdio_async()
    finally:
        await dms_client.close()


def run_http(helper_config: HelperConfig, dms_client: DMSClientPaperless) -> None:
    import uvicorn

    logging = helper_config.get_logger()
    mcp = build_mcp_server(helper_config, dms_client)
    app = create_app(helper_config, dms_client, mcp)

    host = helper_config.get_string_val("MCP_HOST", default="0.0.0.0")
    port = int(helper_config.get_number_val("MCP_PORT", default=DEFAULT_PORT))
    logging.info(
        "Starting paperless_tool_bridge v%s from root dir: %s on %s:%d...",
        app_version,
        os.environ.get("ROOT_DIR", "unknown"),
        host,
        port,
    )
    uvicorn.run(app, host=host, port=port)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging = setup_logging()
    helper_config = HelperConfig(logger=logging, overrides=build_config_overrides(args))

    try:
        dms_client = DMSClientPaperless(helper_config=helper_config)
    except ValueError as e:
        logging.error("%s", e)
        logging.error(USAGE)
        logging.error(USAGE_ENV)
        sys.exit(1)

    if args.http:
        run_http(helper_config, dms_client)
    else:
        asyncio.run(run_stdio(helper_config, dms_client))


if __name__ == "__main__":
    main()
