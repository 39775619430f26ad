"""FastAPI application serving the MCP tools over streamable HTTP."""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mcp.server.fastmcp import FastMCP

from shared.clients.dms.DMSClientInterface import DMSClientInterface
from shared.helper.HelperConfig import HelperConfig

app_version = os.getenv("APP_VERSION", "unknown")


def create_app(helper_config: HelperConfig, dms_client: DMSClientInterface, mcp: FastMCP) -> FastAPI:
    """Build the HTTP application around an MCP server.

    The MCP endpoint is served at /mcp. Clients on the older SSE transport connect at
    GET /sse and post messages to /messages/. GET /health reports the Paperless-NGX connection.

    Args:
        helper_config (HelperConfig): The application config.
        dms_client (DMSClientInterface): The DMS client, booted in the lifespan.
        mcp (FastMCP): The MCP server with all tools registered.

    Returns:
        FastAPI: The application to pass to uvicorn.
    """
    logging = helper_config.get_logger()
    # creates the session manager, must happen before the lifespan runs
    mcp_app = mcp.streamable_http_app()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # when the app starts
        app.state.logging = logging
        app.state.helper_config = helper_config
        app.state.dms_client = dms_client

        logging.info("Booting DMS client...")
        await dms_client.boot()
        await check_connection(dms_client, logging)

        async with mcp.session_manager.run():
            logging.info("Paperless-NGX MCP server ready.", color="green")
            # while the app is running...
            yield

        # when the app shuts down, close the client connection
        logging.info("Shutting down, closing DMS client...")
        await dms_client.close()
        logging.info("DMS client closed.")

    app = FastAPI(
        title="paperless_tool_bridge",
        description="MCP tool server giving AI agents access to a Paperless-NGX instance via POST /mcp.",
        version=app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Mcp-Session-Id"],
    )

    @app.get("/health")
    async def health() -> dict:
        try:
            result: httpx.Response = await dms_client.do_healthcheck()
            reachable = result.is_success
        except httpx.HTTPError:
            reachable = False
        return {"status": "ok", "paperless": "reachable" if reachable else "unreachable"}

    # sse routes must precede the catch-all mount of the streamable app
    app.router.routes.extend(mcp.sse_app().routes)
    app.mount("/", mcp_app)
    return app


async def check_connection(dms_client: DMSClientInterface, logging) -> None:
    """Check connectivity to Paperless-NGX on startup.

    Failures are non-fatal: the server stays up and every tool call reports the backend error.
    """
    try:
        result: httpx.Response = await dms_client.do_healthcheck()
    except httpx.HTTPError as e:
        logging.warning("Paperless-NGX is not reachable: %s. Tool calls will fail until it is.", e)
        return
    if not result.is_success:
        logging.warning(
            "Paperless-NGX answered the health check with status %d. Check URL and API token.",
            result.status_code,
        )
