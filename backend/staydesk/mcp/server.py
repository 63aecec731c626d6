"""MCP Server for StayDesk: Streamable HTTP transport on port 8001.

Runs as a standalone service next to the API. Provides tools for availability
checks, reservations, calendars, viewing slots and occupancy analytics.

Uses the FastMCP high-level API with streamable_http_app() for
Streamable HTTP transport (single /mcp endpoint).
"""

import contextlib
import logging

import uvicorn
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route

from staydesk.config import settings
from staydesk.mcp import mcp, set_session_factory

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Database: separate engine for the MCP process
# ---------------------------------------------------------------------------
mcp_engine = create_async_engine(settings.async_database_url, pool_pre_ping=True, pool_size=5, max_overflow=10)
mcp_session_factory = async_sessionmaker(mcp_engine, class_=AsyncSession, expire_on_commit=False)

# Make session factory available to tool modules
set_session_factory(mcp_session_factory)

# ---------------------------------------------------------------------------
# Import tool modules: triggers @mcp.tool() registration
# ---------------------------------------------------------------------------
import staydesk.mcp.tools.analytics_tools  # noqa: F401, E402
import staydesk.mcp.tools.calendar_tools  # noqa: F401, E402
import staydesk.mcp.tools.reservation_tools  # noqa: F401, E402


# ---------------------------------------------------------------------------
# Health check endpoint (not part of MCP, just for Docker healthcheck)
# ---------------------------------------------------------------------------
async def health(request):
    return JSONResponse({"status": "healthy", "service": "staydesk-mcp"})


# ---------------------------------------------------------------------------
# Starlette ASGI app: mounts MCP Streamable HTTP app + health check
# ---------------------------------------------------------------------------
# Create the MCP ASGI sub-app first so session_manager is initialized
mcp_http_app = mcp.streamable_http_app()


@contextlib.asynccontextmanager
async def lifespan(app: Starlette):
    """Manage MCP session manager lifecycle and dispose the engine on exit."""
    async with mcp.session_manager.run():
        logger.info("MCP server started (Streamable HTTP transport)")
        yield
        logger.info("MCP server shutting down")
    await mcp_engine.dispose()


app = Starlette(
    routes=[
        Route("/health", health),
        Mount("/", app=mcp_http_app),
    ],
    lifespan=lifespan,
)

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=8001)
