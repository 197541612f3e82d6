"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS),
registers the exception handlers and includes all API routers.
"""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from deskmate_ai.core.database.session import engine, init_db
from deskmate_ai.core.logging_config import get_logger, setup_logging

from .api.v1 import agent, api_configs, chats, events, health
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates the chat store tables, seeds the default provider configuration
    and opens the HTTP client shared by provider calls on startup; closes the
    client and disposes of the database engine on shutdown.
    """
    logger.info("Starting up DeskMate-AI Server...")
    await init_db()
    logger.info("Database initialized successfully")
    app.state.http_client = httpx.AsyncClient(timeout=settings.llm.http_timeout)

    try:
        yield
    finally:
        logger.info("Shutting down DeskMate-AI Server...")
        await app.state.http_client.aclose()
        app.state.http_client = None
        await engine.dispose()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    DeskMate-AI Server API

    Backend of the DeskMate desktop assistant: chats persisted locally, completions
    from OpenAI-compatible, Anthropic, Google, Ollama and custom endpoints, and an
    agent runtime that acts on the local machine under a permission policy.
    """,
    version="0.1.0",
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)

setup_exception_handlers(app)

app.include_router(health.router, tags=["health"])
app.include_router(agent.router, prefix=f"{constant.API_V1_STR}/agent", tags=["agent"])
app.include_router(chats.router, prefix=f"{constant.API_V1_STR}/chats", tags=["chats"])
app.include_router(api_configs.router, prefix=f"{constant.API_V1_STR}/api-configs", tags=["api-configs"])
app.include_router(events.router, prefix=f"{constant.API_V1_STR}/events", tags=["events"])


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "deskmate_ai.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )
