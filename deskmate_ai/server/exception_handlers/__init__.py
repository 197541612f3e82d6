"""
Exception handlers for the DeskMate-AI server.

This package contains the exception handlers for domain errors and the
global fallback, and a setup function to register them with the app.
"""

from fastapi import FastAPI

from deskmate_ai.agent_core.errors import SessionNotFoundError
from deskmate_ai.core.database.errors import RecordConflictError, RecordNotFoundError
from deskmate_ai.core.logging_config import get_logger
from deskmate_ai.llm.errors import ProviderError
from deskmate_ai.server.services.chat_service import NoApiConfigurationError

from .domain_handlers import (
    no_api_configuration_handler,
    provider_error_handler,
    record_conflict_handler,
    record_not_found_handler,
    session_not_found_handler,
)
from .global_handler import global_exception_handler

logger = get_logger(__name__)


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(SessionNotFoundError, session_not_found_handler)
    app.add_exception_handler(RecordNotFoundError, record_not_found_handler)
    app.add_exception_handler(RecordConflictError, record_conflict_handler)
    app.add_exception_handler(NoApiConfigurationError, no_api_configuration_handler)
    app.add_exception_handler(ProviderError, provider_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")


__all__ = ["setup_exception_handlers"]
