"""
Exception handlers for domain errors.

- ``SessionNotFoundError`` and ``RecordNotFoundError``: 404.
- ``NoApiConfigurationError``: 400.
- ``RecordConflictError``: 409.
- ``ProviderError``: 502, with the vendor's status code and raw body when known.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from deskmate_ai.agent_core.errors import SessionNotFoundError
from deskmate_ai.core.database.errors import RecordConflictError, RecordNotFoundError
from deskmate_ai.core.logging_config import get_logger
from deskmate_ai.llm.errors import ProviderError, ProviderHTTPError, ProviderResponseError, StreamingError
from deskmate_ai.server.services.chat_service import NoApiConfigurationError

logger = get_logger(__name__)


async def session_not_found_handler(request: Request, exc: SessionNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def record_not_found_handler(request: Request, exc: RecordNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def record_conflict_handler(request: Request, exc: RecordConflictError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


async def no_api_configuration_handler(request: Request, exc: NoApiConfigurationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


async def provider_error_handler(request: Request, exc: ProviderError) -> JSONResponse:
    """Report a failed provider call with whatever diagnostics the error carries."""
    logger.warning(f"Provider call failed in {request.method} {request.url.path}: {exc}")
    content = {"detail": str(exc), "provider": exc.provider, "error_type": type(exc).__name__}
    if isinstance(exc, ProviderHTTPError):
        content["status_code"] = exc.status_code
        content["body"] = exc.body
    elif isinstance(exc, ProviderResponseError):
        content["body"] = exc.body
    elif isinstance(exc, StreamingError):
        content["partial_content"] = exc.partial_content
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=content)
