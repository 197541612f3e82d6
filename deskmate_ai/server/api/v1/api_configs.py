"""
Provider Configuration Endpoints.

CRUD for the LLM endpoints chats run against. Saving a configuration with
``is_default`` set clears the flag on every other configuration.
"""

from typing import List

from fastapi import APIRouter, Response, status

from deskmate_ai.core.database import ApiConfig, ApiConfigRepository, RecordNotFoundError
from deskmate_ai.core.models.io import ApiConfigCreate, ApiConfigRead, ApiConfigUpdate
from deskmate_ai.server.services.deps import DbSessionDep

router = APIRouter()

_NOT_NULL_FIELDS = {"name", "api_key", "model", "temperature", "is_default"}


@router.get(
    "",
    response_model=List[ApiConfigRead],
    summary="List API Configurations",
    description="List provider configurations, default first, then by name.",
)
async def list_api_configs(session: DbSessionDep) -> List[ApiConfigRead]:
    return [ApiConfigRead.model_validate(c) for c in await ApiConfigRepository(session).list()]


@router.post(
    "",
    response_model=ApiConfigRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create API Configuration",
)
async def create_api_config(data: ApiConfigCreate, session: DbSessionDep) -> ApiConfigRead:
    config = await ApiConfigRepository(session).create(ApiConfig.model_validate(data))
    return ApiConfigRead.model_validate(config)


@router.get(
    "/default",
    response_model=ApiConfigRead,
    summary="Get Default API Configuration",
    responses={404: {"description": "No default configuration"}},
)
async def get_default_api_config(session: DbSessionDep) -> ApiConfigRead:
    config = await ApiConfigRepository(session).get_default()
    if config is None:
        raise RecordNotFoundError("API configuration", "default")
    return ApiConfigRead.model_validate(config)


@router.get(
    "/{config_id}",
    response_model=ApiConfigRead,
    summary="Get API Configuration",
    responses={404: {"description": "API configuration not found"}},
)
async def get_api_config(config_id: str, session: DbSessionDep) -> ApiConfigRead:
    config = await ApiConfigRepository(session).get_by_id(config_id)
    if config is None:
        raise RecordNotFoundError("API configuration", config_id)
    return ApiConfigRead.model_validate(config)


@router.put(
    "/{config_id}",
    response_model=ApiConfigRead,
    summary="Update API Configuration",
    responses={404: {"description": "API configuration not found"}},
)
async def update_api_config(config_id: str, data: ApiConfigUpdate, session: DbSessionDep) -> ApiConfigRead:
    repo = ApiConfigRepository(session)
    config = await repo.get_by_id(config_id)
    if config is None:
        raise RecordNotFoundError("API configuration", config_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        if value is None and key in _NOT_NULL_FIELDS:
            continue
        setattr(config, key, value)
    return ApiConfigRead.model_validate(await repo.update(config))


@router.delete(
    "/{config_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete API Configuration",
    responses={
        404: {"description": "API configuration not found"},
        409: {"description": "Last configuration, or in use by a chat"},
    },
)
async def delete_api_config(config_id: str, session: DbSessionDep) -> Response:
    if not await ApiConfigRepository(session).delete(config_id):
        raise RecordNotFoundError("API configuration", config_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
