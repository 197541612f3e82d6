"""
Provider configuration repository.

At most one configuration is the default. Saving a configuration with
``is_default`` set clears the flag on every other row in the same commit.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..base import utc_now
from ..entities.api_configs import ApiConfig
from ..entities.chats import Chat
from ..errors import RecordConflictError
from .base import AsyncBaseRepository, QueryBuilder


class ApiConfigRepository(AsyncBaseRepository[ApiConfig]):
    """Repository for provider configurations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ApiConfig)

    async def _clear_other_defaults(self, keep_id: str) -> None:
        stmt = select(ApiConfig).where(ApiConfig.is_default == True, ApiConfig.id != keep_id)  # noqa: E712
        result = await self.session.exec(stmt)
        for other in result.all():
            other.is_default = False
            self.session.add(other)

    async def create(self, config: ApiConfig) -> ApiConfig:
        if config.is_default:
            await self._clear_other_defaults(config.id)
        self.session.add(config)
        await self.session.commit()
        await self.session.refresh(config)
        return config

    async def get_by_id(self, config_id: str) -> Optional[ApiConfig]:
        stmt = select(ApiConfig).where(ApiConfig.id == config_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def update(self, config: ApiConfig) -> ApiConfig:
        config.updated_at = utc_now()
        if config.is_default:
            await self._clear_other_defaults(config.id)
        self.session.add(config)
        await self.session.commit()
        await self.session.refresh(config)
        return config

    async def delete(self, config_id: str) -> bool:
        """
        Delete a configuration.

        Raises:
            RecordConflictError: If it is the last configuration or a chat is pinned to it.
        """
        config = await self.get_by_id(config_id)
        if config is None:
            return False
        if await self.count() <= 1:
            raise RecordConflictError("Cannot delete the last API configuration")
        in_use = await self.session.exec(
            select(func.count()).select_from(Chat).where(Chat.api_config_id == config_id)
        )
        if int(in_use.one()) > 0:
            raise RecordConflictError("Cannot delete API configuration that is being used by chats")
        await self.session.delete(config)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[ApiConfig]:
        """List configurations, default first, then by name."""
        stmt = select(ApiConfig).order_by(ApiConfig.is_default.desc(), ApiConfig.name.asc())  # type: ignore

        if filters:
            stmt = QueryBuilder.apply_filters(stmt, ApiConfig, filters)

        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)

        result = await self.session.exec(stmt)
        return list(result)

    async def get_default(self) -> Optional[ApiConfig]:
        stmt = select(ApiConfig).where(ApiConfig.is_default == True).limit(1)  # noqa: E712
        result = await self.session.exec(stmt)
        return result.first()

    async def count(self) -> int:
        result = await self.session.exec(select(func.count()).select_from(ApiConfig))
        return int(result.one())
