from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from isucondition.core.config import Settings
from isucondition.models.entities import IsuAssociationConfig

JIA_SERVICE_URL = "jia_service_url"


async def get_association_url(session: AsyncSession, name: str) -> Optional[str]:
    config = await session.get(IsuAssociationConfig, name)
    return config.url if config else None


async def set_association_url(session: AsyncSession, name: str, url: str) -> None:
    """Upsert an association URL; the caller commits."""
    config = await session.get(IsuAssociationConfig, name)
    if config:
        config.url = url
    else:
        session.add(IsuAssociationConfig(name=name, url=url))


async def get_jia_service_url(session: AsyncSession, settings: Settings) -> str:
    url = await get_association_url(session, JIA_SERVICE_URL)
    return url or settings.default_jia_service_url
