import logging

from fastapi import APIRouter, Depends
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from isucondition.deps import get_db_session
from isucondition.models.entities import Isu, IsuAssociationConfig, IsuCondition, User
from isucondition.schemas.user import InitializeRequest, InitializeResponse
from isucondition.services.app_settings import JIA_SERVICE_URL, set_association_url

logger = logging.getLogger(__name__)

router = APIRouter(tags=["initialize"])


@router.post("/initialize", response_model=InitializeResponse)
async def initialize(payload: InitializeRequest, session: AsyncSession = Depends(get_db_session)):
    """Wipe all stored data and point Isu activation at the given JIA service."""
    for model in (IsuCondition, Isu, User, IsuAssociationConfig):
        await session.execute(delete(model))
    await set_association_url(session, JIA_SERVICE_URL, payload.jia_service_url)
    await session.commit()
    logger.info("Initialized with JIA service %s", payload.jia_service_url)
    return InitializeResponse()
