from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from isucondition.core.config import Settings, get_settings
from isucondition.db.session import AsyncSessionLocal
from isucondition.models.entities import User
from isucondition.services.graph import ConditionScoreWeights
from isucondition.services.jia import JIAClient

jia_client = JIAClient(timeout=get_settings().jia_request_timeout)

SESSION_USER_KEY = "jia_user_id"


async def get_db_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_app_settings() -> Settings:
    return get_settings()


async def get_jia_client() -> JIAClient:
    yield jia_client


def get_score_weights(settings: Settings = Depends(get_app_settings)) -> ConditionScoreWeights:
    return ConditionScoreWeights(
        info=settings.score_weight_info,
        warning=settings.score_weight_warning,
        critical=settings.score_weight_critical,
    )


async def get_current_user(
    request: Request,
    session: AsyncSession = Depends(get_db_session),
) -> User:
    jia_user_id = request.session.get(SESSION_USER_KEY)
    if not jia_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="you are not signed in")

    user = await session.get(User, jia_user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="you are not signed in")

    return user
