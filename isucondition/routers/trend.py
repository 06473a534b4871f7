from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from isucondition.deps import get_db_session
from isucondition.models.entities import Isu, IsuCondition
from isucondition.schemas.condition import TrendOut
from isucondition.services.conditions import build_character_trend

router = APIRouter(prefix="/api/trend", tags=["trend"])


@router.get("", response_model=list[TrendOut])
async def get_trend(session: AsyncSession = Depends(get_db_session)):
    """Latest condition level of every Isu, grouped by character."""
    characters = (
        await session.execute(
            select(Isu.character)
            .where(Isu.character.is_not(None))
            .group_by(Isu.character)
            .order_by(Isu.character)
        )
    ).scalars().all()

    trends = []
    for character in characters:
        isus = (await session.execute(select(Isu).where(Isu.character == character))).scalars().all()
        latest = []
        for isu in isus:
            condition = (
                await session.execute(
                    select(IsuCondition)
                    .where(IsuCondition.jia_isu_uuid == isu.jia_isu_uuid)
                    .order_by(IsuCondition.timestamp.desc())
                    .limit(1)
                )
            ).scalar_one_or_none()
            if condition is not None:
                latest.append((isu, condition))
        trends.append(TrendOut.model_validate(asdict(build_character_trend(character, latest))))
    return trends
