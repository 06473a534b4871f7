import logging
from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from isucondition.core.config import Settings
from isucondition.deps import get_app_settings, get_current_user, get_db_session
from isucondition.models.entities import Isu, IsuCondition
from isucondition.schemas.condition import ConditionIn, ConditionOut
from isucondition.services.condition_level import is_valid_condition_format
from isucondition.services.conditions import annotate_conditions, parse_condition_levels
from isucondition.services.timestamps import from_unix

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/condition", tags=["conditions"])


def _parse_unix(value: str | None, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"bad format: {name}") from None


@router.get("/{jia_isu_uuid}", response_model=list[ConditionOut])
async def list_isu_conditions(
    jia_isu_uuid: str,
    end_time: str | None = None,
    condition_level: str | None = None,
    start_time: str | None = None,
    user=Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
):
    end = from_unix(_parse_unix(end_time, "end_time"))
    if not condition_level:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="missing: condition_level")
    levels = parse_condition_levels(condition_level)
    start = from_unix(_parse_unix(start_time, "start_time")) if start_time else None

    isu_name = (
        await session.execute(
            select(Isu.name).where(Isu.jia_isu_uuid == jia_isu_uuid, Isu.jia_user_id == user.jia_user_id)
        )
    ).scalar_one_or_none()
    if isu_name is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not found: isu")

    query = select(IsuCondition).where(
        IsuCondition.jia_isu_uuid == jia_isu_uuid,
        IsuCondition.timestamp < end,
    )
    if start is not None:
        query = query.where(IsuCondition.timestamp >= start)
    result = await session.execute(query.order_by(IsuCondition.timestamp.desc()))

    annotated = annotate_conditions(result.scalars().all(), isu_name, levels, settings.condition_limit)
    return [ConditionOut.model_validate(asdict(item)) for item in annotated]


@router.post("/{jia_isu_uuid}", status_code=status.HTTP_202_ACCEPTED)
async def post_isu_conditions(
    jia_isu_uuid: str,
    payload: Any = Body(None),
    session: AsyncSession = Depends(get_db_session),
):
    if not isinstance(payload, list):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="bad request body")
    try:
        conditions = [ConditionIn.model_validate(item) for item in payload]
    except ValidationError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="bad request body") from None
    if not conditions:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="bad request body")

    count = (
        await session.execute(select(func.count()).select_from(Isu).where(Isu.jia_isu_uuid == jia_isu_uuid))
    ).scalar_one()
    if count == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not found: isu")

    for cond in conditions:
        if not is_valid_condition_format(cond.condition):
            await session.rollback()
            logger.info("Rejected condition batch for isu %s: %r", jia_isu_uuid, cond.condition)
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="bad request body")
        session.add(
            IsuCondition(
                jia_isu_uuid=jia_isu_uuid,
                timestamp=from_unix(cond.timestamp),
                is_sitting=cond.is_sitting,
                condition=cond.condition,
                message=cond.message,
            )
        )

    await session.commit()
    return Response(status_code=status.HTTP_202_ACCEPTED)
