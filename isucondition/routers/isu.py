import logging
from dataclasses import asdict

import httpx
from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from isucondition.core.config import Settings
from isucondition.deps import get_app_settings, get_current_user, get_db_session, get_jia_client, get_score_weights
from isucondition.models.entities import Isu, IsuCondition
from isucondition.schemas.condition import ConditionOut
from isucondition.schemas.graph import GraphOut
from isucondition.schemas.isu import IsuListItem, IsuOut
from isucondition.services.app_settings import get_jia_service_url
from isucondition.services.condition_level import classify_condition
from isucondition.services.conditions import annotate
from isucondition.services.graph import ConditionRecord, ConditionScoreWeights, generate_graph
from isucondition.services.jia import JIAClient, JIAServiceError
from isucondition.services.timestamps import truncate_hour

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/isu", tags=["isu"])


async def _get_owned_isu(session: AsyncSession, jia_isu_uuid: str, user) -> Isu:
    result = await session.execute(
        select(Isu).where(Isu.jia_isu_uuid == jia_isu_uuid, Isu.jia_user_id == user.jia_user_id)
    )
    isu = result.scalar_one_or_none()
    if isu is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not found: isu")
    return isu


@router.get("", response_model=list[IsuListItem])
async def list_isus(
    user=Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    result = await session.execute(
        select(Isu).where(Isu.jia_user_id == user.jia_user_id).order_by(Isu.id.desc())
    )
    items = []
    for isu in result.scalars().all():
        last_condition = (
            await session.execute(
                select(IsuCondition)
                .where(IsuCondition.jia_isu_uuid == isu.jia_isu_uuid)
                .order_by(IsuCondition.timestamp.desc())
                .limit(1)
            )
        ).scalar_one_or_none()

        latest = None
        if last_condition is not None:
            level = classify_condition(last_condition.condition)
            latest = ConditionOut.model_validate(asdict(annotate(last_condition, isu.name, level)))

        items.append(
            IsuListItem(
                id=isu.id,
                jia_isu_uuid=isu.jia_isu_uuid,
                name=isu.name,
                character=isu.character,
                latest_isu_condition=latest,
            )
        )
    return items


@router.post("", response_model=IsuOut, status_code=status.HTTP_201_CREATED)
async def register_isu(
    jia_isu_uuid: str = Form(...),
    isu_name: str = Form(...),
    image: UploadFile | None = File(None),
    user=Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
    jia: JIAClient = Depends(get_jia_client),
):
    if image is not None:
        image_bytes = await image.read()
    else:
        image_bytes = settings.default_icon_path.read_bytes()

    isu = Isu(jia_isu_uuid=jia_isu_uuid, name=isu_name, image=image_bytes, jia_user_id=user.jia_user_id)
    session.add(isu)
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="duplicated: isu") from None

    service_url = await get_jia_service_url(session, settings)
    try:
        character = await jia.activate(
            service_url,
            settings.post_isucondition_target_base_url,
            jia_isu_uuid,
        )
    except JIAServiceError as exc:
        logger.error("%s", exc)
        await session.rollback()
        raise HTTPException(status_code=exc.status_code, detail="JIAService returned error") from None
    except httpx.HTTPError as exc:
        logger.error("failed to request to JIAService: %s", exc)
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="failed to request to JIAService"
        ) from None

    isu.character = character
    await session.commit()
    await session.refresh(isu)
    return IsuOut.model_validate(isu)


@router.get("/{jia_isu_uuid}", response_model=IsuOut)
async def get_isu(
    jia_isu_uuid: str,
    user=Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    isu = await _get_owned_isu(session, jia_isu_uuid, user)
    return IsuOut.model_validate(isu)


@router.get("/{jia_isu_uuid}/icon")
async def get_isu_icon(
    jia_isu_uuid: str,
    user=Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    isu = await _get_owned_isu(session, jia_isu_uuid, user)
    return Response(content=isu.image or b"", media_type="application/octet-stream")


@router.get("/{jia_isu_uuid}/graph", response_model=list[GraphOut], response_model_exclude_none=True)
async def get_isu_graph(
    jia_isu_uuid: str,
    datetime: str | None = None,
    user=Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
    weights: ConditionScoreWeights = Depends(get_score_weights),
):
    if not datetime:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="missing: datetime")
    try:
        graph_date = truncate_hour(int(datetime))
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="bad format: datetime") from None

    await _get_owned_isu(session, jia_isu_uuid, user)

    result = await session.execute(
        select(IsuCondition)
        .where(IsuCondition.jia_isu_uuid == jia_isu_uuid)
        .order_by(IsuCondition.timestamp.asc())
    )
    records = [ConditionRecord.from_entity(row) for row in result.scalars().all()]
    entries = generate_graph(records, graph_date, weights)
    return [GraphOut.model_validate(asdict(entry)) for entry in entries]
