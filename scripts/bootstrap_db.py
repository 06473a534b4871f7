from __future__ import annotations

import argparse
import asyncio
import time

from sqlalchemy import select

from isucondition.core.config import get_settings
from isucondition.db.base import Base
from isucondition.db.session import AsyncSessionLocal, engine
from isucondition.models.entities import Isu, IsuCondition, User
from isucondition.services.timestamps import SECONDS_PER_HOUR, from_unix, truncate_hour

DEMO_ISU_UUID = "0694e4d7-dfce-4aec-b7ca-887ac42cfb8f"
DEMO_CONDITIONS = (
    "is_broken=false,is_dirty=false,is_overweight=false",
    "is_broken=false,is_dirty=true,is_overweight=false",
    "is_broken=true,is_dirty=true,is_overweight=false",
    "is_broken=true,is_dirty=true,is_overweight=true",
)


async def bootstrap(seed_demo: bool, jia_user_id: str) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if not seed_demo:
        print("Database ready. No demo fixtures created.")
        return

    async with AsyncSessionLocal() as session:
        user = await session.get(User, jia_user_id)
        if user is None:
            session.add(User(jia_user_id=jia_user_id))
            await session.flush()

        isu = (await session.execute(select(Isu).where(Isu.jia_isu_uuid == DEMO_ISU_UUID))).scalar_one_or_none()
        if isu is None:
            session.add(
                Isu(
                    jia_isu_uuid=DEMO_ISU_UUID,
                    name="Demo isu",
                    image=get_settings().default_icon_path.read_bytes(),
                    character="いじっぱり",
                    jia_user_id=jia_user_id,
                )
            )
            # one condition every 20 minutes over the last day
            start = truncate_hour(int(time.time())) - 24 * SECONDS_PER_HOUR
            for i in range(72):
                session.add(
                    IsuCondition(
                        jia_isu_uuid=DEMO_ISU_UUID,
                        timestamp=from_unix(start + i * 20 * 60),
                        is_sitting=i % 3 == 0,
                        condition=DEMO_CONDITIONS[i % len(DEMO_CONDITIONS)],
                        message="demo",
                    )
                )

        await session.commit()

    print("Demo data ready!")
    print(f"JIA user id: {jia_user_id}")
    print(f"Isu uuid: {DEMO_ISU_UUID}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Initialize database and optional demo fixtures.")
    parser.add_argument("--seed-demo", action="store_true", help="Seed a demo user, isu and a day of conditions")
    parser.add_argument("--demo-user", default="isucon", help="Demo JIA user id")
    args = parser.parse_args()
    asyncio.run(bootstrap(args.seed_demo, args.demo_user))


if __name__ == "__main__":
    main()
