from __future__ import annotations

from datetime import datetime
from typing import List

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, LargeBinary, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from isucondition.db.base import Base


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class User(TimestampMixin, Base):
    __tablename__ = "user"

    jia_user_id: Mapped[str] = mapped_column(String(255), primary_key=True)

    isus: Mapped[List["Isu"]] = relationship(back_populates="owner")


class Isu(TimestampMixin, Base):
    __tablename__ = "isu"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    jia_isu_uuid: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255))
    image: Mapped[bytes | None] = mapped_column(LargeBinary)
    character: Mapped[str | None] = mapped_column(String(255), index=True)
    jia_user_id: Mapped[str] = mapped_column(ForeignKey("user.jia_user_id", ondelete="CASCADE"), index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    owner: Mapped[User] = relationship(back_populates="isus")


class IsuCondition(TimestampMixin, Base):
    __tablename__ = "isu_condition"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    jia_isu_uuid: Mapped[str] = mapped_column(String(255), index=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    is_sitting: Mapped[bool] = mapped_column(Boolean, nullable=False)
    condition: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False, default="")


class IsuAssociationConfig(Base):
    __tablename__ = "isu_association_config"

    name: Mapped[str] = mapped_column(String(255), primary_key=True)
    url: Mapped[str] = mapped_column(String(255), nullable=False)
