from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notes_api.db import Base


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Plan(str, enum.Enum):
    """Subscription plan of a tenant."""

    FREE = "FREE"
    PRO = "PRO"

    def can_transition_to(self, target: Plan) -> bool:
        # FREE -> PRO is the only move; PRO -> PRO is the idempotent self-loop
        return target is Plan.PRO


class Tenant(Base):
    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    slug: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(200))
    subscription_plan: Mapped[Plan] = mapped_column(
        Enum(Plan, name="subscription_plan"), default=Plan.FREE, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    users = relationship("User", back_populates="tenant")
