"""
Domain entities for presentation-order.

PresentationSession is owned by the session registry and only read by the
ordering engine. Slot is the engine's own data: one row per presenting group,
holding its 1-based position within the session and the derived start time.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from ..infra.db import Base


class PresentationSession(Base):
    """
    A scheduled presentation event (e.g. a defense day).

    Every slot in the session lasts ``duration_per_slot`` minutes and the first
    one starts at ``start_datetime``. ``end_datetime`` is informational and
    plays no part in time derivation.
    """

    __tablename__ = "presentation_sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    start_datetime: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    duration_per_slot: Mapped[int] = mapped_column(
        Integer, nullable=False, comment="Minutes allotted to each presenting group"
    )
    end_datetime: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        CheckConstraint("duration_per_slot > 0 AND duration_per_slot <= 1440", name="duration_in_range"),
    )

    def __repr__(self) -> str:
        return (
            f"<PresentationSession(id={self.id}, start_datetime={self.start_datetime}, "
            f"duration_per_slot={self.duration_per_slot})>"
        )


class Slot(Base):
    """
    One position in a session's presentation order.

    ``id`` is stable for the slot's lifetime; ``position`` and ``scheduled_at``
    are rewritten whenever the session is resequenced.
    """

    __tablename__ = "presentation_slots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("presentation_sessions.id", ondelete="CASCADE"), nullable=False
    )
    group_id: Mapped[int] = mapped_column(Integer, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, comment="1-based, dense per session")
    scheduled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="start_datetime + (position - 1) * duration_per_slot",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("session_id", "position", name="uq_presentation_slots_session_position"),
        UniqueConstraint("session_id", "group_id", name="uq_presentation_slots_session_group"),
        Index("ix_presentation_slots_session_id", "session_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Slot(id={self.id}, session_id={self.session_id}, group_id={self.group_id}, "
            f"position={self.position})>"
        )
