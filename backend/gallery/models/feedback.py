"""Guest feedback models: per-event settings, photo feedback, rate limits, word filters."""
from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from gallery.db import Base


class FeedbackType(str, enum.Enum):
    RATING = "rating"
    LIKE = "like"
    COMMENT = "comment"
    FAVORITE = "favorite"


class WordSeverity(str, enum.Enum):
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class EventFeedbackSettings(Base):
    """Which feedback features guests get for one event."""

    __tablename__ = "event_feedback_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    event_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("events.id", ondelete="CASCADE"), unique=True
    )
    feedback_enabled: Mapped[bool] = mapped_column(Boolean, default=True, server_default="1")
    allow_ratings: Mapped[bool] = mapped_column(Boolean, default=True, server_default="1")
    allow_likes: Mapped[bool] = mapped_column(Boolean, default=True, server_default="1")
    allow_comments: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0")
    allow_favorites: Mapped[bool] = mapped_column(Boolean, default=True, server_default="1")
    require_name_email: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0")
    moderate_comments: Mapped[bool] = mapped_column(Boolean, default=True, server_default="1")
    show_feedback_to_guests: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="1"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<EventFeedbackSettings event={self.event_id} enabled={self.feedback_enabled}>"


class PhotoFeedback(Base):
    """A single rating, like, comment or favorite left by a guest."""

    __tablename__ = "photo_feedback"
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_photo_feedback_rating"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    photo_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("photos.id", ondelete="CASCADE"), index=True
    )
    event_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("events.id", ondelete="CASCADE"), index=True
    )
    feedback_type: Mapped[FeedbackType] = mapped_column(String(20), nullable=False, index=True)
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    comment_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    guest_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    guest_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    guest_identifier: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_approved: Mapped[bool] = mapped_column(Boolean, default=True, server_default="1")
    is_hidden: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<PhotoFeedback id={self.id} photo={self.photo_id} type={self.feedback_type}>"


class FeedbackRateLimit(Base):
    """Action counter for one guest/event/action within the current window."""

    __tablename__ = "feedback_rate_limits"
    __table_args__ = (
        Index("ix_feedback_rate_limits_lookup", "identifier", "event_id", "action_type"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    identifier: Mapped[str] = mapped_column(String(64), nullable=False)
    event_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("events.id", ondelete="CASCADE")
    )
    action_type: Mapped[str] = mapped_column(String(20), nullable=False)
    action_count: Mapped[int] = mapped_column(Integer, default=1, server_default="1")
    window_start: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), index=True
    )


class FeedbackWordFilter(Base):
    """Word screened out of guest comments."""

    __tablename__ = "feedback_word_filters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    word: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    severity: Mapped[WordSeverity] = mapped_column(
        String(20), default=WordSeverity.MODERATE, server_default=WordSeverity.MODERATE.value
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="1")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<FeedbackWordFilter word={self.word!r} severity={self.severity}>"
