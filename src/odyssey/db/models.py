"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table. Relationships, constraints, and indexes defined here.
Alembic migrations mirror these models.

Key concepts:
- UUID primary keys, stored natively on PostgreSQL and as CHAR(32) elsewhere
- Journal ownership is a plain FK that is never updated after insert
- Dependents (comments, reactions, location, images) cascade with the journal
- The reaction triple is unique at the DB level, so concurrent "add
  reaction" requests cannot create duplicates
"""

import enum
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


class ReactionType(str, enum.Enum):
    """Closed set of reactions a user can leave on a journal."""

    LIKE = "LIKE"
    LOVE = "LOVE"
    WOW = "WOW"
    GLOBE = "GLOBE"


# ══════════════════════════════════════════════════════════════
# Users
# ══════════════════════════════════════════════════════════════


class User(Base):
    """A registered account — the principal behind every token.

    Learn: email is the token subject, so it must be unique. The
    password is only ever stored as a bcrypt hash.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    avatar: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    journals: Mapped[list["Journal"]] = relationship(back_populates="user")


# ══════════════════════════════════════════════════════════════
# Journals and their dependents
# ══════════════════════════════════════════════════════════════


class Journal(Base):
    """A travel journal entry, public or private."""

    __tablename__ = "journals"
    __table_args__ = (
        Index("idx_journals_user", "user_id"),
        Index("idx_journals_public_created", "is_public", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="journals")
    location: Mapped[Optional["Location"]] = relationship(
        back_populates="journal", cascade="all, delete-orphan", uselist=False
    )
    images: Mapped[list["JournalImage"]] = relationship(
        back_populates="journal",
        cascade="all, delete-orphan",
        order_by="JournalImage.position",
    )
    comments: Mapped[list["Comment"]] = relationship(
        back_populates="journal",
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
    )
    reactions: Mapped[list["Reaction"]] = relationship(
        back_populates="journal", cascade="all, delete-orphan"
    )


class Location(Base):
    """Where a journal was written. At most one per journal."""

    __tablename__ = "locations"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    journal_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("journals.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    journal: Mapped["Journal"] = relationship(back_populates="location")


class JournalImage(Base):
    """Image URL attached to a journal. Upload/storage lives elsewhere."""

    __tablename__ = "journal_images"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    journal_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("journals.id", ondelete="CASCADE"), nullable=False
    )
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    position: Mapped[int] = mapped_column(default=0, nullable=False)

    journal: Mapped["Journal"] = relationship(back_populates="images")


class Comment(Base):
    """A comment on a journal.

    Learn: two users may delete it — its author and the owner of the
    journal it sits on. See auth/guard.py.
    """

    __tablename__ = "comments"
    __table_args__ = (Index("idx_comments_journal", "journal_id"),)

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    journal_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("journals.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    journal: Mapped["Journal"] = relationship(back_populates="comments")
    user: Mapped["User"] = relationship()


class Reaction(Base):
    """One (journal, user, type) reaction."""

    __tablename__ = "reactions"
    __table_args__ = (
        UniqueConstraint(
            "journal_id", "user_id", "type", name="uq_reactions_journal_user_type"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    journal_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("journals.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[ReactionType] = mapped_column(
        Enum(ReactionType, name="reaction_type"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    journal: Mapped["Journal"] = relationship(back_populates="reactions")
