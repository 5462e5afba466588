"""SQLAlchemy ORM models — single source of truth for the database schema.

Declarative mapping in SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Alembic migrations under db/migrations are generated against these.

Integer primary keys: the user id is embedded in session tokens, and tools
and overrides are addressed by id in URLs.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


OVERRIDE_ACTIONS = ("hide", "rename", "replace")


class User(Base):
    """A person who signed in with Google.

    Created on first login and refreshed (name, avatar) on every later
    login. Email is the lookup key; rows are never deleted here.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    google_id: Mapped[Optional[str]] = mapped_column(
        String(255), unique=True, nullable=True
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    # Relationships
    tools: Mapped[list["Tool"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    tool_overrides: Mapped[list["ToolOverride"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )


class Tool(Base):
    """A bookmarked external tool, owned by exactly one user."""

    __tablename__ = "tools"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category_id: Mapped[str] = mapped_column(String(100), nullable=False)
    tool_name: Mapped[str] = mapped_column(String(255), nullable=False)
    tool_url: Mapped[str] = mapped_column(Text, nullable=False)
    icon_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    user: Mapped["User"] = relationship(back_populates="tools")


class ToolOverride(Base):
    """Per-user customization of a catalog tool: hide, rename, or replace it.

    Keyed by (user, category, tool name); writes go through an upsert on
    that key, and the unique constraint keeps it to one row per key.
    """

    __tablename__ = "tool_overrides"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "category_id", "tool_name", name="uq_tool_overrides_key"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category_id: Mapped[str] = mapped_column(String(100), nullable=False)
    tool_name: Mapped[str] = mapped_column(String(255), nullable=False)
    action: Mapped[str] = mapped_column(String(20), nullable=False)
    new_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    new_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    new_icon_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    user: Mapped["User"] = relationship(back_populates="tool_overrides")
