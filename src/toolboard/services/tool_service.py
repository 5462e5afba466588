"""Tool service: per-user tools and tool overrides.

Every query is filtered by the owning user id, so a row that belongs to
someone else looks exactly like a row that doesn't exist (NotFoundError).
"""

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from toolboard.db.models import Tool, ToolOverride
from toolboard.errors import NotFoundError

logger = structlog.get_logger()


class ToolService:
    """Business logic for a user's tools and overrides."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Tools ──────────────────────────────────────────

    async def list_tools(self, user_id: int) -> list[Tool]:
        """All of a user's tools, newest first."""
        result = await self.db.execute(
            select(Tool)
            .where(Tool.user_id == user_id)
            .order_by(Tool.created_at.desc(), Tool.id.desc())
        )
        return list(result.scalars().all())

    async def get_tool(self, user_id: int, tool_id: int) -> Tool:
        result = await self.db.execute(
            select(Tool).where(Tool.id == tool_id, Tool.user_id == user_id)
        )
        tool = result.scalars().first()
        if tool is None:
            raise NotFoundError("Tool not found")
        return tool

    async def create_tool(
        self,
        user_id: int,
        category_id: str,
        tool_name: str,
        tool_url: str,
        icon_url: str | None = None,
    ) -> Tool:
        tool = Tool(
            user_id=user_id,
            category_id=category_id,
            tool_name=tool_name,
            tool_url=tool_url,
            icon_url=icon_url or None,
        )
        self.db.add(tool)
        await self.db.commit()
        await self.db.refresh(tool)
        logger.info("tools.created", user_id=user_id, tool_id=tool.id)
        return tool

    async def update_tool(
        self,
        user_id: int,
        tool_id: int,
        category_id: str,
        tool_name: str,
        tool_url: str,
        icon_url: str | None = None,
    ) -> Tool:
        tool = await self.get_tool(user_id, tool_id)
        tool.category_id = category_id
        tool.tool_name = tool_name
        tool.tool_url = tool_url
        tool.icon_url = icon_url or None
        await self.db.commit()
        await self.db.refresh(tool)
        logger.info("tools.updated", user_id=user_id, tool_id=tool.id)
        return tool

    async def delete_tool(self, user_id: int, tool_id: int) -> None:
        tool = await self.get_tool(user_id, tool_id)
        await self.db.delete(tool)
        await self.db.commit()
        logger.info("tools.deleted", user_id=user_id, tool_id=tool_id)

    # ─── Overrides ──────────────────────────────────────

    async def list_overrides(self, user_id: int) -> list[ToolOverride]:
        """All of a user's overrides, newest first."""
        result = await self.db.execute(
            select(ToolOverride)
            .where(ToolOverride.user_id == user_id)
            .order_by(ToolOverride.created_at.desc(), ToolOverride.id.desc())
        )
        return list(result.scalars().all())

    async def _find_override(
        self, user_id: int, category_id: str, tool_name: str
    ) -> ToolOverride | None:
        result = await self.db.execute(
            select(ToolOverride).where(
                ToolOverride.user_id == user_id,
                ToolOverride.category_id == category_id,
                ToolOverride.tool_name == tool_name,
            )
        )
        return result.scalars().first()

    async def upsert_override(
        self,
        user_id: int,
        category_id: str,
        tool_name: str,
        action: str,
        new_name: str | None = None,
        new_url: str | None = None,
        new_icon_url: str | None = None,
    ) -> ToolOverride:
        """Create or replace the override for (user, category, tool name).

        An existing row keeps its id and created_at; the action and
        replacement fields are overwritten, including back to None.

        Two first writes for the same key can race past the lookup; the
        loser hits the unique constraint, rolls back, and retries once as
        an update of the row the winner inserted.
        """
        fields = {
            "action": action,
            "new_name": new_name or None,
            "new_url": new_url or None,
            "new_icon_url": new_icon_url or None,
        }
        try:
            override = await self._write_override(
                user_id, category_id, tool_name, fields
            )
        except IntegrityError:
            await self.db.rollback()
            logger.info(
                "tool_overrides.upsert_conflict",
                user_id=user_id,
                category_id=category_id,
                tool_name=tool_name,
            )
            override = await self._write_override(
                user_id, category_id, tool_name, fields
            )

        logger.info(
            "tool_overrides.upserted",
            user_id=user_id,
            override_id=override.id,
            action=action,
        )
        return override

    async def _write_override(
        self, user_id: int, category_id: str, tool_name: str, fields: dict
    ) -> ToolOverride:
        override = await self._find_override(user_id, category_id, tool_name)
        if override is None:
            override = ToolOverride(
                user_id=user_id,
                category_id=category_id,
                tool_name=tool_name,
            )
            self.db.add(override)

        for name, value in fields.items():
            setattr(override, name, value)
        await self.db.commit()
        await self.db.refresh(override)
        return override

    async def delete_override(
        self, user_id: int, category_id: str, tool_name: str
    ) -> None:
        override = await self._find_override(user_id, category_id, tool_name)
        if override is None:
            raise NotFoundError("Override not found")
        await self.db.delete(override)
        await self.db.commit()
        logger.info(
            "tool_overrides.deleted",
            user_id=user_id,
            category_id=category_id,
            tool_name=tool_name,
        )
