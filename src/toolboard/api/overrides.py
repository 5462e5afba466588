"""Tool override routes: hide, rename, or replace catalog tools per user.

Overrides are addressed by (categoryId, toolName) rather than by id:
POST upserts on that key, DELETE takes it as query parameters.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from toolboard.auth.dependencies import CurrentIdentity, get_current_user
from toolboard.db.engine import get_db
from toolboard.schemas.tool import (
    ToolOverrideEnvelope,
    ToolOverrideList,
    ToolOverrideRead,
    ToolOverrideUpsert,
)
from toolboard.services.tool_service import ToolService

router = APIRouter(prefix="/user/tool-overrides")


def _svc(db: AsyncSession = Depends(get_db)) -> ToolService:
    return ToolService(db)


@router.get("", response_model=ToolOverrideList)
async def list_overrides(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: ToolService = Depends(_svc),
):
    overrides = await svc.list_overrides(identity.user_id)
    return ToolOverrideList(
        overrides=[ToolOverrideRead.model_validate(o) for o in overrides]
    )


@router.post("", response_model=ToolOverrideEnvelope)
async def upsert_override(
    body: ToolOverrideUpsert,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: ToolService = Depends(_svc),
):
    override = await svc.upsert_override(
        user_id=identity.user_id,
        category_id=body.category_id,
        tool_name=body.tool_name,
        action=body.action,
        new_name=body.new_name,
        new_url=body.new_url,
        new_icon_url=body.new_icon_url,
    )
    return ToolOverrideEnvelope(override=ToolOverrideRead.model_validate(override))


@router.delete("")
async def delete_override(
    category_id: str = Query(..., alias="categoryId", min_length=1),
    tool_name: str = Query(..., alias="toolName", min_length=1),
    identity: CurrentIdentity = Depends(get_current_user),
    svc: ToolService = Depends(_svc),
):
    await svc.delete_override(identity.user_id, category_id, tool_name)
    return {"message": "Override deleted"}
