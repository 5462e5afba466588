"""Tool routes for the signed-in user's bookmarked tools.

All routes are mounted behind the session guard; the identity it
resolves scopes every query.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from toolboard.auth.dependencies import CurrentIdentity, get_current_user
from toolboard.db.engine import get_db
from toolboard.schemas.tool import ToolCreate, ToolEnvelope, ToolList, ToolRead
from toolboard.services.tool_service import ToolService

router = APIRouter(prefix="/user/tools")


def _svc(db: AsyncSession = Depends(get_db)) -> ToolService:
    return ToolService(db)


@router.get("", response_model=ToolList)
async def list_tools(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: ToolService = Depends(_svc),
):
    tools = await svc.list_tools(identity.user_id)
    return ToolList(tools=[ToolRead.model_validate(t) for t in tools])


@router.post("", response_model=ToolEnvelope, status_code=201)
async def create_tool(
    body: ToolCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: ToolService = Depends(_svc),
):
    tool = await svc.create_tool(
        user_id=identity.user_id,
        category_id=body.category_id,
        tool_name=body.tool_name,
        tool_url=body.tool_url,
        icon_url=body.icon_url,
    )
    return ToolEnvelope(tool=ToolRead.model_validate(tool))


@router.put("/{tool_id}", response_model=ToolEnvelope)
async def update_tool(
    tool_id: int,
    body: ToolCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: ToolService = Depends(_svc),
):
    """Replace a tool's fields. 404 if it isn't one of the caller's tools."""
    tool = await svc.update_tool(
        user_id=identity.user_id,
        tool_id=tool_id,
        category_id=body.category_id,
        tool_name=body.tool_name,
        tool_url=body.tool_url,
        icon_url=body.icon_url,
    )
    return ToolEnvelope(tool=ToolRead.model_validate(tool))


@router.delete("/{tool_id}")
async def delete_tool(
    tool_id: int,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: ToolService = Depends(_svc),
):
    await svc.delete_tool(identity.user_id, tool_id)
    return {"message": "Tool deleted", "id": tool_id}
