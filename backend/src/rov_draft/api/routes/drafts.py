"""REST endpoints for live draft rooms."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from rov_draft.api.dependencies import (
    draft_error_to_http,
    get_registry,
    get_repository,
    get_room_or_404,
    resolve_reference,
)
from rov_draft.api.schemas import DraftSetup, SideName
from rov_draft.config import settings
from rov_draft.exceptions import DraftError
from rov_draft.models.draft import Side

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/drafts", tags=["drafts"])


class CreateRoomRequest(DraftSetup):
    room_id: Optional[str] = None
    # Rehydrate from the reference database when no actions are supplied
    resume: bool = False


class CommitRequest(BaseModel):
    hero_id: str


@router.post("", status_code=201)
async def create_room(request: Request, body: CreateRoomRequest):
    """Open a draft room, optionally rehydrated from persisted actions."""
    registry = get_registry(request.app)
    if body.room_id and registry.get_room(body.room_id):
        raise HTTPException(status_code=409, detail=f"Room already exists: {body.room_id}")

    reference = resolve_reference(request, body)
    actions = body.draft_actions()
    repo = get_repository(request.app)
    if not actions and body.resume and body.room_id and repo:
        actions = repo.get_draft_actions(body.room_id)

    try:
        room = registry.create_room(
            reference,
            teams=body.teams(),
            perspective_side=Side(body.perspective_side),
            initial_actions=actions,
            room_id=body.room_id,
        )
    except DraftError as e:
        raise draft_error_to_http(e)

    return room.to_dict()


@router.get("/{room_id}")
async def get_room(request: Request, room_id: str):
    return get_room_or_404(request, room_id).to_dict()


@router.delete("/{room_id}")
async def delete_room(request: Request, room_id: str):
    if not get_registry(request.app).remove_room(room_id):
        raise HTTPException(status_code=404, detail=f"Room not found: {room_id}")
    return {"status": "deleted"}


@router.post("/{room_id}/actions")
async def commit_action(request: Request, room_id: str, body: CommitRequest):
    """Commit a ban or pick for the current step."""
    room = get_room_or_404(request, room_id)
    try:
        action = await room.commit(body.hero_id)
    except DraftError as e:
        logger.info(f"Room {room_id} rejected {body.hero_id}: {e}")
        raise draft_error_to_http(e)

    return {"action": action.to_dict(), **room.to_dict()}


@router.post("/{room_id}/pause")
async def toggle_pause(request: Request, room_id: str):
    room = get_room_or_404(request, room_id)
    paused = await room.toggle_pause(settings.tick_interval_seconds)
    return {"paused": paused, **room.to_dict()}


@router.post("/{room_id}/tick")
async def tick(request: Request, room_id: str):
    """Manual tick for external schedulers."""
    room = get_room_or_404(request, room_id)
    timer = await room.tick()
    return {"timer": timer, "expired": room.machine.is_expired()}


@router.get("/{room_id}/recommendations")
async def get_recommendations(request: Request, room_id: str, for_side: Optional[SideName] = None):
    room = get_room_or_404(request, room_id)
    recommendations = room.recommendations(Side(for_side) if for_side else None)
    return recommendations.to_dict()


@router.get("/{room_id}/strategies")
async def get_strategies(request: Request, room_id: str, side: Optional[SideName] = None):
    """Rank a side's strategies by how feasible they still are."""
    room = get_room_or_404(request, room_id)
    ranked = room.strategies(Side(side) if side else None)
    return {"strategies": [r.to_dict() for r in ranked]}
