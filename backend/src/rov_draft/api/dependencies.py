"""Application-state accessors shared by routes and websockets."""

from typing import Optional

from fastapi import HTTPException, Request

from rov_draft.api.schemas import DraftSetup
from rov_draft.config import settings
from rov_draft.exceptions import DraftError, InvalidStateError
from rov_draft.models.reference import ReferenceData
from rov_draft.repositories.reference_repository import ReferenceRepository
from rov_draft.services.room_registry import DraftRoom, DraftRoomRegistry


def get_repository(app) -> Optional[ReferenceRepository]:
    return getattr(app.state, "repository", None)


def get_registry(app) -> DraftRoomRegistry:
    """Room registry on app.state, created on first use."""
    registry = getattr(app.state, "registry", None)
    if registry is None:
        repo = get_repository(app)
        registry = DraftRoomRegistry(
            ttl_seconds=settings.room_ttl_seconds,
            ban_seconds=settings.ban_timer_seconds,
            pick_seconds=settings.pick_timer_seconds,
            recommendation_limit=settings.recommendation_limit,
            action_sink=repo.append_action if repo else None,
        )
        app.state.registry = registry
    return registry


def get_room_or_404(request: Request, room_id: str) -> DraftRoom:
    room = get_registry(request.app).get_room(room_id)
    if room is None:
        raise HTTPException(status_code=404, detail=f"Room not found: {room_id}")
    return room


def resolve_reference(request: Request, setup: DraftSetup) -> ReferenceData:
    """Inline reference data wins; otherwise the server's reference database."""
    if setup.reference is not None:
        return setup.reference.to_reference()

    reference = getattr(request.app.state, "reference", None)
    if reference is None:
        repo = get_repository(request.app)
        if repo is None:
            raise HTTPException(status_code=400, detail="No reference data supplied and no database configured")
        reference = repo.load_reference_data()
        request.app.state.reference = reference
    return reference


def draft_error_to_http(error: DraftError) -> HTTPException:
    """Map draft errors: finished draft -> 409, illegal hero or role -> 400."""
    status = 409 if isinstance(error, InvalidStateError) else 400
    return HTTPException(status_code=status, detail=str(error))
