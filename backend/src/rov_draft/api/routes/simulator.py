"""REST endpoints for full-draft simulation."""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool

from rov_draft.api.dependencies import draft_error_to_http, get_room_or_404, resolve_reference
from rov_draft.api.schemas import DraftSetup
from rov_draft.config import settings
from rov_draft.exceptions import DraftError
from rov_draft.models.draft import Side
from rov_draft.services.draft_simulator import DraftSimulator
from rov_draft.services.scoring_logger import ScoringLogger

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/simulator", tags=["simulator"])


class SimulationRequest(DraftSetup):
    # Simulate the remaining steps of an existing room instead of the inline setup
    room_id: Optional[str] = None


@router.post("/runs")
async def run_simulation(request: Request, body: SimulationRequest):
    """Simulate a full draft (or the rest of one) and return the step trace."""
    if body.room_id:
        room = get_room_or_404(request, body.room_id)
        reference, teams, perspective = room.reference, room.teams, room.perspective_side
        actions = room.machine.snapshot().actions
    else:
        reference = resolve_reference(request, body)
        teams, perspective = body.teams(), Side(body.perspective_side)
        actions = body.draft_actions()

    run_id = body.room_id or f"sim_{uuid.uuid4().hex[:8]}"
    scoring_logger = ScoringLogger()
    scoring_logger.start_session(
        session_id=run_id,
        mode="simulation",
        blue_team=teams[Side.BLUE].name,
        red_team=teams[Side.RED].name,
        perspective_side=perspective.value,
        extra_metadata={"initial_actions": len(actions)},
    )
    simulator = DraftSimulator(
        reference,
        scoring_logger=scoring_logger,
        ban_seconds=settings.ban_timer_seconds,
        pick_seconds=settings.pick_timer_seconds,
    )

    try:
        result = await run_in_threadpool(
            simulator.simulate, teams, perspective, actions
        )
    except DraftError as e:
        raise draft_error_to_http(e)
    finally:
        scoring_logger.save()

    logger.info(f"Simulation {run_id} produced {len(result.records)} steps")
    return {"run_id": run_id, **result.to_dict()}
