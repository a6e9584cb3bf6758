"""WebSocket handler for paced simulation playback."""

import asyncio
import json
import logging
import threading
import traceback
from dataclasses import dataclass, field

from fastapi import WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from rov_draft.models.draft import Side
from rov_draft.services.draft_simulator import DraftSimulator
from rov_draft.services.room_registry import DraftRoomRegistry
from rov_draft.services.scoring_logger import ScoringLogger
from rov_draft.utils.draft_sequence import TOTAL_STEPS

logger = logging.getLogger(__name__)


@dataclass
class PlaybackControl:
    """Client-controlled playback flags for one connection."""

    paused: bool = False
    cancel_event: threading.Event = field(default_factory=threading.Event)


async def _handle_client_messages(websocket: WebSocket, control: PlaybackControl, room_id: str) -> None:
    """Listen for client commands (pause/resume) in a separate task."""
    try:
        while True:
            data = await websocket.receive_text()
            try:
                msg = json.loads(data)
                msg_type = msg.get("type")

                if msg_type == "pause" and not control.paused:
                    control.paused = True
                    await websocket.send_json({"type": "paused"})
                    logger.info(f"Playback for room {room_id} paused")

                elif msg_type == "resume" and control.paused:
                    control.paused = False
                    await websocket.send_json({"type": "resumed"})
                    logger.info(f"Playback for room {room_id} resumed")

            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON received: {data}")
    except WebSocketDisconnect:
        control.cancel_event.set()
    except Exception as e:
        logger.error(f"Error in client message handler: {e}")


async def simulation_websocket(
    websocket: WebSocket,
    room_id: str,
    registry: DraftRoomRegistry,
    step_delay: float,
):
    """Stream a simulation of the room's remaining steps.

    The room itself is not modified; the simulator replays the room's
    committed actions into its own machine. One ``draft_step`` frame is sent
    per record, ``step_delay`` seconds apart.

    Args:
        websocket: The WebSocket connection
        room_id: Room whose draft is simulated
        registry: DraftRoomRegistry holding the room
        step_delay: Presentation pacing between steps, in seconds
    """
    room = registry.get_room(room_id)
    if not room:
        await websocket.close(code=4004, reason="Room not found")
        return

    await websocket.accept()
    control = PlaybackControl()
    client_handler_task = asyncio.create_task(_handle_client_messages(websocket, control, room_id))

    scoring_logger = ScoringLogger()
    actions = room.machine.snapshot().actions
    scoring_logger.start_session(
        session_id=room_id,
        mode="simulation",
        blue_team=room.teams[Side.BLUE].name,
        red_team=room.teams[Side.RED].name,
        perspective_side=room.perspective_side.value,
        extra_metadata={"initial_actions": len(actions)},
    )

    try:
        await websocket.send_json({
            "type": "session_start",
            "room_id": room_id,
            "start_step": len(actions),
            "total_steps": TOTAL_STEPS,
            "perspective_side": room.perspective_side.value,
        })

        simulator = DraftSimulator(
            room.reference,
            scoring_logger=scoring_logger,
            ban_seconds=registry.ban_seconds,
            pick_seconds=registry.pick_seconds,
        )
        steps = simulator.iter_steps(
            room.teams,
            room.perspective_side,
            initial_actions=actions,
            cancel_event=control.cancel_event,
        )
        sent = 0
        while True:
            # Each step is scored in a worker thread
            record = await run_in_threadpool(next, steps, None)
            if record is None:
                break
            while control.paused and not control.cancel_event.is_set():
                await asyncio.sleep(0.1)
            if control.cancel_event.is_set():
                break
            await websocket.send_json({"type": "draft_step", "record": record.to_dict()})
            sent += 1
            await asyncio.sleep(step_delay)

        if not control.cancel_event.is_set():
            await websocket.send_json({"type": "simulation_complete", "steps": sent})

    except WebSocketDisconnect:
        pass
    except Exception as e:
        error_msg = f"{type(e).__name__}: {e}\n{traceback.format_exc()}"
        logger.error(f"Simulation playback failed for room {room_id}: {e}")
        scoring_logger.log_error(error_msg)
        try:
            await websocket.send_json({"type": "error", "message": str(e)})
        except Exception:
            pass
    finally:
        control.cancel_event.set()
        client_handler_task.cancel()
        try:
            await client_handler_task
        except asyncio.CancelledError:
            pass
        scoring_logger.save()
