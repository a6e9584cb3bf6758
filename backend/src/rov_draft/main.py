"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from rov_draft.api.dependencies import get_registry
from rov_draft.api.routes.drafts import router as drafts_router
from rov_draft.api.routes.simulator import router as simulator_router
from rov_draft.api.websockets.simulation_ws import simulation_websocket
from rov_draft.config import settings
from rov_draft.repositories.reference_repository import ReferenceRepository

logger = logging.getLogger(__name__)


def get_database_path() -> Path:
    """Database path from settings; relative paths resolve from the repo root."""
    db_path = Path(settings.database_path)
    if db_path.is_absolute():
        return db_path
    repo_root = Path(__file__).parent.parent.parent.parent
    return repo_root / settings.database_path


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    db_path = get_database_path()
    if not hasattr(app.state, "repository"):
        if db_path.exists():
            app.state.repository = ReferenceRepository(db_path)
        else:
            # Rooms must then carry inline reference data
            logger.warning(f"Reference database not found at {db_path}; inline data only")
            app.state.repository = None
    registry = get_registry(app)
    yield
    for room_id in list(registry.rooms):
        registry.remove_room(room_id)


app = FastAPI(
    title="RoV Draft",
    description="Pick/ban draft engine - live rooms, recommendations and full-draft simulation",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "rov-draft"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "RoV Draft API",
        "version": "0.1.0",
        "docs": "/docs",
    }


# Register routers
app.include_router(drafts_router)
app.include_router(simulator_router)


@app.websocket("/ws/simulation/{room_id}")
async def websocket_simulation(websocket: WebSocket, room_id: str):
    """WebSocket endpoint for paced simulation playback."""
    await simulation_websocket(
        websocket,
        room_id,
        get_registry(websocket.app),
        settings.simulation_step_delay_seconds,
    )
