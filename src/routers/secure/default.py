from fastapi import APIRouter
from kink import di

from informarr.program import Program

from ..models.shared import HealthResponse

router = APIRouter(
    responses={404: {"description": "Not found"}},
)


@router.get("/health", operation_id="health")
async def health() -> HealthResponse:
    program = di[Program]
    running = program.initialized and program.is_alive()

    return HealthResponse(
        message="ok" if running else "starting",
        running=running,
        pending_requests=program.pending_count,
    )
