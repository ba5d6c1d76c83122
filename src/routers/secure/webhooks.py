from typing import Any

from fastapi import APIRouter, HTTPException, Request, status
from kink import di
from loguru import logger
from pydantic import BaseModel, ValidationError

from informarr.media.request import MediaIdentifiers
from informarr.program import Program
from informarr.types import Message, MovieDownload, SeerrApproval, SeriesDownload

from ..models.radarr import RadarrWebhook
from ..models.seerr import SeerrWebhook
from ..models.shared import WebhookResponse
from ..models.sonarr import SonarrWebhook

router = APIRouter(
    prefix="/webhook",
    responses={404: {"description": "Not found"}},
)


async def parse_payload[T: BaseModel](request: Request, model: type[T]) -> T:
    try:
        payload: Any = await request.json()
        return model.model_validate(payload)
    except (ValueError, ValidationError) as e:
        logger.warning(f"Malformed {model.__name__} payload: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def enqueue(message: Message) -> WebhookResponse:
    try:
        di[Program].add_event(message)
    except Exception as e:
        logger.error(f"Failed to queue {message.log_message}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to queue event",
        )

    logger.log("API", f"Queued {message.log_message}")
    return WebhookResponse(success=True)


@router.post("/seerr", response_model=WebhookResponse)
async def seerr(request: Request) -> WebhookResponse:
    """Webhook for Overseerr/Jellyseerr"""

    req = await parse_payload(request, SeerrWebhook)

    if req.is_test:
        logger.log("API", "Received test notification, Seerr configured properly")
        return WebhookResponse(success=True, message="Test notification received")

    if not req.is_approval:
        return WebhookResponse(
            success=True, message=f"Ignored {req.notification_type}"
        )

    if not req.request:
        return WebhookResponse(success=True, message="Approval without request id")

    return enqueue(SeerrApproval(request_id=req.request.request_id))


@router.post("/sonarr", response_model=WebhookResponse)
async def sonarr(request: Request) -> WebhookResponse:
    """Webhook for Sonarr"""

    req = await parse_payload(request, SonarrWebhook)

    if req.is_test:
        logger.log("API", "Received test notification, Sonarr configured properly")
        return WebhookResponse(success=True, message="Test notification received")

    if not req.is_download or not req.series:
        return WebhookResponse(success=True, message=f"Ignored {req.event_type}")

    return enqueue(
        SeriesDownload(
            ids=MediaIdentifiers(req.series.tmdb_id, req.series.tvdb_id),
            series_id=req.series.id,
            season_numbers=tuple(e.season_number for e in req.episodes),
            is_upgrade=req.is_upgrade,
            has_episode_files=req.episode_files is not None,
        )
    )


@router.post("/radarr", response_model=WebhookResponse)
async def radarr(request: Request) -> WebhookResponse:
    """Webhook for Radarr"""

    req = await parse_payload(request, RadarrWebhook)

    if req.is_test:
        logger.log("API", "Received test notification, Radarr configured properly")
        return WebhookResponse(success=True, message="Test notification received")

    if not req.is_download or not req.movie:
        return WebhookResponse(success=True, message=f"Ignored {req.event_type}")

    return enqueue(
        MovieDownload(
            ids=MediaIdentifiers(req.movie.tmdb_id),
            is_upgrade=req.is_upgrade,
        )
    )
