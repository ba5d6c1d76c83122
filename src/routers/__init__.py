from fastapi import Depends, Request
from fastapi.routing import APIRouter

from auth import resolve_api_key
from informarr.settings.manager import settings_manager
from routers.models.shared import RootResponse
from routers.secure.default import router as default_router
from routers.secure.webhooks import router as webhooks_router

API_VERSION = "v1"

app_router = APIRouter(prefix=f"/api/{API_VERSION}")


@app_router.get("/", operation_id="root")
async def root(_: Request) -> RootResponse:
    return RootResponse(
        message="Informarr is running!",
        version=settings_manager.settings.version,
    )


app_router.include_router(default_router, dependencies=[Depends(resolve_api_key)])
app_router.include_router(webhooks_router, dependencies=[Depends(resolve_api_key)])
