from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str


class RootResponse(MessageResponse):
    version: str


class HealthResponse(MessageResponse):
    running: bool
    pending_requests: int


class WebhookResponse(BaseModel):
    success: bool
    message: str | None = None
