import secrets
from typing import Annotated

from fastapi import HTTPException, Query, Security, status
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

from informarr.settings import settings_manager

api_key_header = APIKeyHeader(name="x-api-key", auto_error=False)
bearer_scheme = HTTPBearer(auto_error=False)


def is_valid_key(candidate: str | None) -> bool:
    expected = settings_manager.settings.api_key
    return bool(candidate and expected) and secrets.compare_digest(
        candidate.encode(), expected.encode()
    )


def resolve_api_key(
    header: str | None = Security(api_key_header),
    bearer: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
    api_key: Annotated[str | None, Query()] = None,
):
    """Accept the API key as `x-api-key` header, bearer token or `api_key` query parameter."""

    candidates = (header, bearer.credentials if bearer else None, api_key)

    if not any(is_valid_key(candidate) for candidate in candidates):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )
