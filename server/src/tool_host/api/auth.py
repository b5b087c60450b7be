"""Bearer token authentication for tool endpoints."""

import hmac
import logging
from typing import Annotated

from fastapi import Header, HTTPException, Request, status

logger = logging.getLogger(__name__)


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": "Unauthorized", "message": message},
    )


async def require_bearer_token(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """Check the Authorization header against the configured key.

    Auth is skipped when no AUTHORIZATION_KEY is configured.

    Raises:
        HTTPException: 401 if the header is missing or malformed,
            403 if the token does not match
    """
    expected = request.app.state.settings.authorization_key
    if not expected:
        return

    if not authorization:
        logger.warning(f"Missing Authorization header (path: {request.url.path})")
        raise _unauthorized("Missing Authorization header")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        logger.warning(f"Invalid Authorization format (path: {request.url.path})")
        raise _unauthorized("Invalid Authorization format. Expected: Bearer <token>")

    if not hmac.compare_digest(parts[1].encode(), expected.encode()):
        logger.warning(f"Invalid token (path: {request.url.path})")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"error": "Forbidden", "message": "Invalid token"},
        )
