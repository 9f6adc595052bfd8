"""Shared-secret guard for the feed API."""

import secrets

from fastapi import Header, HTTPException, Request


async def verify_api_key(request: Request, x_api_key: str | None = Header(default=None)) -> None:
    """Reject requests whose X-API-Key header does not match APP_API_KEY.

    Raises:
        HTTPException: 401 if the header is missing or wrong.
    """
    expected_key = request.app.state.config.get_string_val("APP_API_KEY")
    if not x_api_key or not secrets.compare_digest(x_api_key.encode(), expected_key.encode()):
        raise HTTPException(status_code=401, detail="Invalid or missing API key.")
