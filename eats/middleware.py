"""
JWT Middleware

Decodes the access token of every request and stores its payload on
``request.state.token_payload``. Requests without a valid token carry
``None`` and are served anonymously; rejecting them is left to the
GraphQL permission classes.
"""

import logging
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from eats.core.config import get_settings
from eats.core.security import decode_access_token

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


def extract_token(request: Request, header_name: str) -> Optional[str]:
    """Raw token from the configured header, falling back to ``Authorization: Bearer``."""
    token = request.headers.get(header_name)
    if token:
        return token.strip()
    authorization = request.headers.get("authorization", "")
    if authorization.lower().startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX):].strip() or None
    return None


class JwtMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        settings = get_settings()
        request.state.token_payload = None

        token = extract_token(request, settings.jwt_header)
        if token:
            payload = decode_access_token(token)
            if payload is None:
                logger.info(f"Ignoring invalid token on {request.url.path}")
            request.state.token_payload = payload

        return await call_next(request)
