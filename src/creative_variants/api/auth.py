from __future__ import annotations

import base64
import binascii
import logging
import secrets

from fastapi import Request
from fastapi.responses import PlainTextResponse, Response

from creative_variants.config import settings

logger = logging.getLogger(__name__)

CHALLENGE_HEADERS = {"WWW-Authenticate": 'Basic realm="Protected"'}


def credentials_match(authorization: str | None, user: str, password: str) -> bool:
    """
    Check an `Authorization: Basic ...` header against the configured pair.
    Everything after the first ':' is the password.
    """
    if not authorization or not authorization.startswith("Basic "):
        return False
    token = authorization[len("Basic ") :].strip()
    try:
        decoded = base64.b64decode(token, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return False
    u, sep, p = decoded.partition(":")
    if not sep:
        return False
    user_ok = secrets.compare_digest(u.encode("utf-8"), user.encode("utf-8"))
    pass_ok = secrets.compare_digest(p.encode("utf-8"), password.encode("utf-8"))
    return user_ok and pass_ok


async def basic_auth_gate(request: Request, call_next) -> Response:
    user = settings.basic_auth_user
    password = settings.basic_auth_pass
    if not user or not password:
        return await call_next(request)

    if credentials_match(request.headers.get("authorization"), user, password):
        return await call_next(request)

    logger.info("rejected unauthenticated %s %s", request.method, request.url.path)
    return PlainTextResponse("Authentication required", status_code=401, headers=CHALLENGE_HEADERS)
