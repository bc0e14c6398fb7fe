"""Bearer-token verification and acting-user resolution.

Tokens are issued by the clinic's identity provider (outside this service)
as HS256 JWTs signed with ``SECRET_KEY``.  This module only verifies them
and extracts the acting user's id, which is stamped onto every record the
roster import creates.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
from datetime import UTC, datetime
from typing import Annotated, Any

from fastapi import Depends, Request

from .config import Settings, get_settings
from .exceptions import MissingActorError, UnauthorizedError


def _base64url_decode(data: str) -> bytes:
    """Decode a base64url-encoded string, handling missing padding."""

    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _decode_jwt(token: str, *, settings: Settings) -> dict[str, Any]:
    """Decode and validate an HS256 JWT.

    - Verifies signature with SECRET_KEY
    - Checks the exp claim against current UTC time
    """

    try:
        header_b64, payload_b64, signature_b64 = token.split(".")
    except ValueError as exc:
        raise UnauthorizedError(
            message="Invalid token format",
            error_code="INVALID_TOKEN",
        ) from exc

    signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
    expected_sig = hmac.new(
        settings.SECRET_KEY.encode("utf-8"),
        signing_input,
        hashlib.sha256,
    ).digest()
    expected_sig_b64 = base64.urlsafe_b64encode(expected_sig).rstrip(b"=").decode("ascii")

    if not hmac.compare_digest(signature_b64, expected_sig_b64):
        raise UnauthorizedError(
            message="Invalid token signature",
            error_code="INVALID_TOKEN",
        )

    try:
        payload = json.loads(_base64url_decode(payload_b64))
    except (ValueError, UnicodeDecodeError) as exc:
        raise UnauthorizedError(
            message="Invalid token payload",
            error_code="INVALID_TOKEN",
        ) from exc

    if not isinstance(payload, dict):
        raise UnauthorizedError(message="Invalid token payload", error_code="INVALID_TOKEN")

    exp = payload.get("exp")
    if not isinstance(exp, int):
        raise UnauthorizedError(
            message="Invalid token expiration",
            error_code="INVALID_TOKEN",
        )

    if int(datetime.now(UTC).timestamp()) >= exp:
        raise UnauthorizedError(
            message="Token has expired",
            error_code="TOKEN_EXPIRED",
        )

    return payload


def _bearer_payload(request: Request, settings: Settings) -> dict[str, Any]:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.lower().startswith("bearer "):
        raise UnauthorizedError(
            message="Missing or invalid Authorization header",
            error_code="UNAUTHORIZED",
        )

    token = auth_header.split(" ", 1)[1].strip()
    if not token:
        raise UnauthorizedError(message="Missing access token", error_code="UNAUTHORIZED")

    return _decode_jwt(token, settings=settings)


async def require_authentication(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> str:
    """FastAPI dependency that enforces a valid Bearer token.

    Returns the token subject ("sub" claim) if validation succeeds.
    """
    payload = _bearer_payload(request, settings)

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise UnauthorizedError(
            message="Invalid token subject",
            error_code="INVALID_TOKEN",
        )
    return subject


async def get_current_actor(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> str:
    """Return the acting user's id from the ``user_id`` claim, else ``sub``.

    Raises:
        MissingActorError: The token is valid but names no user.
    """
    payload = _bearer_payload(request, settings)

    for claim in ("user_id", "sub"):
        value = payload.get(claim)
        if isinstance(value, (str, int)) and str(value).strip():
            return str(value).strip()

    raise MissingActorError()


CurrentActor = Annotated[str, Depends(get_current_actor)]
