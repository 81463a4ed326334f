from __future__ import annotations

import hmac

from fastapi import Depends, Header

from api.deps import get_config
from api.errors import ApiError
from starledger.core.config import Config


def _unauthorized(code: str, message: str) -> ApiError:
    return ApiError(code=code, message=message, status=401, scheme="Bearer")


def require_submit_token(
    authorization: str | None = Header(default=None, alias="Authorization"),
    config: Config = Depends(get_config),
) -> None:
    """Gate star submission behind ``Authorization: Bearer <api.auth_token>``.

    An empty ``api.auth_token`` leaves submission open; the ownership proof is
    still required either way.
    """

    expected = config.api.auth_token or ""
    if not expected:
        return

    if not authorization:
        raise _unauthorized("auth.missing_token", "Missing bearer token")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized("auth.invalid_header", "Invalid authorization header")

    if not hmac.compare_digest(token.strip().encode("utf-8"), expected.encode("utf-8")):
        raise _unauthorized("auth.invalid_token", "Invalid bearer token")


AuthDep = Depends(require_submit_token)
