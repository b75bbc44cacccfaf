# This file guards mutating routes with a static bearer token.
# It exists so promote and stop calls can only come from the management UI holding AUTH_TOKEN.
# An unset token rejects every call rather than leaving the routes open.

from __future__ import annotations

import hmac
from typing import Annotated

from fastapi import Depends, Header

from squid_manager.api.api_config import ApiConfig
from squid_manager.api.dependencies import get_config
from squid_manager.api.error_handlers import APIError

_BEARER_PREFIX = "Bearer "


def require_auth_token(
    config: Annotated[ApiConfig, Depends(get_config)],
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    if not authorization or not authorization.startswith(_BEARER_PREFIX):
        raise APIError(status_code=401, message="Missing or invalid Authorization header")

    token = authorization[len(_BEARER_PREFIX) :]
    expected = config.auth_token
    if not expected or not hmac.compare_digest(token.encode(), expected.encode()):
        raise APIError(status_code=401, message="Invalid authorization token")
