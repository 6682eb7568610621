import hmac

from fastapi import Header

from emaildigest.core import config
from emaildigest.core.exceptions import AuthError


def verify_bearer_token(authorization: str | None = Header(default=None)) -> None:
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthError()
    token = authorization.split("Bearer ", 1)[1].strip()
    if not hmac.compare_digest(token.encode("utf-8"), config.API_TOKEN.encode("utf-8")):
        raise AuthError()
