from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger

from tiergoals.config import settings

SIGNED_OUT = "You must be signed in."

_bearer_scheme = HTTPBearer(auto_error=False)


def _require_secret() -> str:
    if not settings.jwt_secret:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="JWT_SECRET not configured",
        )
    return settings.jwt_secret


def create_access_token(user_id: str, expires_in: timedelta | None = None) -> str:
    secret = _require_secret()
    now = datetime.now(timezone.utc)
    lifetime = expires_in or timedelta(hours=settings.jwt_expiration_hours)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(payload, secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    secret = _require_secret()
    try:
        return jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        logger.info("auth_rejected reason=expired")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=SIGNED_OUT)
    except jwt.InvalidTokenError as exc:
        logger.info("auth_rejected reason=invalid err={}", type(exc).__name__)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=SIGNED_OUT)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=SIGNED_OUT)
    payload = decode_access_token(credentials.credentials)
    user_id = str(payload.get("sub") or "").strip()
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=SIGNED_OUT)
    return user_id
