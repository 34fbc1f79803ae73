# loanapi/auth.py
import logging
from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError

from loanapi import config
from loanapi.models import Role
from loanapi.policy import RequestContext
from loanapi.validators import parse_enum

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


# =========================
# TOKENS
# =========================
def create_access_token(user, now=None) -> str:
    """Signed token carrying the user id (sub), username and role."""
    now = now or datetime.now(timezone.utc)
    role = user.role.value if isinstance(user.role, Role) else str(user.role)
    claims = {
        "sub": str(user.id),
        "username": user.username,
        "role": role,
        "iat": now,
        "exp": now + timedelta(hours=config.TOKEN_EXPIRE_HOURS),
    }
    return jwt.encode(claims, config.SECRET_KEY, algorithm=config.ALGORITHM)


def decode_token(token: str) -> dict:
    """Raises JWTError when the token is expired, malformed or badly signed."""
    return jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])


def context_from_claims(claims: dict) -> RequestContext:
    try:
        requester_id = int(claims.get("sub"))
    except (TypeError, ValueError):
        requester_id = None
    return RequestContext(
        requester_id=requester_id,
        role=parse_enum(Role, claims.get("role")),
    )


# =========================
# DEPENDENCIES
# =========================
def get_request_context(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> RequestContext:
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = decode_token(credentials.credentials)
    except JWTError:
        logger.warning("Rejected bearer token")
        raise HTTPException(
            status_code=401,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    ctx = context_from_claims(claims)
    if ctx.role is None:
        logger.warning("Rejected token with unknown role %r", claims.get("role"))
        raise HTTPException(
            status_code=401,
            detail="Unrecognized role",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return ctx


def require_accountant(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
    if not ctx.is_accountant:
        raise HTTPException(status_code=403, detail="Accountant role required")
    return ctx
