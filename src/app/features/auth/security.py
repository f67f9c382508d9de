"""Password hashing, bearer tokens and the role checks guarding the console routes.

Operators can submit reports and manage scheduled jobs. Admins can additionally
store the reporting-service credentials and create further console accounts.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
import bcrypt

from ...core.config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from . import service as auth_service
from . import models

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")

CONSOLE_ROLES = (models.ROLE_OPERATOR, models.ROLE_ADMIN)

INACTIVE_ACCOUNT_DETAIL = "This console account has been disabled"
UNKNOWN_ROLE_DETAIL = "This account has no console role"
ADMIN_REQUIRED_DETAIL = "Only console administrators can do this"


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Signs a bearer token for the console. `data["sub"]` carries the username."""
    lifetime = expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {**data, "exp": datetime.now(timezone.utc) + lifetime}
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)


def _username_from_token(token: str) -> Optional[str]:
    try:
        claims = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"Rejected console token: {e}")
        return None
    username = claims.get("sub")
    if not username:
        logger.warning("Console token carries no username")
    return username or None


async def get_current_user(token: Annotated[str, Depends(oauth2_scheme)]) -> models.User:
    """Resolves the bearer token to an enabled console account."""
    username = _username_from_token(token)
    user = await auth_service.get_user_by_username(username=username) if username else None
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        logger.warning(f"Disabled account {username} tried to use the console")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INACTIVE_ACCOUNT_DETAIL)
    return user


async def get_current_active_user(current_user: Annotated[models.User, Depends(get_current_user)]) -> models.User:
    """Any operator or admin. Used by the report, cron and dashboard routes."""
    if current_user.role not in CONSOLE_ROLES:
        logger.warning(f"Account {current_user.username} has unknown role {current_user.role!r}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=UNKNOWN_ROLE_DETAIL)
    return current_user


async def get_current_active_admin_user(
    current_user: Annotated[models.User, Depends(get_current_active_user)],
) -> models.User:
    """Admins only. Guards credential management and account creation."""
    if current_user.role != models.ROLE_ADMIN:
        logger.info(f"Operator {current_user.username} was refused an admin-only action")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=ADMIN_REQUIRED_DETAIL)
    return current_user
