import uuid
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from invyte.auth.jwt import decode_token
from invyte.config.database import get_async_session
from invyte.models.user import User

_bearer_scheme = HTTPBearer()


@dataclass(frozen=True)
class CurrentIdentity:
    """The authenticated caller, as the invitation core sees them."""

    user_id: uuid.UUID
    phone_number: str
    name: str | None = None


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    session: AsyncSession = Depends(get_async_session),
) -> CurrentIdentity:
    """Resolve the Bearer token to the calling user.

    Raises:
        HTTPException 401: If the token is invalid or expired, or the user is unknown or inactive.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise credentials_exception from None

    sub: str | None = payload.get("sub")
    if sub is None:
        raise credentials_exception

    try:
        user_id = uuid.UUID(sub)
    except ValueError:
        raise credentials_exception from None

    result = await session.execute(select(User).where(User.uuid == user_id))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        raise credentials_exception

    return CurrentIdentity(user_id=user.uuid, phone_number=user.phone_number, name=user.name)
