# account_service/auth.py
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials, OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from . import crud, models, schemas, security
from .database import get_db
from .validation import normalize_email

logger = logging.getLogger(__name__)

# Both schemes read the Authorization header; each yields None when the header is not its own.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)
basic_scheme = HTTPBasic(auto_error=False)

async def authenticate_user(db: AsyncSession, email: str, password: str) -> Optional[models.User]:
    user = await crud.get_user_by_email(db, email=normalize_email(email) or email)
    if user is None or not security.verify_password(password, user.hashed_password):
        return None
    return user

async def _user_from_token(db: AsyncSession, token: str) -> Optional[models.User]:
    try:
        token_data = await security.get_current_user_token_data(token)
    except JWTError as e:
        logger.info(f"Rejected bearer token: {e}")
        return None
    return await crud.get_user_by_email(db, email=token_data.email)

async def get_current_principal(
    token: Optional[str] = Depends(oauth2_scheme),
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[schemas.Principal]:
    """
    Resolve the caller from a Bearer token or HTTP Basic credentials.
    Returns None for anonymous or unrecognised callers.
    """
    user = None
    if token:
        user = await _user_from_token(db, token)
    elif credentials is not None:
        user = await authenticate_user(db, credentials.username, credentials.password)
    if user is None:
        return None
    return schemas.Principal(id=user.id, email=user.email)

async def require_principal(
    principal: Optional[schemas.Principal] = Depends(get_current_principal),
) -> schemas.Principal:
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer, Basic"},
        )
    return principal
