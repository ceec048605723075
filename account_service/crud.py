# account_service/crud.py
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select # For SQLAlchemy 2.0 style select
from sqlalchemy.sql import func

from . import models, schemas
from .exceptions import IdentifierConflictError, UserExistsError
from .security import get_password_hash

logger = logging.getLogger(__name__)

MAX_INSERT_ATTEMPTS = 10

# --- User CRUD ---
async def get_user(db: AsyncSession, user_id: int) -> Optional[models.User]:
    result = await db.execute(select(models.User).filter(models.User.id == user_id))
    return result.scalars().first()

async def get_user_by_email(db: AsyncSession, email: str) -> Optional[models.User]:
    result = await db.execute(select(models.User).filter(models.User.email == email))
    return result.scalars().first()

async def get_next_user_id(db: AsyncSession) -> int:
    """
    Identifiers start at 0 and grow by one per account.
    """
    result = await db.execute(select(func.max(models.User.id)))
    current = result.scalar()
    return 0 if current is None else current + 1

async def create_user(db: AsyncSession, user: schemas.UserCreate) -> models.User:
    """
    Persist a new account and commit it.

    Concurrent inserts can pick the same next id; the loser recomputes it and
    tries again, up to MAX_INSERT_ATTEMPTS times. Raises UserExistsError only
    when the email itself is already registered.
    """
    hashed_password = get_password_hash(user.password)
    for attempt in range(1, MAX_INSERT_ATTEMPTS + 1):
        new_id = await get_next_user_id(db)
        db_user = models.User(
            id=new_id,
            name=user.name,
            lastname=user.lastname,
            email=user.email,
            hashed_password=hashed_password,
        )
        db.add(db_user)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            if await get_user_by_email(db, email=user.email) is not None:
                logger.warning(f"Insert rejected for {user.email}: email already registered")
                raise UserExistsError("User exists") from e
            if await get_user(db, user_id=new_id) is None:
                raise
            logger.info(f"Id {new_id} taken while inserting {user.email}, attempt {attempt}")
            continue
        await db.refresh(db_user)
        return db_user
    raise IdentifierConflictError(f"No free id for {user.email} after {MAX_INSERT_ATTEMPTS} attempts")


class SQLUserStore:
    """UserStore backed by an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_email(self, email: str) -> Optional[models.User]:
        return await get_user_by_email(self.db, email=email)

    async def insert(self, user: schemas.UserCreate) -> models.User:
        return await create_user(self.db, user=user)
