# account_service/services.py
"""
Registration orchestration: validate, check for a duplicate email, persist.

The outcome is returned as one of three result types rather than raised, so
the HTTP layer decides how each one is presented.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Union

from . import models, schemas
from .core.config import Settings, settings as default_settings
from .exceptions import UserExistsError
from .validation import normalize_email, validate_candidate

logger = logging.getLogger(__name__)

USER_EXISTS_MESSAGE = "User exists"


class UserStore(Protocol):
    async def find_by_email(self, email: str) -> Optional[models.User]: ...

    async def insert(self, user: schemas.UserCreate) -> models.User: ...


@dataclass
class Registered:
    user: models.User


@dataclass
class ValidationFailed:
    errors: List[str] = field(default_factory=list)


@dataclass
class AlreadyExists:
    message: str = USER_EXISTS_MESSAGE


RegistrationResult = Union[Registered, ValidationFailed, AlreadyExists]


class RegistrationService:
    def __init__(self, store: UserStore, settings: Optional[Settings] = None):
        self.store = store
        self.settings = settings or default_settings

    async def register(self, candidate: schemas.UserCreate) -> RegistrationResult:
        """
        Register a candidate.

        Nothing is written unless the candidate passes every field rule and
        no account already uses its email.
        """
        errors = validate_candidate(candidate, self.settings)
        if errors:
            logger.warning(f"Registration rejected, {len(errors)} rule(s) violated: {errors}")
            return ValidationFailed(errors=errors)

        candidate = candidate.model_copy(update={"email": normalize_email(candidate.email)})
        if await self.store.find_by_email(candidate.email) is not None:
            logger.warning(f"Registration rejected, email already registered: {candidate.email}")
            return AlreadyExists()

        try:
            user = await self.store.insert(candidate)
        except UserExistsError as e:
            logger.warning(f"Registration lost a race for {candidate.email}: {e.message}")
            return AlreadyExists(message=e.message)

        logger.info(f"Registered user {user.id} <{user.email}>")
        return Registered(user=user)
