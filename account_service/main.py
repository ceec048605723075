# account_service/main.py
import json
import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from . import models, schemas, crud, security
from .auth import authenticate_user, require_principal
from .core.config import settings
from .database import engine, get_db
from .exceptions import MalformedRequestError
from .services import AlreadyExists, RegistrationService, ValidationFailed

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

async def create_db_and_tables():
    async with engine.begin() as conn:
        await conn.run_sync(models.Base.metadata.create_all)

@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_db_and_tables()
    yield
    await engine.dispose()

app = FastAPI(
    title="Account Service API",
    description="User registration and authentication.",
    version="0.1.0",
    lifespan=lifespan,
)

@app.exception_handler(MalformedRequestError)
async def malformed_request_handler(request: Request, exc: MalformedRequestError):
    logger.warning(f"Malformed request to {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "malformed_request", "message": exc.message},
    )

# --- Dependencies ---
def get_registration_service(db: AsyncSession = Depends(get_db)) -> RegistrationService:
    return RegistrationService(crud.SQLUserStore(db), settings)

async def read_candidate(request: Request) -> schemas.UserCreate:
    """
    Decode the registration body. The JSON is parsed by hand so that an empty
    or badly shaped body is a 400 rather than FastAPI's default 422.
    """
    body = await request.body()
    if not body.strip():
        raise MalformedRequestError("Request body is empty")
    try:
        data = json.loads(body)
    except ValueError as e: # JSONDecodeError and UnicodeDecodeError
        raise MalformedRequestError(f"Request body is not valid JSON: {e}")
    try:
        return schemas.UserCreate.model_validate(data)
    except ValidationError as e:
        raise MalformedRequestError(f"Request body does not describe a user: {e.error_count()} invalid field(s)")

# --- Authentication Endpoints ---
@app.get("/auth")
async def check_authenticated(principal: schemas.Principal = Depends(require_principal)):
    return {"authenticated": True, "email": principal.email}

@app.post(
    "/register",
    response_model=schemas.User,
    responses={400: {"description": "Malformed body, rule violations, or email already registered"}},
)
async def register_user(
    candidate: schemas.UserCreate = Depends(read_candidate),
    service: RegistrationService = Depends(get_registration_service),
):
    result = await service.register(candidate)
    if isinstance(result, ValidationFailed):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=schemas.ValidationErrors(errors=result.errors).model_dump(),
        )
    if isinstance(result, AlreadyExists):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=schemas.ErrorMessage(error="user_exists", message=result.message).model_dump(),
        )
    return result.user

@app.post("/auth/token", response_model=schemas.Token)
async def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends(), db: AsyncSession = Depends(get_db)):
    user = await authenticate_user(db, email=form_data.username, password=form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = security.create_access_token(
        data={"sub": user.email}, expires_delta=access_token_expires
    )
    return {"access_token": access_token, "token_type": "bearer"}
