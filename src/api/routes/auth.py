"""Authentication routes.

Endpoints (all under /api/auth):
- POST /signup: create an unverified account and mail a verification link
- POST /login: exchange email + password for a bearer token
- POST /forgot-password: mail a password reset link
- GET  /reset-password/{token}: password entry form
- POST /reset-password/{token}: set the new password
- GET  /verify/{token}: verification link target
- GET  /verified: confirmation text

Handlers that reach the store or bcrypt are plain functions so FastAPI runs
them in its threadpool. Mail goes out as a background task after the
response is sent.
"""

import logging
from pathlib import Path

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError as PydanticValidationError

from api.dependencies import get_mailer, get_settings, get_user_repo
from api.models import (
    ErrorResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    ResetPasswordRequest,
    SignupRequest,
    TokenResponse,
)
from domain.model.errors import (
    AuthenticationError,
    DuplicateError,
    InvalidTokenError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from port.mailer import MailerPort
from port.user_repository import UserRepository
from services import auth_service, password_reset_service, verification_service
from services.notifications import send_reset_link
from services.token_service import issue_session_token, read_verification_token
from utils.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

templates = Jinja2Templates(directory=str(Path(__file__).parent.parent / "templates"))

VERIFIED_MESSAGE = "Your account has been successfully verified."

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


async def read_new_password(request: Request) -> str:
    """Read `password` from a JSON body or from the HTML form post."""
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith("application/json"):
            payload = ResetPasswordRequest.model_validate(await request.json())
            return payload.password
        form = await request.form()
        password = form.get("password")
    except (ValueError, PydanticValidationError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Password is required")

    if not isinstance(password, str):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Password is required")
    return password


@router.post(
    "/signup",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
)
def signup(
    request: SignupRequest,
    background_tasks: BackgroundTasks,
    repo: UserRepository = Depends(get_user_repo),
    mailer: MailerPort = Depends(get_mailer),
    settings: Settings = Depends(get_settings),
):
    """Register a new account.

    Raises:
        HTTPException: 400 if the email is taken or the password is rejected,
            500 if the store fails
    """
    try:
        user = auth_service.register(repo, request.email, request.password, settings.bcrypt_rounds)
    except (DuplicateError, ValidationError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    background_tasks.add_task(verification_service.request_verification, mailer, settings, user.email)

    logger.info("User registered", extra={"userId": user.id, "email": user.email})
    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=TokenResponse, responses=_ERROR_RESPONSES)
def login(
    request: LoginRequest,
    repo: UserRepository = Depends(get_user_repo),
    settings: Settings = Depends(get_settings),
):
    """Login user and return a bearer token valid for one hour.

    Raises:
        HTTPException: 401 for an unknown email or a wrong password (same body)
    """
    try:
        user = auth_service.authenticate(repo, request.email, request.password)
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    token = issue_session_token(user.id, settings.jwt_secret, ttl=settings.session_token_ttl)

    logger.info("User logged in", extra={"userId": user.id})
    return TokenResponse(token=token)


@router.post("/forgot-password", response_model=MessageResponse, responses=_ERROR_RESPONSES)
def forgot_password(
    request: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    repo: UserRepository = Depends(get_user_repo),
    mailer: MailerPort = Depends(get_mailer),
    settings: Settings = Depends(get_settings),
):
    """Issue a reset token and mail the reset link."""
    try:
        token = password_reset_service.request_password_reset(
            repo, request.email, ttl=settings.reset_token_ttl
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    background_tasks.add_task(send_reset_link, mailer, settings.public_base_url, request.email, token)
    return MessageResponse(message="Password reset email sent")


@router.get("/reset-password/{token}", response_class=HTMLResponse)
async def reset_password_form(request: Request, token: str):
    """Render the password entry form. The token is checked on submit."""
    return templates.TemplateResponse(request, "reset_password.html", {"token": token})


@router.post("/reset-password/{token}", response_class=HTMLResponse, responses=_ERROR_RESPONSES)
def reset_password(
    request: Request,
    token: str,
    password: str = Depends(read_new_password),
    repo: UserRepository = Depends(get_user_repo),
    settings: Settings = Depends(get_settings),
):
    """Set a new password for the holder of token."""
    try:
        password_reset_service.complete_password_reset(
            repo, token, password, rounds=settings.bcrypt_rounds
        )
    except (InvalidTokenError, ValidationError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return templates.TemplateResponse(request, "password_reset_success.html", {})


@router.get("/verify/{token}", responses=_ERROR_RESPONSES)
def verify(
    token: str,
    repo: UserRepository = Depends(get_user_repo),
    settings: Settings = Depends(get_settings),
):
    """Mark the account named by a verification link as verified."""
    try:
        email = read_verification_token(token, settings.jwt_secret)
        verification_service.confirm_verification(repo, email)
    except InvalidTokenError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return RedirectResponse(
        url=f"{settings.public_base_url}/api/auth/verified",
        status_code=status.HTTP_302_FOUND,
    )


@router.get("/verified", response_class=PlainTextResponse)
async def verified():
    return VERIFIED_MESSAGE
