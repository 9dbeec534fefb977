import logging

from fastapi import APIRouter, Depends

from src.routes.deps import get_auth_client, require_access_token
from src.routes.errors import ApiError
from src.schemas.auth_schemas import (
    AuthUserResponse,
    LoginRequest,
    LoginResponse,
    LoginUserResponse,
    SignupRequest,
    SignupResponse,
)
from src.schemas.flashcard_schemas import MessageResponse
from src.models.timestamps import utc_now
from src.utils.auth_client import AuthError, SupabaseAuthClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=SignupResponse, status_code=201)
def signup(payload: SignupRequest, auth_client: SupabaseAuthClient = Depends(get_auth_client)):
    try:
        result = auth_client.sign_up(payload.email, payload.password)
    except AuthError as e:
        logger.info(f"Signup rejected by auth provider: {e.message}")
        raise ApiError(400, e.message)

    if result.user is None or result.session is None:
        raise ApiError(400, "Unable to sign up. Check email confirmation settings and try again.")

    return SignupResponse(
        user=AuthUserResponse(
            id=result.user.id,
            email=result.user.email or payload.email,
            created_at=result.user.created_at or utc_now(),
        ),
        access_token=result.session.access_token,
        refresh_token=result.session.refresh_token,
    )


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, auth_client: SupabaseAuthClient = Depends(get_auth_client)):
    try:
        session = auth_client.sign_in_with_password(payload.email, payload.password)
    except AuthError as e:
        logger.info(f"Login rejected by auth provider: {e.message}")
        raise ApiError(401, "Invalid email or password.")

    return LoginResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        user=LoginUserResponse(id=session.user.id, email=session.user.email or payload.email),
    )


@router.post("/logout", response_model=MessageResponse)
def logout(
    token: str = Depends(require_access_token),
    auth_client: SupabaseAuthClient = Depends(get_auth_client),
):
    try:
        auth_client.sign_out(token)
    except AuthError as e:
        if e.status in (401, 403):
            raise ApiError(401, "Unauthorized.")
        logger.error(f"Logout failed: {e.message}")
        raise ApiError(502, "Failed to log out.")
    return MessageResponse(message="Logged out.")
