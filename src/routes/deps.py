import logging
import uuid
from typing import Optional

from fastapi import Depends, Header

from src.routes.errors import ApiError
from src.utils.auth_client import AuthError, SupabaseAuthClient
from src.utils.config import settings
from src.utils.openrouter_client import OpenRouterClient

logger = logging.getLogger(__name__)


def get_auth_client() -> SupabaseAuthClient:
    try:
        return SupabaseAuthClient(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    except AuthError as e:
        logger.error(f"Auth provider is not configured: {e}")
        raise ApiError(500, "Auth provider is not configured.")


def get_openrouter_client() -> OpenRouterClient:
    if not settings.OPENROUTER_API_KEY:
        raise ApiError(500, "OpenRouter API key is not configured.")
    return OpenRouterClient(
        api_key=settings.OPENROUTER_API_KEY,
        base_url=settings.OPENROUTER_BASE_URL,
        max_retries=settings.OPENROUTER_MAX_RETRIES,
        min_retry_delay_ms=settings.OPENROUTER_MIN_RETRY_DELAY_MS,
        timeout_ms=settings.OPENROUTER_TIMEOUT_MS,
    )


def get_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        return None
    return token


def require_access_token(authorization: Optional[str] = Header(default=None)) -> str:
    token = get_bearer_token(authorization)
    if not token:
        raise ApiError(401, "Missing or invalid Authorization header.")
    return token


def require_user_id(
    token: str = Depends(require_access_token),
    auth_client: SupabaseAuthClient = Depends(get_auth_client),
) -> str:
    """Valida o token no provedor e devolve o id do usuário."""
    try:
        user = auth_client.get_user(token)
    except AuthError as e:
        logger.info(f"Rejected bearer token: {e.message}")
        raise ApiError(401, "Unauthorized.")
    return user.id


def parse_uuid(value: str, message: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError:
        raise ApiError(422, message)
