"""Cliente do Supabase Auth (API REST do GoTrue).

Validação de credenciais, emissão e verificação de tokens ficam todas no
provedor; aqui só traduzimos as chamadas HTTP.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 10


class AuthError(Exception):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


@dataclass
class AuthUser:
    id: str
    email: Optional[str] = None
    created_at: Optional[str] = None


@dataclass
class AuthSession:
    access_token: str
    refresh_token: str
    user: AuthUser


@dataclass
class SignUpResult:
    user: Optional[AuthUser]
    # None quando o projeto exige confirmação de email
    session: Optional[AuthSession]


class SupabaseAuthClient:
    def __init__(self, url: Optional[str], api_key: Optional[str], transport: Optional[Any] = None):
        if not url or not api_key:
            raise AuthError("Supabase URL and key must be configured.")
        self.base_url = f"{url.rstrip('/')}/auth/v1"
        self.api_key = api_key
        self.transport = transport if transport is not None else requests.Session()

    def _headers(self, token: Optional[str] = None) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {token or self.api_key}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, token: Optional[str] = None, **kwargs) -> Dict[str, Any]:
        try:
            response = self.transport.request(
                method,
                f"{self.base_url}{path}",
                headers=self._headers(token),
                timeout=DEFAULT_TIMEOUT_S,
                **kwargs,
            )
        except requests.RequestException as e:
            logger.error(f"Auth provider unreachable: {e}")
            raise AuthError("Auth provider unreachable.") from e

        if not response.ok:
            raise AuthError(self._error_message(response), status=response.status_code)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise AuthError("Invalid response from auth provider.", status=response.status_code) from e

    @staticmethod
    def _error_message(response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"Auth request failed with status {response.status_code}."
        if isinstance(body, dict):
            for key in ("msg", "message", "error_description", "error"):
                if isinstance(body.get(key), str) and body[key]:
                    return body[key]
        return f"Auth request failed with status {response.status_code}."

    @staticmethod
    def _parse_user(data: Optional[Dict[str, Any]]) -> Optional[AuthUser]:
        if not isinstance(data, dict) or not data.get("id"):
            return None
        return AuthUser(id=str(data["id"]), email=data.get("email"), created_at=data.get("created_at"))

    def _parse_session(self, data: Dict[str, Any]) -> Optional[AuthSession]:
        user = self._parse_user(data.get("user"))
        if not data.get("access_token") or not data.get("refresh_token") or user is None:
            return None
        return AuthSession(
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
            user=user,
        )

    def sign_up(self, email: str, password: str) -> SignUpResult:
        data = self._request("POST", "/signup", json={"email": email, "password": password})
        session = self._parse_session(data)
        if session is not None:
            return SignUpResult(user=session.user, session=session)
        # Sem sessão o GoTrue devolve o próprio usuário no corpo
        return SignUpResult(user=self._parse_user(data), session=None)

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        data = self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        session = self._parse_session(data)
        if session is None:
            raise AuthError("Auth provider returned no session.")
        return session

    def get_user(self, access_token: str) -> AuthUser:
        user = self._parse_user(self._request("GET", "/user", token=access_token))
        if user is None:
            raise AuthError("Unauthorized.", status=401)
        return user

    def sign_out(self, access_token: str) -> None:
        self._request("POST", "/logout", token=access_token)
