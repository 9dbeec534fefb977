import json
from unittest.mock import MagicMock

import pytest
import requests

from src.utils.auth_client import AuthError, SupabaseAuthClient

USER = {"id": "u-1", "email": "ada@example.com", "created_at": "2024-01-01T10:00:00Z"}


def make_response(status, body=None):
    response = MagicMock()
    response.status_code = status
    response.ok = status < 400
    response.content = json.dumps(body).encode() if body is not None else b""
    response.json.side_effect = lambda: json.loads(response.content)
    return response


@pytest.fixture
def transport():
    return MagicMock()


@pytest.fixture
def auth(transport):
    return SupabaseAuthClient("https://demo.supabase.co/", "anon-key", transport=transport)


def test_requires_configuration():
    with pytest.raises(AuthError):
        SupabaseAuthClient(None, "key")
    with pytest.raises(AuthError):
        SupabaseAuthClient("https://demo.supabase.co", "")


def test_get_user_sends_user_token(auth, transport):
    transport.request.return_value = make_response(200, USER)

    user = auth.get_user("user-token")

    assert user.id == "u-1"
    args, kwargs = transport.request.call_args
    assert args == ("GET", "https://demo.supabase.co/auth/v1/user")
    assert kwargs["headers"]["Authorization"] == "Bearer user-token"
    assert kwargs["headers"]["apikey"] == "anon-key"


def test_get_user_rejected(auth, transport):
    transport.request.return_value = make_response(401, {"msg": "invalid JWT"})

    with pytest.raises(AuthError) as exc_info:
        auth.get_user("bad")

    assert exc_info.value.status == 401
    assert exc_info.value.message == "invalid JWT"


def test_sign_in_with_password(auth, transport):
    transport.request.return_value = make_response(
        200, {"access_token": "a", "refresh_token": "r", "user": USER}
    )

    session = auth.sign_in_with_password("ada@example.com", "secret123")

    assert session.access_token == "a"
    assert session.user.email == "ada@example.com"
    kwargs = transport.request.call_args.kwargs
    assert kwargs["params"] == {"grant_type": "password"}


def test_sign_up_without_session(auth, transport):
    transport.request.return_value = make_response(200, USER)

    result = auth.sign_up("ada@example.com", "secret123")

    assert result.user.id == "u-1"
    assert result.session is None


def test_network_error_becomes_auth_error(auth, transport):
    transport.request.side_effect = requests.ConnectionError("down")
    with pytest.raises(AuthError, match="unreachable"):
        auth.get_user("token")


def test_sign_out(auth, transport):
    transport.request.return_value = make_response(204)
    auth.sign_out("user-token")
    args, kwargs = transport.request.call_args
    assert args == ("POST", "https://demo.supabase.co/auth/v1/logout")
