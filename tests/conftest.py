import uuid
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlalchemy.pool import StaticPool

from src.db.session import get_session
from src.main import app
from src.routes.deps import get_auth_client, get_openrouter_client
from src.utils.auth_client import AuthError, AuthSession, AuthUser, SignUpResult

USER_ID = "user-1"
OTHER_USER_ID = "user-2"
TOKEN = "token-123"
OTHER_TOKEN = "token-456"


class FakeAuthClient:
    """Auth provider em memória: tokens conhecidos mapeiam para usuários."""

    def __init__(self):
        self.tokens: Dict[str, str] = {TOKEN: USER_ID, OTHER_TOKEN: OTHER_USER_ID}
        self.passwords: Dict[str, str] = {"ada@example.com": "secret123"}
        self.signed_out: List[str] = []
        self.get_user_calls = 0

    def get_user(self, access_token: str) -> AuthUser:
        self.get_user_calls += 1
        if access_token not in self.tokens:
            raise AuthError("invalid JWT", status=401)
        return AuthUser(id=self.tokens[access_token], email="ada@example.com")

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        if self.passwords.get(email) != password:
            raise AuthError("Invalid login credentials", status=400)
        return AuthSession(
            access_token=TOKEN,
            refresh_token="refresh-123",
            user=AuthUser(id=USER_ID, email=email),
        )

    def sign_up(self, email: str, password: str) -> SignUpResult:
        if email in self.passwords:
            raise AuthError("User already registered", status=422)
        self.passwords[email] = password
        user = AuthUser(id=str(uuid.uuid4()), email=email, created_at="2024-01-01T10:00:00Z")
        session = AuthSession(access_token="new-token", refresh_token="new-refresh", user=user)
        return SignUpResult(user=user, session=session)

    def sign_out(self, access_token: str) -> None:
        if access_token not in self.tokens:
            raise AuthError("invalid JWT", status=401)
        self.signed_out.append(access_token)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def db_session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def auth_client():
    return FakeAuthClient()


@pytest.fixture
def client(engine, auth_client):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_auth_client] = lambda: auth_client
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {TOKEN}"}


@pytest.fixture
def other_headers():
    return {"Authorization": f"Bearer {OTHER_TOKEN}"}


@pytest.fixture
def override_openrouter():
    """Troca o cliente do OpenRouter usado pelas rotas."""

    def _override(fake_client: Optional[object]):
        app.dependency_overrides[get_openrouter_client] = lambda: fake_client
        return fake_client

    return _override
