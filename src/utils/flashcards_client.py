"""Cliente Python da API de flashcards.

O token de acesso é passado explicitamente (``ApiSession``); nada é lido de
armazenamento global. ``generate_flashcards`` reproduz o fluxo do formulário:
pede os cards ao /api/smart e cria um por vez via POST /flashcards.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from src.schemas.chat_schemas import ChatCompletionRequest, ChatCompletionResponse
from src.services.card_parser import GeneratedCard
from src.services.generation_pipeline import (
    CardCreationResult,
    GenerationReport,
    run_generation_pipeline,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 30
DEFAULT_GENERATION_MODEL = "openai/gpt-4o-mini"


class ApiClientError(Exception):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


@dataclass
class ApiSession:
    access_token: str
    refresh_token: Optional[str] = None
    user_id: Optional[str] = None


class FlashcardsApiClient:
    def __init__(self, base_url: str, session: Optional[ApiSession] = None, transport: Optional[Any] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.transport = transport if transport is not None else requests.Session()

    def _headers(self, authenticated: bool) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if authenticated:
            if self.session is None:
                raise ApiClientError("Log in first: no session token available.", status=401)
            headers["Authorization"] = f"Bearer {self.session.access_token}"
        return headers

    def _send(self, method: str, path: str, authenticated: bool = True, **kwargs):
        return self.transport.request(
            method,
            f"{self.base_url}{path}",
            headers=self._headers(authenticated),
            timeout=DEFAULT_TIMEOUT_S,
            **kwargs,
        )

    @staticmethod
    def _error_message(response, fallback: str) -> str:
        try:
            body = response.json()
        except ValueError:
            return fallback
        if isinstance(body, dict) and isinstance(body.get("message"), str):
            return body["message"]
        return fallback

    def _json(self, response, fallback: str) -> Any:
        if not response.ok:
            raise ApiClientError(self._error_message(response, fallback), status=response.status_code)
        return response.json()

    # --- Auth ---

    def login(self, email: str, password: str) -> ApiSession:
        data = self._json(
            self._send("POST", "/auth/login", authenticated=False, json={"email": email, "password": password}),
            "Failed to log in.",
        )
        self.session = ApiSession(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            user_id=(data.get("user") or {}).get("id"),
        )
        return self.session

    def logout(self) -> None:
        self._json(self._send("POST", "/auth/logout"), "Failed to log out.")
        self.session = None

    # --- Flashcards ---

    def list_flashcards(self, **params: Any) -> Dict[str, Any]:
        query = {key: value for key, value in params.items() if value is not None}
        return self._json(self._send("GET", "/flashcards", params=query), "Failed to load flashcards.")

    def create_flashcard(self, front: str, back: str, source_type: str = "manual") -> CardCreationResult:
        try:
            response = self._send(
                "POST",
                "/flashcards",
                json={"front": front, "back": back, "source_type": source_type},
            )
        except requests.RequestException as e:
            logger.error(f"Network error while creating flashcard: {e}")
            return CardCreationResult(ok=False, status_code=0, message="Network error while creating flashcard.")

        if response.status_code == 401:
            return CardCreationResult(ok=False, status_code=401, message="Log in to create flashcards.")
        if not response.ok:
            return CardCreationResult(
                ok=False,
                status_code=response.status_code,
                message=self._error_message(response, "Failed to create flashcard."),
            )
        created = response.json()
        flashcard_id = uuid.UUID(str(created["id"])) if created.get("id") else None
        return CardCreationResult(ok=True, status_code=response.status_code, flashcard_id=flashcard_id)

    # --- Geração ---

    def chat_completion(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        data = self._json(
            self._send("POST", "/api/smart", authenticated=False, json=request.model_dump(exclude_none=True)),
            "Failed to generate flashcards.",
        )
        return ChatCompletionResponse.model_validate(data)

    def generate_flashcards(self, notes: str, model: str = DEFAULT_GENERATION_MODEL) -> GenerationReport:
        if self.session is None:
            raise ApiClientError("Log in to generate flashcards.", status=401)

        def create_ai_card(card: GeneratedCard) -> CardCreationResult:
            return self.create_flashcard(card.front, card.back, source_type="ai")

        return run_generation_pipeline(notes.strip(), self.chat_completion, create_ai_card, model)
