"""Cliente HTTP para o endpoint de chat completion do OpenRouter.

Cada chamada lógica pode virar várias tentativas: respostas 429/5xx e falhas
de rede (conexão, timeout) são repetidas com backoff exponencial + jitter.
Toda falha chega ao chamador como ``OpenRouterError``.
"""

import json
import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests
from pydantic import ValidationError

from src.schemas.chat_schemas import ChatCompletionRequest, ChatCompletionResponse

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
MAX_BACKOFF_MS = 2000
JITTER_MS = 100
CHUNK_SIZE = 8192


class OpenRouterError(Exception):
    """Erro único do cliente: status HTTP, código do provedor e corpo bruto são opcionais."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
        details: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details


@dataclass
class AttemptResponse:
    """Resposta de uma tentativa com o corpo já lido por inteiro."""

    status_code: int
    content: bytes

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.text)


class OpenRouterClient:
    """Cliente resiliente de chat completion.

    Args:
        api_key: Chave do OpenRouter. Obrigatória.
        base_url: Endpoint base (padrão: o documentado pelo provedor).
        max_retries: Tentativas extras; 2 significa até 3 chamadas no total.
        min_retry_delay_ms: Atraso base do backoff.
        timeout_ms: Limite total de cada tentativa (conexão + leitura do corpo).
        transport: Objeto com ``post`` compatível com ``requests.Session``.
        sleep: Função de espera em segundos (injetável nos testes).
        clock: Relógio monotônico em segundos usado no prazo de cada tentativa.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: Optional[str] = None,
        max_retries: int = 2,
        min_retry_delay_ms: int = 300,
        timeout_ms: int = 20000,
        transport: Optional[Any] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        if not api_key:
            raise OpenRouterError("OpenRouter API key is missing.")

        self.api_key = api_key
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.max_retries = max_retries
        self.min_retry_delay_ms = min_retry_delay_ms
        self.timeout_ms = timeout_ms
        self.transport = transport if transport is not None else requests.Session()
        self.sleep = sleep
        self.clock = clock

    def create_chat_completion(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        if not request.messages:
            raise OpenRouterError("At least one message is required.")

        payload = self.build_payload(request)
        try:
            response = self.request_with_retry(
                f"{self.base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                payload=payload,
            )
        except requests.RequestException as e:
            raise OpenRouterError("Failed to reach OpenRouter.", details=str(e)) from e

        if not response.ok:
            raise self.build_error_from_response(response)

        try:
            data = response.json()
            return ChatCompletionResponse(
                id=data["id"],
                model=data["model"],
                created=data["created"],
                choices=[
                    {
                        "index": choice["index"],
                        "message": choice["message"],
                        "finish_reason": choice.get("finish_reason"),
                    }
                    for choice in data.get("choices") or []
                ],
            )
        except (ValueError, KeyError, TypeError, ValidationError) as e:
            raise OpenRouterError(
                "Invalid response from OpenRouter.",
                status=response.status_code,
                details=str(e),
            ) from e

    def build_payload(self, request: ChatCompletionRequest) -> Dict[str, Any]:
        # Parâmetros opcionais só vão no payload quando definidos
        return request.model_dump(exclude_none=True)

    def request_with_retry(self, url: str, headers: Dict[str, str], payload: Dict[str, Any]):
        attempt = 0
        last_error: Optional[Exception] = None

        while attempt <= self.max_retries:
            try:
                response = self.send_attempt(url, headers, payload)
            except Exception as e:
                last_error = e
                if not self.is_retryable_error(e) or attempt >= self.max_retries:
                    raise

                delay = self.backoff_delay(attempt)
                logger.warning(
                    f"OpenRouter call failed ({type(e).__name__}) on attempt "
                    f"{attempt + 1}/{self.max_retries + 1}. Retrying in {delay:.0f}ms..."
                )
                self.sleep(delay / 1000)
                attempt += 1
                continue

            if self.is_retryable_status(response.status_code) and attempt < self.max_retries:
                delay = self.backoff_delay(attempt)
                logger.warning(
                    f"OpenRouter returned {response.status_code} on attempt "
                    f"{attempt + 1}/{self.max_retries + 1}. Retrying in {delay:.0f}ms..."
                )
                self.sleep(delay / 1000)
                attempt += 1
                continue

            return response

        # Não deveria acontecer: o loop sempre retorna ou levanta
        raise last_error or OpenRouterError("Failed to reach OpenRouter.")

    def send_attempt(self, url: str, headers: Dict[str, str], payload: Dict[str, Any]) -> AttemptResponse:
        timeout = self.timeout_ms / 1000
        started = self.clock()
        response = self.transport.post(url, headers=headers, json=payload, timeout=timeout, stream=True)
        try:
            chunks = []
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                chunks.append(chunk)
                # O timeout do requests vale por leitura; aqui o prazo é da tentativa inteira
                if self.clock() - started > timeout:
                    raise requests.Timeout(f"OpenRouter attempt exceeded {self.timeout_ms}ms.")
        finally:
            response.close()
        return AttemptResponse(status_code=response.status_code, content=b"".join(chunks))

    @staticmethod
    def is_retryable_status(status: int) -> bool:
        return status == 429 or 500 <= status <= 599

    @staticmethod
    def is_retryable_error(error: Exception) -> bool:
        # Timeout e erros de conexão entram aqui
        return isinstance(error, requests.RequestException)

    def backoff_delay(self, attempt: int) -> float:
        """Atraso em ms para a tentativa ``attempt`` (base 0)."""
        jitter = random.random() * JITTER_MS
        return min(MAX_BACKOFF_MS, self.min_retry_delay_ms * (2 ** attempt) + jitter)

    @staticmethod
    def build_error_from_response(response) -> OpenRouterError:
        status = response.status_code
        text = response.text or ""
        message = f"OpenRouter request failed with status {status}."
        code = None
        details = None

        if text:
            details = text
            try:
                parsed = json.loads(text)
            except ValueError:
                parsed = None

            error_payload = parsed.get("error") if isinstance(parsed, dict) else None
            if isinstance(error_payload, dict):
                if error_payload.get("message"):
                    message = str(error_payload["message"])
                if error_payload.get("code") is not None:
                    code = str(error_payload["code"])

        logger.error(f"OpenRouter request failed: status={status} code={code}")
        return OpenRouterError(message, status=status, code=code, details=details)
