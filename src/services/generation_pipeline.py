import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from src.schemas.chat_schemas import ChatCompletionRequest, ChatCompletionResponse, ChatMessage
from src.services.card_parser import CardParseFailure, GeneratedCard, parse_generated_cards

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_TOKENS = 800

SYSTEM_PROMPT = (
    "You generate study flashcards. Return only valid JSON. "
    "Output a JSON array of objects with keys: front, back. "
    "Each flashcard should contain exactly one fact. "
    "Keep answers short and unambiguous. Avoid multi-part questions. "
    "Prefer definitions, relationships, cause-effect, concept-example."
)


class GenerationError(Exception):
    """O pipeline inteiro falhou antes de criar qualquer card."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass
class CardCreationResult:
    ok: bool
    status_code: int
    flashcard_id: Optional[uuid.UUID] = None
    message: Optional[str] = None


@dataclass
class GenerationItem:
    position: int
    card: GeneratedCard
    status: str = "skipped" # "created", "failed" ou "skipped"
    flashcard_id: Optional[uuid.UUID] = None
    error: Optional[str] = None


@dataclass
class GenerationReport:
    model: str
    items: List[GenerationItem] = field(default_factory=list)
    stopped_early: bool = False

    @property
    def created_count(self) -> int:
        return sum(1 for item in self.items if item.status == "created")


CompleteFn = Callable[[ChatCompletionRequest], ChatCompletionResponse]
CreateCardFn = Callable[[GeneratedCard], CardCreationResult]

# ---------------------------------------------------------
# 1. O PROMPT
# ---------------------------------------------------------

def build_generation_request(
    notes: str,
    model: str,
    temperature: float = DEFAULT_TEMPERATURE,
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> ChatCompletionRequest:
    return ChatCompletionRequest(
        model=model,
        messages=[
            ChatMessage(role="system", content=SYSTEM_PROMPT),
            ChatMessage(role="user", content=f"Notes:\n{notes}"),
        ],
        temperature=temperature,
        max_tokens=max_tokens,
    )

# ---------------------------------------------------------
# 2. GERAÇÃO + PARSE
# ---------------------------------------------------------

def generate_cards(
    notes: str,
    complete: CompleteFn,
    model: str,
    temperature: float = DEFAULT_TEMPERATURE,
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> List[GeneratedCard]:
    logger.info(f"Generating flashcards with {model} from {len(notes)} chars of notes")
    completion = complete(build_generation_request(notes, model, temperature, max_tokens))

    content = (completion.first_content() or "").strip()
    if not content:
        raise GenerationError("The model returned an empty response.")

    result = parse_generated_cards(content)
    if isinstance(result, CardParseFailure):
        logger.warning(f"Discarding model output: {result.reason}")
        raise GenerationError(result.reason)

    if result.discarded:
        logger.info(f"Dropped {result.discarded} malformed item(s) from model output")
    return result.cards

# ---------------------------------------------------------
# 3. CRIAÇÃO SEQUENCIAL
# ---------------------------------------------------------

def create_generated_cards(cards: List[GeneratedCard], create_card: CreateCardFn, model: str) -> GenerationReport:
    """
    Cria um card por vez. Para na primeira falha (auth, erro de servidor...)
    e mantém os cards já criados; os restantes ficam como "skipped".
    """
    report = GenerationReport(
        model=model,
        items=[GenerationItem(position=i, card=card) for i, card in enumerate(cards)],
    )

    for item in report.items:
        result = create_card(item.card)
        if not result.ok:
            item.status = "failed"
            item.error = result.message or f"Failed with status {result.status_code}."
            report.stopped_early = True
            logger.warning(
                f"Stopping generation after {report.created_count} card(s): "
                f"status={result.status_code} {item.error}"
            )
            break

        item.status = "created"
        item.flashcard_id = result.flashcard_id

    return report

# ---------------------------------------------------------
# 4. O PIPELINE
# ---------------------------------------------------------

def run_generation_pipeline(
    notes: str,
    complete: CompleteFn,
    create_card: CreateCardFn,
    model: str,
    temperature: float = DEFAULT_TEMPERATURE,
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> GenerationReport:
    cards = generate_cards(notes, complete, model, temperature, max_tokens)
    return create_generated_cards(cards, create_card, model)
