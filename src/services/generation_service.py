import logging
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from src.models.generation import GenerationCard, GenerationSession
from src.models.timestamps import to_utc
from src.services import analytics_service, flashcard_service
from src.services.card_parser import GeneratedCard
from src.services.generation_pipeline import CardCreationResult

logger = logging.getLogger(__name__)

MODEL_PROVIDER = "openrouter"


def record_generation(
    session: Session, user_id: str, notes: str, model: str, cards: List[GeneratedCard]
) -> GenerationSession:
    """Guarda a sessão de geração e os cards propostos pelo modelo, na ordem."""
    generation = GenerationSession(
        user_id=user_id,
        input_text=notes,
        input_char_count=len(notes),
        model_provider=MODEL_PROVIDER,
        model_name=model,
    )
    session.add(generation)
    for position, card in enumerate(cards):
        session.add(
            GenerationCard(
                session_id=generation.id,
                user_id=user_id,
                front=card.front,
                back=card.back,
                position=position,
            )
        )
    analytics_service.log_event(
        session, user_id, "generate", generation_session_id=generation.id, commit=False
    )
    session.commit()
    session.refresh(generation)
    return generation


class DatabaseCardCreator:
    """
    create_card do pipeline no lado do servidor: insere direto no banco,
    ligando cada flashcard ao card de geração correspondente.
    """

    def __init__(self, session: Session, user_id: str, generation_cards: List[GenerationCard]):
        self.session = session
        self.user_id = user_id
        self._pending = list(generation_cards)

    def __call__(self, card: GeneratedCard) -> CardCreationResult:
        source = self._pending.pop(0) if self._pending else None
        try:
            flashcard = flashcard_service.create_flashcard(
                self.session,
                self.user_id,
                card.front,
                card.back,
                source_type="ai",
                source_generation_card_id=source.id if source else None,
            )
        except SQLAlchemyError:
            logger.exception("Failed to save generated flashcard")
            self.session.rollback()
            return CardCreationResult(ok=False, status_code=500, message="Failed to save generated flashcards.")

        return CardCreationResult(ok=True, status_code=201, flashcard_id=flashcard.id)


def list_sessions(
    session: Session, user_id: str, limit: int = 20, cursor: Optional[datetime] = None
) -> List[GenerationSession]:
    statement = select(GenerationSession).where(GenerationSession.user_id == user_id)
    if cursor is not None:
        statement = statement.where(GenerationSession.created_at < to_utc(cursor))
    statement = statement.order_by(col(GenerationSession.created_at).desc()).limit(limit)
    return list(session.exec(statement).all())


def list_session_cards(session: Session, user_id: str, session_id: uuid.UUID) -> Optional[List[GenerationCard]]:
    generation = session.exec(
        select(GenerationSession)
        .where(GenerationSession.id == session_id)
        .where(GenerationSession.user_id == user_id)
    ).first()
    if generation is None:
        return None

    statement = (
        select(GenerationCard)
        .where(GenerationCard.session_id == session_id)
        .order_by(col(GenerationCard.position).asc())
    )
    return list(session.exec(statement).all())
