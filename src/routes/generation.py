import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from src.db.session import get_session
from src.routes.deps import get_openrouter_client, parse_uuid, require_user_id
from src.routes.errors import ApiError
from src.schemas.generation_schemas import (
    GenerateFlashcardsRequest,
    GenerationCardListResponse,
    GenerationCardResponse,
    GenerationItemResponse,
    GenerationReportResponse,
    GenerationSessionListResponse,
    GenerationSessionResponse,
)
from src.services.generation_pipeline import GenerationError, create_generated_cards, generate_cards
from src.services.generation_service import (
    DatabaseCardCreator,
    list_session_cards,
    list_sessions,
    record_generation,
)
from src.utils.config import settings
from src.utils.openrouter_client import OpenRouterClient, OpenRouterError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["generation"])


@router.post("/flashcards/generate", response_model=GenerationReportResponse, status_code=201)
def generate_flashcards(
    payload: GenerateFlashcardsRequest,
    response: Response,
    user_id: str = Depends(require_user_id),
    client: OpenRouterClient = Depends(get_openrouter_client),
    session: Session = Depends(get_session),
):
    model = payload.model or settings.GENERATION_MODEL

    # 1. Geração + parse (nenhum card é criado se falhar)
    try:
        cards = generate_cards(payload.notes, client.create_chat_completion, model)
    except OpenRouterError as e:
        logger.error(f"Generation request failed: {e.message} (status={e.status})")
        raise ApiError(502, "Failed to generate flashcards.", e.message)
    except GenerationError as e:
        raise ApiError(422, e.message)

    # 2. Registro da sessão de geração
    try:
        generation = record_generation(session, user_id, payload.notes, model, cards)
    except SQLAlchemyError:
        logger.exception("Failed to record generation session")
        raise ApiError(500, "Failed to save generated flashcards.")

    # 3. Criação sequencial, para na primeira falha
    creator = DatabaseCardCreator(session, user_id, sorted(generation.cards, key=lambda c: c.position))
    report = create_generated_cards(cards, creator, model)

    if report.created_count == 0:
        response.status_code = 200

    return GenerationReportResponse(
        session_id=generation.id,
        model=report.model,
        created_count=report.created_count,
        stopped_early=report.stopped_early,
        items=[
            GenerationItemResponse(
                position=item.position,
                front=item.card.front,
                back=item.card.back,
                status=item.status,
                flashcard_id=item.flashcard_id,
                error=item.error,
            )
            for item in report.items
        ],
    )


@router.get("/generation-sessions", response_model=GenerationSessionListResponse)
def read_generation_sessions(
    user_id: str = Depends(require_user_id),
    limit: int = Query(20, ge=1, le=100),
    cursor: Optional[datetime] = None,
    session: Session = Depends(get_session),
):
    try:
        rows = list_sessions(session, user_id, limit=limit, cursor=cursor)
    except SQLAlchemyError:
        logger.exception("Failed to list generation sessions")
        raise ApiError(500, "Failed to load generation sessions.")

    return GenerationSessionListResponse(
        data=[GenerationSessionResponse.model_validate(row) for row in rows],
        next_cursor=rows[-1].created_at if rows and len(rows) == limit else None,
    )


@router.get("/generation-sessions/{session_id}/cards", response_model=GenerationCardListResponse)
def read_generation_cards(
    session_id: str,
    user_id: str = Depends(require_user_id),
    session: Session = Depends(get_session),
):
    parsed_id = parse_uuid(session_id, "Invalid generation session id.")
    try:
        cards = list_session_cards(session, user_id, parsed_id)
    except SQLAlchemyError:
        logger.exception("Failed to list generation cards")
        raise ApiError(500, "Failed to load generation cards.")

    if cards is None:
        raise ApiError(404, "Generation session not found.")
    return GenerationCardListResponse(
        data=[GenerationCardResponse.model_validate(card) for card in cards],
        next_cursor=None,
    )
