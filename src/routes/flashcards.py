import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from src.db.session import get_session
from src.routes.deps import parse_uuid, require_user_id
from src.routes.errors import ApiError
from src.schemas.flashcard_schemas import (
    CreateFlashcardRequest,
    FlashcardListQuery,
    FlashcardListResponse,
    FlashcardResponse,
    FlashcardUpdateResponse,
    MessageResponse,
    UpdateFlashcardRequest,
)
from src.services import analytics_service
from src.services.flashcard_service import (
    create_flashcard,
    get_flashcard,
    list_flashcards,
    next_cursor_for,
    soft_delete_flashcard,
    update_flashcard,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/flashcards", tags=["flashcards"])

INVALID_ID = "Invalid flashcard id."
NOT_FOUND = "Flashcard not found."


@router.get("", response_model=FlashcardListResponse)
def read_flashcards(
    query: Annotated[FlashcardListQuery, Query()],
    user_id: str = Depends(require_user_id),
    session: Session = Depends(get_session),
):
    search = query.search.strip() if query.search else None
    try:
        rows = list_flashcards(
            session,
            user_id,
            limit=query.limit,
            cursor=query.cursor,
            order=query.order,
            source_type=query.source_type,
            include_deleted=query.include_deleted,
            search=search or None,
        )
    except SQLAlchemyError:
        logger.exception("Failed to list flashcards")
        raise ApiError(500, "Failed to load flashcards.")

    return FlashcardListResponse(
        data=[FlashcardResponse.model_validate(row) for row in rows],
        next_cursor=next_cursor_for(rows, query.limit),
    )


@router.post("", response_model=FlashcardResponse, status_code=201)
def add_flashcard(
    payload: CreateFlashcardRequest,
    user_id: str = Depends(require_user_id),
    session: Session = Depends(get_session),
):
    source_type = payload.source_type or "manual"
    try:
        flashcard = create_flashcard(session, user_id, payload.front, payload.back, source_type=source_type)
        if source_type == "manual":
            analytics_service.log_event(session, user_id, "create_manual", flashcard_id=flashcard.id)
    except SQLAlchemyError:
        logger.exception("Failed to create flashcard")
        raise ApiError(500, "Failed to create flashcard.")

    return FlashcardResponse.model_validate(flashcard)


@router.get("/{card_id}", response_model=FlashcardResponse)
def read_flashcard(
    card_id: str,
    user_id: str = Depends(require_user_id),
    session: Session = Depends(get_session),
):
    parsed_id = parse_uuid(card_id, INVALID_ID)
    try:
        flashcard = get_flashcard(session, user_id, parsed_id)
    except SQLAlchemyError:
        logger.exception("Failed to load flashcard")
        raise ApiError(500, "Failed to load flashcard.")

    if flashcard is None:
        raise ApiError(404, NOT_FOUND)
    return FlashcardResponse.model_validate(flashcard)


@router.patch("/{card_id}", response_model=FlashcardUpdateResponse)
def edit_flashcard(
    card_id: str,
    payload: UpdateFlashcardRequest,
    user_id: str = Depends(require_user_id),
    session: Session = Depends(get_session),
):
    parsed_id = parse_uuid(card_id, INVALID_ID)
    try:
        flashcard = update_flashcard(session, user_id, parsed_id, payload.front, payload.back)
    except SQLAlchemyError:
        logger.exception("Failed to update flashcard")
        raise ApiError(500, "Failed to update flashcard.")

    if flashcard is None:
        raise ApiError(404, NOT_FOUND)
    return FlashcardUpdateResponse.model_validate(flashcard)


@router.delete("/{card_id}", response_model=MessageResponse)
def remove_flashcard(
    card_id: str,
    user_id: str = Depends(require_user_id),
    session: Session = Depends(get_session),
):
    parsed_id = parse_uuid(card_id, INVALID_ID)
    try:
        deleted = soft_delete_flashcard(session, user_id, parsed_id)
    except SQLAlchemyError:
        logger.exception("Failed to delete flashcard")
        raise ApiError(500, "Failed to delete flashcard.")

    if not deleted:
        raise ApiError(404, NOT_FOUND)
    return MessageResponse(message="Deleted.")
