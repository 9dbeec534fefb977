import uuid
from datetime import datetime
from typing import List, Optional

from sqlmodel import Session, col, or_, select

from src.models.flashcard import Flashcard
from src.models.timestamps import to_utc, utc_now


def create_flashcard(
    session: Session,
    user_id: str,
    front: str,
    back: str,
    source_type: str = "manual",
    source_generation_card_id: Optional[uuid.UUID] = None,
) -> Flashcard:
    flashcard = Flashcard(
        user_id=user_id,
        front=front,
        back=back,
        source_type=source_type,
        source_generation_card_id=source_generation_card_id,
    )
    session.add(flashcard)
    session.commit()
    session.refresh(flashcard)
    return flashcard


def list_flashcards(
    session: Session,
    user_id: str,
    limit: int = 20,
    cursor: Optional[datetime] = None,
    order: str = "desc",
    source_type: Optional[str] = None,
    include_deleted: bool = False,
    search: Optional[str] = None,
) -> List[Flashcard]:
    """
    Página de cards do usuário ordenada por created_at. O cursor é o created_at
    do último card da página anterior.
    """
    statement = select(Flashcard).where(Flashcard.user_id == user_id)

    if not include_deleted:
        statement = statement.where(col(Flashcard.deleted_at).is_(None))
    if source_type:
        statement = statement.where(Flashcard.source_type == source_type)
    if search:
        pattern = f"%{search}%"
        statement = statement.where(
            or_(col(Flashcard.front).ilike(pattern), col(Flashcard.back).ilike(pattern))
        )

    if order == "asc":
        if cursor is not None:
            statement = statement.where(Flashcard.created_at > to_utc(cursor))
        statement = statement.order_by(col(Flashcard.created_at).asc())
    else:
        if cursor is not None:
            statement = statement.where(Flashcard.created_at < to_utc(cursor))
        statement = statement.order_by(col(Flashcard.created_at).desc())

    return list(session.exec(statement.limit(limit)).all())


def next_cursor_for(rows: List[Flashcard], limit: int) -> Optional[datetime]:
    # Página cheia = pode haver mais
    if rows and len(rows) == limit:
        return rows[-1].created_at
    return None


def _active_card(session: Session, user_id: str, card_id: uuid.UUID) -> Optional[Flashcard]:
    statement = (
        select(Flashcard)
        .where(Flashcard.id == card_id)
        .where(Flashcard.user_id == user_id)
        .where(col(Flashcard.deleted_at).is_(None))
    )
    return session.exec(statement).first()


def get_flashcard(session: Session, user_id: str, card_id: uuid.UUID) -> Optional[Flashcard]:
    return _active_card(session, user_id, card_id)


def update_flashcard(
    session: Session, user_id: str, card_id: uuid.UUID, front: str, back: str
) -> Optional[Flashcard]:
    flashcard = _active_card(session, user_id, card_id)
    if flashcard is None:
        return None

    flashcard.front = front
    flashcard.back = back
    flashcard.updated_at = utc_now()
    session.add(flashcard)
    session.commit()
    session.refresh(flashcard)
    return flashcard


def soft_delete_flashcard(session: Session, user_id: str, card_id: uuid.UUID) -> bool:
    flashcard = _active_card(session, user_id, card_id)
    if flashcard is None:
        return False

    flashcard.deleted_at = utc_now()
    session.add(flashcard)
    session.commit()
    return True
