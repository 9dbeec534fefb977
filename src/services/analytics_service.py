import logging
import uuid
from datetime import datetime, timezone
from typing import Optional
from sqlmodel import Session, select, func
from src.models.analytics_event import AnalyticsEvent, EVENT_TYPES
from src.models.timestamps import utc_now

logger = logging.getLogger(__name__)

# Grava o evento na mesma sessão da operação que o originou
def log_event(
    session: Session,
    user_id: str,
    event_type: str,
    flashcard_id: Optional[uuid.UUID] = None,
    generation_session_id: Optional[uuid.UUID] = None,
    generation_card_id: Optional[uuid.UUID] = None,
    commit: bool = True,
) -> AnalyticsEvent:
    if event_type not in EVENT_TYPES:
        raise ValueError(f"Unknown analytics event type: {event_type}")

    event = AnalyticsEvent(
        user_id=user_id,
        event_type=event_type,
        flashcard_id=flashcard_id,
        generation_session_id=generation_session_id,
        generation_card_id=generation_card_id,
    )
    session.add(event)
    if commit:
        session.commit()
    logger.debug(f"Analytics event {event_type} for user {user_id}")
    return event

# Relatório do dia (usado na rota GET /analytics/usage)
def get_daily_event_stats(session: Session, user_id: str):
    today = utc_now().date()
    start_of_day = datetime.combine(today, datetime.min.time(), tzinfo=timezone.utc)

    statement = (
        select(AnalyticsEvent.event_type, func.count(AnalyticsEvent.id))
        .where(AnalyticsEvent.user_id == user_id)
        .where(AnalyticsEvent.created_at >= start_of_day)
        .group_by(AnalyticsEvent.event_type)
    )

    counts = {event_type: 0 for event_type in EVENT_TYPES}
    for event_type, total in session.exec(statement).all():
        counts[event_type] = total

    return {
        "date": str(today),
        "total_events": sum(counts.values()),
        "by_type": counts,
    }
