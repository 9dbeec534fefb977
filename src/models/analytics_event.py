import uuid
from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field

from src.models.timestamps import utc_now

EVENT_TYPES = (
    "generate",
    "accept",
    "edit",
    "reject",
    "create_manual",
    "start_srs",
    "complete_srs",
)

class AnalyticsEvent(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)

    user_id: str = Field(index=True)
    # Um dos EVENT_TYPES
    event_type: str

    # Contexto opcional do evento
    generation_session_id: Optional[uuid.UUID] = None
    generation_card_id: Optional[uuid.UUID] = None
    flashcard_id: Optional[uuid.UUID] = None
    srs_session_id: Optional[uuid.UUID] = None
