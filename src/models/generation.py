import uuid
from datetime import datetime
from typing import List, Optional
from sqlmodel import SQLModel, Field, Relationship

from src.models.timestamps import utc_now

class GenerationSession(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: str = Field(index=True)

    # Texto colado pelo usuário
    input_text: str
    input_char_count: int

    model_provider: str
    model_name: str
    created_at: datetime = Field(default_factory=utc_now, index=True)

    cards: List["GenerationCard"] = Relationship(back_populates="session")


class GenerationCard(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    session_id: uuid.UUID = Field(foreign_key="generationsession.id", index=True)
    user_id: str

    front: str
    back: str
    # Ordem em que o modelo devolveu o card
    position: int
    created_at: datetime = Field(default_factory=utc_now)

    session: Optional[GenerationSession] = Relationship(back_populates="cards")
