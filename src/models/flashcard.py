import uuid
from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field

from src.models.timestamps import utc_now

SOURCE_TYPES = ("manual", "ai")

class Flashcard(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    # Dono do card (id do usuário no provedor de auth)
    user_id: str = Field(index=True)
    front: str
    back: str

    source_type: str = "manual" # "manual" ou "ai"
    source_generation_card_id: Optional[uuid.UUID] = Field(default=None, foreign_key="generationcard.id")

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)
    # Soft delete: preenchido = card inativo
    deleted_at: Optional[datetime] = None
