import uuid
from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, StringConstraints

MAX_NOTES_LENGTH = 5000

# Input
class GenerateFlashcardsRequest(BaseModel):
    notes: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_NOTES_LENGTH)]
    model: Optional[Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]] = None

# Resultado por card gerado
class GenerationItemResponse(BaseModel):
    position: int
    front: str
    back: str
    status: Literal["created", "failed", "skipped"]
    flashcard_id: Optional[uuid.UUID] = None
    error: Optional[str] = None

class GenerationReportResponse(BaseModel):
    session_id: Optional[uuid.UUID] = None
    model: str
    created_count: int
    stopped_early: bool
    items: List[GenerationItemResponse]

class GenerationSessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_at: datetime
    input_char_count: int
    model_provider: str
    model_name: str

class GenerationSessionListResponse(BaseModel):
    data: List[GenerationSessionResponse]
    next_cursor: Optional[datetime] = None

class GenerationCardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    session_id: uuid.UUID
    front: str
    back: str
    position: int
    created_at: datetime

class GenerationCardListResponse(BaseModel):
    data: List[GenerationCardResponse]
    next_cursor: Optional[datetime] = None
