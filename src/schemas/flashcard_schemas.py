import uuid
from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator

SourceType = Literal["manual", "ai"]

# Texto obrigatório: remove espaços nas pontas e exige pelo menos 1 caractere
CardText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# Input
class CreateFlashcardRequest(BaseModel):
    front: CardText
    back: CardText
    source_type: Optional[SourceType] = None

class UpdateFlashcardRequest(BaseModel):
    front: CardText
    back: CardText

class FlashcardListQuery(BaseModel):
    limit: int = Field(20, ge=1, le=100)
    cursor: Optional[datetime] = None
    sort: Literal["created_at"] = "created_at"
    order: Literal["asc", "desc"] = "desc"
    source_type: Optional[SourceType] = None
    search: Optional[str] = None
    include_deleted: bool = False

    # Parâmetro vazio (?limit=) vale como ausente
    @model_validator(mode="before")
    @classmethod
    def drop_empty_values(cls, data):
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value != ""}
        return data

# O card que devolvemos para o cliente (Output)
class FlashcardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    front: str
    back: str
    source_type: SourceType
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

class FlashcardListResponse(BaseModel):
    data: List[FlashcardResponse]
    next_cursor: Optional[datetime] = None

class FlashcardUpdateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    front: str
    back: str
    updated_at: datetime

class MessageResponse(BaseModel):
    message: str

class ValidationErrorResponse(MessageResponse):
    details: List[str] = Field(default_factory=list)
