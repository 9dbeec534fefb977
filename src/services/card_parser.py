import json
import re
from dataclasses import dataclass
from typing import Annotated, List, Union

from pydantic import BaseModel, StringConstraints, ValidationError

# Bloco ```json ... ``` em qualquer ponto da resposta
FENCE_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)

StrictCardText = Annotated[str, StringConstraints(strict=True, strip_whitespace=True, min_length=1)]


class GeneratedCard(BaseModel):
    front: StrictCardText
    back: StrictCardText


@dataclass
class ParsedCards:
    cards: List[GeneratedCard]
    discarded: int = 0


@dataclass
class CardParseFailure:
    reason: str


ParseResult = Union[ParsedCards, CardParseFailure]


def extract_json_payload(content: str) -> str:
    trimmed = content.strip()
    match = FENCE_PATTERN.search(trimmed)
    if match and match.group(1):
        return match.group(1).strip()
    return trimmed


def parse_generated_cards(content: str) -> ParseResult:
    """
    Converte a saída do modelo em cards válidos. Nunca levanta exceção:
    devolve ParsedCards ou CardParseFailure.
    """
    try:
        parsed = json.loads(extract_json_payload(content))
    except ValueError:
        return CardParseFailure("Model output is not valid JSON.")

    if not isinstance(parsed, list):
        return CardParseFailure("Expected a JSON array.")

    cards: List[GeneratedCard] = []
    for item in parsed:
        try:
            cards.append(GeneratedCard.model_validate(item))
        except ValidationError:
            continue

    if not cards:
        return CardParseFailure("No valid flashcards were returned.")

    return ParsedCards(cards=cards, discarded=len(parsed) - len(cards))
