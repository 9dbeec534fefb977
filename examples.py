#!/usr/bin/env python3
"""
Uso programático do cliente da Flashcards API.

Mostra o ``FlashcardsApiClient`` falando com uma API em execução: login,
criação manual, listagem paginada e geração de cards a partir de notas.

Variáveis (lidas do ambiente ou do .env):
    FLASHCARDS_API_URL   (padrão: http://localhost:8000)
    FLASHCARDS_EMAIL
    FLASHCARDS_PASSWORD

Usage:
    uvicorn src.main:app &
    python examples.py
"""

import os
import sys

from dotenv import load_dotenv

from src.services.generation_pipeline import GenerationError
from src.utils.flashcards_client import ApiClientError, FlashcardsApiClient

NOTES = """
A mitocôndria produz ATP pela respiração celular.
O ribossomo sintetiza proteínas a partir do RNA mensageiro.
"""


def example_create_and_list(client: FlashcardsApiClient):
    print("\n===== Example: Create and list =====")
    result = client.create_flashcard("What is Python?", "A programming language.")
    print(f"Created: {result.flashcard_id} (status {result.status_code})")

    page = client.list_flashcards(limit=5)
    for card in page["data"]:
        print(f"- {card['front']} -> {card['back']}")
    if page["next_cursor"]:
        print(f"More cards after {page['next_cursor']}")


def example_generate(client: FlashcardsApiClient):
    print("\n===== Example: Generate from notes =====")
    try:
        report = client.generate_flashcards(NOTES)
    except GenerationError as e:
        print(f"Generation failed: {e}")
        return

    for item in report.items:
        line = f"[{item.status}] {item.card.front}"
        if item.error:
            line += f" ({item.error})"
        print(line)
    print(f"{report.created_count} of {len(report.items)} cards created")


def main() -> int:
    load_dotenv()
    email = os.getenv("FLASHCARDS_EMAIL")
    password = os.getenv("FLASHCARDS_PASSWORD")
    if not email or not password:
        print("Set FLASHCARDS_EMAIL and FLASHCARDS_PASSWORD first.")
        return 1

    client = FlashcardsApiClient(os.getenv("FLASHCARDS_API_URL", "http://localhost:8000"))
    try:
        session = client.login(email, password)
        print(f"Logged in as {session.user_id}")

        example_create_and_list(client)
        example_generate(client)

        client.logout()
    except ApiClientError as e:
        print(f"API error ({e.status}): {e.message}")
        return 1

    print("\nAll examples completed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
