import uuid

import examples
from src.services.card_parser import GeneratedCard
from src.services.generation_pipeline import GenerationItem, GenerationReport
from src.utils.flashcards_client import ApiClientError, ApiSession, CardCreationResult


def test_main_requires_credentials(monkeypatch, mocker):
    mocker.patch("examples.load_dotenv")
    monkeypatch.delenv("FLASHCARDS_EMAIL", raising=False)
    monkeypatch.delenv("FLASHCARDS_PASSWORD", raising=False)

    assert examples.main() == 1


def test_main_runs_client_flow(monkeypatch, mocker, capsys):
    mocker.patch("examples.load_dotenv")
    monkeypatch.setenv("FLASHCARDS_EMAIL", "ada@example.com")
    monkeypatch.setenv("FLASHCARDS_PASSWORD", "secret123")
    monkeypatch.setenv("FLASHCARDS_API_URL", "http://api.local")

    client = mocker.MagicMock()
    client.login.return_value = ApiSession(access_token="tok", user_id="user-1")
    client.create_flashcard.return_value = CardCreationResult(ok=True, status_code=201, flashcard_id=uuid.uuid4())
    client.list_flashcards.return_value = {"data": [{"front": "Q", "back": "A"}], "next_cursor": None}
    client.generate_flashcards.return_value = GenerationReport(
        model="openai/gpt-4o-mini",
        items=[GenerationItem(position=0, card=GeneratedCard(front="Q1", back="A1"), status="created")],
    )
    factory = mocker.patch("examples.FlashcardsApiClient", return_value=client)

    assert examples.main() == 0

    factory.assert_called_once_with("http://api.local")
    client.logout.assert_called_once()
    output = capsys.readouterr().out
    assert "[created] Q1" in output
    assert "1 of 1 cards created" in output


def test_main_reports_api_errors(monkeypatch, mocker, capsys):
    mocker.patch("examples.load_dotenv")
    monkeypatch.setenv("FLASHCARDS_EMAIL", "ada@example.com")
    monkeypatch.setenv("FLASHCARDS_PASSWORD", "wrong")

    client = mocker.MagicMock()
    client.login.side_effect = ApiClientError("Invalid email or password.", status=401)
    mocker.patch("examples.FlashcardsApiClient", return_value=client)

    assert examples.main() == 1
    assert "Invalid email or password." in capsys.readouterr().out
