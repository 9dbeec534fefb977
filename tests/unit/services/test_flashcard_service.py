import uuid
from datetime import datetime, timedelta, timezone

from src.models.flashcard import Flashcard
from src.services.flashcard_service import (
    create_flashcard,
    get_flashcard,
    list_flashcards,
    next_cursor_for,
    soft_delete_flashcard,
    update_flashcard,
)

BASE_TIME = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)


def seed(db_session, user_id="user-1", count=3, **fields):
    cards = []
    for i in range(count):
        card = Flashcard(
            user_id=user_id,
            front=fields.get("front", f"Q{i}"),
            back=fields.get("back", f"A{i}"),
            source_type=fields.get("source_type", "manual"),
            created_at=BASE_TIME + timedelta(minutes=i),
            updated_at=BASE_TIME + timedelta(minutes=i),
        )
        db_session.add(card)
        cards.append(card)
    db_session.commit()
    return cards


def test_create_flashcard_defaults(db_session):
    card = create_flashcard(db_session, "user-1", "Q", "A")
    assert card.source_type == "manual"
    assert card.deleted_at is None
    assert card.created_at is not None


def test_list_orders_desc_and_paginates_with_cursor(db_session):
    seed(db_session, count=5)

    first = list_flashcards(db_session, "user-1", limit=2)
    assert [c.front for c in first] == ["Q4", "Q3"]
    cursor = next_cursor_for(first, 2)
    assert cursor == first[-1].created_at

    second = list_flashcards(db_session, "user-1", limit=2, cursor=cursor)
    assert [c.front for c in second] == ["Q2", "Q1"]

    last = list_flashcards(db_session, "user-1", limit=2, cursor=next_cursor_for(second, 2))
    assert [c.front for c in last] == ["Q0"]
    assert next_cursor_for(last, 2) is None


def test_list_ascending_order(db_session):
    seed(db_session, count=3)
    rows = list_flashcards(db_session, "user-1", order="asc", cursor=BASE_TIME)
    assert [c.front for c in rows] == ["Q1", "Q2"]


def test_aware_cursor_is_compared_in_utc(db_session):
    seed(db_session, count=3)
    # 12:01 em UTC+2 = 10:01 UTC
    cursor = datetime(2024, 1, 1, 12, 1, tzinfo=timezone(timedelta(hours=2)))
    rows = list_flashcards(db_session, "user-1", cursor=cursor)
    assert [c.front for c in rows] == ["Q0"]


def test_list_filters(db_session):
    seed(db_session, count=2)
    seed(db_session, count=1, front="Mitochondria", back="Powerhouse", source_type="ai")
    seed(db_session, user_id="user-2", count=2)

    assert len(list_flashcards(db_session, "user-1")) == 3
    assert [c.front for c in list_flashcards(db_session, "user-1", source_type="ai")] == ["Mitochondria"]
    assert [c.front for c in list_flashcards(db_session, "user-1", search="powerHOUSE")] == ["Mitochondria"]
    assert [c.front for c in list_flashcards(db_session, "user-1", search="mito")] == ["Mitochondria"]


def test_soft_deleted_cards_are_hidden_unless_requested(db_session):
    cards = seed(db_session, count=2)
    assert soft_delete_flashcard(db_session, "user-1", cards[0].id) is True

    assert [c.front for c in list_flashcards(db_session, "user-1")] == ["Q1"]
    assert len(list_flashcards(db_session, "user-1", include_deleted=True)) == 2
    assert get_flashcard(db_session, "user-1", cards[0].id) is None


def test_delete_twice_or_unknown_or_foreign(db_session):
    card = seed(db_session, count=1)[0]
    assert soft_delete_flashcard(db_session, "user-2", card.id) is False
    assert soft_delete_flashcard(db_session, "user-1", card.id) is True
    assert soft_delete_flashcard(db_session, "user-1", card.id) is False
    assert soft_delete_flashcard(db_session, "user-1", uuid.uuid4()) is False


def test_update_only_touches_owned_active_cards(db_session):
    card = seed(db_session, count=1)[0]
    previous_update = card.updated_at

    assert update_flashcard(db_session, "user-2", card.id, "X", "Y") is None

    updated = update_flashcard(db_session, "user-1", card.id, "New Q", "New A")
    assert updated.front == "New Q"
    assert updated.back == "New A"
    assert updated.updated_at > previous_update

    soft_delete_flashcard(db_session, "user-1", card.id)
    assert update_flashcard(db_session, "user-1", card.id, "Z", "Z") is None


def test_timestamps_round_trip_as_aware_utc(db_session):
    created = create_flashcard(db_session, "user-1", "Q", "A")
    db_session.expire_all()

    card = get_flashcard(db_session, "user-1", created.id)
    assert card.created_at.utcoffset() == timedelta(0)
    assert card.updated_at.utcoffset() == timedelta(0)


def test_cursor_without_offset_is_read_as_utc(db_session):
    seed(db_session, count=3)
    rows = list_flashcards(db_session, "user-1", cursor=datetime(2024, 1, 1, 10, 1, 30))
    assert [c.front for c in rows] == ["Q1", "Q0"]
