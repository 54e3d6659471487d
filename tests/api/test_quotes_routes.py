from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace

from fastapi.testclient import TestClient

from app.api.routes import quotes
from app.db.repo.quotes_repo import QuotesRepo
from app.main import app
from tests.api.route_fakes import FakeSessionLocal, admin_headers, superadmin_headers

CREATED_AT = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _quote(quote_id: int, text: str, author: str | None = None) -> SimpleNamespace:
    return SimpleNamespace(id=quote_id, text=text, author=author, created_at=CREATED_AT)


def test_word_of_the_day_picks_quote_by_random_offset(monkeypatch) -> None:
    stored = [_quote(1, "First"), _quote(2, "Second", "Anon"), _quote(3, "Third")]

    async def fake_count(session):  # noqa: ANN001
        del session
        return len(stored)

    async def fake_get_at_offset(session, offset):  # noqa: ANN001
        del session
        return stored[offset]

    monkeypatch.setattr(quotes, "SessionLocal", FakeSessionLocal())
    monkeypatch.setattr(QuotesRepo, "count", fake_count)
    monkeypatch.setattr(QuotesRepo, "get_at_offset", fake_get_at_offset)
    monkeypatch.setattr(quotes.random, "randrange", lambda upper: 1)

    client = TestClient(app)
    response = client.get("/api/quotes/wotd")

    assert response.status_code == 200
    assert response.json()["text"] == "Second"
    assert response.json()["author"] == "Anon"


def test_word_of_the_day_without_quotes(monkeypatch) -> None:
    async def fake_count(session):  # noqa: ANN001
        del session
        return 0

    monkeypatch.setattr(quotes, "SessionLocal", FakeSessionLocal())
    monkeypatch.setattr(QuotesRepo, "count", fake_count)

    client = TestClient(app)
    response = client.get("/api/quotes/wotd")

    assert response.status_code == 404
    assert response.json() == {"detail": {"code": "E_QUOTE_NOT_FOUND"}}


def test_create_quote_requires_text(monkeypatch) -> None:
    monkeypatch.setattr(quotes, "SessionLocal", FakeSessionLocal())

    client = TestClient(app)
    response = client.post("/api/quotes", json={"text": "   "}, headers=superadmin_headers())

    assert response.status_code == 422
    assert response.json() == {"detail": {"code": "E_QUOTE_TEXT_REQUIRED"}}


def test_create_quote(monkeypatch) -> None:
    async def fake_create(session, *, text, author, now_utc):  # noqa: ANN001
        del session, now_utc
        return _quote(7, text, author)

    monkeypatch.setattr(quotes, "SessionLocal", FakeSessionLocal())
    monkeypatch.setattr(QuotesRepo, "create", fake_create)

    client = TestClient(app)
    response = client.post(
        "/api/quotes",
        json={"text": "  Keep going.  ", "author": "Coach"},
        headers=superadmin_headers(),
    )

    assert response.status_code == 201
    assert response.json()["text"] == "Keep going."


def test_quote_management_is_superadmin_only() -> None:
    client = TestClient(app)
    response = client.get("/api/quotes", headers=admin_headers())

    assert response.status_code == 403


def test_update_missing_quote(monkeypatch) -> None:
    async def fake_update(session, **kwargs):  # noqa: ANN001
        del session, kwargs
        return None

    monkeypatch.setattr(quotes, "SessionLocal", FakeSessionLocal())
    monkeypatch.setattr(QuotesRepo, "update", fake_update)

    client = TestClient(app)
    response = client.put("/api/quotes/9", json={"text": "x"}, headers=superadmin_headers())

    assert response.status_code == 404


def test_list_quotes(monkeypatch) -> None:
    async def fake_list(session):  # noqa: ANN001
        del session
        return [_quote(2, "Newer"), _quote(1, "Older")]

    monkeypatch.setattr(quotes, "SessionLocal", FakeSessionLocal())
    monkeypatch.setattr(QuotesRepo, "list_newest_first", fake_list)

    client = TestClient(app)
    response = client.get("/api/quotes", headers=superadmin_headers())

    assert response.status_code == 200
    assert [quote["id"] for quote in response.json()["quotes"]] == [2, 1]
