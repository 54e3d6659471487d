from __future__ import annotations

from datetime import date

from fastapi.testclient import TestClient

from app.api.routes import leaderboard
from app.game.leaderboard.errors import StudentNotFoundError
from app.game.leaderboard.service import LeaderboardService
from app.game.leaderboard.types import (
    ChartSeries,
    LeaderboardEntry,
    LeaderboardPage,
    LevelTotals,
    StudentSummary,
)
from app.main import app
from tests.api.route_fakes import FakeSessionLocal, admin_headers, student_headers


def _entry(rank: int, score: int) -> LeaderboardEntry:
    return LeaderboardEntry(
        rank=rank,
        student_id=rank * 10,
        name=f"Student {rank}",
        email=f"s{rank}@example.com",
        score=score,
    )


def test_get_leaderboard_passes_paging(monkeypatch) -> None:
    captured: dict[str, object] = {}

    async def fake_rank_students(session, **kwargs):  # noqa: ANN001
        del session
        captured.update(kwargs)
        entries = (_entry(1, 90), _entry(2, 50))
        return LeaderboardPage(top3=entries, total_count=2, page=2, per_page=5, page_list=())

    monkeypatch.setattr(leaderboard, "SessionLocal", FakeSessionLocal())
    monkeypatch.setattr(LeaderboardService, "rank_students", fake_rank_students)

    client = TestClient(app)
    response = client.get("/api/leaderboard?page=2&perPage=5", headers=student_headers())

    assert response.status_code == 200
    body = response.json()
    assert [entry["score"] for entry in body["top3"]] == [90, 50]
    assert body["page_list"] == []
    assert body["total_count"] == 2
    assert captured["page"] == 2
    assert captured["per_page"] == 5


def test_get_leaderboard_requires_authentication() -> None:
    client = TestClient(app)
    response = client.get("/api/leaderboard")

    assert response.status_code == 401
    assert response.json() == {"detail": {"code": "E_UNAUTHORIZED"}}


def test_get_student_summary(monkeypatch) -> None:
    async def fake_summarize(session, *, student_id):  # noqa: ANN001
        del session
        return StudentSummary(
            student_id=student_id,
            name="Ada",
            email="ada@example.com",
            levels=LevelTotals(beginner=15, intermediate=20, advanced=0),
            rank=3,
        )

    monkeypatch.setattr(leaderboard, "SessionLocal", FakeSessionLocal())
    monkeypatch.setattr(LeaderboardService, "summarize_student", fake_summarize)

    client = TestClient(app)
    response = client.get("/api/leaderboard/summary/11", headers=admin_headers())

    assert response.status_code == 200
    assert response.json() == {
        "student": {"id": 11, "name": "Ada", "email": "ada@example.com"},
        "levels": {"beginner": 15, "intermediate": 20, "advanced": 0},
        "overall": 35,
        "rank": 3,
    }


def test_get_student_summary_missing_student(monkeypatch) -> None:
    async def fake_summarize(session, *, student_id):  # noqa: ANN001
        del session
        raise StudentNotFoundError(str(student_id))

    monkeypatch.setattr(leaderboard, "SessionLocal", FakeSessionLocal())
    monkeypatch.setattr(LeaderboardService, "summarize_student", fake_summarize)

    client = TestClient(app)
    response = client.get("/api/leaderboard/summary/404", headers=admin_headers())

    assert response.status_code == 404
    assert response.json() == {"detail": {"code": "E_STUDENT_NOT_FOUND"}}


def test_download_report_returns_xlsx_attachment(monkeypatch) -> None:
    async def fake_build_report(session):  # noqa: ANN001
        del session
        return b"PK\x03\x04xlsx"

    monkeypatch.setattr(leaderboard, "SessionLocal", FakeSessionLocal())
    monkeypatch.setattr(LeaderboardService, "build_report", fake_build_report)

    client = TestClient(app)
    response = client.get("/api/leaderboard/report", headers=admin_headers())

    assert response.status_code == 200
    assert response.content == b"PK\x03\x04xlsx"
    assert response.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    assert response.headers["content-disposition"] == "attachment; filename=leaderboard.xlsx"


def test_get_chart_series_applies_single_bound(monkeypatch) -> None:
    captured: dict[str, object] = {}

    async def fake_chart(session, **kwargs):  # noqa: ANN001
        del session
        captured.update(kwargs)
        return ChartSeries(
            dates=(date(2026, 3, 1),),
            beginner=(50,),
            intermediate=(0,),
            advanced=(0,),
            totals=LevelTotals(beginner=25),
        )

    monkeypatch.setattr(leaderboard, "SessionLocal", FakeSessionLocal())
    monkeypatch.setattr(LeaderboardService, "build_chart_series", fake_chart)

    client = TestClient(app)
    response = client.get("/api/leaderboard/charts?from=2026-03-01&studentId=4", headers=admin_headers())

    assert response.status_code == 200
    assert response.json() == {
        "dates": ["2026-03-01"],
        "beginner": [50],
        "intermediate": [0],
        "advanced": [0],
        "totals": {"beginner": 25, "intermediate": 0, "advanced": 0},
    }
    assert captured == {"from_date": date(2026, 3, 1), "to_date": None, "student_id": 4}


def test_get_chart_series_rejects_inverted_range() -> None:
    client = TestClient(app)
    response = client.get("/api/leaderboard/charts?from=2026-03-05&to=2026-03-01", headers=admin_headers())

    assert response.status_code == 422
    assert response.json() == {"detail": {"code": "E_INVALID_DATE_RANGE"}}
