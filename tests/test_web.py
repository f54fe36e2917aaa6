"""Tests for the FastAPI routes."""

from pathlib import Path

import chess
from fastapi.testclient import TestClient

from study.config import Settings
from study.constants import SECONDARY_BUTTON
from study.renderer import square_center
from web.app import create_app


def _click(client: TestClient, square: str, shift: bool = False) -> dict:
    x, y = square_center(square)
    response = client.post("/api/pointer/click", json={"x": x, "y": y, "shift": shift})
    assert response.status_code == 200
    return response.json()


def _drag(client: TestClient, start: str, end: str) -> dict:
    x, y = square_center(start)
    client.post("/api/pointer/down", json={"x": x, "y": y, "button": SECONDARY_BUTTON})
    x, y = square_center(end)
    return client.post("/api/pointer/up", json={"x": x, "y": y, "button": SECONDARY_BUTTON}).json()


class TestBoardRoutes:
    def test_initial_board(self, client: TestClient) -> None:
        body = client.get("/api/board").json()
        assert body["fen"] == chess.STARTING_FEN
        assert len(body["squares"]) == 64
        assert body["setup_mode"] is False
        assert body["selected_square"] is None

    def test_svg(self, client: TestClient) -> None:
        response = client.get("/api/board.svg")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("image/svg+xml")

    def test_click_move(self, client: TestClient) -> None:
        assert _click(client, "e2")["selected_square"] == "e2"
        body = _click(client, "e4")
        assert body["selected_square"] is None
        squares = {sq["name"]: sq for sq in body["squares"]}
        assert squares["e4"]["piece"] == ["w", "p"]

    def test_click_outside_board_is_ignored(self, client: TestClient) -> None:
        body = client.post("/api/pointer/click", json={"x": 600, "y": 10}).json()
        assert body["selected_square"] is None

    def test_highlight_and_arrow(self, client: TestClient) -> None:
        assert _click(client, "d5", shift=True)["highlights"] == ["d5"]
        body = _drag(client, "g1", "f3")
        assert [(a["from_square"], a["to_square"]) for a in body["arrows"]] == [("g1", "f3")]

    def test_setup_clear_reset(self, client: TestClient) -> None:
        assert client.post("/api/setup/toggle").json()["setup_mode"] is True
        body = _click(client, "d1")
        assert {sq["name"]: sq for sq in body["squares"]}["d1"]["piece"] is None
        body = client.post("/api/board/clear").json()
        assert all(sq["piece"] is None for sq in body["squares"])
        assert client.post("/api/board/reset").json()["fen"] == chess.STARTING_FEN

    def test_root_serves_client(self, client: TestClient) -> None:
        response = client.get("/")
        assert response.status_code == 200
        assert "Chess Study" in response.text


class TestCourseRoutes:
    def test_build_and_load_course(self, client: TestClient) -> None:
        client.post("/api/courses", json={"name": "Openings"})
        client.post("/api/chapters", json={"title": "Italian"})
        _click(client, "e2")
        _click(client, "e4")
        _click(client, "e4", shift=True)
        fen = client.get("/api/board").json()["fen"]
        tree = client.post("/api/positions", json={"explanation": "King's pawn"}).json()

        assert tree["active_course"] == "Openings"
        assert [row["kind"] for row in tree["rows"]] == ["course", "chapter", "position"]
        assert client.get("/api/board").json()["highlights"] == []

        client.post("/api/board/reset")
        body = client.post("/api/positions/load", json={"course": "Openings", "chapter": 0, "position": 0}).json()
        assert body["fen"] == fen
        assert body["highlights"] == ["e4"]
        assert body["explanation"] == "King's pawn"
        assert (body["active_chapter"], body["active_position"]) == (0, 0)

    def test_empty_course_name_is_ignored(self, client: TestClient) -> None:
        tree = client.post("/api/courses", json={"name": ""}).json()
        assert tree == {"active_course": None, "rows": []}

    def test_load_missing_position_is_404(self, client: TestClient) -> None:
        response = client.post("/api/positions/load", json={"course": "Nope", "chapter": 0, "position": 0})
        assert response.status_code == 404

    def test_negative_index_is_422(self, client: TestClient) -> None:
        response = client.post("/api/positions/load", json={"course": "Nope", "chapter": -1, "position": 0})
        assert response.status_code == 422


class TestPersistenceAcrossRestarts:
    def test_new_app_restores_session_and_tree(self, tmp_path: Path) -> None:
        settings = Settings(storage_path=tmp_path / "storage.json")
        first = TestClient(create_app(settings))
        first.post("/api/courses", json={"name": "Openings"})
        first.post("/api/chapters", json={"title": "Italian"})
        _click(first, "e2")
        _click(first, "e4")
        fen = first.get("/api/board").json()["fen"]

        second = TestClient(create_app(settings))
        assert second.get("/api/board").json()["fen"] == fen
        rows = second.get("/api/courses").json()["rows"]
        assert [row["label"] for row in rows] == ["📘 Openings", "📂 Italian"]
