from __future__ import annotations

from pathlib import Path

from fastapi.testclient import TestClient


def test_frontend_served_alongside_api(tmp_path: Path) -> None:
    from app.main import create_app

    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text("<h1>La Bella</h1>", encoding="utf-8")
    (public / "admin.html").write_text("<h1>Admin</h1>", encoding="utf-8")

    with TestClient(create_app()) as client:
        index = client.get("/")
        admin = client.get("/admin.html")
        missing_api = client.get("/api/nope")
        menu = client.get("/api/menu")

    assert index.status_code == 200
    assert "La Bella" in index.text
    assert admin.status_code == 200
    assert missing_api.status_code == 404
    assert missing_api.json() == {"error": "API endpoint not found"}
    assert len(menu.json()) == 5


def test_no_static_directory(client: TestClient) -> None:
    assert client.get("/").status_code == 404
