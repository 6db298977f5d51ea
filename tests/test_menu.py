from __future__ import annotations

import asyncio

from fastapi.testclient import TestClient

from app.bootstrap import SAMPLE_MENU, init_database, main, seed_menu_if_empty
from app.database import get_session_maker, init_db, reset_engine


def test_menu_lists_seed_rows_in_id_order(client: TestClient) -> None:
    response = client.get("/api/menu")

    assert response.status_code == 200
    items = response.json()
    assert [item["name"] for item in items] == [row["name"] for row in SAMPLE_MENU]
    assert [item["id"] for item in items] == sorted(item["id"] for item in items)
    assert items[0] == {
        "id": 1,
        "name": "Margherita Pizza",
        "description": "Fresh tomato & mozzarella",
        "price": 250,
        "image": None,
    }


def test_restart_does_not_reseed() -> None:
    from app.main import create_app

    for _ in range(2):
        with TestClient(create_app()) as client:
            response = client.get("/api/menu")
        assert len(response.json()) == 5


def test_seed_is_noop_when_menu_has_rows(run_sql) -> None:
    async def seed_twice() -> int:
        try:
            await init_database()
            async with get_session_maker()() as db:
                return await seed_menu_if_empty(db)
        finally:
            await reset_engine()

    assert asyncio.run(seed_twice()) == 0
    assert run_sql("SELECT COUNT(*) AS c FROM menu")[0]["c"] == 5


def test_seed_skips_menu_with_custom_rows(run_sql) -> None:
    async def create_schema() -> None:
        try:
            await init_db()
        finally:
            await reset_engine()

    asyncio.run(create_schema())
    run_sql("INSERT INTO menu (name, price) VALUES (:name, :price)", name="Masala Dosa", price=90)

    assert main() == 0
    assert run_sql("SELECT name FROM menu") == [{"name": "Masala Dosa"}]


def test_bootstrap_creates_all_tables(run_sql) -> None:
    assert main() == 0

    tables = {row["name"] for row in run_sql("SELECT name FROM sqlite_master WHERE type = 'table'")}
    assert {"menu", "orders", "order_items", "reservations", "payments", "feedback"} <= tables


def test_bootstrap_exits_nonzero_on_failure(monkeypatch, tmp_path) -> None:
    from app.core.config import get_settings

    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path}/missing/dir/x.db")
    get_settings.cache_clear()

    assert main() == 1
