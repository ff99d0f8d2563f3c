from __future__ import annotations

import inspect

import pytest
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient
from tindahan.api import create_app
from tindahan.application.inventory import seed_default_categories
from tindahan.catalog.config import CatalogRules
from tindahan.runtime.catalog_store import JsonCatalogStore
from tindahan.runtime.sessions import SessionStore


@pytest.fixture
def sessions() -> SessionStore:
    return SessionStore()


@pytest.fixture
def client(store: JsonCatalogStore, sessions: SessionStore, rules: CatalogRules) -> TestClient:
    seed_default_categories(store, rules)
    admin = sessions.open("u1", email="owner@example.com", is_admin=True)
    test_client = TestClient(create_app(store, sessions, rules))
    test_client.headers["x-session-id"] = admin.token
    return test_client


def _add(client: TestClient, **body: object) -> dict[str, object]:
    response = client.post("/api/inventory", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def test_health_and_public_listing_need_no_session(store: JsonCatalogStore, sessions: SessionStore) -> None:
    anonymous = TestClient(create_app(store, sessions))

    assert anonymous.get("/health").json() == {"status": "ok"}
    assert anonymous.get("/api/inventory/public").json() == []
    assert anonymous.get("/api/inventory").status_code == 401
    assert anonymous.get("/api/inventory", headers={"x-session-id": "bogus"}).status_code == 401


def test_current_user_and_logout(client: TestClient) -> None:
    assert client.get("/api/auth/user").json() == {
        "user": {"id": "u1", "email": "owner@example.com", "isAdmin": True}
    }
    assert client.post("/api/auth/logout").status_code == 200
    assert client.get("/api/auth/user").status_code == 401


def test_add_bulk_item_and_read_edit_form(client: TestClient) -> None:
    created = _add(client, itemName="V Fresh", bulkQuantity=4, bulkPrice="5", stock=100, category="Junk Food - Sitsirya")

    assert created["itemName"] == "V Fresh (4 for 5)"
    assert created["price"] == "1.25"
    form = client.get(f"/api/inventory/{created['id']}/edit-form").json()
    assert form["itemName"] == "V Fresh"
    assert form["bulkQuantity"] == 4
    assert form["bulkPrice"] == "5"


def test_duplicate_and_invalid_items(client: TestClient) -> None:
    _add(client, itemName="Nova", price="18", stock=10)

    duplicate = client.post("/api/inventory", json={"itemName": "NOVA", "price": "18"})
    invalid = client.post("/api/inventory", json={"itemName": "Kopiko", "price": "cheap"})
    negative = client.post("/api/inventory", json={"itemName": "Kopiko", "price": "8", "stock": -1})

    assert duplicate.status_code == 409
    assert "already exists" in duplicate.json()["message"]
    assert invalid.status_code == 400
    assert negative.status_code == 422


def test_update_and_delete_item(client: TestClient) -> None:
    item = _add(client, itemName="Nova", price="18", stock=10)

    updated = client.put(f"/api/inventory/{item['id']}", json={"itemName": "Nova Cheddar", "price": 19, "stock": 8})
    deleted = client.delete(f"/api/inventory/{item['id']}")

    assert updated.status_code == 200
    assert updated.json()["price"] == "19.00"
    assert deleted.json() == {"message": 'Deleted "Nova Cheddar"'}
    assert client.delete(f"/api/inventory/{item['id']}").status_code == 404
    assert client.put("/api/inventory/missing", json={"itemName": "X", "price": "1"}).status_code == 404


def test_search_sort_and_exact_mode(client: TestClient) -> None:
    _add(client, itemName="Nova", price="18", stock=5)
    _add(client, itemName="Piattos", price="180", stock=7)

    exact = client.get("/api/inventory", params={"search": "18", "mode": "exact"}).json()
    by_price = client.get("/api/inventory", params={"sortBy": "price", "sortOrder": "desc"}).json()

    assert [item["itemName"] for item in exact] == ["Nova"]
    assert [item["itemName"] for item in by_price] == ["Piattos", "Nova"]
    assert client.get("/api/inventory", params={"sortBy": "colour"}).status_code == 400


def test_upload_csv_then_price_check(client: TestClient) -> None:
    response = client.post(
        "/api/inventory/upload",
        files={"file": ("price-list.csv", b"SNACKS\nNova,18\nV Fresh,4 for 5 pesos\n", "text/csv")},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["itemCount"] == 2
    assert body["categoriesCreated"] == ["SNACKS"]
    assert body["strategy"] == "sectioned"

    quote = client.post("/api/price-check", json={"query": "7 v fresh"}).json()
    assert quote["status"] == "quoted"
    assert quote["total"] == "8.75"
    assert quote["candidates"] == ["V Fresh (4 for 5)"]


def test_upload_rejects_unrecognized_sheet(client: TestClient) -> None:
    response = client.post("/api/inventory/upload", files={"file": ("notes.csv", b"hello\nworld\n", "text/csv")})

    assert response.status_code == 400
    assert response.json()["message"] == "Could not detect file format"


def test_upload_layout_form_field(client: TestClient) -> None:
    response = client.post(
        "/api/inventory/upload",
        files={"file": ("table.csv", b"Item Name,Price,Stock\nNova,18,3\n", "text/csv")},
        data={"layout": "upload"},
    )

    assert response.json()["strategy"] == "upload"
    assert client.get("/api/inventory/low-stock").json()[0]["stock"] == 3


def test_export_returns_workbook(client: TestClient) -> None:
    _add(client, itemName="Nova", price="18", stock=5)

    response = client.get("/api/inventory/export", params={"layout": "sectioned"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    assert "inventory-export-" in response.headers["content-disposition"]
    assert response.content[:2] == b"PK"


def test_category_rename_cascades_and_delete_conflicts(client: TestClient) -> None:
    rice = client.post("/api/categories", json={"name": "Grains", "description": "Per kilo"})
    assert rice.status_code == 201
    _add(client, itemName="Jasmine", price="50", stock=20, category="Grains")

    renamed = client.put(f"/api/categories/{rice.json()['id']}", json={"name": "Bigas"})
    conflict = client.delete(f"/api/categories/{rice.json()['id']}")

    assert renamed.json()["itemsUpdated"] == 1
    assert client.get("/api/inventory").json()[0]["category"] == "Bigas"
    assert conflict.status_code == 409
    assert client.post("/api/categories", json={"name": "Bigas"}).status_code == 409


def test_stats_clear_and_activity(client: TestClient) -> None:
    _add(client, itemName="Nova", price="18", stock=5)
    _add(client, itemName="Kopiko", price="8", stock=20)

    stats = client.get("/api/inventory/stats").json()
    cleared = client.post("/api/inventory/clear").json()
    activity = client.get("/api/activity-logs", params={"limit": 2}).json()

    assert stats == {"totalItems": 2, "totalStock": 25, "lowStockCount": 1, "totalValue": "250.00"}
    assert cleared["removed"] == 2
    assert [entry["action"] for entry in activity] == ["INVENTORY_CLEAR", "INVENTORY_ADD"]
    assert activity[0]["userId"] == "u1"


def test_upload_route_runs_in_the_threadpool(store: JsonCatalogStore, sessions: SessionStore) -> None:
    app = create_app(store, sessions)
    upload = next(
        route for route in app.routes if isinstance(route, APIRoute) and route.path == "/api/inventory/upload"
    )

    assert not inspect.iscoroutinefunction(upload.endpoint)


def test_sales_crud_summary_and_export(client: TestClient) -> None:
    created = client.post(
        "/api/sales", json={"date": "2025-06-01", "beginning": "5000", "ending": 4300, "purchases": "1200.50"}
    )
    assert created.status_code == 201, created.text
    record = created.json()
    assert record["saleInCash"] == "500.50"
    assert record["profit"] == "50.05"
    assert record["month"] == "June-2025"

    client.post("/api/sales", json={"date": "2025-07-01", "beginning": "100", "ending": "300"})
    updated = client.put(
        f"/api/sales/{record['id']}",
        json={"date": "2025-06-01", "beginning": "5000", "ending": "5100", "remarks": "recount"},
    )
    assert updated.json()["saleInCash"] == "100.00"

    june = client.get("/api/sales", params={"month": "June-2025"}).json()
    summary = client.get("/api/sales/summary").json()
    assert [row["remarks"] for row in june] == ["recount"]
    assert summary == {
        "totalSales": "300.00",
        "totalProfit": "30.00",
        "totalPurchases": "0.00",
        "recordCount": 2,
        "months": ["July-2025", "June-2025"],
    }

    export = client.get("/api/sales/export", params={"month": "June-2025"})
    assert export.status_code == 200
    assert "daily-sales-June-2025-" in export.headers["content-disposition"]
    assert export.content[:2] == b"PK"

    deleted = client.delete(f"/api/sales/{record['id']}")
    assert deleted.json() == {"message": "Deleted sales record for 2025-06-01"}
    actions = [entry["action"] for entry in client.get("/api/activity-logs", params={"limit": 3}).json()]
    assert actions == ["SALES_DELETE", "SALES_EXPORT", "SALES_UPDATE"]


def test_sales_errors(client: TestClient) -> None:
    bad_date = client.post("/api/sales", json={"date": "06/01/2025", "beginning": "1", "ending": "2"})
    missing = client.put("/api/sales/nope", json={"date": "2025-06-01", "beginning": "1", "ending": "2"})

    assert bad_date.status_code == 400
    assert "YYYY-MM-DD" in bad_date.json()["message"]
    assert missing.status_code == 404
    assert client.delete("/api/sales/nope").status_code == 404
    assert TestClient(client.app).get("/api/sales").status_code == 401
