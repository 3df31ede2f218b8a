from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from comanda.api.main import app
from comanda.tools import release_tables

pytestmark = pytest.mark.integration

HEADERS = {"X-Company-Id": "cmp_001", "X-User-Id": "usr_001"}
OTHER_COMPANY = {"X-Company-Id": "cmp_999", "X-User-Id": "usr_999"}


def test_order_flow_is_persisted() -> None:
    with TestClient(app) as client:
        create_response = client.post(
            "/orders",
            headers=HEADERS,
            json={
                "orderType": "table",
                "tableId": "tbl_001",
                "peopleCount": 2,
                "lines": [{"productId": "prd_001", "requestedQuantity": 2}],
            },
        )
        assert create_response.status_code == 201
        order_id = create_response.json()["orderId"]
        assert client.get("/tables/tbl_001", headers=HEADERS).json()["status"] == "occupied"

        advance_response = client.patch(
            f"/orders/{order_id}/lines/prd_001/units/1",
            headers=HEADERS,
            json={"status": "served"},
        )
        assert advance_response.status_code == 200

        update_response = client.put(
            f"/orders/{order_id}",
            headers=HEADERS,
            json={
                "status": "in_progress",
                "lines": [
                    {"productId": "prd_001", "requestedQuantity": 1},
                    {"productId": "prd_003", "requestedQuantity": 1, "message": "extra aji"},
                ],
            },
        )
        assert update_response.status_code == 200
        updated = update_response.json()
        assert updated["status"] == "in_progress"
        assert updated["itemCount"] == 2
        assert updated["total"] == 39500.5
        assert updated["lines"][0]["unitStatuses"] == [{"position": 1, "status": "served"}]
        assert len(updated["editHistory"]) == 1

        get_response = client.get(f"/orders/{order_id}", headers=HEADERS)
        assert get_response.status_code == 200
        assert get_response.json()["lines"] == updated["lines"]
        assert client.get(f"/orders/{order_id}", headers=OTHER_COMPANY).status_code == 404

        close_response = client.patch(f"/orders/{order_id}/close", headers=HEADERS)
        assert close_response.status_code == 200
        assert close_response.json()["tableStatus"] == "available"
        closed_lines = close_response.json()["order"]["lines"]
        assert closed_lines[1]["unitStatuses"] == [{"position": 1, "status": "ready_to_serve"}]

        listed = client.get("/orders", headers=HEADERS, params={"status": "closed"}).json()
        assert order_id in [order["orderId"] for order in listed["orders"]]


def test_emptied_order_is_deleted_and_table_freed() -> None:
    with TestClient(app) as client:
        create_response = client.post(
            "/orders",
            headers=HEADERS,
            json={
                "orderType": "table",
                "tableId": "tbl_002",
                "lines": [{"productId": "prd_002", "requestedQuantity": 1}],
            },
        )
        assert create_response.status_code == 201
        order_id = create_response.json()["orderId"]

        busy_response = client.post(
            "/orders",
            headers=HEADERS,
            json={
                "orderType": "table",
                "tableId": "tbl_002",
                "lines": [{"productId": "prd_001", "requestedQuantity": 1}],
            },
        )
        assert busy_response.status_code == 400
        assert busy_response.json()["error"]["code"] == "TABLE_NOT_AVAILABLE"

        delete_response = client.put(f"/orders/{order_id}", headers=HEADERS, json={"lines": []})
        assert delete_response.status_code == 200
        assert delete_response.json()["deleted"] is True

        assert client.get(f"/orders/{order_id}", headers=HEADERS).status_code == 404
        assert client.get("/tables/tbl_002", headers=HEADERS).json()["status"] == "available"


def test_inactive_product_is_not_found() -> None:
    with TestClient(app) as client:
        response = client.post(
            "/orders",
            headers=HEADERS,
            json={"orderType": "pickup", "lines": [{"productId": "prd_004", "requestedQuantity": 1}]},
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PRODUCT_NOT_FOUND"


def test_release_tables_frees_tables_of_live_orders() -> None:
    with TestClient(app) as client:
        create_response = client.post(
            "/orders",
            headers=HEADERS,
            json={
                "orderType": "table",
                "tableId": "tbl_003",
                "lines": [{"productId": "prd_001", "requestedQuantity": 1}],
            },
        )
        assert create_response.status_code == 201
        order_id = create_response.json()["orderId"]

        assert release_tables.main(["--company-id", "cmp_001"]) == 0

        table = client.get("/tables/tbl_003", headers=HEADERS).json()
        assert table["status"] == "available"
        assert table["currentOrder"] is None
        assert client.get(f"/orders/{order_id}", headers=HEADERS).status_code == 200
