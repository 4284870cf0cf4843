"""
Tests de API HTTP: rutas de productos, inventario e informes, y el mapeo de
errores del dominio a códigos de estado.
"""

import datetime

import pytest


def _create_product(client, **overrides):
    payload = {"name": "Aceite de jojoba", "sku": "JOJ-01", "min_stock": 10}
    payload.update(overrides)
    response = client.post("/products/", json=payload)
    assert response.status_code == 201
    return response.json()


def _create_lot(client, product_id, quantity, **overrides):
    payload = {"code": "LOT-A", "product_id": product_id, "quantity_initial": quantity}
    payload.update(overrides)
    response = client.post("/inventory/lots", json=payload)
    assert response.status_code == 201
    return response.json()


def test_root(client):
    assert client.get("/").json() == {"message": "API funcionando correctamente"}


class TestProductsApi:

    def test_create_and_get(self, client):
        product = _create_product(client, current_cost=3.5)

        response = client.get(f"/products/{product['id']}")

        assert response.status_code == 200
        assert response.json()["current_cost"] == 3.5
        assert response.json()["type"] == "raw_material"

    def test_list_with_search(self, client):
        _create_product(client, name="Aceite de jojoba", sku="JOJ-01")
        _create_product(client, name="Frasco 50ml", sku="ENV-50", type="packaging")

        assert client.get("/products/").json()["total"] == 2
        found = client.get("/products/", params={"search": "env"}).json()
        assert [p["name"] for p in found["data"]] == ["Frasco 50ml"]
        typed = client.get("/products/", params={"type": "packaging"}).json()
        assert typed["total"] == 1

    def test_unknown_product_is_404(self, client):
        response = client.get("/products/missing")
        assert response.status_code == 404
        assert response.json() == {"detail": "Producto no encontrado"}

    def test_schema_errors_are_422(self, client):
        response = client.post("/products/", json={"name": "", "density": 0})
        assert response.status_code == 422

    def test_update_cost(self, client):
        product = _create_product(client, current_cost=10)
        _create_lot(client, product["id"], 100)

        response = client.patch(
            f"/products/{product['id']}/update-cost",
            json={"new_cost": 20, "quantity": 50},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["previous_cost"] == 10
        assert body["average_cost"] == pytest.approx(13.3333, rel=1e-4)
        assert body["breakdown"]["total_quantity"] == 150
        refreshed = client.get(f"/products/{product['id']}").json()
        assert refreshed["current_cost"] == pytest.approx(13.3333, rel=1e-4)

    def test_update_cost_unknown_product(self, client):
        response = client.patch(
            "/products/missing/update-cost", json={"new_cost": 1, "quantity": 1}
        )
        assert response.status_code == 404


class TestInventoryApi:

    def test_lots(self, client):
        product = _create_product(client)
        lot = _create_lot(client, product["id"], 40)

        assert lot["quantity_current"] == 40
        assert client.get(f"/inventory/lots/{lot['id']}").status_code == 200
        listed = client.get("/inventory/lots", params={"product_id": product["id"]})
        assert listed.json()["total"] == 1
        assert client.get("/inventory/lots/missing").status_code == 404

    def test_lot_for_unknown_product(self, client):
        response = client.post(
            "/inventory/lots",
            json={"code": "X", "product_id": "missing", "quantity_initial": 1},
        )
        assert response.status_code == 404

    def test_movement_updates_lot_and_stock(self, client):
        product = _create_product(client)
        lot = _create_lot(client, product["id"], 40)

        response = client.post(
            "/inventory/movements",
            json={
                "product_id": product["id"],
                "lot_id": lot["id"],
                "type": "out",
                "quantity": 15,
                "reference": "Pedido 88",
            },
        )

        assert response.status_code == 201
        assert response.json()["is_adjustment"] is False
        stock = client.get(f"/inventory/stock/{product['id']}").json()
        assert stock["total_stock"] == 25
        assert stock["lots"][0]["quantity_current"] == 25

    def test_movement_with_lot_of_other_product_is_400(self, client):
        product = _create_product(client)
        other = _create_product(client, name="Cera de abejas", sku="CERA")
        lot = _create_lot(client, other["id"], 5)

        response = client.post(
            "/inventory/movements",
            json={
                "product_id": product["id"],
                "lot_id": lot["id"],
                "type": "in",
                "quantity": 1,
            },
        )

        assert response.status_code == 400
        assert client.get(f"/inventory/lots/{lot['id']}").json()["quantity_current"] == 5

    def test_movement_with_unknown_lot_is_404(self, client):
        product = _create_product(client)

        response = client.post(
            "/inventory/movements",
            json={
                "product_id": product["id"],
                "lot_id": "missing",
                "type": "out",
                "quantity": 5,
            },
        )

        assert response.status_code == 404
        assert response.json() == {"detail": "Lote no encontrado"}
        assert client.get("/inventory/reports/movements").json() == []

    def test_movement_invalid_type_is_422(self, client):
        product = _create_product(client)
        response = client.post(
            "/inventory/movements",
            json={"product_id": product["id"], "type": "transfer", "quantity": 1},
        )
        assert response.status_code == 422

    def test_stock_of_unknown_product(self, client):
        assert client.get("/inventory/stock/missing").status_code == 404

    def test_adjustments(self, client):
        product = _create_product(client)
        _create_lot(client, product["id"], 30)

        response = client.post(
            "/inventory/adjustments",
            json={
                "product_id": product["id"],
                "quantity_adjustment": -5,
                "reason": "Rotura",
                "reference": "INV-3",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["previous_stock"] == 30
        assert body["new_stock"] == 25
        assert body["movement"]["type"] == "out"
        assert body["movement"]["quantity"] == 5

        history = client.get(
            "/inventory/adjustments", params={"product_id": product["id"]}
        ).json()
        assert len(history) == 1
        assert history[0]["reason"] == "Rotura - INV-3"
        assert history[0]["previous_stock"] == 30
        assert history[0]["lot_code"].startswith("ADJ-")

    def test_adjustment_without_reason_is_422(self, client):
        product = _create_product(client)
        response = client.post(
            "/inventory/adjustments",
            json={"product_id": product["id"], "quantity_adjustment": 1, "reason": ""},
        )
        assert response.status_code == 422

    def test_purchase(self, client):
        product = _create_product(client, current_cost=0)

        response = client.post(
            "/inventory/purchases",
            json={
                "product_id": product["id"],
                "quantity": 20,
                "unit_cost": 7.5,
                "invoice_number": "991",
                "supplier": "Aromas SL",
                "expiration_date": "2027-03-01",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["lot"]["quantity_current"] == 20
        assert body["movement"]["reference"] == "NF 991 - Aromas SL"
        assert body["cost"]["average_cost"] == 7.5
        stock = client.get(f"/inventory/stock/{product['id']}").json()
        assert stock["total_stock"] == 20

    def test_production_order_movements_unknown_order(self, client):
        response = client.delete("/inventory/production-orders/missing/movements")
        assert response.status_code == 404


class TestReportsApi:

    def test_stock_and_low_stock(self, client):
        low = _create_product(client, name="A-bajo", sku="A", min_stock=20)
        ok = _create_product(client, name="B-ok", sku="B", min_stock=20)
        _create_lot(client, low["id"], 20)
        _create_lot(client, ok["id"], 21, code="LOT-B")

        rows = client.get("/inventory/reports/stock").json()
        assert [(row["name"], row["status"]) for row in rows] == [
            ("A-bajo", "low"),
            ("B-ok", "ok"),
        ]
        low_rows = client.get("/inventory/reports/low-stock").json()
        assert [row["id"] for row in low_rows] == [low["id"]]

    def test_movements_history_filter(self, client):
        product = _create_product(client)
        lot = _create_lot(client, product["id"], 10)
        for kind in ("in", "out", "loss"):
            client.post(
                "/inventory/movements",
                json={
                    "product_id": product["id"],
                    "lot_id": lot["id"],
                    "type": kind,
                    "quantity": 1,
                },
            )

        all_rows = client.get("/inventory/reports/movements").json()
        losses = client.get("/inventory/reports/movements", params={"type": "loss"})
        assert len(all_rows) == 3
        assert [row["type"] for row in losses.json()] == ["loss"]

    def test_expiration(self, client):
        product = _create_product(client)
        soon = (datetime.date.today() + datetime.timedelta(days=10)).isoformat()
        far = (datetime.date.today() + datetime.timedelta(days=90)).isoformat()
        _create_lot(client, product["id"], 5, code="SOON", expiration_date=soon)
        _create_lot(client, product["id"], 5, code="FAR", expiration_date=far)

        default = client.get("/inventory/reports/expiration").json()
        wide = client.get("/inventory/reports/expiration", params={"days": 120}).json()

        assert [row["code"] for row in default] == ["SOON"]
        assert default[0]["days_to_expire"] == 10
        assert [row["code"] for row in wide] == ["SOON", "FAR"]
        assert client.get(
            "/inventory/reports/expiration", params={"days": -1}
        ).status_code == 422

    def test_stock_count(self, client):
        product = _create_product(client)
        _create_lot(client, product["id"], 4, code="L1")
        _create_lot(client, product["id"], 6, code="L2")

        (row,) = client.get("/inventory/reports/stock-count").json()
        assert row["current_stock"] == 10
        assert sorted(lot["lot_code"] for lot in row["lots"]) == ["L1", "L2"]
