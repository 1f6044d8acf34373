"""
Tests for the order lifecycle: creation, resolution, status toggling and deletion.
"""

import pytest

from rest_api.models import DiningTable, Order, OrderItem
from rest_api.services.domain import OrderService
from shared.utils.schemas import OrderCreate


@pytest.fixture
def table(make_table):
    return make_table(5)


@pytest.fixture
def feijoada(make_product):
    return make_product("Feijoada", 42.5)


@pytest.fixture
def caipirinha(make_product):
    return make_product("Caipirinha", 18)


def order_body(table_id, *items):
    return {
        "tableId": table_id,
        "items": [{"productId": product_id, "quantity": quantity} for product_id, quantity in items],
    }


class TestCreateOrder:

    def test_create_order(self, client, waiter, waiter_headers, table, feijoada, caipirinha, publisher):
        response = client.post(
            "/order",
            json=order_body(table.id, (feijoada.id, 2), (caipirinha.id, 1)),
            headers=waiter_headers,
        )
        assert response.status_code == 201
        order = response.json()
        assert order["status"] == "pending"
        assert order["tableId"] == table.id
        assert order["accountId"] == waiter.id
        assert order["table"]["number"] == 5
        assert order["account"]["email"] == "waiter@test.com"
        assert [(i["productId"], i["quantity"]) for i in order["items"]] == [
            (feijoada.id, 2),
            (caipirinha.id, 1),
        ]
        assert order["items"][0]["product"]["name"] == "Feijoada"

        event = publisher.last("orders@new")
        assert event["payload"] == order
        assert event["ts"]

    def test_accepts_snake_case_body(self, client, waiter_headers, table, feijoada):
        response = client.post(
            "/order",
            json={"table_id": table.id, "items": [{"product_id": feijoada.id, "quantity": 1}]},
            headers=waiter_headers,
        )
        assert response.status_code == 201

    def test_empty_order(self, client, db_session, waiter_headers, table, publisher):
        response = client.post("/order", json=order_body(table.id), headers=waiter_headers)
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert db_session.query(Order).count() == 0
        assert publisher.events == []

    def test_unknown_table(self, client, waiter_headers, feijoada):
        response = client.post("/order", json=order_body(999, (feijoada.id, 1)), headers=waiter_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Table with ID 999 not found"

    def test_unknown_product(self, client, db_session, waiter_headers, table, feijoada):
        response = client.post(
            "/order", json=order_body(table.id, (feijoada.id, 1), (999, 1)), headers=waiter_headers
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "Product with ID 999 not found"
        assert db_session.query(OrderItem).count() == 0

    @pytest.mark.parametrize("quantity", [0, -1, 1000])
    def test_quantity_bounds(self, client, waiter_headers, table, feijoada, quantity):
        response = client.post(
            "/order", json=order_body(table.id, (feijoada.id, quantity)), headers=waiter_headers
        )
        assert response.status_code == 400

    def test_requires_token(self, client, table, feijoada):
        response = client.post("/order", json=order_body(table.id, (feijoada.id, 1)))
        assert response.status_code == 401


class TestOrderLifecycle:

    @pytest.fixture
    def order(self, client, waiter_headers, table, feijoada):
        return client.post(
            "/order", json=order_body(table.id, (feijoada.id, 2)), headers=waiter_headers
        ).json()

    def test_toggle_status(self, client, waiter_headers, order, publisher):
        response = client.patch(f"/order/{order['id']}", headers=waiter_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "completed"
        assert publisher.last("order@checked")["payload"]["status"] == "completed"

        response = client.patch(f"/order/{order['id']}", headers=waiter_headers)
        assert response.json()["status"] == "pending"
        assert publisher.names().count("order@checked") == 2

    def test_toggle_missing_order(self, client, waiter_headers):
        assert client.patch("/order/999", headers=waiter_headers).status_code == 404

    def test_get_order(self, client, waiter_headers, order):
        response = client.get(f"/order/{order['id']}", headers=waiter_headers)
        assert response.status_code == 200
        assert response.json() == order

    def test_delete_order(self, client, db_session, waiter_headers, order, table, publisher):
        response = client.delete(f"/order/{order['id']}", headers=waiter_headers)
        assert response.status_code == 204
        assert publisher.last("order@deleted")["payload"] == {"id": order["id"]}
        assert db_session.query(OrderItem).count() == 0
        # Table survives by default
        assert db_session.get(DiningTable, table.id) is not None
        assert client.get(f"/order/{order['id']}", headers=waiter_headers).status_code == 404

    def test_delete_missing_order(self, client, waiter_headers, publisher):
        assert client.delete("/order/999", headers=waiter_headers).status_code == 404
        assert "order@deleted" not in publisher.names()


class TestOrderListings:

    def test_list_orders_oldest_first(self, client, waiter_headers, make_table, feijoada):
        first, second = make_table(1), make_table(2)
        for table in (second, first):
            client.post("/order", json=order_body(table.id, (feijoada.id, 1)), headers=waiter_headers)

        response = client.get("/orders", headers=waiter_headers)
        assert response.status_code == 200
        assert [o["table"]["number"] for o in response.json()] == [2, 1]

    def test_list_for_table(self, client, waiter_headers, make_table, feijoada):
        first, second = make_table(1), make_table(2)
        client.post("/order", json=order_body(first.id, (feijoada.id, 1)), headers=waiter_headers)
        client.post("/order", json=order_body(second.id, (feijoada.id, 3)), headers=waiter_headers)

        response = client.get(f"/order/table/{second.id}", headers=waiter_headers)
        assert response.status_code == 200
        assert [o["items"][0]["quantity"] for o in response.json()] == [3]

    def test_list_for_empty_table(self, client, waiter_headers, table):
        response = client.get(f"/order/table/{table.id}", headers=waiter_headers)
        assert response.status_code == 200
        assert response.json() == []

    def test_list_for_missing_table(self, client, waiter_headers):
        assert client.get("/order/table/999", headers=waiter_headers).status_code == 404

    def test_list_for_account(self, client, waiter, admin, waiter_headers, admin_headers, table, feijoada):
        client.post("/order", json=order_body(table.id, (feijoada.id, 1)), headers=waiter_headers)
        client.post("/order", json=order_body(table.id, (feijoada.id, 2)), headers=admin_headers)

        response = client.get(f"/order/account/{admin.id}", headers=waiter_headers)
        assert [o["accountId"] for o in response.json()] == [admin.id]

    def test_list_for_missing_account(self, client, waiter_headers):
        assert client.get("/order/account/999", headers=waiter_headers).status_code == 404

    def test_checked_lists_callers_orders(self, client, waiter, waiter_headers, admin_headers, table, feijoada):
        client.post("/order", json=order_body(table.id, (feijoada.id, 1)), headers=waiter_headers)
        client.post("/order", json=order_body(table.id, (feijoada.id, 2)), headers=admin_headers)

        response = client.get("/order/checked", headers=waiter_headers)
        assert response.status_code == 200
        assert [o["accountId"] for o in response.json()] == [waiter.id]

    def test_listings_require_token(self, client):
        assert client.get("/orders").status_code == 401


class TestPartialResolution:

    def test_deleted_product_resolves_to_null(
        self, client, waiter_headers, admin_headers, table, feijoada, caipirinha
    ):
        order = client.post(
            "/order",
            json=order_body(table.id, (feijoada.id, 1), (caipirinha.id, 2)),
            headers=waiter_headers,
        ).json()
        client.delete(f"/product/{caipirinha.id}", headers=admin_headers)

        resolved = client.get(f"/order/{order['id']}", headers=waiter_headers).json()
        assert resolved["items"][0]["product"]["name"] == "Feijoada"
        assert resolved["items"][1]["product"] is None
        assert resolved["items"][1]["productId"] == caipirinha.id

    def test_deleted_table_resolves_to_null(self, client, waiter_headers, admin_headers, table, feijoada):
        order = client.post(
            "/order", json=order_body(table.id, (feijoada.id, 1)), headers=waiter_headers
        ).json()
        client.delete(f"/table/{table.id}", headers=admin_headers)

        resolved = client.get(f"/order/{order['id']}", headers=waiter_headers).json()
        assert resolved["table"] is None
        assert resolved["tableId"] == table.id


class TestOrderService:

    def test_delete_table_with_order(self, db_session, waiter, table, feijoada, publisher):
        service = OrderService(db_session, publisher, delete_table_with_order=True)
        order = service.create_order(
            waiter.id,
            OrderCreate(table_id=table.id, items=[{"product_id": feijoada.id, "quantity": 1}]),
        )

        service.delete_order(order.id)

        db_session.expire_all()
        assert db_session.get(DiningTable, table.id) is None
        assert publisher.names() == ["orders@new", "order@deleted"]

    def test_delete_table_with_order_when_table_is_gone(self, db_session, waiter, table, feijoada, publisher):
        service = OrderService(db_session, publisher, delete_table_with_order=True)
        order = service.create_order(
            waiter.id,
            OrderCreate(table_id=table.id, items=[{"product_id": feijoada.id, "quantity": 1}]),
        )
        db_session.delete(table)
        db_session.commit()

        service.delete_order(order.id)
        assert db_session.get(Order, order.id) is None
