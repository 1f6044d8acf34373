"""
Tests for table management endpoints.
"""


class TestTableReads:

    def test_list_tables_in_creation_order(self, client, make_table, waiter_headers):
        make_table(3)
        make_table(1)
        response = client.get("/tables", headers=waiter_headers)
        assert response.status_code == 200
        assert [t["number"] for t in response.json()] == [3, 1]

    def test_get_table(self, client, make_table, waiter_headers):
        table = make_table(5)
        response = client.get(f"/table/{table.id}", headers=waiter_headers)
        assert response.status_code == 200
        assert response.json() == {
            "id": table.id,
            "number": 5,
            "createdAt": response.json()["createdAt"],
        }

    def test_get_missing_table(self, client, waiter_headers):
        response = client.get("/table/999", headers=waiter_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Table with ID 999 not found"

    def test_reads_require_token(self, client):
        assert client.get("/tables").status_code == 401


class TestTableMutations:

    def test_create_table(self, client, admin_headers):
        response = client.post("/table", json={"number": 5}, headers=admin_headers)
        assert response.status_code == 201
        assert response.json()["number"] == 5
        assert response.json()["id"]

    def test_create_duplicate_number(self, client, make_table, admin_headers):
        make_table(5)
        response = client.post("/table", json={"number": 5}, headers=admin_headers)
        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"

    def test_create_requires_positive_number(self, client, admin_headers):
        response = client.post("/table", json={"number": 0}, headers=admin_headers)
        assert response.status_code == 400

    def test_create_requires_number(self, client, admin_headers):
        response = client.post("/table", json={}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_create_requires_admin(self, client, waiter_headers):
        response = client.post("/table", json={"number": 5}, headers=waiter_headers)
        assert response.status_code == 403

    def test_rename_table(self, client, make_table, admin_headers):
        table = make_table(5)
        response = client.patch(f"/table/{table.id}", json={"number": 8}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["number"] == 8

    def test_rename_to_own_number(self, client, make_table, admin_headers):
        table = make_table(5)
        response = client.patch(f"/table/{table.id}", json={"number": 5}, headers=admin_headers)
        assert response.status_code == 200

    def test_rename_to_taken_number(self, client, make_table, admin_headers):
        make_table(5)
        table = make_table(6)
        response = client.patch(f"/table/{table.id}", json={"number": 5}, headers=admin_headers)
        assert response.status_code == 409

    def test_rename_missing_table(self, client, admin_headers):
        response = client.patch("/table/999", json={"number": 5}, headers=admin_headers)
        assert response.status_code == 404

    def test_delete_table(self, client, make_table, admin_headers, waiter_headers):
        table = make_table(5)
        response = client.delete(f"/table/{table.id}", headers=admin_headers)
        assert response.status_code == 204
        assert response.content == b""
        assert client.get(f"/table/{table.id}", headers=waiter_headers).status_code == 404

    def test_delete_missing_table(self, client, admin_headers):
        assert client.delete("/table/999", headers=admin_headers).status_code == 404
