"""API tests for categories, clients and suppliers."""

from fastapi.testclient import TestClient


class TestCategories:
    def test_crud(self, client: TestClient) -> None:
        created = client.post("/api/categories/", json={"name": "Fotografia", "kind": "income"})
        assert created.status_code == 201
        category_id = created.json()["id"]

        assert client.get(f"/api/categories/{category_id}").json()["name"] == "Fotografia"

        updated = client.patch(f"/api/categories/{category_id}", json={"name": "Foto e vídeo"})
        assert updated.json()["name"] == "Foto e vídeo"
        assert updated.json()["kind"] == "income"

        assert client.delete(f"/api/categories/{category_id}").status_code == 204
        assert client.get(f"/api/categories/{category_id}").status_code == 404

    def test_list_sorted_by_name(self, client: TestClient, income_category: dict, expense_category: dict) -> None:
        names = [c["name"] for c in client.get("/api/categories/").json()]
        assert names == ["Aluguel", "Design"]

    def test_invalid_kind(self, client: TestClient) -> None:
        response = client.post("/api/categories/", json={"name": "X", "kind": "transfer"})
        assert response.status_code == 422

    def test_cannot_delete_category_in_use(
        self, client: TestClient, expense_category: dict, supplier: dict,
    ) -> None:
        client.post("/api/entries/", json={
            "kind": "expense", "amount": "10.00", "due_date": "2024-01-10",
            "category_id": expense_category["id"],
            "payee_id": supplier["id"], "payee_kind": "supplier",
        })

        response = client.delete(f"/api/categories/{expense_category['id']}")
        assert response.status_code == 400
        assert client.get(f"/api/categories/{expense_category['id']}").status_code == 200

    def test_changes_are_audited(self, client: TestClient) -> None:
        headers = {"X-User-Id": "9", "X-User-Name": "Rafael"}
        category = client.post("/api/categories/", json={"name": "Luz", "kind": "expense"}, headers=headers).json()
        client.patch(f"/api/categories/{category['id']}", json={"name": "Energia"}, headers=headers)
        client.delete(f"/api/categories/{category['id']}", headers=headers)

        logs = client.get("/api/audit/logs", params={"entity": "category"}).json()
        assert [log["action"] for log in logs] == ["DELETE", "UPDATE", "CREATE"]
        assert logs[0]["details"]["removed"]["name"] == "Energia"
        assert logs[1]["details"]["before"]["name"] == "Luz"
        assert logs[2]["details"] == {"name": "Luz", "kind": "expense"}


class TestClients:
    def test_crud_and_search(self, client: TestClient, agency_client: dict) -> None:
        client.post("/api/clients/", json={"name": "Studio Norte", "company": "Norte Ltda"})

        found = client.get("/api/clients/", params={"name": "norte"}).json()
        assert [c["name"] for c in found] == ["Studio Norte"]

        updated = client.patch(f"/api/clients/{agency_client['id']}", json={"phone": "11 99999-0000"})
        assert updated.json()["phone"] == "11 99999-0000"
        assert updated.json()["email"] == "contato@paoquente.com"

        assert client.delete(f"/api/clients/{agency_client['id']}").status_code == 204
        assert client.get(f"/api/clients/{agency_client['id']}").status_code == 404

    def test_name_required(self, client: TestClient) -> None:
        assert client.post("/api/clients/", json={"name": ""}).status_code == 422


class TestSuppliers:
    def test_filters(self, client: TestClient, supplier: dict) -> None:
        client.post("/api/suppliers/", json={"name": "João Freelancer", "supplier_type": "person"})

        people = client.get("/api/suppliers/", params={"supplier_type": "person"}).json()
        assert [s["name"] for s in people] == ["João Freelancer"]

        by_document = client.get("/api/suppliers/", params={"document": "12345678000199"}).json()
        assert [s["id"] for s in by_document] == [supplier["id"]]

        by_name = client.get("/api/suppliers/", params={"name": "central"}).json()
        assert [s["id"] for s in by_name] == [supplier["id"]]

    def test_update_and_delete(self, client: TestClient, supplier: dict) -> None:
        updated = client.patch(f"/api/suppliers/{supplier['id']}", json={"city": "Curitiba", "state": "PR"})
        assert updated.json()["city"] == "Curitiba"

        assert client.patch(f"/api/suppliers/{supplier['id']}", json={"state": "PRR"}).status_code == 422
        assert client.delete(f"/api/suppliers/{supplier['id']}").status_code == 204
        assert client.get(f"/api/suppliers/{supplier['id']}").status_code == 404

    def test_deleted_supplier_leaves_entries(self, client: TestClient, expense_category: dict, supplier: dict) -> None:
        entry = client.post("/api/entries/", json={
            "kind": "expense", "amount": "10.00", "due_date": "2024-01-10",
            "category_id": expense_category["id"],
            "payee_id": supplier["id"], "payee_kind": "supplier",
        }).json()
        client.delete(f"/api/suppliers/{supplier['id']}")

        remaining = client.get(f"/api/entries/{entry['id']}").json()
        assert remaining["payee_id"] == supplier["id"]
        assert remaining["payee_name"] is None
