"""
Integration tests for /api/products: admin writes, token-holder reads, unique
field conflicts and search.
"""

from collections.abc import Callable

from fastapi.testclient import TestClient


def _create(client: TestClient, headers: dict[str, str], body: dict) -> dict:
    resp = client.post("/api/products", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["product"]


class TestCreate:

    def test_admin_creates_product(
        self, client: TestClient, admin_headers: dict[str, str], product_payload: Callable[..., dict]
    ) -> None:
        body = product_payload()
        resp = client.post("/api/products", json=body, headers=admin_headers)
        assert resp.status_code == 201, resp.text
        data = resp.json()
        assert data["message"] == "Product created successfully"
        product = data["product"]
        assert product["id"]
        assert product["staffId"] == body["staffId"]
        assert product["serialNumber"] == body["serialNumber"]
        assert product["capacityVA"] == "600"
        assert product["issueDate"] == "2024-01-15"
        assert product["status"] == "functional"
        assert product["createdAt"]

    def test_issue_date_accepts_datetime_string(
        self, client: TestClient, admin_headers: dict[str, str], product_payload: Callable[..., dict]
    ) -> None:
        product = _create(
            client, admin_headers, product_payload(issueDate="2024-03-01T10:00:00Z", status="non-functional")
        )
        assert product["issueDate"] == "2024-03-01"
        assert product["status"] == "non-functional"

    def test_missing_fields_listed_in_order(
        self, client: TestClient, admin_headers: dict[str, str]
    ) -> None:
        resp = client.post("/api/products", json={"firstName": "Jane"}, headers=admin_headers)
        assert resp.status_code == 400
        errors = resp.json()["errors"]
        fields = [e["field"] for e in errors]
        assert fields[:3] == ["lastName", "staffId", "designation"]
        assert "firstName" not in fields
        assert fields[-1] == "issueDate"
        assert {"field": "lastName", "message": "Last name is required"} in errors

    def test_bad_staff_id_and_status(
        self, client: TestClient, admin_headers: dict[str, str], product_payload: Callable[..., dict]
    ) -> None:
        resp = client.post(
            "/api/products",
            json=product_payload(staffId=0, status="broken"),
            headers=admin_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["errors"] == [
            {"field": "staffId", "message": "Staff ID must be a positive integer"},
            {"field": "status", "message": "Status must be functional or non-functional"},
        ]

    def test_unusable_staff_id_is_a_validation_error(
        self, client: TestClient, admin_headers: dict[str, str], product_payload: Callable[..., dict]
    ) -> None:
        for staff_id in ("\u00b2", "\u2460", 2**31, 2**64):
            resp = client.post("/api/products", json=product_payload(staffId=staff_id), headers=admin_headers)
            assert resp.status_code == 400, staff_id
            assert resp.json()["errors"] == [
                {"field": "staffId", "message": "Staff ID must be a positive integer"}
            ]
        assert client.get("/api/products", headers=admin_headers).json()["products"] == []

    def test_duplicate_staff_id(
        self, client: TestClient, admin_headers: dict[str, str], product_payload: Callable[..., dict]
    ) -> None:
        original = _create(client, admin_headers, product_payload(staffId=42))
        resp = client.post(
            "/api/products",
            json=product_payload(staffId=42, firstName="Other"),
            headers=admin_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Staff ID already exists"

        stored = client.get(f"/api/products/{original['id']}", headers=admin_headers).json()["product"]
        assert stored == original
        listing = client.get("/api/products", headers=admin_headers).json()["products"]
        assert len(listing) == 1

    def test_duplicate_serial_number(
        self, client: TestClient, admin_headers: dict[str, str], product_payload: Callable[..., dict]
    ) -> None:
        _create(client, admin_headers, product_payload(serialNumber="ABC-1"))
        resp = client.post(
            "/api/products",
            json=product_payload(serialNumber="ABC-1"),
            headers=admin_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Serial number already exists"


class TestReadAndSearch:

    def test_list_is_newest_first(
        self,
        client: TestClient,
        admin_headers: dict[str, str],
        user_headers: dict[str, str],
        product_payload: Callable[..., dict],
    ) -> None:
        ids = [_create(client, admin_headers, product_payload())["id"] for _ in range(3)]
        resp = client.get("/api/products", headers=user_headers)
        assert resp.status_code == 200
        assert [p["id"] for p in resp.json()["products"]] == list(reversed(ids))

    def test_read_requires_token(self, client: TestClient) -> None:
        assert client.get("/api/products").status_code == 401
        assert client.get("/api/products/search/apc").status_code == 401

    def test_get_unknown_id(self, client: TestClient, user_headers: dict[str, str]) -> None:
        resp = client.get("/api/products/9999", headers=user_headers)
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Product not found"

    def test_non_integer_id_is_validation_error(
        self, client: TestClient, user_headers: dict[str, str]
    ) -> None:
        resp = client.get("/api/products/abc", headers=user_headers)
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "product_id"

    def test_search_is_case_insensitive_substring(
        self,
        client: TestClient,
        admin_headers: dict[str, str],
        user_headers: dict[str, str],
        product_payload: Callable[..., dict],
    ) -> None:
        smart = _create(client, admin_headers, product_payload(model="Smart-UPS 1500"))
        _create(client, admin_headers, product_payload())

        resp = client.get("/api/products/search/smart-ups", headers=user_headers)
        assert resp.status_code == 200
        products = resp.json()["products"]
        assert [p["id"] for p in products] == [smart["id"]]

    def test_search_covers_names_department_and_serial(
        self, client: TestClient, admin_headers: dict[str, str], product_payload: Callable[..., dict]
    ) -> None:
        _create(
            client,
            admin_headers,
            product_payload(lastName="Okafor", department="Radiology", serialNumber="ZX-9"),
        )
        for query in ("okaf", "RADIO", "zx-9"):
            resp = client.get(f"/api/products/search/{query}", headers=admin_headers)
            assert len(resp.json()["products"]) == 1, query

    def test_search_wildcards_are_literal(
        self, client: TestClient, admin_headers: dict[str, str], product_payload: Callable[..., dict]
    ) -> None:
        _create(client, admin_headers, product_payload())
        resp = client.get("/api/products/search/%25", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["products"] == []

    def test_search_no_match(
        self, client: TestClient, admin_headers: dict[str, str], product_payload: Callable[..., dict]
    ) -> None:
        _create(client, admin_headers, product_payload())
        resp = client.get("/api/products/search/nothing-like-this", headers=admin_headers)
        assert resp.json() == {"products": []}


class TestUpdate:

    def test_partial_update(
        self, client: TestClient, admin_headers: dict[str, str], product_payload: Callable[..., dict]
    ) -> None:
        product = _create(client, admin_headers, product_payload())
        resp = client.put(
            f"/api/products/{product['id']}",
            json={"location": "Annex", "status": "non-functional"},
            headers=admin_headers,
        )
        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["message"] == "Product updated successfully"
        assert data["product"]["location"] == "Annex"
        assert data["product"]["status"] == "non-functional"
        assert data["product"]["serialNumber"] == product["serialNumber"]

    def test_empty_field_rejected(
        self, client: TestClient, admin_headers: dict[str, str], product_payload: Callable[..., dict]
    ) -> None:
        product = _create(client, admin_headers, product_payload())
        resp = client.put(
            f"/api/products/{product['id']}",
            json={"make": "  "},
            headers=admin_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["errors"] == [{"field": "make", "message": "Make cannot be empty"}]

    def test_update_to_taken_serial_number(
        self, client: TestClient, admin_headers: dict[str, str], product_payload: Callable[..., dict]
    ) -> None:
        first = _create(client, admin_headers, product_payload(serialNumber="TAKEN"))
        second = _create(client, admin_headers, product_payload())
        resp = client.put(
            f"/api/products/{second['id']}",
            json={"serialNumber": "TAKEN"},
            headers=admin_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Serial number already exists"

        stored = client.get(f"/api/products/{second['id']}", headers=admin_headers).json()["product"]
        assert stored["serialNumber"] == second["serialNumber"]
        assert first["serialNumber"] == "TAKEN"

    def test_update_keeping_own_staff_id(
        self, client: TestClient, admin_headers: dict[str, str], product_payload: Callable[..., dict]
    ) -> None:
        product = _create(client, admin_headers, product_payload())
        resp = client.put(
            f"/api/products/{product['id']}",
            json={"staffId": product["staffId"]},
            headers=admin_headers,
        )
        assert resp.status_code == 200

    def test_update_unknown_id(self, client: TestClient, admin_headers: dict[str, str]) -> None:
        resp = client.put("/api/products/9999", json={"make": "APC"}, headers=admin_headers)
        assert resp.status_code == 404


class TestDelete:

    def test_delete_then_delete_again(
        self, client: TestClient, admin_headers: dict[str, str], product_payload: Callable[..., dict]
    ) -> None:
        product = _create(client, admin_headers, product_payload())
        first = client.delete(f"/api/products/{product['id']}", headers=admin_headers)
        assert first.status_code == 200
        assert first.json() == {"message": "Product deleted successfully"}

        for _ in range(2):
            again = client.delete(f"/api/products/{product['id']}", headers=admin_headers)
            assert again.status_code == 404
        assert client.get(f"/api/products/{product['id']}", headers=admin_headers).status_code == 404


class TestAdminOnlyWrites:

    def test_user_cannot_write(
        self,
        client: TestClient,
        admin_headers: dict[str, str],
        user_headers: dict[str, str],
        product_payload: Callable[..., dict],
    ) -> None:
        product = _create(client, admin_headers, product_payload())

        create = client.post("/api/products", json=product_payload(), headers=user_headers)
        update = client.put(
            f"/api/products/{product['id']}", json={"make": "Eaton"}, headers=user_headers
        )
        delete = client.delete(f"/api/products/{product['id']}", headers=user_headers)
        for resp in (create, update, delete):
            assert resp.status_code == 403
            assert resp.json()["detail"] == "Admin access required"

        listing = client.get("/api/products", headers=user_headers).json()["products"]
        assert listing == [product]

    def test_authorization_checked_before_body(
        self, client: TestClient, user_headers: dict[str, str]
    ) -> None:
        resp = client.post("/api/products", json={}, headers=user_headers)
        assert resp.status_code == 403

    def test_write_without_token(self, client: TestClient, product_payload: Callable[..., dict]) -> None:
        resp = client.post("/api/products", json=product_payload())
        assert resp.status_code == 401
