"""Integration tests for the read-only products, customers and deliveries APIs."""

from __future__ import annotations

import uuid

import pytest

pytestmark = pytest.mark.integration


class TestProductAPI:
    def test_list_products(self, auth_client, product, second_product):
        response = auth_client.get("/api/v1/products/")

        assert response.status_code == 200
        names = [row["name"] for row in response.json()["results"]]
        assert names == ["Mechanical Keyboard", "USB-C Cable"]

    def test_retrieve_product(self, auth_client, product):
        data = auth_client.get(f"/api/v1/products/{product.id}/").json()

        assert data["price"] == "1000.00"
        assert data["stock"] == 10
        assert data["in_stock"] is True

    def test_filter_by_max_price(self, auth_client, product, second_product):
        data = auth_client.get("/api/v1/products/", {"max_price": "100"}).json()

        assert [row["name"] for row in data["results"]] == ["USB-C Cable"]

    def test_unknown_product(self, auth_client):
        response = auth_client.get(f"/api/v1/products/{uuid.uuid4()}/")

        assert response.status_code == 404
        assert response.json()["code"] == "PRODUCT_NOT_FOUND"

    def test_catalog_is_read_only(self, auth_client):
        response = auth_client.post("/api/v1/products/", {"name": "x"}, format="json")

        assert response.status_code == 405


class TestCustomerAPI:
    def test_list_and_retrieve(self, auth_client, customer):
        listed = auth_client.get("/api/v1/customers/").json()
        retrieved = auth_client.get(f"/api/v1/customers/{customer.id}/").json()

        assert listed["count"] == 1
        assert retrieved["email"] == "ana@example.com"

    def test_unknown_customer(self, auth_client):
        response = auth_client.get("/api/v1/customers/not-a-uuid/")

        assert response.status_code == 404
        assert response.json()["code"] == "CUSTOMER_NOT_FOUND"


class TestDeliveryAPI:
    def test_delivery_listed_after_approval(
        self, auth_client, product, delivery_info, card_payload
    ):
        created = auth_client.post(
            "/api/v1/transactions/",
            {
                "items": [{"product_id": str(product.id), "quantity": 2}],
                "customer_name": "Ana Gomez",
                "customer_email": "ana@example.com",
                "customer_address": "Calle 1 # 2-3, Bogota",
                "delivery_info": delivery_info,
            },
            format="json",
        ).json()
        auth_client.put(
            f"/api/v1/transactions/{created['id']}/process-payment/",
            card_payload,
            format="json",
        )

        data = auth_client.get("/api/v1/deliveries/").json()

        assert data["count"] == 1
        delivery = data["results"][0]
        assert delivery["transaction_id"] == created["transaction_id"]
        assert delivery["status"] == "PENDING"
        detail = auth_client.get(f"/api/v1/deliveries/{delivery['id']}/")
        assert detail.status_code == 200

    def test_unknown_delivery(self, auth_client):
        response = auth_client.get(f"/api/v1/deliveries/{uuid.uuid4()}/")

        assert response.status_code == 404
        assert response.json()["code"] == "DELIVERY_NOT_FOUND"

    def test_requires_authentication(self, api_client):
        assert api_client.get("/api/v1/deliveries/").status_code == 401
