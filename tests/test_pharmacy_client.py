"""Unit tests for PharmacyClient."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import json
import httpx
import pytest
from services.pharmacy_client import PharmacyApiError, PharmacyClient

BASE_URL = "http://pharmacy.test/api/pharmacies"

PHARMACY = {
    "_id": "665f1c2e9b1e8a0012345678",
    "name": "Main Street Pharmacy",
    "address": {"street": "1 Main St", "city": "Springfield", "state": "IL", "zipCode": "62701", "country": "USA"},
    "phoneNumber": "555-0100",
    "licenseNumber": "PH-1001",
    "servicesOffered": ["Vaccinations"],
    "isActive": True,
}


def make_client(handler):
    return PharmacyClient(BASE_URL, http_client=httpx.Client(transport=httpx.MockTransport(handler)))


class TestPharmacyClient:
    """Test suite for PharmacyClient."""

    def test_list_pharmacies_with_params(self):
        captured = []

        def handler(request):
            captured.append(request)
            return httpx.Response(200, json=[PHARMACY])

        client = make_client(handler)
        result = client.list_pharmacies({"city": "Springfield", "isActive": "true"})

        assert result == [PHARMACY]
        request = captured[0]
        assert request.method == "GET"
        assert request.url.params["city"] == "Springfield"
        assert request.url.params["isActive"] == "true"

    def test_create_pharmacy(self):
        captured = []

        def handler(request):
            captured.append(request)
            return httpx.Response(201, json=PHARMACY)

        client = make_client(handler)
        payload = {k: v for k, v in PHARMACY.items() if k != "_id"}

        assert client.create_pharmacy(payload) == PHARMACY
        assert captured[0].method == "POST"
        assert json.loads(captured[0].content) == payload

    def test_update_pharmacy(self):
        captured = []

        def handler(request):
            captured.append(request)
            return httpx.Response(200, json={**PHARMACY, "phoneNumber": "555-0199"})

        client = make_client(handler)
        result = client.update_pharmacy(PHARMACY["_id"], {"phoneNumber": "555-0199"})

        assert result["phoneNumber"] == "555-0199"
        assert captured[0].method == "PUT"
        assert captured[0].url.path == f"/api/pharmacies/{PHARMACY['_id']}"

    def test_delete_no_content(self):
        client = make_client(lambda request: httpx.Response(204))
        assert client.delete_pharmacy("abc") is None

    def test_delete_with_confirmation_body(self):
        client = make_client(lambda request: httpx.Response(200, json={"msg": "Pharmacy removed"}))
        assert client.delete_pharmacy("abc") == {"msg": "Pharmacy removed"}

    def test_delete_with_empty_ok_body(self):
        client = make_client(lambda request: httpx.Response(200, content=b""))
        assert client.delete_pharmacy("abc") is None

    def test_error_prefers_msg_field(self):
        client = make_client(lambda request: httpx.Response(400, json={"msg": "License number already exists"}))

        with pytest.raises(PharmacyApiError) as exc_info:
            client.create_pharmacy({"name": "Dup"})

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "License number already exists"

    def test_error_uses_message_field(self):
        client = make_client(lambda request: httpx.Response(422, json={"message": "Name is required"}))

        with pytest.raises(PharmacyApiError, match="Name is required"):
            client.update_pharmacy("abc", {})

    def test_error_falls_back_to_reason_phrase(self):
        client = make_client(lambda request: httpx.Response(500, text="stack trace"))

        with pytest.raises(PharmacyApiError) as exc_info:
            client.list_pharmacies()

        assert exc_info.value.message == "Internal Server Error"

    def test_error_falls_back_to_status(self):
        client = make_client(lambda request: httpx.Response(404, json={}))

        with pytest.raises(PharmacyApiError) as exc_info:
            client.delete_pharmacy("missing")

        assert exc_info.value.message == "HTTP error! status: 404"

    def test_transport_errors_propagate(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(httpx.ConnectError):
            client.list_pharmacies()

    def test_create_with_empty_success_body(self):
        client = make_client(lambda request: httpx.Response(201, content=b""))
        assert client.create_pharmacy({"name": "Main Street Pharmacy"}) is None

    def test_update_with_non_json_success_body(self):
        client = make_client(lambda request: httpx.Response(200, text="OK"))
        assert client.update_pharmacy("abc", {"phoneNumber": "555-0199"}) is None
