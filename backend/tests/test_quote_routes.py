"""
test_quote_routes.py — API tests for the quote endpoints.

Tests cover:
  - POST /api/quotes for each document type (camelCase payloads)
  - 400 for a document type sent without its data
  - 422 for unknown document types and invalid exchange rates
  - GET /api/quotes/authorities and /health
  - Request tracing headers
"""

import pytest
from fastapi.testclient import TestClient

from offer_engine.config import IFZA_AUTHORITY_NAME
from offer_engine.main import app


@pytest.fixture(scope="module")
def client():
    return TestClient(app)


def _offer_payload(exchange_rate=4.0):
    return {
        "documentType": "offer",
        "data": {
            "clientDetails": {
                "firstName": "John",
                "lastName": "Doe",
                "date": "2025-03-07",
                "companySetupType": "Corporate Setup",
                "exchangeRate": exchange_rate,
            },
            "authorityInformation": {"responsibleAuthority": IFZA_AUTHORITY_NAME},
            "ifzaLicense": {"visaQuota": 2, "tmeServicesFee": 5000},
        },
    }


class TestCreateQuote:

    def test_offer(self, client):
        response = client.post("/api/quotes", json=_offer_payload())
        assert response.status_code == 200
        body = response.json()
        assert body["totals"]["setup_total"] == 23900.0
        assert [item["id"] for item in body["setup_items"]] == [
            "ifza-license-fee",
            "gdrfa-registration",
            "tme-services-fee",
        ]
        assert body["setup_items"][0]["context"] == "company"

    def test_taxation(self, client):
        response = client.post("/api/quotes", json={
            "documentType": "taxation",
            "data": {
                "date": "2025-03-07",
                "companyName": "Acme Trading FZCO",
                "shortCompanyName": "ACME",
                "citShareholderDeclaration": {"smallBusinessRelief": True},
            },
        })
        assert response.status_code == 200
        body = response.json()
        assert body["cit_disclaimer"] is None
        assert len(body["shareholder_declaration"]["points"]) == 12

    def test_golden_visa(self, client):
        response = client.post("/api/quotes", json={
            "documentType": "golden-visa",
            "data": {
                "date": "2025-03-07",
                "exchangeRate": 4.0,
                "visaType": "time-deposit",
                "skilledEmployeeAuthorityFees": {},
            },
        })
        assert response.status_code == 200
        assert response.json()["visa_type_name"] == "Time Deposit"

    def test_missing_data_is_bad_request(self, client):
        response = client.post("/api/quotes", json={"documentType": "offer"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid data provided to Offer generator: offer data is missing"

    def test_company_services_without_name(self, client):
        response = client.post("/api/quotes", json={
            "documentType": "company-services",
            "data": {"date": "2025-03-07", "exchangeRate": 3.67},
        })
        assert response.status_code == 400
        assert "client name" in response.json()["detail"]

    def test_unknown_document_type(self, client):
        response = client.post("/api/quotes", json={"documentType": "invoice"})
        assert response.status_code == 422

    def test_zero_exchange_rate_rejected(self, client):
        response = client.post("/api/quotes", json=_offer_payload(exchange_rate=0))
        assert response.status_code == 422


class TestMetaRoutes:

    def test_authorities(self, client):
        response = client.get("/api/quotes/authorities")
        assert response.status_code == 200
        assert {a["id"] for a in response.json()} >= {"ifza", "det"}

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "active"

    def test_request_headers(self, client):
        response = client.get("/api/quotes/authorities")
        assert "X-Request-ID" in response.headers
        assert "X-Process-Time" in response.headers

    def test_caller_request_id_kept(self, client):
        response = client.get("/api/quotes/authorities", headers={"X-Request-ID": "form-42"})
        assert response.headers["X-Request-ID"] == "form-42"
