"""
conftest.py — Shared pytest fixtures for the TME offer engine test suite.

No database or external service fixtures are defined here. All tests in this
suite are pure unit tests over the calculators, generators and builders,
plus a thin API layer exercised through FastAPI's TestClient.

Import-path bootstrapping:
    The ``backend/`` directory is inserted into sys.path so that all
    ``offer_engine.*`` imports resolve correctly regardless of where pytest
    is invoked.
"""

import datetime
import os
import sys

import pytest

# ---------------------------------------------------------------------------
# Ensure ``backend/`` is on the import path before any offer_engine imports.
# ---------------------------------------------------------------------------
_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)


OFFER_DATE = datetime.date(2025, 3, 7)
EXCHANGE_RATE = 4.0


# ---------------------------------------------------------------------------
# Authority fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def ifza():
    from offer_engine.services.authority_registry import IFZA_AUTHORITY
    return IFZA_AUTHORITY


@pytest.fixture(scope="session")
def det():
    from offer_engine.services.authority_registry import DET_AUTHORITY
    return DET_AUTHORITY


# ---------------------------------------------------------------------------
# Configuration factories
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def make_offer():
    """
    Build an OfferData from keyword overrides.

    Defaults: IFZA corporate setup for John Doe, dated 2025-03-07, EUR at
    4.0 AED, no license, visa or additional-service block.
    """
    from offer_engine.config import CORPORATE_SETUP, IFZA_AUTHORITY_NAME
    from offer_engine.models.offer_models import (
        AdditionalServices,
        AuthorityInformation,
        ClientDetails,
        DetLicense,
        IfzaLicense,
        OfferData,
        VisaCosts,
    )

    def _make(
        authority=IFZA_AUTHORITY_NAME,
        client=None,
        ifza=None,
        det=None,
        visas=None,
        additional=None,
        activity_codes=(),
    ):
        client_fields = {
            "first_name": "John",
            "last_name": "Doe",
            "date": OFFER_DATE,
            "company_setup_type": CORPORATE_SETUP,
            "exchange_rate": EXCHANGE_RATE,
        }
        client_fields.update(client or {})
        return OfferData(
            client_details=ClientDetails(**client_fields),
            authority_information=AuthorityInformation(responsible_authority=authority),
            activity_codes=[{"code": code} for code in activity_codes],
            ifza_license=IfzaLicense(**ifza) if ifza is not None else None,
            det_license=DetLicense(**det) if det is not None else None,
            visa_costs=VisaCosts(**visas) if visas is not None else None,
            additional_services=AdditionalServices(**additional) if additional is not None else None,
        )

    return _make


@pytest.fixture(scope="session")
def make_golden_visa():
    """GoldenVisaData for Jane Roe (property investment unless overridden)."""
    from offer_engine.models.golden_visa_models import GoldenVisaData

    def _make(**overrides):
        fields = {
            "first_name": "Jane",
            "last_name": "Roe",
            "date": OFFER_DATE,
            "exchange_rate": EXCHANGE_RATE,
            "visa_type": "property-investment",
        }
        fields.update(overrides)
        return GoldenVisaData(**fields)

    return _make


@pytest.fixture(scope="session")
def make_company_services():
    from offer_engine.models.company_services_models import CompanyServicesData

    def _make(**overrides):
        fields = {
            "first_name": "John",
            "last_name": "Doe",
            "company_name": "Acme Trading FZCO",
            "short_company_name": "ACME",
            "date": OFFER_DATE,
            "exchange_rate": 3.67,
        }
        fields.update(overrides)
        return CompanyServicesData(**fields)

    return _make


@pytest.fixture(scope="session")
def make_taxation():
    from offer_engine.models.taxation_models import TaxationData

    def _make(**overrides):
        fields = {
            "first_name": "John",
            "last_name": "Doe",
            "company_name": "Acme Trading FZCO",
            "short_company_name": "ACME",
            "date": OFFER_DATE,
        }
        fields.update(overrides)
        return TaxationData(**fields)

    return _make


# ---------------------------------------------------------------------------
# Table factory for pagination tests
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def make_table():
    """BreakdownTable with ``rows`` placeholder cost items."""
    from offer_engine.models.line_items import BreakdownTable, CostItem

    def _make(key, rows=2):
        items = [
            CostItem(number=i + 1, description=f"{i + 1}. Item", amount=100.0, secondary_amount=25.0)
            for i in range(rows)
        ]
        return BreakdownTable(key=key, title=key.title(), items=items, total=100.0 * rows)

    return _make
