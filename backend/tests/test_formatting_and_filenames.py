"""
test_formatting_and_filenames.py — Unit tests for display formatting and
document filenames.

Tests cover:
  - Number, AED, amount and secondary-currency formatting (half-up rounding)
  - Date formats and authority name cleanup
  - Offer, family visa, golden visa, company services and taxation filenames
"""

import datetime

import pytest

from offer_engine.config import DET_AUTHORITY_NAME, IFZA_AUTHORITY_NAME
from offer_engine.models.golden_visa_models import PropertyAuthorityFees
from offer_engine.models.taxation_models import CitDisclaimer, TaxPeriodRange
from offer_engine.services.filenames import (
    cit_disclaimer_filename,
    company_services_filename,
    family_visa_filename,
    golden_visa_filename,
    offer_filename,
    shareholder_declaration_filename,
)
from offer_engine.services.formatting import (
    clean_authority_name,
    format_aed,
    format_amount,
    format_date_for_filename,
    format_number,
    format_period_end,
    format_secondary,
    pluralize,
    secondary_amount,
)


class TestFormatting:

    def test_format_number(self):
        assert format_number(12900) == "12,900"
        assert format_number(1234.5) == "1,234.50"

    def test_format_aed(self):
        assert format_aed(4020) == "4,020"
        assert format_aed(25800, with_currency=True) == "AED 25,800"
        assert format_aed(1460.5, with_currency=True) == "AED 1,460.50"

    def test_format_amount_reduction(self):
        assert format_amount(3870.0, is_reduction=True) == "-3,870"
        assert format_amount(3870.0) == "3,870"

    def test_secondary_rounds_half_up(self):
        assert format_secondary(10000, 4.0, "EUR") == "(~ EUR 2,500)"
        assert format_secondary(10, 4.0, "EUR") == "(~ EUR 3)"

    def test_secondary_amount_unrounded(self):
        assert secondary_amount(10, 4.0) == 2.5

    def test_invalid_rate(self):
        with pytest.raises(ValueError):
            secondary_amount(100, 0)

    def test_dates(self):
        assert format_date_for_filename(datetime.date(2025, 3, 7)) == "250307"
        assert format_period_end(datetime.date(2025, 12, 31)) == "31.12.2025"

    def test_clean_authority_name(self):
        assert clean_authority_name(IFZA_AUTHORITY_NAME) == "IFZA"
        assert clean_authority_name(DET_AUTHORITY_NAME) == "DET"

    def test_pluralize(self):
        assert pluralize(1, "visa") == "visa"
        assert pluralize(2, "activity", "activities") == "activities"


class TestOfferFilenames:

    def test_ifza(self, make_offer):
        offer = make_offer(ifza={"visa_quota": 2})
        assert offer_filename(offer) == "250307 FZCO Doe John Setup IFZA 1 2 0 0 0 AED EUR.pdf"

    def test_ifza_with_company_and_visas(self, make_offer):
        offer = make_offer(
            client={"company_name": "Acme"},
            ifza={"visa_quota": 3, "license_years": 2},
            visas={"number_of_visas": 2, "spouse_visa": True, "child_visa": True, "number_of_child_visas": 1},
        )
        assert offer_filename(offer) == "250307 FZCO Doe John Acme Setup IFZA 2 3 2 1 1 AED EUR.pdf"

    def test_addressed_to_company(self, make_offer):
        offer = make_offer(client={"company_name": "Acme", "address_to_company": True}, ifza={})
        assert offer_filename(offer).startswith("250307 FZCO Acme Setup IFZA")

    def test_det(self, make_offer):
        offer = make_offer(authority=DET_AUTHORITY_NAME, det={})
        assert offer_filename(offer) == "250307 MGT Doe John Setup DET CORP AED EUR.pdf"

    def test_family_visa(self, make_offer):
        offer = make_offer(ifza={"visa_quota": 2}, visas={"spouse_visa": True})
        assert family_visa_filename(offer) == "250307 Doe John IFZA 1 2 0 1 0 Dependent Visa AED EUR.pdf"


class TestGoldenVisaFilenames:

    def test_property(self, make_golden_visa):
        data = make_golden_visa(property_authority_fees=PropertyAuthorityFees())
        assert golden_visa_filename(data) == "250307 FZCO Roe Jane Golden Visa Property AED EUR.pdf"

    def test_dependents_only(self, make_golden_visa):
        data = make_golden_visa(
            primary_visa_required=False,
            company_type="management-consultants",
            dependents={"spouse": {"required": True}},
        )
        assert golden_visa_filename(data) == "250307 MGT Roe Jane Golden Visa Dependent AED EUR.pdf"


class TestOtherFilenames:

    def test_company_services(self, make_company_services):
        assert company_services_filename(make_company_services()) == "250307 TME Services ACME Doe.pdf"
        assert company_services_filename(make_company_services(short_company_name=None)) == (
            "250307 TME Services Doe.pdf"
        )

    def test_taxation_default_period_end(self, make_taxation):
        data = make_taxation()
        assert cit_disclaimer_filename(data) == "250307 FZCO ACME CIT Disclaimer 31.12.2025.pdf"
        assert shareholder_declaration_filename(data) == "250307 ACME CIT SH Declaration 31.12.2025.pdf"

    def test_taxation_period_end(self, make_taxation):
        period = TaxPeriodRange(from_date=datetime.date(2024, 1, 1), to_date=datetime.date(2024, 12, 31))
        data = make_taxation(cit_disclaimer=CitDisclaimer(tax_period_range=period))
        assert cit_disclaimer_filename(data).endswith("CIT Disclaimer 31.12.2024.pdf")
