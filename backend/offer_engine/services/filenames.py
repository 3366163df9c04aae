"""
Document filenames, following the firm's naming convention:
date first (YYMMDD), issuing company, client, document kind, then the
parameters that distinguish one quote from another.
"""
from __future__ import annotations

import datetime
from typing import List

from offer_engine.config import COMPANY_ABBREVIATIONS, CORPORATE_SETUP, DET_AUTHORITY_NAME, IFZA_AUTHORITY_NAME
from offer_engine.models.company_services_models import CompanyServicesData
from offer_engine.models.golden_visa_models import GoldenVisaData
from offer_engine.models.offer_models import OfferData
from offer_engine.models.taxation_models import TaxationData
from offer_engine.services.authority_registry import get_authority_config_by_name
from offer_engine.services.formatting import clean_authority_name, format_date_for_filename, format_period_end

_GOLDEN_VISA_TYPES = {
    "property-investment": "Property",
    "time-deposit": "Deposit",
    "skilled-employee": "Skilled",
}

# Used when no tax period end date was entered
DEFAULT_TAX_PERIOD_END = datetime.date(2025, 12, 31)


def _pdf(components: List[str]) -> str:
    return " ".join(str(c) for c in components if c != "") + ".pdf"


def _company_abbreviation(company_type: str) -> str:
    return COMPANY_ABBREVIATIONS.get(company_type, "FZCO")


def _is_det(offer: OfferData) -> bool:
    return offer.authority_information.responsible_authority == DET_AUTHORITY_NAME


def offer_name_components(offer: OfferData) -> List[str]:
    """Company name when addressing the company, else 'Last First' followed by the company."""
    client = offer.client_details
    if client.address_to_company and client.company_name:
        return [client.company_name]
    if client.first_name and client.last_name:
        names = [client.last_name, client.first_name]
    elif client.first_name:
        names = [client.first_name]
    else:
        names = ["Client"]
    if client.company_name:
        names.append(client.company_name)
    return names


def _offer_counts(offer: OfferData) -> List[str]:
    visas = offer.visa_costs
    return [
        str(offer.ifza_license.visa_quota if offer.ifza_license else 0),
        str(visas.number_of_visas if visas else 0),
        str(1 if visas and visas.spouse_visa else 0),
        str(visas.number_of_child_visas if visas else 0),
    ]


def _setup_code(offer: OfferData) -> str:
    return "CORP" if offer.client_details.company_setup_type == CORPORATE_SETUP else "INDI"


def offer_filename(offer: OfferData) -> str:
    client = offer.client_details
    date = format_date_for_filename(client.date)
    currency = client.secondary_currency
    if _is_det(offer):
        return _pdf([date, "MGT", *offer_name_components(offer), "Setup", "DET", _setup_code(offer), "AED", currency])
    return _pdf([
        date, "FZCO", *offer_name_components(offer), "Setup", "IFZA",
        str(offer.license_years), *_offer_counts(offer), "AED", currency,
    ])


def family_visa_filename(offer: OfferData) -> str:
    client = offer.client_details
    date = format_date_for_filename(client.date)
    if client.address_to_company and client.company_name:
        name = client.company_name
    elif client.first_name:
        name = f"{client.last_name} {client.first_name}" if client.last_name else client.first_name
    else:
        name = client.company_name or "CLIENT"

    authority_name = offer.authority_information.responsible_authority
    if _is_det(offer):
        return _pdf([date, name, "DET", _setup_code(offer), "Dependent Visa", "AED", client.secondary_currency])

    authority = get_authority_config_by_name(authority_name)
    display_name = clean_authority_name(authority.display_name if not authority.is_empty else authority_name)
    years = str(offer.license_years) if authority_name == IFZA_AUTHORITY_NAME else "1"
    return _pdf([
        date, name, display_name, years, *_offer_counts(offer),
        "Dependent Visa", "AED", client.secondary_currency,
    ])


def golden_visa_filename(data: GoldenVisaData) -> str:
    names = [n for n in (data.last_name, data.first_name) if n] or ["Client"]
    dependents_only = not data.primary_visa_required and (
        data.dependents.has_spouse or data.dependents.number_of_children > 0
    )
    kind = "Dependent" if dependents_only else _GOLDEN_VISA_TYPES.get(data.visa_type, data.visa_type)
    return _pdf([
        format_date_for_filename(data.date),
        _company_abbreviation(data.company_type),
        *names,
        "Golden Visa",
        kind,
        "AED",
        data.secondary_currency,
    ])


def company_services_filename(data: CompanyServicesData) -> str:
    date = format_date_for_filename(data.date)
    if data.short_company_name and data.last_name:
        return _pdf([date, "TME Services", data.short_company_name, data.last_name])
    return _pdf([date, "TME Services", data.last_name or "Client"])


def _tax_period_end(data: TaxationData) -> str:
    period = data.cit_disclaimer.tax_period_range if data.cit_disclaimer else None
    end = period.to_date if period and period.to_date else DEFAULT_TAX_PERIOD_END
    return format_period_end(end)


def cit_disclaimer_filename(data: TaxationData) -> str:
    return _pdf([
        format_date_for_filename(data.date),
        _company_abbreviation(data.company_type),
        data.short_company_name or "Company",
        "CIT Disclaimer",
        _tax_period_end(data),
    ])


def shareholder_declaration_filename(data: TaxationData) -> str:
    return _pdf([
        format_date_for_filename(data.date),
        data.short_company_name or "Company",
        "CIT SH Declaration",
        _tax_period_end(data),
    ])
