"""Optional one-time and yearly add-on services quoted alongside a setup offer."""
from __future__ import annotations

from typing import List, Optional

from offer_engine.models.line_items import ServiceItem
from offer_engine.models.offer_models import AdditionalServices
from offer_engine.services.service_pipeline import ServiceRule, run_pipeline


def _fee_rule(field_name: str, item_id: str, description: str, explanation: str) -> ServiceRule:
    """A service that is offered whenever its fee field is set above zero."""
    return ServiceRule(
        item_id,
        lambda services, costs, authority: getattr(services, field_name) > 0,
        lambda services, costs, authority: ServiceItem(
            id=item_id,
            description=description,
            amount=getattr(services, field_name),
            explanation=explanation,
        ),
    )


ADDITIONAL_SERVICE_RULES = (
    _fee_rule(
        "company_stamp",
        "company-stamp",
        "One-time TME Services Professional Fee and cost for Company stamp preparation and production (Two stamps)",
        "Professional service fee covering the design, preparation, and production of two company "
        "stamps required for official business documentation and transactions.",
    ),
    _fee_rule(
        "emirates_post",
        "emirates-post",
        "One-time TME Services Professional Fee for registration with Emirates Post P.O. Box",
        "One-time P.O.Box registration fee for establishing a business postal address with Emirates "
        "Post for official correspondence and deliveries.",
    ),
    _fee_rule(
        "cit_registration",
        "cit-registration",
        "One-time TME Services Professional Fee for CIT (Corporate Income Tax) Registration",
        "Professional service fee for registering your company with the Federal Tax Authority for "
        "Corporate Income Tax compliance, including documentation preparation and submission.",
    ),
    _fee_rule(
        "vat_registration",
        "vat-registration",
        "One-time TME Professional Service Fee for VAT (Value Added Tax) Registration or Exception",
        "Professional service fee for VAT registration with the Federal Tax Authority or applying for "
        "VAT exemption, including preparation of required documentation and compliance setup.",
    ),
    _fee_rule(
        "personal_bank",
        "personal-bank-account",
        "One-time TME Services Professional Fee for 1 personal bank account application with a UAE bank",
        "Professional assistance for opening a personal bank account, including documentation "
        "preparation, bank liaison, and application support.",
    ),
    _fee_rule(
        "digital_bank",
        "digital-bank-account",
        "One-time TME Services Professional Fee for 1 company bank account application with the digital bank WIO",
        "Professional service for opening a digital banking account with WIO Bank, including "
        "application preparation and process facilitation.",
    ),
    _fee_rule(
        "traditional_bank",
        "traditional-bank-account",
        "One-time TME Services Professional Fee for 1 company account application with a traditional UAE bank",
        "Professional assistance for opening a corporate bank account with traditional banks, "
        "including documentation preparation and bank introduction services.",
    ),
    _fee_rule(
        "accounting_fee",
        "yearly-accounting-fee",
        "Yearly Accounting Fee based on 360 Transactions per Year",
        "Annual accounting and bookkeeping services based on 360 transactions per year, including "
        "financial record maintenance and basic reporting.",
    ),
    _fee_rule(
        "cit_return_filing",
        "cit-return-filing",
        "Yearly TME Services Professional Fee for CIT (Corporate Income Tax) Return Filing",
        "Professional service fee for preparing and filing annual Corporate Income Tax returns with "
        "the Federal Tax Authority, including tax calculation and submission support.",
    ),
)


def generate_additional_services(services: Optional[AdditionalServices]) -> List[ServiceItem]:
    if services is None:
        return []
    return run_pipeline(ADDITIONAL_SERVICE_RULES, services, None, None)


def has_additional_services(services: Optional[AdditionalServices]) -> bool:
    return bool(generate_additional_services(services))
