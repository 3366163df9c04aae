"""
CompanyServicesEngine: pricing and line items for the ongoing company
services proposal.

Covers:
  - Accounting pricing tables (monthly and quarterly/yearly transaction tiers)
  - Three-tier pricing display with annual savings per payment frequency
  - Percentage-based accounting add-ons (VAT booking, cost-center booking)
  - Tax consulting, accounting, commercial and compliance line items
  - Back-office team configurations
  - Enabled-service ordering for the proposal pages
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from offer_engine.models.company_services_models import (
    AccountingServices,
    BackOfficeServices,
    CompanyServicesData,
    ComplianceServices,
    TaxConsultingServices,
)
from offer_engine.models.line_items import ServiceItem
from offer_engine.services.service_pipeline import ServiceRule, run_pipeline

logger = logging.getLogger("tme-offers.company-services")


# ---------------------------------------------------------------------------
# Reference tables
# ---------------------------------------------------------------------------

# Monthly accounting: transactions per month -> AED per month
MONTHLY_PRICING: Dict[int, float] = {
    100: 2079,
    200: 3124,
    300: 4057,
    400: 4866,
    500: 5686,
    750: 7180,
    1000: 8911,
    1250: 10764,
    1500: 12494,
    1750: 14348,
    2000: 16078,
    2250: 17943,
    2500: 19673,
    2750: 21415,
}


@dataclass(frozen=True)
class PeriodPricing:
    monthly: float
    quarterly: float
    yearly: float


# Quarterly/yearly accounting: transactions per month -> price per payment period
QUARTERLY_YEARLY_PRICING: Dict[int, PeriodPricing] = {
    10: PeriodPricing(354, 850, 2549),
    15: PeriodPricing(499, 1198, 3593),
    20: PeriodPricing(623, 1497, 4491),
    30: PeriodPricing(874, 2098, 6293),
    60: PeriodPricing(1497, 3593, 10779),
    100: PeriodPricing(2079, 4990, 14969),
    200: PeriodPricing(3124, 7498, 22493),
    300: PeriodPricing(4057, 9737, 29211),
}

DEFAULT_FEES: Dict[str, float] = {
    "pl_statement": 1328,
    "audit_report": 2100,
    "commercial_services": 1000,
    "personal_uae_bank": 3150,
    "digital_bank_wio": 3150,
    "traditional_uae_bank": 7350,
    "payroll_setup": 562,
    "payroll_per_person": 120,
    "monthly_group_reporting": 1236,
    "cit_registration": 2921,
    "cit_return_filing": 5198,
    "vat_registration": 3625,
    "vat_return_filing": 664,
}

# Share of the monthly accounting fee
PERCENTAGE_FEES: Dict[str, float] = {
    "vat_booking": 0.20,
    "cost_center_booking": 0.25,
}

CIT_RETURN_FEES: Dict[str, float] = {
    "small-business-relief": 2599,
    "sbr-regular": 5198,
    "qfzp": 10396,
}

NIL_VAT_RETURN_FEE = 562
BIG_FOUR_AUDIT_GUIDING_FEE = 10428

_DISPLAY_TIER_COUNT = 3


@dataclass(frozen=True)
class TeamTier:
    staff_range: str
    monthly_fee: float


@dataclass(frozen=True)
class TeamConfiguration:
    label: str
    tiers: Tuple[TeamTier, ...]


TEAM_CONFIGURATIONS: Dict[str, TeamConfiguration] = {
    "micro": TeamConfiguration("Micro Team", (
        TeamTier("1–2 staff", 500),
        TeamTier("3–4 staff", 960),
        TeamTier("5–6 staff", 1374),
    )),
    "small": TeamConfiguration("Small Team", (
        TeamTier("1–3 staff", 750),
        TeamTier("4–6 staff", 1440),
        TeamTier("7–10 staff", 2280),
    )),
    "medium": TeamConfiguration("Medium Team", (
        TeamTier("1–4 staff", 980),
        TeamTier("5–6 staff", 1440),
        TeamTier("7–8 staff", 1860),
    )),
    "large": TeamConfiguration("Large Team", (
        TeamTier("1–5 staff", 1250),
        TeamTier("6–10 staff", 2400),
        TeamTier("11–15 staff", 3412),
        TeamTier("16–20 staff", 4273),
    )),
}


# ---------------------------------------------------------------------------
# Accounting pricing display
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PricingRow:
    payment_frequency: str
    cost_per_period: float
    annual_total: float
    annual_savings: float = 0.0


@dataclass(frozen=True)
class PricingTierTable:
    tier: int
    transaction_volume: str
    rows: Tuple[PricingRow, ...]


def transaction_tiers(service_type: Optional[str]) -> List[int]:
    if service_type == "monthly":
        return sorted(MONTHLY_PRICING)
    if service_type == "quarterly-yearly":
        return sorted(QUARTERLY_YEARLY_PRICING)
    return []


def display_tiers(service_type: Optional[str], selected_tier: int) -> List[int]:
    """
    The selected tier and the next two. Near the end of the table the window
    shifts back so three tiers are still shown. Unknown tiers show nothing.
    """
    tiers = transaction_tiers(service_type)
    if selected_tier not in tiers:
        return []
    start = tiers.index(selected_tier)
    if start + _DISPLAY_TIER_COUNT > len(tiers):
        start = max(0, len(tiers) - _DISPLAY_TIER_COUNT)
    return tiers[start:start + _DISPLAY_TIER_COUNT]


def pricing_rows(service_type: Optional[str], tier: int) -> Tuple[PricingRow, ...]:
    if service_type == "monthly":
        monthly = MONTHLY_PRICING[tier]
        return (PricingRow("Monthly (12 payments/year)", monthly, monthly * 12),)

    pricing = QUARTERLY_YEARLY_PRICING[tier]
    monthly_annual = pricing.monthly * 12
    return (
        PricingRow("Monthly (12 payments/year)", pricing.monthly, monthly_annual),
        PricingRow(
            "Quarterly (4 payments/year)",
            pricing.quarterly,
            pricing.quarterly * 4,
            monthly_annual - pricing.quarterly * 4,
        ),
        PricingRow("Yearly (1 payment/year)", pricing.yearly, pricing.yearly, monthly_annual - pricing.yearly),
    )


def accounting_pricing_tables(accounting: Optional[AccountingServices]) -> List[PricingTierTable]:
    if accounting is None or not accounting.enabled:
        return []
    return [
        PricingTierTable(
            tier=tier,
            transaction_volume=f"Up to {tier} Transactions per Month ({tier * 12} per Year)",
            rows=pricing_rows(accounting.service_type, tier),
        )
        for tier in display_tiers(accounting.service_type, accounting.transaction_tier)
    ]


def monthly_accounting_fee(accounting: AccountingServices) -> float:
    """Entered monthly price, else the tier's list price."""
    if accounting.monthly_price > 0:
        return accounting.monthly_price
    if accounting.service_type == "monthly":
        return MONTHLY_PRICING.get(accounting.transaction_tier, 0.0)
    pricing = QUARTERLY_YEARLY_PRICING.get(accounting.transaction_tier)
    return pricing.monthly if pricing else 0.0


def percentage_fee(kind: str, monthly_fee: float) -> float:
    return monthly_fee * PERCENTAGE_FEES[kind]


def cit_return_fee(tax: TaxConsultingServices) -> float:
    if tax.cit_return_filing > 0:
        return tax.cit_return_filing
    return CIT_RETURN_FEES.get(tax.cit_type or "", 0.0)


# ---------------------------------------------------------------------------
# Enabled services
# ---------------------------------------------------------------------------

def enabled_services(data: CompanyServicesData) -> List[str]:
    """Service pages in proposal order; commercial follows accounting."""
    accounting = data.accounting_services
    flags = (
        ("taxConsulting", bool(data.tax_consulting_services and data.tax_consulting_services.enabled)),
        ("accounting", bool(accounting and accounting.enabled)),
        ("commercial", bool(accounting and accounting.commercial_services)),
        ("backOffice", bool(data.back_office_services and data.back_office_services.enabled)),
        ("compliance", bool(data.compliance_services and data.compliance_services.enabled)),
    )
    return [name for name, enabled in flags if enabled]


def back_office_team(services: Optional[BackOfficeServices]) -> Optional[TeamConfiguration]:
    if services is None or not services.enabled or not services.team_size:
        return None
    return TEAM_CONFIGURATIONS.get(services.team_size)


# ---------------------------------------------------------------------------
# Line items
# ---------------------------------------------------------------------------

_VAT_ACTIONS = {
    "registration": "registration",
    "exception": "exemption",
    "de-registration": "de-registration",
}

TAX_CONSULTING_RULES = (
    ServiceRule(
        "cit-registration",
        lambda tax, _, __: True,
        lambda tax, _, __: ServiceItem(
            id="cit-registration",
            description="CIT (Corporate Income Tax) registration",
            amount=tax.cit_registration,
            explanation=(
                "EmaraTax account creation and CIT registration with the FTA (Federal Tax Authority) "
                "to obtain a 15-digit CIT TRN (Tax Registration Number)."
            ),
        ),
    ),
    ServiceRule(
        "cit-return-filing",
        lambda tax, _, __: bool(tax.cit_type) or tax.cit_return_filing > 0,
        lambda tax, _, __: ServiceItem(
            id="cit-return-filing",
            description=(
                "Yearly CIT return filing (QFZP)" if tax.cit_type == "qfzp" else "Yearly CIT return filing"
            ),
            amount=cit_return_fee(tax),
            explanation="Annual CIT return filing based on the company's financial year.",
        ),
    ),
    ServiceRule(
        "vat-registration",
        lambda tax, _, __: bool(tax.vat_type),
        lambda tax, _, __: ServiceItem(
            id="vat-registration",
            description=f"VAT {_VAT_ACTIONS[tax.vat_type]} with the FTA",
            amount=tax.vat_registration,
            explanation=(
                "VAT application with the FTA to obtain a 15-digit VAT TRN (Tax Registration Number), "
                "or VAT TIN (Tax Identification Number)."
            ),
        ),
    ),
    ServiceRule(
        "vat-return-filing",
        lambda tax, _, __: not tax.client_managed_accounting,
        lambda tax, _, __: ServiceItem(
            id="vat-return-filing",
            description="Quarterly VAT return filing (per return)",
            amount=tax.vat_return_filing,
            explanation=f"Nil VAT returns are charged at AED {NIL_VAT_RETURN_FEE} per return.",
        ),
    ),
)


def _accounting_fee_rule(item_id: str, enabled, amount, description: str, explanation: str) -> ServiceRule:
    return ServiceRule(
        item_id,
        lambda acc, monthly, _: enabled(acc),
        lambda acc, monthly, _: ServiceItem(
            id=item_id,
            description=description,
            amount=amount(acc, monthly),
            explanation=explanation,
        ),
    )


ACCOUNTING_RULES = (
    _accounting_fee_rule(
        "monthly-accounting",
        lambda acc: True,
        lambda acc, monthly: monthly,
        "Monthly accounting fee",
        "Bookkeeping of up to the selected number of transactions per month.",
    ),
    _accounting_fee_rule(
        "vat-booking",
        lambda acc: acc.vat_booking,
        lambda acc, monthly: percentage_fee("vat_booking", monthly),
        "VAT booking (per month)",
        "Fee is 20% of the monthly financial accounting fee.",
    ),
    _accounting_fee_rule(
        "cost-center-booking",
        lambda acc: acc.cost_center_booking,
        lambda acc, monthly: percentage_fee("cost_center_booking", monthly),
        "Cost-center booking and reporting (per month)",
        "Fee is 25% of the monthly financial accounting fee.",
    ),
    _accounting_fee_rule(
        "monthly-group-reporting",
        lambda acc: acc.monthly_group_reporting,
        lambda acc, monthly: DEFAULT_FEES["monthly_group_reporting"],
        "Monthly group reporting (per month)",
        "For the preparation of monthly group reporting.",
    ),
    _accounting_fee_rule(
        "pl-statement",
        lambda acc: acc.service_type == "monthly",
        lambda acc, monthly: acc.pl_statement_fee,
        "Annual financial statement (balance sheet and P/L)",
        "For the preparation of the balance sheet and P/L statement at the end of each year.",
    ),
    _accounting_fee_rule(
        "audit-report",
        lambda acc: acc.service_type == "monthly",
        lambda acc, monthly: acc.audit_report_fee,
        "Audit guiding fee",
        "If an audit report is required by the authority or requested by shareholders. If the accounting "
        f"is not handled by us, or the audit is conducted by a Big Four firm, the fee is AED "
        f"{BIG_FOUR_AUDIT_GUIDING_FEE:,}.",
    ),
    _accounting_fee_rule(
        "commercial-services",
        lambda acc: acc.commercial_services,
        lambda acc, monthly: acc.commercial_services_fee,
        "Commercial services (per month)",
        "Reviewing and processing monthly payments and managing salary disbursements.",
    ),
    _accounting_fee_rule(
        "payroll-setup",
        lambda acc: acc.payroll_services,
        lambda acc, monthly: acc.payroll_setup_fee,
        "One-time company payroll setup",
        "Setup of the company payroll in line with UAE labor regulations.",
    ),
    _accounting_fee_rule(
        "payroll-per-person",
        lambda acc: acc.payroll_services_enabled,
        lambda acc, monthly: acc.payroll_services_per_person_fee,
        "Payroll management (per employee per month)",
        "Ongoing payroll management, including the preparation of monthly salary slips.",
    ),
    _accounting_fee_rule(
        "personal-uae-bank",
        lambda acc: acc.bank_account_opening and acc.personal_uae_bank,
        lambda acc, monthly: acc.personal_uae_bank_fee,
        "Personal bank account with a UAE bank",
        "Documentation preparation, bank liaison and application support.",
    ),
    _accounting_fee_rule(
        "digital-bank-wio",
        lambda acc: acc.bank_account_opening and acc.digital_bank_wio,
        lambda acc, monthly: acc.digital_bank_wio_fee,
        "Company account with the digital bank WIO",
        "Application preparation and process facilitation with WIO Bank.",
    ),
    _accounting_fee_rule(
        "traditional-uae-bank",
        lambda acc: acc.bank_account_opening and acc.traditional_uae_bank,
        lambda acc, monthly: acc.traditional_uae_bank_fee,
        "Company account with a traditional UAE bank",
        "Documentation preparation and bank introduction services.",
    ),
)

COMPLIANCE_RULES = (
    ServiceRule(
        "periodic-bank-review",
        lambda comp, _, __: bool(comp.periodic_bank_review_type),
        lambda comp, _, __: ServiceItem(
            id="periodic-bank-review",
            description=f"Periodic bank review ({comp.periodic_bank_review_type})",
            amount=comp.periodic_bank_review_fee,
            explanation="Periodic review of bank KYC requests and supporting documentation.",
        ),
    ),
    ServiceRule(
        "ubo-register-updates",
        lambda comp, _, __: bool(comp.ubo_register_updates_type),
        lambda comp, _, __: ServiceItem(
            id="ubo-register-updates",
            description=f"UBO, shareholder, and company register updates ({comp.ubo_register_updates_type})",
            amount=comp.ubo_register_updates_fee,
            explanation=(
                "Changes to the Ultimate Beneficial Owner (UBO), shareholder structure, or other corporate "
                "registers reported to the relevant authorities."
            ),
        ),
    ),
)


def tax_consulting_items(tax: Optional[TaxConsultingServices]) -> List[ServiceItem]:
    if tax is None or not tax.enabled:
        return []
    return run_pipeline(TAX_CONSULTING_RULES, tax, None, None)


def accounting_items(accounting: Optional[AccountingServices]) -> List[ServiceItem]:
    if accounting is None or not accounting.enabled:
        return []
    monthly = monthly_accounting_fee(accounting)
    logger.debug(f"Accounting {accounting.service_type or 'unset'} tier {accounting.transaction_tier}: AED {monthly}/month")
    return run_pipeline(ACCOUNTING_RULES, accounting, monthly, None)


def compliance_items(compliance: Optional[ComplianceServices]) -> List[ServiceItem]:
    if compliance is None or not compliance.enabled:
        return []
    return run_pipeline(COMPLIANCE_RULES, compliance, None, None)
