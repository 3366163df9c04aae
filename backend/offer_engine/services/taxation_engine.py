"""
Taxation letters: CIT transfer-pricing disclaimer and the shareholder
declaration on non-deductible expenses.

Both letters are assembled as plain data (subject line, paragraphs, numbered
points); rendering is left to the presentation layer.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from offer_engine.models.taxation_models import (
    CitDisclaimer,
    CitShareholderDeclaration,
    TaxationData,
)
from offer_engine.services.formatting import format_period_end

logger = logging.getLogger("tme-offers.taxation")

ISSUING_COMPANIES = {
    "tme-fzco": "TME Services FZCO",
    "management-consultants": "TME Management Consultants LLC",
}

_PERIOD_PLACEHOLDER = "[tax period from dd.mm.yyyy] to [tax period to dd.mm.yyyy]"
_DEFAULT_PHONE = "+971 58 5 36 53 44"

_SBR_POINT = (
    "The company will opt for Small Business Relief since the company's revenues for the stated "
    "tax period are below AED 3,000,000."
)

NON_DEDUCTIBLE_EXPENSES: Tuple[str, ...] = (
    "Any payments made towards donations, grants, or gifts to a Non-Qualifying Public Benefit Entity.",
    "Any expenses incurred as fines or penalties (except compensations made towards breach of contract)",
    "Any bribes or illicit payments",
    "Any dividends, profit distributions, or similar benefits paid to the owner of the company.",
    "Amounts withdrawn from the business by a natural person who is a taxable person conducting a business "
    "or business activity, or a partner in an Unincorporated Partnership.",
    "Corporate tax imposed on the company under this Decree-Law.",
    "Input VAT incurred by the company that is recoverable under the UAE VAT Law",
    "Any taxes on income imposed on the company outside the UAE.",
    "50% of entertainment expenses incurred to entertain non-employees.",
    "Such other expenditure as specified in a decision issued by the Cabinet at the suggestion of the Minister.",
    "Expenses which are NOT in the nature of business expenses and are incurred by or for non-business purposes",
)

_DISCLAIMER_PARAGRAPHS: Tuple[str, ...] = (
    "With the implementation of the UAE Corporate Tax law, referred to as The Federal Decree Law No. 47 of "
    "2023, hereinafter called FDL No. 47 of 2023, effective 01.06.2023, all Taxable Persons (those "
    "registered and required to file the Corporate Tax returns) are required to ensure that transactions "
    "and opening balances at the beginning of its first tax period, entered into with its Related Parties "
    "and Connected Persons, as defined in the law, MUST comply with relevant articles in this law with "
    "respect to the Arm's Length Principle.",
    "For this purpose, the Taxable Person is required to identify all such relevant transactions and opening "
    "balances with its Related Parties and Connected Persons, as defined in the FDL No. 47 of 2023, and "
    "consult with a Transfer Pricing expert who can undertake a detailed study and analysis of the "
    "transactions, known as Benchmarking, to determine if such transactions or opening balances meet the "
    "Arm's Length requirements for the purposes of compliance with the law.",
    "We would like to highlight that non-compliance with Transfer Pricing could result in disallowance or "
    "such transactions being challenged by the Federal Tax Authority in future. Consequently, this could "
    "result in higher tax liabilities and penalties for non-compliance.",
    "Please note that TME Services, based on licensed activity limitations, does not provide any services "
    "in relation to Transfer Pricing and related studies as part of its Corporate Tax services. TME "
    "Services can support with obtaining the necessary quotations for such Transfer Pricing work but does "
    "not take responsibility on the conclusions and/ or sufficiency of the Transfer Pricing documentation. "
    "The Taxable Person's management would be responsible to handle such matters directly with a Transfer "
    "Pricing expert who is engaged for such services.",
    "Please do not hesitate to contact us if you have questions. We look forward to hearing from you.",
)


@dataclass(frozen=True)
class NumberedPoint:
    number: int
    text: str


@dataclass(frozen=True)
class CitDisclaimerLetter:
    issuer: str
    company_name: str
    date: str
    tax_period: str
    subject: str
    paragraphs: Tuple[str, ...]


@dataclass(frozen=True)
class ShareholderDeclarationLetter:
    issuer: str
    company_name: str
    client_name: str
    designation: str
    date: str
    tax_period: str
    subject: str
    introduction: str
    points: Tuple[NumberedPoint, ...]
    confirmation: str
    contact: str
    use_own_letterhead: bool = False


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def format_tax_period(disclaimer: Optional[CitDisclaimer]) -> str:
    """'dd.mm.yyyy to dd.mm.yyyy', or a fill-in placeholder when the range is incomplete."""
    period = disclaimer.tax_period_range if disclaimer else None
    if period is None or period.from_date is None or period.to_date is None:
        return _PERIOD_PLACEHOLDER
    return f"{format_period_end(period.from_date)} to {format_period_end(period.to_date)}"


def revenue_statement(disclaimer: Optional[CitDisclaimer]) -> str:
    if disclaimer is not None and disclaimer.no_revenue_generated:
        return "no revenue"
    revenue = disclaimer.generated_revenue if disclaimer else 0.0
    return f"AED {revenue:,.2f}"


def format_phone_number(phone: str) -> str:
    """'585365344' -> '+971 58 5 36 53 44'."""
    if not phone or len(phone) < 9:
        return _DEFAULT_PHONE
    return f"+971 {phone[0:2]} {phone[2:3]} {phone[3:5]} {phone[5:7]} {phone[7:9]}"


def issuing_company(company_type: str) -> str:
    return ISSUING_COMPANIES.get(company_type, ISSUING_COMPANIES["tme-fzco"])


# ---------------------------------------------------------------------------
# Letters
# ---------------------------------------------------------------------------

def build_cit_disclaimer(data: TaxationData) -> CitDisclaimerLetter:
    tax_period = format_tax_period(data.cit_disclaimer)
    return CitDisclaimerLetter(
        issuer=issuing_company(data.company_type),
        company_name=data.company_name or "--",
        date=format_period_end(data.date),
        tax_period=tax_period,
        subject=(
            "Disclaimer on our Corporate Tax Services with regards to Transfer Pricing to meet the Arm's "
            f"Length Principle as per UAE Corporate Tax Law for the tax period {tax_period}"
        ),
        paragraphs=_DISCLAIMER_PARAGRAPHS,
    )


def _relief_points(declaration: CitShareholderDeclaration, disclaimer: Optional[CitDisclaimer]) -> Tuple[str, ...]:
    tax_period = format_tax_period(disclaimer)
    if disclaimer is not None and disclaimer.no_revenue_generated:
        liquidation = f"The company did not generate any revenue during the stated tax period from {tax_period}"
    else:
        liquidation = (
            f"The company generated revenue of {revenue_statement(disclaimer)} during the stated tax "
            f"period from {tax_period}"
        )

    if declaration.small_business_relief and declaration.company_liquidation:
        return _SBR_POINT, liquidation
    if declaration.company_liquidation:
        return (liquidation,)
    # Small business relief is the default when neither option is chosen
    return (_SBR_POINT,)


def _books_status(declaration: CitShareholderDeclaration) -> str:
    if declaration.books_accounts_deductible_expenses == "contain":
        return "does"
    if declaration.books_accounts_deductible_expenses == "do-not-contain":
        return "does NOT"
    return "does NOT OR does"


def build_shareholder_declaration(data: TaxationData) -> ShareholderDeclarationLetter:
    declaration = data.cit_shareholder_declaration or CitShareholderDeclaration()
    disclaimer = data.cit_disclaimer
    tax_period = format_tax_period(disclaimer)
    client_name = f"{data.first_name} {data.last_name}".strip() or "Client Name"
    company_name = data.company_name or "--"

    texts = NON_DEDUCTIBLE_EXPENSES + _relief_points(declaration, disclaimer)
    points = tuple(NumberedPoint(number=i + 1, text=text) for i, text in enumerate(texts))
    logger.debug(f"Shareholder declaration: {len(points)} points, period {tax_period}")

    return ShareholderDeclarationLetter(
        issuer=issuing_company(data.company_type),
        company_name=company_name,
        client_name=client_name,
        designation=declaration.designation or "Designation",
        date=format_period_end(data.date),
        tax_period=tax_period,
        subject=(
            "Management declaration letter on non-deductible expenses for the purpose of the computation "
            f"of taxable income for UAE corporate tax return filing for the tax period {tax_period}"
        ),
        introduction=(
            "As part of the Federal Decree Law No. 47 of 2017 and review of the books of accounts provided "
            f"to you for the period {tax_period}, for the purpose of computation of taxable income of the "
            "company, we are aware that the following expenses are considered non-deductible as per the UAE "
            "corporate tax law."
        ),
        points=points,
        confirmation=(
            f"I, {client_name}, on behalf of {company_name} hereby confirm that the books of accounts for the "
            f"tax period {tax_period} {_books_status(declaration)} contain the above mentioned expenses."
        ),
        contact=(
            "Should you have any questions, don't hesitate to get in touch with me at "
            f"{format_phone_number(declaration.client_contact_number)}."
        ),
        use_own_letterhead=declaration.has_own_header_footer,
    )
