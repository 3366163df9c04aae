"""Taxation letter (CIT disclaimer / shareholder declaration) models."""
import datetime
from typing import Literal, Optional

from pydantic import Field

from offer_engine.models.common import CamelModel

CompanyType = Literal["tme-fzco", "management-consultants"]
Designation = Literal["Director", "General Manager", "Manager", "Managing partner", "Shareholder"]


class TaxPeriodRange(CamelModel):
    from_date: Optional[datetime.date] = None
    to_date: Optional[datetime.date] = None


class CitDisclaimer(CamelModel):
    enabled: bool = False
    tax_period_range: TaxPeriodRange = Field(default_factory=TaxPeriodRange)
    generated_revenue: float = Field(0.0, ge=0)
    no_revenue_generated: bool = False


class CitShareholderDeclaration(CamelModel):
    small_business_relief: bool = False
    company_liquidation: bool = False
    books_accounts_deductible_expenses: Optional[Literal["contain", "do-not-contain"]] = None
    client_contact_number: str = ""
    designation: Optional[Designation] = None
    licence_number: str = ""
    has_own_header_footer: bool = False


class TaxationData(CamelModel):
    """Root configuration for taxation letters."""
    first_name: str = ""
    last_name: str = ""
    company_name: str = ""
    short_company_name: str = ""
    date: datetime.date

    company_type: CompanyType = "tme-fzco"

    cit_disclaimer: Optional[CitDisclaimer] = None
    cit_shareholder_declaration: Optional[CitShareholderDeclaration] = None
