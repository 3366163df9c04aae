"""Company services (tax consulting, accounting, back office, compliance) models."""
import datetime
from typing import Literal, Optional

from pydantic import Field

from offer_engine.models.common import CamelModel

CompanyType = Literal["tme-fzco", "management-consultants"]


class TaxConsultingServices(CamelModel):
    enabled: bool = False
    cit_registration: float = Field(0.0, ge=0)
    cit_return_filing: float = Field(0.0, ge=0)
    cit_type: Optional[Literal["sbr-regular", "qfzp", ""]] = None
    vat_type: Optional[Literal["registration", "exception", "de-registration", ""]] = None
    vat_registration: float = Field(0.0, ge=0)
    vat_return_filing: float = Field(0.0, ge=0)
    vat_return_filing_type: Optional[Literal["mini", "basic", "complex", ""]] = None
    client_managed_accounting: bool = False


class AccountingServices(CamelModel):
    enabled: bool = False
    service_type: Optional[Literal["monthly", "quarterly-yearly", ""]] = None
    transaction_tier: int = Field(0, ge=0)
    monthly_price: float = Field(0.0, ge=0)
    quarterly_price: float = Field(0.0, ge=0)
    yearly_price: float = Field(0.0, ge=0)
    vat_booking: bool = False
    cost_center_booking: bool = False
    monthly_group_reporting: bool = False
    pl_statement_fee: float = Field(1328.0, ge=0)
    audit_report_fee: float = Field(2100.0, ge=0)
    local_auditor_fee: bool = False
    commercial_services: bool = False
    commercial_services_fee: float = Field(1000.0, ge=0)
    payroll_services: bool = False
    payroll_setup_fee: float = Field(562.0, ge=0)
    payroll_services_enabled: bool = False
    payroll_services_per_person_fee: float = Field(120.0, ge=0)
    bank_account_opening: bool = False
    personal_uae_bank: bool = Field(False, alias="personalUAEBank")
    personal_uae_bank_fee: float = Field(3150.0, ge=0, alias="personalUAEBankFee")
    digital_bank_wio: bool = Field(False, alias="digitalBankWIO")
    digital_bank_wio_fee: float = Field(3150.0, ge=0, alias="digitalBankWIOFee")
    traditional_uae_bank: bool = Field(False, alias="traditionalUAEBank")
    traditional_uae_bank_fee: float = Field(7350.0, ge=0, alias="traditionalUAEBankFee")


class BackOfficeServices(CamelModel):
    enabled: bool = False
    team_size: Optional[Literal["micro", "small", "medium", "large", ""]] = None


class ComplianceServices(CamelModel):
    enabled: bool = False
    periodic_bank_review_type: Optional[Literal["basic", "standard", "complex", ""]] = None
    periodic_bank_review_fee: float = Field(0.0, ge=0)
    ubo_register_updates_type: Optional[Literal["basic", "standard", "complex", ""]] = None
    ubo_register_updates_fee: float = Field(0.0, ge=0)


class CompanyServicesData(CamelModel):
    """Root configuration for a company services proposal."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company_name: Optional[str] = None
    short_company_name: Optional[str] = None
    date: datetime.date

    secondary_currency: str = "USD"
    exchange_rate: float = Field(..., gt=0, description="AED per one unit of secondary currency")

    company_type: CompanyType = "tme-fzco"

    tax_consulting_services: Optional[TaxConsultingServices] = None
    accounting_services: Optional[AccountingServices] = None
    back_office_services: Optional[BackOfficeServices] = None
    compliance_services: Optional[ComplianceServices] = None
