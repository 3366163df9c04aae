"""
Offer (company setup + visa) configuration models.

The offer document is the root input for IFZA and DET company-setup
proposals. Every sub-object except ``client_details`` and
``authority_information`` is optional; an absent sub-object or field means
the corresponding feature is disabled and no line item is produced.
"""
import datetime
from typing import List, Literal, Optional, Union

from pydantic import Field, field_validator

from offer_engine.config import DEFAULT_SECONDARY_CURRENCY, NO_INSURANCE
from offer_engine.models.common import CamelModel

DetLicenseType = Literal[
    "commercial",
    "commercial-real-estate",
    "commercial-investment",
    "instant",
    "industrial",
    "professional",
]
DetRentType = Literal["business-center", "office", "showroom", "warehouse"]


def _coerce_flag(value):
    """Accept the string flags ("true"/"false"/"") older form payloads send."""
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered in ("false", ""):
            return False
    if value is None:
        return False
    return value


class ClientDetails(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company_name: Optional[str] = None
    address_to_company: bool = False
    date: datetime.date
    company_setup_type: str = ""
    secondary_currency: str = DEFAULT_SECONDARY_CURRENCY
    exchange_rate: float = Field(..., gt=0, description="AED per one unit of secondary currency")
    number_of_shareholders: int = Field(1, ge=1)


class AuthorityInformation(CamelModel):
    responsible_authority: str
    area_in_uae: str = Field("", alias="areaInUAE")
    legal_entity: str = ""
    share_capital_aed: float = Field(0.0, ge=0, alias="shareCapitalAED")
    value_per_share_aed: float = Field(0.0, ge=0, alias="valuePerShareAED")
    number_of_shares: int = Field(0, ge=0)
    activities_to_be_confirmed: bool = False


class ActivityCode(CamelModel):
    code: Optional[str] = None
    description: Optional[str] = None


class _MofaSelection(CamelModel):
    """MoFA document translations shared by both authorities."""
    mofa_owners_declaration: bool = False
    mofa_certificate_of_incorporation: bool = False
    mofa_actual_memorandum_or_articles: bool = False
    mofa_commercial_register: bool = False
    mofa_power_of_attorney: bool = False


class IfzaLicense(_MofaSelection):
    visa_quota: int = Field(0, ge=0)
    license_years: int = Field(1, ge=1)
    cross_border_license: bool = False
    unit_lease_agreement: bool = False
    rent_office_required: bool = False
    office_rent_amount: float = Field(0.0, ge=0)
    deposit_with_landlord: bool = False
    deposit_amount: float = Field(0.0, ge=0)
    third_party_approval: bool = False
    third_party_approval_amount: float = Field(0.0, ge=0)
    tme_services_fee: float = Field(0.0, ge=0)
    apply_price_reduction: bool = False
    reduction_amount: float = Field(0.0, ge=0)
    activities_to_be_confirmed: bool = False


class DetLicense(_MofaSelection):
    license_type: Optional[DetLicenseType] = None
    rent_type: Optional[DetRentType] = None
    office_rent_amount: float = Field(0.0, ge=0)
    third_party_approval: bool = False
    third_party_approval_amount: float = Field(0.0, ge=0)
    tme_services_fee: float = Field(0.0, ge=0)
    apply_price_reduction: bool = False
    reduction_amount: float = Field(0.0, ge=0)
    activities_to_be_confirmed: bool = False


class VisaDetail(CamelModel):
    health_insurance: str = NO_INSURANCE
    status_change: bool = False
    vip_stamping: bool = False
    # True/False for IFZA investor visas, "employment" for DET employment visas
    investor_visa: Union[bool, Literal["employment"]] = False
    employment_visa: bool = False

    @field_validator("status_change", "vip_stamping", "employment_visa", "investor_visa", mode="before")
    @classmethod
    def _string_flags(cls, value):
        return _coerce_flag(value)

    @field_validator("health_insurance", mode="before")
    @classmethod
    def _blank_insurance(cls, value):
        return value or NO_INSURANCE

    @property
    def is_investor(self) -> bool:
        return self.investor_visa is True

    @property
    def is_employment(self) -> bool:
        return self.investor_visa == "employment"

    @property
    def has_insurance(self) -> bool:
        return self.health_insurance != NO_INSURANCE


class VisaCosts(CamelModel):
    number_of_visas: int = Field(0, ge=0)
    number_of_investor_visas: int = Field(0, ge=0)
    visa_details: List[VisaDetail] = Field(default_factory=list)
    enable_visa_status_change: bool = False
    visa_status_change: int = Field(0, ge=0)
    reduced_visa_cost: int = Field(0, ge=0, description="Number of visas billed at the reduced rate")
    vip_stamping: bool = False
    vip_stamping_visas: int = Field(0, ge=0)

    spouse_visa: bool = False
    spouse_visa_insurance: str = NO_INSURANCE
    spouse_visa_status_change: bool = False
    spouse_visa_vip_stamping: bool = False

    child_visa: bool = False
    number_of_child_visas: int = Field(0, ge=0)
    child_visa_details: List[VisaDetail] = Field(default_factory=list)
    child_visa_status_change: int = Field(0, ge=0)
    child_visa_vip_stamping: int = Field(0, ge=0)

    @field_validator("spouse_visa_insurance", mode="before")
    @classmethod
    def _blank_spouse_insurance(cls, value):
        return value or NO_INSURANCE


class AdditionalServices(CamelModel):
    company_stamp: float = Field(0.0, ge=0)
    emirates_post: float = Field(0.0, ge=0)
    cit_registration: float = Field(0.0, ge=0)
    cit_return_filing: float = Field(0.0, ge=0)
    vat_registration: float = Field(0.0, ge=0)
    personal_bank: float = Field(0.0, ge=0)
    digital_bank: float = Field(0.0, ge=0)
    traditional_bank: float = Field(0.0, ge=0)
    accounting_fee: float = Field(0.0, ge=0)


class OfferData(CamelModel):
    """Root configuration for a company-setup offer."""
    client_details: ClientDetails
    authority_information: AuthorityInformation
    activity_codes: List[ActivityCode] = Field(default_factory=list)
    ifza_license: Optional[IfzaLicense] = None
    det_license: Optional[DetLicense] = None
    visa_costs: Optional[VisaCosts] = None
    additional_services: Optional[AdditionalServices] = None

    @property
    def exchange_rate(self) -> float:
        return self.client_details.exchange_rate

    @property
    def license_years(self) -> int:
        return self.ifza_license.license_years if self.ifza_license else 1
