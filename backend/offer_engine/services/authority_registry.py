"""
Authority registry: fee tables for every supported licensing authority.

Covers:
  - IFZA (International Free Zone Authority) setup, visa and renewal fees
  - DET (Dubai Department of Economy and Tourism) setup, visa and renewal fees
  - Multi-year IFZA license discount schedule
  - Lookup by id or by display name with a zero-fee fallback table

All monetary values are in AED. Lookups never raise: an unknown authority
resolves to EMPTY_AUTHORITY so draft proposals still render.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from offer_engine.config import (
    DET_AUTHORITY_NAME,
    IFZA_AUTHORITY_NAME,
    INDIVIDUAL_SETUP,
    LOW_COST_INSURANCE,
    NO_INSURANCE,
)

logger = logging.getLogger("tme-offers.authorities")


# ---------------------------------------------------------------------------
# Multi-year license discounts: {license_years: discount_pct}
# ---------------------------------------------------------------------------
_MULTI_YEAR_DISCOUNTS: Dict[int, float] = {
    2: 15.0,
    3: 20.0,
    5: 30.0,
}


def multi_year_discount_pct(license_years: int) -> float:
    """Discount percentage for an IFZA license term (0 for unlisted terms)."""
    return _MULTI_YEAR_DISCOUNTS.get(int(license_years or 1), 0.0)


# ---------------------------------------------------------------------------
# Fee table records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MofaTranslationFees:
    owners_declaration: float = 0.0
    certificate_of_incorporation: float = 0.0
    memorandum_or_articles: float = 0.0
    commercial_register: float = 0.0
    power_of_attorney: float = 0.0


@dataclass(frozen=True)
class InitialSetupFees:
    base_license_fee: float = 0.0
    visa_quota_cost: float = 0.0          # per visa in quota, per year
    registration_fee: float = 0.0         # GDRFA establishment card
    cross_border_license: float = 0.0
    det_registration_fee: float = 0.0
    mohre_registration_fee: float = 0.0
    det_license_fees: Dict[str, float] = field(default_factory=dict)
    mofa_translations: MofaTranslationFees = field(default_factory=MofaTranslationFees)
    default_tme_services_fee: float = 0.0
    individual_tme_services_fee: float = 0.0
    additional_activity_cost: float = 0.0
    included_activities: int = 3
    default_office_rent: float = 0.0
    dewa_deposit_office: float = 0.0
    dewa_deposit_warehouse: float = 0.0
    landlord_deposit_pct: float = 0.0


@dataclass(frozen=True)
class HealthInsuranceFees:
    low_cost: float = 0.0
    silver_package: float = 0.0

    def cost_for(self, tier: str) -> float:
        if not tier or tier == NO_INSURANCE:
            return 0.0
        if tier == LOW_COST_INSURANCE:
            return self.low_cost
        return self.silver_package


@dataclass(frozen=True)
class VisaFees:
    standard_visa_fee: float = 0.0
    reduced_visa_fee: float = 0.0         # what a reduced visa actually costs
    tme_visa_service_fee: float = 0.0
    investor_visa_fee: float = 0.0
    employment_visa_employee_insurance: float = 0.0
    status_change_fee: float = 0.0
    vip_stamping_fee: float = 0.0
    spouse_visa_application_fee: float = 0.0
    spouse_visa_standard_fee: float = 0.0
    spouse_visa_tme_service_fee: float = 0.0
    child_visa_standard_fee: float = 0.0
    child_visa_tme_service_fee: float = 0.0
    health_insurance: HealthInsuranceFees = field(default_factory=HealthInsuranceFees)

    @property
    def reduction_per_visa(self) -> float:
        """Discount per reduced visa relative to the standard fee."""
        return max(self.standard_visa_fee - self.reduced_visa_fee, 0.0)


@dataclass(frozen=True)
class YearlyRunningFees:
    base_license_renewal: float = 0.0
    visa_quota_renewal_cost: float = 0.0
    cross_border_renewal: float = 0.0
    immigration_renewal_fee: float = 0.0
    tme_yearly_fee: float = 0.0


@dataclass(frozen=True)
class AuthorityFeatures:
    has_visa_quota: bool = False
    has_cross_border_license: bool = False
    has_investor_visas: bool = False
    has_third_party_approval: bool = False
    has_office_rental: bool = False
    supports_vip_stamping: bool = False
    supports_visa_status_change: bool = False
    has_rent_options: bool = False
    has_dewa_deposit: bool = False
    has_multi_year_license: bool = False
    has_employment_visas: bool = False


@dataclass(frozen=True)
class AuthorityConfig:
    id: str
    name: str
    display_name: str
    area_in_uae: str = ""
    legal_entity: str = ""
    initial_setup: InitialSetupFees = field(default_factory=InitialSetupFees)
    visa_costs: VisaFees = field(default_factory=VisaFees)
    yearly_running: YearlyRunningFees = field(default_factory=YearlyRunningFees)
    features: AuthorityFeatures = field(default_factory=AuthorityFeatures)

    @property
    def is_empty(self) -> bool:
        return self.id == EMPTY_AUTHORITY_ID

    def default_tme_services_fee(self, setup_type: str) -> float:
        """Suggested setup TME fee for the proposal form."""
        if setup_type == INDIVIDUAL_SETUP and self.initial_setup.individual_tme_services_fee:
            return self.initial_setup.individual_tme_services_fee
        return self.initial_setup.default_tme_services_fee

    def license_fee_for_type(self, license_type: Optional[str]) -> float:
        if not license_type:
            return 0.0
        return self.initial_setup.det_license_fees.get(license_type, 0.0)


# ---------------------------------------------------------------------------
# Authority fee tables (AED)
# ---------------------------------------------------------------------------
EMPTY_AUTHORITY_ID = "empty"

_MOFA_STANDARD = MofaTranslationFees(
    owners_declaration=2000.0,
    certificate_of_incorporation=2000.0,
    memorandum_or_articles=2000.0,
    commercial_register=2000.0,
    power_of_attorney=2000.0,
)

_STANDARD_HEALTH_INSURANCE = HealthInsuranceFees(low_cost=1000.0, silver_package=6000.0)

IFZA_AUTHORITY = AuthorityConfig(
    id="ifza",
    name=IFZA_AUTHORITY_NAME,
    display_name="IFZA",
    area_in_uae="Dubai",
    legal_entity="FZCO (LLC Structure)",
    initial_setup=InitialSetupFees(
        base_license_fee=12900.0,
        visa_quota_cost=2000.0,
        registration_fee=2000.0,
        cross_border_license=2000.0,
        mofa_translations=_MOFA_STANDARD,
        default_tme_services_fee=33600.0,
        individual_tme_services_fee=9450.0,
        additional_activity_cost=1000.0,
    ),
    visa_costs=VisaFees(
        standard_visa_fee=5125.0,
        reduced_visa_fee=1375.0,
        tme_visa_service_fee=3150.0,
        investor_visa_fee=1000.0,
        status_change_fee=1600.0,
        vip_stamping_fee=1500.0,
        spouse_visa_application_fee=2737.0,
        spouse_visa_standard_fee=4020.0,
        spouse_visa_tme_service_fee=2737.0,
        child_visa_standard_fee=3170.0,
        child_visa_tme_service_fee=1569.0,
        health_insurance=_STANDARD_HEALTH_INSURANCE,
    ),
    yearly_running=YearlyRunningFees(
        base_license_renewal=12900.0,
        visa_quota_renewal_cost=2000.0,
        cross_border_renewal=2000.0,
        immigration_renewal_fee=2200.0,
        tme_yearly_fee=3150.0,
    ),
    features=AuthorityFeatures(
        has_visa_quota=True,
        has_cross_border_license=True,
        has_investor_visas=True,
        has_third_party_approval=True,
        has_office_rental=True,
        supports_vip_stamping=True,
        supports_visa_status_change=True,
        has_multi_year_license=True,
    ),
)

DET_AUTHORITY = AuthorityConfig(
    id="det",
    name=DET_AUTHORITY_NAME,
    display_name="DET",
    area_in_uae="Dubai",
    legal_entity="LLC (Limited Liability Company)",
    initial_setup=InitialSetupFees(
        registration_fee=2000.0,
        det_registration_fee=2000.0,
        mohre_registration_fee=1000.0,
        det_license_fees={
            "commercial": 13000.0,
            "commercial-real-estate": 24000.0,
            "commercial-investment": 30000.0,
            "instant": 13000.0,
            "industrial": 20000.0,
            "professional": 10000.0,
        },
        mofa_translations=_MOFA_STANDARD,
        default_tme_services_fee=32000.0,
        individual_tme_services_fee=11000.0,
        default_office_rent=12000.0,
        dewa_deposit_office=2000.0,
        dewa_deposit_warehouse=4000.0,
        landlord_deposit_pct=5.0,
    ),
    visa_costs=VisaFees(
        standard_visa_fee=6000.0,
        reduced_visa_fee=1375.0,
        tme_visa_service_fee=3000.0,
        employment_visa_employee_insurance=190.0,
        status_change_fee=1600.0,
        vip_stamping_fee=1500.0,
        spouse_visa_standard_fee=4020.0,
        spouse_visa_tme_service_fee=2238.0,
        child_visa_standard_fee=3170.0,
        child_visa_tme_service_fee=1681.0,
        health_insurance=_STANDARD_HEALTH_INSURANCE,
    ),
    yearly_running=YearlyRunningFees(
        base_license_renewal=13000.0,
        immigration_renewal_fee=2000.0,
        tme_yearly_fee=3360.0,
    ),
    features=AuthorityFeatures(
        has_third_party_approval=True,
        has_office_rental=True,
        supports_vip_stamping=True,
        supports_visa_status_change=True,
        has_rent_options=True,
        has_dewa_deposit=True,
        has_employment_visas=True,
    ),
)

EMPTY_AUTHORITY = AuthorityConfig(
    id=EMPTY_AUTHORITY_ID,
    name="",
    display_name="",
)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------
_REGISTRY: Dict[str, AuthorityConfig] = {}


def register_authority(config: AuthorityConfig) -> None:
    """Add or replace an authority table."""
    _REGISTRY[config.id] = config


def get_authority_config(authority_id: Optional[str]) -> AuthorityConfig:
    config = _REGISTRY.get((authority_id or "").lower())
    if config is None:
        logger.warning(f"Unknown authority id '{authority_id}' - using empty fee table")
        return EMPTY_AUTHORITY
    return config


def get_authority_config_by_name(name: Optional[str]) -> AuthorityConfig:
    """Resolve the long display name used on proposal forms."""
    for config in _REGISTRY.values():
        if config.name == name:
            return config
    logger.warning(f"Unknown authority '{name}' - using empty fee table")
    return EMPTY_AUTHORITY


def list_authorities() -> List[AuthorityConfig]:
    return list(_REGISTRY.values())


def authority_names() -> List[str]:
    return [config.name for config in _REGISTRY.values()]


def authority_exists(authority_id: str) -> bool:
    return (authority_id or "").lower() in _REGISTRY


register_authority(IFZA_AUTHORITY)
register_authority(DET_AUTHORITY)
