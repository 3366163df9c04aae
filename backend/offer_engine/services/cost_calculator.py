"""
CostCalculator: computed costs for company-setup offers.

Covers:
  - Initial setup costs (license, registrations, rent, MoFA, TME fee, deposits)
  - Multi-year IFZA license discount (gross fee and discount kept separate)
  - Company, spouse and child visa cost groups with per-tier health insurance
  - Yearly running costs
  - Per-visa and per-child cost breakdowns

All values are AED floats at full precision. Nothing is rounded here; the
service generators turn these numbers into line items.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from offer_engine.config import CORPORATE_SETUP, INDIVIDUAL_SETUP, NO_INSURANCE
from offer_engine.models.offer_models import OfferData, VisaCosts, VisaDetail
from offer_engine.services.authority_registry import AuthorityConfig, multi_year_discount_pct

logger = logging.getLogger("tme-offers.calculator")


# ---------------------------------------------------------------------------
# Result records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InsuranceTier:
    """Visa holders sharing one health insurance tier."""
    tier: str
    count: int
    unit_cost: float

    @property
    def total(self) -> float:
        return self.count * self.unit_cost


@dataclass(frozen=True)
class InitialSetupCosts:
    annual_license_fee: float = 0.0
    license_fee: float = 0.0              # gross, annual fee x years
    license_discount_pct: float = 0.0
    license_discount: float = 0.0
    registration_fee: float = 0.0         # GDRFA
    det_registration_fee: float = 0.0
    mohre_registration_fee: float = 0.0
    cross_border_license: float = 0.0
    mofa_translations: float = 0.0
    office_rent: float = 0.0
    third_party_approval: float = 0.0
    additional_activities: int = 0
    additional_activities_cost: float = 0.0
    tme_services_fee: float = 0.0
    price_reduction: float = 0.0
    landlord_deposit: float = 0.0
    dewa_deposit: float = 0.0

    @property
    def total(self) -> float:
        """Setup total excluding deposits, reductions subtracted."""
        return (
            self.license_fee
            - self.license_discount
            + self.registration_fee
            + self.det_registration_fee
            + self.mohre_registration_fee
            + self.cross_border_license
            + self.mofa_translations
            + self.office_rent
            + self.third_party_approval
            + self.additional_activities_cost
            + self.tme_services_fee
            - self.price_reduction
        )

    @property
    def deposit_total(self) -> float:
        return self.landlord_deposit + self.dewa_deposit


@dataclass(frozen=True)
class VisaGroupCosts:
    """Costs for one visa group (company visas, the spouse, or the children)."""
    visa_count: int = 0
    standard_fees: float = 0.0
    reduced_count: int = 0
    reduction: float = 0.0
    investor_count: int = 0
    investor_fees: float = 0.0
    employment_count: int = 0
    employee_insurance: float = 0.0
    insurance: Tuple[InsuranceTier, ...] = ()
    status_change_count: int = 0
    status_change_fees: float = 0.0
    vip_count: int = 0
    vip_fees: float = 0.0
    tme_fees: float = 0.0

    @property
    def insurance_total(self) -> float:
        return sum(tier.total for tier in self.insurance)

    @property
    def total(self) -> float:
        return (
            self.standard_fees
            - self.reduction
            + self.investor_fees
            + self.employee_insurance
            + self.insurance_total
            + self.status_change_fees
            + self.vip_fees
            + self.tme_fees
        )


@dataclass(frozen=True)
class YearlyCosts:
    license_renewal: float = 0.0
    visa_quota_renewal: float = 0.0
    cross_border_renewal: float = 0.0
    immigration_renewal: float = 0.0
    office_rent: float = 0.0
    third_party_approval: float = 0.0
    tme_yearly_fee: float = 0.0

    @property
    def total(self) -> float:
        return (
            self.license_renewal
            + self.visa_quota_renewal
            + self.cross_border_renewal
            + self.immigration_renewal
            + self.office_rent
            + self.third_party_approval
            + self.tme_yearly_fee
        )


@dataclass(frozen=True)
class IndividualVisaCost:
    """One visa holder's costs, used for the per-visa breakdown pages."""
    number: int
    standard_fee: float = 0.0
    reduction: float = 0.0
    tme_fee: float = 0.0
    insurance_tier: str = NO_INSURANCE
    insurance_cost: float = 0.0
    status_change_fee: float = 0.0
    vip_fee: float = 0.0
    investor_fee: float = 0.0
    employee_insurance: float = 0.0

    @property
    def is_reduced(self) -> bool:
        return self.reduction > 0

    @property
    def total(self) -> float:
        return (
            self.standard_fee
            - self.reduction
            + self.tme_fee
            + self.insurance_cost
            + self.status_change_fee
            + self.vip_fee
            + self.investor_fee
            + self.employee_insurance
        )


@dataclass(frozen=True)
class OfferCosts:
    setup: InitialSetupCosts = field(default_factory=InitialSetupCosts)
    company_visas: VisaGroupCosts = field(default_factory=VisaGroupCosts)
    spouse_visa: VisaGroupCosts = field(default_factory=VisaGroupCosts)
    child_visas: VisaGroupCosts = field(default_factory=VisaGroupCosts)
    yearly: YearlyCosts = field(default_factory=YearlyCosts)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def group_insurance_tiers(details: Sequence[VisaDetail], authority: AuthorityConfig) -> Tuple[InsuranceTier, ...]:
    """
    Count visa holders per insurance tier, in first-seen tier order.

    Holders without insurance are skipped; a tier whose unit cost is zero
    for this authority produces no group.
    """
    counts: dict = {}
    for detail in details:
        if not detail.has_insurance:
            continue
        counts[detail.health_insurance] = counts.get(detail.health_insurance, 0) + 1

    tiers: List[InsuranceTier] = []
    for tier, count in counts.items():
        unit_cost = authority.visa_costs.health_insurance.cost_for(tier)
        if unit_cost > 0:
            tiers.append(InsuranceTier(tier=tier, count=count, unit_cost=unit_cost))
    return tuple(tiers)


def _per_visa_or_legacy(per_visa_count: int, legacy_count: int) -> int:
    """Per-visa selections win; the legacy counter only applies when none are set."""
    return per_visa_count if per_visa_count > 0 else legacy_count


class CostCalculator:
    """
    Derives computed costs for an offer against one authority's fee table.

    The calculator is stateless apart from the authority it was built with;
    every method is a pure function of the offer passed in.
    """

    def __init__(self, authority: AuthorityConfig) -> None:
        self.authority = authority

    @property
    def is_det(self) -> bool:
        return self.authority.id == "det"

    @property
    def is_ifza(self) -> bool:
        return self.authority.id == "ifza"

    # ------------------------------------------------------------------
    # 1. Initial setup
    # ------------------------------------------------------------------

    def mofa_translation_costs(self, offer: OfferData) -> float:
        """
        Corporate setups pay per selected document; individual setups pay one
        power of attorney per shareholder.
        """
        license_config = offer.det_license if self.is_det else offer.ifza_license
        if license_config is None:
            return 0.0
        fees = self.authority.initial_setup.mofa_translations
        setup_type = offer.client_details.company_setup_type

        if setup_type == CORPORATE_SETUP:
            total = 0.0
            if license_config.mofa_owners_declaration:
                total += fees.owners_declaration
            if license_config.mofa_certificate_of_incorporation:
                total += fees.certificate_of_incorporation
            if license_config.mofa_actual_memorandum_or_articles:
                total += fees.memorandum_or_articles
            if license_config.mofa_commercial_register:
                total += fees.commercial_register
            return total
        if setup_type == INDIVIDUAL_SETUP and license_config.mofa_power_of_attorney:
            return fees.power_of_attorney * offer.client_details.number_of_shareholders
        return 0.0

    def initial_setup_costs(self, offer: OfferData) -> InitialSetupCosts:
        if self.is_det:
            return self._det_setup_costs(offer)
        if self.is_ifza:
            return self._ifza_setup_costs(offer)
        return InitialSetupCosts()

    def _ifza_setup_costs(self, offer: OfferData) -> InitialSetupCosts:
        ifza = offer.ifza_license
        if ifza is None:
            return InitialSetupCosts()

        fees = self.authority.initial_setup
        features = self.authority.features
        years = ifza.license_years

        annual = fees.base_license_fee + ifza.visa_quota * fees.visa_quota_cost
        gross = annual * years
        discount_pct = multi_year_discount_pct(years)

        registration = 0.0
        if ifza.visa_quota > 0 and fees.registration_fee:
            renewal = self.authority.yearly_running.immigration_renewal_fee
            registration = fees.registration_fee + (years - 1) * renewal

        cross_border = 0.0
        if features.has_cross_border_license and ifza.cross_border_license:
            cross_border = fees.cross_border_license * years

        office_rent = 0.0
        if features.has_office_rental and ifza.rent_office_required:
            office_rent = ifza.office_rent_amount * years

        third_party = 0.0
        if features.has_third_party_approval and ifza.third_party_approval:
            third_party = ifza.third_party_approval_amount * years

        activities_tbc = ifza.activities_to_be_confirmed or offer.authority_information.activities_to_be_confirmed
        extra_activities = max(len(offer.activity_codes) - fees.included_activities, 0)
        if activities_tbc:
            extra_activities = 0

        return InitialSetupCosts(
            annual_license_fee=annual,
            license_fee=gross,
            license_discount_pct=discount_pct,
            license_discount=gross * discount_pct / 100.0,
            registration_fee=registration,
            cross_border_license=cross_border,
            mofa_translations=self.mofa_translation_costs(offer),
            office_rent=office_rent,
            third_party_approval=third_party,
            additional_activities=extra_activities,
            additional_activities_cost=extra_activities * fees.additional_activity_cost,
            tme_services_fee=ifza.tme_services_fee,
            price_reduction=ifza.reduction_amount if ifza.apply_price_reduction else 0.0,
            landlord_deposit=ifza.deposit_amount if ifza.deposit_with_landlord else 0.0,
        )

    def _det_setup_costs(self, offer: OfferData) -> InitialSetupCosts:
        det = offer.det_license
        fees = self.authority.initial_setup
        if det is None:
            return InitialSetupCosts(
                registration_fee=fees.registration_fee,
                det_registration_fee=fees.det_registration_fee,
                mohre_registration_fee=fees.mohre_registration_fee,
            )

        office_rent = det.office_rent_amount if det.rent_type else 0.0

        third_party = 0.0
        if self.authority.features.has_third_party_approval and det.third_party_approval:
            third_party = det.third_party_approval_amount

        landlord_deposit = 0.0
        dewa_deposit = 0.0
        if det.rent_type and det.rent_type != "business-center":
            landlord_deposit = det.office_rent_amount * fees.landlord_deposit_pct / 100.0
            if det.rent_type == "office":
                dewa_deposit = fees.dewa_deposit_office
            elif det.rent_type == "warehouse":
                dewa_deposit = fees.dewa_deposit_warehouse

        license_fee = self.authority.license_fee_for_type(det.license_type)
        return InitialSetupCosts(
            annual_license_fee=license_fee,
            license_fee=license_fee,
            registration_fee=fees.registration_fee,
            det_registration_fee=fees.det_registration_fee,
            mohre_registration_fee=fees.mohre_registration_fee,
            mofa_translations=self.mofa_translation_costs(offer),
            office_rent=office_rent,
            third_party_approval=third_party,
            tme_services_fee=det.tme_services_fee,
            price_reduction=det.reduction_amount if det.apply_price_reduction else 0.0,
            landlord_deposit=landlord_deposit,
            dewa_deposit=dewa_deposit,
        )

    # ------------------------------------------------------------------
    # 2. Visa groups
    # ------------------------------------------------------------------

    def company_visa_costs(self, offer: OfferData) -> VisaGroupCosts:
        visas = offer.visa_costs
        if visas is None or visas.number_of_visas <= 0:
            return VisaGroupCosts()

        fees = self.authority.visa_costs
        features = self.authority.features
        count = visas.number_of_visas
        details = visas.visa_details[:count]

        reduced = min(visas.reduced_visa_cost, count)

        investor_count = 0
        if features.has_investor_visas and fees.investor_visa_fee:
            investor_count = _per_visa_or_legacy(
                sum(1 for d in details if d.is_investor), visas.number_of_investor_visas
            )

        employment_count = 0
        if self.is_det and fees.employment_visa_employee_insurance:
            employment_count = sum(1 for d in details if d.is_employment)

        status_change_count = 0
        if features.supports_visa_status_change and fees.status_change_fee:
            status_change_count = _per_visa_or_legacy(
                sum(1 for d in details if d.status_change), visas.visa_status_change
            )

        vip_count = 0
        if features.supports_vip_stamping and fees.vip_stamping_fee:
            vip_count = _per_visa_or_legacy(
                sum(1 for d in details if d.vip_stamping), visas.vip_stamping_visas
            )

        return VisaGroupCosts(
            visa_count=count,
            standard_fees=count * fees.standard_visa_fee,
            reduced_count=reduced,
            reduction=reduced * fees.reduction_per_visa,
            investor_count=investor_count,
            investor_fees=investor_count * fees.investor_visa_fee,
            employment_count=employment_count,
            employee_insurance=employment_count * fees.employment_visa_employee_insurance,
            insurance=group_insurance_tiers(details, self.authority),
            status_change_count=status_change_count,
            status_change_fees=status_change_count * fees.status_change_fee,
            vip_count=vip_count,
            vip_fees=vip_count * fees.vip_stamping_fee,
            tme_fees=count * fees.tme_visa_service_fee,
        )

    def spouse_visa_costs(self, offer: OfferData) -> VisaGroupCosts:
        visas = offer.visa_costs
        fees = self.authority.visa_costs
        if visas is None or not visas.spouse_visa or not fees.spouse_visa_standard_fee:
            return VisaGroupCosts()

        spouse_detail = VisaDetail(health_insurance=visas.spouse_visa_insurance)
        status_change = 1 if visas.spouse_visa_status_change and fees.status_change_fee else 0
        vip = 1 if visas.spouse_visa_vip_stamping and fees.vip_stamping_fee else 0

        return VisaGroupCosts(
            visa_count=1,
            standard_fees=fees.spouse_visa_standard_fee,
            insurance=group_insurance_tiers([spouse_detail], self.authority),
            status_change_count=status_change,
            status_change_fees=status_change * fees.status_change_fee,
            vip_count=vip,
            vip_fees=vip * fees.vip_stamping_fee,
            tme_fees=fees.spouse_visa_tme_service_fee,
        )

    def child_visa_costs(self, offer: OfferData) -> VisaGroupCosts:
        visas = offer.visa_costs
        fees = self.authority.visa_costs
        if not self._has_child_visas(visas):
            return VisaGroupCosts()

        count = visas.number_of_child_visas
        status_change = visas.child_visa_status_change if fees.status_change_fee else 0
        vip = visas.child_visa_vip_stamping if fees.vip_stamping_fee else 0

        return VisaGroupCosts(
            visa_count=count,
            standard_fees=count * fees.child_visa_standard_fee,
            insurance=group_insurance_tiers(visas.child_visa_details[:count], self.authority),
            status_change_count=status_change,
            status_change_fees=status_change * fees.status_change_fee,
            vip_count=vip,
            vip_fees=vip * fees.vip_stamping_fee,
            tme_fees=count * fees.child_visa_tme_service_fee,
        )

    def _has_child_visas(self, visas: Optional[VisaCosts]) -> bool:
        return bool(
            visas is not None
            and visas.child_visa
            and visas.number_of_child_visas > 0
            and self.authority.visa_costs.child_visa_standard_fee
        )

    # ------------------------------------------------------------------
    # 3. Yearly running
    # ------------------------------------------------------------------

    def yearly_running_costs(self, offer: OfferData) -> YearlyCosts:
        yearly = self.authority.yearly_running
        features = self.authority.features

        if self.is_det:
            det = offer.det_license
            license_renewal = yearly.base_license_renewal
            if det is not None and det.license_type:
                license_renewal = self.authority.license_fee_for_type(det.license_type) or license_renewal
            third_party = 0.0
            if det is not None and features.has_third_party_approval and det.third_party_approval:
                third_party = det.third_party_approval_amount
            return YearlyCosts(
                license_renewal=license_renewal,
                immigration_renewal=yearly.immigration_renewal_fee,
                office_rent=det.office_rent_amount if det is not None and det.rent_type else 0.0,
                third_party_approval=third_party,
                tme_yearly_fee=yearly.tme_yearly_fee,
            )

        if self.is_ifza:
            ifza = offer.ifza_license
            quota = ifza.visa_quota if ifza is not None else 0
            return YearlyCosts(
                license_renewal=yearly.base_license_renewal,
                visa_quota_renewal=quota * yearly.visa_quota_renewal_cost if features.has_visa_quota else 0.0,
                cross_border_renewal=(
                    yearly.cross_border_renewal
                    if ifza is not None and features.has_cross_border_license and ifza.cross_border_license
                    else 0.0
                ),
                immigration_renewal=yearly.immigration_renewal_fee if quota > 0 else 0.0,
                office_rent=(
                    ifza.office_rent_amount
                    if ifza is not None and features.has_office_rental and ifza.rent_office_required
                    else 0.0
                ),
                third_party_approval=(
                    ifza.third_party_approval_amount
                    if ifza is not None and features.has_third_party_approval and ifza.third_party_approval
                    else 0.0
                ),
                tme_yearly_fee=yearly.tme_yearly_fee,
            )

        return YearlyCosts()

    # ------------------------------------------------------------------
    # 4. Per-holder breakdowns
    # ------------------------------------------------------------------

    def individual_visa_costs(self, offer: OfferData) -> List[IndividualVisaCost]:
        """One record per company visa; the first ``reduced_visa_cost`` visas are reduced."""
        visas = offer.visa_costs
        if visas is None or visas.number_of_visas < 1:
            return []

        fees = self.authority.visa_costs
        features = self.authority.features
        results: List[IndividualVisaCost] = []

        for i in range(visas.number_of_visas):
            detail = visas.visa_details[i] if i < len(visas.visa_details) else VisaDetail()

            status_change = detail.status_change or i < visas.visa_status_change
            vip = detail.vip_stamping or (visas.vip_stamping and i < visas.vip_stamping_visas)
            investor = detail.is_investor or i < visas.number_of_investor_visas

            results.append(IndividualVisaCost(
                number=i + 1,
                standard_fee=fees.standard_visa_fee,
                reduction=fees.reduction_per_visa if i < visas.reduced_visa_cost else 0.0,
                tme_fee=fees.tme_visa_service_fee,
                insurance_tier=detail.health_insurance,
                insurance_cost=fees.health_insurance.cost_for(detail.health_insurance),
                status_change_fee=fees.status_change_fee if status_change else 0.0,
                vip_fee=fees.vip_stamping_fee if vip else 0.0,
                investor_fee=(
                    fees.investor_visa_fee if investor and features.has_investor_visas else 0.0
                ),
                employee_insurance=(
                    fees.employment_visa_employee_insurance if self.is_det and detail.is_employment else 0.0
                ),
            ))
        return results

    def individual_child_visa_costs(self, offer: OfferData) -> List[IndividualVisaCost]:
        """Per-child records; only IFZA offers with more than one child get them."""
        visas = offer.visa_costs
        if not self.is_ifza or not self._has_child_visas(visas) or visas.number_of_child_visas <= 1:
            return []

        fees = self.authority.visa_costs
        results: List[IndividualVisaCost] = []
        for i in range(visas.number_of_child_visas):
            detail = visas.child_visa_details[i] if i < len(visas.child_visa_details) else VisaDetail()
            results.append(IndividualVisaCost(
                number=i + 1,
                standard_fee=fees.child_visa_standard_fee,
                tme_fee=fees.child_visa_tme_service_fee,
                insurance_tier=detail.health_insurance,
                insurance_cost=fees.health_insurance.cost_for(detail.health_insurance),
                status_change_fee=fees.status_change_fee if i < visas.child_visa_status_change else 0.0,
                vip_fee=fees.vip_stamping_fee if i < visas.child_visa_vip_stamping else 0.0,
            ))
        return results

    # ------------------------------------------------------------------
    # 5. Full rollup
    # ------------------------------------------------------------------

    def calculate(self, offer: OfferData) -> OfferCosts:
        costs = OfferCosts(
            setup=self.initial_setup_costs(offer),
            company_visas=self.company_visa_costs(offer),
            spouse_visa=self.spouse_visa_costs(offer),
            child_visas=self.child_visa_costs(offer),
            yearly=self.yearly_running_costs(offer),
        )
        logger.debug(
            f"{self.authority.display_name or 'empty'} costs: setup={costs.setup.total} "
            f"visas={costs.company_visas.total} yearly={costs.yearly.total}"
        )
        return costs
