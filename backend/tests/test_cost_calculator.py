"""
test_cost_calculator.py — Unit tests for CostCalculator.

Tests cover:
  - IFZA license fee with visa quota and the multi-year discount
  - GDRFA registration over a multi-year term
  - Additional activities beyond the included three
  - MoFA translations for corporate and individual setups
  - DET license, rent and deposits
  - Company, spouse and child visa groups with insurance tiers
  - Yearly running costs for both authorities
  - Per-visa and per-child breakdown records
  - Unknown authority yields all-zero costs
"""

import pytest

from offer_engine.config import DET_AUTHORITY_NAME, INDIVIDUAL_SETUP, LOW_COST_INSURANCE, SILVER_INSURANCE
from offer_engine.services.authority_registry import EMPTY_AUTHORITY
from offer_engine.services.cost_calculator import CostCalculator, InsuranceTier


# ===========================================================================
# Initial setup
# ===========================================================================

class TestIfzaSetup:

    def test_one_year_with_quota(self, make_offer, ifza):
        offer = make_offer(ifza={"visa_quota": 2, "tme_services_fee": 5000})
        setup = CostCalculator(ifza).initial_setup_costs(offer)
        assert setup.annual_license_fee == 16900.0
        assert setup.license_fee == 16900.0
        assert setup.license_discount == 0.0
        assert setup.registration_fee == 2000.0
        assert setup.total == 23900.0

    def test_two_year_discount_kept_separate(self, make_offer, ifza):
        offer = make_offer(ifza={"license_years": 2})
        setup = CostCalculator(ifza).initial_setup_costs(offer)
        assert setup.license_fee == 25800.0
        assert setup.license_discount_pct == 15.0
        assert setup.license_discount == pytest.approx(3870.0)
        assert setup.total == pytest.approx(21930.0)

    def test_registration_covers_every_year(self, make_offer, ifza):
        offer = make_offer(ifza={"visa_quota": 1, "license_years": 3})
        setup = CostCalculator(ifza).initial_setup_costs(offer)
        # 2,000 first year plus 2 x 2,200 immigration renewals
        assert setup.registration_fee == 6400.0
        assert setup.license_discount == pytest.approx(44700.0 * 0.20)

    def test_no_registration_without_quota(self, make_offer, ifza):
        offer = make_offer(ifza={"visa_quota": 0})
        assert CostCalculator(ifza).initial_setup_costs(offer).registration_fee == 0.0

    def test_additional_activities(self, make_offer, ifza):
        offer = make_offer(ifza={}, activity_codes=["1", "2", "3", "4", "5"])
        setup = CostCalculator(ifza).initial_setup_costs(offer)
        assert setup.additional_activities == 2
        assert setup.additional_activities_cost == 2000.0

    def test_activities_to_be_confirmed_are_not_charged(self, make_offer, ifza):
        offer = make_offer(ifza={"activities_to_be_confirmed": True}, activity_codes=["1", "2", "3", "4"])
        assert CostCalculator(ifza).initial_setup_costs(offer).additional_activities_cost == 0.0

    def test_mofa_corporate_documents(self, make_offer, ifza):
        offer = make_offer(ifza={"mofa_owners_declaration": True, "mofa_commercial_register": True})
        assert CostCalculator(ifza).mofa_translation_costs(offer) == 4000.0

    def test_mofa_individual_power_of_attorney_per_shareholder(self, make_offer, ifza):
        offer = make_offer(
            client={"company_setup_type": INDIVIDUAL_SETUP, "number_of_shareholders": 2},
            ifza={"mofa_power_of_attorney": True, "mofa_owners_declaration": True},
        )
        assert CostCalculator(ifza).mofa_translation_costs(offer) == 4000.0

    def test_price_reduction_only_when_applied(self, make_offer, ifza):
        calculator = CostCalculator(ifza)
        off = make_offer(ifza={"reduction_amount": 1000})
        on = make_offer(ifza={"reduction_amount": 1000, "apply_price_reduction": True})
        assert calculator.initial_setup_costs(off).price_reduction == 0.0
        assert calculator.initial_setup_costs(on).price_reduction == 1000.0

    def test_landlord_deposit_outside_total(self, make_offer, ifza):
        offer = make_offer(ifza={"deposit_with_landlord": True, "deposit_amount": 5000})
        setup = CostCalculator(ifza).initial_setup_costs(offer)
        assert setup.deposit_total == 5000.0
        assert setup.total == 12900.0


class TestDetSetup:

    def test_license_type_fee(self, make_offer, det):
        offer = make_offer(authority=DET_AUTHORITY_NAME, det={"license_type": "commercial"})
        setup = CostCalculator(det).initial_setup_costs(offer)
        assert setup.license_fee == 13000.0
        assert setup.det_registration_fee == 2000.0
        assert setup.mohre_registration_fee == 1000.0

    def test_office_rent_deposits(self, make_offer, det):
        offer = make_offer(
            authority=DET_AUTHORITY_NAME,
            det={"license_type": "commercial", "rent_type": "office", "office_rent_amount": 20000},
        )
        setup = CostCalculator(det).initial_setup_costs(offer)
        assert setup.office_rent == 20000.0
        assert setup.landlord_deposit == 1000.0
        assert setup.dewa_deposit == 2000.0
        assert setup.deposit_total == 3000.0

    def test_business_center_has_no_deposits(self, make_offer, det):
        offer = make_offer(
            authority=DET_AUTHORITY_NAME,
            det={"rent_type": "business-center", "office_rent_amount": 10000},
        )
        assert CostCalculator(det).initial_setup_costs(offer).deposit_total == 0.0


# ===========================================================================
# Visa groups
# ===========================================================================

class TestVisaGroups:

    def test_company_visas_with_reduction_and_insurance(self, make_offer, ifza):
        offer = make_offer(ifza={}, visas={
            "number_of_visas": 2,
            "reduced_visa_cost": 1,
            "visa_details": [{"health_insurance": LOW_COST_INSURANCE}, {"health_insurance": SILVER_INSURANCE}],
        })
        visas = CostCalculator(ifza).company_visa_costs(offer)
        assert visas.standard_fees == 10250.0
        assert visas.reduction == 3750.0
        assert visas.tme_fees == 6300.0
        assert visas.insurance == (
            InsuranceTier(LOW_COST_INSURANCE, 1, 1000.0),
            InsuranceTier(SILVER_INSURANCE, 1, 6000.0),
        )
        assert visas.total == 10250.0 - 3750.0 + 6300.0 + 7000.0

    def test_reduced_count_clamped_to_visa_count(self, make_offer, ifza):
        offer = make_offer(ifza={}, visas={"number_of_visas": 1, "reduced_visa_cost": 3})
        assert CostCalculator(ifza).company_visa_costs(offer).reduced_count == 1

    def test_details_beyond_visa_count_ignored(self, make_offer, ifza):
        offer = make_offer(ifza={}, visas={
            "number_of_visas": 1,
            "visa_details": [{}, {"health_insurance": SILVER_INSURANCE}],
        })
        assert CostCalculator(ifza).company_visa_costs(offer).insurance == ()

    def test_legacy_investor_counter(self, make_offer, ifza):
        offer = make_offer(ifza={}, visas={"number_of_visas": 2, "number_of_investor_visas": 1})
        visas = CostCalculator(ifza).company_visa_costs(offer)
        assert visas.investor_count == 1
        assert visas.investor_fees == 1000.0

    def test_det_employment_insurance(self, make_offer, det):
        offer = make_offer(authority=DET_AUTHORITY_NAME, det={}, visas={
            "number_of_visas": 1,
            "visa_details": [{"investor_visa": "employment"}],
        })
        visas = CostCalculator(det).company_visa_costs(offer)
        assert visas.employment_count == 1
        assert visas.employee_insurance == 190.0

    def test_spouse_visa(self, make_offer, ifza):
        offer = make_offer(ifza={}, visas={"spouse_visa": True, "spouse_visa_insurance": LOW_COST_INSURANCE})
        spouse = CostCalculator(ifza).spouse_visa_costs(offer)
        assert spouse.standard_fees == 4020.0
        assert spouse.insurance_total == 1000.0
        assert spouse.tme_fees == 2737.0

    def test_children_visas(self, make_offer, ifza):
        offer = make_offer(ifza={}, visas={"child_visa": True, "number_of_child_visas": 2})
        children = CostCalculator(ifza).child_visa_costs(offer)
        assert children.visa_count == 2
        assert children.standard_fees == 6340.0
        assert children.tme_fees == 3138.0

    def test_no_visa_block(self, make_offer, ifza):
        costs = CostCalculator(ifza).calculate(make_offer(ifza={}))
        assert costs.company_visas.total == 0.0
        assert costs.spouse_visa.visa_count == 0
        assert costs.child_visas.visa_count == 0


# ===========================================================================
# Yearly running
# ===========================================================================

class TestYearlyRunning:

    def test_ifza_with_quota_and_cross_border(self, make_offer, ifza):
        offer = make_offer(ifza={"visa_quota": 2, "cross_border_license": True})
        yearly = CostCalculator(ifza).yearly_running_costs(offer)
        assert yearly.license_renewal == 12900.0
        assert yearly.visa_quota_renewal == 4000.0
        assert yearly.cross_border_renewal == 2000.0
        assert yearly.immigration_renewal == 2200.0
        assert yearly.tme_yearly_fee == 3150.0

    def test_det_license_type_renewal(self, make_offer, det):
        offer = make_offer(authority=DET_AUTHORITY_NAME, det={"license_type": "commercial-investment"})
        yearly = CostCalculator(det).yearly_running_costs(offer)
        assert yearly.license_renewal == 30000.0
        assert yearly.tme_yearly_fee == 3360.0


# ===========================================================================
# Per-holder breakdowns
# ===========================================================================

class TestIndividualBreakdowns:

    def test_first_visas_are_reduced(self, make_offer, ifza):
        offer = make_offer(ifza={}, visas={"number_of_visas": 3, "reduced_visa_cost": 1})
        records = CostCalculator(ifza).individual_visa_costs(offer)
        assert [r.number for r in records] == [1, 2, 3]
        assert [r.is_reduced for r in records] == [True, False, False]
        assert records[0].total == 5125.0 - 3750.0 + 3150.0

    def test_single_child_has_no_breakdown(self, make_offer, ifza):
        offer = make_offer(ifza={}, visas={"child_visa": True, "number_of_child_visas": 1})
        assert CostCalculator(ifza).individual_child_visa_costs(offer) == []

    def test_child_breakdowns_ifza_only(self, make_offer, ifza, det):
        visas = {"child_visa": True, "number_of_child_visas": 2, "child_visa_status_change": 1}
        records = CostCalculator(ifza).individual_child_visa_costs(make_offer(ifza={}, visas=visas))
        assert len(records) == 2
        assert records[0].status_change_fee == 1600.0
        assert records[1].status_change_fee == 0.0
        det_offer = make_offer(authority=DET_AUTHORITY_NAME, det={}, visas=visas)
        assert CostCalculator(det).individual_child_visa_costs(det_offer) == []


class TestUnknownAuthority:

    def test_all_costs_zero(self, make_offer):
        offer = make_offer(authority="Unknown", ifza={"visa_quota": 2}, visas={"number_of_visas": 1})
        costs = CostCalculator(EMPTY_AUTHORITY).calculate(offer)
        assert costs.setup.total == 0.0
        assert costs.company_visas.total == 0.0
        assert costs.yearly.total == 0.0
