"""
test_setup_services.py — Unit tests for the initial setup generators.

Tests cover:
  - IFZA ordering, amounts and zero-amount suppression
  - Multi-year license: gross fee line followed by a discount reduction line
  - License explanations by visa quota and unit lease
  - Professional fee reduction as a reduction line
  - DET ordering with license type and rent
  - MoFA wording per setup type
  - Deposit explanations outside the numbered table
"""

from offer_engine.config import DET_AUTHORITY_NAME, INDIVIDUAL_SETUP
from offer_engine.services.authority_registry import EMPTY_AUTHORITY
from offer_engine.services.cost_aggregator import aggregate
from offer_engine.services.cost_calculator import CostCalculator
from offer_engine.services.setup_services import generate_deposit_explanations, generate_setup_services


def _setup_items(offer, authority):
    costs = CostCalculator(authority).initial_setup_costs(offer)
    return generate_setup_services(offer, costs, authority)


class TestIfzaSetupServices:

    def test_one_year_quota_two_with_tme_fee(self, make_offer, ifza):
        offer = make_offer(ifza={"visa_quota": 2, "tme_services_fee": 5000})
        items = _setup_items(offer, ifza)
        assert [i.id for i in items] == ["ifza-license-fee", "gdrfa-registration", "tme-services-fee"]
        assert [i.amount for i in items] == [16900.0, 2000.0, 5000.0]
        assert aggregate(items) == 23900.0

    def test_license_explanation_mentions_quota(self, make_offer, ifza):
        items = _setup_items(make_offer(ifza={"visa_quota": 2}), ifza)
        assert items[0].explanation == "IFZA license cost including visa quota for 2 visas."
        single = _setup_items(make_offer(ifza={"visa_quota": 1}), ifza)
        assert single[0].explanation == "IFZA license cost including visa quota for 1 visa."

    def test_unit_lease_wording(self, make_offer, ifza):
        items = _setup_items(make_offer(ifza={"unit_lease_agreement": True}), ifza)
        assert items[0].description == "IFZA license cost (Unit lease agreement included)"
        assert items[0].explanation == "IFZA license cost, including unit lease agreement."

    def test_multi_year_discount_line(self, make_offer, ifza):
        items = _setup_items(make_offer(ifza={"license_years": 2}), ifza)
        assert [i.id for i in items] == ["ifza-license-fee", "ifza-license-discount"]
        license_fee, discount = items
        assert license_fee.description == "IFZA license cost (for 2 years)"
        assert license_fee.amount == 25800.0
        assert discount.is_reduction
        assert discount.description == "IFZA license cost reduction (15%)"
        assert discount.amount == 3870.0
        assert aggregate(items) == 21930.0

    def test_single_year_has_no_discount_line(self, make_offer, ifza):
        items = _setup_items(make_offer(ifza={}), ifza)
        assert "ifza-license-discount" not in [i.id for i in items]

    def test_zero_amount_services_are_dropped(self, make_offer, ifza):
        items = _setup_items(make_offer(ifza={"cross_border_license": False, "tme_services_fee": 0}), ifza)
        assert all(i.amount > 0 for i in items)
        assert [i.id for i in items] == ["ifza-license-fee"]

    def test_price_reduction_is_last(self, make_offer, ifza):
        offer = make_offer(ifza={"tme_services_fee": 9000, "apply_price_reduction": True, "reduction_amount": 1000})
        items = _setup_items(offer, ifza)
        assert items[-1].id == "price-reduction"
        assert items[-1].is_reduction
        assert items[-2].id == "tme-services-fee"

    def test_additional_activities_description(self, make_offer, ifza):
        items = _setup_items(make_offer(ifza={}, activity_codes=["1", "2", "3", "4"]), ifza)
        activity = next(i for i in items if i.id == "additional-activities")
        assert activity.description == "IFZA additional business activities cost (1 additional activity)"
        assert activity.display_title == "IFZA additional business activities cost"

    def test_mofa_wording_by_setup_type(self, make_offer, ifza):
        corporate = _setup_items(make_offer(ifza={"mofa_owners_declaration": True}), ifza)
        assert next(i for i in corporate if i.id == "mofa-translations").description == "Document translation cost"

        individual = _setup_items(
            make_offer(client={"company_setup_type": INDIVIDUAL_SETUP}, ifza={"mofa_power_of_attorney": True}),
            ifza,
        )
        assert next(i for i in individual if i.id == "mofa-translations").description == "PoA (Power of Attorney) cost"

    def test_no_license_block(self, make_offer, ifza):
        offer = make_offer()
        assert _setup_items(offer, ifza) == []


class TestDetSetupServices:

    def test_order_with_license_and_office(self, make_offer, det):
        offer = make_offer(
            authority=DET_AUTHORITY_NAME,
            det={
                "license_type": "commercial",
                "rent_type": "office",
                "office_rent_amount": 20000,
                "tme_services_fee": 32000,
            },
        )
        items = _setup_items(offer, det)
        assert [i.id for i in items] == [
            "det-registration",
            "gdrfa-registration",
            "mohre-registration",
            "det-license-fee",
            "office-rent",
            "tme-services-fee",
        ]
        assert items[3].description == "DET license cost - commercial"
        assert items[4].explanation == "Annual rental cost for your office."
        assert aggregate(items) == 2000.0 + 2000.0 + 1000.0 + 13000.0 + 20000.0 + 32000.0

    def test_det_registrations_without_license_block(self, make_offer, det):
        items = _setup_items(make_offer(authority=DET_AUTHORITY_NAME), det)
        assert [i.id for i in items] == ["det-registration", "gdrfa-registration", "mohre-registration"]

    def test_gdrfa_has_no_year_suffix(self, make_offer, det):
        items = _setup_items(make_offer(authority=DET_AUTHORITY_NAME, det={}), det)
        gdrfa = next(i for i in items if i.id == "gdrfa-registration")
        assert gdrfa.description == "GDRFA registration cost (Immigration Establishment Card)"


class TestUnsupportedAuthority:

    def test_empty_authority_has_no_setup_items(self, make_offer):
        offer = make_offer(authority="Unknown", ifza={"visa_quota": 2})
        assert _setup_items(offer, EMPTY_AUTHORITY) == []


class TestDepositExplanations:

    def test_ifza_landlord_deposit(self, make_offer, ifza):
        offer = make_offer(ifza={"deposit_with_landlord": True, "deposit_amount": 5000})
        costs = CostCalculator(ifza).initial_setup_costs(offer)
        deposits = generate_deposit_explanations(offer, costs, ifza)
        assert [d.id for d in deposits] == ["ifza-deposit"]

    def test_det_office_deposits(self, make_offer, det):
        offer = make_offer(
            authority=DET_AUTHORITY_NAME,
            det={"rent_type": "office", "office_rent_amount": 20000},
        )
        costs = CostCalculator(det).initial_setup_costs(offer)
        deposits = generate_deposit_explanations(offer, costs, det)
        assert [d.id for d in deposits] == ["det-landlord-deposit", "det-dewa-deposit"]

    def test_no_deposits(self, make_offer, ifza):
        offer = make_offer(ifza={})
        costs = CostCalculator(ifza).initial_setup_costs(offer)
        assert generate_deposit_explanations(offer, costs, ifza) == []
