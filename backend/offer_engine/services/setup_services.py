"""
Initial setup line items for IFZA and DET offers, plus the (unnumbered)
deposit explanations shown under the setup table.

Each authority's generator is an ordered tuple of ServiceRule entries; the
tuple order is the order the proposal lists the services in.
"""
from __future__ import annotations

import logging
from typing import Dict, List

from offer_engine.config import CORPORATE_SETUP, INDIVIDUAL_SETUP
from offer_engine.models.line_items import Explanation, ServiceItem
from offer_engine.models.offer_models import OfferData
from offer_engine.services.authority_registry import AuthorityConfig
from offer_engine.services.cost_calculator import InitialSetupCosts
from offer_engine.services.formatting import pluralize
from offer_engine.services.service_pipeline import ServiceRule, always, run_pipeline

logger = logging.getLogger("tme-offers.setup")


DET_LICENSE_NAMES: Dict[str, str] = {
    "commercial": "Commercial",
    "commercial-real-estate": "Commercial Real Estate",
    "commercial-investment": "Commercial Investment (Holding)",
    "instant": "Instant",
    "industrial": "Industrial",
    "professional": "Professional",
}

_DET_RENT_DESCRIPTIONS: Dict[str, str] = {
    "business-center": "Business center arrangement cost (Ejari)",
    "office": "Office rent (differs on location & availability)",
    "showroom": "Showroom rent (differs on location & availability)",
    "warehouse": "Warehouse rent (differs on location & availability)",
}

_NOC_EXPLANATION = (
    "Includes mandatory approvals or NOCs (No Objection Certificates) from relevant external "
    "authorities like Dubai Sport Council, Dubai Civil Aviation Authority, Dubai Municipality etc."
)
_POA_DESCRIPTION = "PoA (Power of Attorney) cost"
_POA_EXPLANATION = (
    "Includes obtaining an official document that authorizes TME Services to act on your "
    "behalf for all matters related to your company setup."
)
_TRANSLATION_DESCRIPTION = "Document translation cost"
_TRANSLATION_EXPLANATION = (
    "Includes official translation and attestation of documents by the MoFA "
    "(Ministry of Foreign Affairs)."
)
_TME_FEE_EXPLANATION = "Our service fee for managing the initial setup process."
_REDUCTION_EXPLANATION = "A reduction applied to our professional fee."


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------

def _multi_year_suffix(offer: OfferData) -> str:
    years = offer.license_years
    return f" (for {years} years)" if years > 1 else ""


def _tme_services_fee(offer: OfferData, costs: InitialSetupCosts, authority) -> ServiceItem:
    return ServiceItem(
        id="tme-services-fee",
        description="TME Services professional fee",
        amount=costs.tme_services_fee,
        explanation=_TME_FEE_EXPLANATION,
    )


def _price_reduction(offer: OfferData, costs: InitialSetupCosts, authority) -> ServiceItem:
    return ServiceItem(
        id="price-reduction",
        description="TME Services professional fee reduction",
        amount=costs.price_reduction,
        is_reduction=True,
        explanation=_REDUCTION_EXPLANATION,
    )


def _gdrfa_registration(offer: OfferData, costs: InitialSetupCosts, authority) -> ServiceItem:
    suffix = _multi_year_suffix(offer) if authority.features.has_multi_year_license else ""
    return ServiceItem(
        id="gdrfa-registration",
        description=f"GDRFA registration cost (Immigration Establishment Card){suffix}",
        amount=costs.registration_fee,
        explanation="Mandatory registration for the establishment card.",
    )


def _mofa_wording(setup_type: str, default_description: str, default_explanation: str):
    if setup_type == CORPORATE_SETUP:
        return _TRANSLATION_DESCRIPTION, _TRANSLATION_EXPLANATION
    if setup_type == INDIVIDUAL_SETUP:
        return _POA_DESCRIPTION, _POA_EXPLANATION
    return default_description, default_explanation


# ---------------------------------------------------------------------------
# DET
# ---------------------------------------------------------------------------

def _det_rent_explanation(rent_type: str) -> str:
    if rent_type == "business-center":
        return "For your business center arrangement (Ejari)."
    return f"Annual rental cost for your {rent_type}."


def _det_mofa(offer: OfferData, costs: InitialSetupCosts, authority) -> ServiceItem:
    description, explanation = _mofa_wording(
        offer.client_details.company_setup_type, _POA_DESCRIPTION, _POA_EXPLANATION
    )
    return ServiceItem(
        id="mofa-translations",
        description=description,
        amount=costs.mofa_translations,
        explanation=explanation,
    )


DET_SETUP_RULES = (
    ServiceRule(
        "det-registration",
        always,
        lambda offer, costs, authority: ServiceItem(
            id="det-registration",
            description="DET registration cost",
            amount=costs.det_registration_fee,
            explanation="For registering the business with the DET (Department of Economy and Tourism).",
        ),
    ),
    ServiceRule("gdrfa-registration", always, _gdrfa_registration),
    ServiceRule(
        "mohre-registration",
        always,
        lambda offer, costs, authority: ServiceItem(
            id="mohre-registration",
            description="MoHRE registration cost (Labour card)",
            amount=costs.mohre_registration_fee,
            explanation=(
                "Mandatory registration cost with the MoHRE "
                "(Ministry of Human Resources and Emiratisation)."
            ),
        ),
    ),
    ServiceRule(
        "det-license-fee",
        lambda offer, costs, authority: bool(offer.det_license and offer.det_license.license_type),
        lambda offer, costs, authority: ServiceItem(
            id="det-license-fee",
            description=f"DET license cost - {DET_LICENSE_NAMES[offer.det_license.license_type].lower()}",
            amount=costs.license_fee,
            explanation="For obtaining a license issued by the DET (Dubai Department of Economy and Tourism).",
        ),
    ),
    ServiceRule(
        "office-rent",
        lambda offer, costs, authority: bool(offer.det_license and offer.det_license.rent_type),
        lambda offer, costs, authority: ServiceItem(
            id="office-rent",
            description=_DET_RENT_DESCRIPTIONS[offer.det_license.rent_type],
            amount=costs.office_rent,
            explanation=_det_rent_explanation(offer.det_license.rent_type),
        ),
    ),
    ServiceRule(
        "third-party-approval",
        always,
        lambda offer, costs, authority: ServiceItem(
            id="third-party-approval",
            description="Third-party approval cost (NOC)",
            amount=costs.third_party_approval,
            explanation=_NOC_EXPLANATION,
        ),
    ),
    ServiceRule("mofa-translations", always, _det_mofa),
    ServiceRule("tme-services-fee", always, _tme_services_fee),
    ServiceRule("price-reduction", always, _price_reduction),
)


# ---------------------------------------------------------------------------
# IFZA
# ---------------------------------------------------------------------------

def _ifza_license_explanation(offer: OfferData) -> str:
    quota = offer.ifza_license.visa_quota
    has_unit_lease = offer.ifza_license.unit_lease_agreement
    visas = f"{quota} {pluralize(quota, 'visa')}"
    if quota == 0 and has_unit_lease:
        return "IFZA license cost, including unit lease agreement."
    if quota > 0 and has_unit_lease:
        return f"IFZA license cost including visa quota for {visas}. Unit lease agreement is included."
    if quota > 0:
        return f"IFZA license cost including visa quota for {visas}."
    return "IFZA license cost."


def _ifza_license(offer: OfferData, costs: InitialSetupCosts, authority) -> ServiceItem:
    description = f"IFZA license cost{_multi_year_suffix(offer)}"
    if offer.ifza_license.unit_lease_agreement:
        description += " (Unit lease agreement included)"
    return ServiceItem(
        id="ifza-license-fee",
        description=description,
        amount=costs.license_fee,
        explanation=_ifza_license_explanation(offer),
        title="IFZA license cost",
    )


def _ifza_license_discount(offer: OfferData, costs: InitialSetupCosts, authority) -> ServiceItem:
    pct = f"{costs.license_discount_pct:g}"
    return ServiceItem(
        id="ifza-license-discount",
        description=f"IFZA license cost reduction ({pct}%)",
        amount=costs.license_discount,
        is_reduction=True,
        explanation=f"Multi-year license discount of {pct}% for {offer.license_years}-year license term.",
        title="IFZA license cost reduction",
    )


def _ifza_office_rent(offer: OfferData, costs: InitialSetupCosts, authority) -> ServiceItem:
    label = "Total" if offer.license_years > 1 else "Annual"
    return ServiceItem(
        id="office-rent",
        description=f"IFZA office rent{_multi_year_suffix(offer)}",
        amount=costs.office_rent,
        explanation=f"{label} cost for renting a physical office space as per authority requirements.",
    )


def _ifza_mofa(offer: OfferData, costs: InitialSetupCosts, authority) -> ServiceItem:
    description, explanation = _mofa_wording(
        offer.client_details.company_setup_type, "MoFA document translations", _TRANSLATION_EXPLANATION
    )
    return ServiceItem(
        id="mofa-translations",
        description=description,
        amount=costs.mofa_translations,
        explanation=explanation,
    )


def _ifza_additional_activities(offer: OfferData, costs: InitialSetupCosts, authority) -> ServiceItem:
    count = costs.additional_activities
    return ServiceItem(
        id="additional-activities",
        description=(
            f"IFZA additional business activities cost "
            f"({count} additional {pluralize(count, 'activity', 'activities')})"
        ),
        amount=costs.additional_activities_cost,
        explanation=(
            "IFZA charges AED 1,000 for each additional business activity beyond the first "
            "3 activities included in the base license fee."
        ),
        title="IFZA additional business activities cost",
    )


IFZA_SETUP_RULES = (
    ServiceRule("ifza-license-fee", always, _ifza_license),
    ServiceRule(
        "ifza-license-discount",
        lambda offer, costs, authority: costs.license_discount_pct > 0,
        _ifza_license_discount,
    ),
    ServiceRule("gdrfa-registration", always, _gdrfa_registration),
    ServiceRule(
        "cross-border-license",
        always,
        lambda offer, costs, authority: ServiceItem(
            id="cross-border-license",
            description=f"IFZA cross border license cost{_multi_year_suffix(offer)}",
            amount=costs.cross_border_license,
            explanation="Additional cost required for conducting both professional and commercial activities.",
        ),
    ),
    ServiceRule("office-rent", always, _ifza_office_rent),
    ServiceRule(
        "third-party-approval",
        always,
        lambda offer, costs, authority: ServiceItem(
            id="third-party-approval",
            description=f"Third-party approval cost (NOC){_multi_year_suffix(offer)}",
            amount=costs.third_party_approval,
            explanation=_NOC_EXPLANATION,
        ),
    ),
    ServiceRule("mofa-translations", always, _ifza_mofa),
    ServiceRule("additional-activities", always, _ifza_additional_activities),
    ServiceRule("tme-services-fee", always, _tme_services_fee),
    ServiceRule("price-reduction", always, _price_reduction),
)

_SETUP_RULES = {
    "ifza": IFZA_SETUP_RULES,
    "det": DET_SETUP_RULES,
}


def generate_setup_services(
    offer: OfferData, costs: InitialSetupCosts, authority: AuthorityConfig
) -> List[ServiceItem]:
    """Ordered setup line items; empty for authorities without a setup schedule."""
    rules = _SETUP_RULES.get(authority.id)
    if rules is None:
        return []
    if authority.id == "ifza" and offer.ifza_license is None:
        return []
    items = run_pipeline(rules, offer, costs, authority)
    logger.debug(f"{authority.display_name} setup: {len(items)} items")
    return items


# ---------------------------------------------------------------------------
# Deposits
# ---------------------------------------------------------------------------

def generate_deposit_explanations(
    offer: OfferData, costs: InitialSetupCosts, authority: AuthorityConfig
) -> List[Explanation]:
    """Deposits are listed outside the numbered table, each with a short note."""
    deposits: List[Explanation] = []

    if authority.id == "ifza" and costs.landlord_deposit > 0:
        deposits.append(Explanation(
            id="ifza-deposit",
            title="Deposit with landlord",
            explanation="A refundable security deposit required by the landlord for the office rent.",
        ))

    if authority.id == "det":
        if costs.landlord_deposit > 0:
            deposits.append(Explanation(
                id="det-landlord-deposit",
                title="Landlord deposit (5% of rent)",
                explanation="A refundable security deposit equivalent to 5% of the annual rent amount.",
            ))
        if costs.dewa_deposit > 0:
            deposits.append(Explanation(
                id="det-dewa-deposit",
                title="DEWA deposit",
                explanation="Refundable utility connection deposit required by Dubai Electricity and Water Authority.",
            ))

    return deposits
