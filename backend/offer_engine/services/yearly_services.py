"""Yearly running cost line items (what the company pays after the first year)."""
from __future__ import annotations

from typing import Dict, List

from offer_engine.models.line_items import ServiceItem
from offer_engine.models.offer_models import OfferData
from offer_engine.services.authority_registry import AuthorityConfig
from offer_engine.services.cost_calculator import YearlyCosts
from offer_engine.services.service_pipeline import ServiceRule, always, run_pipeline

_DET_RENT_DESCRIPTIONS: Dict[str, str] = {
    "office": "Office rent (differs on location & availability)",
    "warehouse": "Warehouse rent (differs on location & availability)",
    "business-center": "Business Center arrangement cost",
}


def _det_rent(offer: OfferData, costs: YearlyCosts, authority) -> ServiceItem:
    rent_type = offer.det_license.rent_type if offer.det_license else None
    if rent_type == "business-center":
        explanation = "Annual business center service cost for your business center arrangement."
    else:
        explanation = f"Annual rental cost for your {rent_type}."
    return ServiceItem(
        id="det-office-rent",
        description=_DET_RENT_DESCRIPTIONS.get(rent_type, "Office Rent"),
        amount=costs.office_rent,
        explanation=explanation,
    )


IFZA_YEARLY_RULES = (
    ServiceRule(
        "ifza-license-renewal",
        always,
        lambda offer, costs, authority: ServiceItem(
            id="ifza-license-renewal",
            description="IFZA License Renewal Fee",
            amount=costs.license_renewal + costs.visa_quota_renewal,
            explanation=(
                f"Annual renewal cost for your business license issued by {authority.name}. "
                "This includes the base license fee and visa quota renewal costs."
            ),
        ),
    ),
    ServiceRule(
        "immigration-renewal",
        always,
        lambda offer, costs, authority: ServiceItem(
            id="immigration-renewal",
            description="GDRFA (Immigration Establishment Card) Renewal Fee",
            amount=costs.immigration_renewal,
            explanation="Mandatory Renewal Fee.",
        ),
    ),
    ServiceRule(
        "cross-border-renewal",
        always,
        lambda offer, costs, authority: ServiceItem(
            id="cross-border-renewal",
            description="IFZA Cross Border Renewal Fee",
            amount=costs.cross_border_renewal,
            explanation=(
                "Annual renewal fee required for conducting both professional and commercial "
                "activities across UAE borders."
            ),
        ),
    ),
    ServiceRule(
        "third-party-approval",
        always,
        lambda offer, costs, authority: ServiceItem(
            id="third-party-approval",
            description="Third-party Approval (NOC) Renewal Fee",
            amount=costs.third_party_approval,
            explanation=(
                "Annual renewal fee for third-party approvals or No Objection Certificates (NOC) "
                "required for specific business activities."
            ),
        ),
    ),
    ServiceRule(
        "office-rent",
        always,
        lambda offer, costs, authority: ServiceItem(
            id="office-rent",
            description="IFZA Office Rent",
            amount=costs.office_rent,
            explanation=(
                "Annual office rental cost. The amount varies depending on location, size, "
                "and availability of suitable office spaces."
            ),
        ),
    ),
    ServiceRule(
        "tme-yearly-fee",
        always,
        lambda offer, costs, authority: ServiceItem(
            id="tme-yearly-fee",
            description="TME Services Professional Yearly Renewal Fee",
            amount=costs.tme_yearly_fee,
            explanation=(
                "Our professional service fee for managing annual license renewals, government "
                "liaison, and ongoing compliance support."
            ),
        ),
    ),
)

DET_YEARLY_RULES = (
    ServiceRule(
        "det-license-renewal",
        always,
        lambda offer, costs, authority: ServiceItem(
            id="det-license-renewal",
            description="DET License Fee (Annual Renewal)",
            amount=costs.license_renewal,
            explanation=(
                "Annual renewal fee for your business license with the Department of Economy "
                "and Tourism-Dubai (DET)."
            ),
        ),
    ),
    ServiceRule(
        "det-immigration-renewal",
        always,
        lambda offer, costs, authority: ServiceItem(
            id="det-immigration-renewal",
            description="GDRFA (Immigration) renewal fee Establishment Card for visa",
            amount=costs.immigration_renewal,
            explanation=(
                "Annual renewal fee for the immigration establishment card required for visa "
                "processing and employee sponsorship with DET."
            ),
        ),
    ),
    ServiceRule(
        "det-office-rent",
        lambda offer, costs, authority: bool(offer.det_license and offer.det_license.rent_type),
        _det_rent,
    ),
    ServiceRule(
        "det-third-party-approval",
        always,
        lambda offer, costs, authority: ServiceItem(
            id="det-third-party-approval",
            description="Activities Required Third-party Approval",
            amount=costs.third_party_approval,
            explanation=(
                "Annual renewal fee for third-party approvals required for specific business "
                "activities under DET jurisdiction."
            ),
        ),
    ),
    ServiceRule(
        "det-tme-yearly-fee",
        always,
        lambda offer, costs, authority: ServiceItem(
            id="det-tme-yearly-fee",
            description="TME Yearly Service Fee",
            amount=costs.tme_yearly_fee,
            explanation=(
                "Our professional service fee for managing annual license renewals, government "
                "liaison, and ongoing compliance support with DET."
            ),
        ),
    ),
)

_YEARLY_RULES = {
    "ifza": IFZA_YEARLY_RULES,
    "det": DET_YEARLY_RULES,
}


def generate_yearly_services(offer: OfferData, costs: YearlyCosts, authority: AuthorityConfig) -> List[ServiceItem]:
    rules = _YEARLY_RULES.get(authority.id)
    if rules is None:
        return []
    return run_pipeline(rules, offer, costs, authority)
