"""
GoldenVisaEngine: line items for 10-year golden visa offers.

Covers:
  - Primary visa authority fees (property investment, time deposit, skilled employee)
  - TME services breakdown
  - Spouse and children dependent breakdowns (detailed or legacy fee structure)
  - Per-child breakdowns for the dependent pages
  - Display names and document titles per visa route
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from offer_engine.models.golden_visa_models import (
    DEFAULT_CHILD_TME_FEE,
    DEFAULT_SPOUSE_TME_FEE,
    GoldenVisaData,
    PropertyAuthorityFees,
    SkilledEmployeeAuthorityFees,
)
from offer_engine.models.line_items import Explanation, ServiceContext, ServiceItem
from offer_engine.services.explanations import item_explanations
from offer_engine.services.service_pipeline import ServiceRule, always, run_pipeline

logger = logging.getLogger("tme-offers.golden-visa")


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------
_VISA_TYPE_NAMES = {
    "property-investment": "Property Investment",
    "time-deposit": "Time Deposit",
    "skilled-employee": "Skilled Employee",
}


def visa_type_display_name(visa_type: str) -> str:
    return _VISA_TYPE_NAMES.get(visa_type, "Golden Visa")


def visa_type_title(visa_type: str) -> str:
    """Headline used on the offer cover page."""
    name = _VISA_TYPE_NAMES.get(visa_type)
    if name is None:
        return "Golden Visa Application"
    return f"Offer for 10 year {name.lower()} visa (golden)"


def authority_display_name(visa_type: str) -> str:
    name = _VISA_TYPE_NAMES.get(visa_type)
    return f"{name} Golden Visa" if name else "Golden Visa Application"


def has_dependent_visas(data: GoldenVisaData) -> bool:
    return data.dependents.has_spouse or data.dependents.number_of_children > 0


# ---------------------------------------------------------------------------
# Primary visa
# ---------------------------------------------------------------------------
_STANDARD_EXPLANATION = "For mandatory UAE medical test, Emirates ID, and immigration residency processing."
_THIRD_PARTY_EXPLANATION = "Administrative costs charged by various departments."
_TME_FEE_EXPLANATION = (
    "TME Services Professional Fee: Covers the complete management of the visa and Emirates ID "
    "application process, including document preparation, liaison with the relevant authorities, and "
    "personal accompaniment by an experienced TME Services team member to all required appointments."
)

PrimaryFees = Union[PropertyAuthorityFees, SkilledEmployeeAuthorityFees]


def _primary_fee_block(data: GoldenVisaData) -> Optional[PrimaryFees]:
    if data.visa_type == "property-investment":
        return data.property_authority_fees
    if data.visa_type in ("time-deposit", "skilled-employee"):
        return data.skilled_employee_authority_fees
    return None


PRIMARY_AUTHORITY_RULES = (
    ServiceRule(
        "dld-approval",
        lambda data, fees, _: isinstance(fees, PropertyAuthorityFees),
        lambda data, fees, _: ServiceItem(
            id="dld-approval",
            description="DLD (Dubai Land Department) approval cost",
            amount=fees.dld_approval_fee,
            explanation="Approval cost required for property investment Golden Visa applications.",
            context=ServiceContext.PRIMARY,
        ),
    ),
    ServiceRule(
        "standard-authority-costs",
        always,
        lambda data, fees, _: ServiceItem(
            id="standard-authority-costs",
            description="Standard authority costs",
            amount=fees.effective_standard_costs,
            explanation=_STANDARD_EXPLANATION,
            context=ServiceContext.PRIMARY,
        ),
    ),
    ServiceRule(
        "visa-cancellation",
        lambda data, fees, _: fees.has_cancellation,
        lambda data, fees, _: ServiceItem(
            id="visa-cancellation",
            description="Visa cancellation cost",
            amount=fees.visa_cancellation_fee,
            explanation="For canceling existing visa status before applying for Golden Visa.",
            context=ServiceContext.PRIMARY,
        ),
    ),
    ServiceRule(
        "third-party-costs",
        always,
        lambda data, fees, _: ServiceItem(
            id="third-party-costs",
            description="Third party costs",
            amount=fees.third_party_costs,
            explanation=_THIRD_PARTY_EXPLANATION,
            context=ServiceContext.PRIMARY,
        ),
    ),
    ServiceRule(
        "tme-professional-fee",
        always,
        lambda data, fees, _: ServiceItem(
            id="tme-professional-fee",
            description="TME Services professional fee",
            amount=data.tme_services_fee,
            explanation=_TME_FEE_EXPLANATION,
            context=ServiceContext.PRIMARY,
        ),
    ),
)


def generate_authority_fees(data: GoldenVisaData) -> List[ServiceItem]:
    """Primary visa authority fees; empty when only dependents are applying."""
    if not data.primary_visa_required:
        return []
    fees = _primary_fee_block(data)
    if fees is None:
        return run_pipeline((
            ServiceRule(
                "government-fees",
                always,
                lambda data, fees, _: ServiceItem(
                    id="government-fees",
                    description="Government Costs (Medical Test + Emirates ID + Processing)",
                    amount=data.government_fee,
                    explanation=(
                        "Government costs including medical examination, Emirates ID processing, "
                        "and visa application charges."
                    ),
                    context=ServiceContext.PRIMARY,
                ),
            ),
        ), data, None, None)
    return run_pipeline(PRIMARY_AUTHORITY_RULES, data, fees, None)


def generate_tme_services(data: GoldenVisaData) -> List[ServiceItem]:
    if not data.primary_visa_required or data.tme_services_fee <= 0:
        return []
    return [ServiceItem(
        id="tme-professional-fee",
        description="TME Services Professional Fee",
        amount=data.tme_services_fee,
        explanation=(
            "For managing the Golden Visa application process, including document preparation, "
            "government liaison, processing coordination, and our administrative costs."
        ),
        context=ServiceContext.PRIMARY,
    )]


def golden_visa_explanations(data: GoldenVisaData) -> List[Explanation]:
    return item_explanations(generate_authority_fees(data))


# ---------------------------------------------------------------------------
# Dependents
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DependentCosts:
    """Per-person dependent fees resolved from the detailed or legacy fee structure."""
    id_prefix: str
    context: ServiceContext
    count: int
    detailed: bool
    include_file_opening: bool = False
    file_opening: float = 0.0
    standard: float = 0.0
    cancellation: float = 0.0
    third_party: float = 0.0
    government: float = 0.0
    tme: float = 0.0


def _cancellation_fee(global_enabled: bool, global_fee: float, own_enabled: bool, own_fee: float) -> float:
    """The dependent's own cancellation fee wins over the shared one."""
    if own_enabled and own_fee > 0:
        return own_fee
    if global_enabled and global_fee > 0:
        return global_fee
    return 0.0


def spouse_costs(data: GoldenVisaData) -> Optional[DependentCosts]:
    spouse = data.dependents.spouse
    if not data.dependents.has_spouse:
        return None
    fees = data.dependent_authority_fees
    if fees is None:
        return DependentCosts(
            id_prefix="spouse-",
            context=ServiceContext.SPOUSE,
            count=1,
            detailed=False,
            government=spouse.government_fee,
            cancellation=_cancellation_fee(False, 0.0, spouse.visa_cancellation, spouse.visa_cancellation_fee),
            tme=spouse.tme_services_fee or DEFAULT_SPOUSE_TME_FEE,
        )
    return DependentCosts(
        id_prefix="spouse-",
        context=ServiceContext.SPOUSE,
        count=1,
        detailed=True,
        include_file_opening=True,
        file_opening=fees.dependent_file_opening,
        standard=fees.spouse_standard_costs,
        cancellation=_cancellation_fee(
            fees.visa_cancellation, fees.visa_cancellation_fee,
            spouse.visa_cancellation, spouse.visa_cancellation_fee,
        ),
        third_party=fees.third_party_costs_spouse,
        tme=spouse.tme_services_fee or DEFAULT_SPOUSE_TME_FEE,
    )


def children_costs(data: GoldenVisaData, count: Optional[int] = None, id_prefix: str = "children-",
                   include_file_opening: Optional[bool] = None) -> Optional[DependentCosts]:
    children = data.dependents.children
    total_children = data.dependents.number_of_children
    if total_children <= 0:
        return None
    count = total_children if count is None else count
    context = ServiceContext.CHILD if count == 1 else ServiceContext.CHILDREN
    fees = data.dependent_authority_fees
    if include_file_opening is None:
        include_file_opening = not data.dependents.has_spouse

    if fees is None:
        return DependentCosts(
            id_prefix=id_prefix,
            context=context,
            count=count,
            detailed=False,
            government=children.government_fee,
            cancellation=_cancellation_fee(False, 0.0, children.visa_cancellation, children.visa_cancellation_fee),
            tme=children.tme_services_fee or DEFAULT_CHILD_TME_FEE,
        )
    return DependentCosts(
        id_prefix=id_prefix,
        context=context,
        count=count,
        detailed=True,
        include_file_opening=include_file_opening,
        file_opening=fees.dependent_file_opening,
        standard=fees.child_standard_costs,
        cancellation=_cancellation_fee(
            fees.visa_cancellation, fees.visa_cancellation_fee,
            children.visa_cancellation, children.visa_cancellation_fee,
        ),
        third_party=fees.third_party_costs_child,
        tme=children.tme_services_fee or DEFAULT_CHILD_TME_FEE,
    )


def _dependent_item(costs: DependentCosts, suffix: str, key: str, description: str,
                    amount: float, template: Optional[str]) -> ServiceItem:
    return ServiceItem(
        id=f"{costs.id_prefix}{suffix}",
        description=description,
        amount=amount,
        explanation=template.format(subject=costs.context.subject) if template else None,
        service_key=key,
        context=costs.context,
        explanation_template=template,
    )


DEPENDENT_RULES = (
    ServiceRule(
        "file-opening",
        lambda data, costs, _: costs.detailed and costs.include_file_opening,
        lambda data, costs, _: ServiceItem(
            id=f"{costs.id_prefix}file-opening",
            description="Dependent file opening cost",
            amount=costs.file_opening,
            explanation="For opening dependent visa file (applies to first dependent only).",
            service_key="file-opening",
            context=costs.context,
        ),
    ),
    ServiceRule(
        "standard-authority-costs",
        lambda data, costs, _: costs.detailed,
        lambda data, costs, _: _dependent_item(
            costs, "standard-authority-costs", "standard-authority-costs", "Standard authority costs",
            costs.standard * costs.count,
            "For mandatory UAE medical test, Emirates ID, and immigration residency processing for {subject} visa.",
        ),
    ),
    ServiceRule(
        "government-fees",
        lambda data, costs, _: not costs.detailed,
        lambda data, costs, _: _dependent_item(
            costs, "government-fees", "government-fees", "Government Costs (Medical + Emirates ID + Processing)",
            costs.government * costs.count,
            "Government costs for {subject} visa including medical examination, Emirates ID processing, "
            "and visa application charges.",
        ),
    ),
    ServiceRule(
        "visa-cancellation",
        always,
        lambda data, costs, _: _dependent_item(
            costs, "visa-cancellation", "visa-cancellation", "Visa cancellation cost",
            costs.cancellation * costs.count,
            "For canceling existing visa status before applying for {subject} dependent visa.",
        ),
    ),
    ServiceRule(
        "third-party-costs",
        lambda data, costs, _: costs.detailed,
        lambda data, costs, _: _dependent_item(
            costs, "third-party-costs", "third-party-costs", "Third party costs",
            costs.third_party * costs.count,
            "Administrative costs charged by various departments for {subject} visa.",
        ),
    ),
    ServiceRule(
        "tme-services",
        always,
        lambda data, costs, _: _dependent_item(
            costs, "tme-services", "tme-services", "TME Services professional fee",
            costs.tme * costs.count,
            "TME Services Professional Fee: Covers the complete management of the {subject} visa and "
            "Emirates ID application process, including document preparation, liaison with the relevant "
            "authorities, and personal accompaniment by an experienced TME Services team member to all "
            "required appointments.",
        ),
    ),
)


def generate_dependent_services(data: GoldenVisaData, costs: Optional[DependentCosts]) -> List[ServiceItem]:
    if costs is None or costs.count <= 0:
        return []
    return run_pipeline(DEPENDENT_RULES, data, costs, None)


def generate_spouse_visa(data: GoldenVisaData) -> List[ServiceItem]:
    return generate_dependent_services(data, spouse_costs(data))


def generate_children_visa(data: GoldenVisaData) -> List[ServiceItem]:
    return generate_dependent_services(data, children_costs(data))


def generate_individual_child_visas(data: GoldenVisaData) -> List[List[ServiceItem]]:
    """
    One breakdown per child. Without a spouse, the file opening fee is
    carried by child 1.
    """
    breakdowns: List[List[ServiceItem]] = []
    for index in range(data.dependents.number_of_children):
        costs = children_costs(
            data,
            count=1,
            id_prefix=f"child-{index + 1}-",
            include_file_opening=index == 0 and not data.dependents.has_spouse,
        )
        breakdowns.append(generate_dependent_services(data, costs))
    logger.debug(f"Golden visa: {len(breakdowns)} child breakdowns")
    return breakdowns
