"""
Visa line items: one parameterized generator for company, spouse and child
visas (and the per-holder breakdown tables).

Per-domain differences live in VisaProfile data: which steps apply and in
what order, the id prefix, whether labels carry a "(N visas)" count, and the
label/explanation wording. Spouse and child items carry an explanation
template with a {subject} slot so the deduplicator can merge them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from offer_engine.models.line_items import Explanation, ServiceContext, ServiceItem
from offer_engine.services.authority_registry import AuthorityConfig
from offer_engine.services.cost_calculator import IndividualVisaCost, InsuranceTier, VisaGroupCosts
from offer_engine.services.explanations import item_explanations
from offer_engine.services.formatting import pluralize
from offer_engine.services.service_pipeline import ServiceRule, always, run_pipeline

logger = logging.getLogger("tme-offers.visas")

# Step keys double as the structured service key used for deduplication.
STANDARD = "standard-authority-costs"
REDUCED = "reduced-authority-costs"
INVESTOR = "investor-visa"
INSURANCE = "health-insurance"
EMPLOYEE_INSURANCE = "employee-insurance"
STATUS_CHANGE = "visa-status-change"
VIP = "vip-stamping"
TME = "tme-services-professional-fee"

_STANDARD_EXPLANATION = "For mandatory UAE medical test, Emirates ID, and immigration residency processing."
_TME_EXPLANATION = (
    "Covers the complete management of the visa and Emirates ID application process, including "
    "document preparation, liaison with the relevant authorities, and personal accompaniment by an "
    "experienced TME Services team member to all required appointments."
)


@dataclass(frozen=True)
class StepText:
    id: str
    label: str
    explanation: str


@dataclass(frozen=True)
class VisaProfile:
    name: str
    context: ServiceContext
    steps: Tuple[str, ...]
    texts: Dict[str, StepText]
    id_prefix: str = ""
    counted_labels: bool = False
    insurance_id_per_tier: bool = True
    dependent: bool = False


_COMPANY_TEXTS: Dict[str, StepText] = {
    STANDARD: StepText("standard-government-fees", "Standard authority costs", _STANDARD_EXPLANATION),
    REDUCED: StepText(
        "reduced-government-fees",
        "Reduced authority costs",
        "Reduced rate available under the IFZA promotion. This offer is limited to one visa only and "
        "may change depending on timing. A prompt decision increases your chances of securing this rate.",
    ),
    INVESTOR: StepText(
        "investor-visa-fees", "{authority} investor visa cost", "Charged by IFZA for issuing an investor visa."
    ),
    EMPLOYEE_INSURANCE: StepText(
        "employee-insurance",
        "Employee insurance per employee per visa",
        "Mandatory insurance coverage for employees as per UAE labor law requirements.",
    ),
    STATUS_CHANGE: StepText(
        "visa-status-change",
        "Authority cost for visa status change",
        "For changing visa status from tourist/visit visa to employment residence visa.",
    ),
    VIP: StepText(
        "vip-stamping-service",
        "VIP authority stamping cost - express visa stamp",
        "For faster visa stamping and processing with priority handling at immigration counters.",
    ),
    TME: StepText("tme-services-professional-fee", "TME Services professional fee", _TME_EXPLANATION),
}

_DEPENDENT_TEXTS: Dict[str, StepText] = {
    STANDARD: StepText("standard-fees", "Standard authority costs", _STANDARD_EXPLANATION),
    STATUS_CHANGE: StepText(
        "status-change",
        "Visa status change authority costs",
        "For changing {subject} visa status from tourist/visit visa to residence visa.",
    ),
    VIP: StepText("vip-stamping", "VIP visa stamping service", "For faster {subject} visa stamping and processing."),
    TME: StepText("tme-services", "TME Services professional fee", _TME_EXPLANATION),
}

_INDIVIDUAL_TEXTS: Dict[str, StepText] = {
    **_COMPANY_TEXTS,
    INVESTOR: StepText(
        "investor-visa-fees",
        "{authority} investor/partner visa cost",
        "Charged by IFZA for issuing an investor visa.",
    ),
}

_DEPENDENT_STEPS = (STANDARD, STATUS_CHANGE, INSURANCE, VIP, TME)

COMPANY = VisaProfile(
    name="company",
    context=ServiceContext.COMPANY,
    steps=(STANDARD, REDUCED, INVESTOR, INSURANCE, EMPLOYEE_INSURANCE, STATUS_CHANGE, VIP, TME),
    texts=_COMPANY_TEXTS,
    counted_labels=True,
)

SPOUSE = VisaProfile(
    name="spouse",
    context=ServiceContext.SPOUSE,
    steps=_DEPENDENT_STEPS,
    texts=_DEPENDENT_TEXTS,
    id_prefix="spouse-visa-",
    insurance_id_per_tier=False,
    dependent=True,
)

CHILD = VisaProfile(
    name="child",
    context=ServiceContext.CHILD,
    steps=_DEPENDENT_STEPS,
    texts=_DEPENDENT_TEXTS,
    id_prefix="child-visa-",
    dependent=True,
)

# Per-holder breakdown tables list optional extras before the investor fee.
INDIVIDUAL_VISA = VisaProfile(
    name="individual-visa",
    context=ServiceContext.COMPANY,
    steps=(STANDARD, REDUCED, INSURANCE, STATUS_CHANGE, VIP, INVESTOR, EMPLOYEE_INSURANCE, TME),
    texts=_INDIVIDUAL_TEXTS,
)


# ---------------------------------------------------------------------------
# Step builders
# ---------------------------------------------------------------------------

def _label(profile: VisaProfile, label: str, count: int) -> str:
    if profile.counted_labels:
        return f"{label} ({count} {pluralize(count, 'visa')})"
    return label


def _render(template: str, profile: VisaProfile) -> str:
    return template.format(subject=profile.context.subject) if "{subject}" in template else template


def _simple_step(step: str, amount_of, count_of, is_reduction: bool = False):
    def build(profile: VisaProfile, costs: VisaGroupCosts, authority: AuthorityConfig) -> ServiceItem:
        text = profile.texts[step]
        label = text.label.replace("{authority}", authority.display_name or "IFZA")
        template = text.explanation if "{subject}" in text.explanation else None
        return ServiceItem(
            id=f"{profile.id_prefix}{text.id}",
            description=_label(profile, label, count_of(costs)),
            amount=amount_of(costs),
            is_reduction=is_reduction,
            explanation=_render(text.explanation, profile),
            title=label,
            service_key=step,
            context=profile.context,
            explanation_template=template,
        )
    return build


def _insurance_item(profile: VisaProfile, tier: InsuranceTier) -> ServiceItem:
    tier_name = tier.tier.lower()
    slug = "-".join(tier_name.split())
    label = f"Health insurance ({tier_name})"
    if profile.dependent:
        template = (
            f"Mandatory health insurance coverage providing {tier_name} level medical benefits "
            "for {subject} visa holders."
        )
        explanation = template.format(subject=profile.context.subject)
    else:
        template = None
        explanation = (
            f"Mandatory health insurance coverage providing {tier_name} level medical benefits for visa holders."
        )
    item_id = f"{profile.id_prefix}health-insurance"
    if profile.insurance_id_per_tier:
        item_id = f"{item_id}-{slug}"
    return ServiceItem(
        id=item_id,
        description=_label(profile, label, tier.count),
        amount=tier.total,
        explanation=explanation,
        title=label,
        service_key=f"{INSURANCE}-{slug}",
        context=profile.context,
        explanation_template=template,
    )


def _insurance_step(profile: VisaProfile, costs: VisaGroupCosts, authority: AuthorityConfig) -> List[ServiceItem]:
    return [_insurance_item(profile, tier) for tier in costs.insurance]


_STEP_BUILDERS = {
    STANDARD: _simple_step(STANDARD, lambda c: c.standard_fees, lambda c: c.visa_count),
    REDUCED: _simple_step(REDUCED, lambda c: c.reduction, lambda c: c.reduced_count, is_reduction=True),
    INVESTOR: _simple_step(INVESTOR, lambda c: c.investor_fees, lambda c: c.investor_count),
    INSURANCE: _insurance_step,
    EMPLOYEE_INSURANCE: _simple_step(
        EMPLOYEE_INSURANCE, lambda c: c.employee_insurance, lambda c: c.employment_count
    ),
    STATUS_CHANGE: _simple_step(STATUS_CHANGE, lambda c: c.status_change_fees, lambda c: c.status_change_count),
    VIP: _simple_step(VIP, lambda c: c.vip_fees, lambda c: c.vip_count),
    TME: _simple_step(TME, lambda c: c.tme_fees, lambda c: c.visa_count),
}


def profile_rules(profile: VisaProfile) -> Tuple[ServiceRule, ...]:
    """The ordered rule tuple a profile expands to."""
    return tuple(ServiceRule(step, always, _STEP_BUILDERS[step]) for step in profile.steps)


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------

def generate_visa_services(
    profile: VisaProfile, costs: VisaGroupCosts, authority: AuthorityConfig
) -> List[ServiceItem]:
    """Ordered visa line items for one visa group."""
    if costs.visa_count <= 0:
        return []
    items = run_pipeline(profile_rules(profile), profile, costs, authority)
    logger.debug(f"{profile.name} visas: {len(items)} items")
    return items


def generate_company_visa_services(costs: VisaGroupCosts, authority: AuthorityConfig) -> List[ServiceItem]:
    return generate_visa_services(COMPANY, costs, authority)


def generate_spouse_visa_services(costs: VisaGroupCosts, authority: AuthorityConfig) -> List[ServiceItem]:
    return generate_visa_services(SPOUSE, costs, authority)


def generate_child_visa_services(costs: VisaGroupCosts, authority: AuthorityConfig) -> List[ServiceItem]:
    return generate_visa_services(CHILD, costs, authority)


def individual_visa_group(visa: IndividualVisaCost) -> VisaGroupCosts:
    """A single holder expressed as a one-visa group."""
    insurance: Tuple[InsuranceTier, ...] = ()
    if visa.insurance_cost > 0:
        insurance = (InsuranceTier(tier=visa.insurance_tier, count=1, unit_cost=visa.insurance_cost),)
    return VisaGroupCosts(
        visa_count=1,
        standard_fees=visa.standard_fee,
        reduced_count=1 if visa.is_reduced else 0,
        reduction=visa.reduction,
        investor_count=1 if visa.investor_fee else 0,
        investor_fees=visa.investor_fee,
        employment_count=1 if visa.employee_insurance else 0,
        employee_insurance=visa.employee_insurance,
        insurance=insurance,
        status_change_count=1 if visa.status_change_fee else 0,
        status_change_fees=visa.status_change_fee,
        vip_count=1 if visa.vip_fee else 0,
        vip_fees=visa.vip_fee,
        tme_fees=visa.tme_fee,
    )


def generate_individual_visa_services(visa: IndividualVisaCost, authority: AuthorityConfig) -> List[ServiceItem]:
    return generate_visa_services(INDIVIDUAL_VISA, individual_visa_group(visa), authority)


def generate_individual_child_visa_services(
    child: IndividualVisaCost, authority: AuthorityConfig
) -> List[ServiceItem]:
    return generate_visa_services(CHILD, individual_visa_group(child), authority)


def visa_explanations(items: Sequence[ServiceItem]) -> List[Explanation]:
    """One explanation per company visa item, titled without the visa count."""
    return item_explanations(items)
