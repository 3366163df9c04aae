"""
QuoteBuilder: assembles a complete, presentation-ready quote per document
type from the generators, aggregator, pagination and filename helpers.

Covers:
  - Company setup offers (setup, visas, dependents, yearly, additional services)
  - Golden visa offers (primary authority fees, dependents, child breakdowns)
  - Company services proposals
  - Taxation letters
  - Page visibility rules
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from offer_engine.config import DET_AUTHORITY_NAME, IFZA_AUTHORITY_NAME, INDIVIDUAL_VISAS_PER_PAGE
from offer_engine.models.company_services_models import CompanyServicesData
from offer_engine.models.document_models import (
    CompanyServicesDocumentRequest,
    GoldenVisaDocumentRequest,
    OfferDocumentRequest,
    TaxationDocumentRequest,
)
from offer_engine.models.golden_visa_models import GoldenVisaData
from offer_engine.models.line_items import BreakdownTable, Explanation, PageGroup, ServiceItem, Totals
from offer_engine.models.offer_models import OfferData
from offer_engine.models.taxation_models import TaxationData
from offer_engine.services import company_services_engine as company_services
from offer_engine.services import golden_visa_engine as golden_visa
from offer_engine.services.additional_services import generate_additional_services, has_additional_services
from offer_engine.services.authority_registry import AuthorityConfig, get_authority_config_by_name
from offer_engine.services.cost_aggregator import aggregate, calculate_totals, deposit_total, make_table
from offer_engine.services.cost_calculator import CostCalculator
from offer_engine.services.explanations import deduplicate_explanations, item_explanations
from offer_engine.services.filenames import (
    cit_disclaimer_filename,
    company_services_filename,
    family_visa_filename,
    golden_visa_filename,
    offer_filename,
    shareholder_declaration_filename,
)
from offer_engine.services.pagination import (
    paginate_dependent_tables,
    paginate_family_visa_tables,
    paginate_tables,
)
from offer_engine.services.service_pipeline import number_items
from offer_engine.services.setup_services import generate_deposit_explanations, generate_setup_services
from offer_engine.services.taxation_engine import (
    CitDisclaimerLetter,
    ShareholderDeclarationLetter,
    build_cit_disclaimer,
    build_shareholder_declaration,
)
from offer_engine.services.visa_services import (
    generate_child_visa_services,
    generate_company_visa_services,
    generate_individual_child_visa_services,
    generate_individual_visa_services,
    generate_spouse_visa_services,
    visa_explanations,
)
from offer_engine.services.yearly_services import generate_yearly_services

logger = logging.getLogger("tme-offers.quotes")


class InvalidDocumentDataError(ValueError):
    """A document was requested without its top-level configuration object."""

    def __init__(self, document: str, missing: str):
        self.document = document
        self.missing = missing
        super().__init__(f"Invalid data provided to {document} generator: {missing} is missing")


# ---------------------------------------------------------------------------
# Visibility
# ---------------------------------------------------------------------------

def should_show_initial_setup(authority_name: Optional[str]) -> bool:
    """Setup and yearly running pages exist only for authorities with a fee schedule."""
    return authority_name in (IFZA_AUTHORITY_NAME, DET_AUTHORITY_NAME)


def should_show_visa_costs(offer: OfferData) -> bool:
    visas = offer.visa_costs
    return (
        should_show_initial_setup(offer.authority_information.responsible_authority)
        and visas is not None
        and visas.number_of_visas > 0
    )


def should_show_family_visas(offer: OfferData) -> bool:
    visas = offer.visa_costs
    return visas is not None and (visas.spouse_visa or visas.child_visa)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OfferQuote:
    authority_id: str
    filename: str
    family_visa_filename: Optional[str]
    exchange_rate: float
    secondary_currency: str

    show_initial_setup: bool
    show_visa_costs: bool
    show_yearly_running: bool
    show_additional_services: bool
    show_family_visas: bool

    setup_items: List[ServiceItem] = field(default_factory=list)
    visa_items: List[ServiceItem] = field(default_factory=list)
    spouse_items: List[ServiceItem] = field(default_factory=list)
    child_items: List[ServiceItem] = field(default_factory=list)
    yearly_items: List[ServiceItem] = field(default_factory=list)
    additional_items: List[ServiceItem] = field(default_factory=list)

    setup_table: Optional[BreakdownTable] = None
    visa_table: Optional[BreakdownTable] = None
    yearly_table: Optional[BreakdownTable] = None
    additional_table: Optional[BreakdownTable] = None

    totals: Totals = field(default_factory=Totals)

    setup_explanations: List[Explanation] = field(default_factory=list)
    visa_explanations: List[Explanation] = field(default_factory=list)
    yearly_explanations: List[Explanation] = field(default_factory=list)
    additional_explanations: List[Explanation] = field(default_factory=list)
    deposit_explanations: List[Explanation] = field(default_factory=list)

    individual_visa_pages: List[PageGroup] = field(default_factory=list)
    individual_child_visa_pages: List[PageGroup] = field(default_factory=list)
    family_visa_pages: List[PageGroup] = field(default_factory=list)


@dataclass(frozen=True)
class GoldenVisaQuote:
    filename: str
    title: str
    visa_type_name: str
    authority_name: str
    exchange_rate: float
    secondary_currency: str

    show_primary_visa: bool
    show_dependent_visas: bool

    authority_fee_items: List[ServiceItem] = field(default_factory=list)
    tme_items: List[ServiceItem] = field(default_factory=list)
    spouse_items: List[ServiceItem] = field(default_factory=list)
    children_items: List[ServiceItem] = field(default_factory=list)

    primary_table: Optional[BreakdownTable] = None
    dependents_table: Optional[BreakdownTable] = None

    primary_total: float = 0.0
    dependents_total: float = 0.0
    totals: Totals = field(default_factory=Totals)

    explanations: List[Explanation] = field(default_factory=list)
    dependent_pages: List[PageGroup] = field(default_factory=list)


@dataclass(frozen=True)
class CompanyServicesQuote:
    filename: str
    exchange_rate: float
    secondary_currency: str
    enabled_services: List[str] = field(default_factory=list)
    pricing_tables: List[company_services.PricingTierTable] = field(default_factory=list)
    tax_consulting_table: Optional[BreakdownTable] = None
    accounting_table: Optional[BreakdownTable] = None
    compliance_table: Optional[BreakdownTable] = None
    back_office_team: Optional[company_services.TeamConfiguration] = None

    @property
    def first_service(self) -> Optional[str]:
        return self.enabled_services[0] if self.enabled_services else None

    @property
    def last_service(self) -> Optional[str]:
        return self.enabled_services[-1] if self.enabled_services else None


@dataclass(frozen=True)
class TaxationLetters:
    cit_disclaimer_filename: str
    shareholder_declaration_filename: str
    cit_disclaimer: Optional[CitDisclaimerLetter] = None
    shareholder_declaration: Optional[ShareholderDeclarationLetter] = None


# ---------------------------------------------------------------------------
# Offer
# ---------------------------------------------------------------------------

def _table_or_none(key: str, title: str, items: List[ServiceItem], exchange_rate: float) -> Optional[BreakdownTable]:
    return make_table(key, title, items, exchange_rate) if items else None


def _individual_visa_pages(offer: OfferData, calculator: CostCalculator, authority: AuthorityConfig) -> List[PageGroup]:
    tables: List[BreakdownTable] = []
    items: List[ServiceItem] = []
    for visa in calculator.individual_visa_costs(offer):
        visa_items = number_items(generate_individual_visa_services(visa, authority))
        items.extend(visa_items)
        tables.append(make_table(f"visa-{visa.number}", f"Visa {visa.number} Breakdown", visa_items, offer.exchange_rate))
    return paginate_tables(tables, INDIVIDUAL_VISAS_PER_PAGE, deduplicate_explanations(items))


def _child_tables(offer: OfferData, calculator: CostCalculator, authority: AuthorityConfig):
    tables: List[BreakdownTable] = []
    items: List[ServiceItem] = []
    for child in calculator.individual_child_visa_costs(offer):
        child_items = number_items(generate_individual_child_visa_services(child, authority))
        items.extend(child_items)
        tables.append(make_table(
            f"child-visa-{child.number}", f"Child Visa {child.number} Breakdown", child_items, offer.exchange_rate
        ))
    return tables, items


def build_offer_quote(offer: Optional[OfferData]) -> OfferQuote:
    if offer is None:
        raise InvalidDocumentDataError("Offer", "offer data")

    start = time.time()
    authority_name = offer.authority_information.responsible_authority
    authority = get_authority_config_by_name(authority_name)
    calculator = CostCalculator(authority)
    costs = calculator.calculate(offer)
    rate = offer.exchange_rate

    show_setup = should_show_initial_setup(authority_name)
    show_visas = should_show_visa_costs(offer)
    show_family = should_show_family_visas(offer)

    setup_items = number_items(generate_setup_services(offer, costs.setup, authority)) if show_setup else []
    visa_items = number_items(generate_company_visa_services(costs.company_visas, authority)) if show_visas else []
    spouse_items = number_items(generate_spouse_visa_services(costs.spouse_visa, authority))
    child_items = number_items(generate_child_visa_services(costs.child_visas, authority))
    yearly_items = number_items(generate_yearly_services(offer, costs.yearly, authority)) if show_setup else []
    additional_items = number_items(generate_additional_services(offer.additional_services))

    individual_child_tables, individual_child_items = _child_tables(offer, calculator, authority)

    family_pages: List[PageGroup] = []
    if show_family:
        spouse_table = _table_or_none("spouse-visa", "Spouse Visa Breakdown", spouse_items, rate)
        child_tables = individual_child_tables or [
            t for t in [_table_or_none("child-visa", "Child Visa Breakdown", child_items, rate)] if t
        ]
        family_pages = paginate_family_visa_tables(
            spouse_table,
            child_tables,
            deduplicate_explanations(spouse_items + (individual_child_items or child_items)),
        )

    quote = OfferQuote(
        authority_id=authority.id,
        filename=offer_filename(offer),
        family_visa_filename=family_visa_filename(offer) if show_family else None,
        exchange_rate=rate,
        secondary_currency=offer.client_details.secondary_currency,
        show_initial_setup=show_setup,
        show_visa_costs=show_visas,
        show_yearly_running=show_setup,
        show_additional_services=has_additional_services(offer.additional_services),
        show_family_visas=show_family,
        setup_items=setup_items,
        visa_items=visa_items,
        spouse_items=spouse_items,
        child_items=child_items,
        yearly_items=yearly_items,
        additional_items=additional_items,
        setup_table=_table_or_none("initial-setup", "Initial Setup Cost", setup_items, rate),
        visa_table=_table_or_none("visa-costs", "Visa Cost", visa_items, rate),
        yearly_table=_table_or_none("yearly-running", "Yearly Running Cost", yearly_items, rate),
        additional_table=_table_or_none("additional-services", "Additional Services", additional_items, rate),
        totals=calculate_totals(setup_items, visa_items, yearly_items, rate, deposit_total(costs.setup)),
        setup_explanations=item_explanations(setup_items),
        visa_explanations=visa_explanations(visa_items),
        yearly_explanations=item_explanations(yearly_items),
        additional_explanations=item_explanations(additional_items),
        deposit_explanations=generate_deposit_explanations(offer, costs.setup, authority) if show_setup else [],
        individual_visa_pages=_individual_visa_pages(offer, calculator, authority) if show_visas else [],
        individual_child_visa_pages=paginate_tables(
            individual_child_tables, INDIVIDUAL_VISAS_PER_PAGE, deduplicate_explanations(individual_child_items)
        ),
        family_visa_pages=family_pages,
    )
    logger.info(
        f"Offer quote built: {authority.display_name or authority_name} grand total {quote.totals.grand_total}",
        extra={"document_type": "offer", "quote_id": quote.filename,
               "duration_ms": round((time.time() - start) * 1000, 2)},
    )
    return quote


# ---------------------------------------------------------------------------
# Golden visa
# ---------------------------------------------------------------------------

def build_golden_visa_quote(data: Optional[GoldenVisaData]) -> GoldenVisaQuote:
    if data is None:
        raise InvalidDocumentDataError("Golden Visa", "golden visa data")

    start = time.time()
    rate = data.exchange_rate

    authority_fees = number_items(golden_visa.generate_authority_fees(data))
    tme_items = number_items(golden_visa.generate_tme_services(data))
    spouse_items = number_items(golden_visa.generate_spouse_visa(data))
    children_items = number_items(golden_visa.generate_children_visa(data))
    child_breakdowns = [number_items(items) for items in golden_visa.generate_individual_child_visas(data)]

    # The TME fee is already an authority fee line on the detailed routes
    primary_items = list(authority_fees)
    if not any(item.id == "tme-professional-fee" for item in authority_fees):
        primary_items += tme_items
    dependent_items = spouse_items + children_items

    dependent_tables: List[BreakdownTable] = []
    if spouse_items:
        dependent_tables.append(make_table("spouse-visa", "Spouse Visa", spouse_items, rate))
    for index, items in enumerate(child_breakdowns):
        dependent_tables.append(make_table(f"child-{index + 1}-visa", f"Child {index + 1} Visa", items, rate))

    per_child_items = [item for items in child_breakdowns for item in items]
    has_cancellation = any(item.service_key == "visa-cancellation" for item in spouse_items + per_child_items)
    dependent_pages = paginate_dependent_tables(
        dependent_tables,
        has_spouse=data.dependents.has_spouse,
        number_of_children=data.dependents.number_of_children,
        has_visa_cancellation=has_cancellation,
        explanations=deduplicate_explanations(spouse_items + per_child_items),
    )

    quote = GoldenVisaQuote(
        filename=golden_visa_filename(data),
        title=golden_visa.visa_type_title(data.visa_type),
        visa_type_name=golden_visa.visa_type_display_name(data.visa_type),
        authority_name=golden_visa.authority_display_name(data.visa_type),
        exchange_rate=rate,
        secondary_currency=data.secondary_currency,
        show_primary_visa=bool(primary_items),
        show_dependent_visas=golden_visa.has_dependent_visas(data),
        authority_fee_items=authority_fees,
        tme_items=tme_items,
        spouse_items=spouse_items,
        children_items=children_items,
        primary_table=_table_or_none("golden-visa", "Golden Visa Cost", number_items(primary_items), rate),
        dependents_table=_table_or_none("dependent-visas", "Dependent Visa Cost", number_items(dependent_items), rate),
        primary_total=aggregate(primary_items),
        dependents_total=aggregate(dependent_items),
        totals=calculate_totals([], primary_items + dependent_items, [], rate),
        explanations=golden_visa.golden_visa_explanations(data),
        dependent_pages=dependent_pages,
    )
    logger.info(
        f"Golden visa quote built: {data.visa_type}, {len(dependent_tables)} dependent tables",
        extra={"document_type": "golden-visa", "quote_id": quote.filename,
               "duration_ms": round((time.time() - start) * 1000, 2)},
    )
    return quote


# ---------------------------------------------------------------------------
# Company services
# ---------------------------------------------------------------------------

def build_company_services_quote(data: Optional[CompanyServicesData]) -> CompanyServicesQuote:
    if data is None:
        raise InvalidDocumentDataError("Company Services", "company services data")
    if not (data.first_name or data.last_name or data.company_name):
        raise InvalidDocumentDataError("Company Services", "client name")

    rate = data.exchange_rate
    tax_items = number_items(company_services.tax_consulting_items(data.tax_consulting_services))
    accounting = number_items(company_services.accounting_items(data.accounting_services))
    compliance = number_items(company_services.compliance_items(data.compliance_services))

    quote = CompanyServicesQuote(
        filename=company_services_filename(data),
        exchange_rate=rate,
        secondary_currency=data.secondary_currency,
        enabled_services=company_services.enabled_services(data),
        pricing_tables=company_services.accounting_pricing_tables(data.accounting_services),
        tax_consulting_table=_table_or_none("tax-consulting", "Tax Consulting Services", tax_items, rate),
        accounting_table=_table_or_none("accounting", "Accounting Services", accounting, rate),
        compliance_table=_table_or_none("compliance", "Compliance Services", compliance, rate),
        back_office_team=company_services.back_office_team(data.back_office_services),
    )
    logger.info(
        f"Company services quote built: {', '.join(quote.enabled_services) or 'no services'}",
        extra={"document_type": "company-services", "quote_id": quote.filename},
    )
    return quote


# ---------------------------------------------------------------------------
# Taxation
# ---------------------------------------------------------------------------

def build_taxation_letters(data: Optional[TaxationData]) -> TaxationLetters:
    if data is None:
        raise InvalidDocumentDataError("Taxation", "taxation data")

    disclaimer = data.cit_disclaimer
    letters = TaxationLetters(
        cit_disclaimer_filename=cit_disclaimer_filename(data),
        shareholder_declaration_filename=shareholder_declaration_filename(data),
        cit_disclaimer=build_cit_disclaimer(data) if disclaimer and disclaimer.enabled else None,
        shareholder_declaration=(
            build_shareholder_declaration(data) if data.cit_shareholder_declaration is not None else None
        ),
    )
    logger.info(
        f"Taxation letters built: disclaimer={letters.cit_disclaimer is not None} "
        f"declaration={letters.shareholder_declaration is not None}",
        extra={"document_type": "taxation", "quote_id": letters.cit_disclaimer_filename},
    )
    return letters


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def build_document(request):
    """Build whatever document the tagged request asks for."""
    if isinstance(request, OfferDocumentRequest):
        return build_offer_quote(request.data)
    if isinstance(request, GoldenVisaDocumentRequest):
        return build_golden_visa_quote(request.data)
    if isinstance(request, CompanyServicesDocumentRequest):
        return build_company_services_quote(request.data)
    if isinstance(request, TaxationDocumentRequest):
        return build_taxation_letters(request.data)
    raise InvalidDocumentDataError("Document", "document type")
