"""
Engine output records: line items, cost items, totals, page groups and
explanations.

These are produced fresh for every quote and never mutated after creation;
passes that "annotate" items (numbering, currency conversion) return copies.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional


class ServiceContext(str, Enum):
    """Who a line item is charged for. Declaration order is the merge order."""
    PRIMARY = "primary"
    COMPANY = "company"
    SPOUSE = "spouse"
    CHILD = "child"
    CHILDREN = "children"

    @property
    def subject(self) -> str:
        """Noun used in explanation phrases, e.g. 'for spouse visa'."""
        return self.value


@dataclass(frozen=True)
class ServiceItem:
    id: str
    description: str
    amount: float                          # AED
    is_reduction: bool = False
    explanation: Optional[str] = None
    title: Optional[str] = None            # description without counts, used in explanations
    service_key: Optional[str] = None      # identity shared across contexts
    context: ServiceContext = ServiceContext.COMPANY
    explanation_template: Optional[str] = None  # contains "{subject}"
    number: Optional[int] = None

    @property
    def display_title(self) -> str:
        return self.title or self.description

    @property
    def key(self) -> str:
        return self.service_key or self.id

    @property
    def signed_amount(self) -> float:
        return -self.amount if self.is_reduction else self.amount

    def numbered(self, number: int) -> "ServiceItem":
        return replace(self, number=number)


@dataclass(frozen=True)
class CostItem:
    """Presentation-ready line: numbered description plus secondary amount."""
    number: int
    description: str
    amount: float
    secondary_amount: float
    is_reduction: bool = False
    id: str = ""


@dataclass(frozen=True)
class Explanation:
    id: str
    title: str
    explanation: str


@dataclass(frozen=True)
class Totals:
    setup_total: float = 0.0
    visa_total: float = 0.0
    yearly_total: float = 0.0
    grand_total: float = 0.0
    deposit_total: float = 0.0
    secondary_setup_total: float = 0.0
    secondary_visa_total: float = 0.0
    secondary_yearly_total: float = 0.0
    secondary_grand_total: float = 0.0
    secondary_deposit_total: float = 0.0


@dataclass(frozen=True)
class BreakdownTable:
    """One cost table (spouse, a child, a single visa) rendered as a unit."""
    key: str
    title: str
    items: List[CostItem] = field(default_factory=list)
    total: float = 0.0
    secondary_total: float = 0.0

    @property
    def item_count(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class PageGroup:
    index: int
    tables: List[BreakdownTable] = field(default_factory=list)
    explanations: List[Explanation] = field(default_factory=list)
    is_explanation_page: bool = False
