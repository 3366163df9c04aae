"""
Declarative line-item pipeline and the numbering/formatting pass.

A generator is an ordered tuple of ServiceRule entries. run_pipeline walks the
tuple in order, so the order a proposal lists its services in is the order
the rules are declared in, nothing else.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, Union

from offer_engine.models.line_items import CostItem, ServiceItem
from offer_engine.services.formatting import secondary_amount

logger = logging.getLogger("tme-offers.pipeline")

BuilderResult = Union[ServiceItem, Iterable[ServiceItem], None]


@dataclass(frozen=True)
class ServiceRule:
    """
    One step of a generator.

    predicate and builder both receive (config, costs, authority). The builder
    may return a single item, several items (e.g. one per insurance tier) or
    None.
    """
    id: str
    predicate: Callable[[Any, Any, Any], bool]
    builder: Callable[[Any, Any, Any], BuilderResult]


def always(config, costs, authority) -> bool:
    return True


def run_pipeline(rules: Sequence[ServiceRule], config, costs, authority) -> List[ServiceItem]:
    """
    Evaluate rules in declaration order.

    Items whose amount is zero are dropped so a deselected or unpriced service
    never produces a row.
    """
    items: List[ServiceItem] = []
    for rule in rules:
        if not rule.predicate(config, costs, authority):
            continue
        produced = rule.builder(config, costs, authority)
        if produced is None:
            continue
        if isinstance(produced, ServiceItem):
            produced = [produced]
        for item in produced:
            if item.amount == 0:
                logger.debug(f"Rule '{rule.id}' produced zero amount for '{item.id}' - skipped")
                continue
            items.append(item)
    return items


# ---------------------------------------------------------------------------
# Numbering / formatting pass
# ---------------------------------------------------------------------------

def number_items(items: Sequence[ServiceItem]) -> List[ServiceItem]:
    """Return copies numbered 1..N by position. Re-running gives the same numbers."""
    return [item.numbered(index + 1) for index, item in enumerate(items)]


def format_description(item: ServiceItem, number: Optional[int] = None) -> str:
    """'{number}. {description}'"""
    n = number if number is not None else item.number
    if n is None:
        return item.description
    return f"{n}. {item.description}"


def to_cost_items(items: Sequence[ServiceItem], exchange_rate: float) -> List[CostItem]:
    """
    Presentation rows: numbered descriptions plus the secondary-currency amount.

    Numbering always follows list position, so callers may pass either raw
    or already numbered items.
    """
    return [
        CostItem(
            number=index + 1,
            description=format_description(item, index + 1),
            amount=item.amount,
            secondary_amount=secondary_amount(item.amount, exchange_rate),
            is_reduction=item.is_reduction,
            id=item.id,
        )
        for index, item in enumerate(items)
    ]
