"""
Cost aggregation: section totals, the grand total, deposits and their
secondary-currency counterparts.

Totals are always derived from the line items themselves, so a table and
the total printed under it can never disagree. Amounts stay unrounded here;
rounding belongs to the formatting layer.
"""
from __future__ import annotations

from typing import Sequence

from offer_engine.models.line_items import BreakdownTable, ServiceItem, Totals
from offer_engine.services.cost_calculator import InitialSetupCosts
from offer_engine.services.formatting import secondary_amount
from offer_engine.services.service_pipeline import to_cost_items


def aggregate(items: Sequence[ServiceItem]) -> float:
    """Sum of regular items minus the sum of reductions."""
    return sum(item.signed_amount for item in items)


def secondary_total(total: float, exchange_rate: float) -> float:
    """Convert a total once; never sum already converted amounts."""
    return secondary_amount(total, exchange_rate)


def deposit_total(setup: InitialSetupCosts) -> float:
    """Refundable deposits quoted alongside, never part of the grand total."""
    return setup.deposit_total


def calculate_totals(
    setup_items: Sequence[ServiceItem],
    visa_items: Sequence[ServiceItem],
    yearly_items: Sequence[ServiceItem],
    exchange_rate: float,
    deposits: float = 0.0,
) -> Totals:
    setup_total = aggregate(setup_items)
    visa_total = aggregate(visa_items)
    yearly_total = aggregate(yearly_items)
    grand_total = setup_total + visa_total + yearly_total
    return Totals(
        setup_total=setup_total,
        visa_total=visa_total,
        yearly_total=yearly_total,
        grand_total=grand_total,
        deposit_total=deposits,
        secondary_setup_total=secondary_total(setup_total, exchange_rate),
        secondary_visa_total=secondary_total(visa_total, exchange_rate),
        secondary_yearly_total=secondary_total(yearly_total, exchange_rate),
        secondary_grand_total=secondary_total(grand_total, exchange_rate),
        secondary_deposit_total=secondary_total(deposits, exchange_rate),
    )


def make_table(key: str, title: str, items: Sequence[ServiceItem], exchange_rate: float) -> BreakdownTable:
    """A numbered breakdown table whose total is the aggregate of its own rows."""
    total = aggregate(items)
    return BreakdownTable(
        key=key,
        title=title,
        items=to_cost_items(items, exchange_rate),
        total=total,
        secondary_total=secondary_total(total, exchange_rate),
    )
