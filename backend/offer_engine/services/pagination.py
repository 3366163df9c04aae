"""
Pagination / grouping pass.

Splits variable-count breakdown tables (individual visas, spouse and child
visas) into page groups and decides where the explanation block goes.

Rules:
  - Table order is preserved and every input table lands in exactly one group.
  - Explanations ride on the last page that holds tables while the document
    has at most EXPLANATIONS_INLINE_MAX_ITEMS line items; above that they get
    a trailing page of their own.
  - Nothing here raises; an empty input yields an empty page list.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from offer_engine.config import (
    CHILDREN_PER_PAGE_WITH_CANCELLATION,
    DEPENDENT_TABLES_PER_PAGE,
    EXPLANATIONS_INLINE_MAX_ITEMS,
    FAMILY_VISA_CHILDREN_PER_PAGE,
    INDIVIDUAL_VISAS_PER_PAGE,
)
from offer_engine.models.line_items import BreakdownTable, Explanation, PageGroup

logger = logging.getLogger("tme-offers.pagination")


def chunk(tables: Sequence[BreakdownTable], size: int) -> List[List[BreakdownTable]]:
    size = max(1, size)
    return [list(tables[i:i + size]) for i in range(0, len(tables), size)]


def total_items(tables: Sequence[BreakdownTable]) -> int:
    return sum(table.item_count for table in tables)


def route_explanations(
    chunks: Sequence[Sequence[BreakdownTable]],
    explanations: Sequence[Explanation] = (),
    inline_max_items: Optional[int] = None,
) -> List[PageGroup]:
    """Turn table chunks into page groups and attach the explanations."""
    limit = EXPLANATIONS_INLINE_MAX_ITEMS if inline_max_items is None else inline_max_items
    chunks = [list(c) for c in chunks if c]
    explanations = list(explanations)

    if not chunks:
        if not explanations:
            return []
        return [PageGroup(index=0, explanations=explanations, is_explanation_page=True)]

    item_count = sum(total_items(c) for c in chunks)
    inline = item_count <= limit
    groups = [
        PageGroup(
            index=i,
            tables=tables,
            explanations=explanations if inline and i == len(chunks) - 1 else [],
        )
        for i, tables in enumerate(chunks)
    ]
    if explanations and not inline:
        groups.append(PageGroup(index=len(groups), explanations=explanations, is_explanation_page=True))

    logger.debug(
        f"Paginated {sum(len(c) for c in chunks)} tables ({item_count} items) into {len(groups)} pages, "
        f"explanations {'inline' if inline else 'on trailing page'}"
    )
    return groups


def paginate_tables(
    tables: Sequence[BreakdownTable],
    per_page: int = INDIVIDUAL_VISAS_PER_PAGE,
    explanations: Sequence[Explanation] = (),
    inline_max_items: Optional[int] = None,
) -> List[PageGroup]:
    """Fixed-size chunking; used for individual visa and child visa breakdowns."""
    return route_explanations(chunk(tables, per_page), explanations, inline_max_items)


def dependent_chunks(
    tables: Sequence[BreakdownTable],
    has_spouse: bool,
    number_of_children: int,
    has_visa_cancellation: bool,
) -> List[List[BreakdownTable]]:
    """
    Page layout for spouse + child tables. With a spouse present the spouse
    table is always tables[0].
    """
    tables = list(tables)
    if len(tables) <= 1:
        return [tables] if tables else []

    if not has_visa_cancellation and number_of_children <= 2:
        # Short content stays on one page whatever the table count
        return [tables]

    if has_visa_cancellation:
        if number_of_children >= 2:
            head: List[List[BreakdownTable]] = []
            children = tables
            if has_spouse:
                head, children = [[tables[0]]], tables[1:]
            return head + chunk(children, CHILDREN_PER_PAGE_WITH_CANCELLATION)
        return [tables]

    return chunk(tables, DEPENDENT_TABLES_PER_PAGE)


def paginate_dependent_tables(
    tables: Sequence[BreakdownTable],
    has_spouse: bool,
    number_of_children: int,
    has_visa_cancellation: bool,
    explanations: Sequence[Explanation] = (),
    inline_max_items: Optional[int] = None,
) -> List[PageGroup]:
    chunks = dependent_chunks(tables, has_spouse, number_of_children, has_visa_cancellation)
    return route_explanations(chunks, explanations, inline_max_items)


def paginate_family_visa_tables(
    spouse_table: Optional[BreakdownTable],
    child_tables: Sequence[BreakdownTable],
    explanations: Sequence[Explanation] = (),
    inline_max_items: Optional[int] = None,
) -> List[PageGroup]:
    """Family visa document: the spouse gets page 1, children follow two per page."""
    chunks: List[List[BreakdownTable]] = []
    if spouse_table is not None:
        chunks.append([spouse_table])
    chunks.extend(chunk(child_tables, FAMILY_VISA_CHILDREN_PER_PAGE))
    return route_explanations(chunks, explanations, inline_max_items)
