"""
Explanation deduplicator.

Spouse and child tables repeat the same services, so their explanations are
merged into one entry per service key. The merged entry names every context
it applies to ("for spouse and child visa").

Identity comes from the service_key attached at generation time; rendered
descriptions are never parsed. The result is independent of input order.
"""
from __future__ import annotations

from collections import OrderedDict
from typing import Dict, List, Sequence

from offer_engine.models.line_items import Explanation, ServiceContext, ServiceItem

_CONTEXT_RANK: Dict[ServiceContext, int] = {ctx: rank for rank, ctx in enumerate(ServiceContext)}


def _canonical_order(item: ServiceItem):
    return (_CONTEXT_RANK[item.context], item.number or 0, item.key, item.id, item.explanation or "")


def merge_subjects(contexts: Sequence[ServiceContext]) -> str:
    """'spouse', 'child' -> 'spouse and child'. 'children' absorbs 'child'."""
    unique = sorted(set(contexts), key=_CONTEXT_RANK.__getitem__)
    if ServiceContext.CHILDREN in unique and ServiceContext.CHILD in unique:
        unique.remove(ServiceContext.CHILD)
    subjects = [ctx.subject for ctx in unique]
    if len(subjects) <= 1:
        return "".join(subjects)
    return ", ".join(subjects[:-1]) + " and " + subjects[-1]


def deduplicate_explanations(items: Sequence[ServiceItem]) -> List[Explanation]:
    groups: "OrderedDict[str, List[ServiceItem]]" = OrderedDict()
    for item in sorted(items, key=_canonical_order):
        if not item.explanation:
            continue
        groups.setdefault(item.key, []).append(item)

    explanations: List[Explanation] = []
    for members in groups.values():
        base = members[0]
        text = base.explanation
        if base.explanation_template:
            subject = merge_subjects([member.context for member in members])
            text = base.explanation_template.format(subject=subject)
        explanations.append(Explanation(id=base.id, title=base.display_title, explanation=text))
    return explanations


def item_explanations(items: Sequence[ServiceItem]) -> List[Explanation]:
    """One explanation per item, in table order, for single-context tables."""
    return [
        Explanation(id=item.id, title=item.display_title, explanation=item.explanation)
        for item in items
        if item.explanation
    ]
