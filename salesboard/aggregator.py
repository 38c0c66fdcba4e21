from __future__ import annotations

from decimal import Decimal, localcontext
from typing import Dict, Iterable, List, Mapping, Tuple

from .models import MONEY_CONTEXT, Category, KPISummary, SalesRecord, TimeSlot
from .rules import DEFAULT_TOP_N


def aggregate(records: Iterable[SalesRecord]) -> KPISummary:
    """
    Sum revenue and units over the clean set in one pass.

    Revenue is also grouped by product, time slot and category.
    """
    total_revenue = Decimal("0")
    total_units = 0
    by_product: Dict[str, Decimal] = {}
    by_time_slot: Dict[TimeSlot, Decimal] = {}
    by_category: Dict[Category, Decimal] = {}

    with localcontext(MONEY_CONTEXT):
        for record in records:
            amount = record.amount
            total_revenue += amount
            total_units += record.units
            by_product[record.product] = by_product.get(record.product, Decimal("0")) + amount
            by_time_slot[record.time_slot] = by_time_slot.get(record.time_slot, Decimal("0")) + amount
            by_category[record.category] = by_category.get(record.category, Decimal("0")) + amount

    return KPISummary(
        total_revenue=total_revenue,
        total_units=total_units,
        by_product=by_product,
        by_time_slot=by_time_slot,
        by_category=by_category,
    )


def top_products(by_product: Mapping[str, Decimal], n: int = DEFAULT_TOP_N) -> List[Tuple[str, Decimal]]:
    # sorted() is stable with reverse=True, so ties keep insertion order
    ranked = sorted(by_product.items(), key=lambda item: item[1], reverse=True)
    return ranked[: max(0, n)]
