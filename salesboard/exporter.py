"""
Re-export the clean set as comma-joined text.

Fields are written in EXPORT_FIELDS order without quoting, so a product name
containing a comma is not protected, the same limitation the parser has.
"""

from __future__ import annotations

from typing import Iterable, List

from .models import SalesRecord
from .rules import DELIMITER, EXPORT_FIELDS


def record_to_line(record: SalesRecord) -> str:
    values = (
        record.date.isoformat(),
        record.time_slot.value,
        record.product,
        record.category.value,
        str(record.units),
        format(record.unit_price, "f"),
        format(record.amount, "f"),
    )
    return DELIMITER.join(values)


def to_csv(records: Iterable[SalesRecord], header: bool = True) -> str:
    lines: List[str] = [DELIMITER.join(EXPORT_FIELDS)] if header else []
    lines.extend(record_to_line(record) for record in records)
    return "\n".join(lines) + "\n"
