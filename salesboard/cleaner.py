"""
Validate, normalize and deduplicate raw sales rows.

Each row goes through the checks in a fixed order and stops at the first
failure. Rejected rows are dropped without being reported one by one; the
only visible trace is the gap between raw and clean row counts.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Iterable, Iterator, Mapping, Optional, Sequence, Tuple

from .models import Category, SalesRecord, TimeSlot
from .rules import (
    CATEGORY_PREFIXES,
    COL_CATEGORY,
    COL_DATE,
    COL_PRODUCT,
    COL_TIME_SLOT,
    COL_UNIT_PRICE,
    COL_UNITS,
    DATE_FORMATS,
    MAX_DECIMAL_DIGITS,
    MAX_DECIMAL_EXPONENT,
    TIME_SLOT_TOKENS,
)

logger = logging.getLogger(__name__)


class RejectionReason(str, Enum):
    BAD_DATE = "bad_date"
    EMPTY_PRODUCT = "empty_product"
    UNKNOWN_TIME_SLOT = "unknown_time_slot"
    UNKNOWN_CATEGORY = "unknown_category"
    BAD_QUANTITY = "bad_quantity"


@dataclass(frozen=True)
class RowOutcome:
    record: Optional[SalesRecord] = None
    reason: Optional[RejectionReason] = None

    @property
    def accepted(self) -> bool:
        return self.record is not None


def parse_date(value: str) -> Optional[date]:
    """
    Parse a date or datetime string down to a calendar date.

    ISO-8601 is tried first, then DATE_FORMATS. Returns None when nothing fits.
    """
    value = value.strip()
    if not value:
        return None
    iso_value = value[:-1] + "+00:00" if value[-1] in "Zz" else value
    try:
        return datetime.fromisoformat(iso_value).date()
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def classify_time_slot(value: str) -> Optional[TimeSlot]:
    token = value.lower()
    for needle, label in TIME_SLOT_TOKENS:
        if needle in token:
            return TimeSlot(label)
    return None


def classify_category(value: str) -> Optional[Category]:
    token = value.lower()
    for prefix, label in CATEGORY_PREFIXES:
        if token.startswith(prefix):
            return Category(label)
    return None


def _positive_decimal(value: str) -> Optional[Decimal]:
    try:
        number = Decimal(value.strip())
    except InvalidOperation:
        return None
    if not number.is_finite() or number <= 0:
        return None
    if abs(number.adjusted()) > MAX_DECIMAL_EXPONENT or len(number.as_tuple().digits) > MAX_DECIMAL_DIGITS:
        return None
    return number


def _positive_int(value: str) -> Optional[int]:
    number = _positive_decimal(value)
    if number is None or number != number.to_integral_value():
        return None
    return int(number)


def classify_row(row: Mapping[str, str]) -> RowOutcome:
    """
    Run one raw row through the cleaning rules.
    """
    day = parse_date(row.get(COL_DATE, ""))
    if day is None:
        return RowOutcome(reason=RejectionReason.BAD_DATE)

    product = row.get(COL_PRODUCT, "").strip().lower()
    if not product:
        return RowOutcome(reason=RejectionReason.EMPTY_PRODUCT)

    time_slot = classify_time_slot(row.get(COL_TIME_SLOT, ""))
    if time_slot is None:
        return RowOutcome(reason=RejectionReason.UNKNOWN_TIME_SLOT)

    category = classify_category(row.get(COL_CATEGORY, ""))
    if category is None:
        return RowOutcome(reason=RejectionReason.UNKNOWN_CATEGORY)

    units = _positive_int(row.get(COL_UNITS, ""))
    unit_price = _positive_decimal(row.get(COL_UNIT_PRICE, ""))
    if units is None or unit_price is None:
        return RowOutcome(reason=RejectionReason.BAD_QUANTITY)

    return RowOutcome(
        record=SalesRecord(
            date=day,
            time_slot=time_slot,
            product=product,
            category=category,
            units=units,
            unit_price=unit_price,
        )
    )


class CleanSet(Sequence[SalesRecord]):
    """
    Deduplicated clean records over a fixed list of raw rows.

    Iteration is lazy and restartable: the first complete pass runs the rules
    over the raw rows and yields each distinct record at its first
    occurrence; later passes, ``len()`` and indexing reuse that result.
    """

    def __init__(self, rows: Iterable[Mapping[str, str]]) -> None:
        self._rows = tuple(rows)
        self._records: Optional[Tuple[SalesRecord, ...]] = None

    def _distinct(self) -> Iterator[SalesRecord]:
        seen = set()
        for row in self._rows:
            outcome = classify_row(row)
            if not outcome.accepted or outcome.record in seen:
                continue
            seen.add(outcome.record)
            yield outcome.record

    def __iter__(self) -> Iterator[SalesRecord]:
        if self._records is not None:
            yield from self._records
            return
        collected = []
        for record in self._distinct():
            collected.append(record)
            yield record
        self._records = tuple(collected)

    def _materialize(self) -> Tuple[SalesRecord, ...]:
        if self._records is None:
            self._records = tuple(self._distinct())
        return self._records

    def __len__(self) -> int:
        return len(self._materialize())

    def __getitem__(self, index):
        return self._materialize()[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CleanSet):
            return self._materialize() == other._materialize()
        return NotImplemented

    def __repr__(self) -> str:
        return f"CleanSet(raw_rows={len(self._rows)})"

    def rejections(self) -> Counter:
        """
        Tally rejected rows by reason. Duplicates are not rejections.
        """
        tally: Counter = Counter()
        for row in self._rows:
            outcome = classify_row(row)
            if outcome.reason is not None:
                tally[outcome.reason.value] += 1
        return tally


def clean(rows: Iterable[Mapping[str, str]]) -> CleanSet:
    clean_set = CleanSet(rows)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Rejected rows by reason: %s", dict(clean_set.rejections()))
    return clean_set
