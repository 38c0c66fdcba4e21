from __future__ import annotations

import datetime as dt
from decimal import Context, Decimal, DivisionByZero, InvalidOperation, localcontext
from enum import Enum
from typing import Annotated, Dict, List

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, computed_field

# Exact in memory, plain numbers on the wire.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

# Wide enough for bounded quantities and their sums to stay exact.
MONEY_CONTEXT = Context(prec=100, traps=[InvalidOperation, DivisionByZero])


class TimeSlot(str, Enum):
    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"


class Category(str, Enum):
    BEVERAGE = "Beverage"
    STARTER = "Starter"
    MAIN = "Main"
    DESSERT = "Dessert"


class SalesRecord(BaseModel):
    """
    One validated sale line.

    ``amount`` is always derived from ``units * unit_price``; an ``amount``
    passed to the constructor is ignored.
    """

    model_config = ConfigDict(frozen=True)

    date: dt.date
    time_slot: TimeSlot
    product: str = Field(min_length=1)
    category: Category
    units: int = Field(gt=0)
    unit_price: Money = Field(gt=0, allow_inf_nan=False)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def amount(self) -> Money:
        with localcontext(MONEY_CONTEXT):
            return self.units * self.unit_price


class KPISummary(BaseModel):
    total_revenue: Money = Decimal("0")
    total_units: int = 0
    by_product: Dict[str, Money] = Field(default_factory=dict)
    by_time_slot: Dict[TimeSlot, Money] = Field(default_factory=dict)
    by_category: Dict[Category, Money] = Field(default_factory=dict)


class ProductRevenue(BaseModel):
    product: str
    revenue: Money


class RowCounts(BaseModel):
    raw: int = 0
    clean: int = 0


class AnalysisResponse(BaseModel):
    counts: RowCounts
    summary: KPISummary
    top_products: List[ProductRevenue] = Field(default_factory=list)
    raw_preview: List[Dict[str, str]] = Field(default_factory=list)
    clean_preview: List[SalesRecord] = Field(default_factory=list)


class HealthResponse(BaseModel):
    ok: bool = True
