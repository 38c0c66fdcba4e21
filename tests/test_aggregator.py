from decimal import Decimal

from salesboard.aggregator import aggregate, top_products
from salesboard.cleaner import clean
from salesboard.models import Category, TimeSlot
from salesboard.parser import parse

SAMPLE = "\n".join(
    [
        "fecha,franja,producto,familia,unidades,precio_unitario",
        "2024-01-01,Desayuno,Cafe,Bebida,2,1.50",
        "2024-01-01,Comida,Lentejas,Principal,2,9.50",
        "2024-01-02,comida,Tarta,Postre,1,4.00",
        "2024-01-03,Comida,Ensalada,Entrante,3,5",
        "2024-01-04,Desayuno,Cafe,Bebida,1,1.50",
    ]
)


def test_aggregate_totals_and_groupings():
    summary = aggregate(clean(parse(SAMPLE)))

    assert summary.total_revenue == Decimal("42.50")
    assert summary.total_units == 9
    assert summary.by_product == {
        "cafe": Decimal("4.50"),
        "lentejas": Decimal("19.00"),
        "tarta": Decimal("4.00"),
        "ensalada": Decimal("15"),
    }
    assert summary.by_time_slot == {TimeSlot.BREAKFAST: Decimal("4.50"), TimeSlot.LUNCH: Decimal("38.00")}
    assert summary.by_category == {
        Category.BEVERAGE: Decimal("4.50"),
        Category.MAIN: Decimal("19.00"),
        Category.DESSERT: Decimal("4.00"),
        Category.STARTER: Decimal("15"),
    }


def test_revenue_is_conserved_across_groupings():
    records = list(clean(parse(SAMPLE)))
    summary = aggregate(records)

    assert summary.total_revenue == sum(r.amount for r in records)
    assert sum(summary.by_product.values()) == summary.total_revenue
    assert sum(summary.by_time_slot.values()) == summary.total_revenue
    assert sum(summary.by_category.values()) == summary.total_revenue


def test_aggregate_empty():
    summary = aggregate([])
    assert summary.total_revenue == 0
    assert summary.total_units == 0
    assert summary.by_product == {}
    assert summary.by_time_slot == {}
    assert summary.by_category == {}


def test_top_products_descending():
    grouping = {"a": 10, "b": 30, "c": 20, "d": 5, "e": 25, "f": 1}
    assert top_products(grouping) == [("b", 30), ("e", 25), ("c", 20), ("a", 10), ("d", 5)]


def test_top_products_ties_keep_insertion_order():
    grouping = {"x": Decimal("5"), "y": Decimal("7"), "z": Decimal("5"), "w": Decimal("5")}
    assert [p for p, _ in top_products(grouping, n=3)] == ["y", "x", "z"]


def test_top_products_short_grouping():
    assert top_products({"a": 1}) == [("a", 1)]
    assert top_products({}) == []
    assert top_products({"a": 1}, n=0) == []
