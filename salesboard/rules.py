"""
Deterministic cleaning rules.

Vocabularies and column names are fixed; matching is by substring (time slot)
and by prefix (category), in the order listed here.
"""

SOURCE_ENCODING = "utf-8"
DELIMITER = ","

# Input columns, matched by header name
COL_DATE = "fecha"
COL_TIME_SLOT = "franja"
COL_PRODUCT = "producto"
COL_CATEGORY = "familia"
COL_UNITS = "unidades"
COL_UNIT_PRICE = "precio_unitario"

# (substring, slot label); first hit wins. "des" also catches e.g. "descuento".
TIME_SLOT_TOKENS = (
    ("des", "Breakfast"),
    ("com", "Lunch"),
)

# (prefix, category label); first hit wins
CATEGORY_PREFIXES = (
    ("beb", "Beverage"),
    ("ent", "Starter"),
    ("pri", "Main"),
    ("pos", "Dessert"),
)

# Tried after ISO-8601. Slash and dash dates are month-first.
DATE_FORMATS = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
)

# Quantities outside 1e-15 .. 1e15, or with more significant digits than
# this, are rejected so money arithmetic stays exact.
MAX_DECIMAL_EXPONENT = 15
MAX_DECIMAL_DIGITS = 30

EXPORT_FIELDS = ("date", "timeSlot", "product", "category", "units", "unitPrice", "amount")

DEFAULT_TOP_N = 5
DEFAULT_PREVIEW_ROWS = 10
