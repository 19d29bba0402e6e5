"""Scraped price text -> canonical price per base unit.

Examples:
    "89.000đ"        with declared unit "kg" -> 89000 per g
    "22.000đ/500g"   -> 44 per g
    "150.000đ/kg"    -> 150 per g
    "35.000đ/2 chai" -> 17500 per chai

Prices are integral VND, so every '.' or ',' inside a number is a thousands
separator. A text with no usable number is a miss (None), never an error.
"""
import re
from dataclasses import dataclass
from typing import Optional

from dailycook.utilities.constants import KEYWORD_MAPPING

_NUMBER = re.compile(r"\d+(?:[.,]\d+)*")
_EMBEDDED_UNIT = re.compile(r"/(\d+(?:[.,]\d+)*)?(kg|g|ml|lít|liter|l|chai|gói)(?!\w)")
_LEADING_QTY = re.compile(r"^[\d.,\s]+")

# raw unit -> (base unit, multiplier from raw unit to base unit)
_UNIT_TABLE = {
    "kg": ("g", 1000),
    "g": ("g", 1),
    "gr": ("g", 1),
    "gram": ("g", 1),
    "ml": ("ml", 1),
    "l": ("ml", 1000),
    "lít": ("ml", 1000),
    "liter": ("ml", 1000),
    "litre": ("ml", 1000),
    "chai": ("chai", 1),
    "gói": ("gói", 1),
}


@dataclass(frozen=True)
class NormalizedPrice:
    price_per_unit: float
    unit: str


def _parse_grouped_int(run: str) -> int:
    return int(re.sub(r"[.,]", "", run))


def canonical_unit(unit: Optional[str]) -> str:
    """Base unit for a stored or scraped unit label; unknown labels default to grams."""
    if not unit:
        return "g"
    label = _LEADING_QTY.sub("", unit.strip().lower())
    return _UNIT_TABLE.get(label, ("g", 1))[0]


def normalize_price(price_text: Optional[str], declared_unit: Optional[str] = None) -> Optional[NormalizedPrice]:
    if not price_text:
        return None
    cleaned = re.sub(r"\s", "", price_text).lower()

    match = _NUMBER.search(cleaned)
    if not match:
        return None
    price = float(_parse_grouped_int(match.group(0)))
    if price <= 0:
        return None

    embedded = _EMBEDDED_UNIT.search(cleaned, match.end())
    if embedded:
        quantity = _parse_grouped_int(embedded.group(1)) if embedded.group(1) else 1
        if quantity <= 0:
            return None
        base_unit, factor = _UNIT_TABLE[embedded.group(2)]
        return NormalizedPrice(round(price / (quantity * factor), 2), base_unit)

    # Whole price is the cost of one declared unit; only the label is canonicalized
    return NormalizedPrice(round(price, 2), canonical_unit(declared_unit))


def keyword_for(ingredient_name: str) -> str:
    """Market search keyword for an ingredient name."""
    normalized = (ingredient_name or "").strip().lower()
    return KEYWORD_MAPPING.get(normalized, normalized)


__all__ = ["NormalizedPrice", "normalize_price", "canonical_unit", "keyword_for"]
