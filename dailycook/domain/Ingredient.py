"""Ingredient domain entity: name, stored unit and cached market price."""
from datetime import datetime
from typing import Optional

from dailycook.utilities.dates import local_aware


def _parse_ts(value) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None


class Ingredient:
    def __init__(self, id: str = "", name: str = "", unit: Optional[str] = None,
                 price_per_unit: Optional[float] = None, price_currency: Optional[str] = None,
                 price_updated_at: Optional[datetime] = None,
                 last_checked_at: Optional[datetime] = None):
        self.id = id
        self.name = name
        self.unit = unit
        # Always in the normalized base unit (g, ml, chai, gói)
        self.price_per_unit = price_per_unit
        self.price_currency = price_currency
        self.price_updated_at = price_updated_at
        # Last external lookup, whether or not it found a price
        self.last_checked_at = last_checked_at

    def __str__(self) -> str:
        price = f"{self.price_per_unit} {self.price_currency or ''}/{self.unit}" if self.has_price() else "no price"
        return f"{self.name} ({self.id}) - {price}"

    __repr__ = __str__

    def has_price(self) -> bool:
        return bool(self.price_per_unit)

    def freshness_stamp(self) -> Optional[datetime]:
        """Most recent moment this ingredient was looked up or priced, timezone-aware."""
        stamps = [local_aware(s) for s in (self.price_updated_at, self.last_checked_at) if s is not None]
        return max(stamps) if stamps else None

    @staticmethod
    def from_dict(data):
        '''Creates an Ingredient object from a dictionary. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        return Ingredient(
            id=str(d.get("id", "")),
            name=d.get("name", ""),
            unit=d.get("unit") or None,
            price_per_unit=d.get("price_per_unit"),
            price_currency=d.get("price_currency"),
            price_updated_at=_parse_ts(d.get("price_updated_at")),
            last_checked_at=_parse_ts(d.get("last_checked_at")),
        )

    def to_dict(self):
        '''Converts the Ingredient object to a dictionary for JSON persistence.'''
        return {
            "id": self.id,
            "name": self.name,
            "unit": self.unit,
            "price_per_unit": self.price_per_unit,
            "price_currency": self.price_currency,
            "price_updated_at": self.price_updated_at.isoformat() if self.price_updated_at else None,
            "last_checked_at": self.last_checked_at.isoformat() if self.last_checked_at else None,
        }
