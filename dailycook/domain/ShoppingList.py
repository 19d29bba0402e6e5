"""ShoppingList aggregate: merged ingredient lines to purchase, optionally priced."""
from datetime import datetime
from typing import List, Optional


class ShoppingListItem:
    def __init__(self, ingredient_id: str, name: str, unit: Optional[str] = None, qty: float = 0,
                 checked: bool = False):
        self.ingredient_id = ingredient_id
        self.name = name
        self.unit = unit
        self.qty = qty
        self.checked = checked
        # Only set once a cached price is known
        self.unit_price: Optional[float] = None
        self.currency: Optional[str] = None
        self.estimated_cost: Optional[float] = None
        self.price_updated_at: Optional[datetime] = None

    def add_quantity(self, amount: float):
        '''Adds the amount of another recipe item to this line.'''
        self.qty += amount

    def attach_price(self, unit_price: float, currency: str, updated_at: Optional[datetime]):
        self.unit_price = unit_price
        self.currency = currency
        self.estimated_cost = round(unit_price * self.qty, 2)
        self.price_updated_at = updated_at

    def is_priced(self) -> bool:
        return self.unit_price is not None

    def __str__(self) -> str:
        cost = f" ~ {self.estimated_cost} {self.currency}" if self.is_priced() else ""
        return f"{self.name} - {self.qty} {self.unit or ''}{cost}"

    __repr__ = __str__

    def to_dict(self):
        '''Unpriced lines carry no cost fields at all.'''
        d = {
            "ingredient_id": self.ingredient_id,
            "name": self.name,
            "unit": self.unit,
            "qty": self.qty,
            "checked": self.checked,
        }
        if self.is_priced():
            d["unit_price"] = self.unit_price
            d["currency"] = self.currency
            d["estimated_cost"] = self.estimated_cost
            d["price_updated_at"] = self.price_updated_at.isoformat() if self.price_updated_at else None
        return d


class ShoppingList:
    def __init__(self, title: str, items: Optional[List[ShoppingListItem]] = None,
                 user_id: Optional[str] = None, id: Optional[str] = None):
        self.id = id
        self.user_id = user_id
        self.title = title
        self.items: List[ShoppingListItem] = items[:] if items else []

    def get_items(self):
        return self.items

    def estimated_total(self) -> Optional[float]:
        '''Sum of the priced lines, None when nothing is priced.'''
        priced = [i.estimated_cost for i in self.items if i.is_priced()]
        return round(sum(priced), 2) if priced else None

    def __str__(self) -> str:
        items_str = ",\n\t".join(str(item) for item in self.items)
        return f"Shopping List {self.title}:\n\t{items_str}"

    def __repr__(self) -> str:
        return self.__str__()

    def to_dict(self):
        d = {"title": self.title, "items": [item.to_dict() for item in self.items]}
        if self.id:
            d["id"] = self.id
            d["user_id"] = self.user_id
        return d
