"""Shared fixtures for the test suite: temp data directories and fake price sources."""
import json
import tempfile
from datetime import datetime
from pathlib import Path

from dailycook.domain.errors import ExternalSourceFailure
from dailycook.logic.pricing.sources import PriceSource, RawPrice
from dailycook.utilities.dates import local_tz


class FakeSource(PriceSource):
    """Answers from a dict name -> price text; records every call."""

    def __init__(self, prices=None, name="fake", unit=None):
        self.name = name
        self.prices = prices or {}
        self.unit = unit
        self.calls = []

    def fetch_raw_market_price(self, name, unit=None):
        self.calls.append(name)
        text = self.prices.get(name)
        if text is None:
            return None
        return RawPrice(text=text, unit=self.unit, source=self.name)


class BrokenSource(PriceSource):
    """Every lookup fails like a network error."""

    def __init__(self, name="broken"):
        self.name = name
        self.calls = []

    def fetch_raw_market_price(self, name, unit=None):
        self.calls.append(name)
        raise ExternalSourceFailure(self.name, "connection refused")


def local_dt(*args) -> datetime:
    return datetime(*args, tzinfo=local_tz())


def write_json(path: Path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False)


def recipe(id, title=None, tags=(), kcal=None, likes=0, cook_time=None, region=None, items=(),
           created_at=None, protein=None, fat=None, carbs=None):
    return {
        "id": id,
        "title": title or f"Recipe {id}",
        "tags": list(tags),
        "region": region,
        "cook_time": cook_time,
        "kcal": kcal,
        "protein": protein,
        "fat": fat,
        "carbs": carbs,
        "likes": likes,
        "created_at": created_at,
        "items": [{"ingredient_id": i, "amount": a, "unit_override": u} for i, a, u in items],
    }


def ingredient(id, name, unit="g", price=None, currency=None, updated_at=None, checked_at=None):
    return {
        "id": id,
        "name": name,
        "unit": unit,
        "price_per_unit": price,
        "price_currency": currency,
        "price_updated_at": updated_at.isoformat() if updated_at else None,
        "last_checked_at": checked_at.isoformat() if checked_at else None,
    }


class TempDataDir:
    """Temporary data directory, usable from setUp/tearDown."""

    def __init__(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name)

    def file(self, name) -> Path:
        return self.path / name

    def seed(self, recipes=None, ingredients=None, preferences=None, mealplans=None):
        if recipes is not None:
            write_json(self.file("recipes.json"), recipes)
        if ingredients is not None:
            write_json(self.file("ingredients.json"), ingredients)
        if preferences is not None:
            write_json(self.file("preferences.json"), preferences)
        if mealplans is not None:
            write_json(self.file("mealplans.json"), mealplans)

    def cleanup(self):
        self._tmp.cleanup()
