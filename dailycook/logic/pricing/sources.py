"""Price sources: where raw price text comes from.

A source answers fetch_raw_market_price(name, unit) with a RawPrice or None
(nothing found). Network problems surface as ExternalSourceFailure.
"""
import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

import httpx
from bs4 import BeautifulSoup

from dailycook.domain.errors import ExternalSourceFailure
from dailycook.logic.pricing import ai_prices
from dailycook.logic.pricing.normalizer import keyword_for
from dailycook.utilities.config import (
    DEFAULT_CURRENCY,
    PRICE_LOOKUP_TIMEOUT,
    PRICE_SCRAPER_BASE_URL,
    PRICE_SCRAPER_ENABLED,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawPrice:
    text: str
    unit: Optional[str] = None
    currency: str = DEFAULT_CURRENCY
    source: str = ""


class PriceSource:
    name = "source"

    def prepare(self, ingredients: Iterable) -> None:
        """Optional batch warm-up before a run of lookups."""

    def fetch_raw_market_price(self, name: str, unit: Optional[str] = None) -> Optional[RawPrice]:
        raise NotImplementedError


# --- Market scraping ------------------------------------------------------

_PRICE_CLASS = re.compile(r"price", re.I)
_UNIT_CLASS = re.compile(r"unit|weight", re.I)
_PRICE_IN_TEXT = re.compile(r"\d+(?:[.,]\d{3})+\s*[đ₫](?:\s*/\s*[\d.,]*\s*[^\s<]+)?", re.I)
_DIGIT = re.compile(r"\d")


def extract_price_from_html(page: str):
    """Return (price_text, unit_text) of the first product on a search page, or None."""
    soup = BeautifulSoup(page, 'html.parser')
    for price_el in soup.find_all(class_=_PRICE_CLASS):
        price_text = price_el.get_text(" ", strip=True)
        if not _DIGIT.search(price_text):
            continue
        unit_el = price_el.find_next(class_=_UNIT_CLASS)
        unit_text = unit_el.get_text(" ", strip=True) if unit_el else ""
        if unit_text.startswith("/"):
            unit_text = "".join(unit_text.split())
        return price_text.replace("₫", "đ"), unit_text
    loose = _PRICE_IN_TEXT.search(soup.get_text(" "))
    if loose:
        return loose.group(0).replace("₫", "đ"), ""
    return None


class MarketScraperSource(PriceSource):
    """First product price from the supermarket's search page."""

    name = "market"

    def __init__(self, base_url: str = PRICE_SCRAPER_BASE_URL, timeout: float = PRICE_LOOKUP_TIMEOUT,
                 client: Optional[httpx.Client] = None):
        self.base_url = base_url.rstrip("/")
        # Connect, write, pool and read waits share the lookup timeout
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(timeout / 4),
            follow_redirects=True,
            headers={"User-Agent": "Mozilla/5.0 (DailyCook price refresh)"},
        )

    def fetch_raw_market_price(self, name: str, unit: Optional[str] = None) -> Optional[RawPrice]:
        keyword = keyword_for(name)
        try:
            response = self._client.get(f"{self.base_url}/tim-kiem", params={"key": keyword})
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ExternalSourceFailure(self.name, f"search for {keyword!r} failed: {e}") from e

        extracted = extract_price_from_html(response.text)
        if not extracted:
            logger.warning("No products found for keyword: %s", keyword)
            return None
        price_text, unit_text = extracted
        if unit_text.startswith("/"):
            # "/kg" or "/500g" next to the price is the quantity the price buys
            return RawPrice(text=price_text + unit_text, unit=unit, source=self.name)
        return RawPrice(text=price_text, unit=unit_text or unit, source=self.name)

    def close(self):
        self._client.close()


# --- AI estimation --------------------------------------------------------

_EMBEDDABLE_UNITS = {"g", "kg", "ml", "l", "lít", "liter", "chai", "gói"}
_UNIT_ALIASES = {"gram": "g", "gr": "g", "grams": "g", "litre": "l", "lit": "l"}


def price_text_for(price_per_unit: float, unit: Optional[str]) -> str:
    """Render a numeric per-unit price as price text the normalizer understands.

    Prices are scaled to 1000 units so sub-dong per-gram prices survive the
    integral parse.
    """
    label = (unit or "").strip().lower()
    label = _UNIT_ALIASES.get(label, label)
    if label in _EMBEDDABLE_UNITS:
        return f"{round(price_per_unit * 1000)}đ/1000{label}"
    return f"{round(price_per_unit)}đ"


class AIPriceSource(PriceSource):
    """Market price estimates from an OpenAI chat model, fetched in batches."""

    name = "ai"

    def __init__(self, client=None, model: Optional[str] = None, retry_count: int = 2,
                 timeout: float = PRICE_LOOKUP_TIMEOUT):
        self._client = client if client is not None else ai_prices.get_openai_client()
        self.model = model or ai_prices.OPENAI_MODEL
        self.retry_count = retry_count
        self.timeout = timeout
        self._cache = {}

    def is_enabled(self) -> bool:
        return self._client is not None

    def prepare(self, ingredients: Iterable) -> None:
        """One model call for the whole run; answers are cached until the next prepare."""
        self._cache.clear()
        batch = [(i.name, i.unit) for i in ingredients]
        if not batch or not self.is_enabled():
            return
        prices = ai_prices.fetch_market_prices(self._client, batch, self.model, self.retry_count, self.timeout)
        # Names the model skipped are cached as misses
        self._cache.update({name.strip().lower(): None for name, _ in batch})
        self._cache.update(prices)

    def fetch_raw_market_price(self, name: str, unit: Optional[str] = None) -> Optional[RawPrice]:
        if not self.is_enabled():
            return None
        key = name.strip().lower()
        if key not in self._cache:
            self._cache.update(ai_prices.fetch_market_prices(self._client, [(name, unit)], self.model,
                                                            self.retry_count, self.timeout))
            self._cache.setdefault(key, None)
        entry = self._cache.get(key)
        if not entry:
            return None
        return RawPrice(
            text=price_text_for(entry["pricePerUnit"], entry.get("unit") or unit),
            unit=entry.get("unit") or unit,
            currency=entry.get("currency") or DEFAULT_CURRENCY,
            source=entry.get("source") or self.name,
        )


def default_sources() -> List[PriceSource]:
    """Scraper first, AI estimate as fallback when an API key is configured."""
    sources: List[PriceSource] = []
    if PRICE_SCRAPER_ENABLED:
        sources.append(MarketScraperSource())
    ai = AIPriceSource()
    if ai.is_enabled():
        sources.append(ai)
    return sources
