"""Ordered chain of price sources with a timeout around every external call.

Sources are tried in order until one yields text that normalizes to a price.
A source that raises or times out is logged and the next one is tried.

Each source runs on its own single worker. A call that times out keeps
running in the background, so that worker is abandoned and the source gets
a fresh one; a hung source never queues calls to the others.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from dailycook.domain.Ingredient import Ingredient
from dailycook.domain.errors import ExternalSourceFailure
from dailycook.logic.pricing.normalizer import NormalizedPrice, normalize_price
from dailycook.logic.pricing.sources import PriceSource
from dailycook.utilities.config import DEFAULT_CURRENCY, PRICE_LOOKUP_TIMEOUT

logger = logging.getLogger(__name__)

FOUND = "found"
MISS = "miss"
FAILED = "failed"


@dataclass
class LookupOutcome:
    status: str
    price: Optional[NormalizedPrice] = None
    currency: str = DEFAULT_CURRENCY
    source: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.status == FOUND


class PriceLookup:
    def __init__(self, sources: Sequence[PriceSource], timeout: float = PRICE_LOOKUP_TIMEOUT):
        self.sources: List[PriceSource] = list(sources)
        self.timeout = timeout
        self._executors: Dict[int, ThreadPoolExecutor] = {}

    def has_sources(self) -> bool:
        return bool(self.sources)

    def _executor_for(self, source: PriceSource) -> ThreadPoolExecutor:
        executor = self._executors.get(id(source))
        if executor is None:
            executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"price-{source.name}")
            self._executors[id(source)] = executor
        return executor

    def _abandon(self, source: PriceSource):
        executor = self._executors.pop(id(source), None)
        if executor is not None:
            executor.shutdown(wait=False, cancel_futures=True)

    def _call(self, source: PriceSource, fn, *args):
        future = self._executor_for(source).submit(fn, *args)
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeout:
            if not future.cancel():
                self._abandon(source)
            raise ExternalSourceFailure(source.name, f"timed out after {self.timeout}s")
        except ExternalSourceFailure:
            raise
        except Exception as e:
            raise ExternalSourceFailure(source.name, str(e)) from e

    def prepare(self, ingredients: Iterable[Ingredient]):
        """Give batch-capable sources a chance to fetch everything up front."""
        batch = list(ingredients)
        for source in self.sources:
            try:
                self._call(source, source.prepare, batch)
            except ExternalSourceFailure as e:
                logger.warning("Batch preparation failed for %s: %s", source.name, e)

    def lookup(self, ingredient: Ingredient) -> LookupOutcome:
        answered = False
        for source in self.sources:
            try:
                raw = self._call(source, source.fetch_raw_market_price, ingredient.name, ingredient.unit)
            except ExternalSourceFailure as e:
                logger.error("Error fetching price for %s from %s: %s", ingredient.name, source.name, e)
                continue
            answered = True
            if raw is None:
                logger.info("No product found for %s at %s", ingredient.name, source.name)
                continue
            price = normalize_price(raw.text, raw.unit or ingredient.unit)
            if price is None:
                logger.warning("Could not normalize price for %s from %s: %r", ingredient.name, source.name, raw.text)
                continue
            return LookupOutcome(FOUND, price, raw.currency or DEFAULT_CURRENCY, raw.source or source.name)
        return LookupOutcome(MISS if answered or not self.sources else FAILED)

    def close(self):
        for source in self.sources:
            self._abandon(source)
            closer = getattr(source, "close", None)
            if callable(closer):
                closer()
