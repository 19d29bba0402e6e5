import json
import unittest
from types import SimpleNamespace

import httpx

from dailycook.domain.errors import ExternalSourceFailure
from dailycook.logic.pricing.ai_prices import _parse_prices
from dailycook.logic.pricing.normalizer import normalize_price
from dailycook.logic.pricing.sources import (
    AIPriceSource,
    MarketScraperSource,
    extract_price_from_html,
    price_text_for,
)

SEARCH_PAGE = """
<html><body>
  <div class="product">
    <h3>Thịt bò úc</h3>
    <div class="product-price">150.000₫</div>
    <span class="product-unit">/kg</span>
  </div>
</body></html>
"""


class TestMarketScraper(unittest.TestCase):

    def _source(self, handler):
        client = httpx.Client(transport=httpx.MockTransport(handler))
        return MarketScraperSource(base_url="https://market.test", client=client)

    def test_extract_price_block(self):
        price, unit = extract_price_from_html(SEARCH_PAGE)
        self.assertEqual(price, "150.000đ")
        self.assertEqual(unit, "/kg")

    def test_fetch_uses_keyword(self):
        seen = []

        def handler(request):
            seen.append(request.url.params["key"])
            return httpx.Response(200, text=SEARCH_PAGE)

        raw = self._source(handler).fetch_raw_market_price("Gạo tẻ", "kg")
        self.assertEqual(seen, ["gạo"])
        self.assertEqual(raw.text, "150.000đ/kg")
        price = normalize_price(raw.text, raw.unit)
        self.assertEqual((price.price_per_unit, price.unit), (150, "g"))

    def test_nested_price_markup(self):
        page = """
        <ul><li class="product">
          <p class="box-price"><strong>22.000</strong><sup>₫</sup></p>
          <p class="weight">/ 500 g</p>
        </li></ul>
        """
        price, unit = extract_price_from_html(page)
        self.assertEqual(unit, "/500g")
        self.assertEqual(normalize_price(price + unit, "g").price_per_unit, 44)

    def test_loose_price_in_text(self):
        price, unit = extract_price_from_html("<div><b>Cá hồi</b> chỉ 350.000₫/kg hôm nay</div>")
        self.assertEqual((price, unit), ("350.000đ/kg", ""))

    def test_no_product_is_none(self):
        source = self._source(lambda request: httpx.Response(200, text="<html>Không tìm thấy</html>"))
        self.assertIsNone(source.fetch_raw_market_price("Rau muống", "g"))

    def test_http_error_raises_failure(self):
        source = self._source(lambda request: httpx.Response(503))
        with self.assertRaises(ExternalSourceFailure):
            source.fetch_raw_market_price("Rau muống", "g")


class FakeCompletions:
    def __init__(self, payloads):
        self.payloads = list(payloads)
        self.calls = 0
        self.timeouts = []

    def create(self, **kwargs):
        self.calls += 1
        self.timeouts.append(kwargs.get("timeout"))
        content = self.payloads.pop(0)
        if isinstance(content, Exception):
            raise content
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def fake_openai(*payloads):
    completions = FakeCompletions(payloads)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


class TestAIPriceSource(unittest.TestCase):

    def test_batch_prepare_then_cached_answers(self):
        body = json.dumps({"prices": [
            {"name": "Thịt bò", "unit": "g", "pricePerUnit": 0.25, "currency": "VND", "source": "Winmart"},
        ]})
        client, completions = fake_openai(body)
        source = AIPriceSource(client=client, model="test")
        source.prepare([SimpleNamespace(name="Thịt bò", unit="g"), SimpleNamespace(name="Nghệ", unit="g")])

        raw = source.fetch_raw_market_price("Thịt bò", "g")
        self.assertEqual(normalize_price(raw.text, raw.unit).price_per_unit, 0.25)
        self.assertEqual(raw.source, "Winmart")
        self.assertIsNone(source.fetch_raw_market_price("Nghệ", "g"))
        self.assertEqual(completions.calls, 1)

    def test_requests_share_one_deadline(self):
        client, completions = fake_openai(RuntimeError("boom"), RuntimeError("boom"), RuntimeError("boom"))
        source = AIPriceSource(client=client, retry_count=2, timeout=5)
        with self.assertRaises(ExternalSourceFailure):
            source.fetch_raw_market_price("Thịt bò", "g")
        self.assertEqual(completions.calls, 3)
        self.assertTrue(all(0 < t <= 5 for t in completions.timeouts))
        self.assertEqual(completions.timeouts, sorted(completions.timeouts, reverse=True))

    def test_no_attempt_after_deadline(self):
        client, completions = fake_openai(RuntimeError("boom"))
        source = AIPriceSource(client=client, retry_count=2, timeout=0)
        with self.assertRaises(ExternalSourceFailure):
            source.fetch_raw_market_price("Thịt bò", "g")
        self.assertEqual(completions.calls, 0)

    def test_retries_then_fails(self):
        client, completions = fake_openai(RuntimeError("boom"), RuntimeError("boom"))
        source = AIPriceSource(client=client, retry_count=1)
        with self.assertRaises(ExternalSourceFailure):
            source.fetch_raw_market_price("Thịt bò", "g")
        self.assertEqual(completions.calls, 2)

    def test_disabled_without_client(self):
        source = AIPriceSource(client=None)
        source._client = None
        self.assertIsNone(source.fetch_raw_market_price("Thịt bò", "g"))

    def test_parse_prices_tolerates_fences(self):
        text = '```json\n[{"name": "Tỏi", "pricePerUnit": 80, "unit": "g",},]\n```'
        prices = _parse_prices(text)
        self.assertEqual(prices["tỏi"]["pricePerUnit"], 80)
        self.assertEqual(prices["tỏi"]["currency"], "VND")

    def test_price_text_for(self):
        self.assertEqual(price_text_for(120.5, "kg"), "120500đ/1000kg")
        self.assertEqual(price_text_for(15000, "bó"), "15000đ")


if __name__ == '__main__':
    unittest.main()
