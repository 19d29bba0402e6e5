import unittest
from datetime import datetime

from dailycook.infra.Ingredient_Repository import IngredientRepository
from dailycook.logic.pricing.lookup import PriceLookup
from dailycook.logic.pricing.throttle import PriceThrottle
from dailycook.tests.support import BrokenSource, FakeSource, TempDataDir, ingredient, local_dt, write_json


class TestPriceThrottle(unittest.TestCase):

    def setUp(self):
        self.tmp = TempDataDir()
        self.yesterday = local_dt(2024, 5, 1, 20, 0)
        self.tmp.seed(ingredients=[
            ingredient("i1", "Thịt bò", "kg", price=200.0, currency="VND", updated_at=self.yesterday),
            ingredient("i2", "Rau muống", "g"),
            ingredient("i3", "Hành lá", "g", price=50.0, currency="VND",
                       updated_at=local_dt(2024, 5, 2, 1, 0)),
        ])
        self.repo = IngredientRepository(self.tmp.file("ingredients.json"))
        self.now = local_dt(2024, 5, 2, 9, 30)

    def tearDown(self):
        self.tmp.cleanup()

    def _throttle(self, *sources):
        return PriceThrottle(self.repo, PriceLookup(sources), clock=lambda: self.now)

    def test_only_stale_ingredients_are_looked_up(self):
        source = FakeSource({"Thịt bò": "240.000đ/kg"})
        updated = self._throttle(source).ensure_fresh_prices(["i1", "i2", "i3"])
        self.assertEqual(updated, ["i1"])
        self.assertEqual(sorted(source.calls), ["Rau muống", "Thịt bò"])
        self.assertEqual(self.repo.get_ingredient("i1").price_per_unit, 240)

    def test_twice_same_day_single_lookup(self):
        source = FakeSource({"Thịt bò": "240.000đ/kg"})
        throttle = self._throttle(source)
        throttle.ensure_fresh_prices(["i1", "i2"])
        self.now = local_dt(2024, 5, 2, 18, 0)
        throttle.ensure_fresh_prices(["i1", "i2"])
        self.assertEqual(source.calls.count("Thịt bò"), 1)
        self.assertEqual(source.calls.count("Rau muống"), 1)

    def test_clean_miss_stamps_only_last_checked(self):
        self._throttle(FakeSource({})).ensure_fresh_prices(["i1"])
        beef = self.repo.get_ingredient("i1")
        self.assertEqual(beef.price_per_unit, 200.0)
        self.assertEqual(beef.price_updated_at, self.yesterday)
        self.assertEqual(beef.last_checked_at, self.now)

    def test_total_failure_writes_nothing(self):
        source = BrokenSource()
        throttle = self._throttle(source)
        self.assertEqual(throttle.ensure_fresh_prices(["i1", "i2"]), [])
        beef = self.repo.get_ingredient("i1")
        self.assertEqual(beef.price_updated_at, self.yesterday)
        self.assertIsNone(beef.last_checked_at)
        self.assertIsNone(self.repo.get_ingredient("i2").last_checked_at)
        # Not suppressed: a later call retries
        throttle.ensure_fresh_prices(["i1", "i2"])
        self.assertEqual(len(source.calls), 4)

    def test_new_day_is_stale_again(self):
        source = FakeSource({})
        throttle = self._throttle(source)
        throttle.ensure_fresh_prices(["i2"])
        self.now = local_dt(2024, 5, 3, 0, 5)
        throttle.ensure_fresh_prices(["i2"])
        self.assertEqual(source.calls, ["Rau muống", "Rau muống"])

    def test_naive_stored_stamp_is_local_time(self):
        stored_at = datetime(2024, 5, 1, 8, 0)
        write_json(self.tmp.file("ingredients.json"),
                   [ingredient("i4", "Sả", "g", price=30.0, currency="VND", updated_at=stored_at)])
        source = FakeSource({})
        throttle = self._throttle(source)
        throttle.ensure_fresh_prices(["i4"])
        self.now = local_dt(2024, 5, 3, 9, 0)
        throttle.ensure_fresh_prices(["i4"])
        self.now = local_dt(2024, 5, 3, 18, 0)
        throttle.ensure_fresh_prices(["i4"])
        self.assertEqual(source.calls, ["Sả", "Sả"])
        lemongrass = self.repo.get_ingredient("i4")
        self.assertEqual(lemongrass.price_updated_at, stored_at)
        self.assertEqual(lemongrass.last_checked_at, local_dt(2024, 5, 3, 9, 0))

    def test_no_sources_skips(self):
        self.assertEqual(self._throttle().ensure_fresh_prices(["i1"]), [])
        self.assertIsNone(self.repo.get_ingredient("i1").last_checked_at)


if __name__ == '__main__':
    unittest.main()
