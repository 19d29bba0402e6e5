import unittest
from datetime import date, datetime

from dailycook.domain.Ingredient import Ingredient
from dailycook.domain.MealPlan import MealPlan, Slots
from dailycook.domain.ShoppingList import ShoppingList, ShoppingListItem
from dailycook.domain.errors import ValidationError
from dailycook.tests.support import local_dt
from dailycook.utilities.dates import as_date, week_window


class TestSlots(unittest.TestCase):

    def test_untyped_mapping(self):
        slots = Slots.from_dict({"breakfast": "r1", "lunch": ["r2", 3], "extra": ["x"]})
        self.assertEqual(slots.to_dict(), {"breakfast": [], "lunch": ["r2", "3"], "dinner": []})

    def test_unknown_slot(self):
        with self.assertRaises(ValidationError):
            Slots().set("brunch", ["r1"])

    def test_meal_plan_round_trip(self):
        plan = MealPlan("p1", "u1", date(2024, 1, 2), Slots(lunch=["r1"]), "note")
        self.assertEqual(MealPlan.from_dict(plan.to_dict()).slots, plan.slots)


class TestIngredientFreshness(unittest.TestCase):

    def test_freshness_is_latest_stamp(self):
        ing = Ingredient("i1", "Tỏi", "g", price_updated_at=local_dt(2024, 5, 1), last_checked_at=local_dt(2024, 5, 3))
        self.assertEqual(ing.freshness_stamp(), local_dt(2024, 5, 3))
        self.assertIsNone(Ingredient("i2", "Sả").freshness_stamp())
        self.assertFalse(Ingredient("i2", "Sả").has_price())

    def test_naive_stamp_compares_with_aware(self):
        ing = Ingredient("i1", "Tỏi", "g", price_updated_at=datetime(2024, 5, 2, 8, 0),
                         last_checked_at=local_dt(2024, 5, 1, 8, 0))
        self.assertEqual(ing.freshness_stamp(), local_dt(2024, 5, 2, 8, 0))


class TestShoppingListItem(unittest.TestCase):

    def test_cost_rounded(self):
        item = ShoppingListItem("i1", "Tỏi", "g", 3)
        item.add_quantity(0.5)
        item.attach_price(20.004, "VND", None)
        self.assertEqual(item.estimated_cost, 70.01)
        self.assertEqual(ShoppingList("x", [item, ShoppingListItem("i2", "Sả")]).estimated_total(), 70.01)
        self.assertIsNone(ShoppingList("x", [ShoppingListItem("i2", "Sả")]).estimated_total())


class TestDates(unittest.TestCase):

    def test_as_date(self):
        self.assertEqual(as_date("2024-01-02"), date(2024, 1, 2))
        self.assertEqual(as_date("2024-01-02T23:10:00"), date(2024, 1, 2))
        for bad in ("", None, "02-01-2024", "soon"):
            with self.assertRaises(ValidationError):
                as_date(bad)

    def test_week_window_starts_monday(self):
        self.assertEqual(week_window(date(2024, 1, 7)), (date(2024, 1, 1), date(2024, 1, 7)))
        self.assertEqual(week_window(date(2024, 1, 8)), (date(2024, 1, 8), date(2024, 1, 14)))


if __name__ == '__main__':
    unittest.main()
