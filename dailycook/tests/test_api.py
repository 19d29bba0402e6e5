import random
import unittest

from fastapi.testclient import TestClient

from dailycook.api.api_run import app
from dailycook.api.deps import Services, get_services
from dailycook.tests.support import FakeSource, TempDataDir, ingredient, recipe

HEADERS = {"X-User-Id": "u1"}


class TestMealPlanAPI(unittest.TestCase):

    def setUp(self):
        self.tmp = TempDataDir()
        self.tmp.seed(
            recipes=[
                recipe("r1", "Phở bò", ["Soup"], kcal=450, items=[("beef", 200, None)]),
                recipe("r2", "Cơm tấm", ["RiceSide"], kcal=650, items=[("beef", 150, None), ("rice", 200, None)]),
                recipe("r3", "Rau muống xào", ["StirFry"], kcal=120, items=[("greens", 300, None)]),
            ],
            ingredients=[
                ingredient("beef", "Thịt bò", "g"),
                ingredient("rice", "Gạo tẻ", "kg"),
                ingredient("greens", "Rau muống", "g"),
            ],
            preferences={"u1": {"daily_kcal_target": 2000}},
        )
        self.source = FakeSource({"Thịt bò": "250.000đ/kg"})
        self.services = Services(self.tmp.path, sources=[self.source], rng=random.Random(5), delay=0)
        app.dependency_overrides[get_services] = lambda: self.services
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.services.close()
        self.tmp.cleanup()

    def test_upsert_and_read_range(self):
        resp = self.client.put('/api/mealplan', json={"date": "2024-01-02", "slots": {"lunch": ["r1"]}},
                               headers=HEADERS)
        self.assertEqual(resp.status_code, 200)
        plan_id = resp.json()["id"]
        resp = self.client.get('/api/mealplan', params={"start": "2024-01-01", "end": "2024-01-07"}, headers=HEADERS)
        self.assertEqual([p["id"] for p in resp.json()], [plan_id])
        # Another user does not see it
        resp = self.client.get(f'/api/mealplan/{plan_id}', headers={"X-User-Id": "u2"})
        self.assertEqual(resp.status_code, 404)

    def test_unknown_recipe_is_bad_request(self):
        resp = self.client.put('/api/mealplan', json={"date": "2024-01-02", "slots": {"lunch": ["nope"]}},
                               headers=HEADERS)
        self.assertEqual(resp.status_code, 400)

    def test_invalid_date_is_bad_request(self):
        resp = self.client.get('/api/mealplan', params={"start": "yesterday"}, headers=HEADERS)
        self.assertEqual(resp.status_code, 400)

    def test_patch_slot(self):
        plan_id = self.client.put('/api/mealplan', json={"date": "2024-01-02", "slots": {"lunch": ["r1"]}},
                                  headers=HEADERS).json()["id"]
        resp = self.client.patch(f'/api/mealplan/{plan_id}/slot', json={"slot": "dinner", "add": "r3"},
                                 headers=HEADERS)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["slots"], {"breakfast": [], "lunch": ["r1"], "dinner": ["r3"]})

    def test_copy_week(self):
        self.client.put('/api/mealplan', json={"date": "2024-01-02", "slots": {"lunch": ["r1"]}}, headers=HEADERS)
        resp = self.client.post('/api/mealplan/copy-week', json={"from": "2024-01-01", "to": "2024-01-08"},
                                headers=HEADERS)
        self.assertEqual(resp.json(), {"copied": 1})

    def test_suggest_menu_persists(self):
        resp = self.client.post('/api/mealplan/suggest-menu', json={"date": "2024-01-03", "slot": "lunch"},
                                headers=HEADERS)
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        ids = [d["id"] for d in data["dishes"]]
        self.assertEqual(sorted(ids), ["r1", "r2", "r3"])
        plans = self.client.get('/api/mealplan', params={"start": "2024-01-03", "end": "2024-01-03"},
                                headers=HEADERS).json()
        self.assertEqual(plans[0]["slots"]["lunch"], ids)

    def test_suggest_meal_no_match(self):
        resp = self.client.post('/api/mealplan/suggest', json={"diet_type": "vegan"}, headers=HEADERS)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["recipes"], [])
        self.assertTrue(resp.json()["message"])

    def test_shopping_from_range_is_priced(self):
        self.client.put('/api/mealplan', json={"date": "2024-01-02", "slots": {"lunch": ["r1"], "dinner": ["r2"]}},
                        headers=HEADERS)
        resp = self.client.get('/api/mealplan/shopping/from-range',
                               params={"start": "2024-01-01", "end": "2024-01-07"}, headers=HEADERS)
        self.assertEqual(resp.status_code, 200)
        items = {i["ingredient_id"]: i for i in resp.json()["items"]}
        self.assertEqual(items["beef"]["qty"], 350)
        self.assertEqual(items["beef"]["estimated_cost"], 87500.0)
        self.assertNotIn("estimated_cost", items["rice"])

    def test_shopping_list_from_recipes(self):
        resp = self.client.post('/api/shopping-list/from-recipes', json={"recipe_ids": ["r1", "r3"]},
                                headers=HEADERS)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["title"], "Shopping list")
        self.assertEqual(len(self.client.get('/api/shopping-list', headers=HEADERS).json()), 1)

    def test_update_all_prices(self):
        resp = self.client.post('/api/price-scraper/update-all')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"success": True, "updated": 1, "unchecked_but_stamped": 2, "failed": 0})

    def test_health_lists_price_sources(self):
        resp = self.client.get('/api/health')
        self.assertEqual(resp.json(), {"status": "ok", "price_sources": [self.source.name]})

    def test_events_endpoint_lists_price_events(self):
        with TestClient(app) as client:
            client.post('/api/price-scraper/update-all')
            data = client.get('/api/events').json()
        types = {e["type"] for e in data["events"]}
        self.assertIn("price.updated", types)
        self.assertGreaterEqual(data["next_cursor"], 1)


if __name__ == '__main__':
    unittest.main()
