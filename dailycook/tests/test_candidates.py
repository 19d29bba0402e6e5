import unittest

from dailycook.infra.Recipe_Repository import RecipeRepository
from dailycook.logic.menu.candidates import accepted_tags, pick_candidates
from dailycook.tests.support import TempDataDir, recipe


class TestPickCandidates(unittest.TestCase):

    def setUp(self):
        self.tmp = TempDataDir()
        self.tmp.seed(recipes=[
            recipe("r1", "Canh chua cá", ["Soup"], kcal=250, likes=10, created_at="2024-01-01T00:00:00"),
            recipe("r2", "Canh bí", ["Soup"], kcal=120, likes=10, created_at="2024-03-01T00:00:00"),
            recipe("r3", "Đậu hũ sốt cà", ["Vegan"], kcal=300, likes=50),
            recipe("r4", "Bún bò Huế", ["Central"], kcal=650, likes=5),
            recipe("r5", "Gà luộc", ["Steamed"], kcal=700, likes=1),
            recipe("r6", "Canh cá rô", ["Soup"], kcal=None, likes=0),
        ])
        self.repo = RecipeRepository(self.tmp.file("recipes.json"))

    def tearDown(self):
        self.tmp.cleanup()

    def ids(self, recipes):
        return [r.id for r in recipes]

    def test_or_match_ordered_by_likes_then_recency(self):
        pool = pick_candidates(self.repo, ["Soup"], [])
        self.assertEqual(self.ids(pool), ["r2", "r1", "r6"])

    def test_options_widen_accepted_tags(self):
        pool = pick_candidates(self.repo, ["Soup"], [], vegetarian=True, region="Central")
        self.assertEqual(set(self.ids(pool)), {"r1", "r2", "r3", "r4", "r6"})
        self.assertIn("Steamed", accepted_tags(["Soup"], eat_clean=True))

    def test_avoid_names_case_insensitive(self):
        pool = pick_candidates(self.repo, ["Soup"], ["CÁ"])
        self.assertEqual(self.ids(pool), ["r2"])

    def test_limit_applies_after_filtering(self):
        pool = pick_candidates(self.repo, ["Soup"], ["bí"], limit=1)
        self.assertEqual(self.ids(pool), ["r1"])

    def test_diet_mode_sorts_by_kcal_and_caps(self):
        pool = pick_candidates(self.repo, ["Soup", "Central", "Steamed"], [], diet_mode=True)
        self.assertEqual(self.ids(pool), ["r2", "r1", "r6"])


if __name__ == '__main__':
    unittest.main()
