import unittest

from dailycook.logic.pricing.normalizer import canonical_unit, keyword_for, normalize_price


class TestNormalizePrice(unittest.TestCase):

    def test_embedded_kilogram(self):
        price = normalize_price("150.000đ/kg", "kg")
        self.assertEqual(price.price_per_unit, 150)
        self.assertEqual(price.unit, "g")

    def test_embedded_quantity(self):
        price = normalize_price("22.000đ/500g", "g")
        self.assertEqual(price.price_per_unit, 44)
        self.assertEqual(price.unit, "g")

    def test_declared_unit_is_relabelled_not_rescaled(self):
        price = normalize_price("89.000đ", "kg")
        self.assertEqual(price.price_per_unit, 89000)
        self.assertEqual(price.unit, "g")

    def test_litre_to_millilitre(self):
        price = normalize_price("45.000đ/lít", None)
        self.assertEqual(price.price_per_unit, 45)
        self.assertEqual(price.unit, "ml")

    def test_atomic_units(self):
        price = normalize_price("35.000 đ / 2 chai", None)
        self.assertEqual(price.price_per_unit, 17500)
        self.assertEqual(price.unit, "chai")
        self.assertEqual(normalize_price("12.000đ/gói", None).unit, "gói")

    def test_single_dot_is_thousands_separator(self):
        self.assertEqual(normalize_price("12.50", "g").price_per_unit, 1250)
        self.assertEqual(normalize_price("1,250,000đ", "g").price_per_unit, 1250000)

    def test_rounds_to_two_places(self):
        self.assertEqual(normalize_price("10.000đ/3g", None).price_per_unit, 3333.33)

    def test_misses(self):
        self.assertIsNone(normalize_price("", "g"))
        self.assertIsNone(normalize_price(None, "g"))
        self.assertIsNone(normalize_price("Liên hệ", "g"))
        self.assertIsNone(normalize_price("0đ", "g"))
        self.assertIsNone(normalize_price("10.000đ/0g", "g"))

    def test_unknown_unit_defaults_to_grams(self):
        self.assertEqual(normalize_price("20.000đ", "bó").unit, "g")
        self.assertEqual(normalize_price("20.000đ", None).unit, "g")


class TestUnitsAndKeywords(unittest.TestCase):

    def test_canonical_unit(self):
        self.assertEqual(canonical_unit("kg"), "g")
        self.assertEqual(canonical_unit("Lít"), "ml")
        self.assertEqual(canonical_unit("500 ml"), "ml")
        self.assertEqual(canonical_unit("chai"), "chai")
        self.assertEqual(canonical_unit("quả"), "g")
        self.assertEqual(canonical_unit(None), "g")

    def test_keyword_mapping(self):
        self.assertEqual(keyword_for("Gạo tẻ"), "gạo")
        self.assertEqual(keyword_for(" Cà chua "), "cà chua")


if __name__ == '__main__':
    unittest.main()
