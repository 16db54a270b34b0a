# --- path/bootstrap (keep this at the very top) ---
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
# --- end path/bootstrap ---

import unittest
from collections import Counter

from catalog import Barcode, Product, Quality
from errors import FailedTransactionError, InvalidStockRequestError
from inventory import BasicInventory, FancyInventory


class TestBasicInventory(unittest.TestCase):
    def setUp(self):
        self.inventory = BasicInventory()

    def test_add_single_and_exists(self):
        self.assertFalse(self.inventory.exists_product(Barcode.EGG))
        self.inventory.add_product(Barcode.EGG, Quality.REGULAR)
        self.inventory.add_product(Barcode.MILK, Quality.GOLD, 1)
        self.assertTrue(self.inventory.exists_product(Barcode.EGG))
        self.assertTrue(self.inventory.exists_product(Barcode.MILK))
        self.assertFalse(self.inventory.exists_product(Barcode.WOOL))

    def test_bulk_add_rejected_and_nothing_added(self):
        with self.assertRaises(InvalidStockRequestError):
            self.inventory.add_product(Barcode.EGG, Quality.REGULAR, 3)
        self.assertEqual(self.inventory.get_all_products(), [])

    def test_remove_takes_first_stored(self):
        self.inventory.add_product(Barcode.EGG, Quality.SILVER)
        self.inventory.add_product(Barcode.MILK, Quality.REGULAR)
        self.inventory.add_product(Barcode.EGG, Quality.GOLD)
        removed = self.inventory.remove_product(Barcode.EGG)
        self.assertEqual(removed, [Product(Barcode.EGG, Quality.SILVER)])
        self.assertEqual(
            self.inventory.get_all_products(),
            [Product(Barcode.MILK), Product(Barcode.EGG, Quality.GOLD)],
        )

    def test_remove_missing_returns_empty(self):
        self.assertEqual(self.inventory.remove_product(Barcode.JAM), [])
        self.assertEqual(self.inventory.remove_product(Barcode.JAM, 1), [])

    def test_remove_quantity_other_than_one_fails(self):
        self.inventory.add_product(Barcode.EGG, Quality.REGULAR)
        with self.assertRaises(FailedTransactionError):
            self.inventory.remove_product(Barcode.EGG, 2)
        self.assertTrue(self.inventory.exists_product(Barcode.EGG))

    def test_listing_is_a_copy_in_insertion_order(self):
        self.inventory.add_product(Barcode.WOOL, Quality.REGULAR)
        self.inventory.add_product(Barcode.EGG, Quality.REGULAR)
        listing = self.inventory.get_all_products()
        listing.clear()
        self.assertEqual([p.barcode for p in self.inventory.get_all_products()], [Barcode.WOOL, Barcode.EGG])


class TestFancyInventory(unittest.TestCase):
    def setUp(self):
        self.inventory = FancyInventory()

    def test_bulk_add_and_stocked_quantity(self):
        self.inventory.add_product(Barcode.EGG, Quality.REGULAR, 5)
        self.inventory.add_product(Barcode.EGG, Quality.GOLD)
        self.assertEqual(self.inventory.get_stocked_quantity(Barcode.EGG), 6)
        self.assertEqual(self.inventory.get_stocked_quantity(Barcode.MILK), 0)

    def test_listing_grouped_by_declaration_order(self):
        self.inventory.add_product(Barcode.WOOL, Quality.REGULAR)
        self.inventory.add_product(Barcode.EGG, Quality.SILVER)
        self.inventory.add_product(Barcode.JAM, Quality.REGULAR)
        self.inventory.add_product(Barcode.EGG, Quality.REGULAR)
        self.assertEqual(
            [p.barcode for p in self.inventory.get_all_products()],
            [Barcode.EGG, Barcode.EGG, Barcode.JAM, Barcode.WOOL],
        )

    def test_single_removal_picks_highest_quality(self):
        self.inventory.add_product(Barcode.MILK, Quality.SILVER)
        self.inventory.add_product(Barcode.MILK, Quality.IRIDIUM)
        self.inventory.add_product(Barcode.MILK, Quality.GOLD)
        self.assertEqual(self.inventory.remove_product(Barcode.MILK), [Product(Barcode.MILK, Quality.IRIDIUM)])

    def test_bulk_removal_in_non_increasing_quality(self):
        for quality in (Quality.SILVER, Quality.REGULAR, Quality.IRIDIUM, Quality.GOLD, Quality.SILVER):
            self.inventory.add_product(Barcode.JAM, quality)
        removed = self.inventory.remove_product(Barcode.JAM, 4)
        self.assertEqual(
            [p.quality for p in removed],
            [Quality.IRIDIUM, Quality.GOLD, Quality.SILVER, Quality.SILVER],
        )
        self.assertEqual(self.inventory.get_all_products(), [Product(Barcode.JAM, Quality.REGULAR)])

    def test_partial_removal_returns_what_is_available(self):
        self.inventory.add_product(Barcode.WOOL, Quality.REGULAR, 2)
        removed = self.inventory.remove_product(Barcode.WOOL, 5)
        self.assertEqual(len(removed), 2)
        self.assertFalse(self.inventory.exists_product(Barcode.WOOL))
        self.assertEqual(self.inventory.remove_product(Barcode.WOOL, 3), [])

    def test_zero_or_negative_removal_takes_nothing(self):
        self.inventory.add_product(Barcode.MILK, Quality.GOLD, 2)
        self.assertEqual(self.inventory.remove_product(Barcode.MILK, 0), [])
        self.assertEqual(self.inventory.remove_product(Barcode.MILK, -3), [])
        self.assertEqual(self.inventory.get_stocked_quantity(Barcode.MILK), 2)

    def test_stock_reflects_adds_minus_removes(self):
        operations = [
            ("add", Barcode.EGG, 4),
            ("add", Barcode.MILK, 2),
            ("remove", Barcode.EGG, 3),
            ("remove", Barcode.MILK, 5),
            ("add", Barcode.EGG, 1),
            ("remove", Barcode.JAM, 1),
        ]
        expected = Counter()
        for op, barcode, qty in operations:
            if op == "add":
                self.inventory.add_product(barcode, Quality.REGULAR, qty)
                expected[barcode] += qty
            else:
                removed = self.inventory.remove_product(barcode, qty)
                self.assertLessEqual(len(removed), qty)
                self.assertLessEqual(len(removed), expected[barcode])
                expected[barcode] -= len(removed)
        actual = Counter(p.barcode for p in self.inventory.get_all_products())
        self.assertEqual(actual, +expected)


if __name__ == "__main__":
    unittest.main(verbosity=2)
