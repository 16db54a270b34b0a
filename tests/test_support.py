# --- path/bootstrap (keep this at the very top) ---
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
# --- end path/bootstrap ---

import json
import logging
import tempfile
import unittest

import logging_config
from catalog import Barcode, Product, Quality, parse_barcode, parse_quality
from errors import InvalidStockRequestError, UnknownProductError
from metrics import Counter, Histogram, generate_metrics_text, reset_metrics
from settings import Settings


class TestCatalog(unittest.TestCase):
    def test_barcode_data(self):
        self.assertEqual(Barcode.EGG.base_price, 50)
        self.assertEqual(Barcode.MILK.display_name, "Milk")
        self.assertEqual([b.ordinal for b in Barcode], [0, 1, 2, 3])
        self.assertEqual(Barcode.WOOL.qualities[-1], Quality.IRIDIUM)

    def test_quality_order(self):
        self.assertLess(Quality.REGULAR.ordinal, Quality.SILVER.ordinal)
        self.assertLess(Quality.GOLD.ordinal, Quality.IRIDIUM.ordinal)

    def test_product_equality_and_str(self):
        self.assertEqual(Product(Barcode.EGG, Quality.GOLD), Product(Barcode.EGG, Quality.GOLD))
        self.assertNotEqual(Product(Barcode.EGG, Quality.GOLD), Product(Barcode.EGG))
        self.assertEqual(str(Product(Barcode.JAM)), "Jam: 670c *REGULAR*")

    def test_parsing(self):
        self.assertIs(parse_barcode(" Milk "), Barcode.MILK)
        self.assertIs(parse_quality("gold"), Quality.GOLD)
        with self.assertRaises(UnknownProductError):
            parse_barcode("pie")
        with self.assertRaises(InvalidStockRequestError):
            parse_quality("diamond")


class TestSettings(unittest.TestCase):
    def test_defaults(self):
        settings = Settings.from_env({})
        self.assertFalse(settings.fancy_inventory)
        self.assertEqual(settings.log_dir, "logs")
        self.assertEqual(settings.numeric_log_level, logging.INFO)

    def test_environment_and_overrides(self):
        settings = Settings.from_env({"FARM_FANCY_INVENTORY": "Yes", "FARM_LOG_LEVEL": "debug"})
        self.assertTrue(settings.fancy_inventory)
        self.assertEqual(settings.numeric_log_level, logging.DEBUG)
        changed = settings.with_overrides(fancy_inventory=False, log_dir=None)
        self.assertFalse(changed.fancy_inventory)
        self.assertEqual(changed.log_dir, "logs")

    def test_unknown_level_falls_back_to_info(self):
        self.assertEqual(Settings(log_level="LOUD").numeric_log_level, logging.INFO)


class TestMetrics(unittest.TestCase):
    def setUp(self):
        reset_metrics()

    def test_counter_and_exposition(self):
        counter = Counter("test_units_total", "Units in tests", ["product"])
        counter.inc(2, product="egg")
        counter.inc(product="egg")
        self.assertEqual(counter.value(product="egg"), 3)
        self.assertIn('test_units_total{product="egg"} 3', generate_metrics_text())
        with self.assertRaises(ValueError):
            counter.inc(-1, product="egg")

    def test_histogram_buckets_are_cumulative(self):
        histogram = Histogram("test_sizes", "Sizes in tests", [], buckets=[1, 5])
        for value in (1, 3, 7):
            histogram.observe(value)
        text = "\n".join(histogram.to_prometheus())
        self.assertIn('test_sizes_bucket{le="1.0"} 1', text)
        self.assertIn('test_sizes_bucket{le="5.0"} 2', text)
        self.assertIn('test_sizes_bucket{le="+Inf"} 3', text)
        self.assertIn("test_sizes_count 3", text)
        self.assertEqual(histogram.count(), 3)


def reset_root_logger():
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


class TestLoggingConfig(unittest.TestCase):
    def tearDown(self):
        reset_root_logger()

    def test_json_lines_with_context(self):
        with tempfile.TemporaryDirectory() as log_dir:
            logging_config.configure_logging(log_dir, logging.INFO, console=False)
            logging.getLogger("farm").info(
                "Transaction recorded",
                extra={"customer": "Sam", "transaction_kind": "flat", "extra": {"units": 2}},
            )
            reset_root_logger()
            lines = (Path(log_dir) / logging_config.LOG_FILE_NAME).read_text(encoding="utf-8").splitlines()
        record = json.loads(lines[-1])
        self.assertEqual(record["message"], "Transaction recorded")
        self.assertEqual(record["level"], "INFO")
        self.assertEqual(record["customer"], "Sam")
        self.assertEqual(record["transaction_kind"], "flat")
        self.assertEqual(record["units"], 2)


if __name__ == "__main__":
    unittest.main(verbosity=2)
