import unittest

import support  # noqa: F401

from utils.config import DB_PATH, OWNER_PASSPHRASE, SEED_SIZE, load_settings


class LoadSettingsTestCase(unittest.TestCase):
    def test_defaults(self):
        settings = load_settings({})
        self.assertEqual(settings.db_path, DB_PATH)
        self.assertEqual(settings.owner_passphrase, OWNER_PASSPHRASE)
        self.assertEqual(settings.seed_size, SEED_SIZE)
        self.assertFalse(settings.legacy_product_ids)
        self.assertFalse(settings.debug)
        self.assertIsNone(settings.log_file)

    def test_environment_overrides(self):
        settings = load_settings(
            {
                "ATELIER_DB_PATH": "/tmp/shop.sqlite",
                "ATELIER_OWNER_PASSPHRASE": "open sesame",
                "ATELIER_SEED_SIZE": "12",
                "ATELIER_LEGACY_PRODUCT_IDS": "yes",
                "DEBUG": "1",
                "ATELIER_LOG_FILE": "atelier.log",
            }
        )
        self.assertEqual(settings.db_path, "/tmp/shop.sqlite")
        self.assertEqual(settings.owner_passphrase, "open sesame")
        self.assertEqual(settings.seed_size, 12)
        self.assertTrue(settings.legacy_product_ids)
        self.assertTrue(settings.debug)
        self.assertEqual(settings.log_file, "atelier.log")

    def test_bad_seed_size_falls_back(self):
        self.assertEqual(load_settings({"ATELIER_SEED_SIZE": "lots"}).seed_size, SEED_SIZE)
        self.assertEqual(load_settings({"ATELIER_SEED_SIZE": "-3"}).seed_size, 0)


if __name__ == "__main__":
    unittest.main()
