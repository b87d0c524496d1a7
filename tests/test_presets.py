import unittest

from api_builder_studio.studio.models import HTTPMethod
from api_builder_studio.studio.presets import PRESET_CATALOG, find_preset, list_categories


class TestPresetCatalog(unittest.TestCase):

    def test_categories(self):
        categories = list_categories()
        self.assertEqual(list(categories), ["Google APIs", "SEO Tools"])
        self.assertEqual(len(categories["Google APIs"]), 8)
        self.assertIn("Semrush API - Domain Overview", categories["SEO Tools"])

    def test_every_preset_materializes(self):
        for presets in PRESET_CATALOG.values():
            for preset in presets:
                self.assertIsNotNone(find_preset(preset["name"]))

    def test_find_preset(self):
        preset = find_preset("Google Analytics")
        self.assertEqual(preset.category, "Google APIs")
        config = preset.endpoint_config
        self.assertEqual(config.method, HTTPMethod.POST)
        self.assertEqual(config.path, "/properties/GA_PROPERTY_ID:runReport")
        self.assertEqual([h.key for h in config.headers], ["Content-Type", "Authorization"])
        self.assertIn('"activeUsers"', config.body)
        self.assertTrue(config.auth_required)

    def test_lookup_returns_fresh_configs(self):
        first = find_preset("Ahrefs API - Site Explorer").endpoint_config
        first.query_params[0].value = "changed.com"
        second = find_preset("Ahrefs API - Site Explorer").endpoint_config
        self.assertEqual(second.query_params[0].value, "example.com")
        self.assertEqual(second.cache_ttl, 3600)

    def test_unknown_preset(self):
        self.assertIsNone(find_preset("Unknown API"))

    def test_custom_catalog(self):
        catalog = {"Local": [{"name": "Ping", "endpointConfig": {"path": "/ping"}}]}
        self.assertEqual(find_preset("Ping", catalog).endpoint_config.path, "/ping")
        self.assertIsNone(find_preset("Google Analytics", catalog))


if __name__ == '__main__':
    unittest.main()
