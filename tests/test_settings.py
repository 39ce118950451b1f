import unittest

from blogcms.shared.settings import Settings
from blogcms.specs.common.errors import ConfigurationError

BASE_ENV = {
    "COSMOS_DB_CONNECTION_STRING": "AccountEndpoint=https://example.documents.azure.com:443/;AccountKey=a2V5;",
    "COSMOS_DB_NAME": "blog",
}


class SettingsTests(unittest.TestCase):
    def test_defaults(self):
        settings = Settings.from_env(BASE_ENV)

        self.assertEqual(settings.database_name, "blog")
        self.assertEqual(
            settings.container_names,
            {"posts": "posts", "categories": "categories", "labels": "labels"},
        )
        self.assertEqual(settings.posts_page_size, 100)
        self.assertEqual(settings.tag_sync_max_attempts, 5)
        self.assertEqual(settings.retry_total, 3)

    def test_container_overrides_and_tuning(self):
        env = {
            **BASE_ENV,
            "COSMOS_DB_CONTAINER_POSTS": "blog-posts",
            "POSTS_PAGE_SIZE": "25",
            "TAG_SYNC_MAX_ATTEMPTS": "2",
            "COSMOS_DB_RETRY_TOTAL": "0",
        }
        settings = Settings.from_env(env)

        self.assertEqual(settings.container_names["posts"], "blog-posts")
        self.assertEqual(settings.container_names["labels"], "labels")
        self.assertEqual(settings.posts_page_size, 25)
        self.assertEqual(settings.tag_sync_max_attempts, 2)
        self.assertEqual(settings.retry_total, 0)

    def test_endpoint_without_connection_string(self):
        settings = Settings.from_env({"COSMOS_DB_ENDPOINT": "https://example.documents.azure.com:443/", "COSMOS_DB_NAME": "blog"})

        self.assertIsNone(settings.connection_string)
        self.assertIsNone(settings.key)
        self.assertEqual(settings.endpoint, "https://example.documents.azure.com:443/")

    def test_missing_values_raise_configuration_error(self):
        with self.assertRaises(ConfigurationError):
            Settings.from_env({"COSMOS_DB_NAME": "blog"})
        with self.assertRaises(ConfigurationError):
            Settings.from_env({"COSMOS_DB_CONNECTION_STRING": BASE_ENV["COSMOS_DB_CONNECTION_STRING"]})

    def test_bad_integers_raise_configuration_error(self):
        with self.assertRaises(ConfigurationError):
            Settings.from_env({**BASE_ENV, "POSTS_PAGE_SIZE": "many"})
        with self.assertRaises(ConfigurationError):
            Settings.from_env({**BASE_ENV, "TAG_SYNC_MAX_ATTEMPTS": "0"})


if __name__ == "__main__":
    unittest.main()
