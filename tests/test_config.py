import unittest

from courtside.config import AppConfig, ConfigurationError
from courtside.services import (
    HttpDocumentStore, InMemoryDocumentStore, JsonFileDocumentStore, create_document_store
)


class AppConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        config = AppConfig.from_env({})
        self.assertEqual(config.store_backend, "json")
        self.assertEqual(config.port, 7122)
        self.assertEqual(config.default_user_id, "local")
        self.assertEqual(config.tick_interval, 1.0)

    def test_reads_environment(self) -> None:
        config = AppConfig.from_env({
            "COURTSIDE_STORE": "HTTP",
            "COURTSIDE_STORE_URL": "https://docs.example.com",
            "COURTSIDE_PORT": "8080",
            "COURTSIDE_LOG_LEVEL": "debug",
            "COURTSIDE_TICK_INTERVAL": "0.5",
        })
        self.assertEqual(config.store_backend, "http")
        self.assertEqual(config.port, 8080)
        self.assertEqual(config.log_level, "DEBUG")
        self.assertEqual(config.tick_interval, 0.5)

    def test_invalid_values(self) -> None:
        bad_envs = [
            {"COURTSIDE_STORE": "sqlite"},
            {"COURTSIDE_STORE": "http"},
            {"COURTSIDE_PORT": "eighty"},
            {"COURTSIDE_PORT": "70000"},
            {"COURTSIDE_TICK_INTERVAL": "0"},
            {"COURTSIDE_LOG_LEVEL": "LOUD"},
        ]
        for env in bad_envs:
            with self.subTest(env=env):
                with self.assertRaises(ConfigurationError):
                    AppConfig.from_env(env)

    def test_store_backends(self) -> None:
        self.assertIsInstance(create_document_store(AppConfig(store_backend="memory")),
                              InMemoryDocumentStore)
        self.assertIsInstance(create_document_store(AppConfig(store_backend="json")),
                              JsonFileDocumentStore)
        self.assertIsInstance(
            create_document_store(AppConfig(store_backend="http", store_url="http://x")),
            HttpDocumentStore,
        )


if __name__ == "__main__":
    unittest.main()
