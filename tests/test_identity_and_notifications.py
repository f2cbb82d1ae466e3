import unittest

from courtside.services import (
    CollectingNotifier, HeaderIdentityProvider, StaticIdentityProvider
)
from courtside.services.notifications import error, success


class IdentityProviderTests(unittest.TestCase):
    def test_static(self) -> None:
        self.assertEqual(StaticIdentityProvider("u1").current_user_id({"X-User-Id": "u2"}), "u1")

    def test_header_with_fallback(self) -> None:
        provider = HeaderIdentityProvider(default_user_id="local")
        self.assertEqual(provider.current_user_id({"X-User-Id": " coach "}), "coach")
        self.assertEqual(provider.current_user_id({"X-User-Id": "  "}), "local")
        self.assertEqual(provider.current_user_id(), "local")
        self.assertIsNone(HeaderIdentityProvider().current_user_id({}))


class NotifierTests(unittest.TestCase):
    def test_collecting_notifier_drains_and_logs(self) -> None:
        notifier = CollectingNotifier()
        with self.assertLogs("courtside.services.notifications", level="INFO") as logs:
            notifier.notify(success("Period 1 plan updated."))
            notifier.notify(error("Error", "Could not find plan for period 2."))

        items = notifier.drain()
        self.assertEqual([n.is_error for n in items], [False, True])
        self.assertEqual(items[1].to_dict()["variant"], "destructive")
        self.assertEqual(notifier.drain(), [])
        self.assertIn("ERROR", logs.output[1])


if __name__ == "__main__":
    unittest.main()
