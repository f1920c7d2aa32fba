import unittest
from typing import Any

from rdfprefix import prefixes


def raise_this(value: Any):
    raise ValueError(value)


class TestOnKeyDropped(unittest.TestCase):
    """
    Tests for the on_key_dropped argument of the prefix registry.
    """

    CTX = {
        "@base": "http://example.org/",
        "@language": "en",
        "schema": "http://schema.org/",
        "schema:sameAs": {"@container": "@set"},
        "tags": {"@container": "@list"},
        "unset": None,
    }
    RESULT = {"schema": "http://schema.org/"}

    def test_silently_ignored(self):
        registry = prefixes.PrefixRegistry(self.CTX)
        self.assertEqual(registry.to_json(), self.RESULT)

    def test_dropped_keys(self):
        dropped_keys = set()
        registry = prefixes.PrefixRegistry(
            self.CTX, on_key_dropped=dropped_keys.add)
        self.assertEqual(registry.to_json(), self.RESULT)
        self.assertSetEqual(
            dropped_keys,
            {"@base", "@language", "schema:sameAs", "tags", "unset"})

    def test_vocab_is_not_dropped(self):
        dropped_keys = set()
        registry = prefixes.PrefixRegistry(
            {"@vocab": "http://schema.org/"}, on_key_dropped=dropped_keys.add)
        self.assertEqual(registry.vocabulary, "http://schema.org/")
        self.assertSetEqual(dropped_keys, set())

    def test_non_string_vocab_is_dropped(self):
        dropped_keys = set()
        registry = prefixes.PrefixRegistry(
            {"@vocab": None}, on_key_dropped=dropped_keys.add)
        self.assertIsNone(registry.vocabulary)
        self.assertSetEqual(dropped_keys, {"@vocab"})

    def test_non_string_key_is_dropped(self):
        dropped_keys = []
        registry = prefixes.PrefixRegistry(
            {1: "http://x/", "schema": "http://schema.org/"},
            on_key_dropped=dropped_keys.append)
        self.assertEqual(registry.to_json(), self.RESULT)
        self.assertEqual(dropped_keys, [1])

    def test_non_string_key_is_silently_ignored(self):
        registry = prefixes.PrefixRegistry()
        registry.add_many({1: "http://x/", None: "http://y/"})
        self.assertEqual(registry.to_json(), {})

    def test_strict_fails(self):
        with self.assertRaises(ValueError):
            prefixes.PrefixRegistry(self.CTX, on_key_dropped=raise_this)

    def test_strict_keeps_earlier_entries(self):
        registry = prefixes.PrefixRegistry(on_key_dropped=raise_this)
        registry.add("schema", "http://schema.org/")
        with self.assertRaises(ValueError):
            registry.add("schema:sameAs", {"@container": "@set"})
        self.assertEqual(registry.to_json(), self.RESULT)

    def test_logged_without_callback(self):
        registry = prefixes.PrefixRegistry()
        with self.assertLogs("rdfprefix.prefixes", level="DEBUG") as cm:
            registry.add("@base", "http://example.org/")
        self.assertIn("'@base'", cm.output[0])


if __name__ == "__main__":
    unittest.main()
