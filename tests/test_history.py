import unittest

from api_builder_studio.studio.history import HistoryStore
from api_builder_studio.studio.models import EndpointConfig, HistoryEntry, ResponseRecord


def make_entry(path: str) -> HistoryEntry:
    return HistoryEntry(
        endpoint_config=EndpointConfig(path=path),
        response=ResponseRecord(status=200, status_text="OK", data={"path": path}, response_time=5),
        timestamp="2026-01-01 12:00:00",
    )


class TestHistoryStore(unittest.TestCase):

    def test_prepend_keeps_newest_first(self):
        history = HistoryStore()
        history.prepend(make_entry("/a"))
        history.prepend(make_entry("/b"))
        self.assertEqual([e.endpoint_config.path for e in history.entries], ["/b", "/a"])

    def test_capacity_evicts_oldest(self):
        """Test that only the newest max_items entries are kept."""
        history = HistoryStore(max_items=3)
        for i in range(5):
            history.prepend(make_entry(f"/{i}"))
        self.assertEqual(len(history), 3)
        self.assertEqual([e.endpoint_config.path for e in history.entries], ["/4", "/3", "/2"])

    def test_load_at_returns_copy(self):
        history = HistoryStore()
        entry = make_entry("/a")
        history.prepend(entry)
        config, response = history.load_at(0)
        self.assertIs(response, entry.response)
        self.assertEqual(config, entry.endpoint_config)
        config.path = "/mutated"
        self.assertEqual(history[0].endpoint_config.path, "/a")

    def test_load_at_out_of_range(self):
        history = HistoryStore()
        history.prepend(make_entry("/a"))
        self.assertIsNone(history.load_at(1))
        self.assertIsNone(history.load_at(-1))

    def test_clear(self):
        history = HistoryStore()
        history.prepend(make_entry("/a"))
        history.clear()
        self.assertEqual(len(history), 0)
        self.assertEqual(history.to_list(), [])

    def test_to_list_document(self):
        history = HistoryStore()
        history.prepend(make_entry("/a"))
        document = history.to_list()[0]
        self.assertEqual(document["endpointConfig"]["path"], "/a")
        self.assertEqual(document["response"], {
            "status": 200, "statusText": "OK", "data": {"path": "/a"}, "responseTime": 5,
        })
        self.assertEqual(document["timestamp"], "2026-01-01 12:00:00")

    def test_negative_capacity_rejected(self):
        with self.assertRaises(ValueError):
            HistoryStore(max_items=-1)


if __name__ == '__main__':
    unittest.main()
