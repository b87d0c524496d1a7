import asyncio
import json
import unittest

from starlette.requests import Request
from starlette.testclient import TestClient

from api_builder_studio.studio.config import StudioSettings
from api_builder_studio.studio.http_server import create_app, send_handler
from api_builder_studio.studio.session import StudioSession


class TestStudioHTTP(unittest.TestCase):

    def setUp(self):
        self.session = StudioSession(StudioSettings(response_delay_ms=0, max_history_items=2))
        self.client = TestClient(create_app(self.session, mount_mcp=False))

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")

    def test_get_endpoint(self):
        body = self.client.get("/api/endpoint").json()
        self.assertTrue(body["success"])
        self.assertEqual(body["endpoint"]["method"], "GET")
        self.assertEqual(body["fullUrl"], "https://api.example.com/users")

    def test_patch_endpoint_fields(self):
        response = self.client.patch("/api/endpoint", json={"method": "PUT", "path": "/orders", "cacheTtl": 60})
        self.assertEqual(response.status_code, 200)
        endpoint = response.json()["endpoint"]
        self.assertEqual(endpoint["method"], "PUT")
        self.assertEqual(endpoint["path"], "/orders")
        self.assertEqual(endpoint["cacheTtl"], 60)

    def test_patch_endpoint_rejects_bad_input(self):
        self.assertEqual(self.client.patch("/api/endpoint", json={"colour": "red"}).status_code, 400)
        self.assertEqual(self.client.patch("/api/endpoint", json={"method": "TRACE"}).status_code, 400)
        self.assertEqual(self.client.patch("/api/endpoint", json={"cacheTtl": 0}).status_code, 400)
        self.assertEqual(self.session.endpoint.config.cache_ttl, 300)

    def test_put_endpoint_replaces_config(self):
        response = self.client.put("/api/endpoint", json={"method": "DELETE", "path": "/users/1", "headers": []})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.session.endpoint.config.path, "/users/1")
        self.assertEqual(self.session.endpoint.config.headers, [])

    def test_put_endpoint_rejects_invalid_document(self):
        for document in ({"cacheTtl": -5}, {"cacheTtl": True}, {"path": None}, {"baseUrl": 42}):
            with self.subTest(document=document):
                self.assertEqual(self.client.put("/api/endpoint", json=document).status_code, 400)
        self.assertEqual(self.session.endpoint.config.cache_ttl, 300)
        self.assertEqual(self.session.endpoint.config.path, "/users")
        self.assertEqual(self.client.get("/api/endpoint/url").json()["fullUrl"], "https://api.example.com/users")

    def test_boolean_strings_from_clients(self):
        body = self.client.patch("/api/endpoint/headers/0", json={"field": "required", "value": "false"}).json()
        self.assertFalse(body["endpoint"]["headers"][0]["required"])
        self.assertFalse(self.session.endpoint.config.headers[0].required)
        self.assertEqual(
            self.client.patch("/api/endpoint/headers/0", json={"field": "required", "value": "maybe"}).status_code, 400
        )
        self.assertEqual(self.client.patch("/api/endpoint", json={"corsEnabled": "false"}).status_code, 200)
        self.assertFalse(self.session.endpoint.config.cors_enabled)
        response = self.client.post("/api/endpoint/query-params", json={"key": None})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.session.endpoint.config.query_params, [])

    def test_query_param_rows(self):
        self.assertEqual(self.client.post("/api/endpoint/query-params").json()["index"], 0)
        self.client.patch("/api/endpoint/query-params/0", json={"field": "key", "value": "id"})
        body = self.client.patch("/api/endpoint/query-params/0", json={"field": "value", "value": "5"}).json()
        self.assertEqual(body["fullUrl"], "https://api.example.com/users?id=5")
        self.assertEqual(self.client.get("/api/endpoint/url").json()["fullUrl"], "https://api.example.com/users?id=5")

        self.assertEqual(self.client.patch("/api/endpoint/query-params/4", json={"field": "key", "value": "x"}).status_code, 404)
        self.assertEqual(self.client.patch("/api/endpoint/query-params/0", json={"field": "bogus"}).status_code, 400)
        self.assertEqual(self.client.delete("/api/endpoint/query-params/0").status_code, 200)
        self.assertEqual(self.client.delete("/api/endpoint/query-params/0").status_code, 404)

    def test_header_rows(self):
        body = self.client.post("/api/endpoint/headers", json={"key": "X-Api-Key", "value": "k", "required": True}).json()
        self.assertEqual(body["index"], 1)
        self.assertEqual(body["endpoint"]["headers"][1], {"key": "X-Api-Key", "value": "k", "required": True})
        self.assertEqual(self.client.post("/api/endpoint/cookies").status_code, 404)

    def test_send_and_history(self):
        for path in ("/a", "/b", "/c"):
            self.client.patch("/api/endpoint", json={"path": path})
            response = self.client.post("/api/send")
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.json()["response"]["status"], 200)

        history = self.client.get("/api/history").json()
        self.assertEqual(history["count"], 2)
        self.assertEqual([e["endpointConfig"]["path"] for e in history["history"]], ["/c", "/b"])

        loaded = self.client.post("/api/history/1/load").json()
        self.assertEqual(loaded["state"]["endpoint"]["path"], "/b")
        self.assertEqual(self.client.post("/api/history/9/load").status_code, 404)

        self.assertTrue(self.client.delete("/api/history").json()["success"])
        self.assertEqual(self.client.get("/api/history").json()["count"], 0)

    def test_response_and_schema(self):
        self.assertIsNone(self.client.get("/api/response").json()["response"])
        self.client.put("/api/mock", content='{"a": 1, "b": [true, false], "c": null}')
        self.client.post("/api/send")

        body = self.client.get("/api/response").json()
        self.assertEqual(body["response"]["data"], {"a": 1, "b": [True, False], "c": None})
        self.assertEqual(json.loads(body["raw"]), body["response"]["data"])

        schema = self.client.get("/api/schema").json()["schema"]
        self.assertEqual(schema["properties"]["b"], {"type": "array", "items": {"type": "boolean"}})
        self.assertEqual(schema["required"], ["a", "b", "c"])

    def test_tree(self):
        tree = self.client.get("/api/tree").json()["tree"]
        self.assertEqual(tree["label"], "Object")
        self.assertTrue(tree["expandable"])
        self.assertEqual([child["key"] for child in tree["children"]], list(self.session.mock.value))

    def test_mock_commit(self):
        ok = self.client.put("/api/mock", content='[1, 2]')
        self.assertEqual(ok.status_code, 200)
        self.assertEqual(self.client.get("/api/mock").json()["mock"], [1, 2])

        bad = self.client.put("/api/mock", content='{oops')
        self.assertEqual(bad.status_code, 400)
        self.assertFalse(bad.json()["success"])
        self.assertEqual(bad.json()["mock"], [1, 2])

    def test_presets(self):
        presets = self.client.get("/api/presets").json()["presets"]
        self.assertIn("Google Sheets API", presets["Google APIs"])

        body = self.client.post("/api/presets/select", json={"name": "Google Sheets API"}).json()
        self.assertEqual(body["endpoint"]["baseUrl"], "https://sheets.googleapis.com/v4")
        self.assertEqual(self.client.get("/api/presets").json()["selected"], "Google Sheets API")
        self.assertEqual(self.client.post("/api/presets/select", json={"name": "Nope"}).status_code, 404)
        self.assertEqual(self.client.post("/api/presets/select", json={}).status_code, 400)

    def test_export_download(self):
        response = self.client.get("/api/export/postman")
        self.assertEqual(response.status_code, 200)
        self.assertIn('filename="postman-collection.json"', response.headers["content-disposition"])
        self.assertEqual(response.json()["item"][0]["name"], "GET /users")
        self.assertEqual(self.client.get("/api/export/yaml").status_code, 400)

    def test_monitoring(self):
        snapshot = self.client.get("/api/monitoring").json()["monitoring"]
        self.assertEqual(snapshot["trafficMetrics"]["totalRequests"], 0)

        refreshed = self.client.get("/api/monitoring?refresh=1").json()["monitoring"]
        self.assertGreater(refreshed["trafficMetrics"]["totalRequests"], 0)

        body = self.client.post("/api/monitoring/maintenance", json={"enabled": True}).json()
        self.assertTrue(body["monitoring"]["maintenanceMode"])
        self.assertEqual(self.client.delete("/api/monitoring/logs").json()["monitoring"]["errorLogs"], [])
        self.assertEqual(self.client.post("/api/monitoring/maintenance", json={}).status_code, 400)

    def test_state(self):
        state = self.client.get("/api/state").json()["state"]
        self.assertEqual(state["activeTab"], "raw")
        self.assertFalse(state["isLoading"])
        self.assertEqual(state["historyCount"], 0)



class TestSendHandlerCancellation(unittest.IsolatedAsyncioTestCase):

    async def test_client_disconnect_does_not_abort_send(self):
        session = StudioSession(StudioSettings(response_delay_ms=50))
        app = create_app(session, mount_mcp=False)
        request = Request({"type": "http", "method": "POST", "path": "/api/send", "headers": [], "app": app})

        handler = asyncio.create_task(send_handler(request))
        await asyncio.sleep(0.01)
        handler.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await handler

        await asyncio.sleep(0.1)
        self.assertEqual(len(session.history), 1)
        self.assertIsNotNone(session.response)
        self.assertFalse(session.is_loading)


if __name__ == '__main__':
    unittest.main()
