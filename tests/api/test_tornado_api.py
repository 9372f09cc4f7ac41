# tests/api/test_tornado_api.py
# Same HTTP contract, served by the Tornado application

import json

from tornado.testing import AsyncHTTPTestCase

from conftest import FrozenClock
from texttide.repositories.clipboard_storage import InMemoryStorage
from texttide.routes.api_routes import make_app
from texttide.services.clipboard_service import ClipboardService


class TornadoClipboardTest(AsyncHTTPTestCase):

    def get_app(self):
        self.clock = FrozenClock()
        self.storage = InMemoryStorage()
        self.service = ClipboardService(self.storage, clock=self.clock)
        return make_app(self.service)

    def request(self, method, path, body=None, agent="agent-a"):
        kwargs = {"method": method, "headers": {"User-Agent": agent}}
        if body is not None:
            kwargs["body"] = json.dumps(body)
            kwargs["allow_nonstandard_methods"] = True
        response = self.fetch(path, **kwargs)
        payload = json.loads(response.body) if response.body else None
        return response, payload

    def create(self, text="hello", agent="agent-a", **extra):
        response, body = self.request("POST", "/api/clipboard", {"text": text, **extra}, agent)
        self.assertEqual(response.code, 201, body)
        return body

    def test_create_and_list(self):
        created = self.create("  first  ")
        self.assertEqual(created["text"], "first")
        self.assertTrue(created["editable"])
        self.assertFalse(created["hasLiked"])
        self.assertEqual(created["likesCount"], 0)
        self.assertNotIn("updatedAt", created)

        response, items = self.request("GET", "/api/clipboard", agent="agent-b")
        self.assertEqual(response.code, 200)
        self.assertEqual([i["id"] for i in items], [created["id"]])
        self.assertFalse(items[0]["editable"])

    def test_blank_text_is_400(self):
        response, body = self.request("POST", "/api/clipboard", {"text": "   "})
        self.assertEqual(response.code, 400)
        self.assertEqual(body["error"]["code"], "VALIDATION_ERROR")
        self.assertEqual(self.storage.save_count, 0)

    def test_malformed_json_is_400(self):
        response = self.fetch("/api/clipboard", method="POST", body="{oops")
        self.assertEqual(response.code, 400)
        self.assertEqual(json.loads(response.body)["error"]["code"], "VALIDATION_ERROR")

    def test_update_rules(self):
        created = self.create("mine")
        response, body = self.request(
            "PUT", "/api/clipboard", {"id": created["id"], "text": "stolen"}, agent="agent-b"
        )
        self.assertEqual(response.code, 403)
        self.assertEqual(body["error"]["code"], "FORBIDDEN")

        self.clock.advance(minutes=2)
        response, body = self.request("PUT", "/api/clipboard", {"id": created["id"], "text": "edited"})
        self.assertEqual(response.code, 200)
        self.assertEqual(body["text"], "edited")
        self.assertIn("updatedAt", body)

        response, _ = self.request("PUT", "/api/clipboard", {"id": "nope00", "text": "x"})
        self.assertEqual(response.code, 404)

    def test_like_toggle(self):
        created = self.create()
        _, first = self.request("PATCH", "/api/clipboard", {"id": created["id"], "action": "like"}, "agent-b")
        self.assertEqual(first, {"hasLiked": True, "likesCount": 1})
        _, second = self.request("PATCH", "/api/clipboard", {"id": created["id"], "action": "like"}, "agent-b")
        self.assertEqual(second, {"hasLiked": False, "likesCount": 0})

        response, _ = self.request("PATCH", "/api/clipboard", {"id": created["id"], "action": "nope"})
        self.assertEqual(response.code, 400)

    def test_get_one_and_delete(self):
        created = self.create("share")
        response, body = self.request("GET", f"/api/clipboard/{created['id']}")
        self.assertEqual(response.code, 200)
        self.assertEqual(body["text"], "share")

        response, body = self.request("DELETE", "/api/clipboard", {"id": created["id"]})
        self.assertEqual(response.code, 200)
        self.assertEqual(body, {"message": "Deleted"})

        response, body = self.request("GET", f"/api/clipboard/{created['id']}")
        self.assertEqual(response.code, 404)
        self.assertEqual(body["error"]["code"], "NOT_FOUND")

        response, _ = self.request("DELETE", "/api/clipboard", {"id": "nope00"})
        self.assertEqual(response.code, 200)

    def test_odd_id_gets_json_not_found(self):
        response, body = self.request("GET", "/api/clipboard/ab-c1")
        self.assertEqual(response.code, 404)
        self.assertEqual(body["error"]["code"], "NOT_FOUND")

    def test_top_liked(self):
        quiet = self.create("quiet")
        loud = self.create("loud")
        self.request("PATCH", "/api/clipboard", {"id": loud["id"], "action": "like"}, "agent-z")

        _, items = self.request("GET", "/api/clipboard/top?limit=1", agent="agent-z")
        self.assertEqual([i["id"] for i in items], [loud["id"]])
        self.assertTrue(items[0]["hasLiked"])

        _, items = self.request("GET", "/api/clipboard/top")
        self.assertEqual([i["id"] for i in items], [loud["id"], quiet["id"]])

        response, _ = self.request("GET", "/api/clipboard/top?limit=abc")
        self.assertEqual(response.code, 400)
        response, _ = self.request("GET", "/api/clipboard/top?limit=51")
        self.assertEqual(response.code, 400)

    def test_unsupported_method_is_405_with_allow(self):
        response = self.fetch("/api/clipboard", method="OPTIONS")
        self.assertEqual(response.code, 405)
        self.assertEqual(response.headers["Allow"], "GET, POST, PUT, DELETE, PATCH")
        self.assertEqual(json.loads(response.body)["error"]["code"], "METHOD_NOT_ALLOWED")

        response = self.fetch("/api/clipboard/abc123", method="DELETE")
        self.assertEqual(response.code, 405)
        self.assertEqual(response.headers["Allow"], "GET")

    def test_liveness_and_metrics(self):
        response = self.fetch("/health/live")
        self.assertEqual(json.loads(response.body), {"status": "alive"})

        self.create()
        response = self.fetch("/metrics")
        self.assertEqual(response.code, 200)
        self.assertIn(b"texttide_request_count", response.body)
