"""Tests for the /flux-ai endpoint and the application wiring."""

import json

import httpx
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.flux import get_settings, get_upstream_transport, router
from src.core.config import Settings

GATEWAY_URL = "https://gateway.test/v1/chat/completions"
SSE_BODY = (
    b'data: {"choices":[{"delta":{"content":"Hi"}}]}\n\n'
    b'data: {"choices":[{"delta":{"content":" there"}}]}\n\n'
    b"data: [DONE]\n\n"
)


def _tool_body(name, arguments):
    return {
        "choices": [
            {"message": {"tool_calls": [{"function": {"name": name, "arguments": json.dumps(arguments)}}]}}
        ]
    }


def _create_test_app(handler=None, api_key="test-key"):
    """Test app with the flux router, a fixed config and a mocked upstream."""
    test_app = FastAPI()
    test_app.include_router(router)

    cfg = Settings(lovable_api_key=api_key, ai_gateway_url=GATEWAY_URL)
    test_app.dependency_overrides[get_settings] = lambda: cfg
    if handler is not None:
        test_app.dependency_overrides[get_upstream_transport] = lambda: httpx.MockTransport(handler)
    return test_app


def _client(handler=None, api_key="test-key"):
    return TestClient(_create_test_app(handler, api_key))


class TestErrorEnvelope:
    """Failures always come back as {"error": message}."""

    def test_rate_limited(self):
        client = _client(lambda r: httpx.Response(429, json={"error": "slow"}))
        resp = client.post("/flux-ai", json={"type": "classify", "messages": [{"role": "user", "content": "x"}]})
        assert resp.status_code == 429
        assert resp.json() == {"error": "Rate limit exceeded. Please try again shortly."}

    def test_credits_exhausted(self):
        client = _client(lambda r: httpx.Response(402))
        resp = client.post("/flux-ai", json={"type": "plan", "context": {"tasks": []}})
        assert resp.status_code == 402
        assert resp.json() == {"error": "AI credits exhausted. Please add credits in Settings."}

    def test_credits_exhausted_in_chat_is_json_not_stream(self):
        client = _client(lambda r: httpx.Response(402))
        resp = client.post("/flux-ai", json={"messages": [{"role": "user", "content": "hi"}]})
        assert resp.status_code == 402
        assert resp.headers["content-type"].startswith("application/json")

    def test_other_upstream_failure(self):
        client = _client(lambda r: httpx.Response(503, text="down"))
        resp = client.post("/flux-ai", json={"type": "council", "messages": [{"role": "user", "content": "x"}]})
        assert resp.status_code == 500
        assert resp.json() == {"error": "AI gateway error"}

    def test_missing_credential(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200)

        client = _client(handler, api_key="")
        resp = client.post("/flux-ai", json={"type": "classify", "messages": []})
        assert resp.status_code == 500
        assert "not configured" in resp.json()["error"]
        assert calls == []

    def test_invalid_json_body(self):
        client = _client(lambda r: httpx.Response(200))
        resp = client.post("/flux-ai", content=b"{not json", headers={"content-type": "application/json"})
        assert resp.status_code == 500
        assert resp.json()["error"]

    def test_non_object_body(self):
        client = _client(lambda r: httpx.Response(200))
        resp = client.post("/flux-ai", json=["classify"])
        assert resp.status_code == 500
        assert set(resp.json()) == {"error"}


class TestStructuredModes:
    def test_classify_savings_goal(self, folder_context):
        args = {
            "category": "savings_goal",
            "title": "Savings Goal",
            "folder_type": "finance",
            "output_type": "dashboard",
            "confidence_score": 95,
            "target_amount": 20000,
            "currency": "DKK",
            "use_current_folder": True,
        }
        client = _client(lambda r: httpx.Response(200, json=_tool_body("classify_intent", args)))
        resp = client.post(
            "/flux-ai",
            json={
                "type": "classify",
                "messages": [{"role": "user", "content": "Save 20,000"}],
                "context": folder_context,
            },
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["category"] == "savings_goal"
        assert body["output_type"] == "dashboard"
        assert body["target_amount"] == 20000
        assert "tasks" not in body

    def test_classify_fallback_is_a_success(self):
        no_tool = {"choices": [{"message": {"content": "hello"}}]}
        client = _client(lambda r: httpx.Response(200, json=no_tool))
        resp = client.post("/flux-ai", json={"type": "classify", "messages": [{"role": "user", "content": "?"}]})
        assert resp.status_code == 200
        assert resp.json()["category"] == "note"
        assert resp.json()["confidence_score"] == 50

    def test_plan(self):
        args = {
            "blocks": [
                {"time": "09:00", "title": "Write blog post", "duration": "90m", "type": "deep", "task_id": "t1"}
            ]
        }
        client = _client(lambda r: httpx.Response(200, json=_tool_body("generate_plan", args)))
        resp = client.post(
            "/flux-ai",
            json={"type": "plan", "context": {"tasks": [{"id": "t1", "title": "Write blog post"}], "goals": []}},
        )
        assert resp.status_code == 200
        assert resp.json() == {
            "blocks": [
                {"time": "09:00", "title": "Write blog post", "duration": "90m", "type": "deep", "task_id": "t1"}
            ]
        }

    def test_council_without_tool_call_is_empty(self):
        client = _client(lambda r: httpx.Response(200, json={"choices": [{"message": {}}]}))
        resp = client.post("/flux-ai", json={"type": "council", "messages": [{"role": "user", "content": "idea"}]})
        assert resp.status_code == 200
        assert resp.json() == {"personas": [], "bias_radar": []}


class TestChatStreaming:
    def test_stream_is_relayed_verbatim(self):
        client = _client(
            lambda r: httpx.Response(200, content=SSE_BODY, headers={"content-type": "text/event-stream"})
        )
        resp = client.post("/flux-ai", json={"messages": [{"role": "user", "content": "hi"}]})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/event-stream")
        assert resp.content == SSE_BODY

    def test_upstream_is_closed_after_response(self):
        closed = []

        class Body(httpx.AsyncByteStream):
            async def __aiter__(self):
                yield b"data: [DONE]\n\n"

            async def aclose(self):
                closed.append(True)

        client = _client(lambda r: httpx.Response(200, stream=Body()))
        resp = client.post("/flux-ai", json={"messages": [{"role": "user", "content": "hi"}]})
        assert resp.content == b"data: [DONE]\n\n"
        assert closed == [True]

    def test_unknown_type_streams(self):
        client = _client(lambda r: httpx.Response(200, content=b"data: [DONE]\n\n"))
        resp = client.post("/flux-ai", json={"type": "brainstorm", "messages": []})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/event-stream")


class TestAppWiring:
    def test_plain_options_returns_200(self):
        resp = _client().options("/flux-ai")
        assert resp.status_code == 200
        assert resp.content == b""

    def test_cors_preflight(self):
        from api.main import app

        client = TestClient(app)
        resp = client.options(
            "/flux-ai",
            headers={
                "Origin": "https://flux.example",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "authorization, x-client-info, apikey, content-type",
            },
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "*"

    def test_health(self):
        from api.main import app

        resp = TestClient(app).get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
        assert resp.json()["gateway"] in {"configured", "missing"}
