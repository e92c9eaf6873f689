"""Tests for the webhook trigger lifecycle."""

import asyncio

import httpx
import pytest

from conftest import Recorder, json_body, make_auth
from fake_procore import create_fake_procore
from procore_sdk.errors import ApiError, UnsupportedOperationError
from procore_sdk.trigger import TRIGGER_EVENTS, WEBHOOK_EVENT_MAPPING, WebhookTrigger

URL = "https://hooks.example.com/procore"


def test_every_trigger_event_has_a_namespace():
    assert set(TRIGGER_EVENTS) == set(WEBHOOK_EVENT_MAPPING)
    assert WEBHOOK_EVENT_MAPPING["rfiCreated"] == "rfis.create"
    assert WEBHOOK_EVENT_MAPPING["punchItemClosed"] == "punch_items.update"


class TestLifecycle:
    def test_create_check_delete_round_trip(self):
        app = create_fake_procore()
        state = {}

        async def _test():
            async with make_auth(httpx.ASGITransport(app=app)) as auth:
                trigger = WebhookTrigger(auth, 55, "rfiCreated", URL, project_id=8, state=state)
                assert await trigger.check_exists() is False
                assert await trigger.create() is True
                hook_id = state["webhook_id"]

                again = WebhookTrigger(auth, 55, "rfiCreated", URL, state={})
                assert await again.check_exists() is True
                assert again.webhook_id == hook_id

                other_event = WebhookTrigger(auth, 55, "rfiUpdated", URL)
                assert await other_event.check_exists() is False

                assert await trigger.delete() is True
                assert "webhook_id" not in state
                assert await again.check_exists() is False

        asyncio.run(_test())

        create_call = next(r for r in app.state.requests if r["method"] == "POST")
        assert create_call["body"] == {
            "hook": {
                "api_version": "v2",
                "destination_url": URL,
                "destination_headers": {"X-Hook-Event": "rfiCreated"},
                "namespace": "rfis.create",
                "project_id": 8,
            }
        }
        assert all(r["headers"]["procore-company-id"] == "55" for r in app.state.requests)

    def test_company_level_hook_has_no_project(self):
        recorder = Recorder(lambda r: httpx.Response(201, json={"id": 4}))

        async def _test():
            async with make_auth(recorder.transport()) as auth:
                return await WebhookTrigger(auth, 1, "projectCreated", URL).create()

        assert asyncio.run(_test()) is True
        assert "project_id" not in json_body(recorder.last)["hook"]
        assert recorder.last.url.path == "/rest/v1.0/webhooks/hooks"

    def test_create_unknown_event(self):
        async def _test():
            async with make_auth(Recorder().transport()) as auth:
                await WebhookTrigger(auth, 1, "somethingHappened", URL).create()

        with pytest.raises(UnsupportedOperationError, match="somethingHappened"):
            asyncio.run(_test())

    def test_create_failure_is_wrapped(self):
        recorder = Recorder(lambda r: httpx.Response(403, json={"errors": "forbidden"}))

        async def _test():
            async with make_auth(recorder.transport()) as auth:
                await WebhookTrigger(auth, 1, "rfiCreated", URL).create()

        with pytest.raises(ApiError, match="^Failed to create Procore webhook: Procore API Error: 403"):
            asyncio.run(_test())

    def test_create_without_id_returns_false(self):
        recorder = Recorder(lambda r: httpx.Response(200, json={}))
        state = {}

        async def _test():
            async with make_auth(recorder.transport()) as auth:
                return await WebhookTrigger(auth, 1, "rfiCreated", URL, state=state).create()

        assert asyncio.run(_test()) is False
        assert state == {}

    def test_check_exists_false_on_api_error(self):
        recorder = Recorder(lambda r: httpx.Response(500, json={}))

        async def _test():
            async with make_auth(recorder.transport()) as auth:
                return await WebhookTrigger(auth, 1, "rfiCreated", URL).check_exists()

        assert asyncio.run(_test()) is False

    def test_check_exists_skips_malformed_hooks(self):
        hooks = [
            "not-a-hook",
            {"id": 1, "destination_url": URL, "destination_headers": ["X-Hook-Event"]},
            {"id": 2, "destination_url": URL, "destination_headers": None},
            {"id": 3, "destination_url": URL, "destination_headers": {"X-Hook-Event": "rfiCreated"}},
        ]
        recorder = Recorder(lambda r: httpx.Response(200, json=hooks))
        state = {}

        async def _test():
            async with make_auth(recorder.transport()) as auth:
                return await WebhookTrigger(auth, 1, "rfiCreated", URL, state=state).check_exists()

        assert asyncio.run(_test()) is True
        assert state == {"webhook_id": 3}

    def test_check_exists_false_when_only_malformed_hooks(self):
        hooks = [None, 7, {"id": 1, "destination_url": URL, "destination_headers": "rfiCreated"}]
        recorder = Recorder(lambda r: httpx.Response(200, json=hooks))

        async def _test():
            async with make_auth(recorder.transport()) as auth:
                return await WebhookTrigger(auth, 1, "rfiCreated", URL).check_exists()

        assert asyncio.run(_test()) is False

    def test_check_exists_false_for_unknown_event_without_request(self):
        recorder = Recorder()

        async def _test():
            async with make_auth(recorder.transport()) as auth:
                return await WebhookTrigger(auth, 1, "nope", URL).check_exists()

        assert asyncio.run(_test()) is False
        assert recorder.requests == []

    def test_delete_failure_keeps_id(self):
        recorder = Recorder(lambda r: httpx.Response(500, json={}))
        state = {"webhook_id": 9}

        async def _test():
            async with make_auth(recorder.transport()) as auth:
                return await WebhookTrigger(auth, 1, "rfiCreated", URL, state=state).delete()

        assert asyncio.run(_test()) is False
        assert state == {"webhook_id": 9}
        assert recorder.last.url.path == "/rest/v1.0/webhooks/hooks/9"

    def test_delete_without_id_is_noop(self):
        recorder = Recorder()

        async def _test():
            async with make_auth(recorder.transport()) as auth:
                return await WebhookTrigger(auth, 1, "rfiCreated", URL).delete()

        assert asyncio.run(_test()) is True
        assert recorder.requests == []


def test_handle_merges_body_and_headers():
    trigger = WebhookTrigger(None, 1, "rfiUpdated", URL)
    data = trigger.handle(
        {"X-Hook-Event": "rfiUpdated", "Content-Type": "application/json"},
        {"resource_id": 12, "event_type": "update"},
    )

    assert data["event"] == "rfiUpdated"
    assert data["hookEvent"] == "rfiUpdated"
    assert data["resource_id"] == 12
    assert data["event_type"] == "update"
    assert data["timestamp"].endswith("Z")


def test_handle_without_header():
    data = WebhookTrigger(None, 1, "rfiCreated", URL).handle({}, None)
    assert data["hookEvent"] is None
    assert set(data) == {"event", "hookEvent", "timestamp"}
