"""
Webhook trigger tests: registration lifecycle against a fake API, and
event filtering of inbound deliveries.
"""

import pytest

from clients.housecall_pro import node
from clients.housecall_pro.errors import ValidationError
from clients.housecall_pro.store import WorkflowStaticData
from clients.housecall_pro.trigger import HousecallProTrigger
from conftest import FakeResponse, MemoryStaticData, ok

HOOK_URL = "https://hooks.example.test/webhook"


@pytest.fixture(autouse=True)
def quiet_notice(monkeypatch):
    monkeypatch.setattr(node, "_notice_logged", True)


def make_trigger(api, static_data=None, events=("job.created",)):
    return HousecallProTrigger(
        api=api,
        static_data=static_data if static_data is not None else MemoryStaticData(),
        webhook_url=HOOK_URL,
        events=events,
    )


def not_found():
    return FakeResponse(status_code=404, json_body={"message": "Webhook not found"})


class TestCheckExists:
    def test_stored_id_still_registered(self, api, session):
        trigger = make_trigger(api, MemoryStaticData("w1"))
        session.queue(ok({"data": {"id": "w1", "url": HOOK_URL}}))

        assert trigger.check_exists() is True
        assert session.calls[0]["url"].endswith("/webhooks/w1")
        assert trigger.static_data.webhook_id == "w1"

    def test_stale_id_falls_back_to_url_match(self, api, session):
        static_data = MemoryStaticData("gone")
        trigger = make_trigger(api, static_data)
        session.queue(
            not_found(),
            ok({"data": [{"id": "w9", "url": "https://other.test"}, {"id": "w2", "url": HOOK_URL}]}),
        )

        assert trigger.check_exists() is True
        assert static_data.webhook_id == "w2"
        assert [c["url"].rsplit("/v1", 1)[1] for c in session.calls] == ["/webhooks/gone", "/webhooks"]

    def test_stale_id_without_match_is_cleared(self, api, session):
        static_data = MemoryStaticData("gone")
        trigger = make_trigger(api, static_data)
        session.queue(not_found(), ok({"data": []}))

        assert trigger.check_exists() is False
        assert static_data.webhook_id is None

    def test_no_stored_id_lists_webhooks(self, api, session):
        static_data = MemoryStaticData()
        trigger = make_trigger(api, static_data)
        session.queue(ok([{"id": 17, "url": HOOK_URL}]))

        assert trigger.check_exists() is True
        assert static_data.webhook_id == "17"

    def test_listing_failure_means_absent(self, api, session, capsys):
        trigger = make_trigger(api)
        session.queue(FakeResponse(status_code=500, json_body={"message": "boom"}))

        assert trigger.check_exists() is False
        assert "Could not list webhooks" in capsys.readouterr().out

    def test_failed_check_and_failed_listing_lose_the_stored_id(self, api, session, capsys):
        static_data = MemoryStaticData("w1")
        trigger = make_trigger(api, static_data)
        session.queue(
            FakeResponse(status_code=503, json_body={"message": "unavailable"}),
            FakeResponse(status_code=503, json_body={"message": "unavailable"}),
        )

        assert trigger.check_exists() is False
        assert static_data.webhook_id is None
        assert "Could not list webhooks" in capsys.readouterr().out

    def test_activate_after_lost_id_registers_again(self, api, session):
        static_data = MemoryStaticData("w1")
        trigger = make_trigger(api, static_data)
        session.queue(
            FakeResponse(status_code=503, json_body={"message": "unavailable"}),
            FakeResponse(status_code=503, json_body={"message": "unavailable"}),
            ok({"data": {"id": "w2"}}),
        )

        assert trigger.activate() is True
        assert static_data.webhook_id == "w2"
        assert [c["method"] for c in session.calls] == ["GET", "GET", "POST"]


class TestCreate:
    def test_stores_returned_id(self, api, session):
        trigger = make_trigger(api, events=["job.created", "invoice.paid"])
        session.queue(ok({"data": {"id": "w5"}}))

        assert trigger.create() is True
        assert trigger.static_data.webhook_id == "w5"
        assert session.calls[0]["method"] == "POST"
        assert session.calls[0]["json"] == {
            "url": HOOK_URL,
            "events": ["job.created", "invoice.paid"],
        }

    def test_no_id_in_response(self, api, session):
        trigger = make_trigger(api)
        session.queue(ok({"data": {}}))

        assert trigger.create() is False
        assert trigger.static_data.webhook_id is None

    def test_unknown_event_rejected_before_request(self, api, session):
        trigger = make_trigger(api, events=["job.created", "job.teleported"])

        with pytest.raises(ValidationError, match="job.teleported"):
            trigger.create()
        assert session.calls == []

    def test_api_error_is_raised(self, api, session):
        trigger = make_trigger(api)
        session.queue(FakeResponse(status_code=422, json_body={"errors": [{"message": "url is invalid"}]}))

        with pytest.raises(RuntimeError, match="Could not create Housecall Pro webhook.*url is invalid"):
            trigger.create()


class TestDelete:
    def test_deletes_and_clears(self, api, session):
        static_data = MemoryStaticData("w1")
        trigger = make_trigger(api, static_data)
        session.queue(FakeResponse(status_code=204, text=""))

        assert trigger.delete() is True
        assert session.calls[0]["method"] == "DELETE"
        assert static_data.webhook_id is None

    def test_upstream_failure_still_clears(self, api, session, capsys):
        static_data = MemoryStaticData("w1")
        trigger = make_trigger(api, static_data)
        session.queue(not_found())

        assert trigger.delete() is True
        assert static_data.webhook_id is None
        assert "Warning: failed to delete Housecall Pro webhook w1" in capsys.readouterr().out

    def test_nothing_stored(self, api, session):
        trigger = make_trigger(api)

        assert trigger.delete() is True
        assert session.calls == []


class TestActivate:
    def test_reuses_existing(self, api, session):
        trigger = make_trigger(api, MemoryStaticData("w1"))
        session.queue(ok({"data": {"id": "w1"}}))

        assert trigger.activate() is True
        assert len(session.calls) == 1

    def test_creates_when_absent(self, api, session):
        trigger = make_trigger(api)
        session.queue(ok({"data": []}), ok({"data": {"id": "w3"}}))

        assert trigger.activate() is True
        assert trigger.static_data.webhook_id == "w3"

    def test_round_trip_through_duckdb(self, api, session, db_file):
        static_data = WorkflowStaticData(db_file, "wf-1")
        trigger = make_trigger(api, static_data)
        session.queue(ok({"data": []}), ok({"data": {"id": "w8"}}))

        trigger.activate()
        assert WorkflowStaticData(db_file, "wf-1").get_webhook_id() == "w8"

        session.queue(ok({"data": {"id": "w8"}}))
        assert make_trigger(api, WorkflowStaticData(db_file, "wf-1")).check_exists() is True
        assert session.calls[-1]["url"].endswith("/webhooks/w8")


class TestWebhookDelivery:
    def test_unsubscribed_event_is_dropped(self, api):
        trigger = make_trigger(api, events=["job.created"])

        assert trigger.webhook({"event": "job.completed", "data": {"id": "j1"}}) is None

    def test_subscribed_event_is_forwarded(self, api):
        trigger = make_trigger(api, events=["job.created"])
        payload = {"event": "job.created", "data": {"id": "j1"}}

        items = trigger.webhook(payload, {"X-Housecall-Signature": "abc"})

        assert len(items) == 1
        item = items[0]
        assert item["event"] == "job.created"
        assert item["data"] == {"id": "j1"}
        assert item["_headers"] == {"X-Housecall-Signature": "abc"}
        assert item["_webhookReceivedAt"].endswith("+00:00")
        # the inbound payload is not mutated
        assert "_headers" not in payload

    def test_payload_without_event_is_forwarded(self, api):
        trigger = make_trigger(api, events=["job.created"])

        items = trigger.webhook({"data": {"id": "x"}})

        assert items[0]["_headers"] == {}

    def test_empty_subscription_forwards_everything(self, api):
        trigger = make_trigger(api, events=[])

        assert trigger.webhook({"event": "customer.deleted"}) is not None

    @pytest.mark.parametrize("payload", [[{"event": "job.completed"}], "ping", 7])
    def test_non_object_body_has_no_event(self, api, payload):
        trigger = make_trigger(api, events=["job.created"])

        items = trigger.webhook(payload)

        assert len(items) == 1
        assert items[0]["body"] == payload
        assert "event" not in items[0]
