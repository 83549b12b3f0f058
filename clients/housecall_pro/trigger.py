# clients/housecall_pro/trigger.py

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from .constants import WEBHOOK_EVENTS
from .errors import HousecallProApiError
from .helpers import unwrap, unwrap_list, validate_option
from .node import announce_once
from .transport import HousecallProApi, log


class HousecallProTrigger:
    """
    Webhook lifecycle for one workflow.

    The registered webhook id lives in `static_data` (see store.WorkflowStaticData),
    so a restart can find and reuse the existing registration instead of creating
    a duplicate.
    """

    def __init__(
        self,
        api: HousecallProApi,
        static_data,
        webhook_url: str,
        events: Iterable[str],
    ):
        self.api = api
        self.static_data = static_data
        self.webhook_url = webhook_url
        self.events = list(events)

    # -----------------------------
    # Registration
    # -----------------------------

    def check_exists(self) -> bool:
        webhook_id = self.static_data.get_webhook_id()

        if webhook_id:
            try:
                self.api.request("GET", f"/webhooks/{webhook_id}")
                return True
            except HousecallProApiError as e:
                log(f"Stored webhook {webhook_id} not found ({e}). Looking it up by URL...")
                # Dropped before the lookup: if listing also fails, activate()
                # registers a fresh webhook and the old one is left upstream.
                self.static_data.clear_webhook_id()

        try:
            webhooks = unwrap_list(self.api.request("GET", "/webhooks"))
        except HousecallProApiError as e:
            # Can't check: treat as absent
            log(f"Could not list webhooks: {e}")
            return False

        for webhook in webhooks:
            if isinstance(webhook, dict) and webhook.get("url") == self.webhook_url:
                self.static_data.set_webhook_id(webhook["id"])
                log(f"Found existing webhook {webhook['id']} for {self.webhook_url}")
                return True

        return False

    def create(self) -> bool:
        announce_once()

        for event in self.events:
            validate_option(event, WEBHOOK_EVENTS, "webhook event")

        body = {"url": self.webhook_url, "events": self.events}
        try:
            data = unwrap(self.api.request("POST", "/webhooks", body))
        except HousecallProApiError as e:
            raise RuntimeError(f"Could not create Housecall Pro webhook: {e}") from e

        if isinstance(data, dict) and data.get("id"):
            self.static_data.set_webhook_id(data["id"])
            log(f"Registered webhook {data['id']} -> {self.webhook_url} ({', '.join(self.events)})")
            return True

        return False

    def delete(self) -> bool:
        webhook_id = self.static_data.get_webhook_id()

        if webhook_id:
            try:
                self.api.request("DELETE", f"/webhooks/{webhook_id}")
                log(f"Deleted webhook {webhook_id}")
            except HousecallProApiError as e:
                # Might already be gone upstream
                log(f"Warning: failed to delete Housecall Pro webhook {webhook_id}: {e}")

            self.static_data.clear_webhook_id()

        return True

    def activate(self) -> bool:
        if self.check_exists():
            return True
        return self.create()

    # -----------------------------
    # Deliveries
    # -----------------------------

    def webhook(
        self,
        payload: Any,
        headers: Optional[Dict[str, Any]] = None,
    ) -> Optional[List[Dict[str, Any]]]:
        """
        Filter one inbound delivery.
        Returns None when the event is not subscribed (nothing runs downstream),
        otherwise a single enriched item. A body that is not a JSON object has no
        event; it is forwarded under "body".
        """
        announce_once()

        event = payload.get("event") if isinstance(payload, dict) else None
        if event and self.events and event not in self.events:
            return None

        item = dict(payload) if isinstance(payload, dict) else {"body": payload}
        item["_webhookReceivedAt"] = datetime.now(timezone.utc).isoformat()
        item["_headers"] = dict(headers or {})
        return [item]
