from flask import Flask, request, jsonify, Response
import os
import threading

from clients.housecall_pro.config import DB_FILE, WEBHOOK_EVENTS, WEBHOOK_URL, WORKFLOW_ID
from clients.housecall_pro.node import api_from_env
from clients.housecall_pro.store import WorkflowStaticData, record_events
from clients.housecall_pro.transport import log
from clients.housecall_pro.trigger import HousecallProTrigger


app = Flask(__name__)

STATIC_DATA = WorkflowStaticData(DB_FILE, WORKFLOW_ID)

# Built on activation; deliveries only need the configured events.
TRIGGER = HousecallProTrigger(
    api=None,
    static_data=STATIC_DATA,
    webhook_url=WEBHOOK_URL,
    events=WEBHOOK_EVENTS,
)

_activated = False
_activate_lock = threading.Lock()


def activate_trigger():
    """Register (or re-find) the webhook with Housecall Pro. Runs once per process."""
    global _activated
    with _activate_lock:
        if _activated:
            return

        if not WEBHOOK_URL:
            raise RuntimeError(
                "HOUSECALLPRO_WEBHOOK_URL is not set. It must be the public URL of POST /webhook."
            )

        TRIGGER.api = api_from_env()
        if not TRIGGER.activate():
            raise RuntimeError("Housecall Pro did not return a webhook id.")

        _activated = True
        print(f"[WEBHOOK] Active for workflow {WORKFLOW_ID}: {STATIC_DATA.get_webhook_id()}")


# ----------------------
# ROUTES
# ----------------------


@app.route("/webhook", methods=["POST"])
def housecall_pro_webhook():
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}

    items = TRIGGER.webhook(payload, dict(request.headers))
    if items is None:
        # Not a subscribed event: nothing to run, nothing to answer.
        return Response(status=204)

    written = record_events(DB_FILE, items)
    log(f"[WEBHOOK] Received {items[0].get('event') or 'event'} ({written} item(s))")
    return jsonify({"received": written})


@app.route("/health")
def health():
    return jsonify(
        {
            "workflow_id": WORKFLOW_ID,
            "webhook_id": STATIC_DATA.get_webhook_id(),
            "events": TRIGGER.events,
        }
    )


if __name__ == "__main__":
    activate_trigger()
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port)
