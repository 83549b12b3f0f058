# clients/housecall_pro/actions/webhook.py

from ..constants import WEBHOOK_EVENTS
from ..helpers import get_many, parse_array_input, require, unwrap, validate_id, validate_option
from ..transport import clean_object


def _webhook_id(params):
    return validate_id(params.get("webhook_id"), "Webhook")


def get_all(api, params):
    return get_many(api, params, "/webhooks")


def create(api, params):
    options = params.get("additional_options") or {}

    body = {
        "url": require(params, "url"),
        "events": [
            validate_option(event, WEBHOOK_EVENTS, "webhook event")
            for event in parse_array_input(require(params, "events"))
        ],
    }
    if options.get("secret"):
        body["secret"] = options["secret"]

    return unwrap(api.request("POST", "/webhooks", clean_object(body)))


def delete(api, params):
    webhook_id = _webhook_id(params)
    api.request("DELETE", f"/webhooks/{webhook_id}")
    return {"success": True, "id": webhook_id}


def test(api, params):
    """Ask Housecall Pro to send a sample delivery to the webhook."""
    return unwrap(api.request("POST", f"/webhooks/{_webhook_id(params)}/test"))


OPERATIONS = {
    "get_all": get_all,
    "create": create,
    "delete": delete,
    "test": test,
}
