# clients/housecall_pro/node.py

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, List

from .actions import (
    customer,
    employee,
    estimate,
    invoice,
    job,
    lead,
    payment,
    price_book,
    schedule,
    webhook,
)
from .config import API_KEY, BASE_URL
from .errors import NodeOperationError
from .helpers import format_error_message, return_data
from .transport import HousecallProApi, log

Handler = Callable[[HousecallProApi, Dict[str, Any]], Any]

RESOURCE_OPERATIONS: Dict[str, Dict[str, Handler]] = {
    "customer": customer.OPERATIONS,
    "job": job.OPERATIONS,
    "estimate": estimate.OPERATIONS,
    "invoice": invoice.OPERATIONS,
    "employee": employee.OPERATIONS,
    "schedule": schedule.OPERATIONS,
    "payment": payment.OPERATIONS,
    "lead": lead.OPERATIONS,
    "price_book": price_book.OPERATIONS,
    "webhook": webhook.OPERATIONS,
}

STARTUP_NOTICE = (
    "Housecall Pro actions loaded. Requests go to {base_url}; "
    "the Housecall Pro API requires a MAX plan API key."
)

_notice_logged = False
_notice_lock = threading.Lock()


def announce_once() -> None:
    """Print the startup notice the first time anything runs in this process."""
    global _notice_logged
    if _notice_logged:
        return
    with _notice_lock:
        if _notice_logged:
            return
        _notice_logged = True
    log(STARTUP_NOTICE.format(base_url=BASE_URL))


def api_from_env() -> HousecallProApi:
    if not API_KEY:
        raise RuntimeError(
            "HOUSECALLPRO_API_KEY is not set. Add it to your environment."
        )
    return HousecallProApi(API_KEY, base_url=BASE_URL)


def resolve_operation(resource: str, operation: str) -> Handler:
    operations = RESOURCE_OPERATIONS.get(resource)
    if operations is None:
        raise NodeOperationError(f"Unknown resource: {resource}")
    handler = operations.get(operation)
    if handler is None:
        raise NodeOperationError(f"Unknown operation: {operation} (resource {resource})")
    return handler


def execute(
    api: HousecallProApi,
    resource: str,
    operation: str,
    items: List[Dict[str, Any]],
    continue_on_fail: bool = False,
) -> List[Dict[str, Any]]:
    """
    Run one resource operation for every input item, one at a time.

    Each item is the parameter mapping for that run. Output records carry the
    index of the item that produced them in `paired_item`. With continue_on_fail
    a failing item yields {"error": message} instead of stopping the batch.
    """
    announce_once()
    handler = resolve_operation(resource, operation)

    output: List[Dict[str, Any]] = []
    for i, params in enumerate(items):
        try:
            response = handler(api, params or {})
        except Exception as e:
            if not continue_on_fail:
                raise
            log(f"{resource}.{operation} item {i} failed: {e}")
            output.append({"json": {"error": format_error_message(e)}, "paired_item": i})
            continue

        for record in return_data(response):
            record["paired_item"] = i
            output.append(record)

    return output
