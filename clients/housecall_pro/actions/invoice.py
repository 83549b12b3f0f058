# clients/housecall_pro/actions/invoice.py

from ..constants import INVOICE_STATUSES, PAYMENT_METHODS
from ..helpers import get_many, require, unwrap, validate_id, validate_option
from ..transport import build_filter_query, clean_object, format_date, parse_money_amount


def _invoice_id(params):
    return validate_id(params.get("invoice_id"), "Invoice")


def _invoice_body(fields):
    body = {key: fields[key] for key in ("message", "notes") if fields.get(key)}
    if fields.get("due_date"):
        body["due_date"] = format_date(fields["due_date"])
    return body


def get_all(api, params):
    filters = params.get("filters") or {}
    validate_option(filters.get("status"), INVOICE_STATUSES, "invoice status")
    query = build_filter_query(
        {key: filters.get(key) for key in ("customer_id", "job_id", "status")}
    )
    return get_many(api, params, "/invoices", query)


def get(api, params):
    return unwrap(api.request("GET", f"/invoices/{_invoice_id(params)}"))


def create(api, params):
    extra = params.get("additional_fields") or {}

    body = {"customer_id": require(params, "customer_id")}
    if extra.get("job_id"):
        body["job_id"] = extra["job_id"]
    body.update(_invoice_body(extra))

    return unwrap(api.request("POST", "/invoices", clean_object(body)))


def update(api, params):
    invoice_id = _invoice_id(params)
    body = _invoice_body(params.get("update_fields") or {})
    return unwrap(api.request("PUT", f"/invoices/{invoice_id}", clean_object(body)))


def delete(api, params):
    invoice_id = _invoice_id(params)
    api.request("DELETE", f"/invoices/{invoice_id}")
    return {"success": True, "id": invoice_id}


def send(api, params):
    return unwrap(api.request("POST", f"/invoices/{_invoice_id(params)}/send"))


def void(api, params):
    return unwrap(api.request("POST", f"/invoices/{_invoice_id(params)}/void"))


def record_payment(api, params):
    invoice_id = _invoice_id(params)
    fields = params.get("payment_fields") or {}

    body = {
        "invoice_id": invoice_id,
        "amount": parse_money_amount(require(params, "amount")),
        "payment_method": validate_option(
            require(params, "payment_method"), PAYMENT_METHODS, "payment method"
        ),
    }
    if fields.get("note"):
        body["note"] = fields["note"]
    if fields.get("received_at"):
        body["received_at"] = format_date(fields["received_at"])

    return unwrap(api.request("POST", "/payments", clean_object(body)))


OPERATIONS = {
    "get_all": get_all,
    "get": get,
    "create": create,
    "update": update,
    "delete": delete,
    "send": send,
    "void": void,
    "record_payment": record_payment,
}
