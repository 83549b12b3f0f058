# clients/housecall_pro/actions/payment.py

from ..constants import PAYMENT_METHODS
from ..helpers import get_many, require, unwrap, validate_id, validate_option
from ..transport import clean_object, format_date, parse_money_amount


def _payment_id(params):
    return validate_id(params.get("payment_id"), "Payment")


def get_all(api, params):
    return get_many(api, params, "/payments")


def get(api, params):
    return unwrap(api.request("GET", f"/payments/{_payment_id(params)}"))


def get_by_invoice(api, params):
    invoice_id = validate_id(params.get("invoice_id"), "Invoice")
    return api.request_all_items("GET", "/payments", query={"filter[invoice_id]": invoice_id})


def create(api, params):
    extra = params.get("additional_fields") or {}

    body = {
        "invoice_id": require(params, "invoice_id"),
        "amount": parse_money_amount(require(params, "amount")),
        "payment_method": validate_option(
            require(params, "payment_method"), PAYMENT_METHODS, "payment method"
        ),
    }
    if extra.get("note"):
        body["note"] = extra["note"]
    if extra.get("received_at"):
        body["received_at"] = format_date(extra["received_at"])

    return unwrap(api.request("POST", "/payments", clean_object(body)))


def refund(api, params):
    payment_id = _payment_id(params)
    options = params.get("refund_options") or {}

    body = {"amount": parse_money_amount(require(params, "refund_amount"))}
    if options.get("reason"):
        body["reason"] = options["reason"]

    return unwrap(api.request("POST", f"/payments/{payment_id}/refund", clean_object(body)))


OPERATIONS = {
    "get_all": get_all,
    "get": get,
    "get_by_invoice": get_by_invoice,
    "create": create,
    "refund": refund,
}
