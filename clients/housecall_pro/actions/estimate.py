# clients/housecall_pro/actions/estimate.py

from ..constants import ESTIMATE_STATUSES
from ..helpers import (
    build_line_item,
    get_many,
    parse_array_input,
    require,
    unwrap,
    unwrap_list,
    validate_id,
    validate_option,
)
from ..transport import build_filter_query, clean_object, format_date, parse_money_amount


def _estimate_id(params):
    return validate_id(params.get("estimate_id"), "Estimate")


def _estimate_body(fields):
    body = {key: fields[key] for key in ("address_id", "message", "notes") if fields.get(key)}
    if fields.get("expiration_date"):
        body["expiration_date"] = format_date(fields["expiration_date"])
    return body


def get_all(api, params):
    filters = params.get("filters") or {}
    query = build_filter_query(
        {
            "customer_id": filters.get("customer_id"),
            "status": validate_option(filters.get("status"), ESTIMATE_STATUSES, "estimate status"),
        }
    )
    return get_many(api, params, "/estimates", query)


def get(api, params):
    return unwrap(api.request("GET", f"/estimates/{_estimate_id(params)}"))


def create(api, params):
    body = {"customer_id": require(params, "customer_id")}
    body.update(_estimate_body(params.get("additional_fields") or {}))
    return unwrap(api.request("POST", "/estimates", clean_object(body)))


def update(api, params):
    estimate_id = _estimate_id(params)
    fields = params.get("update_fields") or {}

    body = _estimate_body(fields)
    if fields.get("status"):
        body["status"] = validate_option(fields["status"], ESTIMATE_STATUSES, "estimate status")

    return unwrap(api.request("PUT", f"/estimates/{estimate_id}", clean_object(body)))


def delete(api, params):
    estimate_id = _estimate_id(params)
    api.request("DELETE", f"/estimates/{estimate_id}")
    return {"success": True, "id": estimate_id}


def get_line_items(api, params):
    return unwrap_list(api.request("GET", f"/estimates/{_estimate_id(params)}/line_items"))


def add_line_item(api, params):
    estimate_id = _estimate_id(params)
    fields = params.get("line_item_fields") or {}

    item = build_line_item(
        {
            "name": require(params, "item_name"),
            "unit_price": parse_money_amount(require(params, "unit_price")),
            "quantity": fields.get("quantity") or 1,
            "description": fields.get("description"),
            "taxable": fields.get("taxable"),
        }
    )
    return unwrap(
        api.request("POST", f"/estimates/{estimate_id}/line_items", clean_object(item))
    )


def convert_to_job(api, params):
    estimate_id = _estimate_id(params)
    options = params.get("job_options") or {}

    body = {}
    if options.get("scheduled_start"):
        body["scheduled_start"] = format_date(options["scheduled_start"])
    if options.get("assigned_employee_ids"):
        body["assigned_employee_ids"] = parse_array_input(options["assigned_employee_ids"])

    return unwrap(api.request("POST", f"/estimates/{estimate_id}/convert", clean_object(body)))


def send(api, params):
    return unwrap(api.request("POST", f"/estimates/{_estimate_id(params)}/send"))


OPERATIONS = {
    "get_all": get_all,
    "get": get,
    "create": create,
    "update": update,
    "delete": delete,
    "get_line_items": get_line_items,
    "add_line_item": add_line_item,
    "convert_to_job": convert_to_job,
    "send": send,
}
