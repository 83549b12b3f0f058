# clients/housecall_pro/actions/job.py

from ..constants import JOB_STATUSES, JOB_TYPES
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
from ..transport import clean_object, format_date, parse_money_amount, parse_tags


def _job_id(params):
    return validate_id(params.get("job_id"), "Job")


def _job_body(fields):
    """Fields shared by create and update."""
    body = {}
    if fields.get("scheduled_end"):
        body["scheduled_end"] = format_date(fields["scheduled_end"])
    for key in ("description", "address_id"):
        if fields.get(key):
            body[key] = fields[key]
    if fields.get("job_type"):
        body["job_type"] = validate_option(fields["job_type"], JOB_TYPES, "job type")
    if fields.get("assigned_employee_ids"):
        body["assigned_employee_ids"] = parse_array_input(fields["assigned_employee_ids"])
    if fields.get("tags"):
        body["tags"] = parse_tags(fields["tags"])
    return body


def get_all(api, params):
    filters = params.get("filters") or {}
    query = {}
    validate_option(filters.get("work_status"), JOB_STATUSES, "job status")

    for key in ("customer_id", "work_status", "employee_ids"):
        if filters.get(key):
            query[f"filter[{key}]"] = filters[key]
    for key in ("scheduled_start_min", "scheduled_start_max"):
        if filters.get(key):
            query[f"filter[{key}]"] = format_date(filters[key])

    return get_many(api, params, "/jobs", query)


def get(api, params):
    return unwrap(api.request("GET", f"/jobs/{_job_id(params)}"))


def create(api, params):
    body = {
        "customer_id": require(params, "customer_id"),
        "scheduled_start": format_date(require(params, "scheduled_start")),
    }
    body.update(_job_body(params.get("additional_fields") or {}))
    return unwrap(api.request("POST", "/jobs", clean_object(body)))


def update(api, params):
    job_id = _job_id(params)
    fields = params.get("update_fields") or {}

    body = {}
    if fields.get("scheduled_start"):
        body["scheduled_start"] = format_date(fields["scheduled_start"])
    if fields.get("work_status"):
        body["work_status"] = validate_option(fields["work_status"], JOB_STATUSES, "job status")
    body.update(_job_body(fields))

    return unwrap(api.request("PUT", f"/jobs/{job_id}", clean_object(body)))


def delete(api, params):
    job_id = _job_id(params)
    api.request("DELETE", f"/jobs/{job_id}")
    return {"success": True, "id": job_id}


def get_line_items(api, params):
    return unwrap_list(api.request("GET", f"/jobs/{_job_id(params)}/line_items"))


def add_line_item(api, params):
    job_id = _job_id(params)
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
    return unwrap(api.request("POST", f"/jobs/{job_id}/line_items", clean_object(item)))


def complete(api, params):
    return unwrap(api.request("PUT", f"/jobs/{_job_id(params)}", {"work_status": "complete"}))


def cancel(api, params):
    return unwrap(api.request("PUT", f"/jobs/{_job_id(params)}", {"work_status": "canceled"}))


def dispatch(api, params):
    job_id = _job_id(params)
    body = {"employee_id": require(params, "employee_id")}
    return unwrap(api.request("POST", f"/jobs/{job_id}/dispatch", body))


OPERATIONS = {
    "get_all": get_all,
    "get": get,
    "create": create,
    "update": update,
    "delete": delete,
    "get_line_items": get_line_items,
    "add_line_item": add_line_item,
    "complete": complete,
    "cancel": cancel,
    "dispatch": dispatch,
}
