# clients/housecall_pro/actions/employee.py

from ..constants import EMPLOYEE_ROLES
from ..helpers import get_many, require, unwrap, unwrap_list, validate_id, validate_option
from ..transport import clean_object, format_date, parse_money_amount

EMPLOYEE_FIELDS = ("first_name", "last_name", "email", "mobile_phone", "color")


def _employee_id(params):
    return validate_id(params.get("employee_id"), "Employee")


def _role(body, fields):
    if fields.get("role"):
        body["role"] = validate_option(fields["role"], EMPLOYEE_ROLES, "employee role")


def _hourly_rate(body, fields):
    if fields.get("hourly_rate") is not None:
        body["hourly_rate"] = parse_money_amount(fields["hourly_rate"])


def get_all(api, params):
    filters = params.get("filters") or {}
    query = {}
    if filters.get("role"):
        query["filter[role]"] = validate_option(filters["role"], EMPLOYEE_ROLES, "employee role")
    # active=False is a real filter value
    if filters.get("active") is not None:
        query["filter[active]"] = filters["active"]
    return get_many(api, params, "/employees", query)


def get(api, params):
    return unwrap(api.request("GET", f"/employees/{_employee_id(params)}"))


def create(api, params):
    extra = params.get("additional_fields") or {}

    body = {
        "first_name": require(params, "first_name"),
        "last_name": require(params, "last_name"),
        "email": require(params, "email"),
    }
    for key in ("mobile_phone", "color"):
        if extra.get(key):
            body[key] = extra[key]
    _role(body, extra)
    _hourly_rate(body, extra)

    return unwrap(api.request("POST", "/employees", clean_object(body)))


def update(api, params):
    employee_id = _employee_id(params)
    fields = params.get("update_fields") or {}

    body = {key: fields[key] for key in EMPLOYEE_FIELDS if fields.get(key)}
    _role(body, fields)
    _hourly_rate(body, fields)

    return unwrap(api.request("PUT", f"/employees/{employee_id}", clean_object(body)))


def deactivate(api, params):
    return unwrap(api.request("PUT", f"/employees/{_employee_id(params)}", {"active": False}))


def get_schedule(api, params):
    employee_id = _employee_id(params)

    query = {"filter[employee_ids]": employee_id}
    if params.get("start_date"):
        query["filter[start_date]"] = format_date(params["start_date"])
    if params.get("end_date"):
        query["filter[end_date]"] = format_date(params["end_date"])

    return unwrap_list(api.request("GET", "/schedule", query=query))


def get_jobs(api, params):
    employee_id = _employee_id(params)

    query = {"filter[employee_ids]": employee_id}
    if params.get("start_date"):
        query["filter[scheduled_start_min]"] = format_date(params["start_date"])
    if params.get("end_date"):
        query["filter[scheduled_start_max]"] = format_date(params["end_date"])

    return api.request_all_items("GET", "/jobs", query=query)


OPERATIONS = {
    "get_all": get_all,
    "get": get,
    "create": create,
    "update": update,
    "deactivate": deactivate,
    "get_schedule": get_schedule,
    "get_jobs": get_jobs,
}
