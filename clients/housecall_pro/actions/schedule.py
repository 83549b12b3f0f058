# clients/housecall_pro/actions/schedule.py

from ..helpers import parse_array_input, require, unwrap, unwrap_list, validate_id
from ..transport import clean_object, format_date


def _date_range_query(params):
    return {
        "filter[start_date]": format_date(require(params, "start_date")),
        "filter[end_date]": format_date(require(params, "end_date")),
    }


def _appointment_id(params):
    return validate_id(params.get("appointment_id"), "Appointment")


def get(api, params):
    options = params.get("options") or {}

    query = _date_range_query(params)
    if options.get("employee_ids"):
        query["filter[employee_ids]"] = options["employee_ids"]

    return unwrap_list(api.request("GET", "/schedule", query=query))


def get_availability(api, params):
    options = params.get("availability_options") or {}

    query = {
        "start_date": format_date(require(params, "start_date")),
        "end_date": format_date(require(params, "end_date")),
        "slot_duration": require(params, "slot_duration"),
    }
    if options.get("employee_ids"):
        query["employee_ids"] = options["employee_ids"]

    return unwrap_list(api.request("GET", "/schedule/availability", query=query))


def get_time_off(api, params):
    return unwrap_list(api.request("GET", "/time_off", query=_date_range_query(params)))


def create_appointment(api, params):
    options = params.get("appointment_options") or {}

    body = {
        "job_id": require(params, "job_id"),
        "start_time": format_date(require(params, "start_time")),
        "end_time": format_date(require(params, "end_time")),
    }
    if options.get("employee_ids"):
        body["employee_ids"] = parse_array_input(options["employee_ids"])
    if options.get("notes"):
        body["notes"] = options["notes"]

    return unwrap(api.request("POST", "/schedule/appointments", clean_object(body)))


def update_appointment(api, params):
    appointment_id = _appointment_id(params)
    fields = params.get("update_fields") or {}

    body = {}
    for key in ("start_time", "end_time"):
        if fields.get(key):
            body[key] = format_date(fields[key])
    if fields.get("notes"):
        body["notes"] = fields["notes"]
    if fields.get("employee_ids"):
        body["employee_ids"] = parse_array_input(fields["employee_ids"])

    return unwrap(
        api.request("PUT", f"/schedule/appointments/{appointment_id}", clean_object(body))
    )


def delete_appointment(api, params):
    appointment_id = _appointment_id(params)
    api.request("DELETE", f"/schedule/appointments/{appointment_id}")
    return {"success": True, "id": appointment_id}


def create_time_off(api, params):
    options = params.get("time_off_options") or {}

    body = {
        "employee_id": require(params, "employee_id"),
        "start_date": format_date(require(params, "time_off_start")),
        "end_date": format_date(require(params, "time_off_end")),
    }
    if options.get("reason"):
        body["reason"] = options["reason"]

    return unwrap(api.request("POST", "/time_off", clean_object(body)))


OPERATIONS = {
    "get": get,
    "get_availability": get_availability,
    "get_time_off": get_time_off,
    "create_appointment": create_appointment,
    "update_appointment": update_appointment,
    "delete_appointment": delete_appointment,
    "create_time_off": create_time_off,
}
