# clients/housecall_pro/actions/lead.py

from ..constants import LEAD_STATUSES
from ..helpers import get_many, require, unwrap, validate_id, validate_option
from ..transport import build_filter_query, clean_object

LEAD_FIELDS = ("first_name", "last_name", "email", "phone_number", "source", "notes")


def _lead_id(params):
    return validate_id(params.get("lead_id"), "Lead")


def get_all(api, params):
    filters = params.get("filters") or {}
    query = build_filter_query(
        {
            "status": validate_option(filters.get("status"), LEAD_STATUSES, "lead status"),
            "source": filters.get("source"),
        }
    )
    return get_many(api, params, "/leads", query)


def get(api, params):
    return unwrap(api.request("GET", f"/leads/{_lead_id(params)}"))


def create(api, params):
    extra = params.get("additional_fields") or {}

    body = {
        "first_name": require(params, "first_name"),
        "last_name": params.get("last_name"),
    }
    for key in ("email", "phone_number", "source", "notes"):
        if extra.get(key):
            body[key] = extra[key]

    return unwrap(api.request("POST", "/leads", clean_object(body)))


def update(api, params):
    lead_id = _lead_id(params)
    fields = params.get("update_fields") or {}

    body = {key: fields[key] for key in LEAD_FIELDS if fields.get(key)}
    if fields.get("status"):
        body["status"] = validate_option(fields["status"], LEAD_STATUSES, "lead status")

    return unwrap(api.request("PUT", f"/leads/{lead_id}", clean_object(body)))


def delete(api, params):
    lead_id = _lead_id(params)
    api.request("DELETE", f"/leads/{lead_id}")
    return {"success": True, "id": lead_id}


def convert(api, params):
    """Turn a lead into a customer."""
    return unwrap(api.request("POST", f"/leads/{_lead_id(params)}/convert"))


OPERATIONS = {
    "get_all": get_all,
    "get": get,
    "create": create,
    "update": update,
    "delete": delete,
    "convert": convert,
}
