# clients/housecall_pro/actions/customer.py

from ..helpers import build_address, get_many, require, unwrap, unwrap_list, validate_id
from ..transport import clean_object, parse_tags

CUSTOMER_FIELDS = ("first_name", "last_name", "email", "phone_number", "company", "notes")


def get_all(api, params):
    return get_many(api, params, "/customers")


def get(api, params):
    customer_id = validate_id(params.get("customer_id"), "Customer")
    return unwrap(api.request("GET", f"/customers/{customer_id}"))


def create(api, params):
    extra = params.get("additional_fields") or {}

    body = {
        "first_name": require(params, "first_name"),
        "last_name": require(params, "last_name"),
    }
    for key in ("email", "phone_number", "company", "notes"):
        if extra.get(key):
            body[key] = extra[key]

    if extra.get("tags"):
        body["tags"] = parse_tags(extra["tags"])

    address = extra.get("address")
    if address:
        body["address"] = build_address(address)

    return unwrap(api.request("POST", "/customers", clean_object(body)))


def update(api, params):
    customer_id = validate_id(params.get("customer_id"), "Customer")
    fields = params.get("update_fields") or {}

    body = {key: fields[key] for key in CUSTOMER_FIELDS if fields.get(key)}
    if fields.get("tags"):
        body["tags"] = parse_tags(fields["tags"])

    return unwrap(api.request("PUT", f"/customers/{customer_id}", clean_object(body)))


def delete(api, params):
    customer_id = validate_id(params.get("customer_id"), "Customer")
    api.request("DELETE", f"/customers/{customer_id}")
    return {"success": True, "id": customer_id}


def search(api, params):
    query = {"q": require(params, "search_query")}
    return get_many(api, params, "/customers", query)


def get_properties(api, params):
    customer_id = validate_id(params.get("customer_id"), "Customer")
    return unwrap_list(api.request("GET", f"/customers/{customer_id}/addresses"))


def create_property(api, params):
    customer_id = validate_id(params.get("customer_id"), "Customer")
    body = {"street": require(params, "street")}
    body.update(params.get("property_fields") or {})
    return unwrap(api.request("POST", f"/customers/{customer_id}/addresses", clean_object(body)))


OPERATIONS = {
    "get_all": get_all,
    "get": get,
    "create": create,
    "update": update,
    "delete": delete,
    "search": search,
    "get_properties": get_properties,
    "create_property": create_property,
}
