# clients/housecall_pro/actions/price_book.py

from ..helpers import get_many, require, unwrap, validate_id
from ..transport import clean_object, parse_money_amount


def _item_id(params):
    return validate_id(params.get("item_id"), "Item")


def _item_body(fields):
    body = {key: fields[key] for key in ("name", "description", "sku", "category_id") if fields.get(key)}
    if fields.get("taxable") is not None:
        body["taxable"] = fields["taxable"]
    for key in ("unit_price", "unit_cost"):
        if fields.get(key) is not None:
            body[key] = parse_money_amount(fields[key])
    return body


def get_items(api, params):
    filters = params.get("filters") or {}
    query = {}
    for key in ("category_id", "q"):
        if filters.get(key):
            query[f"filter[{key}]"] = filters[key]
    if filters.get("taxable") is not None:
        query["filter[taxable]"] = filters["taxable"]
    return get_many(api, params, "/price_book/items", query)


def get_item(api, params):
    return unwrap(api.request("GET", f"/price_book/items/{_item_id(params)}"))


def create_item(api, params):
    body = _item_body(params.get("additional_fields") or {})
    body["name"] = require(params, "name")
    body["unit_price"] = parse_money_amount(require(params, "unit_price"))
    return unwrap(api.request("POST", "/price_book/items", clean_object(body)))


def update_item(api, params):
    item_id = _item_id(params)
    body = _item_body(params.get("update_fields") or {})
    return unwrap(api.request("PUT", f"/price_book/items/{item_id}", clean_object(body)))


def delete_item(api, params):
    item_id = _item_id(params)
    api.request("DELETE", f"/price_book/items/{item_id}")
    return {"success": True, "id": item_id}


def get_categories(api, params):
    return get_many(api, params, "/price_book/categories")


OPERATIONS = {
    "get_items": get_items,
    "get_item": get_item,
    "create_item": create_item,
    "update_item": update_item,
    "delete_item": delete_item,
    "get_categories": get_categories,
}
