# clients/housecall_pro/helpers.py

from __future__ import annotations

import re
from typing import Any, Dict, List, Union

from .constants import DEFAULT_PAGE_SIZE
from .errors import ValidationError

_SNAKE_RE = re.compile(r"_([a-z])")
_CAMEL_RE = re.compile(r"[A-Z]")


def require(params: Dict[str, Any], name: str) -> Any:
    """Fetch a required node parameter."""
    if name not in params or params[name] is None:
        raise ValidationError(f"Parameter '{name}' is required")
    return params[name]


def validate_id(value, resource_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{resource_name} ID is required")
    return str(value).strip()


def validate_option(value, options: Dict[str, str], label: str):
    """Reject values outside a fixed option set. Empty values are left to the caller."""
    if value in (None, ""):
        return value
    if value not in options:
        allowed = ", ".join(options)
        raise ValidationError(f"Invalid {label}: {value!r} (expected one of: {allowed})")
    return value


def parse_array_input(value) -> List[str]:
    if not value:
        return []
    if isinstance(value, list):
        return value
    return [v.strip() for v in str(value).split(",") if v.strip()]


def get_additional_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in fields.items() if v is not None and v != ""}


def build_address(data: Dict[str, Any]) -> Dict[str, Any]:
    address = {}
    if data.get("street"):
        address["street"] = data["street"]
    if data.get("street2"):
        address["street_line_2"] = data["street2"]
    if data.get("street_line_2"):
        address["street_line_2"] = data["street_line_2"]
    for key in ("city", "state", "zip", "country"):
        if data.get(key):
            address[key] = data[key]
    return address


def build_line_item(data: Dict[str, Any]) -> Dict[str, Any]:
    item = {}
    if data.get("name"):
        item["name"] = data["name"]
    if data.get("description"):
        item["description"] = data["description"]
    for key in ("quantity", "unit_price", "taxable"):
        if data.get(key) is not None:
            item[key] = data[key]
    return item


# -----------------------------
# Envelopes
# -----------------------------


def unwrap(response: Any) -> Any:
    """`data` from a single-entity envelope, else the response itself."""
    if isinstance(response, dict) and response.get("data") is not None:
        return response["data"]
    return response


def unwrap_list(response: Any) -> List[Any]:
    if isinstance(response, dict) and response.get("data") is not None:
        data = response["data"]
        return data if isinstance(data, list) else [data]
    if isinstance(response, list):
        return response
    return [response]


def return_data(data: Union[Dict[str, Any], List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    if isinstance(data, list):
        return [{"json": item} for item in data]
    return [{"json": data}]


# -----------------------------
# Key casing
# -----------------------------


def snake_to_camel(value: str) -> str:
    return _SNAKE_RE.sub(lambda m: m.group(1).upper(), value)


def camel_to_snake(value: str) -> str:
    return _CAMEL_RE.sub(lambda m: f"_{m.group(0).lower()}", value)


def object_to_snake_case(obj: Dict[str, Any]) -> Dict[str, Any]:
    result = {}
    for key, value in obj.items():
        if isinstance(value, dict):
            result[camel_to_snake(key)] = object_to_snake_case(value)
        else:
            result[camel_to_snake(key)] = value
    return result


def _transform_keys(obj: Any, convert) -> Any:
    if isinstance(obj, list):
        return [_transform_keys(item, convert) for item in obj]
    if isinstance(obj, dict):
        return {convert(k): _transform_keys(v, convert) for k, v in obj.items()}
    return obj


def transform_response(obj):
    """Deep snake_case -> camelCase on keys, lists included."""
    return _transform_keys(obj, snake_to_camel)


def transform_request(obj):
    """Deep camelCase -> snake_case on keys, lists included."""
    return _transform_keys(obj, camel_to_snake)


def format_error_message(error: Any) -> str:
    if isinstance(error, BaseException):
        return str(error)
    if isinstance(error, str):
        return error
    return "An unknown error occurred"


def get_many(api, params: Dict[str, Any], endpoint: str, query: Dict[str, Any] = None) -> List[Dict[str, Any]]:
    """Shared body of every list operation: return_all drains, otherwise page up to `limit`."""
    if params.get("return_all"):
        return api.request_all_items("GET", endpoint, query=query)
    limit = params.get("limit") or DEFAULT_PAGE_SIZE
    return api.request_paginated("GET", endpoint, query=query, limit=limit)
