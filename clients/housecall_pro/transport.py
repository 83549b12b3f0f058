# clients/housecall_pro/transport.py

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

import pandas as pd
import requests
from requests.exceptions import HTTPError, RequestException

from .config import BASE_URL, REQUEST_TIMEOUT
from .constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from .errors import HousecallProApiError, ValidationError

# -----------------------------
# Constants / logging
# -----------------------------

USER_AGENT = "HousecallProActions/1.0"

# Unique-ish id so you can see which process/run produced logs
RUN_ID = uuid.uuid4().hex[:8]


def _ts() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def log(message: str) -> None:
    print(f"[{_ts()}] RUN {RUN_ID} {message}")


# -----------------------------
# Envelope helpers
# -----------------------------


def _page_items(response: Any) -> List[Dict[str, Any]]:
    """
    Normalize one page of a list endpoint to a list.
    Accepts {data: [...], meta: {...}}, a bare array, or a lone object.
    """
    data = response.get("data") if isinstance(response, dict) else None
    if data is None:
        data = response

    if isinstance(data, list):
        return list(data)
    if not data:
        return []
    return [data]


def _next_cursor(response: Any) -> Optional[str]:
    """has_more is the only continuation signal; a missing cursor always ends paging."""
    meta = response.get("meta") if isinstance(response, dict) else None
    if not isinstance(meta, dict) or not meta.get("has_more"):
        return None
    return meta.get("next_cursor") or None


# -----------------------------
# Client
# -----------------------------


class HousecallProApi:
    def __init__(
        self,
        api_key: str,
        base_url: str = BASE_URL,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Token {api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            }
        )

    def request(
        self,
        method: str,
        endpoint: str,
        body: Optional[Dict[str, Any]] = None,
        query: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        One authenticated call. Body and query are only sent when non-empty.
        Any transport failure or non-2xx status is raised as HousecallProApiError.
        """
        context = f"{method.upper()} {endpoint}"
        kwargs: Dict[str, Any] = {"timeout": REQUEST_TIMEOUT}
        if body:
            kwargs["json"] = body
        if query:
            kwargs["params"] = _encode_query(query)

        try:
            resp = self.session.request(method.upper(), f"{self.base_url}{endpoint}", **kwargs)
            resp.raise_for_status()
        except HTTPError as e:
            raise _api_error_from_response(e, context) from e
        except RequestException as e:
            raise HousecallProApiError(
                f"{type(e).__name__}: {e}", context=context
            ) from e

        if not resp.content:
            return {}

        try:
            return resp.json()
        except ValueError as e:
            raise HousecallProApiError(
                "Response body is not valid JSON",
                status_code=resp.status_code,
                payload=resp.text[:500],
                context=context,
            ) from e

    def request_all_items(
        self,
        method: str,
        endpoint: str,
        body: Optional[Dict[str, Any]] = None,
        query: Optional[Dict[str, Any]] = None,
        max_pages: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Drain every page at the maximum page size."""
        return self._paginate(
            method, endpoint, body, query, page_size=MAX_PAGE_SIZE, max_pages=max_pages
        )

    def request_paginated(
        self,
        method: str,
        endpoint: str,
        body: Optional[Dict[str, Any]] = None,
        query: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Page until `limit` items are collected or the server runs out."""
        page_size = min(limit or DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)
        return self._paginate(method, endpoint, body, query, page_size=page_size, limit=limit)

    def _paginate(
        self,
        method: str,
        endpoint: str,
        body: Optional[Dict[str, Any]],
        query: Optional[Dict[str, Any]],
        page_size: int,
        limit: Optional[int] = None,
        max_pages: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        params = dict(query or {})
        params["page[size]"] = page_size

        all_items: List[Dict[str, Any]] = []
        page = 0
        while True:
            response = self.request(method, endpoint, body, params)
            items = _page_items(response)
            all_items.extend(items)
            page += 1

            log(f"Fetched {endpoint} page {page} ({len(items)} items, {len(all_items)} total)")

            if limit and len(all_items) >= limit:
                return all_items[:limit]

            cursor = _next_cursor(response)
            if cursor is None:
                break

            if max_pages is not None and page >= max_pages:
                log(f"Stopping {endpoint} after {page} pages (max_pages={max_pages})")
                break

            params["page[cursor]"] = cursor

        return all_items


def _encode_query(query: Dict[str, Any]) -> Dict[str, Any]:
    # requests renders bools as True/False; the API wants lowercase
    return {
        key: ("true" if value else "false") if isinstance(value, bool) else value
        for key, value in query.items()
    }


def _api_error_from_response(err: HTTPError, context: str) -> HousecallProApiError:
    resp = err.response
    status = getattr(resp, "status_code", None)

    payload: Any = None
    if resp is not None:
        try:
            payload = resp.json()
        except ValueError:
            payload = resp.text

    message = HousecallProApiError.message_from_payload(payload) or str(err)
    return HousecallProApiError(message, status_code=status, payload=payload, context=context)


# -----------------------------
# Request shaping
# -----------------------------


def build_filter_query(filters: Dict[str, Any]) -> Dict[str, Any]:
    query = {}
    for key, value in filters.items():
        if value is None or value == "":
            continue
        if isinstance(value, (list, tuple)):
            query[f"filter[{key}]"] = ",".join(str(v) for v in value)
        else:
            query[f"filter[{key}]"] = value
    return query


def clean_object(obj: Dict[str, Any]) -> Dict[str, Any]:
    """
    Drop None and "" values, recursing into nested dicts.
    0, False and [] are kept. A nested dict that ends up empty is dropped.
    """
    cleaned = {}
    for key, value in obj.items():
        if value is None or (isinstance(value, str) and value == ""):
            continue

        if isinstance(value, dict):
            nested = clean_object(value)
            if nested:
                cleaned[key] = nested
        else:
            cleaned[key] = value
    return cleaned


def parse_tags(tags) -> List[str]:
    if not tags:
        return []
    if isinstance(tags, list):
        return tags
    return [t.strip() for t in str(tags).split(",") if t.strip()]


def format_date(value) -> Optional[str]:
    """ISO-8601 in UTC with milliseconds, e.g. 2024-01-15T10:30:00.000Z. Naive values are UTC."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None

    try:
        ts = pd.Timestamp(value)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"Invalid date: {value!r}") from e
    if pd.isna(ts):
        raise ValidationError(f"Invalid date: {value!r}")

    ts = ts.tz_localize("UTC") if ts.tzinfo is None else ts.tz_convert("UTC")
    return ts.strftime("%Y-%m-%dT%H:%M:%S") + f".{ts.microsecond // 1000:03d}Z"


def parse_money_amount(amount) -> str:
    """Two decimals, half away from zero. Non-numeric strings pass through."""
    if isinstance(amount, str):
        try:
            value = Decimal(amount.strip())
        except InvalidOperation:
            return amount
    else:
        value = Decimal(str(amount))

    if not value.is_finite():
        raise ValidationError(f"Invalid money amount: {amount!r}")
    return str(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
