# clients/housecall_pro/store.py

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import duckdb
import pandas as pd

from .transport import log

_TABLE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

DbPath = Union[str, Path]


# -----------------------------
# Per-workflow trigger state
# -----------------------------


class WorkflowStaticData:
    """
    The per-workflow record the trigger keeps between activations.

    One row per workflow in `workflow_static_data`; only the registered
    webhook id lives there. Each call opens and closes its own connection so
    the web process and the CLIs can share the DuckDB file.
    """

    TABLE = "workflow_static_data"

    def __init__(self, db_file: DbPath, workflow_id: str):
        self.db_file = str(db_file)
        self.workflow_id = workflow_id

    def _connect(self) -> duckdb.DuckDBPyConnection:
        conn = duckdb.connect(self.db_file)
        conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self.TABLE} (
                workflow_id TEXT PRIMARY KEY,
                webhook_id TEXT
            )
            """
        )
        return conn

    def get_webhook_id(self) -> Optional[str]:
        conn = self._connect()
        try:
            row = conn.execute(
                f"SELECT webhook_id FROM {self.TABLE} WHERE workflow_id = ?",
                [self.workflow_id],
            ).fetchone()
        finally:
            conn.close()
        return row[0] if row else None

    def set_webhook_id(self, webhook_id) -> None:
        conn = self._connect()
        try:
            conn.execute(
                f"""
                INSERT INTO {self.TABLE} (workflow_id, webhook_id)
                VALUES (?, ?)
                ON CONFLICT(workflow_id) DO UPDATE SET webhook_id = excluded.webhook_id
                """,
                [self.workflow_id, str(webhook_id)],
            )
        finally:
            conn.close()

    def clear_webhook_id(self) -> bool:
        """Returns True if a stored id was removed."""
        conn = self._connect()
        try:
            removed = conn.execute(
                f"DELETE FROM {self.TABLE} WHERE workflow_id = ? RETURNING workflow_id",
                [self.workflow_id],
            ).fetchall()
        finally:
            conn.close()
        return bool(removed)


def clear_webhook_id(db_file: DbPath, workflow_id: str) -> bool:
    """
    Utility: forget the stored webhook id if you need to.
    Returns True if it deleted a row, False if none existed.
    """
    return WorkflowStaticData(db_file, workflow_id).clear_webhook_id()


# -----------------------------
# Forwarded deliveries
# -----------------------------


def record_events(db_file: DbPath, items: List[Dict[str, Any]]) -> int:
    """Append forwarded webhook items to webhook_events. Returns rows written."""
    if not items:
        return 0

    df_events = pd.DataFrame(
        [
            {
                "event": item.get("event"),
                "received_at": item.get("_webhookReceivedAt")
                or datetime.now(timezone.utc).isoformat(),
                "payload": json.dumps(item, default=str),
            }
            for item in items
        ],
        columns=["event", "received_at", "payload"],
    )

    conn = duckdb.connect(str(db_file))
    try:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS webhook_events (
                event TEXT,
                received_at TEXT,
                payload TEXT
            )
            """
        )
        conn.register("df_events", df_events)
        conn.execute(
            "INSERT INTO webhook_events "
            "SELECT CAST(event AS TEXT), received_at, payload FROM df_events"
        )
        conn.unregister("df_events")
    finally:
        conn.close()

    return len(df_events)


# -----------------------------
# List results -> table
# -----------------------------


def _flatten_items(items: List[Dict[str, Any]]) -> pd.DataFrame:
    df = pd.json_normalize(items, sep="_")
    for col in df.columns:
        if df[col].map(lambda v: isinstance(v, (list, dict))).any():
            df[col] = df[col].map(
                lambda v: json.dumps(v, default=str) if isinstance(v, (list, dict)) else v
            )
    return df


def save_items_table(db_file: DbPath, table: str, items: List[Dict[str, Any]]) -> int:
    """
    Write list results into `table`.
    Staging+swap so readers never see a half-written table.
    """
    if not _TABLE_NAME_RE.match(table or ""):
        raise ValueError(f"Invalid table name: {table!r}")
    if not items:
        log(f"No items to save into {table}. Skipping.")
        return 0

    df_items = _flatten_items(items)
    stage = f"{table}_stage"

    conn = duckdb.connect(str(db_file))
    try:
        conn.register("df_items", df_items)
        conn.execute(f"CREATE OR REPLACE TABLE {stage} AS SELECT * FROM df_items")
        conn.unregister("df_items")

        conn.execute(f"DROP TABLE IF EXISTS {table}")
        conn.execute(f"ALTER TABLE {stage} RENAME TO {table}")
    finally:
        conn.close()

    log(f"Saved {len(df_items)} rows into {table} ({db_file})")
    return len(df_items)
