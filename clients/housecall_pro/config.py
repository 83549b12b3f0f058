from pathlib import Path
import os

from .constants import HOUSECALL_PRO_API_BASE_URL


# Same persistent directory for the webhook receiver, the CLIs and the webhook-id record.
def _resolve_persist_dir() -> Path:
    env = os.environ.get("PERSIST_DIR")
    if env:
        return Path(env)
    if Path("/var/data").exists():
        return Path("/var/data")
    return Path(__file__).resolve().parents[2]


def _csv_env(name: str) -> list:
    raw = os.environ.get(name, "")
    return [part.strip() for part in raw.split(",") if part.strip()]


PERSIST_DIR = _resolve_persist_dir()
PERSIST_DIR.mkdir(parents=True, exist_ok=True)

DB_FILE = PERSIST_DIR / "housecall_pro.duckdb"

API_KEY = os.environ.get("HOUSECALLPRO_API_KEY", "").strip()
BASE_URL = os.environ.get("HOUSECALLPRO_BASE_URL", "").strip() or HOUSECALL_PRO_API_BASE_URL

WORKFLOW_ID = os.environ.get("HOUSECALLPRO_WORKFLOW_ID", "").strip() or "default"
WEBHOOK_URL = os.environ.get("HOUSECALLPRO_WEBHOOK_URL", "").strip()
WEBHOOK_EVENTS = _csv_env("HOUSECALLPRO_WEBHOOK_EVENTS")

# connect timeout + read timeout
REQUEST_TIMEOUT = (10, 45)
