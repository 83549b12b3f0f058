"""
Manual action runner.

Runs one Housecall Pro resource operation over one or more parameter
items, the same way a workflow step would, and prints the output:

    python run_action.py customer get_all --params '{"limit": 10}'
    python run_action.py job complete --params '[{"job_id": "a"}, {"job_id": "b"}]' --continue-on-fail
    python run_action.py invoice get_all --params '{"return_all": true}' --save-table invoices
    python run_action.py --list
"""

import argparse
import json
import sys
import traceback
from datetime import datetime, timezone

from clients.housecall_pro.config import DB_FILE
from clients.housecall_pro.constants import RESOURCES
from clients.housecall_pro.helpers import transform_response
from clients.housecall_pro.node import RESOURCE_OPERATIONS, api_from_env, execute
from clients.housecall_pro.store import save_items_table


def parse_items(raw):
    data = json.loads(raw) if raw else {}
    if isinstance(data, dict):
        return [data]
    if isinstance(data, list):
        return data
    raise ValueError("--params must be a JSON object or a JSON array of objects")


def build_parser():
    parser = argparse.ArgumentParser(description="Run a Housecall Pro action")
    parser.add_argument("resource", nargs="?")
    parser.add_argument("operation", nargs="?")
    parser.add_argument("--list", action="store_true", help="list resources and their operations")
    parser.add_argument("--params", default="", help="JSON object, or array of objects (one per item)")
    parser.add_argument("--continue-on-fail", action="store_true")
    parser.add_argument("--camel", action="store_true", help="camelCase output keys")
    parser.add_argument("--save-table", default="", help="also write the output records to this DuckDB table")
    return parser


def print_operations():
    for resource, operations in RESOURCE_OPERATIONS.items():
        print(f"{resource} ({RESOURCES[resource]}): {', '.join(operations)}")


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list:
        print_operations()
        return 0
    if not args.resource or not args.operation:
        parser.print_usage()
        return 2

    print(f"\n[MANUAL] Running {args.resource}.{args.operation}...")
    print(f"[MANUAL] Timestamp: {datetime.now(timezone.utc).isoformat()}")

    try:
        items = parse_items(args.params)
        output = execute(
            api_from_env(),
            args.resource,
            args.operation,
            items,
            continue_on_fail=args.continue_on_fail,
        )
    except Exception as e:
        print("\n[MANUAL] Action FAILED!")
        print(str(e))
        traceback.print_exc()
        return 1

    records = [item["json"] for item in output]
    if args.save_table:
        save_items_table(DB_FILE, args.save_table, records)
    if args.camel:
        records = transform_response(records)

    print(json.dumps(records, indent=2, default=str))
    print(f"\n[MANUAL] {len(records)} record(s).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
