"""
Register, remove or inspect the Housecall Pro webhook for this workflow:

    python manage_webhook.py activate
    python manage_webhook.py deactivate
    python manage_webhook.py status
"""

import sys
import traceback

from clients.housecall_pro.config import DB_FILE, WEBHOOK_EVENTS, WEBHOOK_URL, WORKFLOW_ID
from clients.housecall_pro.node import api_from_env
from clients.housecall_pro.store import WorkflowStaticData
from clients.housecall_pro.trigger import HousecallProTrigger

COMMANDS = ("activate", "deactivate", "status")


def build_trigger():
    return HousecallProTrigger(
        api=api_from_env(),
        static_data=WorkflowStaticData(DB_FILE, WORKFLOW_ID),
        webhook_url=WEBHOOK_URL,
        events=WEBHOOK_EVENTS,
    )


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1 or argv[0] not in COMMANDS:
        print(f"usage: python manage_webhook.py [{' | '.join(COMMANDS)}]")
        return 2

    command = argv[0]
    try:
        trigger = build_trigger()
        if command == "activate":
            ok = trigger.activate()
            print(f"[WEBHOOK] activate -> {ok} (id={trigger.static_data.get_webhook_id()})")
            return 0 if ok else 1
        if command == "deactivate":
            trigger.delete()
            print("[WEBHOOK] Webhook removed.")
            return 0

        exists = trigger.check_exists()
        print(f"[WEBHOOK] exists={exists} id={trigger.static_data.get_webhook_id()} url={WEBHOOK_URL}")
        return 0
    except Exception as e:
        print(f"[WEBHOOK] {command} FAILED!")
        print(str(e))
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
