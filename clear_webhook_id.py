from clients.housecall_pro.config import DB_FILE, WORKFLOW_ID
from clients.housecall_pro.store import clear_webhook_id

if clear_webhook_id(DB_FILE, WORKFLOW_ID):
    print(f"Webhook id cleared for workflow {WORKFLOW_ID}.")
else:
    print(f"No webhook id stored for workflow {WORKFLOW_ID}.")
