HOUSECALL_PRO_API_BASE_URL = "https://api.housecallpro.com/v1"

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100

JOB_STATUSES = {
    "scheduled": "Scheduled",
    "in_progress": "In Progress",
    "complete": "Complete",
    "canceled": "Canceled",
}

JOB_TYPES = {
    "service": "Service",
    "maintenance": "Maintenance",
    "installation": "Installation",
}

ESTIMATE_STATUSES = {
    "draft": "Draft",
    "sent": "Sent",
    "approved": "Approved",
    "declined": "Declined",
}

INVOICE_STATUSES = {
    "draft": "Draft",
    "sent": "Sent",
    "paid": "Paid",
    "void": "Void",
}

EMPLOYEE_ROLES = {
    "admin": "Admin",
    "office": "Office",
    "field": "Field",
}

LEAD_STATUSES = {
    "new": "New",
    "contacted": "Contacted",
    "qualified": "Qualified",
    "converted": "Converted",
}

PAYMENT_METHODS = {
    "cash": "Cash",
    "check": "Check",
    "card": "Card",
}

WEBHOOK_EVENTS = {
    "job.created": "Job Created",
    "job.scheduled": "Job Scheduled",
    "job.completed": "Job Completed",
    "job.canceled": "Job Canceled",
    "estimate.created": "Estimate Created",
    "estimate.sent": "Estimate Sent",
    "estimate.approved": "Estimate Approved",
    "invoice.created": "Invoice Created",
    "invoice.sent": "Invoice Sent",
    "invoice.paid": "Invoice Paid",
    "customer.created": "Customer Created",
    "customer.updated": "Customer Updated",
    "payment.created": "Payment Created",
}

RESOURCES = {
    "customer": "Customer",
    "job": "Job",
    "estimate": "Estimate",
    "invoice": "Invoice",
    "employee": "Employee",
    "schedule": "Schedule",
    "payment": "Payment",
    "lead": "Lead",
    "price_book": "Price Book",
    "webhook": "Webhook",
}
