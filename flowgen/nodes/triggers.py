from .base import CatalogNode


class ManualTriggerNode(CatalogNode):
    """Entry point started by hand from the editor."""
    TYPE_ID = "n8n-nodes-base.manualTrigger"
    DISPLAY_NAME = "Manual Trigger"
    DESCRIPTION = "Starts the workflow when it is executed manually"
    CATEGORIES = ["trigger"]
    USES = ["manual runs", "testing", "on-demand execution"]


class ScheduleTriggerNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.cron"
    DISPLAY_NAME = "Schedule Trigger"
    DESCRIPTION = "Triggers workflow on a schedule using cron expressions"
    CATEGORIES = ["trigger", "schedule"]
    PARAMS = {
        "triggerTimes": {
            "type": "object",
            "default": {},
            "required": True,
            "description": "When to trigger the workflow",
        },
        "mode": {
            "type": "options",
            "enum": ["everyMinute", "everyHour", "everyDay", "everyWeek", "everyMonth", "custom"],
            "default": "everyWeek",
            "description": "Trigger mode",
        },
    }
    USES = ["scheduled reports", "daily backups", "weekly summaries", "recurring tasks"]
    EXAMPLE = {
        "mode": "everyWeek",
        "triggerTimes": {"item": [{"hour": 9, "minute": 0, "dayOfWeek": 1}]},
    }


class WebhookNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.webhook"
    DISPLAY_NAME = "Webhook"
    DESCRIPTION = "Starts workflow when a webhook is called"
    CATEGORIES = ["trigger"]
    PARAMS = {
        "httpMethod": {
            "type": "options",
            "enum": ["GET", "POST", "PUT", "DELETE"],
            "default": "POST",
            "description": "HTTP method to listen for",
        },
        "path": {"type": "string", "default": "", "description": "Webhook path"},
        "responseMode": {
            "type": "options",
            "enum": ["onReceived", "lastNode"],
            "default": "onReceived",
        },
    }
    USES = ["external API integrations", "form submissions", "third-party notifications", "real-time events"]


class ErrorTriggerNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.errorTrigger"
    DISPLAY_NAME = "Error Trigger"
    DESCRIPTION = "Triggers when an error occurs in another workflow"
    CATEGORIES = ["trigger"]
    USES = ["error handling", "failure notifications", "logging"]
