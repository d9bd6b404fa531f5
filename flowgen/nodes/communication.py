from .base import CatalogNode


class SlackNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.slack"
    DISPLAY_NAME = "Slack"
    DESCRIPTION = "Send messages and interact with Slack"
    CATEGORIES = ["communication"]
    PARAMS = {
        "resource": {"type": "options", "enum": ["message", "channel", "user", "file"], "default": "message"},
        "operation": {"type": "options", "enum": ["post", "get", "update"], "default": "post"},
        "channel": {"type": "string", "default": "", "description": "Channel to send message to"},
        "text": {"type": "string", "default": "", "description": "Message text"},
    }
    CREDENTIALS = ["slackApi"]
    USES = ["team notifications", "alerts", "collaboration", "status updates"]
    EXAMPLE = {
        "resource": "message",
        "operation": "post",
        "channel": "#general",
        "text": "={{ $json.message }}",
    }


class GmailNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.gmail"
    DISPLAY_NAME = "Gmail"
    DESCRIPTION = "Send and receive emails via Gmail"
    CATEGORIES = ["communication"]
    PARAMS = {
        "resource": {"type": "options", "enum": ["message", "draft", "label"], "default": "message"},
        "operation": {"type": "options", "enum": ["send", "get", "getAll"], "default": "send"},
        "to": {"type": "string", "default": "", "description": "Email recipient"},
        "subject": {"type": "string", "default": "", "description": "Email subject"},
        "message": {"type": "string", "default": "", "description": "Email body"},
    }
    CREDENTIALS = ["gmailOAuth2"]
    USES = ["email notifications", "reports", "automated responses", "customer communication"]
    EXAMPLE = {
        "resource": "message",
        "operation": "send",
        "to": "={{ $json.recipientEmail }}",
        "subject": "Weekly Report",
        "message": "={{ $json.reportContent }}",
    }


class DiscordNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.discord"
    DISPLAY_NAME = "Discord"
    DESCRIPTION = "Send messages to Discord"
    CATEGORIES = ["communication"]
    PARAMS = {
        "text": {"type": "string", "default": "", "description": "Message to send"},
        "username": {"type": "string", "default": "", "description": "Bot username"},
    }
    CREDENTIALS = ["discordWebhookApi"]
    USES = ["community notifications", "gaming alerts", "team updates"]
    EXAMPLE = {"text": "={{ $json.notification }}", "username": "Automation Bot"}
