from .base import CatalogNode


class SalesforceNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.salesforce"
    DISPLAY_NAME = "Salesforce"
    DESCRIPTION = "Interact with Salesforce CRM"
    CATEGORIES = ["transform"]
    PARAMS = {
        "resource": {
            "type": "options",
            "enum": ["lead", "contact", "opportunity", "account"],
            "default": "lead",
        },
        "operation": {"type": "options", "enum": ["create", "get", "update"], "default": "create"},
    }
    CREDENTIALS = ["salesforceOAuth2Api"]
    USES = ["CRM automation", "lead management", "sales tracking"]


class HubSpotNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.hubspot"
    DISPLAY_NAME = "HubSpot"
    DESCRIPTION = "Interact with HubSpot CRM"
    CATEGORIES = ["transform"]
    PARAMS = {
        "resource": {"type": "options", "enum": ["contact", "company", "deal"], "default": "contact"},
    }
    CREDENTIALS = ["hubspotApi"]
    USES = ["marketing automation", "contact management", "lead tracking"]
