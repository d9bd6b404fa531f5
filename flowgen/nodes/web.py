from .base import CatalogNode


class HTTPRequestNode(CatalogNode):
    """Generic outbound call; no credential kind is required because auth is chosen per request."""
    TYPE_ID = "n8n-nodes-base.httpRequest"
    DISPLAY_NAME = "HTTP Request"
    DESCRIPTION = "Make HTTP requests to any API"
    CATEGORIES = ["output"]
    VERSION = 3
    PARAMS = {
        "method": {"type": "options", "enum": ["GET", "POST", "PUT", "DELETE"], "default": "GET"},
        "url": {
            "type": "string",
            "default": "",
            "required": True,
            "description": "The URL to make the request to",
        },
        "authentication": {
            "type": "options",
            "enum": ["none", "basicAuth", "headerAuth"],
            "default": "none",
        },
    }
    USES = ["API calls", "webhook triggers", "external integrations"]
    EXAMPLE = {"method": "POST", "url": "https://api.example.com/data", "authentication": "headerAuth"}
