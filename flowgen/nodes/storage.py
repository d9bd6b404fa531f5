"""
Data storage nodes: spreadsheets, databases and workspace tools that read and write records.
"""

from .base import CatalogNode


class GoogleSheetsNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.googleSheets"
    DISPLAY_NAME = "Google Sheets"
    DESCRIPTION = "Read and write data to Google Sheets"
    CATEGORIES = ["input", "output"]
    VERSION = 3
    PARAMS = {
        "operation": {"type": "options", "enum": ["append", "read", "update", "delete"], "default": "append"},
        "sheetId": {"type": "string", "default": "", "description": "The ID of the spreadsheet"},
        "range": {"type": "string", "default": "A:Z", "description": "The range to read/write"},
    }
    CREDENTIALS = ["googleSheetsOAuth2Api"]
    USES = ["data logging", "reporting", "data sync", "tracking"]
    EXAMPLE = {"operation": "append", "sheetId": "{{ $json.spreadsheetId }}", "range": "Sheet1!A:Z"}


class AirtableNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.airtable"
    DISPLAY_NAME = "Airtable"
    DESCRIPTION = "Read and write data to Airtable"
    CATEGORIES = ["input", "output"]
    PARAMS = {
        "operation": {
            "type": "options",
            "enum": ["create", "list", "read", "update", "delete"],
            "default": "create",
        },
        "base": {"type": "string", "default": "", "description": "Base ID"},
        "table": {"type": "string", "default": "", "description": "Table name"},
    }
    CREDENTIALS = ["airtableApi"]
    USES = ["CRM management", "project tracking", "database operations"]
    EXAMPLE = {"operation": "create", "base": "appXXXXXXXX", "table": "Contacts"}


class PostgresNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.postgres"
    DISPLAY_NAME = "Postgres"
    DESCRIPTION = "Execute PostgreSQL queries"
    CATEGORIES = ["input", "output"]
    PARAMS = {
        "operation": {"type": "options", "enum": ["executeQuery", "insert", "update"], "default": "executeQuery"},
        "query": {"type": "string", "default": "", "description": "SQL query to execute"},
    }
    CREDENTIALS = ["postgres"]
    USES = ["database queries", "data storage", "data retrieval"]
    EXAMPLE = {"operation": "executeQuery", "query": "SELECT * FROM users WHERE active = true"}


class NotionNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.notion"
    DISPLAY_NAME = "Notion"
    DESCRIPTION = "Read and write to Notion databases"
    CATEGORIES = ["input", "output"]
    VERSION = 2
    PARAMS = {
        "resource": {"type": "options", "enum": ["page", "database", "block"], "default": "page"},
        "operation": {"type": "options", "enum": ["create", "get", "update"], "default": "create"},
    }
    CREDENTIALS = ["notionApi"]
    USES = ["knowledge management", "project tracking", "documentation"]
