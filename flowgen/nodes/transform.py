from .base import CatalogNode


class SetNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.set"
    DISPLAY_NAME = "Set"
    DESCRIPTION = "Set or modify data values"
    CATEGORIES = ["transform"]
    PARAMS = {
        "values": {"type": "object", "default": {}, "description": "Values to set"},
        "options": {"type": "object", "default": {}},
    }
    USES = ["data transformation", "field mapping", "data formatting"]
    EXAMPLE = {
        "values": {
            "string": [{"name": "fullName", "value": "={{ $json.firstName }} {{ $json.lastName }}"}],
        }
    }


class CodeNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.code"
    DISPLAY_NAME = "Code"
    DESCRIPTION = "Execute custom JavaScript code"
    CATEGORIES = ["transform"]
    PARAMS = {
        "mode": {
            "type": "options",
            "enum": ["runOnceForAllItems", "runOnceForEachItem"],
            "default": "runOnceForAllItems",
        },
        "jsCode": {"type": "string", "default": "", "description": "JavaScript code to execute"},
    }
    USES = ["custom logic", "complex transformations", "data validation"]
    EXAMPLE = {
        "mode": "runOnceForAllItems",
        "jsCode": "return items.map(item => ({ ...item.json, processed: true }));",
    }


class FilterNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.filter"
    DISPLAY_NAME = "Filter"
    DESCRIPTION = "Filter items based on conditions"
    CATEGORIES = ["transform"]
    PARAMS = {
        "conditions": {"type": "object", "default": {}, "description": "Filter conditions"},
    }
    USES = ["data filtering", "validation", "conditional processing"]
    EXAMPLE = {
        "conditions": {
            "string": [{"value1": "={{ $json.status }}", "operation": "equals", "value2": "active"}],
        }
    }
