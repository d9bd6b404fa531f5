"""
Control Flow Nodes

Branching, looping and pacing constructs:
- IfNode: Binary condition branching
- SwitchNode: Multi-branch routing
- MergeNode: Combine parallel branches
- SplitInBatchesNode / LoopNode: Iterate over items
- WaitNode: Pause execution
"""

from .base import CatalogNode


class IfNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.if"
    DISPLAY_NAME = "IF"
    DESCRIPTION = "Split workflow based on conditions"
    CATEGORIES = ["transform"]
    PARAMS = {
        "conditions": {"type": "object", "default": {}, "description": "Conditions to check"},
        "combineOperation": {"type": "options", "enum": ["all", "any"], "default": "all"},
    }
    USES = ["conditional routing", "data filtering", "decision trees"]
    EXAMPLE = {
        "conditions": {
            "number": [{"value1": "={{ $json.amount }}", "operation": "larger", "value2": 1000}],
        }
    }


class SwitchNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.switch"
    DISPLAY_NAME = "Switch"
    DESCRIPTION = "Route items to different branches"
    CATEGORIES = ["transform"]
    PARAMS = {
        "mode": {"type": "options", "enum": ["rules", "expression"], "default": "rules"},
        "rules": {"type": "object", "default": {}, "description": "Switch rules"},
    }
    USES = ["multi-path routing", "categorization", "workflow branching"]


class MergeNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.merge"
    DISPLAY_NAME = "Merge"
    DESCRIPTION = "Merge data from multiple sources"
    CATEGORIES = ["transform"]
    VERSION = 2
    PARAMS = {
        "mode": {"type": "options", "enum": ["combine", "append", "keepMatches"], "default": "combine"},
    }
    USES = ["data combination", "parallel processing", "data enrichment"]


class SplitInBatchesNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.splitInBatches"
    DISPLAY_NAME = "Split In Batches"
    DESCRIPTION = "Process items in batches"
    CATEGORIES = ["transform"]
    PARAMS = {
        "batchSize": {"type": "number", "default": 10, "description": "Number of items per batch"},
        "options": {"type": "object", "default": {}},
    }
    USES = ["batch processing", "rate limiting", "API pagination"]


class LoopNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.loop"
    DISPLAY_NAME = "Loop Over Items"
    DESCRIPTION = "Execute operations for each item"
    CATEGORIES = ["transform"]
    USES = ["iterating over arrays", "bulk operations", "data processing"]


class WaitNode(CatalogNode):
    TYPE_ID = "n8n-nodes-base.wait"
    DISPLAY_NAME = "Wait"
    DESCRIPTION = "Pause workflow execution"
    CATEGORIES = ["transform"]
    PARAMS = {
        "resume": {
            "type": "options",
            "enum": ["timeInterval", "specificTime", "webhook"],
            "default": "timeInterval",
        },
        "amount": {"type": "number", "default": 1, "description": "Time to wait"},
        "unit": {"type": "options", "enum": ["seconds", "minutes", "hours"], "default": "minutes"},
    }
    USES = ["rate limiting", "delays", "scheduling"]
