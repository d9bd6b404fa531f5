import logging
import re
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Optional, Type

from pydantic import BaseModel

from .nodes.ai import OpenAINode
from .nodes.base import CatalogNode, build_parameter_model
from .nodes.communication import DiscordNode, GmailNode, SlackNode
from .nodes.control_flow import IfNode, LoopNode, MergeNode, SplitInBatchesNode, SwitchNode, WaitNode
from .nodes.crm import HubSpotNode, SalesforceNode
from .nodes.storage import AirtableNode, GoogleSheetsNode, NotionNode, PostgresNode
from .nodes.transform import CodeNode, FilterNode, SetNode
from .nodes.triggers import ErrorTriggerNode, ManualTriggerNode, ScheduleTriggerNode, WebhookNode
from .nodes.web import HTTPRequestNode
from .schemas import NodeDefinition

logger = logging.getLogger(__name__)

BUILTIN_NODES: List[Type[CatalogNode]] = [
    # Triggers
    ScheduleTriggerNode,
    WebhookNode,
    ManualTriggerNode,
    # Communication
    SlackNode,
    GmailNode,
    DiscordNode,
    # AI
    OpenAINode,
    # Storage
    GoogleSheetsNode,
    AirtableNode,
    PostgresNode,
    # HTTP
    HTTPRequestNode,
    # Control Flow
    IfNode,
    SwitchNode,
    MergeNode,
    SplitInBatchesNode,
    LoopNode,
    # Data manipulation
    SetNode,
    CodeNode,
    FilterNode,
    # Utilities
    ErrorTriggerNode,
    WaitNode,
    # CRM / workspace
    SalesforceNode,
    HubSpotNode,
    NotionNode,
]

_WORD_RE = re.compile(r"[a-z0-9]+")


class NodeRegistry:
    """Read-only catalog of node types, filled once at construction.

    Pass ``definitions`` to build a registry from a fixture catalog instead of
    the built-in node classes.
    """

    def __init__(self, definitions: Optional[Iterable[NodeDefinition]] = None):
        if definitions is None:
            definitions = [cls.get_definition() for cls in BUILTIN_NODES]

        catalog: Dict[str, NodeDefinition] = {}
        models: Dict[str, Type[BaseModel]] = {}
        for definition in definitions:
            if definition.type_id in catalog:
                logger.warning(f"Duplicate node type {definition.type_id}, keeping the first definition")
                continue
            catalog[definition.type_id] = definition
            models[definition.type_id] = build_parameter_model(definition)

        self._catalog = MappingProxyType(catalog)
        self._parameter_models = MappingProxyType(models)

    def __contains__(self, type_id: str) -> bool:
        return type_id in self._catalog

    def __len__(self) -> int:
        return len(self._catalog)

    def lookup(self, type_id: str) -> Optional[NodeDefinition]:
        """Return the definition for ``type_id``, or None when it is not in the catalog."""
        return self._catalog.get(type_id)

    def parameter_model(self, type_id: str) -> Optional[Type[BaseModel]]:
        return self._parameter_models.get(type_id)

    def all(self) -> List[NodeDefinition]:
        return list(self._catalog.values())

    def type_ids(self) -> List[str]:
        return list(self._catalog.keys())

    def by_category(self, category: str) -> List[NodeDefinition]:
        return [d for d in self._catalog.values() if category in d.category]

    def search_by_use_case(self, keyword: str) -> List[NodeDefinition]:
        """Case-insensitive substring match on usage hints and description, in catalog order."""
        needle = keyword.lower()
        return [
            d for d in self._catalog.values()
            if needle in d.description.lower() or any(needle in use.lower() for use in d.usage_hints)
        ]

    def excerpt(self, query: Optional[str] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Compact catalog view for prompts: type, name, description and uses only.

        When the catalog is larger than ``limit`` the definitions sharing the most
        words with ``query`` are kept; ties keep catalog order.
        """
        definitions = self.all()
        if limit is not None and len(definitions) > limit:
            terms = set(_WORD_RE.findall((query or "").lower()))

            def overlap(definition: NodeDefinition) -> int:
                text = " ".join((definition.display_name, definition.description) + definition.usage_hints)
                return len(terms & set(_WORD_RE.findall(text.lower())))

            ranked = sorted(enumerate(definitions), key=lambda pair: (-overlap(pair[1]), pair[0]))
            keep = {index for index, _ in ranked[:limit]}
            definitions = [d for index, d in enumerate(definitions) if index in keep]

        return [
            {
                "type": d.type_id,
                "name": d.display_name,
                "description": d.description,
                "uses": list(d.usage_hints),
            }
            for d in definitions
        ]


registry = NodeRegistry()
