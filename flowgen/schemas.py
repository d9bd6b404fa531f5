import json
import re
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_serializer
from pydantic.alias_generators import to_camel


# --- Node catalog ---

class ParameterKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ENUM = "enum"


class ParameterSpec(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    name: str
    kind: ParameterKind
    default: Any = None
    allowed_values: Optional[Tuple[Any, ...]] = None
    required: bool = False
    description: str = ""


class NodeDefinition(BaseModel):
    """Immutable description of one node type in the catalog."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    type_id: str
    display_name: str
    description: str = ""
    category: FrozenSet[str] = frozenset()
    version: int = 1
    parameter_schema: Tuple[ParameterSpec, ...] = ()
    required_credential_kinds: Tuple[str, ...] = ()
    usage_hints: Tuple[str, ...] = ()
    example_parameters: Optional[Dict[str, Any]] = None

    @field_serializer("category")
    def _sorted_category(self, category: FrozenSet[str]) -> List[str]:
        return sorted(category)


# --- Workflow steps ---

class StepKind(str, Enum):
    TRIGGER = "Trigger"
    PROCESS = "Process"
    ACTION = "Action"
    LOGIC = "Logic"
    TRANSFORM = "Transform"
    ERROR_HANDLER = "Error Handler"

    @classmethod
    def coerce(cls, value: Any) -> "StepKind":
        """Map loose spellings ("ErrorHandler", "error_handler", "trigger") onto a kind."""
        if isinstance(value, cls):
            return value
        key = re.sub(r"[\s_\-]", "", str(value or "")).lower()
        for kind in cls:
            if kind.value.replace(" ", "").lower() == key:
                return kind
        return cls.PROCESS


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


class WorkflowStep(BaseModel):
    """One logical unit of work, before it is lowered into a graph node.

    Field aliases follow the JSON the pipeline stages ask the model for
    (``step``, ``type``, ``service``, ``nodeType``, ``errorHandling``).
    """
    model_config = ConfigDict(populate_by_name=True)

    index: int = Field(alias="step", ge=1)
    kind: StepKind = Field(alias="type")
    description: str = ""
    service_label: str = Field("", alias="service")
    node_type_id: str = Field("", alias="nodeType")
    rationale: Optional[str] = None
    parallelizable: bool = False
    error_handling_note: Optional[str] = Field(None, alias="errorHandling")

    @field_validator("kind", mode="before")
    @classmethod
    def _coerce_kind(cls, value):
        return StepKind.coerce(value)

    @field_validator("description", "service_label", "node_type_id", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _as_text(value).strip()

    @field_validator("rationale", "error_handling_note", mode="before")
    @classmethod
    def _coerce_optional_text(cls, value):
        if value is None:
            return None
        return _as_text(value)

    @field_validator("parallelizable", mode="before")
    @classmethod
    def _coerce_flag(cls, value):
        if value is None:
            return False
        if isinstance(value, str):
            return value.strip().lower() in ("true", "yes", "1")
        return value

    @property
    def is_trigger(self) -> bool:
        return self.kind == StepKind.TRIGGER

    @property
    def is_error_handler(self) -> bool:
        return self.kind == StepKind.ERROR_HANDLER


# --- Stage outputs ---

def _itemize(items: Any, key: str) -> List[Dict[str, Any]]:
    if items is None:
        return []
    if not isinstance(items, list):
        items = [items]
    out = []
    for item in items:
        if isinstance(item, dict):
            out.append(item)
        elif item is not None:
            out.append({key: _as_text(item)})
    return out


class Decomposition(BaseModel):
    """Decomposer output: what starts the automation and what it does."""
    model_config = ConfigDict(extra="allow")

    trigger: Dict[str, Any] = Field(default_factory=lambda: {"type": "manual"})
    dataSources: List[Dict[str, Any]] = []
    processingSteps: List[Dict[str, Any]] = []
    outputs: List[Dict[str, Any]] = []
    specialLogic: Dict[str, Any] = {}

    @field_validator("trigger", mode="before")
    @classmethod
    def _coerce_trigger(cls, value):
        if not value:
            return {"type": "manual"}
        if not isinstance(value, dict):
            return {"type": _as_text(value)}
        if not value.get("type"):
            return {**value, "type": "manual"}
        return value

    @field_validator("dataSources", "outputs", mode="before")
    @classmethod
    def _coerce_named(cls, value):
        return _itemize(value, "name")

    @field_validator("processingSteps", mode="before")
    @classmethod
    def _coerce_actions(cls, value):
        return _itemize(value, "action")

    @field_validator("specialLogic", mode="before")
    @classmethod
    def _coerce_logic(cls, value):
        return value if isinstance(value, dict) else {}


class MappedStep(BaseModel):
    model_config = ConfigDict(extra="allow")

    step: Optional[int] = None
    originalAction: str = ""
    nodeType: str = ""
    nodeName: str = ""
    parameters: Dict[str, Any] = {}
    credentials: List[Any] = []
    dataTransformation: Any = None
    known: bool = False

    @field_validator("originalAction", "nodeType", "nodeName", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _as_text(value).strip()

    @field_validator("parameters", mode="before")
    @classmethod
    def _coerce_parameters(cls, value):
        return value if isinstance(value, dict) else {}

    @field_validator("step", mode="before")
    @classmethod
    def _coerce_step(cls, value):
        # Models write "Step 2" or "2" as often as 2
        if value is None or isinstance(value, int):
            return value
        match = re.search(r"\d+", str(value))
        return int(match.group()) if match else None

    @field_validator("credentials", mode="before")
    @classmethod
    def _coerce_credentials(cls, value):
        if value is None or value == "":
            return []
        if isinstance(value, dict):
            return list(value)
        if not isinstance(value, list):
            return [value]
        return value


class TechnicalMapping(BaseModel):
    """NodeMapper output: candidate node types for each decomposed step."""
    mappedSteps: List[MappedStep] = []
    additionalNodes: List[Dict[str, Any]] = []

    @field_validator("additionalNodes", mode="before")
    @classmethod
    def _coerce_additional(cls, value):
        return _itemize(value, "purpose")


# --- Exported graph (n8n import format, field names are the wire names) ---

class CredentialRef(BaseModel):
    id: str
    name: str


class GraphNode(BaseModel):
    parameters: Dict[str, Any] = {}
    name: str
    type: str
    typeVersion: int = 1
    position: Tuple[int, int]
    id: str
    credentials: Optional[Dict[str, CredentialRef]] = None

    @model_serializer(mode="wrap")
    def _omit_missing_credentials(self, handler):
        data = handler(self)
        if data.get("credentials") is None:
            data.pop("credentials", None)
        return data


class ConnectionTarget(BaseModel):
    node: str
    type: str = "main"
    index: int = 0


class NodeConnections(BaseModel):
    main: Optional[List[List[ConnectionTarget]]] = None
    error: Optional[List[List[ConnectionTarget]]] = None

    @model_serializer(mode="wrap")
    def _omit_unused_channels(self, handler):
        data = handler(self)
        for channel in ("main", "error"):
            if data.get(channel) is None:
                data.pop(channel, None)
        return data

    def targets(self) -> List[str]:
        names = []
        for channel in (self.main or []) + (self.error or []):
            names.extend(target.node for target in channel)
        return names


class WorkflowGraph(BaseModel):
    name: str
    nodes: List[GraphNode] = []
    connections: Dict[str, NodeConnections] = {}
    active: bool = False
    settings: Dict[str, Any] = {}
    tags: List[str] = []

    def node(self, name: str) -> Optional[GraphNode]:
        return next((n for n in self.nodes if n.name == name), None)

    def to_export(self) -> Dict[str, Any]:
        """JSON-ready document accepted by the n8n importer."""
        return self.model_dump(mode="json")


# --- Generation API ---

class ProgressEvent(BaseModel):
    stage: str
    message: str
    progress: int


class GenerationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    steps: List[WorkflowStep]
    workflow: WorkflowGraph
    fallback_stages: List[str] = Field(default_factory=list, alias="fallbackStages")
    unknown_node_types: List[str] = Field(default_factory=list, alias="unknownNodeTypes")


class GenerateRequest(BaseModel):
    task: str

    @field_validator("task")
    @classmethod
    def _require_task(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("task description must not be empty")
        return value


# --- Completion service wire format ---

class ChatMessage(BaseModel):
    role: str
    content: str


class CompletionRequest(BaseModel):
    userMessage: str
    conversationHistory: List[ChatMessage] = []
    systemPrompt: str = ""


class CompletionResponse(BaseModel):
    text: str
