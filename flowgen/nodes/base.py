from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, StringConstraints, ValidationError, create_model

from ..schemas import NodeDefinition, ParameterKind, ParameterSpec

# n8n accepts an expression ("={{ $json.x }}") in place of any literal value
Expression = Annotated[str, StringConstraints(pattern=r"^=")]

_KIND_ALIASES = {
    "string": ParameterKind.STRING,
    "int": ParameterKind.NUMBER,
    "float": ParameterKind.NUMBER,
    "number": ParameterKind.NUMBER,
    "boolean": ParameterKind.BOOLEAN,
    "object": ParameterKind.OBJECT,
    "options": ParameterKind.ENUM,
    "enum": ParameterKind.ENUM,
}

_KIND_TYPES = {
    ParameterKind.STRING: str,
    ParameterKind.NUMBER: Union[int, float, Expression],
    ParameterKind.BOOLEAN: Union[bool, Expression],
    ParameterKind.OBJECT: Union[Dict[str, Any], Expression],
}


class CatalogNode:
    """Mixin that describes a node type the generator can place in a workflow.

    PARAMS follows the platform's usual shorthand: either a bare kind
    ("string", "number", "boolean", "object") or a dict with "type",
    "enum", "default", "required" and "description" keys.
    """
    TYPE_ID = "n8n-nodes-base.noOp"
    DISPLAY_NAME = "No Operation"
    DESCRIPTION = "Does nothing"
    CATEGORIES: List[str] = []
    VERSION = 1
    PARAMS: Dict[str, Any] = {}
    CREDENTIALS: List[str] = []
    USES: List[str] = []
    EXAMPLE: Optional[Dict[str, Any]] = None

    @classmethod
    def get_definition(cls) -> NodeDefinition:
        return NodeDefinition(
            type_id=cls.TYPE_ID,
            display_name=cls.DISPLAY_NAME,
            description=cls.DESCRIPTION,
            category=frozenset(cls.CATEGORIES),
            version=cls.VERSION,
            parameter_schema=tuple(_param_spec(name, spec) for name, spec in cls.PARAMS.items()),
            required_credential_kinds=tuple(cls.CREDENTIALS),
            usage_hints=tuple(cls.USES),
            example_parameters=cls.EXAMPLE,
        )


def _param_spec(name: str, spec: Any) -> ParameterSpec:
    if isinstance(spec, str):
        return ParameterSpec(name=name, kind=_KIND_ALIASES[spec])
    allowed = spec.get("enum")
    kind = ParameterKind.ENUM if allowed else _KIND_ALIASES[spec.get("type", "string")]
    return ParameterSpec(
        name=name,
        kind=kind,
        default=spec.get("default"),
        allowed_values=tuple(allowed) if allowed else None,
        required=spec.get("required", False),
        description=spec.get("description", ""),
    )


def build_parameter_model(definition: NodeDefinition) -> Type[BaseModel]:
    """Derive a strict pydantic model (unknown keys rejected) from a definition's parameter schema."""
    fields = {}
    for spec in definition.parameter_schema:
        if spec.kind == ParameterKind.ENUM and spec.allowed_values:
            annotation = Union[Literal[spec.allowed_values], Expression]
        elif spec.kind == ParameterKind.ENUM:
            annotation = str
        else:
            annotation = _KIND_TYPES[spec.kind]
        fields[spec.name] = (Optional[annotation], None)

    model_name = "".join(ch for ch in definition.display_name.title() if ch.isalnum()) + "Parameters"
    return create_model(model_name, __config__=ConfigDict(extra="forbid"), **fields)


def validate_parameters(model: Type[BaseModel], parameters: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """Validate against a parameter model, dropping every key that fails.

    Returns the surviving parameters and the rejected keys, in the order they were rejected.
    """
    candidate = dict(parameters)
    rejected: List[str] = []
    while True:
        try:
            validated = model.model_validate(candidate)
        except ValidationError as exc:
            bad = [err["loc"][0] for err in exc.errors() if err["loc"] and err["loc"][0] in candidate]
            if not bad:
                rejected.extend(candidate)
                return {}, rejected
            for key in dict.fromkeys(bad):
                candidate.pop(key)
                rejected.append(key)
            continue
        return validated.model_dump(exclude_unset=True), rejected
