import copy
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import config

from .customization import DEFAULT_RULES, CustomizationRule, apply_customizations
from .node_registry import NodeRegistry
from .node_registry import registry as default_registry
from .nodes.base import validate_parameters
from .schemas import (
    ConnectionTarget,
    CredentialRef,
    GraphNode,
    NodeConnections,
    NodeDefinition,
    WorkflowGraph,
    WorkflowStep,
)

logger = logging.getLogger(__name__)


def layout(steps: Sequence[WorkflowStep]) -> List[Tuple[int, int]]:
    """Left to right columns; runs of parallelizable steps stack downwards in one column."""
    origin_x, origin_y = config.LAYOUT_ORIGIN
    x, y = origin_x, origin_y
    positions = []
    for i, step in enumerate(steps):
        if i > 0:
            if step.parallelizable and steps[i - 1].parallelizable:
                y += config.LAYOUT_Y_SPACING
            else:
                x += config.LAYOUT_X_SPACING
                y = origin_y
        positions.append((x, y))
    return positions


def wire(steps: Sequence[WorkflowStep], names: Sequence[str]) -> Dict[str, NodeConnections]:
    """Build the connection map by chaining each step to the next one.

    A step followed by an error handler feeds it on its error channel; every
    other successor is fed on main. The handler's own main output continues
    to the step after it.
    """
    channels: Dict[str, Dict[str, List[List[ConnectionTarget]]]] = {}

    def link(source: str, channel: str, target: str):
        lanes = channels.setdefault(source, {}).setdefault(channel, [[]])
        lanes[0].append(ConnectionTarget(node=target))

    for i in range(1, len(steps)):
        channel = "error" if steps[i].is_error_handler else "main"
        link(names[i - 1], channel, names[i])

    return {source: NodeConnections(**lanes) for source, lanes in channels.items()}


class GraphAssembler:
    """Lowers an ordered step list into an importable n8n workflow graph. No model calls."""

    def __init__(self, registry: Optional[NodeRegistry] = None, rules: Sequence[CustomizationRule] = DEFAULT_RULES):
        self.registry = registry or default_registry
        self.rules = rules

    def assemble(self, steps: Sequence[WorkflowStep], task_description: str = "") -> WorkflowGraph:
        definitions = [self.registry.lookup(step.node_type_id) for step in steps]
        names = self._unique_names(steps, definitions)
        positions = layout(steps)

        nodes = []
        for i, (step, definition) in enumerate(zip(steps, definitions)):
            if definition is None:
                logger.warning(f"Unknown node type {step.node_type_id!r} for step {step.index}, emitting it without parameters")
            nodes.append(GraphNode(
                parameters=self._parameters(step, definition),
                name=names[i],
                type=step.node_type_id,
                typeVersion=definition.version if definition else 1,
                position=positions[i],
                id=f"node-{i}",
                credentials=self._credentials(step, definition),
            ))

        title = task_description.strip()[:config.WORKFLOW_NAME_TASK_LENGTH] or "Untitled"
        graph = WorkflowGraph(
            name=f"{config.WORKFLOW_NAME_PREFIX}{title}",
            nodes=nodes,
            connections=wire(steps, names),
            active=False,
            settings=copy.deepcopy(config.WORKFLOW_SETTINGS),
            tags=list(config.WORKFLOW_TAGS),
        )
        logger.info(f"Assembled workflow '{graph.name}' with {len(nodes)} nodes")
        return graph

    def _unique_names(self, steps, definitions) -> List[str]:
        names: List[str] = []
        taken = set()
        for step, definition in zip(steps, definitions):
            base = step.service_label or step.description
            if not base:
                base = definition.display_name if definition else f"Step {step.index}"
            limit = config.NODE_NAME_MAX_LENGTH
            base = base[:limit].strip()

            name = base
            suffix = 0
            # The first occurrence keeps the bare name; later ones count up from 1
            while name in taken:
                suffix += 1
                tag = str(suffix)
                name = f"{base[:limit - len(tag)].rstrip()}{tag}"
            taken.add(name)
            names.append(name)
        return names

    def _parameters(self, step: WorkflowStep, definition: Optional[NodeDefinition]) -> Dict[str, Any]:
        if definition is None:
            return {}

        parameters = copy.deepcopy(definition.example_parameters or {})
        parameters, rule = apply_customizations(step, definition, parameters, self.rules)
        if rule:
            logger.debug(f"Step {step.index}: applied '{rule}' customization")

        model = self.registry.parameter_model(definition.type_id)
        if model is None:
            return parameters
        parameters, rejected = validate_parameters(model, parameters)
        if rejected:
            logger.warning(f"Step {step.index}: dropped invalid {definition.display_name} parameters {rejected}")
        return parameters

    def _credentials(self, step: WorkflowStep, definition: Optional[NodeDefinition]) -> Optional[Dict[str, CredentialRef]]:
        if definition is None or not definition.required_credential_kinds:
            return None
        label = step.service_label or definition.display_name
        return {
            kind: CredentialRef(id=config.CREDENTIAL_PLACEHOLDER_ID, name=f"{label} credentials")
            for kind in definition.required_credential_kinds
        }
