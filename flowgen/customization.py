"""
Ordered parameter customizations applied during assembly.

Each rule pairs a predicate over (step, definition) with a transform over the
node's parameters. Rules are tried in order and only the first match applies.
"""

import copy
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from .schemas import NodeDefinition, WorkflowStep

Predicate = Callable[[WorkflowStep, Optional[NodeDefinition]], bool]
Transform = Callable[[Dict[str, Any]], Dict[str, Any]]


@dataclass(frozen=True)
class CustomizationRule:
    name: str
    predicate: Predicate
    transform: Transform


def resolves_to(type_id: str) -> Predicate:
    def predicate(step, definition):
        return definition is not None and definition.type_id == type_id
    return predicate


def mentions(*keywords: str) -> Predicate:
    """Whole-word, case-insensitive match against the step description."""
    pattern = re.compile(r"\b(?:%s)\b" % "|".join(re.escape(k) for k in keywords), re.IGNORECASE)

    def predicate(step, definition):
        return bool(pattern.search(step.description))
    return predicate


def all_of(*predicates: Predicate) -> Predicate:
    def predicate(step, definition):
        return all(p(step, definition) for p in predicates)
    return predicate


def set_parameters(values: Dict[str, Any]) -> Transform:
    def transform(parameters):
        return {**parameters, **copy.deepcopy(values)}
    return transform


DEFAULT_RULES: Tuple[CustomizationRule, ...] = (
    CustomizationRule(
        "email",
        all_of(resolves_to("n8n-nodes-base.gmail"), mentions("email", "emails", "e-mail", "mail")),
        set_parameters({
            "resource": "message",
            "operation": "send",
            "subject": '={{ $json.subject || "Automated Report" }}',
            "message": "={{ $json.content }}",
        }),
    ),
    CustomizationRule(
        "slack",
        all_of(resolves_to("n8n-nodes-base.slack"), mentions("slack")),
        set_parameters({"resource": "message", "operation": "post", "text": "={{ $json.message }}"}),
    ),
    CustomizationRule(
        "summarize",
        all_of(
            resolves_to("n8n-nodes-base.openAi"),
            mentions("summarize", "summarise", "summarizes", "summary", "analyze", "analyse", "analyzes", "analysis"),
        ),
        set_parameters({
            "resource": "text",
            "operation": "message",
            "model": "gpt-4",
            "prompt": "={{ $json.inputText }}",
        }),
    ),
    CustomizationRule(
        "filter",
        all_of(resolves_to("n8n-nodes-base.filter"), mentions("filter", "filters", "filtering")),
        set_parameters({
            "conditions": {
                "string": [{"value1": "={{ $json.status }}", "operation": "equals", "value2": "active"}],
            },
        }),
    ),
    CustomizationRule(
        "condition",
        all_of(resolves_to("n8n-nodes-base.if"), mentions("if", "condition", "conditions", "conditional")),
        set_parameters({
            "conditions": {
                "boolean": [{"value1": "={{ $json.condition }}", "value2": True}],
            },
        }),
    ),
)


def apply_customizations(
    step: WorkflowStep,
    definition: Optional[NodeDefinition],
    parameters: Dict[str, Any],
    rules: Sequence[CustomizationRule] = DEFAULT_RULES,
) -> Tuple[Dict[str, Any], Optional[str]]:
    """Return the customized parameters and the name of the rule that fired, if any."""
    for rule in rules:
        if rule.predicate(step, definition):
            return rule.transform(parameters), rule.name
    return parameters, None
