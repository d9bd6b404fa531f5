"""
Deterministic checks and repairs applied to the step lists the model returns.

The pipeline never trusts a model's step list as-is: entries are coerced into
``WorkflowStep``s, ordered, re-indexed from 1, and the leading trigger is moved
to the front when the model put it elsewhere.
"""

import logging
from typing import Any, List, Optional, Tuple

from pydantic import ValidationError

from .schemas import StepKind, WorkflowStep

logger = logging.getLogger(__name__)

MANUAL_TRIGGER_TYPE = "n8n-nodes-base.manualTrigger"


def manual_trigger_step() -> WorkflowStep:
    return WorkflowStep(
        index=1,
        kind=StepKind.TRIGGER,
        description="Start automation",
        service_label="Manual Trigger",
        node_type_id=MANUAL_TRIGGER_TYPE,
    )


def coerce_steps(raw: Any) -> List[WorkflowStep]:
    """Read a model-produced step list (``{"steps": [...]}`` or a bare list).

    Unreadable entries are skipped with a warning. Steps are ordered by their
    declared ``step`` number (list position breaks ties) and re-indexed.
    """
    if isinstance(raw, dict):
        raw = raw.get("steps")
    if not isinstance(raw, list):
        return []

    ordered: List[Tuple[int, int, WorkflowStep]] = []
    for position, item in enumerate(raw):
        if not isinstance(item, dict):
            logger.warning(f"Skipping step #{position + 1}: expected an object, got {type(item).__name__}")
            continue

        data = dict(item)
        declared = data.pop("step", data.pop("index", None))
        try:
            order = int(declared)
        except (TypeError, ValueError):
            order = position + 1
        data["step"] = position + 1
        if "type" not in data:
            data["type"] = data.pop("kind", StepKind.PROCESS.value)

        try:
            step = WorkflowStep.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Skipping step #{position + 1}: {e.error_count()} validation error(s)")
            continue
        ordered.append((order, position, step))

    ordered.sort(key=lambda entry: (entry[0], entry[1]))
    return reindex([step for _, _, step in ordered])


def reindex(steps: List[WorkflowStep]) -> List[WorkflowStep]:
    return [
        step if step.index == i else step.model_copy(update={"index": i})
        for i, step in enumerate(steps, start=1)
    ]


def has_leading_trigger(steps: List[WorkflowStep]) -> bool:
    return bool(steps) and steps[0].is_trigger


def ensure_leading_trigger(steps: List[WorkflowStep]) -> List[WorkflowStep]:
    """Move the first Trigger step to the front. Lists without any trigger are returned unchanged."""
    if not steps or steps[0].is_trigger:
        return steps
    position = next((i for i, step in enumerate(steps) if step.is_trigger), None)
    if position is None:
        return steps
    logger.info(f"Moving trigger step {steps[position].index} to the front")
    return [steps[position]] + steps[:position] + steps[position + 1:]


def repair_steps(steps: List[WorkflowStep]) -> List[WorkflowStep]:
    return reindex(ensure_leading_trigger(steps))


def _identity(step: WorkflowStep) -> Tuple[str, str]:
    return step.node_type_id, step.description.lower()


def trigger_preserved(before: List[WorkflowStep], after: List[WorkflowStep]) -> bool:
    if not has_leading_trigger(after):
        return False
    if not has_leading_trigger(before):
        return True
    return after[0].node_type_id == before[0].node_type_id


def guards_preserved(before: List[WorkflowStep], after: List[WorkflowStep]) -> bool:
    """True when every error handler kept from ``before`` still follows the step it guarded."""
    guarded_by = {}
    for previous, step in zip(before, before[1:]):
        if step.is_error_handler:
            guarded_by[_identity(step)] = _identity(previous)

    for previous, step in zip(after, after[1:]):
        expected = guarded_by.get(_identity(step)) if step.is_error_handler else None
        if expected is not None and expected != _identity(previous):
            return False
    return True


def _mergeable(previous: Optional[WorkflowStep], step: WorkflowStep) -> bool:
    if previous is None or not step.node_type_id:
        return False
    if previous.is_trigger or previous.is_error_handler or step.is_trigger or step.is_error_handler:
        return False
    return previous.parallelizable and step.parallelizable and previous.node_type_id == step.node_type_id


def merge_parallel_duplicates(steps: List[WorkflowStep]) -> List[WorkflowStep]:
    """Fold adjacent parallelizable steps that target the same node type into one step."""
    merged: List[WorkflowStep] = []
    for step in steps:
        previous = merged[-1] if merged else None
        if _mergeable(previous, step):
            logger.info(f"Merging step {step.index} into step {previous.index} ({step.node_type_id})")
            merged[-1] = previous.model_copy(
                update={"description": f"{previous.description}; {step.description}"}
            )
            continue
        merged.append(step)
    return reindex(merged)
