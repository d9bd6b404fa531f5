"""
Orchestrates the four compiler stages and the graph assembler.

    decomposer >> mapper >> architect >> optimizer   (pocketflow AsyncFlow)
    -> trigger repair -> GraphAssembler

Progress is reported as ProgressEvent values through an optional callback;
a failing callback is logged and never interrupts generation.
"""

import logging
from typing import Callable, List, Optional

from pocketflow import AsyncFlow

from .assembler import GraphAssembler
from .llm import CompletionService, get_completion_service
from .node_registry import NodeRegistry
from .node_registry import registry as default_registry
from .schemas import GenerationResult, ProgressEvent, WorkflowStep
from .stages.architecture import ArchitectureStage
from .stages.decomposition import DecomposerStage
from .stages.mapping import NodeMapperStage
from .stages.optimization import OptimizerStage
from .steps import has_leading_trigger, manual_trigger_step, repair_steps

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]


class WorkflowGenerator:
    def __init__(
        self,
        completion_service: Optional[CompletionService] = None,
        registry: Optional[NodeRegistry] = None,
        on_progress: Optional[ProgressCallback] = None,
        assembler: Optional[GraphAssembler] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        wait: Optional[float] = None,
        catalog_limit: Optional[int] = None,
    ):
        self.completion_service = completion_service or get_completion_service()
        self.registry = registry or default_registry
        self.on_progress = on_progress
        self.assembler = assembler or GraphAssembler(self.registry)
        self.stage_options = {"timeout": timeout, "max_retries": max_retries, "wait": wait}
        self.catalog_limit = catalog_limit

    def build_flow(self) -> AsyncFlow:
        options = dict(self.stage_options, registry=self.registry)
        decomposer = DecomposerStage(self.completion_service, **options)
        mapper = NodeMapperStage(self.completion_service, catalog_limit=self.catalog_limit, **options)
        architect = ArchitectureStage(self.completion_service, **options)
        optimizer = OptimizerStage(self.completion_service, **options)

        for stage in (decomposer, mapper, architect, optimizer):
            stage.on_event = self._emit

        decomposer >> mapper >> architect >> optimizer
        return AsyncFlow(start=decomposer)

    async def generate_workflow(self, task_description: str) -> GenerationResult:
        """Compile a natural-language task into steps and an importable workflow graph.

        Raises:
            ValueError: the task description is empty.
            TransportFailure: the completion service failed; no partial result is returned.
        """
        task = (task_description or "").strip()
        if not task:
            raise ValueError("Task description must not be empty")

        logger.info(f"Generating workflow for task: {task[:80]}")
        shared = {"task": task, "fallback_stages": []}
        await self.build_flow().run_async(shared)

        steps = self._final_steps(shared.get("optimized_steps") or [])

        self._emit("generation", "Generating n8n workflow file...", 90)
        workflow = self.assembler.assemble(steps, task)

        unknown = self._unknown_node_types(steps)
        if unknown:
            logger.warning(f"Workflow references node types outside the catalog: {unknown}")
        if shared["fallback_stages"]:
            logger.warning(f"Stages that fell back to defaults: {shared['fallback_stages']}")

        self._emit("complete", "Workflow generation complete!", 100)
        return GenerationResult(
            steps=steps,
            workflow=workflow,
            fallback_stages=shared["fallback_stages"],
            unknown_node_types=unknown,
        )

    def _final_steps(self, steps: List[WorkflowStep]) -> List[WorkflowStep]:
        steps = repair_steps(steps)
        if not has_leading_trigger(steps):
            logger.warning("No trigger step survived the pipeline, substituting a manual trigger")
            return [manual_trigger_step()]
        return steps

    def _unknown_node_types(self, steps: List[WorkflowStep]) -> List[str]:
        return list(dict.fromkeys(
            step.node_type_id for step in steps if step.node_type_id not in self.registry
        ))

    def _emit(self, stage: str, message: str, progress: int):
        if not self.on_progress:
            return
        try:
            self.on_progress(ProgressEvent(stage=stage, message=message, progress=progress))
        except Exception:
            logger.exception(f"Progress callback failed for stage {stage}")
