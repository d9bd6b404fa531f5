from ..prompts import DECOMPOSITION_SYSTEM, DECOMPOSITION_USER
from ..schemas import Decomposition
from .base import PipelineStage


class DecomposerStage(PipelineStage):
    """Turns the task description into a trigger, data sources, processing steps and outputs."""
    STAGE_NAME = "decomposition"
    PROGRESS_MESSAGE = "Breaking down your task into micro-steps..."
    PROGRESS = 10
    OUTPUT_KEY = "decomposition"

    def stage_input(self, shared):
        task = shared.get("task")
        if not task:
            raise ValueError("Missing required 'task' in shared store")
        return task

    def system_prompt(self, task):
        return DECOMPOSITION_SYSTEM

    def user_message(self, task):
        return DECOMPOSITION_USER.format(task=task)

    def validate(self, parsed, task):
        if not isinstance(parsed, dict):
            raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
        decomposition = Decomposition.model_validate(parsed)
        if not decomposition.processingSteps:
            decomposition = decomposition.model_copy(update={"processingSteps": [{"step": 1, "action": task}]})
        return decomposition

    def fallback(self, task):
        return Decomposition()
