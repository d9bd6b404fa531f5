import json

from ..prompts import OPTIMIZATION_SYSTEM, OPTIMIZATION_USER
from ..steps import coerce_steps, guards_preserved, merge_parallel_duplicates, repair_steps, trigger_preserved
from .base import PipelineStage


class OptimizerStage(PipelineStage):
    """Lets the model parallelize, batch and prune the step list.

    The result is only accepted when it keeps the leading trigger and every
    error handler still directly follows the step it guarded. Otherwise the
    architecture steps pass through unchanged.
    """
    STAGE_NAME = "optimization"
    PROGRESS_MESSAGE = "Optimizing for performance and cost..."
    PROGRESS = 80
    OUTPUT_KEY = "optimized_steps"

    def stage_input(self, shared):
        return shared["architecture_steps"]

    def system_prompt(self, steps):
        return OPTIMIZATION_SYSTEM

    def user_message(self, steps):
        payload = {"steps": [step.model_dump(mode="json", by_alias=True, exclude_none=True) for step in steps]}
        return OPTIMIZATION_USER.format(steps=json.dumps(payload, indent=2))

    def validate(self, parsed, steps):
        optimized = repair_steps(coerce_steps(parsed))
        if not optimized:
            raise ValueError("no usable steps in optimized workflow")
        if not trigger_preserved(steps, optimized):
            raise ValueError("optimized workflow dropped or replaced the trigger")
        if not guards_preserved(steps, optimized):
            raise ValueError("optimized workflow detached an error handler from its guarded step")
        return merge_parallel_duplicates(optimized)

    def fallback(self, steps):
        return list(steps)
