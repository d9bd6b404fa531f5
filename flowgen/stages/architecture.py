from ..prompts import ARCHITECTURE_SYSTEM, ARCHITECTURE_USER
from ..steps import coerce_steps, manual_trigger_step, repair_steps
from .base import PipelineStage


class ArchitectureStage(PipelineStage):
    """Designs the ordered step list, inserting error handlers and marking parallel steps."""
    STAGE_NAME = "architecture"
    PROGRESS_MESSAGE = "Designing workflow architecture..."
    PROGRESS = 60
    OUTPUT_KEY = "architecture_steps"

    def stage_input(self, shared):
        return {"task": shared["task"], "mapping": shared["mapping"]}

    def system_prompt(self, stage_input):
        return ARCHITECTURE_SYSTEM

    def user_message(self, stage_input):
        return ARCHITECTURE_USER.format(
            task=stage_input["task"],
            mapping=stage_input["mapping"].model_dump_json(indent=2),
        )

    def validate(self, parsed, stage_input):
        steps = coerce_steps(parsed)
        if not steps:
            raise ValueError("no usable steps in architecture")
        return repair_steps(steps)

    def fallback(self, stage_input):
        return [manual_trigger_step()]
