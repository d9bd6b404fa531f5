import json
import logging
from typing import Optional

from pydantic import ValidationError

import config

from ..prompts import MAPPING_SYSTEM, MAPPING_USER
from ..schemas import MappedStep, TechnicalMapping
from .base import PipelineStage

logger = logging.getLogger(__name__)


class NodeMapperStage(PipelineStage):
    """Chooses candidate node types for the decomposed steps from a catalog excerpt."""
    STAGE_NAME = "mapping"
    PROGRESS_MESSAGE = "Mapping steps to n8n nodes..."
    PROGRESS = 30
    OUTPUT_KEY = "mapping"

    def __init__(self, *args, catalog_limit=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.catalog_limit = catalog_limit or config.CATALOG_EXCERPT_LIMIT

    def stage_input(self, shared):
        decomposition = shared["decomposition"]
        decomposition_json = decomposition.model_dump_json(indent=2)
        catalog = self.registry.excerpt(decomposition_json, limit=self.catalog_limit)
        logger.debug(f"Offering {len(catalog)} of {len(self.registry)} node types to the mapper")
        return {"decomposition": decomposition_json, "catalog": catalog}

    def system_prompt(self, stage_input):
        return MAPPING_SYSTEM.format(catalog=json.dumps(stage_input["catalog"], indent=2))

    def user_message(self, stage_input):
        return MAPPING_USER.format(decomposition=stage_input["decomposition"])

    def validate(self, parsed, stage_input):
        if not isinstance(parsed, dict):
            raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
        entries = parsed.get("mappedSteps")
        if entries is None:
            entries = []
        if not isinstance(entries, list):
            raise ValueError(f"mappedSteps must be a list, got {type(entries).__name__}")

        mapped_steps = []
        for position, entry in enumerate(entries):
            mapped = self._read_entry(position, entry)
            if mapped is None:
                continue
            known = mapped.nodeType in self.registry
            if not known:
                logger.warning(f"Mapper proposed unknown node type {mapped.nodeType!r} for {mapped.originalAction!r}")
            mapped_steps.append(mapped.model_copy(update={"known": known}))

        return TechnicalMapping.model_validate({
            "mappedSteps": mapped_steps,
            "additionalNodes": parsed.get("additionalNodes"),
        })

    def _read_entry(self, position, entry) -> Optional[MappedStep]:
        """One unreadable entry is skipped; the rest of the mapping survives."""
        if not isinstance(entry, dict):
            logger.warning(f"Skipping mapped step #{position + 1}: expected an object, got {type(entry).__name__}")
            return None
        try:
            return MappedStep.model_validate(entry)
        except ValidationError as e:
            logger.warning(f"Skipping mapped step #{position + 1}: {e.error_count()} validation error(s)")
            return None

    def fallback(self, stage_input):
        return TechnicalMapping()
