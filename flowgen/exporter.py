import json
import logging
import re
from pathlib import Path
from typing import Union

import config

from .schemas import WorkflowGraph

logger = logging.getLogger(__name__)


def export_workflow(workflow: WorkflowGraph, indent: int = 2) -> str:
    """Serialize a graph to the JSON text the n8n importer accepts."""
    return json.dumps(workflow.to_export(), indent=indent, ensure_ascii=False)


def export_filename(workflow: WorkflowGraph) -> str:
    name = workflow.name
    if name.startswith(config.WORKFLOW_NAME_PREFIX):
        name = name[len(config.WORKFLOW_NAME_PREFIX):]
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return f"{slug}.json" if slug else config.EXPORT_FILENAME


def write_workflow(workflow: WorkflowGraph, path: Union[str, Path]) -> Path:
    path = Path(path)
    if path.is_dir():
        path = path / export_filename(workflow)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(export_workflow(workflow))
    logger.info(f"Wrote workflow '{workflow.name}' to {path}")
    return path
