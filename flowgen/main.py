import asyncio
import logging
from collections import deque
from typing import List, Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

import config

from .exporter import export_filename, export_workflow
from .generator import WorkflowGenerator
from .llm import CompletionService, TransportFailure, get_completion_service
from .node_registry import registry
from .schemas import GenerateRequest, GenerationResult, NodeDefinition, ProgressEvent, WorkflowGraph
from .websockets import manager

# Setup Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="flowgen - n8n Workflow Generator")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def completion_service() -> CompletionService:
    return get_completion_service()


# Broadcast tasks still in flight; holding a reference keeps them from being collected
_pending_broadcasts = set()


def broadcast_progress(event: ProgressEvent):
    task = asyncio.get_running_loop().create_task(manager.broadcast_progress(event))
    _pending_broadcasts.add(task)
    task.add_done_callback(_pending_broadcasts.discard)


@app.get("/")
def read_root():
    return {"message": "flowgen n8n Workflow Generator API"}


@app.get("/api/nodes", response_model=List[NodeDefinition])
def get_nodes(category: Optional[str] = None, search: Optional[str] = None):
    nodes = registry.by_category(category) if category else registry.all()
    if search:
        matching = {d.type_id for d in registry.search_by_use_case(search)}
        nodes = [d for d in nodes if d.type_id in matching]
    return nodes


@app.get("/api/nodes/{type_id}", response_model=NodeDefinition)
def get_node(type_id: str):
    definition = registry.lookup(type_id)
    if definition is None:
        raise HTTPException(status_code=404, detail=f"Unknown node type: {type_id}")
    return definition


@app.post("/api/generate", response_model=GenerationResult)
async def generate(request: GenerateRequest, service: CompletionService = Depends(completion_service)):
    generator = WorkflowGenerator(completion_service=service, on_progress=broadcast_progress)
    try:
        return await generator.generate_workflow(request.task)
    except TransportFailure as e:
        logger.error(f"Workflow generation failed: {e}")
        await manager.broadcast_progress(ProgressEvent(stage="error", message=str(e), progress=0))
        raise HTTPException(status_code=502, detail=str(e))


@app.post("/api/export")
def export(workflow: WorkflowGraph):
    return Response(
        content=export_workflow(workflow),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(workflow)}"'},
    )


@app.websocket("/api/ws")
async def websocket_endpoint(websocket: WebSocket):
    await manager.connect(websocket)
    try:
        while True:
            # Keep alive / listen
            await websocket.receive_text()
    except WebSocketDisconnect:
        manager.disconnect(websocket)


# Log Buffer
log_buffer = deque(maxlen=config.LOG_BUFFER_SIZE)


class ListHandler(logging.Handler):
    def emit(self, record):
        log_buffer.append(self.format(record))


handler = ListHandler()
handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
logging.getLogger().addHandler(handler)


@app.get("/api/logs")
def get_logs():
    return list(log_buffer)


if __name__ == "__main__":
    uvicorn.run("flowgen.main:app", host=config.API_HOST, port=config.API_PORT, timeout_keep_alive=300)
