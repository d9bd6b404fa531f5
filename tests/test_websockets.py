import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

from flowgen.schemas import ProgressEvent
from flowgen.websockets import ConnectionManager


def make_socket(fail=False):
    socket = MagicMock()
    socket.accept = AsyncMock()
    socket.send_text = AsyncMock(side_effect=RuntimeError("closed") if fail else None)
    return socket


def test_progress_broadcast_format():
    manager = ConnectionManager()
    socket = make_socket()
    asyncio.run(manager.connect(socket))

    event = ProgressEvent(stage="mapping", message="Mapping steps to n8n nodes...", progress=30)
    asyncio.run(manager.broadcast_progress(event))

    message = json.loads(socket.send_text.call_args.args[0])
    assert message == {
        "type": "generation_progress",
        "payload": {"stage": "mapping", "message": "Mapping steps to n8n nodes...", "progress": 30},
    }


def test_dead_connections_are_dropped():
    manager = ConnectionManager()
    alive, dead = make_socket(), make_socket(fail=True)
    asyncio.run(manager.connect(alive))
    asyncio.run(manager.connect(dead))

    asyncio.run(manager.broadcast("ping"))

    assert manager.active_connections == [alive]
    alive.send_text.assert_awaited_once_with("ping")
