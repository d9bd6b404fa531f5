import argparse
import asyncio
import json
import logging
import sys

import uvicorn

import config

from .exporter import export_workflow, write_workflow
from .generator import WorkflowGenerator
from .llm import TransportFailure, get_completion_service
from .node_registry import registry

logger = logging.getLogger(__name__)


def print_progress(event):
    print(f"[{event.progress:3d}%] {event.message}", file=sys.stderr)


def cmd_generate(args) -> int:
    options = {"model": args.model} if args.model and args.backend != "http" else {}
    service = get_completion_service(args.backend, **options)
    generator = WorkflowGenerator(completion_service=service, on_progress=print_progress)
    try:
        result = asyncio.run(generator.generate_workflow(args.task))
    except TransportFailure as e:
        logger.error(f"Workflow generation failed: {e}")
        return 1

    if result.fallback_stages:
        print(f"Stages that used defaults: {', '.join(result.fallback_stages)}", file=sys.stderr)
    if result.unknown_node_types:
        print(f"Node types outside the catalog: {', '.join(result.unknown_node_types)}", file=sys.stderr)

    if args.output:
        path = write_workflow(result.workflow, args.output)
        print(f"Workflow written to {path}", file=sys.stderr)
    else:
        print(export_workflow(result.workflow))
    return 0


def cmd_nodes(args) -> int:
    nodes = registry.by_category(args.category) if args.category else registry.all()
    if args.search:
        matching = {d.type_id for d in registry.search_by_use_case(args.search)}
        nodes = [d for d in nodes if d.type_id in matching]

    if args.json:
        print(json.dumps([d.model_dump(mode="json", by_alias=True) for d in nodes], indent=2))
        return 0
    for definition in nodes:
        categories = ",".join(sorted(definition.category))
        print(f"{definition.type_id:<36} {definition.display_name:<20} [{categories}]")
    return 0


def cmd_serve(args) -> int:
    uvicorn.run("flowgen.main:app", host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flowgen", description="Generate n8n workflows from plain-language tasks")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate a workflow for a task description")
    generate.add_argument("task", help="What the automation should do")
    generate.add_argument("-o", "--output", help="File or directory to write the workflow JSON to (default: stdout)")
    generate.add_argument("--backend", choices=["openai", "http"], default=config.COMPLETION_BACKEND,
                          help="Completion backend")
    generate.add_argument("--model", help="Model name for the openai backend")
    generate.set_defaults(func=cmd_generate)

    nodes = subparsers.add_parser("nodes", help="List the node catalog")
    nodes.add_argument("--category", help="Only nodes in this category")
    nodes.add_argument("--search", help="Only nodes whose description or uses mention this keyword")
    nodes.add_argument("--json", action="store_true", help="Print full definitions as JSON")
    nodes.set_defaults(func=cmd_nodes)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=config.API_HOST, help="Bind address")
    serve.add_argument("--port", type=int, default=config.API_PORT, help="Listening port")
    serve.set_defaults(func=cmd_serve)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
