import json

from flowgen.exporter import export_filename, export_workflow, write_workflow
from flowgen.schemas import WorkflowGraph


def make_graph(name="Automation: Email the team every Friday!"):
    return WorkflowGraph(name=name, tags=["flowgen"])


def test_export_is_importable_json():
    data = json.loads(export_workflow(make_graph()))
    assert data == {
        "name": "Automation: Email the team every Friday!",
        "nodes": [],
        "connections": {},
        "active": False,
        "settings": {},
        "tags": ["flowgen"],
    }


def test_export_filename():
    assert export_filename(make_graph()) == "email-the-team-every-friday.json"
    assert export_filename(make_graph("Automation: ???")) == "automation-workflow.json"


def test_write_workflow_to_directory(tmp_path):
    path = write_workflow(make_graph(), tmp_path)
    assert path == tmp_path / "email-the-team-every-friday.json"
    assert json.loads(path.read_text())["name"] == "Automation: Email the team every Friday!"


def test_write_workflow_to_file(tmp_path):
    target = tmp_path / "out" / "wf.json"
    assert write_workflow(make_graph(), target) == target
    assert target.exists()
