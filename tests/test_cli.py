import json
from unittest.mock import patch

from flowgen import cli
from flowgen.llm import TransportFailure


def test_nodes_lists_catalog(capsys):
    assert cli.main(["nodes", "--category", "trigger"]) == 0
    out = capsys.readouterr().out
    assert "n8n-nodes-base.cron" in out
    assert "n8n-nodes-base.slack" not in out


def test_nodes_json(capsys):
    assert cli.main(["nodes", "--search", "email", "--json"]) == 0
    nodes = json.loads(capsys.readouterr().out)
    assert "n8n-nodes-base.gmail" in [n["typeId"] for n in nodes]


def test_generate_writes_file(tmp_path, scripted_service, friday_replies):
    service = scripted_service(friday_replies)
    with patch("flowgen.cli.get_completion_service", return_value=service):
        code = cli.main(["generate", "Every Friday, summarize Slack messages and email the team",
                         "-o", str(tmp_path / "wf.json")])

    assert code == 0
    data = json.loads((tmp_path / "wf.json").read_text())
    assert data["nodes"][0]["type"] == "n8n-nodes-base.cron"


def test_generate_prints_to_stdout(capsys, scripted_service):
    with patch("flowgen.cli.get_completion_service", return_value=scripted_service(["nope"] * 4)):
        assert cli.main(["generate", "Ping me"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["name"] == "Automation: Ping me"


def test_generate_transport_failure_exits_non_zero(scripted_service):
    service = scripted_service([TransportFailure("down")])
    with patch("flowgen.cli.get_completion_service", return_value=service):
        assert cli.main(["generate", "Ping me"]) == 1
