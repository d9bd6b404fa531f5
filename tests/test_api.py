import pytest
from fastapi.testclient import TestClient

from flowgen.llm import TransportFailure
from flowgen.main import app, completion_service

client = TestClient(app)


@pytest.fixture
def use_service():
    def install(service):
        app.dependency_overrides[completion_service] = lambda: service
        return service
    yield install
    app.dependency_overrides.clear()


def test_read_root():
    response = client.get("/")
    assert response.status_code == 200
    assert "message" in response.json()


def test_list_nodes():
    response = client.get("/api/nodes")
    assert response.status_code == 200
    nodes = response.json()
    slack = next(n for n in nodes if n["typeId"] == "n8n-nodes-base.slack")
    assert slack["displayName"] == "Slack"
    assert slack["requiredCredentialKinds"] == ["slackApi"]


def test_filter_nodes():
    response = client.get("/api/nodes", params={"category": "trigger"})
    assert {n["typeId"] for n in response.json()} >= {"n8n-nodes-base.cron", "n8n-nodes-base.webhook"}

    response = client.get("/api/nodes", params={"search": "email"})
    assert "n8n-nodes-base.gmail" in [n["typeId"] for n in response.json()]


def test_get_node():
    response = client.get("/api/nodes/n8n-nodes-base.gmail")
    assert response.status_code == 200
    assert response.json()["exampleParameters"]["operation"] == "send"

    response = client.get("/api/nodes/n8n-nodes-base.teleporter")
    assert response.status_code == 404


def test_generate(use_service, scripted_service, friday_replies):
    use_service(scripted_service(friday_replies))
    response = client.post("/api/generate", json={"task": "Every Friday, summarize Slack messages and email the team"})
    assert response.status_code == 200

    data = response.json()
    assert data["fallbackStages"] == []
    assert data["steps"][0]["type"] == "Trigger"
    assert data["workflow"]["nodes"][0]["type"] == "n8n-nodes-base.cron"
    assert data["workflow"]["connections"]["Gmail"]["error"][0][0]["node"] == "Slack Alert"
    assert "credentials" not in data["workflow"]["nodes"][0]


def test_generate_rejects_empty_task(use_service, scripted_service):
    service = use_service(scripted_service([]))
    response = client.post("/api/generate", json={"task": "   "})
    assert response.status_code == 422
    assert service.requests == []


def test_generate_transport_failure(use_service, scripted_service):
    use_service(scripted_service([TransportFailure("completion service unreachable")]))
    response = client.post("/api/generate", json={"task": "Sync contacts nightly"})
    assert response.status_code == 502
    assert "unreachable" in response.json()["detail"]


def test_export(use_service, scripted_service):
    use_service(scripted_service(["no json"] * 4))
    workflow = client.post("/api/generate", json={"task": "Ping the team"}).json()["workflow"]

    response = client.post("/api/export", json=workflow)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert 'filename="ping-the-team.json"' in response.headers["content-disposition"]
    assert response.json() == workflow


def test_logs():
    response = client.get("/api/logs")
    assert response.status_code == 200
    assert isinstance(response.json(), list)
