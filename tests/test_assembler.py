import pytest

import config
from flowgen.assembler import GraphAssembler, layout, wire
from flowgen.customization import CustomizationRule, apply_customizations, mentions, resolves_to, set_parameters
from flowgen.node_registry import registry
from flowgen.schemas import StepKind, WorkflowStep


def step(index, kind, node_type, description="", service="", parallel=False):
    return WorkflowStep(
        index=index,
        kind=kind,
        node_type_id=node_type,
        description=description or f"step {index}",
        service_label=service,
        parallelizable=parallel,
    )


@pytest.fixture
def assembler():
    return GraphAssembler(registry)


@pytest.fixture
def guarded_steps():
    return [
        step(1, StepKind.TRIGGER, "n8n-nodes-base.cron", "Every Friday", "Schedule"),
        step(2, StepKind.ACTION, "n8n-nodes-base.gmail", "Email the team", "Gmail"),
        step(3, StepKind.ERROR_HANDLER, "n8n-nodes-base.slack", "Alert on failure", "Slack"),
        step(4, StepKind.ACTION, "n8n-nodes-base.googleSheets", "Log the send", "Sheets"),
    ]


def test_one_node_per_step_with_unique_ids(assembler, guarded_steps):
    graph = assembler.assemble(guarded_steps, "Weekly email")
    assert len(graph.nodes) == len(guarded_steps)
    assert [n.id for n in graph.nodes] == ["node-0", "node-1", "node-2", "node-3"]

    names = {n.name for n in graph.nodes}
    for source, connections in graph.connections.items():
        assert source in names
        for target in connections.targets():
            assert target in names


def test_error_handler_only_on_error_channel(assembler, guarded_steps):
    graph = assembler.assemble(guarded_steps, "Weekly email")
    export = graph.to_export()["connections"]

    assert export["Gmail"] == {"error": [[{"node": "Slack", "type": "main", "index": 0}]]}
    for connections in export.values():
        for lane in connections.get("main", []):
            assert all(target["node"] != "Slack" for target in lane)


def test_error_handler_main_output_feeds_next_step(assembler, guarded_steps):
    export = assembler.assemble(guarded_steps, "Weekly email").to_export()["connections"]
    assert export["Slack"] == {"main": [[{"node": "Sheets", "type": "main", "index": 0}]]}


def test_every_step_connects_to_its_successor():
    steps = [
        step(1, StepKind.TRIGGER, "n8n-nodes-base.cron"),
        step(2, StepKind.ACTION, "n8n-nodes-base.gmail"),
        step(3, StepKind.ERROR_HANDLER, "n8n-nodes-base.slack"),
        step(4, StepKind.PROCESS, "n8n-nodes-base.set"),
    ]
    connections = wire(steps, ["T", "A", "H", "B"])

    assert connections["T"].main[0][0].node == "A"
    assert connections["A"].error[0][0].node == "H"
    assert connections["A"].main is None
    assert connections["H"].main[0][0].node == "B"
    assert "B" not in connections


def test_parallel_run_stacks_in_one_column(assembler):
    steps = [
        step(1, StepKind.TRIGGER, "n8n-nodes-base.webhook"),
        step(2, StepKind.ACTION, "n8n-nodes-base.slack", parallel=True),
        step(3, StepKind.ACTION, "n8n-nodes-base.gmail", parallel=True),
        step(4, StepKind.ACTION, "n8n-nodes-base.discord", parallel=True),
        step(5, StepKind.PROCESS, "n8n-nodes-base.set"),
    ]
    positions = [n.position for n in assembler.assemble(steps, "fan out").nodes]
    x0, y0 = config.LAYOUT_ORIGIN

    assert positions[0] == (x0, y0)
    column = x0 + config.LAYOUT_X_SPACING
    assert positions[1:4] == [
        (column, y0),
        (column, y0 + config.LAYOUT_Y_SPACING),
        (column, y0 + 2 * config.LAYOUT_Y_SPACING),
    ]
    assert positions[4] == (column + config.LAYOUT_X_SPACING, y0)


def test_layout_is_monotonic_for_sequential_steps():
    steps = [step(i, StepKind.PROCESS, "n8n-nodes-base.set") for i in range(1, 5)]
    xs = [x for x, _ in layout(steps)]
    ys = {y for _, y in layout(steps)}
    assert xs == sorted(xs) and len(set(xs)) == len(xs)
    assert ys == {config.LAYOUT_ORIGIN[1]}


def test_unknown_node_type_gets_no_parameters_or_credentials(assembler):
    steps = [
        step(1, StepKind.TRIGGER, "n8n-nodes-base.manualTrigger", "Start", "Manual"),
        step(2, StepKind.ACTION, "n8n-nodes-base.teleporter", "Beam the data", "Teleporter"),
    ]
    graph = assembler.assemble(steps, "beam")
    node = graph.to_export()["nodes"][1]
    assert node["parameters"] == {}
    assert "credentials" not in node
    assert node["type"] == "n8n-nodes-base.teleporter"


def test_credentials_are_placeholders(assembler, guarded_steps):
    graph = assembler.assemble(guarded_steps, "Weekly email")
    gmail = graph.node("Gmail")
    assert gmail.credentials["gmailOAuth2"].id == "{{CREDENTIAL_ID}}"
    assert gmail.credentials["gmailOAuth2"].name == "Gmail credentials"
    assert "credentials" not in graph.to_export()["nodes"][0]


def test_email_rule_customizes_gmail(assembler, guarded_steps):
    params = assembler.assemble(guarded_steps, "Weekly email").node("Gmail").parameters
    assert params["operation"] == "send"
    assert params["subject"] == '={{ $json.subject || "Automated Report" }}'
    assert params["message"] == "={{ $json.content }}"
    assert params["to"] == "={{ $json.recipientEmail }}"


def test_customization_does_not_leak_into_catalog(assembler, guarded_steps):
    assembler.assemble(guarded_steps, "Weekly email")
    assert registry.lookup("n8n-nodes-base.gmail").example_parameters["subject"] == "Weekly Report"


def test_condition_rule_matches_whole_words_only():
    if_node = registry.lookup("n8n-nodes-base.if")
    _, rule = apply_customizations(step(2, StepKind.LOGIC, if_node.type_id, "Check if the amount is large"), if_node, {})
    assert rule == "condition"
    _, rule = apply_customizations(step(2, StepKind.LOGIC, if_node.type_id, "Verify the diff"), if_node, {})
    assert rule is None


def test_first_matching_rule_wins():
    slack = registry.lookup("n8n-nodes-base.slack")
    rules = (
        CustomizationRule("first", resolves_to(slack.type_id), set_parameters({"text": "one"})),
        CustomizationRule("second", mentions("post"), set_parameters({"text": "two"})),
    )
    params, rule = apply_customizations(step(2, StepKind.ACTION, slack.type_id, "post it"), slack, {}, rules)
    assert rule == "first"
    assert params == {"text": "one"}


def test_invalid_parameters_are_dropped():
    slack = registry.lookup("n8n-nodes-base.slack")
    rules = (CustomizationRule("bad", resolves_to(slack.type_id), set_parameters({"colour": "red", "operation": "x"})),)
    graph = GraphAssembler(registry, rules=rules).assemble(
        [step(1, StepKind.ACTION, slack.type_id, "Post", "Slack")], "post"
    )
    params = graph.node("Slack").parameters
    assert "colour" not in params
    assert "operation" not in params
    assert params["channel"] == "#general"


def test_duplicate_names_get_numeric_suffix(assembler):
    steps = [
        step(1, StepKind.TRIGGER, "n8n-nodes-base.webhook", "Incoming", "Webhook"),
        step(2, StepKind.ACTION, "n8n-nodes-base.slack", "Post a", "Slack"),
        step(3, StepKind.ACTION, "n8n-nodes-base.slack", "Post b", "Slack"),
        step(4, StepKind.ACTION, "n8n-nodes-base.slack", "Post c", "Slack"),
    ]
    graph = assembler.assemble(steps, "posts")
    assert [n.name for n in graph.nodes] == ["Webhook", "Slack", "Slack1", "Slack2"]
    assert set(graph.connections) == {"Webhook", "Slack", "Slack1"}


def test_suffixed_duplicate_names_stay_within_limit(assembler):
    label = "Post the weekly summary to the engineering channel"
    steps = [step(1, StepKind.TRIGGER, "n8n-nodes-base.webhook", "Start", "Webhook")] + [
        step(i, StepKind.ACTION, "n8n-nodes-base.slack", f"Post {i}", label) for i in range(2, 14)
    ]
    names = [n.name for n in assembler.assemble(steps, "posts").nodes]

    assert len(set(names)) == len(names)
    assert all(len(name) <= config.NODE_NAME_MAX_LENGTH for name in names)
    assert names[1] == label[:config.NODE_NAME_MAX_LENGTH].strip()
    assert names[2].endswith("1")
    assert names[12].endswith("11")


def test_names_are_truncated(assembler):
    long = "A very long description that keeps going and going"
    graph = assembler.assemble([step(1, StepKind.TRIGGER, "n8n-nodes-base.manualTrigger", long)], "t")
    assert graph.nodes[0].name == long[:config.NODE_NAME_MAX_LENGTH].strip()


def test_graph_metadata(assembler, guarded_steps):
    task = "Every Friday, summarize Slack messages and email the whole team a report"
    export = assembler.assemble(guarded_steps, task).to_export()
    assert export["name"] == "Automation: " + task[:50]
    assert export["active"] is False
    assert export["settings"] == {
        "executionOrder": "v1",
        "saveExecutionProgress": True,
        "saveManualExecutions": True,
    }
    assert export["tags"] == config.WORKFLOW_TAGS
    assert export["nodes"][1]["position"] == [650, 300]
    assert export["nodes"][0]["typeVersion"] == 1


def test_wire_with_leading_error_handler():
    steps = [
        step(1, StepKind.ERROR_HANDLER, "n8n-nodes-base.slack"),
        step(2, StepKind.ACTION, "n8n-nodes-base.gmail"),
    ]
    connections = wire(steps, ["a", "b"])
    assert set(connections) == {"a"}
    assert connections["a"].main[0][0].node == "b"
