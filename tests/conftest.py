import json

import pytest

from flowgen.llm import CompletionService
from flowgen.schemas import CompletionResponse


class ScriptedCompletionService(CompletionService):
    """Replays canned completions in order and records every request it receives.

    A reply can be a string (returned verbatim), a dict or list (returned as JSON
    text) or an exception instance (raised).
    """

    def __init__(self, replies):
        self.replies = list(replies)
        self.requests = []

    async def complete(self, request):
        self.requests.append(request)
        if not self.replies:
            raise AssertionError("Unexpected completion call")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if not isinstance(reply, str):
            reply = json.dumps(reply)
        return CompletionResponse(text=reply)


@pytest.fixture
def scripted_service():
    return ScriptedCompletionService


FRIDAY_DECOMPOSITION = {
    "trigger": {"type": "schedule", "description": "Every Friday at 9am", "frequency": "weekly"},
    "dataSources": [{"name": "Slack", "type": "chat", "purpose": "messages to summarize"}],
    "processingSteps": [
        {"step": 1, "action": "Fetch this week's Slack messages", "dependencies": []},
        {"step": 2, "action": "Summarize the messages", "dependencies": [1]},
        {"step": 3, "action": "Email the summary to the team", "dependencies": [2]},
    ],
    "outputs": [{"name": "Summary email", "type": "email", "format": "text"}],
    "specialLogic": {"errorHandling": ["email delivery fails"]},
}

FRIDAY_MAPPING = {
    "mappedSteps": [
        {"step": 1, "originalAction": "Fetch this week's Slack messages", "nodeType": "n8n-nodes-base.slack",
         "nodeName": "Fetch Slack", "parameters": {}, "credentials": ["slackApi"]},
        {"step": 2, "originalAction": "Summarize the messages", "nodeType": "n8n-nodes-base.openAi",
         "nodeName": "Summarize", "parameters": {}, "credentials": ["openAiApi"]},
        {"step": 3, "originalAction": "Email the summary to the team", "nodeType": "n8n-nodes-base.gmail",
         "nodeName": "Send Email", "parameters": {}, "credentials": ["gmailOAuth2"]},
    ],
    "additionalNodes": [],
}

FRIDAY_STEPS = {
    "steps": [
        {"step": 1, "type": "Trigger", "description": "Every Friday at 9am", "service": "Schedule",
         "nodeType": "n8n-nodes-base.cron", "parallelizable": False},
        {"step": 2, "type": "Action", "description": "Fetch this week's Slack messages", "service": "Slack",
         "nodeType": "n8n-nodes-base.slack", "parallelizable": False},
        {"step": 3, "type": "Process", "description": "Summarize the messages", "service": "OpenAI",
         "nodeType": "n8n-nodes-base.openAi", "parallelizable": False},
        {"step": 4, "type": "Action", "description": "Email the summary to the team", "service": "Gmail",
         "nodeType": "n8n-nodes-base.gmail", "parallelizable": False},
        {"step": 5, "type": "Error Handler", "description": "Alert the channel when the email fails",
         "service": "Slack Alert", "nodeType": "n8n-nodes-base.slack", "parallelizable": False},
    ]
}


@pytest.fixture
def friday_replies():
    """Valid completions for all four stages of the weekly summary task."""
    return [FRIDAY_DECOMPOSITION, FRIDAY_MAPPING, FRIDAY_STEPS, FRIDAY_STEPS]
