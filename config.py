import os
from pathlib import Path

# Define the root directory of the project
ROOT_DIR = Path(__file__).resolve().parent

# App Defaults - LLM Configuration
LLM_BASE_URL = os.environ.get("FLOWGEN_LLM_BASE_URL", "http://localhost:1234/v1")
LLM_API_KEY = os.environ.get("FLOWGEN_LLM_API_KEY", "lm-studio")
LLM_MODEL = os.environ.get("FLOWGEN_LLM_MODEL", "local-model")
LLM_TEMPERATURE = float(os.environ.get("FLOWGEN_LLM_TEMPERATURE", "0.2"))
LLM_MAX_TOKENS = int(os.environ.get("FLOWGEN_LLM_MAX_TOKENS", "4000"))
LLM_TIMEOUT = float(os.environ.get("FLOWGEN_LLM_TIMEOUT", "120"))

# Attempts per stage (1 = no retry) and the first retry delay in seconds, doubled on each further retry
LLM_MAX_RETRIES = int(os.environ.get("FLOWGEN_LLM_MAX_RETRIES", "1"))
LLM_RETRY_WAIT = float(os.environ.get("FLOWGEN_LLM_RETRY_WAIT", "0"))

# "openai" talks to an OpenAI compatible server, "http" to a {userMessage, systemPrompt} -> {text} proxy
COMPLETION_BACKEND = os.environ.get("FLOWGEN_COMPLETION_BACKEND", "openai")
COMPLETION_ENDPOINT = os.environ.get("FLOWGEN_COMPLETION_ENDPOINT", "http://localhost:3000/api/claude")

# Node catalog entries serialized into the mapping prompt
CATALOG_EXCERPT_LIMIT = int(os.environ.get("FLOWGEN_CATALOG_EXCERPT_LIMIT", "40"))

# Graph generation
LAYOUT_ORIGIN = (250, 300)
LAYOUT_X_SPACING = 400
LAYOUT_Y_SPACING = 200
NODE_NAME_MAX_LENGTH = 30
WORKFLOW_NAME_PREFIX = "Automation: "
WORKFLOW_NAME_TASK_LENGTH = 50
WORKFLOW_TAGS = ["flowgen", "automated", "ai-generated"]
WORKFLOW_SETTINGS = {
    "executionOrder": "v1",
    "saveExecutionProgress": True,
    "saveManualExecutions": True,
}
CREDENTIAL_PLACEHOLDER_ID = "{{CREDENTIAL_ID}}"
EXPORT_FILENAME = "automation-workflow.json"

# API server
API_HOST = os.environ.get("FLOWGEN_API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("FLOWGEN_API_PORT", "8000"))
LOG_BUFFER_SIZE = 100
