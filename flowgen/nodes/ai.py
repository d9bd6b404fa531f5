from .base import CatalogNode


class OpenAINode(CatalogNode):
    """Text generation, summarization and classification through OpenAI models."""
    TYPE_ID = "n8n-nodes-base.openAi"
    DISPLAY_NAME = "OpenAI"
    DESCRIPTION = "Use OpenAI GPT models for text generation and analysis"
    CATEGORIES = ["transform", "ai"]
    PARAMS = {
        "resource": {"type": "options", "enum": ["text", "image", "audio"], "default": "text"},
        "operation": {"type": "options", "enum": ["complete", "message"], "default": "complete"},
        "model": {"type": "options", "enum": ["gpt-4", "gpt-3.5-turbo"], "default": "gpt-4"},
        "prompt": {"type": "string", "default": "", "description": "The prompt for text generation"},
    }
    CREDENTIALS = ["openAiApi"]
    USES = ["text summarization", "content generation", "data analysis", "classification"]
    EXAMPLE = {
        "resource": "text",
        "operation": "message",
        "model": "gpt-4",
        "prompt": "={{ $json.inputText }}",
    }
