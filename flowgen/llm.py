"""
Clients for the text-completion service the pipeline stages call.

Two backends share one contract, ``complete(CompletionRequest) -> CompletionResponse``:

- ``OpenAICompletionService`` talks to any OpenAI compatible server (LM Studio,
  vLLM, OpenAI itself) through the official SDK.
- ``HTTPCompletionService`` posts ``{userMessage, conversationHistory, systemPrompt}``
  to a proxy endpoint and reads ``{text}`` back.

Configuration precedence: explicit constructor argument > config.py.
Every transport problem surfaces as ``TransportFailure``.
"""

import asyncio
import logging
from typing import Dict, List, Optional

import openai
import requests

import config

from .schemas import CompletionRequest, CompletionResponse

logger = logging.getLogger(__name__)


class TransportFailure(Exception):
    """The completion service could not be reached, timed out or answered with an error."""


class CompletionService:
    """Base class for completion backends."""

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        raise NotImplementedError


def build_messages(request: CompletionRequest) -> List[Dict[str, str]]:
    messages = []
    if request.systemPrompt:
        messages.append({"role": "system", "content": request.systemPrompt})
    messages.extend({"role": m.role, "content": m.content} for m in request.conversationHistory)
    messages.append({"role": "user", "content": request.userMessage})
    return messages


class OpenAICompletionService(CompletionService):
    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url or config.LLM_BASE_URL
        self.api_key = api_key or config.LLM_API_KEY
        self.model = model or config.LLM_MODEL
        self.temperature = config.LLM_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or config.LLM_MAX_TOKENS
        self.timeout = timeout or config.LLM_TIMEOUT
        self._client = None

    @property
    def client(self) -> openai.AsyncOpenAI:
        # Created lazily so building a service never touches the network or needs a key
        if self._client is None:
            self._client = openai.AsyncOpenAI(
                base_url=self.base_url,
                api_key=self.api_key,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        messages = build_messages(request)
        logger.info(f"Sending request to {self.base_url} with model {self.model} ({len(messages)} messages)")
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except openai.APITimeoutError as e:
            raise TransportFailure(f"Completion request timed out after {self.timeout}s") from e
        except openai.APIConnectionError as e:
            raise TransportFailure(f"Could not reach completion service at {self.base_url}: {e}") from e
        except openai.APIError as e:
            logger.error(f"Completion service error: {e}")
            raise TransportFailure(f"Completion service error: {e}") from e

        text = response.choices[0].message.content if response.choices else None
        return CompletionResponse(text=text or "")


class HTTPCompletionService(CompletionService):
    def __init__(self, endpoint: Optional[str] = None, timeout: Optional[float] = None):
        self.endpoint = endpoint or config.COMPLETION_ENDPOINT
        self.timeout = timeout or config.LLM_TIMEOUT

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        return await asyncio.to_thread(self._post, request)

    def _post(self, request: CompletionRequest) -> CompletionResponse:
        logger.info(f"Calling completion endpoint at {self.endpoint}")
        try:
            response = requests.post(self.endpoint, json=request.model_dump(), timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.Timeout as e:
            raise TransportFailure(f"Completion request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise TransportFailure(f"Completion endpoint error: {e}") from e
        except ValueError as e:
            raise TransportFailure("Completion endpoint returned a non-JSON body") from e

        text = data.get("text") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise TransportFailure("No response text received from completion endpoint")
        return CompletionResponse(text=text)


def get_completion_service(backend: Optional[str] = None, **options) -> CompletionService:
    backend = (backend or config.COMPLETION_BACKEND).lower()
    if backend == "openai":
        return OpenAICompletionService(**options)
    if backend == "http":
        return HTTPCompletionService(**options)
    raise ValueError(f"Unknown completion backend: {backend}")
