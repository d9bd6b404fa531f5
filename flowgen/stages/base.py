import asyncio
import logging
from typing import Any, Dict, Optional

from pocketflow import AsyncNode

import config

from ..llm import CompletionService, TransportFailure
from ..node_registry import NodeRegistry
from ..node_registry import registry as default_registry
from ..parser import ParseFailure, parse_response
from ..schemas import CompletionRequest

logger = logging.getLogger(__name__)


class PipelineStage(AsyncNode):
    """One compiler phase of the workflow generator.

    prep_async reads the stage input from the shared store, exec_async makes
    exactly one completion call and one parse, post_async validates the parsed
    value (or substitutes the stage fallback) and writes OUTPUT_KEY.

    Subclasses implement stage_input, system_prompt, user_message, validate and fallback.
    validate raises ValueError when the parsed JSON does not have the expected shape;
    that is handled exactly like an unparseable response.
    """
    STAGE_NAME = "stage"
    PROGRESS_MESSAGE = ""
    PROGRESS = 0
    OUTPUT_KEY = "output"

    def __init__(
        self,
        completion_service: CompletionService,
        registry: Optional[NodeRegistry] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        wait: Optional[float] = None,
    ):
        # pocketflow's own fixed wait stays off; exec_async backs off exponentially instead
        super().__init__(max_retries=max(1, max_retries or config.LLM_MAX_RETRIES), wait=0)
        self.backoff = config.LLM_RETRY_WAIT if wait is None else wait
        self.completion_service = completion_service
        self.registry = registry or default_registry
        self.timeout = timeout or config.LLM_TIMEOUT

    # --- hooks ---

    def stage_input(self, shared: Dict[str, Any]) -> Any:
        raise NotImplementedError

    def system_prompt(self, stage_input: Any) -> str:
        raise NotImplementedError

    def user_message(self, stage_input: Any) -> str:
        raise NotImplementedError

    def validate(self, parsed: Any, stage_input: Any) -> Any:
        raise NotImplementedError

    def fallback(self, stage_input: Any) -> Any:
        raise NotImplementedError

    # --- pocketflow lifecycle ---

    async def prep_async(self, shared):
        self._report_progress()
        stage_input = self.stage_input(shared)
        request = CompletionRequest(
            userMessage=self.user_message(stage_input),
            systemPrompt=self.system_prompt(stage_input),
        )
        return {"input": stage_input, "request": request}

    async def exec_async(self, prep_res):
        attempt = getattr(self, "cur_retry", 0)
        if attempt and self.backoff > 0:
            delay = self.backoff * 2 ** (attempt - 1)
            logger.info(f"{self.STAGE_NAME}: retry {attempt} of {self.max_retries - 1} in {delay:.1f}s")
            await asyncio.sleep(delay)
        try:
            response = await asyncio.wait_for(
                self.completion_service.complete(prep_res["request"]),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise TransportFailure(f"{self.STAGE_NAME}: completion timed out after {self.timeout}s") from e

        logger.debug(f"{self.STAGE_NAME}: received {len(response.text)} characters")
        return parse_response(response.text)

    async def post_async(self, shared, prep_res, exec_res):
        stage_input = prep_res["input"]
        if isinstance(exec_res, ParseFailure):
            logger.warning(f"{self.STAGE_NAME}: unusable completion ({exec_res.reason}), applying fallback")
            output = self._fall_back(shared, stage_input)
        else:
            try:
                output = self.validate(exec_res, stage_input)
            except (ValueError, TypeError) as e:
                logger.warning(f"{self.STAGE_NAME}: completion rejected ({e}), applying fallback")
                output = self._fall_back(shared, stage_input)

        shared[self.OUTPUT_KEY] = output
        # Return None to follow the "default" edge
        return None

    def _fall_back(self, shared, stage_input):
        shared.setdefault("fallback_stages", []).append(self.STAGE_NAME)
        return self.fallback(stage_input)

    def _report_progress(self):
        callback = getattr(self, "on_event", None)
        if not callback:
            return
        try:
            callback(self.STAGE_NAME, self.PROGRESS_MESSAGE, self.PROGRESS)
        except Exception:
            logger.exception(f"Progress callback failed for stage {self.STAGE_NAME}")
