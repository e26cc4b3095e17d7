"""Base class for pipeline stages that talk to a model."""

import logging
import os
from abc import ABC, abstractmethod

from core.errors import ConfigurationError

log = logging.getLogger(__name__)

PROMPTS_DIR = os.path.join(os.path.dirname(__file__), "prompts")


class BaseStage(ABC):
    """A stage reads from and writes to a PipelineContext.

    `task` selects the routing entry; `prompt_file` names the system prompt
    under agents/prompts/.
    """

    name = "base"
    task = None
    prompt_file = None

    def __init__(self, router=None):
        self.router = router

    @abstractmethod
    def run(self, context, tracer=None):
        """Run the stage, store its output on the context and return it."""

    def _load_prompt(self):
        with open(os.path.join(PROMPTS_DIR, self.prompt_file)) as f:
            return f.read()

    def _extra(self, context):
        return {"session_id": context.session_id or "-", "stage": self.name}

    def _ask(self, context, user_message, tracer=None, system_prompt=None, history=()):
        """One routed model call. Returns the raw response text.

        history messages go between the system prompt and the user message.
        """
        if self.router is None:
            raise ConfigurationError(f"{self.name} stage has no router")
        messages = [
            {"role": "system", "content": system_prompt or self._load_prompt()},
            *history,
            {"role": "user", "content": user_message},
        ]
        result = self.router.call_with_fallback(self.task, messages)
        if tracer:
            tracer.model_call(self.name, result.provider, result.model,
                              result.latency_ms, result.used_fallback)
        else:
            context.models_used.append(f"{self.name}: {result.provider}/{result.model}")
        return result.response
