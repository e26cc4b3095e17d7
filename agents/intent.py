"""Intent stage: what kind of change the user is asking for."""

import logging

from agents.base import BaseStage
from core.errors import PipelineError
from core.state import INTENT_TYPES, IntentEntities, IntentResult
from manager.classifier import heuristic_intent, is_question, question_intent
from utils.llm import parse_json_payload

log = logging.getLogger(__name__)


def _str_list(value):
    return [str(v) for v in value] if isinstance(value, list) else []


def intent_from_payload(payload) -> IntentResult:
    """Map the model's camelCase JSON onto IntentResult. Unknown types raise ValueError."""
    intent_type = payload.get("type")
    if intent_type not in INTENT_TYPES:
        raise ValueError(f"Unknown intent type: {intent_type!r}")

    confidence = payload.get("confidence")
    if not isinstance(confidence, (int, float)):
        confidence = 0.5
    entities = payload.get("entities")
    if not isinstance(entities, dict):
        entities = {}

    return IntentResult(
        type=intent_type,
        confidence=max(0.0, min(1.0, float(confidence))),
        primary_action=str(payload.get("primaryAction") or ""),
        entities=IntentEntities(
            project_type=entities.get("projectType") or None,
            components=_str_list(entities.get("components")),
            features=_str_list(entities.get("features")),
            modifications=_str_list(entities.get("modifications")),
        ),
        requires_new_files=bool(payload.get("requiresNewFiles")),
        requires_existing_files=bool(payload.get("requiresExistingFiles")),
    )


class IntentStage(BaseStage):
    """Questions are detected locally. New projects get one model call; everything
    else, and any model failure, falls back to keyword heuristics. Never raises.
    """

    name = "intent"
    task = "intent"
    prompt_file = "intent.txt"

    def run(self, context, tracer=None):
        prompt = context.prompt

        if is_question(prompt):
            context.intent = question_intent()
            return context.intent

        if context.is_new_project and self.router is not None:
            user_message = (
                f'User request: "{prompt}"\n\n'
                "Existing files: None (new project)\n\n"
                "Extract the intent."
            )
            try:
                response = self._ask(context, user_message, tracer)
                context.intent = intent_from_payload(parse_json_payload(response))
                return context.intent
            except (PipelineError, ValueError) as e:
                log.warning("Intent model call unusable, using heuristics: %s", e,
                            extra=self._extra(context))

        context.intent = heuristic_intent(prompt, context.is_new_project)
        return context.intent
