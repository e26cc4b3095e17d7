"""Main pipeline orchestrator: a fixed stage sequence with graceful degradation."""

import logging

from agents.generator import GeneratorStage
from agents.intent import IntentStage
from agents.persona import FAILURE_MESSAGE, FAILURE_SUGGESTIONS, QUESTION_MESSAGE, persona_response
from agents.planner import PlannerStage
from agents.repairer import Repairer
from config.providers import load_provider_config
from core.context import build_project_context, create_context, create_rollback_point
from core.errors import ConfigurationError, PipelineCancelled
from core.quality import quality_gates_pass
from core.router import Router
from core.state import PipelineResult
from core.telemetry import StageTracer, collect_metrics
from core.validator import validate_files
from core.workspace import default_classifier

log = logging.getLogger(__name__)


class Orchestrator:
    """Runs context -> intent -> plan -> generate -> validate -> repair.

    Each stage absorbs its own failure and substitutes a deterministic default,
    so a new project always gets files. A run fails outright only when no
    provider is configured, when it is cancelled, or on an unexpected error.
    """

    def __init__(self, config=None, store=None, transport=None, router=None,
                 classifier=default_classifier, max_repair_attempts=None):
        self.config = config if config is not None else load_provider_config()
        if router is None and self.config.has_any():
            router = Router(self.config, transport)
        self.router = router
        self.store = store
        self.intent = IntentStage(router)
        self.planner = PlannerStage(router)
        self.generator = GeneratorStage(router, classifier)
        self.repairer = Repairer(router, max_repair_attempts, classifier)

    def create_context(self, workspace_id, prompt, existing_files=None, **kwargs):
        """New PipelineContext; existing files come from the store when not given."""
        if existing_files is None and self.store is not None:
            existing_files = self.store.get_existing_files(workspace_id)
        return create_context(workspace_id, prompt, existing_files=existing_files, **kwargs)

    def _status(self, context, status, **extra):
        if self.store is None:
            return
        try:
            self.store.update_session_status(context.session_id, status, extra or None)
        except Exception as e:
            log.warning("Status update to %s failed: %s", status, e,
                        extra={"session_id": context.session_id, "stage": status})

    @staticmethod
    def _check_cancelled(context):
        if context.cancelled.is_set():
            raise PipelineCancelled("Pipeline cancelled")

    def run(self, context) -> PipelineResult:
        tracer = StageTracer(context)
        extra = {"session_id": context.session_id, "stage": "pipeline"}
        log.info("Pipeline started for workspace %s", context.workspace_id, extra=extra)

        try:
            if not self.config.has_any():
                raise ConfigurationError(
                    "No AI providers configured. Set at least one of GROK_API_KEY, "
                    "GEMINI_API_KEY, OPENAI_API_KEY or ANTHROPIC_API_KEY."
                )

            self._check_cancelled(context)
            tracer.start_stage("context")
            context.project_context = build_project_context(context.existing_files)
            tracer.end_stage(files=len(context.existing_files))

            self._check_cancelled(context)
            tracer.start_stage("intent")
            intent = self.intent.run(context, tracer)
            tracer.end_stage(type=intent.type, confidence=intent.confidence)

            if intent.type == "question":
                self._status(context, "completed")
                return PipelineResult(
                    success=True,
                    files=[],
                    models_used=list(context.models_used),
                    validation_passed=True,
                    repair_attempts=0,
                    ai_message=QUESTION_MESSAGE,
                    routes=["/"],
                    suggestions=[],
                    telemetry=tracer.summary(),
                )

            self._check_cancelled(context)
            self._status(context, "planning")
            tracer.start_stage("plan")
            plan = self.planner.run(context, tracer)
            tracer.end_stage(project_type=plan.project_type, components=len(plan.components))
            create_rollback_point(context, "plan")

            self._check_cancelled(context)
            self._status(context, "generating")
            tracer.start_stage("generate")
            files = self.generator.run(context, tracer)
            tracer.end_stage(files=len(files))
            create_rollback_point(context, "generate")

            self._check_cancelled(context)
            self._status(context, "validating")
            tracer.start_stage("validate")
            validation = validate_files(context.generated_files)
            context.validation_results = validation
            tracer.validation_result(validation.valid, len(validation.critical_errors),
                                     len(validation.warnings), validation.score)
            tracer.end_stage(validation.valid)

            if not quality_gates_pass(validation):
                self._check_cancelled(context)
                self._status(context, "repairing")
                tracer.start_stage("repair")
                outcome = self.repairer.run(context, tracer, validation=validation)
                tracer.end_stage(outcome.success, state=outcome.state)
                validation = outcome.validation

            message, routes, suggestions = persona_response(
                context.prompt, context.generated_files, context.is_new_project
            )
            self._status(context, "completed", files=len(context.generated_files))
            log.info("Pipeline complete: %d files, validation %s", len(context.generated_files),
                     "passed" if validation.valid else "failed", extra=extra)
            log.debug("Run metrics: %s", collect_metrics(context), extra=extra)

            return PipelineResult(
                success=True,
                files=list(context.generated_files),
                models_used=list(context.models_used),
                validation_passed=validation.valid,
                repair_attempts=len(context.repair_history),
                ai_message=message,
                routes=routes,
                suggestions=suggestions,
                errors=[f"{e.file}: {e.message}" for e in validation.critical_errors],
                telemetry=tracer.summary(),
            )

        except Exception as e:
            tracer.end_stage(False, error=str(e))
            if isinstance(e, (ConfigurationError, PipelineCancelled)):
                log.error("Pipeline stopped: %s", e, extra=extra)
            else:
                log.exception("Pipeline error", extra=extra)
            self._status(context, "failed", error=str(e))
            return PipelineResult(
                success=False,
                files=[],
                models_used=list(context.models_used),
                validation_passed=False,
                repair_attempts=len(context.repair_history),
                ai_message=FAILURE_MESSAGE,
                routes=["/"],
                suggestions=list(FAILURE_SUGGESTIONS),
                errors=[str(e)],
                telemetry=tracer.summary(),
            )

    def save_files(self, context, files=None):
        """Persist files one by one; a failed file is logged and skipped."""
        if self.store is None:
            return []
        saved = []
        for f in context.generated_files if files is None else files:
            try:
                saved.extend(self.store.save_files(context.workspace_id, [f]))
            except (OSError, ValueError) as e:
                log.warning("Could not save %s: %s", f.path, e,
                            extra={"session_id": context.session_id, "stage": "save"})
        return saved
