"""Repair loop: deterministic auto-fixes first, then AI patches, under a hard cap.

States per run:

    ATTEMPTING -> AUTO_FIXED -> AI_REPAIRING -> REVALIDATING
        -> RESOLVED | EXHAUSTED | STALLED

The loop never hands back a state with more critical errors than it was
given: an AI patch that raises the count is thrown away.
"""

import logging
import time
from dataclasses import dataclass, field

from agents.base import BaseStage
from agents.patch_composer import compose_repair_message
from config.defaults import DEFAULTS
from core.autofix import apply_autofixes
from core.errors import PipelineCancelled, PipelineError
from core.state import RepairAttempt, ValidationResult, merge_files
from core.validator import validate_files
from core.workspace import default_classifier
from utils.llm import parse_files

log = logging.getLogger(__name__)

ATTEMPTING = "attempting"
AUTO_FIXED = "auto_fixed"
AI_REPAIRING = "ai_repairing"
REVALIDATING = "revalidating"
RESOLVED = "resolved"
EXHAUSTED = "exhausted"
STALLED = "stalled"


@dataclass
class RepairOutcome:
    files: list
    validation: ValidationResult
    state: str
    attempts: list[RepairAttempt] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.state == RESOLVED


class Repairer(BaseStage):
    name = "repair"
    task = "repair"
    prompt_file = "repair.txt"

    def __init__(self, router=None, max_attempts=None, classifier=default_classifier):
        super().__init__(router)
        self.max_attempts = DEFAULTS["max_repair_attempts"] if max_attempts is None else max_attempts
        self.classifier = classifier

    def _enter(self, context, number, state):
        log.debug("Repair attempt %d: %s", number, state, extra=self._extra(context))
        return state

    def _ai_patch(self, context, files, validation, tracer):
        """Ask the model for fixed files. Returns merged files, or None if unusable."""
        message = compose_repair_message(files, validation.critical_errors)
        try:
            response = self._ask(context, message, tracer)
        except PipelineError as e:
            log.warning("AI repair call failed: %s", e, extra=self._extra(context))
            return None
        patched, rejected = self.classifier.filter_writeable(parse_files(response, operation="update"))
        for f in rejected:
            log.warning("Skipping non-writeable path %s", f.path, extra=self._extra(context))
        if not patched:
            log.warning("AI repair returned no files", extra=self._extra(context))
            return None
        return merge_files(files, patched), [f"AI repair: {f.path}" for f in patched]

    def run(self, context, tracer=None, files=None, validation=None):
        """Repair context.generated_files (or files) until valid or out of options.

        Appends one RepairAttempt per iteration to context.repair_history and
        stores the final files and validation on the context.
        """
        files = list(context.generated_files if files is None else files)
        validation = validation or validate_files(files)

        if validation.valid:
            return RepairOutcome(files, validation, RESOLVED)

        outcome = RepairOutcome(files, validation, ATTEMPTING)
        for number in range(1, self.max_attempts + 1):
            if context.cancelled.is_set():
                raise PipelineCancelled("Cancelled during repair")

            started = time.time()
            state = self._enter(context, number, ATTEMPTING)
            record = RepairAttempt(attempt=number, errors_at_start=list(validation.critical_errors))
            before = len(validation.critical_errors)

            fixed, applied = apply_autofixes(files, validation)
            if applied:
                fixed_validation = validate_files(fixed)
                if len(fixed_validation.critical_errors) <= before:
                    files, validation = fixed, fixed_validation
                    record.patches_applied.extend(f"Auto-fix: {a}" for a in applied)
                    state = self._enter(context, number, AUTO_FIXED)
                else:
                    log.warning("Auto-fixes increased critical errors, discarding",
                                extra=self._extra(context))

            if not validation.valid and self.router is not None:
                state = self._enter(context, number, AI_REPAIRING)
                result = self._ai_patch(context, files, validation, tracer)
                if result:
                    candidate, patches = result
                    candidate_validation = validate_files(candidate)
                    if len(candidate_validation.critical_errors) <= len(validation.critical_errors):
                        files, validation = candidate, candidate_validation
                        record.patches_applied.extend(patches)
                    else:
                        log.warning(
                            "AI patch raised critical errors from %d to %d, discarding",
                            len(validation.critical_errors),
                            len(candidate_validation.critical_errors),
                            extra=self._extra(context),
                        )

            state = self._enter(context, number, REVALIDATING)
            validation = validate_files(files)
            record.resolved = validation.valid
            record.duration_ms = int((time.time() - started) * 1000)
            context.repair_history.append(record)
            outcome.attempts.append(record)
            if tracer:
                tracer.repair_attempt(number, before - len(validation.critical_errors),
                                      len(validation.critical_errors))

            if validation.valid:
                state = RESOLVED
                break
            if not record.patches_applied and self.router is None:
                state = STALLED
                break
        else:
            state = EXHAUSTED

        log.info("Repair finished: %s after %d attempt(s)", state, len(outcome.attempts),
                 extra=self._extra(context))
        outcome.files, outcome.validation, outcome.state = files, validation, state
        context.generated_files = files
        context.validation_results = validation
        return outcome
