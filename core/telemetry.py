"""Stage timings, model calls and validation/repair outcomes for one run."""

import logging
import time

from core.state import PipelineContext, TelemetryEvent

log = logging.getLogger(__name__)


def _elapsed_ms(since):
    return int((time.time() - since) * 1000)


class StageTracer:
    """Records telemetry events onto a PipelineContext.

    One tracer per run; it holds no state beyond the context it writes to and
    the currently open stage.
    """

    def __init__(self, context: PipelineContext):
        self.context = context
        self._current = None        # (name, started_at)

    def _extra(self, stage):
        return {"session_id": self.context.session_id or "-", "stage": stage}

    def _emit(self, stage, event, **fields):
        self.context.telemetry.append(
            TelemetryEvent(stage=stage, event=event, timestamp=time.time(), **fields)
        )

    def start_stage(self, name):
        if self._current:
            self.end_stage(False)
        self._current = (name, time.time())
        self._emit(name, "start")
        log.info("Stage %s started", name, extra=self._extra(name))

    def end_stage(self, success=True, **data):
        if not self._current:
            return
        name, started = self._current
        duration = _elapsed_ms(started)
        self._emit(name, "complete" if success else "error",
                   duration_ms=duration, success=success, data=data)
        log.info("Stage %s %s (%dms)", name, "completed" if success else "failed",
                 duration, extra=self._extra(name))
        self._current = None

    def model_call(self, stage, provider, model, latency_ms, used_fallback=False):
        self.context.models_used.append(f"{stage}: {provider}/{model}")
        self._emit(stage, "model_call", duration_ms=latency_ms, success=True,
                   model=f"{provider}/{model}", data={"used_fallback": used_fallback})
        log.info("Model call %s/%s in %dms%s", provider, model, latency_ms,
                 " (fallback)" if used_fallback else "", extra=self._extra(stage))

    def validation_result(self, valid, error_count, warning_count, score):
        self._emit("validate", "validation", success=valid,
                   data={"errors": error_count, "warnings": warning_count, "score": score})
        log.info("Validation %s (errors: %d, warnings: %d, score: %.2f)",
                 "PASSED" if valid else "FAILED", error_count, warning_count, score,
                 extra=self._extra("validate"))

    def repair_attempt(self, attempt, errors_fixed, errors_remaining):
        self._emit("repair", "repair", success=errors_remaining == 0,
                   data={"attempt": attempt, "fixed": errors_fixed, "remaining": errors_remaining})
        log.info("Repair attempt %d: fixed %d, remaining %d",
                 attempt, errors_fixed, errors_remaining, extra=self._extra("repair"))

    def summary(self) -> dict:
        stages = [
            {"name": e.stage, "duration_ms": e.duration_ms, "success": e.success}
            for e in self.context.telemetry
            if e.event in ("complete", "error")
        ]
        model_calls = [
            {"stage": e.stage, "model": e.model, "latency_ms": e.duration_ms}
            for e in self.context.telemetry
            if e.event == "model_call"
        ]
        return {
            "stages": stages,
            "model_calls": model_calls,
            "repair_attempts": len(self.context.repair_history),
            "total_duration_ms": _elapsed_ms(self.context.start_time),
        }


def collect_metrics(context: PipelineContext) -> dict:
    """Flat metrics record for one finished run."""
    results = context.validation_results
    return {
        "session_id": context.session_id,
        "workspace_id": context.workspace_id,
        "duration_ms": _elapsed_ms(context.start_time),
        "files_generated": len(context.generated_files),
        "repair_attempts": len(context.repair_history),
        "models_used": list(context.models_used),
        "validation_passed": results.valid if results else False,
        "error_count": len(results.critical_errors) if results else 0,
    }
