"""Tests for core.telemetry."""

from core.context import create_context
from core.state import FileOperation, RepairAttempt, ValidationResult
from core.telemetry import StageTracer, collect_metrics


def _events(ctx, event):
    return [e for e in ctx.telemetry if e.event == event]


def test_stage_start_and_end():
    ctx = create_context("ws", "p", session_id="s")
    tracer = StageTracer(ctx)
    tracer.start_stage("intent")
    tracer.end_stage(type="create")

    assert [e.event for e in ctx.telemetry] == ["start", "complete"]
    done = ctx.telemetry[1]
    assert done.stage == "intent"
    assert done.success is True
    assert done.duration_ms >= 0
    assert done.data == {"type": "create"}


def test_starting_a_stage_closes_the_open_one_as_failed():
    ctx = create_context("ws", "p")
    tracer = StageTracer(ctx)
    tracer.start_stage("plan")
    tracer.start_stage("generate")
    errors = _events(ctx, "error")
    assert len(errors) == 1
    assert errors[0].stage == "plan"


def test_end_without_start_is_noop():
    ctx = create_context("ws", "p")
    StageTracer(ctx).end_stage()
    assert ctx.telemetry == []


def test_model_call_recorded():
    ctx = create_context("ws", "p")
    StageTracer(ctx).model_call("generate", "grok", "grok-3-fast", 1200, used_fallback=True)
    assert ctx.models_used == ["generate: grok/grok-3-fast"]
    call = _events(ctx, "model_call")[0]
    assert call.model == "grok/grok-3-fast"
    assert call.duration_ms == 1200
    assert call.data == {"used_fallback": True}


def test_validation_and_repair_events():
    ctx = create_context("ws", "p")
    tracer = StageTracer(ctx)
    tracer.validation_result(False, 2, 1, 0.65)
    tracer.repair_attempt(1, 2, 0)
    assert _events(ctx, "validation")[0].data == {"errors": 2, "warnings": 1, "score": 0.65}
    repair = _events(ctx, "repair")[0]
    assert repair.success is True
    assert repair.data["attempt"] == 1


def test_summary():
    ctx = create_context("ws", "p")
    tracer = StageTracer(ctx)
    tracer.start_stage("generate")
    tracer.model_call("generate", "openai", "gpt-4o", 50)
    tracer.end_stage()
    ctx.repair_history.append(RepairAttempt(attempt=1, errors_at_start=[]))

    summary = tracer.summary()
    assert [s["name"] for s in summary["stages"]] == ["generate"]
    assert summary["model_calls"] == [
        {"stage": "generate", "model": "openai/gpt-4o", "latency_ms": 50}
    ]
    assert summary["repair_attempts"] == 1
    assert summary["total_duration_ms"] >= 0


def test_collect_metrics():
    ctx = create_context("ws", "p", session_id="s")
    ctx.generated_files = [FileOperation("src/a.tsx", "x")]
    ctx.validation_results = ValidationResult(valid=True, score=1.0)
    metrics = collect_metrics(ctx)
    assert metrics["session_id"] == "s"
    assert metrics["files_generated"] == 1
    assert metrics["validation_passed"] is True
    assert metrics["error_count"] == 0


def test_collect_metrics_before_validation():
    metrics = collect_metrics(create_context("ws", "p"))
    assert metrics["validation_passed"] is False
