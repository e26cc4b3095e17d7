"""Quality score, gate evaluation and repair prioritisation."""

from dataclasses import dataclass

from config.defaults import DEFAULTS
from config.rules import CATEGORY_PRIORITY, ROOT_CAUSES, SUGGESTIONS
from core.state import ValidationError, ValidationResult


def quality_score(critical_count, warning_count) -> float:
    """1.0 minus a fixed penalty per finding, clamped to [0, 1]."""
    score = 1.0
    score -= critical_count * DEFAULTS["critical_penalty"]
    score -= warning_count * DEFAULTS["warning_penalty"]
    return max(0.0, min(1.0, round(score, 4)))


def quality_gates_pass(result: ValidationResult) -> bool:
    """Warnings never fail the gate; any critical error does."""
    return len(result.critical_errors) == 0


def build_suggestions(critical_errors, warnings) -> list[str]:
    """One suggestion per category that produced a finding, in a stable order."""
    seen = {e.category for e in critical_errors}
    seen.update(w.category for w in warnings)
    return [text for category, text in SUGGESTIONS.items() if category in seen]


@dataclass
class ClassifiedError:
    original: ValidationError
    root_cause: str
    repair_strategy: str
    priority: int


def classify_errors(errors) -> list[ClassifiedError]:
    """Attach root cause and strategy to each error, highest priority first."""
    classified = []
    for error in errors:
        root_cause, strategy = ROOT_CAUSES.get(error.category, (error.message, error.fix))
        classified.append(ClassifiedError(
            original=error,
            root_cause=root_cause,
            repair_strategy=strategy,
            priority=CATEGORY_PRIORITY.get(error.category, 9),
        ))
    # sorted() is stable, so errors keep file order within a priority
    return sorted(classified, key=lambda c: c.priority)
