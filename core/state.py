"""Pipeline state models shared across all stages."""

from __future__ import annotations

import threading
import time
from dataclasses import asdict, dataclass, field

OPERATIONS = ("create", "update", "delete")

ERROR_CATEGORIES = (
    "SYNTAX",       # missing brace, unclosed tag
    "IMPORT",       # missing import, wrong path
    "TYPE",         # loose or suppressed typing
    "RUNTIME",      # likely runtime failure
    "REACT",        # React-specific misuse
    "DEPENDENCY",   # package not available
    "STRUCTURE",    # placeholder or incomplete file
)

INTENT_TYPES = ("create", "modify", "question", "debug", "refactor")


@dataclass
class FileOperation:
    path: str           # relative path e.g. "src/components/Hero.tsx"
    content: str
    operation: str = "create"   # create|update|delete


def merge_files(files: list[FileOperation], updates: list[FileOperation]) -> list[FileOperation]:
    """Overlay updates onto files by path. Later writes win, order is kept."""
    merged = {f.path: f for f in files}
    for update in updates:
        merged[update.path] = update
    return list(merged.values())


@dataclass
class ValidationError:
    category: str       # one of ERROR_CATEGORIES
    file: str
    message: str
    fix: str
    severity: str       # "error" or "warning"
    auto_fixable: bool = False
    line: int | None = None


@dataclass
class ValidationResult:
    valid: bool
    score: float                        # 0.0 - 1.0
    critical_errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)


@dataclass
class IntentEntities:
    project_type: str | None = None
    components: list[str] = field(default_factory=list)
    features: list[str] = field(default_factory=list)
    modifications: list[str] = field(default_factory=list)


@dataclass
class IntentResult:
    type: str                           # one of INTENT_TYPES
    confidence: float
    primary_action: str = ""
    entities: IntentEntities = field(default_factory=IntentEntities)
    requires_new_files: bool = False
    requires_existing_files: bool = False


@dataclass
class PlannedFile:
    path: str
    purpose: str = ""
    sections: list[str] = field(default_factory=list)
    features: list[str] = field(default_factory=list)


@dataclass
class ArchitecturePlan:
    project_type: str = "landing-page"
    theme: dict = field(default_factory=lambda: {"primary": "purple", "style": "modern-gradient"})
    pages: list[PlannedFile] = field(default_factory=list)
    components: list[PlannedFile] = field(default_factory=list)
    routes: list[str] = field(default_factory=lambda: ["/"])
    images: list[dict] = field(default_factory=list)     # [{"usage": ..., "url": ...}]
    special_instructions: str | None = None


@dataclass
class ProjectContext:
    framework: str = "react"
    styling: str = "tailwind"
    patterns: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    component_count: int = 0
    page_count: int = 0
    file_tree: list[str] = field(default_factory=list)


@dataclass
class RepairAttempt:
    attempt: int
    errors_at_start: list[ValidationError]
    patches_applied: list[str] = field(default_factory=list)
    resolved: bool = False
    duration_ms: int = 0


@dataclass
class RollbackPoint:
    stage: str
    file_snapshot: list[FileOperation]
    timestamp: float


@dataclass
class TelemetryEvent:
    stage: str
    event: str          # start|complete|error|model_call|validation|repair
    timestamp: float
    duration_ms: int | None = None
    success: bool | None = None
    model: str | None = None
    data: dict = field(default_factory=dict)


@dataclass
class PipelineContext:
    workspace_id: str
    prompt: str
    session_id: str | None = None
    user_id: str = ""
    project_id: str = ""

    conversation_history: list[dict] = field(default_factory=list)
    existing_files: list[FileOperation] = field(default_factory=list)

    intent: IntentResult | None = None
    plan: ArchitecturePlan | None = None
    generated_files: list[FileOperation] = field(default_factory=list)
    project_context: ProjectContext | None = None
    validation_results: ValidationResult | None = None
    repair_history: list[RepairAttempt] = field(default_factory=list)
    rollback_points: list[RollbackPoint] = field(default_factory=list)

    telemetry: list[TelemetryEvent] = field(default_factory=list)
    models_used: list[str] = field(default_factory=list)
    start_time: float = field(default_factory=time.time)
    cancelled: threading.Event = field(default_factory=threading.Event, repr=False)

    @property
    def is_new_project(self) -> bool:
        return not self.existing_files

    def cancel(self):
        self.cancelled.set()


@dataclass
class PipelineResult:
    success: bool
    files: list[FileOperation]
    models_used: list[str]
    validation_passed: bool
    repair_attempts: int
    ai_message: str
    routes: list[str]
    suggestions: list[str]
    errors: list[str] | None = None
    telemetry: dict | None = None

    def to_dict(self) -> dict:
        return asdict(self)
