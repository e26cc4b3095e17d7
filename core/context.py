"""Pipeline context creation, project context scan and rollback points."""

import copy
import logging
import time
import uuid

from core.state import FileOperation, PipelineContext, ProjectContext, RollbackPoint
from core.validator import declared_dependencies

log = logging.getLogger(__name__)

# (substring in lowercased content, pattern name)
_PATTERN_MARKERS = (
    ("usestate", "hooks"),
    ("useeffect", "hooks"),
    ("react-router", "react-router"),
    ("<route", "react-router"),
    ("@/components/ui/", "shadcn"),
)

_DEPENDENCY_MARKERS = ("lucide-react", "framer-motion")


def create_context(workspace_id, prompt, session_id=None, user_id="", project_id="",
                   conversation_history=None, existing_files=None) -> PipelineContext:
    """Fresh context for one run. A session id is generated when none is given."""
    return PipelineContext(
        workspace_id=workspace_id,
        prompt=prompt,
        session_id=session_id or uuid.uuid4().hex,
        user_id=user_id,
        project_id=project_id,
        conversation_history=list(conversation_history or []),
        existing_files=[
            f if isinstance(f, FileOperation) else FileOperation(**f)
            for f in (existing_files or [])
        ],
    )


def _add(items, value):
    if value not in items:
        items.append(value)


def build_project_context(existing_files) -> ProjectContext:
    """Summarise the existing project: patterns, dependencies and counts."""
    ctx = ProjectContext(file_tree=[f.path for f in existing_files])

    for f in existing_files:
        content = f.content.lower()
        for marker, pattern in _PATTERN_MARKERS:
            if marker in content:
                _add(ctx.patterns, pattern)
        for dep in _DEPENDENCY_MARKERS:
            if dep in content:
                _add(ctx.dependencies, dep)

    for dep in sorted(declared_dependencies(existing_files)):
        _add(ctx.dependencies, dep)

    ctx.component_count = sum(
        1 for f in existing_files if "/components/" in f.path and f.path.endswith(".tsx")
    )
    ctx.page_count = sum(
        1 for f in existing_files if "/pages/" in f.path and f.path.endswith(".tsx")
    )
    return ctx


def create_rollback_point(context: PipelineContext, stage) -> RollbackPoint:
    """Snapshot the generated files after a stage."""
    point = RollbackPoint(
        stage=stage,
        file_snapshot=copy.deepcopy(context.generated_files),
        timestamp=time.time(),
    )
    context.rollback_points.append(point)
    log.debug("Rollback point %s (%d files)", stage, len(point.file_snapshot),
              extra={"session_id": context.session_id, "stage": stage})
    return point


def rollback_to_stage(context: PipelineContext, stage):
    """Restore generated files from the most recent snapshot for stage.

    Returns the restored file list, or None when no such snapshot exists.
    """
    for point in reversed(context.rollback_points):
        if point.stage == stage:
            context.generated_files = copy.deepcopy(point.file_snapshot)
            log.info("Rolled back to %s", stage,
                     extra={"session_id": context.session_id, "stage": stage})
            return context.generated_files
    return None
