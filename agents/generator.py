"""Generator stage: one coding call that returns every file as a labeled block."""

import logging
import re

from agents.base import BaseStage
from agents.planner import summarize_plan
from config.assets import image_url
from config.defaults import DEFAULTS
from core.errors import PipelineError
from core.workspace import default_classifier
from manager.classifier import PROMPT_SUBJECT_RE, detect_niche, extract_brand
from utils.llm import parse_files
from utils.template_engine import render_file_set

log = logging.getLogger(__name__)

# characters that would break the JSX they are substituted into
_UNSAFE_TEXT_RE = re.compile(r"[{}<>`$'\"\\]")


def default_files(prompt):
    """The hand-authored baseline project, branded from the prompt."""
    m = PROMPT_SUBJECT_RE.search(prompt.strip().rstrip(".!"))
    title = _UNSAFE_TEXT_RE.sub("", m.group(1)).strip() if m else ""
    hero = detect_niche(prompt).photos[0]
    return render_file_set({
        "brand": extract_brand(prompt),
        "title": title.title() or "My Project",
        "hero_image": image_url(hero),
    })


def existing_files_section(files):
    limit = DEFAULTS["max_existing_files_in_prompt"]
    truncate = DEFAULTS["existing_file_truncate"]
    parts = ["## EXISTING FILES (modify these, don't recreate):"]
    for f in files[:limit]:
        parts.append(f"\n### {f.path}\n```\n{f.content[:truncate]}\n```")
    return "\n".join(parts)


def cap_files(files):
    """Drop oversized files and anything past the per-generation file limit."""
    max_size = DEFAULTS["max_file_size_bytes"]
    kept = []
    for f in files:
        if len(f.content.encode("utf-8")) > max_size:
            log.warning("Dropping %s: larger than %d bytes", f.path, max_size)
            continue
        kept.append(f)
    limit = DEFAULTS["max_files_per_generation"]
    if len(kept) > limit:
        log.warning("Model returned %d files, keeping the first %d", len(kept), limit)
        kept = kept[:limit]
    return kept


class GeneratorStage(BaseStage):
    """Generates files for the plan.

    New projects always get output: a failed call or an empty parse yields
    the default file set. For existing projects the failure propagates so an
    edit never silently becomes a no-op.
    """

    name = "generate"
    task = "coding"
    prompt_file = "generator.txt"

    def __init__(self, router=None, classifier=default_classifier):
        super().__init__(router)
        self.classifier = classifier

    def build_system_prompt(self, context):
        prompt = self._load_prompt()
        if context.existing_files:
            prompt += "\n\n" + existing_files_section(context.existing_files)
        return prompt

    def build_user_message(self, context):
        plan = f"ARCHITECTURE PLAN:\n{summarize_plan(context.plan)}\n\n" if context.plan else ""
        return (
            f"{plan}USER REQUEST: {context.prompt}\n\n"
            "Generate ALL files now. COMPLETE CODE ONLY."
        )

    def run(self, context, tracer=None):
        try:
            response = self._ask(
                context,
                self.build_user_message(context),
                tracer,
                system_prompt=self.build_system_prompt(context),
                history=context.conversation_history[-DEFAULTS["history_messages"]:],
            )
            files = cap_files(parse_files(response))
        except PipelineError as e:
            if not context.is_new_project:
                raise
            log.warning("Generation failed, using default files: %s", e, extra=self._extra(context))
            files = []

        files, rejected = self.classifier.filter_writeable(files)
        for f in rejected:
            log.warning("Skipping non-writeable path %s", f.path, extra=self._extra(context))

        if not files and context.is_new_project:
            log.info("No usable files from the model, using default files", extra=self._extra(context))
            files = default_files(context.prompt)

        context.generated_files = files
        return files
