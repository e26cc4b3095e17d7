"""Planner stage: turns the request into an ArchitecturePlan."""

import logging

from agents.base import BaseStage
from config.assets import image_url
from core.errors import PipelineError
from core.state import ArchitecturePlan, PlannedFile
from manager.classifier import detect_niche
from utils.llm import parse_json_payload

log = logging.getLogger(__name__)

DEFAULT_THEME = {"primary": "purple", "style": "modern-gradient"}

DEFAULT_COMPONENTS = (
    ("src/components/layout/Navbar.tsx", ["logo", "nav-links", "mobile-menu", "cta-button"]),
    ("src/components/Hero.tsx", ["hero-image", "gradient-overlay", "headline", "cta-buttons"]),
    ("src/components/Features.tsx", ["icon-cards", "grid-layout", "descriptions"]),
    ("src/components/Gallery.tsx", ["image-grid", "hover-effects", "modal-view"]),
    ("src/components/CTA.tsx", ["gradient-bg", "headline", "action-buttons"]),
    ("src/components/layout/Footer.tsx", ["links", "social-icons", "copyright"]),
)


def niche_images(prompt):
    """Image manifest for the prompt's niche: hero first, then gallery shots."""
    niche = detect_niche(prompt)
    images = []
    for i, photo in enumerate(niche.photos):
        usage = "hero-bg" if i == 0 else f"gallery-{i}"
        images.append({"usage": usage, "url": image_url(photo)})
    return images


def default_plan(prompt) -> ArchitecturePlan:
    niche = detect_niche(prompt)
    return ArchitecturePlan(
        project_type=niche.project_type,
        theme=dict(DEFAULT_THEME),
        pages=[PlannedFile(
            path="src/pages/Index.tsx",
            purpose="Main landing page",
            sections=["hero", "features", "gallery", "cta", "footer"],
        )],
        components=[PlannedFile(path=path, features=list(features))
                    for path, features in DEFAULT_COMPONENTS],
        routes=["/"],
        images=niche_images(prompt),
        special_instructions=f"Create a modern {niche.name} website with stunning visuals",
    )


def _planned_files(items):
    files = []
    for item in items if isinstance(items, list) else []:
        if isinstance(item, str):
            files.append(PlannedFile(path=item))
        elif isinstance(item, dict) and item.get("path"):
            files.append(PlannedFile(
                path=str(item["path"]),
                purpose=str(item.get("purpose") or ""),
                sections=[str(s) for s in item.get("sections") or []],
                features=[str(f) for f in item.get("features") or []],
            ))
    return files


def plan_from_payload(payload, prompt) -> ArchitecturePlan:
    """Build a plan from model JSON, filling every missing field with a default."""
    theme = payload.get("theme")
    images = [
        img for img in payload.get("images") or []
        if isinstance(img, dict) and img.get("url")
    ]
    routes = [str(r) for r in payload.get("routes") or [] if r]
    return ArchitecturePlan(
        project_type=payload.get("projectType") or "landing-page",
        theme=theme if isinstance(theme, dict) else dict(DEFAULT_THEME),
        pages=_planned_files(payload.get("pages")),
        components=_planned_files(payload.get("components")),
        routes=routes or ["/"],
        images=images or niche_images(prompt),
        special_instructions=payload.get("specialInstructions") or None,
    )


def summarize_plan(plan: ArchitecturePlan) -> str:
    """Plain-text plan summary for the coder prompt."""
    lines = [
        f"Project type: {plan.project_type}",
        f"Theme: {plan.theme.get('primary', '')} / {plan.theme.get('style', '')}",
        f"Routes: {', '.join(plan.routes)}",
    ]
    for page in plan.pages:
        lines.append(f"Page {page.path}: {page.purpose} [{', '.join(page.sections)}]")
    for comp in plan.components:
        lines.append(f"Component {comp.path}: {', '.join(comp.features)}")
    for img in plan.images:
        lines.append(f"Image {img.get('usage', '')}: {img['url']}")
    if plan.special_instructions:
        lines.append(f"Notes: {plan.special_instructions}")
    return "\n".join(lines)


class PlannerStage(BaseStage):
    """Produces the architecture plan. Any failure yields the default plan."""

    name = "plan"
    task = "planning"
    prompt_file = "planner.txt"

    def run(self, context, tracer=None):
        if self.router is None:
            context.plan = default_plan(context.prompt)
            return context.plan

        existing = (
            ", ".join(f.path for f in context.existing_files)
            if context.existing_files else "None - NEW PROJECT"
        )
        user_message = (
            f'User wants: "{context.prompt}"\n\n'
            f"Existing files: {existing}\n\n"
            "Create the architecture plan."
        )
        try:
            response = self._ask(context, user_message, tracer)
            context.plan = plan_from_payload(parse_json_payload(response), context.prompt)
        except (PipelineError, ValueError) as e:
            log.warning("Planning failed, using default plan: %s", e, extra=self._extra(context))
            context.plan = default_plan(context.prompt)
        return context.plan
