"""Keyword heuristics over the user prompt: questions, project type, components, niche."""

import re

from config.assets import DEFAULT_NICHE, NICHES
from core.state import IntentEntities, IntentResult

QUESTION_PHRASES = ("how do i", "what is", "can you explain", "help me understand")

CREATE_WORDS = ("create", "build", "make", "generate")
MODIFY_WORDS = ("change", "update", "modify", "add", "remove")

# Checked in order, first hit wins.
PROJECT_TYPES = (
    (("bakery", "cafe", "restaurant"), "landing-page"),
    (("portfolio",), "portfolio"),
    (("e-commerce", "shop", "store"), "e-commerce"),
    (("dashboard",), "dashboard"),
    (("blog",), "blog"),
    (("saas",), "saas"),
)

COMPONENT_KEYWORDS = (
    (("navbar", "nav", "menu"), "Navbar"),
    (("hero",), "Hero"),
    (("footer",), "Footer"),
    (("contact", "form"), "Contact"),
    (("gallery", "images"), "Gallery"),
    (("pricing",), "Pricing"),
    (("testimonial", "review"), "Testimonials"),
    (("feature",), "Features"),
    (("about",), "About"),
    (("cta", "call to action"), "CTA"),
)

PROMPT_SUBJECT_RE = re.compile(
    r"(?:build|create|make)\s+(?:me\s+)?(?:an?\s+)?(?:nice\s+)?(.+?)(?:\s+(?:landing|page|website|site))?$",
    re.IGNORECASE,
)


def is_question(prompt):
    p = prompt.strip().lower()
    return any(phrase in p for phrase in QUESTION_PHRASES) or p.endswith("?")


def detect_project_type(prompt):
    p = prompt.lower()
    for keywords, project_type in PROJECT_TYPES:
        if any(k in p for k in keywords):
            return project_type
    return "landing-page"


def detect_components(prompt):
    p = prompt.lower()
    return [name for keywords, name in COMPONENT_KEYWORDS if any(k in p for k in keywords)]


def detect_niche(prompt):
    """First niche whose keyword appears in the prompt, else the default niche."""
    p = prompt.lower()
    for niche in NICHES:
        if any(k in p for k in niche.keywords):
            return niche
    return DEFAULT_NICHE


def extract_brand(prompt):
    """Short brand name from "build a <thing> website" style prompts."""
    m = PROMPT_SUBJECT_RE.search(prompt.strip().rstrip(".!"))
    name = m.group(1).strip() if m else "My Project"
    words = [w for w in re.sub(r"[^\w\s]", "", name).split() if w]
    if not words:
        return "MyProject"
    return "".join(w[:1].upper() + w[1:] for w in words[:2])


def question_intent():
    return IntentResult(
        type="question",
        confidence=0.95,
        primary_action="Answer user question",
        entities=IntentEntities(project_type=None),
        requires_new_files=False,
        requires_existing_files=False,
    )


def heuristic_intent(prompt, is_new_project) -> IntentResult:
    """Keyword-only intent with fixed 0.75 confidence."""
    p = prompt.lower()
    is_create = any(w in p for w in CREATE_WORDS)
    is_modify = any(w in p for w in MODIFY_WORDS)

    if is_create and is_new_project:
        intent_type = "create"
    elif is_modify:
        intent_type = "modify"
    else:
        intent_type = "create"

    return IntentResult(
        type=intent_type,
        confidence=0.75,
        primary_action=prompt[:50],
        entities=IntentEntities(
            project_type=detect_project_type(prompt),
            components=detect_components(prompt),
        ),
        requires_new_files=is_create or is_new_project,
        requires_existing_files=is_modify or not is_new_project,
    )
