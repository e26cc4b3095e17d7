"""Workspace naming for the CLI: prompt slug plus dedup under the output directory."""

import os
import re

DEFAULT_OUTPUT_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "workspaces")

MAX_DEDUP = 1000

_FILLER = {
    "build", "me", "a", "an", "the", "create", "make", "generate", "for",
    "to", "with", "using", "that", "and", "please", "can", "you", "i",
    "want", "need", "some", "new", "nice", "website", "site", "page",
    "landing", "web", "app",
}


def slugify(text):
    """Convert text to a filesystem-safe slug."""
    text = text.lower().strip()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[\s_-]+", "-", text)
    return text.strip("-")


def extract_project_name(prompt):
    """First three meaningful words of the prompt, slugified."""
    words = re.sub(r"[^\w\s]", "", prompt.lower()).split()
    meaningful = [w for w in words if w not in _FILLER]
    return slugify(" ".join(meaningful[:3])) or "project"


def new_workspace_id(prompt, base_dir=DEFAULT_OUTPUT_DIR):
    """Workspace id that does not exist yet under base_dir (name, name-2, name-3...)."""
    name = extract_project_name(prompt)
    if not os.path.exists(os.path.join(base_dir, name)):
        return name
    for counter in range(2, MAX_DEDUP + 2):
        candidate = f"{name}-{counter}"
        if not os.path.exists(os.path.join(base_dir, candidate)):
            return candidate
    raise RuntimeError(f"Too many duplicate workspaces (>{MAX_DEDUP}) for: {name}")
