"""Template rendering with string.Template for the hand-authored file sets.

safe_substitute is required here: the templates are JSX, and template literals
such as `#${link.toLowerCase()}` must survive rendering untouched.
"""

import os
from string import Template

from core.state import FileOperation

# (workspace path, template name) for the baseline project
DEFAULT_LAYOUT = (
    ("src/index.css", "index.css"),
    ("src/components/layout/Navbar.tsx", "Navbar.tsx"),
    ("src/components/Hero.tsx", "Hero.tsx"),
    ("src/components/Features.tsx", "Features.tsx"),
    ("src/components/CTA.tsx", "CTA.tsx"),
    ("src/components/layout/Footer.tsx", "Footer.tsx"),
    ("src/pages/Index.tsx", "Index.tsx"),
)


def get_templates_dir():
    return os.path.join(os.path.dirname(__file__), "templates")


def load_template(category, template_name):
    """Read utils/templates/<category>/<template_name>, refusing paths outside it."""
    templates_dir = get_templates_dir()
    resolved = os.path.realpath(os.path.join(templates_dir, category, template_name))
    if not resolved.startswith(os.path.realpath(templates_dir) + os.sep):
        raise ValueError(f"Template path escapes templates directory: {category}/{template_name}")
    with open(resolved, encoding="utf-8") as f:
        return f.read()


def render_template(category, template_name, variables):
    return Template(load_template(category, template_name)).safe_substitute(variables)


def render_file_set(variables, category="defaults", layout=DEFAULT_LAYOUT):
    """Render every template in layout into a FileOperation at its workspace path."""
    return [
        FileOperation(
            path=path,
            content=render_template(category, name, variables).rstrip("\n"),
            operation="create",
        )
        for path, name in layout
    ]
