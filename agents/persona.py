"""Chat-facing summary of a run: message, preview routes and follow-up ideas."""

import posixpath

QUESTION_MESSAGE = (
    "I understand you have a question. Let me help you with that! "
    "What would you like to know?"
)
FAILURE_MESSAGE = "Oops! Something went wrong while building your project. Let me try again..."
FAILURE_SUGGESTIONS = ["Try simplifying your request", "Check the logs for errors"]

# (keyword in prompt, label)
PROJECT_LABELS = (
    ("bakery", "bakery landing page"),
    ("portfolio", "portfolio site"),
    ("shop", "e-commerce site"),
    ("store", "e-commerce site"),
    ("dashboard", "dashboard"),
    ("blog", "blog"),
    ("saas", "SaaS landing page"),
)


def extract_routes(files):
    """"/" plus one route per page file other than the index page."""
    routes = ["/"]
    for f in files:
        if "/pages/" not in f.path:
            continue
        name, _ = posixpath.splitext(posixpath.basename(f.path))
        route = f"/{name.lower()}"
        if name.lower() != "index" and route not in routes:
            routes.append(route)
    return routes


def follow_up_suggestions(files):
    paths = [f.path.lower() for f in files]
    suggestions = []
    if not any("contact" in p for p in paths):
        suggestions.append("Add a contact form")
    if not any("pricing" in p for p in paths):
        suggestions.append("Add a pricing section")
    if any("hero" in p for p in paths):
        suggestions.append("Change the hero image or colors")
    suggestions.append("Add another page")
    return suggestions[:3]


def project_label(prompt):
    p = prompt.lower()
    for keyword, label in PROJECT_LABELS:
        if keyword in p:
            return label
    return "website"


def persona_response(prompt, files, is_new_project):
    """Returns (message, routes, suggestions)."""
    suggestions = follow_up_suggestions(files)
    routes = extract_routes(files)
    names = ", ".join(posixpath.basename(f.path) for f in files[:5])

    if is_new_project:
        bullets = "\n".join(f"- {s}" for s in suggestions)
        message = (
            f"Done! I created your {project_label(prompt)} with {len(files)} files "
            f"including {names}. Everything's styled and ready to preview!\n\n"
            f"Next steps:\n{bullets}"
        )
    else:
        bullets = "\n".join(f"- {s}" for s in suggestions[:2])
        message = (
            f"Done! I updated {len(files)} file(s). Take a look at the preview!\n\n"
            f"Want more?\n{bullets}"
        )
    return message, routes, suggestions
