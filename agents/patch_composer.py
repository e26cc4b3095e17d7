"""Patch composer: turns validation errors into repair instructions. Zero LLM calls."""

import os

from core.quality import classify_errors

_LANGUAGES = {".tsx": "tsx", ".ts": "ts", ".jsx": "jsx", ".js": "js", ".css": "css"}


def guess_language(path):
    return _LANGUAGES.get(os.path.splitext(path)[1], "text")


def compose_error_summary(errors):
    """Numbered, priority-ordered error list with root cause and strategy per entry."""
    if not errors:
        return ""

    lines = ["Fix the following issues in the code:\n"]
    for idx, item in enumerate(classify_errors(errors), 1):
        error = item.original
        loc = error.file
        if error.line:
            loc += f" line {error.line}"
        lines.append(
            f"{idx}. [{error.category}] {loc}: {error.message}\n"
            f"   Root cause: {item.root_cause}\n"
            f"   Fix: {error.fix}"
        )
    return "\n".join(lines)


def broken_files(files, errors):
    """Files named by at least one error, in file-set order."""
    paths = {e.file for e in errors}
    return [f for f in files if f.path in paths]


def compose_repair_message(files, errors):
    """User message for the repair call: errors first, then the files to fix."""
    blocks = "\n\n".join(
        f"```{guess_language(f.path)}:{f.path}\n{f.content}\n```"
        for f in broken_files(files, errors)
    )
    return (
        f"ERRORS FOUND:\n{compose_error_summary(errors)}\n\n"
        f"FILES TO FIX:\n{blocks}\n\n"
        "Fix ALL errors and return COMPLETE files."
    )
