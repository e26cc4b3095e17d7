"""Deterministic fixes for auto-fixable validation findings. Zero LLM calls."""

import logging
import re
from functools import partial

from config.rules import JSX_EXTENSIONS
from core.scanner import scan
from core.state import FileOperation
from core.validator import analyze_imports, is_script, is_style

log = logging.getLogger(__name__)

_CLASS_ATTR_RE = re.compile(r"(<[a-z][a-z0-9]*\b[^<>]*?\s)class=")
_EXTENSION_RE = re.compile(r"""(from\s+['"]\.{1,2}/[^'"]+)\.(?:tsx|ts|jsx)(['"])""")


def _named_import_re(module):
    return re.compile(
        r"""import\s+(?:([\w$]+)\s*,\s*)?\{([^}]*)\}\s*from\s+(['"])""" + re.escape(module) + r"""\3;?"""
    )


def add_named_imports(content, names, module):
    """Add named imports from module, extending an existing import when there is one."""
    if not names:
        return content

    m = _named_import_re(module).search(content)
    if m:
        existing = [n.strip() for n in m.group(2).split(",") if n.strip()]
        merged = existing + [n for n in names if n not in existing]
        default = f"{m.group(1)}, " if m.group(1) else ""
        quote = m.group(3)
        line = f"import {default}{{ {', '.join(merged)} }} from {quote}{module}{quote};"
        return content[:m.start()] + line + content[m.end():]

    default_re = re.compile(
        r"""import\s+([\w$]+)\s+from\s+(['"])""" + re.escape(module) + r"""\2;?"""
    )
    m = default_re.search(content)
    if m:
        quote = m.group(2)
        line = f"import {m.group(1)}, {{ {', '.join(names)} }} from {quote}{module}{quote};"
        return content[:m.start()] + line + content[m.end():]

    return f"import {{ {', '.join(names)} }} from '{module}';\n" + content


def close_braces(content, line_comments=True, jsx=False):
    """Append one closing brace per unmatched opening brace."""
    missing = scan(content, line_comments=line_comments, jsx=jsx).balance("{").diff
    if missing <= 0:
        return content
    return content.rstrip("\n") + "\n" + "}" * missing + "\n"


def fix_class_attribute(content):
    # one class= per pass per tag, so repeat until stable
    while True:
        fixed = _CLASS_ATTR_RE.sub(r"\1className=", content)
        if fixed == content:
            return content
        content = fixed


def strip_import_extensions(content):
    return _EXTENSION_RE.sub(r"\1\2", content)


def fix_file(path, content):
    """Run every applicable fixer on one file. Returns (content, descriptions)."""
    applied = []

    if is_style(path):
        fixed = close_braces(content, line_comments=False)
        if fixed != content:
            applied.append(f"{path}: closed unbalanced braces")
        return fixed, applied

    if not is_script(path):
        return content, applied

    analysis = analyze_imports(content)
    for names, module in (
        (analysis.missing_hooks, "react"),
        (analysis.missing_router, "react-router-dom"),
        (analysis.missing_icons, "lucide-react"),
    ):
        if names:
            content = add_named_imports(content, names, module)
            applied.append(f"{path}: imported {', '.join(names)} from {module}")

    for fixer, label in (
        (fix_class_attribute, "renamed class to className"),
        (strip_import_extensions, "removed source extensions from imports"),
        (partial(close_braces, jsx=path.endswith(JSX_EXTENSIONS)), "closed unbalanced braces"),
    ):
        fixed = fixer(content)
        if fixed != content:
            content = fixed
            applied.append(f"{path}: {label}")

    return content, applied


def apply_autofixes(files, validation):
    """Fix every file that has at least one auto-fixable finding.

    Returns (files, applied) where files is a new list and applied describes
    each change made. Files without auto-fixable findings pass through as-is.
    """
    targets = {
        e.file
        for e in list(validation.critical_errors) + list(validation.warnings)
        if e.auto_fixable
    }
    if not targets:
        return list(files), []

    fixed_files = []
    applied = []
    for f in files:
        if f.path not in targets or f.operation == "delete":
            fixed_files.append(f)
            continue
        content, changes = fix_file(f.path, f.content)
        if changes:
            f = FileOperation(path=f.path, content=content, operation=f.operation)
            applied.extend(changes)
        fixed_files.append(f)

    if applied:
        log.info("Applied %d auto-fixes", len(applied))
    return fixed_files, applied
