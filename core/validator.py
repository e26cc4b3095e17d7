"""Static validation of generated files. Pure functions, no I/O, no AI calls.

Script files (.ts/.tsx/.js/.jsx) get the full treatment: rule table, delimiter
balance, import cross-checks and dependency checks. Stylesheets only get a
brace-balance check. Everything else is skipped.
"""

import json
import logging
import re
from dataclasses import dataclass, field

from config.defaults import DEFAULTS
from config.rules import (
    COMMON_ICONS,
    JSX_EXTENSIONS,
    KNOWN_PACKAGES,
    REACT_HOOKS,
    ROUTER_SYMBOLS,
    SCRIPT_EXTENSIONS,
    STYLE_EXTENSIONS,
    VALIDATION_RULES,
)
from core.quality import build_suggestions, quality_score
from core.scanner import scan
from core.state import ValidationError, ValidationResult

log = logging.getLogger(__name__)

_NAMED_IMPORT_RE = re.compile(
    r"""import\s+(?:type\s+)?(?:([\w$]+)\s*,\s*)?\{([^}]*)\}\s*from\s+['"]([^'"]+)['"]"""
)
_DEFAULT_IMPORT_RE = re.compile(
    r"""import\s+(?:type\s+)?(?:\*\s+as\s+)?([\w$]+)\s+from\s+['"]([^'"]+)['"]"""
)
_MODULE_RE = re.compile(
    r"""(?:\bfrom\s+|^\s*import\s+)['"]([^'"]+)['"]""", re.MULTILINE
)
_DECLARED_RE = re.compile(r"\b(?:function|const|let|var|class)\s+([A-Za-z_$][\w$]*)")

_DELIMITER_NAMES = {"{": "braces", "(": "parentheses", "[": "brackets"}


def is_script(path):
    return path.endswith(SCRIPT_EXTENSIONS)


def is_style(path):
    return path.endswith(STYLE_EXTENSIONS)


def match_rule(rule, content):
    """Return the 1-based line of the rule's first match, or None."""
    m = rule.pattern.search(content)
    if not m:
        return None
    return content.count("\n", 0, m.start()) + 1


def imported_names(content) -> dict:
    """Map each locally bound import name to the module it came from."""
    names = {}
    for default, named, module in _NAMED_IMPORT_RE.findall(content):
        if default:
            names[default] = module
        for part in named.split(","):
            part = part.strip()
            if not part:
                continue
            # "useState as useS" binds useS, but for symbol checks the source
            # name is what matters
            names[part.split(" as ")[0].replace("type ", "").strip()] = module
    for name, module in _DEFAULT_IMPORT_RE.findall(content):
        names.setdefault(name, module)
    return names


@dataclass
class ImportAnalysis:
    used_hooks: list = field(default_factory=list)
    missing_hooks: list = field(default_factory=list)
    used_icons: list = field(default_factory=list)
    missing_icons: list = field(default_factory=list)
    used_router: list = field(default_factory=list)
    missing_router: list = field(default_factory=list)


def analyze_imports(content) -> ImportAnalysis:
    imports = imported_names(content)
    declared = set(_DECLARED_RE.findall(content))
    known = set(imports) | declared

    analysis = ImportAnalysis()
    for hook in REACT_HOOKS:
        # React.useState(...) is covered by the React namespace import
        if re.search(rf"(?<![.\w$]){hook}\s*\(", content):
            analysis.used_hooks.append(hook)
    for icon in COMMON_ICONS:
        if re.search(rf"<{icon}[\s/>]", content):
            analysis.used_icons.append(icon)
    for symbol in ROUTER_SYMBOLS:
        if symbol.startswith("use"):
            pattern = rf"(?<![.\w$]){symbol}\s*\("
        else:
            pattern = rf"<{symbol}[\s/>]"
        if re.search(pattern, content):
            analysis.used_router.append(symbol)

    analysis.missing_hooks = [h for h in analysis.used_hooks if h not in known]
    analysis.missing_icons = [i for i in analysis.used_icons if i not in known]
    analysis.missing_router = [r for r in analysis.used_router if r not in known]
    return analysis


def package_name(module):
    """Bare npm package for an import specifier, or None for relative/aliased paths."""
    if module.startswith((".", "/", "@/", "~/")):
        return None
    parts = module.split("/")
    if module.startswith("@"):
        return "/".join(parts[:2])
    return parts[0]


def declared_dependencies(files) -> set:
    """Dependencies listed in a package.json inside the file set."""
    deps = set()
    for f in files:
        if f.path != "package.json":
            continue
        try:
            pkg = json.loads(f.content)
        except json.JSONDecodeError:
            log.debug("package.json in file set is not valid JSON, ignoring")
            continue
        for key in ("dependencies", "devDependencies", "peerDependencies"):
            deps.update((pkg.get(key) or {}).keys())
    return deps


def _finding(category, path, message, fix, severity, auto_fixable=False, line=None):
    return ValidationError(
        category=category,
        file=path,
        message=message,
        fix=fix,
        severity=severity,
        auto_fixable=auto_fixable,
        line=line,
    )


def _check_style(path, content):
    braces = scan(content, line_comments=False).balance("{")
    if braces.balanced:
        return []
    return [_finding(
        "SYNTAX", path,
        f"Unbalanced braces: {braces.open} open, {braces.close} close",
        "Check for missing opening or closing braces",
        "error",
        auto_fixable=braces.diff > 0,
    )]


def _check_balance(path, content):
    findings = []
    is_jsx = path.endswith(JSX_EXTENSIONS)
    result = scan(content, track_angles=is_jsx, jsx=is_jsx)

    for open_char, label in _DELIMITER_NAMES.items():
        b = result.balance(open_char)
        if b.balanced:
            continue
        findings.append(_finding(
            "SYNTAX", path,
            f"Unbalanced {label}: {b.open} open, {b.close} close",
            f"Check for missing opening or closing {label}",
            "error",
            # only a surplus of "{" has a deterministic fix
            auto_fixable=open_char == "{" and b.diff > 0,
        ))

    if is_jsx:
        angles = result.balance("<")
        if abs(angles.diff) > DEFAULTS["jsx_imbalance_tolerance"]:
            direction = "opening" if angles.diff > 0 else "closing"
            findings.append(_finding(
                "SYNTAX", path,
                f"Possible unbalanced JSX tags: {abs(angles.diff)} more {direction} brackets",
                "Check for unclosed JSX tags",
                "warning",
            ))

    if result.unterminated in ("template", "block_comment"):
        label = "template literal" if result.unterminated == "template" else "block comment"
        findings.append(_finding(
            "SYNTAX", path,
            f"Unterminated {label} at end of file",
            f"Close the {label}",
            "error",
        ))
    return findings


def _check_imports(path, content):
    findings = []
    analysis = analyze_imports(content)
    if analysis.missing_hooks:
        names = ", ".join(analysis.missing_hooks)
        findings.append(_finding(
            "IMPORT", path,
            f"Missing React hook imports: {names}",
            f"Add: import {{ {names} }} from 'react';",
            "error",
            auto_fixable=True,
        ))
    if analysis.missing_router:
        names = ", ".join(analysis.missing_router)
        findings.append(_finding(
            "IMPORT", path,
            f"Router symbols used but not imported: {names}",
            f"Add: import {{ {names} }} from 'react-router-dom';",
            "warning",
            auto_fixable=True,
        ))
    if analysis.missing_icons:
        shown = ", ".join(analysis.missing_icons[:3])
        if len(analysis.missing_icons) > 3:
            shown += "..."
        findings.append(_finding(
            "IMPORT", path,
            f"Lucide icons used ({shown}) but not imported",
            f"Add: import {{ {', '.join(analysis.missing_icons)} }} from 'lucide-react';",
            "warning",
            auto_fixable=True,
        ))
    return findings


def _check_dependencies(path, content, available):
    missing = []
    for module in _MODULE_RE.findall(content):
        name = package_name(module)
        if name and name not in available and name not in missing:
            missing.append(name)
    if not missing:
        return []
    return [_finding(
        "DEPENDENCY", path,
        f"Imports packages that are not installed: {', '.join(missing)}",
        "Use an available package or add it to package.json",
        "warning",
    )]


def validate_file(path, content, available_packages=KNOWN_PACKAGES) -> list[ValidationError]:
    """All findings for one file, errors and warnings mixed."""
    if is_style(path):
        return _check_style(path, content)
    if not is_script(path):
        return []

    findings = []
    for rule in VALIDATION_RULES:
        line = match_rule(rule, content)
        if line is None:
            continue
        findings.append(_finding(
            rule.category, path, rule.message, rule.fix, rule.severity,
            auto_fixable=rule.auto_fixable, line=line,
        ))
    findings.extend(_check_balance(path, content))
    findings.extend(_check_imports(path, content))
    findings.extend(_check_dependencies(path, content, available_packages))
    return findings


def validate_files(files) -> ValidationResult:
    """Validate a file set. valid is exactly "no critical errors"."""
    available = KNOWN_PACKAGES | declared_dependencies(files)
    critical_errors = []
    warnings = []

    for f in files:
        if f.operation == "delete":
            continue
        for finding in validate_file(f.path, f.content, available):
            if finding.severity == "error":
                critical_errors.append(finding)
            else:
                warnings.append(finding)

    return ValidationResult(
        valid=len(critical_errors) == 0,
        score=quality_score(len(critical_errors), len(warnings)),
        critical_errors=critical_errors,
        warnings=warnings,
        suggestions=build_suggestions(critical_errors, warnings),
    )
