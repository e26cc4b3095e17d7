"""Validation rule table and symbol dictionaries for generated React code."""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationRule:
    """One declarative pattern check.

    `id` is also the key the auto-fixer dispatches on when auto_fixable is set.
    """
    id: str
    pattern: re.Pattern
    category: str
    severity: str
    message: str
    fix: str
    auto_fixable: bool = False


def _rule(rule_id, regex, category, severity, message, fix, auto_fixable=False, flags=0):
    return ValidationRule(
        id=rule_id,
        pattern=re.compile(regex, re.MULTILINE | flags),
        category=category,
        severity=severity,
        message=message,
        fix=fix,
        auto_fixable=auto_fixable,
    )


VALIDATION_RULES = (
    # SYNTAX
    _rule(
        "orphaned-jsx-conditional",
        r"\{\s*[A-Za-z_$][\w$.]*\s*&&\s*\((?![\s\S]*\)\s*\})",
        "SYNTAX", "error",
        "Orphaned JSX expression: `{condition && (` without closing `)}`",
        "Complete the conditional rendering with proper closing tags: `)}`",
    ),

    # IMPORT
    _rule(
        "incomplete-import",
        r"^\s*import\s+[^'\"\n;]*\bfrom\s*;?\s*$",
        "IMPORT", "warning",
        "Possible incomplete import statement",
        "Complete the module specifier: import { X } from 'module';",
    ),
    _rule(
        "import-extension",
        r"""from\s+['"](\.{1,2}/[^'"]+)\.(?:tsx|ts|jsx)['"]""",
        "IMPORT", "warning",
        "Relative import includes a source file extension",
        "Drop the .tsx/.ts/.jsx extension from the import path",
        auto_fixable=True,
    ),

    # REACT
    _rule(
        "jsx-class-attribute",
        r"<[a-z][a-z0-9]*\b[^<>]*?\sclass=",
        "REACT", "warning",
        "JSX uses `class` instead of `className`",
        "Rename the attribute to className",
        auto_fixable=True,
    ),
    _rule(
        "missing-key-prop",
        r"\.map\(\s*\(?[\w\s,]*\)?\s*=>\s*\(?\s*<(?![^>]*\bkey=)[A-Za-z]",
        "REACT", "warning",
        "List items rendered without a key prop",
        "Add a stable key: items.map((item, i) => <div key={i}>...)",
    ),
    _rule(
        "conditional-hook",
        r"\bif\s*\([^)\n]*\)\s*\{?[^\n}]*\buse(?:State|Effect|Ref|Memo|Callback|Context|Reducer)\s*\(",
        "REACT", "error",
        "React hook called conditionally",
        "Call hooks unconditionally at the top level of the component",
    ),

    # STRUCTURE
    _rule(
        "placeholder-ellipsis",
        r"//\s*\.\.\.",
        "STRUCTURE", "error",
        "Placeholder comment found - incomplete code",
        "Replace placeholder with actual implementation",
    ),
    _rule(
        "placeholder-rest-of",
        r"//\s*rest of",
        "STRUCTURE", "error",
        "Placeholder comment found - incomplete code",
        "Replace placeholder with actual implementation",
        flags=re.IGNORECASE,
    ),
    _rule(
        "placeholder-more-code",
        r"//\s*more code",
        "STRUCTURE", "error",
        "Placeholder comment found - incomplete code",
        "Replace placeholder with actual implementation",
        flags=re.IGNORECASE,
    ),
    _rule(
        "placeholder-jsx-comment",
        r"\{/\*\s*\.\.\.\s*\*/\}",
        "STRUCTURE", "error",
        "Placeholder JSX comment found - incomplete markup",
        "Replace placeholder with actual markup",
    ),
    _rule(
        "todo-comment",
        r"//\s*TODO",
        "STRUCTURE", "warning",
        "TODO comment found - incomplete implementation",
        "Complete the TODO item or remove the comment",
    ),
    _rule(
        "component-returns-null",
        r"export\s+(?:default\s+)?function\s+\w+[^{]*\{\s*return\s*null\s*;?\s*\}",
        "STRUCTURE", "warning",
        "Component returns null - possibly incomplete",
        "Implement component rendering logic",
    ),

    # TYPE
    _rule(
        "explicit-any",
        r"(?::|\bas)\s*any\b",
        "TYPE", "warning",
        "Contains explicit any type",
        "Replace any with a concrete type or unknown",
    ),
    _rule(
        "ts-suppression",
        r"@ts-(?:ignore|nocheck)\b",
        "TYPE", "warning",
        "TypeScript checking suppressed",
        "Fix the underlying type error instead of suppressing it",
    ),

    # RUNTIME
    _rule(
        "console-log",
        r"\bconsole\.log\s*\(",
        "RUNTIME", "warning",
        "Contains console.log statements",
        "Remove debug logging before shipping",
    ),
    _rule(
        "unchecked-dom-lookup",
        r"\bdocument\.(?:getElementById|querySelector)\([^)\n]*\)\.",
        "RUNTIME", "warning",
        "DOM lookup dereferenced without a null check",
        "Use optional chaining (?.) or a React ref",
    ),
    _rule(
        "unguarded-storage-parse",
        r"\bJSON\.parse\(\s*localStorage\.getItem\(",
        "RUNTIME", "warning",
        "localStorage value parsed without a null or error guard",
        "Guard the value and wrap JSON.parse in try/catch",
    ),
)

SCRIPT_EXTENSIONS = (".tsx", ".ts", ".jsx", ".js")
STYLE_EXTENSIONS = (".css",)
JSX_EXTENSIONS = (".tsx", ".jsx")

REACT_HOOKS = (
    "useState", "useEffect", "useRef", "useMemo",
    "useCallback", "useContext", "useReducer", "useLayoutEffect",
)

COMMON_ICONS = (
    "Menu", "X", "ArrowRight", "ArrowLeft", "Check", "ChevronDown",
    "ChevronUp", "Plus", "Minus", "Star", "Heart", "Search", "Home",
    "Settings", "User", "Mail", "Phone", "Calendar", "Clock", "Edit",
    "Trash", "Download", "Upload", "Share", "Copy", "Eye", "EyeOff",
    "Lock", "Unlock", "Bell", "Sun", "Moon", "Sparkles", "Zap", "Shield",
    "Globe", "Layers", "Code", "Palette", "Send", "MessageCircle",
)

ROUTER_SYMBOLS = ("Link", "NavLink", "useNavigate", "useParams", "useLocation", "useSearchParams")

# Packages the preview runtime always provides.
KNOWN_PACKAGES = frozenset({
    "react", "react-dom", "react-router-dom", "lucide-react", "framer-motion",
    "clsx", "tailwind-merge", "class-variance-authority", "sonner",
    "@tanstack/react-query", "@radix-ui/react-slot", "zod", "date-fns",
})

# Priority order and canned root causes for repair summaries; lower runs first.
CATEGORY_PRIORITY = {
    "SYNTAX": 1,
    "IMPORT": 2,
    "REACT": 2,
    "STRUCTURE": 3,
    "RUNTIME": 3,
    "TYPE": 4,
    "DEPENDENCY": 5,
}

ROOT_CAUSES = {
    "SYNTAX": ("Unbalanced delimiters or malformed JSX", "Count and match every opening and closing token"),
    "IMPORT": ("Symbols used without a matching import", "Add the missing named imports"),
    "REACT": ("React rules violation", "Review hook usage and JSX attributes"),
    "STRUCTURE": ("Incomplete implementation with placeholder code", "Replace placeholders with full implementation"),
    "RUNTIME": ("Potential runtime error", "Add null checks and optional chaining"),
    "TYPE": ("Loose or suppressed typing", "Add or fix type annotations"),
    "DEPENDENCY": ("Package not available in the preview runtime", "Use an available package or remove the import"),
}

SUGGESTIONS = {
    "IMPORT": "Review import statements at the top of files",
    "SYNTAX": "Check JSX syntax and ensure all tags are properly closed",
    "STRUCTURE": "Complete any placeholder or TODO items",
    "REACT": "Follow the rules of hooks and use className in JSX",
    "DEPENDENCY": "Stick to packages already available in the project",
    "TYPE": "Tighten loose type annotations",
    "RUNTIME": "Guard DOM and storage access against missing values",
}
