"""Workspace path classification rules. First match wins; unknown paths are user files."""

import re
from dataclasses import dataclass

CLASSIFICATIONS = ("internal", "system", "generated", "runtime", "user")


@dataclass(frozen=True)
class PathRule:
    pattern: re.Pattern
    classification: str
    writeable: bool


def _path(regex, classification, writeable):
    return PathRule(re.compile(regex), classification, writeable)


PATH_RULES = (
    # platform code, never modified
    _path(r"^src/integrations/", "internal", False),
    _path(r"^src/main\.tsx$", "system", False),
    _path(r"^package\.json$", "system", False),
    _path(r"^package-lock\.json$", "system", False),
    _path(r"^bun\.lockb$", "system", False),
    _path(r"^\.gitignore$", "system", False),
    _path(r"^tsconfig", "system", False),
    _path(r"^vite\.config", "system", False),
    _path(r"^tailwind\.config", "system", False),

    # build output and caches
    _path(r"^node_modules/", "runtime", False),
    _path(r"^\.cache/", "runtime", False),
    _path(r"^dist/", "runtime", False),
    _path(r"^\.vite/", "runtime", False),

    # project code the pipeline owns
    _path(r"^src/pages/", "generated", True),
    _path(r"^src/components/", "generated", True),
    _path(r"^src/hooks/", "generated", True),
    _path(r"^src/lib/", "generated", True),
    _path(r"^src/stores/", "generated", True),
    _path(r"^src/utils/", "generated", True),
    _path(r"^src/types/", "generated", True),
    _path(r"^src/assets/", "generated", True),
    _path(r"^src/styles/", "generated", True),
    _path(r"^src/index\.css$", "generated", True),
    _path(r"^src/App\.tsx$", "generated", True),
    _path(r"^src/App\.css$", "generated", True),
    _path(r"^public/", "generated", True),
)
