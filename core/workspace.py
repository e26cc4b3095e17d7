"""Workspace path classification: which paths the pipeline may write."""

import posixpath
from dataclasses import dataclass, field

from config.classification import PATH_RULES


@dataclass
class PathCheck:
    valid: bool
    errors: list[str] = field(default_factory=list)


class WorkspaceClassifier:
    """Classifies workspace-relative paths against an immutable rule table."""

    def __init__(self, rules=PATH_RULES):
        self.rules = tuple(rules)

    def _match(self, path):
        for rule in self.rules:
            if rule.pattern.search(path):
                return rule
        return None

    def classify(self, path):
        rule = self._match(path)
        return rule.classification if rule else "user"

    def is_writeable(self, path):
        rule = self._match(path)
        # unknown paths are user files, which the pipeline may create
        return rule.writeable if rule else True

    def validate_path(self, path) -> PathCheck:
        errors = []
        if ".." in path.split("/") or ".." in posixpath.normpath(path).split("/"):
            errors.append(f"Path traversal is not allowed: {path}")
        if path.startswith("/") or (len(path) > 1 and path[1] == ":"):
            errors.append(f"Absolute paths are not allowed: {path}")
        if not errors and not self.is_writeable(path):
            errors.append(f"Path is {self.classify(path)} and cannot be modified: {path}")
        return PathCheck(valid=not errors, errors=errors)

    def filter_writeable(self, files):
        """Split files into (writeable, rejected) by validate_path."""
        allowed, rejected = [], []
        for f in files:
            (allowed if self.validate_path(f.path).valid else rejected).append(f)
        return allowed, rejected


default_classifier = WorkspaceClassifier()
