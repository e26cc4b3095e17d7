"""Tests for core.workspace path classification."""

import re

import pytest

from config.classification import PathRule
from core.state import FileOperation
from core.workspace import WorkspaceClassifier, default_classifier


@pytest.mark.parametrize("path,expected", [
    ("src/integrations/supabase/client.ts", "internal"),
    ("src/main.tsx", "system"),
    ("package.json", "system"),
    ("tsconfig.app.json", "system"),
    ("vite.config.ts", "system"),
    ("node_modules/react/index.js", "runtime"),
    ("dist/index.html", "runtime"),
    ("src/pages/Index.tsx", "generated"),
    ("src/components/layout/Navbar.tsx", "generated"),
    ("src/index.css", "generated"),
    ("src/App.tsx", "generated"),
    ("docs/notes.md", "user"),
])
def test_classify(path, expected):
    assert default_classifier.classify(path) == expected


def test_writeable():
    assert default_classifier.is_writeable("src/components/Hero.tsx")
    assert default_classifier.is_writeable("docs/notes.md")
    assert not default_classifier.is_writeable("package.json")
    assert not default_classifier.is_writeable("src/integrations/x.ts")


def test_validate_ok():
    check = default_classifier.validate_path("src/components/Hero.tsx")
    assert check.valid
    assert check.errors == []


@pytest.mark.parametrize("path", [
    "../etc/passwd",
    "src/../../secret.ts",
    "src/components/../../../x.tsx",
])
def test_traversal_rejected(path):
    check = default_classifier.validate_path(path)
    assert not check.valid
    assert "traversal" in check.errors[0]


@pytest.mark.parametrize("path", ["/etc/passwd", "C:\\Windows\\x.tsx"])
def test_absolute_rejected(path):
    check = default_classifier.validate_path(path)
    assert not check.valid
    assert any("Absolute" in e for e in check.errors)


def test_system_path_rejected():
    check = default_classifier.validate_path("src/main.tsx")
    assert not check.valid
    assert "system" in check.errors[0]


def test_filter_writeable():
    files = [
        FileOperation("src/components/Hero.tsx", "x"),
        FileOperation("package.json", "{}"),
        FileOperation("../escape.tsx", "x"),
    ]
    allowed, rejected = default_classifier.filter_writeable(files)
    assert [f.path for f in allowed] == ["src/components/Hero.tsx"]
    assert [f.path for f in rejected] == ["package.json", "../escape.tsx"]


def test_custom_rules():
    classifier = WorkspaceClassifier(rules=[PathRule(re.compile(r"^locked/"), "system", False)])
    assert classifier.classify("locked/a.ts") == "system"
    assert not classifier.is_writeable("locked/a.ts")
    assert classifier.is_writeable("src/main.tsx")
