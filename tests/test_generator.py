"""Tests for agents.generator."""

from unittest.mock import patch

import pytest

from agents.generator import GeneratorStage, cap_files, default_files, existing_files_section
from agents.planner import default_plan
from core.context import create_context
from core.errors import TransportError
from core.state import FileOperation
from core.validator import validate_files

DEFAULT_PATHS = [
    "src/index.css",
    "src/components/layout/Navbar.tsx",
    "src/components/Hero.tsx",
    "src/components/Features.tsx",
    "src/components/CTA.tsx",
    "src/components/layout/Footer.tsx",
    "src/pages/Index.tsx",
]

AI_FILES = (
    "```tsx:src/components/Hero.tsx\n"
    "export default function Hero() {\n  return <section>Fresh bread</section>;\n}\n"
    "```\n\n"
    "```tsx:src/main.tsx\nexport const boot = 1;\n```\n\n"
    "```tsx:src/pages/Index.tsx\n"
    "import Hero from '../components/Hero';\n\n"
    "export default function Index() {\n  return <Hero />;\n}\n"
    "```"
)


def test_default_files_layout():
    files = default_files("build me a bakery website")
    assert [f.path for f in files] == DEFAULT_PATHS
    assert all(f.content for f in files)


def test_default_files_branding():
    files = {f.path: f.content for f in default_files("build me a bakery website")}
    assert "Bakery" in files["src/components/layout/Navbar.tsx"]
    assert "Welcome to Bakery" in files["src/components/Hero.tsx"]
    assert "photo-1509440159596-0249088772ff" in files["src/components/Hero.tsx"]
    # template literals survive substitution
    assert "`#${link.toLowerCase()}`" in files["src/components/layout/Navbar.tsx"]


def test_default_files_sanitize_title():
    files = {f.path: f.content for f in default_files("build a {evil} <site>")}
    hero = files["src/components/Hero.tsx"]
    assert "{evil}" not in hero
    assert validate_files(list(default_files("build a {evil} <site>"))).valid


def test_default_files_fallback_title():
    hero = {f.path: f.content for f in default_files("hello")}["src/components/Hero.tsx"]
    assert "My Project" in hero


def test_generation_failure_new_project_gets_defaults(router_factory):
    ctx = create_context("ws", "build me a bakery website")
    files = GeneratorStage(router_factory(TransportError("down"))).run(ctx)
    assert [f.path for f in files] == DEFAULT_PATHS
    assert ctx.generated_files == files
    assert validate_files(files).valid


def test_no_router_new_project_gets_defaults():
    files = GeneratorStage(None).run(create_context("ws", "build me a gym website"))
    assert len(files) == len(DEFAULT_PATHS)


def test_empty_parse_new_project_gets_defaults(router_factory):
    files = GeneratorStage(router_factory("Sorry, no code.")).run(create_context("ws", "build"))
    assert [f.path for f in files] == DEFAULT_PATHS


def test_generation_failure_existing_project_raises(router_factory):
    ctx = create_context("ws", "add a pricing page",
                         existing_files=[FileOperation("src/App.tsx", "x", "update")])
    with pytest.raises(TransportError):
        GeneratorStage(router_factory(TransportError("down"))).run(ctx)


def test_parses_and_filters_files(router_factory):
    ctx = create_context("ws", "build a bakery site")
    ctx.plan = default_plan(ctx.prompt)
    router = router_factory(AI_FILES)
    files = GeneratorStage(router).run(ctx)

    # src/main.tsx is a system file
    assert [f.path for f in files] == ["src/components/Hero.tsx", "src/pages/Index.tsx"]
    task, messages = router.call_with_fallback.call_args.args
    assert task == "coding"
    assert "ARCHITECTURE PLAN:" in messages[-1]["content"]
    assert "USER REQUEST: build a bakery site" in messages[-1]["content"]


def test_existing_project_rejected_paths_only(router_factory):
    ctx = create_context("ws", "tweak the config",
                         existing_files=[FileOperation("src/App.tsx", "x", "update")])
    response = "```tsx:src/main.tsx\nexport const boot = 2;\n```"
    assert GeneratorStage(router_factory(response)).run(ctx) == []


def test_prompt_includes_history_and_existing_files(router_factory):
    history = [{"role": "user", "content": f"msg {i}"} for i in range(6)]
    existing = [FileOperation("src/App.tsx", "A" * 5000, "update")]
    ctx = create_context("ws", "add a footer", conversation_history=history,
                         existing_files=existing)
    router = router_factory(AI_FILES)
    GeneratorStage(router).run(ctx)

    messages = router.call_with_fallback.call_args.args[1]
    assert [m["content"] for m in messages[1:-1]] == ["msg 2", "msg 3", "msg 4", "msg 5"]
    assert "## EXISTING FILES" in messages[0]["content"]
    assert "A" * 1501 not in messages[0]["content"]


def test_existing_files_section_limits():
    files = [FileOperation(f"src/c{i}.tsx", "x", "update") for i in range(12)]
    section = existing_files_section(files)
    assert section.count("### ") == 8


def test_cap_files_size_and_count():
    big = FileOperation("src/big.tsx", "x" * 200)
    small = [FileOperation(f"src/f{i}.tsx", "x") for i in range(5)]
    with patch.dict("agents.generator.DEFAULTS",
                    {"max_file_size_bytes": 100, "max_files_per_generation": 3}):
        kept = cap_files([big] + small)
    assert [f.path for f in kept] == ["src/f0.tsx", "src/f1.tsx", "src/f2.tsx"]
