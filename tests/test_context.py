"""Tests for core.context."""

from core.context import (
    build_project_context,
    create_context,
    create_rollback_point,
    rollback_to_stage,
)
from core.state import FileOperation


def test_create_context_generates_session_id():
    ctx = create_context("ws", "build a site")
    assert ctx.session_id
    assert ctx.workspace_id == "ws"
    assert ctx.is_new_project


def test_create_context_accepts_dict_files():
    ctx = create_context("ws", "p", session_id="s1",
                         existing_files=[{"path": "src/App.tsx", "content": "x", "operation": "update"}])
    assert ctx.session_id == "s1"
    assert isinstance(ctx.existing_files[0], FileOperation)
    assert not ctx.is_new_project


def test_create_context_copies_history():
    history = [{"role": "user", "content": "hi"}]
    ctx = create_context("ws", "p", conversation_history=history)
    ctx.conversation_history.append({"role": "assistant", "content": "yo"})
    assert len(history) == 1


def test_project_context_scan():
    files = [
        FileOperation("src/pages/Index.tsx",
                      "import { useState } from 'react';\nimport { Link } from 'react-router-dom';"),
        FileOperation("src/components/Hero.tsx",
                      "import { Button } from '@/components/ui/button';\nimport { Menu } from 'lucide-react';"),
        FileOperation("src/components/Footer.tsx", "export default function Footer() {}"),
        FileOperation("package.json", '{"dependencies": {"react": "18", "zod": "3"}}'),
    ]
    ctx = build_project_context(files)
    assert ctx.patterns == ["hooks", "react-router", "shadcn"]
    assert ctx.dependencies == ["lucide-react", "react", "zod"]
    assert ctx.component_count == 2
    assert ctx.page_count == 1
    assert ctx.file_tree == [f.path for f in files]


def test_project_context_empty():
    ctx = build_project_context([])
    assert ctx.framework == "react"
    assert ctx.patterns == []
    assert ctx.component_count == 0


def test_rollback_snapshot_is_a_copy():
    ctx = create_context("ws", "p")
    ctx.generated_files = [FileOperation("src/a.tsx", "v1")]
    create_rollback_point(ctx, "generate")
    ctx.generated_files[0].content = "v2"

    restored = rollback_to_stage(ctx, "generate")
    assert restored[0].content == "v1"
    assert ctx.generated_files[0].content == "v1"


def test_rollback_uses_most_recent_point():
    ctx = create_context("ws", "p")
    ctx.generated_files = [FileOperation("src/a.tsx", "first")]
    create_rollback_point(ctx, "generate")
    ctx.generated_files = [FileOperation("src/a.tsx", "second")]
    create_rollback_point(ctx, "generate")
    ctx.generated_files = []

    rollback_to_stage(ctx, "generate")
    assert ctx.generated_files[0].content == "second"
    assert len(ctx.rollback_points) == 2


def test_rollback_unknown_stage():
    ctx = create_context("ws", "p")
    ctx.generated_files = [FileOperation("src/a.tsx", "x")]
    assert rollback_to_stage(ctx, "plan") is None
    assert ctx.generated_files[0].content == "x"
