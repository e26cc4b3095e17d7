"""Tests for core.store persistence collaborators."""

import os

import pytest

from core.state import FileOperation
from core.store import DirectoryStore, MemoryStore


def test_memory_store_round_trip():
    store = MemoryStore()
    store.save_files("ws", [FileOperation("src/a.tsx", "a"), FileOperation("src/b.tsx", "b")])
    files = store.get_existing_files("ws")
    assert [f.path for f in files] == ["src/a.tsx", "src/b.tsx"]
    assert store.get_existing_files("other") == []


def test_memory_store_delete():
    store = MemoryStore()
    store.save_files("ws", [FileOperation("src/a.tsx", "a")])
    store.save_files("ws", [FileOperation("src/a.tsx", "", "delete")])
    assert store.get_existing_files("ws") == []


def test_memory_store_copies_files():
    store = MemoryStore()
    f = FileOperation("src/a.tsx", "a")
    store.save_files("ws", [f])
    f.content = "changed"
    assert store.get_existing_files("ws")[0].content == "a"


def test_session_status():
    store = MemoryStore()
    store.update_session_status("s1", "generating", {"files": 3})
    status = store.get_session_status("s1")
    assert status["status"] == "generating"
    assert status["files"] == 3
    assert "updated_at" in status
    assert store.get_session_status("missing") is None


def test_session_status_without_id_ignored():
    store = MemoryStore()
    store.update_session_status(None, "planning")
    assert store._status == {}


def test_directory_store_writes_and_reads(tmp_path):
    store = DirectoryStore(str(tmp_path))
    written = store.save_files("ws", [
        FileOperation("src/components/Hero.tsx", "export default 1;"),
        FileOperation("src/index.css", "body {}"),
    ])
    assert written == ["src/components/Hero.tsx", "src/index.css"]
    assert (tmp_path / "ws" / "src" / "components" / "Hero.tsx").read_text() == "export default 1;"

    files = store.get_existing_files("ws")
    assert [f.path for f in files] == ["src/components/Hero.tsx", "src/index.css"]
    assert all(f.operation == "update" for f in files)


def test_directory_store_missing_workspace(tmp_path):
    assert DirectoryStore(str(tmp_path)).get_existing_files("nope") == []


def test_directory_store_skips_build_dirs_and_binaries(tmp_path):
    root = tmp_path / "ws"
    (root / "node_modules" / "react").mkdir(parents=True)
    (root / "node_modules" / "react" / "index.js").write_text("module.exports = 1;")
    (root / "src").mkdir()
    (root / "src" / "App.tsx").write_text("export default 1;")
    (root / "src" / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\xff\xfe\x00")

    files = DirectoryStore(str(tmp_path)).get_existing_files("ws")
    assert [f.path for f in files] == ["src/App.tsx"]


def test_directory_store_delete(tmp_path):
    store = DirectoryStore(str(tmp_path))
    store.save_files("ws", [FileOperation("src/a.tsx", "x")])
    store.save_files("ws", [FileOperation("src/a.tsx", "", "delete")])
    assert not os.path.exists(tmp_path / "ws" / "src" / "a.tsx")


def test_directory_store_rejects_escape(tmp_path):
    store = DirectoryStore(str(tmp_path / "out"))
    with pytest.raises(ValueError, match="escapes"):
        store.save_files("ws", [FileOperation("../../evil.tsx", "x")])
    with pytest.raises(ValueError, match="escapes"):
        store.workspace_dir("../elsewhere")
