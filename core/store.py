"""Persistence collaborators: workspace files and session status."""

import logging
import os
import threading
import time
from typing import Protocol

from core.state import FileOperation

log = logging.getLogger(__name__)

_SKIP_DIRS = {"node_modules", ".git", "dist", ".cache", ".vite"}


class Store(Protocol):
    def get_existing_files(self, workspace_id) -> list[FileOperation]: ...

    def save_files(self, workspace_id, files) -> list[str]: ...

    def update_session_status(self, session_id, status, extra=None) -> None: ...


class _StatusMixin:
    """Session status kept in memory, guarded by self._lock."""

    def update_session_status(self, session_id, status, extra=None):
        if not session_id:
            return
        with self._lock:
            self._status[session_id] = {
                "status": status,
                "updated_at": time.time(),
                **(extra or {}),
            }
        log.debug("Session status %s", status, extra={"session_id": session_id, "stage": status})

    def get_session_status(self, session_id):
        with self._lock:
            entry = self._status.get(session_id)
            return dict(entry) if entry else None


class MemoryStore(_StatusMixin):
    """Thread-safe in-process store. Used by the HTTP server and the tests."""

    def __init__(self):
        self._lock = threading.Lock()
        self._files = {}        # workspace_id -> {path: FileOperation}
        self._status = {}

    def get_existing_files(self, workspace_id):
        with self._lock:
            return list(self._files.get(workspace_id, {}).values())

    def save_files(self, workspace_id, files):
        written = []
        with self._lock:
            workspace = self._files.setdefault(workspace_id, {})
            for f in files:
                if f.operation == "delete":
                    workspace.pop(f.path, None)
                else:
                    workspace[f.path] = FileOperation(f.path, f.content, f.operation)
                written.append(f.path)
        return written


class DirectoryStore(_StatusMixin):
    """Workspace files on disk, one directory per workspace under base_dir."""

    def __init__(self, base_dir):
        self.base_dir = os.path.realpath(base_dir)
        self._lock = threading.Lock()
        self._status = {}

    def _contained(self, root, relative_path):
        resolved = os.path.realpath(os.path.join(root, relative_path))
        if not resolved.startswith(os.path.realpath(root) + os.sep):
            raise ValueError(f"Path escapes output directory: {relative_path}")
        return resolved

    def workspace_dir(self, workspace_id):
        return self._contained(self.base_dir, workspace_id)

    def get_existing_files(self, workspace_id):
        root = self.workspace_dir(workspace_id)
        if not os.path.isdir(root):
            return []
        files = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in _SKIP_DIRS)
            for name in sorted(filenames):
                full = os.path.join(dirpath, name)
                rel = os.path.relpath(full, root).replace(os.sep, "/")
                try:
                    with open(full, encoding="utf-8") as fp:
                        files.append(FileOperation(path=rel, content=fp.read(), operation="update"))
                except UnicodeDecodeError:
                    log.debug("Skipping binary file %s", rel)
        return files

    def save_files(self, workspace_id, files):
        root = self.workspace_dir(workspace_id)
        os.makedirs(root, exist_ok=True)
        written = []
        for f in files:
            resolved = self._contained(root, f.path)
            if f.operation == "delete":
                if os.path.exists(resolved):
                    os.remove(resolved)
            else:
                os.makedirs(os.path.dirname(resolved), exist_ok=True)
                with open(resolved, "w", encoding="utf-8") as fp:
                    fp.write(f.content)
            written.append(f.path)
        return written
