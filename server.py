#!/usr/bin/env python3
"""HTTP API over the generation pipeline."""

import logging
import os
import threading
import time
import uuid
from dataclasses import asdict

from flask import Flask, jsonify, request

from config.providers import PROVIDERS
from core.logging import configure_logging
from core.orchestrator import Orchestrator
from core.state import OPERATIONS, FileOperation
from core.store import MemoryStore
from core.validator import validate_files

log = logging.getLogger(__name__)

app = Flask(__name__)
store = MemoryStore()
orchestrator = Orchestrator(store=store)

# Finished results keyed by session id: {id: {"result": dict, "created": timestamp}}
_results = {}
_results_lock = threading.Lock()
_MAX_RESULTS = 50
_RESULT_TTL = 3600


def _cleanup_results():
    """Drop expired results, then the oldest past the limit. Called under _results_lock."""
    now = time.time()
    for sid in [sid for sid, r in _results.items() if now - r["created"] > _RESULT_TTL]:
        del _results[sid]
    if len(_results) > _MAX_RESULTS:
        by_age = sorted(_results.items(), key=lambda x: x[1]["created"])
        for sid, _ in by_age[:len(_results) - _MAX_RESULTS]:
            del _results[sid]


def _store_result(session_id, result):
    with _results_lock:
        _cleanup_results()
        _results[session_id] = {"result": result, "created": time.time()}


def _get_result(session_id):
    with _results_lock:
        entry = _results.get(session_id)
        if entry and time.time() - entry["created"] > _RESULT_TTL:
            _results.pop(session_id, None)
            entry = None
    return entry["result"] if entry else None


def _parse_files(items):
    files = []
    for item in items:
        if not isinstance(item, dict) or not item.get("path"):
            raise ValueError("Each file needs a path and content")
        if item.get("operation", "create") not in OPERATIONS:
            raise ValueError(f"Unknown operation: {item['operation']}")
        files.append(FileOperation(
            path=str(item["path"]),
            content=str(item.get("content", "")),
            operation=item.get("operation", "create"),
        ))
    return files


@app.route("/api/generate", methods=["POST"])
def api_generate():
    """Run the pipeline synchronously and persist the files to the workspace."""
    data = request.get_json(silent=True)
    if not data or not str(data.get("prompt", "")).strip():
        return jsonify({"error": "Missing prompt"}), 400

    workspace_id = data.get("workspace_id") or uuid.uuid4().hex[:8]
    session_id = data.get("session_id") or uuid.uuid4().hex
    history = data.get("conversation_history") or []
    if not isinstance(history, list):
        return jsonify({"error": "conversation_history must be a list"}), 400

    context = orchestrator.create_context(
        workspace_id,
        data["prompt"].strip(),
        session_id=session_id,
        user_id=data.get("user_id", ""),
        project_id=data.get("project_id", ""),
        conversation_history=history,
    )
    result = orchestrator.run(context)
    if result.success and result.files:
        orchestrator.save_files(context, result.files)

    payload = result.to_dict()
    payload["workspace_id"] = workspace_id
    payload["session_id"] = session_id
    _store_result(session_id, payload)
    return jsonify(payload), 200 if result.success else 500


@app.route("/api/status/<session_id>")
def api_status(session_id):
    status = store.get_session_status(session_id)
    if not status:
        return jsonify({"error": "Session not found"}), 404
    return jsonify({"session_id": session_id, **status})


@app.route("/api/result/<session_id>")
def api_result(session_id):
    result = _get_result(session_id)
    if not result:
        return jsonify({"error": "Result not found or expired"}), 404
    return jsonify(result)


@app.route("/api/workspaces/<workspace_id>/files")
def api_workspace_files(workspace_id):
    files = store.get_existing_files(workspace_id)
    return jsonify([asdict(f) for f in files])


@app.route("/api/validate", methods=["POST"])
def api_validate():
    """Validate a posted file set without running the pipeline."""
    data = request.get_json(silent=True)
    if not data or not isinstance(data.get("files"), list):
        return jsonify({"error": "Missing files"}), 400
    try:
        files = _parse_files(data["files"])
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(asdict(validate_files(files)))


@app.route("/api/providers")
def api_providers():
    config = orchestrator.config
    return jsonify({
        "configured": config.available(),
        "providers": [
            {"key": key, "name": table["name"], "configured": config.get(key) is not None}
            for key, table in PROVIDERS.items()
        ],
        "routing": {
            task: {
                "provider": entry.provider,
                "model": entry.model,
                "confidence_threshold": entry.confidence_threshold,
                "fallback": asdict(entry.fallback) if entry.fallback else None,
            }
            for task, entry in config.routing.items()
        },
    })


if __name__ == "__main__":
    configure_logging()
    port = int(os.environ.get("PORT", 5001))
    log.info("Server running at http://localhost:%d", port)
    app.run(debug=False, port=port)
