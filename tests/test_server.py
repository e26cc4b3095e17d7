"""Tests for server.py Flask endpoints: all pipeline runs are mocked."""

import time
from unittest.mock import patch

import pytest

from config.providers import load_provider_config
from core.state import FileOperation, PipelineResult


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _result(success=True):
    return PipelineResult(
        success=success,
        files=[FileOperation("src/components/Hero.tsx", "export default 1;")] if success else [],
        models_used=["generate: openai/gpt-4o"] if success else [],
        validation_passed=success,
        repair_attempts=0,
        ai_message="Done!" if success else "Oops!",
        routes=["/"],
        suggestions=["Add a contact form"],
        errors=None if success else ["No AI providers configured"],
    )


@pytest.fixture
def client():
    """Flask test client with a fresh result store each test."""
    import server
    server.app.config["TESTING"] = True
    server._results.clear()
    server.store._files.clear()
    server.store._status.clear()
    with server.app.test_client() as c:
        yield c


# ---------------------------------------------------------------------------
# POST /api/generate
# ---------------------------------------------------------------------------

def test_generate_missing_prompt(client):
    resp = client.post("/api/generate", json={})
    assert resp.status_code == 400
    assert "prompt" in resp.get_json()["error"].lower()


def test_generate_blank_prompt(client):
    resp = client.post("/api/generate", json={"prompt": "   "})
    assert resp.status_code == 400


def test_generate_bad_history(client):
    resp = client.post("/api/generate", json={"prompt": "build", "conversation_history": "nope"})
    assert resp.status_code == 400


def test_generate_success(client):
    with patch("server.orchestrator.run", return_value=_result()) as mock_run, \
         patch("server.orchestrator.save_files", return_value=["src/components/Hero.tsx"]) as mock_save:
        resp = client.post("/api/generate", json={
            "prompt": "build me a bakery website",
            "workspace_id": "bakery",
            "session_id": "s1",
        })
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["success"] is True
    assert data["session_id"] == "s1"
    assert data["workspace_id"] == "bakery"
    assert data["files"][0]["path"] == "src/components/Hero.tsx"
    ctx = mock_run.call_args.args[0]
    assert ctx.prompt == "build me a bakery website"
    assert ctx.session_id == "s1"
    mock_save.assert_called_once()


def test_generate_failure_skips_save(client):
    with patch("server.orchestrator.run", return_value=_result(success=False)), \
         patch("server.orchestrator.save_files") as mock_save:
        resp = client.post("/api/generate", json={"prompt": "build a site"})
    assert resp.status_code == 500
    assert resp.get_json()["success"] is False
    mock_save.assert_not_called()


def test_generate_passes_history(client):
    history = [{"role": "user", "content": "make it blue"}]
    with patch("server.orchestrator.run", return_value=_result()) as mock_run, \
         patch("server.orchestrator.save_files", return_value=[]):
        client.post("/api/generate", json={"prompt": "add a footer", "conversation_history": history})
    assert mock_run.call_args.args[0].conversation_history == history


def test_generate_loads_existing_workspace(client):
    import server
    server.store.save_files("ws", [FileOperation("src/App.tsx", "export default 1;")])
    with patch("server.orchestrator.run", return_value=_result()) as mock_run, \
         patch("server.orchestrator.save_files", return_value=[]):
        client.post("/api/generate", json={"prompt": "add a page", "workspace_id": "ws"})
    ctx = mock_run.call_args.args[0]
    assert not ctx.is_new_project


# ---------------------------------------------------------------------------
# GET /api/result, /api/status
# ---------------------------------------------------------------------------

def test_result_after_generate(client):
    with patch("server.orchestrator.run", return_value=_result()), \
         patch("server.orchestrator.save_files", return_value=[]):
        client.post("/api/generate", json={"prompt": "build", "session_id": "s2"})
    resp = client.get("/api/result/s2")
    assert resp.status_code == 200
    assert resp.get_json()["ai_message"] == "Done!"


def test_result_unknown(client):
    assert client.get("/api/result/nope").status_code == 404


def test_result_expired(client):
    import server
    server._results["old"] = {"result": {"success": True}, "created": time.time() - 7200}
    assert client.get("/api/result/old").status_code == 404
    assert "old" not in server._results


def test_results_capped(client):
    import server
    for i in range(server._MAX_RESULTS + 5):
        server._store_result(f"s{i}", {"n": i})
    assert len(server._results) <= server._MAX_RESULTS + 1


def test_status_unknown(client):
    assert client.get("/api/status/nope").status_code == 404


def test_status_known(client):
    import server
    server.store.update_session_status("s3", "generating")
    resp = client.get("/api/status/s3")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["status"] == "generating"
    assert data["session_id"] == "s3"


# ---------------------------------------------------------------------------
# Workspace files, validation, providers
# ---------------------------------------------------------------------------

def test_workspace_files(client):
    import server
    server.store.save_files("ws", [FileOperation("src/App.tsx", "export default 1;")])
    resp = client.get("/api/workspaces/ws/files")
    assert resp.get_json() == [
        {"path": "src/App.tsx", "content": "export default 1;", "operation": "create"}
    ]


def test_validate_endpoint(client):
    resp = client.post("/api/validate", json={"files": [
        {"path": "a.tsx", "content": "function A(){ return (<div>"},
    ]})
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["valid"] is False
    assert {e["category"] for e in data["critical_errors"]} == {"SYNTAX"}


def test_validate_clean(client):
    resp = client.post("/api/validate", json={"files": [
        {"path": "src/a.ts", "content": "export const a = 1;"},
    ]})
    assert resp.get_json()["valid"] is True
    assert resp.get_json()["score"] == 1.0


def test_validate_missing_files(client):
    assert client.post("/api/validate", json={}).status_code == 400


def test_validate_bad_entry(client):
    resp = client.post("/api/validate", json={"files": [{"content": "x"}]})
    assert resp.status_code == 400


def test_providers(client):
    import server
    config = load_provider_config(environ={"OPENAI_API_KEY": "sk"})
    with patch.object(server.orchestrator, "config", config):
        resp = client.get("/api/providers")
    data = resp.get_json()
    assert data["configured"] == ["openai"]
    assert {p["key"]: p["configured"] for p in data["providers"]} == {
        "grok": False, "gemini": False, "openai": True, "anthropic": False,
    }
    assert data["routing"]["coding"]["provider"] == "grok"
    assert data["routing"]["coding"]["fallback"] == {"provider": "openai", "model": "gpt4o"}
