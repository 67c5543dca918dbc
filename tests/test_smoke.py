# tests/test_smoke.py
import io
from unittest.mock import MagicMock

import pytest
from resumelens import create_app

@pytest.fixture
def app():
    return create_app("test")

@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c

def test_app_boots(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.get_json()["ok"] is True

def test_analysis_requires_fields(client):
    r = client.post("/api/analysis", json={"resumeId": "r1"})
    assert r.status_code == 400
    assert r.is_json
    assert r.get_json().get("error") == "bad_request"

def test_analysis_falls_back_without_n8n(client):
    r = client.post("/api/analysis", json={"resumeId": "r1", "resumeContent": "Skills Education Experience 5 projects"})
    assert r.status_code == 200
    data = r.get_json()
    assert data["success"] is True
    assert data["analysis"]["source"] == "heuristic"
    assert data["analysis"]["score"] == 45

def test_analysis_uses_configured_client(app, client):
    n8n = MagicMock()
    n8n.analyze_resume.return_value = {"success": True, "score": 77, "aspectScores": {"format": 77}}
    sb = MagicMock()
    app.config["N8N_CLIENT"] = n8n
    app.config["SUPABASE_ADMIN"] = sb

    r = client.post("/api/analysis", json={"resumeId": "r1", "resumeContent": "text"})
    assert r.status_code == 200
    assert r.get_json()["analysis"]["source"] == "n8n"
    sb.table.return_value.update.assert_called_with({"status": "completed"})

def test_analysis_saves_result_before_completing(app, client):
    sb = MagicMock()
    app.config["SUPABASE_ADMIN"] = sb

    r = client.post("/api/analysis", json={"resumeId": "r1", "resumeContent": "Skills Education Experience 5 projects"})
    assert r.status_code == 200
    tables = [c.args[0] for c in sb.table.call_args_list]
    assert tables == ["analyses", "resumes"]
    row = sb.table.return_value.insert.call_args.args[0]
    assert row["resume_id"] == "r1"
    assert row["score"] == 45
    assert row["source"] == "heuristic"

def test_analysis_rejects_blank_content(client):
    r = client.post("/api/analysis", json={"resumeId": "r1", "resumeContent": "   \n"})
    assert r.status_code == 400

def test_analysis_unexpected_error_is_500(app, client):
    n8n = MagicMock()
    n8n.analyze_resume.side_effect = RuntimeError("bug")
    app.config["N8N_CLIENT"] = n8n
    r = client.post("/api/analysis", json={"resumeId": "r1", "resumeContent": "text"})
    assert r.status_code == 500
    assert r.get_json()["error"] == "server_error"

def test_score_endpoint(client):
    r = client.post("/api/score", json={"text": ""})
    assert r.status_code == 200
    assert r.get_json()["overallScore"] == 13
    assert client.post("/api/score", json={}).status_code == 400

def test_callback_requires_ids(client):
    r = client.post("/api/n8n/callback", json={"resumeId": "r1"})
    assert r.status_code == 400

def test_callback_records_success(app, client):
    sb = MagicMock()
    app.config["SUPABASE_ADMIN"] = sb
    r = client.post("/api/n8n/callback", json={
        "resumeId": "r1", "analysisId": "a1", "success": True, "score": 88,
        "recommendations": ["x"], "insights": {"summary": "ok"},
    })
    assert r.status_code == 200
    assert r.get_json()["success"] is True
    tables = [c.args[0] for c in sb.table.call_args_list]
    assert tables == ["analyses", "resumes"]

def test_callback_marks_failure(app, client):
    sb = MagicMock()
    app.config["SUPABASE_ADMIN"] = sb
    r = client.post("/api/n8n/callback", json={"resumeId": "r1", "analysisId": "a1", "success": False})
    assert r.status_code == 200
    sb.table.return_value.update.assert_called_with({"status": "analysis_failed", "analysis_error": "Unknown error"})

def test_n8n_status_disabled(client):
    r = client.get("/api/n8n/status")
    assert r.status_code == 200
    data = r.get_json()
    assert data["n8n"]["status"] == "disabled"
    assert "timestamp" in data

# ---------- resumes / analyses ----------

def test_resumes_need_storage(client):
    assert client.get("/api/resumes").status_code == 503
    assert client.get("/api/analyses").status_code == 503

def test_upload_stores_and_analyses(app, client):
    sb = MagicMock()
    sb.table.return_value.insert.return_value.execute.return_value.data = [{"id": "r9"}]
    app.config["SUPABASE_ADMIN"] = sb

    r = client.post("/api/resumes", json={"userId": "u1", "content": "Jane Doe\nSkills Education Experience 5 projects"})
    assert r.status_code == 201
    data = r.get_json()
    assert data["resumeId"] == "r9"
    assert data["analysis"]["source"] == "heuristic"

    stored = sb.table.return_value.insert.call_args_list[0].args[0]
    assert stored["status"] == "uploaded"
    assert stored["user_id"] == "u1"
    assert stored["title"] == "Jane Doe..."
    tables = [c.args[0] for c in sb.table.call_args_list]
    assert tables == ["resumes", "analyses", "resumes"]

def test_upload_text_file(app, client):
    sb = MagicMock()
    sb.table.return_value.insert.return_value.execute.return_value.data = [{"id": "r9"}]
    app.config["SUPABASE_ADMIN"] = sb

    r = client.post("/api/resumes", data={
        "userId": "u1", "analyze": "false",
        "file": (io.BytesIO(b"Jane Doe\nPython"), "cv.txt", "text/plain"),
    }, content_type="multipart/form-data")
    assert r.status_code == 201
    assert "analysis" not in r.get_json()
    stored = sb.table.return_value.insert.call_args.args[0]
    assert stored["content"] == "Jane Doe\nPython"
    assert stored["file_name"] == "cv.txt"

def test_upload_requires_user_and_content(app, client):
    app.config["SUPABASE_ADMIN"] = MagicMock()
    assert client.post("/api/resumes", json={"content": "x"}).status_code == 400
    assert client.post("/api/resumes", json={"userId": "u1"}).status_code == 400

def test_list_resumes(app, client):
    sb = MagicMock()
    sb.table.return_value.select.return_value.order.return_value.execute.return_value.data = [{"id": "r2"}, {"id": "r1"}]
    app.config["SUPABASE_ADMIN"] = sb

    r = client.get("/api/resumes")
    assert r.status_code == 200
    assert r.get_json() == {"success": True, "resumes": [{"id": "r2"}, {"id": "r1"}]}
    sb.table.return_value.select.return_value.order.assert_called_with("created_at", desc=True)

def test_resume_content(app, client):
    sb = MagicMock()
    chain = sb.table.return_value.select.return_value.eq.return_value.limit.return_value.execute.return_value
    chain.data = [{"id": "r1", "content": "text", "file_name": "a.txt", "file_type": "text/plain", "created_at": "2026-01-01"}]
    app.config["SUPABASE_ADMIN"] = sb

    r = client.get("/api/resumes/r1/content")
    assert r.status_code == 200
    assert r.get_json() == {"content": "text", "fileName": "a.txt", "fileType": "text/plain", "uploadedAt": "2026-01-01"}

    chain.data = []
    assert client.get("/api/resumes/r1/content").status_code == 404

def test_delete_resume(app, client):
    sb = MagicMock()
    app.config["SUPABASE_ADMIN"] = sb
    r = client.delete("/api/resumes/r1")
    assert r.status_code == 200
    sb.table.return_value.delete.return_value.eq.assert_called_with("id", "r1")

    sb.table.side_effect = RuntimeError("db down")
    assert client.delete("/api/resumes/r1").status_code == 500

def test_analyses_list_and_create(app, client):
    sb = MagicMock()
    sb.table.return_value.select.return_value.order.return_value.execute.return_value.data = [{"id": "a2"}]
    sb.table.return_value.insert.return_value.execute.return_value.data = [{"id": "a3", "score": 71}]
    app.config["SUPABASE_ADMIN"] = sb

    assert client.get("/api/analyses").get_json() == [{"id": "a2"}]
    r = client.post("/api/analyses", json={"resume_id": "r1", "score": 71})
    assert r.status_code == 201
    assert r.get_json()["id"] == "a3"
    row = sb.table.return_value.insert.call_args.args[0]
    assert row["analysis_type"] == "resume_analysis"
    assert "job_id" not in row
    assert client.post("/api/analyses", json={}).status_code == 400
