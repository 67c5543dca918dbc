# resumelens/routes/resumes.py
from __future__ import annotations

from flask import Blueprint, request, jsonify, current_app

from resumelens.services.analysis import analyze_and_store
from resumelens.services.resumes import (
    create_resume, list_resumes, get_resume, delete_resume, list_analyses, create_analysis,
)

resumes_bp = Blueprint("resumes", __name__)


def _storage():
    return current_app.config.get("SUPABASE_ADMIN")


def _no_storage():
    return jsonify(error="storage_unavailable", message="Resume storage is not configured."), 503


def _upload_payload():
    """JSON body, or a form post with plain-text `content` or a text `file`."""
    if request.is_json:
        data = request.get_json(silent=True) or {}
        return (data.get("userId"), data.get("content"), data.get("fileName"),
                data.get("fileType"), data.get("analyze", True))

    form = request.form
    content, file_name, file_type = form.get("content"), None, None
    upload = request.files.get("file")
    if upload:
        content = upload.read().decode("utf-8", errors="replace")
        file_name = upload.filename
        file_type = upload.mimetype
    analyze = (form.get("analyze") or "true").lower() not in ("0", "false", "no")
    return form.get("userId"), content, file_name, file_type, analyze


# 1) List resumes, newest first
@resumes_bp.get("/api/resumes")
def api_list_resumes():
    supabase = _storage()
    if supabase is None:
        return _no_storage()
    try:
        rows = list_resumes(supabase, request.args.get("userId"))
        return jsonify(success=True, resumes=rows), 200
    except Exception:
        current_app.logger.exception("Unhandled error in GET /api/resumes")
        return jsonify(success=False, error="server_error", message="Failed to fetch resumes"), 500


# 2) Upload resume text, then analyse it
@resumes_bp.post("/api/resumes")
def api_create_resume():
    supabase = _storage()
    if supabase is None:
        return _no_storage()
    try:
        user_id, content, file_name, file_type, analyze = _upload_payload()
        if not user_id:
            return jsonify(error="bad_request", message="Missing required field: userId"), 400
        if not isinstance(content, str) or not content:
            return jsonify(error="bad_request", message="Missing required field: file or content"), 400

        resume = create_resume(supabase, user_id, content,
                               file_name=file_name or "manual-input.txt",
                               file_type=file_type or "text/plain")
        resume_id = resume.get("id")
        current_app.logger.info("resume stored (resume_id=%s, chars=%d)", resume_id, len(content))

        out = {"success": True, "resumeId": resume_id}
        if analyze and resume_id:
            out["analysis"] = analyze_and_store(supabase, current_app.config.get("N8N_CLIENT"),
                                                resume_id, content)
        return jsonify(out), 201

    except Exception:
        current_app.logger.exception("Unhandled error in POST /api/resumes")
        return jsonify(error="server_error", message="Failed to store resume"), 500


# 3) Delete a resume
@resumes_bp.delete("/api/resumes/<resume_id>")
def api_delete_resume(resume_id):
    supabase = _storage()
    if supabase is None:
        return _no_storage()
    try:
        delete_resume(supabase, resume_id)
        return jsonify(success=True), 200
    except Exception:
        current_app.logger.exception("Unhandled error in DELETE /api/resumes/%s", resume_id)
        return jsonify(error="server_error", message="Failed to delete resume from database"), 500


# 4) Stored text content of one resume
@resumes_bp.get("/api/resumes/<resume_id>/content")
def api_resume_content(resume_id):
    supabase = _storage()
    if supabase is None:
        return _no_storage()
    try:
        row = get_resume(supabase, resume_id)
        if not row:
            return jsonify(error="not_found", message="Resume not found"), 404
        return jsonify(
            content=row.get("content"),
            fileName=row.get("file_name"),
            fileType=row.get("file_type"),
            uploadedAt=row.get("created_at"),
        ), 200
    except Exception:
        current_app.logger.exception("Unhandled error in GET /api/resumes/%s/content", resume_id)
        return jsonify(error="server_error", message="Failed to fetch resume content"), 500


# 5) Analyses, newest first
@resumes_bp.get("/api/analyses")
def api_list_analyses():
    supabase = _storage()
    if supabase is None:
        return _no_storage()
    try:
        return jsonify(list_analyses(supabase, request.args.get("resumeId"))), 200
    except Exception:
        current_app.logger.exception("Unhandled error in GET /api/analyses")
        return jsonify(error="server_error", message="Failed to fetch analyses"), 500


# 6) Store an analysis row produced elsewhere
@resumes_bp.post("/api/analyses")
def api_create_analysis():
    supabase = _storage()
    if supabase is None:
        return _no_storage()
    try:
        data = request.get_json(silent=True) or {}
        if not data.get("resume_id"):
            return jsonify(error="bad_request", message="Missing required field: resume_id"), 400
        row = create_analysis(supabase, {
            "resume_id": data.get("resume_id"),
            "job_id": data.get("job_id"),
            "user_id": data.get("user_id"),
            "analysis_type": data.get("analysis_type"),
            "content": data.get("content"),
            "score": data.get("score"),
        })
        return jsonify(row), 201
    except Exception:
        current_app.logger.exception("Unhandled error in POST /api/analyses")
        return jsonify(error="server_error", message="Failed to create analysis"), 500
