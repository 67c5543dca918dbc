# resumelens/routes/analysis.py
from __future__ import annotations

from datetime import datetime, timezone

from flask import Blueprint, request, jsonify, current_app

from resumelens.services.analysis import (
    analyze_and_store, mark_resume_status, record_analysis,
)
from resumelens.services.scorer import score_resume

analysis_bp = Blueprint("analysis", __name__)


# 1) Analyse a stored resume (n8n first, heuristic fallback)
@analysis_bp.post("/api/analysis")
def api_analysis():
    try:
        data = request.get_json(silent=True) or {}
        resume_id = data.get("resumeId")
        content   = data.get("resumeContent")

        if not resume_id or not isinstance(content, str) or not content.strip():
            return jsonify(error="bad_request",
                           message="Missing required fields: resumeId and resumeContent"), 400

        current_app.logger.info("analysis requested (resume_id=%s, chars=%d)", resume_id, len(content))
        result = analyze_and_store(current_app.config.get("SUPABASE_ADMIN"),
                                   current_app.config.get("N8N_CLIENT"), resume_id, content)
        return jsonify(success=True, analysis=result), 200

    except Exception:
        current_app.logger.exception("Unhandled error in /api/analysis")
        return jsonify(error="server_error", message="Analysis failed. Please try again."), 500


# 2) Heuristic scorer only (no remote call)
@analysis_bp.post("/api/score")
def api_score():
    data = request.get_json(silent=True) or {}
    text = data.get("text")
    if not isinstance(text, str):
        return jsonify(error="bad_request", message="Provide resume text."), 400
    return jsonify(score_resume(text).to_dict()), 200


# 3) n8n posts finished analyses here
@analysis_bp.post("/api/n8n/callback")
def n8n_callback():
    try:
        data = request.get_json(silent=True) or {}
        resume_id   = data.get("resumeId")
        analysis_id = data.get("analysisId")
        if not resume_id or not analysis_id:
            return jsonify(error="bad_request",
                           message="Missing required fields: resumeId or analysisId"), 400

        supabase = current_app.config.get("SUPABASE_ADMIN")
        if data.get("success"):
            record_analysis(supabase, resume_id, analysis_id, {
                "score": data.get("score"),
                "aspectScores": data.get("aspectScores"),
                "flags": data.get("flags"),
                "recommendations": data.get("recommendations"),
                "insights": data.get("insights"),
            })
            mark_resume_status(supabase, resume_id, "completed")
            current_app.logger.info("Analysis completed for resume %s", resume_id)
        else:
            mark_resume_status(supabase, resume_id, "analysis_failed",
                               error=data.get("error") or "Unknown error")
            current_app.logger.warning("Analysis failed for resume %s", resume_id)

        return jsonify(success=True, message="Analysis callback processed successfully"), 200

    except Exception:
        current_app.logger.exception("Unhandled error in /api/n8n/callback")
        return jsonify(error="server_error", message="Callback could not be processed."), 500


# 4) Connectivity check for the workflow
@analysis_bp.get("/api/n8n/status")
def n8n_status():
    client = current_app.config.get("N8N_CLIENT")
    report = client.check_health() if client else {"n8n": {"status": "disabled"}}
    report["timestamp"] = datetime.now(timezone.utc).isoformat()
    return jsonify(report), 200
