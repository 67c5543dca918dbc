# resumelens/services/analysis.py
from __future__ import annotations

import logging
import numbers
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .n8n import N8nClient, N8nError
from .scorer import ScoreReport, score_resume

log = logging.getLogger(__name__)

SOURCE_REMOTE    = "n8n"
SOURCE_HEURISTIC = "heuristic"


def _is_number(v) -> bool:
    return isinstance(v, numbers.Real) and not isinstance(v, bool)


def coerce_remote_result(payload: Any) -> Optional[Dict[str, Any]]:
    """
    Normalize what the workflow sent back. n8n webhooks often wrap the
    item in a one-element list. Returns None when the shape isn't usable.
    """
    if isinstance(payload, list) and len(payload) == 1:
        payload = payload[0]
    if not isinstance(payload, dict):
        return None
    if payload.get("success") is False:
        return None
    score = payload.get("score")
    aspects = payload.get("aspectScores")
    if not _is_number(score) or not isinstance(aspects, dict):
        return None
    return {
        "success": True,
        "score": score,
        "aspectScores": aspects,
        "recommendations": list(payload.get("recommendations") or []),
        "flags": list(payload.get("flags") or []),
        "insights": payload.get("insights") or {},
    }


def report_to_result(report: ScoreReport) -> Dict[str, Any]:
    d = report.to_dict()
    return {
        "success": True,
        "score": d["overallScore"],
        "aspectScores": d["aspectScores"],
        "recommendations": d["recommendations"],
        "flags": d["flags"],
        "insights": d["insights"],
    }


def analyze_resume_text(resume_text: str, client: Optional[N8nClient] = None) -> Dict[str, Any]:
    """
    Remote workflow first, local heuristic scorer as fallback.
    Always returns a result dict; `source` says which path produced it.
    """
    reason = None
    if client is not None:
        try:
            result = coerce_remote_result(client.analyze_resume(resume_text))
        except N8nError as e:
            log.warning("n8n analysis failed, using heuristic scorer: %s", e)
            result, reason = None, str(e)
        else:
            if result is None:
                reason = "Unexpected response shape from n8n"
                log.warning("n8n returned an unexpected shape, using heuristic scorer")
        if result is not None:
            result["source"] = SOURCE_REMOTE
            return result

    result = report_to_result(score_resume(resume_text))
    result["source"] = SOURCE_HEURISTIC
    if reason:
        result["fallbackReason"] = reason
    return result


# ========= Supabase bookkeeping (best effort) =========
def mark_resume_status(supabase, resume_id: str, status: str, error: Optional[str] = None) -> bool:
    if supabase is None or not resume_id:
        return False
    row = {"status": status}
    if error:
        row["analysis_error"] = error
    try:
        supabase.table("resumes").update(row).eq("id", resume_id).execute()
        return True
    except Exception:
        log.exception("resumes status update failed (resume_id=%s)", resume_id)
        return False


def record_analysis(supabase, resume_id: str, analysis_id: Optional[str], result: Dict[str, Any]) -> bool:
    if supabase is None or not resume_id:
        return False
    insights = result.get("insights") or {}
    row = {
        "resume_id": resume_id,
        "analysis_id": analysis_id,
        "analysis_type": "resume_analysis",
        "status": "completed",
        "score": result.get("score"),
        "aspect_scores": result.get("aspectScores") or {},
        "flags": result.get("flags") or [],
        "recommendations": result.get("recommendations") or [],
        "source": result.get("source"),
        "summary": insights.get("summary") if isinstance(insights, dict) else None,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    try:
        supabase.table("analyses").insert(row).execute()
        return True
    except Exception:
        log.exception("analyses insert failed (resume_id=%s)", resume_id)
        return False


def analyze_and_store(supabase, client: Optional[N8nClient], resume_id: str, resume_text: str) -> Dict[str, Any]:
    """Analyse, save the result next to the resume, then mark it completed."""
    result = analyze_resume_text(resume_text, client)
    record_analysis(supabase, resume_id, None, result)
    mark_resume_status(supabase, resume_id, "completed")
    return result
