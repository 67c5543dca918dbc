# resumelens/services/resumes.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

TITLE_CHARS = 50


def _rows(resp) -> List[Dict[str, Any]]:
    return list(getattr(resp, "data", None) or [])


def title_from_content(content: str) -> str:
    first = (content or "").strip().split("\n", 1)[0].strip()
    return (first[:TITLE_CHARS] + "...") if first else "Untitled resume"


def create_resume(supabase, user_id: str, content: str,
                  file_name: str = "manual-input.txt", file_type: str = "text/plain") -> Dict[str, Any]:
    """Insert a resumes row holding the text content; status starts at 'uploaded'."""
    row = {
        "user_id": user_id,
        "title": title_from_content(content),
        "content": content,
        "file_name": file_name,
        "file_type": file_type,
        "file_size": len(content.encode("utf-8")),
        "status": "uploaded",
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    data = _rows(supabase.table("resumes").insert(row).execute())
    return data[0] if data else row


def list_resumes(supabase, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
    q = supabase.table("resumes").select("*")
    if user_id:
        q = q.eq("user_id", user_id)
    return _rows(q.order("created_at", desc=True).execute())


def get_resume(supabase, resume_id: str) -> Optional[Dict[str, Any]]:
    data = _rows(supabase.table("resumes").select("*").eq("id", resume_id).limit(1).execute())
    return data[0] if data else None


def delete_resume(supabase, resume_id: str) -> None:
    supabase.table("resumes").delete().eq("id", resume_id).execute()


def list_analyses(supabase, resume_id: Optional[str] = None) -> List[Dict[str, Any]]:
    q = supabase.table("analyses").select("*")
    if resume_id:
        q = q.eq("resume_id", resume_id)
    return _rows(q.order("created_at", desc=True).execute())


def create_analysis(supabase, row: Dict[str, Any]) -> Dict[str, Any]:
    row = {k: v for k, v in row.items() if v is not None}
    row.setdefault("analysis_type", "resume_analysis")
    row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
    data = _rows(supabase.table("analyses").insert(row).execute())
    return data[0] if data else row
