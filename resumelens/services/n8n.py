# resumelens/services/n8n.py
from __future__ import annotations

import json
import logging
from typing import Optional

import requests

log = logging.getLogger(__name__)

DEFAULT_HTTP_TIMEOUT = (5, 60)  # connect, read
ANALYSIS_PATH = "/webhook/resume-analysis"
HEALTH_PATH   = "/healthz"


class N8nError(Exception):
    """The n8n webhook could not be reached or answered with garbage."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class N8nClient:
    """
    Thin client for the resume-analysis workflow.
    Built once from app config (see extensions.init_n8n); holds no global state.
    """

    def __init__(self, base_url: str, api_key: Optional[str] = None,
                 timeout=DEFAULT_HTTP_TIMEOUT, retries: int = 1,
                 session: Optional[requests.Session] = None):
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key or None
        self.timeout = timeout
        self.retries = max(0, int(retries or 0))
        self.session = session or requests.Session()

    @property
    def analysis_url(self) -> str:
        return f"{self.base_url}{ANALYSIS_PATH}"

    def _headers(self, json_body: bool = False) -> dict:
        h = {}
        if json_body:
            h["Content-Type"] = "application/json"
        if self.api_key:
            h["X-N8N-API-KEY"] = self.api_key
        return h

    def _post(self, url: str, payload: dict) -> requests.Response:
        attempts = self.retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return self.session.post(url, json=payload, headers=self._headers(json_body=True),
                                         timeout=self.timeout)
            except (requests.ConnectionError, requests.Timeout) as e:
                log.warning("n8n request failed (attempt %d/%d): %s", attempt, attempts, e)
                if attempt == attempts:
                    raise N8nError(f"n8n webhook unreachable: {e}") from e
            except requests.RequestException as e:
                raise N8nError(f"n8n webhook request error: {e}") from e
        raise N8nError("n8n webhook unreachable")

    def analyze_resume(self, resume_text: str):
        """
        POST the resume text to the workflow and return the decoded JSON body.
        Raises N8nError on transport errors, non-2xx, empty or non-JSON replies.
        """
        log.info("Sending resume to n8n (%d chars)", len(resume_text or ""))
        r = self._post(self.analysis_url, {"resume": resume_text})
        log.info("n8n response status: %s", r.status_code)

        if not r.ok:
            body = (r.text or "")[:500]
            log.error("n8n error response: %s", body)
            raise N8nError(f"n8n webhook failed: {r.status_code} {r.reason} - {body}",
                           status_code=r.status_code)

        text = (r.text or "").strip()
        if not text:
            raise N8nError("Empty response from n8n", status_code=r.status_code)
        try:
            return json.loads(text)
        except ValueError as e:
            raise N8nError(f"n8n returned invalid JSON: {e}", status_code=r.status_code) from e

    def check_health(self) -> dict:
        """Check the instance and the analysis webhook. Never raises."""
        status, error = "unknown", None
        try:
            r = self.session.get(f"{self.base_url}{HEALTH_PATH}", headers=self._headers(),
                                 timeout=self.timeout)
            if r.ok:
                status = "connected"
            else:
                status, error = "error", f"HTTP {r.status_code}: {r.reason}"
        except requests.RequestException as e:
            status, error = "unreachable", str(e)

        webhook_status, webhook_error = "unknown", None
        try:
            r = self.session.post(self.analysis_url, json={"resume": "test"},
                                  headers=self._headers(json_body=True), timeout=self.timeout)
            if r.status_code in (200, 204):
                webhook_status = "available"
            else:
                webhook_status, webhook_error = "error", f"HTTP {r.status_code}: {r.reason}"
        except requests.RequestException as e:
            webhook_status, webhook_error = "unreachable", str(e)

        return {
            "n8n": {
                "url": self.base_url,
                "status": status,
                "error": error,
                "apiKeyConfigured": bool(self.api_key),
            },
            "webhook": {
                "url": self.analysis_url,
                "status": webhook_status,
                "error": webhook_error,
            },
        }
