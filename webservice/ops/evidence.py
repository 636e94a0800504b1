import json
import logging
from pathlib import Path
from datetime import datetime
from typing import Dict, Any, Mapping, Optional
import hashlib

import requests

from ..interfaces import PassthroughObserver

logger = logging.getLogger(__name__)


class EvidenceObserver(PassthroughObserver):
    """
    Passthrough observer that keeps an on-disk trail of failed dispatches:
    one JSONL line per failure plus a truncated body sample.
    """

    def __init__(self, session_id: str, logs_dir: str = "logs", body_sample_bytes: int = 2048):
        self.session_id = session_id
        self.logs_dir = Path(logs_dir)
        self.requests_log_path = self.logs_dir / "failed_requests.jsonl"
        self.responses_dir = self.logs_dir / "failed_responses"
        self.body_sample_bytes = body_sample_bytes

        self.logs_dir.mkdir(parents=True, exist_ok=True)
        self.responses_dir.mkdir(parents=True, exist_ok=True)

    def response_received(
        self,
        response: Optional[requests.Response],
        data: Optional[bytes],
        request: requests.PreparedRequest,
        error: Optional[Exception],
    ) -> None:
        if error is not None:
            self.log_failed_request(
                method=request.method,
                url=request.url,
                status_code=0,
                error_type="REQUEST_EXCEPTION",
                headers=request.headers or {},
                context={"error": str(error)},
            )
        elif response is not None and response.status_code >= 400:
            self.log_failed_request(
                method=request.method,
                url=request.url,
                status_code=response.status_code,
                error_type="HTTP_ERROR",
                headers=request.headers or {},
                context={"reason": response.reason or ""},
                response_body=data,
            )

    def log_failed_request(
        self,
        method: str,
        url: str,
        status_code: int,
        error_type: str,
        headers: Mapping[str, str],
        context: Dict[str, Any],
        response_body: Optional[bytes] = None
    ):
        """
        Log failed request metadata to JSONL and save body sample if provided.
        """
        timestamp = datetime.now().isoformat()

        # Redact secrets from headers
        safe_headers = {k: v for k, v in headers.items() if 'auth' not in k.lower() and 'key' not in k.lower()}

        entry = {
            "timestamp": timestamp,
            "session_id": self.session_id,
            "method": method,
            "full_url": url,
            "status_code": status_code,
            "error_type": error_type,
            "headers": safe_headers,
            "context": context
        }

        if response_body and self.body_sample_bytes:
            body_hash = hashlib.sha256(response_body).hexdigest()[:16]
            body_sample_path = self.responses_dir / f"{body_hash}.txt"
            entry["body_sample_path"] = str(body_sample_path)

            try:
                with open(body_sample_path, "wb") as f:
                    f.write(response_body[:self.body_sample_bytes])
                    if len(response_body) > self.body_sample_bytes:
                        f.write(b"\n...[TRUNCATED]")
            except OSError as e:
                entry["body_save_error"] = str(e)

        try:
            with open(self.requests_log_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")
        except OSError as e:
            logger.error("Failed to write evidence log: %s", e)
